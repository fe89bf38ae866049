"""Core mbox codec components."""

from .errors import ConversionError, IoFailure, MalformedMbox, OutputExists
from .escaping import PLACEHOLDER_SEPARATOR
from .message import Message
from .mbox_reader import MboxReader, ReaderState, read_mbox
from .mbox_writer import MboxWriter, render_message

__all__ = [
    "ConversionError",
    "IoFailure",
    "MalformedMbox",
    "OutputExists",
    "PLACEHOLDER_SEPARATOR",
    "Message",
    "MboxReader",
    "ReaderState",
    "read_mbox",
    "MboxWriter",
    "render_message",
]
