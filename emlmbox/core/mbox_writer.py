"""Serialize messages into a single mbox stream."""

import logging
from typing import BinaryIO, Iterable, Optional, Union

from .errors import IoFailure
from .escaping import (
    LINE_TERMINATOR,
    PLACEHOLDER_SEPARATOR,
    escape_line,
    iter_lines,
    validate_separator,
)
from .message import Message

logger = logging.getLogger(__name__)


def render_message(content: bytes, separator: bytes = PLACEHOLDER_SEPARATOR) -> bytes:
    """
    Return the mbox form of one message.

    The separator line comes first, then the content with every line that
    matches ``^>*From `` quoted by one more '>', then exactly one newline.
    For line-terminated content that newline is the blank line mbox readers
    expect before the next separator; for unterminated content it completes
    the last line. Either way readers drop exactly that one newline.
    """
    parts = [separator]
    parts.extend(escape_line(line) for line in iter_lines(content))
    parts.append(LINE_TERMINATOR)
    return b"".join(parts)


class MboxWriter:
    """
    Appends messages to a binary sink in mbox format.

    Writing is a single forward pass. Each message goes out in one write
    call; if that call fails on a seekable sink, the partial message is
    truncated away before the error is raised.
    """

    def __init__(
        self,
        sink: BinaryIO,
        separator: bytes = PLACEHOLDER_SEPARATOR,
        destination: Optional[str] = None,
    ):
        self._sink = sink
        self.separator = validate_separator(separator)
        if destination is None:
            destination = getattr(sink, "name", "")
            destination = destination if isinstance(destination, str) else ""
        self.destination = destination
        self.messages_written = 0
        self.bytes_written = 0

    def write(self, message: Union[Message, bytes]) -> int:
        """
        Append one message.

        Returns:
            Number of bytes written to the sink
        """
        content = message.content if isinstance(message, Message) else message
        chunk = render_message(content, self.separator)

        start = self._tell()
        try:
            self._sink.write(chunk)
        except OSError as e:
            self._rollback(start)
            raise IoFailure("write", self.destination, e, offset=self.bytes_written) from e

        self.messages_written += 1
        self.bytes_written += len(chunk)
        if isinstance(message, Message):
            logger.debug(f"Wrote {message.origin} to mbox ({len(chunk)} bytes)")
        return len(chunk)

    def write_all(self, messages: Iterable[Union[Message, bytes]]) -> int:
        """Append every message in order and return how many were written."""
        count = 0
        for message in messages:
            self.write(message)
            count += 1
        return count

    def flush(self):
        try:
            self._sink.flush()
        except OSError as e:
            raise IoFailure("flush", self.destination, e) from e

    def _tell(self) -> Optional[int]:
        seekable = getattr(self._sink, "seekable", None)
        if seekable is None or not seekable():
            return None
        return self._sink.tell()

    def _rollback(self, start: Optional[int]):
        if start is None:
            logger.warning(f"Cannot remove partial message from unseekable {self.destination or '<stream>'}")
            return
        try:
            self._sink.seek(start)
            self._sink.truncate(start)
        except OSError as e:
            logger.warning(f"Failed to remove partial message from {self.destination or '<stream>'}: {e}")
