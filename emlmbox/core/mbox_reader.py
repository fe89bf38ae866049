"""Split an mbox stream into individual messages."""

import logging
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from .errors import IoFailure, MalformedMbox
from .escaping import LINE_TERMINATOR, is_separator, unescape_line
from .message import Message

logger = logging.getLogger(__name__)


class ReaderState(Enum):
    SEEKING_SEPARATOR = "seeking_separator"
    IN_MESSAGE_BODY = "in_message_body"
    DONE = "done"


class MboxReader:
    """
    Lazy, single-pass iterator over the messages of an mbox stream.

    The stream is read one line at a time, so only the message being
    assembled is held in memory. Bytes before the first separator line are
    discarded as preamble. Once exhausted the reader stays exhausted.

    Each message is the unescaped region between its separator line and the
    next one, less the final newline of that region. Writers end every
    message with one newline of their own before the next separator, so
    that newline belongs to the framing, not to the message.
    """

    def __init__(self, stream: BinaryIO, source: Optional[str] = None):
        """
        Initialize reader.

        Args:
            stream: Binary stream positioned at the start of the mbox data
            source: Name used in logs and errors (defaults to stream.name)
        """
        self._stream = stream
        if source is None:
            source = getattr(stream, "name", "")
            source = source if isinstance(source, str) else ""
        self.source = source
        self.state = ReaderState.SEEKING_SEPARATOR
        self.offset = 0
        self.messages_read = 0
        self._messages = self._generate()

    def __iter__(self) -> "MboxReader":
        return self

    def __next__(self) -> Message:
        return next(self._messages)

    def _readline(self) -> bytes:
        try:
            return self._stream.readline()
        except OSError as e:
            raise IoFailure("read", self.source, e, offset=self.offset) from e

    def _generate(self) -> Iterator[Message]:
        lines: list[bytes] = []
        start = 0

        while True:
            line = self._readline()
            if not line:
                break
            line_start = self.offset
            self.offset += len(line)

            if is_separator(line):
                if self.state is ReaderState.IN_MESSAGE_BODY:
                    yield self._build_message(lines, start)
                elif line_start:
                    logger.debug(f"Skipped {line_start} bytes of preamble in {self.source or '<stream>'}")
                self.state = ReaderState.IN_MESSAGE_BODY
                lines = []
                start = line_start
            elif self.state is ReaderState.IN_MESSAGE_BODY:
                lines.append(unescape_line(line))

        if self.state is ReaderState.IN_MESSAGE_BODY:
            self.state = ReaderState.DONE
            yield self._build_message(lines, start)
            return

        self.state = ReaderState.DONE
        if self.offset:
            raise MalformedMbox(self.source, self.offset)

    def _build_message(self, lines: list[bytes], start: int) -> Message:
        if lines and lines[-1].endswith(LINE_TERMINATOR):
            lines[-1] = lines[-1][:-len(LINE_TERMINATOR)]
        self.messages_read += 1
        message = Message(b"".join(lines), source=self.source, offset=start)
        logger.debug(f"Read message {self.messages_read} ({message.size} bytes) at offset {start}")
        return message


def read_mbox(path: Union[str, Path]) -> Iterator[Message]:
    """
    Yield the messages of the mbox file at path.

    The file is opened on first use and closed once the messages run out.
    """
    path = Path(path)
    try:
        stream = open(path, "rb")
    except OSError as e:
        raise IoFailure("open mbox file", path, e) from e

    with stream:
        yield from MboxReader(stream, source=str(path))
