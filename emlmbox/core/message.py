"""Email message data model."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Message:
    """
    One mail item as an opaque byte sequence.

    The content is never parsed: headers and body travel together exactly as
    they were read. ``source`` and ``offset`` only describe where the bytes
    came from, for error reports and logging.
    """
    content: bytes
    source: str = ""
    offset: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.content, bytes):
            raise TypeError(
                f"message content must be bytes, not {type(self.content).__name__}"
            )

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def origin(self) -> str:
        """Human readable location of the message."""
        name = self.source or "<stream>"
        if self.offset is None:
            return name
        return f"{name}@{self.offset}"
