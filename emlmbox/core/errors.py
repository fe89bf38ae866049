"""Exceptions raised while converting between mbox and eml."""

from pathlib import Path
from typing import Optional, Union


class ConversionError(Exception):
    """Base class for every failure that aborts a conversion."""


class MalformedMbox(ConversionError):
    """Non-empty input contains no 'From ' separator line."""

    def __init__(self, source: str, size: int):
        self.source = source
        self.size = size
        name = source or "<stream>"
        super().__init__(
            f"{name} is not an mbox file: no 'From ' separator line in {size} bytes"
        )


class IoFailure(ConversionError):
    """Reading or writing a file or stream failed."""

    def __init__(
        self,
        action: str,
        path: Union[str, Path, None],
        error: Optional[BaseException] = None,
        offset: Optional[int] = None,
    ):
        self.action = action
        self.path = str(path) if path else ""
        self.offset = offset

        message = f"failed to {action}"
        if self.path:
            message += f" {self.path}"
        if offset is not None:
            message += f" at byte offset {offset}"
        if error is not None:
            message += f": {error}"
        super().__init__(message)


class OutputExists(ConversionError):
    """The destination is already there and overwriting was not requested."""

    def __init__(self, path: Union[str, Path], hint: str = ""):
        self.path = str(path)
        message = f"{self.path} already exists"
        if hint:
            message += f". {hint}"
        super().__init__(message)
