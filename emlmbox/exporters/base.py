"""Base exporter class for mail container formats."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional, Iterable
from dataclasses import dataclass

from ..core.escaping import PLACEHOLDER_SEPARATOR
from ..core.message import Message

logger = logging.getLogger(__name__)


@dataclass
class ExportProgress:
    """Progress information for export operation."""
    total_messages: int
    exported_messages: int = 0
    current_message: Optional[str] = None
    is_complete: bool = False


@dataclass
class ExportOptions:
    """Options for export operation."""
    output_path: str
    overwrite_existing: bool = False
    precision: int = 4  # Digits in numbered eml file names
    start_number: int = 0
    separator: bytes = PLACEHOLDER_SEPARATOR


class BaseExporter(ABC):
    """
    Abstract base class for exporters.

    Subclasses implement a destination format (EML directory, MBOX file).
    The first failure aborts the export and propagates to the caller.
    """

    format_name: str = "Unknown"
    file_extension: str = ""

    def __init__(self, options: ExportOptions):
        """
        Initialize exporter.

        Args:
            options: Export configuration options
        """
        self.options = options
        self._progress = ExportProgress(0)
        self._progress_callback: Optional[Callable[[ExportProgress], None]] = None

    def set_progress_callback(self, callback: Callable[[ExportProgress], None]):
        """Set callback function for progress updates."""
        self._progress_callback = callback

    def _update_progress(self, message: Optional[str] = None):
        """Update progress and notify callback."""
        self._progress.exported_messages += 1
        self._progress.current_message = message

        if self._progress_callback:
            self._progress_callback(self._progress)

    def export(self, messages: Iterable[Message], total_count: int = 0) -> ExportProgress:
        """
        Export messages to the configured format.

        Args:
            messages: Messages in output order, consumed once
            total_count: Total number of messages (for progress reporting)

        Returns:
            ExportProgress with final status
        """
        self._progress = ExportProgress(total_count)
        output_path = Path(self.options.output_path)

        self._prepare_output(output_path)
        try:
            for message in messages:
                written = self._export_message(message, output_path)
                self._update_progress(written)
        except Exception:
            logger.warning(f"{self.format_name} export to {output_path} failed after "
                           f"{self._progress.exported_messages} messages")
            self._finalize_output(output_path)
            self._abort_output(output_path)
            raise
        self._finalize_output(output_path)

        self._progress.is_complete = True
        logger.debug(f"{self.format_name} export finished: {self._progress.exported_messages} messages")
        return self._progress

    def _prepare_output(self, output_path: Path):
        """
        Prepare output location.

        Override in subclasses if needed.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)

    def _finalize_output(self, output_path: Path):
        """
        Finalize output after export.

        Override in subclasses if needed.
        """
        pass

    def _abort_output(self, output_path: Path):
        """
        Remove what a failed export left behind.

        Called after _finalize_output. Override in subclasses if needed.
        """
        pass

    @abstractmethod
    def _export_message(self, message: Message, output_path: Path) -> str:
        """
        Export a single message.

        Args:
            message: Message to export
            output_path: Output directory or file path

        Returns:
            Description of where the message came from or went to
        """
        pass
