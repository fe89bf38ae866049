"""MBOX format exporter - Unix mailbox format."""

import logging
from pathlib import Path
from typing import BinaryIO, Optional

from ..core.errors import IoFailure, OutputExists
from ..core.mbox_writer import MboxWriter
from ..core.message import Message
from .base import BaseExporter, ExportOptions

logger = logging.getLogger(__name__)


class MBOXExporter(BaseExporter):
    """
    Exports messages to a single MBOX file (mboxrd quoting).

    MBOX stores multiple messages in a single file, separated by 'From ' lines.
    Compatible with Thunderbird, Evolution, and other Unix mail clients.
    """

    format_name = "MBOX"
    file_extension = ".mbox"

    def __init__(self, options: ExportOptions):
        super().__init__(options)
        self._mbox_file: Optional[BinaryIO] = None
        self._writer: Optional[MboxWriter] = None

    def _prepare_output(self, output_path: Path):
        """Create the mbox file, replacing an old one only when allowed."""
        if output_path.is_dir():
            raise IoFailure("create mbox file", output_path,
                            IsADirectoryError("is a directory"))
        if output_path.exists() and not self.options.overwrite_existing:
            raise OutputExists(output_path, "Use the --overwrite flag to replace it.")

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            self._mbox_file = open(output_path, 'wb')
        except OSError as e:
            raise IoFailure("create mbox file", output_path, e) from e

        self._writer = MboxWriter(
            self._mbox_file,
            separator=self.options.separator,
            destination=str(output_path),
        )

    def _finalize_output(self, output_path: Path):
        """Close the mbox file."""
        if self._mbox_file is None:
            return
        try:
            self._mbox_file.close()
        except OSError as e:
            raise IoFailure("close mbox file", output_path, e) from e
        finally:
            self._mbox_file = None
            self._writer = None

    def _export_message(self, message: Message, output_path: Path) -> str:
        """Append a single message to the MBOX file."""
        self._writer.write(message)
        self._writer.flush()

        logger.debug(f"Added message to MBOX: {message.origin}")
        return message.origin

    def _abort_output(self, output_path: Path):
        """Delete the incomplete MBOX file."""
        try:
            if output_path.exists():
                output_path.unlink()
        except OSError as e:
            logger.warning(f"Could not remove incomplete {output_path}: {e}")
        else:
            logger.info(f"Removed incomplete {output_path}")
