"""EML format exporter - one raw message per file."""

import logging
import os
from pathlib import Path

from ..core.errors import IoFailure, OutputExists
from ..core.message import Message
from .base import BaseExporter, ExportOptions

logger = logging.getLogger(__name__)


class EMLExporter(BaseExporter):
    """
    Exports messages to a directory of EML files.

    Each message is saved verbatim as a separate file named by its sequence
    number, zero-padded to the configured precision (0000.eml, 0001.eml, ...).
    """

    format_name = "EML"
    file_extension = ".eml"

    def __init__(self, options: ExportOptions):
        super().__init__(options)
        self._next_number = options.start_number
        self._created_output = False
        self._new_files: list[Path] = []

    def _prepare_output(self, output_path: Path):
        """Create the output directory, refusing to mix with existing files."""
        self._created_output = not output_path.exists()
        self._new_files = []

        if output_path.exists():
            if not output_path.is_dir():
                raise IoFailure("use output directory", output_path,
                                NotADirectoryError("not a directory"))
            if not self.options.overwrite_existing and any(output_path.iterdir()):
                raise OutputExists(
                    output_path,
                    "Use the --overwrite flag to replace overlapping files inside of it."
                )

        try:
            output_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IoFailure("create output directory", output_path, e) from e

        self._next_number = self.options.start_number

    def _export_message(self, message: Message, output_path: Path) -> str:
        """Export a single message to its own EML file."""
        file_path = output_path / self._generate_filename(self._next_number)
        is_new = not file_path.exists()
        self._write_file(file_path, message.content)
        if is_new:
            self._new_files.append(file_path)
        self._next_number += 1

        logger.debug(f"Exported: {message.origin} -> {file_path}")
        return str(file_path)

    def _generate_filename(self, number: int) -> str:
        return f"{number:0{self.options.precision}d}{self.file_extension}"

    def _write_file(self, file_path: Path, content: bytes):
        """Write content next to file_path and move it into place once complete."""
        part_path = file_path.with_name(file_path.name + ".part")
        try:
            with open(part_path, 'wb') as f:
                f.write(content)
            os.replace(part_path, file_path)
        except OSError as e:
            self._remove_part(part_path)
            raise IoFailure("write eml file", file_path, e) from e

    def _remove_part(self, part_path: Path):
        try:
            if part_path.exists():
                part_path.unlink()
        except OSError as e:
            logger.warning(f"Could not remove incomplete file {part_path}: {e}")

    def _abort_output(self, output_path: Path):
        """Remove the files this export added, and the directory if it made it."""
        try:
            for file_path in self._new_files:
                file_path.unlink()
            if self._created_output:
                output_path.rmdir()
        except OSError as e:
            logger.warning(f"Could not remove incomplete output in {output_path}: {e}")
        else:
            logger.info(f"Removed {len(self._new_files)} incomplete eml files from {output_path}")
        self._new_files = []
