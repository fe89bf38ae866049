"""
Conversion between a directory of eml files and a single mbox file.

eml -> mbox takes every ``*.eml`` file below the input directory, ordered
lexically by its path relative to that directory, and appends each one as a
message. mbox -> eml writes message n of the mbox to ``<n>.eml``, with n
zero-padded. Both directions stop at the first failure.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Union

from .core.errors import IoFailure
from .core.escaping import PLACEHOLDER_SEPARATOR
from .core.mbox_reader import read_mbox
from .core.message import Message
from .exporters.base import ExportOptions, ExportProgress
from .exporters.eml_exporter import EMLExporter
from .exporters.mbox_exporter import MBOXExporter

logger = logging.getLogger(__name__)

EML_SUFFIX = ".eml"

ProgressCallback = Callable[[ExportProgress], None]


def _raise_walk_error(error: OSError):
    raise error


def find_eml_files(input_dir: Union[str, Path]) -> list[Path]:
    """
    Return the eml files below input_dir in conversion order.

    The search is recursive and the suffix test ignores case. Files are
    sorted by their relative POSIX path, which fixes the message order of
    the resulting mbox.
    """
    input_dir = Path(input_dir)
    if not input_dir.exists():
        raise IoFailure("read eml directory", input_dir, FileNotFoundError("no such directory"))
    if not input_dir.is_dir():
        raise IoFailure("read eml directory", input_dir, NotADirectoryError("not a directory"))

    found = []
    try:
        for root, _dirs, files in os.walk(input_dir, onerror=_raise_walk_error):
            for name in files:
                if name.lower().endswith(EML_SUFFIX):
                    found.append(Path(root) / name)
    except OSError as e:
        raise IoFailure("read directory", e.filename or input_dir, e) from e

    return sorted(found, key=lambda path: path.relative_to(input_dir).as_posix())


def iter_eml_messages(paths: Iterable[Path]) -> Iterator[Message]:
    """Read each eml file whole, as one message."""
    for path in paths:
        try:
            content = Path(path).read_bytes()
        except OSError as e:
            raise IoFailure("read eml file", path, e) from e
        yield Message(content, source=str(path))


def eml_to_mbox(
    input_dir: Union[str, Path],
    output_file: Union[str, Path],
    overwrite: bool = False,
    separator: bytes = PLACEHOLDER_SEPARATOR,
    progress_callback: Optional[ProgressCallback] = None,
) -> ExportProgress:
    """
    Convert a directory of .eml files to a single .mbox file.

    An input directory without eml files produces an empty mbox file.

    Raises:
        IoFailure: the directory or a file could not be read, or the output
            could not be written
        OutputExists: output_file exists and overwrite is False
    """
    eml_files = find_eml_files(input_dir)
    if not eml_files:
        logger.warning(f"Did not find any .eml files inside of {input_dir}")

    logger.info(f"Converting {len(eml_files)} eml files from {input_dir} to {output_file}")

    options = ExportOptions(
        output_path=str(output_file),
        overwrite_existing=overwrite,
        separator=separator,
    )
    exporter = MBOXExporter(options)
    if progress_callback:
        exporter.set_progress_callback(progress_callback)

    progress = exporter.export(iter_eml_messages(eml_files), total_count=len(eml_files))
    logger.info(f"Wrote {progress.exported_messages} messages to {output_file}")
    return progress


def mbox_to_eml(
    input_file: Union[str, Path],
    output_dir: Union[str, Path],
    overwrite: bool = False,
    precision: int = 4,
    start_number: int = 0,
    progress_callback: Optional[ProgressCallback] = None,
) -> ExportProgress:
    """
    Convert a single .mbox file to a directory of numbered .eml files.

    An empty mbox file produces an empty output directory.

    Raises:
        IoFailure: the mbox could not be read or a file could not be written
        MalformedMbox: the input is not empty but has no separator line
        OutputExists: output_dir has files in it and overwrite is False
    """
    if precision < 1:
        raise ValueError(f"precision must be at least 1, got {precision}")
    if start_number < 0:
        raise ValueError(f"start_number must not be negative, got {start_number}")

    input_file = Path(input_file)
    if not input_file.exists():
        raise IoFailure("read mbox file", input_file, FileNotFoundError("no such file"))
    if input_file.is_dir():
        raise IoFailure("read mbox file", input_file, IsADirectoryError("is a directory"))

    logger.info(f"Converting {input_file} to eml files in {output_dir}")

    options = ExportOptions(
        output_path=str(output_dir),
        overwrite_existing=overwrite,
        precision=precision,
        start_number=start_number,
    )
    exporter = EMLExporter(options)
    if progress_callback:
        exporter.set_progress_callback(progress_callback)

    progress = exporter.export(read_mbox(input_file))
    if progress.exported_messages == 0:
        logger.warning(f"No messages found in {input_file}")
    logger.info(f"Wrote {progress.exported_messages} eml files to {output_dir}")
    return progress
