"""
emlmbox - mbox <-> eml converter, console mode

Usage:
    emlmbox eml-to-mbox <input-dir> <output-file> [options]
    emlmbox mbox-to-eml <input-file> <output-dir> [options]

Options:
    --overwrite             Replace existing output
    --precision <n>         Digits in numbered eml file names (mbox-to-eml)
    --start-number <n>      Number of the first eml file (mbox-to-eml)
    --quiet                 No progress bar
    --verbose               Verbose output
"""

import argparse
import logging
import sys
from typing import Optional

from tqdm import tqdm

from . import __version__
from .converter import eml_to_mbox, mbox_to_eml
from .core.errors import ConversionError
from .exporters.base import ExportProgress

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )


def validate_file_path(value: str) -> str:
    """Reject file path arguments that name a directory."""
    if value.endswith('/') or value.endswith('\\'):
        raise argparse.ArgumentTypeError(f"'{value}' appears to be a directory, not a file")
    return value


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {value}")
    return number


def progress_updater(bar: tqdm):
    """Return an exporter progress callback that advances bar."""
    def update(progress: ExportProgress):
        if progress.total_messages and bar.total != progress.total_messages:
            bar.total = progress.total_messages
            bar.refresh()
        bar.update(1)
    return update


def run_eml_to_mbox(args) -> ExportProgress:
    with tqdm(desc="Converting eml files", unit="emails", ncols=80, disable=args.quiet) as bar:
        return eml_to_mbox(
            args.input_dir,
            args.output_file,
            overwrite=args.overwrite,
            progress_callback=progress_updater(bar),
        )


def run_mbox_to_eml(args) -> ExportProgress:
    with tqdm(desc="Extracting emails", unit="emails", ncols=80, disable=args.quiet) as bar:
        return mbox_to_eml(
            args.input_file,
            args.output_dir,
            overwrite=args.overwrite,
            precision=args.precision,
            start_number=args.start_number,
            progress_callback=progress_updater(bar),
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="emlmbox",
        description="A simple and quick bidirectional converter between mbox and eml formats.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    emlmbox eml-to-mbox ./exported archive.mbox
    emlmbox eml-to-mbox ./exported archive.mbox --overwrite
    emlmbox mbox-to-eml archive.mbox ./extracted
    emlmbox mbox-to-eml archive.mbox ./extracted --precision 6
        """
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Do not show a progress bar')

    commands = parser.add_subparsers(dest='command', metavar='command')
    commands.required = True

    to_mbox = commands.add_parser(
        'eml-to-mbox',
        help='Convert a directory of .eml files to a single .mbox file',
        description='Convert a directory of .eml files to a single .mbox file. '
                    'Files are found recursively and added in lexical order of their path.',
    )
    to_mbox.add_argument('input_dir', metavar='input-dir',
                         help='Directory containing .eml files')
    to_mbox.add_argument('output_file', metavar='output-file', type=validate_file_path,
                         help='Path of the .mbox file to create')
    to_mbox.add_argument('--overwrite', action='store_true',
                         help='Replace the output file if it already exists')
    to_mbox.set_defaults(func=run_eml_to_mbox, output_name='output_file')

    to_eml = commands.add_parser(
        'mbox-to-eml',
        help='Convert a single .mbox file to a directory of .eml files',
        description='Convert a single .mbox file to an extracted directory of numbered .eml files.',
    )
    to_eml.add_argument('input_file', metavar='input-file', type=validate_file_path,
                        help='Path of the .mbox file to read')
    to_eml.add_argument('output_dir', metavar='output-dir',
                        help='Directory to write .eml files into')
    to_eml.add_argument('--overwrite', action='store_true',
                        help='Replace any existing eml files in the given directory '
                             'with new ones if they overlap')
    to_eml.add_argument('--precision', type=positive_int, default=4,
                        help='Digits in eml file names (default: 4)')
    to_eml.add_argument('--start-number', type=non_negative_int, default=0,
                        help='Number of the first eml file (default: 0)')
    to_eml.set_defaults(func=run_mbox_to_eml, output_name='output_dir')

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        progress = args.func(args)
    except ConversionError as e:
        logger.debug("Conversion aborted", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    output = getattr(args, args.output_name)
    print(f"Conversion of {progress.exported_messages} emails completed. Output saved to {output}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
