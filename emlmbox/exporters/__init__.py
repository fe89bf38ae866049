"""Mail container export format handlers."""

from .base import BaseExporter, ExportOptions, ExportProgress
from .eml_exporter import EMLExporter
from .mbox_exporter import MBOXExporter

__all__ = ["BaseExporter", "ExportOptions", "ExportProgress", "EMLExporter", "MBOXExporter"]
