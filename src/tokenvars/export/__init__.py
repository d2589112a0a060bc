"""Variable export: filtering, rendering, and CSS/JSON emission."""

from .css_generator import generate_css_files, generate_mode_css, mode_file_name
from .documents import ExportEntry, ModeDocument
from .exporter import Exporter, export_css, export_json, export_variables, prefetch_variables
from .filters import ExclusionPolicy
from .json_export import generate_json_export, write_json_export

__all__ = [
    "ExclusionPolicy",
    "ExportEntry",
    "Exporter",
    "ModeDocument",
    "export_css",
    "export_json",
    "export_variables",
    "generate_css_files",
    "generate_json_export",
    "generate_mode_css",
    "mode_file_name",
    "prefetch_variables",
    "write_json_export",
]
