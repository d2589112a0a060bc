"""
CSS generator for exported variables.

Generates one ``:root`` block of CSS custom properties per mode document.
"""

from __future__ import annotations

from tokenvars.core.ir.config import ExportConfig
from tokenvars.core.naming import slugify

from .documents import ModeDocument


def generate_mode_css(document: ModeDocument, config: ExportConfig | None = None) -> str:
    """
    Generate CSS for one collection mode.

    Args:
        document: Rendered entries for the mode, in collection order.
        config: Selector and indentation settings.

    Returns:
        CSS string with a single selector block.
    """
    config = config or ExportConfig()
    prefix = " " * config.indent

    lines = [f"{config.selector} {{"]
    for entry in document.entries:
        lines.append(f"{prefix}{entry.css_name}: {entry.css_value};")
    lines.append("}")
    return "\n".join(lines) + "\n"


def mode_file_name(mode_name: str, collection_name: str | None = None) -> str:
    """
    Get the file name for a mode.

    Args:
        mode_name: Mode name (e.g., "Dark Mode")
        collection_name: Included when the mode name alone is ambiguous

    Returns:
        File name like ``variables-dark-mode.css``
    """
    if collection_name:
        return f"variables-{slugify(collection_name)}-{slugify(mode_name)}.css"
    return f"variables-{slugify(mode_name)}.css"


def generate_css_files(
    documents: list[ModeDocument], config: ExportConfig | None = None
) -> dict[str, str]:
    """
    Generate CSS files for every mode document that has entries.

    Returns:
        File name -> CSS body. When two collections share a mode name,
        later files are qualified with the collection name.
    """
    files: dict[str, str] = {}
    for document in documents:
        if not document.entries:
            continue
        file_name = mode_file_name(document.mode.name)
        if file_name in files:
            file_name = mode_file_name(document.mode.name, document.collection.name)
        files[file_name] = generate_mode_css(document, config)
    return files
