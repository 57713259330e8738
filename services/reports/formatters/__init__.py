"""
Report export formatters.

XLSX (openpyxl) and PDF (Jinja2 + WeasyPrint). Each formatter module is
imported on first use, so a missing optional library only disables its
own format.
"""

from importlib import import_module
from typing import Dict, Tuple

from models.reports import FileFormat
from .base import BaseFormatter


# Format -> (module, class) of the formatter implementing it
_FORMATTER_REGISTRY: Dict[FileFormat, Tuple[str, str]] = {
    FileFormat.XLSX: (".xlsx_formatter", "XLSXFormatter"),
    FileFormat.PDF: (".pdf_formatter", "PDFFormatter"),
}


def get_formatter(file_format: FileFormat) -> BaseFormatter:
    """
    Instantiate the formatter for a file format.

    Raises:
        ValueError: If file_format has no formatter
        ImportError: If the formatter's library is not installed

    Example:
        >>> formatter = get_formatter(FileFormat.PDF)
        >>> pdf_bytes = formatter.format(SALES_SCHEMA, rows, {'date_range': caption})
    """
    entry = _FORMATTER_REGISTRY.get(file_format)
    if entry is None:
        supported = [fmt.value for fmt in _FORMATTER_REGISTRY]
        raise ValueError(
            f"Unsupported file format: {file_format}. Supported formats: {supported}"
        )

    module_name, class_name = entry
    formatter_class = getattr(import_module(module_name, __name__), class_name)
    return formatter_class()


def get_formatter_by_name(format_name: str) -> BaseFormatter:
    """Formatter for a format tag such as 'pdf', 'XLSX' or 'excel'."""
    try:
        file_format = FileFormat(format_name)
    except ValueError:
        supported = [fmt.value for fmt in FileFormat]
        raise ValueError(
            f"Unknown file format: '{format_name}'. Supported formats: {supported}"
        )
    return get_formatter(file_format)


def is_format_available(file_format: FileFormat) -> bool:
    """True when the formatter's library is installed and importable."""
    try:
        get_formatter(file_format)
    except ImportError:
        return False
    return True


__all__ = [
    'BaseFormatter',
    'get_formatter',
    'get_formatter_by_name',
    'is_format_available',
]
