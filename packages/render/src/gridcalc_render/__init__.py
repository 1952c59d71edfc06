"""Grid renderers, source loading and the command-line entry point."""

from .text_renderer import TextTableRenderer
from .xlsx_renderer import XlsxGridRenderer
from .loader import GridResult, load_grid_sources, process_source, run

__all__ = [
    "TextTableRenderer",
    "XlsxGridRenderer",
    "GridResult",
    "load_grid_sources",
    "process_source",
    "run",
]
