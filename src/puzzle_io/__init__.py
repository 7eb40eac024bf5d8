"""Text adapters: puzzle parsing and grid rendering."""

from __future__ import annotations

from .parser import CellValue, parse, parse_into, parse_text
from .viewer import format_status, inspect, view

__all__ = ["CellValue", "format_status", "inspect", "parse", "parse_into", "parse_text", "view"]
