"""Match a delivered status map against the entries of a directory listing."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from .config import COLOR_MAP, DEFAULT_CONFIG
from .parser import join_repo_path, normalize_root
from .status_codes import DisplayStatus, display_status

SymbolTable = Dict[DisplayStatus, str]
ColorTable = Dict[DisplayStatus, str]


@dataclass(frozen=True)
class ListingEntry:
    name: str
    is_dir: bool

    @property
    def display_name(self) -> str:
        return f"{self.name}/" if self.is_dir else self.name


@dataclass(frozen=True)
class Annotation:
    entry: ListingEntry
    code: Optional[str] = None
    display: Optional[DisplayStatus] = None
    symbol: str = ""

    @property
    def highlight(self) -> Optional[str]:
        return self.display.highlight if self.display is not None else None


def build_symbol_table(symbols: Optional[Mapping[str, str]] = None) -> SymbolTable:
    """Resolve the configured symbol names once, keyed by display status."""
    merged = dict(DEFAULT_CONFIG["symbols"])
    if symbols:
        merged.update(symbols)
    return {status: merged.get(status.symbol_key, "") for status in DisplayStatus}


def build_color_table(colors: Optional[Mapping[str, str]] = None) -> ColorTable:
    """Resolve configured color names to ANSI SGR parameters."""
    merged = dict(DEFAULT_CONFIG["colors"])
    if colors:
        merged.update(colors)
    table: ColorTable = {}
    for status in DisplayStatus:
        color_name = merged.get(status.highlight, "")
        table[status] = COLOR_MAP.get(str(color_name).lower(), "")
    return table


def list_directory(directory: Path, show_hidden: bool = False) -> List[ListingEntry]:
    """Return the entries of ``directory``: directories first, then files."""
    entries: List[ListingEntry] = []
    try:
        with os.scandir(directory) as iterator:
            for item in iterator:
                if not show_hidden and item.name.startswith("."):
                    continue
                try:
                    is_dir = item.is_dir()
                except OSError:
                    is_dir = False
                entries.append(ListingEntry(name=item.name, is_dir=is_dir))
    except OSError:
        return []
    entries.sort(key=lambda entry: (not entry.is_dir, entry.name.lower()))
    return entries


def annotate_entries(
    status_map: Mapping[str, str],
    base_dir: Path,
    entries: Iterable[ListingEntry],
    symbols: Optional[SymbolTable] = None,
) -> List[Annotation]:
    """Attach a status code, display status and symbol to each entry.

    Files are looked up by their absolute path and directories by their
    absolute path plus a trailing ``/``, mirroring the keys produced by
    :func:`gitoverlay.aggregate.propagate_directory_status`.
    """
    if symbols is None:
        symbols = build_symbol_table()
    base_text = normalize_root(base_dir)

    annotations: List[Annotation] = []
    for entry in entries:
        key = join_repo_path(base_text, entry.name)
        if entry.is_dir:
            key += "/"
        code = status_map.get(key)
        display = display_status(code)
        symbol = symbols.get(display, "") if display is not None else ""
        annotations.append(Annotation(entry=entry, code=code, display=display, symbol=symbol))
    return annotations


def format_badge(annotation: Annotation, colors: Optional[ColorTable] = None, use_color: bool = True) -> str:
    if annotation.display is None or not annotation.symbol:
        return ""
    if not use_color:
        return f" {annotation.symbol}"
    if colors is None:
        colors = build_color_table()
    sgr = colors.get(annotation.display, "")
    if not sgr:
        return f" {annotation.symbol}"
    return f" \033[{sgr}m{annotation.symbol}\033[0m"


def render_listing(
    annotations: Iterable[Annotation],
    colors: Optional[ColorTable] = None,
    use_color: bool = True,
) -> List[str]:
    """Produce one output line per entry: name followed by its badge."""
    if colors is None and use_color:
        colors = build_color_table()
    lines: List[str] = []
    for annotation in annotations:
        name = annotation.entry.display_name
        sgr = colors.get(annotation.display, "") if (use_color and colors and annotation.display) else ""
        if sgr:
            name = f"\033[{sgr}m{name}\033[0m"
        lines.append(name + format_badge(annotation, colors, use_color))
    return lines


__all__ = [
    "Annotation",
    "ColorTable",
    "ListingEntry",
    "SymbolTable",
    "annotate_entries",
    "build_color_table",
    "build_symbol_table",
    "format_badge",
    "list_directory",
    "render_listing",
]
