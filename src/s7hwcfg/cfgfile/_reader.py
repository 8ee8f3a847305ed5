"""Entry points: whole-file parsing and reading exports from disk."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel

from s7hwcfg.model.station import Station

from ._preamble import FileHeader, parse_preamble, split_preamble
from ._resolver import Diagnostic, StationResolver
from ._sections import segment_sections

logger = logging.getLogger(__name__)


class HWConfig(BaseModel):
    """A parsed hardware configuration export."""

    header: FileHeader
    station: Station
    diagnostics: list[Diagnostic] = []


def parse_hwconfig(lines: Iterable[str], *, strict: bool = False) -> HWConfig:
    """Parse the lines of a complete export (preamble included)."""
    preamble, content = split_preamble(lines)
    header = parse_preamble(preamble)
    resolver = StationResolver(segment_sections(content), strict=strict)
    station = resolver.resolve()
    return HWConfig(header=header, station=station, diagnostics=resolver.diagnostics)


def parse_station(
    lines: Iterable[str],
    *,
    strict: bool = False,
    diagnostics: list[Diagnostic] | None = None,
) -> Station:
    """Parse the lines of a complete export into its ``Station``.

    Recoverable inconsistencies are appended to *diagnostics* when a list
    is given; they are logged either way.
    """
    hwconfig = parse_hwconfig(lines, strict=strict)
    if diagnostics is not None:
        diagnostics.extend(hwconfig.diagnostics)
    return hwconfig.station


def read_hwconfig(
    path: str | Path,
    *,
    encoding: str = "cp1252",
    strict: bool = False,
) -> HWConfig:
    """Read and parse a ``.cfg`` export.

    STEP 7 writes exports in the Windows ANSI code page, hence the default
    *encoding*.
    """
    path = Path(path)
    logger.info("Reading hardware configuration %s", path)
    lines = path.read_text(encoding=encoding).splitlines()
    return parse_hwconfig(lines, strict=strict)
