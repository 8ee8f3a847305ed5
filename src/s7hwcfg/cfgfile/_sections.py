"""Section segmentation.

A section is a block of non-blank lines terminated by a blank line::

    RACK 0, SLOT 4, "6GK7 443-5DX03-0XE0", "CP 443-5 Ext"     <- title
    MASTER DPSUBSYSTEM 1, "PROFIBUS(1)", DPADDRESS 2          <- options
    BEGIN
      ASSET_ID "..."                                          <- body
      PROFIBUSADDRESS "2"
    END
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ._errors import CfgFileFormatError

BEGIN = "BEGIN"
END = "END"


@dataclass(frozen=True)
class RawSection:
    """Header and body lines of one section, trimmed, markers excluded."""

    header: tuple[str, ...]
    body: tuple[str, ...]

    @property
    def title(self) -> str:
        """First header line; it determines the section role."""
        return self.header[0]

    @property
    def options(self) -> tuple[str, ...]:
        """Header continuation lines (bus master/controller declarations etc.)."""
        return self.header[1:]


def segment_sections(lines: Iterable[str]) -> list[RawSection]:
    """Group content lines (starting at the STATION line) into sections."""
    sections: list[RawSection] = []
    buffer: list[str] = []

    for raw in lines:
        line = raw.strip()
        if line:
            buffer.append(line)
        elif buffer:
            sections.append(_build_section(buffer))
            buffer = []

    if buffer:
        sections.append(_build_section(buffer))

    if not sections:
        raise CfgFileFormatError("No sections found after the file preamble")
    return sections


def _build_section(lines: list[str]) -> RawSection:
    if lines[-1] != END:
        raise CfgFileFormatError("END missing in the following section", lines)
    if BEGIN not in lines:
        raise CfgFileFormatError("BEGIN missing in the following section", lines)
    begin = lines.index(BEGIN)
    if begin == 0:
        raise CfgFileFormatError("Section has no header line", lines)
    return RawSection(header=tuple(lines[:begin]), body=tuple(lines[begin + 1:-1]))
