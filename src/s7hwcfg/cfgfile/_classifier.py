"""Section classification by header shape.

Headers are nested prefixes of each other (``RACK 0, SLOT 4, SUBSLOT 1``
starts with ``RACK 0, SLOT 4`` which starts with ``RACK 0``), so shapes are
tried most specific first.  Only the keyword and positional qualifiers are
inspected here; the full field grammar is checked when the section is
resolved.
"""

from __future__ import annotations

import re
from enum import Enum

from s7hwcfg.model.subsystem import SubnetType

from ._sections import RawSection


class SectionRole(str, Enum):
    STATION = "STATION"
    RACK = "RACK"
    RACK_SLOT = "RACK_SLOT"
    RACK_SLOT_SUBSLOT = "RACK_SLOT_SUBSLOT"
    DP_SUBSYSTEM = "DP_SUBSYSTEM"
    DP_SUBSYSTEM_ADDRESS = "DP_SUBSYSTEM_ADDRESS"
    DP_SUBSYSTEM_ADDRESS_SLOT = "DP_SUBSYSTEM_ADDRESS_SLOT"
    DP_SUBSYSTEM_ADDRESS_SLOT_SUBSLOT = "DP_SUBSYSTEM_ADDRESS_SLOT_SUBSLOT"
    IO_SUBSYSTEM = "IO_SUBSYSTEM"
    IO_SUBSYSTEM_ADDRESS = "IO_SUBSYSTEM_ADDRESS"
    IO_SUBSYSTEM_ADDRESS_SLOT = "IO_SUBSYSTEM_ADDRESS_SLOT"
    IO_SUBSYSTEM_ADDRESS_SLOT_SUBSLOT = "IO_SUBSYSTEM_ADDRESS_SLOT_SUBSLOT"
    UNKNOWN = "UNKNOWN"

    @property
    def bus(self) -> SubnetType | None:
        """Subnet type for subsystem roles, ``None`` otherwise."""
        if self.value.startswith("DP_"):
            return SubnetType.PROFIBUS_DP
        if self.value.startswith("IO_"):
            return SubnetType.PROFINET
        return None


_N = r"\s+\d+\s*"
_C = r",\s*"

_SHAPES: list[tuple[SectionRole, re.Pattern[str]]] = [
    (SectionRole.STATION, re.compile(r"^STATION\s+\w+\s*,")),
    (SectionRole.RACK_SLOT_SUBSLOT, re.compile(rf"^RACK{_N}{_C}SLOT{_N}{_C}SUBSLOT{_N},")),
    (SectionRole.RACK_SLOT, re.compile(rf"^RACK{_N}{_C}SLOT{_N},")),
    (SectionRole.RACK, re.compile(rf"^RACK{_N}{_C}\"")),
    (
        SectionRole.DP_SUBSYSTEM_ADDRESS_SLOT_SUBSLOT,
        re.compile(rf"^DPSUBSYSTEM{_N}{_C}DPADDRESS{_N}{_C}SLOT{_N}{_C}SUBSLOT{_N},"),
    ),
    (SectionRole.DP_SUBSYSTEM_ADDRESS_SLOT, re.compile(rf"^DPSUBSYSTEM{_N}{_C}DPADDRESS{_N}{_C}SLOT{_N},")),
    (SectionRole.DP_SUBSYSTEM_ADDRESS, re.compile(rf"^DPSUBSYSTEM{_N}{_C}DPADDRESS{_N},")),
    (SectionRole.DP_SUBSYSTEM, re.compile(rf"^DPSUBSYSTEM{_N}{_C}\"")),
    (
        SectionRole.IO_SUBSYSTEM_ADDRESS_SLOT_SUBSLOT,
        re.compile(rf"^IOSUBSYSTEM{_N}{_C}IOADDRESS{_N}{_C}SLOT{_N}{_C}SUBSLOT{_N},"),
    ),
    (SectionRole.IO_SUBSYSTEM_ADDRESS_SLOT, re.compile(rf"^IOSUBSYSTEM{_N}{_C}IOADDRESS{_N}{_C}SLOT{_N},")),
    (SectionRole.IO_SUBSYSTEM_ADDRESS, re.compile(rf"^IOSUBSYSTEM{_N}{_C}IOADDRESS{_N},")),
    (SectionRole.IO_SUBSYSTEM, re.compile(rf"^IOSUBSYSTEM{_N}{_C}\"")),
]


def classify_header(title: str) -> SectionRole:
    for role, shape in _SHAPES:
        if shape.match(title):
            return role
    return SectionRole.UNKNOWN


def classify_section(section: RawSection) -> SectionRole:
    """Assign the structural role of *section* from its title line."""
    return classify_header(section.title)
