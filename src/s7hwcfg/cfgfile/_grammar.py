"""Header grammars: fixed-shape patterns with named fields, one per role.

Module headers share a common tail::

    "<order number>" ["<version>"], "<name>"

Numeric fields come back as ``int``; an absent version is ``None``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from s7hwcfg.model.subsystem import BusRole, SubnetType

from ._classifier import SectionRole

_SEP = r"\s*,\s*"


def _num(name: str) -> str:
    return rf"(?P<{name}>\d+)"


def _module_tail(name_field: str) -> str:
    return (
        r'"(?P<order_number>.+?)"\s*(?:"(?P<version>.*?)")?'
        + _SEP
        + rf'"(?P<{name_field}>.*?)"\s*$'
    )


@dataclass(frozen=True)
class HeaderGrammar:
    """An anchored header pattern; ``int_fields`` are converted on match."""

    name: str
    pattern: re.Pattern[str]
    int_fields: frozenset[str]

    def match(self, line: str) -> dict[str, Any] | None:
        m = self.pattern.match(line)
        if m is None:
            return None
        fields: dict[str, Any] = m.groupdict()
        for key in self.int_fields:
            fields[key] = int(fields[key])
        return fields


def _grammar(name: str, regex: str) -> HeaderGrammar:
    pattern = re.compile(regex)
    int_fields = frozenset(
        group for group in pattern.groupindex
        if group in ("rack", "slot", "subslot", "subsystem", "address")
    )
    return HeaderGrammar(name=name, pattern=pattern, int_fields=int_fields)


def _subsystem_grammars(keyword: str, address_keyword: str) -> tuple[HeaderGrammar, ...]:
    head = rf"^{keyword}\s+{_num('subsystem')}"
    at_address = head + _SEP + rf"{address_keyword}\s+{_num('address')}"
    at_slot = at_address + _SEP + rf"SLOT\s+{_num('slot')}"
    at_subslot = at_slot + _SEP + rf"SUBSLOT\s+{_num('subslot')}"
    return (
        _grammar(keyword, head + _SEP + r'"(?P<name>.*?)"\s*$'),
        _grammar(f"{keyword}, {address_keyword}", at_address + _SEP + _module_tail("designation")),
        _grammar(f"{keyword}, {address_keyword}, SLOT", at_slot + _SEP + _module_tail("name")),
        _grammar(f"{keyword}, {address_keyword}, SLOT, SUBSLOT", at_subslot + _SEP + _module_tail("name")),
    )


_RACK_HEAD = rf"^RACK\s+{_num('rack')}"
_RACK_SLOT_HEAD = _RACK_HEAD + _SEP + rf"SLOT\s+{_num('slot')}"

STATION = _grammar("STATION", r'^STATION\s+(?P<station_type>[A-Z0-9_]+)' + _SEP + r'"(?P<name>.*?)"\s*$')
RACK = _grammar("RACK", _RACK_HEAD + _SEP + r'"(?P<order_number>.+?)"' + _SEP + r'"(?P<name>.*?)"\s*$')
RACK_SLOT = _grammar("RACK, SLOT", _RACK_SLOT_HEAD + _SEP + _module_tail("name"))
RACK_SLOT_SUBSLOT = _grammar(
    "RACK, SLOT, SUBSLOT",
    _RACK_SLOT_HEAD + _SEP + rf"SUBSLOT\s+{_num('subslot')}" + _SEP + _module_tail("name"),
)
DP_SUBSYSTEM, DP_SUBSYSTEM_ADDRESS, DP_SUBSYSTEM_ADDRESS_SLOT, DP_SUBSYSTEM_ADDRESS_SLOT_SUBSLOT = (
    _subsystem_grammars("DPSUBSYSTEM", "DPADDRESS")
)
IO_SUBSYSTEM, IO_SUBSYSTEM_ADDRESS, IO_SUBSYSTEM_ADDRESS_SLOT, IO_SUBSYSTEM_ADDRESS_SLOT_SUBSLOT = (
    _subsystem_grammars("IOSUBSYSTEM", "IOADDRESS")
)

GRAMMARS: dict[SectionRole, HeaderGrammar] = {
    SectionRole.STATION: STATION,
    SectionRole.RACK: RACK,
    SectionRole.RACK_SLOT: RACK_SLOT,
    SectionRole.RACK_SLOT_SUBSLOT: RACK_SLOT_SUBSLOT,
    SectionRole.DP_SUBSYSTEM: DP_SUBSYSTEM,
    SectionRole.DP_SUBSYSTEM_ADDRESS: DP_SUBSYSTEM_ADDRESS,
    SectionRole.DP_SUBSYSTEM_ADDRESS_SLOT: DP_SUBSYSTEM_ADDRESS_SLOT,
    SectionRole.DP_SUBSYSTEM_ADDRESS_SLOT_SUBSLOT: DP_SUBSYSTEM_ADDRESS_SLOT_SUBSLOT,
    SectionRole.IO_SUBSYSTEM: IO_SUBSYSTEM,
    SectionRole.IO_SUBSYSTEM_ADDRESS: IO_SUBSYSTEM_ADDRESS,
    SectionRole.IO_SUBSYSTEM_ADDRESS_SLOT: IO_SUBSYSTEM_ADDRESS_SLOT,
    SectionRole.IO_SUBSYSTEM_ADDRESS_SLOT_SUBSLOT: IO_SUBSYSTEM_ADDRESS_SLOT_SUBSLOT,
}


def match_header(line: str, grammar: HeaderGrammar) -> dict[str, Any] | None:
    """Extract the named fields of *line*, or ``None`` if it has another shape."""
    return grammar.match(line)


# ---------------------------------------------------------------------------
# Bus master / controller options (header continuation lines)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BusOption:
    subnet_type: SubnetType
    subsystem: int
    address: int
    role: BusRole


_BUS_OPTIONS: list[tuple[re.Pattern[str], SubnetType, BusRole]] = [
    (
        re.compile(r"^MASTER\s+DPSUBSYSTEM\s+(?P<subsystem>\d+)\s*,.*DPADDRESS\s+(?P<address>\d+)\s*$"),
        SubnetType.PROFIBUS_DP,
        BusRole.MASTER,
    ),
    (
        re.compile(r"^CONTROLLER\s+IOSUBSYSTEM\s+(?P<subsystem>\d+)\s*,.*IOADDRESS\s+(?P<address>\d+)\s*$"),
        SubnetType.PROFINET,
        BusRole.CONTROLLER,
    ),
]


def match_bus_option(options: tuple[str, ...] | list[str]) -> BusOption | None:
    """Find a master/controller declaration among header option lines.

    A DP master declaration wins over a PROFINET controller declaration.
    """
    for pattern, subnet_type, role in _BUS_OPTIONS:
        for line in options:
            m = pattern.match(line)
            if m:
                return BusOption(
                    subnet_type=subnet_type,
                    subsystem=int(m.group("subsystem")),
                    address=int(m.group("address")),
                    role=role,
                )
    return None
