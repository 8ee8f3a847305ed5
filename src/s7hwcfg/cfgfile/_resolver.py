"""Hierarchical resolver: builds the station tree from classified sections.

Sections are classified once and bucketed by role.  Each pass drains its
own bucket(s) and relies on lookup tables filled by earlier passes, so the
pass order is fixed while the order of sections in the file is irrelevant:

1. station
2. racks
3. subsystems (DP master systems, PROFINET IO systems)
4. rack slot modules            (need racks; bus options need subsystems)
5. rack sub-slot modules        (need slot modules)
6. subsystem racks              (need subsystems)
7. subsystem rack slot modules  (need subsystem racks)
8. subsystem rack sub-slots     (need subsystem rack slot modules)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from enum import Enum
from typing import Any

from pydantic import BaseModel

from s7hwcfg.model.hardware import (
    HardwareComponent,
    Rack,
    SlotModule,
    SubSlotModule,
    SubsystemRack,
    SubsystemRackSlotModule,
)
from s7hwcfg.model.protocols import ModuleHost
from s7hwcfg.model.station import Station, StationType
from s7hwcfg.model.subsystem import (
    BusRole,
    NodePath,
    SubnetType,
    Subsystem,
    SubsystemMembership,
)

from ._classifier import SectionRole, classify_section
from ._config_data import ConfigData, parse_config_data
from ._errors import CfgFileFormatError, SectionFormatError
from ._grammar import GRAMMARS, match_bus_option, match_header
from ._sections import RawSection

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    WARNING = "WARNING"


class Diagnostic(BaseModel):
    """A recoverable inconsistency found while resolving."""

    severity: Severity = Severity.WARNING
    message: str
    section: str | None = None


_SLAVE_ROLES = {
    SubnetType.PROFIBUS_DP: BusRole.SLAVE,
    SubnetType.PROFINET: BusRole.DEVICE,
}


class StationResolver:
    """Single-use builder turning raw sections into a ``Station``.

    Parameters
    ----------
    sections : iterable of RawSection
        Segmented sections, in file order.
    strict : bool
        Raise ``SectionFormatError`` for soft inconsistencies (dangling bus
        references, reused bus addresses) instead of recording a
        ``Diagnostic``.
    """

    def __init__(self, sections: Iterable[RawSection], *, strict: bool = False):
        self.strict = strict
        self.diagnostics: list[Diagnostic] = []
        self._pending: dict[SectionRole, list[RawSection]] = defaultdict(list)
        for section in sections:
            self._pending[classify_section(section)].append(section)

    def resolve(self) -> Station:
        station = self._resolve_station()
        self._resolve_racks(station)
        self._resolve_subsystems(station)
        self._resolve_rack_slots(station)
        self._resolve_rack_subslots(station)
        self._resolve_subsystem_racks(station)
        self._resolve_subsystem_rack_slots(station)
        self._resolve_subsystem_rack_subslots(station)

        for section in self._drain(SectionRole.UNKNOWN):
            logger.debug("Ignoring unrecognized section '%s'", section.title)
        return station

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _resolve_station(self) -> Station:
        sections = self._drain(SectionRole.STATION)
        if len(sections) != 1:
            raise CfgFileFormatError(
                f"Expected exactly one STATION section, found {len(sections)}",
                [section.title for section in sections],
            )
        section = sections[0]
        fields = self._header(section, SectionRole.STATION)
        config = self._config(section)
        station = Station(
            name=fields["name"],
            station_type=StationType.from_code(fields["station_type"]),
            data=config.data,
        )
        logger.debug("Station '%s' (%s)", station.name, station.station_type.value)
        return station

    def _resolve_racks(self, station: Station) -> None:
        for section in self._drain(SectionRole.RACK):
            fields = self._header(section, SectionRole.RACK)
            number = fields["rack"]
            if number in station.racks:
                raise SectionFormatError(f"Duplicate rack number {number}", section.title)
            config = self._config(section)
            station.racks[number] = Rack(
                number=number,
                order_number=fields["order_number"],
                name=fields["name"],
                data=config.data,
                inputs=config.inputs,
                outputs=config.outputs,
            )
        logger.debug("Resolved %d rack(s)", len(station.racks))

    def _resolve_subsystems(self, station: Station) -> None:
        for role in (SectionRole.DP_SUBSYSTEM, SectionRole.IO_SUBSYSTEM):
            for section in self._drain(role):
                fields = self._header(section, role)
                number = fields["subsystem"]
                if number in station.subsystems:
                    raise SectionFormatError(f"Duplicate subsystem number {number}", section.title)
                station.subsystems[number] = Subsystem(
                    number=number,
                    name=fields["name"],
                    subnet_type=role.bus,
                    data=self._config(section).data,
                )
        logger.debug("Resolved %d subsystem(s)", len(station.subsystems))

    def _resolve_rack_slots(self, station: Station) -> None:
        for section in self._drain(SectionRole.RACK_SLOT):
            fields = self._header(section, SectionRole.RACK_SLOT)
            rack = station.rack(fields["rack"])
            if rack is None:
                raise SectionFormatError(
                    f"Module refers to undefined rack {fields['rack']}", section.title
                )
            module = SlotModule(
                rack_number=fields["rack"],
                slot_number=fields["slot"],
                **self._module_fields(section, fields),
            )
            self._insert(rack, fields["slot"], module, section)
            self._attach_bus_option(
                station, section, module, NodePath(rack=fields["rack"], slot=fields["slot"])
            )

    def _resolve_rack_subslots(self, station: Station) -> None:
        for section in self._drain(SectionRole.RACK_SLOT_SUBSLOT):
            fields = self._header(section, SectionRole.RACK_SLOT_SUBSLOT)
            parent_path = NodePath(rack=fields["rack"], slot=fields["slot"])
            parent = station.resolve(parent_path)
            if parent is None:
                raise SectionFormatError(f"No module at {parent_path}", section.title)
            module = SubSlotModule(
                slot_number=fields["slot"],
                subslot_number=fields["subslot"],
                **self._module_fields(section, fields),
            )
            self._insert(parent, fields["subslot"], module, section)
            self._attach_bus_option(
                station,
                section,
                module,
                NodePath(rack=fields["rack"], slot=fields["slot"], subslot=fields["subslot"]),
            )

    def _resolve_subsystem_racks(self, station: Station) -> None:
        for role in (SectionRole.DP_SUBSYSTEM_ADDRESS, SectionRole.IO_SUBSYSTEM_ADDRESS):
            for section in self._drain(role):
                fields = self._header(section, role)
                number, address = fields["subsystem"], fields["address"]
                subsystem = station.subsystem(number)
                if subsystem is None:
                    raise SectionFormatError(
                        f"Device refers to undefined subsystem {number}", section.title
                    )
                if station.subsystem_rack(number, address) is not None:
                    raise SectionFormatError(
                        f"Duplicate device at address {address} of subsystem {number}",
                        section.title,
                    )
                config = self._config(section)
                subsystem_rack = SubsystemRack(
                    subsystem_number=number,
                    address=address,
                    order_number=fields["order_number"],
                    version=fields["version"],
                    designation=fields["designation"],
                    membership=SubsystemMembership(
                        subsystem_number=number,
                        address=address,
                        role=_SLAVE_ROLES[role.bus],
                    ),
                    data=config.data,
                    inputs=config.inputs,
                    outputs=config.outputs,
                )
                station.subsystem_racks.append(subsystem_rack)
                self._attach_node(
                    subsystem, address, NodePath(subsystem=number, address=address), section
                )
        logger.debug("Resolved %d subsystem rack(s)", len(station.subsystem_racks))

    def _resolve_subsystem_rack_slots(self, station: Station) -> None:
        for role in (SectionRole.DP_SUBSYSTEM_ADDRESS_SLOT, SectionRole.IO_SUBSYSTEM_ADDRESS_SLOT):
            for section in self._drain(role):
                fields = self._header(section, role)
                number, address, slot = fields["subsystem"], fields["address"], fields["slot"]
                parent = station.subsystem_rack(number, address)
                if parent is None:
                    raise SectionFormatError(
                        f"No device at address {address} of subsystem {number}", section.title
                    )
                module = SubsystemRackSlotModule(
                    subsystem_number=number,
                    address=address,
                    slot_number=slot,
                    **self._module_fields(section, fields),
                )
                self._insert(parent, slot, module, section)
                self._attach_bus_option(
                    station,
                    section,
                    module,
                    NodePath(subsystem=number, address=address, slot=slot),
                )

    def _resolve_subsystem_rack_subslots(self, station: Station) -> None:
        for role in (
            SectionRole.DP_SUBSYSTEM_ADDRESS_SLOT_SUBSLOT,
            SectionRole.IO_SUBSYSTEM_ADDRESS_SLOT_SUBSLOT,
        ):
            for section in self._drain(role):
                fields = self._header(section, role)
                parent_path = NodePath(
                    subsystem=fields["subsystem"], address=fields["address"], slot=fields["slot"]
                )
                parent = station.resolve(parent_path)
                if parent is None:
                    raise SectionFormatError(f"No module at {parent_path}", section.title)
                module = SubSlotModule(
                    slot_number=fields["slot"],
                    subslot_number=fields["subslot"],
                    **self._module_fields(section, fields),
                )
                self._insert(parent, fields["subslot"], module, section)
                self._attach_bus_option(
                    station,
                    section,
                    module,
                    parent_path.model_copy(update={"subslot": fields["subslot"]}),
                )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _drain(self, role: SectionRole) -> list[RawSection]:
        return self._pending.pop(role, [])

    def _header(self, section: RawSection, role: SectionRole) -> dict[str, Any]:
        grammar = GRAMMARS[role]
        fields = match_header(section.title, grammar)
        if fields is None:
            raise SectionFormatError(f"Invalid {grammar.name} header", section.title)
        return fields

    def _config(self, section: RawSection) -> ConfigData:
        return parse_config_data(section.body, section=section.title)

    def _module_fields(self, section: RawSection, fields: dict[str, Any]) -> dict[str, Any]:
        config = self._config(section)
        return {
            "order_number": fields["order_number"],
            "version": fields["version"],
            "name": fields["name"],
            "data": config.data,
            "inputs": config.inputs,
            "outputs": config.outputs,
        }

    def _insert(self, host: ModuleHost, slot_number: int, module: HardwareComponent, section: RawSection) -> None:
        if host.get_module(slot_number) is not None:
            raise SectionFormatError(f"Slot {slot_number} is already occupied", section.title)
        if not host.add_module(slot_number, module):
            raise SectionFormatError(
                f"{type(host).__name__} cannot hold a {type(module).__name__}", section.title
            )

    def _attach_bus_option(
        self,
        station: Station,
        section: RawSection,
        component: HardwareComponent,
        path: NodePath,
    ) -> None:
        option = match_bus_option(section.options)
        if option is None:
            return
        subsystem = station.subsystem(option.subsystem)
        if subsystem is None:
            self._soft(
                f"Trying to attach a device to non-existent subsystem {option.subsystem}", section
            )
            return
        if subsystem.subnet_type != option.subnet_type:
            self._soft(
                f"Subsystem {option.subsystem} is {subsystem.subnet_type.value}, "
                f"not {option.subnet_type.value}",
                section,
            )
            return
        component.membership = SubsystemMembership(
            subsystem_number=option.subsystem,
            address=option.address,
            role=option.role,
        )
        self._attach_node(subsystem, option.address, path, section)

    def _attach_node(
        self,
        subsystem: Subsystem,
        address: int,
        path: NodePath,
        section: RawSection,
    ) -> None:
        previous = subsystem.attach_node(address, path)
        if previous is not None and previous != path:
            self._soft(
                f"Address {address} of subsystem {subsystem.number} was already used by "
                f"{previous}",
                section,
            )

    def _soft(self, message: str, section: RawSection) -> None:
        if self.strict:
            raise SectionFormatError(message, section.title)
        logger.warning("%s (section '%s')", message, section.title)
        self.diagnostics.append(Diagnostic(message=message, section=section.title))
