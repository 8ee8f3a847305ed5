"""The station: root of a parsed hardware configuration."""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum

from pydantic import BaseModel

from .hardware import HardwareComponent, Rack, SubsystemRack
from .subsystem import NodePath, Subsystem


class StationType(str, Enum):
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    S7_300 = "S7_300"
    S7_400 = "S7_400"

    @classmethod
    def from_code(cls, code: str) -> StationType:
        """Map the header type code (``S7300``, ``S7400``) to a station type."""
        return _STATION_CODES.get(code, cls.NOT_IMPLEMENTED)


_STATION_CODES = {
    "S7300": StationType.S7_300,
    "S7400": StationType.S7_400,
}


class Station(BaseModel):
    name: str
    station_type: StationType = StationType.NOT_IMPLEMENTED
    data: dict[str, str] = {}
    racks: dict[int, Rack] = {}
    subsystems: dict[int, Subsystem] = {}
    subsystem_racks: list[SubsystemRack] = []

    def rack(self, number: int) -> Rack | None:
        return self.racks.get(number)

    def subsystem(self, number: int) -> Subsystem | None:
        return self.subsystems.get(number)

    def subsystem_rack(self, subsystem_number: int, address: int) -> SubsystemRack | None:
        for subsystem_rack in self.subsystem_racks:
            if subsystem_rack.subsystem_number == subsystem_number and subsystem_rack.address == address:
                return subsystem_rack
        return None

    def resolve(self, path: NodePath) -> HardwareComponent | None:
        """Return the component at *path*, or ``None`` if any step is missing."""
        if path.rack is not None:
            component = self.rack(path.rack)
        else:
            component = self.subsystem_rack(path.subsystem, path.address)
        for slot_number in (path.slot, path.subslot):
            if component is None or slot_number is None:
                break
            component = component.get_module(slot_number)
        return component

    def node(self, subsystem_number: int, address: int) -> HardwareComponent | None:
        """The component attached to *subsystem_number* at bus *address*."""
        subsystem = self.subsystem(subsystem_number)
        if subsystem is None:
            return None
        path = subsystem.node_path(address)
        if path is None:
            return None
        return self.resolve(path)

    def iter_components(self) -> Iterator[tuple[NodePath, HardwareComponent]]:
        """Walk racks, then subsystem racks, depth first, yielding ``(path, component)``."""
        for rack_number, rack in self.racks.items():
            yield NodePath(rack=rack_number), rack
            for slot_number, module in rack.slots.items():
                yield NodePath(rack=rack_number, slot=slot_number), module
                for subslot_number, sub_module in module.sub_modules.items():
                    yield NodePath(rack=rack_number, slot=slot_number, subslot=subslot_number), sub_module
        for subsystem_rack in self.subsystem_racks:
            root = {"subsystem": subsystem_rack.subsystem_number, "address": subsystem_rack.address}
            yield NodePath(**root), subsystem_rack
            for slot_number, module in subsystem_rack.slots.items():
                yield NodePath(**root, slot=slot_number), module
                for subslot_number, sub_module in module.sub_modules.items():
                    yield NodePath(**root, slot=slot_number, subslot=subslot_number), sub_module
