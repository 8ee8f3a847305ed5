"""Racks and modules of a STEP 7 station.

Each variant carries only its own position fields; ownership runs strictly
top-down (rack -> slot module -> sub-slot module).  Bus membership is plain
data (``SubsystemMembership``), never a reference to the ``Subsystem``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from .address import AddressArea
from .subsystem import SubsystemMembership


class _Component(BaseModel):
    """Fields shared by every component parsed from a section body."""

    data: dict[str, str] = {}
    inputs: list[AddressArea] = []
    outputs: list[AddressArea] = []


class SubSlotModule(_Component):
    """Terminal module plugged into a sub-slot of a slot module."""

    kind: Literal["subslot_module"] = "subslot_module"
    slot_number: int
    subslot_number: int
    order_number: str
    version: str | None = None
    name: str
    membership: SubsystemMembership | None = None

    def add_module(self, slot_number: int, module: object) -> bool:
        return False

    def get_module(self, slot_number: int) -> None:
        return None


class SlotModule(_Component):
    kind: Literal["slot_module"] = "slot_module"
    rack_number: int
    slot_number: int
    order_number: str
    version: str | None = None
    name: str
    membership: SubsystemMembership | None = None
    sub_modules: dict[int, SubSlotModule] = {}

    def add_module(self, slot_number: int, module: object) -> bool:
        if not isinstance(module, SubSlotModule):
            return False
        self.sub_modules[slot_number] = module
        return True

    def get_module(self, slot_number: int) -> SubSlotModule | None:
        return self.sub_modules.get(slot_number)


class Rack(_Component):
    """A physical mounting rack of the station."""

    kind: Literal["rack"] = "rack"
    number: int
    order_number: str
    name: str
    slots: dict[int, SlotModule] = {}

    def add_module(self, slot_number: int, module: object) -> bool:
        if not isinstance(module, SlotModule):
            return False
        self.slots[slot_number] = module
        return True

    def get_module(self, slot_number: int) -> SlotModule | None:
        return self.slots.get(slot_number)


class SubsystemRackSlotModule(_Component):
    """A module in a slot of a bus-hosted rack (DP slave / IO device).

    ``membership`` is set only when the module itself masters or controls
    another subsystem.
    """

    kind: Literal["subsystem_rack_slot_module"] = "subsystem_rack_slot_module"
    subsystem_number: int
    address: int
    slot_number: int
    order_number: str
    version: str | None = None
    name: str
    membership: SubsystemMembership | None = None
    sub_modules: dict[int, SubSlotModule] = {}

    def add_module(self, slot_number: int, module: object) -> bool:
        if not isinstance(module, SubSlotModule):
            return False
        self.sub_modules[slot_number] = module
        return True

    def get_module(self, slot_number: int) -> SubSlotModule | None:
        return self.sub_modules.get(slot_number)


class SubsystemRack(_Component):
    """A rack-like device hosted at a bus address (DP slave, IO device)."""

    kind: Literal["subsystem_rack"] = "subsystem_rack"
    subsystem_number: int
    address: int
    order_number: str
    version: str | None = None
    designation: str
    membership: SubsystemMembership | None = None
    slots: dict[int, SubsystemRackSlotModule] = {}

    def add_module(self, slot_number: int, module: object) -> bool:
        if not isinstance(module, SubsystemRackSlotModule):
            return False
        self.slots[slot_number] = module
        return True

    def get_module(self, slot_number: int) -> SubsystemRackSlotModule | None:
        return self.slots.get(slot_number)


HardwareComponent = Rack | SlotModule | SubSlotModule | SubsystemRack | SubsystemRackSlotModule
