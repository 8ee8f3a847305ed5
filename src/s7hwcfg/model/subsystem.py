"""Field-bus subsystems (PROFIBUS-DP masters systems, PROFINET IO systems).

Subsystems never hold the hardware objects attached to them.  Nodes are
stored as ``NodePath`` locators and memberships as subsystem number +
address, both resolved through the owning ``Station``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class SubnetType(str, Enum):
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    PROFIBUS_DP = "PROFIBUS_DP"
    PROFINET = "PROFINET"


class BusRole(str, Enum):
    """Role of a node on its bus.  DP uses MASTER/SLAVE, PROFINET CONTROLLER/DEVICE."""

    MASTER = "MASTER"
    SLAVE = "SLAVE"
    CONTROLLER = "CONTROLLER"
    DEVICE = "DEVICE"


class SubsystemMembership(BaseModel):
    model_config = ConfigDict(frozen=True)

    subsystem_number: int
    address: int
    role: BusRole


class NodePath(BaseModel):
    """Index-based location of a component in the station tree.

    Rooted either at a station rack (``rack``) or at a subsystem rack
    (``subsystem`` + ``address``), optionally descending into ``slot`` and
    ``subslot``.
    """

    model_config = ConfigDict(frozen=True)

    rack: int | None = None
    subsystem: int | None = None
    address: int | None = None
    slot: int | None = None
    subslot: int | None = None

    @model_validator(mode="after")
    def _check_root(self):
        on_bus = self.subsystem is not None or self.address is not None
        if self.rack is not None and on_bus:
            raise ValueError("NodePath is rooted at a rack or a subsystem address, not both")
        if self.rack is None and (self.subsystem is None or self.address is None):
            raise ValueError("NodePath needs 'rack' or both 'subsystem' and 'address'")
        if self.subslot is not None and self.slot is None:
            raise ValueError("NodePath 'subslot' requires 'slot'")
        return self

    def __str__(self) -> str:
        if self.rack is not None:
            parts = [f"RACK {self.rack}"]
        else:
            parts = [f"SUBSYSTEM {self.subsystem}", f"ADDRESS {self.address}"]
        if self.slot is not None:
            parts.append(f"SLOT {self.slot}")
        if self.subslot is not None:
            parts.append(f"SUBSLOT {self.subslot}")
        return ", ".join(parts)


class Subsystem(BaseModel):
    """A bus/subnet with numbered member addresses."""

    number: int
    name: str
    subnet_type: SubnetType = SubnetType.NOT_IMPLEMENTED
    data: dict[str, str] = {}
    nodes: dict[int, NodePath] = {}

    def attach_node(self, address: int, path: NodePath) -> NodePath | None:
        """Register *path* at bus *address*; returns the node it replaced, if any."""
        previous = self.nodes.get(address)
        self.nodes[address] = path
        return previous

    def node_path(self, address: int) -> NodePath | None:
        return self.nodes.get(address)
