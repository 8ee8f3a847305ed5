"""Structural protocols for hardware components.

``ModuleHost`` replaces per-class ``isinstance`` ladders when walking or
building the station tree.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ModuleHost(Protocol):
    """Anything that accepts child modules by slot number.

    ``add_module`` returns ``False`` when the child type is not accepted;
    terminal components reject everything.
    """

    def add_module(self, slot_number: int, module: Any) -> bool: ...

    def get_module(self, slot_number: int) -> Any | None: ...
