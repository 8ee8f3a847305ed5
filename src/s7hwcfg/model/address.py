"""Process-image addresses and address areas.

An ``Address`` is a STEP 7 operand location (``IB10``, ``QW256``, ``I0.3``).
Area lengths reuse the same representation with ``AddressKind.PLAIN`` so the
width class travels with the length (``B2``, ``X8``).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class AddressKind(str, Enum):
    PLAIN = "PLAIN"
    INPUT = "INPUT"
    OUTPUT = "OUTPUT"


class DataWidth(str, Enum):
    BIT = "BIT"
    BYTE = "BYTE"
    WORD = "WORD"
    DWORD = "DWORD"


_KIND_PREFIX = {
    AddressKind.PLAIN: "",
    AddressKind.INPUT: "I",
    AddressKind.OUTPUT: "Q",
}

_WIDTH_PREFIX = {
    DataWidth.BIT: "",
    DataWidth.BYTE: "B",
    DataWidth.WORD: "W",
    DataWidth.DWORD: "D",
}


class Address(BaseModel):
    """A byte (and optionally bit) location with a data-width class."""

    model_config = ConfigDict(frozen=True)

    kind: AddressKind
    width: DataWidth
    byte: int
    bit: int | None = None

    @model_validator(mode="after")
    def _bit_only_for_bit_width(self):
        if self.bit is not None and self.width != DataWidth.BIT:
            raise ValueError(f"bit offset is only valid for BIT addresses, got {self.width.value}")
        if self.bit is not None and not 0 <= self.bit <= 7:
            raise ValueError(f"bit offset must be in 0..7, got {self.bit}")
        return self

    def __str__(self) -> str:
        if self.kind == AddressKind.PLAIN and self.width == DataWidth.BIT:
            return f"X{self.byte}"
        text = f"{_KIND_PREFIX[self.kind]}{_WIDTH_PREFIX[self.width]}{self.byte}"
        if self.width == DataWidth.BIT:
            text += f".{self.bit or 0}"
        return text


class AddressArea(BaseModel):
    """A contiguous input or output region: where it starts and how long it is."""

    model_config = ConfigDict(frozen=True)

    start: Address
    length: Address

    @model_validator(mode="after")
    def _check_kinds(self):
        if self.start.kind == AddressKind.PLAIN:
            raise ValueError("area start must be an INPUT or OUTPUT address")
        if self.length.kind != AddressKind.PLAIN:
            raise ValueError("area length must be a PLAIN address")
        return self

    @property
    def direction(self) -> AddressKind:
        return self.start.kind

    def __str__(self) -> str:
        return f"{self.start} ({self.length})"
