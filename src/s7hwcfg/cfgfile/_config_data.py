"""Section body parsing: key/value data and local I/O address areas.

::

    BEGIN
      ASSET_ID "..."
      COMMENT ""
      LOCAL_IN_ADDRESSES
        ADDRESS  0, 0, 4, 0, 2, 0
      LOCAL_OUT_ADDRESSES
        ADDRESS  4, 0, 2, 0, 2, 0
      PARAMETER
        ...
    END

Key/value parsing is lenient (non-matching lines are skipped).  Address
regions are strict: every line up to the next keyword must be an ``ADDRESS``
line.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from pydantic import BaseModel

from s7hwcfg.model.address import Address, AddressArea, AddressKind, DataWidth

from ._errors import SectionFormatError

LOCAL_IN_ADDRESSES = "LOCAL_IN_ADDRESSES"
LOCAL_OUT_ADDRESSES = "LOCAL_OUT_ADDRESSES"

CONFIG_DATA_KEYWORDS = frozenset({
    LOCAL_IN_ADDRESSES,
    LOCAL_OUT_ADDRESSES,
    "PARAMETER",
    "SYMBOL",
})

_KEY_VALUE_RE = re.compile(r'^(?P<key>\w+)\s+"(?P<value>.*?)"$')
_ADDRESS_RE = re.compile(
    r"^ADDRESS\s*(?P<start_byte>\d+)\s*,\s*(?P<start_bit>\d+)\s*,"
    r"\s*(?P<length_byte>\d+)\s*,\s*(?P<length_bit>\d+)\s*,"
    r"\s*(?P<type1>\d+)\s*,\s*(?P<type2>\d+)\s*$"
)


class ConfigData(BaseModel):
    data: dict[str, str] = {}
    inputs: list[AddressArea] = []
    outputs: list[AddressArea] = []


def _is_keyword(line: str) -> bool:
    tokens = line.split(maxsplit=1)
    return bool(tokens) and tokens[0] in CONFIG_DATA_KEYWORDS


def decode_address_area(
    kind: AddressKind,
    start_byte: int,
    start_bit: int,
    length_byte: int,
    length_bit: int,
    type1: int,
    type2: int,
) -> AddressArea:
    """Build an address area from the six numeric fields of an ``ADDRESS`` line.

    The type-code pair selects the data width.  The mapping is inferred
    from exports, not from vendor documentation:

    - ``type1`` 0: byte start; bit-sized length if ``type2`` is 16
    - ``type1`` 1, 2: byte start
    - ``type1`` 7, 8: word start
    - anything else: bit start (``byte.bit``)

    ``length_bit`` is accepted for completeness but not represented.
    """
    length_width = DataWidth.BYTE
    if type1 == 0:
        start = Address(kind=kind, width=DataWidth.BYTE, byte=start_byte)
        if type2 == 16:
            length_width = DataWidth.BIT
    elif type1 in (1, 2):
        start = Address(kind=kind, width=DataWidth.BYTE, byte=start_byte)
    elif type1 in (7, 8):
        start = Address(kind=kind, width=DataWidth.WORD, byte=start_byte)
    else:
        start = Address(kind=kind, width=DataWidth.BIT, byte=start_byte, bit=start_bit)
    length = Address(kind=AddressKind.PLAIN, width=length_width, byte=length_byte)
    return AddressArea(start=start, length=length)


def _parse_address_region(
    body: Sequence[str],
    marker: str,
    kind: AddressKind,
    section: str | None,
) -> list[AddressArea]:
    if marker not in body:
        return []
    areas: list[AddressArea] = []
    for line in body[body.index(marker) + 1:]:
        if _is_keyword(line):
            break
        m = _ADDRESS_RE.match(line)
        if m is None:
            raise SectionFormatError(
                f"The following line in {marker} couldn't be parsed: {line}", section
            )
        values = {key: int(value) for key, value in m.groupdict().items()}
        try:
            areas.append(decode_address_area(kind, **values))
        except ValueError as exc:
            raise SectionFormatError(f"Invalid address in {marker}: {line}", section) from exc
    return areas


def parse_config_data(body: Sequence[str], *, section: str | None = None) -> ConfigData:
    """Parse a section body into key/value data and input/output areas.

    *section* (the section title) is only used to give errors context.
    """
    body = [line.strip() for line in body]
    data: dict[str, str] = {}
    for line in body:
        if _is_keyword(line):
            break
        m = _KEY_VALUE_RE.match(line)
        if m:
            data[m.group("key")] = m.group("value")

    return ConfigData(
        data=data,
        inputs=_parse_address_region(body, LOCAL_IN_ADDRESSES, AddressKind.INPUT, section),
        outputs=_parse_address_region(body, LOCAL_OUT_ADDRESSES, AddressKind.OUTPUT, section),
    )
