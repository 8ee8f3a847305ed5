"""File preamble: everything before the first ``STATION`` line.

::

    FILEVERSION "3.2"
    #STEP7_VERSION V15.1
    #CREATED "Monday, 12 June 2023 10:22:31"
    FORMAT COMPACT
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel

from ._errors import CfgFileFormatError

_FILEVERSION_RE = re.compile(r'^FILEVERSION\s+"(?P<version>[A-Za-z0-9]+\.[A-Za-z0-9]+)"$')
_METADATA_RE = re.compile(r"^#(?P<tag>[A-Z0-9_]+)\s+(?P<value>.+)$")
_FORMAT_COMPACT_RE = re.compile(r"^FORMAT\s+COMPACT$")


class FileFormat(str, Enum):
    READABLE = "READABLE"
    COMPACT = "COMPACT"


class FileHeader(BaseModel):
    file_version: str
    metadata: dict[str, str] = {}
    format: FileFormat = FileFormat.READABLE


def split_preamble(lines: Iterable[str]) -> tuple[list[str], list[str]]:
    """Split raw file lines into ``(preamble, content)`` at the first STATION line."""
    lines = list(lines)
    if not lines:
        raise CfgFileFormatError("File too short (line count 0)")
    for index, line in enumerate(lines):
        if line.startswith("STATION"):
            return lines[:index], lines[index:]
    raise CfgFileFormatError("STATION section missing")


def parse_preamble(lines: Iterable[str]) -> FileHeader:
    """Extract file version, ``#TAG`` metadata and the format flag."""
    version: str | None = None
    metadata: dict[str, str] = {}
    file_format = FileFormat.READABLE

    preamble = [line.strip() for line in lines]
    for line in preamble:
        version_match = _FILEVERSION_RE.match(line)
        if version_match and version is None:
            version = version_match.group("version")
            continue
        meta_match = _METADATA_RE.match(line)
        if meta_match:
            metadata[meta_match.group("tag")] = meta_match.group("value")
        elif _FORMAT_COMPACT_RE.match(line):
            file_format = FileFormat.COMPACT

    if version is None:
        raise CfgFileFormatError(
            "FILEVERSION entry missing from file",
            [line for line in preamble if line],
        )
    return FileHeader(file_version=version, metadata=metadata, format=file_format)
