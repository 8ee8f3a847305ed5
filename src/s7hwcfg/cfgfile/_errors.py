"""Exceptions raised while reading a hardware configuration export."""

from __future__ import annotations

from collections.abc import Sequence


class HWConfigError(Exception):
    """Base class for all configuration-file errors."""


class CfgFileFormatError(HWConfigError):
    """Structural error above the section level (preamble, BEGIN/END bracketing)."""

    def __init__(self, message: str, lines: Sequence[str] | None = None):
        self.lines: list[str] = list(lines) if lines else []
        if self.lines:
            message = f"{message}:\n" + "\n".join(self.lines)
        super().__init__(message)


class SectionFormatError(HWConfigError):
    """A section header or body does not match the grammar of its role."""

    def __init__(self, message: str, section: str | None = None):
        self.section = section
        if section is not None:
            message = f"{message} (section '{section}')"
        super().__init__(message)
