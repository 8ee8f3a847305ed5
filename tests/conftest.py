"""Shared test helpers for the s7hwcfg test suite."""

from pathlib import Path

from s7hwcfg.cfgfile import StationResolver, segment_sections

FIXTURES = Path(__file__).parent / "fixtures"

STATION_TITLE = 'STATION S7400 , "SIMATIC 400(1)"'


def section(header, *body):
    """Lines of one section: header line(s), BEGIN, body, END."""
    if isinstance(header, str):
        header = [header]
    return [*header, "BEGIN", *body, "END"]


def content(*sections):
    """Join sections with blank lines, starting at the STATION section."""
    lines = []
    for sec in sections:
        if lines:
            lines.append("")
        lines.extend(sec)
    return lines


def cfg_file(*sections, preamble=None):
    """A complete export: preamble followed by the given sections."""
    if preamble is None:
        preamble = ['FILEVERSION "3.2"', "#STEP7_VERSION V5.6", ""]
    return [*preamble, *content(*sections)]


def station_section(*body):
    return section(STATION_TITLE, *body)


def resolve(*sections, strict=False):
    """Resolve a station section plus *sections*; returns ``(station, resolver)``."""
    lines = content(station_section(), *sections)
    resolver = StationResolver(segment_sections(lines), strict=strict)
    return resolver.resolve(), resolver
