"""s7hwcfg cfgfile — STEP 7 hardware configuration export parser.

Public API::

    from s7hwcfg.cfgfile import read_hwconfig

    hwconfig = read_hwconfig("station.cfg")
    station = hwconfig.station
    cpu = station.racks[0].slots[2]
    dp_master = station.node(1, 2)
"""

from ._classifier import SectionRole, classify_header, classify_section
from ._config_data import ConfigData, decode_address_area, parse_config_data
from ._errors import CfgFileFormatError, HWConfigError, SectionFormatError
from ._grammar import GRAMMARS, BusOption, HeaderGrammar, match_bus_option, match_header
from ._preamble import FileFormat, FileHeader, parse_preamble, split_preamble
from ._reader import HWConfig, parse_hwconfig, parse_station, read_hwconfig
from ._resolver import Diagnostic, Severity, StationResolver
from ._sections import RawSection, segment_sections

__all__ = [
    "BusOption",
    "CfgFileFormatError",
    "ConfigData",
    "Diagnostic",
    "FileFormat",
    "FileHeader",
    "GRAMMARS",
    "HWConfig",
    "HWConfigError",
    "HeaderGrammar",
    "RawSection",
    "SectionFormatError",
    "SectionRole",
    "Severity",
    "StationResolver",
    "classify_header",
    "classify_section",
    "decode_address_area",
    "match_bus_option",
    "match_header",
    "parse_config_data",
    "parse_hwconfig",
    "parse_preamble",
    "parse_station",
    "read_hwconfig",
    "segment_sections",
]
