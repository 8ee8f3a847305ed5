"""End-to-end tests: whole exports from lines and from disk."""

import logging

import pytest

from conftest import FIXTURES, cfg_file, section, station_section

from s7hwcfg.cfgfile import (
    CfgFileFormatError,
    SectionFormatError,
    parse_hwconfig,
    parse_station,
    read_hwconfig,
)
from s7hwcfg.model.station import StationType
from s7hwcfg.model.subsystem import BusRole

DANGLING = section([
    'RACK 0, SLOT 4, "6GK7 443-5DX03-0XE0", "CP 443-5 Ext"',
    'MASTER DPSUBSYSTEM 1, "PROFIBUS(1)", DPADDRESS 2',
])
RACK = section('RACK 0, "6ES7 400-1JA01-0AA0", "UR2"')


class TestSampleStation:
    @pytest.fixture(scope="class")
    def hwconfig(self):
        return read_hwconfig(FIXTURES / "sample_station.cfg")

    def test_header(self, hwconfig):
        assert hwconfig.header.file_version == "3.2"
        assert hwconfig.header.metadata["STEP7_VERSION"] == "V5.6 + SP2"

    def test_station(self, hwconfig):
        station = hwconfig.station
        assert station.name == "SIMATIC 400(1)"
        assert station.station_type == StationType.S7_400
        assert sorted(station.racks[0].slots) == [1, 3, 5, 6]

    def test_local_addresses(self, hwconfig):
        slots = hwconfig.station.racks[0].slots
        assert str(slots[5].inputs[0].start) == "IB0"
        assert str(slots[5].inputs[0].length) == "B4"
        assert str(slots[6].outputs[0].start) == "QB0"

    def test_cpu_interfaces(self, hwconfig):
        station = hwconfig.station
        cpu = station.racks[0].slots[3]
        assert cpu.data["CPU_NAME"] == "CPU 414-3 PN/DP"
        assert station.node(1, 2) is cpu.sub_modules[2]
        assert station.node(100, 0) is cpu.sub_modules[5]
        assert cpu.sub_modules[5].membership.role == BusRole.CONTROLLER

    def test_dp_slave(self, hwconfig):
        station = hwconfig.station
        slave = station.subsystem_rack(1, 3)
        assert station.node(1, 3) is slave
        assert slave.membership.role == BusRole.SLAVE
        assert str(slave.slots[4].inputs[0].start) == "IW512"
        assert str(slave.slots[5].outputs[0].start) == "QW512"

    def test_io_device(self, hwconfig):
        station = hwconfig.station
        device = station.node(100, 1)
        assert device.membership.role == BusRole.DEVICE
        assert device.data == {"DEVICE_NAME": "et200sp-1"}
        assert 32768 in device.slots[0].sub_modules
        assert str(device.slots[1].inputs[0].start) == "IB10"

    def test_no_diagnostics(self, hwconfig):
        assert hwconfig.diagnostics == []

    def test_component_count(self, hwconfig):
        # rack 0: 1 + 4 slots + 2 subslots; DP slave: 1 + 2 slots; IO device: 1 + 2 slots + 1 subslot
        assert len(list(hwconfig.station.iter_components())) == 14


class TestParseStation:
    def test_returns_station(self):
        station = parse_station(cfg_file(station_section(), RACK))
        assert list(station.racks) == [0]

    def test_collects_diagnostics(self):
        diagnostics = []
        station = parse_station(cfg_file(station_section(), RACK, DANGLING), diagnostics=diagnostics)
        assert station.racks[0].slots[4].membership is None
        assert len(diagnostics) == 1
        assert diagnostics[0].section == DANGLING[0]

    def test_warning_logged_without_list(self, caplog):
        with caplog.at_level(logging.WARNING, logger="s7hwcfg"):
            parse_station(cfg_file(station_section(), RACK, DANGLING))
        assert "non-existent subsystem 1" in caplog.text

    def test_strict(self):
        with pytest.raises(SectionFormatError, match="non-existent subsystem"):
            parse_station(cfg_file(station_section(), RACK, DANGLING), strict=True)


class TestParseHWConfig:
    def test_missing_fileversion(self):
        with pytest.raises(CfgFileFormatError, match="FILEVERSION"):
            parse_hwconfig(cfg_file(station_section(), preamble=["#STEP7_VERSION V5.6", ""]))

    def test_missing_station(self):
        with pytest.raises(CfgFileFormatError, match="STATION section missing"):
            parse_hwconfig(['FILEVERSION "3.2"', "", *RACK])

    def test_diagnostics(self):
        hwconfig = parse_hwconfig(cfg_file(station_section(), RACK, DANGLING))
        assert [d.severity.value for d in hwconfig.diagnostics] == ["WARNING"]

    def test_read_encoding(self, tmp_path):
        path = tmp_path / "umlaut.cfg"
        lines = cfg_file(section('STATION S7300 , "Förderband"'))
        path.write_text("\n".join(lines) + "\n", encoding="cp1252")
        assert read_hwconfig(path).station.name == "Förderband"
