"""Tests for section body parsing and address decoding."""

import pytest

from s7hwcfg.cfgfile import SectionFormatError, decode_address_area, parse_config_data
from s7hwcfg.model.address import AddressKind, DataWidth


class TestKeyValue:
    def test_collects_quoted_values(self):
        config = parse_config_data(['ASSET_ID "1"', 'COMMENT ""', 'CPU_NAME "CPU 414-3"'])
        assert config.data == {"ASSET_ID": "1", "COMMENT": "", "CPU_NAME": "CPU 414-3"}

    def test_skips_unparseable_lines(self):
        config = parse_config_data(['ASSET_ID "1"', "garbage line", "KEY unquoted"])
        assert config.data == {"ASSET_ID": "1"}

    def test_lines_are_trimmed(self):
        config = parse_config_data(['    COMMENT "x"   '])
        assert config.data == {"COMMENT": "x"}

    def test_stops_at_first_keyword(self):
        config = parse_config_data([
            'ASSET_ID "1"',
            "PARAMETER",
            'HIDDEN "2"',
        ])
        assert config.data == {"ASSET_ID": "1"}

    def test_empty_body(self):
        config = parse_config_data([])
        assert config.data == {}
        assert config.inputs == []
        assert config.outputs == []


class TestAddressRegions:
    def test_input_region(self):
        """LOCAL_IN_ADDRESSES / ADDRESS 10,0,2,0,1,0 / PARAMETER gives one byte area."""
        config = parse_config_data([
            "LOCAL_IN_ADDRESSES",
            "ADDRESS 10,0,2,0,1,0",
            "PARAMETER",
        ])
        assert len(config.inputs) == 1
        area = config.inputs[0]
        assert area.start.kind == AddressKind.INPUT
        assert area.start.byte == 10
        assert area.start.width == DataWidth.BYTE
        assert area.length.byte == 2
        assert area.direction == AddressKind.INPUT
        assert config.outputs == []

    def test_both_regions(self):
        config = parse_config_data([
            'COMMENT ""',
            "LOCAL_IN_ADDRESSES",
            "  ADDRESS  0, 0, 4, 0, 2, 0",
            "LOCAL_OUT_ADDRESSES",
            "  ADDRESS  4, 0, 2, 0, 2, 0",
            "  ADDRESS  8, 0, 2, 0, 2, 0",
        ])
        assert config.data == {"COMMENT": ""}
        assert [str(area.start) for area in config.inputs] == ["IB0"]
        assert [str(area.start) for area in config.outputs] == ["QB4", "QB8"]

    def test_symbol_lines_end_region(self):
        config = parse_config_data([
            "LOCAL_IN_ADDRESSES",
            "ADDRESS  0, 0, 4, 0, 1, 0",
            'SYMBOL  I , 0, "Start", ""',
            'SYMBOL  I , 1, "Stop", ""',
        ])
        assert len(config.inputs) == 1

    def test_unparseable_line_in_region(self):
        """Every line of an address region must be an ADDRESS line."""
        with pytest.raises(SectionFormatError, match="couldn't be parsed") as excinfo:
            parse_config_data(
                ["LOCAL_OUT_ADDRESSES", "ADDRESS 1, 2"],
                section='RACK 0, SLOT 6, "x", "y"',
            )
        assert excinfo.value.section == 'RACK 0, SLOT 6, "x", "y"'
        assert "LOCAL_OUT_ADDRESSES" in str(excinfo.value)

    def test_invalid_bit_offset(self):
        with pytest.raises(SectionFormatError, match="Invalid address"):
            parse_config_data(["LOCAL_IN_ADDRESSES", "ADDRESS 3, 9, 1, 0, 4, 0"])

    def test_empty_region(self):
        config = parse_config_data(["LOCAL_IN_ADDRESSES", "PARAMETER"])
        assert config.inputs == []


class TestDecodeAddressArea:
    @pytest.mark.parametrize("type1,type2,start,length", [
        (0, 0, "IB10", "B2"),
        (0, 16, "IB10", "X2"),
        (1, 0, "IB10", "B2"),
        (2, 0, "IB10", "B2"),
        (7, 0, "IW10", "B2"),
        (8, 0, "IW10", "B2"),
        (4, 0, "I10.3", "B2"),
    ])
    def test_type_codes(self, type1, type2, start, length):
        area = decode_address_area(AddressKind.INPUT, 10, 3, 2, 0, type1, type2)
        assert str(area.start) == start
        assert str(area.length) == length

    def test_output_kind(self):
        area = decode_address_area(AddressKind.OUTPUT, 256, 0, 16, 0, 7, 0)
        assert str(area) == "QW256 (B16)"

    def test_length_is_plain(self):
        area = decode_address_area(AddressKind.OUTPUT, 0, 0, 1, 0, 1, 0)
        assert area.length.kind == AddressKind.PLAIN
        assert area.length.bit is None
