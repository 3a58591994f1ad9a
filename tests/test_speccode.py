import logging

import pytest

from dmcd.decoder import parse_lines
from dmcd.model import DataManagementCard
from dmcd.parsers.speccode import (
    LineKind,
    SpecCodeParser,
    classify_line,
    decode_feature_row,
    feature_address,
)
from dmcd.sections import SectionKind


def cell(name: str, status: str) -> str:
    return name.ljust(17) + status


def row(*cells: str) -> str:
    return "  ".join(cells)


FULL_ROW = row(
    cell("SLANT-Y AXIS", "-"),
    cell("ONE TOUCH IGF ADV", "o"),
    cell("Y AXIS BY CT-Z", "-"),
    cell("TAPE DATA IN/OUT", "o"),
)


def _parser(kind=SectionKind.NC_SPEC_CODE_1):
    parser = SpecCodeParser()
    parser.begin(kind)
    return parser


def test_full_row_is_78_columns_and_decodes_four_features():
    assert len(FULL_ROW) == 78
    decoded = decode_feature_row(FULL_ROW)
    assert [(c.column, c.name, c.enabled) for c in decoded.columns] == [
        (0, "SLANT-Y AXIS", False),
        (1, "ONE TOUCH IGF ADV", True),
        (2, "Y AXIS BY CT-Z", False),
        (3, "TAPE DATA IN/OUT", True),
    ]
    assert decoded.rejected == []


def test_first_row_addresses():
    card = DataManagementCard()
    _parser().feed(FULL_ROW, card)
    features = card.nc_spec_codes[0].features
    assert [(f.bank_number, f.bit_index) for f in features] == [(8, 0), (16, 0), (24, 0), (32, 0)]


def test_row_counter_drives_bit_and_bank():
    card = DataManagementCard()
    parser = _parser()
    for _ in range(9):
        parser.feed(FULL_ROW, card)
    features = card.nc_spec_codes[0].features
    assert len(features) == 36
    second = features[4:8]
    assert [(f.bank_number, f.bit_index) for f in second] == [(8, 1), (16, 1), (24, 1), (32, 1)]
    ninth = features[32:]
    assert [(f.bank_number, f.bit_index) for f in ninth] == [(7, 0), (15, 0), (23, 0), (31, 0)]
    assert parser.feature_rows == 9


@pytest.mark.parametrize(
    ("column", "row_index", "address"),
    [(0, 0, (8, 0)), (3, 7, (32, 7)), (0, 8, (7, 0)), (2, 17, (22, 1))],
)
def test_feature_address(column, row_index, address):
    assert feature_address(column, row_index) == address


def test_drifted_status_is_recovered():
    drifted = (
        "SPINDLE MONITOR".ljust(17)
        + " o"
        + " "
        + row(cell("HI-G CONTROL", "-"), cell("PFCII", "o"), cell("SUPER-NURBS", "-"))
    )
    assert len(drifted) == 78
    decoded = decode_feature_row(drifted)
    assert [(c.column, c.name, c.enabled) for c in decoded.columns] == [
        (0, "SPINDLE MONITOR", True),
        (1, "HI-G CONTROL", False),
        (2, "PFCII", True),
        (3, "SUPER-NURBS", False),
    ]
    assert decoded.rejected == []


def test_sixteen_character_name_with_late_status():
    decoded = decode_feature_row("ABCDEFGHIJKLMNOP" + "  o")
    assert [(c.name, c.enabled) for c in decoded.columns] == [("ABCDEFGHIJKLMNOP", True)]


def test_invalid_status_is_skipped_and_diagnosed(caplog):
    line = row(cell("BROKEN COLUMN", "x"), cell("GOOD", "o"))
    card = DataManagementCard()
    with caplog.at_level(logging.WARNING, logger="dmcd.parsers.speccode"):
        _parser().feed(line, card)
    features = card.nc_spec_codes[0].features
    assert [(f.name, f.bank_number, f.bit_index) for f in features] == [("GOOD", 16, 0)]
    assert len(card.diagnostics) == 1
    assert "BROKEN COLUMN" in card.diagnostics[0]
    assert "BROKEN COLUMN" in caplog.text


def test_blank_columns_keep_visual_position():
    line = row(" " * 18, cell("MG TOOL READY", "o"))
    card = DataManagementCard()
    _parser().feed(line, card)
    features = card.nc_spec_codes[0].features
    assert [(f.name, f.bank_number) for f in features] == [("MG TOOL READY", 16)]
    assert card.diagnostics == []


def test_row_without_features_does_not_advance_counter():
    card = DataManagementCard()
    parser = _parser()
    parser.feed("not a feature row", card)
    assert parser.feature_rows == 0
    assert card.nc_spec_codes == []


@pytest.mark.parametrize(
    ("line", "kind"),
    [
        ("=" * 78, LineKind.SEPARATOR),
        ("-" * 78, LineKind.SEPARATOR),
        ("====  ----", LineKind.SEPARATOR),
        (" " + "-" * 77, LineKind.SEPARATOR),
        ("  =====  =====", LineKind.SEPARATOR),
        (" " * 17 + "-  " + " " * 17 + "-", LineKind.FEATURES),
        ("<NC-SPEC CODE No.1>  03/07/23", LineKind.FOOTER),
        ("1A2B-3C4D-5E6F-7A8B", LineKind.HEX_CODES),
        ("ffff", LineKind.HEX_CODES),
        (FULL_ROW, LineKind.FEATURES),
        ("<NC-SPEC CODE No.1>", LineKind.FEATURES),
    ],
)
def test_classify_line(line, kind):
    assert classify_line(line) is kind


def test_separators_and_footers_do_not_advance_counter():
    card = DataManagementCard()
    parser = _parser()
    for line in [FULL_ROW, "-" * 78, "<stamp>  03/07/23", FULL_ROW]:
        parser.feed(line, card)
    features = card.nc_spec_codes[0].features
    assert [f.bit_index for f in features] == [0] * 4 + [1] * 4


def test_hex_lines_are_collected_and_create_the_section():
    card = DataManagementCard()
    parser = _parser(SectionKind.PLC_SPEC_CODE_2)
    parser.feed("1A2B-3C4D", card)
    parser.feed("  5E6F-7A8B  ", card)
    assert card.nc_spec_codes == []
    section = card.plc_spec_codes[0]
    assert section.title == "PLC-SPEC CODE No.2"
    assert section.hex_codes == ["1A2B-3C4D", "5E6F-7A8B"]
    assert section.features == []


def test_parser_without_active_section_ignores_lines():
    card = DataManagementCard()
    SpecCodeParser().feed(FULL_ROW, card)
    assert card.nc_spec_codes == []


def test_indented_full_width_separator_between_rows_is_discarded():
    separator = " " + "-" * 77
    assert len(separator) == 78
    card = parse_lines(["=====[ NC-SPEC CODE No.1 ]=====", FULL_ROW, separator, FULL_ROW])
    features = card.nc_spec_codes[0].features
    assert [f.bit_index for f in features] == [0] * 4 + [1] * 4
    assert [f.bank_number for f in features[4:]] == [8, 16, 24, 32]
    assert all(set(f.name) != {"-"} for f in features)
    assert card.diagnostics == []


def test_full_width_spare_bit_row_still_decodes():
    spare = row(cell("", "-"), cell("", "o"), cell("", "-"), cell("", "-"))
    assert len(spare) == 78
    card = parse_lines(["=====[ NC-SPEC CODE No.1 ]=====", spare])
    features = card.nc_spec_codes[0].features
    assert [(f.name, f.enabled, f.bank_number) for f in features] == [
        ("", False, 8),
        ("", True, 16),
        ("", False, 24),
        ("", False, 32),
    ]
