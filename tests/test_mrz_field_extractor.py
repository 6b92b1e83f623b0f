import pytest

from models import MRZBlock, MRZFormat
from mrz_field_extractor import extract_fields, split_names
from mrz_rules import TD1_MRZ_RULES, TD3_MRZ_RULES
from mrz_samples import TD3_SPECIMEN, build_td1_lines, cd


def test_split_names_example():
    assert split_names("GARCIA<LOPEZ<<MARIA<JOSE<") == (
        "GARCIA LOPEZ", "MARIA JOSE", "MARIA JOSE GARCIA LOPEZ"
    )


def test_split_names_single_segment():
    assert split_names("GARCIA<LOPEZ") == ("GARCIA LOPEZ", "", "GARCIA LOPEZ")
    assert split_names("<<<<") == ("", "", "")


def test_split_names_collapses_filler_runs():
    surname, given, full = split_names("DE<<<LA<<CRUZ")
    assert surname == "DE"
    assert given == "LA CRUZ"
    assert full == "LA CRUZ DE"


def test_td1_offsets():
    fields = extract_fields(MRZBlock(format=MRZFormat.TD1, lines=build_td1_lines()))

    assert fields.format == MRZFormat.TD1
    assert fields.document_type == "I<"
    assert fields.issuing_country == "HND"
    assert fields.names_raw == "GARCIA<LOPEZ<<MARIA<JOSE<"
    assert fields.surname == "GARCIA LOPEZ"
    assert fields.given_names == "MARIA JOSE"
    assert fields.document_number == "012345678"
    assert fields.document_number_check == cd("012345678")
    assert fields.nationality == "HND"
    assert fields.birth_date_raw == "900101"
    assert fields.birth_date_check == cd("900101")
    assert fields.sex == "F"
    assert fields.expiry_date_raw == "250101"
    assert fields.expiry_date_check == cd("250101")
    assert fields.optional_data == "<<"


def test_numeric_correction_is_scoped_to_numeric_fields():
    lines = build_td1_lines(
        document_number="O12345678",
        names="OLIVO<<ISIS<BELEN",
        birth="9OO1O1",
        checks={"document_number": cd("012345678"), "birth_date": cd("900101")},
    )
    fields = extract_fields(MRZBlock(format=MRZFormat.TD1, lines=lines))

    assert fields.document_number == "012345678"
    assert fields.birth_date_raw == "900101"
    assert fields.surname == "OLIVO"
    assert fields.given_names == "ISIS BELEN"
    assert fields.nationality == "HND"


def test_short_lines_are_padded_before_slicing():
    block = MRZBlock(format=MRZFormat.TD1, lines=["I<HND", "01234"])
    fields = extract_fields(block)

    assert fields.document_number == "01234<<<<"
    assert fields.expiry_date_raw == "<<<<<<"
    assert fields.names_raw == "<" * 25


def test_unknown_block_resolves_by_width():
    narrow = MRZBlock(format=MRZFormat.UNKNOWN, lines=["A" * 30, "1" * 30])
    wide = MRZBlock(format=MRZFormat.UNKNOWN, lines=TD3_SPECIMEN)

    assert extract_fields(narrow).format == MRZFormat.TD1
    assert extract_fields(wide).format == MRZFormat.TD3


def test_td3_offsets():
    fields = extract_fields(MRZBlock(format=MRZFormat.TD3, lines=TD3_SPECIMEN))

    assert fields.document_type == "P<"
    assert fields.issuing_country == "UTO"
    assert fields.surname == "ERIKSSON"
    assert fields.given_names == "ANNA MARIA"
    assert fields.document_number == "L898902C3"
    assert fields.birth_date_raw == "740812"
    assert fields.sex == "F"
    assert fields.expiry_date_raw == "120415"
    assert fields.personal_number == "ZE184226B<<<<<"
    assert fields.personal_number_check == "1"
    assert fields.composite_check == "0"


@pytest.mark.parametrize("rules", [TD1_MRZ_RULES, TD3_MRZ_RULES], ids=["TD1", "TD3"])
def test_field_offsets_are_disjoint_and_in_bounds(rules):
    columns = {}
    for name, field in rules["fields"].items():
        start, end = field["pos"]
        assert 0 <= field["line"] < rules["lines"], name
        assert 0 <= start <= end < rules["width"], name
        for column in range(start, end + 1):
            key = (field["line"], column)
            assert key not in columns, f"{name} overlaps {columns.get(key)}"
            columns[key] = name
