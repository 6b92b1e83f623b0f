from models import MRZFormat
from mrz_detector import detect_mrz_block
from mrz_samples import TD3_SPECIMEN, build_td1_lines


def test_none_for_fewer_than_two_lines():
    assert detect_mrz_block([]) is None
    assert detect_mrz_block(["I<HND" + "<" * 25]) is None


def test_none_when_nothing_matches():
    assert detect_mrz_block(["HELLO", "WORLD", "FOO<BAR"]) is None


def test_td1_window():
    block = detect_mrz_block(build_td1_lines())

    assert block.format == MRZFormat.TD1
    assert block.start_index == 0
    assert len(block.lines) == 3
    assert all(len(line) == 30 for line in block.lines)


def test_first_td1_window_wins():
    lines = ["HEADER"] + build_td1_lines() + ["X" * 30]
    block = detect_mrz_block(lines)

    assert block.start_index == 1
    assert block.lines[0].startswith("I<HND")


def test_band_lines_are_padded_or_truncated():
    td1 = build_td1_lines()
    lines = [td1[0][:28], td1[1] + "<<<", td1[2][:27]]
    block = detect_mrz_block(lines)

    assert block.format == MRZFormat.TD1
    assert [len(line) for line in block.lines] == [30, 30, 30]
    assert block.lines[1] == td1[1]


def test_lines_outside_band_are_rejected():
    lines = ["A" * 26, "B" * 30, "C" * 30]
    assert detect_mrz_block(lines) is None


def test_td3_only_when_enabled():
    lines = ["P" * 44, "Q" * 44]

    assert detect_mrz_block(lines) is None

    block = detect_mrz_block(lines, allow_td3=True)
    assert block.format == MRZFormat.TD3
    assert all(len(line) == 44 for line in block.lines)


def test_td1_preferred_over_td3():
    lines = TD3_SPECIMEN + build_td1_lines()
    block = detect_mrz_block(lines, allow_td3=True)

    assert block.format == MRZFormat.TD1
    assert block.start_index == 2


def test_loose_fallback_pairs_names_and_digits():
    lines = ["I<HNDGARCIA<<MARIA", "NOISE", "0123456789HND"]
    block = detect_mrz_block(lines)

    assert block.format == MRZFormat.UNKNOWN
    assert block.start_index == 0
    assert block.lines[0] == "I<HNDGARCIA<<MARIA".ljust(30, "<")
    assert block.lines[1].startswith("0123456789HND")
    assert block.width == 30


def test_loose_fallback_keeps_ocr_order():
    lines = ["9001015F2501019", "ABC", "GARCIA<<MARIA"]
    block = detect_mrz_block(lines)

    assert block.start_index == 0
    assert block.lines[0].startswith("9001015F")
    assert block.lines[1].startswith("GARCIA<<MARIA")


def test_loose_fallback_uses_nearest_digit_line():
    lines = ["123456AAAA", "GARCIA<<MARIA", "X", "654321BBBB"]
    block = detect_mrz_block(lines)

    assert block.lines[0].startswith("123456AAAA")


def test_loose_fallback_width_follows_td3_setting():
    lines = ["P<UTOERIKSSON<<ANNA<MARIA<<<<<<<<<<<<<<<<<<<", "L898902C36UTO740812"]

    assert detect_mrz_block(lines).width == 30
    assert detect_mrz_block(lines, allow_td3=True).width == 44


def test_loose_fallback_requires_six_digit_run():
    assert detect_mrz_block(["GARCIA<<MARIA", "12345A789"]) is None
