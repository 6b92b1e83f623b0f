"""
MRZ Field Extractor - Slices fixed-width fields out of a detected MRZ block
"""
import logging
import re
from typing import Optional, Tuple

from models import FieldSet, MRZBlock, MRZFormat
from mrz_postprocess import fix_numeric_field, pad_mrz_line
from mrz_rules import get_rules

logger = logging.getLogger(__name__)


def split_names(names_raw: str) -> Tuple[str, str, str]:
    """
    Split an MRZ names field into surname, given names and full name

    'GARCIA<LOPEZ<<MARIA<JOSE<' -> ('GARCIA LOPEZ', 'MARIA JOSE', 'MARIA JOSE GARCIA LOPEZ')

    When there is no '<<' separator the whole field is kept as one name:
    it goes to the surname and to the full name, given names stay empty.
    """
    def _clean(segment: str) -> str:
        return re.sub(r'<+', ' ', segment).strip()

    if '<<' in names_raw:
        surname_raw, given_raw = names_raw.split('<<', 1)
        surname = _clean(surname_raw)
        given_names = _clean(given_raw)
        full_name = ' '.join(part for part in (given_names, surname) if part)
        return surname, given_names, full_name

    single = _clean(names_raw)
    return single, '', single


def extract_fields(block: MRZBlock, mrz_format: Optional[MRZFormat] = None) -> FieldSet:
    """
    Extract every field of the block using the offset table of its format

    Args:
        block: Detected MRZ block
        mrz_format: Override for block.format (UNKNOWN resolves by line width)

    Returns:
        FieldSet with numeric fields already corrected for letter/digit confusions
    """
    mrz_format = mrz_format or block.format
    rules = get_rules(mrz_format, block.width)
    width = rules["width"]

    resolved_format = mrz_format
    if mrz_format == MRZFormat.UNKNOWN:
        resolved_format = MRZFormat.TD3 if width == 44 else MRZFormat.TD1

    lines = [pad_mrz_line(line, width) for line in block.lines]

    values = {}
    for field_name, rule in rules["fields"].items():
        line_index = rule["line"]
        if line_index >= len(lines):
            values[field_name] = ""
            continue

        start, end = rule["pos"]
        value = lines[line_index][start:end + 1]

        if rule["numeric"]:
            value = fix_numeric_field(value)

        values[field_name] = value

    surname, given_names, _ = split_names(values.get("names_raw", ""))

    logger.debug(f"Extracted {resolved_format.value} fields: {values}")

    return FieldSet(
        format=resolved_format,
        surname=surname,
        given_names=given_names,
        **values
    )
