"""
ICAO 9303 check digit computation and verification
"""
import logging
from typing import Optional

from models import ChecksumResult, FieldSet, MRZFormat

logger = logging.getLogger(__name__)

WEIGHTS = (7, 3, 1)


def char_value(char: str) -> int:
    """
    Numeric value of one MRZ character

    '<' -> 0, '0'-'9' -> 0-9, 'A'-'Z' -> 10-35

    Raises:
        ValueError: If the character is outside the MRZ alphabet
    """
    if char == '<':
        return 0
    if '0' <= char <= '9':
        return ord(char) - ord('0')
    if 'A' <= char <= 'Z':
        return ord(char) - ord('A') + 10
    raise ValueError(f"Invalid MRZ character: {char!r}")


def compute_check_digit(data: str) -> int:
    """
    Weighted sum of character values (weights 7, 3, 1 repeating) modulo 10

    Args:
        data: Field content in the MRZ alphabet

    Returns:
        Check digit 0-9

    Raises:
        ValueError: If data contains a character outside the MRZ alphabet
    """
    total = 0
    for i, char in enumerate(data):
        total += char_value(char) * WEIGHTS[i % 3]
    return total % 10


def verify_digit(field: str, check_char: str) -> bool:
    """
    True iff check_char is a digit equal to the computed check digit of field

    A non-digit check character, or a field with characters outside the
    MRZ alphabet, never verifies.
    """
    if not check_char or len(check_char) != 1 or not check_char.isdigit():
        return False
    try:
        return compute_check_digit(field) == int(check_char)
    except ValueError:
        return False


def _verify_personal_number(field: str, check_char: str) -> bool:
    # An empty personal number may carry a filler instead of a digit
    if check_char == '<' and not field.strip('<'):
        return True
    return verify_digit(field, check_char)


def _composite_data(fields: FieldSet) -> Optional[str]:
    """TD3 line 2 columns 0-9, 13-19 and 21-42 in field order"""
    parts = [
        fields.document_number, fields.document_number_check,
        fields.birth_date_raw, fields.birth_date_check,
        fields.expiry_date_raw, fields.expiry_date_check,
        fields.personal_number, fields.personal_number_check,
    ]
    data = ''.join(parts)
    if len(data) != 39:
        return None
    return data


def verify_fields(fields: FieldSet) -> ChecksumResult:
    """
    Run every check digit applicable to the field set

    Document number, birth date and expiry date are checked for every format.
    TD3 blocks additionally get the personal number and composite checks,
    which are informational and do not affect the validation status.

    Args:
        fields: Extracted (and numeric-corrected) fields

    Returns:
        ChecksumResult with one flag per check
    """
    result = ChecksumResult(
        document_number=verify_digit(fields.document_number, fields.document_number_check),
        birth_date=verify_digit(fields.birth_date_raw, fields.birth_date_check),
        expiry_date=verify_digit(fields.expiry_date_raw, fields.expiry_date_check),
    )

    if fields.format == MRZFormat.TD3:
        result.personal_number = _verify_personal_number(
            fields.personal_number, fields.personal_number_check
        )
        composite = _composite_data(fields)
        result.composite = (
            composite is not None and verify_digit(composite, fields.composite_check)
        )

    logger.debug(
        "Check digits: document=%s birth=%s expiry=%s",
        result.document_number, result.birth_date, result.expiry_date
    )
    return result
