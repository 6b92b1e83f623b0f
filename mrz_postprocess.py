"""
MRZ post-processing utilities to clean raw OCR lines

Line cleaning never swaps letters for digits: names legitimately contain
O, I, S, B... Digit correction lives in fix_numeric_field and is applied by
the field extractor to numeric fields only.
"""
import re
import unicodedata
from typing import List, Optional

FILLER = '<'

MRZ_ALPHABET = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789<")

# Glyphs OCR engines return in place of the '<' filler
FILLER_LOOKALIKES = frozenset(
    '|'        # pipe
    'ǀ'   # latin letter dental click
    '‖'   # double vertical line
    '¦'   # broken bar
    '‚'   # single low-9 quotation mark
    '„'   # double low-9 quotation mark
    '“'   # left double quotation mark
    '‘'   # left single quotation mark
    '‹'   # single left-pointing angle quotation mark
    '«'   # left-pointing double angle quotation mark
    '〈'   # left-pointing angle bracket
    '⟨'   # mathematical left angle bracket
    '〈'   # CJK left angle bracket
)

# Letter -> digit confusions, for numeric fields only
NUMERIC_CORRECTIONS = str.maketrans({
    'O': '0',
    'Q': '0',
    'D': '0',
    'I': '1',
    'L': '1',
    'Z': '2',
    'S': '5',
    'B': '8',
    'G': '6',
})


def normalize_mrz_line(line: Optional[str], width: Optional[int] = None) -> str:
    """
    Clean one OCR line into the MRZ alphabet {A-Z, 0-9, <}

    Args:
        line: Raw OCR line (may be None or empty)
        width: Optional target width; pads with '<' or truncates

    Returns:
        Normalized line (possibly empty)
    """
    if not line:
        return FILLER * width if width else ""

    # NFKC folds fullwidth forms such as U+FF1C into '<'
    text = unicodedata.normalize('NFKC', line).strip().upper()

    cleaned = []
    for char in text:
        if char in MRZ_ALPHABET:
            cleaned.append(char)
        elif char in FILLER_LOOKALIKES or char.isspace():
            cleaned.append(FILLER)
        else:
            # Strip accents (É -> E) before giving up on the character
            base = unicodedata.normalize('NFKD', char)[0]
            if base in MRZ_ALPHABET:
                cleaned.append(base)

    result = ''.join(cleaned)

    if width is not None:
        result = pad_mrz_line(result, width)

    return result


def pad_mrz_line(line: str, width: int) -> str:
    """Right-pad with filler or truncate to exactly width characters"""
    return line[:width].ljust(width, FILLER)


def fix_numeric_field(value: str) -> str:
    """
    Replace letters commonly misread for digits (O->0, I->1, S->5, ...)

    Only meant for fields that can hold nothing but digits and filler:
    dates, check digits and numeric document numbers.
    """
    return value.translate(NUMERIC_CORRECTIONS)


def split_ocr_text(text: Optional[str]) -> List[str]:
    """
    Split raw OCR output into stripped, non-empty lines

    Args:
        text: Multi-line text returned by the OCR engine

    Returns:
        List of raw lines in reading order
    """
    if not text:
        return []

    text = text.replace('\r', '\n')
    text = re.sub(r'\n{2,}', '\n', text)

    return [line.strip() for line in text.split('\n') if line.strip()]


def clean_mrz_lines(raw_lines: List[str]) -> List[str]:
    """
    Normalize a list of raw OCR lines and drop the ones that end up empty

    Args:
        raw_lines: Lines as produced by split_ocr_text

    Returns:
        Normalized, non-empty lines in the original order
    """
    cleaned = []
    for line in raw_lines:
        normalized = normalize_mrz_line(line)
        if normalized:
            cleaned.append(normalized)
    return cleaned
