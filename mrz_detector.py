"""
MRZ Detector - Locates the machine readable zone inside OCR output lines
"""
import logging
import re
from typing import List, Optional

from config import config
from models import MRZBlock, MRZFormat
from mrz_postprocess import pad_mrz_line

logger = logging.getLogger(__name__)

# Acceptance bands around the nominal widths (30 and 44)
TD1_LENGTH_BAND = (27, 35)
TD3_LENGTH_BAND = (40, 50)

NAME_SEPARATOR = '<<'
DIGIT_RUN = re.compile(r'[0-9]{6}')


def _in_band(line: str, band) -> bool:
    low, high = band
    return low <= len(line) <= high


def _find_window(lines: List[str], size: int, band) -> Optional[int]:
    """Index of the first run of `size` consecutive lines inside the band"""
    for i in range(len(lines) - size + 1):
        if all(_in_band(line, band) for line in lines[i:i + size]):
            return i
    return None


def _loose_fallback(lines: List[str], allow_td3: bool) -> Optional[MRZBlock]:
    """
    Pair a line holding the '<<' name separator with the nearest other line
    holding at least 6 consecutive digits

    The pair keeps its OCR order and is padded to a common width: 44 when TD3
    is enabled and either line looks passport-sized, otherwise 30.
    """
    for i, line in enumerate(lines):
        if NAME_SEPARATOR not in line:
            continue

        candidates = [
            j for j, other in enumerate(lines)
            if j != i and DIGIT_RUN.search(other)
        ]
        if not candidates:
            continue

        j = min(candidates, key=lambda idx: (abs(idx - i), idx))
        first, second = min(i, j), max(i, j)
        pair = [lines[first], lines[second]]

        if allow_td3 and any(len(p) >= TD3_LENGTH_BAND[0] for p in pair):
            width = config.TD3_LINE_LENGTH
        else:
            width = config.TD1_LINE_LENGTH

        logger.debug(f"Loose MRZ fallback paired lines {first} and {second} (width {width})")
        return MRZBlock(
            format=MRZFormat.UNKNOWN,
            lines=[pad_mrz_line(p, width) for p in pair],
            start_index=first,
        )

    return None


def detect_mrz_block(lines: List[str], allow_td3: bool = False) -> Optional[MRZBlock]:
    """
    Find the MRZ block in a list of normalized lines

    Args:
        lines: Normalized OCR lines (any length)
        allow_td3: Also accept 2 x 44 passport windows

    Returns:
        MRZBlock with lines padded/truncated to the format width, or None when
        nothing plausible is found (a normal outcome for unreadable photos)
    """
    if not lines or len(lines) < 2:
        return None

    start = _find_window(lines, config.TD1_TOTAL_LINES, TD1_LENGTH_BAND)
    if start is not None:
        logger.debug(f"TD1 window found at line {start}")
        window = lines[start:start + config.TD1_TOTAL_LINES]
        return MRZBlock(
            format=MRZFormat.TD1,
            lines=[pad_mrz_line(line, config.TD1_LINE_LENGTH) for line in window],
            start_index=start,
        )

    if allow_td3:
        start = _find_window(lines, config.TD3_TOTAL_LINES, TD3_LENGTH_BAND)
        if start is not None:
            logger.debug(f"TD3 window found at line {start}")
            window = lines[start:start + config.TD3_TOTAL_LINES]
            return MRZBlock(
                format=MRZFormat.TD3,
                lines=[pad_mrz_line(line, config.TD3_LINE_LENGTH) for line in window],
                start_index=start,
            )

    return _loose_fallback(lines, allow_td3)
