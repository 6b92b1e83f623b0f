"""
MRZ Parser - Turns raw OCR lines into a checksum-validated identity
"""
import logging
from datetime import date
from typing import List, Optional

from models import ChecksumResult, MRZBlock, ParsedIdentity, ValidationStatus
from mrz_checksum import verify_fields
from mrz_dates import resolve_mrz_date
from mrz_detector import detect_mrz_block
from mrz_field_extractor import extract_fields, split_names
from mrz_postprocess import clean_mrz_lines
from sex_field_normalizer import normalize_sex_field

logger = logging.getLogger(__name__)

CHECK_LABELS = {
    "document_number": "document number",
    "birth_date": "birth date",
    "expiry_date": "expiry date",
}


def derive_status(checksums: ChecksumResult) -> ValidationStatus:
    """
    OK when every checked field passes, PARTIAL when at least one does,
    ERROR otherwise
    """
    if checksums.all_valid:
        return ValidationStatus.OK
    if checksums.any_valid:
        return ValidationStatus.PARTIAL
    return ValidationStatus.ERROR


def _checksum_messages(checksums: ChecksumResult) -> List[str]:
    messages = []
    for field_name, label in CHECK_LABELS.items():
        if not getattr(checksums, field_name):
            messages.append(f"Check digit mismatch: {label}")
    if checksums.personal_number is False:
        messages.append("Check digit mismatch: personal number (informational)")
    if checksums.composite is False:
        messages.append("Check digit mismatch: composite (informational)")
    return messages


def build_identity(block: MRZBlock, today: Optional[date] = None) -> ParsedIdentity:
    """
    Extract, validate and resolve one detected MRZ block

    Args:
        block: Block returned by detect_mrz_block
        today: Reference date for the century heuristic

    Returns:
        ParsedIdentity with checksum flags, status and messages filled in
    """
    fields = extract_fields(block)
    checksums = verify_fields(fields)
    fields.checksums = checksums

    surname, given_names, full_name = split_names(fields.names_raw)

    birth_date = resolve_mrz_date(fields.birth_date_raw, today)
    expiry_date = resolve_mrz_date(fields.expiry_date_raw, today)

    messages = _checksum_messages(checksums)
    if birth_date is None:
        messages.append(f"Unreadable birth date: {fields.birth_date_raw!r}")
    if expiry_date is None:
        messages.append(f"Unreadable expiry date: {fields.expiry_date_raw!r}")

    status = derive_status(checksums)

    identity = ParsedIdentity(
        document_number=fields.document_number.replace('<', ''),
        full_name=full_name,
        surname=surname,
        given_names=given_names,
        birth_date=birth_date,
        expiry_date=expiry_date,
        sex=normalize_sex_field(fields.sex),
        nationality=fields.nationality.replace('<', ''),
        issuing_country=fields.issuing_country.replace('<', ''),
        document_type=fields.document_type.replace('<', ''),
        format=fields.format,
        raw_lines=list(block.lines),
        checksums=checksums,
        status=status,
        messages=messages,
    )

    logger.info(
        f"Parsed {identity.format.value} MRZ: status={status.value}, "
        f"{checksums.passed_count}/3 check digits valid"
    )
    return identity


def parse_mrz(raw_lines: List[str], allow_td3: bool = False,
              today: Optional[date] = None) -> Optional[ParsedIdentity]:
    """
    Normalize, detect and parse raw OCR lines without any image work

    Args:
        raw_lines: OCR output lines in reading order
        allow_td3: Accept passport (2 x 44) blocks
        today: Reference date for the century heuristic

    Returns:
        ParsedIdentity, or None when no MRZ block is found
    """
    lines = clean_mrz_lines(raw_lines)
    block = detect_mrz_block(lines, allow_td3=allow_td3)
    if block is None:
        logger.debug(f"No MRZ block in {len(lines)} normalized lines")
        return None
    return build_identity(block, today)
