"""
Data models for MRZ decoding and scan results
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator


class MRZFormat(str, Enum):
    """MRZ layout variants"""
    TD1 = "TD1"          # 3 lines x 30 chars, national ID cards
    TD3 = "TD3"          # 2 lines x 44 chars, passports
    UNKNOWN = "UNKNOWN"  # 2-line block synthesized by the loose heuristic


class ValidationStatus(str, Enum):
    OK = "OK"
    PARTIAL = "PARTIAL"
    ERROR = "ERROR"


class ScanCode(str, Enum):
    OK = "ok"
    PARTIAL = "partial"
    NO_MRZ_DETECTED = "no_mrz_detected"
    NO_IMAGE = "no_image"


class MRZBlock(BaseModel):
    """Contiguous normalized MRZ lines located in the OCR output"""
    format: MRZFormat
    lines: List[str]
    start_index: int = 0

    @model_validator(mode="after")
    def check_lines(self):
        if len(self.lines) not in (2, 3):
            raise ValueError(f"MRZ block must have 2 or 3 lines, got {len(self.lines)}")
        widths = {len(line) for line in self.lines}
        if len(widths) != 1:
            raise ValueError(f"MRZ block lines must share one width, got {sorted(widths)}")
        return self

    @property
    def width(self) -> int:
        return len(self.lines[0])


class ChecksumResult(BaseModel):
    """Check digit outcome per checked field"""
    document_number: bool = False
    birth_date: bool = False
    expiry_date: bool = False
    # TD3 only, informational
    personal_number: Optional[bool] = None
    composite: Optional[bool] = None

    @property
    def passed_count(self) -> int:
        return sum([self.document_number, self.birth_date, self.expiry_date])

    @property
    def all_valid(self) -> bool:
        return self.passed_count == 3

    @property
    def any_valid(self) -> bool:
        return self.passed_count > 0


class FieldSet(BaseModel):
    """Fixed-width fields sliced out of an MRZ block"""
    format: MRZFormat
    document_type: str = ""
    issuing_country: str = ""
    names_raw: str = ""
    surname: str = ""
    given_names: str = ""
    document_number: str = ""
    document_number_check: str = ""
    nationality: str = ""
    birth_date_raw: str = ""
    birth_date_check: str = ""
    sex: str = ""
    expiry_date_raw: str = ""
    expiry_date_check: str = ""
    optional_data: str = ""
    personal_number: str = ""
    personal_number_check: str = ""
    composite_check: str = ""
    checksums: Optional[ChecksumResult] = None


class ParsedIdentity(BaseModel):
    """Structured identity recovered from one MRZ block"""
    document_number: str = ""
    full_name: str = ""
    surname: str = ""
    given_names: str = ""
    birth_date: Optional[str] = None
    expiry_date: Optional[str] = None
    sex: str = ""
    nationality: str = ""
    issuing_country: str = ""
    document_type: str = ""
    format: MRZFormat = MRZFormat.UNKNOWN
    raw_lines: List[str] = Field(default_factory=list)
    checksums: ChecksumResult = Field(default_factory=ChecksumResult)
    status: ValidationStatus = ValidationStatus.ERROR
    messages: List[str] = Field(default_factory=list)


class Validation(BaseModel):
    status: Optional[ValidationStatus] = None
    messages: List[str] = Field(default_factory=list)


class ScanResult(BaseModel):
    """Outcome of a multi-strategy scan"""
    code: ScanCode
    data: Optional[ParsedIdentity] = None
    validation: Validation = Field(default_factory=Validation)
    strategy: str = ""
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())
    raw_ocr: str = ""
