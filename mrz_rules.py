"""
MRZ field layout rules for national ID (TD1) and passport (TD3) documents

"line" is the 0-based line index, "pos" is an inclusive (start, end) column range.
Fields flagged "numeric" may receive letter->digit OCR correction after slicing.
"""
from models import MRZFormat

TD1_MRZ_RULES = {
    "width": 30,
    "lines": 3,
    "fields": {
        "document_type": {
            "line": 0, "pos": (0, 1), "numeric": False,
            "description": "Document type, 'I' followed by filler or a subtype letter"
        },
        "issuing_country": {
            "line": 0, "pos": (2, 4), "numeric": False,
            "description": "Issuing state code (ISO 3166-1 alpha-3)"
        },
        "names_raw": {
            "line": 0, "pos": (5, 29), "numeric": False,
            "description": "Surnames, then '<<', then given names separated by '<'"
        },
        "document_number": {
            "line": 1, "pos": (0, 8), "numeric": True,
            "description": "Document number"
        },
        "document_number_check": {
            "line": 1, "pos": (9, 9), "numeric": True,
            "description": "Check digit for document number"
        },
        "nationality": {
            "line": 1, "pos": (10, 12), "numeric": False,
            "description": "Nationality code (ISO 3166-1 alpha-3)"
        },
        "birth_date_raw": {
            "line": 1, "pos": (13, 18), "numeric": True,
            "description": "Date of birth in YYMMDD format"
        },
        "birth_date_check": {
            "line": 1, "pos": (19, 19), "numeric": True,
            "description": "Check digit for birth date"
        },
        "sex": {
            "line": 1, "pos": (20, 20), "numeric": False,
            "description": "Sex: M, F or filler"
        },
        "expiry_date_raw": {
            "line": 1, "pos": (21, 26), "numeric": True,
            "description": "Expiry date in YYMMDD format"
        },
        "expiry_date_check": {
            "line": 1, "pos": (27, 27), "numeric": True,
            "description": "Check digit for expiry date"
        },
        "optional_data": {
            "line": 1, "pos": (28, 29), "numeric": False,
            "description": "Optional data"
        },
    }
}

# Experimental: passport numbers may legitimately contain letters, so only
# dates and check digits are numeric here.
TD3_MRZ_RULES = {
    "width": 44,
    "lines": 2,
    "fields": {
        "document_type": {
            "line": 0, "pos": (0, 1), "numeric": False,
            "description": "Document type, usually 'P' for passport"
        },
        "issuing_country": {
            "line": 0, "pos": (2, 4), "numeric": False,
            "description": "Issuing country code (ISO 3166-1 alpha-3)"
        },
        "names_raw": {
            "line": 0, "pos": (5, 43), "numeric": False,
            "description": "Surname first, then '<<', then given names separated by '<'"
        },
        "document_number": {
            "line": 1, "pos": (0, 8), "numeric": False,
            "description": "Passport number"
        },
        "document_number_check": {
            "line": 1, "pos": (9, 9), "numeric": True,
            "description": "Check digit for passport number"
        },
        "nationality": {
            "line": 1, "pos": (10, 12), "numeric": False,
            "description": "Nationality code (ISO 3166-1 alpha-3)"
        },
        "birth_date_raw": {
            "line": 1, "pos": (13, 18), "numeric": True,
            "description": "Date of birth in YYMMDD format"
        },
        "birth_date_check": {
            "line": 1, "pos": (19, 19), "numeric": True,
            "description": "Check digit for birth date"
        },
        "sex": {
            "line": 1, "pos": (20, 20), "numeric": False,
            "description": "Sex: M = male, F = female, X or filler = unspecified"
        },
        "expiry_date_raw": {
            "line": 1, "pos": (21, 26), "numeric": True,
            "description": "Passport expiry date in YYMMDD format"
        },
        "expiry_date_check": {
            "line": 1, "pos": (27, 27), "numeric": True,
            "description": "Check digit for expiry date"
        },
        "personal_number": {
            "line": 1, "pos": (28, 41), "numeric": False,
            "description": "Optional personal number or national ID"
        },
        "personal_number_check": {
            "line": 1, "pos": (42, 42), "numeric": False,
            "description": "Check digit for personal number, filler allowed when empty"
        },
        "composite_check": {
            "line": 1, "pos": (43, 43), "numeric": True,
            "description": "Overall check digit for line 2 fields combined"
        },
    }
}

MRZ_RULES = {
    MRZFormat.TD1: TD1_MRZ_RULES,
    MRZFormat.TD3: TD3_MRZ_RULES,
}


def get_rules(mrz_format: MRZFormat, width: int = 0) -> dict:
    """
    Return the layout rules for a format

    UNKNOWN blocks are resolved by their line width (44 -> TD3, otherwise TD1).
    """
    if mrz_format == MRZFormat.UNKNOWN:
        return TD3_MRZ_RULES if width == TD3_MRZ_RULES["width"] else TD1_MRZ_RULES
    return MRZ_RULES[mrz_format]
