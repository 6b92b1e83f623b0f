"""
Sex Field Normalizer
Converts the MRZ sex character to the value exposed on parsed identities
"""


def normalize_sex_field(sex_value):
    """
    Normalize the sex field of an MRZ

    Args:
        sex_value: Raw sex character sliced from the MRZ

    Returns:
        'M', 'F', or '' for filler, 'X' and anything unreadable
    """
    if not sex_value:
        return ''

    sex_str = str(sex_value).strip().upper()

    if sex_str in ['M', 'F']:
        return sex_str

    # '<' and 'X' both mean unspecified
    return ''
