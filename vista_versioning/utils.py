"""
Utility functions for VISTA versioning.

Contains general-purpose helpers shared by the version store and the
version engine.
"""

import re
from typing import Optional

_INT_PATTERN = re.compile(r'[+-]?[0-9]+')


def parse_int(value: Optional[str]) -> Optional[int]:
    """
    Parse a string as a base-10 integer.
    
    Surrounding whitespace is ignored. Anything other than an optional sign
    followed by ASCII digits (underscores, decimals, unicode digits) is
    rejected.
    
    Args:
        value: The text to parse, or None
        
    Returns:
        Optional[int]: The parsed integer, or None if the text is not an integer
    """
    if value is None:
        return None
    text = value.strip()
    if not _INT_PATTERN.fullmatch(text):
        return None
    try:
        return int(text)
    except ValueError:
        # Longer than the interpreter allows for str to int conversion
        return None
