"""Approximate token counting for usage reporting."""

import math
import re

# Roughly 4 characters per token for Latin text, 1.5-2 for Chinese
ASCII_CHARS_PER_TOKEN = 4.0
CJK_CHARS_PER_TOKEN = 1.8

# CJK unified ideographs, U+4E00 to U+9FA5
_CJK_PATTERN = re.compile(r"[一-龥]")


def estimate_tokens(text: str) -> int:
    """Estimate the token count of ``text``.

    Any CJK ideograph switches the whole string to the denser ratio.
    """
    if not text:
        return 0
    chars_per_token = (
        CJK_CHARS_PER_TOKEN if _CJK_PATTERN.search(text) else ASCII_CHARS_PER_TOKEN
    )
    return math.ceil(len(text) / chars_per_token)
