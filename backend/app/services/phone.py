import re
from typing import Optional

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(value: Optional[str]) -> Optional[str]:
    """Reduce a phone string to bare digits, dropping a leading US country code.

    "+1 (614) 555-0101" -> "6145550101". Returns None when no digits remain.
    Applying it to its own output is a no-op.
    """
    if not value:
        return None
    digits = _NON_DIGITS.sub("", str(value))
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    return digits or None
