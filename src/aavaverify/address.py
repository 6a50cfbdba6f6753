"""Address normalisation and similarity scoring."""

from rapidfuzz import fuzz

from aavaverify.models import AddressParts


def normalise(parts: AddressParts) -> str:
    """
    Join the non-blank address fields into one comparable string.

    Fields are taken in the order house number, street, area, district,
    pincode; each is trimmed and blanks are skipped. Case is preserved.
    """
    components = (
        parts.house_no,
        parts.street,
        parts.area,
        parts.district,
        parts.pincode,
    )
    return ", ".join(c.strip() for c in components if c and c.strip())


def similarity(a: str, b: str) -> float:
    """
    Score how alike two address strings are (0.0-1.0).

    Uses rapidfuzz's normalised Indel ratio on lower-cased input, so the
    score is symmetric, 1.0 for identical non-empty strings and 0.0 when the
    strings share no characters. An empty input always scores 0.0.
    """
    first, second = a.lower(), b.lower()
    if not first or not second:
        return 0.0
    return fuzz.ratio(first, second) / 100.0
