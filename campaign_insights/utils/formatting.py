"""
Display helpers shared by the schema resolver, metadata extractor and metrics catalog.
"""

import re
from decimal import ROUND_HALF_UP, Decimal

# Words kept lowercase unless first or last
LOWERCASE_WORDS = frozenset({
    "a", "an", "and", "as", "at", "but", "by", "for", "if", "in", "nor",
    "of", "on", "or", "so", "the", "to", "up", "yet",
})

# Abbreviations always rendered uppercase
UPPERCASE_ABBREVIATIONS = frozenset({
    "tts", "ai", "api", "url", "html", "css", "js", "id", "ui", "ux",
    "seo", "cta", "roi", "kpi", "nps",
})


def to_title_case(text: str) -> str:
    """
    Convert an identifier or free text into display title case.

    Underscores become spaces, small connecting words stay lowercase inside
    the phrase, known abbreviations are uppercased and words already written
    in capitals (client acronyms such as "CCI") are preserved.

    Args:
        text: Raw text, e.g. "scene2_earning_details"

    Returns:
        Title-cased text, e.g. "Scene2 Earning Details"

    Examples:
        >>> to_title_case("back_to_home")
        'Back to Home'
        >>> to_title_case("CCI summer push")
        'CCI Summer Push'
    """
    words = [word for word in re.split(r"[\s_]+", text) if word]
    last = len(words) - 1

    result = []
    for index, word in enumerate(words):
        lower = word.lower()
        if lower in UPPERCASE_ABBREVIATIONS:
            result.append(lower.upper())
        elif len(word) > 1 and word.isupper():
            result.append(word)
        elif 0 < index < last and lower in LOWERCASE_WORDS:
            result.append(lower)
        else:
            result.append(lower[:1].upper() + lower[1:])
    return " ".join(result)


def round_half_up(value: float | Decimal, places: int = 2) -> float:
    """Round using commercial rounding rather than banker's rounding."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage(numerator: float, denominator: float, places: int = 2) -> float:
    """
    Express numerator as a percentage of denominator.

    A zero denominator yields exactly 0.0 so downstream formatting never
    sees NaN or infinity.
    """
    if not denominator:
        return 0.0
    return round_half_up(Decimal(str(numerator)) * 100 / Decimal(str(denominator)), places)


def format_number(value: int | float) -> str:
    """
    Format a count with dots as thousands separators (report convention).

    >>> format_number(1234567)
    '1.234.567'
    """
    return f"{int(value):,}".replace(",", ".")


def format_prefixed_percentage(value: float) -> str:
    """
    Render a rate with the percent sign in front, rounded to a whole number.

    Report text is assembled by concatenating this string after its label,
    so the prefix position must not change.

    >>> format_prefixed_percentage(66.67)
    '%67'
    """
    return f"%{int(round_half_up(value, 0))}"
