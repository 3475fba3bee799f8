"""
Match Confidence

Compares the address the user typed with the address the lookup API
resolved, and scores how likely they are to be the same property.
"""

import re
from typing import List, Optional

from .base import CalculatorResult, clamp, make_result, round_half_up

CALCULATOR_ID = "match-confidence"
CALCULATOR_NAME = "Match Confidence"

POSTCODE_PATTERN = re.compile(r"\b[A-Z]{1,2}\d{1,2}[A-Z]?\s?\d[A-Z]{2}\b", re.IGNORECASE)

POSTCODE_EXACT_POINTS = 40
POSTCODE_AREA_POINTS = 20
WORD_OVERLAP_POINTS = 60
MIN_TOKEN_LENGTH = 3


def extract_postcode(address: str) -> Optional[str]:
    """Return the first UK postcode in address, upper-cased without spaces."""
    match = POSTCODE_PATTERN.search(address)
    if not match:
        return None
    return re.sub(r"\s+", "", match.group(0)).upper()


def postcode_area(postcode: str) -> str:
    """
    Outward code of a compact postcode ("SW1A1AA" -> "SW1A").

    The inward code is always three characters, so the outward code is
    whatever precedes it (2-4 characters).
    """
    return postcode[:-3]


def _tokens(address: str) -> List[str]:
    return [word for word in address.split() if len(word) >= MIN_TOKEN_LENGTH]


def calculate_match_confidence(
    user_typed_address: Optional[str],
    api_address: Optional[str],
) -> CalculatorResult[int]:
    """
    Score address agreement on a 0-100 scale.

    Exact match (ignoring case and surrounding whitespace) scores 100.
    Otherwise postcode agreement contributes up to 40 points and word
    overlap up to 60.
    """
    if not user_typed_address or not api_address:
        return make_result(
            CALCULATOR_ID,
            CALCULATOR_NAME,
            0,
            ["Insufficient data to calculate match confidence"],
            ["Both user input and API result are required"],
        )

    user = user_typed_address.lower().strip()
    api = api_address.lower().strip()

    if user == api:
        return make_result(
            CALCULATOR_ID,
            CALCULATOR_NAME,
            100,
            ["Exact match between user input and API result"],
            ["Addresses are identical"],
        )

    score = 0
    bullets = []
    assumptions = []

    user_postcode = extract_postcode(user)
    api_postcode = extract_postcode(api)
    if user_postcode and api_postcode:
        if user_postcode == api_postcode:
            score += POSTCODE_EXACT_POINTS
            bullets.append("Postcode matches exactly")
        elif postcode_area(user_postcode) == postcode_area(api_postcode):
            score += POSTCODE_AREA_POINTS
            bullets.append("Postcode area matches")

    user_words = _tokens(user)
    api_words = _tokens(api)
    api_vocabulary = set(api_words)
    common = [word for word in user_words if word in api_vocabulary]
    denominator = max(len(user_words), len(api_words))
    if denominator:
        score += round_half_up(len(common) / denominator * WORD_OVERLAP_POINTS)

    if common:
        bullets.append(f"{len(common)} matching words found")

    score = int(clamp(score))

    if score < 50:
        assumptions.append("Low confidence: addresses may not refer to the same property")
    elif score < 80:
        assumptions.append(
            "Moderate confidence: addresses likely match but may have formatting differences"
        )
    else:
        assumptions.append("High confidence: addresses are very similar")

    return make_result(CALCULATOR_ID, CALCULATOR_NAME, score, bullets, assumptions)
