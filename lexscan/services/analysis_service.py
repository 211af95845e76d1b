"""Keyword-based document classification and risk scoring.

Both are plain occurrence counts over the lowercased text. They are cheap
stand-ins for real analysis and the arithmetic is kept stable so scores stay
comparable across releases.
"""
import math

UNKNOWN_DOCUMENT_TYPE = "Unknown"

# Order matters: on a tie the earlier label wins.
DOCUMENT_TYPE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "NDA": ("non-disclosure", "confidential"),
    "Employment Agreement": ("employment", "employee"),
    "Service Agreement": ("services", "contractor"),
    "License Agreement": ("license", "licensing"),
}

RISK_KEYWORDS: tuple[str, ...] = ("indemnification", "liability", "damages", "termination")

# Occurrences per keyword that count as maximum risk.
RISK_SATURATION_PER_KEYWORD = 3


def count_occurrences(text: str, keywords: tuple[str, ...]) -> int:
    """Total case-insensitive, non-overlapping substring matches of all keywords."""
    lowered = text.lower()
    return sum(lowered.count(keyword) for keyword in keywords)


def score_document_types(text: str) -> dict[str, int]:
    return {label: count_occurrences(text, keywords) for label, keywords in DOCUMENT_TYPE_KEYWORDS.items()}


def classify_document(text: str) -> str:
    best_label = UNKNOWN_DOCUMENT_TYPE
    best_score = 0
    for label, score in score_document_types(text).items():
        if score > best_score:
            best_label, best_score = label, score
    return best_label


def calculate_risk_score(text: str) -> int:
    """Map risk keyword density to an integer in [0, 100]."""
    ceiling = len(RISK_KEYWORDS) * RISK_SATURATION_PER_KEYWORD
    ratio = count_occurrences(text, RISK_KEYWORDS) / ceiling
    # Round half up, not Python's round-half-to-even.
    return min(math.floor(ratio * 100 + 0.5), 100)
