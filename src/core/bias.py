#!/usr/bin/env python3
"""
Heuristic political-bias scoring.

Used when an article has not been analyzed by the LLM yet, and as the
fallback when the LLM answer cannot be parsed. Scores run from -10 (liberal)
to +10 (conservative).
"""

import logging
from typing import Dict, Optional, Tuple

from core.models.article import SourceType, clamp_score

logger = logging.getLogger(__name__)

SOURCE_BIAS: Dict[str, float] = {
    "CNN": -6.5,
    "MSNBC": -7.8,
    "New York Times": -5.2,
    "Washington Post": -4.8,
    "NPR": -3.5,
    "BBC": -1.2,
    "Reuters": 0.3,
    "Associated Press": 0.1,
    "Wall Street Journal": 3.8,
    "Fox News": 7.2,
    "Breitbart": 8.5,
    "Daily Wire": 7.9,
}

LIBERAL_KEYWORDS: Tuple[str, ...] = (
    "progressive",
    "equity",
    "climate change",
    "social justice",
    "diversity",
    "inclusion",
)

CONSERVATIVE_KEYWORDS: Tuple[str, ...] = (
    "traditional",
    "freedom",
    "liberty",
    "tax cuts",
    "small government",
    "family values",
)

KEYWORD_WEIGHT = 0.5
LEANING_THRESHOLD = 3.0


def heuristic_political_score(source: Optional[str], title: Optional[str], description: Optional[str]) -> float:
    """
    Score an article from its source name and keywords.

    Args:
        source: Source display name as reported by the feed
        title: Article title
        description: Article description

    Returns:
        Score clamped to [-10, 10]
    """
    score = SOURCE_BIAS.get(source or "", 0.0)

    text = f"{title or ''} {description or ''}".lower()

    for keyword in LIBERAL_KEYWORDS:
        if keyword in text:
            score -= KEYWORD_WEIGHT

    for keyword in CONSERVATIVE_KEYWORDS:
        if keyword in text:
            score += KEYWORD_WEIGHT

    return clamp_score(score)


def source_type_for(score: float) -> SourceType:
    """Derive the left/center/right label (threshold at +/-3)."""
    if score <= -LEANING_THRESHOLD:
        return SourceType.LEFT
    if score >= LEANING_THRESHOLD:
        return SourceType.RIGHT
    return SourceType.CENTER
