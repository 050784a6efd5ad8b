#!/usr/bin/env python3
"""
Analysis result data models.

Political scores coming back from the LLM are tagged with where they came
from: a successfully parsed model answer, or the heuristic fallback.
"""

from typing import Dict, Any, Union
from dataclasses import dataclass

from core.models.article import clamp_score


@dataclass(frozen=True)
class ParsedScore:
    """Score parsed from the model response."""
    value: float

    source = "llm"


@dataclass(frozen=True)
class FallbackScore:
    """Heuristic score used because the model response was unusable."""
    value: float
    reason: str

    source = "heuristic"

    def __post_init__(self):
        object.__setattr__(self, 'value', clamp_score(self.value))


ScoreResult = Union[ParsedScore, FallbackScore]


@dataclass
class ArticleAnalysis:
    """AI analysis of one article."""
    article_id: str
    summary: str
    score: ScoreResult

    @property
    def political_score(self) -> float:
        return self.score.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            'summary': self.summary,
            'politicalScore': self.score.value,
            'scoreSource': self.score.source,
        }
