#!/usr/bin/env python3
"""
Article data model.

Represents a cached news article with its bias annotation.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Any, Optional
from dataclasses import dataclass

from dateutil import parser as date_parser

SCORE_MIN = -10.0
SCORE_MAX = 10.0


class SourceType(str, Enum):
    """Left/center/right label derived from a political score."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


def clamp_score(score: float) -> float:
    """Clamp a political score into [-10, 10]."""
    return max(SCORE_MIN, min(SCORE_MAX, float(score)))


def _parse_datetime_safe(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError):
        return None


@dataclass
class Article:
    """
    A news article as persisted in the ``articles`` table.

    ``external_id`` is the dedup key derived from the source URL; ``id`` is
    assigned by the store on insert.
    """
    external_id: str
    title: str
    url: str
    source: str
    description: str = ""
    content: str = ""
    source_type: SourceType = SourceType.CENTER
    published_at: Optional[datetime] = None
    image_url: Optional[str] = None
    ai_summary: Optional[str] = None
    political_score: Optional[float] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Clean and validate data after initialization."""
        self.title = (self.title or "").strip()
        self.url = (self.url or "").strip()
        self.source = (self.source or "").strip()
        self.description = (self.description or "").strip()
        self.content = (self.content or "").strip()
        self.source_type = SourceType(self.source_type)

        if self.political_score is not None:
            self.political_score = clamp_score(self.political_score)

    def to_record(self) -> Dict[str, Any]:
        """Columns written on insert (store-assigned fields excluded)."""
        return {
            'external_id': self.external_id,
            'title': self.title,
            'description': self.description,
            'content': self.content,
            'source': self.source,
            'source_type': self.source_type.value,
            'published_at': self.published_at.isoformat() if self.published_at else None,
            'url': self.url,
            'image_url': self.image_url,
            'ai_summary': self.ai_summary,
            'political_score': self.political_score,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        data = self.to_record()
        data['id'] = self.id
        data['created_at'] = self.created_at.isoformat() if self.created_at else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Article':
        """Create Article from a database row or API payload."""
        score = data.get('political_score')
        return cls(
            id=data.get('id'),
            external_id=data.get('external_id', ''),
            title=data.get('title') or '',
            description=data.get('description') or '',
            content=data.get('content') or '',
            source=data.get('source') or '',
            source_type=data.get('source_type') or SourceType.CENTER,
            published_at=_parse_datetime_safe(data.get('published_at')),
            url=data.get('url') or '',
            image_url=data.get('image_url'),
            ai_summary=data.get('ai_summary'),
            political_score=float(score) if score is not None else None,
            created_at=_parse_datetime_safe(data.get('created_at')),
        )

    def __repr__(self):
        return f"Article(title='{self.title[:50]}...', source='{self.source}', id='{self.id}')"
