#!/usr/bin/env python3
"""
Vote and guest data models.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Any, Optional
from dataclasses import dataclass

from core.models.article import _parse_datetime_safe


class VoteType(str, Enum):
    UP = "up"
    DOWN = "down"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional['VoteType']:
        """Parse a client vote value; None and empty mean "no vote"."""
        if value is None or value == "":
            return None
        return cls(value)


@dataclass
class VoteCounts:
    """Aggregate vote counts for one article, derived on each read."""
    upvotes: int = 0
    downvotes: int = 0

    @classmethod
    def from_vote_types(cls, vote_types) -> 'VoteCounts':
        counts = cls()
        for vote_type in vote_types:
            if vote_type == VoteType.UP.value:
                counts.upvotes += 1
            elif vote_type == VoteType.DOWN.value:
                counts.downvotes += 1
        return counts

    def to_dict(self) -> Dict[str, int]:
        return {'upvotes': self.upvotes, 'downvotes': self.downvotes}


@dataclass
class Vote:
    """A row of ``article_votes``: one per (article, guest user)."""
    id: str
    article_id: str
    user_id: str
    vote_type: VoteType
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Vote':
        return cls(
            id=data['id'],
            article_id=data['article_id'],
            user_id=data['user_id'],
            vote_type=VoteType(data['vote_type']),
            created_at=_parse_datetime_safe(data.get('created_at')),
            updated_at=_parse_datetime_safe(data.get('updated_at')),
        )


@dataclass
class GuestUser:
    """Anonymous visitor identified by a client-held token."""
    id: str
    guest_id: str
    created_at: Optional[datetime] = None
    last_active_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GuestUser':
        return cls(
            id=data['id'],
            guest_id=data['guest_id'],
            created_at=_parse_datetime_safe(data.get('created_at')),
            last_active_at=_parse_datetime_safe(data.get('last_active_at')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'guestId': self.guest_id,
            'lastActiveAt': self.last_active_at.isoformat() if self.last_active_at else None,
        }


@dataclass
class VoteOutcome:
    """Result of casting a vote: fresh counts plus the guest's resulting vote."""
    votes: VoteCounts
    user_vote: Optional[VoteType]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'votes': self.votes.to_dict(),
            'userVote': self.user_vote.value if self.user_vote else None,
        }
