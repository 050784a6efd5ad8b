#!/usr/bin/env python3
"""
Vote Service

One vote per (article, guest). Casting the vote a guest already holds
retracts it; casting the other vote switches it in place.
"""

import logging
from typing import Optional

from core.exceptions import ValidationError, NotFoundError, MISSING_FIELDS
from core.models.vote import VoteType, VoteCounts, VoteOutcome
from core.services.guest_service import GuestService

logger = logging.getLogger(__name__)


class VoteService:
    """Service for casting and reading votes."""

    def __init__(self, database, guest_service: GuestService):
        """
        Args:
            database: Supabase adapter
            guest_service: Resolves guest tokens to user rows
        """
        self.database = database
        self.guest_service = guest_service

    def cast_vote(self, article_id: str, guest_id: str, vote_type) -> VoteOutcome:
        """
        Cast, switch or retract a vote.

        Args:
            article_id: Internal article id
            guest_id: Guest token
            vote_type: "up", "down", a VoteType, or None to retract

        Returns:
            Recomputed counts and the guest's resulting vote
        """
        if not article_id or not guest_id:
            raise ValidationError('request', 'articleId and guestId are required', MISSING_FIELDS)

        try:
            requested = vote_type if isinstance(vote_type, VoteType) else VoteType.parse(vote_type)
        except ValueError:
            raise ValidationError('voteType', "must be 'up', 'down' or null")

        if self.database.get_article_by_id(article_id) is None:
            raise NotFoundError('Article', article_id)

        user = self.guest_service.resolve(guest_id)
        existing = self.database.get_vote(article_id, user.id)

        resulting: Optional[VoteType]
        if requested is None:
            if existing is not None:
                self.database.delete_vote(existing.id)
                logger.info(f"Retracted vote on article {article_id}")
            resulting = None
        elif existing is not None and existing.vote_type == requested:
            self.database.delete_vote(existing.id)
            logger.info(f"Toggled off {requested.value} vote on article {article_id}")
            resulting = None
        elif existing is not None:
            self.database.update_vote(existing.id, requested)
            logger.info(f"Switched vote on article {article_id} to {requested.value}")
            resulting = requested
        else:
            self.database.insert_vote(article_id, user.id, requested)
            logger.info(f"Recorded {requested.value} vote on article {article_id}")
            resulting = requested

        return VoteOutcome(votes=self.database.get_vote_counts(article_id), user_vote=resulting)

    def get_vote_counts(self, article_id: str) -> VoteCounts:
        if not article_id:
            raise ValidationError('articleId', 'Article ID is required')
        return self.database.get_vote_counts(article_id)

    def get_user_vote(self, article_id: str, guest_id: Optional[str]) -> Optional[VoteType]:
        """The guest's current vote on an article; unknown guests have none."""
        if not article_id:
            raise ValidationError('articleId', 'Article ID is required')

        user = self.guest_service.lookup(guest_id)
        if user is None:
            return None

        vote = self.database.get_vote(article_id, user.id)
        return vote.vote_type if vote else None
