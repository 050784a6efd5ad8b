#!/usr/bin/env python3
"""
Guest Identity Service

Anonymous visitors hold an opaque guest token. The service maps tokens to
``guest_users`` rows and issues new tokens on request.
"""

import logging
import secrets
from typing import Optional

from core.exceptions import ValidationError
from core.models.vote import GuestUser
from core.security import SecurityValidator

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "guest_"


def new_guest_token() -> str:
    """Issue a fresh url-safe guest token (prefix plus 26 random characters)."""
    return TOKEN_PREFIX + secrets.token_urlsafe(20)[:26]


class GuestService:
    """Service for guest registration and lookup."""

    def __init__(self, database, validator: Optional[SecurityValidator] = None):
        """
        Args:
            database: Supabase adapter (or any object with the guest operations)
            validator: Security validator for token format checks
        """
        self.database = database
        self.validator = validator or SecurityValidator()

    def _require_valid(self, guest_id: str) -> None:
        if not self.validator.validate_guest_id(guest_id):
            raise ValidationError('guestId', 'must be 8-64 url-safe characters')

    def register(self, guest_id: Optional[str] = None) -> GuestUser:
        """
        Register a guest, issuing a token when none is presented.

        A known token has its activity timestamp refreshed.
        """
        if not guest_id:
            guest_id = new_guest_token()
            logger.info("Issued new guest token")
        else:
            self._require_valid(guest_id)

        guest = self.database.touch_guest_user(guest_id)
        if guest is not None:
            return guest

        return self.database.create_guest_user(guest_id)

    def resolve(self, guest_id: str) -> GuestUser:
        """Lookup-or-create; used on writes."""
        self._require_valid(guest_id)
        guest = self.database.get_guest_user(guest_id)
        if guest is not None:
            return guest
        return self.database.create_guest_user(guest_id)

    def lookup(self, guest_id: Optional[str]) -> Optional[GuestUser]:
        """Lookup only; reads never create guests."""
        if not guest_id or not self.validator.validate_guest_id(guest_id):
            return None
        return self.database.get_guest_user(guest_id)
