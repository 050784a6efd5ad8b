import re

import pytest

from core.exceptions import ValidationError
from core.services.guest_service import new_guest_token


def test_new_tokens_are_prefixed_and_url_safe():
    token = new_guest_token()
    assert token.startswith("guest_")
    assert len(token) == len("guest_") + 26
    assert re.fullmatch(r"[A-Za-z0-9_-]+", token)
    assert new_guest_token() != token


def test_register_without_token_issues_one(guest_service, database):
    guest = guest_service.register()

    assert guest.guest_id.startswith("guest_")
    assert guest.guest_id in database.guests


def test_register_known_token_touches_activity(guest_service, database):
    first = guest_service.register("guest_returning_visitor")
    before = first.last_active_at

    again = guest_service.register("guest_returning_visitor")

    assert again.id == first.id
    assert again.last_active_at >= before
    assert len(database.guests) == 1


def test_register_rejects_malformed_token(guest_service):
    with pytest.raises(ValidationError):
        guest_service.register("short")


def test_resolve_creates_and_lookup_does_not(guest_service, database):
    assert guest_service.lookup("guest_lookup_only_01") is None
    assert database.guests == {}

    created = guest_service.resolve("guest_lookup_only_01")

    assert guest_service.lookup("guest_lookup_only_01").id == created.id


def test_lookup_ignores_missing_or_invalid_tokens(guest_service):
    assert guest_service.lookup(None) is None
    assert guest_service.lookup("not valid!") is None


@pytest.mark.parametrize("token", ["guest_abcdefgh\n", "guest abcdefgh", "guest_abcdefgh/.."])
def test_register_rejects_tokens_with_stray_characters(guest_service, database, token):
    with pytest.raises(ValidationError):
        guest_service.register(token)

    assert database.guests == {}
