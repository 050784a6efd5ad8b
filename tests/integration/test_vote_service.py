import pytest

from core.exceptions import ValidationError, NotFoundError
from core.models.vote import VoteType

GUEST = "guest_abcdefghijklmnop"
OTHER_GUEST = "guest_qrstuvwxyz012345"


@pytest.fixture
def article(database):
    return database.add_article("Senate passes bill", "https://example.com/senate")


def test_first_vote_is_recorded(vote_service, database, article):
    outcome = vote_service.cast_vote(article.id, GUEST, "up")

    assert outcome.user_vote is VoteType.UP
    assert outcome.to_dict() == {"votes": {"upvotes": 1, "downvotes": 0}, "userVote": "up"}
    assert GUEST in database.guests


def test_same_vote_twice_toggles_off(vote_service, article):
    vote_service.cast_vote(article.id, GUEST, "up")
    outcome = vote_service.cast_vote(article.id, GUEST, "up")

    assert outcome.user_vote is None
    assert outcome.votes.upvotes == 0
    assert outcome.to_dict()["userVote"] is None


def test_opposite_vote_switches_in_place(vote_service, database, article):
    vote_service.cast_vote(article.id, GUEST, "up")
    vote_id = next(iter(database.votes))

    outcome = vote_service.cast_vote(article.id, GUEST, "down")

    assert outcome.user_vote is VoteType.DOWN
    assert outcome.votes.upvotes == 0
    assert outcome.votes.downvotes == 1
    assert list(database.votes) == [vote_id]
    assert database.votes[vote_id].updated_at is not None


def test_null_vote_retracts_and_is_idempotent(vote_service, database, article):
    vote_service.cast_vote(article.id, GUEST, "down")

    first = vote_service.cast_vote(article.id, GUEST, None)
    second = vote_service.cast_vote(article.id, GUEST, None)

    assert first.user_vote is None and second.user_vote is None
    assert database.votes == {}


def test_final_vote_matches_last_non_toggled_choice(vote_service, article):
    for vote in ["up", "down", "down", "up", "down"]:
        vote_service.cast_vote(article.id, GUEST, vote)

    # up -> down -> (down again retracts) -> up -> down
    assert vote_service.get_user_vote(article.id, GUEST) is VoteType.DOWN


def test_counts_equal_number_of_guests_with_a_vote(vote_service, article):
    vote_service.cast_vote(article.id, GUEST, "up")
    vote_service.cast_vote(article.id, OTHER_GUEST, "down")
    vote_service.cast_vote(article.id, "guest_third_voter_123", "up")
    vote_service.cast_vote(article.id, "guest_third_voter_123", "up")

    counts = vote_service.get_vote_counts(article.id)
    assert (counts.upvotes, counts.downvotes) == (1, 1)


def test_missing_fields_are_rejected(vote_service, article):
    with pytest.raises(ValidationError) as exc_info:
        vote_service.cast_vote("", GUEST, "up")
    assert exc_info.value.message == "Missing required fields"

    with pytest.raises(ValidationError):
        vote_service.cast_vote(article.id, "", "up")


def test_invalid_vote_type_is_rejected(vote_service, article):
    with pytest.raises(ValidationError):
        vote_service.cast_vote(article.id, GUEST, "sideways")


def test_malformed_guest_token_is_rejected(vote_service, article):
    with pytest.raises(ValidationError):
        vote_service.cast_vote(article.id, "bad token!", "up")


def test_vote_on_missing_article_is_not_found(vote_service, database):
    with pytest.raises(NotFoundError):
        vote_service.cast_vote("00000000-0000-0000-0000-000000000000", GUEST, "up")
    assert database.guests == {}


def test_user_vote_for_unknown_guest_does_not_create_one(vote_service, database, article):
    assert vote_service.get_user_vote(article.id, "guest_never_seen_before") is None
    assert database.guests == {}
