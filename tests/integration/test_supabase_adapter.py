from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from core.exceptions import DatabaseOperationError, ErrorClassifier, RateLimitError, StorageError
from core.models.article import Article
from core.models.vote import VoteType
from core.supabase_adapter import SupabaseApiAdapter, ARTICLES, VOTES, GUESTS

ARTICLE_ID = "3f1c9a4e-8f7b-4c3d-9a1e-2b5c6d7e8f90"


class FakeQuery:
    """Chainable stand-in for a postgrest request builder."""

    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.calls = []

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return method

    def execute(self):
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=self.rows)

    def called(self, name):
        return [(args, kwargs) for call, args, kwargs in self.calls if call == name]


def _adapter(*queries):
    client = MagicMock()
    client.table.side_effect = list(queries)
    return SupabaseApiAdapter(client), client


def _article_row(**overrides):
    row = {
        "id": ARTICLE_ID,
        "external_id": "aHR0cHM6Ly9leGFtcGxlLmNvbS9h",
        "title": "Senate passes bill",
        "description": "",
        "source": "Reuters",
        "source_type": "center",
        "published_at": "2024-05-01T12:00:00+00:00",
        "url": "https://example.com/a",
        "political_score": 0.0,
    }
    row.update(overrides)
    return row


def test_search_builds_filters_and_range():
    query = FakeQuery(rows=[_article_row()])
    adapter, client = _adapter(query)

    articles = adapter.search_cached_articles("senate", from_date="2024-04-01", limit=10, offset=20)

    client.table.assert_called_once_with(ARTICLES)
    assert query.called("or_") == [(("title.ilike.%senate%,description.ilike.%senate%",), {})]
    assert query.called("gte") == [(("published_at", "2024-04-01"), {})]
    assert query.called("order") == [(("published_at",), {"desc": True})]
    assert query.called("range") == [((20, 29), {})]
    assert articles[0].political_score == 0.0


def test_search_without_query_skips_filter():
    query = FakeQuery()
    adapter, _ = _adapter(query)

    assert adapter.search_cached_articles("") == []
    assert query.called("or_") == []


def test_non_uuid_article_id_never_queries():
    adapter, client = _adapter()

    assert adapter.get_article_by_id("not-a-uuid") is None
    client.table.assert_not_called()


def test_create_article_ignores_duplicates_and_rereads():
    insert = FakeQuery(rows=[])
    reread = FakeQuery(rows=[_article_row()])
    adapter, _ = _adapter(insert, reread)
    article = Article(external_id="aHR0cHM6Ly9leGFtcGxlLmNvbS9h", title="Senate passes bill",
                      url="https://example.com/a", source="Reuters")

    stored = adapter.create_article(article)

    args, kwargs = insert.called("upsert")[0]
    assert kwargs == {"on_conflict": "external_id", "ignore_duplicates": True}
    assert args[0]["external_id"] == article.external_id
    assert stored.id == ARTICLE_ID


def test_vote_counts_and_upsert():
    counts_query = FakeQuery(rows=[{"vote_type": "up"}, {"vote_type": "up"}, {"vote_type": "down"}])
    insert = FakeQuery(rows=[{"id": "v1", "article_id": ARTICLE_ID, "user_id": "u1", "vote_type": "down"}])
    adapter, client = _adapter(counts_query, insert)

    counts = adapter.get_vote_counts(ARTICLE_ID)
    vote = adapter.insert_vote(ARTICLE_ID, "u1", VoteType.DOWN)

    assert counts.to_dict() == {"upvotes": 2, "downvotes": 1}
    assert vote.vote_type is VoteType.DOWN
    assert insert.called("upsert")[0][1] == {"on_conflict": "article_id,user_id"}
    assert [call.args[0] for call in client.table.call_args_list] == [VOTES, VOTES]


def test_touch_unknown_guest_returns_none():
    adapter, client = _adapter(FakeQuery(rows=[]))

    assert adapter.touch_guest_user("guest_abcdefghijklmnop") is None
    client.table.assert_called_once_with(GUESTS)


def test_rate_limited_response_raises_rate_limit():
    adapter, _ = _adapter(FakeQuery(error=Exception("429 Too Many Requests")))

    with pytest.raises(RateLimitError):
        adapter.list_articles()


def test_other_failures_raise_database_error():
    adapter, _ = _adapter(FakeQuery(error=Exception("connection reset")))

    with pytest.raises(DatabaseOperationError):
        adapter.get_vote(ARTICLE_ID, "u1")


def test_upload_returns_public_url():
    adapter, client = _adapter()
    bucket = client.storage.from_.return_value
    bucket.get_public_url.return_value = "https://cdn.example.com/articles/images/1_a.png"

    url = adapter.upload_file("articles", "images/1_a.png", b"png", "image/png")

    assert url == "https://cdn.example.com/articles/images/1_a.png"
    client.storage.from_.assert_called_with("articles")
    bucket.upload.assert_called_once_with(
        path="images/1_a.png",
        file=b"png",
        file_options={"content-type": "image/png", "cache-control": "3600", "upsert": "true"},
    )


def test_storage_failure_raises_storage_error():
    adapter, client = _adapter()
    client.storage.from_.return_value.remove.side_effect = Exception("bucket missing")

    with pytest.raises(StorageError):
        adapter.delete_files("articles", ["images/1_a.png"])


def test_health_check_reports_failure():
    adapter, _ = _adapter(FakeQuery(error=Exception("unreachable")))

    health = adapter.health_check()

    assert health["connected"] is False
    assert health["error"] == "unreachable"


class PostgrestError(Exception):
    def __init__(self, message, code):
        super().__init__(message)
        self.code = code


def test_ids_containing_429_are_not_rate_limits():
    error = Exception('duplicate key value violates unique constraint "article_votes_pkey" '
                      'Key (id)=(a4291c0e-0000-4000-8000-000000000429)')
    adapter, _ = _adapter(FakeQuery(error=error))

    with pytest.raises(DatabaseOperationError):
        adapter.insert_vote(ARTICLE_ID, "u1", VoteType.UP)


def test_status_code_429_is_a_rate_limit():
    adapter, _ = _adapter(FakeQuery(error=PostgrestError("rate limit exceeded", "429")))

    with pytest.raises(RateLimitError):
        adapter.get_vote_counts(ARTICLE_ID)


def test_classifier_reads_status_not_message_digits():
    response_error = Exception("upstream failed")
    response_error.response = SimpleNamespace(status_code=429)

    assert ErrorClassifier.is_rate_limit(response_error)
    assert ErrorClassifier.is_rate_limit(Exception("429 Too Many Requests"))
    assert not ErrorClassifier.is_rate_limit(Exception("row 4291 not found"))
    assert not ErrorClassifier.is_rate_limit(PostgrestError("bad request", "PGRST429"))
