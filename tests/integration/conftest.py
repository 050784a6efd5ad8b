import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from core.config import Config, DatabaseConfig, IntegrationConfig, ApplicationConfig  # noqa: E402
from core.container import build_container  # noqa: E402
from core.exceptions import RateLimitError, NewsApiError  # noqa: E402
from core.models.article import Article  # noqa: E402
from core.models.vote import Vote, VoteCounts, VoteType, GuestUser  # noqa: E402
from core.services.guest_service import GuestService  # noqa: E402
from core.services.news_service import NewsService  # noqa: E402
from core.services.vote_service import VoteService  # noqa: E402
from integrations.news_api_client import FeedItem, FeedPage  # noqa: E402


class FakeDatabase:
    """In-memory stand-in for SupabaseApiAdapter."""

    def __init__(self) -> None:
        self.articles: Dict[str, Article] = {}
        self.votes: Dict[str, Vote] = {}
        self.guests: Dict[str, GuestUser] = {}
        self.files: Dict[str, Dict[str, bytes]] = {}
        self.search_calls: List[Dict[str, Any]] = []
        self.updates: List[Dict[str, Any]] = []

    # Articles

    def add_article(self, title: str, url: str, source: str = "Reuters", description: str = "",
                    published_at: Optional[datetime] = None, political_score: Optional[float] = None) -> Article:
        from core.deduplication import external_id_for_url
        article = Article(
            external_id=external_id_for_url(url),
            title=title,
            url=url,
            source=source,
            description=description,
            published_at=published_at or datetime.now(timezone.utc),
            political_score=political_score,
        )
        return self.create_article(article)

    def search_cached_articles(self, query: str, from_date: Optional[str] = None, sort_by: str = "publishedAt",
                               limit: int = 10, offset: int = 0) -> List[Article]:
        self.search_calls.append({"query": query, "from_date": from_date, "limit": limit, "offset": offset})
        needle = (query or "").lower()
        matches = [
            a for a in self.articles.values()
            if not needle or needle in a.title.lower() or needle in a.description.lower()
        ]
        if from_date:
            bound = datetime.fromisoformat(from_date).replace(tzinfo=timezone.utc)
            matches = [a for a in matches if a.published_at and a.published_at >= bound]
        matches.sort(key=lambda a: a.published_at, reverse=True)
        return matches[offset:offset + limit]

    def list_articles(self, limit: int = 10, offset: int = 0) -> List[Article]:
        ordered = sorted(self.articles.values(), key=lambda a: a.published_at, reverse=True)
        return ordered[offset:offset + limit]

    def get_article_by_id(self, article_id: str) -> Optional[Article]:
        return self.articles.get(article_id)

    def get_article_by_external_id(self, external_id: str) -> Optional[Article]:
        return next((a for a in self.articles.values() if a.external_id == external_id), None)

    def create_article(self, article: Article) -> Article:
        existing = self.get_article_by_external_id(article.external_id)
        if existing is not None:
            return existing
        article.id = str(uuid.uuid4())
        article.created_at = datetime.now(timezone.utc)
        self.articles[article.id] = article
        return article

    def update_article(self, article_id: str, updates: Dict[str, Any]) -> None:
        self.updates.append({"id": article_id, **updates})
        article = self.articles[article_id]
        for key, value in updates.items():
            setattr(article, key, value)

    # Votes

    def get_vote_counts(self, article_id: str) -> VoteCounts:
        return VoteCounts.from_vote_types(
            v.vote_type.value for v in self.votes.values() if v.article_id == article_id
        )

    def get_vote(self, article_id: str, user_id: str) -> Optional[Vote]:
        return next(
            (v for v in self.votes.values() if v.article_id == article_id and v.user_id == user_id),
            None
        )

    def insert_vote(self, article_id: str, user_id: str, vote_type: VoteType) -> Vote:
        existing = self.get_vote(article_id, user_id)
        if existing is not None:
            existing.vote_type = vote_type
            return existing
        vote = Vote(id=str(uuid.uuid4()), article_id=article_id, user_id=user_id, vote_type=vote_type)
        self.votes[vote.id] = vote
        return vote

    def update_vote(self, vote_id: str, vote_type: VoteType) -> None:
        self.votes[vote_id].vote_type = vote_type
        self.votes[vote_id].updated_at = datetime.now(timezone.utc)

    def delete_vote(self, vote_id: str) -> None:
        self.votes.pop(vote_id, None)

    # Guests

    def get_guest_user(self, guest_id: str) -> Optional[GuestUser]:
        return self.guests.get(guest_id)

    def create_guest_user(self, guest_id: str) -> GuestUser:
        if guest_id not in self.guests:
            now = datetime.now(timezone.utc)
            self.guests[guest_id] = GuestUser(id=str(uuid.uuid4()), guest_id=guest_id,
                                              created_at=now, last_active_at=now)
        return self.guests[guest_id]

    def touch_guest_user(self, guest_id: str) -> Optional[GuestUser]:
        guest = self.guests.get(guest_id)
        if guest is not None:
            guest.last_active_at = datetime.now(timezone.utc)
        return guest

    # Storage

    def upload_file(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        self.files.setdefault(bucket, {})[path] = data
        return f"https://test.supabase.co/storage/v1/object/public/{bucket}/{path}"

    def download_file(self, bucket: str, path: str) -> bytes:
        return self.files[bucket][path]

    def list_files(self, bucket: str, path: str = "") -> List[str]:
        prefix = f"{path}/" if path else ""
        return sorted(p[len(prefix):] for p in self.files.get(bucket, {}) if p.startswith(prefix))

    def delete_files(self, bucket: str, paths: List[str]) -> None:
        for path in paths:
            self.files.get(bucket, {}).pop(path, None)

    def health_check(self) -> Dict[str, Any]:
        return {"connected": True, "method": "memory"}


class FakeNewsClient:
    """Returns canned feed items, or raises the configured error."""

    def __init__(self, items: Optional[List[FeedItem]] = None, error: Optional[Exception] = None,
                 total_results: Optional[int] = None) -> None:
        self.items = items or []
        self.error = error
        self.total_results = total_results if total_results is not None else len(self.items)
        self.calls: List[Dict[str, Any]] = []

    def search_everything(self, query: str, from_date: Optional[str] = None, sort_by: str = "publishedAt",
                          page_size: int = 10, page: int = 1) -> FeedPage:
        self.calls.append({"query": query, "from_date": from_date, "sort_by": sort_by,
                           "page_size": page_size, "page": page})
        if self.error is not None:
            raise self.error
        return FeedPage(items=list(self.items), total_results=self.total_results)


class FakeLLMClient:
    def __init__(self, summary: str = "A neutral summary.", score_text: str = "2.5",
                 error: Optional[Exception] = None) -> None:
        self.summary = summary
        self.score_text = score_text
        self.error = error
        self.calls: List[str] = []

    def generate_summary(self, article: Article) -> str:
        self.calls.append("summary")
        if self.error is not None:
            raise self.error
        return self.summary

    def rate_political_leaning(self, article: Article) -> str:
        self.calls.append("score")
        return self.score_text


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Records GET calls and replays queued responses."""

    def __init__(self, responses: Optional[List[Any]] = None) -> None:
        self.responses = list(responses or [])
        self.headers: Dict[str, str] = {}
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, params: Optional[Dict[str, Any]] = None, timeout: Optional[int] = None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def feed_item(url: str, title: str = "Headline", source: str = "Reuters", description: str = "") -> FeedItem:
    return FeedItem(
        title=title,
        url=url,
        source=source,
        description=description,
        published_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def test_config() -> Config:
    return Config(
        database=DatabaseConfig(supabase_url="https://test.supabase.co", supabase_service_key="service-key"),
        integrations=IntegrationConfig(openai_api_key="sk-test", news_api_key="news-key",
                                       regulations_api_key="regs-key"),
        app=ApplicationConfig(),
    )


@pytest.fixture
def database() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def guest_service(database) -> GuestService:
    return GuestService(database)


@pytest.fixture
def vote_service(database, guest_service) -> VoteService:
    return VoteService(database, guest_service)


@pytest.fixture
def news_service_factory(database, guest_service):
    def _factory(news_client=None, page_size: int = 10) -> NewsService:
        return NewsService(database, news_client, guest_service, page_size=page_size)

    return _factory


@pytest.fixture
def rate_limited_news_client() -> FakeNewsClient:
    return FakeNewsClient(error=RateLimitError("news API"))


@pytest.fixture
def failing_news_client() -> FakeNewsClient:
    return FakeNewsClient(error=NewsApiError("apiKeyInvalid", 401))


@pytest.fixture
def container_factory(test_config, database):
    """Container wired with fakes in place of every network collaborator."""
    def _factory(news_client=None, llm_client=None, regulations_client=None):
        container = build_container(test_config)
        container.register_instance('database', database)
        container.register_instance('news_api_client', news_client)
        if llm_client is not None:
            container.register_instance('openai_client', llm_client)
        if regulations_client is not None:
            container.register_instance('regulations_client', regulations_client)
        return container

    return _factory


@pytest.fixture
def api_client(container_factory):
    from fastapi.testclient import TestClient
    from api.app import create_app

    def _factory(**collaborators) -> TestClient:
        return TestClient(create_app(container_factory(**collaborators)))

    return _factory
