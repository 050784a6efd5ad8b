import pytest

from conftest import FakeDatabase, FakeLLMClient, FakeNewsClient, feed_item
from core.exceptions import NotFoundError, RateLimitError, RegulationsApiError

GUEST = "guest_abcdefghijklmnop"


class FakeRegulationsClient:
    def __init__(self, error=None):
        self.error = error

    def search_documents(self, query=""):
        if self.error:
            raise self.error
        return [{"id": "EPA-2024-0001", "title": "Clean air rule", "postedDate": "2024-03-01",
                 "documentType": "Rule"}]

    def get_document(self, document_id):
        if document_id != "EPA-2024-0001":
            raise NotFoundError("Document", document_id)
        return {"id": document_id, "title": "Clean air rule"}

    def search_comments(self, document_id, query=""):
        return [{"id": "EPA-2024-0001-0002", "attributes": {"title": "Comment from a resident"}}]


@pytest.fixture
def article(database):
    return database.add_article("Senate passes bill", "https://example.com/senate")


def test_news_envelope_from_live_api(api_client):
    client = api_client(news_client=FakeNewsClient(items=[feed_item("https://example.com/live")],
                                                   total_results=42))

    response = client.get("/news", params={"q": "senate", "sortBy": "relevancy"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["source"] == "api"
    assert body["totalResults"] == 42
    assert body["data"][0]["url"] == "https://example.com/live"
    assert body["data"][0]["votes"] == {"upvotes": 0, "downvotes": 0}
    assert body["data"][0]["userVote"] is None


def test_news_rate_limit_still_succeeds_from_cache(api_client, article):
    client = api_client(news_client=FakeNewsClient(error=RateLimitError("news API")))

    body = client.get("/news", params={"q": "senate"}).json()

    assert body["success"] is True
    assert body["source"] == "cache_fallback"
    assert body["error"] == "Too Many Requests from news API"
    assert [item["id"] for item in body["data"]] == [article.id]


def test_news_rejects_unknown_sort(api_client):
    response = api_client().get("/news", params={"sortBy": "oldest"})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_articles_by_id_and_missing(api_client, article):
    client = api_client()

    found = client.get("/articles", params={"id": article.id})
    assert found.status_code == 200
    assert found.json()["data"]["title"] == "Senate passes bill"

    missing = client.get("/articles", params={"id": "00000000-0000-0000-0000-000000000000"})
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "error": "Article not found"}

    listing = client.get("/articles").json()
    assert [item["id"] for item in listing["data"]] == [article.id]


def test_vote_cycle_over_http(api_client, article):
    client = api_client()

    up = client.post("/votes", json={"articleId": article.id, "guestId": GUEST, "voteType": "up"})
    assert up.json() == {"success": True, "data": {"votes": {"upvotes": 1, "downvotes": 0}, "userVote": "up"}}

    counts = client.get("/votes", params={"articleId": article.id}).json()
    assert counts["data"] == {"upvotes": 1, "downvotes": 0}

    mine = client.get("/user-vote", params={"articleId": article.id, "guestId": GUEST}).json()
    assert mine["data"] == {"voteType": "up"}

    off = client.post("/votes", json={"articleId": article.id, "guestId": GUEST, "voteType": "up"})
    assert off.json()["data"]["userVote"] is None


def test_vote_missing_fields(api_client, article):
    response = api_client().post("/votes", json={"articleId": article.id})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Missing required fields"}


def test_vote_on_unknown_article(api_client):
    response = api_client().post("/votes", json={"articleId": "00000000-0000-0000-0000-000000000000",
                                                 "guestId": GUEST, "voteType": "down"})

    assert response.status_code == 404


def test_votes_requires_article_id(api_client):
    response = api_client().get("/votes")

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required parameters"


def test_analyze_article(api_client, article, database):
    client = api_client(llm_client=FakeLLMClient(summary="Short summary.", score_text="-4"))

    response = client.post("/analyze-article", json={"articleId": article.id})

    assert response.status_code == 200
    assert response.json()["data"] == {"summary": "Short summary.", "politicalScore": -4.0,
                                       "scoreSource": "llm"}
    assert database.articles[article.id].political_score == -4.0


def test_analyze_rate_limited(api_client, article):
    client = api_client(llm_client=FakeLLMClient(error=RateLimitError("openai")))

    response = client.post("/analyze-article", json={"articleId": article.id})

    assert response.status_code == 429
    assert response.json() == {"success": False, "error": "Too many requests. Please try again later."}


def test_guest_registration(api_client, database):
    client = api_client()

    issued = client.post("/guests").json()["data"]
    assert issued["guestId"].startswith("guest_")
    assert issued["guestId"] in database.guests

    again = client.post("/guests", json={"guestId": issued["guestId"]}).json()["data"]
    assert again["guestId"] == issued["guestId"]
    assert len(database.guests) == 1

    bad = client.post("/guests", json={"guestId": "no"})
    assert bad.status_code == 400


def test_regulations_endpoints(api_client):
    client = api_client(regulations_client=FakeRegulationsClient())

    documents = client.get("/regulations/documents", params={"q": "air"}).json()
    assert documents["data"][0]["documentType"] == "Rule"

    document = client.get("/regulations/documents/EPA-2024-0001").json()
    assert document["data"]["title"] == "Clean air rule"

    comments = client.get("/regulations/documents/EPA-2024-0001/comments").json()
    assert len(comments["data"]) == 1

    assert client.get("/regulations/documents/NOPE-1").status_code == 404


def test_regulations_upstream_failure(api_client):
    error = RegulationsApiError("search", RuntimeError("HTTP 500"), 500)
    client = api_client(regulations_client=FakeRegulationsClient(error=error))

    response = client.get("/regulations/documents")

    assert response.status_code == 502
    assert response.json() == {"success": False, "error": "Regulations API search failed"}


def test_storage_upload_list_download_delete(api_client, database):
    client = api_client()

    uploaded = client.post(
        "/storage/files",
        files={"file": ("My Photo.png", b"\x89PNG-bytes", "image/png")},
        data={"folder": "images"},
    ).json()["data"]

    path = uploaded["path"]
    assert path.startswith("images/")
    assert path.endswith("_My-Photo.png")
    assert uploaded["url"].endswith(path)

    listing = client.get("/storage/files", params={"folder": "images"}).json()["data"]
    assert listing == [path.split("/", 1)[1]]

    download = client.get(f"/storage/files/{path}")
    assert download.content == b"\x89PNG-bytes"
    assert download.headers["content-type"] == "image/png"

    deleted = client.request("DELETE", "/storage/files", json={"paths": [path]}).json()
    assert deleted["data"] == {"deleted": 1}
    assert database.files["articles"] == {}


def test_storage_rejects_path_escape(api_client):
    response = api_client().get("/storage/files", params={"folder": "../secrets"})

    assert response.status_code == 400


def test_health_reports_integrations(api_client):
    body = api_client().get("/health").json()

    assert body["status"] == "ok"
    assert body["database"]["connected"] is True
    assert body["integrations"] == {"openai": True, "news_api": True, "regulations_api": True}


class RateLimitedVoteStore(FakeDatabase):
    def insert_vote(self, article_id, user_id, vote_type):
        raise RateLimitError("database")


def test_vote_rate_limited_by_store(container_factory):
    from fastapi.testclient import TestClient
    from api.app import create_app

    store = RateLimitedVoteStore()
    article = store.add_article("Senate passes bill", "https://example.com/senate")
    container = container_factory()
    container.register_instance('database', store)

    response = TestClient(create_app(container)).post(
        "/votes", json={"articleId": article.id, "guestId": GUEST, "voteType": "up"}
    )

    assert response.status_code == 429
    assert response.json() == {"success": False, "error": "Too many requests. Please try again later."}
