import pytest

from core.config import ConfigManager, DEFAULT_NEWS_QUERY

ENV_KEYS = [
    "SUPABASE_URL", "SUPABASE_ANON_KEY", "SUPABASE_SERVICE_KEY", "OPENAI_API_KEY", "NEWS_API_KEY",
    "REGULATIONS_API_KEY", "NEWS_PAGE_SIZE", "LOG_LEVEL", "DEFAULT_NEWS_QUERY", "STORAGE_BUCKET",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "service-key")
    return monkeypatch


def _load():
    return ConfigManager(env_file_path="missing-test.env").get_config()


def test_defaults(clean_env):
    config = _load()

    assert config.database.api_key == "service-key"
    assert config.app.news_page_size == 10
    assert config.app.default_news_query == DEFAULT_NEWS_QUERY
    assert config.app.storage_bucket == "articles"
    assert config.integration_status() == {"openai": False, "news_api": False, "regulations_api": False}


def test_integration_keys_from_env(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "sk-live")
    clean_env.setenv("NEWS_API_KEY", "news")

    config = _load()

    assert config.has_openai()
    assert config.has_news_api()
    assert not config.has_regulations_api()


def test_anon_key_used_when_no_service_key(clean_env):
    clean_env.delenv("SUPABASE_SERVICE_KEY")
    clean_env.setenv("SUPABASE_ANON_KEY", "anon-key")

    assert _load().database.api_key == "anon-key"


def test_missing_supabase_url(clean_env):
    clean_env.delenv("SUPABASE_URL")

    with pytest.raises(ValueError, match="SUPABASE_URL"):
        _load()


def test_all_problems_reported_together(clean_env):
    clean_env.setenv("SUPABASE_URL", "http://insecure.example.com")
    clean_env.setenv("NEWS_PAGE_SIZE", "0")
    clean_env.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(ValueError) as exc:
        _load()

    message = str(exc.value)
    assert "SUPABASE_URL must start with https://" in message
    assert "NEWS_PAGE_SIZE" in message
    assert "LOG_LEVEL" in message
