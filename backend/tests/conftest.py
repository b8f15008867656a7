import pytest

from dignity_index.core.config import get_settings


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    # Tests mutate env vars; never leak a cached Settings instance between them.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _isolated_ai_env(monkeypatch):
    for name in (
        "AI_DIGNITY_PROVIDER",
        "AI_DIGNITY_MODEL",
        "AI_ALLOWED_PROVIDERS",
        "AI_ALLOWED_MODELS",
        "ENABLE_AI_OVERRIDES",
        "GEMINI_API_KEY",
        "GOOGLE_API_KEY",
        "ANTHROPIC_API_KEY",
        "OPENAI_API_KEY",
        "GROQ_API_KEY",
        "RATE_LIMIT_API_ENABLED",
        "TRUSTED_PROXY_CIDRS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_runtime_state():
    from dignity_index.api.pages import page_sessions
    from dignity_index.utils.rate_limit import rate_limiter

    rate_limiter.reset()
    page_sessions.reset()
    yield
    rate_limiter.reset()
    page_sessions.reset()
