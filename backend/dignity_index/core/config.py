from functools import lru_cache
import json
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_PROVIDERS = "gemini,claude,openai,groq,mock"


def _parse_list_value(value: str) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        raw = value.strip()
        if raw == "":
            return []
        try:
            parsed = json.loads(raw)
            if isinstance(parsed, list):
                return [str(item).strip() for item in parsed if str(item).strip()]
        except ValueError:
            pass
        return [item.strip() for item in raw.split(",") if item.strip()]
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    return []


def _parse_models_value(value: str) -> dict[str, list[str]]:
    """Parse ``{"provider": ["model", ...]}`` JSON; anything else is empty."""
    if not value or not value.strip():
        return {}
    try:
        parsed = json.loads(value)
    except ValueError:
        return {}
    if not isinstance(parsed, dict):
        return {}
    out: dict[str, list[str]] = {}
    for provider, models in parsed.items():
        if isinstance(models, str):
            models = [models]
        if not isinstance(models, list):
            continue
        out[str(provider).lower().strip()] = [str(m).strip() for m in models if str(m).strip()]
    return out


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="forbid",
        validate_by_name=True,
        populate_by_name=True,
    )

    docs_enabled: bool = Field(default=True)
    openapi_enabled: bool = Field(default=True)
    expose_error_details: bool = False

    security_headers_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices("SECURITY_HEADERS_ENABLED", "SECURE_HEADERS_ENABLED"),
    )

    cors_allow_origins_raw: str = Field(
        default="",
        validation_alias=AliasChoices("CORS_ALLOW_ORIGINS"),
    )
    trusted_proxy_cidrs_raw: str = Field(
        default="",
        validation_alias=AliasChoices("TRUSTED_PROXY_CIDRS"),
    )

    rate_limit_api_enabled: bool = False
    rate_limit_api_per_min: int = 30

    # --- AI ---
    ai_allowed_providers_raw: str = Field(
        default=DEFAULT_ALLOWED_PROVIDERS,
        validation_alias=AliasChoices("AI_ALLOWED_PROVIDERS"),
    )
    ai_allowed_models_raw: str = Field(
        default="",
        validation_alias=AliasChoices("AI_ALLOWED_MODELS"),
    )
    ai_dignity_provider: str = "mock"
    ai_dignity_model: str = ""
    enable_ai_overrides: bool = False
    ai_temperature: float = 0.0
    ai_max_tokens: int = 512
    ai_timeout_seconds: float = 15.0
    ai_debug_store_raw: bool = False

    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    groq_api_key: str = ""

    # --- Evaluator page ---
    dignity_max_input_chars: int = 10000
    page_session_cap: int = 5000
    session_cookie_secure: bool = False

    @property
    def cors_allow_origins(self) -> list[str]:
        return _parse_list_value(self.cors_allow_origins_raw)

    @property
    def trusted_proxy_cidrs(self) -> list[str]:
        return _parse_list_value(self.trusted_proxy_cidrs_raw)

    @property
    def ai_allowed_providers(self) -> list[str]:
        return [p.lower() for p in _parse_list_value(self.ai_allowed_providers_raw)]

    @property
    def ai_allowed_models(self) -> dict[str, list[str]]:
        return _parse_models_value(self.ai_allowed_models_raw)


@lru_cache
def get_settings() -> Settings:
    return Settings()
