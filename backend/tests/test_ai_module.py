"""Tests for the common AI layer.

Covers:
- json_tools extraction
- provider factory allowlist / missing-key fallback
- mock provider output
- router resolution chain and model allowlist
"""

import asyncio
import json
import os
import unittest
from unittest.mock import patch

from dignity_index.core.config import Settings, get_settings


class JsonToolsTests(unittest.TestCase):
    """Tests for dignity_index.services.ai.common.json_tools."""

    def test_valid_json_object(self):
        from dignity_index.services.ai.common.json_tools import extract_json

        result = extract_json('{"score": 3, "category": "contempt"}')
        self.assertIsInstance(result, dict)
        self.assertEqual(result["score"], 3)

    def test_valid_json_with_prefix(self):
        from dignity_index.services.ai.common.json_tools import extract_json

        result = extract_json('Here is the result: {"score": 7, "category": "dignity"} Thanks!')
        self.assertEqual(result, {"score": 7, "category": "dignity"})

    def test_code_fence(self):
        from dignity_index.services.ai.common.json_tools import extract_json

        result = extract_json('```json\n{"score": 2, "category": "contempt", "explanation": "x"}\n```')
        self.assertEqual(result["score"], 2)

    def test_valid_json_array(self):
        from dignity_index.services.ai.common.json_tools import extract_json

        self.assertEqual(extract_json("[1, 2, 3]"), [1, 2, 3])

    def test_empty_string_returns_none(self):
        from dignity_index.services.ai.common.json_tools import extract_json

        self.assertIsNone(extract_json(""))
        self.assertIsNone(extract_json("   "))

    def test_no_json_returns_none(self):
        from dignity_index.services.ai.common.json_tools import extract_json

        self.assertIsNone(extract_json("This is plain text with no JSON"))

    def test_braces_inside_strings(self):
        from dignity_index.services.ai.common.json_tools import extract_json

        text = 'note {"explanation": "uses } and { freely", "score": 5}'
        result = extract_json(text)
        self.assertEqual(result["score"], 5)
        self.assertIn("}", result["explanation"])

    def test_json_with_escaped_quotes(self):
        from dignity_index.services.ai.common.json_tools import extract_json

        result = extract_json('{"explanation": "He said \\"hello\\""}')
        self.assertIn("hello", result["explanation"])

    def test_invalid_json_returns_none(self):
        from dignity_index.services.ai.common.json_tools import extract_json

        self.assertIsNone(extract_json("{invalid json}"))

    def test_object_helper_rejects_array(self):
        from dignity_index.services.ai.common.json_tools import extract_json_object

        self.assertIsNone(extract_json_object("[1, 2]"))
        self.assertEqual(extract_json_object('x {"a": 1}'), {"a": 1})


class ProviderFactoryTests(unittest.TestCase):
    """Tests for provider factory (get_provider)."""

    def setUp(self):
        get_settings.cache_clear()

    def tearDown(self):
        get_settings.cache_clear()

    def _get(self, name, **env):
        from dignity_index.services.ai.common.providers import get_provider

        with patch.dict(os.environ, env, clear=False):
            with patch("dignity_index.services.ai.common.providers.get_settings") as mock_gs:
                mock_gs.return_value = Settings()
                return get_provider(name)

    def test_mock_provider_always_available(self):
        from dignity_index.services.ai.common.providers.mock import MockProvider

        self.assertIsInstance(self._get("mock", AI_ALLOWED_PROVIDERS="mock"), MockProvider)

    def test_unknown_provider_falls_back_to_mock(self):
        from dignity_index.services.ai.common.providers.mock import MockProvider

        provider = self._get("nonexistent_provider", AI_ALLOWED_PROVIDERS="nonexistent_provider,mock")
        self.assertIsInstance(provider, MockProvider)

    def test_provider_outside_allowlist_falls_back_to_mock(self):
        from dignity_index.services.ai.common.providers.mock import MockProvider

        provider = self._get("gemini", AI_ALLOWED_PROVIDERS="mock", GEMINI_API_KEY="k")
        self.assertIsInstance(provider, MockProvider)

    def test_gemini_no_key_falls_back_to_mock(self):
        from dignity_index.services.ai.common.providers.mock import MockProvider

        provider = self._get("gemini", AI_ALLOWED_PROVIDERS="gemini,mock", GEMINI_API_KEY="")
        self.assertIsInstance(provider, MockProvider)

    def test_gemini_with_google_api_key_alias(self):
        from dignity_index.services.ai.common.providers.gemini import GeminiProvider

        provider = self._get("Gemini ", AI_ALLOWED_PROVIDERS="gemini", GOOGLE_API_KEY="g-key")
        self.assertIsInstance(provider, GeminiProvider)

    def test_claude_no_key_falls_back_to_mock(self):
        from dignity_index.services.ai.common.providers.mock import MockProvider

        provider = self._get("claude", AI_ALLOWED_PROVIDERS="claude,mock", ANTHROPIC_API_KEY="")
        self.assertIsInstance(provider, MockProvider)

    def test_openai_with_key(self):
        from dignity_index.services.ai.common.providers.openai import OpenAIProvider

        provider = self._get("openai", AI_ALLOWED_PROVIDERS='["openai", "mock"]', OPENAI_API_KEY="sk-test")
        self.assertIsInstance(provider, OpenAIProvider)

    def test_groq_with_key(self):
        from dignity_index.services.ai.common.providers.groq import GroqProvider

        provider = self._get("groq", AI_ALLOWED_PROVIDERS="groq", GROQ_API_KEY="gsk-test")
        self.assertIsInstance(provider, GroqProvider)
        self.assertEqual(provider.name, "groq")

    def _get_strict(self, name, **env):
        from dignity_index.services.ai.common.providers import get_provider

        with patch.dict(os.environ, env, clear=False):
            with patch("dignity_index.services.ai.common.providers.get_settings") as mock_gs:
                mock_gs.return_value = Settings()
                return get_provider(name, strict=True)

    def test_strict_keyless_provider_raises(self):
        from dignity_index.services.ai.common.providers import ProviderUnavailableError

        for name in ("gemini", "claude", "openai", "groq"):
            with self.assertRaises(ProviderUnavailableError):
                self._get_strict(name)

    def test_strict_disallowed_or_unknown_provider_raises(self):
        from dignity_index.services.ai.common.providers import ProviderUnavailableError

        with self.assertRaises(ProviderUnavailableError):
            self._get_strict("gemini", AI_ALLOWED_PROVIDERS="mock", GEMINI_API_KEY="k")
        with self.assertRaises(ProviderUnavailableError):
            self._get_strict("nonexistent_provider", AI_ALLOWED_PROVIDERS="nonexistent_provider")

    def test_strict_still_serves_explicit_mock(self):
        from dignity_index.services.ai.common.providers.mock import MockProvider

        self.assertIsInstance(self._get_strict("mock"), MockProvider)


class MockProviderTests(unittest.TestCase):
    """Tests for the mock provider generate method."""

    def test_mock_generate_returns_dignity_json(self):
        from dignity_index.services.ai.common.providers.mock import MockProvider

        result = asyncio.run(MockProvider().generate("test prompt"))
        self.assertEqual(result.provider, "mock")
        parsed = json.loads(result.raw_text)
        self.assertEqual(set(parsed), {"score", "category", "explanation"})
        self.assertTrue(1 <= parsed["score"] <= 8)

    def test_mock_generate_respects_model_param(self):
        from dignity_index.services.ai.common.providers.mock import MockProvider

        result = asyncio.run(MockProvider().generate("test", model="custom-model"))
        self.assertEqual(result.model, "custom-model")


class RouterTests(unittest.TestCase):
    """Tests for router.resolve()."""

    def setUp(self):
        get_settings.cache_clear()

    def tearDown(self):
        get_settings.cache_clear()

    def _resolve(self, env, **kwargs):
        from dignity_index.services.ai.common import router

        with patch.dict(os.environ, env, clear=False):
            s = Settings()
            with (
                patch("dignity_index.services.ai.common.router.get_settings", return_value=s),
                patch("dignity_index.services.ai.common.providers.get_settings", return_value=s),
            ):
                return router.resolve("dignity", **kwargs)

    def test_defaults_to_mock(self):
        cfg = self._resolve({})
        self.assertEqual(cfg.provider.name, "mock")
        self.assertEqual(cfg.model, "")
        self.assertEqual(cfg.timeout_seconds, 15.0)

    def test_scope_env_provider_and_model(self):
        cfg = self._resolve(
            {
                "AI_DIGNITY_PROVIDER": "gemini",
                "AI_DIGNITY_MODEL": "gemini-2.0-flash",
                "GEMINI_API_KEY": "k",
                "AI_TIMEOUT_SECONDS": "4.5",
            }
        )
        self.assertEqual(cfg.provider.name, "gemini")
        self.assertEqual(cfg.model, "gemini-2.0-flash")
        self.assertEqual(cfg.timeout_seconds, 4.5)

    def test_override_ignored_when_disabled(self):
        cfg = self._resolve(
            {"ENABLE_AI_OVERRIDES": "false", "OPENAI_API_KEY": "sk"},
            override_provider="openai",
            override_model="gpt-4o",
        )
        self.assertEqual(cfg.provider.name, "mock")
        self.assertEqual(cfg.model, "")

    def test_override_used_when_enabled(self):
        cfg = self._resolve(
            {"ENABLE_AI_OVERRIDES": "true", "OPENAI_API_KEY": "sk"},
            override_provider="openai",
            override_model="gpt-4o",
        )
        self.assertEqual(cfg.provider.name, "openai")
        self.assertEqual(cfg.model, "gpt-4o")

    def test_model_outside_allowlist_replaced(self):
        cfg = self._resolve(
            {
                "AI_DIGNITY_PROVIDER": "gemini",
                "AI_DIGNITY_MODEL": "gemini-ultra-unknown",
                "GEMINI_API_KEY": "k",
                "AI_ALLOWED_MODELS": '{"gemini": ["gemini-2.0-flash", "gemini-1.5-pro"]}',
            }
        )
        self.assertEqual(cfg.model, "gemini-2.0-flash")

    def test_empty_model_takes_first_allowed(self):
        cfg = self._resolve({"AI_ALLOWED_MODELS": '{"mock": ["mock-v2"]}'})
        self.assertEqual(cfg.model, "mock-v2")

    def test_strict_default_resolves_to_mock(self):
        cfg = self._resolve({}, strict=True)
        self.assertEqual(cfg.provider.name, "mock")

    def test_strict_keyless_scope_provider_raises(self):
        from dignity_index.services.ai.common.providers import ProviderUnavailableError

        with self.assertRaises(ProviderUnavailableError):
            self._resolve({"AI_DIGNITY_PROVIDER": "gemini"}, strict=True)


class SettingsParsingTests(unittest.TestCase):
    def test_allowed_providers_csv_and_json(self):
        with patch.dict(os.environ, {"AI_ALLOWED_PROVIDERS": " Gemini , mock "}, clear=False):
            self.assertEqual(Settings().ai_allowed_providers, ["gemini", "mock"])
        with patch.dict(os.environ, {"AI_ALLOWED_PROVIDERS": '["claude"]'}, clear=False):
            self.assertEqual(Settings().ai_allowed_providers, ["claude"])

    def test_allowed_models_invalid_json_is_empty(self):
        with patch.dict(os.environ, {"AI_ALLOWED_MODELS": "not json"}, clear=False):
            self.assertEqual(Settings().ai_allowed_models, {})

    def test_default_allowlist_includes_all_providers(self):
        self.assertEqual(
            Settings().ai_allowed_providers,
            ["gemini", "claude", "openai", "groq", "mock"],
        )
