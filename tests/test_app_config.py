import os
import unittest
from unittest.mock import patch

from devcontainer_chat.app_config import parse_app_config, resolve_runtime_env
from devcontainer_chat.errors import ConfigurationError


class ParseAppConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        app = parse_app_config({})
        self.assertEqual("openai", app.provider_name)
        self.assertIsNone(app.base_url)
        self.assertEqual(0.7, app.temperature)
        self.assertEqual(8192, app.max_output_tokens)
        self.assertEqual(256, app.max_sessions)
        self.assertIsNone(app.session_idle_ttl_seconds)
        self.assertTrue(app.per_container_workspace)
        self.assertEqual("default", app.container_id)

    def test_values_are_normalized(self) -> None:
        app = parse_app_config({
            "Provider": " OpenRouter ",
            "BaseUrl": "https://openrouter.ai/api/v1",
            "Model": "anthropic/claude-sonnet-4",
            "Temperature": "0.25",
            "PerContainerWorkspace": "no",
            "SessionIdleTtlSeconds": "3600",
        })
        self.assertEqual("openrouter", app.provider_name)
        self.assertEqual("https://openrouter.ai/api/v1", app.base_url)
        self.assertEqual("anthropic/claude-sonnet-4", app.model)
        self.assertEqual(0.25, app.temperature)
        self.assertFalse(app.per_container_workspace)
        self.assertEqual(3600.0, app.session_idle_ttl_seconds)

    def test_unsupported_provider_is_fatal(self) -> None:
        with self.assertRaises(ConfigurationError) as ctx:
            parse_app_config({"Provider": "cohere"})
        self.assertIn("Unsupported AI provider", str(ctx.exception))

    def test_temperature_out_of_range_is_fatal(self) -> None:
        for value in (-0.1, 1.5):
            with self.assertRaises(ConfigurationError):
                parse_app_config({"Temperature": value})

    def test_configuration_error_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            parse_app_config({"Provider": "nope"})


class ResolveRuntimeEnvTests(unittest.TestCase):
    def test_reads_provider_env_var(self) -> None:
        with patch.dict(os.environ, {"GEMINI_API_KEY": "g-key"}, clear=True):
            env = resolve_runtime_env("gemini")
        self.assertEqual("g-key", env.provider_api_key)
        self.assertEqual("GEMINI_API_KEY", env.provider_env_var)

    def test_falls_back_to_config_api_key(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            env = resolve_runtime_env("openrouter", {"ApiKey": "sk-or"})
        self.assertEqual("sk-or", env.provider_api_key)
        self.assertEqual("OPENROUTER_API_KEY", env.provider_env_var)

    def test_env_var_wins_over_config(self) -> None:
        with patch.dict(os.environ, {"OPENAI_API_KEY": "from-env"}, clear=True):
            env = resolve_runtime_env("openai", {"ApiKey": "from-config"})
        self.assertEqual("from-env", env.provider_api_key)

    def test_missing_key_is_empty(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual("", resolve_runtime_env("anthropic").provider_api_key)


if __name__ == "__main__":
    unittest.main()
