"""Test configuration reading from multiple sources."""

import os
from datetime import timedelta
from unittest.mock import patch

from discbot.configs.config import AppConfig, get_app_config


class TestConfigSources:
    """Test configuration loading from multiple sources."""

    def test_yaml_defaults_loaded(self):
        config = get_app_config()

        assert config.llm.model_name == "gpt-4"
        assert config.llm.temperature == 0.0
        assert config.rag.top_k == 4
        assert config.api.request_timeout == timedelta(minutes=5)

    def test_env_vars_override_yaml(self):
        env_vars = {
            "DISCBOT_LLM__MODEL_NAME": "gpt-4o",
            "DISCBOT_RAG__TOP_K": "6",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            config = AppConfig()

            assert config.llm.model_name == "gpt-4o"
            assert config.rag.top_k == 6

    def test_init_args_override_env(self):
        with patch.dict(os.environ, {"DISCBOT_RAG__TOP_K": "6"}, clear=False):
            config = AppConfig(rag={"top_k": 2})

            assert config.rag.top_k == 2

    def test_prompt_defaults(self):
        config = AppConfig()

        assert "{context}" in config.prompt.system_template
        assert config.prompt.user_template == "{question}"
        assert config.prompt.greeting.startswith("Hi, I'm a Public Disclosure")
