"""Application settings assembled from several sources.

Sources, highest priority first: keyword arguments, ``DISCBOT_*``
environment variables (``__`` separates nesting levels), the ``.env``
file, ``configs/config.yaml``, secret files, then field defaults.

``get_app_config()`` builds a fresh ``AppConfig`` on every call, so YAML
edits apply to the next request without a restart.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .system import APIConfig, LLMConfig, LoggingConfig, PromptConfig, RagConfig

PROJECT_ROOT = Path(__file__).resolve().parents[3]
STATIC_CONFIG_FILE = PROJECT_ROOT / "configs" / "config.yaml"
DOTENV_FILE = PROJECT_ROOT / ".env"

ENV_PREFIX = "DISCBOT_"
ENV_NESTED_DELIMITER = "__"


class AppConfig(BaseSettings):
    """Top-level settings, one section per concern."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter=ENV_NESTED_DELIMITER,
        env_file=DOTENV_FILE,
        env_file_encoding="utf-8",
        yaml_file=STATIC_CONFIG_FILE,
        yaml_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    llm: LLMConfig = Field(default_factory=LLMConfig)
    rag: RagConfig = Field(default_factory=RagConfig)
    prompt: PromptConfig = Field(default_factory=PromptConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        yaml_settings = YamlConfigSettingsSource(settings_cls)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            yaml_settings,
            file_secret_settings,
        )


def get_app_config() -> AppConfig:
    """FastAPI dependency returning freshly loaded settings."""
    return AppConfig()
