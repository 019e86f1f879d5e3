"""Application configuration using pydantic-settings."""

import functools
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


def _find_project_root() -> Path:
    """Find project root by locating pyproject.toml."""
    current = Path(__file__).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent
    return Path(__file__).resolve().parent.parent.parent


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from settings.yaml."""

    def get_field_value(self, field_name: str) -> tuple[Any, str, bool]:
        """Not used - we implement __call__ instead."""
        return None, "", False

    def __call__(self) -> dict[str, Any]:
        """Load settings from YAML file."""
        yaml_path = _find_project_root() / "config" / "settings.yaml"
        if not yaml_path.exists():
            return {}

        with open(yaml_path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        # Flatten nested structure to match Settings field names
        flattened = {}
        if 'server' in data:
            flattened['host'] = data['server'].get('host')
            flattened['port'] = data['server'].get('port')
        if 'storage' in data:
            storage = data['storage']
            flattened['data_dir'] = storage.get('data_dir')
            flattened['profile_db_name'] = storage.get('profile_db_name')
            flattened['backup_file_name'] = storage.get('backup_file_name')
        if 'games' in data:
            games = data['games']
            flattened['game_tick_seconds'] = games.get('tick_seconds')
            flattened['level_time_seconds'] = games.get('level_time_seconds')
            flattened['sweep_duration_seconds'] = games.get('sweep_duration_seconds')
        if 'chat' in data:
            flattened['chat_model'] = data['chat'].get('model')
            flattened['chat_audio_model'] = data['chat'].get('audio_model')

        # Remove None values
        return {k: v for k, v in flattened.items() if v is not None}


class Settings(BaseSettings):
    """Application settings loaded from environment and config files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Chat collaborator (optional: None leaves the chat model not ready)
    openai_api_key: str | None = Field(default=None)
    chat_model: str = Field(default="gpt-4o-mini")
    chat_audio_model: str = Field(default="gpt-4o-audio-preview")
    default_model_id: str = Field(default="Gemma3n-E2B-IT")

    # Storage
    data_dir: Path | None = Field(default=None)
    profile_db_name: str = Field(default="interactive_learning_prefs")
    backup_file_name: str = Field(default="interactive_learning_data.json")

    # Games
    game_tick_seconds: float = Field(default=0.1)
    level_time_seconds: float = Field(default=30.0)
    sweep_duration_seconds: float = Field(default=30.0)

    # Server
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)

    # Paths
    project_root: Path = Field(default_factory=_find_project_root)

    @property
    def storage_dir(self) -> Path:
        d = self.data_dir or self.project_root / "data"
        d.mkdir(parents=True, exist_ok=True)
        return d

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customise settings sources to include YAML file.

        Priority order (highest to lowest):
        1. init_settings (arguments passed to Settings())
        2. env_settings (environment variables)
        3. dotenv_settings (.env file)
        4. YamlSettingsSource (settings.yaml)
        5. file_secret_settings
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlSettingsSource(settings_cls),
            file_secret_settings,
        )


@functools.lru_cache
def get_settings() -> Settings:
    """Get application settings singleton."""
    return Settings()


def load_translations(path: Path | None = None) -> dict:
    """Load the translation tables keyed by language name."""
    translations_path = path or _find_project_root() / "config" / "translations.yaml"
    if not translations_path.exists():
        return {}
    with open(translations_path, encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    return data.get('languages', {})
