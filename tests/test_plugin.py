"""Tests for the host plugin descriptor and settings."""

from unittest.mock import MagicMock

from interactive_learning.config import Settings
from interactive_learning.plugin import InteractiveLearningTask


class TestInteractiveLearningTask:
    def test_descriptor(self):
        task = InteractiveLearningTask()
        assert task.id == "interactive_learning"
        assert [m.name for m in task.models] == ["Gemma3n-E2B-IT"]
        assert task.models[0].best_for_task_ids == ["interactive_learning"]

    async def test_initialize_reports_success(self):
        on_done = MagicMock()
        await InteractiveLearningTask().initialize_model("Gemma3n-E2B-IT", on_done)
        on_done.assert_called_once_with("")

    async def test_cleanup_calls_back(self):
        on_done = MagicMock()
        await InteractiveLearningTask().cleanup_model("Gemma3n-E2B-IT", on_done)
        on_done.assert_called_once_with()


class TestSettings:
    def test_yaml_defaults(self, monkeypatch):
        monkeypatch.delenv("GAME_TICK_SECONDS", raising=False)
        settings = Settings()
        assert settings.game_tick_seconds == 0.1
        assert settings.level_time_seconds == 30
        assert settings.chat_model == "gpt-4o-mini"

    def test_env_overrides_yaml(self, monkeypatch):
        monkeypatch.setenv("LEVEL_TIME_SECONDS", "12.5")
        assert Settings().level_time_seconds == 12.5

    def test_storage_dir_created(self, tmp_path):
        settings = Settings(data_dir=tmp_path / "store")
        assert settings.storage_dir == tmp_path / "store"
        assert settings.storage_dir.is_dir()
