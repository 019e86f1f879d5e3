"""Task descriptor and model lifecycle hooks registered with the host."""

from collections.abc import Callable

import structlog
from pydantic import BaseModel, Field

logger = structlog.get_logger()


class ModelInfo(BaseModel):
    name: str
    info: str = ""
    url: str = ""
    best_for_task_ids: list[str] = Field(default_factory=list)


class InteractiveLearningTask(BaseModel):
    """What the host shows for this plugin and how it drives model lifecycle."""

    id: str = "interactive_learning"
    label: str = "Interactive Learning"
    category_id: str = "learning"
    category_label: str = "Learning"
    description: str = (
        "Choose your language and tell us about yourself to personalize "
        "your learning journey."
    )
    models: list[ModelInfo] = Field(
        default_factory=lambda: [
            ModelInfo(
                name="Gemma3n-E2B-IT",
                info="On-device multilingual LLM with text & audio support",
                best_for_task_ids=["interactive_learning"],
            )
        ]
    )

    async def initialize_model(self, model: str, on_done: Callable[[str], None]) -> None:
        """Prepare ``model``; ``on_done`` receives an error string, empty on success.

        The flow needs nothing model-specific, so this always reports ready.
        """
        logger.info("model_initialized", task=self.id, model=model)
        on_done("")

    async def cleanup_model(self, model: str, on_done: Callable[[], None]) -> None:
        logger.info("model_cleaned_up", task=self.id, model=model)
        on_done()
