"""User profile model for the learner's onboarding answers and topic scores."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

LOGIN_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class UserProfile(BaseModel):
    """Single persisted learner record.

    Serialized with camelCase keys (``favoriteTopic``, ``solarScore``...);
    unknown keys are ignored and missing keys take their defaults.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    language: str = ""
    name: str = ""
    favorite_topic: str = ""
    motivation: str = ""
    solar_score: int = Field(default=0, ge=0, le=100)
    wind_energy_score: int = Field(default=0, ge=0, le=100)
    custom_project_score: int = Field(default=0, ge=0, le=100)
    login_count: int = Field(default=0, ge=0)
    last_login_date: str = ""

    @property
    def is_registered(self) -> bool:
        """True once both name and language hold non-blank text."""
        return bool(self.name.strip()) and bool(self.language.strip())

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
