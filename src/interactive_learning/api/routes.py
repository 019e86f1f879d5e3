"""REST API routes for the profile and game level tables."""

import structlog
from fastapi import APIRouter, HTTPException

from interactive_learning.config import get_settings
from interactive_learning.games.levels import LEVELS, GameKind
from interactive_learning.games.simulation import midpoint_angle
from interactive_learning.plugin import InteractiveLearningTask
from interactive_learning.storage.profile_store import ProfileStore

logger = structlog.get_logger()
router = APIRouter(prefix="/api")


def get_profile_store() -> ProfileStore:
    settings = get_settings()
    return ProfileStore(
        settings.storage_dir,
        db_name=settings.profile_db_name,
        backup_name=settings.backup_file_name,
    )


@router.get("/profile")
async def get_profile() -> dict:
    """Return the saved learner profile (defaults when none exists)."""
    store = get_profile_store()
    profile = store.load()
    data = profile.model_dump(mode="json", by_alias=True)
    data["registered"] = profile.is_registered
    return data


@router.delete("/profile")
async def reset_profile() -> dict:
    """Delete the learner profile; the next session starts onboarding."""
    get_profile_store().clear()
    return {"status": "cleared"}


@router.get("/games/{kind}/levels")
async def get_levels(kind: str) -> list[dict]:
    """Level table of one mini-game."""
    try:
        game = GameKind(kind)
    except ValueError:
        raise HTTPException(status_code=404, detail="Unknown game")
    return [
        {**level.model_dump(mode="json"), "midpoint": midpoint_angle(level)}
        for level in LEVELS[game]
    ]


@router.get("/task")
async def get_task() -> dict:
    """Plugin descriptor for the host."""
    return InteractiveLearningTask().model_dump()


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}
