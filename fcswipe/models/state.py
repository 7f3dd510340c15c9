"""Screen state models."""

from enum import Enum

from pydantic import BaseModel

from fcswipe.models.profile import Profile


class Screen(str, Enum):
    """Mutually exclusive screens of the deck."""
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    EXHAUSTED = "exhausted"
    PROFILE = "profile"


class Swipe(str, Enum):
    """User decision on the current card."""
    LIKE = "like"
    PASS = "pass"


class DeckSnapshot(BaseModel):
    """Point-in-time view of the deck, safe to hand to renderers."""

    screen: Screen
    current_index: int
    total: int
    profile: Profile | None = None
    error_message: str | None = None
