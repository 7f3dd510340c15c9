"""fcswipe - swipe through Farcaster profile cards."""

from fcswipe.models.profile import Profile
from fcswipe.models.state import DeckSnapshot, Screen, Swipe
from fcswipe.config import SwipeConfig
from fcswipe.core.deck import ProfileDeck
from fcswipe.core.session import SwipeSession

__version__ = "0.1.0"

__all__ = [
    # Main interface
    "SwipeSession",
    "SwipeConfig",
    "ProfileDeck",
    # Models
    "Profile",
    "DeckSnapshot",
    "Screen",
    "Swipe",
    "__version__",
]
