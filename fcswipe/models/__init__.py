"""Pydantic models for fcswipe."""

from fcswipe.models.profile import Profile
from fcswipe.models.state import DeckSnapshot, Screen, Swipe

__all__ = [
    "Profile",
    "DeckSnapshot",
    "Screen",
    "Swipe",
]
