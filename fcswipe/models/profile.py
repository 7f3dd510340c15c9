"""Profile data model."""

from pydantic import BaseModel


class Profile(BaseModel):
    """Display-ready Farcaster profile card."""

    model_config = {"frozen": True}

    id: str
    display_name: str
    username: str
    bio: str
    avatar_url: str
    followers: str
    following: str

    @property
    def handle(self) -> str:
        return f"@{self.username}"

    def with_avatar(self, url: str) -> "Profile":
        """Return a copy with only the avatar URL replaced."""
        return self.model_copy(update={"avatar_url": url})
