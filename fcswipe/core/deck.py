"""Profile deck - the view-state machine behind the swipe screen."""

from fcswipe.exceptions import ActionNotAvailableError
from fcswipe.models.profile import Profile
from fcswipe.models.state import DeckSnapshot, Screen, Swipe


class ProfileDeck:
    """
    Ordered, immutable list of profiles with a forward-only cursor.

    The screen is derived, never stored:

        loading -> error -> empty -> exhausted -> profile

    first match wins.

    Example:
        deck = ProfileDeck(fallback_avatar_url)
        deck.begin_load()
        deck.finish_load(profiles)
        deck.swipe(Swipe.LIKE)
    """

    def __init__(self, fallback_avatar_url: str):
        self.fallback_avatar_url = fallback_avatar_url
        # Pre-mount state shows the loading screen
        self.loading = True
        self.error: str | None = None
        self.current_index = 0
        self._profiles: tuple[Profile, ...] = ()
        self._failed_avatars: set[str] = set()

    @property
    def profiles(self) -> tuple[Profile, ...]:
        return self._profiles

    @property
    def screen(self) -> Screen:
        if self.loading:
            return Screen.LOADING
        if self.error:
            return Screen.ERROR
        if not self._profiles:
            return Screen.EMPTY
        if self.current_index >= len(self._profiles):
            return Screen.EXHAUSTED
        return Screen.PROFILE

    @property
    def current_profile(self) -> Profile | None:
        """Profile at the cursor, with the avatar fallback applied."""
        if self.screen != Screen.PROFILE:
            return None
        profile = self._profiles[self.current_index]
        if profile.id in self._failed_avatars:
            return profile.with_avatar(self.fallback_avatar_url)
        return profile

    def begin_load(self) -> None:
        """Enter the loading screen and clear any prior error."""
        self.loading = True
        self.error = None

    def finish_load(self, profiles: list[Profile]) -> None:
        """Replace the list with a freshly fetched batch."""
        self._profiles = tuple(profiles)
        self._failed_avatars.clear()
        self.loading = False

    def fail_load(self, message: str) -> None:
        """Empty the list and surface a user-facing error message."""
        self._profiles = ()
        self._failed_avatars.clear()
        self.error = message
        self.loading = False

    def swipe(self, direction: Swipe) -> bool:
        """
        Apply a like or pass to the current card.

        Both directions advance identically. On the last card the cursor
        stays put, so the exhausted screen is never reached from here.

        Args:
            direction: Swipe.LIKE or Swipe.PASS

        Returns:
            True if the cursor advanced, False on the last card

        Raises:
            ActionNotAvailableError: If no profile card is showing
        """
        direction = Swipe(direction)
        screen = self.screen
        if screen != Screen.PROFILE:
            raise ActionNotAvailableError(
                f"Cannot {direction.value} on the {screen.value} screen"
            )

        if self.current_index < len(self._profiles) - 1:
            self.current_index += 1
            return True
        return False

    def mark_avatar_failed(self, profile_id: str) -> None:
        """Render the given profile with the fallback avatar from now on."""
        self._failed_avatars.add(profile_id)

    def snapshot(self) -> DeckSnapshot:
        return DeckSnapshot(
            screen=self.screen,
            current_index=self.current_index,
            total=len(self._profiles),
            profile=self.current_profile,
            error_message=self.error,
        )
