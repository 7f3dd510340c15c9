"""Swipe session - coordinates fetching, mapping and the profile deck."""

import asyncio
from datetime import datetime

import httpx

from fcswipe.config import SwipeConfig
from fcswipe.logging import get_logger, configure_logging
from fcswipe.core.deck import ProfileDeck
from fcswipe.core.fetcher import build_client, fetch_reciprocal_followers, probe_avatar
from fcswipe.core.transformer import transform_payload
from fcswipe.exceptions import ActionNotAvailableError
from fcswipe.models.state import DeckSnapshot, Screen, Swipe


LOAD_ERROR_MESSAGE = "Failed to load profiles. Please try again."


class SwipeSession:
    """
    High-level swipe interface owning the HTTP client and the deck.

    Example:
        async with SwipeSession() as session:
            await session.load()
            session.swipe(Swipe.LIKE)
            print(session.snapshot().profile)
    """

    def __init__(
        self,
        config: SwipeConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize session with optional configuration.

        Args:
            config: SwipeConfig instance, uses defaults if None
            transport: Optional httpx transport for both clients
        """
        self.config = config or SwipeConfig()
        self.deck = ProfileDeck(self.config.fallback_avatar_url)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._avatar_client: httpx.AsyncClient | None = None
        self._inflight: asyncio.Task | None = None
        self._probed: dict[str, bool] = {}
        self._log = get_logger("session")

    async def __aenter__(self) -> "SwipeSession":
        """Async context manager entry - open HTTP clients."""
        configure_logging(self.config)
        # Rebind so events go to the stream configured just now
        self._log = get_logger("session")
        self._client = build_client(self.config, self._transport)
        self._avatar_client = httpx.AsyncClient(
            timeout=self.config.request_timeout_s,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - close HTTP clients."""
        if self._inflight and not self._inflight.done():
            await asyncio.wait([self._inflight])
        if self._client:
            await self._client.aclose()
            self._client = None
        if self._avatar_client:
            await self._avatar_client.aclose()
            self._avatar_client = None

    @property
    def screen(self) -> Screen:
        return self.deck.screen

    def snapshot(self) -> DeckSnapshot:
        return self.deck.snapshot()

    async def load(self) -> DeckSnapshot:
        """
        Fetch the profile batch and populate the deck.

        Calls made while a load is in flight join it instead of issuing a
        second request.

        Returns:
            Deck snapshot after the load completes
        """
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.create_task(self._load())
        else:
            self._log.info("load_joined")
        await asyncio.shield(self._inflight)
        return self.snapshot()

    async def retry(self) -> DeckSnapshot:
        """Re-run the load from the error screen."""
        if self.deck.screen != Screen.ERROR:
            raise ActionNotAvailableError(
                f"Cannot retry on the {self.deck.screen.value} screen"
            )
        self._log.info("retry", fid=self.config.target_fid)
        return await self.load()

    def swipe(self, direction: Swipe) -> bool:
        """
        Like or pass the current profile.

        Returns:
            True if the deck advanced to the next card
        """
        profile = self.deck.current_profile
        advanced = self.deck.swipe(direction)
        if advanced:
            self._log.info(
                "swipe",
                direction=Swipe(direction).value,
                profile_id=profile.id,
                index=self.deck.current_index,
            )
        else:
            self._log.info(
                "swipe_ignored",
                direction=Swipe(direction).value,
                profile_id=profile.id,
                reason="last_card",
            )
        return advanced

    async def check_avatar(self) -> bool:
        """
        Probe the current profile's avatar once, falling back on failure.

        Returns:
            False if the fallback avatar is now in use
        """
        profile = self.deck.current_profile
        if profile is None or not self.config.probe_avatars:
            return True
        if profile.id in self._probed:
            return self._probed[profile.id]
        if profile.avatar_url == self.config.fallback_avatar_url:
            return True

        if self._avatar_client is None:
            raise RuntimeError("SwipeSession used outside of its async context")

        ok = await probe_avatar(self._avatar_client, profile.avatar_url)
        self._probed[profile.id] = ok
        if not ok:
            self._log.info("avatar_fallback", profile_id=profile.id, url=profile.avatar_url)
            self.deck.mark_avatar_failed(profile.id)
        return ok

    async def _load(self) -> None:
        if self._client is None:
            raise RuntimeError("SwipeSession used outside of its async context")

        fid = self.config.target_fid
        limit = self.config.batch_limit
        # Deck state is settled before each log call
        self.deck.begin_load()
        self._probed.clear()
        self._log.info("load_start", fid=fid, limit=limit)
        start = datetime.now()

        try:
            fetch_result = await fetch_reciprocal_followers(self._client, fid, limit)
            if fetch_result.success:
                profiles = transform_payload(fetch_result.payload, self.config.fallback_avatar_url)
        except Exception as e:
            self.deck.fail_load(LOAD_ERROR_MESSAGE)
            self._log.error("load_failed", fid=fid, error=str(e), exc_info=True)
            return

        if not fetch_result.success:
            self.deck.fail_load(LOAD_ERROR_MESSAGE)
            self._log.error(
                "load_failed",
                fid=fid,
                error=fetch_result.error,
                status=fetch_result.response_status,
            )
            return

        self.deck.finish_load(profiles)
        self._log.info(
            "load_complete",
            fid=fid,
            profiles_count=len(profiles),
            duration_ms=(datetime.now() - start).total_seconds() * 1000,
        )
