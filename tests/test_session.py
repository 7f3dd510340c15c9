"""Unit tests for SwipeSession - mocked HTTP transport, no internet."""

import asyncio
import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from fcswipe.config import SwipeConfig
from fcswipe.core.fetcher import FetchResult
from fcswipe.core.session import LOAD_ERROR_MESSAGE, SwipeSession
from fcswipe.exceptions import ActionNotAvailableError
from fcswipe.models.state import Screen, Swipe


FIXTURES_DIR = Path(__file__).parent / "fixtures"
FALLBACK = "https://example.com/fallback.png"


def load_fixture_payload(name: str = "reciprocal_followers") -> dict:
    """Load a recorded API response."""
    return json.loads((FIXTURES_DIR / f"{name}.json").read_text(encoding="utf-8"))


def make_config(**overrides) -> SwipeConfig:
    defaults = {
        "neynar_api_key": "test-key",
        "target_fid": 3,
        "batch_limit": 10,
        "fallback_avatar_url": FALLBACK,
        "log_level": "WARNING",
    }
    defaults.update(overrides)
    return SwipeConfig(**defaults)


def json_transport(payload, status_code: int = 200, calls: list | None = None) -> httpx.MockTransport:
    """Transport answering every feed request with the same body."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


class TestSessionLoad:
    """Test the data loader contract."""

    @pytest.mark.asyncio
    async def test_starts_on_loading_screen(self):
        session = SwipeSession(make_config())
        assert session.screen == Screen.LOADING

    @pytest.mark.asyncio
    async def test_load_success(self):
        calls = []
        transport = json_transport(load_fixture_payload(), calls=calls)

        async with SwipeSession(make_config(), transport=transport) as session:
            snapshot = await session.load()

        assert snapshot.screen == Screen.PROFILE
        assert snapshot.total == 3
        assert snapshot.current_index == 0
        assert snapshot.profile.id == "2"
        assert session.deck.loading is False
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_request_shape(self):
        calls = []
        transport = json_transport({"users": []}, calls=calls)

        async with SwipeSession(make_config(target_fid=194, batch_limit=7), transport=transport) as session:
            await session.load()

        request = calls[0]
        assert request.method == "GET"
        assert request.url.path == "/v2/farcaster/followers/reciprocal"
        assert request.url.params["fid"] == "194"
        assert request.url.params["limit"] == "7"
        assert request.headers["api_key"] == "test-key"

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        transport = json_transport({"message": "Unauthorized"}, status_code=401)

        async with SwipeSession(make_config(), transport=transport) as session:
            snapshot = await session.load()

        assert snapshot.screen == Screen.ERROR
        assert snapshot.error_message == LOAD_ERROR_MESSAGE
        assert snapshot.total == 0
        assert session.deck.loading is False

    @pytest.mark.asyncio
    async def test_malformed_payload_is_empty_not_error(self):
        transport = json_transport({"result": "unexpected"})

        async with SwipeSession(make_config(), transport=transport) as session:
            snapshot = await session.load()

        assert snapshot.screen == Screen.EMPTY
        assert snapshot.error_message is None

    @pytest.mark.asyncio
    async def test_invalid_json_is_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))

        async with SwipeSession(make_config(), transport=transport) as session:
            snapshot = await session.load()

        assert snapshot.screen == Screen.ERROR
        assert snapshot.total == 0

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with SwipeSession(make_config(), transport=httpx.MockTransport(handler)) as session:
            snapshot = await session.load()

        assert snapshot.screen == Screen.ERROR
        assert snapshot.error_message == LOAD_ERROR_MESSAGE
        assert session.deck.loading is False

    @pytest.mark.asyncio
    async def test_error_screen_set_even_if_logging_fails(self):
        transport = json_transport({}, status_code=500)

        async with SwipeSession(make_config(), transport=transport) as session:
            session._log = MagicMock()
            session._log.error.side_effect = ValueError("I/O operation on closed file.")

            with pytest.raises(ValueError):
                await session.load()

            assert session.screen == Screen.ERROR
            assert session.deck.loading is False
            assert session.deck.error == LOAD_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_bad_record_is_error(self):
        transport = json_transport({"users": [{"object": "reciprocal_follower"}]})

        async with SwipeSession(make_config(), transport=transport) as session:
            snapshot = await session.load()

        assert snapshot.screen == Screen.ERROR

    @pytest.mark.asyncio
    async def test_mocked_fetch(self):
        """The fetch seam can be patched like any other coroutine."""
        mock_result = FetchResult(payload=load_fixture_payload(), success=True, response_status=200)

        with patch("fcswipe.core.session.fetch_reciprocal_followers", new_callable=AsyncMock) as mock_fetch:
            mock_fetch.return_value = mock_result

            async with SwipeSession(make_config()) as session:
                snapshot = await session.load()

            assert snapshot.total == 3
            mock_fetch.assert_called_once()
            assert mock_fetch.call_args.args[1:] == (3, 10)


class TestSingleFlight:
    """Concurrent loads share one request."""

    @pytest.mark.asyncio
    async def test_concurrent_loads_issue_one_request(self):
        calls = []

        async def handler(request):
            calls.append(request)
            await asyncio.sleep(0.05)
            return httpx.Response(200, json=load_fixture_payload())

        async with SwipeSession(make_config(), transport=httpx.MockTransport(handler)) as session:
            first, second = await asyncio.gather(session.load(), session.load())

        assert len(calls) == 1
        assert first.total == second.total == 3

    @pytest.mark.asyncio
    async def test_sequential_loads_issue_new_requests(self):
        calls = []
        transport = json_transport(load_fixture_payload(), calls=calls)

        async with SwipeSession(make_config(), transport=transport) as session:
            await session.load()
            await session.load()

        assert len(calls) == 2


class TestRetry:
    """Test manual retry from the error screen."""

    @pytest.mark.asyncio
    async def test_retry_recovers(self):
        responses = [
            httpx.Response(500, json={}),
            httpx.Response(200, json=load_fixture_payload()),
        ]
        transport = httpx.MockTransport(lambda request: responses.pop(0))

        async with SwipeSession(make_config(), transport=transport) as session:
            first = await session.load()
            assert first.screen == Screen.ERROR

            second = await session.retry()

        assert second.screen == Screen.PROFILE
        assert second.error_message is None
        assert second.total == 3

    @pytest.mark.asyncio
    async def test_retry_only_on_error_screen(self):
        transport = json_transport(load_fixture_payload())

        async with SwipeSession(make_config(), transport=transport) as session:
            await session.load()
            with pytest.raises(ActionNotAvailableError):
                await session.retry()


class TestSessionSwipe:
    """Test swipes through the session."""

    @pytest.mark.asyncio
    async def test_swipe_through_deck(self):
        transport = json_transport(load_fixture_payload())

        async with SwipeSession(make_config(), transport=transport) as session:
            await session.load()
            assert session.swipe(Swipe.LIKE) is True
            assert session.swipe(Swipe.PASS) is True
            assert session.swipe(Swipe.LIKE) is False

            snapshot = session.snapshot()

        assert snapshot.current_index == 2
        assert snapshot.profile.id == "99999"

    @pytest.mark.asyncio
    async def test_swipe_on_error_screen_raises(self):
        transport = json_transport({}, status_code=503)

        async with SwipeSession(make_config(), transport=transport) as session:
            await session.load()
            with pytest.raises(ActionNotAvailableError):
                session.swipe(Swipe.LIKE)


def avatar_transport(avatar_status: int, content_type: str = "image/jpeg", seen: list | None = None):
    """Feed on api.neynar.com, avatars everywhere else."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "api.neynar.com":
            return httpx.Response(200, json=load_fixture_payload())
        if seen is not None:
            seen.append(request)
        return httpx.Response(avatar_status, headers={"content-type": content_type})

    return httpx.MockTransport(handler)


class TestAvatarCheck:
    """Test render-time avatar probing."""

    @pytest.mark.asyncio
    async def test_broken_avatar_falls_back(self):
        async with SwipeSession(make_config(), transport=avatar_transport(404)) as session:
            await session.load()
            original = session.deck.profiles[0]

            assert await session.check_avatar() is False
            shown = session.snapshot().profile

        assert shown.avatar_url == FALLBACK
        assert shown.display_name == original.display_name
        assert shown.bio == original.bio
        assert shown.followers == original.followers

    @pytest.mark.asyncio
    async def test_non_image_falls_back(self):
        transport = avatar_transport(200, content_type="text/html")
        async with SwipeSession(make_config(), transport=transport) as session:
            await session.load()
            assert await session.check_avatar() is False

    @pytest.mark.asyncio
    async def test_working_avatar_kept(self):
        async with SwipeSession(make_config(), transport=avatar_transport(200)) as session:
            await session.load()
            assert await session.check_avatar() is True
            assert session.snapshot().profile.avatar_url == "https://i.imgur.com/T3WgDbC.jpg"

    @pytest.mark.asyncio
    async def test_probe_once_per_profile_without_credentials(self):
        seen = []
        async with SwipeSession(make_config(), transport=avatar_transport(200, seen=seen)) as session:
            await session.load()
            await session.check_avatar()
            await session.check_avatar()

        assert len(seen) == 1
        assert seen[0].method == "HEAD"
        assert "api_key" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_fallback_avatar_not_probed(self):
        seen = []
        async with SwipeSession(make_config(), transport=avatar_transport(200, seen=seen)) as session:
            await session.load()
            session.swipe(Swipe.LIKE)
            session.swipe(Swipe.LIKE)
            assert await session.check_avatar() is True

        assert seen == []

    @pytest.mark.asyncio
    async def test_probe_disabled(self):
        seen = []
        config = make_config(probe_avatars=False)
        async with SwipeSession(config, transport=avatar_transport(404, seen=seen)) as session:
            await session.load()
            assert await session.check_avatar() is True

        assert seen == []

    @pytest.mark.asyncio
    async def test_head_refused_falls_back_to_ranged_get(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "api.neynar.com":
                return httpx.Response(200, json=load_fixture_payload())
            seen.append(request)
            if request.method == "HEAD":
                return httpx.Response(405)
            return httpx.Response(206, headers={"content-type": "image/jpeg"}, content=b"\xff")

        async with SwipeSession(make_config(), transport=httpx.MockTransport(handler)) as session:
            await session.load()
            assert await session.check_avatar() is True

        assert [r.method for r in seen] == ["HEAD", "GET"]
        assert seen[1].headers["range"] == "bytes=0-0"

    @pytest.mark.asyncio
    async def test_head_refused_and_get_missing_falls_back(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "api.neynar.com":
                return httpx.Response(200, json=load_fixture_payload())
            return httpx.Response(405 if request.method == "HEAD" else 404)

        async with SwipeSession(make_config(), transport=httpx.MockTransport(handler)) as session:
            await session.load()
            assert await session.check_avatar() is False
            assert session.snapshot().profile.avatar_url == FALLBACK
