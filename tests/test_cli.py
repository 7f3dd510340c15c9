"""Tests for the command-line interface - mocked fetch, no internet."""

import asyncio
import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import httpx
from typer.testing import CliRunner

from fcswipe import SwipeConfig, SwipeSession, Screen, __version__
from fcswipe.cli import app
from fcswipe.core.fetcher import FetchResult


FIXTURES_DIR = Path(__file__).parent / "fixtures"

runner = CliRunner()


def fixture_result() -> FetchResult:
    payload = json.loads((FIXTURES_DIR / "reciprocal_followers.json").read_text(encoding="utf-8"))
    return FetchResult(payload=payload, success=True, response_status=200)


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_list_prints_profiles():
    with patch("fcswipe.core.session.fetch_reciprocal_followers", new_callable=AsyncMock) as mock_fetch:
        mock_fetch.return_value = fixture_result()
        result = runner.invoke(app, ["list", "--fid", "3", "--limit", "3"])

    assert result.exit_code == 0
    assert "@betashop.eth" in result.stdout
    assert "3 profiles" in result.stdout


def test_list_fails_on_error():
    with patch("fcswipe.core.session.fetch_reciprocal_followers", new_callable=AsyncMock) as mock_fetch:
        mock_fetch.return_value = FetchResult(payload=None, success=False, error="HTTP 500", response_status=500)
        result = runner.invoke(app, ["list"])

    assert result.exit_code == 1
    assert "Failed to load profiles" in result.stdout


def test_swipe_session_until_last_card():
    with patch("fcswipe.core.session.fetch_reciprocal_followers", new_callable=AsyncMock) as mock_fetch:
        mock_fetch.return_value = fixture_result()
        result = runner.invoke(app, ["swipe", "--no-avatar-check"], input="l\nl\nl\nq\n")

    assert result.exit_code == 0
    assert "Varun Srinivasan" in result.stdout
    assert "Jason Goldberg" in result.stdout
    assert "No more users to show" not in result.stdout


def test_failing_load_after_cli_run_reaches_error_screen():
    """A session opened after a CLI run still settles on the error screen."""
    with patch("fcswipe.core.session.fetch_reciprocal_followers", new_callable=AsyncMock) as mock_fetch:
        mock_fetch.return_value = fixture_result()
        assert runner.invoke(app, ["list"]).exit_code == 0

    transport = httpx.MockTransport(lambda request: httpx.Response(500, json={}))

    async def run():
        async with SwipeSession(SwipeConfig(log_level="ERROR"), transport=transport) as session:
            await session.load()
            return session

    session = asyncio.run(run())

    assert session.screen == Screen.ERROR
    assert session.deck.loading is False
