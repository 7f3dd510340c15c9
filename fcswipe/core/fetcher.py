"""httpx-based client for the Neynar reciprocal-followers listing."""

from dataclasses import dataclass
from typing import Any

import httpx

from fcswipe.config import SwipeConfig
from fcswipe.exceptions import FetchError, ParseError


RECIPROCAL_FOLLOWERS_PATH = "/v2/farcaster/followers/reciprocal"


@dataclass
class FetchResult:
    """Result of a feed fetch operation."""

    payload: Any
    success: bool
    error: str | None = None
    response_status: int | None = None


def build_client(
    config: SwipeConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Create the shared async client with the static credential header.

    Args:
        config: SwipeConfig with base URL, key and timeout
        transport: Optional transport override (tests use httpx.MockTransport)

    Returns:
        Configured httpx.AsyncClient
    """
    return httpx.AsyncClient(
        base_url=config.neynar_base_url,
        headers={"accept": "application/json", "api_key": config.neynar_api_key},
        timeout=config.request_timeout_s,
        transport=transport,
    )


async def fetch_reciprocal_followers(
    client: httpx.AsyncClient,
    fid: int,
    limit: int,
) -> FetchResult:
    """
    Fetch users who mutually follow the given fid.

    Args:
        client: Client built by build_client
        fid: Target Farcaster identity
        limit: Maximum number of records to return

    Returns:
        FetchResult with the decoded JSON payload or error details

    Raises:
        FetchError: On transport failures
        ParseError: If the body is not valid JSON
    """
    try:
        response = await client.get(
            RECIPROCAL_FOLLOWERS_PATH,
            params={"fid": fid, "limit": limit},
        )
    except httpx.HTTPError as e:
        raise FetchError(f"Request error: {e}") from e

    status = response.status_code
    if status >= 400:
        return FetchResult(
            payload=None,
            success=False,
            error=f"HTTP {status}",
            response_status=status,
        )

    try:
        payload = response.json()
    except ValueError as e:
        raise ParseError(f"Invalid JSON body: {e}") from e

    return FetchResult(payload=payload, success=True, response_status=status)


async def probe_avatar(client: httpx.AsyncClient, url: str) -> bool:
    """
    Check whether an avatar URL serves an image.

    Hosts that refuse HEAD with 405 get a one-byte ranged GET instead;
    only the headers are read. The client must not carry the API
    credential header.
    """
    try:
        response = await client.head(url, follow_redirects=True)
        if response.status_code == 405:
            async with client.stream(
                "GET", url, headers={"range": "bytes=0-0"}, follow_redirects=True
            ) as response:
                pass
    except (httpx.HTTPError, httpx.InvalidURL):
        return False

    if response.status_code >= 400:
        return False

    content_type = response.headers.get("content-type")
    if content_type and not content_type.startswith("image/"):
        return False
    return True
