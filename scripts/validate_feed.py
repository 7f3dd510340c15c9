"""Live validation script - fetch a real feed and save a live snapshot.

The curated fixture used by the unit tests is left alone; --save writes
tests/fixtures/reciprocal_followers_live.json, which test_transformer maps
when present.
"""

import asyncio
import json
import sys
from pathlib import Path

from fcswipe.config import SwipeConfig
from fcswipe.core.fetcher import build_client, fetch_reciprocal_followers
from fcswipe.core.transformer import DEFAULT_BIO, transform_payload

FIXTURES_DIR = Path(__file__).parent.parent / "tests" / "fixtures"


async def validate(save_fixture: bool = False) -> int:
    """Fetch one batch, map it and report field coverage."""
    config = SwipeConfig()
    print(f"Fetching reciprocal followers of fid {config.target_fid} (limit {config.batch_limit})...")

    async with build_client(config) as client:
        result = await fetch_reciprocal_followers(client, config.target_fid, config.batch_limit)

    if not result.success:
        print(f"❌ Fetch failed: {result.error}")
        return 1

    profiles = transform_payload(result.payload, config.fallback_avatar_url)
    print(f"✅ {len(profiles)} profiles")

    missing_avatar = sum(1 for p in profiles if p.avatar_url == config.fallback_avatar_url)
    missing_bio = sum(1 for p in profiles if p.bio == DEFAULT_BIO)
    print(f"   {missing_avatar} without avatar, {missing_bio} without bio")

    for p in profiles[:5]:
        print(f"   {p.display_name} ({p.handle}) - {p.followers} followers")

    if save_fixture:
        path = FIXTURES_DIR / "reciprocal_followers_live.json"
        path.write_text(json.dumps(result.payload, indent=2), encoding="utf-8")
        print(f"Saved live snapshot to {path}")

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(validate(save_fixture="--save" in sys.argv)))
