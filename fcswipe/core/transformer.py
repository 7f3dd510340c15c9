"""Data transformation from Neynar user records to display profiles."""

from typing import Any

from fcswipe.exceptions import ParseError
from fcswipe.models.profile import Profile


DEFAULT_DISPLAY_NAME = "Unknown User"
DEFAULT_BIO = "No bio available"


def format_count(value: Any) -> str:
    """
    Convert raw counts to compact display strings.

    Examples:
        890 -> "890"
        1200 -> "1.2K"
        5000 -> "5K"
        3400000 -> "3.4M"
        999999 -> "1M"
        None -> "0"
    """
    if value is None or isinstance(value, bool):
        return "0"

    try:
        count = int(float(value))
    except (TypeError, ValueError):
        return "0"

    if count < 1_000:
        return str(max(count, 0))

    suffixes = [
        (1_000_000_000, "B"),
        (1_000_000, "M"),
        (1_000, "K"),
    ]

    for i, (threshold, suffix) in enumerate(suffixes):
        if count >= threshold:
            scaled = round(count / threshold, 1)
            # 999_999 rounds to 1000K; show it as 1M
            if scaled >= 1_000 and i > 0:
                threshold, suffix = suffixes[i - 1]
                scaled = round(count / threshold, 1)
            return f"{scaled:.1f}".removesuffix(".0") + suffix

    return str(count)


def _text_or_default(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


def _extract_bio(user: dict) -> Any:
    profile = user.get("profile")
    if not isinstance(profile, dict):
        return None
    bio = profile.get("bio")
    if not isinstance(bio, dict):
        return None
    return bio.get("text")


def transform_user(record: dict, fallback_avatar_url: str) -> Profile:
    """
    Transform one wrapped user record to a validated Profile.

    Args:
        record: Item of the response "users" array, shaped {"user": {...}}
        fallback_avatar_url: Avatar used when the record has none

    Returns:
        Validated Profile model

    Raises:
        ParseError: If the record lacks the user object, fid or username
    """
    user = record.get("user") if isinstance(record, dict) else None
    if not isinstance(user, dict):
        raise ParseError("Record has no user object")

    fid = user.get("fid")
    username = user.get("username")
    if fid is None or username is None:
        raise ParseError(f"User record missing fid or username: {user!r}")

    return Profile(
        id=str(fid),
        display_name=_text_or_default(user.get("display_name"), DEFAULT_DISPLAY_NAME),
        username=str(username),
        bio=_text_or_default(_extract_bio(user), DEFAULT_BIO),
        avatar_url=_text_or_default(user.get("pfp_url"), fallback_avatar_url),
        followers=format_count(user.get("follower_count")),
        following=format_count(user.get("following_count")),
    )


def transform_payload(payload: Any, fallback_avatar_url: str) -> list[Profile]:
    """
    Map a reciprocal-followers response body to profiles, in order.

    A body without a "users" array is treated as an empty listing rather
    than an error.

    Args:
        payload: Decoded JSON body
        fallback_avatar_url: Avatar used for records without one

    Returns:
        List of Profiles, possibly empty
    """
    if not isinstance(payload, dict):
        return []

    records = payload.get("users")
    if not isinstance(records, list):
        return []

    return [transform_user(record, fallback_avatar_url) for record in records]
