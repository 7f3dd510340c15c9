"""Screen rendering for the terminal (rich) and the web page (HTML)."""

from html import escape

from rich.align import Align
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from fcswipe.models.profile import Profile
from fcswipe.models.state import DeckSnapshot, Screen


LOADING_TEXT = "Loading profiles..."
EMPTY_TITLE = "No users found"
EMPTY_TEXT = "There are no profiles to show right now."
EXHAUSTED_TITLE = "No more users to show"
EXHAUSTED_TEXT = "Check back later for new profiles!"


def _message(title: str, body: str, style: str = "bold") -> RenderableType:
    return Align.center(
        Group(
            Text(title, style=style, justify="center"),
            Text(body, style="dim", justify="center"),
        )
    )


def render_card(profile: Profile) -> RenderableType:
    """Build the profile card panel."""
    stats = Table.grid(padding=(0, 4))
    stats.add_column(justify="center")
    stats.add_column(justify="center")
    stats.add_row(
        Text(profile.followers, style="bold"),
        Text(profile.following, style="bold"),
    )
    stats.add_row(Text("Followers", style="dim"), Text("Following", style="dim"))

    body = Group(
        Text(
            profile.avatar_url,
            style=Style(dim=True, link=profile.avatar_url),
            justify="center",
            overflow="ellipsis",
        ),
        Text(""),
        Text(profile.display_name, style="bold", justify="center"),
        Text(profile.handle, style="dim", justify="center"),
        Text(""),
        Text(profile.bio, justify="center"),
        Text(""),
        Align.center(stats),
    )
    return Panel(body, width=48, border_style="magenta")


def render_screen(snapshot: DeckSnapshot) -> RenderableType:
    """
    Build the renderable for whichever screen the snapshot is on.

    Args:
        snapshot: DeckSnapshot from the session

    Returns:
        rich renderable for console.print
    """
    if snapshot.screen == Screen.LOADING:
        return Align.center(Text(LOADING_TEXT, style="magenta"))

    if snapshot.screen == Screen.ERROR:
        return _message(
            snapshot.error_message or "Something went wrong",
            "[r] Retry  [q] Quit",
            style="bold red",
        )

    if snapshot.screen == Screen.EMPTY:
        return _message(EMPTY_TITLE, EMPTY_TEXT)

    if snapshot.screen == Screen.EXHAUSTED:
        return _message(EXHAUSTED_TITLE, EXHAUSTED_TEXT)

    return Align.center(
        Group(
            render_card(snapshot.profile),
            Text(
                f"[p] Pass  [l] Like  [q] Quit   {snapshot.current_index + 1}/{snapshot.total}",
                style="dim",
                justify="center",
            ),
        )
    )


_PAGE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>fcswipe</title>
<style>
body {{ min-height: 100vh; margin: 0; display: flex; align-items: center; justify-content: center;
  font-family: system-ui, sans-serif; background: linear-gradient(135deg, #faf5ff, #fdf2f8); }}
.card {{ width: 22rem; background: #fff; border-radius: 1rem; box-shadow: 0 4px 16px rgba(0,0,0,.1);
  padding: 1.5rem; text-align: center; }}
.avatar {{ width: 6rem; height: 6rem; border-radius: 50%; object-fit: cover; border: 4px solid #f3e8ff; }}
.handle, .label {{ color: #6b7280; }}
.stats {{ display: flex; justify-content: center; gap: 2rem; margin: 1rem 0; }}
.actions {{ display: flex; justify-content: center; gap: 1rem; margin-top: 1.5rem; }}
.actions button {{ width: 4rem; height: 4rem; border-radius: 50%; border: 0; font-size: 1.5rem; cursor: pointer; }}
</style>
</head>
<body>
{body}
</body>
</html>
"""


def _html_message(title: str, body: str, form: str = "") -> str:
    return (
        '<div class="card">'
        f"<h2>{escape(title)}</h2>"
        f'<p class="label">{escape(body)}</p>'
        f"{form}"
        "</div>"
    )


def render_html(snapshot: DeckSnapshot, fallback_avatar_url: str) -> str:
    """
    Build the web page for the current screen.

    Broken avatars are swapped for the fallback URL by the browser.
    """
    if snapshot.screen == Screen.LOADING:
        body = _html_message(LOADING_TEXT, "")
    elif snapshot.screen == Screen.ERROR:
        retry = '<form method="post" action="/retry"><button type="submit">Retry</button></form>'
        body = _html_message(snapshot.error_message or "Something went wrong", "", retry)
    elif snapshot.screen == Screen.EMPTY:
        body = _html_message(EMPTY_TITLE, EMPTY_TEXT)
    elif snapshot.screen == Screen.EXHAUSTED:
        body = _html_message(EXHAUSTED_TITLE, EXHAUSTED_TEXT)
    else:
        p = snapshot.profile
        fallback = escape(fallback_avatar_url, quote=True)
        body = (
            '<div>'
            '<div class="card">'
            f'<img class="avatar" src="{escape(p.avatar_url, quote=True)}" alt="{escape(p.display_name, quote=True)}" '
            f"onerror=\"this.onerror=null;this.src='{fallback}'\">"
            f"<h1>{escape(p.display_name)}</h1>"
            f'<p class="handle">{escape(p.handle)}</p>'
            f"<p>{escape(p.bio)}</p>"
            '<div class="stats">'
            f'<div><strong>{escape(p.followers)}</strong><div class="label">Followers</div></div>'
            f'<div><strong>{escape(p.following)}</strong><div class="label">Following</div></div>'
            "</div>"
            "</div>"
            '<div class="actions">'
            '<form method="post" action="/pass"><button type="submit" title="Pass">&#10005;</button></form>'
            '<form method="post" action="/like"><button type="submit" title="Like">&#9829;</button></form>'
            "</div>"
            "</div>"
        )
    return _PAGE.format(body=body)
