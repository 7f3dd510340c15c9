"""FastAPI web screen for the fcswipe deck."""

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel, Field

from fcswipe import SwipeSession, SwipeConfig, __version__
from fcswipe.core.renderer import render_html
from fcswipe.exceptions import ActionNotAvailableError
from fcswipe.models.state import DeckSnapshot, Swipe


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str


class SwipeResponse(BaseModel):
    """Result of a like or pass."""

    advanced: bool = Field(
        ...,
        description="False when the action was ignored on the last card",
    )
    state: DeckSnapshot


class ConfigResponse(BaseModel):
    """Non-secret deck configuration."""

    neynar_base_url: str = Field(..., description="Base URL of the Neynar API")
    target_fid: int = Field(
        ...,
        description="Farcaster fid whose reciprocal followers are shown",
        json_schema_extra={"example": 3},
    )
    batch_limit: int = Field(
        ...,
        description="Number of profiles fetched per load. Range: 1-100.",
        json_schema_extra={"example": 25},
    )
    fallback_avatar_url: str = Field(
        ...,
        description="Image shown when a profile has no avatar or it fails to load",
    )
    probe_avatars: bool = Field(
        ...,
        description="Check avatar URLs before showing a card in the terminal",
    )
    log_level: str = Field(
        ...,
        json_schema_extra={"example": "INFO", "enum": ["DEBUG", "INFO", "WARNING", "ERROR"]},
    )


def create_app(
    config: SwipeConfig | None = None,
    session: SwipeSession | None = None,
) -> FastAPI:
    """
    Build the web app around a single swipe session.

    Args:
        config: SwipeConfig instance, uses defaults if None
        session: Pre-built session (tests inject one with a mock transport)

    Returns:
        FastAPI application
    """
    session = session or SwipeSession(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the session and load the deck on mount."""
        async with session:
            await session.load()
            yield

    app = FastAPI(
        title="fcswipe API",
        description="Swipe through Farcaster reciprocal followers",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.session = session

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check():
        """Check API health status."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            timestamp=datetime.now().isoformat(),
        )

    @app.get("/api/config", response_model=ConfigResponse, tags=["System"])
    async def get_config():
        """Return the deck configuration, without the API key."""
        cfg = session.config
        return ConfigResponse(
            neynar_base_url=cfg.neynar_base_url,
            target_fid=cfg.target_fid,
            batch_limit=cfg.batch_limit,
            fallback_avatar_url=cfg.fallback_avatar_url,
            probe_avatars=cfg.probe_avatars,
            log_level=cfg.log_level,
        )

    @app.get("/api/state", response_model=DeckSnapshot, tags=["Deck"])
    async def get_state():
        """Current screen and profile."""
        return session.snapshot()

    @app.post("/api/swipe/{direction}", response_model=SwipeResponse, tags=["Deck"])
    async def swipe(direction: Swipe):
        """
        Like or pass the current profile.

        Returns 409 when no profile card is showing.
        """
        try:
            advanced = session.swipe(direction)
        except ActionNotAvailableError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return SwipeResponse(advanced=advanced, state=session.snapshot())

    @app.post("/api/retry", response_model=DeckSnapshot, tags=["Deck"])
    async def retry():
        """Reload the deck from the error screen."""
        try:
            return await session.retry()
        except ActionNotAvailableError as e:
            raise HTTPException(status_code=409, detail=str(e))

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def index():
        return HTMLResponse(render_html(session.snapshot(), session.config.fallback_avatar_url))

    @app.post("/{action}", include_in_schema=False)
    async def form_action(action: str):
        """Handle the page's like/pass/retry forms, then redirect back."""
        try:
            if action == "retry":
                await session.retry()
            elif action in (Swipe.LIKE.value, Swipe.PASS.value):
                session.swipe(Swipe(action))
            else:
                raise HTTPException(status_code=404, detail=f"Unknown action: {action}")
        except ActionNotAvailableError:
            # Stale page; just show the current screen
            pass
        return RedirectResponse(url="/", status_code=303)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
