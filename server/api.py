"""FastAPI server exposing the recommendation engine."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Path, Request
from fastapi.responses import JSONResponse

from closet_app.app import ClosetCuratorApp
from closet_app.logging_config import get_logger, log_event
from logic.validation import (
    FeedbackPayload,
    PreferencePayload,
    PreferenceUpdate,
    RecommendationEntry,
    RecommendationRequest,
    RecommendationResponse,
    SuggestionEntry,
    SuggestionRequest,
    SuggestionResponse,
    USER_ID_PATTERN,
)

LOGGER = get_logger(__name__)


def create_app(curator: ClosetCuratorApp | None = None) -> FastAPI:
    """Build the ASGI app around an explicitly constructed curator."""

    curator = curator or ClosetCuratorApp()
    app = FastAPI(title="Closet Curator", version="0.1.0")
    app.state.curator = curator

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        log_event(LOGGER, logging.WARNING, "request_rejected", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=400, content={"status": "error", "message": str(exc)})

    @app.get("/healthz")
    def healthcheck() -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok",
            "service": "closet-curator",
            "environment": curator.config.environment or "local",
        }

    @app.post("/recommendations", response_model=RecommendationResponse)
    def recommend(request: RecommendationRequest) -> RecommendationResponse:
        """Rank the supplied (or stored) outfits for the user."""

        outfits = [payload.to_domain() for payload in request.outfits] if request.outfits is not None else None
        run = curator.recommend(
            request.user_id,
            outfits=outfits,
            weather_tags=request.weather_tags,
            limit=request.limit,
            temperature=request.temperature,
            occasion=request.occasion,
            location=request.location,
        )
        return RecommendationResponse(
            user_id=request.user_id,
            weather_tags=run.weather_tags,
            recommendations=[RecommendationEntry.from_domain(entry) for entry in run.recommendations],
        )

    @app.post("/suggestions", response_model=SuggestionResponse)
    def suggest(request: SuggestionRequest) -> SuggestionResponse:
        """Suggest styles, colours, brands and items beyond the current wardrobe."""

        boards = [board.to_domain() for board in request.boards]
        suggestions = curator.suggest_styles(request.user_id, boards, limit=request.limit)
        return SuggestionResponse(
            user_id=request.user_id,
            suggestions=[SuggestionEntry.from_domain(entry) for entry in suggestions],
        )

    @app.post("/feedback", response_model=PreferencePayload)
    def record_feedback(payload: FeedbackPayload) -> PreferencePayload:
        preference = curator.get_preferences(payload.user_id)
        feedback = payload.to_domain(preference.preference_id)
        return PreferencePayload.from_domain(curator.record_feedback(payload.user_id, feedback))

    @app.get("/preferences/{user_id}", response_model=PreferencePayload)
    def get_preferences(user_id: str = Path(pattern=USER_ID_PATTERN, max_length=128)) -> PreferencePayload:
        return PreferencePayload.from_domain(curator.get_preferences(user_id))

    @app.put("/preferences/{user_id}", response_model=PreferencePayload)
    def update_preferences(
        update: PreferenceUpdate, user_id: str = Path(pattern=USER_ID_PATTERN, max_length=128)
    ) -> PreferencePayload:
        """Merge newly observed values and optionally blend an adventure sample."""

        preference = curator.update_preferences(user_id, **update.merge_kwargs())
        if update.adventure_sample is not None:
            preference = curator.update_adventure_level(user_id, update.adventure_sample)
        return PreferencePayload.from_domain(preference)

    return app


def get_app() -> FastAPI:
    """Expose a FastAPI instance for ASGI servers."""

    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="0.0.0.0", port=8080, reload=False)
