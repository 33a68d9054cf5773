"""Health check endpoints."""

from fastapi import APIRouter, Request

from schemas import HealthResponse

router = APIRouter(tags=["health"])

SERVICE_NAME = "legacy-redirects"


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Health check endpoint.

    Also reports how many redirect rules and legacy ids were loaded, which
    makes an empty content directory easy to spot after a deploy.
    """
    state = request.app.state
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        rules=getattr(state, "rule_count", 0),
        legacy_ids=getattr(state, "legacy_id_count", 0),
    )
