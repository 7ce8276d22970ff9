from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from course_catalog.api.deps import get_rating_client
from course_catalog.libs.rating_client import RatingClient, RatingClientError

router = APIRouter(prefix="/api/rmp", tags=["Ratings"])
logger = structlog.get_logger()


@router.get("")
async def get_professor_rating(
    school: str | None = Query(None),
    professor: str | None = Query(None),
    client: RatingClient = Depends(get_rating_client),
) -> JSONResponse:
    """Proxy a professor lookup to the rating endpoint, returning its body untouched."""
    if not school or not professor:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="School and professor parameters are required",
        )

    try:
        body = await client.fetch_raw(school, professor)
    except RatingClientError as exc:
        await logger.awarning("rating_proxy_failed", professor=professor, error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch professor data",
        ) from exc

    # Passed through as-is whatever the JSON shape
    return JSONResponse(content=body)
