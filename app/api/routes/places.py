"""Places routes - cafe search proxy."""

from fastapi import APIRouter, HTTPException, Query, status

from app.core.errors import ServiceError
from app.schemas.places import PlaceSearchResponse
from app.services.places_service import PlacesService

router = APIRouter()


@router.get("/autocomplete", response_model=PlaceSearchResponse)
async def autocomplete(input: str = Query("", description="Text typed by the user")) -> PlaceSearchResponse:
    """Search cafes matching the input text."""
    if not input.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Input parameter is required")

    try:
        results = await PlacesService().search_cafes(input.strip())
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return PlaceSearchResponse(results=results)
