"""Places schemas."""

from pydantic import BaseModel


class Place(BaseModel):
    name: str
    formatted_address: str
    place_id: str | None = None


class PlaceSearchResponse(BaseModel):
    results: list[Place]
