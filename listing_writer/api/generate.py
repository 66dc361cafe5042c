from fastapi import APIRouter, Depends

from listing_writer.api.deps import get_lookup_client
from listing_writer.models.generation import (
    GenerateDescriptionRequest,
    GeneratedDescription,
)
from listing_writer.services.lookup_client import VehicleLookupClient

router = APIRouter()


@router.post("/generate-description", response_model=GeneratedDescription)
async def generate_description(
    request: GenerateDescriptionRequest,
    lookup: VehicleLookupClient = Depends(get_lookup_client),
):
    """One-shot generation for a vehicle record the caller already assembled."""
    text = await lookup.generate_description(
        request.vehicle,
        request.miles,
        request.condition,
        request.additional_details,
        request.mode,
    )
    return GeneratedDescription(text=text, mode=request.mode)
