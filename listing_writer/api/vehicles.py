from fastapi import APIRouter, Depends, Query

from listing_writer.api.deps import get_lookup_client
from listing_writer.models.vehicle import VehicleRecord
from listing_writer.services.lookup_client import VehicleLookupClient, common_colors

router = APIRouter()


@router.get("/makes")
async def list_makes(
    year: int = Query(..., description="Model year"),
    lookup: VehicleLookupClient = Depends(get_lookup_client),
):
    return {"year": year, "makes": await lookup.list_makes_for_year(year)}


@router.get("/models")
async def list_models(
    make: str = Query(...),
    year: int = Query(...),
    lookup: VehicleLookupClient = Depends(get_lookup_client),
):
    """Distinct model names for a make and year, from NHTSA vPIC."""
    models = await lookup.list_models_for_make_year(make, year)
    return {"make": make, "year": year, "models": models}


@router.get("/decode-vin", response_model=VehicleRecord)
async def decode_vin(
    vin: str = Query(..., description="17-character Vehicle Identification Number"),
    lookup: VehicleLookupClient = Depends(get_lookup_client),
):
    """
    Decode a VIN to get vehicle year, make, model, and specs.
    Uses NHTSA vPIC API (Free, Official).
    """
    return await lookup.decode_vin(vin)


@router.get("/colors")
async def list_colors():
    return common_colors()
