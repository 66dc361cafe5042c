from pydantic import BaseModel, Field
from typing import Optional

from listing_writer.models.vehicle import (
    Condition,
    DescriptionMode,
    DraftFormState,
    EntryMethod,
    VehicleRecord,
)


class GeneratedDescription(BaseModel):
    text: str
    mode: DescriptionMode


class GenerateDescriptionRequest(BaseModel):
    vehicle: VehicleRecord
    miles: int = Field(..., description="Odometer reading")
    condition: Condition
    additional_details: str = ""
    mode: DescriptionMode = DescriptionMode.FULL

    class Config:
        json_schema_extra = {
            "example": {
                "vehicle": {
                    "year": 2020,
                    "make": "Toyota",
                    "model": "Camry",
                    "transmission": "Automatic",
                    "price": 18500,
                },
                "miles": 42000,
                "condition": "Good",
                "additional_details": "One owner, new tires",
                "mode": "short",
            }
        }


class FormSnapshot(BaseModel):
    """Everything the presentation layer renders for one form session."""

    session_id: Optional[str] = None
    draft: DraftFormState
    makes: list[str] = []
    models: list[str] = []
    loading_makes: bool = False
    loading_models: bool = False
    make_error: Optional[str] = None
    model_error: Optional[str] = None
    generating: bool = False
    notification: Optional[str] = None
    description: Optional[GeneratedDescription] = None


class FormUpdate(BaseModel):
    """Field-change events from the presentation layer; unset fields are ignored."""

    method: Optional[EntryMethod] = None
    vin: Optional[str] = None
    year: Optional[int] = None
    make: Optional[str] = None
    model: Optional[str] = None
    engine_size: Optional[str] = None
    transmission: Optional[str] = None
    drivetrain: Optional[str] = None
    exterior_color: Optional[str] = None
    interior_color: Optional[str] = None
    interior_type: Optional[str] = None
    title_status: Optional[str] = None
    price: Optional[float] = None
    miles: Optional[int] = None
    condition: Optional[str] = None
    additional_details: Optional[str] = None
    description_mode: Optional[DescriptionMode] = None
