from datetime import date
from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import Optional

MIN_YEAR = 1900


def max_model_year() -> int:
    return date.today().year + 1


class EntryMethod(str, Enum):
    VIN = "vin"
    MANUAL = "manual"


class DescriptionMode(str, Enum):
    FULL = "full"
    SHORT = "short"


class Condition(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class Drivetrain(str, Enum):
    TWO_WD = "2WD"
    FOUR_WD = "4WD"
    AWD = "AWD"


class Transmission(str, Enum):
    AUTOMATIC = "Automatic"
    MANUAL = "Manual"


class InteriorType(str, Enum):
    LEATHER = "Leather"
    CLOTH = "Cloth"


class TitleStatus(str, Enum):
    CLEAN = "Clean"
    SALVAGE = "Salvage"


class VehicleRecord(BaseModel):
    """
    A vehicle as handed to the description generator.

    Decoded VIN values are free text from the registry
    (e.g. "4WD/4-Wheel Drive/4x4"), so the optional specs stay plain strings.
    """

    year: int
    make: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    trim: Optional[str] = None
    engine_size: Optional[str] = None
    transmission: Optional[str] = None
    drivetrain: Optional[str] = None
    exterior_color: Optional[str] = None
    interior_color: Optional[str] = None
    interior_type: Optional[str] = None
    title_status: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)

    @field_validator("year")
    @classmethod
    def year_in_range(cls, year: int) -> int:
        if not MIN_YEAR <= year <= max_model_year():
            raise ValueError(f"Year must be between {MIN_YEAR} and {max_model_year()}")
        return year

    @property
    def title(self) -> str:
        return f"{self.year} {self.make} {self.model}"


class DraftFormState(BaseModel):
    method: EntryMethod = EntryMethod.VIN
    vin: str = ""
    year: int = Field(default_factory=lambda: date.today().year)
    make: str = ""
    model: str = ""
    engine_size: str = ""
    transmission: Transmission = Transmission.AUTOMATIC
    drivetrain: Drivetrain = Drivetrain.TWO_WD
    exterior_color: str = ""
    interior_color: str = ""
    interior_type: InteriorType = InteriorType.CLOTH
    title_status: TitleStatus = TitleStatus.CLEAN
    price: Optional[float] = None
    miles: int = 0
    condition: Condition = Condition.GOOD
    additional_details: str = ""
    description_mode: DescriptionMode = DescriptionMode.FULL


COMMON_COLORS = {
    "exterior": [
        "Black", "White", "Silver", "Gray", "Red", "Blue", "Green", "Brown",
        "Gold", "Beige", "Yellow", "Orange", "Purple", "Bronze", "Burgundy",
        "Navy",
    ],
    "interior": [
        "Black", "Gray", "Beige", "Brown", "Tan", "White", "Red", "Blue",
        "Cream",
    ],
}
