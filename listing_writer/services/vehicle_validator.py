"""
Field validation for the listing form.

One parse function per field. Each returns the normalized value or raises
ValidationError with a message fit to show next to the field.
"""

from datetime import date
from typing import Annotated, Any, Optional

from pydantic import Field, StrictInt, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from listing_writer.errors import ValidationError
from listing_writer.models.vehicle import (
    Condition,
    Drivetrain,
    MIN_YEAR,
    InteriorType,
    TitleStatus,
    Transmission,
)

VIN_LENGTH = 17

_vin = TypeAdapter(Annotated[str, Field(min_length=VIN_LENGTH, max_length=VIN_LENGTH)])
_name = TypeAdapter(Annotated[str, Field(min_length=1)])
_miles = TypeAdapter(Annotated[int, Field(ge=0)])
_price = TypeAdapter(Annotated[float, Field(ge=0)])
_condition = TypeAdapter(Condition)
_drivetrain = TypeAdapter(Drivetrain)
_transmission = TypeAdapter(Transmission)
_interior_type = TypeAdapter(InteriorType)
_title_status = TypeAdapter(TitleStatus)


def max_year(current_year: Optional[int] = None) -> int:
    return (current_year or date.today().year) + 1


def _parse(adapter: TypeAdapter, value: Any, message: str):
    try:
        return adapter.validate_python(value)
    except PydanticValidationError as e:
        raise ValidationError(message) from e


def parse_vin(value: Any) -> str:
    return _parse(_vin, value, f"VIN must be exactly {VIN_LENGTH} characters")


def parse_year(value: Any, current_year: Optional[int] = None) -> int:
    upper = max_year(current_year)
    adapter = TypeAdapter(Annotated[StrictInt, Field(ge=MIN_YEAR, le=upper)])
    return _parse(adapter, value, f"Year must be between {MIN_YEAR} and {upper}")


def parse_make(value: Any) -> str:
    return _parse(_name, value, "Make is required")


def parse_model(value: Any) -> str:
    return _parse(_name, value, "Model is required")


def parse_miles(value: Any) -> int:
    return _parse(_miles, value, "Mileage must be zero or more")


def parse_price(value: Any) -> float:
    return _parse(_price, value, "Price must be zero or more")


def parse_condition(value: Any) -> Condition:
    return _parse(_condition, value, "Condition must be Excellent, Good, Fair or Poor")


def parse_drivetrain(value: Any) -> Drivetrain:
    return _parse(_drivetrain, value, "Drivetrain must be 2WD, 4WD or AWD")


def parse_transmission(value: Any) -> Transmission:
    return _parse(_transmission, value, "Transmission must be Automatic or Manual")


def parse_interior_type(value: Any) -> InteriorType:
    return _parse(_interior_type, value, "Interior type must be Leather or Cloth")


def parse_title_status(value: Any) -> TitleStatus:
    return _parse(_title_status, value, "Title status must be Clean or Salvage")
