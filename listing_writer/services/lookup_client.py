"""
Vehicle lookups and description generation behind one client.

All four operations validate their inputs before any request goes out and
raise only ListingError subclasses, so callers can show `error.message`.
"""

import httpx
import logging
from typing import Any, Dict, List, Optional

from listing_writer.config import Settings, settings as default_settings
from listing_writer.errors import (
    ConfigurationError,
    GenerationError,
    ServiceLookupError,
    ValidationError,
)
from listing_writer.models.vehicle import COMMON_COLORS, DescriptionMode, VehicleRecord
from listing_writer.services import vehicle_validator
from listing_writer.services.nhtsa import NHTSAService
from listing_writer.services.openrouter import OpenRouterClient
from listing_writer.services.prompts import build_prompt

logger = logging.getLogger(__name__)

# Static reference table; vPIC is only queried for models
COMMON_MAKES = [
    "Acura", "Audi", "BMW", "Buick", "Cadillac", "Chevrolet", "Chrysler",
    "Dodge", "Ford", "GMC", "Honda", "Hyundai", "Infiniti", "Jaguar", "Jeep",
    "Kia", "Land Rover", "Lexus", "Lincoln", "Mazda", "Mercedes-Benz", "MINI",
    "Mitsubishi", "Nissan", "Porsche", "Ram", "Subaru", "Tesla", "Toyota",
    "Volkswagen", "Volvo",
]

MISSING_KEY_MESSAGE = (
    "OpenRouter API key not configured. "
    "Please add OPENROUTER_API_KEY to the .env file."
)
NO_TEXT_FALLBACK = "Failed to generate description"

# A 200 response whose JSON is not the documented shape
MALFORMED_PAYLOAD = (AttributeError, TypeError, KeyError, IndexError)


def common_colors() -> Dict[str, List[str]]:
    return {kind: list(colors) for kind, colors in COMMON_COLORS.items()}


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class VehicleLookupClient:
    def __init__(
        self,
        nhtsa: Optional[NHTSAService] = None,
        completions: Optional[OpenRouterClient] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or default_settings
        self.nhtsa = nhtsa or NHTSAService(settings)
        self.completions = completions or OpenRouterClient(settings)

    async def list_makes_for_year(self, year: int) -> List[str]:
        try:
            vehicle_validator.parse_year(year)
        except ValidationError as e:
            raise ValidationError("Invalid year selected") from e
        return list(COMMON_MAKES)

    async def list_models_for_make_year(self, make: str, year: int) -> List[str]:
        try:
            year = vehicle_validator.parse_year(year)
            make = vehicle_validator.parse_make(make)
        except ValidationError as e:
            raise ValidationError("Invalid make or year selected") from e

        try:
            rows = await self.nhtsa.get_models_for_make_year(make, year)
        except httpx.HTTPStatusError as e:
            logger.warning(f"Model lookup failed for {year} {make}: {e}")
            raise ServiceLookupError(
                f"Failed to fetch models: {e.response.reason_phrase}"
            ) from e
        except (httpx.HTTPError, ValueError, *MALFORMED_PAYLOAD) as e:
            logger.warning(f"Model lookup failed for {year} {make}: {e}")
            raise ServiceLookupError("Failed to fetch models") from e

        if not rows:
            raise ServiceLookupError("No models found for the selected make and year")

        try:
            names = {row.get("Model_Name") for row in rows}
        except MALFORMED_PAYLOAD as e:
            logger.warning(f"Unexpected model rows for {year} {make}: {e}")
            raise ServiceLookupError("Failed to fetch models") from e

        names = {name for name in names if isinstance(name, str) and name}
        if not names:
            raise ServiceLookupError("No models found for the selected make and year")
        return sorted(names)

    async def decode_vin(self, vin: str) -> VehicleRecord:
        try:
            vin = vehicle_validator.parse_vin(vin)
        except ValidationError as e:
            raise ValidationError(
                "Invalid VIN format. Please enter a 17-character VIN."
            ) from e

        try:
            result = await self.nhtsa.decode_vin_values(vin)
            error_code = str(result.get("ErrorCode", ""))
        except (httpx.HTTPError, ValueError, *MALFORMED_PAYLOAD) as e:
            logger.warning(f"VIN decode failed for {vin}: {e}")
            raise ServiceLookupError("Failed to decode VIN") from e

        if error_code != "0":
            raise ServiceLookupError(_blank_to_none(result.get("ErrorText")) or "Invalid VIN")

        try:
            return VehicleRecord(
                year=int(result.get("ModelYear")),
                make=result.get("Make") or "",
                model=result.get("Model") or "",
                trim=_blank_to_none(result.get("Trim")),
                engine_size=_blank_to_none(result.get("DisplacementL")),
                transmission=_blank_to_none(result.get("TransmissionStyle")),
                drivetrain=_blank_to_none(result.get("DriveType")),
            )
        except (TypeError, ValueError) as e:
            # pydantic's ValidationError is a ValueError
            logger.warning(f"VIN decode for {vin} returned an unusable record: {e}")
            raise ServiceLookupError("Failed to decode VIN") from e

    async def generate_description(
        self,
        vehicle: VehicleRecord,
        miles: int,
        condition: str,
        notes: str = "",
        mode: DescriptionMode = DescriptionMode.FULL,
    ) -> str:
        if not self.completions.configured:
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        try:
            miles = vehicle_validator.parse_miles(miles)
            condition = vehicle_validator.parse_condition(condition)
            mode = DescriptionMode(mode)
        except (ValidationError, ValueError) as e:
            raise ValidationError("Invalid input data. Please check your entries.") from e

        prompt = build_prompt(vehicle, miles, condition.value, notes or "", mode)

        try:
            text = await self.completions.chat_completion(
                [{"role": "user", "content": prompt}]
            )
        except (httpx.HTTPError, ValueError, *MALFORMED_PAYLOAD) as e:
            logger.warning(f"Description generation failed for {vehicle.title}: {e}")
            raise GenerationError("Failed to generate description") from e

        return text or NO_TEXT_FALLBACK


lookup_client = VehicleLookupClient()
