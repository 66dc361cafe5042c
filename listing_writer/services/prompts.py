"""
Prompt templates for listing descriptions.

`full` asks for a detailed, professional write-up with every spec listed.
`short` asks for a compact marketplace post of 2-3 paragraphs.
"""

from typing import Optional

from listing_writer.models.vehicle import DescriptionMode, VehicleRecord

NOT_AVAILABLE = "N/A"
NO_PRICE = "Contact for price"


def format_price(price: Optional[float]) -> str:
    # zero means the seller left the price blank
    if not price:
        return NO_PRICE
    return f"${price:,.2f}"


def format_miles(miles: int) -> str:
    return f"{miles:,}"


def _or_na(value: Optional[str]) -> str:
    return value or NOT_AVAILABLE


def _joined(*parts: Optional[str]) -> str:
    return " ".join(p for p in parts if p)


def full_prompt(vehicle: VehicleRecord, miles: int, condition: str, notes: str) -> str:
    return f"""Create a compelling, detailed sales description for a {vehicle.title} with {format_miles(miles)} miles in {condition} condition.

Specifications:
- Price: {format_price(vehicle.price)}
- Engine: {_or_na(vehicle.engine_size)}
- Transmission: {_or_na(vehicle.transmission)}
- Drivetrain: {_or_na(vehicle.drivetrain)}
- Exterior Color: {_or_na(vehicle.exterior_color)}
- Interior: {_or_na(vehicle.interior_color)} {_or_na(vehicle.interior_type)}
- Title Status: {_or_na(vehicle.title_status)}
- Trim: {_or_na(vehicle.trim)}

Additional details: {notes}

Please create a professional, engaging, and detailed description that highlights the vehicle's features, condition, and specifications. Include the price and title status in the description."""


def short_prompt(vehicle: VehicleRecord, miles: int, condition: str, notes: str) -> str:
    key_specs = _joined(vehicle.engine_size, vehicle.transmission, vehicle.drivetrain)
    exterior = _joined(vehicle.exterior_color, "exterior")
    interior = _joined(vehicle.interior_color, vehicle.interior_type, "interior")

    return f"""Create a concise, Facebook Marketplace-optimized description for a {vehicle.title} ({format_miles(miles)} miles, {condition} condition).

Key specs: {key_specs or NOT_AVAILABLE}, {exterior}, {interior}.
{vehicle.title_status or "Clean"} title. Price: {format_price(vehicle.price)}

Additional notes: {notes}

Keep it brief but compelling, focusing on key selling points. Limit to 2-3 short paragraphs."""


def build_prompt(
    vehicle: VehicleRecord,
    miles: int,
    condition: str,
    notes: str,
    mode: DescriptionMode = DescriptionMode.FULL,
) -> str:
    if DescriptionMode(mode) is DescriptionMode.SHORT:
        return short_prompt(vehicle, miles, condition, notes)
    return full_prompt(vehicle, miles, condition, notes)
