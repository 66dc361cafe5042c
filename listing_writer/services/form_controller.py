"""
Form State Controller

Holds one seller's draft listing, keeps the year -> make -> model chain
consistent, runs the dependent option lookups and drives the submit flow.

Field handlers mutate state synchronously and schedule any dependent
lookup as a task on the running event loop; `settle()` waits for them.
A lookup result is applied only if the keys it was started for still
match the draft, so a slow earlier response never overwrites a later one.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Optional

from listing_writer.errors import GenerationError, ListingError, ValidationError
from listing_writer.models.generation import FormSnapshot, GeneratedDescription
from listing_writer.models.vehicle import (
    DescriptionMode,
    DraftFormState,
    EntryMethod,
    VehicleRecord,
)
from listing_writer.services import vehicle_validator
from listing_writer.services.lookup_client import VehicleLookupClient

logger = logging.getLogger(__name__)

# Identity fields go first: each one resets the ones after it
CHAIN_ORDER = ("method", "year", "make", "model")

FIELD_PARSERS = {
    "transmission": vehicle_validator.parse_transmission,
    "drivetrain": vehicle_validator.parse_drivetrain,
    "interior_type": vehicle_validator.parse_interior_type,
    "title_status": vehicle_validator.parse_title_status,
    "condition": vehicle_validator.parse_condition,
    "miles": vehicle_validator.parse_miles,
}

TEXT_FIELDS = (
    "vin",
    "engine_size",
    "exterior_color",
    "interior_color",
    "additional_details",
)


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _text_or_none(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return value.strip() or None


class FormController:
    def __init__(
        self,
        lookup: VehicleLookupClient,
        draft: Optional[DraftFormState] = None,
    ):
        self.lookup = lookup
        self.draft = draft or DraftFormState()

        self.makes: list[str] = []
        self.models: list[str] = []
        self.loading_makes = False
        self.loading_models = False
        self.make_error: Optional[str] = None
        self.model_error: Optional[str] = None

        self.generating = False
        self.notification: Optional[str] = None
        self.description: Optional[GeneratedDescription] = None

        self._tasks: set[asyncio.Task] = set()

    @property
    def is_manual(self) -> bool:
        return self.draft.method is EntryMethod.MANUAL

    def select_method(self, method: EntryMethod) -> None:
        try:
            method = EntryMethod(method)
        except ValueError as e:
            raise ValidationError("Entry method must be vin or manual") from e

        previous = self.draft.method
        self.draft.method = method
        if method is previous:
            return

        if method is EntryMethod.MANUAL:
            self.draft.make = ""
            self.draft.model = ""
            self.models = []
            self.model_error = None
            self.loading_models = False
            self._refresh_makes()
        else:
            # in-flight manual lookups will be discarded on arrival
            self.loading_makes = False
            self.loading_models = False

    def change_year(self, year: int) -> None:
        self.draft.year = year
        self.draft.make = ""
        self.draft.model = ""
        self.models = []
        self.model_error = None
        self.loading_models = False
        if self.is_manual:
            self._refresh_makes()

    def change_make(self, make: str) -> None:
        self.draft.make = make or ""
        self.draft.model = ""
        self.models = []
        self.model_error = None
        self.loading_models = False
        if self.is_manual and self.draft.make and self.draft.year:
            self._refresh_models()

    def change_model(self, model: str) -> None:
        self.draft.model = model or ""

    def update_fields(self, **fields: Any) -> None:
        """
        Apply several field changes as one event.

        Identity fields run through their handlers in chain order so that
        e.g. {"year": 2020, "make": "Toyota"} ends with make set and a
        models lookup started.
        """
        unknown = set(fields) - set(DraftFormState.model_fields)
        if unknown:
            raise ValidationError(f"Unknown field: {', '.join(sorted(unknown))}")

        # nothing is applied until the whole event has parsed
        chain = {name: fields.pop(name) for name in CHAIN_ORDER if name in fields}
        if "method" in chain:
            try:
                chain["method"] = EntryMethod(chain["method"])
            except ValueError as e:
                raise ValidationError("Entry method must be vin or manual") from e
        parsed = {name: self._parse_field(name, value) for name, value in fields.items()}

        handlers = {
            "method": self.select_method,
            "year": self.change_year,
            "make": self.change_make,
            "model": self.change_model,
        }
        for name, value in chain.items():
            handlers[name](value)
        for name, value in parsed.items():
            setattr(self.draft, name, value)

    @staticmethod
    def _parse_field(name: str, value: Any) -> Any:
        if name in FIELD_PARSERS:
            value = FIELD_PARSERS[name](value)
        elif name == "price":
            value = None if value is None else vehicle_validator.parse_price(value)
        elif name == "description_mode":
            try:
                value = DescriptionMode(value)
            except ValueError as e:
                raise ValidationError("Description mode must be full or short") from e
        elif name in TEXT_FIELDS:
            value = "" if value is None else str(value)
        return value

    def _schedule(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def settle(self) -> None:
        """Wait until no dependent lookup is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _refresh_makes(self) -> None:
        self.makes = []
        self.loading_makes = True
        self.make_error = None
        self._schedule(self._load_makes(self.draft.year))

    def _refresh_models(self) -> None:
        self.loading_models = True
        self.model_error = None
        self._schedule(self._load_models(self.draft.make, self.draft.year))

    async def _load_makes(self, year: int) -> None:
        try:
            makes, error = await self.lookup.list_makes_for_year(year), None
        except ListingError as e:
            makes, error = [], e.message
        except Exception:
            logger.exception(f"Unexpected error loading makes for {year}")
            makes, error = [], "Failed to fetch makes"

        if not (self.is_manual and self.draft.year == year):
            logger.debug(f"Discarding stale makes for {year}")
            return

        self.makes = makes
        self.make_error = error
        self.loading_makes = False

    async def _load_models(self, make: str, year: int) -> None:
        try:
            models, error = await self.lookup.list_models_for_make_year(make, year), None
        except ListingError as e:
            models, error = [], e.message
        except Exception:
            logger.exception(f"Unexpected error loading models for {year} {make}")
            models, error = [], "Failed to fetch models"

        if not (
            self.is_manual and self.draft.make == make and self.draft.year == year
        ):
            logger.debug(f"Discarding stale models for {year} {make}")
            return

        self.models = models
        self.model_error = error
        self.loading_models = False

    async def _assemble_record(self, draft: DraftFormState) -> VehicleRecord:
        user_supplied = {
            "price": draft.price,
            "exterior_color": _text_or_none(draft.exterior_color),
            "interior_color": _text_or_none(draft.interior_color),
            "interior_type": _plain(draft.interior_type),
            "title_status": _plain(draft.title_status),
        }

        if draft.method is EntryMethod.VIN:
            decoded = await self.lookup.decode_vin(draft.vin)
            return decoded.model_copy(update=user_supplied)

        return VehicleRecord(
            year=vehicle_validator.parse_year(draft.year),
            make=vehicle_validator.parse_make(draft.make),
            model=vehicle_validator.parse_model(draft.model),
            engine_size=_text_or_none(draft.engine_size),
            transmission=_plain(draft.transmission),
            drivetrain=_plain(draft.drivetrain),
            **user_supplied,
        )

    async def submit(self) -> Optional[GeneratedDescription]:
        """
        Build the vehicle record and ask for a description.

        Returns the new description, or None when generation failed (the
        message is left in `notification`) or another submit is running.
        """
        if self.generating:
            logger.info("Submit ignored: a description is already being generated")
            return None

        self.generating = True
        self.description = None
        self.notification = None
        draft = self.draft.model_copy()

        try:
            vehicle = await self._assemble_record(draft)
            text = await self.lookup.generate_description(
                vehicle,
                draft.miles,
                _plain(draft.condition),
                draft.additional_details,
                draft.description_mode,
            )
            self.description = GeneratedDescription(
                text=text, mode=draft.description_mode
            )
        except ListingError as e:
            logger.warning(f"Submit failed: {e.message}")
            self.notification = e.message
        except Exception:
            logger.exception("Unexpected error while generating description")
            self.notification = GenerationError().message
        finally:
            self.generating = False

        return self.description

    def snapshot(self, session_id: Optional[str] = None) -> FormSnapshot:
        return FormSnapshot(
            session_id=session_id,
            draft=self.draft.model_copy(),
            makes=list(self.makes),
            models=list(self.models),
            loading_makes=self.loading_makes,
            loading_models=self.loading_models,
            make_error=self.make_error,
            model_error=self.model_error,
            generating=self.generating,
            notification=self.notification,
            description=self.description,
        )
