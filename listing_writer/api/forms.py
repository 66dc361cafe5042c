"""
Form sessions over HTTP.

Each session wraps one FormController kept in process memory. A PATCH is
one field-change event: the controller applies it, then its dependent
lookups are awaited so the response already carries the new option lists.

At most `settings.max_form_sessions` are kept; creating one more drops the
session that was used least recently.
"""

import logging
import uuid
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException

from listing_writer.api.deps import get_lookup_client
from listing_writer.config import settings
from listing_writer.models.generation import FormSnapshot, FormUpdate
from listing_writer.services.form_controller import FormController
from listing_writer.services.lookup_client import VehicleLookupClient

logger = logging.getLogger(__name__)

router = APIRouter()

sessions: Dict[str, FormController] = {}


def _get_session(session_id: str) -> FormController:
    controller = sessions.pop(session_id, None)
    if controller is None:
        raise HTTPException(status_code=404, detail="Form session not found")
    # re-insert so dict order runs least to most recently used
    sessions[session_id] = controller
    return controller


def _evict_idle_sessions() -> None:
    while sessions and len(sessions) >= settings.max_form_sessions:
        oldest = next(iter(sessions))
        del sessions[oldest]
        logger.info(f"Dropped idle form session {oldest}")


@router.post("/forms", response_model=FormSnapshot, status_code=201)
async def create_form(lookup: VehicleLookupClient = Depends(get_lookup_client)):
    _evict_idle_sessions()
    session_id = uuid.uuid4().hex
    controller = FormController(lookup)
    sessions[session_id] = controller
    return controller.snapshot(session_id)


@router.get("/forms/{session_id}", response_model=FormSnapshot)
async def get_form(session_id: str):
    return _get_session(session_id).snapshot(session_id)


@router.patch("/forms/{session_id}", response_model=FormSnapshot)
async def update_form(session_id: str, update: FormUpdate):
    controller = _get_session(session_id)
    controller.update_fields(**update.model_dump(exclude_unset=True))
    await controller.settle()
    return controller.snapshot(session_id)


@router.post("/forms/{session_id}/submit", response_model=FormSnapshot)
async def submit_form(session_id: str):
    """
    Generate a description from the current draft. Failures land in
    `notification`; the session stays usable.
    """
    controller = _get_session(session_id)
    await controller.submit()
    return controller.snapshot(session_id)


@router.delete("/forms/{session_id}", status_code=204)
async def delete_form(session_id: str):
    _get_session(session_id)
    del sessions[session_id]
