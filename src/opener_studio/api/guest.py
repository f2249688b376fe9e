"""Guest session endpoints, served under the serverless functions prefix."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, status

from opener_studio.api.models import (
    GuestLinkPayload,
    MessageGenerationPayload,
    MessageSelectionPayload,
)
from opener_studio.services.guest_linking import GuestProfileNotFoundError
from opener_studio.services.message_selection import MessageNotFoundError

if TYPE_CHECKING:
    from opener_studio.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["guest"])


@router.post("/update_guest_message_selection")
async def update_message_selection(
    payload: MessageSelectionPayload, request: Request
) -> dict[str, object]:
    """Mark the newest stored message of the chosen version as selected."""
    container: AppContainer = request.app.state.container
    try:
        selected = container.message_selection_service.update_selection(
            payload.to_request()
        )
    except MessageNotFoundError as exc:
        logger.warning("Message selection failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    logger.info(
        "Selected message %s (%s) for session %s",
        selected.id,
        selected.version_name,
        payload.session_id,
    )
    return {"success": True, "message": "Message selection updated successfully"}


@router.post("/generate_guest_messages")
async def generate_messages(
    payload: MessageGenerationPayload, request: Request
) -> dict[str, object]:
    """Generate three message versions for a guest contact."""
    container: AppContainer = request.app.state.container
    result = await container.message_generation_service.generate(
        session_id=payload.session_id,
        guest_contact_id=payload.guest_contact_id,
        medium=payload.medium,
        objective=payload.objective,
        additional_context=payload.additional_context,
        user_summary=payload.user_summary,
        contact=payload.contact,
    )
    return {
        "status": "success",
        "generated_messages": result.messages.model_dump(),
        "max_length": result.max_length,
    }


@router.post("/link_guest_profile")
async def link_guest_profile(
    payload: GuestLinkPayload, request: Request
) -> dict[str, object]:
    """Attach a guest session's profile data to a newly registered user."""
    container: AppContainer = request.app.state.container
    try:
        result = container.guest_link_service.link(
            payload.session_id, payload.user_id
        )
    except GuestProfileNotFoundError as exc:
        logger.warning("Guest profile link failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    return {
        "success": True,
        "message": "Successfully linked guest profile to user",
        "result": result.to_payload(),
    }
