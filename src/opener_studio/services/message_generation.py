"""Outreach message generation for guest sessions."""

import logging
from dataclasses import dataclass
from typing import Protocol

from opener_studio.domain.guest import GeneratedMessages
from opener_studio.services.message_selection import GuestMessageRepository

logger = logging.getLogger(__name__)

MAX_CHARS_OBJECTIVE = 1000
MAX_CHARS_ADDITIONAL_CONTEXT = 2000
DEFAULT_MAX_LENGTH = 400
MEDIUM_MAX_LENGTHS = {
    "linkedin_connection": 300,
    "linkedin_inmail": 400,
    "linkedin_message": 400,
    "email": 500,
}

MESSAGES_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "version1": {"type": "string"},
        "version2": {"type": "string"},
        "version3": {"type": "string"},
    },
    "required": ["version1", "version2", "version3"],
    "additionalProperties": False,
}


class MessageGenerationClient(Protocol):
    """Interface for LLM text generation with structured output."""

    async def generate(
        self,
        *,
        model: str,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured generation output."""


@dataclass(frozen=True)
class GenerationResult:
    """Generated variants and the length limit they were fitted to."""

    messages: GeneratedMessages
    max_length: int


def max_length_for(medium: str) -> int:
    """Return the character limit for a medium."""
    return MEDIUM_MAX_LENGTHS.get(medium, DEFAULT_MAX_LENGTH)


@dataclass
class MessageGenerationService:
    """Generates three message variants and stores them for the session."""

    client: MessageGenerationClient
    repository: GuestMessageRepository
    model: str
    store: bool = False

    async def generate(  # noqa: PLR0913
        self,
        *,
        session_id: str,
        guest_contact_id: str | None,
        medium: str,
        objective: str,
        additional_context: str | None = None,
        user_summary: object | None = None,
        contact: object | None = None,
    ) -> GenerationResult:
        """Generate, trim, and persist three outreach variants."""
        max_length = max_length_for(medium)
        prompt = build_prompt(
            medium=medium,
            objective=objective,
            max_length=max_length,
            additional_context=additional_context,
            user_summary=user_summary,
            contact=contact,
        )
        raw = await self.client.generate(
            model=self.model, store=self.store, schema=MESSAGES_SCHEMA, prompt=prompt
        )
        generated = GeneratedMessages.model_validate(raw)
        trimmed = GeneratedMessages(
            version1=generated.version1.strip()[:max_length],
            version2=generated.version2.strip()[:max_length],
            version3=generated.version3.strip()[:max_length],
        )
        self.repository.create_messages(
            session_id=session_id,
            guest_contact_id=guest_contact_id,
            messages=trimmed.labelled(),
        )
        logger.info(
            "Generated %d message versions for session %s",
            len(trimmed.labelled()),
            session_id,
        )
        return GenerationResult(messages=trimmed, max_length=max_length)


def build_prompt(  # noqa: PLR0913
    *,
    medium: str,
    objective: str,
    max_length: int,
    additional_context: str | None,
    user_summary: object | None,
    contact: object | None,
) -> str:
    """Build the generation prompt from the guest's inputs."""
    lines = [
        "You help job seekers write short, specific networking messages.",
        f"Medium: {medium}.",
        f"Objective: {objective}.",
        f"Each message must be at most {max_length} characters.",
        "Write three distinct versions: version1 focuses on professional fit, "
        "version2 builds rapport through shared interests, version3 leads with "
        "a direct value proposition.",
    ]
    if user_summary:
        lines.append(f"About the sender: {_describe(user_summary)}")
    if contact:
        lines.append(f"About the recipient: {_describe(contact)}")
    if additional_context:
        lines.append(f"Additional context: {additional_context}")
    lines.append("Do not use placeholders in brackets.")
    return "\n".join(lines)


def _describe(payload: object) -> str:
    if isinstance(payload, dict):
        parts = [f"{key}: {value}" for key, value in payload.items() if value]
        return "; ".join(parts)
    return str(payload)
