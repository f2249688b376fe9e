"""Promote a guest session's temporary profile to a registered account."""

import logging
from dataclasses import dataclass
from typing import Protocol

from opener_studio.domain.profiles import GuestLinkResult, ProfileContent

logger = logging.getLogger(__name__)

UPDATED_EXISTING_PROFILE = "updated_existing_profile"
CONVERTED_TEMP_PROFILE = "converted_temp_profile"
UPDATED_EXISTING_SUMMARY = "updated_existing_summary"
CONVERTED_TEMP_SUMMARY = "converted_temp_summary"


class GuestProfileNotFoundError(Exception):
    """Raised when a session has no temporary profile to link."""


class GuestProfileRepository(Protocol):
    """Persistence interface for temporary and registered profiles."""

    def find_user_profile(self, user_id: str) -> ProfileContent | None:
        """Return the registered profile of a user, if present."""

    def find_temporary_profile(self, session_id: str) -> ProfileContent | None:
        """Return the unowned profile created for a guest session, if present."""

    def update_user_profile(self, user_id: str, content: ProfileContent) -> None:
        """Overwrite a registered profile and mark it permanent."""

    def convert_temporary_profile(self, session_id: str, user_id: str) -> None:
        """Assign the guest session's temporary profile to a user."""

    def delete_temporary_profiles(self, session_id: str) -> None:
        """Delete unowned profiles left for a guest session."""

    def find_temporary_summary(self, session_id: str) -> dict[str, object] | None:
        """Return the unowned summary fields for a guest session, if present."""

    def find_user_summary_id(self, user_id: str) -> str | None:
        """Return the id of a user's registered summary, if present."""

    def update_user_summary(self, summary_id: str, fields: dict[str, object]) -> None:
        """Overwrite a registered summary with guest summary fields."""

    def convert_temporary_summary(self, session_id: str, user_id: str) -> None:
        """Assign the guest session's temporary summary to a user."""

    def delete_temporary_summaries(self, session_id: str) -> None:
        """Delete unowned summaries left for a guest session."""


@dataclass
class GuestLinkService:
    """Moves guest profile data onto a registered user after signup."""

    repository: GuestProfileRepository

    def link(self, session_id: str, user_id: str) -> GuestLinkResult:
        """Link the guest session's profile and summary to a user."""
        logger.info("Linking guest session %s to user %s", session_id, user_id)
        existing = self.repository.find_user_profile(user_id)
        temporary = self.repository.find_temporary_profile(session_id)
        if temporary is None:
            raise GuestProfileNotFoundError(
                f"No temporary profile found for session {session_id}"
            )
        summary = self.repository.find_temporary_summary(session_id)

        if existing is not None:
            self.repository.update_user_profile(
                user_id, temporary.merged_over(existing)
            )
            action = UPDATED_EXISTING_PROFILE
        else:
            self.repository.convert_temporary_profile(session_id, user_id)
            action = CONVERTED_TEMP_PROFILE

        summary_action = None
        if summary is not None:
            summary_id = self.repository.find_user_summary_id(user_id)
            if summary_id:
                self.repository.update_user_summary(summary_id, summary)
                self.repository.delete_temporary_summaries(session_id)
                summary_action = UPDATED_EXISTING_SUMMARY
            else:
                self.repository.convert_temporary_summary(session_id, user_id)
                summary_action = CONVERTED_TEMP_SUMMARY

        try:
            self.repository.delete_temporary_profiles(session_id)
        except Exception:
            logger.warning(
                "Cleanup of temporary profiles failed for session %s",
                session_id,
                exc_info=True,
            )
        return GuestLinkResult(action=action, summary=summary_action)
