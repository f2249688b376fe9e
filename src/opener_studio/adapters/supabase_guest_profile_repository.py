"""Supabase-backed profile repository for guest account linking."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from opener_studio.domain.profiles import SUMMARY_FIELDS, ProfileContent
from opener_studio.services.guest_linking import GuestProfileRepository

_PROFILE_COLUMNS = "linkedin_content, additional_details, cv_content"


@dataclass
class SupabaseGuestProfileRepository(GuestProfileRepository):
    """Supabase implementation over user_profiles and user_summaries."""

    client: Client

    def find_user_profile(self, user_id: str) -> ProfileContent | None:
        response = (
            self.client.table("user_profiles")
            .select(_PROFILE_COLUMNS)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_profile(response.data[0])

    def find_temporary_profile(self, session_id: str) -> ProfileContent | None:
        response = (
            self.client.table("user_profiles")
            .select(_PROFILE_COLUMNS)
            .eq("session_id", session_id)
            .is_("user_id", "null")
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_profile(response.data[0])

    def update_user_profile(self, user_id: str, content: ProfileContent) -> None:
        self.client.table("user_profiles").update(
            {
                "linkedin_content": content.linkedin_content,
                "additional_details": content.additional_details,
                "cv_content": content.cv_content,
                "updated_at": _now(),
                "is_temporary": False,
                "temp_created_at": None,
                "session_id": None,
            }
        ).eq("user_id", user_id).execute()

    def convert_temporary_profile(self, session_id: str, user_id: str) -> None:
        self.client.table("user_profiles").update(
            {
                "user_id": user_id,
                "is_temporary": False,
                "temp_created_at": None,
                "updated_at": _now(),
            }
        ).eq("session_id", session_id).is_("user_id", "null").execute()

    def delete_temporary_profiles(self, session_id: str) -> None:
        self.client.table("user_profiles").delete().eq("session_id", session_id).is_(
            "user_id", "null"
        ).execute()

    def find_temporary_summary(self, session_id: str) -> dict[str, object] | None:
        response = (
            self.client.table("user_summaries")
            .select(", ".join(SUMMARY_FIELDS))
            .eq("session_id", session_id)
            .is_("user_id", "null")
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return {name: row.get(name) for name in SUMMARY_FIELDS}

    def find_user_summary_id(self, user_id: str) -> str | None:
        response = (
            self.client.table("user_summaries")
            .select("summary_id")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return str(response.data[0]["summary_id"])

    def update_user_summary(self, summary_id: str, fields: dict[str, object]) -> None:
        self.client.table("user_summaries").update(
            {**fields, "updated_at": _now(), "session_id": None}
        ).eq("summary_id", summary_id).execute()

    def convert_temporary_summary(self, session_id: str, user_id: str) -> None:
        self.client.table("user_summaries").update(
            {"user_id": user_id, "session_id": None, "updated_at": _now()}
        ).eq("session_id", session_id).is_("user_id", "null").execute()

    def delete_temporary_summaries(self, session_id: str) -> None:
        self.client.table("user_summaries").delete().eq(
            "session_id", session_id
        ).is_("user_id", "null").execute()


def _now() -> str:
    return datetime.now(tz=UTC).isoformat()


def _to_profile(row: dict[str, object]) -> ProfileContent:
    return ProfileContent(
        linkedin_content=_optional_text(row.get("linkedin_content")),
        additional_details=_optional_text(row.get("additional_details")),
        cv_content=_optional_text(row.get("cv_content")),
    )


def _optional_text(value: object) -> str | None:
    return str(value) if value else None
