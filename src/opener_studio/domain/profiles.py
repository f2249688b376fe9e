"""Domain models for guest profiles promoted to accounts."""

from dataclasses import dataclass

SUMMARY_FIELDS = (
    "experience",
    "education",
    "expertise",
    "achievements",
    "overall_blurb",
    "combined_experience_highlights",
    "combined_education_highlights",
    "key_skills",
    "domain_expertise",
    "technical_expertise",
    "value_proposition_summary",
)


@dataclass(frozen=True)
class ProfileContent:
    """User-provided background attached to a profile row."""

    linkedin_content: str | None = None
    additional_details: str | None = None
    cv_content: str | None = None

    def merged_over(self, existing: "ProfileContent") -> "ProfileContent":
        """Prefer this content, keeping existing values where this one is empty."""
        return ProfileContent(
            linkedin_content=self.linkedin_content or existing.linkedin_content,
            additional_details=self.additional_details or existing.additional_details,
            cv_content=self.cv_content or existing.cv_content,
        )


@dataclass(frozen=True)
class GuestLinkResult:
    action: str
    summary: str | None = None

    def to_payload(self) -> dict[str, str]:
        payload = {"action": self.action}
        if self.summary:
            payload["summary"] = self.summary
        return payload
