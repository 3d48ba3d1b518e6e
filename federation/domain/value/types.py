"""Domain value objects for identity federation.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and normalization.
"""

from enum import Enum

from pydantic import field_validator

from federation.domain.value.common import ValueObject


class AuthProvider(str, Enum):
    """Supported external identity providers."""

    GITHUB = "github"
    GOOGLE = "google"
    MICROSOFT = "microsoft"


class TokenRole(str, Enum):
    """Role of a locally issued credential."""

    ACCESS = "access"
    REFRESH = "refresh"


class LifecycleAction(str, Enum):
    """Action carried by a user lifecycle event."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"

    @property
    def routing_key(self) -> str:
        """Routing key used on the event bus (user.<action>)."""
        return f"user.{self.value}"


def normalize_email(email: str) -> str:
    """Normalize an email address for storage and lookup."""
    return email.strip().lower()


class ExternalIdentityAssertion(ValueObject):
    """Claim from an external provider that a subject authenticated.

    Empty required fields are accepted here and rejected by the resolver,
    so that every entry point reports them the same way.
    """

    provider: AuthProvider
    provider_subject_id: str = ""  # Permanent ID assigned by the provider
    email: str = ""
    name: str | None = None
    avatar_url: str | None = None
    provider_access_token: str | None = None
    provider_refresh_token: str | None = None

    @field_validator("provider_subject_id", mode="before")
    @classmethod
    def coerce_subject_id(cls, v: object) -> str:
        """Providers such as GitHub send numeric ids."""
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email_field(cls, v: str | None) -> str:
        """Lower-case and strip the email."""
        if v is None:
            return ""
        return normalize_email(v)

    def missing_fields(self) -> list[str]:
        """Names of required fields that are empty."""
        missing = []
        if not self.provider_subject_id:
            missing.append("provider_subject_id")
        if not self.email:
            missing.append("email")
        return missing

    @property
    def default_name(self) -> str:
        """Name to use when the provider supplied none: the email local part."""
        if self.name and self.name.strip():
            return self.name.strip()
        return self.email.split("@", 1)[0]
