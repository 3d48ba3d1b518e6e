"""Identity link entity.

Binds one external provider account to one local user. The link refers to
its user by id only; joins are resolved explicitly by the resolver.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from federation.domain.model.common import DomainModel, utcnow
from federation.domain.value import AuthProvider, IdentityLinkId, UserId


class IdentityLink(DomainModel):
    """External identity linked to a user account.

    (provider, provider_subject_id) is unique. The cached provider tokens are
    kept for provider API calls and are never used for local authentication.
    """

    id: IdentityLinkId
    user_id: UserId
    provider: AuthProvider
    provider_subject_id: str
    provider_access_token: Optional[str] = None
    provider_refresh_token: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    last_login_at: Optional[datetime] = None
