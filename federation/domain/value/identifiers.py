"""Identifiers of persisted entities.

Both are UUIDs; the NewType wrappers keep a link id from being passed
where a user id is expected.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
IdentityLinkId = NewType("IdentityLinkId", UUID)
