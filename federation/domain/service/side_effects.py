"""Failure policy for store and event side effects.

Each side effect of the token lifecycle is either best effort (failure is
logged and the operation continues) or required (failure is retried and then
raised). The table below is the single place that decides which.
"""

from enum import Enum
from typing import Awaitable, Callable, TypeVar

import logfire

from federation.domain.error import StoreUnavailableError

from .base import Service

T = TypeVar("T")


class SideEffect(str, Enum):
    """Side effects performed by the token lifecycle."""

    CACHE_TOKEN_PAIR = "cache_token_pair"
    SET_SESSION = "set_session"
    PUBLISH_EVENT = "publish_event"
    CHECK_BLACKLIST = "check_blacklist"
    BLACKLIST_TOKEN = "blacklist_token"
    READ_CACHED_TOKEN_PAIR = "read_cached_token_pair"
    DELETE_SESSION = "delete_session"
    DELETE_CACHED_TOKEN_PAIR = "delete_cached_token_pair"


class EffectPolicy(str, Enum):
    """How a side effect's failure is handled."""

    BEST_EFFORT = "best_effort"  # Log and continue
    REQUIRED = "required"  # Retry, then raise


SIDE_EFFECT_POLICY: dict[SideEffect, EffectPolicy] = {
    # Issuance: the store is an optimization, never the source of truth
    SideEffect.CACHE_TOKEN_PAIR: EffectPolicy.BEST_EFFORT,
    SideEffect.SET_SESSION: EffectPolicy.BEST_EFFORT,
    SideEffect.PUBLISH_EVENT: EffectPolicy.BEST_EFFORT,
    # Verification and revocation: skipping these silently defeats revocation
    SideEffect.CHECK_BLACKLIST: EffectPolicy.REQUIRED,
    SideEffect.BLACKLIST_TOKEN: EffectPolicy.REQUIRED,
    SideEffect.DELETE_SESSION: EffectPolicy.REQUIRED,
    SideEffect.DELETE_CACHED_TOKEN_PAIR: EffectPolicy.REQUIRED,
    # Only used to find the session's refresh token during revocation
    SideEffect.READ_CACHED_TOKEN_PAIR: EffectPolicy.BEST_EFFORT,
}


class SideEffectRunner(Service):
    """Runs side effects according to SIDE_EFFECT_POLICY."""

    def __init__(
        self,
        retry_attempts: int = 3,
        policy: dict[SideEffect, EffectPolicy] | None = None,
    ) -> None:
        """Initialize side effect runner.

        Args:
            retry_attempts: Attempts for required effects (at least 1)
            policy: Override of the policy table (tests only)
        """
        self.retry_attempts = max(1, retry_attempts)
        self.policy = policy if policy is not None else SIDE_EFFECT_POLICY

    def policy_for(self, effect: SideEffect) -> EffectPolicy:
        """Look up the policy of a side effect."""
        return self.policy[effect]

    async def run(
        self, effect: SideEffect, action: Callable[[], Awaitable[T]]
    ) -> T | None:
        """Run a side effect.

        Args:
            effect: Which side effect this is
            action: Zero-argument coroutine factory performing it

        Returns:
            The action's result, or None if a best-effort effect failed

        Raises:
            Exception: The last failure of a required effect
        """
        if self.policy_for(effect) is EffectPolicy.BEST_EFFORT:
            try:
                return await action()
            except Exception as e:
                logfire.warn(
                    "Best-effort side effect failed",
                    effect=effect.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return None

        for attempt in range(1, self.retry_attempts + 1):
            try:
                return await action()
            except StoreUnavailableError as e:
                logfire.warn(
                    "Required side effect failed",
                    effect=effect.value,
                    attempt=attempt,
                    max_attempts=self.retry_attempts,
                    error=str(e),
                )
                if attempt == self.retry_attempts:
                    logfire.error(
                        "Required side effect exhausted retries",
                        effect=effect.value,
                        error=str(e),
                    )
                    raise
        return None
