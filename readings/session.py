# readings/session.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.core.cache import cache
from django.db import DatabaseError

from .exceptions import StoreUnavailable
from .models import Profile
from .services import settle_score

logger = logging.getLogger(__name__)

ONBOARDING_CACHE_KEY = "onboarding-completed:{user_id}"


@dataclass(frozen=True)
class Identity:
    """Profile fields handed over by the identity provider after login."""
    id: str
    display_name: str
    avatar_url: str = ""


class SessionContext:
    """
    Per-session state: the signed-in profile and the onboarding flag.
    Created by `start()`, released by `close()`.
    """

    def __init__(self, profile: Profile, has_seen_onboarding: bool):
        self._profile: Optional[Profile] = profile
        self.has_seen_onboarding = has_seen_onboarding

    @classmethod
    def start(cls, identity: Identity) -> "SessionContext":
        cache_key = ONBOARDING_CACHE_KEY.format(user_id=identity.id)
        cached = cache.get(cache_key) is True
        try:
            # Identity fields are overwritten; score and onboarding flag are kept.
            profile, created = Profile.objects.update_or_create(
                id=identity.id,
                defaults={
                    "display_name": identity.display_name,
                    "avatar_url": identity.avatar_url or "",
                },
            )
        except DatabaseError as e:
            logger.exception("profile upsert failed for user %s", identity.id)
            raise StoreUnavailable(str(e)) from e

        if created:
            logger.info("new profile %s (%s)", profile.id, profile.display_name)

        # Heals a score left stale by a recount that failed after its write.
        profile.score = settle_score(profile.id)

        seen = cached
        if not cached and profile.has_seen_onboarding:
            cache.set(cache_key, True, timeout=None)
            seen = True
        return cls(profile, seen)

    @property
    def profile(self) -> Profile:
        if self._profile is None:
            raise RuntimeError("session is closed")
        return self._profile

    @property
    def user_id(self) -> str:
        return self.profile.id

    def complete_onboarding(self) -> None:
        profile = self.profile
        cache.set(ONBOARDING_CACHE_KEY.format(user_id=profile.id), True, timeout=None)
        self.has_seen_onboarding = True
        try:
            Profile.objects.filter(id=profile.id).update(has_seen_onboarding=True)
        except DatabaseError as e:
            logger.exception("could not persist onboarding flag for user %s", profile.id)
            raise StoreUnavailable(str(e)) from e
        profile.has_seen_onboarding = True

    def refresh(self) -> Profile:
        """Reload the profile row (e.g. after the score was resynced)."""
        try:
            self.profile.refresh_from_db()
        except DatabaseError as e:
            raise StoreUnavailable(str(e)) from e
        return self.profile

    def close(self) -> None:
        self._profile = None
        self.has_seen_onboarding = False

    def __enter__(self) -> "SessionContext":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
