# readings/tests/test_session.py
import pytest
from django.core.cache import cache

from readings import services
from readings.models import Profile, ReadingLog
from readings.session import ONBOARDING_CACHE_KEY, Identity, SessionContext


@pytest.mark.django_db
def test_start_upserts_identity_fields_and_keeps_score():
    ctx = SessionContext.start(Identity("U1", "Anna", "https://example.com/a.png"))
    assert ctx.user_id == "U1"
    assert ctx.has_seen_onboarding is False
    services.submit_chapters("U1", "John", [1, 2])

    ctx2 = SessionContext.start(Identity("U1", "Anna B."))
    p = Profile.objects.get(id="U1")
    assert p.display_name == "Anna B."
    assert p.avatar_url == ""
    assert p.score == 2
    assert ctx2.profile.score == 2


@pytest.mark.django_db
def test_start_settles_a_drifted_score():
    Profile.objects.create(id="U6", display_name="Fay", score=42)
    ReadingLog.objects.create(user_id="U6", book_name="Ruth", chapter=1)
    ctx = SessionContext.start(Identity("U6", "Fay"))
    assert ctx.profile.score == 1
    assert Profile.objects.get(id="U6").score == 1


@pytest.mark.django_db
def test_refresh_reloads_profile_row():
    ctx = SessionContext.start(Identity("U7", "Gus"))
    services.submit_chapters("U7", "Mark", [1, 2, 3])
    assert ctx.profile.score == 0
    assert ctx.refresh().score == 3


@pytest.mark.django_db
def test_complete_onboarding_writes_cache_and_database():
    ctx = SessionContext.start(Identity("U2", "Ben"))
    ctx.complete_onboarding()
    assert ctx.has_seen_onboarding is True
    assert cache.get(ONBOARDING_CACHE_KEY.format(user_id="U2")) is True
    assert Profile.objects.get(id="U2").has_seen_onboarding is True


@pytest.mark.django_db
def test_onboarding_flag_is_mirrored_from_database_into_cache():
    Profile.objects.create(id="U3", display_name="Cat", has_seen_onboarding=True)
    ctx = SessionContext.start(Identity("U3", "Cat"))
    assert ctx.has_seen_onboarding is True
    assert cache.get(ONBOARDING_CACHE_KEY.format(user_id="U3")) is True


@pytest.mark.django_db
def test_cached_onboarding_flag_wins():
    cache.set(ONBOARDING_CACHE_KEY.format(user_id="U4"), True)
    ctx = SessionContext.start(Identity("U4", "Dan"))
    assert ctx.has_seen_onboarding is True


@pytest.mark.django_db
def test_closed_session_cannot_be_used():
    with SessionContext.start(Identity("U5", "Eve")) as ctx:
        assert ctx.profile.id == "U5"
    with pytest.raises(RuntimeError):
        ctx.profile
    with pytest.raises(RuntimeError):
        ctx.complete_onboarding()
