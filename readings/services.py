# readings/services.py
from __future__ import annotations

import datetime as dt
import logging
from typing import Iterable, List, NamedTuple, Optional

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count, IntegerField, OuterRef, Subquery, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from .catalog import CATALOG, Catalog
from .exceptions import InvalidSubmission, LogNotFound, ScorePending, StoreUnavailable
from .models import Profile, ReadingLog
from .progress import completed_chapters

logger = logging.getLogger(__name__)


class SubmissionResult(NamedTuple):
    book_name: str
    requested: int            # distinct chapters offered
    created: int              # rows actually inserted
    skipped_existing: int     # already read before this call
    skipped_conflicts: int    # inserted concurrently by someone else
    score: Optional[int]      # None while the recount is pending


def _validate_chapters(book_name: str, chapters: Iterable, catalog: Catalog) -> set:
    entry = catalog.get(book_name)
    if entry is None:
        raise InvalidSubmission(f"unknown book: {book_name}")
    try:
        items = list(chapters)
    except TypeError:
        raise InvalidSubmission("chapters must be a list of integers.") from None
    for c in items:
        # bool is an int subclass; True must not pass as chapter 1
        if isinstance(c, bool) or not isinstance(c, int):
            raise InvalidSubmission(f"chapters must be integers; got {c!r}.")
    candidates = set(items)
    if not candidates:
        raise InvalidSubmission("at least one chapter is required.")
    out_of_range = sorted(c for c in candidates if not 1 <= c <= entry.chapters)
    if out_of_range:
        raise InvalidSubmission(
            f"{book_name} has {entry.chapters} chapters; got {out_of_range}."
        )
    return candidates


def get_profile(user_id: str) -> Optional[Profile]:
    try:
        return Profile.objects.filter(id=user_id).first()
    except DatabaseError as e:
        raise StoreUnavailable(str(e)) from e


def resync_score(user_id: str) -> int:
    """
    Overwrite the profile score with the exact number of the user's logs.
    Never incremented or decremented in place: recounting heals any drift.
    Count and write happen in one UPDATE statement.
    """
    log_count = (
        ReadingLog.objects.filter(user_id=OuterRef("id"))
        .order_by()
        .values("user_id")
        .annotate(n=Count("id"))
        .values("n")
    )
    try:
        updated = Profile.objects.filter(id=user_id).update(
            score=Coalesce(Subquery(log_count), Value(0), output_field=IntegerField())
        )
        if updated:
            return Profile.objects.filter(id=user_id).values_list("score", flat=True).get()
        count = ReadingLog.objects.filter(user_id=user_id).count()
    except DatabaseError as e:
        logger.exception("score resync failed for user %s", user_id)
        raise StoreUnavailable(str(e)) from e
    logger.warning("no profile for user %s; score %d not stored", user_id, count)
    return count


def settle_score(user_id: str) -> int:
    """
    Exact score for the user, rewriting the stored one only when it drifted
    (e.g. a recount that failed after its rows were committed).
    """
    try:
        stored = Profile.objects.filter(id=user_id).values_list("score", flat=True).first()
        count = ReadingLog.objects.filter(user_id=user_id).count()
    except DatabaseError as e:
        raise StoreUnavailable(str(e)) from e
    if stored is not None and stored != count:
        logger.warning("user %s: stored score %d drifted from %d logs, resyncing", user_id, stored, count)
        return resync_score(user_id)
    return count


def submit_chapters(
    user_id: str,
    book_name: str,
    chapters: Iterable[int],
    *,
    now: Optional[dt.datetime] = None,
    catalog: Catalog = CATALOG,
) -> SubmissionResult:
    """
    Record a batch of chapters read from one book.

    Rules:
      1) Chapters the user already read are dropped before writing.
      2) Nothing left to write: no log is written; the exact score is reported
         and the stored one is rewritten only if it drifted.
      3) Each row is inserted in its own savepoint; a unique-constraint hit on
         one row (a concurrent submission won the race) skips only that row.
      4) Once the write phase is over the score is recounted from the logs.
      5) Any other database failure rolls back the whole write phase and
         raises StoreUnavailable without touching the score.
      6) Rows committed but recount failed: ScorePending carrying the result
         (score=None). The next submission or session start settles it.
    """
    candidates = _validate_chapters(book_name, chapters, catalog)
    now = now or timezone.now()

    try:
        existing = ReadingLog.objects.filter(user_id=user_id, book_name=book_name).only("book_name", "chapter")
        already = completed_chapters(existing, book_name)
    except DatabaseError as e:
        logger.exception("could not load reading logs for user %s", user_id)
        raise StoreUnavailable(str(e)) from e

    to_insert = candidates - already
    skipped_existing = len(candidates) - len(to_insert)
    if not to_insert:
        return SubmissionResult(book_name, len(candidates), 0, skipped_existing, 0, settle_score(user_id))

    created = 0
    conflicts: List[int] = []
    try:
        with transaction.atomic():
            for chapter in sorted(to_insert):
                try:
                    with transaction.atomic():
                        ReadingLog.objects.create(
                            user_id=user_id,
                            book_name=book_name,
                            chapter=chapter,
                            created_at=now,
                        )
                except IntegrityError:
                    conflicts.append(chapter)
                    continue
                created += 1
    except DatabaseError as e:
        logger.exception("writing %d chapters of %s failed for user %s", len(to_insert), book_name, user_id)
        raise StoreUnavailable(str(e)) from e

    if conflicts:
        logger.info("user %s: %s %s already recorded concurrently, skipped", user_id, book_name, conflicts)

    result = SubmissionResult(book_name, len(candidates), created, skipped_existing, len(conflicts), None)
    try:
        score = resync_score(user_id)
    except StoreUnavailable as e:
        raise ScorePending(f"recorded {created} chapter(s) of {book_name}; score update pending.", result) from e
    logger.info("user %s: recorded %d chapter(s) of %s, score=%d", user_id, created, book_name, score)
    return result._replace(score=score)


def delete_log(user_id: str, log_id: int) -> int:
    """Delete one of the user's logs and return the recounted score."""
    try:
        deleted, _ = ReadingLog.objects.filter(id=log_id, user_id=user_id).delete()
    except DatabaseError as e:
        logger.exception("deleting log %s failed for user %s", log_id, user_id)
        raise StoreUnavailable(str(e)) from e
    if not deleted:
        raise LogNotFound(f"reading log {log_id} not found.")
    try:
        return resync_score(user_id)
    except StoreUnavailable as e:
        raise ScorePending(f"reading log {log_id} deleted; score update pending.") from e


def user_logs(user_id: str) -> List[ReadingLog]:
    """All of the user's logs, newest first."""
    try:
        return list(ReadingLog.objects.filter(user_id=user_id).order_by("-created_at", "-id"))
    except DatabaseError as e:
        raise StoreUnavailable(str(e)) from e


def leaderboard(limit: int = 20) -> List[Profile]:
    try:
        return list(Profile.objects.order_by("-score", "id")[:limit])
    except DatabaseError as e:
        raise StoreUnavailable(str(e)) from e
