from django.db import models
from django.utils import timezone


class Profile(models.Model):
    id = models.CharField(max_length=64, primary_key=True)            # Identity provider user id
    display_name = models.CharField(max_length=255, blank=True)
    avatar_url = models.URLField(max_length=1024, blank=True)
    score = models.PositiveIntegerField(default=0, db_index=True)      # Always resynced to the log count
    has_seen_onboarding = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.display_name or self.id} ({self.score})"


class ReadingLog(models.Model):
    user_id = models.CharField(max_length=64, db_index=True)          # Owning profile id
    book_name = models.CharField(max_length=64)                        # Catalog book name
    chapter = models.PositiveSmallIntegerField()                       # 1..chapters of the book
    created_at = models.DateTimeField(default=timezone.now)            # Submission time, shared by a batch

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user_id", "book_name", "chapter"],
                                    name="uq_user_book_chapter"),
        ]
        indexes = [
            models.Index(fields=["user_id", "created_at"], name="idx_user_created"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id}: {self.book_name} {self.chapter}"
