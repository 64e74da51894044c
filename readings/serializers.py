# readings/serializers.py
import datetime as dt

from django.utils import timezone
from rest_framework import serializers

from .catalog import CATALOG
from .models import Profile, ReadingLog


class AwareDateTimeField(serializers.DateTimeField):
    """
    Datetime field that always outputs tz-aware ISO strings in UTC (Z).
    Naive values are assumed to be UTC.
    """
    def to_representation(self, value):
        if value is None:
            return None
        if timezone.is_naive(value):
            value = timezone.make_aware(value, dt.timezone.utc)
        return super().to_representation(value.astimezone(dt.timezone.utc))


class IdentitySerializer(serializers.Serializer):
    """Already-resolved identity provider profile posted at session start."""
    id = serializers.CharField(max_length=64)
    display_name = serializers.CharField(max_length=255, allow_blank=True)
    avatar_url = serializers.URLField(max_length=1024, required=False, allow_blank=True, default="")


class ProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = Profile
        fields = ("id", "display_name", "avatar_url", "score", "has_seen_onboarding")
        read_only_fields = fields


class ReadingLogSerializer(serializers.ModelSerializer):
    created_at = AwareDateTimeField(read_only=True)

    class Meta:
        model = ReadingLog
        fields = ("id", "book_name", "chapter", "created_at")
        read_only_fields = fields


class ReadingSubmitSerializer(serializers.Serializer):
    """
    Batch of chapters read from one book.
    Notes:
      - book_name must be a catalog book.
      - chapters must be non-empty and within 1..chapters of that book;
        duplicates in the list are collapsed.
    """
    book_name = serializers.CharField(max_length=64)
    chapters = serializers.ListField(
        child=serializers.IntegerField(min_value=1), allow_empty=False
    )

    def validate_book_name(self, v: str):
        if v not in CATALOG:
            raise serializers.ValidationError(f"unknown book: {v}")
        return v

    def validate(self, attrs):
        limit = CATALOG.chapter_count(attrs["book_name"])
        bad = sorted({c for c in attrs["chapters"] if c > limit})
        if bad:
            raise serializers.ValidationError(
                {"chapters": f"{attrs['book_name']} has {limit} chapters; got {bad}."}
            )
        return attrs


class BookProgressSerializer(serializers.Serializer):
    book_name = serializers.CharField()
    chapters = serializers.IntegerField()
    read_count = serializers.IntegerField()
    is_complete = serializers.BooleanField()
    ratio = serializers.FloatField()


class CalendarDaySerializer(serializers.Serializer):
    day = serializers.DateField()
    status = serializers.CharField()
    count = serializers.IntegerField()
