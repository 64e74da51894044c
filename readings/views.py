# readings/views.py
from __future__ import annotations

import datetime as dt

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from . import progress, services
from .catalog import CATALOG
from .exceptions import LogNotFound, ScorePending, StoreUnavailable
from .serializers import (
    BookProgressSerializer,
    CalendarDaySerializer,
    IdentitySerializer,
    ProfileSerializer,
    ReadingLogSerializer,
    ReadingSubmitSerializer,
)
from .session import Identity, SessionContext

RETRY_MESSAGE = 'The reading store is unavailable right now. Please try again.'


def _unavailable():
    return Response({'detail': RETRY_MESSAGE}, status=status.HTTP_503_SERVICE_UNAVAILABLE)


def _tz_param(request):
    """Resolve ?tz= (default READING_TIME_ZONE); raises ValueError for unknown zones."""
    tzname = request.query_params.get('tz') or settings.READING_TIME_ZONE
    return tzname, progress.resolve_tz(tzname)


def _today(tzinfo) -> dt.date:
    return timezone.now().astimezone(tzinfo).date()


class CatalogView(APIView):
    """GET /api/books"""
    def get(self, request):
        return Response([
            {'position': i, 'name': entry.name, 'chapters': entry.chapters}
            for i, entry in enumerate(CATALOG)
        ])


class SessionStartView(APIView):
    """POST /api/session (identity provider profile in the body; upserts the profile)."""
    def post(self, request):
        ser = IdentitySerializer(data=request.data)
        if not ser.is_valid():
            return Response(ser.errors, status=400)
        try:
            ctx = SessionContext.start(Identity(**ser.validated_data))
        except StoreUnavailable:
            return _unavailable()
        data = ProfileSerializer(ctx.profile).data
        data['has_seen_onboarding'] = ctx.has_seen_onboarding
        return Response(data, status=status.HTTP_200_OK)


class OnboardingView(APIView):
    """POST /api/users/{user_id}/onboarding"""
    def post(self, request, user_id: str):
        try:
            profile = services.get_profile(user_id)
            if profile is None:
                return Response({'detail': 'profile not found.'}, status=404)
            ctx = SessionContext(profile, profile.has_seen_onboarding)
            ctx.complete_onboarding()
            ctx.refresh()
        except StoreUnavailable:
            return _unavailable()
        return Response(ProfileSerializer(ctx.profile).data, status=200)


class ReadingListView(APIView):
    """
    GET  /api/users/{user_id}/readings   history, newest first
    POST /api/users/{user_id}/readings   {"book_name": ..., "chapters": [...]}
         201 when something was recorded, 200 for a pure resubmission.
    """
    def get(self, request, user_id: str):
        try:
            logs = services.user_logs(user_id)
        except StoreUnavailable:
            return _unavailable()
        return Response({
            'user_id': user_id,
            'count': len(logs),
            'readings': ReadingLogSerializer(logs, many=True).data,
        })

    def post(self, request, user_id: str):
        ser = ReadingSubmitSerializer(data=request.data)
        if not ser.is_valid():
            return Response(ser.errors, status=400)
        try:
            result = services.submit_chapters(
                user_id, ser.validated_data['book_name'], ser.validated_data['chapters']
            )
        except ScorePending as e:
            # Logs are committed; do not ask the user to resubmit.
            return Response(dict(e.result._asdict(), detail=str(e)), status=status.HTTP_202_ACCEPTED)
        except StoreUnavailable:
            return _unavailable()

        return Response(
            result._asdict(),
            status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
        )


class ReadingDeleteView(APIView):
    """DELETE /api/users/{user_id}/readings/{log_id}"""
    def delete(self, request, user_id: str, log_id: int):
        try:
            score = services.delete_log(user_id, log_id)
        except LogNotFound as e:
            return Response({'detail': str(e)}, status=404)
        except ScorePending as e:
            return Response({'user_id': user_id, 'deleted': log_id, 'score': None, 'detail': str(e)},
                            status=status.HTTP_202_ACCEPTED)
        except StoreUnavailable:
            return _unavailable()
        return Response({'user_id': user_id, 'deleted': log_id, 'score': score}, status=200)


class ProgressView(APIView):
    """GET /api/users/{user_id}/progress (every catalog book, catalog order)."""
    def get(self, request, user_id: str):
        try:
            logs = services.user_logs(user_id)
        except StoreUnavailable:
            return _unavailable()
        books = progress.catalog_progress(logs)
        return Response({
            'user_id': user_id,
            'total_read': sum(b.read_count for b in books),
            'books_completed': sum(1 for b in books if b.is_complete),
            'books': BookProgressSerializer(books, many=True).data,
        })


class CalendarView(APIView):
    """
    GET /api/users/{user_id}/calendar
      ?year=2024
      &month=3
      &tz=Asia/Bangkok
    Defaults to the current month in the given timezone.
    """
    def get(self, request, user_id: str):
        try:
            tzname, tzinfo = _tz_param(request)
        except ValueError:
            return Response({'detail': 'invalid tz.'}, status=400)
        today = _today(tzinfo)
        try:
            year = int(request.query_params.get('year', today.year))
            month = int(request.query_params.get('month', today.month))
            dt.date(year, month, 1)
        except ValueError:
            return Response({'detail': 'year/month must form a valid month.'}, status=400)

        try:
            logs = services.user_logs(user_id)
        except StoreUnavailable:
            return _unavailable()
        grouped = progress.group_by_local_day(logs, tzinfo)
        days = progress.month_calendar(year, month, grouped, today)

        return Response({
            'user_id': user_id,
            'tz': tzname,
            'year': year,
            'month': month,
            'today': today.isoformat(),
            'streak': progress.reading_streak(grouped, today),
            'days': CalendarDaySerializer(days, many=True).data,
        })


class DayLogsView(APIView):
    """GET /api/users/{user_id}/days/{YYYY-MM-DD}?tz= (catalog order, then chapter)."""
    def get(self, request, user_id: str, day: str):
        try:
            tzname, tzinfo = _tz_param(request)
        except ValueError:
            return Response({'detail': 'invalid tz.'}, status=400)
        try:
            the_day = dt.date.fromisoformat(day)
        except ValueError:
            return Response({'detail': 'day must be YYYY-MM-DD.'}, status=400)

        try:
            logs = services.user_logs(user_id)
        except StoreUnavailable:
            return _unavailable()
        grouped = progress.group_by_local_day(logs, tzinfo)
        day_logs = progress.sorted_logs_for_day(grouped.get(the_day, []))

        return Response({
            'user_id': user_id,
            'tz': tzname,
            'day': the_day.isoformat(),
            'status': progress.date_status(the_day, grouped, _today(tzinfo)),
            'readings': ReadingLogSerializer(day_logs, many=True).data,
        })


class LeaderboardView(APIView):
    """GET /api/leaderboard?limit=20"""
    def get(self, request):
        try:
            limit = int(request.query_params.get('limit', 20))
        except ValueError:
            return Response({'detail': 'limit must be an integer.'}, status=400)
        if limit < 1:
            return Response({'detail': 'limit must be >= 1.'}, status=400)
        try:
            profiles = services.leaderboard(limit)
        except StoreUnavailable:
            return _unavailable()
        rows = ProfileSerializer(profiles, many=True).data
        return Response([dict(row, rank=i + 1) for i, row in enumerate(rows)])
