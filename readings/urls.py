from django.urls import path
from .views import (
    CalendarView,
    CatalogView,
    DayLogsView,
    LeaderboardView,
    OnboardingView,
    ProgressView,
    ReadingDeleteView,
    ReadingListView,
    SessionStartView,
)

urlpatterns = [
    path("books", CatalogView.as_view(), name="catalog"),
    path("session", SessionStartView.as_view(), name="session-start"),
    path("leaderboard", LeaderboardView.as_view(), name="leaderboard"),
    path("users/<str:user_id>/onboarding", OnboardingView.as_view(), name="onboarding"),
    path("users/<str:user_id>/readings", ReadingListView.as_view(), name="readings"),
    path("users/<str:user_id>/readings/<int:log_id>", ReadingDeleteView.as_view(), name="reading-delete"),
    path("users/<str:user_id>/progress", ProgressView.as_view(), name="progress"),
    path("users/<str:user_id>/calendar", CalendarView.as_view(), name="calendar"),
    path("users/<str:user_id>/days/<str:day>", DayLogsView.as_view(), name="day-logs"),
]
