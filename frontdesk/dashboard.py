"""
Context builders for the role dashboards and the public overview page.

Each function returns a plain dict that the matching template renders; the
views only decide who may see which one.
"""
from django.conf import settings
from django.contrib.auth import get_user_model

from . import services
from .models import Reservation, Table, Task


def _recent_limit():
    return getattr(settings, "DASHBOARD_RECENT_LIMIT", 5)


def overview_context():
    """Front page for visitors without a role."""
    counts = services.table_status_counts()
    today = services.todays_reservations()
    return {
        "today_reservations_count": today.count(),
        "recent_reservations": today[:_recent_limit()],
        "available_tables_count": counts[Table.Status.AVAILABLE],
        "occupied_tables_count": counts[Table.Status.OCCUPIED],
        "reserved_tables_count": counts[Table.Status.RESERVED],
        "total_tables": sum(counts.values()),
        "active_staff_count": services.count_active_staff(),
        "average_rating": services.average_rating(),
        "pending_reviews_count": services.pending_count(),
        "recent_ratings": services.approved_ratings()[:_recent_limit()],
    }


def admin_dashboard_context():
    counts = services.table_status_counts()
    return {
        "kpis": {
            "today_reservations": services.todays_reservations().count(),
            "available_tables": counts[Table.Status.AVAILABLE],
            "active_staff": services.count_active_staff(),
            "total_tables": sum(counts.values()),
            "total_users": get_user_model().objects.count(),
        },
        "low_stock_items": services.low_stock_items(),
        "pending_reviews_count": services.pending_count(),
    }


def staff_dashboard_context():
    counts = services.table_status_counts()
    today = services.todays_reservations()
    return {
        "kpis": {
            "today_reservations": today.count(),
            "available_tables": counts[Table.Status.AVAILABLE],
            "reserved_tables": counts[Table.Status.RESERVED],
            "occupied_tables": counts[Table.Status.OCCUPIED],
            "pending_tasks": services.count_tasks_by_status(Task.Status.PENDING),
            "completed_tasks": services.count_tasks_by_status(Task.Status.COMPLETED),
        },
        "recent_reservations": today[:_recent_limit()],
    }


def customer_dashboard_context(user):
    # Reservations are not linked to accounts, so the customer view lists them all.
    reservations = Reservation.objects.select_related("table")
    return {
        "kpis": {
            "my_reservations": reservations.count(),
            "upcoming_reservations": reservations.upcoming().count(),
            "my_ratings": services.ratings_for_email(user.email).count() if user.email else 0,
        },
        "my_reservations": reservations.order_by("-reservation_time")[:_recent_limit()],
    }
