"""Customer ratings and their moderation."""
from django.db import transaction
from django.db.models import Count
from django.utils import timezone

from ..exceptions import ValidationError
from ..models import Rating
from .base import audit, get_or_404, require_text, service, validate_model


@service
@transaction.atomic
def submit_rating(*, customer_name, customer_email, rating, comment="", date=None):
    """Store a new rating. Submissions always wait for moderation."""
    entry = Rating(
        customer_name=require_text(customer_name, "Name"),
        customer_email=require_text(customer_email, "Email"),
        rating=rating,
        comment=comment or "",
        date=date or timezone.now(),
        status=Rating.Status.PENDING,
    )
    validate_model(entry)
    entry.save()
    audit.info("Rating #%s (%s/5) submitted by %s", entry.pk, entry.rating, entry.customer_name)
    return entry


def _moderate(rating_id, status):
    entry = get_or_404(Rating.objects.select_for_update(), rating_id)
    entry.status = status
    entry.save(update_fields=["status"])
    audit.info("Rating #%s %s", entry.pk, status.lower())
    return entry


@service
@transaction.atomic
def approve_rating(rating_id):
    return _moderate(rating_id, Rating.Status.APPROVED)


@service
@transaction.atomic
def reject_rating(rating_id):
    return _moderate(rating_id, Rating.Status.REJECTED)


def get_rating(rating_id):
    return get_or_404(Rating.objects.all(), rating_id)


def list_ratings():
    return Rating.objects.order_by("-date")


def ratings_by_status(status):
    if status not in Rating.Status.values:
        raise ValidationError(f"Unknown rating status '{status}'.")
    return list_ratings().with_status(status)


def approved_ratings():
    return list_ratings().approved()


def pending_ratings():
    return list_ratings().pending()


def ratings_for_email(email):
    return list_ratings().filter(customer_email__iexact=(email or "").strip())


def pending_count():
    return Rating.objects.pending().count()


def approved_count():
    return Rating.objects.approved().count()


def average_rating():
    avg = Rating.objects.approved_average()
    return round(float(avg), 1) if avg is not None else 0.0


def rating_distribution():
    """Approved rating counts per star, 5 down to 1."""
    rows = Rating.objects.approved().values("rating").annotate(n=Count("id"))
    counts = {row["rating"]: row["n"] for row in rows}
    return {star: counts.get(star, 0) for star in range(5, 0, -1)}
