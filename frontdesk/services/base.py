import functools
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError

from ..exceptions import InternalError, NotFound, ValidationError

logger = logging.getLogger("frontdesk.services")
audit = logging.getLogger("audit")


def service(func):
    """
    Re-raise storage failures as ``InternalError``.

    Domain errors pass through untouched. Apply outside ``transaction.atomic``
    so the rollback has already happened when the error is wrapped.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.exception("Database failure in %s", func.__name__)
            raise InternalError() from exc

    return wrapper


def get_or_404(queryset, pk):
    try:
        return queryset.get(pk=pk)
    except queryset.model.DoesNotExist:
        raise NotFound.for_model(queryset.model, pk) from None


def validate_model(instance, exclude=None):
    """Run model field validation and re-raise it as a domain ValidationError."""
    try:
        instance.full_clean(exclude=exclude, validate_unique=False)
    except DjangoValidationError as exc:
        raise ValidationError(flatten_errors(exc)) from exc


def flatten_errors(exc):
    if hasattr(exc, "message_dict"):
        parts = []
        for name, messages in exc.message_dict.items():
            label = "" if name == "__all__" else f"{name}: "
            parts.extend(f"{label}{m}" for m in messages)
        return " ".join(parts)
    return " ".join(exc.messages)


def require_text(value, label):
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{label} is required.")
    return value


def require_int(value, label):
    if value is None or value == "":
        raise ValidationError(f"{label} is required.")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a whole number.") from None
