"""Staff registry and table assignments."""
from django.db import transaction
from django.db.models import Count

from ..exceptions import NotFound, ValidationError
from ..models import Staff, Table
from .base import audit, get_or_404, require_text, service, validate_model

EDITABLE_FIELDS = (
    "first_name", "last_name", "email", "phone", "role",
    "department", "hire_date", "salary", "is_active",
)


def _email_taken(email, exclude_pk=None):
    qs = Staff.objects.filter(email__iexact=email)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    return qs.exists()


@service
@transaction.atomic
def create_staff(*, first_name, last_name, email, role, **extra):
    email = require_text(email, "Email").lower()
    if _email_taken(email):
        raise ValidationError(f"A staff member with email {email} already exists.")

    unknown = set(extra) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown staff fields: {', '.join(sorted(unknown))}.")

    staff = Staff(
        first_name=require_text(first_name, "First name"),
        last_name=require_text(last_name, "Last name"),
        email=email,
        role=role,
        **extra,
    )
    validate_model(staff)
    staff.save()
    audit.info("Staff member %s (%s) created", staff.full_name, staff.role)
    return staff


def list_staff():
    return Staff.objects.order_by("last_name", "first_name")


def get_staff(staff_id):
    return get_or_404(Staff.objects.all(), staff_id)


def get_staff_by_email(email):
    staff = Staff.objects.filter(email__iexact=(email or "").strip()).first()
    if staff is None:
        raise NotFound(f"No staff member with email {email}.")
    return staff


def staff_by_role(role):
    return list_staff().with_role(role)


def staff_by_department(department):
    return list_staff().in_department(department)


def active_staff():
    return list_staff().active()


def count_staff_by_role(role):
    return Staff.objects.with_role(role).count()


def staff_role_counts():
    rows = Staff.objects.values("role").annotate(n=Count("id"))
    return {row["role"]: row["n"] for row in rows}


def count_active_staff():
    return Staff.objects.active().count()


def search_staff(term):
    term = (term or "").strip()
    if not term:
        return list_staff()
    return list_staff().search(term)


@service
@transaction.atomic
def update_staff(staff_id, **changes):
    """Apply a partial update; only the fields passed are touched."""
    staff = get_or_404(Staff.objects.select_for_update(), staff_id)

    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown staff fields: {', '.join(sorted(unknown))}.")

    if "email" in changes:
        email = require_text(changes["email"], "Email").lower()
        if email != staff.email.lower() and _email_taken(email, exclude_pk=staff.pk):
            raise ValidationError(f"A staff member with email {email} already exists.")
        changes["email"] = email

    for name, value in changes.items():
        setattr(staff, name, value)
    validate_model(staff)
    staff.save()
    audit.info("Staff member #%s updated (%s)", staff.pk, ", ".join(sorted(changes)) or "no fields")
    return staff


def _set_active(staff_id, active):
    staff = get_or_404(Staff.objects.select_for_update(), staff_id)
    staff.is_active = active
    staff.save(update_fields=["is_active", "updated_at"])
    audit.info("Staff member %s %s", staff.full_name, "activated" if active else "deactivated")
    return staff


@service
@transaction.atomic
def activate_staff(staff_id):
    return _set_active(staff_id, True)


@service
@transaction.atomic
def deactivate_staff(staff_id):
    return _set_active(staff_id, False)


@service
@transaction.atomic
def assign_table(staff_id, table_id):
    staff = get_or_404(Staff.objects.all(), staff_id)
    table = get_or_404(Table.objects.all(), table_id)
    staff.assigned_tables.add(table)
    audit.info("Table %s assigned to %s", table.table_number, staff.full_name)
    return staff


@service
@transaction.atomic
def unassign_table(staff_id, table_id):
    staff = get_or_404(Staff.objects.all(), staff_id)
    table = get_or_404(Table.objects.all(), table_id)
    staff.assigned_tables.remove(table)
    audit.info("Table %s unassigned from %s", table.table_number, staff.full_name)
    return staff


def assigned_tables(staff_id):
    staff = get_or_404(Staff.objects.all(), staff_id)
    return Table.objects.filter(assigned_staff=staff).order_by("table_number")
