"""
Table registry: the physical tables, their capacity and floor status.

Status normally follows reservations (see ``services.reservations``);
``set_table_status`` is the manual override used by admins.
"""
from django.db import transaction

from ..exceptions import NotFound, ValidationError
from ..models import Table
from .base import audit, get_or_404, require_int, service, validate_model


def _check_status(status):
    if status not in Table.Status.values:
        raise ValidationError(f"Unknown table status '{status}'.")
    return Table.Status(status)


@service
@transaction.atomic
def create_table(*, table_number, capacity, status=Table.Status.AVAILABLE):
    number = Table.normalize_number(table_number or "")
    if not number:
        raise ValidationError("Table number is required.")
    capacity = require_int(capacity, "Capacity")
    if capacity < 1:
        raise ValidationError("Capacity must be at least 1.")
    if Table.objects.number_exists(number):
        raise ValidationError(f"Table number {number} already exists.")

    table = Table(table_number=number, capacity=capacity, status=_check_status(status))
    validate_model(table)
    table.save()
    audit.info("Table %s created (capacity %s)", table.table_number, table.capacity)
    return table


def get_table(table_id):
    return get_or_404(Table.objects.all(), table_id)


def get_table_by_number(table_number):
    table = Table.objects.by_number(table_number).first()
    if table is None:
        raise NotFound(f"Table {Table.normalize_number(table_number)} not found.")
    return table


def list_tables():
    return Table.objects.order_by("table_number")


def tables_by_status(status):
    return Table.objects.with_status(_check_status(status))


def count_tables_by_status(status):
    return Table.objects.count_by_status(_check_status(status))


def table_status_counts():
    return Table.objects.status_counts()


def available_tables():
    return Table.objects.available()


def available_tables_for_party(party_size):
    party_size = require_int(party_size, "Party size")
    if party_size < 1:
        raise ValidationError("Party size must be at least 1.")
    return Table.objects.available_for_party(party_size)


@service
@transaction.atomic
def set_table_status(table_id, status):
    """Overwrite a table's status without looking at its reservations."""
    status = _check_status(status)
    table = get_or_404(Table.objects.select_for_update(), table_id)
    previous = table.status
    table.status = status
    table.save(update_fields=["status", "updated_at"])
    audit.info("Table %s status overridden: %s -> %s", table.table_number, previous, status)
    return table
