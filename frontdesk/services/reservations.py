"""
Reservation manager.

The only place where reservation lifecycle events change a table's status.
Every write locks the table row and runs in one transaction together with
the reservation write, so either both land or neither does.
"""
from django.db import transaction
from django.utils import timezone

from ..exceptions import NotFound, ValidationError
from ..models import Reservation, Table
from .base import audit, get_or_404, require_int, require_text, service, validate_model

# Table status derived from the reservation status it follows.
TABLE_STATUS_FOR = {
    Reservation.Status.PENDING: Table.Status.RESERVED,
    Reservation.Status.CONFIRMED: Table.Status.RESERVED,
    Reservation.Status.SEATED: Table.Status.OCCUPIED,
    Reservation.Status.IN_SERVICE: Table.Status.OCCUPIED,
    Reservation.Status.COMPLETED: Table.Status.AVAILABLE,
    Reservation.Status.CANCELLED: Table.Status.AVAILABLE,
}


def _check_status(status):
    if status not in Reservation.Status.values:
        raise ValidationError(f"Unknown reservation status '{status}'.")
    return Reservation.Status(status)


def _lock_table(table_id):
    table = Table.objects.select_for_update().filter(pk=table_id).first()
    if table is None:
        raise NotFound(f"Table {table_id} not found.")
    return table


def _set_table_status(table, status):
    if table.status != status:
        table.status = status
        table.save(update_fields=["status", "updated_at"])


# =============================================================================
# === COMMANDS ================================================================
# =============================================================================

@service
@transaction.atomic
def create_reservation(*, table_id, customer_name, customer_phone, reservation_time,
                       party_size, status=None, now=None):
    """
    Book ``table_id`` and mark it RESERVED.

    Raises NotFound for an unknown table, ValidationError when the table is not
    AVAILABLE, too small for the party, or the time is not in the future.
    """
    table = _lock_table(table_id)

    if table.status != Table.Status.AVAILABLE:
        raise ValidationError(
            f"Table {table.table_number} is not available (current status: {table.status})."
        )
    party_size = require_int(party_size, "Party size")
    if party_size > table.capacity:
        raise ValidationError(
            f"Party size {party_size} exceeds table {table.table_number} capacity ({table.capacity})."
        )
    now = now or timezone.now()
    if reservation_time is None or reservation_time <= now:
        raise ValidationError("Reservation time must be in the future.")

    reservation = Reservation(
        table=table,
        customer_name=require_text(customer_name, "Customer name"),
        customer_phone=require_text(customer_phone, "Customer phone"),
        reservation_time=reservation_time,
        party_size=party_size,
        status=_check_status(status) if status else Reservation.Status.PENDING,
    )
    validate_model(reservation)
    reservation.save()
    _set_table_status(table, Table.Status.RESERVED)

    audit.info(
        "Reservation #%s created for %s at table %s (party of %s)",
        reservation.pk, reservation.customer_name, table.table_number, reservation.party_size,
    )
    return reservation


@service
@transaction.atomic
def update_reservation_status(reservation_id, new_status):
    """Persist ``new_status`` and move the table to the matching status. Any transition is accepted."""
    new_status = _check_status(new_status)
    reservation = get_or_404(Reservation.objects.select_for_update(), reservation_id)
    table = _lock_table(reservation.table_id)

    previous = reservation.status
    reservation.status = new_status
    reservation.save(update_fields=["status", "updated_at"])
    _set_table_status(table, TABLE_STATUS_FOR[new_status])

    audit.info(
        "Reservation #%s status %s -> %s; table %s is %s",
        reservation.pk, previous, new_status, table.table_number, table.status,
    )
    return reservation


@service
@transaction.atomic
def cancel_reservation(reservation_id):
    reservation = get_or_404(Reservation.objects.select_for_update(), reservation_id)
    table = _lock_table(reservation.table_id)

    reservation.status = Reservation.Status.CANCELLED
    reservation.save(update_fields=["status", "updated_at"])
    _set_table_status(table, Table.Status.AVAILABLE)

    audit.info("Reservation #%s cancelled; table %s released", reservation.pk, table.table_number)
    return reservation


# =============================================================================
# === QUERIES =================================================================
# =============================================================================

def get_reservation(reservation_id):
    return get_or_404(Reservation.objects.select_related("table"), reservation_id)


def list_reservations():
    return Reservation.objects.select_related("table").order_by("reservation_time")


def reservations_by_status(status=None):
    if status is None:
        return list_reservations()
    return list_reservations().filter(status=_check_status(status))


def reservations_for_date(day):
    return list_reservations().for_date(day)


def todays_reservations():
    return reservations_for_date(timezone.localdate())


def count_reservations_by_status(status):
    return Reservation.objects.count_by_status(_check_status(status))


def active_reservations():
    return list_reservations().active()


def completed_reservations(day=None):
    qs = list_reservations().completed()
    if day is not None:
        qs = qs.for_date(day)
    return qs


def reservations_for_table(table_id):
    table = get_or_404(Table.objects.all(), table_id)
    return list_reservations().for_table(table)
