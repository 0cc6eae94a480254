import datetime
from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from frontdesk import services
from frontdesk.exceptions import NotFound, ValidationError
from frontdesk.models import Reservation, Table

from .helpers import book, make_table


class ReservationLifecycleTests(TestCase):
    def setUp(self):
        self.table = make_table("T01", capacity=4)

    def refresh_table(self):
        self.table.refresh_from_db()
        return self.table.status

    def test_seat_and_complete_cycle(self):
        reservation = book(self.table, party_size=2)
        self.assertEqual(reservation.status, Reservation.Status.PENDING)
        self.assertEqual(self.refresh_table(), Table.Status.RESERVED)

        services.update_reservation_status(reservation.pk, Reservation.Status.SEATED)
        self.assertEqual(self.refresh_table(), Table.Status.OCCUPIED)

        services.update_reservation_status(reservation.pk, Reservation.Status.COMPLETED)
        self.assertEqual(self.refresh_table(), Table.Status.AVAILABLE)

    def test_created_reservation_keeps_input(self):
        when = timezone.now() + timedelta(hours=3)
        reservation = services.create_reservation(
            table_id=self.table.pk, customer_name="  Ada ", customer_phone="+1 555 123 4567",
            reservation_time=when, party_size=3,
        )
        reservation.refresh_from_db()
        self.assertEqual(reservation.table, self.table)
        self.assertEqual(reservation.customer_name, "Ada")
        self.assertEqual(reservation.reservation_time, when)
        self.assertEqual(reservation.party_size, 3)

    def test_caller_may_choose_initial_status(self):
        reservation = services.create_reservation(
            table_id=self.table.pk, customer_name="A", customer_phone="+1 555 123 4567",
            reservation_time=timezone.now() + timedelta(hours=1), party_size=2,
            status=Reservation.Status.CONFIRMED,
        )
        reservation.refresh_from_db()
        self.assertEqual(reservation.status, Reservation.Status.CONFIRMED)
        self.assertEqual(self.refresh_table(), Table.Status.RESERVED)

    def test_non_numeric_party_size(self):
        for party_size in ("two", None):
            with self.subTest(party_size=party_size), self.assertRaises(ValidationError) as ctx:
                book(self.table, party_size=party_size)
            self.assertNotIn("exceeds", str(ctx.exception))
        self.assertFalse(Reservation.objects.exists())
        self.assertEqual(self.refresh_table(), Table.Status.AVAILABLE)

    def test_party_larger_than_table_is_rejected(self):
        small = make_table("T02", capacity=2)
        with self.assertRaises(ValidationError):
            book(small, party_size=5)
        small.refresh_from_db()
        self.assertEqual(small.status, Table.Status.AVAILABLE)
        self.assertFalse(Reservation.objects.exists())

    def test_table_must_be_available(self):
        book(self.table)
        with self.assertRaises(ValidationError) as ctx:
            book(self.table, name="B")
        self.assertIn("RESERVED", str(ctx.exception))
        self.assertEqual(Reservation.objects.count(), 1)
        self.assertEqual(self.refresh_table(), Table.Status.RESERVED)

    def test_time_must_be_in_the_future(self):
        now = timezone.now()
        with self.assertRaises(ValidationError):
            services.create_reservation(
                table_id=self.table.pk, customer_name="A", customer_phone="+1 555 123 4567",
                reservation_time=now, party_size=2, now=now,
            )
        self.assertEqual(self.refresh_table(), Table.Status.AVAILABLE)

    def test_unknown_table(self):
        with self.assertRaises(NotFound):
            services.create_reservation(
                table_id=999, customer_name="A", customer_phone="+1 555 123 4567",
                reservation_time=timezone.now() + timedelta(hours=1), party_size=2,
            )

    def test_invalid_phone_rolls_back(self):
        with self.assertRaises(ValidationError):
            services.create_reservation(
                table_id=self.table.pk, customer_name="A", customer_phone="abc",
                reservation_time=timezone.now() + timedelta(hours=1), party_size=2,
            )
        self.assertEqual(self.refresh_table(), Table.Status.AVAILABLE)

    def test_every_status_maps_to_table_status(self):
        reservation = book(self.table)
        expected = {
            Reservation.Status.PENDING: Table.Status.RESERVED,
            Reservation.Status.CONFIRMED: Table.Status.RESERVED,
            Reservation.Status.SEATED: Table.Status.OCCUPIED,
            Reservation.Status.IN_SERVICE: Table.Status.OCCUPIED,
            Reservation.Status.COMPLETED: Table.Status.AVAILABLE,
            Reservation.Status.CANCELLED: Table.Status.AVAILABLE,
        }
        for status, table_status in expected.items():
            with self.subTest(status=status):
                services.update_reservation_status(reservation.pk, status)
                self.assertEqual(self.refresh_table(), table_status)

    def test_terminal_status_can_be_reopened(self):
        reservation = book(self.table)
        services.update_reservation_status(reservation.pk, Reservation.Status.COMPLETED)
        services.update_reservation_status(reservation.pk, Reservation.Status.CONFIRMED)
        reservation.refresh_from_db()
        self.assertEqual(reservation.status, Reservation.Status.CONFIRMED)
        self.assertEqual(self.refresh_table(), Table.Status.RESERVED)

    def test_unknown_status_rejected(self):
        reservation = book(self.table)
        with self.assertRaises(ValidationError):
            services.update_reservation_status(reservation.pk, "LOST")

    def test_cancel_is_idempotent(self):
        reservation = book(self.table)
        for _ in range(2):
            services.cancel_reservation(reservation.pk)
            reservation.refresh_from_db()
            self.assertEqual(reservation.status, Reservation.Status.CANCELLED)
            self.assertEqual(self.refresh_table(), Table.Status.AVAILABLE)

    def test_cancel_unknown_reservation(self):
        with self.assertRaises(NotFound):
            services.cancel_reservation(4242)


class ReservationQueryTests(TestCase):
    def setUp(self):
        self.table = make_table("T01", capacity=4)
        self.day = timezone.localdate() + timedelta(days=3)

    def at(self, day, *time_args):
        naive = datetime.datetime.combine(day, datetime.time(*time_args))
        return timezone.make_aware(naive, timezone.get_current_timezone())

    def reserve_at(self, when, name):
        # Table status is released between bookings so the same table can be reused
        reservation = services.create_reservation(
            table_id=self.table.pk, customer_name=name, customer_phone="+1 555 123 4567",
            reservation_time=when, party_size=2,
        )
        services.set_table_status(self.table.pk, Table.Status.AVAILABLE)
        return reservation

    def test_day_range_is_inclusive(self):
        first = self.reserve_at(self.at(self.day, 0, 0), "Midnight")
        last = self.reserve_at(self.at(self.day, 23, 59, 59, 999999), "Last")
        self.reserve_at(self.at(self.day + timedelta(days=1), 0, 0), "Tomorrow")

        found = list(services.reservations_for_date(self.day))
        self.assertEqual(found, [first, last])

    def test_by_status_and_counts(self):
        a = self.reserve_at(self.at(self.day, 12, 0), "A")
        self.reserve_at(self.at(self.day, 13, 0), "B")
        services.update_reservation_status(a.pk, Reservation.Status.COMPLETED)

        self.assertEqual(list(services.reservations_by_status(Reservation.Status.COMPLETED)), [a])
        self.assertEqual(services.reservations_by_status(None).count(), 2)
        self.assertEqual(services.count_reservations_by_status(Reservation.Status.PENDING), 1)
        self.assertEqual(services.active_reservations().count(), 1)
        self.assertEqual(list(services.completed_reservations(self.day)), [a])
        self.assertFalse(services.completed_reservations(self.day + timedelta(days=1)).exists())

    def test_reservations_for_unknown_table(self):
        with self.assertRaises(NotFound):
            services.reservations_for_table(777)
