from django.test import TestCase

from frontdesk import services
from frontdesk.exceptions import NotFound, ValidationError
from frontdesk.models import Table

from .helpers import make_table


class TableRegistryTests(TestCase):
    def test_create_table_defaults_to_available(self):
        table = make_table("t05", capacity=6)
        self.assertEqual(table.table_number, "T05")
        self.assertEqual(table.status, Table.Status.AVAILABLE)
        self.assertEqual(table.capacity, 6)

    def test_table_number_is_unique_ignoring_case(self):
        make_table("T01")
        with self.assertRaises(ValidationError):
            make_table(" t01 ")
        self.assertEqual(Table.objects.count(), 1)

    def test_capacity_must_be_positive(self):
        with self.assertRaises(ValidationError):
            make_table("T02", capacity=0)

    def test_blank_number_rejected(self):
        with self.assertRaises(ValidationError):
            make_table("   ")

    def test_lookup_by_number(self):
        table = make_table("T03")
        self.assertEqual(services.get_table_by_number("t03"), table)
        with self.assertRaises(NotFound):
            services.get_table_by_number("T99")

    def test_get_unknown_table(self):
        with self.assertRaises(NotFound):
            services.get_table(12345)

    def test_available_for_party_orders_by_capacity(self):
        make_table("T01", capacity=8)
        make_table("T02", capacity=2)
        make_table("T03", capacity=4)
        busy = make_table("T04", capacity=4)
        services.set_table_status(busy.pk, Table.Status.OCCUPIED)

        numbers = [t.table_number for t in services.available_tables_for_party(3)]
        self.assertEqual(numbers, ["T03", "T01"])

    def test_party_size_must_be_positive(self):
        with self.assertRaises(ValidationError):
            services.available_tables_for_party(0)

    def test_non_numeric_sizes_are_validation_errors(self):
        with self.assertRaises(ValidationError) as ctx:
            make_table("T02", capacity="four")
        self.assertEqual(str(ctx.exception), "Capacity must be a whole number.")
        with self.assertRaises(ValidationError):
            services.available_tables_for_party(None)

    def test_status_counts_include_every_status(self):
        make_table("T01")
        t2 = make_table("T02")
        services.set_table_status(t2.pk, Table.Status.RESERVED)
        self.assertEqual(services.table_status_counts(), {
            Table.Status.AVAILABLE: 1,
            Table.Status.OCCUPIED: 0,
            Table.Status.RESERVED: 1,
        })
        self.assertEqual(services.count_tables_by_status(Table.Status.OCCUPIED), 0)

    def test_status_override_rejects_unknown_status(self):
        table = make_table()
        with self.assertRaises(ValidationError):
            services.set_table_status(table.pk, "BROKEN")
