from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase

from frontdesk.models import InventoryItem, Reservation, Table


class SeedDemoDataTests(TestCase):
    def seed(self):
        out = StringIO()
        call_command("seed_demo_data", stdout=out)
        return out.getvalue()

    def test_seed_is_idempotent(self):
        output = self.seed()
        self.assertIn("Successfully seeded", output)
        self.seed()

        self.assertEqual(get_user_model().objects.count(), 5)
        self.assertEqual(Table.objects.count(), 10)
        self.assertEqual(Reservation.objects.count(), 5)
        self.assertEqual(InventoryItem.objects.count(), 4)

        tomatoes = InventoryItem.objects.get(name="Tomatoes")
        self.assertEqual(tomatoes.quantity, 27)
        self.assertEqual(tomatoes.transactions.count(), 2)

    def test_seeded_reservations_hold_their_tables(self):
        self.seed()
        self.assertEqual(Table.objects.with_status(Table.Status.RESERVED).count(), 5)
        self.assertEqual(Reservation.objects.with_status(Reservation.Status.CONFIRMED).count(), 3)
        self.assertTrue(get_user_model().objects.get(username="admin").is_superuser)
