from datetime import timedelta

from django.contrib.messages import get_messages
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from frontdesk import services
from frontdesk.models import InventoryTransaction, Rating, Reservation, Staff, Table

from .helpers import PASSWORD, book, make_table, make_user


def flashed(response):
    return [str(m) for m in get_messages(response.wsgi_request)]


class FrontDeskViewTests(TestCase):
    def setUp(self):
        make_user("desk", role="RECEPTIONIST")
        self.client.login(username="desk", password=PASSWORD)
        self.table = make_table("T01", capacity=4)

    def test_pages_render(self):
        reservation = book(self.table)
        staff = services.create_staff(first_name="Jane", last_name="Doe", email="jane@hotel.com",
                                      role=Staff.Role.WAITER)
        task = services.create_task(title="Polish glasses", assigned_staff_id=staff.pk)
        item = services.create_item(name="Napkins", unit="pcs", quantity=5, low_stock_threshold=10)
        services.submit_rating(customer_name="Ann", customer_email="ann@example.com", rating=4)

        pages = [
            reverse("frontdesk:staff-dashboard"),
            reverse("frontdesk:floor-plan"),
            reverse("frontdesk:table-list"),
            reverse("frontdesk:table-by-status", args=[Table.Status.RESERVED]),
            reverse("frontdesk:table-available") + "?party_size=2",
            reverse("frontdesk:table-detail", args=[self.table.pk]),
            reverse("frontdesk:table-create"),
            reverse("frontdesk:reservation-list"),
            reverse("frontdesk:reservation-today"),
            reverse("frontdesk:reservation-detail", args=[reservation.pk]),
            reverse("frontdesk:reservation-create"),
            reverse("frontdesk:staff-list") + "?q=doe",
            reverse("frontdesk:staff-detail", args=[staff.pk]),
            reverse("frontdesk:staff-edit", args=[staff.pk]),
            reverse("frontdesk:task-list") + "?filter=overdue",
            reverse("frontdesk:task-detail", args=[task.pk]),
            reverse("frontdesk:inventory-list"),
            reverse("frontdesk:inventory-low-stock"),
            reverse("frontdesk:inventory-detail", args=[item.pk]),
            reverse("frontdesk:rating-list"),
            reverse("frontdesk:rating-pending"),
        ]
        for url in pages:
            with self.subTest(url=url):
                self.assertEqual(self.client.get(url).status_code, 200)

    def test_create_table(self):
        response = self.client.post(reverse("frontdesk:table-create"), {"table_number": "t02", "capacity": 2})
        self.assertRedirects(response, reverse("frontdesk:table-list"))
        self.assertIn("Table T02 created successfully.", flashed(response))

    def test_duplicate_table_is_reported(self):
        response = self.client.post(reverse("frontdesk:table-create"), {"table_number": "T01", "capacity": 2})
        self.assertEqual(response.status_code, 200)
        self.assertIn("Table number T01 already exists.", flashed(response))

    def test_unknown_status_filter(self):
        response = self.client.get(reverse("frontdesk:table-by-status", args=["BROKEN"]))
        self.assertRedirects(response, reverse("frontdesk:table-list"))
        self.assertIn("Unknown table status 'BROKEN'.", flashed(response))

    def test_reservation_in_the_past_is_flashed(self):
        past = timezone.localtime() - timedelta(hours=1)
        response = self.client.post(reverse("frontdesk:reservation-create"), {
            "customer_name": "A",
            "customer_phone": "+1 555 123 4567",
            "table": self.table.pk,
            "reservation_time": past.strftime("%Y-%m-%dT%H:%M"),
            "party_size": 2,
        })
        self.assertRedirects(response, reverse("frontdesk:reservation-create"))
        self.assertIn("Reservation time must be in the future.", flashed(response))
        self.assertFalse(Reservation.objects.exists())

    def test_reservation_flow(self):
        future = timezone.localtime() + timedelta(hours=2)
        response = self.client.post(reverse("frontdesk:reservation-create"), {
            "customer_name": "A",
            "customer_phone": "+1 555 123 4567",
            "table": self.table.pk,
            "reservation_time": future.strftime("%Y-%m-%dT%H:%M"),
            "party_size": 2,
        })
        self.assertRedirects(response, reverse("frontdesk:reservation-list"))
        reservation = Reservation.objects.get()

        self.client.post(reverse("frontdesk:reservation-status", args=[reservation.pk]),
                         {"status": Reservation.Status.SEATED})
        self.table.refresh_from_db()
        self.assertEqual(self.table.status, Table.Status.OCCUPIED)

        response = self.client.post(reverse("frontdesk:reservation-cancel", args=[reservation.pk]))
        self.assertIn("Reservation cancelled successfully.", flashed(response))
        self.table.refresh_from_db()
        self.assertEqual(self.table.status, Table.Status.AVAILABLE)

    def test_reservation_form_accepts_initial_status(self):
        future = timezone.localtime() + timedelta(hours=2)
        response = self.client.post(reverse("frontdesk:reservation-create"), {
            "customer_name": "A",
            "customer_phone": "+1 555 123 4567",
            "table": self.table.pk,
            "reservation_time": future.strftime("%Y-%m-%dT%H:%M"),
            "party_size": 2,
            "status": Reservation.Status.CONFIRMED,
        })
        self.assertRedirects(response, reverse("frontdesk:reservation-list"))
        self.assertEqual(Reservation.objects.get().status, Reservation.Status.CONFIRMED)
        self.table.refresh_from_db()
        self.assertEqual(self.table.status, Table.Status.RESERVED)

    def test_missing_reservation(self):
        response = self.client.get(reverse("frontdesk:reservation-detail", args=[999]))
        self.assertRedirects(response, reverse("frontdesk:reservation-list"))
        self.assertEqual(len(flashed(response)), 1)

    def test_table_status_override(self):
        response = self.client.post(reverse("frontdesk:table-status", args=[self.table.pk]),
                                    {"status": Table.Status.OCCUPIED})
        self.assertIn("Table T01 is now Occupied.", flashed(response))

    def test_insufficient_stock_is_flashed(self):
        item = services.create_item(name="Napkins", unit="pcs", quantity=5)
        response = self.client.post(reverse("frontdesk:inventory-transaction", args=[item.pk]),
                                    {"type": InventoryTransaction.Type.OUT, "quantity": 9, "note": ""})
        self.assertRedirects(response, reverse("frontdesk:inventory-detail", args=[item.pk]))
        self.assertTrue(flashed(response)[0].startswith("Insufficient stock for Napkins"))
        item.refresh_from_db()
        self.assertEqual(item.quantity, 5)

    def test_rating_moderation(self):
        rating = services.submit_rating(customer_name="Ann", customer_email="ann@example.com", rating=5)
        response = self.client.post(reverse("frontdesk:rating-approve", args=[rating.pk]))
        self.assertIn("Rating approved successfully!", flashed(response))
        rating.refresh_from_db()
        self.assertEqual(rating.status, Rating.Status.APPROVED)


class PublicRatingTests(TestCase):
    def test_anonymous_visitor_can_rate(self):
        response = self.client.post(reverse("frontdesk:rating-create"), {
            "customer_name": "Ann",
            "customer_email": "ann@example.com",
            "rating": 5,
            "comment": "Lovely",
        })
        self.assertRedirects(response, reverse("frontdesk:home"))
        self.assertEqual(Rating.objects.get().status, Rating.Status.PENDING)

    def test_anonymous_visitor_cannot_moderate(self):
        rating = services.submit_rating(customer_name="Ann", customer_email="ann@example.com", rating=5)
        response = self.client.post(reverse("frontdesk:rating-approve", args=[rating.pk]))
        self.assertEqual(response.status_code, 302)
        rating.refresh_from_db()
        self.assertEqual(rating.status, Rating.Status.PENDING)
