from django.test import TestCase

from frontdesk import services
from frontdesk.exceptions import ValidationError
from frontdesk.models import Rating


def rate(stars, email="guest@example.com"):
    return services.submit_rating(customer_name="Guest", customer_email=email, rating=stars, comment="")


class RatingServiceTests(TestCase):
    def test_submissions_wait_for_moderation(self):
        entry = rate(5)
        self.assertEqual(entry.status, Rating.Status.PENDING)
        self.assertEqual(services.pending_count(), 1)
        self.assertEqual(services.average_rating(), 0.0)

    def test_average_uses_approved_only(self):
        for stars in (5, 4, 4):
            services.approve_rating(rate(stars).pk)
        services.reject_rating(rate(1).pk)
        rate(1)

        self.assertEqual(services.average_rating(), 4.3)
        self.assertEqual(services.approved_count(), 3)
        self.assertEqual(services.rating_distribution(), {5: 1, 4: 2, 3: 0, 2: 0, 1: 0})

    def test_rating_bounds(self):
        for stars in (0, 6):
            with self.subTest(stars=stars), self.assertRaises(ValidationError):
                rate(stars)

    def test_lookup_by_email(self):
        rate(3, email="Ann@Example.com")
        rate(4, email="bob@example.com")
        self.assertEqual(services.ratings_for_email("ann@example.com").count(), 1)

    def test_unknown_status_filter(self):
        with self.assertRaises(ValidationError):
            services.ratings_by_status("SPAM")
