from datetime import timedelta

from django.contrib.auth import get_user_model
from django.utils import timezone

from frontdesk import services
from frontdesk.models import CustomUser

User = get_user_model()
PASSWORD = "password123"


def make_user(username, role=CustomUser.Roles.CUSTOMER, **extra):
    return User.objects.create_user(
        username=username,
        email=f"{username}@hotel.com",
        password=PASSWORD,
        role=role,
        **extra,
    )


def make_table(number="T01", capacity=4):
    return services.create_table(table_number=number, capacity=capacity)


def book(table, party_size=2, hours_ahead=2, name="A"):
    return services.create_reservation(
        table_id=table.pk,
        customer_name=name,
        customer_phone="+1 555 123 4567",
        reservation_time=timezone.now() + timedelta(hours=hours_ahead),
        party_size=party_size,
    )
