from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from frontdesk import services
from frontdesk.exceptions import FrontDeskError
from frontdesk.models import CustomUser, InventoryItem, InventoryTransaction, Reservation, Table

DEMO_PASSWORD = "password123"

USERS = [
    ("admin", "admin@hotel.com", "Admin", CustomUser.Roles.ADMIN),
    ("manager", "manager@hotel.com", "Manager", CustomUser.Roles.MANAGER),
    ("receptionist", "receptionist@hotel.com", "Receptionist", CustomUser.Roles.RECEPTIONIST),
    ("staff", "staff@hotel.com", "Staff", CustomUser.Roles.STAFF),
    ("user", "user@hotel.com", "Regular", CustomUser.Roles.CUSTOMER),
]

TABLES = [("T01", 2), ("T02", 4), ("T03", 6), ("T04", 2), ("T05", 4),
          ("T06", 8), ("T07", 2), ("T08", 4), ("T09", 6), ("T10", 10)]

# name, phone, offset from now, party size, status
RESERVATIONS = [
    ("Udaya Shetty", "+91 9876543210", timedelta(hours=2), 2, Reservation.Status.CONFIRMED),
    ("Shivananda Bangera", "+91 9611693320", timedelta(hours=3), 4, Reservation.Status.PENDING),
    ("Santosh Naik", "+91 7795074320", timedelta(days=1), 6, Reservation.Status.CONFIRMED),
    ("Gopal Achar", "+91 8105649828", timedelta(days=1, hours=2), 2, Reservation.Status.PENDING),
    ("Vittal Kanchan", "+91 9900123456", timedelta(days=2), 4, Reservation.Status.CONFIRMED),
]

INVENTORY = [
    ("Tomatoes", "Produce", "kg", 20, 5),
    ("Olive Oil", "Pantry", "l", 10, 2),
    ("Napkins", "Supplies", "pcs", 500, 100),
    ("Chicken Breast", "Meat", "kg", 15, 5),
]


class Command(BaseCommand):
    help = 'Seed the database with demo users, tables, reservations and inventory'

    def handle(self, *args, **kwargs):
        self.seed_users()
        self.seed_tables()
        self.seed_reservations()
        self.seed_inventory()
        self.stdout.write(self.style.SUCCESS('Successfully seeded the database with demo data'))

    def seed_users(self):
        User = get_user_model()
        for username, email, first_name, role in USERS:
            if User.objects.filter(username=username).exists():
                self.stdout.write(f"User {username} already exists, skipping...")
                continue
            User.objects.create_user(
                username=username, email=email, password=DEMO_PASSWORD,
                first_name=first_name, last_name="User", role=role,
                is_superuser=(role == CustomUser.Roles.ADMIN),
            )
            self.stdout.write(f"Created user: {username} / {DEMO_PASSWORD} ({role})")

    def seed_tables(self):
        for number, capacity in TABLES:
            if Table.objects.number_exists(number):
                continue
            services.create_table(table_number=number, capacity=capacity)
            self.stdout.write(f"Created table {number} (seats {capacity})")

    def seed_reservations(self):
        if Reservation.objects.exists():
            self.stdout.write("Reservations already present, skipping...")
            return

        tables = list(services.available_tables()[:len(RESERVATIONS)])
        if not tables:
            self.stdout.write(self.style.WARNING("No available tables found for sample reservations"))
            return

        now = timezone.now()
        for i, (name, phone, offset, party_size, status) in enumerate(RESERVATIONS):
            table = tables[i] if i < len(tables) else tables[0]
            try:
                reservation = services.create_reservation(
                    table_id=table.pk, customer_name=name, customer_phone=phone,
                    reservation_time=now + offset, party_size=party_size,
                )
                if status != reservation.status:
                    services.update_reservation_status(reservation.pk, status)
            except FrontDeskError as exc:
                self.stdout.write(self.style.WARNING(f"Failed to create reservation for {name}: {exc}"))
                continue
            self.stdout.write(f"Created reservation for: {name}")

    def seed_inventory(self):
        for name, category, unit, quantity, threshold in INVENTORY:
            if InventoryItem.objects.name_taken(name):
                continue
            services.create_item(
                name=name, category=category, unit=unit,
                quantity=quantity, low_stock_threshold=threshold,
            )
            self.stdout.write(f"Created inventory item: {name}")

        tomatoes = InventoryItem.objects.filter(name__iexact="Tomatoes").first()
        if tomatoes and not tomatoes.transactions.exists():
            services.record_transaction(tomatoes.pk, InventoryTransaction.Type.OUT, 3, "Lunch prep", "system")
            services.record_transaction(tomatoes.pk, InventoryTransaction.Type.IN, 10, "Supplier delivery", "system")
