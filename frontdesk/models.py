from datetime import datetime, time

from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator
from django.db import models
from django.db.models import Avg, Count, Q
from django.contrib.auth.models import AbstractUser
from django.urls import reverse
from django.utils import timezone

# =============================================================================
# === SHARED VALIDATORS =======================================================
# =============================================================================

phone_regex = RegexValidator(
    regex=r'^[+]?[0-9\s\-()]{10,15}$',
    message="Invalid phone number format. Use 10-15 digits, optionally with +, spaces, dashes or brackets."
)


def day_bounds(day):
    """Return the inclusive [start, end] datetimes of ``day`` in the active time zone."""
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(day, time.min), tz)
    end = timezone.make_aware(datetime.combine(day, time.max), tz)
    return start, end


# =============================================================================
# === USERS ===================================================================
# =============================================================================

class CustomUser(AbstractUser):
    class Roles(models.TextChoices):
        ADMIN = 'ADMIN', 'Administrator'
        MANAGER = 'MANAGER', 'Manager'
        RECEPTIONIST = 'RECEPTIONIST', 'Receptionist'
        STAFF = 'STAFF', 'Staff'
        CUSTOMER = 'CUSTOMER', 'Customer'

    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=Roles.choices, default=Roles.CUSTOMER)
    phone_number = models.CharField(validators=[phone_regex], max_length=20, blank=True)

    def save(self, *args, **kwargs):
        # Django admin access follows the role
        self.is_staff = self.is_superuser or self.role in (self.Roles.ADMIN, self.Roles.MANAGER)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.username} ({self.role})"


# =============================================================================
# === TABLES ==================================================================
# =============================================================================

class TableQuerySet(models.QuerySet):
    def with_status(self, status):
        return self.filter(status=status)

    def available(self):
        return self.filter(status=Table.Status.AVAILABLE)

    def available_for_party(self, party_size):
        return self.available().filter(capacity__gte=party_size).order_by("capacity", "table_number")

    def by_number(self, table_number):
        return self.filter(table_number=Table.normalize_number(table_number))

    def number_exists(self, table_number):
        return self.by_number(table_number).exists()

    def count_by_status(self, status):
        return self.with_status(status).count()

    def status_counts(self):
        """Map every Table.Status value to its row count (zero when absent)."""
        rows = self.values("status").annotate(n=Count("id"))
        counts = {status: 0 for status in Table.Status.values}
        counts.update({row["status"]: row["n"] for row in rows})
        return counts


class Table(models.Model):
    class Status(models.TextChoices):
        AVAILABLE = 'AVAILABLE', 'Available'
        OCCUPIED = 'OCCUPIED', 'Occupied'
        RESERVED = 'RESERVED', 'Reserved'

    table_number = models.CharField(max_length=10, unique=True)
    capacity = models.PositiveIntegerField(default=2, validators=[MinValueValidator(1)])
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.AVAILABLE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TableQuerySet.as_manager()

    class Meta:
        ordering = ['table_number']

    def __str__(self):
        return f"Table {self.table_number} (Seats: {self.capacity})"

    def get_absolute_url(self):
        return reverse('frontdesk:table-detail', args=[self.pk])

    @staticmethod
    def normalize_number(value):
        return str(value).upper().strip()

    def save(self, *args, **kwargs):
        self.table_number = self.normalize_number(self.table_number)
        super().save(*args, **kwargs)

    @property
    def is_available(self) -> bool:
        return self.status == self.Status.AVAILABLE


# =============================================================================
# === RESERVATIONS ============================================================
# =============================================================================

class ReservationQuerySet(models.QuerySet):
    def with_status(self, status):
        return self.filter(status=status)

    def between(self, start, end):
        """Reservations whose time falls in [start, end], both ends inclusive."""
        return self.filter(reservation_time__gte=start, reservation_time__lte=end)

    def for_date(self, day):
        return self.between(*day_bounds(day))

    def for_table(self, table):
        return self.filter(table=table)

    def active(self):
        return self.exclude(status=Reservation.Status.COMPLETED)

    def completed(self):
        return self.filter(status=Reservation.Status.COMPLETED)

    def upcoming(self, since=None):
        since = since or timezone.now()
        start, _ = day_bounds(timezone.localdate(since))
        return self.filter(reservation_time__gte=start)

    def count_by_status(self, status):
        return self.with_status(status).count()


class Reservation(models.Model):
    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Waiting for confirmation'
        CONFIRMED = 'CONFIRMED', 'Confirmed'
        SEATED = 'SEATED', 'Customer seated'
        IN_SERVICE = 'IN_SERVICE', 'In service'
        COMPLETED = 'COMPLETED', 'Completed'
        CANCELLED = 'CANCELLED', 'Cancelled'

    customer_name = models.CharField(max_length=100)
    customer_phone = models.CharField(max_length=20, validators=[phone_regex])
    table = models.ForeignKey(Table, on_delete=models.PROTECT, related_name='reservations')
    reservation_time = models.DateTimeField(db_index=True)
    party_size = models.PositiveIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(20)]
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ReservationQuerySet.as_manager()

    class Meta:
        ordering = ['reservation_time']

    def __str__(self):
        return f"{self.customer_name} @ {self.table.table_number} ({self.reservation_time:%Y-%m-%d %H:%M})"

    def get_absolute_url(self):
        return reverse('frontdesk:reservation-detail', args=[self.pk])


# =============================================================================
# === STAFF & TASKS ===========================================================
# =============================================================================

class StaffQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def with_role(self, role):
        return self.filter(role=role)

    def in_department(self, department):
        return self.filter(department__iexact=department)

    def search(self, term):
        return self.filter(Q(first_name__icontains=term) | Q(last_name__icontains=term))


class Staff(models.Model):
    class Role(models.TextChoices):
        MANAGER = 'MANAGER', 'Manager'
        RECEPTIONIST = 'RECEPTIONIST', 'Receptionist'
        WAITER = 'WAITER', 'Waiter'
        CHEF = 'CHEF', 'Chef'
        CLEANER = 'CLEANER', 'Cleaner'
        SECURITY = 'SECURITY', 'Security'
        MAINTENANCE = 'MAINTENANCE', 'Maintenance'
        ADMIN = 'ADMIN', 'Administrator'

    DEPARTMENTS = ["Front Office", "Housekeeping", "Kitchen", "Maintenance", "Security", "Management"]

    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    email = models.EmailField(max_length=100, unique=True)
    phone = models.CharField(max_length=20, blank=True, validators=[phone_regex])
    role = models.CharField(max_length=20, choices=Role.choices)
    department = models.CharField(max_length=50, blank=True)
    hire_date = models.DateField(default=timezone.localdate)
    salary = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    is_active = models.BooleanField(default=True)
    assigned_tables = models.ManyToManyField(Table, blank=True, related_name='assigned_staff')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = StaffQuerySet.as_manager()

    class Meta:
        ordering = ['last_name', 'first_name']
        verbose_name_plural = "Staff"

    def __str__(self):
        return f"{self.full_name} ({self.get_role_display()})"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"


class TaskQuerySet(models.QuerySet):
    def by_priority(self):
        return self.order_by(models.F('priority').desc(nulls_last=True), models.F('due_date').asc(nulls_last=True))

    def with_status(self, status):
        return self.filter(status=status)

    def for_staff(self, staff):
        return self.filter(assigned_staff=staff)

    def unassigned(self):
        return self.filter(assigned_staff__isnull=True)

    def overdue(self, today=None):
        today = today or timezone.localdate()
        return self.filter(due_date__lt=today).exclude(status=Task.Status.COMPLETED)


class Task(models.Model):
    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        IN_PROGRESS = 'IN_PROGRESS', 'In Progress'
        COMPLETED = 'COMPLETED', 'Completed'
        CANCELLED = 'CANCELLED', 'Cancelled'
        ON_HOLD = 'ON_HOLD', 'On Hold'

    CATEGORIES = ["Cleaning", "Maintenance", "Customer Service", "Kitchen", "Security", "Administrative", "Other"]
    PRIORITY_LABELS = {1: "Low", 2: "Low-Medium", 3: "Medium", 4: "High", 5: "Critical"}

    title = models.CharField(max_length=100)
    description = models.TextField(max_length=1000, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    priority = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    due_date = models.DateField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    assigned_staff = models.ForeignKey(
        Staff, null=True, blank=True, on_delete=models.SET_NULL, related_name='tasks'
    )
    created_by = models.CharField(max_length=100, blank=True)
    category = models.CharField(max_length=50, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TaskQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    def set_status(self, status):
        self.status = status
        if status == self.Status.COMPLETED and self.completed_at is None:
            self.completed_at = timezone.now()

    @property
    def is_overdue(self):
        return (
            self.due_date is not None
            and self.due_date < timezone.localdate()
            and self.status != self.Status.COMPLETED
        )

    @property
    def priority_label(self):
        return self.PRIORITY_LABELS.get(self.priority, "Medium")


# =============================================================================
# === INVENTORY ===============================================================
# =============================================================================

class InventoryItemQuerySet(models.QuerySet):
    def low_stock(self):
        return self.filter(quantity__lte=models.F('low_stock_threshold'))

    def name_taken(self, name, exclude_pk=None):
        qs = self.filter(name__iexact=name.strip())
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        return qs.exists()


class InventoryItem(models.Model):
    """Tracks a stock item; quantity only changes through InventoryTransaction."""
    name = models.CharField(max_length=150, unique=True)
    category = models.CharField(max_length=100, blank=True)
    unit = models.CharField(max_length=20)  # e.g. kg, l, pcs
    quantity = models.PositiveIntegerField(default=0)
    low_stock_threshold = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = InventoryItemQuerySet.as_manager()

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.quantity} {self.unit})"

    @property
    def is_low_stock(self):
        return self.quantity <= self.low_stock_threshold


class InventoryTransaction(models.Model):
    class Type(models.TextChoices):
        IN = 'IN', 'Stock in'
        OUT = 'OUT', 'Stock out'
        ADJUSTMENT = 'ADJUSTMENT', 'Adjustment'

    item = models.ForeignKey(InventoryItem, on_delete=models.CASCADE, related_name='transactions')
    type = models.CharField(max_length=20, choices=Type.choices)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    note = models.CharField(max_length=255, blank=True)
    created_by = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.get_type_display()} {self.quantity} x {self.item.name}"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise ValueError("Inventory transactions are immutable once recorded.")
        super().save(*args, **kwargs)


# =============================================================================
# === RATINGS =================================================================
# =============================================================================

class RatingQuerySet(models.QuerySet):
    def with_status(self, status):
        return self.filter(status=status)

    def approved(self):
        return self.with_status(Rating.Status.APPROVED)

    def pending(self):
        return self.with_status(Rating.Status.PENDING)

    def approved_average(self):
        return self.approved().aggregate(avg=Avg('rating'))['avg']


class Rating(models.Model):
    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending Review'
        APPROVED = 'APPROVED', 'Approved'
        REJECTED = 'REJECTED', 'Rejected'

    customer_name = models.CharField(max_length=100)
    customer_email = models.EmailField()
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField(max_length=500, blank=True)
    date = models.DateTimeField(default=timezone.now)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)

    objects = RatingQuerySet.as_manager()

    class Meta:
        ordering = ['-date']

    def __str__(self):
        return f"{self.customer_name}: {self.rating}/5 ({self.status})"
