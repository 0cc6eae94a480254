from datetime import timedelta

from django import forms
from django.contrib.auth.forms import AuthenticationForm
from django.utils import timezone

from .models import InventoryItem, InventoryTransaction, Rating, Reservation, Staff, Table, Task


class DateTimeLocalInput(forms.DateTimeInput):
    input_type = "datetime-local"

    def __init__(self, attrs=None):
        super().__init__(attrs=attrs, format="%Y-%m-%dT%H:%M")


# ==============================================================================
# LOGIN FORM
# ==============================================================================
class LoginForm(AuthenticationForm):
    username = forms.CharField(widget=forms.TextInput(attrs={"autofocus": True, "placeholder": "Username"}))
    password = forms.CharField(widget=forms.PasswordInput(attrs={"placeholder": "Password"}))


# ==============================================================================
# TABLE FORMS
# ==============================================================================
class TableForm(forms.ModelForm):
    """Create a table; number uniqueness is checked by the service."""
    class Meta:
        model = Table
        fields = ["table_number", "capacity"]
        widgets = {
            "table_number": forms.TextInput(attrs={"placeholder": "e.g., T11"}),
        }

    def validate_unique(self):
        pass


class TableStatusForm(forms.Form):
    status = forms.ChoiceField(choices=Table.Status.choices)


class PartySizeForm(forms.Form):
    party_size = forms.IntegerField(min_value=1, max_value=20)


# ==============================================================================
# RESERVATION FORMS
# ==============================================================================
class ReservationForm(forms.ModelForm):
    """Form used by the front desk to book a table."""
    class Meta:
        model = Reservation
        fields = ["customer_name", "customer_phone", "table", "reservation_time", "party_size", "status"]
        widgets = {
            "reservation_time": DateTimeLocalInput(),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Only tables that can currently be booked
        self.fields["table"].queryset = Table.objects.available().order_by("table_number")
        self.fields["table"].help_text = "Only available tables are listed."
        self.fields["status"].required = False
        self.fields["status"].initial = Reservation.Status.PENDING
        self.fields["status"].help_text = "Leave as pending unless the booking is already confirmed."
        if not self.is_bound:
            self.initial.setdefault(
                "reservation_time",
                timezone.localtime() + timedelta(hours=1),
            )


class ReservationStatusForm(forms.Form):
    status = forms.ChoiceField(choices=Reservation.Status.choices)


class CompletedDateForm(forms.Form):
    completed_date = forms.DateField(required=False, widget=forms.DateInput(attrs={"type": "date"}))


# ==============================================================================
# STAFF & TASK FORMS
# ==============================================================================
class StaffForm(forms.ModelForm):
    class Meta:
        model = Staff
        fields = [
            "first_name", "last_name", "email", "phone", "role",
            "department", "hire_date", "salary", "is_active",
        ]
        widgets = {
            "hire_date": forms.DateInput(attrs={"type": "date"}),
            "department": forms.TextInput(attrs={"list": "departments"}),
        }

    def validate_unique(self):
        # Email uniqueness is enforced by the staff service
        pass


class AssignTableForm(forms.Form):
    table = forms.ModelChoiceField(queryset=Table.objects.order_by("table_number"))


class TaskForm(forms.ModelForm):
    priority = forms.TypedChoiceField(
        choices=[("", "---------")] + sorted(Task.PRIORITY_LABELS.items()),
        coerce=int, empty_value=None, required=False,
    )

    class Meta:
        model = Task
        fields = ["title", "description", "status", "priority", "due_date", "category", "assigned_staff"]
        widgets = {
            "description": forms.Textarea(attrs={"rows": 3}),
            "due_date": forms.DateInput(attrs={"type": "date"}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["assigned_staff"].queryset = Staff.objects.active()
        self.fields["assigned_staff"].required = False


class TaskStatusForm(forms.Form):
    status = forms.ChoiceField(choices=Task.Status.choices)


class AssignTaskForm(forms.Form):
    staff = forms.ModelChoiceField(queryset=Staff.objects.active())


# ==============================================================================
# INVENTORY MANAGEMENT FORMS
# ==============================================================================
class InventoryItemForm(forms.ModelForm):
    """Form for creating inventory items."""
    class Meta:
        model = InventoryItem
        fields = ["name", "category", "unit", "quantity", "low_stock_threshold"]
        widgets = {
            "name": forms.TextInput(attrs={"placeholder": "e.g., Tomatoes"}),
            "unit": forms.TextInput(attrs={"placeholder": "kg / l / pcs"}),
        }
        help_texts = {
            "low_stock_threshold": "Threshold for triggering low-stock alerts.",
        }

    def validate_unique(self):
        # Case-insensitive name check lives in the inventory service
        pass


class InventoryItemEditForm(InventoryItemForm):
    """Stock levels change through transactions only."""
    class Meta(InventoryItemForm.Meta):
        fields = ["name", "category", "unit", "low_stock_threshold"]


class InventoryTransactionForm(forms.ModelForm):
    class Meta:
        model = InventoryTransaction
        fields = ["type", "quantity", "note"]


# ==============================================================================
# RATING FORM
# ==============================================================================
class RatingForm(forms.ModelForm):
    rating = forms.TypedChoiceField(
        choices=[(n, f"{n} ★") for n in range(5, 0, -1)], coerce=int,
        widget=forms.RadioSelect,
    )

    class Meta:
        model = Rating
        fields = ["customer_name", "customer_email", "rating", "comment"]
        widgets = {
            "comment": forms.Textarea(attrs={"rows": 3, "maxlength": 500}),
        }
