# frontdesk/admin.py

from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin

from . import services
from .exceptions import FrontDeskError
from .models import (
    CustomUser, InventoryItem, InventoryTransaction, Rating, Reservation, Staff, Table, Task,
)
from .permissions import RoleRestrictedAdmin


def _apply(modeladmin, request, queryset, func, *args, done="updated"):
    """Run a service call per selected row and report the outcome in the admin."""
    ok = 0
    for obj in queryset:
        try:
            func(obj.pk, *args)
            ok += 1
        except FrontDeskError as exc:
            modeladmin.message_user(request, f"{obj}: {exc}", level=messages.ERROR)
    if ok:
        modeladmin.message_user(request, f"{ok} record(s) {done}.", level=messages.SUCCESS)


# =============================================================================
# === USER ADMIN ==============================================================
# =============================================================================

@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin, RoleRestrictedAdmin):
    list_display = ("username", "email", "role", "is_active", "is_staff")
    list_filter = ("role", "is_active")
    search_fields = ("username", "email", "phone_number")
    readonly_fields = ("last_login", "date_joined")
    ordering = ("-date_joined",)
    fieldsets = UserAdmin.fieldsets + (("Front desk", {"fields": ("role", "phone_number")}),)
    add_fieldsets = UserAdmin.add_fieldsets + (("Front desk", {"fields": ("email", "role")}),)


# =============================================================================
# === TABLE & RESERVATION ADMIN ===============================================
# =============================================================================

@admin.register(Table)
class TableAdmin(RoleRestrictedAdmin):
    list_display = ("table_number", "capacity", "status", "updated_at")
    list_filter = ("status",)
    search_fields = ("table_number",)
    ordering = ("table_number",)
    actions = ["mark_available", "mark_reserved", "mark_occupied"]

    def get_readonly_fields(self, request, obj=None):
        # Existing tables change status only through the override actions
        return ("status", "created_at", "updated_at") if obj else ("created_at", "updated_at")

    @admin.action(description="Override status: Available")
    def mark_available(self, request, queryset):
        _apply(self, request, queryset, services.set_table_status, Table.Status.AVAILABLE)

    @admin.action(description="Override status: Reserved")
    def mark_reserved(self, request, queryset):
        _apply(self, request, queryset, services.set_table_status, Table.Status.RESERVED)

    @admin.action(description="Override status: Occupied")
    def mark_occupied(self, request, queryset):
        _apply(self, request, queryset, services.set_table_status, Table.Status.OCCUPIED)


@admin.register(Reservation)
class ReservationAdmin(RoleRestrictedAdmin):
    list_display = ("customer_name", "table", "reservation_time", "party_size", "status")
    list_filter = ("status", "reservation_time")
    search_fields = ("customer_name", "customer_phone", "table__table_number")
    readonly_fields = ("status", "created_at", "updated_at")
    ordering = ("-reservation_time",)
    actions = ["cancel_selected"]

    def has_add_permission(self, request):
        # Bookings go through the reservation form so the table is checked and locked
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.action(description="Cancel selected reservations")
    def cancel_selected(self, request, queryset):
        _apply(self, request, queryset, services.cancel_reservation, done="cancelled")


# =============================================================================
# === STAFF & TASK ADMIN ======================================================
# =============================================================================

@admin.register(Staff)
class StaffAdmin(RoleRestrictedAdmin):
    list_display = ("full_name", "email", "role", "department", "is_active", "hire_date")
    list_filter = ("role", "department", "is_active")
    search_fields = ("first_name", "last_name", "email")
    filter_horizontal = ("assigned_tables",)
    actions = ["activate", "deactivate"]

    @admin.action(description="Mark selected as active")
    def activate(self, request, queryset):
        _apply(self, request, queryset, services.activate_staff, done="activated")

    @admin.action(description="Mark selected as inactive")
    def deactivate(self, request, queryset):
        _apply(self, request, queryset, services.deactivate_staff, done="deactivated")


@admin.register(Task)
class TaskAdmin(RoleRestrictedAdmin):
    list_display = ("title", "status", "priority", "due_date", "assigned_staff", "category")
    list_filter = ("status", "priority", "category")
    search_fields = ("title", "description")
    readonly_fields = ("completed_at", "created_at", "updated_at")

    def save_model(self, request, obj, form, change):
        obj.set_status(obj.status)
        if not obj.created_by:
            obj.created_by = request.user.get_username()
        super().save_model(request, obj, form, change)


# =============================================================================
# === INVENTORY ADMIN =========================================================
# =============================================================================

class InventoryTransactionInline(admin.TabularInline):
    model = InventoryTransaction
    extra = 0
    can_delete = False
    fields = ("created_at", "type", "quantity", "note", "created_by")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(InventoryItem)
class InventoryItemAdmin(RoleRestrictedAdmin):
    list_display = ("name", "category", "quantity", "unit", "low_stock_threshold", "low_stock")
    list_filter = ("category",)
    search_fields = ("name",)
    inlines = [InventoryTransactionInline]

    def get_readonly_fields(self, request, obj=None):
        return ("quantity",) if obj else ()

    @admin.display(boolean=True, description="Low stock")
    def low_stock(self, obj):
        return obj.is_low_stock


# =============================================================================
# === RATING ADMIN ============================================================
# =============================================================================

@admin.register(Rating)
class RatingAdmin(RoleRestrictedAdmin):
    list_display = ("customer_name", "customer_email", "rating", "status", "date")
    list_filter = ("status", "rating")
    search_fields = ("customer_name", "customer_email", "comment")
    readonly_fields = ("date",)
    actions = ["approve", "reject"]

    @admin.action(description="Approve selected ratings")
    def approve(self, request, queryset):
        _apply(self, request, queryset, services.approve_rating, done="approved")

    @admin.action(description="Reject selected ratings")
    def reject(self, request, queryset):
        _apply(self, request, queryset, services.reject_rating, done="rejected")
