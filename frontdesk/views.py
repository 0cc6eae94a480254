import logging

from django.contrib import messages
from django.contrib.auth import views as auth_views
from django.shortcuts import redirect, render
from django.urls import reverse, reverse_lazy
from django.utils import timezone
from django.views import View
from django.views.generic import FormView, TemplateView

from . import dashboard, services
from .exceptions import FrontDeskError, NotFound
from .forms import (
    AssignTableForm, AssignTaskForm, CompletedDateForm, InventoryItemEditForm,
    InventoryItemForm, InventoryTransactionForm, LoginForm, PartySizeForm, RatingForm,
    ReservationForm, ReservationStatusForm, StaffForm, TableForm, TableStatusForm,
    TaskForm, TaskStatusForm,
)
from .models import Rating, Reservation, Staff, Table, Task
from .roles import Principal
from .permissions import (
    AdminRequiredMixin, CustomerRequiredMixin, StaffRequiredMixin, principal_of,
)


def flash_error(request, exc):
    """Show a domain error as a flash message. InternalError already carries a generic text."""
    messages.error(request, str(exc))


class FormPageMixin:
    """Renders the shared form template with a title and a cancel link."""
    template_name = "frontdesk/form.html"
    page_title = ""
    cancel_url = None

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.setdefault("page_title", self.page_title)
        context.setdefault("cancel_url", self.cancel_url)
        return context


class EditObjectMixin:
    """
    Loads ``self.object`` through ``load_object`` and binds it to the form.
    A missing object is flashed and redirected to ``missing_url``.
    List it after the role mixin so access is checked first.
    """
    missing_url = None

    def load_object(self, pk):
        raise NotImplementedError

    def dispatch(self, request, *args, **kwargs):
        try:
            self.object = self.load_object(kwargs["pk"])
        except NotFound as exc:
            flash_error(request, exc)
            return redirect(self.missing_url)
        return super().dispatch(request, *args, **kwargs)

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        kwargs["instance"] = self.object
        return kwargs


# ==============================================================================
# AUTHENTICATION
# ==============================================================================

class LoginView(auth_views.LoginView):
    template_name = "frontdesk/login.html"
    authentication_form = LoginForm
    redirect_authenticated_user = True

    def get_success_url(self):
        # An explicit ?next= wins, otherwise the highest-priority role decides
        return self.get_redirect_url() or reverse(Principal.from_user(self.request.user).landing_url_name)

    def form_valid(self, form):
        response = super().form_valid(form)
        logging.getLogger("audit").info("User %s logged in", form.get_user().get_username())
        return response


class LogoutView(auth_views.LogoutView):
    next_page = reverse_lazy("frontdesk:login")


# ==============================================================================
# DASHBOARDS
# ==============================================================================

def home(request):
    principal = principal_of(request)
    if principal.roles:
        return redirect(principal.landing_url_name)
    return render(request, "frontdesk/home.html", dashboard.overview_context())


class AdminDashboardView(AdminRequiredMixin, TemplateView):
    template_name = "frontdesk/dashboard_admin.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update(dashboard.admin_dashboard_context())
        return context


class StaffDashboardView(StaffRequiredMixin, TemplateView):
    template_name = "frontdesk/dashboard_staff.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update(dashboard.staff_dashboard_context())
        return context


class CustomerDashboardView(CustomerRequiredMixin, TemplateView):
    template_name = "frontdesk/dashboard_customer.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update(dashboard.customer_dashboard_context(self.request.user))
        return context


class FloorPlanView(StaffRequiredMixin, TemplateView):
    """Live table board fed by the ws/floor_plan/ socket."""
    template_name = "frontdesk/floor_plan.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["tables"] = services.list_tables()
        return context


# ==============================================================================
# TABLES
# ==============================================================================

class TableListView(StaffRequiredMixin, TemplateView):
    template_name = "frontdesk/tables/list.html"

    def get_context_data(self, status=None, **kwargs):
        context = super().get_context_data(**kwargs)
        tables = services.list_tables()
        if status:
            tables = services.tables_by_status(status)
        context.update({
            "tables": tables,
            "current_status": status,
            "status_counts": services.table_status_counts(),
            "statuses": Table.Status.choices,
            "status_form": TableStatusForm(),
        })
        return context

    def get(self, request, *args, status=None, **kwargs):
        if status and status not in Table.Status.values:
            messages.error(request, f"Unknown table status '{status}'.")
            return redirect("frontdesk:table-list")
        return super().get(request, *args, status=status, **kwargs)


class TableCreateView(StaffRequiredMixin, FormPageMixin, FormView):
    form_class = TableForm
    page_title = "New table"
    cancel_url = reverse_lazy("frontdesk:table-list")

    def form_valid(self, form):
        try:
            table = services.create_table(**form.cleaned_data)
        except FrontDeskError as exc:
            flash_error(self.request, exc)
            return self.form_invalid(form)
        messages.success(self.request, f"Table {table.table_number} created successfully.")
        return redirect("frontdesk:table-list")


class TableDetailView(StaffRequiredMixin, View):
    def get(self, request, pk):
        try:
            table = services.get_table(pk)
        except NotFound as exc:
            flash_error(request, exc)
            return redirect("frontdesk:table-list")
        return render(request, "frontdesk/tables/detail.html", {
            "table": table,
            "reservations": services.reservations_for_table(pk),
            "status_form": TableStatusForm(initial={"status": table.status}),
        })


class TableStatusView(StaffRequiredMixin, View):
    """Manual status override."""

    def post(self, request, pk):
        form = TableStatusForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Please choose a valid status.")
            return redirect("frontdesk:table-list")
        try:
            table = services.set_table_status(pk, form.cleaned_data["status"])
        except FrontDeskError as exc:
            flash_error(request, exc)
        else:
            messages.success(request, f"Table {table.table_number} is now {table.get_status_display()}.")
        return redirect("frontdesk:table-list")


class AvailableTablesView(StaffRequiredMixin, TemplateView):
    template_name = "frontdesk/tables/list.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        form = PartySizeForm(self.request.GET or None)
        if form.is_valid():
            tables = services.available_tables_for_party(form.cleaned_data["party_size"])
        else:
            tables = services.available_tables()
        context.update({
            "tables": tables,
            "current_status": Table.Status.AVAILABLE,
            "party_form": form,
            "status_counts": services.table_status_counts(),
            "statuses": Table.Status.choices,
            "status_form": TableStatusForm(),
        })
        return context


# ==============================================================================
# RESERVATIONS
# ==============================================================================

class ReservationListView(StaffRequiredMixin, TemplateView):
    template_name = "frontdesk/reservations/list.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        form = CompletedDateForm(self.request.GET or None)
        completed_date = form.cleaned_data["completed_date"] if form.is_valid() else None
        context.update({
            "reservations": services.active_reservations(),
            "completed_reservations": services.completed_reservations(completed_date),
            "completed_date": completed_date,
            "completed_count": services.count_reservations_by_status(Reservation.Status.COMPLETED),
            "current_date": timezone.localdate(),
            "date_form": form,
            "status_form": ReservationStatusForm(),
        })
        return context


class TodayReservationsView(StaffRequiredMixin, TemplateView):
    template_name = "frontdesk/reservations/list.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update({
            "reservations": services.todays_reservations(),
            "today_only": True,
            "current_date": timezone.localdate(),
            "status_form": ReservationStatusForm(),
        })
        return context


class ReservationCreateView(StaffRequiredMixin, FormPageMixin, FormView):
    form_class = ReservationForm
    page_title = "New reservation"
    cancel_url = reverse_lazy("frontdesk:reservation-list")

    def form_valid(self, form):
        data = form.cleaned_data
        try:
            reservation = services.create_reservation(
                table_id=data["table"].pk,
                customer_name=data["customer_name"],
                customer_phone=data["customer_phone"],
                reservation_time=data["reservation_time"],
                party_size=data["party_size"],
                status=data.get("status") or None,
            )
        except FrontDeskError as exc:
            flash_error(self.request, exc)
            return redirect("frontdesk:reservation-create")
        messages.success(
            self.request,
            f"Reservation created for {reservation.customer_name} at table {reservation.table.table_number}.",
        )
        return redirect("frontdesk:reservation-list")


class ReservationDetailView(StaffRequiredMixin, View):
    def get(self, request, pk):
        try:
            reservation = services.get_reservation(pk)
        except NotFound as exc:
            flash_error(request, exc)
            return redirect("frontdesk:reservation-list")
        return render(request, "frontdesk/reservations/detail.html", {
            "reservation": reservation,
            "status_form": ReservationStatusForm(initial={"status": reservation.status}),
        })


class ReservationStatusView(StaffRequiredMixin, View):
    def post(self, request, pk):
        form = ReservationStatusForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Please choose a valid status.")
            return redirect("frontdesk:reservation-list")
        try:
            services.update_reservation_status(pk, form.cleaned_data["status"])
        except FrontDeskError as exc:
            messages.error(request, f"Failed to update reservation status: {exc}")
        else:
            messages.success(request, "Reservation status updated successfully.")
        return redirect("frontdesk:reservation-list")


class ReservationCancelView(StaffRequiredMixin, View):
    def post(self, request, pk):
        try:
            services.cancel_reservation(pk)
        except FrontDeskError as exc:
            messages.error(request, f"Failed to cancel reservation: {exc}")
        else:
            messages.success(request, "Reservation cancelled successfully.")
        return redirect("frontdesk:reservation-list")


# ==============================================================================
# STAFF
# ==============================================================================

class StaffListView(StaffRequiredMixin, TemplateView):
    template_name = "frontdesk/staff/list.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        params = self.request.GET
        term = params.get("q", "").strip()
        role = params.get("role", "")
        department = params.get("department", "").strip()

        if term:
            members = services.search_staff(term)
        elif role in Staff.Role.values:
            members = services.staff_by_role(role)
        elif department:
            members = services.staff_by_department(department)
        else:
            members = services.list_staff()

        context.update({
            "staff_members": members,
            "search_term": term,
            "current_role": role,
            "current_department": department,
            "roles": Staff.Role.choices,
            "departments": Staff.DEPARTMENTS,
            "active_count": services.count_active_staff(),
            "role_counts": services.staff_role_counts(),
        })
        return context


class StaffCreateView(StaffRequiredMixin, FormPageMixin, FormView):
    form_class = StaffForm
    page_title = "New staff member"
    cancel_url = reverse_lazy("frontdesk:staff-list")

    def form_valid(self, form):
        data = dict(form.cleaned_data)
        try:
            staff = services.create_staff(
                first_name=data.pop("first_name"),
                last_name=data.pop("last_name"),
                email=data.pop("email"),
                role=data.pop("role"),
                **data,
            )
        except FrontDeskError as exc:
            flash_error(self.request, exc)
            return self.form_invalid(form)
        messages.success(self.request, f"Staff member {staff.full_name} created successfully.")
        return redirect("frontdesk:staff-list")


class StaffDetailView(StaffRequiredMixin, View):
    def get(self, request, pk):
        try:
            staff = services.get_staff(pk)
        except NotFound as exc:
            flash_error(request, exc)
            return redirect("frontdesk:staff-list")
        return render(request, "frontdesk/staff/detail.html", {
            "staff": staff,
            "assigned_tables": services.assigned_tables(pk),
            "tasks": services.tasks_for_staff(pk),
            "assign_form": AssignTableForm(),
        })


class StaffEditView(StaffRequiredMixin, EditObjectMixin, FormPageMixin, FormView):
    form_class = StaffForm
    page_title = "Edit staff member"
    cancel_url = reverse_lazy("frontdesk:staff-list")
    missing_url = "frontdesk:staff-list"

    def load_object(self, pk):
        return services.get_staff(pk)

    def form_valid(self, form):
        try:
            staff = services.update_staff(self.object.pk, **form.cleaned_data)
        except FrontDeskError as exc:
            flash_error(self.request, exc)
            return redirect("frontdesk:staff-edit", pk=self.object.pk)
        messages.success(self.request, f"Staff member {staff.full_name} updated successfully.")
        return redirect("frontdesk:staff-list")


class StaffToggleStatusView(StaffRequiredMixin, View):
    def post(self, request, pk):
        try:
            staff = services.get_staff(pk)
            if staff.is_active:
                services.deactivate_staff(pk)
                messages.success(request, f"Staff member {staff.full_name} deactivated.")
            else:
                services.activate_staff(pk)
                messages.success(request, f"Staff member {staff.full_name} activated.")
        except FrontDeskError as exc:
            flash_error(request, exc)
        return redirect("frontdesk:staff-list")


class StaffAssignTableView(StaffRequiredMixin, View):
    def post(self, request, pk):
        form = AssignTableForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Please choose a table.")
            return redirect("frontdesk:staff-detail", pk=pk)
        try:
            services.assign_table(pk, form.cleaned_data["table"].pk)
        except FrontDeskError as exc:
            messages.error(request, f"Failed to assign table: {exc}")
        else:
            messages.success(request, "Table assigned successfully.")
        return redirect("frontdesk:staff-detail", pk=pk)


class StaffUnassignTableView(StaffRequiredMixin, View):
    def post(self, request, pk, table_pk):
        try:
            services.unassign_table(pk, table_pk)
        except FrontDeskError as exc:
            messages.error(request, f"Failed to unassign table: {exc}")
        else:
            messages.success(request, "Table unassigned successfully.")
        return redirect("frontdesk:staff-detail", pk=pk)


# ==============================================================================
# TASKS
# ==============================================================================

class TaskListView(StaffRequiredMixin, TemplateView):
    template_name = "frontdesk/tasks/list.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        params = self.request.GET
        view_filter = params.get("filter", "")
        status = params.get("status", "")
        staff_id = params.get("staff", "")
        term = params.get("q", "").strip()
        staff_member = None

        if view_filter == "unassigned":
            tasks = services.unassigned_tasks()
        elif view_filter == "overdue":
            tasks = services.overdue_tasks()
        elif status in Task.Status.values:
            tasks = services.tasks_by_status(status)
        elif staff_id.isdigit():
            staff_member = services.get_staff(int(staff_id))
            tasks = services.tasks_for_staff(staff_member.pk)
        elif term:
            tasks = services.search_tasks(term)
        else:
            tasks = services.list_tasks()

        context.update({
            "tasks": tasks,
            "current_filter": view_filter,
            "current_status": status,
            "staff_member": staff_member,
            "search_term": term,
            "statuses": Task.Status.choices,
            "status_counts": {s: services.count_tasks_by_status(s) for s in Task.Status.values},
        })
        return context

    def get(self, request, *args, **kwargs):
        try:
            return super().get(request, *args, **kwargs)
        except NotFound as exc:
            flash_error(request, exc)
            return redirect("frontdesk:task-list")


class TaskCreateView(StaffRequiredMixin, FormPageMixin, FormView):
    form_class = TaskForm
    page_title = "New task"
    cancel_url = reverse_lazy("frontdesk:task-list")

    def form_valid(self, form):
        data = dict(form.cleaned_data)
        staff = data.pop("assigned_staff", None)
        try:
            task = services.create_task(
                created_by=self.request.user.get_username(),
                assigned_staff_id=staff.pk if staff else None,
                **data,
            )
        except FrontDeskError as exc:
            flash_error(self.request, exc)
            return self.form_invalid(form)
        messages.success(self.request, f"Task '{task.title}' created successfully.")
        return redirect("frontdesk:task-list")


class TaskDetailView(StaffRequiredMixin, View):
    def get(self, request, pk):
        try:
            task = services.get_task(pk)
        except NotFound as exc:
            flash_error(request, exc)
            return redirect("frontdesk:task-list")
        return render(request, "frontdesk/tasks/detail.html", {
            "task": task,
            "status_form": TaskStatusForm(initial={"status": task.status}),
            "assign_form": AssignTaskForm(initial={"staff": task.assigned_staff_id}),
        })


class TaskEditView(StaffRequiredMixin, EditObjectMixin, FormPageMixin, FormView):
    form_class = TaskForm
    page_title = "Edit task"
    cancel_url = reverse_lazy("frontdesk:task-list")
    missing_url = "frontdesk:task-list"

    def load_object(self, pk):
        return services.get_task(pk)

    def form_valid(self, form):
        data = dict(form.cleaned_data)
        staff = data.pop("assigned_staff", None)
        try:
            task = services.update_task(self.object.pk, **data)
            if staff and staff.pk != task.assigned_staff_id:
                task = services.assign_task(task.pk, staff.pk)
        except FrontDeskError as exc:
            flash_error(self.request, exc)
            return redirect("frontdesk:task-edit", pk=self.object.pk)
        messages.success(self.request, f"Task '{task.title}' updated successfully.")
        return redirect("frontdesk:task-list")


class TaskStatusView(StaffRequiredMixin, View):
    def post(self, request, pk):
        form = TaskStatusForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Please choose a valid status.")
            return redirect("frontdesk:task-list")
        try:
            task = services.update_task_status(pk, form.cleaned_data["status"])
        except FrontDeskError as exc:
            flash_error(request, exc)
        else:
            messages.success(request, f"Task '{task.title}' is now {task.get_status_display()}.")
        return redirect("frontdesk:task-list")


class TaskAssignView(StaffRequiredMixin, View):
    def post(self, request, pk):
        form = AssignTaskForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Please choose an active staff member.")
            return redirect("frontdesk:task-detail", pk=pk)
        try:
            task = services.assign_task(pk, form.cleaned_data["staff"].pk)
        except FrontDeskError as exc:
            flash_error(request, exc)
        else:
            messages.success(request, f"Task assigned to {task.assigned_staff.full_name}.")
        return redirect("frontdesk:task-detail", pk=pk)


class TaskDeleteView(StaffRequiredMixin, View):
    def post(self, request, pk):
        try:
            services.delete_task(pk)
        except FrontDeskError as exc:
            flash_error(request, exc)
        else:
            messages.success(request, "Task deleted successfully.")
        return redirect("frontdesk:task-list")


# ==============================================================================
# INVENTORY
# ==============================================================================

class InventoryListView(StaffRequiredMixin, TemplateView):
    template_name = "frontdesk/inventory/list.html"
    low_stock_only = False

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        items = services.low_stock_items() if self.low_stock_only else services.list_items()
        context.update({"items": items, "low_stock_only": self.low_stock_only})
        return context


class InventoryCreateView(StaffRequiredMixin, FormPageMixin, FormView):
    form_class = InventoryItemForm
    page_title = "New inventory item"
    cancel_url = reverse_lazy("frontdesk:inventory-list")

    def form_valid(self, form):
        try:
            item = services.create_item(**form.cleaned_data)
        except FrontDeskError as exc:
            flash_error(self.request, exc)
            return redirect("frontdesk:inventory-create")
        messages.success(self.request, f"Item '{item.name}' created.")
        return redirect("frontdesk:inventory-list")


class InventoryDetailView(StaffRequiredMixin, View):
    def get(self, request, pk):
        try:
            item = services.get_item(pk)
        except NotFound:
            messages.error(request, "Item not found.")
            return redirect("frontdesk:inventory-list")
        return render(request, "frontdesk/inventory/detail.html", {
            "item": item,
            "transactions": services.transactions_for_item(pk),
            "edit_form": InventoryItemEditForm(instance=item),
            "tx_form": InventoryTransactionForm(),
        })


class InventoryEditView(StaffRequiredMixin, View):
    def post(self, request, pk):
        form = InventoryItemEditForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Please correct the item details.")
            return redirect("frontdesk:inventory-detail", pk=pk)
        try:
            item = services.update_item(pk, **form.cleaned_data)
        except FrontDeskError as exc:
            flash_error(request, exc)
            return redirect("frontdesk:inventory-detail", pk=pk)
        messages.success(request, f"Item '{item.name}' updated.")
        return redirect("frontdesk:inventory-list")


class InventoryDeleteView(StaffRequiredMixin, View):
    def post(self, request, pk):
        try:
            services.delete_item(pk)
        except FrontDeskError as exc:
            flash_error(request, exc)
        else:
            messages.success(request, "Item deleted.")
        return redirect("frontdesk:inventory-list")


class InventoryTransactionView(StaffRequiredMixin, View):
    def post(self, request, pk):
        form = InventoryTransactionForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Please enter a transaction type and a quantity of at least 1.")
            return redirect("frontdesk:inventory-detail", pk=pk)
        try:
            services.record_transaction(
                pk,
                form.cleaned_data["type"],
                form.cleaned_data["quantity"],
                note=form.cleaned_data["note"],
                created_by=request.user.get_username(),
            )
        except FrontDeskError as exc:
            flash_error(request, exc)
        else:
            messages.success(request, "Transaction recorded.")
        return redirect("frontdesk:inventory-detail", pk=pk)


# ==============================================================================
# RATINGS
# ==============================================================================

class RatingListView(StaffRequiredMixin, TemplateView):
    template_name = "frontdesk/ratings/list.html"
    status = None

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        ratings = services.ratings_by_status(self.status) if self.status else services.list_ratings()
        context.update({
            "ratings": ratings,
            "current_status": self.status,
            "average_rating": services.average_rating(),
            "pending_count": services.pending_count(),
            "approved_count": services.approved_count(),
            "total_ratings": services.list_ratings().count(),
            "distribution": services.rating_distribution(),
        })
        return context


class RatingCreateView(FormPageMixin, FormView):
    """Public rating form; no account needed."""
    form_class = RatingForm
    page_title = "Rate your visit"
    cancel_url = reverse_lazy("frontdesk:home")

    def get_initial(self):
        initial = super().get_initial()
        user = self.request.user
        if user.is_authenticated:
            initial.update({"customer_name": user.get_full_name() or user.get_username(), "customer_email": user.email})
        return initial

    def form_valid(self, form):
        try:
            services.submit_rating(**form.cleaned_data)
        except FrontDeskError as exc:
            messages.error(self.request, f"Failed to submit rating: {exc}")
            return redirect("frontdesk:rating-create")
        messages.success(self.request, "Thank you for your rating! It will be reviewed soon.")
        return redirect("frontdesk:home")


class RatingModerateView(StaffRequiredMixin, View):
    status = Rating.Status.APPROVED

    def post(self, request, pk):
        action = services.approve_rating if self.status == Rating.Status.APPROVED else services.reject_rating
        try:
            action(pk)
        except FrontDeskError as exc:
            messages.error(request, f"Failed to update rating: {exc}")
        else:
            verb = "approved" if self.status == Rating.Status.APPROVED else "rejected"
            messages.success(request, f"Rating {verb} successfully!")
        return redirect("frontdesk:rating-list")
