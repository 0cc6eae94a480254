"""Task board: creation, assignment and progress of staff tasks."""
from django.db import transaction

from ..exceptions import ValidationError
from ..models import Staff, Task
from .base import audit, get_or_404, require_text, service, validate_model

EDITABLE_FIELDS = ("title", "description", "priority", "due_date", "category", "status")


def _check_status(status):
    if status not in Task.Status.values:
        raise ValidationError(f"Unknown task status '{status}'.")
    return Task.Status(status)


@service
@transaction.atomic
def create_task(*, title, description="", priority=None, due_date=None, category="",
                created_by="", assigned_staff_id=None, status=Task.Status.PENDING):
    task = Task(
        title=require_text(title, "Title"),
        description=description or "",
        priority=priority,
        due_date=due_date,
        category=category or "",
        created_by=created_by or "",
    )
    task.set_status(_check_status(status or Task.Status.PENDING))
    if assigned_staff_id is not None:
        task.assigned_staff = _active_staff(assigned_staff_id)
    validate_model(task)
    task.save()
    audit.info("Task #%s '%s' created by %s", task.pk, task.title, task.created_by or "unknown")
    return task


def _active_staff(staff_id):
    staff = get_or_404(Staff.objects.all(), staff_id)
    if not staff.is_active:
        raise ValidationError(f"Cannot assign task to inactive staff member {staff.full_name}.")
    return staff


def list_tasks():
    return Task.objects.select_related("assigned_staff").by_priority()


def get_task(task_id):
    return get_or_404(Task.objects.select_related("assigned_staff"), task_id)


def tasks_by_status(status):
    return list_tasks().with_status(_check_status(status))


def tasks_for_staff(staff_id):
    staff = get_or_404(Staff.objects.all(), staff_id)
    return list_tasks().for_staff(staff)


def unassigned_tasks():
    return list_tasks().unassigned()


def overdue_tasks():
    return list_tasks().overdue()


def count_tasks_by_status(status):
    return Task.objects.with_status(_check_status(status)).count()


def count_tasks_for_staff(staff_id):
    staff = get_or_404(Staff.objects.all(), staff_id)
    return Task.objects.for_staff(staff).count()


def search_tasks(term):
    term = (term or "").strip()
    if not term:
        return list_tasks()
    return list_tasks().filter(title__icontains=term)


@service
@transaction.atomic
def assign_task(task_id, staff_id):
    task = get_or_404(Task.objects.select_for_update(), task_id)
    staff = _active_staff(staff_id)
    task.assigned_staff = staff
    task.save(update_fields=["assigned_staff", "updated_at"])
    audit.info("Task #%s assigned to %s", task.pk, staff.full_name)
    return task


@service
@transaction.atomic
def update_task_status(task_id, status):
    task = get_or_404(Task.objects.select_for_update(), task_id)
    previous = task.status
    task.set_status(_check_status(status))
    task.save(update_fields=["status", "completed_at", "updated_at"])
    audit.info("Task #%s status %s -> %s", task.pk, previous, task.status)
    return task


@service
@transaction.atomic
def update_task(task_id, **changes):
    task = get_or_404(Task.objects.select_for_update(), task_id)

    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown task fields: {', '.join(sorted(unknown))}.")

    if "title" in changes:
        changes["title"] = require_text(changes["title"], "Title")
    status = changes.pop("status", None)
    for name, value in changes.items():
        setattr(task, name, value)
    if status:
        task.set_status(_check_status(status))

    validate_model(task)
    task.save()
    audit.info("Task #%s updated", task.pk)
    return task


@service
@transaction.atomic
def delete_task(task_id):
    task = get_or_404(Task.objects.all(), task_id)
    title = task.title
    task.delete()
    audit.info("Task #%s '%s' deleted", task_id, title)
