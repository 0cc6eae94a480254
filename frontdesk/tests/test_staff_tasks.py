from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from frontdesk import services
from frontdesk.exceptions import NotFound, ValidationError
from frontdesk.models import Staff, Task

from .helpers import make_table


def make_staff(email="jane@hotel.com", role=Staff.Role.WAITER, **extra):
    return services.create_staff(first_name="Jane", last_name="Doe", email=email, role=role, **extra)


class StaffServiceTests(TestCase):
    def test_email_is_lowercased_and_unique(self):
        staff = make_staff("Jane@Hotel.com")
        self.assertEqual(staff.email, "jane@hotel.com")
        with self.assertRaises(ValidationError):
            make_staff("JANE@hotel.com")

    def test_unknown_field_rejected(self):
        with self.assertRaises(ValidationError):
            make_staff(nickname="JD")

    def test_update_keeps_own_email(self):
        staff = make_staff()
        updated = services.update_staff(staff.pk, email="JANE@hotel.com", department="Kitchen")
        self.assertEqual(updated.email, "jane@hotel.com")
        self.assertEqual(updated.department, "Kitchen")

    def test_filters(self):
        make_staff("a@hotel.com", role=Staff.Role.CHEF, department="Kitchen")
        waiter = make_staff("b@hotel.com")
        services.deactivate_staff(waiter.pk)

        self.assertEqual(services.staff_by_department("kitchen").count(), 1)
        self.assertEqual(services.count_staff_by_role(Staff.Role.CHEF), 1)
        self.assertEqual(services.count_active_staff(), 1)
        self.assertEqual(services.search_staff("doe").count(), 2)
        self.assertEqual(services.staff_role_counts(), {Staff.Role.CHEF: 1, Staff.Role.WAITER: 1})
        self.assertEqual(services.get_staff_by_email("B@HOTEL.COM"), waiter)

    def test_table_assignment(self):
        staff = make_staff()
        table = make_table("T07")
        services.assign_table(staff.pk, table.pk)
        self.assertEqual(list(services.assigned_tables(staff.pk)), [table])
        services.unassign_table(staff.pk, table.pk)
        self.assertFalse(services.assigned_tables(staff.pk).exists())

    def test_assign_unknown_table(self):
        staff = make_staff()
        with self.assertRaises(NotFound):
            services.assign_table(staff.pk, 999)


class TaskServiceTests(TestCase):
    def setUp(self):
        self.staff = make_staff()

    def test_inactive_staff_cannot_take_tasks(self):
        task = services.create_task(title="Polish glasses")
        services.deactivate_staff(self.staff.pk)
        with self.assertRaises(ValidationError):
            services.assign_task(task.pk, self.staff.pk)
        with self.assertRaises(ValidationError):
            services.create_task(title="Fold napkins", assigned_staff_id=self.staff.pk)

    def test_completed_at_is_stamped_once(self):
        task = services.create_task(title="Restock bar", assigned_staff_id=self.staff.pk)
        self.assertIsNone(task.completed_at)

        task = services.update_task_status(task.pk, Task.Status.COMPLETED)
        stamped = task.completed_at
        self.assertIsNotNone(stamped)

        services.update_task_status(task.pk, Task.Status.IN_PROGRESS)
        task = services.update_task_status(task.pk, Task.Status.COMPLETED)
        self.assertEqual(task.completed_at, stamped)

    def test_overdue_and_unassigned(self):
        yesterday = timezone.localdate() - timedelta(days=1)
        late = services.create_task(title="Fix door", due_date=yesterday)
        services.create_task(title="Done late", due_date=yesterday, status=Task.Status.COMPLETED)
        services.create_task(title="Later", due_date=timezone.localdate() + timedelta(days=2),
                             assigned_staff_id=self.staff.pk)

        self.assertEqual(list(services.overdue_tasks()), [late])
        self.assertTrue(late.is_overdue)
        self.assertEqual(services.unassigned_tasks().count(), 2)
        self.assertEqual(services.count_tasks_for_staff(self.staff.pk), 1)

    def test_priority_ordering(self):
        services.create_task(title="No priority")
        services.create_task(title="Low", priority=1)
        services.create_task(title="Critical", priority=5)
        titles = [t.title for t in services.list_tasks()]
        self.assertEqual(titles, ["Critical", "Low", "No priority"])

    def test_update_and_delete(self):
        task = services.create_task(title="Mop floor")
        task = services.update_task(task.pk, title="Mop lobby", status=Task.Status.COMPLETED)
        self.assertEqual(task.title, "Mop lobby")
        self.assertIsNotNone(task.completed_at)
        with self.assertRaises(ValidationError):
            services.update_task(task.pk, assigned_staff=None)
        services.delete_task(task.pk)
        with self.assertRaises(NotFound):
            services.get_task(task.pk)
