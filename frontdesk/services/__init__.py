"""
Service layer of the front desk.

Views, API viewsets, admin actions and management commands call these
functions instead of touching models directly. Failures are reported with
the exceptions in ``frontdesk.exceptions``.
"""
from .tables import (  # noqa: F401
    available_tables,
    available_tables_for_party,
    count_tables_by_status,
    create_table,
    get_table,
    get_table_by_number,
    list_tables,
    set_table_status,
    table_status_counts,
    tables_by_status,
)
from .reservations import (  # noqa: F401
    TABLE_STATUS_FOR,
    active_reservations,
    cancel_reservation,
    completed_reservations,
    count_reservations_by_status,
    create_reservation,
    get_reservation,
    list_reservations,
    reservations_by_status,
    reservations_for_date,
    reservations_for_table,
    todays_reservations,
    update_reservation_status,
)
from .staff import (  # noqa: F401
    activate_staff,
    active_staff,
    assign_table,
    assigned_tables,
    count_active_staff,
    count_staff_by_role,
    create_staff,
    deactivate_staff,
    get_staff,
    get_staff_by_email,
    list_staff,
    search_staff,
    staff_by_department,
    staff_by_role,
    staff_role_counts,
    unassign_table,
    update_staff,
)
from .tasks import (  # noqa: F401
    assign_task,
    count_tasks_by_status,
    count_tasks_for_staff,
    create_task,
    delete_task,
    get_task,
    list_tasks,
    overdue_tasks,
    search_tasks,
    tasks_by_status,
    tasks_for_staff,
    unassigned_tasks,
    update_task,
    update_task_status,
)
from .inventory import (  # noqa: F401
    create_item,
    delete_item,
    get_item,
    list_items,
    low_stock_items,
    record_transaction,
    transactions_for_item,
    update_item,
)
from .ratings import (  # noqa: F401
    approve_rating,
    approved_count,
    approved_ratings,
    average_rating,
    get_rating,
    list_ratings,
    pending_count,
    pending_ratings,
    rating_distribution,
    ratings_by_status,
    ratings_for_email,
    reject_rating,
    submit_rating,
)
