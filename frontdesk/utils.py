from channels.layers import get_channel_layer
from asgiref.sync import async_to_sync
from django.utils import timezone
import logging

logger = logging.getLogger(__name__)

FLOOR_PLAN_GROUP = "floor_plan"


def table_payload(table, previous_status=None):
    return {
        "id": table.id,
        "table_number": table.table_number,
        "capacity": table.capacity,
        "status": table.status,
        "previous_status": previous_status,
        "time": timezone.localtime(table.updated_at or timezone.now()).strftime("%H:%M"),
    }


def broadcast_table_status(data):
    """
    Push a table status change to every client in the 'floor_plan' WebSocket group.

    Args:
        data (dict): Payload built by table_payload() when the change was saved.
    """
    layer = get_channel_layer()
    if not layer:
        logger.warning("No channel layer configured; floor plan broadcast skipped.")
        return

    # Runs after commit: a dead channel layer must not turn a saved change into an error page
    try:
        async_to_sync(layer.group_send)(
            FLOOR_PLAN_GROUP,
            {"type": "table_status", "data": data},
        )
    except Exception as exc:
        logger.error(f"Floor plan broadcast failed: {exc}", exc_info=True)
        return
    logger.info(
        f"Broadcasted table {data['table_number']} status {data['previous_status']} → {data['status']}"
    )
