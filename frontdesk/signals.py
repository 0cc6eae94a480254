import logging
from django.db import transaction
from django.db.models.signals import pre_save, post_save
from django.dispatch import receiver

from .models import Table
from .utils import broadcast_table_status, table_payload
# -----------------------------------------------------------------------------
# Logger
# -----------------------------------------------------------------------------
logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Store previous Table status
# -----------------------------------------------------------------------------
@receiver(pre_save, sender=Table)
def store_previous_table_status(sender, instance, **kwargs):
    instance._previous_status = None
    if instance.pk:
        instance._previous_status = (
            Table.objects.filter(pk=instance.pk).values_list("status", flat=True).first()
        )

# -----------------------------------------------------------------------------
# Notify the floor plan via WebSocket (Channels) once the change is committed
# -----------------------------------------------------------------------------
@receiver(post_save, sender=Table)
def notify_on_table_status_change(sender, instance, created, **kwargs):
    previous_status = getattr(instance, "_previous_status", None)
    if not created and previous_status == instance.status:
        return

    logger.info(f"🪑 Table {instance.table_number} status: {previous_status} → {instance.status}")
    # Snapshot now; a later save in the same transaction must not rewrite this one
    data = table_payload(instance, previous_status)
    transaction.on_commit(lambda: broadcast_table_status(data))
