import json
import logging
from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

from .roles import STAFF_ROLES, Principal
from .utils import FLOOR_PLAN_GROUP, table_payload

logger = logging.getLogger("channels")


# ==============================================================================
# Base Helper
# ==============================================================================
class SafeConsumer(AsyncWebsocketConsumer):
    """Base consumer with safe JSON sending method."""

    async def safe_send(self, data: dict):
        try:
            await self.send(text_data=json.dumps(data))
        except Exception as exc:
            logger.error(f"{self.__class__.__name__} failed to send data: {exc}")


# ==============================================================================
# Floor Plan Consumer
# ==============================================================================
class FloorPlanConsumer(SafeConsumer):
    """Live table status board for signed-in front-of-house users."""

    async def connect(self):
        user = self.scope.get("user")
        if not await self._is_authorized(user):
            await self.close(code=4001)
            logger.warning("❌ Floor plan connect refused (unauthorized user)")
            return

        self.group_name = FLOOR_PLAN_GROUP
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        logger.info(f"✅ Floor plan connected: {user.username}")

        # Current state so the client can draw the board before any update
        await self.safe_send({"type": "snapshot", "tables": await self._snapshot()})

    async def disconnect(self, code):
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def receive(self, text_data=None, bytes_data=None):
        logger.debug(f"Floor plan inbound ignored: {text_data}")

    async def table_status(self, event):
        """Relay a table status broadcast to the WebSocket client."""
        await self.safe_send({"type": "table_status", **event["data"]})

    @database_sync_to_async
    def _is_authorized(self, user):
        """Only front-of-house roles may watch the floor plan."""
        return Principal.from_user(user).has_any_role(STAFF_ROLES)

    @database_sync_to_async
    def _snapshot(self):
        from .models import Table
        return [table_payload(t) for t in Table.objects.order_by("table_number")]
