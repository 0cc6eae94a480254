"""
frontdesk/routing.py
=====================================================================================
WebSocket route map for Django Channels. Each endpoint connects to an
AsyncWebsocketConsumer subclass in frontdesk/consumers.py.
=====================================================================================
"""

from django.urls import re_path
from . import consumers

# =============================================================================
# Real-time WebSocket route map for Django Channels
# =============================================================================
websocket_urlpatterns = [
    # -------------------------------------------------------------------------
    # Floor plan
    # Table status changes (AVAILABLE / RESERVED / OCCUPIED) as they commit
    # -------------------------------------------------------------------------
    re_path(r"^ws/floor_plan/$", consumers.FloorPlanConsumer.as_asgi()),
]
