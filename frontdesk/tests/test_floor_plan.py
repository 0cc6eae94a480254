import asyncio
from unittest import mock

from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase, TransactionTestCase

from frontdesk import services
from frontdesk.consumers import FloorPlanConsumer
from frontdesk.exceptions import ValidationError
from frontdesk.models import Reservation, Table
from frontdesk.utils import FLOOR_PLAN_GROUP, table_payload

from .helpers import book, make_table, make_user


async def receive_one(layer, channel):
    return await asyncio.wait_for(layer.receive(channel), timeout=1)


class TableBroadcastSignalTests(TestCase):
    def setUp(self):
        self.table = make_table("T01", capacity=4)

    @mock.patch("frontdesk.signals.broadcast_table_status")
    def test_status_change_is_broadcast_after_commit(self, broadcast):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            reservation = book(self.table)
            services.update_reservation_status(reservation.pk, Reservation.Status.SEATED)
        self.assertEqual(len(callbacks), 2)
        previous = [call.args[0]["previous_status"] for call in broadcast.call_args_list]
        self.assertEqual(previous, [Table.Status.AVAILABLE, Table.Status.RESERVED])

    @mock.patch("frontdesk.signals.broadcast_table_status")
    def test_each_save_broadcasts_its_own_status(self, broadcast):
        with self.captureOnCommitCallbacks(execute=True):
            services.set_table_status(self.table.pk, Table.Status.OCCUPIED)
            services.set_table_status(self.table.pk, Table.Status.RESERVED)
        sent = [(call.args[0]["previous_status"], call.args[0]["status"]) for call in broadcast.call_args_list]
        self.assertEqual(sent, [
            (Table.Status.AVAILABLE, Table.Status.OCCUPIED),
            (Table.Status.OCCUPIED, Table.Status.RESERVED),
        ])

    @mock.patch("frontdesk.signals.broadcast_table_status")
    def test_unchanged_status_is_quiet(self, broadcast):
        with self.captureOnCommitCallbacks(execute=True):
            self.table.capacity = 6
            self.table.save()
        broadcast.assert_not_called()

    @mock.patch("frontdesk.signals.broadcast_table_status")
    def test_failed_booking_is_not_broadcast(self, broadcast):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with self.assertRaises(ValidationError):
                book(self.table, party_size=9)
        self.assertEqual(callbacks, [])
        broadcast.assert_not_called()

    def test_message_reaches_floor_plan_group(self):
        layer = get_channel_layer()
        async_to_sync(layer.flush)()
        channel = async_to_sync(layer.new_channel)()
        async_to_sync(layer.group_add)(FLOOR_PLAN_GROUP, channel)

        with self.captureOnCommitCallbacks(execute=True):
            services.set_table_status(self.table.pk, Table.Status.OCCUPIED)

        message = async_to_sync(receive_one)(layer, channel)
        self.assertEqual(message["type"], "table_status")
        self.assertEqual(message["data"]["table_number"], "T01")
        self.assertEqual(message["data"]["status"], Table.Status.OCCUPIED)
        self.assertEqual(message["data"]["previous_status"], Table.Status.AVAILABLE)


class FloorPlanConsumerTests(TransactionTestCase):
    def communicator(self, user):
        communicator = WebsocketCommunicator(FloorPlanConsumer.as_asgi(), "/ws/floor_plan/")
        communicator.scope["user"] = user
        return communicator

    async def test_anonymous_is_refused(self):
        connected, code = await self.communicator(AnonymousUser()).connect()
        self.assertFalse(connected)
        self.assertEqual(code, 4001)

    async def test_customer_is_refused(self):
        user = await database_sync_to_async(make_user)("guest", "CUSTOMER")
        connected, code = await self.communicator(user).connect()
        self.assertFalse(connected)
        self.assertEqual(code, 4001)

    async def test_snapshot_then_live_updates(self):
        table = await database_sync_to_async(make_table)("T01", 4)
        user = await database_sync_to_async(make_user)("desk", "RECEPTIONIST")

        communicator = self.communicator(user)
        connected, _ = await communicator.connect()
        self.assertTrue(connected)

        snapshot = await communicator.receive_json_from()
        self.assertEqual(snapshot["type"], "snapshot")
        self.assertEqual([t["table_number"] for t in snapshot["tables"]], ["T01"])

        await get_channel_layer().group_send(FLOOR_PLAN_GROUP, {
            "type": "table_status",
            "data": table_payload(table, Table.Status.AVAILABLE),
        })
        update = await communicator.receive_json_from()
        self.assertEqual(update["type"], "table_status")
        self.assertEqual(update["previous_status"], Table.Status.AVAILABLE)

        await communicator.send_json_to({"ping": True})
        self.assertTrue(await communicator.receive_nothing())
        await communicator.disconnect()
