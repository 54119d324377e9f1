"""
Notification fan-out.

Every open ``ws/notifications/`` socket joins one channel-layer group and
receives every notification event, whichever patient it targets; clients
filter by ``patientId`` themselves.  Events are not stored: a socket that
connects later only sees later events.
"""
from __future__ import annotations

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)


class NotificationChannel:
    """Owns the subscriber group and the set of live connection handles."""

    event_type = "notification.message"

    def __init__(self, group: str = "notifications"):
        self.group = group
        self._connections: set[str] = set()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def subscribe(self, channel_layer, channel_name: str) -> None:
        await channel_layer.group_add(self.group, channel_name)
        self._connections.add(channel_name)
        logger.info("notification subscriber connected (%d live)", self.connection_count)

    async def unsubscribe(self, channel_layer, channel_name: str) -> None:
        self._connections.discard(channel_name)
        await channel_layer.group_discard(self.group, channel_name)
        logger.info("notification subscriber disconnected (%d live)", self.connection_count)

    def event(self, patient_id: str, message: str) -> dict:
        return {"type": self.event_type, "patientId": patient_id, "message": message}

    async def apublish(self, patient_id: str, message: str) -> None:
        channel_layer = get_channel_layer()
        if channel_layer is None:
            logger.warning("no channel layer configured; notification for %s not broadcast", patient_id)
            return
        await channel_layer.group_send(self.group, self.event(patient_id, message))

    def publish(self, patient_id: str, message: str) -> bool:
        """Broadcast from synchronous code without waiting for delivery.

        Returns ``False`` if the channel layer rejected the event.  The
        caller's state change has already been stored, so the failure is
        logged rather than raised.
        """
        try:
            async_to_sync(self.apublish)(patient_id, message)
        except Exception:
            logger.exception("broadcast of notification for %s failed", patient_id)
            return False
        logger.info("notification for %s broadcast", patient_id)
        return True


notifications = NotificationChannel()
