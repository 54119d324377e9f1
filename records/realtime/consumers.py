import json

from channels.generic.websocket import AsyncWebsocketConsumer

from .broadcast import notifications


class NotificationConsumer(AsyncWebsocketConsumer):
    """Anonymous, receive-only socket for notification events."""

    notification_channel = notifications

    async def connect(self):
        await self.notification_channel.subscribe(self.channel_layer, self.channel_name)
        await self.accept()

    async def disconnect(self, close_code):
        await self.notification_channel.unsubscribe(self.channel_layer, self.channel_name)

    async def receive(self, text_data=None, bytes_data=None):
        # The channel is push-only; client frames are ignored.
        return

    # group_send handler for {"type": "notification.message", "patientId": ..., "message": ...}
    async def notification_message(self, event):
        await self.send(json.dumps({
            "type": "notification",
            "patientId": event.get("patientId"),
            "message": event.get("message"),
        }))
