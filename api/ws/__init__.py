"""WebSocket live feeds for classes and progress."""

from api.ws.class_broadcast import (
    broadcast_classes,
    broadcast_progress,
    class_feed_key,
    progress_feed_key,
    publish_class_change,
    subscribe,
    unsubscribe,
    update_viewer_timezone,
)

__all__ = [
    "broadcast_classes",
    "broadcast_progress",
    "class_feed_key",
    "progress_feed_key",
    "publish_class_change",
    "subscribe",
    "unsubscribe",
    "update_viewer_timezone",
]
