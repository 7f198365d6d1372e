from typing import Callable

from services.document_download.models import DownloadNotification
from shared.helper.HelperConfig import HelperConfig

Subscriber = Callable[[DownloadNotification], None]


class DownloadNotifier:
    """Publishes download notifications to whoever subscribed to them.

    Publishers do not know their audience: a CLI logs, a UI would refresh its
    views, a test records.
    """

    def __init__(self, helper_config: HelperConfig) -> None:
        self.logging = helper_config.get_logger()
        self._subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a subscriber.

        Returns:
            Callable[[], None]: A function that removes the subscription again.
        """
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def publish(self, notification: DownloadNotification) -> None:
        """Deliver a notification to every subscriber.

        A failing subscriber is logged and does not keep the others from being notified.
        """
        for subscriber in list(self._subscribers):
            try:
                subscriber(notification)
            except Exception as exc:
                self.logging.error("Download notification subscriber %r failed: %s", subscriber, exc)
