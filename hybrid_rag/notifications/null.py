"""Null Notifier - Discards every event (non-verbose runs)"""

from .models import ProgressEvent


class NullNotifier:

    def start(self, source: str) -> None:
        pass

    def notify(self, event: ProgressEvent) -> None:
        pass
