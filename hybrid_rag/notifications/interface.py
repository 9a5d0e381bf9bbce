"""
Notifier Interface - What the loader and embedder report progress to
"""

from typing import Protocol, runtime_checkable

from .models import ProgressEvent


@runtime_checkable
class NotifierInterface(Protocol):
    """Receiver for corpus loading progress"""

    def start(self, source: str) -> None:
        """A load of the given corpus file begins."""
        ...

    def notify(self, event: ProgressEvent) -> None:
        """Progress within the current load; COMPLETE or ERROR ends it."""
        ...
