"""
Hybrid RAG Notifications - Progress reporting for the startup corpus load

Usage:
    from hybrid_rag.notifications import ConsoleNotifier, ProgressEvent, LoadingStage

    notifier = ConsoleNotifier()
    notifier.start("examples/languages.yml")
    notifier.notify(ProgressEvent(LoadingStage.STORING, "Stored documents", current=5, total=5))
    notifier.notify(ProgressEvent(LoadingStage.COMPLETE, "Loaded 5 documents"))
"""

from .models import LoadingStage, ProgressEvent
from .interface import NotifierInterface
from .null import NullNotifier
from .console import ConsoleNotifier

__all__ = [
    "LoadingStage",
    "ProgressEvent",
    "NotifierInterface",
    "NullNotifier",
    "ConsoleNotifier",
]
