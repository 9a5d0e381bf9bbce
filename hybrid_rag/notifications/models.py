"""
Notification Models - Progress events for the startup corpus load

Reading and storing happen in the DocumentLoader, embedding in
VectorSearch. The loader closes its run with a COMPLETE or ERROR event.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class LoadingStage(Enum):
    """Stages of the bulk load; the value is the console symbol"""
    READING = "📄"
    STORING = "🗂️"
    EMBEDDING = "🔢"
    COMPLETE = "✅"
    ERROR = "❌"


@dataclass
class ProgressEvent:
    """
    One progress report

    Attributes:
        stage: Loading stage the event belongs to
        message: Human-readable progress message
        current: Items done so far (0 when the stage is not counted)
        total: Items in the stage (0 when the stage is not counted)
        source: Corpus file being loaded
        error: Failure description for ERROR events
    """
    stage: LoadingStage
    message: str
    current: int = 0
    total: int = 0
    source: Optional[str] = None
    error: Optional[str] = None

    @property
    def percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return 100.0 * self.current / self.total

    @property
    def is_final(self) -> bool:
        """True for the COMPLETE or ERROR event that ends a load"""
        return self.stage in (LoadingStage.COMPLETE, LoadingStage.ERROR)
