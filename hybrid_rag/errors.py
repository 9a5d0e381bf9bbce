"""
Errors - Exception hierarchy for the hybrid retrieval engine

Every error raised by the engine derives from HybridRAGError so callers can
catch the whole family at once, or pick out the specific failure they care
about (e.g. SemanticBackendError for infrastructure problems).
"""

from typing import Iterable, List


class HybridRAGError(Exception):
    """Base class for all hybrid-rag errors"""
    pass


class ConfigError(HybridRAGError):
    """Invalid or unreadable configuration"""
    pass


class CorpusLoadError(HybridRAGError):
    """Corpus file could not be read or parsed"""
    pass


class InvalidDocumentError(HybridRAGError):
    """A document record has the wrong shape or metadata types"""
    pass


class DuplicateIdError(HybridRAGError):
    """One or more documents reused an identifier already in the store"""

    def __init__(self, duplicate_ids: Iterable[str]):
        self.duplicate_ids: List[str] = list(duplicate_ids)
        super().__init__(
            f"Duplicate document id(s) rejected: {', '.join(self.duplicate_ids)}"
        )


class NotFoundError(HybridRAGError, KeyError):
    """Lookup of an unknown document identifier"""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class InvalidQueryError(HybridRAGError, ValueError):
    """Blank query or non-positive result count"""
    pass


class EmbeddingError(HybridRAGError):
    """Embedding generation failed"""
    pass


class SemanticBackendError(HybridRAGError):
    """The similarity-search collaborator failed"""
    pass


def describe_validation_error(error) -> str:
    """Flatten a pydantic ValidationError into 'field.path: message; ...'"""
    parts = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "<root>"
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)
