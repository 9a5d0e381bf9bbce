"""
Document Store - Ordered, write-once collection of documents

Holds the corpus that both the lexical scorer and the vector index read
from. The store is populated once at startup (bulk load) and treated as
read-only afterwards. Concurrent searches may share one store; writing to
it while a search is running is not supported and is not guarded by a lock.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from hybrid_rag.errors import DuplicateIdError, InvalidDocumentError, NotFoundError, describe_validation_error

logger = logging.getLogger(__name__)

MetadataValue = Union[StrictStr, StrictBool, StrictInt, StrictFloat, None]


class DocumentRecord(BaseModel):
    """Shape of one bulk-load record: {id, content, metadata}"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: StrictStr = Field(min_length=1)
    content: StrictStr
    metadata: Dict[StrictStr, MetadataValue] = Field(default_factory=dict)

    @field_validator("id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return {} if value is None else value


def _validate_record(data: Any) -> DocumentRecord:
    try:
        return DocumentRecord.model_validate(data)
    except ValidationError as e:
        label = data.get("id") if isinstance(data, Mapping) else data
        raise InvalidDocumentError(f"Invalid document record {label!r}: {describe_validation_error(e)}") from e


@dataclass(frozen=True)
class Document:
    """
    A single immutable text document

    Attributes:
        id: Identifier, unique within a store
        content: Text content
        metadata: Read-only mapping of string keys to primitive values
    """
    id: str
    content: str
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        record = _validate_record({"id": self.id, "content": self.content, "metadata": self.metadata})
        # Freeze a private copy so the caller's dict cannot change it later
        object.__setattr__(self, "metadata", MappingProxyType(dict(record.metadata)))

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def title(self) -> str:
        """Display title (metadata 'title', falling back to the id)"""
        title = self.metadata.get("title")
        return str(title) if title is not None else self.id

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Document":
        """
        Build a document from a bulk-load record

        Raises:
            InvalidDocumentError: Missing or unknown fields, or bad types
        """
        parsed = _validate_record(record)
        return cls(id=parsed.id, content=parsed.content, metadata=parsed.metadata)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "content": self.content, "metadata": dict(self.metadata)}


class DocumentStore:
    """In-memory ordered document collection keyed by id"""

    def __init__(self, documents: Optional[Iterable[Document]] = None):
        self._documents: List[Document] = []
        self._positions: Dict[str, int] = {}
        if documents is not None:
            self.add_all(documents)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "DocumentStore":
        """Create a store from {id, content, metadata} records"""
        return cls(Document.from_record(record) for record in records)

    def add_all(self, documents: Iterable[Document]) -> int:
        """
        Insert documents in order

        Documents whose id is already taken (in the store or earlier in the
        same batch) are rejected; every other document is still inserted.

        Args:
            documents: Documents to insert

        Returns:
            Number of documents inserted

        Raises:
            DuplicateIdError: After inserting the rest, if any id collided
        """
        rejected = []
        inserted = 0

        for document in documents:
            if not isinstance(document, Document):
                raise InvalidDocumentError(f"Expected Document, got {type(document).__name__}")
            if document.id in self._positions:
                logger.warning(f"Rejected duplicate document id: {document.id}")
                rejected.append(document.id)
                continue

            self._positions[document.id] = len(self._documents)
            self._documents.append(document)
            inserted += 1

        logger.debug(f"Inserted {inserted} documents ({len(self._documents)} total)")

        if rejected:
            raise DuplicateIdError(rejected)
        return inserted

    def all(self) -> List[Document]:
        """All documents in insertion order"""
        return list(self._documents)

    def get(self, document_id: str) -> Document:
        """
        Look up a document by id

        Raises:
            NotFoundError: Unknown id
        """
        try:
            return self._documents[self._positions[document_id]]
        except (KeyError, TypeError):
            raise NotFoundError(f"Document not found: {document_id}") from None

    def position(self, document_id: str) -> int:
        """Insertion index of a document (0-based)"""
        try:
            return self._positions[document_id]
        except (KeyError, TypeError):
            raise NotFoundError(f"Document not found: {document_id}") from None

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._positions

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def get_stats(self) -> Dict:
        """Get store statistics"""
        return {
            'total_documents': len(self._documents),
            'total_characters': sum(len(d.content) for d in self._documents),
        }
