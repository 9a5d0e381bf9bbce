"""
Document Loader - Bulk-load a corpus file into a DocumentStore

Supports:
- YAML: .yml, .yaml
- JSON: .json

The file holds either a list of records or a mapping with a 'documents'
list. Each record is {id, content, metadata}; metadata is optional.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from hybrid_rag.errors import CorpusLoadError
from hybrid_rag.indexing.document_store import Document, DocumentStore
from hybrid_rag.notifications import (
    LoadingStage,
    NotifierInterface,
    NullNotifier,
    ProgressEvent,
)

logger = logging.getLogger(__name__)


class DocumentLoader:
    """Load corpus files from the filesystem"""

    SUPPORTED_EXTENSIONS = {'.yml', '.yaml', '.json'}

    def __init__(self, notifier: Optional[NotifierInterface] = None):
        self.notifier = notifier or NullNotifier()
        self.loaded_count = 0

    def read_records(self, file_path: Union[str, Path]) -> List[Dict[str, Any]]:
        """
        Parse a corpus file into raw records

        Args:
            file_path: Path to a .yml/.yaml/.json corpus file

        Returns:
            List of record mappings

        Raises:
            CorpusLoadError: Missing file, unsupported type, or bad structure
        """
        path = Path(file_path)

        if not path.exists():
            raise CorpusLoadError(f"Corpus file not found: {path}")

        suffix = path.suffix.lower()
        if suffix not in self.SUPPORTED_EXTENSIONS:
            raise CorpusLoadError(
                f"Unsupported corpus file type: {path.suffix} "
                f"(supported: {', '.join(sorted(self.SUPPORTED_EXTENSIONS))})"
            )

        try:
            with open(path, encoding="utf-8") as f:
                if suffix == '.json':
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise CorpusLoadError(f"Could not parse {path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise CorpusLoadError(f"Could not read {path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("documents")
        if not isinstance(data, list):
            raise CorpusLoadError(f"{path} must contain a list of documents or a 'documents' list")

        return data

    def load(self, file_path: Union[str, Path], store: Optional[DocumentStore] = None) -> DocumentStore:
        """
        Load a corpus file into a document store

        Args:
            file_path: Corpus file path
            store: Existing store to add to (default: a new store)

        Returns:
            The populated DocumentStore

        Raises:
            CorpusLoadError: File problems
            InvalidDocumentError: A record is malformed
            DuplicateIdError: A record reused an id
        """
        store = store if store is not None else DocumentStore()
        source = str(file_path)

        self.notifier.start(source)
        try:
            self.notifier.notify(ProgressEvent(
                stage=LoadingStage.READING,
                message=f"Reading {Path(source).name}",
                source=source,
            ))
            records = self.read_records(file_path)
            documents = [Document.from_record(record) for record in records]

            inserted = store.add_all(documents)
            self.notifier.notify(ProgressEvent(
                stage=LoadingStage.STORING,
                message="Stored documents",
                current=inserted,
                total=len(documents),
                source=source,
            ))
        except Exception as e:
            logger.error(f"Failed to load corpus {source}: {e}")
            self.notifier.notify(ProgressEvent(
                stage=LoadingStage.ERROR,
                message="Corpus load failed",
                source=source,
                error=str(e),
            ))
            raise

        self.loaded_count += inserted
        logger.info(f"Loaded {inserted} documents from {source}")
        self.notifier.notify(ProgressEvent(
            stage=LoadingStage.COMPLETE,
            message=f"Loaded {inserted} documents",
            source=source,
        ))
        return store


def load_corpus(file_path: Union[str, Path], notifier: Optional[NotifierInterface] = None) -> DocumentStore:
    """Convenience wrapper: load a corpus file into a new store"""
    return DocumentLoader(notifier=notifier).load(file_path)
