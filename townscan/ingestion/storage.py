"""Durable run state: checkpoints, result files, fragments and hash manifest."""

import logging
import os
from pathlib import Path
from typing import Iterable, Optional, Protocol

import orjson
from pydantic import ValidationError

from townscan.chunking.models import FragmentRecord
from townscan.ingestion.models import CrawlProgress, ScrapedDocument

logger = logging.getLogger(__name__)


class CheckpointError(RuntimeError):
    """Run state could not be persisted; resumability is lost."""


def _atomic_write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    with open(tmp_path, "wb") as f:
        f.write(data)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, path)


class CheckpointStore:
    """Persists frontier progress and the final crawl result."""

    def __init__(self, progress_file: Path, output_file: Path):
        self.progress_file = Path(progress_file)
        self.output_file = Path(output_file)

    def save(self, progress: CrawlProgress) -> None:
        """Overwrite the checkpoint atomically."""
        try:
            _atomic_write(self.progress_file, orjson.dumps(progress.model_dump(mode="json")))
        except OSError as e:
            raise CheckpointError(f"Could not write checkpoint {self.progress_file}: {e}") from e
        logger.debug(f"Saved checkpoint: {self.progress_file}")

    def load(self) -> Optional[CrawlProgress]:
        """Load the checkpoint, or None if absent or unreadable."""
        if not self.progress_file.exists():
            return None
        try:
            data = orjson.loads(self.progress_file.read_bytes())
            return CrawlProgress.model_validate(data)
        except (OSError, orjson.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable checkpoint {self.progress_file}: {e}")
            return None

    def clear(self) -> None:
        """Delete the checkpoint after a clean run."""
        try:
            self.progress_file.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not delete checkpoint {self.progress_file}: {e}")

    def write_results(self, documents: list[ScrapedDocument], pdf_urls: list[str]) -> None:
        """Write the complete document list plus discovered PDF URLs."""
        payload = {
            "documents": [doc.model_dump(mode="json") for doc in documents],
            "pdf_urls": pdf_urls,
        }
        try:
            _atomic_write(self.output_file, orjson.dumps(payload, option=orjson.OPT_INDENT_2))
        except OSError as e:
            raise CheckpointError(f"Could not write results {self.output_file}: {e}") from e
        logger.info(f"Wrote {len(documents)} documents to {self.output_file}")


def load_results(path: Path) -> tuple[list[ScrapedDocument], list[str]]:
    """Read a result file written by CheckpointStore.write_results."""
    data = orjson.loads(Path(path).read_bytes())
    documents = [ScrapedDocument.model_validate(d) for d in data.get("documents", [])]
    return documents, list(data.get("pdf_urls", []))


class FragmentSink(Protocol):
    """Downstream collaborator that embeds and stores fragments."""

    def write(self, records: Iterable[FragmentRecord]) -> int: ...


class JsonlFragmentSink:
    """JSONL fragment file; a write replaces earlier fragments of the same source URLs."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def write(self, records: Iterable[FragmentRecord]) -> int:
        records = list(records)
        if not records:
            return 0
        replaced = {record.source_url for record in records}
        kept = [record for record in self.read() if record.source_url not in replaced]
        lines = [orjson.dumps(record.model_dump(mode="json")) + b"\n" for record in kept + records]
        _atomic_write(self.path, b"".join(lines))
        logger.debug(f"Saved {len(records)} fragments to {self.path}")
        return len(records)

    def read(self) -> list[FragmentRecord]:
        if not self.path.exists():
            return []
        with open(self.path, "rb") as f:
            return [FragmentRecord.model_validate(orjson.loads(line)) for line in f if line.strip()]


class HashManifest:
    """source_url -> content_hash from the previous run, for change detection."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.hashes: dict[str, str] = {}
        if self.path.exists():
            try:
                self.hashes = orjson.loads(self.path.read_bytes())
            except (OSError, orjson.JSONDecodeError) as e:
                logger.warning(f"Ignoring unreadable manifest {self.path}: {e}")

    def is_unchanged(self, document: ScrapedDocument) -> bool:
        return self.hashes.get(document.source_url) == document.content_hash

    def record(self, document: ScrapedDocument) -> None:
        self.hashes[document.source_url] = document.content_hash

    def save(self) -> None:
        _atomic_write(self.path, orjson.dumps(self.hashes, option=orjson.OPT_SORT_KEYS))
