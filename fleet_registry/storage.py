"""Record file storage: one JSON array per collection, rewritten whole."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .errors import StorageUnavailable, StorageWriteError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class RecordFile:
    """A collection persisted as a pretty-printed JSON array.

    Loads always return the full collection and persists always replace it.
    The replacement goes through a temporary file in the same directory and
    ``os.replace``, so the next load sees either the old or the new content.
    There is no crash durability beyond that (no fsync of the directory).
    """

    def __init__(self, path: Union[str, Path], strict_reads: bool = True, indent: int = 2):
        """
        Initialize record file.

        Args:
            path: Location of the JSON file
            strict_reads: Raise on unreadable/malformed content instead of
                reading it as an empty collection
            indent: JSON indentation used when writing
        """
        self.path = Path(path)
        self.strict_reads = strict_reads
        self.indent = indent

    def load(self, model: Type[ModelT]) -> List[ModelT]:
        """
        Read every record of the collection.

        A missing file is an empty collection (no data yet).

        Args:
            model: Pydantic model each record is validated into

        Returns:
            Records in file order

        Raises:
            StorageUnavailable: If the file cannot be read or parsed and
                strict reads are enabled
        """
        if not self.path.exists():
            logger.debug(f"Record file {self.path} not found, using empty collection")
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                text = f.read()
            if not text.strip():
                return []
            raw = json.loads(text)
            if not isinstance(raw, list):
                raise ValueError("top-level JSON value is not an array")
            return [model.model_validate(record) for record in raw]
        except (OSError, ValueError, ValidationError) as e:
            if self.strict_reads:
                logger.error(f"Error reading {self.path}: {e}")
                raise StorageUnavailable(
                    f"Record file {self.path.name} is unreadable",
                    details={"path": str(self.path), "error": str(e)},
                ) from e
            logger.error(f"Error reading {self.path}, using empty collection: {e}")
            return []

    def persist(self, records: Sequence[BaseModel]) -> None:
        """
        Replace the whole collection on disk.

        Args:
            records: Full collection to write

        Raises:
            StorageWriteError: If the file cannot be written
        """
        payload = [record.model_dump(by_alias=True) for record in records]
        tmp_path = None

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = f.name
                json.dump(payload, f, indent=self.indent, ensure_ascii=False)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}")
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageWriteError(
                f"Failed to write {self.path.name}",
                details={"path": str(self.path), "error": str(e)},
            ) from e

        logger.debug(f"Wrote {len(payload)} records to {self.path}")
