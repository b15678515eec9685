"""Service wiring the record stores behind one concurrency gate."""

import logging
import threading
from functools import partial
from pathlib import Path
from typing import Dict, Iterable, Optional

from ..config import Config
from ..data_loader import load_aircraft_csv
from ..errors import Conflict, InvalidArgument, StorageUnavailable
from ..integrity import cascade_aircraft_rename
from ..logger import AuditJournal
from ..models.aircraft import AircraftPayload
from ..storage import RecordFile
from ..stores.aircraft_store import AircraftStore
from ..stores.company_store import CompanyStore

logger = logging.getLogger(__name__)


class RegistryService:
    """Owns both collections for the lifetime of the process.

    Every store operation, reads included, runs under the same re-entrant
    lock, so at most one read-modify-write cycle touches the record files at
    any time. The lock is re-entrant because an aircraft rename holds it
    while cascading into the company store.
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize registry service.

        Args:
            config: Settings; read from the environment when omitted
        """
        self.config = config or Config()
        self.gate = threading.RLock()

        self.journal = None
        if self.config.AUDIT_LOG_FILE:
            self.journal = AuditJournal(self.config.AUDIT_LOG_FILE)

        data_dir = Path(self.config.DATA_DIR)
        aircraft_file = RecordFile(
            data_dir / self.config.AIRCRAFT_FILE,
            strict_reads=self.config.STRICT_STORAGE_READS,
            indent=self.config.JSON_INDENT,
        )
        company_file = RecordFile(
            data_dir / self.config.COMPANY_FILE,
            strict_reads=self.config.STRICT_STORAGE_READS,
            indent=self.config.JSON_INDENT,
        )

        self.aircraft = AircraftStore(aircraft_file, self.gate, journal=self.journal)
        self.companies = CompanyStore(
            company_file, self.gate, catalog=self.aircraft, journal=self.journal
        )
        self.aircraft.rename_cascade = partial(cascade_aircraft_rename, self.companies)

        logger.info(f"RegistryService initialized on {data_dir}")

    def seed_aircraft(self, payloads: Iterable[AircraftPayload]) -> int:
        """
        Insert catalog entries, skipping duplicates and invalid rows.

        Returns:
            Number of aircraft inserted
        """
        inserted = 0
        for payload in payloads:
            try:
                self.aircraft.insert(payload)
                inserted += 1
            except (Conflict, InvalidArgument) as e:
                logger.warning(f"Skipping seed aircraft {payload.icao}: {e.message}")
        return inserted

    def seed_from_config(self) -> int:
        """Seed the catalog from SEED_AIRCRAFT_CSV when it is configured."""
        if not self.config.SEED_AIRCRAFT_CSV:
            return 0

        payloads = load_aircraft_csv(self.config.SEED_AIRCRAFT_CSV, sep=self.config.SEED_CSV_SEPARATOR)
        inserted = self.seed_aircraft(payloads)
        logger.info(f"Seeded {inserted} aircraft from {self.config.SEED_AIRCRAFT_CSV}")
        return inserted

    def health(self) -> Dict:
        """
        Report whether both record files can be read.

        Returns:
            Status ("ok" or "degraded") and collection sizes (None when a
            collection cannot be read)
        """
        status = "ok"
        sizes = {}

        for name, store in (("aircraft", self.aircraft), ("companies", self.companies)):
            try:
                sizes[name] = len(store.load())
            except StorageUnavailable as e:
                logger.warning(f"Health check: {name} unavailable: {e.message}")
                sizes[name] = None
                status = "degraded"

        return {"status": status, **sizes}

    def close(self) -> None:
        """Release the audit journal."""
        if self.journal is not None:
            self.journal.close()
