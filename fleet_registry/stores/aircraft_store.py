"""Aircraft catalog store."""

import logging
from dataclasses import dataclass
from typing import Callable, ContextManager, Iterable, List, Optional

from ..errors import Conflict, DependencyFailure, InvalidArgument, NotFound
from ..logger import AuditJournal
from ..models.aircraft import Aircraft, AircraftPayload
from ..query import apply_sort, apply_thresholds, parse_sort_keys, parse_thresholds
from ..storage import RecordFile
from ..utils import is_blank, same_icao
from ..validator import merge_aircraft, validate_new_aircraft

logger = logging.getLogger(__name__)

# Sort fields -> key functions; strings compare case-insensitively
AIRCRAFT_SORT_KEYS = {
    "constructor": lambda a: a.constructor.lower(),
    "range": lambda a: a.range,
    "icao": lambda a: a.icao.lower(),
}

RenameCascade = Callable[[str, str], Optional[DependencyFailure]]


@dataclass
class AircraftUpdate:
    """Outcome of a partial aircraft update."""

    aircraft: Aircraft
    renamed_from: Optional[str] = None
    cascade_failure: Optional[DependencyFailure] = None

    @property
    def has_warning(self) -> bool:
        """True when the aircraft was saved but company fleets were not renamed."""
        return self.cascade_failure is not None


class AircraftStore:
    """Owns the aircraft collection: query, insert, update, delete."""

    def __init__(
        self,
        record_file: RecordFile,
        gate: ContextManager,
        journal: Optional[AuditJournal] = None,
        rename_cascade: Optional[RenameCascade] = None,
    ):
        """
        Initialize aircraft store.

        Args:
            record_file: Backing JSON file
            gate: Lock held around every operation
            journal: Optional audit journal
            rename_cascade: Called with (old, new) when an ICAO changes
        """
        self.record_file = record_file
        self.gate = gate
        self.journal = journal
        self.rename_cascade = rename_cascade

    def load(self) -> List[Aircraft]:
        """Get the whole catalog in storage order."""
        with self.gate:
            return self.record_file.load(Aircraft)

    def get(self, icao: str) -> Aircraft:
        """
        Get one aircraft by ICAO (case-insensitive).

        Raises:
            NotFound: If no aircraft has this ICAO
        """
        if is_blank(icao):
            raise InvalidArgument("Invalid icao need parameter <icao>")

        with self.gate:
            catalog = self.record_file.load(Aircraft)
        index = _index_of(catalog, icao)
        if index is None:
            raise NotFound("No airplane with this ICAO exists", details={"ICAO": icao})
        return catalog[index]

    def query(
        self,
        constructor: Optional[str] = None,
        capacity: Optional[Iterable[str]] = None,
        range_: Optional[Iterable[str]] = None,
        sort: Optional[Iterable[str]] = None,
    ) -> List[Aircraft]:
        """
        Filter and sort the catalog.

        Args:
            constructor: Keep aircraft of this constructor (case-insensitive)
            capacity: Threshold filters on maxCapacity ("150" = at least 150,
                "-150" = at most 150), all applied
            range_: Threshold filters on range, same convention
            sort: Sort keys among constructor/range/icao, "-" for descending

        Returns:
            Matching aircraft in the requested order

        Raises:
            InvalidArgument: If a threshold or sort key is malformed
        """
        capacity_limits = parse_thresholds(capacity, "capacity")
        range_limits = parse_thresholds(range_, "range")
        sort_keys = parse_sort_keys(sort, AIRCRAFT_SORT_KEYS)

        with self.gate:
            catalog = self.record_file.load(Aircraft)

        if constructor is not None:
            catalog = [a for a in catalog if a.constructor.lower() == constructor.lower()]
        catalog = apply_thresholds(catalog, capacity_limits, lambda a: a.max_capacity)
        catalog = apply_thresholds(catalog, range_limits, lambda a: a.range)

        return apply_sort(catalog, sort_keys)

    def insert(self, candidate: AircraftPayload) -> Aircraft:
        """
        Add an aircraft to the catalog.

        Raises:
            InvalidArgument: If a field is missing or not positive
            Conflict: If the ICAO is already used (case-insensitive)
        """
        aircraft = validate_new_aircraft(candidate)

        with self.gate:
            catalog = self.record_file.load(Aircraft)

            if any(same_icao(a.icao, aircraft.icao) for a in catalog):
                raise Conflict(
                    "An airplane with this ICAO already exists",
                    details={"ICAO": aircraft.icao},
                )

            catalog.append(aircraft)
            self.record_file.persist(catalog)
            self._journal("insert", aircraft.icao, record=aircraft.model_dump(by_alias=True))

        logger.info(f"Inserted aircraft {aircraft.icao} ({aircraft.constructor})")
        return aircraft

    def delete_by_constructor(self, constructor: str) -> List[Aircraft]:
        """
        Remove every aircraft built by a constructor (case-insensitive).

        Returns:
            Removed aircraft, possibly none

        Raises:
            InvalidArgument: If the constructor is blank
        """
        if is_blank(constructor):
            raise InvalidArgument("Invalid constructor need parameter <constructor>")

        with self.gate:
            catalog = self.record_file.load(Aircraft)
            removed = [a for a in catalog if a.constructor.lower() == constructor.lower()]
            kept = [a for a in catalog if a.constructor.lower() != constructor.lower()]

            self.record_file.persist(kept)
            if removed:
                self._journal(
                    "delete", constructor, removed=[a.icao for a in removed]
                )

        logger.info(f"Deleted {len(removed)} aircraft of constructor {constructor}")
        return removed

    def update(self, icao: str, partial: AircraftPayload) -> AircraftUpdate:
        """
        Apply a partial update to one aircraft.

        Omitted fields keep their value. When the ICAO changes, company fleets
        referencing the old ICAO are renamed first; if that cascade cannot be
        saved the aircraft is still updated and the failure is returned in
        the result.

        Args:
            icao: Current ICAO of the aircraft (case-insensitive)
            partial: Fields to change

        Returns:
            Updated aircraft with the cascade outcome

        Raises:
            InvalidArgument: If icao is blank or a field is invalid
            NotFound: If no aircraft has this ICAO
            Conflict: If the new ICAO belongs to another aircraft
        """
        if is_blank(icao):
            raise InvalidArgument("Invalid icao need parameter <icao>")

        with self.gate:
            catalog = self.record_file.load(Aircraft)
            index = _index_of(catalog, icao)
            if index is None:
                raise NotFound("No airplane with this ICAO exists", details={"ICAO": icao})

            current = catalog[index]

            if partial.icao is not None and any(
                i != index and same_icao(a.icao, partial.icao) for i, a in enumerate(catalog)
            ):
                raise Conflict(
                    "An airplane with this ICAO already exists",
                    details={"ICAO": partial.icao},
                )

            updated = merge_aircraft(current, partial)
            renamed = updated.icao != current.icao

            cascade_failure = None
            if renamed and self.rename_cascade is not None:
                cascade_failure = self.rename_cascade(current.icao, updated.icao)
                if cascade_failure is not None:
                    logger.warning(
                        f"Aircraft {current.icao} renamed to {updated.icao} "
                        f"but company fleets were not updated"
                    )

            catalog[index] = updated
            self.record_file.persist(catalog)
            self._journal(
                "update",
                current.icao,
                record=updated.model_dump(by_alias=True),
                cascade_failed=cascade_failure is not None,
            )

        logger.info(f"Updated aircraft {current.icao}" + (f" -> {updated.icao}" if renamed else ""))
        return AircraftUpdate(
            aircraft=updated,
            renamed_from=current.icao if renamed else None,
            cascade_failure=cascade_failure,
        )

    def _journal(self, operation: str, key: str, **details) -> None:
        if self.journal is not None:
            self.journal.record("aircraft", operation, key, **details)


def _index_of(catalog: List[Aircraft], icao: str) -> Optional[int]:
    for i, aircraft in enumerate(catalog):
        if same_icao(aircraft.icao, icao):
            return i
    return None
