"""Company store, including the fleet ledger (buy/sell)."""

import logging
from typing import ContextManager, Iterable, List, Optional, Union

from ..errors import Conflict, DependencyFailure, InvalidArgument, NotFound, StorageWriteError
from ..logger import AuditJournal
from ..models.company import Company, CompanyPayload, FleetEntry
from ..query import apply_sort, apply_thresholds, parse_sort_keys, parse_thresholds
from ..storage import RecordFile
from ..utils import is_blank, parse_quantity, same_icao
from ..validator import build_company, validate_fleet, validate_new_company
from .aircraft_store import AircraftStore

logger = logging.getLogger(__name__)

# Sort fields -> key functions; strings compare case-insensitively
COMPANY_SORT_KEYS = {
    "companyICAO": lambda c: c.company_icao.lower(),
    "name": lambda c: c.name.lower(),
    "country": lambda c: c.country.lower(),
    "fleetSize": lambda c: c.fleet_size,
}


class CompanyStore:
    """Owns the company collection and the fleets inside it."""

    def __init__(
        self,
        record_file: RecordFile,
        gate: ContextManager,
        catalog: Optional[AircraftStore] = None,
        journal: Optional[AuditJournal] = None,
    ):
        """
        Initialize company store.

        Args:
            record_file: Backing JSON file
            gate: Lock held around every operation
            catalog: Aircraft store fleet references are resolved against
            journal: Optional audit journal
        """
        self.record_file = record_file
        self.gate = gate
        self.catalog = catalog
        self.journal = journal

    def load(self) -> List[Company]:
        """Get every company in storage order."""
        with self.gate:
            return self.record_file.load(Company)

    def get(self, company_icao: str) -> Company:
        """
        Get one company by ICAO (case-insensitive, first match).

        Raises:
            InvalidArgument: If the ICAO is blank
            NotFound: If no company has this ICAO
        """
        with self.gate:
            companies = self.record_file.load(Company)
        return companies[self._index_of(companies, company_icao)]

    def query(
        self,
        country: Optional[str] = None,
        fleet_size: Optional[Iterable[str]] = None,
        sort: Optional[Iterable[str]] = None,
    ) -> List[Company]:
        """
        Filter and sort the companies.

        Args:
            country: Keep companies of this country (case-insensitive)
            fleet_size: Threshold filters on the fleet size ("10" = at least
                10 aircraft, "-10" = at most 10), all applied
            sort: Sort keys among companyICAO/name/country/fleetSize, "-" for
                descending

        Returns:
            Matching companies in the requested order

        Raises:
            InvalidArgument: If a threshold or sort key is malformed
        """
        size_limits = parse_thresholds(fleet_size, "fleetSize")
        sort_keys = parse_sort_keys(sort, COMPANY_SORT_KEYS)

        with self.gate:
            companies = self.record_file.load(Company)

        if country is not None:
            companies = [c for c in companies if c.country.lower() == country.lower()]
        companies = apply_thresholds(companies, size_limits, lambda c: c.fleet_size)

        return apply_sort(companies, sort_keys)

    def insert(self, candidate: CompanyPayload) -> Company:
        """
        Add a company with its initial fleet.

        Raises:
            InvalidArgument: If a field is blank, the fleet is missing or a
                quantity is not positive
            Conflict: If the companyICAO is taken or a fleet entry references
                an unknown aircraft
        """
        validate_new_company(candidate)

        with self.gate:
            companies = self.record_file.load(Company)

            if any(c.company_icao == candidate.company_icao for c in companies):
                raise Conflict(
                    "Company ICAO already exists",
                    details={"companyICAO": candidate.company_icao},
                )

            known_icaos = set()
            if candidate.fleet and self.catalog is not None:
                known_icaos = {a.icao for a in self.catalog.load()}
            fleet = validate_fleet(candidate.fleet, known_icaos)

            company = build_company(candidate, fleet)
            companies.append(company)
            self.record_file.persist(companies)
            self._journal("insert", company.company_icao, record=company.model_dump(by_alias=True))

        logger.info(f"Inserted company {company.company_icao} with {company.fleet_size} aircraft")
        return company

    def delete_by_icao(self, company_icao: str) -> Company:
        """
        Remove a company.

        Returns:
            Removed company

        Raises:
            InvalidArgument: If the ICAO is blank
            NotFound: If no company has this ICAO
        """
        with self.gate:
            companies = self.record_file.load(Company)
            removed = companies.pop(self._index_of(companies, company_icao))

            self.record_file.persist(companies)
            self._journal("delete", removed.company_icao)

        logger.info(f"Deleted company {removed.company_icao}")
        return removed

    def rename_aircraft_reference(self, old_icao: str, new_icao: str) -> bool:
        """
        Point every fleet entry referencing ``old_icao`` (exact match) to
        ``new_icao``.

        Returns:
            True if the collection was saved (or nothing needed saving),
            False if the write failed
        """
        with self.gate:
            companies = self.record_file.load(Company)
            if not companies:
                return True

            renamed = 0
            for company in companies:
                for entry in company.fleet:
                    if entry.aircraft_icao == old_icao:
                        entry.aircraft_icao = new_icao
                        renamed += 1

            try:
                self.record_file.persist(companies)
            except StorageWriteError as e:
                logger.error(f"Failed to rename fleet references {old_icao} -> {new_icao}: {e}")
                return False

            self._journal("rename-aircraft", old_icao, new_icao=new_icao, entries=renamed)

        logger.info(f"Renamed {renamed} fleet entries from {old_icao} to {new_icao}")
        return True

    # ------------------------------------------------------------------
    # Fleet ledger
    # ------------------------------------------------------------------

    def buy(
        self,
        company_icao: str,
        aircraft_icao: Optional[str],
        quantity: Union[int, str, None] = None,
    ) -> Company:
        """
        Add aircraft of one model to a company fleet.

        Args:
            company_icao: Buying company (case-insensitive)
            aircraft_icao: Aircraft model, must match exactly one catalog
                entry ignoring case
            quantity: Number bought, 1 when omitted

        Returns:
            Updated company

        Raises:
            NotFound: If the company does not exist
            InvalidArgument: If aircraft_icao is blank, the quantity is not a
                non-negative integer, or the aircraft is not in the catalog
        """
        with self.gate:
            companies = self.record_file.load(Company)
            company = companies[self._index_of(companies, company_icao)]

            if is_blank(aircraft_icao):
                raise InvalidArgument("Invalid request, need parameter aircraftICAO not empty")

            count = parse_quantity(quantity)

            matches = []
            if self.catalog is not None:
                matches = [a for a in self.catalog.load() if same_icao(a.icao, aircraft_icao)]
            if len(matches) != 1:
                raise InvalidArgument(
                    f"Airplane {aircraft_icao} is not into the catalog",
                    details={"aircraftICAO": aircraft_icao},
                )

            entry = company.find_entry(aircraft_icao, ignore_case=True)
            if entry is not None:
                entry.quantity += count
            elif count > 0:
                company.fleet.append(FleetEntry(aircraft_icao=matches[0].icao, quantity=count))

            self.record_file.persist(companies)
            self._journal("buy", company.company_icao, aircraftICAO=matches[0].icao, quantity=count)

        logger.info(f"Company {company.company_icao} bought {count} x {matches[0].icao}")
        return company

    def sell(
        self,
        company_icao: str,
        aircraft_icao: Optional[str],
        quantity: Union[int, str, None] = None,
    ) -> int:
        """
        Remove aircraft of one model from a company fleet.

        Args:
            company_icao: Selling company (case-insensitive)
            aircraft_icao: Aircraft model as stored in the fleet (exact match)
            quantity: Number sold, 1 when omitted

        Returns:
            Quantity of that model left in the fleet (0 once the entry is gone)

        Raises:
            NotFound: If the company does not exist
            InvalidArgument: If the quantity is invalid or aircraft_icao blank
            DependencyFailure: If the company does not own this aircraft
            Conflict: If more aircraft are sold than owned
        """
        with self.gate:
            companies = self.record_file.load(Company)
            company = companies[self._index_of(companies, company_icao)]

            count = parse_quantity(quantity)

            if is_blank(aircraft_icao):
                raise InvalidArgument("Invalid request, need parameter aircraftICAO not empty")

            entry = company.find_entry(aircraft_icao)
            if entry is None:
                raise DependencyFailure(
                    "This company does not own this aircraft",
                    details={"companyICAO": company.company_icao, "aircraftICAO": aircraft_icao},
                )

            if entry.quantity < count:
                raise Conflict(
                    f"You can't sell more than {entry.quantity} aircrafts",
                    details={"owned": entry.quantity, "requested": count},
                )

            if entry.quantity == count:
                company.fleet.remove(entry)
                remaining = 0
            else:
                entry.quantity -= count
                remaining = entry.quantity

            self.record_file.persist(companies)
            self._journal(
                "sell", company.company_icao, aircraftICAO=aircraft_icao, quantity=count, remaining=remaining
            )

        logger.info(f"Company {company.company_icao} sold {count} x {aircraft_icao}, {remaining} left")
        return remaining

    def _index_of(self, companies: List[Company], company_icao: str) -> int:
        if is_blank(company_icao):
            raise InvalidArgument("Invalid request, need parameter companyICAO not empty")
        for i, company in enumerate(companies):
            if company.company_icao.lower() == company_icao.lower():
                return i
        raise NotFound("Company does not exist", details={"companyICAO": company_icao})

    def _journal(self, operation: str, key: str, **details) -> None:
        if self.journal is not None:
            self.journal.record("company", operation, key, **details)
