"""Referential integrity between the aircraft catalog and company fleets."""

import logging
from typing import TYPE_CHECKING, Optional

from .errors import DependencyFailure, StorageUnavailable

if TYPE_CHECKING:
    from .stores.company_store import CompanyStore

logger = logging.getLogger(__name__)


def cascade_aircraft_rename(
    companies: "CompanyStore", old_icao: str, new_icao: str
) -> Optional[DependencyFailure]:
    """
    Propagate an aircraft ICAO rename into every company fleet.

    Called by the aircraft store once the new ICAO is known not to collide.
    Nothing is rolled back on failure: the caller keeps its own write and
    reports the returned failure as a warning.

    Args:
        companies: Store owning the company collection
        old_icao: Identifier currently referenced by fleet entries
        new_icao: Identifier to reference instead

    Returns:
        None on success, otherwise the failure describing the stale fleets
    """
    try:
        persisted = companies.rename_aircraft_reference(old_icao, new_icao)
    except StorageUnavailable as e:
        logger.warning(f"Cannot read companies to rename {old_icao} -> {new_icao}: {e}")
        persisted = False

    if persisted:
        return None

    return DependencyFailure(
        "Companies can't be updated",
        details={"oldICAO": old_icao, "newICAO": new_icao},
    )
