"""Filter and sort engine shared by the aircraft and company stores."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, TypeVar, Union

from .config import DESCENDING_PREFIX
from .errors import InvalidArgument

T = TypeVar("T")


@dataclass(frozen=True)
class Threshold:
    """A signed threshold filter: "at least value" or "at most value"."""

    value: int
    at_most: bool = False

    def accepts(self, measured: int) -> bool:
        """Check a measured value against the threshold (bounds included)."""
        if self.at_most:
            return measured <= self.value
        return measured >= self.value


@dataclass(frozen=True)
class SortKey:
    """One key of a composite ordering."""

    field: str
    descending: bool
    extract: Callable[[Any], Any]


def parse_threshold(raw: Union[int, str], name: str) -> Threshold:
    """
    Parse a threshold filter value.

    A leading "-" selects "at most |value|", anything else "at least value".

    Args:
        raw: Raw query value (e.g. "150" or "-150"); ints are read the same way
        name: Parameter name, used in the error message

    Returns:
        Parsed threshold

    Raises:
        InvalidArgument: If the value (without its prefix) is not an integer
    """
    raw = str(raw)
    at_most = raw.startswith(DESCENDING_PREFIX)
    text = raw[len(DESCENDING_PREFIX):] if at_most else raw
    try:
        value = int(text)
    except ValueError:
        raise InvalidArgument(f"Invalid {name} format", details={name: raw})
    return Threshold(value=value, at_most=at_most)


def parse_thresholds(raw_values: Optional[Iterable[str]], name: str) -> List[Threshold]:
    """Parse every repetition of a threshold parameter."""
    return [parse_threshold(raw, name) for raw in raw_values or []]


def parse_sort_keys(
    raw_keys: Optional[Iterable[str]],
    extractors: Dict[str, Callable[[Any], Any]],
) -> List[SortKey]:
    """
    Parse an ordered list of sort keys.

    Args:
        raw_keys: Sort parameters in priority order, optionally "-"-prefixed
        extractors: Allowed field names mapped to their key function

    Returns:
        Parsed sort keys in the same order

    Raises:
        InvalidArgument: If a field is not in ``extractors``
    """
    keys = []
    for raw in raw_keys or []:
        descending = raw.startswith(DESCENDING_PREFIX)
        field = raw[len(DESCENDING_PREFIX):] if descending else raw
        if field not in extractors:
            raise InvalidArgument(
                "Sort parameters incorrect",
                details={"sort": raw, "allowed": sorted(extractors)},
            )
        keys.append(SortKey(field=field, descending=descending, extract=extractors[field]))
    return keys


def apply_thresholds(
    items: Iterable[T], thresholds: Sequence[Threshold], measure: Callable[[T], int]
) -> List[T]:
    """Keep the items whose measure satisfies every threshold."""
    return [item for item in items if all(t.accepts(measure(item)) for t in thresholds)]


def apply_sort(items: Iterable[T], sort_keys: Sequence[SortKey]) -> List[T]:
    """
    Order items by a composite key.

    The first key dominates and later keys break ties. Sorting runs from the
    last key to the first; each pass is stable, so items tied on every key
    keep their stored order.
    """
    ordered = list(items)
    for key in reversed(sort_keys):
        ordered.sort(key=key.extract, reverse=key.descending)
    return ordered
