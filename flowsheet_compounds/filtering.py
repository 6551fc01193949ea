"""
Compound Search and View Building

Filters the catalog by a free-text query and projects the result into the
rows shown by the compounds editor:
- filter_catalog: case-insensitive containment over name, formula,
  CAS number and source database, sorted by name
- build_view: joins the filtered entries against the selected compounds,
  selected rows first
- QueryTracker: discards filter results that were superseded by a newer query

Author: Flowsheet Compounds Development Team
"""

import logging
import threading
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Mapping, Optional, Any

import pandas as pd

from flowsheet_compounds.chemdata.catalog import CatalogEntry

logger = logging.getLogger(__name__)

# Column headers of the compounds grid, in display order
VIEW_COLUMNS = {
    'is_selected': 'Added',
    'name': 'Compound',
    'formula': 'Formula',
    'cas_number': 'CAS Number',
    'source_database': 'Database',
}


@dataclass(frozen=True)
class ViewItem:
    """One row of the compounds grid; a snapshot of selection state."""
    name: str
    formula: str
    cas_number: str
    source_database: str
    is_selected: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _matches(entry: CatalogEntry, query_lower: str) -> bool:
    return (query_lower in entry.name.lower() or
            query_lower in entry.formula.lower() or
            query_lower in entry.cas_number.lower() or
            query_lower in entry.source_database.lower())


def filter_catalog(catalog: Iterable[CatalogEntry], query: Optional[str]) -> List[CatalogEntry]:
    """
    Filter catalog entries by a free-text query.

    Args:
        catalog: Catalog or any iterable of entries
        query: Search text; empty or None returns every entry

    Returns:
        Matching entries sorted by name
    """
    if not query:
        results = list(catalog)
    else:
        query_lower = query.lower()
        results = [entry for entry in catalog if _matches(entry, query_lower)]

    results.sort(key=lambda e: e.name)
    logger.debug(f"Filter '{query or ''}' matched {len(results)} compounds")
    return results


def build_view(filtered: Iterable[CatalogEntry], selected: Mapping[str, Any]) -> List[ViewItem]:
    """
    Build grid rows from filtered entries, selected compounds first.

    Relative order within the selected and unselected groups follows
    ``filtered``.
    """
    selected_rows = []
    other_rows = []
    for entry in filtered:
        is_selected = entry.name in selected
        item = ViewItem(
            name=entry.name,
            formula=entry.formula,
            cas_number=entry.cas_number,
            source_database=entry.source_database,
            is_selected=is_selected,
        )
        if is_selected:
            selected_rows.append(item)
        else:
            other_rows.append(item)
    return selected_rows + other_rows


def view_to_frame(view: Iterable[ViewItem]) -> pd.DataFrame:
    """Tabulate view rows with the grid's column headers."""
    df = pd.DataFrame([item.to_dict() for item in view], columns=list(VIEW_COLUMNS))
    return df.rename(columns=VIEW_COLUMNS)


class QueryTracker:
    """
    Orders filter results coming back from overlapping queries.

    Each query gets a ticket; only the result carrying the latest ticket
    may be applied.
    """

    def __init__(self):
        self._latest = 0
        self._lock = threading.Lock()

    def issue(self) -> int:
        """Issue a ticket for a new query."""
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._latest

    @property
    def latest(self) -> int:
        with self._lock:
            return self._latest
