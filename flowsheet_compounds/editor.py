"""
Compounds Editor

Headless controller behind the "Simulation Compounds" panel. It keeps the
current search text and the rows derived from it, and routes the two
events the panel emits:
- query changed: re-filter the catalog and rebuild the rows
- toggle(name): add/remove the compound and rebuild the rows

Filtering may be computed off the event thread; results are applied only
if no newer query was issued in the meantime.

Author: Flowsheet Compounds Development Team
"""

import logging
import threading
from typing import Dict, List, Optional, Any

import pandas as pd

from flowsheet_compounds.chemdata.catalog import CatalogEntry
from flowsheet_compounds.filtering import (
    QueryTracker,
    ViewItem,
    build_view,
    filter_catalog,
    view_to_frame,
)
from flowsheet_compounds.flowsheet import Flowsheet
from flowsheet_compounds.synchronizer import SelectionSynchronizer

logger = logging.getLogger(__name__)


class CompoundsEditor:
    """Search and toggle compounds for one flowsheet."""

    def __init__(self, flowsheet: Flowsheet):
        self.flowsheet = flowsheet
        self.synchronizer = SelectionSynchronizer(flowsheet)
        self.query = ""
        self.view: List[ViewItem] = []
        self._filtered: List[CatalogEntry] = []
        self._tracker = QueryTracker()
        # Serializes toggles and view swaps
        self._lock = threading.RLock()
        self.on_query_changed("")

    @property
    def available_count(self) -> int:
        """Number of compounds available in the catalog."""
        return len(self.flowsheet.available_compounds)

    # -------------------------------------------------------------------------
    # Query handling
    # -------------------------------------------------------------------------

    def begin_query(self, text: Optional[str]) -> int:
        """Register a new query and return its ticket."""
        ticket = self._tracker.issue()
        logger.debug(f"Filter query #{ticket}: '{text or ''}'")
        return ticket

    def complete_query(self, ticket: int, text: Optional[str], filtered: List[CatalogEntry]) -> bool:
        """
        Apply a filter result if it belongs to the latest query.

        Returns:
            True if applied, False if discarded as stale
        """
        with self._lock:
            if not self._tracker.is_current(ticket):
                logger.debug(f"Discarding stale filter result #{ticket} for '{text or ''}'")
                return False
            self.query = text or ""
            self._filtered = filtered
            self._rebuild()
            return True

    def on_query_changed(self, text: Optional[str]) -> List[ViewItem]:
        """Filter synchronously, apply the result and return its rows."""
        with self._lock:
            ticket = self.begin_query(text)
            filtered = filter_catalog(self.flowsheet.available_compounds, text)
            self.complete_query(ticket, text, filtered)
            return self.view

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def on_toggle(self, name: str) -> bool:
        """
        Flip a compound's membership in the simulation.

        The rows are rebuilt afterwards, including when propagation fails,
        so they reflect the selection as it now stands.
        """
        with self._lock:
            try:
                return self.synchronizer.toggle(name)
            finally:
                self._rebuild()

    def add_stream(self, name: str, phase_names: List[str]):
        """Add a material stream; its phases start with the current selection."""
        with self._lock:
            return self.flowsheet.add_material_stream(name, phase_names)

    def selected_names(self) -> List[str]:
        return sorted(self.flowsheet.selected_compounds)

    def _rebuild(self):
        self.view = build_view(self._filtered, self.flowsheet.selected_compounds)

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    def export_frame(self) -> pd.DataFrame:
        """Current rows as a table with the grid's column headers."""
        with self._lock:
            return view_to_frame(self.view)

    def stream_summary(self) -> List[Dict[str, Any]]:
        """Material streams with the compounds held by each phase."""
        with self._lock:
            return [
                {
                    "name": stream.name,
                    "phases": {
                        phase.name: phase.compound_names()
                        for phase in stream.phases.values()
                    },
                }
                for stream in self.flowsheet.material_streams()
            ]
