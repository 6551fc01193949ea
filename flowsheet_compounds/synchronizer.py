"""
Selection Synchronizer

Adds or removes one compound from the simulation and propagates the change
to the compound collection of every phase of every material stream, so
that each phase always holds exactly the selected compounds.

A toggle flips the current membership; it never sets an explicit state.

Failure policy (best effort): the dependent phases are snapshotted before
any change, the selection is updated, then every phase is updated even if
some of them fail. Failures are collected and raised together as a
PropagationError after the pass.

Author: Flowsheet Compounds Development Team
"""

import logging
from dataclasses import dataclass
from typing import List, MutableMapping, Sequence, Tuple

from flowsheet_compounds.chemdata.catalog import Catalog, CatalogEntry
from flowsheet_compounds.flowsheet import Flowsheet, Phase, SimulationObject

logger = logging.getLogger(__name__)


class SelectionError(Exception):
    """Base class for compound selection errors."""


class UnknownCompoundError(SelectionError, KeyError):
    """A toggle named a compound that is not in the catalog."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"Compound '{self.name}' is not in the catalog"


@dataclass
class DependentFailure:
    stream: str
    phase: str
    error: Exception

    def __str__(self):
        return f"{self.stream}/{self.phase}: {self.error!r}"


class PropagationError(SelectionError):
    """One or more phases could not be updated after a toggle."""

    def __init__(self, name: str, selected: bool, failures: List[DependentFailure]):
        self.name = name
        self.selected = selected
        self.failures = failures
        action = "adding" if selected else "removing"
        details = "; ".join(str(f) for f in failures)
        super().__init__(
            f"{len(failures)} phase(s) failed while {action} '{name}': {details}"
        )


Dependents = Sequence[Tuple[SimulationObject, Phase]]


def toggle(name: str,
           selected: MutableMapping[str, CatalogEntry],
           catalog: Catalog,
           dependents: Dependents) -> bool:
    """
    Flip the membership of ``name`` in ``selected`` and update every phase.

    Args:
        name: Compound name, as shown in the view (exact catalog key)
        selected: Selected compounds, mutated in place
        catalog: Available compounds
        dependents: (stream, phase) pairs whose compounds mirror ``selected``

    Returns:
        True if the compound is selected after the toggle

    Raises:
        UnknownCompoundError: ``name`` is not in the catalog (nothing changed)
        PropagationError: some phases failed; the others were updated
    """
    if name not in catalog:
        raise UnknownCompoundError(name)

    # Snapshot so the pass covers the same phases it started with
    targets = list(dependents)
    failures: List[DependentFailure] = []

    if name in selected:
        del selected[name]
        now_selected = False
        for stream, phase in targets:
            try:
                phase.remove_compound(name)
            except Exception as e:
                logger.warning(f"Failed to remove '{name}' from {stream.name}/{phase.name}: {e}")
                failures.append(DependentFailure(stream.name, phase.name, e))
    else:
        entry = catalog[name]
        selected[name] = entry
        now_selected = True
        for stream, phase in targets:
            try:
                phase.add_compound(entry)
            except Exception as e:
                logger.warning(f"Failed to add '{name}' to {stream.name}/{phase.name}: {e}")
                failures.append(DependentFailure(stream.name, phase.name, e))

    if failures:
        error = PropagationError(name, now_selected, failures)
        logger.error(str(error))
        raise error

    logger.info(f"{'Added' if now_selected else 'Removed'} '{name}' "
                f"({len(targets)} phases updated, {len(selected)} compounds selected)")
    return now_selected


class SelectionSynchronizer:
    """Applies toggles to a flowsheet's selection and material streams."""

    def __init__(self, flowsheet: Flowsheet):
        self.flowsheet = flowsheet

    def toggle(self, name: str) -> bool:
        fs = self.flowsheet
        return toggle(name, fs.selected_compounds, fs.available_compounds, fs.phase_collections())

    def is_selected(self, name: str) -> bool:
        return name in self.flowsheet.selected_compounds
