"""
Flowsheet Compounds

Keeps the compounds of every material stream phase in step with the
compounds selected for a simulation, and searches the compound catalog
for the selection editor.
"""

from .filtering import ViewItem, build_view, filter_catalog
from .flowsheet import Flowsheet, ObjectType, Phase, PhaseCompound, SimulationObject
from .synchronizer import (
    PropagationError,
    SelectionError,
    SelectionSynchronizer,
    UnknownCompoundError,
    toggle
)

__all__ = [
    'ViewItem',
    'build_view',
    'filter_catalog',
    'Flowsheet',
    'ObjectType',
    'Phase',
    'PhaseCompound',
    'SimulationObject',
    'PropagationError',
    'SelectionError',
    'SelectionSynchronizer',
    'UnknownCompoundError',
    'toggle'
]
