"""
Flowsheet Object Model

The parts of a simulation that depend on the selected compounds:
the flowsheet owns the catalog, the selected compounds and the simulation
objects; material streams carry one compound collection per phase.

Author: Flowsheet Compounds Development Team
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Sequence

from flowsheet_compounds.chemdata.catalog import Catalog, CatalogEntry, get_catalog

logger = logging.getLogger(__name__)

# Phases carried by every material stream
DEFAULT_PHASES = (
    'Mixture',
    'OverallLiquid',
    'Vapor',
    'Liquid1',
    'Liquid2',
    'Liquid3',
    'Aqueous',
    'Solid',
)


class ObjectType(Enum):
    """Kinds of simulation objects on a flowsheet."""
    MATERIAL_STREAM = "MaterialStream"
    ENERGY_STREAM = "EnergyStream"
    UNIT_OPERATION = "UnitOperation"


@dataclass
class PhaseCompound:
    """
    Phase-local state of one compound.

    ``constant_properties`` references the catalog entry; the amounts are
    computed by the flash/solver and start at zero.
    """
    name: str
    constant_properties: Optional[CatalogEntry] = None
    mole_fraction: float = 0.0
    mass_fraction: float = 0.0
    molar_flow: float = 0.0  # mol/s
    mass_flow: float = 0.0  # kg/s


@dataclass
class Phase:
    """A phase of a material stream and its compound collection."""
    name: str
    compounds: Dict[str, PhaseCompound] = field(default_factory=dict)

    def add_compound(self, entry: CatalogEntry) -> PhaseCompound:
        """Insert a default-initialized compound referencing ``entry``."""
        compound = PhaseCompound(name=entry.name, constant_properties=entry)
        self.compounds[entry.name] = compound
        return compound

    def remove_compound(self, name: str) -> bool:
        """Remove a compound; returns False if it was not present."""
        return self.compounds.pop(name, None) is not None

    def compound_names(self) -> List[str]:
        return list(self.compounds)

    def __contains__(self, name: str) -> bool:
        return name in self.compounds


@dataclass
class SimulationObject:
    name: str
    object_type: ObjectType
    phases: Dict[str, Phase] = field(default_factory=dict)

    @property
    def is_material_stream(self) -> bool:
        return self.object_type == ObjectType.MATERIAL_STREAM


class Flowsheet:
    """
    Simulation context: available compounds, selected compounds and objects.

    ``selected_compounds`` is owned here and mutated one key at a time by
    the selection synchronizer.
    """

    def __init__(self, catalog: Optional[Catalog] = None):
        self.available_compounds: Catalog = catalog if catalog is not None else get_catalog()
        self.selected_compounds: Dict[str, CatalogEntry] = {}
        self.simulation_objects: Dict[str, SimulationObject] = {}

    def add_object(self, name: str, object_type: ObjectType) -> SimulationObject:
        if name in self.simulation_objects:
            raise ValueError(f"Simulation object '{name}' already exists")
        obj = SimulationObject(name=name, object_type=object_type)
        self.simulation_objects[name] = obj
        return obj

    def add_material_stream(self, name: str, phase_names: Sequence[str] = DEFAULT_PHASES) -> SimulationObject:
        """Add a material stream whose phases hold the current selection."""
        if not phase_names:
            raise ValueError("A material stream needs at least one phase")
        stream = self.add_object(name, ObjectType.MATERIAL_STREAM)
        for phase_name in phase_names:
            phase = Phase(name=phase_name)
            for entry in self.selected_compounds.values():
                phase.add_compound(entry)
            stream.phases[phase_name] = phase
        logger.info(f"Added material stream '{name}' with {len(stream.phases)} phases")
        return stream

    def material_streams(self) -> List[SimulationObject]:
        return [obj for obj in self.simulation_objects.values() if obj.is_material_stream]

    def phase_collections(self) -> List[Tuple[SimulationObject, Phase]]:
        """Every (stream, phase) pair whose compounds mirror the selection."""
        return [(stream, phase)
                for stream in self.material_streams()
                for phase in stream.phases.values()]

    def is_consistent(self) -> bool:
        """True when every stream phase holds exactly the selected compounds."""
        expected = set(self.selected_compounds)
        return all(set(phase.compounds) == expected for _, phase in self.phase_collections())
