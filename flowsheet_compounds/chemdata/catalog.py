"""
Compound Catalog for Flowsheet Simulations

Contains the compounds available to a simulation context, each with:
- Display/search identifiers (name, formula, CAS number, source database)
- Constant properties used by the thermodynamic packages
  (MW, normal boiling point, critical constants, acentric factor)

Data sources:
- DWSIM default compound database
- ChemSep pure component database
- CoolProp fluid library

The catalog is read-only. Simulations pick a subset of it (the selected
compounds) through the compounds editor.

Author: Flowsheet Compounds Development Team
"""

import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, List, Optional, Any, Iterable, Union

import pandas as pd

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when a catalog source is malformed."""


@dataclass(frozen=True)
class CatalogEntry:
    """
    Constant properties of a compound as published by a compound database.
    """
    name: str
    formula: str
    cas_number: str = ""
    source_database: str = ""

    # Constant properties (SI units)
    molecular_weight: float = 0.0  # kg/kmol
    normal_boiling_point_k: float = 0.0
    critical_temperature_k: float = 0.0
    critical_pressure_pa: float = 0.0
    acentric_factor: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CatalogEntry':
        return cls(**data)


REQUIRED_COLUMNS = ('name', 'formula', 'cas_number', 'source_database')
PROPERTY_COLUMNS = (
    'molecular_weight',
    'normal_boiling_point_k',
    'critical_temperature_k',
    'critical_pressure_pa',
    'acentric_factor',
)


# =============================================================================
# BUILT-IN CATALOG
# =============================================================================
# Critical constants and acentric factors from the DWSIM/ChemSep databases
# Normal boiling point of carbon dioxide is the sublimation temperature

CATALOG_DATA: Dict[str, CatalogEntry] = {}

# -----------------------------------------------------------------------------
# INORGANICS AND PERMANENT GASES
# -----------------------------------------------------------------------------

CATALOG_DATA['Water'] = CatalogEntry(
    name='Water',
    formula='H2O',
    cas_number='7732-18-5',
    source_database='DWSIM',
    molecular_weight=18.015,
    normal_boiling_point_k=373.15,
    critical_temperature_k=647.14,
    critical_pressure_pa=22064000.0,
    acentric_factor=0.344,
)

CATALOG_DATA['Nitrogen'] = CatalogEntry(
    name='Nitrogen',
    formula='N2',
    cas_number='7727-37-9',
    source_database='DWSIM',
    molecular_weight=28.014,
    normal_boiling_point_k=77.35,
    critical_temperature_k=126.2,
    critical_pressure_pa=3398000.0,
    acentric_factor=0.037,
)

CATALOG_DATA['Oxygen'] = CatalogEntry(
    name='Oxygen',
    formula='O2',
    cas_number='7782-44-7',
    source_database='DWSIM',
    molecular_weight=31.999,
    normal_boiling_point_k=90.17,
    critical_temperature_k=154.58,
    critical_pressure_pa=5043000.0,
    acentric_factor=0.022,
)

CATALOG_DATA['Hydrogen'] = CatalogEntry(
    name='Hydrogen',
    formula='H2',
    cas_number='1333-74-0',
    source_database='CoolProp',
    molecular_weight=2.016,
    normal_boiling_point_k=20.28,
    critical_temperature_k=33.19,
    critical_pressure_pa=1313000.0,
    acentric_factor=-0.216,
)

CATALOG_DATA['Carbon dioxide'] = CatalogEntry(
    name='Carbon dioxide',
    formula='CO2',
    cas_number='124-38-9',
    source_database='DWSIM',
    molecular_weight=44.01,
    normal_boiling_point_k=194.67,
    critical_temperature_k=304.21,
    critical_pressure_pa=7383000.0,
    acentric_factor=0.224,
)

CATALOG_DATA['Carbon monoxide'] = CatalogEntry(
    name='Carbon monoxide',
    formula='CO',
    cas_number='630-08-0',
    source_database='DWSIM',
    molecular_weight=28.01,
    normal_boiling_point_k=81.7,
    critical_temperature_k=132.92,
    critical_pressure_pa=3499000.0,
    acentric_factor=0.048,
)

CATALOG_DATA['Hydrogen sulfide'] = CatalogEntry(
    name='Hydrogen sulfide',
    formula='H2S',
    cas_number='7783-06-4',
    source_database='ChemSep',
    molecular_weight=34.082,
    normal_boiling_point_k=212.8,
    critical_temperature_k=373.53,
    critical_pressure_pa=8963000.0,
    acentric_factor=0.094,
)

CATALOG_DATA['Ammonia'] = CatalogEntry(
    name='Ammonia',
    formula='NH3',
    cas_number='7664-41-7',
    source_database='ChemSep',
    molecular_weight=17.031,
    normal_boiling_point_k=239.72,
    critical_temperature_k=405.65,
    critical_pressure_pa=11280000.0,
    acentric_factor=0.253,
)

# -----------------------------------------------------------------------------
# HYDROCARBONS
# -----------------------------------------------------------------------------

CATALOG_DATA['Methane'] = CatalogEntry(
    name='Methane',
    formula='CH4',
    cas_number='74-82-8',
    source_database='DWSIM',
    molecular_weight=16.043,
    normal_boiling_point_k=111.66,
    critical_temperature_k=190.56,
    critical_pressure_pa=4599000.0,
    acentric_factor=0.011,
)

CATALOG_DATA['Ethane'] = CatalogEntry(
    name='Ethane',
    formula='C2H6',
    cas_number='74-84-0',
    source_database='DWSIM',
    molecular_weight=30.07,
    normal_boiling_point_k=184.55,
    critical_temperature_k=305.32,
    critical_pressure_pa=4872000.0,
    acentric_factor=0.099,
)

CATALOG_DATA['Propane'] = CatalogEntry(
    name='Propane',
    formula='C3H8',
    cas_number='74-98-6',
    source_database='DWSIM',
    molecular_weight=44.097,
    normal_boiling_point_k=231.02,
    critical_temperature_k=369.83,
    critical_pressure_pa=4248000.0,
    acentric_factor=0.152,
)

CATALOG_DATA['N-butane'] = CatalogEntry(
    name='N-butane',
    formula='C4H10',
    cas_number='106-97-8',
    source_database='DWSIM',
    molecular_weight=58.123,
    normal_boiling_point_k=272.65,
    critical_temperature_k=425.12,
    critical_pressure_pa=3796000.0,
    acentric_factor=0.2,
)

CATALOG_DATA['Benzene'] = CatalogEntry(
    name='Benzene',
    formula='C6H6',
    cas_number='71-43-2',
    source_database='ChemSep',
    molecular_weight=78.114,
    normal_boiling_point_k=353.24,
    critical_temperature_k=562.05,
    critical_pressure_pa=4895000.0,
    acentric_factor=0.21,
)

CATALOG_DATA['Toluene'] = CatalogEntry(
    name='Toluene',
    formula='C7H8',
    cas_number='108-88-3',
    source_database='ChemSep',
    molecular_weight=92.141,
    normal_boiling_point_k=383.78,
    critical_temperature_k=591.75,
    critical_pressure_pa=4108000.0,
    acentric_factor=0.264,
)

# -----------------------------------------------------------------------------
# OXYGENATES
# -----------------------------------------------------------------------------

CATALOG_DATA['Methanol'] = CatalogEntry(
    name='Methanol',
    formula='CH4O',
    cas_number='67-56-1',
    source_database='DWSIM',
    molecular_weight=32.042,
    normal_boiling_point_k=337.85,
    critical_temperature_k=512.6,
    critical_pressure_pa=8097000.0,
    acentric_factor=0.565,
)

CATALOG_DATA['Ethanol'] = CatalogEntry(
    name='Ethanol',
    formula='C2H6O',
    cas_number='64-17-5',
    source_database='DWSIM',
    molecular_weight=46.069,
    normal_boiling_point_k=351.44,
    critical_temperature_k=513.92,
    critical_pressure_pa=6148000.0,
    acentric_factor=0.649,
)

CATALOG_DATA['Acetone'] = CatalogEntry(
    name='Acetone',
    formula='C3H6O',
    cas_number='67-64-1',
    source_database='ChemSep',
    molecular_weight=58.08,
    normal_boiling_point_k=329.22,
    critical_temperature_k=508.2,
    critical_pressure_pa=4701000.0,
    acentric_factor=0.307,
)

CATALOG_DATA['Ethylene glycol'] = CatalogEntry(
    name='Ethylene glycol',
    formula='C2H6O2',
    cas_number='107-21-1',
    source_database='ChemSep',
    molecular_weight=62.068,
    normal_boiling_point_k=470.45,
    critical_temperature_k=720.0,
    critical_pressure_pa=8200000.0,
    acentric_factor=0.487,
)


# =============================================================================
# CATALOG ACCESS
# =============================================================================

class Catalog:
    """
    Read-only mapping of compound name to CatalogEntry.

    Names are case-sensitive keys; ``get`` additionally resolves names
    case-insensitively for lookups coming from free text.
    """

    def __init__(self, entries: Optional[Union[Dict[str, CatalogEntry], Iterable[CatalogEntry]]] = None):
        if entries is None:
            entries = CATALOG_DATA
        if isinstance(entries, dict):
            entries = entries.values()

        self._entries: Dict[str, CatalogEntry] = {}
        self._name_index: Dict[str, CatalogEntry] = {}
        for entry in entries:
            if entry.name in self._entries:
                raise CatalogError(f"Duplicate compound name in catalog: {entry.name}")
            self._entries[entry.name] = entry
        self._build_indices()

    def _build_indices(self):
        """Build the case-insensitive name index."""
        for name, entry in self._entries.items():
            self._name_index.setdefault(name.lower(), entry)

    def get(self, identifier: str) -> Optional[CatalogEntry]:
        """
        Get an entry by exact name, falling back to a case-insensitive match.

        Args:
            identifier: Compound name

        Returns:
            CatalogEntry if found, None otherwise
        """
        if not identifier:
            return None
        if identifier in self._entries:
            return self._entries[identifier]
        return self._name_index.get(identifier.strip().lower())

    def sorted_entries(self) -> List[CatalogEntry]:
        """All entries ordered by name."""
        return sorted(self._entries.values(), key=lambda e: e.name)

    def names(self) -> List[str]:
        return list(self._entries)

    def __getitem__(self, name: str) -> CatalogEntry:
        return self._entries[name]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries.values())

    def __contains__(self, name: str) -> bool:
        return name in self._entries


def _entries_from_frame(df: pd.DataFrame, source: str) -> List[CatalogEntry]:
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise CatalogError(f"Catalog {source} is missing columns: {', '.join(missing)}")

    # Only truly empty cells are blank; "NA" or "None" are valid identifiers
    for column in REQUIRED_COLUMNS:
        df[column] = df[column].where(df[column].notna(), "").astype(str).str.strip()

    if (df['name'] == "").any():
        raise CatalogError(f"Catalog {source} has rows without a compound name")

    duplicated = df.loc[df['name'].duplicated(), 'name'].tolist()
    if duplicated:
        raise CatalogError(f"Catalog {source} has duplicate names: {', '.join(duplicated)}")

    for column in PROPERTY_COLUMNS:
        if column not in df.columns:
            continue
        text = df[column].where(df[column].notna(), "").astype(str).str.strip()
        blank = text == ""
        values = pd.to_numeric(text.where(~blank, "0"), errors='coerce')
        invalid = values.isna()
        if invalid.any():
            names = ', '.join(df.loc[invalid, 'name'].tolist())
            raise CatalogError(f"Catalog {source} has non-numeric {column} for: {names}")
        df[column] = values.astype(float)

    columns = [c for c in REQUIRED_COLUMNS + PROPERTY_COLUMNS if c in df.columns]
    return [CatalogEntry(**record) for record in df[columns].to_dict(orient='records')]


def load_catalog(path: Union[str, Path]) -> Catalog:
    """
    Load a catalog from a CSV or JSON (records) file.

    Required columns: name, formula, cas_number, source_database.
    Property columns are optional; blank cells default to 0.0 and
    non-numeric values are rejected.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == '.csv':
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    elif suffix == '.json':
        df = pd.read_json(path, orient='records', dtype=False, convert_dates=False)
    else:
        raise CatalogError(f"Unsupported catalog format: {path.suffix}")

    entries = _entries_from_frame(df, path.name)
    logger.info(f"Loaded {len(entries)} compounds from {path}")
    return Catalog(entries)


# Global catalog instance
_catalog = None


def get_catalog() -> Catalog:
    """Get the global built-in catalog instance."""
    global _catalog
    if _catalog is None:
        _catalog = Catalog()
    return _catalog
