"""
Flowsheet Compounds - Web Application

HTTP front end of the compounds editor:
- Search the compound catalog (name, formula, CAS number, database)
- Add/remove compounds from the simulation with a single toggle
- Inspect material stream phases, which always hold the selected compounds

Author: Flowsheet Compounds Development Team
"""

import os
import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from flowsheet_compounds.chemdata import catalog as compound_catalog
from flowsheet_compounds.editor import CompoundsEditor
from flowsheet_compounds.filtering import view_to_frame
from flowsheet_compounds.flowsheet import DEFAULT_PHASES, Flowsheet
from flowsheet_compounds.synchronizer import PropagationError, UnknownCompoundError

# ==============================================================================
# Configuration
# ==============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CATALOG_PATH = os.getenv("CATALOG_PATH", "")
DEFAULT_STREAMS = [s.strip() for s in os.getenv("DEFAULT_STREAMS", "Feed,Product").split(",") if s.strip()]

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Flowsheet Compounds", version="1.0.0")


def build_editor(catalog_path: str = CATALOG_PATH, stream_names: Optional[List[str]] = None) -> CompoundsEditor:
    """Create a flowsheet with its default streams and an editor over it."""
    if catalog_path:
        catalog = compound_catalog.load_catalog(catalog_path)
    else:
        catalog = compound_catalog.get_catalog()

    flowsheet = Flowsheet(catalog)
    for name in (DEFAULT_STREAMS if stream_names is None else stream_names):
        flowsheet.add_material_stream(name)
    return CompoundsEditor(flowsheet)


editor = build_editor()

# ==============================================================================
# Pydantic Models
# ==============================================================================


class ViewItemModel(BaseModel):
    name: str
    formula: str
    cas_number: str
    source_database: str
    is_selected: bool


class CompoundListResponse(BaseModel):
    query: str
    available: int
    count: int
    items: List[ViewItemModel]


class ToggleResponse(BaseModel):
    name: str
    selected: bool
    selected_compounds: List[str]


class StreamRequest(BaseModel):
    name: str
    phases: Optional[List[str]] = None


class StreamModel(BaseModel):
    name: str
    phases: Dict[str, List[str]]


# ==============================================================================
# API Endpoints - Compounds
# ==============================================================================

@app.get("/api/compounds", response_model=CompoundListResponse)
def list_compounds(query: str = ""):
    """Search the catalog; selected compounds are listed first."""
    view = editor.on_query_changed(query)
    return {
        "query": query,
        "available": editor.available_count,
        "count": len(view),
        "items": [item.to_dict() for item in view],
    }


@app.get("/api/compounds/export.csv")
def export_compounds(query: str = ""):
    """Export the search result as CSV with the grid's column headers."""
    view = editor.on_query_changed(query)
    csv_text = view_to_frame(view).to_csv(index=False)
    return Response(content=csv_text, media_type="text/csv")


@app.get("/api/compounds/{compound_name}")
def get_compound_detail(compound_name: str):
    """Get the constant properties of a catalog compound."""
    entry = editor.flowsheet.available_compounds.get(compound_name)
    if not entry:
        raise HTTPException(status_code=404, detail=f"Compound '{compound_name}' not found")

    detail = entry.to_dict()
    detail["is_selected"] = entry.name in editor.flowsheet.selected_compounds
    return detail


@app.post("/api/compounds/{compound_name}/toggle", response_model=ToggleResponse)
def toggle_compound(compound_name: str):
    """Add the compound to the simulation, or remove it if already added."""
    try:
        selected = editor.on_toggle(compound_name)
    except UnknownCompoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PropagationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "name": compound_name,
        "selected": selected,
        "selected_compounds": editor.selected_names(),
    }


@app.get("/api/selection")
def get_selection():
    """List the compounds currently in the simulation."""
    names = editor.selected_names()
    return {"selected_compounds": names, "count": len(names)}


# ==============================================================================
# API Endpoints - Streams
# ==============================================================================

@app.get("/api/streams", response_model=List[StreamModel])
def list_streams():
    """List material streams with the compounds held by each phase."""
    return editor.stream_summary()


@app.post("/api/streams", response_model=StreamModel)
def create_stream(stream_req: StreamRequest):
    """Add a material stream holding the current selection in every phase."""
    phases = stream_req.phases if stream_req.phases is not None else list(DEFAULT_PHASES)
    try:
        stream = editor.add_stream(stream_req.name, phases)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "name": stream.name,
        "phases": {p.name: p.compound_names() for p in stream.phases.values()},
    }


# ==============================================================================
# Startup Events
# ==============================================================================

@app.on_event("startup")
async def startup_event():
    logger.info("Flowsheet Compounds started")
    logger.info(f"Compound catalog: {editor.available_count} compounds available")


# ==============================================================================
# Main Entry Point
# ==============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=5005, log_level="info")
