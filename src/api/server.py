"""
FastAPI server for the site map React frontend.

This provides REST API endpoints for:
- The filtered site FeatureCollection consumed by the map
- Filter options and the period timeline
- Filter, period and selection events from the control panel

All endpoints run on one event loop and each event completes synchronously,
so state transitions never interleave.

Usage:
    uvicorn src.api.server:app --reload --port 8000
"""

import logging
from typing import List, Literal, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from src.config.settings import load_settings
from src.sitemap import views
from src.sitemap.controller import SiteMapController
from src.sitemap.periods import InvalidPeriod

logger = logging.getLogger(__name__)

settings = load_settings()

app = FastAPI(
    title="Site Map API",
    description="Filtering and selection for the archaeological site map",
    version="1.0.0",
)

# CORS for React frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings["cors_origins"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_controller: Optional[SiteMapController] = None


async def get_controller() -> SiteMapController:
    """Session controller, loading the dataset on first use."""
    global _controller
    if _controller is None:
        logger.info(f"Starting site map session from {settings['data_path']}")
        _controller = SiteMapController()
        _controller.load_file(settings["data_path"])
    return _controller


# Pydantic models
Attribute = Literal["order", "morphology", "age", "date"]


class FilterToggle(BaseModel):
    attribute: Attribute
    value: str = Field(..., min_length=1)


class PeriodSelection(BaseModel):
    period_id: Optional[str] = None


class SiteSelection(BaseModel):
    site: str = Field(..., min_length=1)


class BuildingSelection(BaseModel):
    doc_id: str = Field(..., min_length=1)


class SelectionState(BaseModel):
    selected_site: Optional[str] = None
    selected_building_doc_id: Optional[str] = None


class FilterChip(BaseModel):
    attribute: str
    value: str


class FiltersState(BaseModel):
    order: List[str]
    morphology: List[str]
    age: List[str]
    date: List[str]
    period_id: Optional[str] = None


class SessionState(BaseModel):
    filters: FiltersState
    chips: List[FilterChip]
    selection: SelectionState


class BuildingSelectResult(BaseModel):
    accepted: bool
    state: SessionState


class DatasetStatus(BaseModel):
    status: str
    error: Optional[str] = None
    sites: int
    buildings: int
    visible_sites: int
    visible_buildings: int


class PeriodInfo(BaseModel):
    id: str
    label: str
    start: int
    end: int
    tags: List[str]
    tooltip: str


class PeriodTableResponse(BaseModel):
    periods: List[PeriodInfo]
    min_year: int
    max_year: int
    total_span: int


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/api/status", response_model=DatasetStatus)
async def get_status(controller: SiteMapController = Depends(get_controller)):
    """Dataset load status and visible counts."""
    return controller.summary()


@app.get("/api/sites")
async def get_sites(controller: SiteMapController = Depends(get_controller)):
    """Filtered sites as a GeoJSON FeatureCollection."""
    return controller.feature_collection()


@app.get("/api/options")
async def get_options(controller: SiteMapController = Depends(get_controller)):
    """Filter options per attribute, with display labels."""
    return {
        attr: {"label": views.attribute_label(attr), "values": values}
        for attr, values in controller.options.items()
    }


@app.get("/api/periods", response_model=PeriodTableResponse)
async def get_periods(controller: SiteMapController = Depends(get_controller)):
    """Timeline segments and the overall year range."""
    periods = controller.periods
    return PeriodTableResponse(
        periods=[
            PeriodInfo(**seg.to_dict(), tooltip=views.describe_segment(seg)["tags"])
            for seg in periods
        ],
        min_year=periods.min_year(),
        max_year=periods.max_year(),
        total_span=periods.total_span(),
    )


@app.get("/api/state", response_model=SessionState)
async def get_state(controller: SiteMapController = Depends(get_controller)):
    return controller.state()


@app.post("/api/filters/toggle", response_model=SessionState)
async def toggle_filter(request: FilterToggle, controller: SiteMapController = Depends(get_controller)):
    controller.toggle_filter(request.attribute, request.value)
    return controller.state()


@app.post("/api/filters/clear", response_model=SessionState)
async def clear_filters(controller: SiteMapController = Depends(get_controller)):
    controller.clear_filters()
    return controller.state()


@app.post("/api/period", response_model=SessionState)
async def select_period(request: PeriodSelection, controller: SiteMapController = Depends(get_controller)):
    """Select a timeline period; null clears it."""
    try:
        controller.select_period(request.period_id)
    except InvalidPeriod as e:
        raise HTTPException(status_code=400, detail=str(e))
    return controller.state()


@app.post("/api/period/{period_id}/toggle", response_model=SessionState)
async def toggle_period(period_id: str, controller: SiteMapController = Depends(get_controller)):
    try:
        controller.toggle_period(period_id)
    except InvalidPeriod as e:
        raise HTTPException(status_code=400, detail=str(e))
    return controller.state()


@app.post("/api/site/select", response_model=SessionState)
async def select_site(request: SiteSelection, controller: SiteMapController = Depends(get_controller)):
    """Map pin click."""
    controller.select_site(request.site)
    return controller.state()


@app.post("/api/site/exit", response_model=SessionState)
async def exit_site(controller: SiteMapController = Depends(get_controller)):
    controller.exit_site()
    return controller.state()


@app.get("/api/site/panel")
async def get_site_panel(controller: SiteMapController = Depends(get_controller)):
    """Buildings of the selected site with visibility flags."""
    panel = controller.site_panel()
    if panel is None:
        raise HTTPException(status_code=404, detail="No visible site selected")
    return panel


@app.post("/api/building/select", response_model=BuildingSelectResult)
async def select_building(request: BuildingSelection, controller: SiteMapController = Depends(get_controller)):
    """Select a building; hidden or foreign buildings are ignored (accepted=false)."""
    accepted = controller.select_building(request.doc_id)
    return {"accepted": accepted, "state": controller.state()}


@app.post("/api/building/clear", response_model=SessionState)
async def clear_building(controller: SiteMapController = Depends(get_controller)):
    controller.clear_building()
    return controller.state()


@app.get("/api/building")
async def get_building(controller: SiteMapController = Depends(get_controller)):
    """Detail card for the selected building."""
    detail = controller.building_detail()
    if detail is None:
        raise HTTPException(status_code=404, detail="No visible building selected")
    return detail


if __name__ == "__main__":
    import uvicorn

    from src.logging_config import configure_logging

    configure_logging(settings["log_level"])
    uvicorn.run(app, host="0.0.0.0", port=8000)
