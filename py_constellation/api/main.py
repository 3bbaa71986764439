"""FastAPI main application."""

from typing import List, Optional

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..config import settings
from ..core.connectivity import Connection
from ..core.constellation import Constellation, Star, build_constellation
from ..core.geodesy import GeoPoint
from ..core.layout import rescale, reveal
from ..core.locations import collapse_track, most_visited
from ..utils.logging import configure_logging

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Constellation API",
    description="Builds connected star graphs from visited places",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class LocationModel(BaseModel):
    """A visited place in decimal degrees."""

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in degrees")


class StarModel(BaseModel):
    """A constellation star with its screen position."""

    id: int = Field(..., ge=0, description="Index of the star in this constellation")
    latitude: float
    longitude: float
    intensity: int = Field(..., ge=1, le=10, description="Visual weight 1-10")
    x: float
    y: float


class ConnectionModel(BaseModel):
    """An undirected edge between two stars, by star id."""

    from_id: int = Field(..., ge=0)
    to_id: int = Field(..., ge=0)


class ConstellationRequest(BaseModel):
    """Request to build a constellation."""

    locations: List[LocationModel] = Field(..., description="Visited places in visiting order")
    width: float = Field(settings.default_viewport_width, gt=0, description="Viewport width")
    height: float = Field(settings.default_viewport_height, gt=0, description="Viewport height")
    collapse_track: bool = Field(False, description="Collapse consecutive nearby points first")
    reveal_progress: float = Field(1.0, ge=0, le=1, description="Share of stars to reveal")


class ConstellationResponse(BaseModel):
    """A built constellation."""

    location_count: Optional[int] = Field(None, description="Locations fed to the pipeline")
    stars: List[StarModel]
    connections: List[ConnectionModel]


class RescaleRequest(BaseModel):
    """Request to refit a constellation onto a square canvas."""

    stars: List[StarModel]
    connections: List[ConnectionModel]
    target_size: float = Field(800, gt=0, description="Canvas side length")
    padding: float = Field(40, ge=0, description="Inset from each canvas edge")


class MostVisitedRequest(BaseModel):
    """Request for the busiest place among locations."""

    locations: List[LocationModel]
    radius_m: float = Field(settings.most_visited_radius_m, gt=0, description="Place radius in meters")


class MostVisitedResponse(BaseModel):
    """The busiest place, if any."""

    location: Optional[LocationModel] = None


def _to_response(constellation: Constellation,
                 location_count: Optional[int] = None) -> ConstellationResponse:
    stars, connections = constellation
    return ConstellationResponse(
        location_count=location_count,
        stars=[
            StarModel(
                id=star.id,
                latitude=star.coordinate.latitude,
                longitude=star.coordinate.longitude,
                intensity=star.intensity,
                x=star.screen_position[0],
                y=star.screen_position[1],
            )
            for star in stars
        ],
        connections=[ConnectionModel(from_id=c.from_id, to_id=c.to_id) for c in connections],
    )


def _from_models(stars: List[StarModel], connections: List[ConnectionModel]) -> Constellation:
    return Constellation(
        stars=[
            Star(
                id=s.id,
                coordinate=GeoPoint(s.latitude, s.longitude),
                intensity=s.intensity,
                screen_position=(s.x, s.y),
            )
            for s in stars
        ],
        connections=[Connection(c.from_id, c.to_id) for c in connections],
    )


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Constellation API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


def _reject_oversized(count: int, limit: int, what: str):
    if count > limit:
        logger.warning("Constellation request rejected", **{what: count, "limit": limit})
        raise HTTPException(
            status_code=413,
            detail=f"Too many {what.replace('_', ' ')}: {count} > {limit}",
        )


@app.post("/constellation", response_model=ConstellationResponse)
def create_constellation(request: ConstellationRequest):
    """
    Build a constellation from visited places.

    Locations are optionally collapsed to one point per place, then clustered,
    projected into the requested viewport and connected. The raw payload is
    capped by ``max_track_points`` and the pipeline input by ``max_locations``.
    """
    _reject_oversized(len(request.locations), settings.max_track_points, "track_points")

    locations = [GeoPoint(loc.latitude, loc.longitude) for loc in request.locations]
    if request.collapse_track:
        locations = collapse_track(locations, settings.track_minimum_distance_m)

    _reject_oversized(len(locations), settings.max_locations, "locations")

    logger.info("Constellation requested",
                locations=len(locations), width=request.width, height=request.height)

    try:
        constellation = build_constellation(locations, (request.width, request.height))
    except ValueError as e:
        logger.warning("Constellation request invalid", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))

    if request.reveal_progress < 1:
        constellation = reveal(constellation, request.reveal_progress)

    return _to_response(constellation, len(locations))


@app.post("/constellation/rescale", response_model=ConstellationResponse)
def rescale_constellation(request: RescaleRequest):
    """Refit an existing constellation onto a square canvas of another size."""
    try:
        constellation = rescale(
            _from_models(request.stars, request.connections),
            request.target_size,
            request.padding,
        )
    except ValueError as e:
        logger.warning("Rescale request invalid", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))

    return _to_response(constellation)


@app.post("/locations/most-visited", response_model=MostVisitedResponse)
def get_most_visited(request: MostVisitedRequest):
    """Find the most visited place among locations."""
    anchor = most_visited(
        [GeoPoint(loc.latitude, loc.longitude) for loc in request.locations],
        request.radius_m,
    )
    if anchor is None:
        return MostVisitedResponse(location=None)
    return MostVisitedResponse(
        location=LocationModel(latitude=anchor.latitude, longitude=anchor.longitude)
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
