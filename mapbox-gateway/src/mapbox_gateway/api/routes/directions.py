"""API routes for directions and travel matrices."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Request

from ...providers import mapbox
from ..arguments import DirectionsArguments, MatrixArguments, read_arguments, tool_failure

router = APIRouter()


@router.post("/get_directions")
async def get_directions(request: Request):
    """Get a route between waypoints.

    Two requests go out together: the detailed GeoJSON route with steps, and a
    polyline-only route whose encoded geometry can be dropped straight into a
    route map overlay.
    """
    try:
        args = DirectionsArguments.model_validate(await read_arguments(request))

        geojson_data, polyline_data = await asyncio.gather(
            mapbox.get_route(
                args.coordinates,
                profile=args.profile,
                geometries="geojson",
                steps=args.steps,
                overview=args.overview,
            ),
            mapbox.get_route(
                args.coordinates,
                profile=args.profile,
                geometries="polyline",
                steps=False,
                overview="full",
            ),
        )

        result = {
            "success": True,
            "routes": geojson_data.get("routes"),
            "waypoints": geojson_data.get("waypoints"),
            "code": geojson_data.get("code"),
        }

        polyline_routes = polyline_data.get("routes") or []
        if polyline_routes:
            result["polyline"] = polyline_routes[0].get("geometry")

        return result
    except Exception as e:
        return tool_failure("Directions", e)


@router.post("/get_matrix")
async def get_matrix(request: Request):
    """Calculate travel times and distances between points."""
    try:
        args = MatrixArguments.model_validate(await read_arguments(request))
        data = await mapbox.get_matrix(
            args.coordinates,
            profile=args.profile,
            sources=args.sources,
            destinations=args.destinations,
            annotations=args.annotations,
        )
        return {
            "success": True,
            "durations": data.get("durations"),
            "distances": data.get("distances"),
            "sources": data.get("sources"),
            "destinations": data.get("destinations"),
            "code": data.get("code"),
        }
    except Exception as e:
        return tool_failure("Matrix", e)
