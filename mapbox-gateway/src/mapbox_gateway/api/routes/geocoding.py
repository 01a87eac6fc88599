"""API routes for forward and reverse geocoding."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from ...providers import mapbox
from ..arguments import (
    GeocodeForwardArguments,
    GeocodeReverseArguments,
    read_arguments,
    tool_failure,
)

router = APIRouter()


def feature_to_result(feature: dict[str, Any]) -> dict[str, Any]:
    """Reduce a geocoding feature to the fields the gateway exposes."""
    return {
        "place_name": feature.get("place_name"),
        "center": feature.get("center"),
        "place_type": feature.get("place_type"),
        "relevance": feature.get("relevance"),
        "properties": feature.get("properties"),
        "context": feature.get("context"),
    }


def _results_envelope(data: dict[str, Any]) -> dict[str, Any]:
    results = [feature_to_result(feature) for feature in data.get("features", [])]
    return {"success": True, "results": results, "total": len(results)}


@router.post("/geocode_forward")
async def geocode_forward(request: Request):
    """Convert an address or place name into coordinates."""
    try:
        args = GeocodeForwardArguments.model_validate(await read_arguments(request))
        data = await mapbox.forward_geocode(args.query, limit=args.limit, country=args.country)
        return _results_envelope(data)
    except Exception as e:
        return tool_failure("Geocoding", e)


@router.post("/geocode_reverse")
async def geocode_reverse(request: Request):
    """Convert coordinates into a human-readable address."""
    try:
        args = GeocodeReverseArguments.model_validate(await read_arguments(request))
        data = await mapbox.reverse_geocode(args.longitude, args.latitude, types=args.types)
        return _results_envelope(data)
    except Exception as e:
        return tool_failure("Reverse geocoding", e)
