"""API routes that build static map image URLs."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ...config import Settings, get_settings
from ...static_maps import build_route_map_url, build_static_image_url, encode_marker
from ..arguments import RouteMapArguments, StaticImageArguments, read_arguments, tool_failure

router = APIRouter()


@router.post("/get_static_image")
async def get_static_image(request: Request, settings: Settings = Depends(get_settings)):
    """Build a static map image URL with optional markers."""
    try:
        args = StaticImageArguments.model_validate(await read_arguments(request))

        markers = [
            encode_marker(
                marker.longitude,
                marker.latitude,
                size=marker.size,
                color=marker.color,
                label=str(marker.label) if marker.label is not None else None,
            )
            for marker in args.markers
        ]

        image_url = build_static_image_url(
            settings.mapbox_api_base_url,
            settings.mapbox_access_token,
            style=args.style,
            width=args.width,
            height=args.height,
            zoom=args.zoom,
            center=args.center,
            bbox=args.bbox,
            markers=markers,
        )

        return {
            "success": True,
            "image_url": image_url,
            "width": args.width,
            "height": args.height,
        }
    except Exception as e:
        return tool_failure("Static image", e)


@router.post("/get_route_map")
async def get_route_map(request: Request, settings: Settings = Depends(get_settings)):
    """Build a static route map image URL with start/end pins."""
    try:
        args = RouteMapArguments.model_validate(await read_arguments(request))

        route_map = build_route_map_url(
            settings.mapbox_api_base_url,
            settings.mapbox_access_token,
            coordinates=args.coordinates,
            style=args.style,
            width=args.width,
            height=args.height,
            route_polyline=args.route_polyline,
        )

        return {
            "success": True,
            "image_url": route_map.image_url,
            "width": args.width,
            "height": args.height,
            "start_coordinates": route_map.start_coordinates,
            "end_coordinates": route_map.end_coordinates,
            "bounding_box": route_map.bounding_box,
        }
    except Exception as e:
        return tool_failure("Route map", e)
