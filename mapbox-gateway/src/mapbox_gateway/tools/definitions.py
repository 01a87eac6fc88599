"""Mapbox tool definitions registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_STYLE = "mapbox/streets-v12"
ROUTING_PROFILES = ["driving", "walking", "cycling", "driving-traffic"]


@dataclass
class SchemaProperty:
    """A single node of a tool input schema."""

    type: str
    description: str | None = None
    minimum: float | None = None
    maximum: float | None = None
    default: Any = None
    enum: list[str] | None = None
    items: SchemaProperty | None = None
    min_items: int | None = None
    max_items: int | None = None
    properties: dict[str, SchemaProperty] | None = None
    required: list[str] | None = None

    def to_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.type}
        if self.properties is not None:
            schema["properties"] = {
                name: prop.to_schema() for name, prop in self.properties.items()
            }
        if self.required:
            schema["required"] = list(self.required)
        if self.items is not None:
            schema["items"] = self.items.to_schema()
        if self.min_items is not None:
            schema["minItems"] = self.min_items
        if self.max_items is not None:
            schema["maxItems"] = self.max_items
        if self.enum is not None:
            schema["enum"] = list(self.enum)
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        if self.default is not None:
            schema["default"] = self.default
        if self.description is not None:
            schema["description"] = self.description
        return schema


@dataclass
class ToolDefinition:
    """Definition of a gateway tool."""

    name: str
    description: str
    properties: dict[str, SchemaProperty] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)

    @property
    def input_schema(self) -> dict[str, Any]:
        return SchemaProperty(
            type="object", properties=self.properties, required=self.required
        ).to_schema()


def _coordinate_pair(description: str | None = None) -> SchemaProperty:
    return SchemaProperty(
        type="array",
        items=SchemaProperty(type="number"),
        min_items=2,
        max_items=2,
        description=description,
    )


def _coordinate_list(description: str, max_items: int | None = None) -> SchemaProperty:
    return SchemaProperty(
        type="array",
        items=_coordinate_pair(),
        min_items=2,
        max_items=max_items,
        description=description,
    )


def _profile() -> SchemaProperty:
    return SchemaProperty(
        type="string",
        enum=ROUTING_PROFILES,
        default="driving",
        description="Routing profile",
    )


def _image_dimension(label: str, default: int) -> SchemaProperty:
    return SchemaProperty(
        type="number",
        minimum=1,
        maximum=1280,
        default=default,
        description=f"Image {label} in pixels",
    )


GEOCODE_FORWARD_DEFINITION = ToolDefinition(
    name="geocode_forward",
    description="Convert an address or place name into geographic coordinates (latitude, longitude)",
    properties={
        "query": SchemaProperty(type="string", description="The address or place name to geocode"),
        "limit": SchemaProperty(
            type="number",
            description="Maximum number of results to return (1-10)",
            minimum=1,
            maximum=10,
            default=5,
        ),
        "country": SchemaProperty(
            type="string",
            description="ISO 3166-1 alpha-2 country code to limit results",
        ),
    },
    required=["query"],
)

GEOCODE_REVERSE_DEFINITION = ToolDefinition(
    name="geocode_reverse",
    description="Convert geographic coordinates into a human-readable address",
    properties={
        "longitude": SchemaProperty(
            type="number", description="Longitude coordinate", minimum=-180, maximum=180
        ),
        "latitude": SchemaProperty(
            type="number", description="Latitude coordinate", minimum=-90, maximum=90
        ),
        "types": SchemaProperty(
            type="array",
            items=SchemaProperty(type="string"),
            description="Filter results by feature types",
        ),
    },
    required=["longitude", "latitude"],
)

GET_DIRECTIONS_DEFINITION = ToolDefinition(
    name="get_directions",
    description="Get directions between multiple waypoints",
    properties={
        "coordinates": _coordinate_list("Array of [longitude, latitude] coordinate pairs"),
        "profile": _profile(),
        "geometries": SchemaProperty(
            type="string",
            enum=["geojson", "polyline", "polyline6"],
            default="geojson",
            description="Response geometry format",
        ),
        "steps": SchemaProperty(
            type="boolean", default=True, description="Include turn-by-turn instructions"
        ),
        "overview": SchemaProperty(
            type="string",
            enum=["full", "simplified", "false"],
            default="full",
            description="Type of route geometry overview",
        ),
    },
    required=["coordinates"],
)

GET_STATIC_IMAGE_DEFINITION = ToolDefinition(
    name="get_static_image",
    description="Generate a static map image with optional markers and overlays",
    properties={
        "style": SchemaProperty(type="string", default=DEFAULT_STYLE, description="Map style ID"),
        "width": _image_dimension("width", 600),
        "height": _image_dimension("height", 400),
        "zoom": SchemaProperty(
            type="number", minimum=0, maximum=22, description="Zoom level (required if no bbox)"
        ),
        "center": _coordinate_pair("[longitude, latitude] center point (required if no bbox)"),
        "bbox": SchemaProperty(
            type="array",
            items=SchemaProperty(type="number"),
            min_items=4,
            max_items=4,
            description="Bounding box [minLon, minLat, maxLon, maxLat]",
        ),
        "markers": SchemaProperty(
            type="array",
            items=SchemaProperty(
                type="object",
                properties={
                    "longitude": SchemaProperty(type="number"),
                    "latitude": SchemaProperty(type="number"),
                    "size": SchemaProperty(type="string", enum=["small", "large"], default="small"),
                    "color": SchemaProperty(type="string", default="red"),
                    "label": SchemaProperty(type="string"),
                },
                required=["longitude", "latitude"],
            ),
            description="Array of markers to place on the map",
        ),
    },
)

GET_ROUTE_MAP_DEFINITION = ToolDefinition(
    name="get_route_map",
    description="Generate a static map image showing a route with start and end markers",
    properties={
        "coordinates": _coordinate_list(
            "Array of [longitude, latitude] coordinate pairs for the route"
        ),
        "style": SchemaProperty(type="string", default=DEFAULT_STYLE, description="Map style ID"),
        "width": _image_dimension("width", 800),
        "height": _image_dimension("height", 600),
        "route_polyline": SchemaProperty(
            type="string",
            description="Encoded polyline string from directions API (optional, for route overlay)",
        ),
    },
    required=["coordinates"],
)

GET_MATRIX_DEFINITION = ToolDefinition(
    name="get_matrix",
    description="Calculate travel times and distances between multiple points",
    properties={
        "coordinates": _coordinate_list(
            "Array of [longitude, latitude] coordinate pairs", max_items=25
        ),
        "profile": _profile(),
        "sources": SchemaProperty(
            type="array",
            items=SchemaProperty(type="number"),
            description="Indices of coordinates to use as sources (default: all)",
        ),
        "destinations": SchemaProperty(
            type="array",
            items=SchemaProperty(type="number"),
            description="Indices of coordinates to use as destinations (default: all)",
        ),
        "annotations": SchemaProperty(
            type="array",
            items=SchemaProperty(type="string", enum=["duration", "distance", "speed"]),
            default=["duration", "distance"],
            description="Annotations to include in response",
        ),
    },
    required=["coordinates"],
)


# Registry of all tool definitions, in catalog order
TOOL_DEFINITIONS: list[ToolDefinition] = [
    GEOCODE_FORWARD_DEFINITION,
    GEOCODE_REVERSE_DEFINITION,
    GET_DIRECTIONS_DEFINITION,
    GET_STATIC_IMAGE_DEFINITION,
    GET_ROUTE_MAP_DEFINITION,
    GET_MATRIX_DEFINITION,
]

TOOL_DEFINITIONS_MAP: dict[str, ToolDefinition] = {
    definition.name: definition for definition in TOOL_DEFINITIONS
}


def get_tool_definition(name: str) -> ToolDefinition | None:
    """Get a tool definition by name."""
    return TOOL_DEFINITIONS_MAP.get(name)


def get_tool_definitions() -> list[ToolDefinition]:
    """Get all tool definitions."""
    return TOOL_DEFINITIONS


def get_tool_definitions_for_api() -> list[dict[str, Any]]:
    """Get tool definitions in API response format."""
    return [
        {
            "name": definition.name,
            "description": definition.description,
            "inputSchema": definition.input_schema,
        }
        for definition in TOOL_DEFINITIONS
    ]
