"""
Route map rendering with folium.

The map is rebuilt from scratch for every itinerary; at tens of segments
there is nothing worth diffing.
"""

from dataclasses import dataclass
from html import escape
from typing import Optional

import folium

from roadtrip_planner.models import TripItinerary
from .segment_styles import MarkerKind, format_duration, segment_heading, style_for

DEFAULT_CENTER = (39.8283, -98.5795)
DEFAULT_ZOOM = 4
SINGLE_POINT_ZOOM = 11
FIT_PADDING = (50, 50)

TILE_URL = "https://{s}.basemaps.cartocdn.com/rastertiles/voyager/{z}/{x}/{y}{r}.png"
TILE_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors '
    '&copy; <a href="https://carto.com/attributions">CARTO</a>'
)

ROUTE_COLOR = "#6366f1"


@dataclass
class MapPoint:
    latitude: float
    longitude: float
    title: str
    kind: MarkerKind
    description: str
    duration_hours: Optional[float] = None
    notes: Optional[str] = None

    @property
    def location(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


def map_points(itinerary: TripItinerary) -> list[MapPoint]:
    """Start location followed by every mappable segment, in itinerary order."""
    points = []

    start = itinerary.start_location
    if start is not None and start.coordinates is not None:
        points.append(
            MapPoint(
                latitude=start.coordinates.latitude,
                longitude=start.coordinates.longitude,
                title=start.name,
                kind=MarkerKind.START,
                description="Starting Point",
            )
        )

    for day in itinerary.days:
        for segment in day.segments:
            if not segment.is_mappable():
                continue
            points.append(
                MapPoint(
                    latitude=segment.coordinates.latitude,
                    longitude=segment.coordinates.longitude,
                    title=segment_heading(segment),
                    kind=MarkerKind(segment.type.value),
                    description=segment.description,
                    duration_hours=segment.duration_hours,
                    notes=segment.notes,
                )
            )

    return points


def popup_html(point: MapPoint) -> str:
    style = style_for(point.kind)
    parts = [
        '<div style="font-family: Inter, sans-serif; min-width: 150px;">',
        f'<h4 style="margin: 0 0 4px 0; color: #1e293b;">{escape(point.title)}</h4>',
    ]
    if point.kind != MarkerKind.START:
        parts.append(
            f'<span style="display: inline-block; font-size: 10px; font-weight: 700; text-transform: uppercase; '
            f'color: {style.color}; background: {style.background}; padding: 1px 6px; border-radius: 4px; '
            f'margin-bottom: 4px;">{style.label}</span>'
        )
    parts.append(f'<p style="margin: 0; font-size: 12px; color: #475569;">{escape(point.description)}</p>')
    if point.duration_hours is not None:
        parts.append(f'<div style="font-size: 11px; color: #64748b;">{format_duration(point.duration_hours)}</div>')
    if point.notes:
        parts.append(f'<p style="margin: 4px 0 0; font-size: 11px; font-style: italic;">{escape(point.notes)}</p>')
    parts.append("</div>")
    return "".join(parts)


def build_route_map(itinerary: TripItinerary) -> folium.Map:
    """
    Build a folium map for an itinerary.

    Args:
        itinerary: The plan to draw

    Returns:
        A new folium.Map with one styled marker per mappable point, the
        route line through them, and the view fitted to the route
    """
    points = map_points(itinerary)

    if len(points) == 1:
        center, zoom = points[0].location, SINGLE_POINT_ZOOM
    else:
        center, zoom = DEFAULT_CENTER, DEFAULT_ZOOM

    m = folium.Map(location=center, zoom_start=zoom, tiles=None)
    folium.TileLayer(
        tiles=TILE_URL,
        attr=TILE_ATTRIBUTION,
        name="CARTO Voyager",
        subdomains="abcd",
        max_zoom=19,
    ).add_to(m)

    if len(points) > 1:
        locations = [p.location for p in points]
        folium.PolyLine(
            locations=locations,
            color=ROUTE_COLOR,
            weight=5,
            opacity=0.9,
            line_cap="round",
            line_join="round",
        ).add_to(m)
        latitudes = [lat for lat, _ in locations]
        longitudes = [lng for _, lng in locations]
        m.fit_bounds(
            [[min(latitudes), min(longitudes)], [max(latitudes), max(longitudes)]],
            padding=FIT_PADDING,
        )

    # Higher z_order is added last so it draws on top
    for point in sorted(points, key=lambda p: style_for(p.kind).z_order):
        style = style_for(point.kind)
        folium.CircleMarker(
            location=point.location,
            radius=style.radius,
            color="#ffffff",
            weight=2,
            opacity=1,
            fill=True,
            fill_color=style.color,
            fill_opacity=1,
            popup=folium.Popup(popup_html(point), max_width=250),
            tooltip=point.title,
        ).add_to(m)

    return m
