"""Tests for segment styling and the folium route map."""

import folium
import pytest

from roadtrip_planner.models import RouteSegment, SegmentType, TripItinerary
from roadtrip_planner.services.route_map import (
    DEFAULT_CENTER,
    ROUTE_COLOR,
    MapPoint,
    build_route_map,
    map_points,
    popup_html,
)
from roadtrip_planner.services.segment_styles import (
    DEFAULT_STYLE,
    MarkerKind,
    format_duration,
    segment_heading,
    segment_subtitle,
    style_for,
)


def children_of_type(m, cls):
    return [child for child in m._children.values() if isinstance(child, cls)]


class TestSegmentStyles:
    """Tests for marker and timeline styling."""

    @pytest.mark.parametrize(
        "kind, color, radius",
        [
            (MarkerKind.START, "#10b981", 9),
            (MarkerKind.VISIT, "#ef4444", 8),
            (MarkerKind.OVERNIGHT, "#6366f1", 8),
            (MarkerKind.BREAK, "#f59e0b", 5),
        ],
    )
    def test_marker_styles(self, kind, color, radius):
        style = style_for(kind)
        assert style.color == color
        assert style.radius == radius

    def test_draw_order(self):
        """Start draws above visits, visits above overnights, breaks lowest."""
        z = {kind: style_for(kind).z_order for kind in MarkerKind}
        assert z[MarkerKind.START] > z[MarkerKind.VISIT] > z[MarkerKind.OVERNIGHT] > z[MarkerKind.BREAK]

    def test_accepts_segment_type_and_string(self):
        assert style_for(SegmentType.VISIT) == style_for(MarkerKind.VISIT)
        assert style_for("BREAK") == style_for(MarkerKind.BREAK)

    def test_unknown_kind(self):
        assert style_for("FERRY") == DEFAULT_STYLE

    @pytest.mark.parametrize(
        "hours, expected",
        [(0.5, "30 min"), (0.25, "15 min"), (1, "1 hr"), (1.5, "1.5 hr"), (10.0, "10 hr")],
    )
    def test_format_duration(self, hours, expected):
        assert format_duration(hours) == expected

    def test_heading_prefers_location_name(self):
        segment = RouteSegment(
            type="VISIT", description="Browse books", duration_hours=2, location_name="Powell's"
        )
        assert segment_heading(segment) == "Powell's"
        assert segment_subtitle(segment) == "Browse books"

    def test_heading_falls_back_to_description(self):
        segment = RouteSegment(type="DRIVE", description="Drive south on I-5", duration_hours=2)
        assert segment_heading(segment) == "Drive south on I-5"
        assert segment_subtitle(segment) is None


class TestMapPoints:
    def test_points_in_itinerary_order(self, itinerary):
        points = map_points(itinerary)

        assert [p.kind for p in points] == [
            MarkerKind.START,
            MarkerKind.BREAK,
            MarkerKind.DRIVE,
            MarkerKind.OVERNIGHT,
            MarkerKind.VISIT,
            MarkerKind.OVERNIGHT,
            MarkerKind.VISIT,
        ]
        assert points[0].title == "Seattle"
        assert points[0].description == "Starting Point"
        assert points[1].title == "Olympia"

    def test_transit_drive_not_plotted(self, itinerary):
        titles = [p.title for p in map_points(itinerary)]
        assert "Drive south on I-5" not in titles

    def test_segments_without_coordinates_skipped(self, response_payload):
        del response_payload["days"][0]["segments"][1]["coordinates"]
        del response_payload["days"][0]["segments"][1]["locationName"]
        itinerary = TripItinerary.model_validate(response_payload)
        assert len(map_points(itinerary)) == 6


class TestPopupHtml:
    def test_escapes_text(self):
        point = MapPoint(45.5, -122.6, "Powell's <Books>", MarkerKind.VISIT, "Read & relax", 3, "Open late")
        html = popup_html(point)

        assert "&lt;Books&gt;" in html
        assert "Read &amp; relax" in html
        assert "3 hr" in html
        assert "Open late" in html

    def test_type_badge_uses_segment_style(self):
        point = MapPoint(45.5, -122.6, "Powell's", MarkerKind.VISIT, "Browse books")
        html = popup_html(point)

        assert ">Visit</span>" in html
        assert "color: #ef4444" in html
        assert "background: #fef2f2" in html

    def test_start_has_no_type_badge(self):
        point = MapPoint(47.6, -122.3, "Seattle", MarkerKind.START, "Starting Point")
        assert "<span" not in popup_html(point)


class TestBuildRouteMap:
    """Tests for the folium map built from an itinerary."""

    def test_markers_and_route(self, itinerary):
        m = build_route_map(itinerary)

        markers = children_of_type(m, folium.CircleMarker)
        assert len(markers) == 7
        # Start marker is added last so it draws on top
        assert markers[-1].location == [47.6062, -122.3321]

        lines = children_of_type(m, folium.PolyLine)
        assert len(lines) == 1
        assert len(lines[0].locations) == 7
        assert lines[0].options["color"] == ROUTE_COLOR

        assert children_of_type(m, folium.map.FitBounds)

    def test_single_point_centers_on_it(self, response_payload):
        response_payload["days"] = [
            {"dayNumber": 1, "title": "Stay home", "totalDriveHours": 0, "segments": []}
        ]
        response_payload["totalDays"] = 1
        m = build_route_map(TripItinerary.model_validate(response_payload))

        assert m.location == [47.6062, -122.3321]
        assert len(children_of_type(m, folium.CircleMarker)) == 1
        assert children_of_type(m, folium.PolyLine) == []

    def test_nothing_to_plot(self, response_payload):
        response_payload["startLocation"] = None
        response_payload["days"] = [
            {"dayNumber": 1, "title": "Mystery day", "totalDriveHours": 2, "segments": [
                {"type": "DRIVE", "description": "Somewhere", "durationHours": 2},
            ]}
        ]
        m = build_route_map(TripItinerary.model_validate(response_payload))

        assert m.location == list(DEFAULT_CENTER)
        assert children_of_type(m, folium.CircleMarker) == []

    def test_map_renders(self, itinerary):
        html = build_route_map(itinerary).get_root().render()
        assert "basemaps.cartocdn.com" in html
