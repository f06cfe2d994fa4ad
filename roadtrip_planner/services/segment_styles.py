"""Visual style per segment type, shared by the timeline and the map."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from roadtrip_planner.models import RouteSegment


class MarkerKind(str, Enum):
    START = "START"
    DRIVE = "DRIVE"
    VISIT = "VISIT"
    OVERNIGHT = "OVERNIGHT"
    BREAK = "BREAK"


@dataclass(frozen=True)
class SegmentStyle:
    label: str
    icon: str
    color: str
    background: str
    radius: int
    z_order: int


DEFAULT_STYLE = SegmentStyle("Stop", "📍", "#64748b", "#f8fafc", 6, 0)

SEGMENT_STYLES = {
    MarkerKind.START: SegmentStyle("Start", "🏁", "#10b981", "#ecfdf5", 9, 1000),
    MarkerKind.VISIT: SegmentStyle("Visit", "📍", "#ef4444", "#fef2f2", 8, 500),
    MarkerKind.OVERNIGHT: SegmentStyle("Overnight", "🌙", "#6366f1", "#eef2ff", 8, 400),
    MarkerKind.BREAK: SegmentStyle("Break", "☕", "#f59e0b", "#fff7ed", 5, 0),
    MarkerKind.DRIVE: SegmentStyle("Drive", "🚗", "#3b82f6", "#eff6ff", 6, 0),
}


def style_for(kind) -> SegmentStyle:
    """Look up the style for a MarkerKind, SegmentType or their string value."""
    try:
        return SEGMENT_STYLES[MarkerKind(getattr(kind, "value", kind))]
    except (ValueError, KeyError):
        return DEFAULT_STYLE


def format_duration(hours: float) -> str:
    if hours < 1:
        return f"{round(hours * 60)} min"
    return f"{hours:g} hr"


def segment_heading(segment: RouteSegment) -> str:
    return segment.location_name or segment.description


def segment_subtitle(segment: RouteSegment) -> Optional[str]:
    """The description, when the heading shows something else."""
    if segment.location_name and segment.description != segment.location_name:
        return segment.description
    return None
