from __future__ import annotations

import html
import math
from dataclasses import dataclass
from typing import Optional

from dashboard.constants import RING_COLOR, RING_DIAMETERS, RING_THICKNESS, RING_TRACK_COLOR


@dataclass(frozen=True)
class Arc:
    diameter: int
    thickness: float
    radius: float
    circumference: float
    dash_offset: float
    fraction: float


@dataclass(frozen=True)
class ProgressRing:
    value: float
    max_value: float = 100
    size: str = "md"
    thickness: Optional[float] = None
    color: str = RING_COLOR
    track_color: str = RING_TRACK_COLOR


def compute_arc(value, max_value=100, size="md", thickness=None) -> Arc:
    """Stroke geometry for a circular progress indicator.

    ``value`` is clamped into ``[0, max_value]``; a ``max_value`` of zero
    yields an empty arc (the dash offset equals the full circumference).
    """
    if size not in RING_DIAMETERS:
        raise ValueError(f"Unknown progress ring size: {size!r}")
    diameter = RING_DIAMETERS[size]
    stroke = thickness or RING_THICKNESS[size]
    clamped = max(0, min(value, max_value))
    fraction = clamped / max_value if max_value > 0 else 0
    radius = (diameter - stroke) / 2
    circumference = 2 * math.pi * radius
    return Arc(
        diameter=diameter,
        thickness=stroke,
        radius=radius,
        circumference=circumference,
        dash_offset=circumference * (1 - fraction),
        fraction=fraction,
    )


def render_progress_ring(ring: ProgressRing, label: str = "") -> str:
    arc = compute_arc(ring.value, ring.max_value, ring.size, ring.thickness)
    center = arc.diameter / 2
    circle_attrs = (
        f"cx='{center}' cy='{center}' r='{arc.radius:.3f}' "
        f"stroke-width='{arc.thickness}' fill='transparent'"
    )
    return (
        f"<div class='progress-ring' style='position:relative;width:{arc.diameter}px;"
        f"height:{arc.diameter}px;margin:0 auto;'>"
        f"<svg width='{arc.diameter}' height='{arc.diameter}' style='transform:rotate(-90deg);'>"
        f"<circle {circle_attrs} stroke='{html.escape(ring.track_color)}'/>"
        f"<circle {circle_attrs} stroke='{html.escape(ring.color)}' "
        f"stroke-dasharray='{arc.circumference:.3f}' stroke-dashoffset='{arc.dash_offset:.3f}' "
        "stroke-linecap='round'/>"
        "</svg>"
        "<div style='position:absolute;inset:0;display:flex;align-items:center;"
        "justify-content:center;font-weight:600;'>"
        f"{html.escape(label)}"
        "</div>"
        "</div>"
    )
