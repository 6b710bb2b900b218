"""
Star chart projection.

Pure helpers that map 0-100 trajectory coordinates into a drawing extent.
The full chart is 600 units wide; when a milestone is focused, a 200 unit
window is centered on it.
"""

from astrograph.core.profile.models import COORDINATE_MAX, Coordinate

CHART_EXTENT = 600.0
CHART_HEIGHT = 350.0
FOCUS_SIZE = 200.0


def scale(value: float, extent: float = CHART_EXTENT) -> float:
    """Scale a 0-100 coordinate component into [0, extent]."""
    return value / COORDINATE_MAX * extent


def project(coord: Coordinate, columns: int, rows: int) -> tuple[int, int]:
    """
    Project a coordinate onto a character grid.

    Returns:
        (column, row), each clamped to the grid
    """
    if columns < 1 or rows < 1:
        raise ValueError(f"Grid must be at least 1x1, got {columns}x{rows}")
    col = round(scale(coord.x, columns - 1))
    row = round(scale(coord.y, rows - 1))
    return min(max(col, 0), columns - 1), min(max(row, 0), rows - 1)


def trajectory_path(coords: tuple[Coordinate, ...] | list[Coordinate]) -> str:
    """
    SVG-style path data through the scaled coordinates.

    Example:
        >>> trajectory_path([Coordinate(x=0, y=0), Coordinate(x=50, y=100)])
        'M 0 0 L 300 600'
    """
    if not coords:
        return ""
    first, *rest = coords
    parts = [f"M {_fmt(scale(first.x))} {_fmt(scale(first.y))}"]
    parts.extend(f"L {_fmt(scale(c.x))} {_fmt(scale(c.y))}" for c in rest)
    return " ".join(parts)


def focus_window(coord: Coordinate | None) -> tuple[float, float, float, float]:
    """
    Viewbox (min_x, min_y, width, height) for the chart.

    With no focus the whole chart is shown; otherwise a FOCUS_SIZE square
    centered on the coordinate.
    """
    if coord is None:
        return (0.0, 0.0, CHART_EXTENT, CHART_HEIGHT)
    half = FOCUS_SIZE / 2
    return (scale(coord.x) - half, scale(coord.y) - half, FOCUS_SIZE, FOCUS_SIZE)


def _fmt(value: float) -> str:
    return f"{value:g}"
