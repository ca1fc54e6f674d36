# This file holds the great-circle distance used by the spatial search path.
# The same haversine formula runs in Python, inside SQLite as a registered function,
# and as plain trigonometric SQL on PostgreSQL, so every backend ranks by identical distances.

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement
from sqlalchemy.types import Float

EARTH_RADIUS_METERS = 6_371_000
METERS_PER_DEGREE_LATITUDE = EARTH_RADIUS_METERS * math.pi / 180
SQLITE_DISTANCE_FUNCTION = "haversine_m"


@dataclass(frozen=True)
class GeoPoint:
    longitude: float
    latitude: float

    def __post_init__(self) -> None:
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError("longitude must be between -180 and 180")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError("latitude must be between -90 and 90")


def haversine_distance_meters(
    start_longitude: float,
    start_latitude: float,
    end_longitude: float,
    end_latitude: float,
) -> float:
    start_lat = math.radians(start_latitude)
    end_lat = math.radians(end_latitude)
    delta_lat = math.radians(end_latitude - start_latitude)
    delta_lng = math.radians(end_longitude - start_longitude)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(start_lat) * math.cos(end_lat) * math.sin(delta_lng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


def latitude_window(origin: GeoPoint, radius_meters: float) -> tuple[float, float]:
    """Latitude band that contains every point within `radius_meters` of `origin`."""

    # Meridian arcs are the shortest path per degree of latitude, so the band is a strict superset.
    delta = radius_meters / METERS_PER_DEGREE_LATITUDE + 1e-9
    return max(-90.0, origin.latitude - delta), min(90.0, origin.latitude + delta)


class great_circle_meters(FunctionElement):
    """SQL expression: distance in meters between (lon1, lat1) and (lon2, lat2)."""

    type = Float()
    name = "great_circle_meters"
    inherit_cache = True


@compiles(great_circle_meters)
def _compile_registered_function(element: great_circle_meters, compiler: Any, **kw: Any) -> str:
    return f"{SQLITE_DISTANCE_FUNCTION}({compiler.process(element.clauses, **kw)})"


@compiles(great_circle_meters, "postgresql")
def _compile_postgresql(element: great_circle_meters, compiler: Any, **kw: Any) -> str:
    lon1, lat1, lon2, lat2 = (compiler.process(arg, **kw) for arg in element.clauses)
    a_term = (
        f"power(sin(radians({lat2} - {lat1}) / 2), 2) "
        f"+ cos(radians({lat1})) * cos(radians({lat2})) "
        f"* power(sin(radians({lon2} - {lon1}) / 2), 2)"
    )
    return f"(2 * {EARTH_RADIUS_METERS} * asin(least(1.0, sqrt({a_term}))))"


def register_sqlite_functions(dbapi_connection: Any, _connection_record: Any = None) -> None:
    """`connect` event hook that exposes the haversine function to SQLite."""

    dbapi_connection.create_function(
        SQLITE_DISTANCE_FUNCTION,
        4,
        haversine_distance_meters,
        deterministic=True,
    )
