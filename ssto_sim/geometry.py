"""
SSTO Spaceplane Simulation - Geometry Extraction

This module turns the three hull curve descriptors into a 3D panel mesh:
- 41 ribs along the body, each a scaled copy of the unit cross-section
- One flat quadrilateral panel per rib pair and circumferential step
- Panel normal / area / centroid and region classification
- Derived scalars (wetted and planform area, span, aspect ratio, volume,
  fineness, thickness ratio, sweep, nose radius, area distribution)

Coordinates: x aft from the nose (m), y spanwise, z up.
Panel data is also stored as contiguous numpy arrays so the aerodynamic
solver can evaluate all panels without Python-level loops.
"""

from collections import OrderedDict
from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from typing import NamedTuple, Optional, Tuple
import logging

import numpy as np

from . import constants as C
from .curves import CrossSection, SideProfile, TopViewPlanform

logger = logging.getLogger(__name__)


class PanelRegion(Enum):
    UPPER_SURFACE = "upper"
    LOWER_SURFACE = "lower"
    NOSE_CAP = "nose"
    TAIL = "tail"
    LEADING_EDGE = "leading_edge"


@dataclass(frozen=True, eq=False)
class SurfacePanel:
    """Flat quadrilateral panel (meters)."""
    vertices: np.ndarray  # (4, 3)
    normal: np.ndarray  # unit outward normal
    centroid: np.ndarray
    area: float  # m^2
    region: PanelRegion


class AreaBreakdown(NamedTuple):
    """Wetted area totals (m^2) by thermal-protection zone."""
    nose: float
    leading_edge: float
    upper: float
    lower: float
    inlet: float
    tail: float

    @property
    def total(self) -> float:
        return sum(self)


@dataclass(frozen=True, eq=False)
class AerodynamicGeometry:
    """Panel set plus derived scalar properties for one hull snapshot."""
    panels: Tuple[SurfacePanel, ...]
    normals: np.ndarray  # (N, 3)
    areas: np.ndarray  # (N,)
    centroids: np.ndarray  # (N, 3)
    region_codes: np.ndarray  # (N,) PanelRegion values
    mesh: np.ndarray  # (ribs, points, 3)

    aircraft_length: float
    wetted_area: float
    planform_area: float
    wingspan: float
    aspect_ratio: float
    volume: float
    fineness_ratio: float
    thickness_ratio: float
    leading_edge_sweep: float  # degrees
    nose_radius: float  # m
    volume_distribution: np.ndarray  # cross-section areas (m^2) at equally spaced stations
    max_cross_section_area: float
    length_to_diameter: float
    engine_span: Tuple[float, float]  # inlet start / nozzle start as length fractions

    @property
    def panel_count(self) -> int:
        return len(self.areas)

    def region_mask(self, region: PanelRegion) -> np.ndarray:
        return self.region_codes == region.value

    def area_breakdown(self) -> AreaBreakdown:
        """
        Wetted area per thermal zone.

        Lower-surface panels between the inlet lip and the nozzle start are
        counted as inlet/engine area rather than plain bottom.
        """
        frac = self.centroids[:, 0] / max(self.aircraft_length, 1e-9)
        lower = self.region_mask(PanelRegion.LOWER_SURFACE)
        inlet = lower & (frac >= self.engine_span[0]) & (frac <= self.engine_span[1])

        def total(mask):
            return float(np.sum(self.areas[mask]))

        return AreaBreakdown(
            nose=total(self.region_mask(PanelRegion.NOSE_CAP)),
            leading_edge=total(self.region_mask(PanelRegion.LEADING_EDGE)),
            upper=total(self.region_mask(PanelRegion.UPPER_SURFACE)),
            lower=total(lower & ~inlet),
            inlet=total(inlet),
            tail=total(self.region_mask(PanelRegion.TAIL)),
        )

    def summary(self) -> str:
        return (f"Panels: {self.panel_count}, wetted {self.wetted_area:.1f} m², "
                f"planform {self.planform_area:.1f} m², span {self.wingspan:.1f} m, "
                f"AR {self.aspect_ratio:.2f}, volume {self.volume:.1f} m³, "
                f"fineness {self.fineness_ratio:.2f}")


# =============================================================================
# MESH CONSTRUCTION
# =============================================================================

def _canvas_extent(profile: SideProfile, planform: TopViewPlanform) -> Tuple[float, float]:
    start_x = min(planform.nose_tip[0], profile.front_start[0])
    end_x = max(planform.tail_left[0], profile.exhaust_end[0])
    return start_x, max(end_x - start_x, 1e-6)


def _section_at(x: float, unit: np.ndarray, profile: SideProfile,
                planform: TopViewPlanform) -> Tuple[np.ndarray, np.ndarray, float]:
    """Scaled cross-section (canvas units) at longitudinal canvas position x."""
    half_width = max(C.DIMENSION_FLOOR, planform.half_width_at(x))
    top, bottom = profile.heights_at(x)
    height = max(C.DIMENSION_FLOOR, top - bottom)
    z_center = 0.5 * (top + bottom)
    y = unit[:, 0] * half_width
    z = z_center + unit[:, 1] * height * 0.5
    return y, z, z_center


def _shoelace(y: np.ndarray, z: np.ndarray) -> float:
    return 0.5 * abs(float(np.dot(y, np.roll(z, -1)) - np.dot(np.roll(y, -1), z)))


def compute_volume_distribution(profile: SideProfile, planform: TopViewPlanform,
                                cross_section: CrossSection,
                                stations: int = C.VOLUME_STATIONS,
                                steps: int = 10) -> np.ndarray:
    """Cross-sectional area (m^2) at equally spaced stations nose to tail (area-rule input)."""
    start_x, canvas_length = _canvas_extent(profile, planform)
    mpu = planform.aircraft_length / canvas_length
    unit = np.asarray(cross_section.unit_shape(steps), dtype=float)

    areas = np.empty(stations)
    for i in range(stations):
        x = start_x + canvas_length * i / (stations - 1)
        y, z, _ = _section_at(x, unit, profile, planform)
        areas[i] = _shoelace(y * mpu, z * mpu)
    return areas


def _classify(frac: np.ndarray, nz: np.ndarray) -> np.ndarray:
    codes = np.full(frac.shape, PanelRegion.LEADING_EDGE.value, dtype=object)
    codes[nz > C.NORMAL_Z_THRESHOLD] = PanelRegion.UPPER_SURFACE.value
    codes[nz < -C.NORMAL_Z_THRESHOLD] = PanelRegion.LOWER_SURFACE.value
    codes[frac > C.TAIL_FRACTION] = PanelRegion.TAIL.value
    codes[frac < C.NOSE_FRACTION] = PanelRegion.NOSE_CAP.value
    return codes


def extract_geometry(profile: SideProfile, planform: TopViewPlanform,
                     cross_section: CrossSection, steps: int = C.SPLINE_STEPS,
                     num_ribs: int = C.NUM_RIBS) -> AerodynamicGeometry:
    """
    Build the panel mesh and derived properties for a hull.

    Args:
        profile: Side profile descriptor
        planform: Top-view planform (carries aircraft_length in meters)
        cross_section: Cross-section spline descriptor
        steps: Spline samples per cross-section span
        num_ribs: Number of ribs (panels span num_ribs - 1 intervals)

    Returns:
        AerodynamicGeometry
    """
    if planform.aircraft_length <= 0.0:
        raise ValueError(f"aircraft_length must be positive, got {planform.aircraft_length}")

    start_x, canvas_length = _canvas_extent(profile, planform)
    length = planform.aircraft_length
    mpu = length / canvas_length
    unit = np.asarray(cross_section.unit_shape(steps), dtype=float)
    n_points = len(unit)

    mesh = np.empty((num_ribs, n_points, 3))
    rib_centers = np.empty(num_ribs)
    rib_areas = np.empty(num_ribs)
    for i in range(num_ribs):
        x = start_x + canvas_length * i / (num_ribs - 1)
        y, z, z_center = _section_at(x, unit, profile, planform)
        mesh[i, :, 0] = (x - start_x) * mpu
        mesh[i, :, 1] = y * mpu
        mesh[i, :, 2] = z * mpu
        rib_centers[i] = z_center * mpu
        rib_areas[i] = _shoelace(mesh[i, :, 1], mesh[i, :, 2])

    # Quads between consecutive ribs, wrapping around the circumference
    v0 = mesh[:-1]
    v1 = np.roll(mesh[:-1], -1, axis=1)
    v2 = np.roll(mesh[1:], -1, axis=1)
    v3 = mesh[1:]
    cross = np.cross(v2 - v0, v3 - v1).reshape(-1, 3)
    cross_norm = np.linalg.norm(cross, axis=1)
    areas = 0.5 * cross_norm

    normals = np.tile(np.array([0.0, 0.0, 1.0]), (len(areas), 1))
    valid = cross_norm > 0.001
    normals[valid] = cross[valid] / cross_norm[valid, None]

    vertices = np.stack([v0, v1, v2, v3], axis=2).reshape(-1, 4, 3)
    centroids = vertices.mean(axis=1)

    frac = centroids[:, 0] / length
    region_codes = _classify(frac, normals[:, 2])

    panels = tuple(
        SurfacePanel(vertices[k], normals[k], centroids[k], float(areas[k]),
                     PanelRegion(region_codes[k]))
        for k in range(len(areas))
    )

    # Derived scalars
    wetted_area = float(np.sum(areas))
    top_mask = (region_codes == PanelRegion.UPPER_SURFACE.value) | \
               (region_codes == PanelRegion.NOSE_CAP.value)
    planform_area = max(1.0, float(np.sum(areas[top_mask] * np.abs(normals[top_mask, 2]))))
    wingspan = max(C.DIMENSION_FLOOR, 2.0 * float(np.max(np.abs(mesh[:, :, 1]))))
    aspect_ratio = wingspan ** 2 / max(1.0, planform_area)

    stations_x = mesh[:, 0, 0]
    volume = float(np.sum(0.5 * (rib_areas[1:] + rib_areas[:-1]) * np.diff(stations_x)))
    equivalent_diameter = np.sqrt(4.0 * volume / np.pi)
    fineness_ratio = length / max(0.1, equivalent_diameter)

    thickness_ratio = _thickness_ratio(centroids, length)
    sweep = np.degrees(np.arctan2(abs(planform.mid_left[1]),
                                  max(0.1, planform.mid_left[0] - planform.nose_tip[0])))
    nose_radius = _nose_radius(mesh, rib_centers, region_codes, n_points)

    volume_distribution = compute_volume_distribution(profile, planform, cross_section)
    max_area = float(np.max(volume_distribution)) if len(volume_distribution) else 1.0
    length_to_diameter = length / max(0.1, 2.0 * np.sqrt(max_area / np.pi))

    engine_span = ((profile.front_end[0] - start_x) / canvas_length,
                   (profile.engine_end[0] - start_x) / canvas_length)

    geometry = AerodynamicGeometry(
        panels=panels,
        normals=np.ascontiguousarray(normals),
        areas=np.ascontiguousarray(areas),
        centroids=np.ascontiguousarray(centroids),
        region_codes=region_codes,
        mesh=mesh,
        aircraft_length=float(length),
        wetted_area=wetted_area,
        planform_area=planform_area,
        wingspan=wingspan,
        aspect_ratio=float(aspect_ratio),
        volume=volume,
        fineness_ratio=float(fineness_ratio),
        thickness_ratio=thickness_ratio,
        leading_edge_sweep=float(sweep),
        nose_radius=nose_radius,
        volume_distribution=volume_distribution,
        max_cross_section_area=max_area,
        length_to_diameter=float(length_to_diameter),
        engine_span=engine_span,
    )
    logger.debug(geometry.summary())
    return geometry


def _thickness_ratio(centroids: np.ndarray, length: float) -> float:
    ratios = []
    for station in (0.25, 0.50, 0.75):
        near = np.abs(centroids[:, 0] - station * length) < 0.05 * length
        if not np.any(near):
            continue
        height = float(np.ptp(centroids[near, 2]))
        width = float(np.ptp(centroids[near, 1]))
        if width > 0.1:
            ratios.append(height / width)
    return float(np.mean(ratios)) if ratios else 0.10


def _nose_radius(mesh: np.ndarray, rib_centers: np.ndarray, region_codes: np.ndarray,
                 n_points: int) -> float:
    """Mean radial distance of nose-cap vertices from the local body axis."""
    intervals = np.nonzero(region_codes == PanelRegion.NOSE_CAP.value)[0] // n_points
    if len(intervals) == 0:
        return 0.5
    ribs = np.unique(np.concatenate([intervals, intervals + 1]))
    y = mesh[ribs, :, 1]
    dz = mesh[ribs, :, 2] - rib_centers[ribs, None]
    radius = float(np.mean(np.sqrt(y * y + dz * dz)))
    return radius if radius > 0.0 else 0.5


# =============================================================================
# MEMOIZATION
# =============================================================================

def _freeze(value):
    if is_dataclass(value):
        return (type(value).__name__,) + tuple(_freeze(getattr(value, f.name)) for f in fields(value))
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


class GeometryCache:
    """
    Memoizes extract_geometry keyed on descriptor values.

    Any change to a descriptor (including aircraft_length) produces a new key,
    so stale geometry is never returned.
    """

    def __init__(self, max_entries: int = 16):
        self.max_entries = max_entries
        self._entries = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, profile: SideProfile, planform: TopViewPlanform,
            cross_section: CrossSection, steps: int = C.SPLINE_STEPS,
            num_ribs: int = C.NUM_RIBS) -> AerodynamicGeometry:
        key = (_freeze(profile), _freeze(planform), _freeze(cross_section), steps, num_ribs)
        if key in self._entries:
            self.hits += 1
            self._entries.move_to_end(key)
            return self._entries[key]

        self.misses += 1
        geometry = extract_geometry(profile, planform, cross_section, steps, num_ribs)
        self._entries[key] = geometry
        if len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
        return geometry

    def clear(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


_default_cache = GeometryCache()


def get_geometry(profile: Optional[SideProfile] = None,
                 planform: Optional[TopViewPlanform] = None,
                 cross_section: Optional[CrossSection] = None,
                 steps: int = C.SPLINE_STEPS,
                 num_ribs: int = C.NUM_RIBS) -> AerodynamicGeometry:
    """Cached geometry for the given descriptors (stock hull for any omitted)."""
    return _default_cache.get(profile or SideProfile.default(),
                              planform or TopViewPlanform.default(),
                              cross_section or CrossSection.default(),
                              steps, num_ribs)
