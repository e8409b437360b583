"""
Impact scenario inputs and the scenario runner, using Pydantic models.

The models validate caller input at the boundary; the numerical core in
astrodynamics, encounter and surface_effects assumes valid input and does
not re-check it.
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from .orbital_elements import OrbitalElements
from .encounter import EncounterResult, resolve_encounter
from .surface_effects import crater_profile, atmospheric_effects
from .assessment import (
    impactor_mass_kg, kinetic_energy_j, joules_to_megatons,
    threat_level, near_miss_threat, global_effects, warning_time_hours,
)
from .geodesy import approach_track
from .config import SimulationConfig, DEFAULT_CONFIG
from .vector_math import deg2rad

logger = logging.getLogger(__name__)

SIMULATION_VERSION = "2.0"


class OrbitRecord(BaseModel):
    """
    Keplerian elements as supplied by an ephemeris lookup (angles in degrees).
    """
    eccentricity: float = Field(..., ge=0.0, lt=1.0, description="Eccentricity, bound orbits only")
    semi_major_axis_au: float = Field(..., gt=0.0, description="Semi-major axis (AU)")
    inclination_deg: float = Field(..., ge=0.0, le=180.0, description="Inclination (deg)")
    longitude_ascending_node_deg: float = Field(..., description="Longitude of the ascending node (deg)")
    argument_perihelion_deg: float = Field(..., description="Argument of perihelion (deg)")
    mean_anomaly_deg: float = Field(..., description="Mean anomaly at epoch (deg)")
    epoch_jd: float = Field(..., gt=0.0, description="Epoch of the elements (JD)")
    mean_motion_deg_per_day: Optional[float] = Field(default=None, gt=0.0, description="Mean motion (deg/day)")

    def to_elements(self) -> OrbitalElements:
        return OrbitalElements(
            e=self.eccentricity,
            a=self.semi_major_axis_au,
            i=self.inclination_deg,
            Omega=self.longitude_ascending_node_deg,
            omega=self.argument_perihelion_deg,
            M0=self.mean_anomaly_deg,
            epoch_jd=self.epoch_jd,
            n=self.mean_motion_deg_per_day,
        )


class ImpactScenario(BaseModel):
    """
    A single impact simulation request.

    Either ``orbit`` (with an optional ``encounter_time``; now when omitted)
    or the direct-entry fields ``lat``, ``lng``, ``velocity_kms`` and
    ``impact_angle_deg`` must be given. ``burst_altitude_km`` and
    ``ejecta_volume_km3`` carry the outputs of external entry and ejecta
    models when available.
    """
    diameter_m: float = Field(..., description="Impactor diameter (m)")
    density_kg_m3: float = Field(..., description="Impactor bulk density (kg/m^3)")

    orbit: Optional[OrbitRecord] = Field(default=None, description="Orbital elements of the impactor")
    encounter_time: Optional[datetime] = Field(default=None, description="Encounter time (naive values are UTC)")

    lat: Optional[float] = Field(default=None, description="Impact latitude (deg)")
    lng: Optional[float] = Field(default=None, description="Impact longitude (deg)")
    velocity_kms: Optional[float] = Field(default=None, description="Impact speed (km/s)")
    impact_angle_deg: Optional[float] = Field(default=None, description="Impact angle from horizontal (deg)")
    azimuth_deg: float = Field(default=0.0, ge=0.0, lt=360.0, description="Approach azimuth, clockwise from north (deg)")

    ocean_depth_m: Optional[float] = Field(default=None, description="Water depth at the impact point (m)")
    burst_altitude_km: Optional[float] = Field(default=None, ge=0.0, description="Airburst altitude (km)")
    ejecta_volume_km3: Optional[float] = Field(default=None, ge=0.0, description="Ejecta volume (km^3)")

    @field_validator('diameter_m')
    @classmethod
    def validate_diameter(cls, v):
        if not 1.0 <= v <= 100_000.0:
            raise ValueError(f"diameter_m must be between 1 and 100000, got {v}")
        return v

    @field_validator('density_kg_m3')
    @classmethod
    def validate_density(cls, v):
        if not 100.0 <= v <= 10_000.0:
            raise ValueError(f"density_kg_m3 must be between 100 and 10000, got {v}")
        return v

    @model_validator(mode='after')
    def validate_direct_entry(self):
        if self.orbit is not None:
            return self

        missing = [name for name in ('lat', 'lng', 'velocity_kms', 'impact_angle_deg')
                   if getattr(self, name) is None]
        if missing:
            raise ValueError(f"Without an orbit, {', '.join(missing)} must be provided")
        if not 1.0 <= self.velocity_kms <= 100.0:
            raise ValueError(f"velocity_kms must be between 1 and 100, got {self.velocity_kms}")
        if not 5.0 <= self.impact_angle_deg <= 90.0:
            raise ValueError(f"impact_angle_deg must be between 5 and 90, got {self.impact_angle_deg}")
        if not (-90.0 <= self.lat <= 90.0 and -180.0 <= self.lng <= 180.0):
            raise ValueError(f"Invalid coordinates ({self.lat}, {self.lng})")
        return self

    def is_ocean_impact(self, threshold_m: float) -> bool:
        return self.ocean_depth_m is not None and self.ocean_depth_m > threshold_m

    def mass_kg(self) -> float:
        return impactor_mass_kg(self.diameter_m, self.density_kg_m3)


def run_scenario(scenario: ImpactScenario, config: SimulationConfig = DEFAULT_CONFIG) -> dict:
    """
    Run an impact scenario end to end.

    With orbital elements the encounter is resolved first; a miss yields a
    near-miss payload. An impact, or a direct-entry scenario, yields the
    energy, crater, atmospheric and threat results.

    Returns:
        JSON-ready dictionary
    """
    encounter = None
    if scenario.orbit is not None:
        logger.debug("Resolving encounter for %s at %s", scenario.orbit, scenario.encounter_time)
        encounter = resolve_encounter(
            scenario.orbit.to_elements(),
            scenario.encounter_time,
            tol=config.kepler_tol,
            max_iter=config.kepler_max_iter,
        )
        if not encounter.is_impact:
            return _near_miss_payload(scenario, encounter, config)
        geometry = encounter.geometry
        impact = (geometry.latitude_deg, geometry.longitude_deg, encounter.relative_velocity_kms,
                  geometry.impact_angle_deg, geometry.azimuth_deg)
    else:
        impact = (scenario.lat, scenario.lng, scenario.velocity_kms,
                  scenario.impact_angle_deg, scenario.azimuth_deg)

    return _impact_payload(scenario, impact, encounter, config)


def _impact_payload(scenario: ImpactScenario, impact: Tuple[float, float, float, float, float],
                    encounter: Optional[EncounterResult], config: SimulationConfig) -> dict:
    lat, lng, velocity_kms, angle_deg, azimuth_deg = impact
    mass = scenario.mass_kg()
    velocity_ms = velocity_kms * 1000.0
    energy_j = kinetic_energy_j(mass, velocity_ms)
    energy_mt = joules_to_megatons(energy_j)
    airburst = scenario.burst_altitude_km is not None and scenario.burst_altitude_km > 0.0
    ocean = scenario.is_ocean_impact(config.ocean_depth_threshold_m)

    results = {
        'mode': 'airburst' if airburst else 'ground',
        'energy_joules': energy_j,
        'energy_megatons_tnt': energy_mt,
        'final_velocity_kms': velocity_kms,
        'surviving_mass_kg': mass,
        'burst_alt_km': scenario.burst_altitude_km if airburst else 0.0,
    }

    ejecta_volume_km3 = scenario.ejecta_volume_km3
    if airburst:
        results.update(final_crater_d_m=0.0, crater_depth_m=0.0)
    else:
        target_density = config.water_density if ocean else config.rock_density
        crater = crater_profile(mass, velocity_ms, float(deg2rad(angle_deg)), target_density)
        results.update(
            target_density_kg_m3=target_density,
            transient_crater_d_m=crater.transient_diameter_m,
            final_crater_d_m=crater.final_diameter_m,
            crater_depth_m=crater.depth_m,
            crater_rim_height_m=crater.rim_height_m,
            crater_rim_radius_km=crater.rim_radius_km,
            central_peak_height_m=crater.central_peak_m,
        )
        if ejecta_volume_km3 is None:
            ejecta_volume_km3 = crater.bowl_volume_km3

    atmosphere = atmospheric_effects(energy_mt, results['burst_alt_km'], ejecta_volume_km3 or 0.0)
    results.update(atmosphere._asdict())
    results.update(
        threat_level=threat_level(energy_mt),
        global_effects=global_effects(
            energy_mt,
            nuclear_winter_risk=atmosphere.nuclear_winter_risk,
            ozone_depletion_percent=atmosphere.ozone_depletion_percent,
        ),
        warning_time_hours=round(warning_time_hours(velocity_kms, config.detection_range_au), 1),
    )

    logger.info("%s impact at (%.4f, %.4f): %.3g Mt, threat %s",
                results['mode'], lat, lng, energy_mt, results['threat_level'])

    return {
        'ok': True,
        'impact': True,
        'location': {
            'lat': round(lat, config.coordinate_decimals),
            'lng': round(lng, config.coordinate_decimals),
        },
        'velocity_kms': round(velocity_kms, config.distance_decimals),
        'impact_angle_deg': round(angle_deg, config.angle_decimals),
        'azimuth_deg': round(azimuth_deg, config.angle_decimals),
        'ocean_impact': ocean,
        'results': results,
        'entry_track': approach_track(
            lat, lng, azimuth_deg,
            length_m=config.track_length_m,
            steps=config.track_steps,
            altitude_step_km=config.track_altitude_step_km,
        ),
        'encounter': _encounter_payload(encounter, config),
        'metadata': _metadata(scenario, 'impact'),
    }


def _near_miss_payload(scenario: ImpactScenario, encounter: EncounterResult,
                       config: SimulationConfig) -> dict:
    miss_km = encounter.miss_distance_km
    potential_mt = joules_to_megatons(
        kinetic_energy_j(scenario.mass_kg(), encounter.relative_velocity_kms * 1000.0)
    )
    logger.info("Near miss: %.2f km from Earth's center", miss_km)
    return {
        'ok': True,
        'impact': False,
        'near_miss': True,
        'results': {
            'miss_distance_km': round(miss_km, config.distance_decimals),
            'relative_velocity_kms': round(encounter.relative_velocity_kms, config.distance_decimals),
            'encounter_time': encounter.encounter_time.isoformat(),
            'threat_level': near_miss_threat(miss_km),
            'diameter_m': scenario.diameter_m,
            'estimated_energy_mt': potential_mt,
        },
        'encounter': _encounter_payload(encounter, config),
        'metadata': _metadata(scenario, 'near_miss'),
    }


def _encounter_payload(encounter: Optional[EncounterResult], config: SimulationConfig) -> Optional[dict]:
    if encounter is None:
        return None
    return encounter.to_payload(
        distance_decimals=config.distance_decimals,
        angle_decimals=config.angle_decimals,
        coordinate_decimals=config.coordinate_decimals,
    )


def _metadata(scenario: ImpactScenario, simulation_type: str) -> dict:
    return {
        'simulation_version': SIMULATION_VERSION,
        'simulation_type': simulation_type,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'parameters': scenario.model_dump(mode='json', exclude_none=True),
    }
