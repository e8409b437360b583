"""Tests for Earth encounter classification and impact geometry"""
import unittest
from datetime import datetime, timezone

import numpy as np
import jax.numpy as jnp

from neoimpact import (
    StateVector, OrbitalElements, EARTH_RADIUS_KM, J2000_JD,
    resolve_states, resolve_encounter, impact_geometry, propagate_earth, gmst_rad,
)
from neoimpact.encounter import impact_angle, approach_azimuth, earth_fixed_lat_lon


def earth_at_origin(jd=J2000_JD):
    return StateVector(r=jnp.zeros(3), v=jnp.zeros(3), jd=jd)


def body_at(position, velocity, jd=J2000_JD):
    return StateVector(r=jnp.array(position, dtype=float), v=jnp.array(velocity, dtype=float), jd=jd)


class TestImpactClassification(unittest.TestCase):

    def test_boundary_is_inclusive(self):
        """A body exactly one Earth radius away is an impact"""
        result = resolve_states(body_at([EARTH_RADIUS_KM, 0.0, 0.0], [-10.0, 5.0, 0.0]),
                                earth_at_origin(), J2000_JD)
        self.assertEqual(result.miss_distance_km, EARTH_RADIUS_KM)
        self.assertTrue(result.is_impact)
        self.assertIsNotNone(result.geometry)

    def test_just_outside_is_miss(self):
        """A body a little beyond one Earth radius misses"""
        result = resolve_states(body_at([EARTH_RADIUS_KM + 1e-6, 0.0, 0.0], [-10.0, 5.0, 0.0]),
                                earth_at_origin(), J2000_JD)
        self.assertFalse(result.is_impact)
        self.assertIsNone(result.geometry)

    def test_relative_quantities(self):
        """Relative position and velocity are body minus Earth"""
        earth = StateVector(r=jnp.array([1.0e8, 2.0e7, 0.0]), v=jnp.array([-5.0, 29.0, 0.0]), jd=J2000_JD)
        neo = body_at([1.0e8 + 3.0e4, 2.0e7 + 4.0e4, 0.0], [-5.0, 29.0, 12.0])
        result = resolve_states(neo, earth, J2000_JD)
        np.testing.assert_allclose(np.asarray(result.relative_position), [3.0e4, 4.0e4, 0.0], rtol=1e-9)
        np.testing.assert_allclose(np.asarray(result.relative_velocity), [0.0, 0.0, 12.0], atol=1e-12)
        self.assertAlmostEqual(result.miss_distance_km, 5.0e4, places=4)
        self.assertAlmostEqual(result.relative_velocity_kms, 12.0, places=10)
        self.assertFalse(result.is_impact)

    def test_invariant_over_many_distances(self):
        """is_impact is exactly miss_distance_km <= Earth radius, geometry present iff impact"""
        direction = np.array([0.3, -0.5, 0.8]) / np.linalg.norm([0.3, -0.5, 0.8])
        for distance in [0.0, 100.0, 6000.0, 6370.9, 6371.1, 1.0e4, 3.8e5]:
            result = resolve_states(body_at(direction * distance, [1.0, 2.0, -3.0]), earth_at_origin(), J2000_JD)
            self.assertEqual(result.is_impact, result.miss_distance_km <= EARTH_RADIUS_KM)
            self.assertEqual(result.geometry is not None, result.is_impact)


class TestImpactGeometry(unittest.TestCase):

    def test_impact_angle_always_clamped(self):
        """Impact angle stays in [5, 90] for arbitrary geometry"""
        rng = np.random.default_rng(42)
        for _ in range(50):
            position = rng.normal(size=3)
            velocity = rng.normal(size=3) * 20.0
            position *= 6000.0 / np.linalg.norm(position)
            geometry = impact_geometry(jnp.array(position), jnp.array(velocity), J2000_JD + rng.uniform(0, 1000))
            self.assertGreaterEqual(geometry.impact_angle_deg, 5.0)
            self.assertLessEqual(geometry.impact_angle_deg, 90.0)
            self.assertGreaterEqual(geometry.azimuth_deg, 0.0)
            self.assertLess(geometry.azimuth_deg, 360.0)
            self.assertGreaterEqual(geometry.longitude_deg, -180.0)
            self.assertLess(geometry.longitude_deg, 180.0)

    def test_impact_angle_measured_from_position_normal(self):
        """90 minus the angle between velocity and the impact-point normal"""
        normal = jnp.array([1.0, 0.0, 0.0])
        # Velocity along the normal: 0 deg from it, so 90
        self.assertEqual(impact_angle(jnp.array([15.0, 0.0, 0.0]), normal), 90.0)
        # 60 deg from the normal gives 30
        velocity = jnp.array([np.cos(np.deg2rad(60.0)), np.sin(np.deg2rad(60.0)), 0.0])
        self.assertAlmostEqual(impact_angle(velocity, normal), 30.0, places=10)
        # Velocity against the normal falls below 5 and is clamped
        self.assertEqual(impact_angle(jnp.array([-15.0, 0.0, 0.0]), normal), 5.0)

    def test_vertical_velocity_has_zero_azimuth(self):
        """A purely radial relative velocity has no horizontal part, so azimuth is 0"""
        position = np.array([2000.0, -3000.0, 4000.0])
        normal = jnp.array(position / np.linalg.norm(position))
        for sign in (1.0, -1.0):
            azimuth = approach_azimuth(jnp.array(sign * 12.0 * position / np.linalg.norm(position)), normal, 10.0, 20.0)
            self.assertEqual(azimuth, 0.0)

    def test_azimuth_north_and_east(self):
        """Horizontal motion toward north reads 0 deg, toward east 90 deg"""
        # Impact point on the equator at longitude 0 in the basis frame
        normal = jnp.array([1.0, 0.0, 0.0])
        self.assertAlmostEqual(approach_azimuth(jnp.array([0.0, 0.0, 1.0]), normal, 0.0, 0.0), 0.0, places=10)
        self.assertAlmostEqual(approach_azimuth(jnp.array([0.0, 1.0, 0.0]), normal, 0.0, 0.0), 90.0, places=10)
        self.assertAlmostEqual(approach_azimuth(jnp.array([0.0, 0.0, -1.0]), normal, 0.0, 0.0), 180.0, places=10)
        self.assertAlmostEqual(approach_azimuth(jnp.array([0.0, -1.0, 0.0]), normal, 0.0, 0.0), 270.0, places=10)

    def test_zero_relative_position(self):
        """A body at the Earth's center does not divide by zero"""
        result = resolve_states(body_at([0.0, 0.0, 0.0], [0.0, 0.0, -20.0]), earth_at_origin(), J2000_JD)
        self.assertTrue(result.is_impact)
        self.assertEqual(result.geometry.latitude_deg, 0.0)
        self.assertEqual(result.geometry.impact_angle_deg, 5.0)
        self.assertTrue(np.isfinite(result.geometry.longitude_deg))
        self.assertTrue(0.0 <= result.geometry.azimuth_deg < 360.0)

    def test_earth_fixed_rotation_uses_gmst(self):
        """The inertial x axis lies at longitude -GMST"""
        jd = J2000_JD + 0.3
        lat, lng = earth_fixed_lat_lon(jnp.array([1.0, 0.0, 0.0]), jd)
        gmst_deg = np.rad2deg(float(gmst_rad(jd)))
        expected = ((-gmst_deg + 180.0) % 360.0) - 180.0
        self.assertAlmostEqual(lat, 0.0, places=12)
        self.assertAlmostEqual(lng, expected, places=8)

        lat, _ = earth_fixed_lat_lon(jnp.array([0.0, 0.0, 1.0]), jd)
        self.assertAlmostEqual(lat, 90.0, places=10)

    def test_gmst_at_j2000(self):
        """GMST at J2000 is 280.46061837 deg"""
        self.assertAlmostEqual(np.rad2deg(float(gmst_rad(J2000_JD))), 280.46061837, places=8)


class TestResolveEncounter(unittest.TestCase):

    def test_encounter_with_earth_like_orbit(self):
        """A body sharing the Earth's circular orbit and phase is an impact"""
        when = datetime(2030, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
        jd = 2440587.5 + when.timestamp() / 86400.0
        L_deg = (100.46435 + 0.985609101 * (jd - J2000_JD)) % 360.0
        elements = OrbitalElements(e=0.0, a=1.0, i=0.0, Omega=0.0, omega=0.0, M0=L_deg, epoch_jd=jd)

        result = resolve_encounter(elements, when)
        self.assertTrue(result.is_impact)
        self.assertEqual(result.encounter_time, when)
        self.assertAlmostEqual(result.encounter_jd, jd, places=8)
        self.assertLess(result.miss_distance_km, 1e-3)
        np.testing.assert_allclose(np.asarray(result.earth.r), np.asarray(propagate_earth(result.encounter_jd).r), rtol=1e-14)

    def test_distant_body_misses(self):
        """A body on the far side of the Sun misses by about 2 AU"""
        elements = OrbitalElements(e=0.0, a=1.0, i=0.0, Omega=0.0, omega=0.0, M0=280.46435, epoch_jd=J2000_JD)
        result = resolve_encounter(elements, 946728000.0)  # J2000 in unix seconds
        self.assertFalse(result.is_impact)
        self.assertIsNone(result.geometry)
        self.assertAlmostEqual(result.miss_distance_km / 149597870.7, 2.0, places=6)

    def test_payload_rounding(self):
        """Scalars are rounded only in the payload"""
        result = resolve_states(body_at([3000.0, 4000.0, 1234.5678], [-7.123456, 1.0, 2.0]),
                                earth_at_origin(), J2000_JD)
        payload = result.to_payload()
        self.assertTrue(payload['impact'])
        self.assertEqual(payload['miss_distance_km'], round(result.miss_distance_km, 2))
        self.assertEqual(payload['velocity_kms'], round(result.relative_velocity_kms, 2))
        self.assertEqual(payload['lat'], round(result.geometry.latitude_deg, 4))
        self.assertEqual(payload['impact_angle_deg'], round(result.geometry.impact_angle_deg, 2))
        self.assertNotEqual(result.miss_distance_km, payload['miss_distance_km'])
        self.assertEqual(len(payload['relative_position_km']), 3)


if __name__ == '__main__':
    unittest.main()
