"""Tests for crater and atmospheric effect scaling"""
import unittest

import numpy as np

from neoimpact import crater_profile, atmospheric_effects, ROCK_DENSITY, WATER_DENSITY


class TestCraterProfile(unittest.TestCase):

    def test_vertical_impact_into_rock(self):
        """Transient diameter is 1.8 * KE^0.25 and the final crater 1.25 times that"""
        mass, velocity = 1.0e9, 20000.0
        profile = crater_profile(mass, velocity, np.pi / 2, ROCK_DENSITY)

        expected_transient = 1.8 * (0.5 * mass * velocity**2)**0.25
        self.assertAlmostEqual(profile.transient_diameter_m, expected_transient, delta=1e-9 * expected_transient)
        self.assertAlmostEqual(profile.final_diameter_m, 1.25 * profile.transient_diameter_m,
                               delta=1e-9 * expected_transient)
        self.assertAlmostEqual(profile.depth_m, 0.2 * profile.final_diameter_m, places=9)
        self.assertAlmostEqual(profile.rim_height_m, 0.04 * profile.final_diameter_m, places=9)
        self.assertAlmostEqual(profile.central_peak_m, 0.05 * profile.final_diameter_m, places=9)
        self.assertAlmostEqual(profile.rim_radius_km, profile.final_diameter_m / 2000.0, places=12)

    def test_oblique_impact_uses_normal_velocity(self):
        """A 30 deg impact excavates like a vertical one at half the speed"""
        oblique = crater_profile(1.0e9, 20000.0, np.deg2rad(30.0), ROCK_DENSITY)
        vertical = crater_profile(1.0e9, 10000.0, np.pi / 2, ROCK_DENSITY)
        self.assertAlmostEqual(oblique.final_diameter_m, vertical.final_diameter_m,
                               delta=1e-9 * vertical.final_diameter_m)

    def test_water_target_gives_smaller_crater(self):
        rock = crater_profile(1.0e10, 18000.0, np.deg2rad(45.0), ROCK_DENSITY)
        water = crater_profile(1.0e10, 18000.0, np.deg2rad(45.0), WATER_DENSITY)
        self.assertAlmostEqual(water.transient_diameter_m, rock.transient_diameter_m, places=6)
        self.assertAlmostEqual(water.final_diameter_m / rock.final_diameter_m, WATER_DENSITY / ROCK_DENSITY,
                               places=12)

    def test_density_factor_is_clamped(self):
        """The target density factor is held to [0.35, 1]"""
        dense = crater_profile(1.0e9, 20000.0, np.pi / 2, 8000.0)
        rock = crater_profile(1.0e9, 20000.0, np.pi / 2, ROCK_DENSITY)
        light = crater_profile(1.0e9, 20000.0, np.pi / 2, 100.0)
        self.assertAlmostEqual(dense.final_diameter_m, rock.final_diameter_m, places=9)
        self.assertAlmostEqual(light.final_diameter_m, 0.35 * 1.25 * light.transient_diameter_m, places=6)

    def test_monotonic_in_energy(self):
        """Crater size grows with both mass and speed"""
        masses = [1e6, 1e8, 1e10, 1e12]
        diameters = [crater_profile(m, 20000.0, np.pi / 4, ROCK_DENSITY).final_diameter_m for m in masses]
        self.assertEqual(diameters, sorted(diameters))
        speeds = [11000.0, 17000.0, 30000.0, 70000.0]
        diameters = [crater_profile(1e9, v, np.pi / 4, ROCK_DENSITY).final_diameter_m for v in speeds]
        self.assertEqual(diameters, sorted(diameters))

    def test_bowl_volume(self):
        profile = crater_profile(1.0e12, 20000.0, np.pi / 2, ROCK_DENSITY)
        radius = profile.final_diameter_m / 2.0
        self.assertAlmostEqual(profile.bowl_volume_km3, np.pi * radius**2 * profile.depth_m / 1e9, places=9)


class TestAtmosphericEffects(unittest.TestCase):

    def test_known_values(self):
        effects = atmospheric_effects(1000.0, 0.0, 4.0)
        self.assertAlmostEqual(effects.ozone_depletion_percent, 2.0 * np.log10(1001.0), places=12)
        expected_aod = 0.01 * 1000.0**0.6 + 0.02 * 2.0
        self.assertAlmostEqual(effects.aerosol_optical_depth, expected_aod, places=12)
        self.assertAlmostEqual(effects.nuclear_winter_risk, expected_aod / 3.0, places=12)

    def test_zero_energy_is_exactly_zero(self):
        self.assertEqual(tuple(atmospheric_effects(0.0, 0.0, 10.0)), (0.0, 0.0, 0.0))
        self.assertEqual(tuple(atmospheric_effects(-5.0)), (0.0, 0.0, 0.0))

    def test_proxies_saturate(self):
        """Ozone loss caps at 35 %, optical depth at 3 and risk at 1"""
        effects = atmospheric_effects(1.0e20, 0.0, 1.0e6)
        self.assertEqual(effects.ozone_depletion_percent, 35.0)
        self.assertEqual(effects.aerosol_optical_depth, 3.0)
        self.assertEqual(effects.nuclear_winter_risk, 1.0)

    def test_monotonic_in_energy(self):
        energies = [0.01, 1.0, 50.0, 1.0e3, 1.0e5]
        results = [atmospheric_effects(e) for e in energies]
        for field in ('ozone_depletion_percent', 'aerosol_optical_depth', 'nuclear_winter_risk'):
            values = [getattr(r, field) for r in results]
            self.assertEqual(values, sorted(values))

    def test_burst_altitude_does_not_change_proxies(self):
        self.assertEqual(atmospheric_effects(500.0, 0.0, 1.0), atmospheric_effects(500.0, 30.0, 1.0))


if __name__ == '__main__':
    unittest.main()
