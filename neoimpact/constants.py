"""
Physical and astronomical constants for neoimpact.

This module contains all constants used throughout the impact simulation core.
"""

# Basic astronomical and time constants
AU_KM = 149597870.7  # km per AU
SUN_MU = 1.32712440018e11  # km^3/s^2 (gravitational parameter of the Sun)
EARTH_RADIUS_KM = 6371.0  # km (mean radius)
EARTH_RADIUS_M = EARTH_RADIUS_KM * 1000.0
MOON_DISTANCE_KM = 384400.0  # km (mean Earth-Moon distance)
DAY = 86400.0  # seconds per day

# Julian dates
J2000_JD = 2451545.0  # 2000-01-01 12:00 TT
UNIX_EPOCH_JD = 2440587.5  # 1970-01-01 00:00 UTC
DAYS_PER_CENTURY = 36525.0

# Earth's circular-orbit approximation (eccentricity 0.0167 is ignored)
EARTH_MEAN_LONGITUDE_J2000_DEG = 100.46435
EARTH_MEAN_MOTION_DEG_PER_DAY = 0.985609101
EARTH_ORBITAL_SPEED_KMS = 29.78

# Greenwich Mean Sidereal Time polynomial (degrees)
GMST_J2000_DEG = 280.46061837
GMST_RATE_DEG_PER_DAY = 360.98564736629
GMST_T2_COEFF = 3.87933e-4
GMST_T3_DIVISOR = 38710000.0

# Impact geometry limits
MIN_IMPACT_ANGLE_DEG = 5.0
MAX_IMPACT_ANGLE_DEG = 90.0
AZIMUTH_UNDEFINED_THRESHOLD = 0.01  # horizontal component of a unit vector

# Target materials
ROCK_DENSITY = 2650.0  # kg/m^3 (reference crustal rock)
WATER_DENSITY = 1030.0  # kg/m^3 (sea water)

# Energy
JOULES_PER_MEGATON = 4.184e15  # J per megaton of TNT
