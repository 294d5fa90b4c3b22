# config.py
import numpy as np
import logging

# Configure basic logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(module)s - %(message)s')

# Fundamental constants of the construction (used across different config sections)
TWO_PI = 2.0 * np.pi
DEFERENT_RADIUS = 1.0  # Deferent radius; all other lengths are relative to it
SUN_ORBIT_RADIUS = 3.0  # Radius of the Sun's circle around the Earth

class ConfigurationError(Exception):
    """Custom exception for simulation configuration errors.

    Raised by `SimulationConfig.validate()` and other configuration-dependent
    components when settings are invalid, inconsistent, or missing, which
    would prevent the simulation from running correctly.

    Attributes:
        message (str): A human-readable explanation of the configuration error.
                       This is the first argument passed to the exception constructor.
    """
    pass

class InvalidParameterError(ConfigurationError):
    """Raised when planetary parameters or controls are out of range.

    Covers eccentricity outside [0, 1), non-positive epicycle radius or
    motion rate, apogee outside [0, 360), unknown planet classes and negative
    animation rates or path durations. Values are rejected, never clamped.
    """
    pass

class SimulationConfig:
    """Centralized, hierarchical configuration for the Ptolemaic orbit simulator.

    This class consolidates all simulation parameters into nested static classes
    (e.g., `SimulationConfig.Orbit`, `SimulationConfig.Drag`, `SimulationConfig.Path`)
    for organized access. An instance of this class, named `config`, is created
    at the end of this module, making it globally available via `from config import config`.

    The `__init__` method invokes the `validate()` method, which checks every
    section for logical consistency and valid ranges and raises a
    `ConfigurationError` if any issue is found.

    Example Usage:
        >>> from config import config
        >>> print(f"Sun orbit radius: {config.Orbit.SUN_ORBIT_RADIUS}")
        >>> print(f"Default path duration (years): {config.Path.DEFAULT_DURATION_YEARS}")
    """

    # --- Orbit Configuration ---
    class Orbit:
        """Geometry of the deferent/epicycle construction.

        Attributes:
            DEFERENT_RADIUS (float): Radius of the deferent circle. Fixed at 1; the
                                     eccentricity and epicycle radius are in these units.
            SUN_ORBIT_RADIUS (float): Radius of the Sun's circle around the Earth.
            SUN_REVOLUTIONS_PER_YEAR (float): Revolutions of the Sun per simulation year.
            ANGLE_REDUCTION_THRESHOLD_RAD (float): Magnitude above which the accumulated
                                                   deferent/epicycle angles are reduced
                                                   modulo 2*pi to preserve precision.
        """
        DEFERENT_RADIUS = DEFERENT_RADIUS
        SUN_ORBIT_RADIUS = SUN_ORBIT_RADIUS
        SUN_REVOLUTIONS_PER_YEAR = 1.0
        ANGLE_REDUCTION_THRESHOLD_RAD = 1024 * TWO_PI

    # --- Time Configuration ---
    class Time:
        """Conversion between real (wall clock) time and simulation time.

        Attributes:
            MS_PER_SECOND (float): Divisor applied to frame deltas, which arrive in
                                   milliseconds. With an animation rate of 1, one real
                                   second advances the simulation by one year.
        """
        MS_PER_SECOND = 1000.0

    # --- Observation Configuration ---
    class Observation:
        """Configuration for the derived observational quantities.

        Attributes:
            SIZE_DOMAIN (Tuple[float, float]): Observer-target distance range mapped
                                               onto the apparent size scale.
            SIZE_RANGE (Tuple[float, float]): Apparent sizes at the two ends of
                                              `SIZE_DOMAIN` (shrinks with distance).
            LONG_WAY_ROUNDING_DECIMALS (int): Decimal places (in degrees) the
                                              elongation is rounded to before it is
                                              compared against 180 degrees.
        """
        SIZE_DOMAIN = (0.0, 3.0)
        SIZE_RANGE = (275.0, 100.0)
        LONG_WAY_ROUNDING_DECIMALS = 1

    # --- Drag Configuration ---
    class Drag:
        """Configuration for converting Sun drags into simulation time.

        Attributes:
            WRAP_STRATEGY (str): How a pointer step across the atan2 branch cut is
                                 detected. "threshold" reproduces the classic
                                 quadrant test; "nearest" picks the representative
                                 of the angle step closest to zero.
            BRANCH_CUT_THRESHOLD_RAD (float): Quadrant boundary used by the
                                              "threshold" strategy.
        """
        WRAP_STRATEGY = "threshold"
        BRANCH_CUT_THRESHOLD_RAD = np.pi / 2
        SUPPORTED_WRAP_STRATEGIES = ("threshold", "nearest")

    # --- Path Configuration ---
    class Path:
        """Configuration for the planet's trailing path.

        Attributes:
            DEFAULT_DURATION_YEARS (float): How much simulation time the trail covers.
            MAX_POINTS (int): Hard cap on stored points, independent of duration.
        """
        DEFAULT_DURATION_YEARS = 0.2
        MAX_POINTS = 5000

    # --- Default Parameters ---
    class Defaults:
        """Initial planetary parameters and controls (a Mars-like superior planet).

        Attributes:
            ECCENTRICITY (float): Eccentric offset in deferent radii.
            APOGEE_ANGLE_DEGREES (float): Direction of the apogee.
            MOTION_RATE (float): Relative angular rate of the planet-specific circle.
            EPICYCLE_RADIUS (float): Epicycle radius in deferent radii.
            PLANET_CLASS (str): "SUPERIOR" or "INFERIOR".
            IS_ANIMATION_ENABLED (bool): Whether the clock runs on its own.
            ANIMATION_RATE (float): Simulation years per real second.
            PATH_DURATION (float): Trail retention window in years.
        """
        ECCENTRICITY = 0.1
        APOGEE_ANGLE_DEGREES = 115.0
        MOTION_RATE = 0.53
        EPICYCLE_RADIUS = 0.66
        PLANET_CLASS = "SUPERIOR"
        IS_ANIMATION_ENABLED = True
        ANIMATION_RATE = 0.2
        PATH_DURATION = 0.2

    # --- Visualization Configuration ---
    class Visualization:
        """Configuration for the optional pygame viewer.

        Attributes:
            SCREEN_SIZE_PX (int): Side of the square window in pixels.
            FPS (int): Target frames per second.
            VIEW_EXTENT_UNITS (float): Half-width of the visible area in orbital units.
            ANIMATION_RATE_STEP (float): Multiplicative step for the rate hotkeys.
        """
        SCREEN_SIZE_PX = 700
        FPS = 60
        VIEW_EXTENT_UNITS = 4.0
        ANIMATION_RATE_STEP = 1.25
        COLORS = {
            'background': (10, 10, 30),
            'earth': (70, 130, 255),
            'sun': (255, 210, 60),
            'planet': (220, 90, 70),
            'equant': (200, 200, 200),
            'eccentric': (150, 150, 150),
            'deferent': (90, 90, 120),
            'epicycle': (120, 120, 160),
            'trail': (200, 120, 100),
            'elongation': (166, 78, 78),
            'ui_text': (220, 220, 220),
        }

    # --- Debug Configuration ---
    class Debug:
        """Configuration for debugging features and logging verbosity.

        Attributes:
            ORBITAL_MECHANICS (bool): Toggle for verbose per-tick logging from the engine.
            DRAG (bool): Toggle for logging every drag step and branch-cut correction.
        """
        ORBITAL_MECHANICS = False
        DRAG = False

    def __init__(self):
        """Initializes the `SimulationConfig` instance and validates it.

        Raises:
            ConfigurationError: If `self.validate()` detects any issues with the
                                configuration values.
        """
        self.validate()

    def validate(self):
        """Performs validation of all simulation configuration settings.

        Checks that radii and scales are positive, that the apparent size domain
        is a non-empty interval, that the drag strategy is known, that the default
        planetary parameters are themselves valid and that the viewer settings are
        usable. Raises `ConfigurationError` describing the first problem found.

        Raises:
            ConfigurationError: If any configuration setting is found to be invalid.
        """
        # Orbit validation
        if self.Orbit.DEFERENT_RADIUS <= 0:
            raise ConfigurationError("Orbit.DEFERENT_RADIUS must be positive.")
        if self.Orbit.SUN_ORBIT_RADIUS <= 0:
            raise ConfigurationError("Orbit.SUN_ORBIT_RADIUS must be positive.")
        if self.Orbit.ANGLE_REDUCTION_THRESHOLD_RAD < TWO_PI:
            raise ConfigurationError("Orbit.ANGLE_REDUCTION_THRESHOLD_RAD must be at least 2*pi.")

        # Time validation
        if self.Time.MS_PER_SECOND <= 0:
            raise ConfigurationError("Time.MS_PER_SECOND must be positive.")

        # Observation validation
        lo, hi = self.Observation.SIZE_DOMAIN
        if not lo < hi:
            raise ConfigurationError(
                f"Observation.SIZE_DOMAIN ({self.Observation.SIZE_DOMAIN}) must be an increasing interval."
            )
        if len(self.Observation.SIZE_RANGE) != 2:
            raise ConfigurationError("Observation.SIZE_RANGE must have exactly two entries.")
        if self.Observation.LONG_WAY_ROUNDING_DECIMALS < 0:
            raise ConfigurationError("Observation.LONG_WAY_ROUNDING_DECIMALS must be non-negative.")

        # Drag validation
        if self.Drag.WRAP_STRATEGY not in self.Drag.SUPPORTED_WRAP_STRATEGIES:
            raise ConfigurationError(
                f"Drag.WRAP_STRATEGY '{self.Drag.WRAP_STRATEGY}' is not one of {self.Drag.SUPPORTED_WRAP_STRATEGIES}."
            )
        if not (0 < self.Drag.BRANCH_CUT_THRESHOLD_RAD < np.pi):
            raise ConfigurationError("Drag.BRANCH_CUT_THRESHOLD_RAD must lie in (0, pi).")

        # Path validation
        if self.Path.DEFAULT_DURATION_YEARS < 0:
            raise ConfigurationError("Path.DEFAULT_DURATION_YEARS must be non-negative.")
        if self.Path.MAX_POINTS <= 0:
            raise ConfigurationError("Path.MAX_POINTS must be positive.")

        # Defaults validation
        if not (0.0 <= self.Defaults.ECCENTRICITY < 1.0):
            raise ConfigurationError(f"Defaults.ECCENTRICITY ({self.Defaults.ECCENTRICITY}) must be >= 0 and < 1.")
        if not (0.0 <= self.Defaults.APOGEE_ANGLE_DEGREES < 360.0):
            raise ConfigurationError("Defaults.APOGEE_ANGLE_DEGREES must be in [0, 360).")
        if self.Defaults.MOTION_RATE <= 0 or self.Defaults.EPICYCLE_RADIUS <= 0:
            raise ConfigurationError("Defaults.MOTION_RATE and Defaults.EPICYCLE_RADIUS must be positive.")
        if self.Defaults.PLANET_CLASS not in ("SUPERIOR", "INFERIOR"):
            raise ConfigurationError(f"Defaults.PLANET_CLASS '{self.Defaults.PLANET_CLASS}' is not recognized.")
        if self.Defaults.ANIMATION_RATE < 0 or self.Defaults.PATH_DURATION < 0:
            raise ConfigurationError("Defaults.ANIMATION_RATE and Defaults.PATH_DURATION must be non-negative.")

        # Visualization validation
        if not (isinstance(self.Visualization.SCREEN_SIZE_PX, int) and self.Visualization.SCREEN_SIZE_PX > 0):
            raise ConfigurationError("Visualization.SCREEN_SIZE_PX must be a positive integer.")
        if self.Visualization.FPS <= 0:
            raise ConfigurationError("Visualization.FPS must be positive.")
        if self.Visualization.VIEW_EXTENT_UNITS <= self.Orbit.SUN_ORBIT_RADIUS:
            logging.warning(
                f"Visualization.VIEW_EXTENT_UNITS ({self.Visualization.VIEW_EXTENT_UNITS}) does not exceed "
                f"Orbit.SUN_ORBIT_RADIUS ({self.Orbit.SUN_ORBIT_RADIUS}); the Sun will leave the window."
            )

        logging.info("Configuration validated successfully.")


# --- Instantiate the configuration ---
# This makes the config object available for import and runs validation.
# e.g., from config import config
try:
    config = SimulationConfig()
except ConfigurationError as e:
    logging.error(f"FATAL CONFIGURATION ERROR: {e}", exc_info=True)
    raise
