# planetary.py
import numpy as np
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from config import config, InvalidParameterError

class PlanetClass(Enum):
    """Which circle of the construction carries the planet-specific motion rate.

    For a SUPERIOR planet the deferent runs at the motion rate and the epicycle
    at the solar rate; for an INFERIOR planet it is the other way round.
    """
    INFERIOR = "INFERIOR"
    SUPERIOR = "SUPERIOR"

    @classmethod
    def parse(cls, value) -> 'PlanetClass':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise InvalidParameterError(f"Unknown planet class '{value}'. Expected one of {[c.value for c in cls]}.") from None

@dataclass(frozen=True)
class PlanetaryParameters:
    eccentricity: float
    apogee_angle_degrees: float
    motion_rate: float  # Relative angular rate of the planet-specific circle
    epicycle_radius: float  # In deferent radii
    planet_class: PlanetClass = PlanetClass.SUPERIOR

    def __post_init__(self):
        # frozen dataclass: coerce through object.__setattr__
        object.__setattr__(self, 'planet_class', PlanetClass.parse(self.planet_class))
        self.validate()

    def validate(self):
        """Rejects out-of-range parameters.

        Raises:
            InvalidParameterError: If any parameter lies outside its allowed range.
        """
        if not np.isfinite([self.eccentricity, self.apogee_angle_degrees,
                            self.motion_rate, self.epicycle_radius]).all():
            raise InvalidParameterError(f"Planetary parameters must be finite numbers: {self}")
        if not (0.0 <= self.eccentricity < 1.0):
            raise InvalidParameterError(f"Eccentricity e={self.eccentricity} is out of bounds [0, 1).")
        if not (0.0 <= self.apogee_angle_degrees < 360.0):
            raise InvalidParameterError(f"Apogee angle {self.apogee_angle_degrees} deg is out of bounds [0, 360).")
        if self.motion_rate <= 0:
            raise InvalidParameterError(f"Motion rate must be positive, got {self.motion_rate}.")
        if self.epicycle_radius <= 0:
            raise InvalidParameterError(f"Epicycle radius must be positive, got {self.epicycle_radius}.")

    @property
    def apogee_angle_rad(self) -> float:
        return np.radians(self.apogee_angle_degrees)

    @property
    def deferent_rate(self) -> float:
        return self.motion_rate if self.planet_class is PlanetClass.SUPERIOR else 1.0

    @property
    def epicycle_rate(self) -> float:
        return self.motion_rate if self.planet_class is PlanetClass.INFERIOR else 1.0

    @classmethod
    def from_config(cls) -> 'PlanetaryParameters':
        return cls(
            eccentricity=config.Defaults.ECCENTRICITY,
            apogee_angle_degrees=config.Defaults.APOGEE_ANGLE_DEGREES,
            motion_rate=config.Defaults.MOTION_RATE,
            epicycle_radius=config.Defaults.EPICYCLE_RADIUS,
            planet_class=config.Defaults.PLANET_CLASS,
        )

@dataclass(frozen=True)
class Controls:
    is_animation_enabled: bool = True
    animation_rate: float = 1.0  # Simulation years per real second
    path_duration: float = config.Path.DEFAULT_DURATION_YEARS  # Forwarded to the path tracer unchanged

    def __post_init__(self):
        if not np.isfinite(self.animation_rate) or self.animation_rate < 0:
            raise InvalidParameterError(f"Animation rate must be a non-negative number, got {self.animation_rate}.")
        if not np.isfinite(self.path_duration) or self.path_duration < 0:
            raise InvalidParameterError(f"Path duration must be a non-negative number, got {self.path_duration}.")

    @classmethod
    def from_config(cls) -> 'Controls':
        return cls(
            is_animation_enabled=config.Defaults.IS_ANIMATION_ENABLED,
            animation_rate=config.Defaults.ANIMATION_RATE,
            path_duration=config.Defaults.PATH_DURATION,
        )

@dataclass
class SimulationClock:
    """Mutable simulation state.

    `deferent_angle` and `epicycle_angle` are accumulators advanced by
    integration steps. They are never derived from `current_time`, so a change
    of motion rate or planet class mid-run does not make the planet jump.
    """
    current_time: float = 0.0  # Simulation years
    deferent_angle: float = 0.0  # Radians, accumulated
    epicycle_angle: float = 0.0  # Radians, accumulated

    def copy(self) -> 'SimulationClock':
        return SimulationClock(self.current_time, self.deferent_angle, self.epicycle_angle)

def _zero_vector() -> np.ndarray:
    return np.array([0.0, 0.0], dtype=np.float64)

@dataclass
class BodyPositions:
    """Positions of every body for one tick, in orbital units (deferent radius = 1).

    `deferent_point` is relative to the equant; `epicycle_center` is the same
    point in absolute coordinates.
    """
    sun: np.ndarray = field(default_factory=_zero_vector)
    earth: np.ndarray = field(default_factory=_zero_vector)
    equant: np.ndarray = field(default_factory=_zero_vector)
    eccentric_center: np.ndarray = field(default_factory=_zero_vector)
    deferent_point: np.ndarray = field(default_factory=_zero_vector)
    planet: np.ndarray = field(default_factory=_zero_vector)
    deferent_distance: Optional[float] = None  # rho, distance from equant to epicycle centre

    @property
    def epicycle_center(self) -> np.ndarray:
        return self.equant + self.deferent_point
