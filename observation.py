# observation.py
import math
import numpy as np
from dataclasses import dataclass, asdict
from typing import Dict, Tuple
from config import config
from physics_utils import TWO_PI, distance, normalize_atan2_angle, round_half_up, wrap_angle
from planetary import BodyPositions

@dataclass(frozen=True)
class ObservationRecord:
    """What the observer on Earth sees of the target planet in one tick.

    Attributes:
        sun_longitude (float): atan2 of the Sun's position, raw in (-pi, pi].
        ecliptic_longitude (float): atan2 of the planet's position, raw in (-pi, pi].
        elongation_angle (float): Angle at the planet from the Sun direction to the
            Earth direction, in [0, 2*pi).
        observer_target_angle (float): Direction from the planet to the Earth, [0, 2*pi).
        sun_target_angle (float): Direction from the planet to the Sun, [0, 2*pi).
        apparent_size (float): Display size of the planet, shrinking with distance.
    """
    sun_longitude: float
    ecliptic_longitude: float
    elongation_angle: float
    observer_target_angle: float
    sun_target_angle: float
    apparent_size: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

def apparent_size(observer_target_distance: float) -> float:
    """
    Display size of the planet for a given Earth-planet distance.

    Args:
        observer_target_distance (float): Distance from the Earth to the planet in orbital units.

    Returns:
        float: Size interpolated linearly from `SIZE_DOMAIN` onto `SIZE_RANGE`,
               held at the end values outside the domain.
    """
    return float(np.interp(observer_target_distance, config.Observation.SIZE_DOMAIN, config.Observation.SIZE_RANGE))

def derive_observation(bodies: BodyPositions) -> ObservationRecord:
    """
    Derives what the Earth-bound observer sees of the planet.

    Args:
        bodies (BodyPositions): Positions of the Sun, Earth and planet for this tick.

    Returns:
        ObservationRecord: Raw longitudes of the Sun and planet, the two sight-line
                           directions from the planet, the elongation between them
                           and the apparent size.
    """
    earth, planet, sun = bodies.earth, bodies.planet, bodies.sun

    observer_target = normalize_atan2_angle(math.atan2(earth[1] - planet[1], earth[0] - planet[0]))
    sun_target = normalize_atan2_angle(math.atan2(sun[1] - planet[1], sun[0] - planet[0]))

    return ObservationRecord(
        sun_longitude=math.atan2(sun[1], sun[0]),
        ecliptic_longitude=math.atan2(planet[1], planet[0]),
        elongation_angle=wrap_angle(observer_target - sun_target),
        observer_target_angle=observer_target,
        sun_target_angle=sun_target,
        apparent_size=apparent_size(distance(earth, planet)),
    )

def is_long_way(elongation_angle: float) -> bool:
    """
    True when the elongation, rounded to `LONG_WAY_ROUNDING_DECIMALS` degrees,
    exceeds 180. Picks the sweep direction of the elongation arc and the side
    its arrowheads are drawn on.
    """
    degrees = round_half_up(math.degrees(wrap_angle(elongation_angle)), config.Observation.LONG_WAY_ROUNDING_DECIMALS)
    return degrees > 180.0

def convert_phase(elongation_angle: float) -> float:
    """
    Maps an elongation onto the illumination cycle, in [0, 1).

    An elongation of pi maps to 0. Results of 1 or more collapse to 0 and negative
    results wrap by +1.
    """
    phase = (elongation_angle - math.pi) / TWO_PI
    if phase >= 1:
        return 0.0
    if phase < 0:
        phase = phase % 1.0
        if phase >= 1.0: # tiny negatives round up to 1.0
            return 0.0
    return phase

def elongation_readout(elongation_angle: float) -> Tuple[float, str]:
    """
    Elongation folded into [0, 180] degrees with its direction label.

    Returns:
        (degrees, direction) where direction is "E" up to 180 degrees, "W" beyond,
        and "" exactly at 0 or 180 degrees.
    """
    degrees = math.degrees(wrap_angle(elongation_angle))
    direction = 'E'
    if degrees > 180.0:
        degrees = 360.0 - degrees
        direction = 'W'
    if degrees == 0.0 or degrees == 180.0:
        direction = ''
    return degrees, direction

def longitude_degrees(record: ObservationRecord) -> Tuple[float, float]:
    """(sun, planet) longitudes in degrees, as shown on the readouts."""
    return math.degrees(record.sun_longitude), math.degrees(record.ecliptic_longitude)
