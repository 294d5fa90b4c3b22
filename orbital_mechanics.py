# orbital_mechanics.py
import math
import logging
import numpy as np
from typing import Optional
from config import config
from drag_scrubber import DragTimeScrubber
from physics_utils import TWO_PI, NumericDegeneracy, solve_quadratic_positive_root
from planetary import BodyPositions, Controls, PlanetClass, PlanetaryParameters, SimulationClock

def deferent_distance(eccentricity: float, apogee_rad: float, deferent_angle: float,
                      deferent_radius: float = config.Orbit.DEFERENT_RADIUS) -> float:
    """
    Distance rho from the equant to the epicycle centre along `deferent_angle`.

    The ray leaving the equant at `deferent_angle` meets the deferent circle
    (radius R, centred on the eccentric centre) where
    rho^2 + b*rho + c = 0 with b = -2e*cos(pi - apogee + angle) and c = e^2 - R^2.
    The positive root is the near intersection; the other one lies behind the equant.

    Raises:
        NumericDegeneracy: If the discriminant is negative (only possible when e >= R).
    """
    b = -2.0 * eccentricity * math.cos(math.pi - apogee_rad + deferent_angle)
    c = eccentricity ** 2 - deferent_radius ** 2
    return solve_quadratic_positive_root(b, c)

def compute_positions(clock: SimulationClock, params: PlanetaryParameters) -> BodyPositions:
    """
    Places every body of the construction for the given clock state.

    Args:
        clock: Current time and accumulated deferent/epicycle angles.
        params: Validated planetary parameters.

    Returns:
        BodyPositions in orbital units. The Earth sits at the origin; the Sun
        circles it once per year at `config.Orbit.SUN_ORBIT_RADIUS`.

    Raises:
        NumericDegeneracy: If the deferent distance cannot be solved or a
            position comes out non-finite.
    """
    e = params.eccentricity
    apogee_rad = params.apogee_angle_rad
    apogee_dir = np.array([np.cos(apogee_rad), np.sin(apogee_rad)], dtype=np.float64)

    equant = 2.0 * e * apogee_dir
    eccentric_center = e * apogee_dir

    rho = deferent_distance(e, apogee_rad, clock.deferent_angle)
    deferent_point = rho * np.array([np.cos(clock.deferent_angle), np.sin(clock.deferent_angle)], dtype=np.float64)
    epicycle_offset = params.epicycle_radius * np.array(
        [np.cos(clock.epicycle_angle), np.sin(clock.epicycle_angle)], dtype=np.float64)
    planet = equant + deferent_point + epicycle_offset

    sun_angle = TWO_PI * config.Orbit.SUN_REVOLUTIONS_PER_YEAR * clock.current_time
    sun = config.Orbit.SUN_ORBIT_RADIUS * np.array([np.cos(sun_angle), np.sin(sun_angle)], dtype=np.float64)

    if not (np.all(np.isfinite(planet)) and np.all(np.isfinite(sun))):
        raise NumericDegeneracy(f"Non-finite body position at t={clock.current_time} (planet={planet}, sun={sun}).")

    return BodyPositions(
        sun=sun,
        earth=np.array([0.0, 0.0], dtype=np.float64),
        equant=equant,
        eccentric_center=eccentric_center,
        deferent_point=deferent_point,
        planet=planet,
        deferent_distance=rho,
    )

class OrbitalMechanics:
    """Owns the simulation clock and advances it tick by tick.

    Time only moves while the animation runs, or while the user drags the Sun
    with the animation paused. In the latter case the time step comes from the
    drag scrubber's pending buffer instead of the frame delta. Both circle
    angles accumulate `2*pi * rate * dt` on every step, where the planet class
    decides which circle runs at the motion rate and which at the solar rate.

    Attributes:
        clock (SimulationClock): Current time and accumulated angles.
        scrubber (DragTimeScrubber): Source of time deltas while dragging.
    """
    def __init__(self, scrubber: Optional[DragTimeScrubber] = None):
        self.clock = SimulationClock()
        self.scrubber = scrubber if scrubber is not None else DragTimeScrubber()

    def integrate(self, delta_real_time_ms: float, params: PlanetaryParameters, controls: Controls) -> float:
        """
        Advances the clock by one frame.

        Args:
            delta_real_time_ms: Wall-clock milliseconds since the previous frame.
            params: Planetary parameters for this tick.
            controls: Animation toggle and rate.

        Returns:
            float: The simulation-time step actually applied (0 when idle).
        """
        if controls.is_animation_enabled:
            if delta_real_time_ms < 0:
                logging.warning(f"Negative frame delta ({delta_real_time_ms} ms) ignored; animation time only moves forward.")
                return 0.0
            delta_t = delta_real_time_ms * controls.animation_rate / config.Time.MS_PER_SECOND
        elif self.scrubber.is_dragging:
            delta_t = self.scrubber.drain()
        else:
            return 0.0

        self._advance(delta_t, params)
        return delta_t

    def end_drag(self, params: PlanetaryParameters) -> float:
        """Ends a drag, integrating any pending drag time as one full step."""
        remaining = self.scrubber.end_drag()
        if remaining != 0.0:
            self._advance(remaining, params)
        return remaining

    def _advance(self, delta_t: float, params: PlanetaryParameters):
        clock = self.clock
        clock.current_time += delta_t
        clock.deferent_angle = self._reduce(clock.deferent_angle + TWO_PI * params.deferent_rate * delta_t)
        clock.epicycle_angle = self._reduce(clock.epicycle_angle + TWO_PI * params.epicycle_rate * delta_t)
        if config.Debug.ORBITAL_MECHANICS:
            logging.debug(f"Advanced dt={delta_t:.6f}: t={clock.current_time:.6f}, "
                          f"deferent={clock.deferent_angle:.6f}, epicycle={clock.epicycle_angle:.6f}")

    @staticmethod
    def _reduce(angle: float) -> float:
        # Only ever consumed through sin/cos, so reducing changes nothing visible.
        if abs(angle) > config.Orbit.ANGLE_REDUCTION_THRESHOLD_RAD:
            return math.fmod(angle, TWO_PI)
        return angle

    def compute_positions(self, params: PlanetaryParameters) -> BodyPositions:
        return compute_positions(self.clock, params)

    def realign_for_planet_class(self, params: PlanetaryParameters) -> BodyPositions:
        """
        Re-ties the construction to the Sun after a planet-class change.

        The circle that now runs at the solar rate (the epicycle for a superior
        planet, the deferent for an inferior one) is snapped to the Sun's angle.
        """
        sun_angle = TWO_PI * config.Orbit.SUN_REVOLUTIONS_PER_YEAR * self.clock.current_time
        if params.planet_class is PlanetClass.SUPERIOR:
            self.clock.epicycle_angle = sun_angle
        else:
            self.clock.deferent_angle = sun_angle
        logging.info(f"Planet class set to {params.planet_class.value}; realigned to sun angle {sun_angle % TWO_PI:.4f} rad.")
        return self.compute_positions(params)

    def reset(self, params: PlanetaryParameters) -> BodyPositions:
        """Returns to t=0 with both angles zeroed and no pending drag time."""
        self.clock = SimulationClock()
        self.scrubber.reset()
        return self.compute_positions(params)
