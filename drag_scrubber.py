# drag_scrubber.py
import math
import logging
import numpy as np
from typing import Optional
from config import config, ConfigurationError
from physics_utils import TWO_PI, nearest_angle_delta, threshold_angle_delta

def screen_angle(point, center) -> float:
    """Angle of a screen-space point around `center`, counter-clockwise from +x.

    Screen y grows downwards, so it is flipped before atan2. The result is in (-pi, pi].
    """
    return math.atan2(center[1] - point[1], point[0] - center[0])

class DragTimeScrubber:
    """Turns drags of the Sun around the Earth into simulation-time deltas.

    Each pointer move supplies the previous and current screen angle of the Sun.
    The angle step, corrected across the atan2 branch cut, is converted into
    years (one full turn is one year) and accumulated in a pending buffer. The
    engine drains the buffer on its next tick, so drag updates and frame ticks
    are applied in arrival order through a single writer.

    Attributes:
        wrap_strategy (str): "threshold" (quadrant test against
            `branch_cut_threshold`) or "nearest" (step closest to zero).
        branch_cut_threshold (float): Quadrant boundary for the "threshold" strategy.
        is_dragging (bool): True between `begin_drag()` and `end_drag()`.
        pending_time (float): Years accumulated by drags and not yet integrated.
    """
    def __init__(self, wrap_strategy: Optional[str] = None, branch_cut_threshold: Optional[float] = None):
        self.wrap_strategy = wrap_strategy if wrap_strategy is not None else config.Drag.WRAP_STRATEGY
        if self.wrap_strategy not in config.Drag.SUPPORTED_WRAP_STRATEGIES:
            raise ConfigurationError(
                f"Unknown drag wrap strategy '{self.wrap_strategy}'. Expected one of {config.Drag.SUPPORTED_WRAP_STRATEGIES}."
            )
        self.branch_cut_threshold = (branch_cut_threshold if branch_cut_threshold is not None
                                     else config.Drag.BRANCH_CUT_THRESHOLD_RAD)
        self.is_dragging = False
        self.pending_time = 0.0

    def begin_drag(self):
        self.is_dragging = True
        if config.Debug.DRAG:
            logging.debug("Sun drag started.")

    def end_drag(self) -> float:
        """Stops the drag and returns whatever is still pending (draining it)."""
        self.is_dragging = False
        remaining = self.drain()
        if config.Debug.DRAG:
            logging.debug(f"Sun drag ended with {remaining:.6f} years still pending.")
        return remaining

    def angle_delta(self, last_angle: float, new_angle: float) -> float:
        if self.wrap_strategy == "nearest":
            return nearest_angle_delta(new_angle - last_angle)
        return threshold_angle_delta(last_angle, new_angle, self.branch_cut_threshold)

    def drag(self, last_angle: float, new_angle: float) -> float:
        """
        Records one pointer move and returns the time delta it added.

        Moves received while no drag is active are ignored and return 0.
        Negative deltas (dragging clockwise) rewind the clock.
        """
        if not self.is_dragging:
            return 0.0
        delta_angle = self.angle_delta(last_angle, new_angle)
        delta_time = delta_angle / TWO_PI
        self.pending_time += delta_time
        if config.Debug.DRAG:
            logging.debug(f"Drag {last_angle:.4f} -> {new_angle:.4f} rad: dt={delta_time:.6f}, pending={self.pending_time:.6f}")
        return delta_time

    def drag_points(self, last_point, new_point, center) -> float:
        """Same as `drag` but from two screen-space pointer positions."""
        return self.drag(screen_angle(last_point, center), screen_angle(new_point, center))

    def drain(self) -> float:
        pending, self.pending_time = self.pending_time, 0.0
        return pending

    def preview_sun_position(self, current_time: float) -> np.ndarray:
        """Where the Sun will be once the pending drag time is integrated."""
        angle = TWO_PI * config.Orbit.SUN_REVOLUTIONS_PER_YEAR * (current_time + self.pending_time)
        return config.Orbit.SUN_ORBIT_RADIUS * np.array([np.cos(angle), np.sin(angle)], dtype=np.float64)

    def reset(self):
        self.pending_time = 0.0
