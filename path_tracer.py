# path_tracer.py
import logging
import numpy as np
from collections import deque
from typing import Deque, List, Optional, Tuple
from config import config, InvalidParameterError

class PathTracer:
    """Trailing path of the planet, bounded by a duration in simulation years.

    Points are stored together with the simulation time they were recorded at.
    Whenever a point is added, points older than `duration` years relative to
    it are dropped, as are points stamped later than it (left behind when a
    drag rewinds the clock). `max_points` caps memory independently of time.
    """
    def __init__(self, duration: Optional[float] = None, max_points: Optional[int] = None):
        self.duration = config.Path.DEFAULT_DURATION_YEARS if duration is None else duration
        self.max_points = config.Path.MAX_POINTS if max_points is None else max_points
        if self.duration < 0:
            raise InvalidParameterError(f"Path duration must be non-negative, got {self.duration}.")
        self._points: Deque[Tuple[float, np.ndarray]] = deque(maxlen=self.max_points)

    def __len__(self) -> int:
        return len(self._points)

    def set_path_length(self, duration: float):
        if duration < 0:
            raise InvalidParameterError(f"Path duration must be non-negative, got {duration}.")
        if duration != self.duration:
            logging.debug(f"Path duration changed from {self.duration} to {duration} years.")
        self.duration = duration
        if self._points:
            self._trim(self._points[-1][0])

    def add_point(self, time: float, point: np.ndarray):
        while self._points and self._points[-1][0] > time:
            self._points.pop()
        self._points.append((time, np.array(point, dtype=np.float64))) # Store a copy
        self._trim(time)

    def clear(self, point: Optional[np.ndarray] = None, time: float = 0.0):
        """Drops the whole trail, optionally restarting it at `point`."""
        self._points.clear()
        if point is not None:
            self._points.append((time, np.array(point, dtype=np.float64)))

    def points(self) -> List[np.ndarray]:
        return [p for _, p in self._points]

    def _trim(self, newest_time: float):
        cutoff = newest_time - self.duration
        while self._points and self._points[0][0] < cutoff:
            self._points.popleft()
