# simulation.py
import logging
from dataclasses import dataclass
from typing import Callable, Optional
from config import ConfigurationError
from drag_scrubber import DragTimeScrubber
from observation import ObservationRecord, derive_observation
from orbital_mechanics import OrbitalMechanics
from path_tracer import PathTracer
from physics_utils import PhysicsError
from planetary import BodyPositions, Controls, PlanetaryParameters

class ObservationSink:
    """Receives the per-tick outputs. Subclass and override what you need."""

    def on_time_change(self, current_time: float):
        pass

    def on_longitude_change(self, record: ObservationRecord):
        pass

class CallbackSink(ObservationSink):
    """Adapts two plain callables to the sink interface."""

    def __init__(self, on_time_change: Optional[Callable[[float], None]] = None,
                 on_longitude_change: Optional[Callable[[ObservationRecord], None]] = None):
        self._on_time_change = on_time_change
        self._on_longitude_change = on_longitude_change

    def on_time_change(self, current_time: float):
        if self._on_time_change is not None:
            self._on_time_change(current_time)

    def on_longitude_change(self, record: ObservationRecord):
        if self._on_longitude_change is not None:
            self._on_longitude_change(record)

@dataclass(frozen=True)
class TickResult:
    current_time: float
    bodies: BodyPositions
    record: ObservationRecord

class PtolemaicSimulation:
    """Single writer of the simulation state.

    Frame ticks and Sun drag events both go through this object, so a drag
    update always lands in the scrubber's pending buffer before the next tick
    drains it. Each tick:

    1.  Validates the parameters.
    2.  Realigns the construction if the planet class changed since the last tick.
    3.  Integrates the clock (`OrbitalMechanics.integrate`).
    4.  Computes body positions and derives the `ObservationRecord`.
    5.  Commits the new parameters and controls, forwards a changed
        `path_duration` to the path tracer and appends the planet to the trail.
    6.  Notifies the sink: `on_time_change`, then `on_longitude_change`.

    If any step raises, the clock and drag buffer are restored, the error is
    logged and re-raised before the sink is notified, and the parameters,
    controls, trail and `last_result` all still belong to the previous frame.

    Attributes:
        engine (OrbitalMechanics): Clock owner and position solver.
        scrubber (DragTimeScrubber): Pending buffer for drag-driven time.
        path (PathTracer): Trailing path collaborator.
        sink (ObservationSink): Output notifications.
        last_result (TickResult | None): Output of the last successful tick.
    """
    def __init__(self, params: PlanetaryParameters, controls: Optional[Controls] = None,
                 sink: Optional[ObservationSink] = None, scrubber: Optional[DragTimeScrubber] = None,
                 path: Optional[PathTracer] = None):
        controls = controls if controls is not None else Controls()
        self.scrubber = scrubber if scrubber is not None else DragTimeScrubber()
        self.engine = OrbitalMechanics(self.scrubber)
        self.path = path if path is not None else PathTracer(controls.path_duration)
        self.sink = sink if sink is not None else ObservationSink()
        self.params = params
        self.controls = controls
        self.last_result: Optional[TickResult] = None

        bodies = self.engine.compute_positions(params)
        self.path.clear(bodies.planet, self.engine.clock.current_time)
        logging.info(f"PtolemaicSimulation initialized with {params}.")

    @property
    def current_time(self) -> float:
        return self.engine.clock.current_time

    def tick(self, delta_real_time_ms: float, params: Optional[PlanetaryParameters] = None,
             controls: Optional[Controls] = None) -> TickResult:
        params = params if params is not None else self.params
        controls = controls if controls is not None else self.controls
        saved_clock = self.engine.clock.copy()
        saved_pending = self.scrubber.pending_time
        realigned = None
        try:
            params.validate()
            if params.planet_class is not self.params.planet_class:
                realigned = (self.current_time, self.engine.realign_for_planet_class(params).planet)
            self.engine.integrate(delta_real_time_ms, params, controls)
            result = self._observe(params)
        except (ConfigurationError, PhysicsError) as e_tick:
            self.engine.clock = saved_clock
            self.scrubber.pending_time = saved_pending
            logging.error(f"Tick at t={self.current_time:.6f} failed: {e_tick}", exc_info=True)
            raise

        # Commit only once the step has succeeded.
        self.params = params
        self.controls = controls
        if controls.path_duration != self.path.duration:
            self.path.set_path_length(controls.path_duration)
        if realigned is not None:
            self.path.clear(realigned[1], realigned[0])
        self.path.add_point(result.current_time, result.bodies.planet)
        self._publish(result)
        return result

    def begin_drag(self):
        self.scrubber.begin_drag()

    def drag(self, last_angle: float, new_angle: float) -> float:
        return self.scrubber.drag(last_angle, new_angle)

    def end_drag(self) -> float:
        """Ends the drag; pending drag time is integrated now, not discarded."""
        remaining = self.engine.end_drag(self.params)
        if remaining != 0.0:
            result = self._observe()
            self.path.add_point(result.current_time, result.bodies.planet)
            self._publish(result)
        return remaining

    def reset(self) -> TickResult:
        """Back to the initial state; the trail restarts at the planet's t=0 position."""
        self.engine.reset(self.params)
        result = self._observe()
        self.path.clear(result.bodies.planet, result.current_time)
        self._publish(result)
        logging.info("Simulation reset to t=0.")
        return result

    def _observe(self, params: Optional[PlanetaryParameters] = None) -> TickResult:
        bodies = self.engine.compute_positions(params if params is not None else self.params)
        return TickResult(current_time=self.current_time, bodies=bodies, record=derive_observation(bodies))

    def _publish(self, result: TickResult):
        self.last_result = result
        self.sink.on_time_change(result.current_time)
        self.sink.on_longitude_change(result.record)
