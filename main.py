# main.py
import argparse
import logging

from config import config, ConfigurationError
from physics_utils import PhysicsError
from observation import convert_phase, elongation_readout
from planetary import Controls, PlanetaryParameters
from simulation import CallbackSink, PtolemaicSimulation
from visualization import Visualization

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the Ptolemaic orbit simulator.")
    parser.add_argument("--eccentricity", type=float, default=config.Defaults.ECCENTRICITY,
                        help="Eccentric offset in deferent radii, in [0, 1).")
    parser.add_argument("--apogee", type=float, default=config.Defaults.APOGEE_ANGLE_DEGREES,
                        help="Apogee direction in degrees, in [0, 360).")
    parser.add_argument("--motion-rate", type=float, default=config.Defaults.MOTION_RATE,
                        help="Relative angular rate of the planet-specific circle.")
    parser.add_argument("--epicycle-radius", type=float, default=config.Defaults.EPICYCLE_RADIUS,
                        help="Epicycle radius in deferent radii.")
    parser.add_argument("--planet-class", choices=["SUPERIOR", "INFERIOR"], default=config.Defaults.PLANET_CLASS,
                        type=str.upper, help="Which circle runs at the motion rate.")
    parser.add_argument("--animation-rate", type=float, default=config.Defaults.ANIMATION_RATE,
                        help="Simulation years per real second.")
    parser.add_argument("--path-duration", type=float, default=config.Defaults.PATH_DURATION,
                        help="Length of the planet's trail in simulation years.")
    parser.add_argument("--paused", action="store_true", help="Start with the animation paused.")
    parser.add_argument("--headless", action="store_true", help="Run without a window and log observations.")
    parser.add_argument("--ticks", type=int, default=600, help="Number of ticks for a headless run.")
    parser.add_argument("--frame-ms", type=float, default=1000.0 / config.Visualization.FPS,
                        help="Real milliseconds per tick for a headless run.")
    parser.add_argument("--log-every", type=int, default=60, help="Log one observation every N headless ticks.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser

def run_headless(simulation: PtolemaicSimulation, ticks: int, frame_ms: float, log_every: int):
    """Drives the simulation at a fixed frame delta and logs a sample of the observations."""
    for step in range(ticks):
        result = simulation.tick(frame_ms)
        if log_every > 0 and step % log_every == 0:
            record = result.record
            degrees, direction = elongation_readout(record.elongation_angle)
            logging.info(
                f"t={result.current_time:8.4f} yr  sun_lon={record.sun_longitude:+.4f}  "
                f"planet_lon={record.ecliptic_longitude:+.4f}  elongation={degrees:6.1f}{direction}  "
                f"phase={convert_phase(record.elongation_angle):.3f}  size={record.apparent_size:.1f}"
            )
    logging.info(f"Headless run finished after {ticks} ticks at t={simulation.current_time:.4f} years.")

def run_interactive(simulation: PtolemaicSimulation):
    visualization = Visualization()
    if not visualization.visualization_enabled:
        logging.error("Display unavailable; rerun with --headless.")
        visualization.close()
        return
    try:
        running = True
        while running:
            running = visualization.handle_events(simulation)
            result = simulation.tick(visualization.frame_delta_ms())
            visualization.render(simulation, result)
    finally:
        visualization.close()

def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        params = PlanetaryParameters(
            eccentricity=args.eccentricity,
            apogee_angle_degrees=args.apogee,
            motion_rate=args.motion_rate,
            epicycle_radius=args.epicycle_radius,
            planet_class=args.planet_class,
        )
        controls = Controls(
            is_animation_enabled=not args.paused,
            animation_rate=args.animation_rate,
            path_duration=args.path_duration,
        )
        sink = CallbackSink(
            on_time_change=lambda t: logging.debug(f"time -> {t:.6f}"),
            on_longitude_change=lambda record: logging.debug(f"observation -> {record}"),
        )
        simulation = PtolemaicSimulation(params, controls, sink=sink)
        if args.headless:
            run_headless(simulation, args.ticks, args.frame_ms, args.log_every)
        else:
            run_interactive(simulation)
    except ConfigurationError as e_config_main:
        logging.critical(f"Simulation could not start due to a ConfigurationError: {e_config_main}", exc_info=True)
        return 2
    except PhysicsError as e_physics:
        logging.critical(f"Simulation halted by a numeric failure: {e_physics}", exc_info=True)
        return 1
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
