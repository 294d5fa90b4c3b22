# visualization.py
import pygame
import numpy as np
import math
import logging
from dataclasses import replace
from typing import Optional, Tuple
from config import config, ConfigurationError
from drag_scrubber import screen_angle
from observation import convert_phase, elongation_readout, is_long_way, longitude_degrees
from physics_utils import normalize_vector
from planetary import PlanetClass
from simulation import PtolemaicSimulation, TickResult

class Visualization:
    """Pygame window for the Ptolemaic construction.

    Draws the Earth, Sun, equant, eccentric centre, deferent and epicycle
    circles, the planet with its trailing path, the lines of sight from the
    planet to the Earth and Sun, and the elongation arc between them. Text
    readouts show time, longitudes, elongation and phase fraction.

    Controls:
        SPACE toggles the animation, UP/DOWN change the animation rate,
        C switches between superior and inferior planet, R resets, and while
        the animation is paused the Sun can be dragged around the Earth to
        scrub time forwards or backwards.

    Attributes:
        screen (pygame.Surface | None): Display surface, `None` if setup failed.
        visualization_enabled (bool): False when the display could not be created.
        scale (float): Pixels per orbital unit.
        dragging_sun (bool): True while the left button holds the Sun.
    """
    def __init__(self):
        size = config.Visualization.SCREEN_SIZE_PX
        if not (isinstance(size, int) and size > 0):
            raise ConfigurationError("Visualization.SCREEN_SIZE_PX must be a positive integer.")
        self.size = size
        self.scale = size / (2.0 * config.Visualization.VIEW_EXTENT_UNITS)
        self.center = (size / 2.0, size / 2.0)
        self.colors = config.Visualization.COLORS
        self.dragging_sun = False
        self.visualization_enabled = True
        self.screen: Optional[pygame.Surface] = None
        self.font = None
        try:
            pygame.init()
            self.screen = pygame.display.set_mode((size, size))
            pygame.display.set_caption("Ptolemaic Orbit Simulator")
            self.clock = pygame.time.Clock()
            self.font = pygame.font.Font(None, 22)
        except pygame.error as e_disp:
            logging.critical(f"Error setting up the pygame display: {e_disp}. Visualization disabled.", exc_info=True)
            self.visualization_enabled = False
            self.screen = None

    def world_to_screen(self, world_pos) -> Tuple[int, int]:
        """Orbital units to pixels, origin at the window centre, y pointing up."""
        return (int(self.center[0] + world_pos[0] * self.scale),
                int(self.center[1] - world_pos[1] * self.scale))

    def frame_delta_ms(self) -> float:
        return float(self.clock.tick(config.Visualization.FPS))

    def render(self, simulation: PtolemaicSimulation, result: TickResult):
        if not self.visualization_enabled or self.screen is None:
            return
        try:
            self.screen.fill(self.colors['background'])
            bodies = result.bodies
            params = simulation.params

            # Construction circles
            pygame.draw.circle(self.screen, self.colors['deferent'], self.world_to_screen(bodies.eccentric_center),
                               max(1, int(config.Orbit.DEFERENT_RADIUS * self.scale)), 1)
            pygame.draw.circle(self.screen, self.colors['epicycle'], self.world_to_screen(bodies.epicycle_center),
                               max(1, int(params.epicycle_radius * self.scale)), 1)

            trail = [self.world_to_screen(p) for p in simulation.path.points()]
            if len(trail) > 1:
                pygame.draw.lines(self.screen, self.colors['trail'], False, trail, 2)

            sun = bodies.sun
            if self.dragging_sun:
                sun = simulation.scrubber.preview_sun_position(simulation.current_time)

            self._draw_sight_line(bodies.planet, bodies.earth)
            self._draw_sight_line(bodies.planet, sun)
            self._draw_elongation_arc(bodies.planet, result.record)

            pygame.draw.circle(self.screen, self.colors['equant'], self.world_to_screen(bodies.equant), 3)
            pygame.draw.circle(self.screen, self.colors['eccentric'], self.world_to_screen(bodies.eccentric_center), 3)
            pygame.draw.circle(self.screen, self.colors['earth'], self.world_to_screen(bodies.earth), 10)
            pygame.draw.circle(self.screen, self.colors['sun'], self.world_to_screen(sun), 14)
            planet_radius = max(3, int(result.record.apparent_size / 25))
            pygame.draw.circle(self.screen, self.colors['planet'], self.world_to_screen(bodies.planet), planet_radius)

            self._draw_readouts(simulation, result)
            pygame.display.flip()
        except pygame.error as e_render:
            logging.error(f"Pygame error during render: {e_render}", exc_info=True)

    def _draw_sight_line(self, start, end):
        direction = normalize_vector(np.asarray(end) - np.asarray(start))
        start_px = self.world_to_screen(start)
        end_px = self.world_to_screen(end)
        pygame.draw.line(self.screen, self.colors['ui_text'], start_px, end_px, 1)
        # Arrowhead at the far end, drawn in world space then projected
        for side in (1.0, -1.0):
            barb = np.asarray(end) - 0.12 * direction + side * 0.06 * np.array([-direction[1], direction[0]])
            pygame.draw.line(self.screen, self.colors['ui_text'], end_px, self.world_to_screen(barb), 1)

    def _draw_elongation_arc(self, planet, record):
        radius_px = 22
        x, y = self.world_to_screen(planet)
        rect = pygame.Rect(x - radius_px, y - radius_px, 2 * radius_px, 2 * radius_px)
        # pygame sweeps counter-clockwise on screen, matching world angles with y up.
        if is_long_way(record.elongation_angle):
            start, stop = record.observer_target_angle, record.sun_target_angle
        else:
            start, stop = record.sun_target_angle, record.observer_target_angle
        pygame.draw.arc(self.screen, self.colors['elongation'], rect, start, stop, 2)

    def _draw_readouts(self, simulation: PtolemaicSimulation, result: TickResult):
        if self.font is None:
            return
        degrees, direction = elongation_readout(result.record.elongation_angle)
        sun_lon, planet_lon = longitude_degrees(result.record)
        lines = [
            f"Time: {result.current_time:8.3f} yr",
            f"Sun longitude: {sun_lon:7.1f}°",
            f"Planet longitude: {planet_lon:7.1f}°",
            f"Elongation: {degrees:5.0f}° {direction}",
            f"Phase: {convert_phase(result.record.elongation_angle):.3f}",
            f"Rate: {simulation.controls.animation_rate:.3f} yr/s  "
            f"{'running' if simulation.controls.is_animation_enabled else 'paused'}",
            f"Class: {simulation.params.planet_class.value}",
        ]
        for i, text in enumerate(lines):
            surface = self.font.render(text, True, self.colors['ui_text'])
            self.screen.blit(surface, (10, 10 + i * 20))

    def handle_events(self, simulation: PtolemaicSimulation) -> bool:
        """Processes pending pygame events. Returns False when the window is closed."""
        if not self.visualization_enabled:
            return True
        try:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    logging.info("QUIT event received via Pygame window. Signaling shutdown.")
                    return False
                if event.type == pygame.KEYDOWN:
                    self._handle_key(event.key, simulation)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self._start_sun_drag(event.pos, simulation)
                elif event.type == pygame.MOUSEMOTION and self.dragging_sun:
                    sun_px = self.world_to_screen(simulation.scrubber.preview_sun_position(simulation.current_time))
                    simulation.drag(screen_angle(sun_px, self.center), screen_angle(event.pos, self.center))
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and self.dragging_sun:
                    self.dragging_sun = False
                    simulation.end_drag()
            return True
        except pygame.error as e_pygame_event:
            logging.error(f"Pygame error during event handling: {e_pygame_event}. Attempting to continue.", exc_info=True)
            return True

    def _handle_key(self, key, simulation: PtolemaicSimulation):
        controls = simulation.controls
        step = config.Visualization.ANIMATION_RATE_STEP
        if key == pygame.K_SPACE:
            if self.dragging_sun:
                self.dragging_sun = False
                simulation.end_drag()
            simulation.controls = replace(controls, is_animation_enabled=not controls.is_animation_enabled)
        elif key == pygame.K_UP:
            simulation.controls = replace(controls, animation_rate=controls.animation_rate * step)
        elif key == pygame.K_DOWN:
            simulation.controls = replace(controls, animation_rate=controls.animation_rate / step)
        elif key == pygame.K_r:
            simulation.reset()
        elif key == pygame.K_c:
            other = PlanetClass.INFERIOR if simulation.params.planet_class is PlanetClass.SUPERIOR else PlanetClass.SUPERIOR
            # A zero-length tick applies the change and realigns the construction.
            simulation.tick(0.0, replace(simulation.params, planet_class=other))

    def _start_sun_drag(self, pos, simulation: PtolemaicSimulation):
        if simulation.controls.is_animation_enabled or simulation.last_result is None:
            return
        sun_px = self.world_to_screen(simulation.last_result.bodies.sun)
        if math.hypot(pos[0] - sun_px[0], pos[1] - sun_px[1]) <= 20:
            self.dragging_sun = True
            simulation.begin_drag()

    def close(self):
        pygame.quit()
