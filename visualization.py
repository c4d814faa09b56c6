# visualization.py
"""
Draws the circuit using Pygame.
"""
import logging
import pygame
from typing import Optional

from constants import (
    FULLSCREEN, WINDOW_WIDTH, WINDOW_HEIGHT, BACKGROUND_COLOR,
    RAIL_LEFT, RAIL_TOP, RAIL_RIGHT, RAIL_BOTTOM, WIRE_COLOR, WIRE_WIDTH,
    BATTERY_RECT, ELECTROLYTE_RECT, SWITCH_RECT, BULB_CENTER, BULB_RADIUS,
    ELECTRON_COLOR, ION_COLOR, ELECTROLYTE_COLOR, ZINC_COLOR, COPPER_COLOR,
    FIELD_COLOR, FIELD_MARKER_LENGTH, BULB_OFF_COLOR, BULB_ON_COLOR,
    SWITCH_COLOR, TEXT_COLOR,
)
from projection import FrameSnapshot

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import Simulation


# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, vis_params: Optional[dict] = None):
#     - Inputs:
#       - vis_params: the "visualization" section of config.json.
#     - Side Effects: Initializes Pygame and creates a display surface.
#
#   - now(self) -> int: milliseconds since Pygame was initialized, the
#     engine's clock.
#
#   - draw(self, snapshot: FrameSnapshot, simulation: "Simulation") -> bool:
#     - Outputs:
#       - bool: False if the user has quit, True otherwise.
#     - Side Effects: Renders the frame, handles Pygame events and forwards
#       user commands (press / reset) to the simulation.

LEGEND_LINES = (
    (ELECTRON_COLOR, "Free electrons of the conductor / electrons released by the battery"),
    (ION_COLOR, "+ Zinc ions"),
    (ZINC_COLOR, "Zinc"),
    (COPPER_COLOR, "Copper"),
    (ELECTROLYTE_COLOR, "Electrolyte"),
    (FIELD_COLOR, "Electric field"),
)


class Visualizer:
    """
    Renders frame snapshots and turns keyboard/mouse input into commands.
    """
    def __init__(self, vis_params: Optional[dict] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params or {}
        pygame.init()
        pygame.font.init()

        if vis_params.get('fullscreen', FULLSCREEN):
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width = vis_params.get('window_width', WINDOW_WIDTH)
            height = vis_params.get('window_height', WINDOW_HEIGHT)
            self.screen = pygame.display.set_mode((width, height))
        self.width, self.height = width, height
        self.fps = vis_params.get('fps', 60)

        pygame.display.set_caption("Volta pile circuit")
        self.clock = pygame.time.Clock()

        self.font_main = pygame.font.SysFont(None, 18)
        self.font_ion = pygame.font.SysFont(None, 14, bold=True)
        self.ion_glyph = self.font_ion.render("+", True, ION_COLOR)

        self.switch_rect = pygame.Rect(
            SWITCH_RECT[0], SWITCH_RECT[1],
            SWITCH_RECT[2] - SWITCH_RECT[0], SWITCH_RECT[3] - SWITCH_RECT[1]
        )
        self.spawn_surface = self._pre_render_spawn_electron()

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    def now(self) -> int:
        return pygame.time.get_ticks()

    def tick(self) -> None:
        self.clock.tick(self.fps)

    def _pre_render_spawn_electron(self) -> pygame.Surface:
        """Released electrons fade out, so they are blitted with per-frame alpha."""
        surf = pygame.Surface((4, 4), pygame.SRCALPHA)
        pygame.draw.circle(surf, ELECTRON_COLOR, (2, 2), 2)
        return surf

    def _handle_events(self, simulation: "Simulation") -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False
                if event.key == pygame.K_SPACE:
                    state = simulation.press(self.now())
                    logging.info(f"Switch pressed from keyboard, state is now {state.name}.")
                elif event.key == pygame.K_r:
                    simulation.reset(self.now())

            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                # A generous hit box around the switch lever.
                if self.switch_rect.inflate(20, 20).collidepoint(event.pos):
                    state = simulation.press(self.now())
                    logging.info(f"Switch clicked, state is now {state.name}.")
        return True

    def _draw_wire(self):
        rect = pygame.Rect(RAIL_LEFT, RAIL_TOP, RAIL_RIGHT - RAIL_LEFT, RAIL_BOTTOM - RAIL_TOP)
        pygame.draw.rect(self.screen, WIRE_COLOR, rect, WIRE_WIDTH)

    def _draw_field(self, snapshot: FrameSnapshot):
        half = FIELD_MARKER_LENGTH / 2
        for marker in snapshot.field_markers:
            if marker.orientation == "vertical":
                start, end = (marker.x, marker.y - half), (marker.x, marker.y + half)
            else:
                start, end = (marker.x - half, marker.y), (marker.x + half, marker.y)
            pygame.draw.line(self.screen, FIELD_COLOR, start, end, 1)

    def _draw_particles(self, snapshot: FrameSnapshot):
        for x, y in zip(snapshot.particle_xs, snapshot.particle_ys):
            pygame.draw.circle(self.screen, ELECTRON_COLOR, (int(x), int(y)), 1)

    def _draw_battery(self, snapshot: FrameSnapshot):
        bx0, by0, bx1, by1 = BATTERY_RECT
        body = pygame.Rect(bx0, by0, bx1 - bx0, by1 - by0)
        pygame.draw.rect(self.screen, BACKGROUND_COLOR, body)

        # Electrolyte fill rises from the bottom, one unit per level unit.
        ex0, ey0, ex1, ey1 = ELECTROLYTE_RECT
        level = snapshot.electrolyte_level
        if level > 0:
            fill = pygame.Rect(ex0, ey1 - level, ex1 - ex0, level)
            pygame.draw.rect(self.screen, ELECTROLYTE_COLOR, fill)

        # Zinc plate on the negative side, copper on the positive side.
        pygame.draw.rect(self.screen, ZINC_COLOR, pygame.Rect(bx0 + 2, by0 + 10, 6, by1 - by0 - 20))
        pygame.draw.rect(self.screen, COPPER_COLOR, pygame.Rect(bx1 - 8, by0 + 10, 6, by1 - by0 - 20))
        pygame.draw.rect(self.screen, WIRE_COLOR, body, 1)

        glyph_rect = self.ion_glyph.get_rect()
        for x, y in snapshot.ion_glyphs:
            glyph_rect.center = (int(x), int(y))
            self.screen.blit(self.ion_glyph, glyph_rect)

        for point in snapshot.spawn_points:
            self.spawn_surface.set_alpha(int(255 * point.opacity))
            self.screen.blit(self.spawn_surface, (int(point.x) - 2, int(point.y) - 2))

    def _draw_switch(self, snapshot: FrameSnapshot):
        x0, y0, x1, y1 = SWITCH_RECT
        mid_y = (y0 + y1) / 2
        pygame.draw.rect(self.screen, BACKGROUND_COLOR, self.switch_rect)
        pygame.draw.circle(self.screen, SWITCH_COLOR, (int(x0), int(mid_y)), 3)
        pygame.draw.circle(self.screen, SWITCH_COLOR, (int(x1), int(mid_y)), 3)
        end = (x1, mid_y) if snapshot.switch_closed else (x1 - 8, y0)
        pygame.draw.line(self.screen, SWITCH_COLOR, (x0, mid_y), end, 3)

    def _draw_bulb(self, snapshot: FrameSnapshot):
        color = BULB_ON_COLOR if snapshot.bulb_lit else BULB_OFF_COLOR
        center = (int(BULB_CENTER[0]), int(BULB_CENTER[1]))
        if snapshot.bulb_lit:
            glow = pygame.Surface((BULB_RADIUS * 6, BULB_RADIUS * 6), pygame.SRCALPHA)
            pygame.draw.circle(glow, (*BULB_ON_COLOR, 50), (BULB_RADIUS * 3, BULB_RADIUS * 3), BULB_RADIUS * 3)
            self.screen.blit(glow, (center[0] - BULB_RADIUS * 3, center[1] - BULB_RADIUS * 3))
        pygame.draw.circle(self.screen, color, center, BULB_RADIUS)
        pygame.draw.circle(self.screen, WIRE_COLOR, center, BULB_RADIUS, 2)

    def _draw_legend(self, snapshot: FrameSnapshot):
        y = RAIL_BOTTOM + 35
        status = f"State: {snapshot.state.name}   Electrolyte: {snapshot.electrolyte_level:.0f}   Ions: {snapshot.ion_count}"
        self.screen.blit(self.font_main.render(status, True, TEXT_COLOR), (RAIL_LEFT, y))
        y += self.font_main.get_linesize() + 4
        hint = "SPACE / click switch: toggle (resets when exhausted)   R: reset   ESC: quit"
        self.screen.blit(self.font_main.render(hint, True, TEXT_COLOR), (RAIL_LEFT, y))
        y += self.font_main.get_linesize() + 4
        for color, text in LEGEND_LINES:
            pygame.draw.rect(self.screen, color, pygame.Rect(RAIL_LEFT, y + 4, 6, 6))
            self.screen.blit(self.font_main.render(text, True, TEXT_COLOR), (RAIL_LEFT + 12, y))
            y += self.font_main.get_linesize()

    def draw(self, snapshot: FrameSnapshot, simulation: "Simulation") -> bool:
        """
        Draws the frame and handles events.

        Returns:
            bool: False if the application should exit, True otherwise.
        """
        if not self._handle_events(simulation):
            return False

        self.screen.fill(BACKGROUND_COLOR)
        self._draw_wire()
        self._draw_field(snapshot)
        self._draw_particles(snapshot)
        self._draw_switch(snapshot)
        self._draw_bulb(snapshot)
        self._draw_battery(snapshot)
        self._draw_legend(snapshot)

        pygame.display.flip()
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
