#!/usr/bin/env python3
"""
Viewport input routing: pygame mouse, wheel and keyboard events to scene operations.

Mouse
- Any button drags the view. A left press released within CLICK_SLOP_PX of where it went
  down counts as a click: the body under the pointer (if any) gets an animated focus.
- The wheel always zooms around the cursor and is never passed on.

Keyboard
- 1..9 focus the body at that index (ignored past the end of the list).
- Space pauses, F fits all orbits, R resets, C centers the star.
- O / L / T toggle orbits, labels and trails; + / - zoom about the viewport center.
- Arrow keys pan continuously; see apply_held_keys.
"""
from typing import Optional, Tuple

import pygame

from .constants import CLICK_SLOP_PX, KEY_PAN_SPEED, KEY_ZOOM_FACTOR, WHEEL_ZOOM_STEP
from .data_models import CelestialBody
from .scene import OrreryScene
from .vector_utils import vec_dist

DIGIT_KEYS = (pygame.K_1, pygame.K_2, pygame.K_3, pygame.K_4, pygame.K_5,
              pygame.K_6, pygame.K_7, pygame.K_8, pygame.K_9)
DRAG_BUTTONS = (1, 2, 3)


class InputRouter:
    def __init__(self, scene: OrreryScene):
        self.scene = scene
        self.dragging = False
        self.drag_button: Optional[int] = None
        self.press_pos: Tuple[float, float] = (0, 0)
        self.last_pos: Tuple[float, float] = (0, 0)
        self.travel = 0.0
        self.last_picked: Optional[CelestialBody] = None

    def handle_event(self, event, mouse_pos: Optional[Tuple[float, float]] = None) -> bool:
        """
        Route one pygame event. mouse_pos is the current cursor position, needed for wheel
        events which carry none. Returns True when the event was consumed.
        """
        if event.type == pygame.MOUSEWHEEL:
            anchor = mouse_pos if mouse_pos is not None else self.last_pos
            self.on_wheel(event.y, anchor)
            return True
        if event.type == pygame.MOUSEBUTTONDOWN:
            if event.button in DRAG_BUTTONS:
                self.on_pointer_down(event.pos, event.button)
                return True
            return False
        if event.type == pygame.MOUSEBUTTONUP:
            if event.button in DRAG_BUTTONS:
                self.on_pointer_up(event.pos, event.button)
                return True
            return False
        if event.type == pygame.MOUSEMOTION:
            self.on_pointer_move(event.pos)
            return self.dragging
        if event.type == pygame.KEYDOWN:
            return self.on_key(event.key)
        return False

    # -----------------------
    # Pointer
    # -----------------------

    def on_pointer_down(self, pos, button: int = 1) -> None:
        self.dragging = True
        self.drag_button = button
        self.press_pos = (pos[0], pos[1])
        self.last_pos = (pos[0], pos[1])
        self.travel = 0.0

    def on_pointer_move(self, pos) -> None:
        if self.dragging:
            dx = pos[0] - self.last_pos[0]
            dy = pos[1] - self.last_pos[1]
            if dx or dy:
                self.scene.pan(dx, dy)
            self.travel = max(self.travel, vec_dist(pos, self.press_pos))
        self.last_pos = (pos[0], pos[1])

    def on_pointer_up(self, pos, button: int = 1) -> None:
        was_click = self.dragging and self.drag_button == 1 and self.travel < CLICK_SLOP_PX
        if self.dragging:
            self.on_pointer_move(pos)
        self.dragging = False
        self.drag_button = None
        if was_click and vec_dist(pos, self.press_pos) < CLICK_SLOP_PX:
            self.click(pos)

    def click(self, pos) -> Optional[CelestialBody]:
        body = self.scene.pick(pos[0], pos[1])
        self.last_picked = body
        if body is not None:
            self.scene.focus(body.name, animate=True)
        return body

    def on_wheel(self, notches: float, anchor) -> None:
        if notches == 0:
            return
        step = WHEEL_ZOOM_STEP if notches > 0 else -WHEEL_ZOOM_STEP
        self.scene.zoom_by(1.0 + step, (anchor[0], anchor[1]))

    # -----------------------
    # Keyboard
    # -----------------------

    def on_key(self, key: int) -> bool:
        scene = self.scene
        if key == pygame.K_SPACE:
            scene.toggle_pause()
        elif key in DIGIT_KEYS:
            scene.focus_index(DIGIT_KEYS.index(key), animate=True)
        elif key == pygame.K_f:
            scene.fit_all()
        elif key == pygame.K_r:
            scene.reset()
        elif key == pygame.K_c:
            scene.center_star()
        elif key == pygame.K_o:
            scene.toggle_orbits()
        elif key == pygame.K_l:
            scene.toggle_labels()
        elif key == pygame.K_t:
            scene.toggle_trails()
        elif key in (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS):
            scene.zoom_by(KEY_ZOOM_FACTOR, self._viewport_center())
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            scene.zoom_by(1.0 / KEY_ZOOM_FACTOR, self._viewport_center())
        else:
            return False
        return True

    def apply_held_keys(self, keys, real_dt: float) -> None:
        """Continuous arrow-key panning; keys is indexable by pygame key constants."""
        step = KEY_PAN_SPEED * real_dt
        dx = 0.0
        dy = 0.0
        if keys[pygame.K_LEFT]:
            dx += step
        if keys[pygame.K_RIGHT]:
            dx -= step
        if keys[pygame.K_UP]:
            dy += step
        if keys[pygame.K_DOWN]:
            dy -= step
        if dx or dy:
            self.scene.pan(dx, dy)

    def _viewport_center(self) -> Tuple[float, float]:
        w, h = self.scene.camera.viewport_size
        return (w / 2, h / 2)
