#!/usr/bin/env python3
"""
Solar Orrery application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a Pygame viewport thread that owns the OrreryScene (input, frame
  advance, drawing) and the Dear PyGui control window running on the main thread.
- Loads a body catalog, builds the scene, and wires the control window to the scene's
  runtime control surface.

Threading model
- Only the viewport thread touches the scene. The control window posts commands to a queue
  that the viewport drains at the start of every frame, then reads back a plain status
  snapshot the viewport publishes after drawing. No locks are needed and a command can never
  land halfway through a frame.

Units and conventions
- Distances in AU, radii in km, simulated time in days, speed in days per real second.
- Colors are RGB tuples in 0..255.

Running
1) Install dependencies: `pip install -e .`
2) Run this module: `python solar_orrery.py` (or the `solar-orrery` console script)

Windows/OS notes
- Two windows will open: the viewport (Pygame) and the controls (Dear PyGui). Closing either
  will shut down the application cleanly.
"""

import argparse
import logging
import queue
import sys
import threading
import time
from typing import Optional

# GUI and Rendering libs
import pygame
import dearpygui.dearpygui as dpg

from orrery.catalog_loader import DEFAULT_CATALOG, ConfigurationError, list_catalogs, load_catalog
from orrery.constants import DEFAULT_SPEED, DEFAULT_ZOOM, TARGET_FPS, VIEW_HEIGHT, VIEW_WIDTH
from orrery.formatting import (
    format_km,
    slider_to_speed,
    slider_to_zoom,
    speed_to_slider,
    zoom_to_slider,
)
from orrery.input_router import InputRouter
from orrery.renderer import SceneRenderer
from orrery.scene import OrreryScene

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(module)s - %(message)s'


# ============================================================
# Pygame Viewport Thread
# ============================================================

class ViewportThread(threading.Thread):
    """
    Pygame loop: drains UI commands, routes input, advances the scene and draws it.
    """
    def __init__(self, scene: OrreryScene, title: str = "Solar Orrery"):
        super().__init__(daemon=True)
        self.scene = scene
        self.title = title
        self.router = InputRouter(scene)
        self.renderer = SceneRenderer(scene)
        self.commands: "queue.Queue" = queue.Queue()
        self.status = scene.status()
        self.surface = None
        self.clock = None
        self.running = True

    def post(self, command: str, *args) -> None:
        """Queue a scene method call from another thread; it runs at the next frame start."""
        self.commands.put((command, args))

    def drain_commands(self) -> None:
        while True:
            try:
                command, args = self.commands.get_nowait()
            except queue.Empty:
                return
            method = getattr(self.scene, command, None)
            if method is None:
                logging.warning(f"Ignoring unknown scene command '{command}'")
                continue
            method(*args)

    def run(self):
        logging.info("Viewport thread starting")
        pygame.init()
        pygame.display.set_caption(f"{self.title} - Viewport")
        w, h = self.scene.camera.viewport_size
        self.surface = pygame.display.set_mode((w, h), pygame.RESIZABLE)
        self.scene.set_viewport(w, h)
        self.clock = pygame.time.Clock()

        last_time = time.perf_counter()
        try:
            while self.running:
                now = time.perf_counter()
                real_dt = now - last_time
                last_time = now

                self.drain_commands()
                self.handle_events(real_dt)

                now_ms = now * 1000.0
                views = self.scene.frame(now_ms)
                self.renderer.draw(self.surface, views, now_ms)
                self.status = self.scene.status()

                pygame.display.flip()
                self.clock.tick(TARGET_FPS)
        finally:
            pygame.quit()
            logging.info("Viewport thread stopped")

    def handle_events(self, real_dt):
        self.router.apply_held_keys(pygame.key.get_pressed(), real_dt)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.scene.set_viewport(event.w, event.h)

            else:
                self.router.handle_event(event, pygame.mouse.get_pos())


# ============================================================
# Dear PyGui UI
# ============================================================

def center_label(scene: OrreryScene) -> str:
    return f"Center {scene.star.name}"


class UI:
    """
    Dear PyGui interface: zoom and speed sliders, body focus buttons, visibility toggles,
    view actions and a readout for the focused body.
    """
    def __init__(self, viewport: ViewportThread, title: str = "Solar Orrery"):
        self.viewport = viewport
        self.title = title
        self.body_names = [b.name for b in viewport.scene.bodies]
        self._build_ui()

        # Periodic UI sync via frame callbacks (for wider DPG version support)
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (approx ~10Hz)."""
        current = dpg.get_frame_count()
        # schedule next sync ~ every 6 frames (~100ms at 60 FPS)
        dpg.set_frame_callback(current + 6, self._sync_ui_with_scene)

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title=f'{self.title} - Controls', width=440, height=640)

        status = self.viewport.status
        with dpg.window(label="Controls", width=420, height=620, pos=(10, 10), tag="main_window"):
            dpg.add_text(self.title)
            dpg.add_text("Pan (drag), zoom (scroll), click a planet or press Space to pause.", wrap=400)
            dpg.add_separator()

            dpg.add_text("Zoom")
            with dpg.group(horizontal=True):
                dpg.add_slider_int(min_value=0, max_value=100, default_value=zoom_to_slider(status["zoom"]),
                                   width=220, format="", tag="zoom_slider",
                                   callback=lambda s, a, u: self.viewport.post("set_zoom", slider_to_zoom(a)))
                dpg.add_text(status["zoom_text"], tag="zoom_text")
            dpg.add_text("Speed")
            with dpg.group(horizontal=True):
                dpg.add_slider_int(min_value=0, max_value=100, default_value=speed_to_slider(status["speed"]),
                                   width=220, format="", tag="speed_slider",
                                   callback=lambda s, a, u: self.viewport.post("set_speed", slider_to_speed(a)))
                dpg.add_text(status["speed_text"], tag="speed_text")

            dpg.add_separator()
            dpg.add_text("Focus")
            with dpg.group(horizontal=True):
                for name in self.body_names[:5]:
                    dpg.add_button(label=name, user_data=name, callback=self._on_focus)
            if len(self.body_names) > 5:
                with dpg.group(horizontal=True):
                    for name in self.body_names[5:]:
                        dpg.add_button(label=name, user_data=name, callback=self._on_focus)

            dpg.add_separator()
            with dpg.group(horizontal=True):
                dpg.add_checkbox(label="Orbits", default_value=status["show_orbits"], tag="orbits_check",
                                 callback=lambda s, a, u: self._set_toggle("show_orbits", "toggle_orbits", a))
                dpg.add_checkbox(label="Labels", default_value=status["show_labels"], tag="labels_check",
                                 callback=lambda s, a, u: self._set_toggle("show_labels", "toggle_labels", a))
                dpg.add_checkbox(label="Trails", default_value=status["show_trails"], tag="trails_check",
                                 callback=lambda s, a, u: self._set_toggle("show_trails", "toggle_trails", a))
            with dpg.group(horizontal=True):
                dpg.add_button(label="Pause", tag="pause_button", callback=lambda: self.viewport.post("toggle_pause"))
                dpg.add_button(label="Fit all", callback=lambda: self.viewport.post("fit_all"))
                dpg.add_button(label=center_label(self.viewport.scene), callback=lambda: self.viewport.post("center_star"))
                dpg.add_button(label="Reset", callback=lambda: self.viewport.post("reset"))

            dpg.add_separator()
            dpg.add_text("", tag="info_title")
            dpg.add_text("", tag="info_line1")
            dpg.add_text("", tag="info_line2")
            dpg.add_text("", tag="info_line3")
            dpg.add_text("", tag="elapsed_text")

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _on_focus(self, sender, app_data, user_data):
        self.viewport.post("focus", user_data, True)

    def _set_toggle(self, status_key: str, command: str, value):
        # The scene only toggles; post one only when the checkbox disagrees with it.
        if bool(value) != bool(self.viewport.status.get(status_key)):
            self.viewport.post(command)

    def _sync_ui_with_scene(self):
        """
        Periodic UI update from the viewport's last published status snapshot.
        """
        status = self.viewport.status
        dpg.set_value("zoom_text", status["zoom_text"])
        dpg.set_value("speed_text", status["speed_text"])
        # Leave sliders alone while the user is dragging them.
        if not dpg.is_item_active("zoom_slider"):
            dpg.set_value("zoom_slider", zoom_to_slider(status["zoom"]))
        if not dpg.is_item_active("speed_slider"):
            dpg.set_value("speed_slider", speed_to_slider(status["speed"]))
        dpg.set_value("orbits_check", status["show_orbits"])
        dpg.set_value("labels_check", status["show_labels"])
        dpg.set_value("trails_check", status["show_trails"])
        dpg.configure_item("pause_button", label="Resume" if status["paused"] else "Pause")

        info = status["focus_info"]
        dpg.set_value("info_title", f"{info.name} ({info.kind})")
        if info.is_star:
            dpg.set_value("info_line1", f"Mean radius: {format_km(info.radius_km)}")
            dpg.set_value("info_line2", "")
            dpg.set_value("info_line3", "")
        else:
            dpg.set_value("info_line1", f"Mean distance: {info.sma_au:.3f} AU (now {info.distance_au:.3f} AU)")
            dpg.set_value("info_line2", f"Mean radius: {format_km(info.radius_km)}")
            dpg.set_value("info_line3", f"Orbital period: {info.period_years:.2f} years")
        dpg.set_value("elapsed_text", f"Elapsed: {status['elapsed_text']}")

        if not self.viewport.is_alive():
            dpg.stop_dearpygui()
            return
        self._schedule_sync()


# ============================================================
# Application Entry
# ============================================================

def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive 2D solar system orrery with Kepler orbits.")
    parser.add_argument("--catalog", default=DEFAULT_CATALOG,
                        help="Catalog file name in orrery/catalogs/ or a path to a catalog JSON file.")
    parser.add_argument("--zoom", type=float, default=DEFAULT_ZOOM, help="Initial zoom multiplier.")
    parser.add_argument("--speed", type=float, default=DEFAULT_SPEED, help="Initial speed in days per second.")
    parser.add_argument("--width", type=int, default=VIEW_WIDTH, help="Viewport width in pixels.")
    parser.add_argument("--height", type=int, default=VIEW_HEIGHT, help="Viewport height in pixels.")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging verbosity.")
    parser.add_argument("--list-catalogs", action="store_true", help="List the shipped catalogs and exit.")
    return parser


def main(argv: Optional[list] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    if args.list_catalogs:
        for fn, display in list_catalogs():
            print(f"{fn}\t{display}")
        return 0

    try:
        bodies, display_name = load_catalog(args.catalog)
    except ConfigurationError as e:
        logging.critical(f"Cannot start: {e}")
        return 1

    scene = OrreryScene(bodies, initial_zoom=args.zoom, initial_speed=args.speed,
                        viewport_size=(args.width, args.height))
    viewport = ViewportThread(scene, title=display_name)

    # Start Pygame viewport thread
    viewport.start()

    UI(viewport, title=display_name)

    # Keyboard shortcut in UI window to toggle play/pause (Space)
    with dpg.handler_registry():
        def key_press(sender, app_data):
            if app_data == dpg.mvKey_Spacebar:
                viewport.post("toggle_pause")
        dpg.add_key_press_handler(callback=key_press)

    # Run Dear PyGui event loop
    try:
        dpg.start_dearpygui()
    finally:
        viewport.running = False
        viewport.join(timeout=2.0)
        dpg.destroy_context()
    return 0


if __name__ == "__main__":
    sys.exit(main())
