"""
App shell: display and main loop. The simulation is tick-driven from elapsed time and
tick_rate (independent of frame rate). Engine, UI, and config are wired here.
"""

import logging

import pygame

import config
from ui.grid_view import draw_grid
from ui.panel import ParamPanel

logger = logging.getLogger(__name__)

TITLE = "Petri"
WIDTH, HEIGHT = 960, 640
BACKGROUND = (0, 0, 0)
GRID_PANEL_WIDTH = 640  # left panel for grid; the rest is the parameter panel


def setup_logging(level: str | int = "INFO") -> None:
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")


def run() -> None:
    config.refresh_index()
    cfg = config.load_config()
    setup_logging(cfg.get("log_level", "INFO"))

    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption(TITLE)
    clock = pygame.time.Clock()

    engine = config.engine_from_config(cfg)
    logger.info("started %dx%d simulation, params=%s", engine.width, engine.height, engine.params)

    grid_rect = pygame.Rect(0, 0, GRID_PANEL_WIDTH, HEIGHT)
    panel_rect = pygame.Rect(GRID_PANEL_WIDTH, 0, WIDTH - GRID_PANEL_WIDTH, HEIGHT)

    def rebuild(new_cfg: dict) -> None:
        nonlocal engine, cfg
        engine.close()
        cfg = new_cfg
        engine = config.engine_from_config(cfg)
        logger.info("restarted %dx%d simulation, params=%s", engine.width, engine.height, engine.params)

    def do_restart() -> None:
        rebuild(panel.config_dict(cfg))

    def do_step() -> None:
        engine.step()

    def save_current_config() -> None:
        params = panel.get_params()
        name = (params.get("config_name") or "").strip() or "unnamed"
        config.save_config(panel.config_dict(cfg), name)
        panel.set_selected_config(config._sanitize_name(name))

    def load_config_callback(name: str) -> None:
        path = config.get_config_path(name)
        if not path.exists():
            return
        loaded = config.load_config(path)
        panel.apply_config(loaded)
        panel.params["config_name"] = name
        rebuild(loaded)

    def load_preset_callback(name: str) -> None:
        new_cfg = config.apply_preset(name, panel.config_dict(cfg))
        panel.apply_config(new_cfg)
        rebuild(new_cfg)

    last = config.get_last_config()
    panel = ParamPanel(
        panel_rect,
        {
            "width": engine.width,
            "height": engine.height,
            "tick_rate": cfg.get("tick_rate", 60),
            "filter_mode": cfg.get("filter_mode", "bilinear"),
            **engine.params.as_dict(),
            "config_name": last or "",
            "selected_config": last,
            "on_load_config": load_config_callback,
        },
        on_save=save_current_config,
        on_restart=do_restart,
        on_step=do_step,
        on_preset=load_preset_callback,
    )

    tick_accum = 0.0
    running = True

    while running:
        dt_ms = clock.tick(60)
        dt_s = dt_ms / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                break
            panel.handle_event(event)

        params = panel.get_params()
        # Live world size: if changed, rebuild with the same seed layout
        if (params["height"], params["width"]) != engine.shape:
            rebuild(panel.config_dict(cfg))

        if not params["paused"]:
            tick_rate = max(1, min(120, params["tick_rate"]))
            tick_accum += dt_s * tick_rate
            # Cap ticks per frame so we never freeze when tick rate exceeds what we can do
            max_ticks_per_frame = max(4, tick_rate // 10)
            num_ticks = min(int(tick_accum), max_ticks_per_frame)
            tick_accum -= num_ticks
            tick_accum = min(tick_accum, max_ticks_per_frame)  # prevent unbounded backlog
            engine.run(num_ticks)

        screen.fill(BACKGROUND)
        a, b = engine.concentrations()
        draw_grid(screen, grid_rect, a, b, filter_mode=params.get("filter_mode", "bilinear"))
        panel.draw(screen, generation=engine.generation)
        panel.draw_tooltip(screen)
        pygame.display.flip()

    engine.close()
    pygame.quit()


if __name__ == "__main__":
    run()
