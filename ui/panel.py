"""Right panel: filter and preset dropdowns, world size and reaction sliders, play/pause/step/restart, config save/load."""

import pygame
from typing import Callable

import config
from petri.kinetics import ReactionParams
from ui import tooltips

FONT_SIZE = 16
TOOLTIP_FONT_SIZE = 19
TOOLTIP_SMALL_FONT_SIZE = 16
LABEL_COLOR = (200, 200, 200)
SLIDER_COLOR = (100, 100, 100)
KNOB_COLOR = (180, 180, 180)
BUTTON_COLOR = (60, 60, 60)
BUTTON_HOVER = (80, 80, 80)

FILTER_MODE_LABELS = {"point": "Point", "bilinear": "Bilinear", "trilinear": "Trilinear"}
PRESET_LABELS = {"simulation": "Simulation (48×48)", "display": "Display (256×256)"}

# key -> (label, slider min, slider max, divisor). Slider works in ints; param = int / divisor.
SLIDERS = {
    "width": ("World width", 8, 256, 1),
    "height": ("World height", 8, 256, 1),
    "tick_rate": ("Ticks / second", 1, 120, 1),
    "feed_rate": ("Feed rate (×0.001)", 0, 100, 1000),
    "kill_rate": ("Kill rate (×0.001)", 0, 100, 1000),
    "diffusion_a": ("Diffusion A (×0.01)", 0, 100, 100),
    "diffusion_b": ("Diffusion B (×0.01)", 0, 100, 100),
    "speed": ("Speed (×0.01)", 10, 150, 100),
}
REACTION_KEYS = ("diffusion_a", "diffusion_b", "feed_rate", "kill_rate", "speed")


class ParamPanel:
    """State: params dict; draw and handle events. Save, Restart, Step and preset callbacks."""

    def __init__(
        self,
        rect: pygame.Rect,
        initial: dict,
        on_save: Callable[[], None],
        on_restart: Callable[[], None],
        on_step: Callable[[], None],
        on_preset: Callable[[str], None] | None = None,
    ) -> None:
        self.rect = rect
        self.params = {
            "width": 48,
            "height": 48,
            "tick_rate": 60,
            "filter_mode": "bilinear",
            "config_name": "",
            "paused": True,
            **ReactionParams().as_dict(),
        }
        self.params.update({k: v for k, v in initial.items() if k in self.params or k in REACTION_KEYS})
        self.on_save = on_save
        self.on_restart = on_restart
        self.on_step = on_step
        self.on_preset = on_preset
        self.on_load_config: Callable[[str], None] | None = initial.get("on_load_config")
        self._selected_config: str | None = initial.get("selected_config")
        self._font = None
        self._tooltip_font = None
        self._tooltip_small_font = None
        self._slider_rects: dict[str, pygame.Rect] = {}
        self._button_rects: dict[str, pygame.Rect] = {}
        self._tooltip_rects: dict[str, pygame.Rect] = {}
        self._dragging: str | None = None
        self._filter_dropdown_rect: pygame.Rect | None = None
        self._filter_expanded = False
        self._filter_option_rects: list[tuple[str, pygame.Rect]] = []
        self._preset: str | None = initial.get("preset")
        self._preset_dropdown_rect: pygame.Rect | None = None
        self._preset_expanded = False
        self._preset_option_rects: list[tuple[str, pygame.Rect]] = []
        self._config_dropdown_rect: pygame.Rect | None = None
        self._config_expanded = False
        self._config_option_rects: list[tuple[str, pygame.Rect]] = []
        self._config_name_rect: pygame.Rect | None = None
        self._config_name_focus = False
        self._config_name_buffer = ""
        self._hover_tooltip = None

    def _ensure_font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.Font(None, FONT_SIZE)
        return self._font

    def _ensure_tooltip_fonts(self) -> tuple[pygame.font.Font, pygame.font.Font]:
        if self._tooltip_font is None:
            self._tooltip_font = pygame.font.Font(None, TOOLTIP_FONT_SIZE)
            self._tooltip_small_font = pygame.font.Font(None, TOOLTIP_SMALL_FONT_SIZE)
        return self._tooltip_font, self._tooltip_small_font

    def get_params(self) -> dict:
        return self.params.copy()

    def reaction_params(self) -> dict:
        return {k: self.params[k] for k in REACTION_KEYS if k in self.params}

    # ---------- drawing ----------

    def _draw_button(self, surface: pygame.Surface, key: str, rect: pygame.Rect, text: str) -> None:
        font = self._ensure_font()
        color = BUTTON_HOVER if rect.collidepoint(pygame.mouse.get_pos()) else BUTTON_COLOR
        pygame.draw.rect(surface, color, rect)
        surface.blit(font.render(text, True, LABEL_COLOR), (rect.x + 6, rect.y + 4))
        self._button_rects[key] = rect

    def _draw_dropdown(
        self, surface: pygame.Surface, x: int, y: int, w: int, h: int, text: str
    ) -> pygame.Rect:
        font = self._ensure_font()
        rect = pygame.Rect(x, y, w, h)
        pygame.draw.rect(surface, SLIDER_COLOR, rect)
        pygame.draw.polygon(surface, LABEL_COLOR, [(x + w - 12, y + 4), (x + w - 6, y + 4), (x + w - 9, y + 11)])
        surface.blit(font.render(text[:28], True, LABEL_COLOR), (x + 4, y + 2))
        return rect

    def _draw_options(
        self, surface: pygame.Surface, x: int, y: int, w: int, h: int, options: list[tuple[str, str]]
    ) -> tuple[int, list[tuple[str, pygame.Rect]]]:
        font = self._ensure_font()
        out = []
        for key, text in options:
            opt_rect = pygame.Rect(x, y, w, h)
            color = BUTTON_HOVER if opt_rect.collidepoint(pygame.mouse.get_pos()) else BUTTON_COLOR
            pygame.draw.rect(surface, color, opt_rect)
            surface.blit(font.render(text[:28], True, LABEL_COLOR), (opt_rect.x + 4, opt_rect.y + 2))
            out.append((key, opt_rect))
            y += h + 1
        return y, out

    def draw(self, surface: pygame.Surface, generation: int = 0) -> None:
        font = self._ensure_font()
        x, y = self.rect.x + 8, self.rect.y + 6
        line_h = 18
        gap = 4
        self._slider_rects.clear()
        self._button_rects.clear()
        self._tooltip_rects.clear()
        slider_w = self.rect.width - 16 - 52  # leave room for value text
        slider_h = 12

        surface.blit(font.render(f"Generation: {generation}", True, LABEL_COLOR), (x, y))
        y += line_h + gap

        # Texture filtering dropdown
        row_y = y
        surface.blit(font.render("Filtering", True, LABEL_COLOR), (x, y))
        y += line_h
        drop_w, drop_h = 160, 18
        self._filter_dropdown_rect = self._draw_dropdown(
            surface, x, y, drop_w, drop_h, FILTER_MODE_LABELS.get(self.params["filter_mode"], "Bilinear")
        )
        self._tooltip_rects["filter_mode"] = pygame.Rect(x, row_y, drop_w, line_h + drop_h)
        y += drop_h + gap
        self._filter_option_rects = []
        if self._filter_expanded:
            y, self._filter_option_rects = self._draw_options(
                surface, x, y, drop_w, drop_h, [(m, FILTER_MODE_LABELS[m]) for m in config.FILTER_MODES]
            )
        y += gap

        # Preset dropdown (built-in world layouts)
        row_y = y
        surface.blit(font.render("Preset", True, LABEL_COLOR), (x, y))
        y += line_h
        self._preset_dropdown_rect = self._draw_dropdown(
            surface, x, y, drop_w, drop_h, PRESET_LABELS.get(self._preset, self._preset or "—")
        )
        self._tooltip_rects["preset"] = pygame.Rect(x, row_y, drop_w, line_h + drop_h)
        y += drop_h + gap
        self._preset_option_rects = []
        if self._preset_expanded:
            y, self._preset_option_rects = self._draw_options(
                surface, x, y, drop_w, drop_h, [(p, PRESET_LABELS.get(p, p)) for p in config.PRESETS]
            )
        y += gap

        for key, (label, lo, hi, div) in SLIDERS.items():
            row_y = y
            value = int(round(self.params[key] * div))
            surface.blit(font.render(label, True, LABEL_COLOR), (x, y))
            y += line_h
            self._slider_rects[key] = _draw_slider(surface, x, y, slider_w, slider_h, value, lo, hi)
            _draw_slider_value(surface, font, x + slider_w + 4, y, str(value))
            if key in tooltips.PARAM_TOOLTIPS:
                self._tooltip_rects[key] = pygame.Rect(x, row_y, self.rect.width - 16, line_h + slider_h + gap)
            y += slider_h + gap

        # Start / Pause / Resume, Step and Restart
        btn_h = 26
        if self.params["paused"]:
            text = "Start" if generation == 0 else "Resume"
        else:
            text = "Pause"
        self._draw_button(surface, "pause", pygame.Rect(x, y, 90, btn_h), text)
        self._draw_button(surface, "step", pygame.Rect(x + 94, y, 70, btn_h), "Step")
        self._draw_button(surface, "restart", pygame.Rect(x + 168, y, 90, btn_h), "Restart")
        y += btn_h + gap * 2

        # Config dropdown (saved configs by name)
        surface.blit(font.render("Config", True, LABEL_COLOR), (x, y))
        y += line_h
        drop_w = 200
        self._config_dropdown_rect = self._draw_dropdown(surface, x, y, drop_w, drop_h, self._selected_config or "—")
        y += drop_h + gap
        self._config_option_rects = []
        if self._config_expanded:
            y, self._config_option_rects = self._draw_options(
                surface, x, y, drop_w, drop_h, [(n, n) for n in config.list_configs()]
            )
        y += gap

        # Name field, Save/Update config, and Delete config (when the named config exists)
        surface.blit(font.render("Name", True, LABEL_COLOR), (x, y))
        y += line_h
        name_w = 140
        self._config_name_rect = pygame.Rect(x, y, name_w, 18)
        pygame.draw.rect(surface, SLIDER_COLOR, self._config_name_rect)
        display_name = self._config_name_buffer if self._config_name_focus else self.params["config_name"]
        surface.blit(font.render(display_name[:24], True, LABEL_COLOR), (x + 4, y + 1))
        effective = self._effective_name()
        exists = effective != "" and config.config_exists(effective)
        self._draw_button(surface, "save", pygame.Rect(x + name_w + 6, y, 110, btn_h), "Update config" if exists else "Save config")
        if exists:
            self._draw_button(surface, "delete_config", pygame.Rect(x + name_w + 122, y, 60, btn_h), "Delete")

    def update_hover_tooltip(self, pos: tuple[int, int]) -> None:
        self._hover_tooltip = None
        for key, r in self._tooltip_rects.items():
            if r.collidepoint(pos):
                self._hover_tooltip = tooltips.PARAM_TOOLTIPS.get(key)
                return

    def draw_tooltip(self, surface: pygame.Surface) -> None:
        if self._dragging is not None or self._filter_expanded or self._preset_expanded or self._config_expanded:
            return
        tf, sf = self._ensure_tooltip_fonts()
        tooltips.draw_tooltip(surface, tf, sf, self._hover_tooltip, pygame.mouse.get_pos())

    # ---------- events ----------

    def _effective_name(self) -> str:
        raw = self._config_name_buffer if self._config_name_focus else self.params["config_name"]
        return (raw or "").strip()

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Returns True if event was consumed."""
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            return self._handle_click(event.pos)
        if event.type == pygame.KEYDOWN and self._config_name_focus:
            if event.key == pygame.K_RETURN:
                self._apply_config_name_buffer()
            elif event.key == pygame.K_BACKSPACE:
                self._config_name_buffer = self._config_name_buffer[:-1]
            elif event.unicode and event.unicode.isprintable() and len(self._config_name_buffer) < 48:
                self._config_name_buffer += event.unicode
            return True
        if event.type == pygame.MOUSEBUTTONUP:
            self._dragging = None
        elif event.type == pygame.MOUSEMOTION:
            self.update_hover_tooltip(event.pos)
            if self._dragging is not None and self._dragging in self._slider_rects:
                self._set_slider_value(self._dragging, event.pos, self._slider_rects[self._dragging])
                return True
        return False

    def _handle_click(self, pos: tuple[int, int]) -> bool:
        if self._config_name_rect is not None and self._config_name_rect.collidepoint(pos):
            if not self._config_name_focus:
                self._config_name_focus = True
                self._config_name_buffer = self.params["config_name"]
            return True
        if self._config_name_focus:
            self._apply_config_name_buffer()

        if self._filter_dropdown_rect is not None and self._filter_dropdown_rect.collidepoint(pos):
            self._filter_expanded = not self._filter_expanded
            self._preset_expanded = False
            self._config_expanded = False
            return True
        for mode, opt_rect in self._filter_option_rects:
            if self._filter_expanded and opt_rect.collidepoint(pos):
                self.params["filter_mode"] = mode
                self._filter_expanded = False
                return True
        self._filter_expanded = False

        if self._preset_dropdown_rect is not None and self._preset_dropdown_rect.collidepoint(pos):
            self._preset_expanded = not self._preset_expanded
            self._config_expanded = False
            return True
        for name, opt_rect in self._preset_option_rects:
            if self._preset_expanded and opt_rect.collidepoint(pos):
                self.select_preset(name)
                return True
        self._preset_expanded = False

        if self._config_dropdown_rect is not None and self._config_dropdown_rect.collidepoint(pos):
            self._config_expanded = not self._config_expanded
            return True
        for name, opt_rect in self._config_option_rects:
            if self._config_expanded and opt_rect.collidepoint(pos):
                self._selected_config = name
                self._config_expanded = False
                if self.on_load_config:
                    self.on_load_config(name)
                return True
        self._config_expanded = False

        for key, slider_rect in self._slider_rects.items():
            if slider_rect.collidepoint(pos):
                self._dragging = key
                self._set_slider_value(key, pos, slider_rect)
                return True
        for key, btn_rect in self._button_rects.items():
            if not btn_rect.collidepoint(pos):
                continue
            if key == "pause":
                self.params["paused"] = not self.params["paused"]
            elif key == "step":
                self.params["paused"] = True
                self.on_step()
            elif key == "restart":
                self.on_restart()
            elif key == "save":
                self.on_save()
            elif key == "delete_config":
                name = self._effective_name()
                config.delete_config(name)
                if self._selected_config == config._sanitize_name(name):
                    self._selected_config = None
            return True
        return False

    def _apply_config_name_buffer(self) -> None:
        self.params["config_name"] = self._config_name_buffer.strip()[:64]
        self._config_name_buffer = ""
        self._config_name_focus = False

    def apply_config(self, cfg: dict) -> None:
        """Load a config dict into panel params (e.g. after loading a saved config)."""
        self.params["width"] = int(cfg["world"]["width"])
        self.params["height"] = int(cfg["world"]["height"])
        self.params["tick_rate"] = int(cfg.get("tick_rate", self.params["tick_rate"]))
        self.params["filter_mode"] = cfg.get("filter_mode", self.params["filter_mode"])
        for k in REACTION_KEYS:
            if k in cfg.get("reaction", {}):
                self.params[k] = float(cfg["reaction"][k])
        if "config_name" in cfg:
            self.params["config_name"] = cfg["config_name"]

    def select_preset(self, name: str) -> None:
        """Pick a built-in preset; the owner applies it and restarts."""
        self._preset = name
        self._preset_expanded = False
        if self.on_preset:
            self.on_preset(name)

    def set_selected_config(self, name: str) -> None:
        """Called after save so dropdown shows the current config."""
        self._selected_config = name

    def _set_slider_value(self, key: str, pos: tuple[int, int], slider_rect: pygame.Rect) -> None:
        _, lo, hi, div = SLIDERS[key]
        t = (pos[0] - slider_rect.x) / max(1, slider_rect.width - 8)
        t = max(0, min(1, t))
        val = int(lo + t * (hi - lo))
        self.params[key] = val if div == 1 else val / div

    def config_dict(self, base: dict) -> dict:
        """base config with the panel's values written over it, ready for config.save_config."""
        out = dict(base)
        out["world"] = {**base.get("world", {}), "width": self.params["width"], "height": self.params["height"]}
        out["reaction"] = {**base.get("reaction", {}), **self.reaction_params()}
        out["tick_rate"] = self.params["tick_rate"]
        out["filter_mode"] = self.params["filter_mode"]
        return out


def _draw_slider(
    surface: pygame.Surface, x: int, y: int, w: int, h: int, value: int, vmin: int, vmax: int
) -> pygame.Rect:
    rect = pygame.Rect(x, y, w, h)
    pygame.draw.rect(surface, SLIDER_COLOR, rect)
    t = max(0.0, min(1.0, (value - vmin) / max(1, vmax - vmin)))
    knob_x = x + 4 + int(t * (w - 8))
    pygame.draw.rect(surface, KNOB_COLOR, (knob_x, y, 8, h))
    return rect


def _draw_slider_value(
    surface: pygame.Surface, font: pygame.font.Font, x: int, y: int, value_str: str
) -> None:
    surface.blit(font.render(value_str, True, LABEL_COLOR), (x, y))
