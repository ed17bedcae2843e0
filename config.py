"""Load/save simulation and UI parameters. Configs live in configs/ as {name}.json. Only parameters
are stored; the simulation state itself is never written to disk."""

import copy
import json
import logging
import re
from pathlib import Path

from petri.constants import DEFAULT_HEIGHT, DEFAULT_SEED_CENTER, DEFAULT_SEED_RADIUS, DEFAULT_WIDTH
from petri.engine import ReactionDiffusion
from petri.kinetics import ReactionParams
from petri.seed_util import relative_center

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent / "configs"
LAST_FILE = CONFIG_DIR / "last.txt"

FILTER_MODES = ("point", "bilinear", "trilinear")

# In-memory index of saved names so we avoid disk access for exists/dropdown.
_CONFIG_INDEX: set[str] = set()

# "simulation": small grid, small seed off-center. "display": large grid, big seed at (h/6, w/4).
PRESETS = {
    "simulation": {
        "world": {"width": 48, "height": 48},
        "seed_circle": {"center": [12.0, 20.0], "radius": 3.0},
    },
    "display": {
        "world": {"width": 256, "height": 256},
        "seed_circle": {"center_frac": [1.0 / 6.0, 1.0 / 4.0], "radius": 20.0},
        "filter_mode": "point",
    },
}


def refresh_index() -> None:
    """Rebuild _CONFIG_INDEX from disk. Call at startup and after external changes."""
    global _CONFIG_INDEX
    _CONFIG_INDEX = set()
    if not CONFIG_DIR.exists():
        return
    for f in CONFIG_DIR.glob("*.json"):
        _CONFIG_INDEX.add(f.stem)


def _sanitize_name(name: str) -> str:
    s = (name or "").strip()
    s = re.sub(r"[^\w\s-]", "", s)
    s = re.sub(r"[\s-]+", "_", s).strip("_")
    return s[:64] or "unnamed"


def get_config_path(name: str) -> Path:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return CONFIG_DIR / f"{_sanitize_name(name)}.json"


def list_configs() -> list[str]:
    """Saved config names, from the in-memory index."""
    return sorted(_CONFIG_INDEX, key=str.lower)


def get_last_config() -> str | None:
    if not LAST_FILE.exists():
        return None
    try:
        raw = LAST_FILE.read_text().strip()
    except OSError:
        return None
    return raw or None


def set_last_config(name: str) -> None:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    LAST_FILE.write_text(_sanitize_name(name))


def _read_json(p: Path) -> dict:
    try:
        with open(p, "r") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("could not read config %s (%s); using defaults", p, e)
        return _default_config()
    if not isinstance(data, dict):
        logger.warning("config %s is not a JSON object; using defaults", p)
        return _default_config()
    return _merge_defaults(data)


def load_config(path: Path | str | None = None) -> dict:
    """Config at path, else the last saved config, else defaults. Always fully populated."""
    if path is not None:
        p = Path(path)
        if not p.exists():
            return _default_config()
        return _read_json(p)
    last = get_last_config()
    if last is None:
        return _default_config()
    p = CONFIG_DIR / f"{last}.json"
    if not p.exists():
        return _default_config()
    return _read_json(p)


def save_config(params: dict, name: str) -> Path:
    """Write params (merged over defaults) as {name}.json and mark it as last."""
    path = get_config_path(name)
    out = _merge_defaults(params)
    out["config_name"] = _sanitize_name(name)
    with open(path, "w") as f:
        json.dump(out, f, indent=2)
    set_last_config(name)
    _CONFIG_INDEX.add(_sanitize_name(name))
    logger.info("saved config %s", path.name)
    return path


def _default_config() -> dict:
    return {
        "world": {"width": DEFAULT_WIDTH, "height": DEFAULT_HEIGHT},
        "reaction": ReactionParams().as_dict(),
        "seed_circle": {"center": list(DEFAULT_SEED_CENTER), "radius": DEFAULT_SEED_RADIUS},
        "workers": 1,
        "tick_rate": 60,
        "filter_mode": "bilinear",
        "log_level": "INFO",
    }


def _merge_defaults(data: dict) -> dict:
    d = _default_config()
    for section in ("world", "reaction"):
        if isinstance(data.get(section), dict):
            d[section] = {**d[section], **data[section]}
    if isinstance(data.get("seed_circle"), dict):
        sc = data["seed_circle"]
        # center_frac replaces an absolute center rather than merging with it
        if "center_frac" in sc:
            d["seed_circle"] = {"center_frac": sc["center_frac"], "radius": sc.get("radius", DEFAULT_SEED_RADIUS)}
        else:
            d["seed_circle"] = {**d["seed_circle"], **sc}
    for k in ("workers", "tick_rate", "filter_mode", "log_level", "config_name"):
        if k in data:
            d[k] = data[k]
    if d["filter_mode"] not in FILTER_MODES:
        logger.warning("unknown filter_mode %r; using bilinear", d["filter_mode"])
        d["filter_mode"] = "bilinear"
    return d


def apply_preset(name: str, cfg: dict | None = None) -> dict:
    """Defaults (or cfg) with a named preset merged over them. Raises KeyError for unknown presets."""
    preset = PRESETS[name]
    base = copy.deepcopy(cfg) if cfg is not None else _default_config()
    merged = {**base, **copy.deepcopy(preset)}
    for section in ("world", "reaction"):
        if section in preset:
            merged[section] = {**base.get(section, {}), **preset[section]}
    return _merge_defaults(merged)


def seed_from_config(cfg: dict) -> tuple[tuple[float, float], float]:
    """(center, radius) for the seed circle; center_frac is resolved against the world size."""
    world = cfg["world"]
    sc = cfg.get("seed_circle", {})
    radius = float(sc.get("radius", DEFAULT_SEED_RADIUS))
    if "center_frac" in sc:
        rf, cf = sc["center_frac"]
        return relative_center(int(world["width"]), int(world["height"]), rf, cf), radius
    ci, cj = sc.get("center", DEFAULT_SEED_CENTER)
    return (float(ci), float(cj)), radius


def engine_from_config(cfg: dict) -> ReactionDiffusion:
    """Build and initialize an engine from a loaded config."""
    engine = ReactionDiffusion(
        params=ReactionParams.from_dict(cfg.get("reaction")),
        workers=max(1, int(cfg.get("workers", 1))),
    )
    center, radius = seed_from_config(cfg)
    engine.initialize(int(cfg["world"]["width"]), int(cfg["world"]["height"]), center, radius)
    return engine


def config_exists(name: str) -> bool:
    """Use in-memory index; no disk access."""
    return _sanitize_name(name) in _CONFIG_INDEX


def delete_config(name: str) -> None:
    """Remove config from disk and index. Clear last if this was last."""
    key = _sanitize_name(name)
    _CONFIG_INDEX.discard(key)
    p = CONFIG_DIR / f"{key}.json"
    if p.exists():
        p.unlink(missing_ok=True)
        logger.info("deleted config %s", p.name)
    if get_last_config() == key and LAST_FILE.exists():
        LAST_FILE.unlink(missing_ok=True)
