# skillsweeper/config.py

import copy
import os

import yaml

from .constants import MINIMUM_EMPTY_TILES

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "config", "skillsweeper.yaml"
)

DEFAULT_CONFIG = {
    "board": {"width": 10, "height": 10, "num_mines": 10},
    "limits": {"max_width": 30, "max_height": 24, "minimum_empty_tiles": MINIMUM_EMPTY_TILES},
    "logging": {"level": "INFO"},
}


def load_config(path: str = None) -> dict:
    """
    Load the YAML config at `path` (default: config/skillsweeper.yaml) over the
    built-in defaults. A missing file just yields the defaults.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    path = path or DEFAULT_CONFIG_PATH
    if not os.path.exists(path):
        return config

    with open(path, "r") as f:
        loaded = yaml.safe_load(f) or {}

    for section, values in loaded.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    return config


def clamp_settings(height, width, num_mines, config: dict = None):
    """
    Clamp board settings into range instead of rejecting them: dimensions to
    [1, max] and the mine count to [0, height * width - minimum_empty_tiles].
    """
    limits = (config or DEFAULT_CONFIG)["limits"]
    height = max(1, min(int(height), int(limits["max_height"])))
    width = max(1, min(int(width), int(limits["max_width"])))
    max_mines = max(0, height * width - int(limits["minimum_empty_tiles"]))
    num_mines = max(0, min(int(num_mines), max_mines))
    return height, width, num_mines
