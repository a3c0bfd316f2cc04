
import os

import yaml
from pathlib import Path

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default.yaml"
CONFIG_PATH = Path("./local.yaml") if os.path.exists("./local.yaml") else DEFAULT_CONFIG_PATH

_defaults = {
    "index_subfeatures": True,
    "label_style": "named",
    "log_level": "WARNING",
    "json_indent": 1,
}


def _load(path):
    cfg = dict(_defaults)
    with open(path) as f:
        cfg.update(yaml.safe_load(f) or {})
    return cfg


cfg = _load(CONFIG_PATH)

# Constants
INDEX_SUBFEATURES = bool(cfg.get("index_subfeatures"))
LABEL_STYLE = cfg.get("label_style", "named")
LOG_LEVEL = cfg.get("log_level", "WARNING")
JSON_INDENT = cfg.get("json_indent")


def get_config(default = False):

    if default:
        cfg_path = DEFAULT_CONFIG_PATH
    else:
        cfg_path = Path("./local.yaml")
        if not cfg_path.exists():
            return get_config(default = True)

    return _load(cfg_path)
