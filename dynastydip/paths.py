"""
Where the diplomacy core finds its config and name lists, and where the
JSON file repository writes saves by default. Everything hangs off
PROJECT_ROOT, the directory holding ``dynastydip/``.
"""

from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent

CONFIG_DIR = PROJECT_ROOT / "config"
FALLBACK_CONFIG_DIR = CONFIG_DIR / "fallback_config_files"
NAME_LISTS_DIR = PROJECT_ROOT / "name_lists"

SAVE_DIR = PROJECT_ROOT / "saves"
