"""
Configuration loading for Krill.

Settings live in ~/krill/config/krill.conf (or wherever $KRILL_CONFIG points),
one ``key=value`` per line. Lines starting with '#' are comments. Anything the
editor does not understand is logged and skipped, so a broken config file never
prevents the editor from starting.
"""
import math
import os
from dataclasses import dataclass, fields

from krill import logger

CONFIG_PATH = "~/krill/config/krill.conf"

@dataclass
class Settings:
    tab_stop: int = 8
    quit_times: int = 3
    message_timeout: float = 5.0
    log_file: str = "~/krill/krill.log"

# Lower bound for each numeric setting
_MINIMUMS = {
    "tab_stop": 1,
    "quit_times": 0,
    "message_timeout": 0,
}

def config_path() -> str:
    """Return the path of the config file, honouring $KRILL_CONFIG."""
    return os.path.expanduser(os.environ.get("KRILL_CONFIG", CONFIG_PATH))

def parse_settings(lines) -> Settings:
    """Build Settings from an iterable of ``key=value`` lines."""
    settings = Settings()
    types = {f.name: f.type for f in fields(Settings)}
    for lineno, line in enumerate(lines, 1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            logger.log(f"config line {lineno}: expected key=value, got '{line}'")
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if key not in types:
            logger.log(f"config line {lineno}: unknown setting '{key}'")
            continue
        if key == "log_file":
            settings.log_file = value
            continue
        convert = int if types[key] in (int, "int") else float
        try:
            parsed = convert(value)
        except ValueError:
            logger.log(f"config line {lineno}: bad value for {key}: '{value}'")
            continue
        if not math.isfinite(parsed):
            logger.log(f"config line {lineno}: {key} must be a finite number")
            continue
        if parsed < _MINIMUMS[key]:
            logger.log(f"config line {lineno}: {key} must be >= {_MINIMUMS[key]}")
            continue
        setattr(settings, key, parsed)
    return settings

def load_settings(path: str = None) -> Settings:
    """
    Load settings from the config file. A missing file yields the defaults;
    an unreadable one is logged and also yields the defaults.
    """
    path = path or config_path()
    if not os.path.isfile(path):
        return Settings()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return parse_settings(f)
    except (OSError, UnicodeDecodeError) as e:
        logger.log(f"could not read config {path}: {e}")
        return Settings()
