import logging
import sys
from typing import Any, Dict, Optional, Union

from tqdm import tqdm

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"

Level = Union[str, int, None]


class LogWithTqdm(logging.Handler):
    """
    Writes records through `tqdm.write()` so batch progress bars stay on one line.
    """
    def emit(self, record):
        try:
            tqdm.write(self.format(record), file=sys.stderr)
        except Exception:
            self.handleError(record)


def _to_level(level: Level, fallback: int) -> int:
    if isinstance(level, str):
        value = logging.getLevelName(level.upper())
        return value if isinstance(value, int) else fallback
    return level if level is not None else fallback


def configure_logger(general_level: Level = 'INFO',
                     module_specific_levels: Optional[Dict[str, Level]] = None,
                     silenced_loggers: Optional[Dict[str, Level]] = None) -> logging.Logger:
    """
    Installs a single tqdm-aware handler on the root logger and applies
    per-module levels. Calling it again replaces the previous handler.
    """
    handler = LogWithTqdm()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(_to_level(general_level, logging.INFO))
    for existing in [h for h in root_logger.handlers if isinstance(h, LogWithTqdm)]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for name, level in (module_specific_levels or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.INFO))

    # Third-party loggers default to CRITICAL unless a level is given
    for name, level in (silenced_loggers or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.CRITICAL))
    return root_logger


def configure_from_settings(debug_settings: Dict[str, Any], level_override: Level = None) -> logging.Logger:
    """Applies the 'debug' section of settings.json (level, module_levels, silenced_loggers)."""
    return configure_logger(
        level_override or debug_settings.get("level", "INFO"),
        module_specific_levels=debug_settings.get("module_levels"),
        silenced_loggers=debug_settings.get("silenced_loggers"),
    )
