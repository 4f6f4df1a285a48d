from __future__ import annotations

"""Central logging configuration for spotty.

Import and call :func:`setup_logging` at application start-up.
"""

import copy
import logging
import logging.config
import os
from typing import Optional

from spotty.config import ConfigManager

__all__ = ["setup_logging"]

_TRUTHY = {'1', 'true', 'yes', 'on'}


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application using configuration from YAML files.

    *verbose* raises the ``spotty`` logger to DEBUG so payload-level messages
    reach the console.  The ``file`` handler is only kept when
    ``SPOTTY_LOG_DIR`` names a directory for ``spotty.log``; otherwise logging
    stays on the console.
    """
    log_dir = os.environ.get("SPOTTY_LOG_DIR", "").strip()

    try:
        logging_config = copy.deepcopy(ConfigManager().get_logging_config())

        if logging_config and isinstance(logging_config, dict) and logging_config.get("version"):
            handlers = logging_config.get("handlers", {})
            if "file" in handlers:
                if log_dir:
                    os.makedirs(log_dir, exist_ok=True)
                    handlers["file"]["filename"] = os.path.join(log_dir, "spotty.log")
                else:
                    _drop_handler(logging_config, "file")
            logging.config.dictConfig(logging_config)
            logging.getLogger(__name__).debug("Logging initialised from config files")
        else:
            _setup_minimal_logging()
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        print(f"Error loading logging config: {exc}")
        _setup_minimal_logging()

    extra = ["spotty"] if verbose else []
    _apply_debug_overrides(extra)


def _drop_handler(logging_config: dict, name: str) -> None:
    """Remove handler *name* and every reference to it from a dictConfig document."""
    logging_config.get("handlers", {}).pop(name, None)
    targets = list(logging_config.get("loggers", {}).values())
    if "root" in logging_config:
        targets.append(logging_config["root"])
    for target in targets:
        if name in target.get("handlers", []):
            target["handlers"] = [h for h in target["handlers"] if h != name]

def _setup_minimal_logging() -> None:
    """Set up minimal console-only logging when config is unavailable."""
    minimal_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': 'INFO',
            },
        },
        'root': {
            'level': 'INFO',
            'handlers': ['console'],
        },
    }

    logging.config.dictConfig(minimal_config)
    logging.warning("Logging initialised with minimal fallback (config error)")


def _apply_debug_overrides(extra_targets: Optional[list[str]] = None) -> None:
    """Raise selected loggers to DEBUG.

    Supports:
    - SPOTTY_DEBUG=true -> DEBUG for the whole ``spotty`` package
    - SPOTTY_DEBUG_MODULES=comma,separated,logger,names -> DEBUG for listed loggers
    """
    targets = list(extra_targets or [])
    if os.environ.get('SPOTTY_DEBUG', '').strip().lower() in _TRUTHY:
        targets.append('spotty')
    extra_modules = os.environ.get('SPOTTY_DEBUG_MODULES', '').strip()
    if extra_modules:
        targets.extend([m.strip() for m in extra_modules.split(',') if m.strip()])

    for name in dict.fromkeys(targets):
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        # Console handlers sit at INFO in logging.yml; let DEBUG through as well
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler) and handler.level > logging.DEBUG:
                handler.setLevel(logging.DEBUG)
        logger.debug("Debug override active for logger '%s'", name)
