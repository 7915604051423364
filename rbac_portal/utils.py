"""
Logging helpers shared by the core, the persistence adapter and scripts.
"""
import logging

from rbac_portal.core import config


_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_configured = False


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    root = logging.getLogger("rbac_portal")
    root.addHandler(handler)
    root.setLevel(config.LOG_LEVEL)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the package logging tree.

    Usage:
        log = get_logger(__name__)
        log.info("Granted role %s", role_id)
    """
    _configure_root()
    if not name.startswith("rbac_portal"):
        name = f"rbac_portal.{name}"
    return logging.getLogger(name)
