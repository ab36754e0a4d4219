"""Logging and observability configuration for structured event emission."""

import logging
from typing import Optional

_PACKAGE_PREFIX = "dossier_import."


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that stamps a pipeline component on every record."""

    def process(self, msg, kwargs):
        # Call's extra takes precedence
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def component_for(name: str) -> Optional[str]:
    """Return the pipeline component a module belongs to, or None.

    >>> component_for("dossier_import.validation.service")
    'validation'
    """
    if not name.startswith(_PACKAGE_PREFIX):
        return None
    return name[len(_PACKAGE_PREFIX):].split(".", 1)[0]


def get_logger(name: str, component: Optional[str] = None):
    """Get a logger tagged with the component it logs for.

    Without an explicit component, modules of this package are tagged with
    their top-level subpackage (``dossier_import.persistence.schema`` logs as
    ``persistence``). Other names get a plain logger.

    Example:
        >>> logger = get_logger(__name__, component="sanitization")
        >>> logger.info("Text sanitized", extra={"event": "sanitization.completed"})
    """
    logger = logging.getLogger(name)
    component = component or component_for(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger
