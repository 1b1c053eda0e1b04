"""Kopf handlers for the auto-cluster-operator."""

__all__ = (
    "configure_operator",
    "handle_watched_event",
    "register_handlers",
    "stop_operator",
)

from autoclusteroperator.config import Configuration
from autoclusteroperator.handlers.operatorsetup import (
    configure_operator,
    register_handlers,
    stop_operator,
)
from autoclusteroperator.handlers.watcher import handle_watched_event

register_handlers(Configuration.from_env())
