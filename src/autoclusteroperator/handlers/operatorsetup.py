"""Kopf handlers for operator start-up and shutdown, and the registration of
every handler.
"""

__all__ = ("configure_operator", "register_handlers", "stop_operator")

from typing import Any

import kopf

from autoclusteroperator.config import Configuration
from autoclusteroperator.exceptions import DiscoveryError
from autoclusteroperator.handlers.watcher import handle_watched_event
from autoclusteroperator.startup import start_operator


def configure_operator(
    *,
    param: Configuration,
    settings: kopf.OperatorSettings,
    memo: kopf.Memo,
    logger: Any,
    **kwargs: Any,
) -> None:
    """Configure kopf and resolve the resources before watching starts.

    Parameters
    ----------
    param : `autoclusteroperator.config.Configuration`
        The operator configuration, bound at registration.
    settings : `kopf.OperatorSettings`
        The kopf settings to adjust.
    memo : `kopf.Memo`
        The operator memo; receives the ``reconciler``.
    logger : `Any`
        The kopf logger.
    kwargs : `Any`
        Additional keyword arguments provided by kopf.
    """
    settings.watching.server_timeout = param.watch_timeout
    settings.watching.client_timeout = (
        param.watch_timeout + param.request_timeout
    )
    settings.watching.connect_timeout = param.request_timeout
    # The watched objects are only read, never annotated with k8s events.
    settings.posting.enabled = False
    settings.peering.standalone = True
    if param.max_workers is not None:
        settings.execution.max_workers = param.max_workers

    try:
        memo.reconciler = start_operator(param, logger=logger)
    except DiscoveryError as err:
        raise kopf.PermanentError(str(err)) from err


def stop_operator(*, logger: Any, **kwargs: Any) -> None:
    """Log the operator shutdown."""
    logger.info("Stopping; in-flight reconciliations finish first")


def register_handlers(
    configuration: Configuration,
    registry: kopf.OperatorRegistry | None = None,
) -> None:
    """Register the operator handlers for a configuration.

    Parameters
    ----------
    configuration : `autoclusteroperator.config.Configuration`
        The operator configuration. Its ``watched`` resource selects the
        objects passed to `handle_watched_event`.
    registry : `kopf.OperatorRegistry`, optional
        The registry to add handlers to. Defaults to kopf's global registry.
    """
    watched = configuration.watched
    kopf.on.startup(param=configuration, registry=registry)(
        configure_operator
    )
    kopf.on.cleanup(registry=registry)(stop_operator)
    kopf.on.event(
        group=watched.group,
        version=watched.version,
        kind=watched.kind,
        registry=registry,
    )(handle_watched_event)
