"""Code intended to run on start-up, before running any handlers."""

__all__ = ("start_operator",)

from typing import Any

import structlog

from autoclusteroperator.config import Configuration
from autoclusteroperator.k8s import (
    create_dynamic_client,
    create_k8sclient,
    resolve_resource,
)
from autoclusteroperator.reconciler import Reconciler


def start_operator(
    configuration: Configuration,
    *,
    k8s_client: Any = None,
    dynamic_client: Any = None,
    logger: Any = None,
) -> Reconciler:
    """Start up the operator, resolving every resource type it uses.

    The watched resource and both dependent resources are resolved once here
    and kept by the returned reconciler for the life of the process.

    Raises
    ------
    autoclusteroperator.exceptions.DiscoveryError
        Raised if any resource type cannot be resolved.
    """
    if logger is None:
        logger = structlog.getLogger(__name__)
    if k8s_client is None:
        k8s_client = create_k8sclient()
    if dynamic_client is None:
        dynamic_client = create_dynamic_client(k8s_client)

    watched = resolve_resource(
        configuration.watched,
        dynamic_client=dynamic_client,
        required_verbs=("list", "watch"),
    )
    logger.info(f"Watching {watched} for {configuration.watched.kind}")

    cluster_resource = resolve_resource(
        configuration.cluster,
        dynamic_client=dynamic_client,
        required_verbs=("list", "create"),
        namespaced=True,
    )
    selector_resource = resolve_resource(
        configuration.selector,
        dynamic_client=dynamic_client,
        required_verbs=("create",),
        namespaced=True,
    )
    logger.info(
        f"Provisioning {cluster_resource} and {selector_resource} in "
        f"namespace {configuration.target_namespace}"
    )

    return Reconciler(
        configuration=configuration,
        cluster_resource=cluster_resource,
        selector_resource=selector_resource,
        k8s_client=k8s_client,
    )
