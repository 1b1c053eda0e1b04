"""Reconciliation of a cluster name into its selector and cluster objects."""

from __future__ import annotations

__all__ = ("ReconcileOutcome", "Reconciler", "object_exists")

import enum
from typing import Any

import structlog

from autoclusteroperator.config import Configuration
from autoclusteroperator.exceptions import CreateConflictError, QueryError
from autoclusteroperator.k8s import (
    ResourceDescriptor,
    create_namespaced_object,
    list_namespaced_objects,
)
from autoclusteroperator.resources import build_cluster, build_selector


class ReconcileOutcome(enum.Enum):
    """How a reconciliation ended."""

    ALREADY_SATISFIED = "already-satisfied"
    """The cluster object existed; nothing was created."""

    PROVISIONED = "provisioned"
    """Both the selector and the cluster objects were created."""

    ALREADY_PROVISIONING = "already-provisioning"
    """At least one creation conflicted with an existing object."""


def object_exists(
    *,
    resource: ResourceDescriptor,
    namespace: str,
    name: str,
    k8s_client: Any,
    request_timeout: float | None = None,
) -> bool:
    """Check whether a named object exists, using a field-selector listing.

    Parameters
    ----------
    resource : `autoclusteroperator.k8s.ResourceDescriptor`
        The resource to look in.
    namespace : `str`
        The namespace to look in.
    name : `str`
        The ``metadata.name`` to match.
    k8s_client
        A Kubernetes client (see
        `autoclusteroperator.k8s.create_k8sclient`).
    request_timeout : `float`, optional
        Timeout of the request, in seconds.

    Returns
    -------
    exists : `bool`
        `True` if the listing has at least one item.

    Raises
    ------
    autoclusteroperator.exceptions.QueryError
        Raised if the listing fails, or if its response has no ``items`` list
        so existence cannot be determined.
    """
    response = list_namespaced_objects(
        resource=resource,
        namespace=namespace,
        k8s_client=k8s_client,
        field_selector=f"metadata.name={name}",
        request_timeout=request_timeout,
    )
    items = response.get("items") if isinstance(response, dict) else None
    if not isinstance(items, list):
        raise QueryError(
            f"Listing {resource} {namespace}/{name} returned no items list"
        )
    return len(items) > 0


class Reconciler:
    """Ensure a selector and a cluster object exist for a cluster name.

    The reconciler keeps no state between calls: every call re-checks the
    cluster, so re-delivered and duplicate events are safe.

    The existence check and the creations are not atomic. Two calls for the
    same key that run at the same time can both find the cluster missing and
    both try to create the objects; the loser gets a conflict from the API
    server, which is logged and reported as
    `ReconcileOutcome.ALREADY_PROVISIONING`.

    Parameters
    ----------
    configuration : `autoclusteroperator.config.Configuration`
        The operator configuration.
    cluster_resource : `autoclusteroperator.k8s.ResourceDescriptor`
        The resolved resource of the cluster objects.
    selector_resource : `autoclusteroperator.k8s.ResourceDescriptor`
        The resolved resource of the selector objects.
    k8s_client
        A Kubernetes client (see
        `autoclusteroperator.k8s.create_k8sclient`).
    """

    def __init__(
        self,
        *,
        configuration: Configuration,
        cluster_resource: ResourceDescriptor,
        selector_resource: ResourceDescriptor,
        k8s_client: Any,
    ) -> None:
        self.configuration = configuration
        self.cluster_resource = cluster_resource
        self.selector_resource = selector_resource
        self.k8s_client = k8s_client

    def reconcile(
        self, key: str, *, logger: Any | None = None
    ) -> ReconcileOutcome:
        """Create the selector and cluster objects for ``key`` unless the
        cluster already exists.

        Parameters
        ----------
        key : `str`
            The cluster name.
        logger : optional
            Logger to use. Defaults to a structlog logger.

        Returns
        -------
        outcome : `ReconcileOutcome`
            What the reconciliation did.

        Raises
        ------
        autoclusteroperator.exceptions.InvalidKeyError
            Raised before any API call if ``key`` cannot name an object.
        autoclusteroperator.exceptions.QueryError
            Raised if the existence check fails. Nothing is created.
        autoclusteroperator.exceptions.CreateError
            Raised if a creation fails for a reason other than a conflict.
        """
        if logger is None:
            logger = structlog.getLogger(__name__)

        selector = build_selector(key, self.configuration)
        cluster = build_cluster(key, self.configuration)
        namespace = self.configuration.target_namespace

        if object_exists(
            resource=self.cluster_resource,
            namespace=namespace,
            name=key,
            k8s_client=self.k8s_client,
            request_timeout=self.configuration.request_timeout,
        ):
            logger.debug(f"Cluster {namespace}/{key} already exists")
            return ReconcileOutcome.ALREADY_SATISFIED

        outcome = ReconcileOutcome.PROVISIONED
        for resource, spec in (
            (self.selector_resource, selector),
            (self.cluster_resource, cluster),
        ):
            try:
                create_namespaced_object(
                    resource=resource,
                    namespace=namespace,
                    body=spec.to_manifest(),
                    k8s_client=self.k8s_client,
                    request_timeout=self.configuration.request_timeout,
                )
            except CreateConflictError:
                logger.info(
                    f"{spec.target.kind} {namespace}/{key} already exists, "
                    "it is being provisioned elsewhere"
                )
                outcome = ReconcileOutcome.ALREADY_PROVISIONING
            else:
                logger.info(f"Created {spec.target.kind} {namespace}/{key}")
        return outcome
