"""Helpers for interacting with Kubernetes APIs."""

from __future__ import annotations

__all__ = (
    "ResourceDescriptor",
    "create_dynamic_client",
    "create_k8sclient",
    "create_namespaced_object",
    "list_namespaced_objects",
    "resolve_resource",
)

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import kubernetes
import urllib3
from kubernetes.client.exceptions import ApiException
from kubernetes.dynamic import DynamicClient
from kubernetes.dynamic.exceptions import (
    ResourceNotFoundError,
    ResourceNotUniqueError,
)

from autoclusteroperator.config import ResourceIdentity
from autoclusteroperator.exceptions import (
    CreateConflictError,
    CreateError,
    DiscoveryError,
    QueryError,
)


@dataclass(frozen=True)
class ResourceDescriptor:
    """A resource type as served by the cluster."""

    group: str
    version: str
    kind: str
    plural: str
    namespaced: bool
    verbs: frozenset[str] = frozenset()

    @property
    def identity(self) -> ResourceIdentity:
        return ResourceIdentity(self.group, self.version, self.kind)

    def __str__(self) -> str:
        return f"{self.plural}.{self.version}.{self.group}".strip(".")


def create_k8sclient() -> kubernetes.client:
    """Get a Kubernetes client configured with available cluster
    authentication.

    If in-cluster authentication is available, that is used. Otherwise
    this function falls-back to using a kubectl config file, which is
    appropriate for development.

    Raises
    ------
    autoclusteroperator.exceptions.DiscoveryError
        Raised if neither in-cluster nor kubectl configuration is usable.
    """
    try:
        kubernetes.config.load_incluster_config()
    except kubernetes.config.ConfigException:
        try:
            kubernetes.config.load_kube_config()
        except kubernetes.config.ConfigException as err:
            raise DiscoveryError(
                f"No Kubernetes credentials are available: {err}"
            ) from err
    return kubernetes.client


def create_dynamic_client(k8s_client: Any) -> DynamicClient:
    """Create a discovery-capable dynamic client.

    Raises
    ------
    autoclusteroperator.exceptions.DiscoveryError
        Raised if the API server cannot be reached for discovery.
    """
    try:
        return DynamicClient(k8s_client.ApiClient())
    except (ApiException, urllib3.exceptions.HTTPError) as err:
        raise DiscoveryError(
            f"Cannot reach the Kubernetes API for discovery: {err}"
        ) from err


def resolve_resource(
    identity: ResourceIdentity,
    *,
    dynamic_client: Any,
    required_verbs: Iterable[str] = (),
    namespaced: bool | None = None,
) -> ResourceDescriptor:
    """Resolve a group, version and kind to the resource that serves it.

    Parameters
    ----------
    identity : `autoclusteroperator.config.ResourceIdentity`
        The group, version and kind to look up.
    dynamic_client : `kubernetes.dynamic.DynamicClient`
        A dynamic client (see `create_dynamic_client`).
    required_verbs : iterable of `str`
        API verbs the resource must support, such as ``"create"``.
    namespaced : `bool`, optional
        If set, the scope the resource must have.

    Returns
    -------
    descriptor : `ResourceDescriptor`
        The plural name, scope and verbs of the resource.

    Raises
    ------
    autoclusteroperator.exceptions.DiscoveryError
        Raised if the resource is not served, is ambiguous, lacks a required
        verb or has the wrong scope, or if discovery fails.
    """
    try:
        resource = dynamic_client.resources.get(
            group=identity.group,
            api_version=identity.version,
            kind=identity.kind,
        )
    except ResourceNotFoundError as err:
        raise DiscoveryError(
            f"{identity} is not served by the cluster"
        ) from err
    except ResourceNotUniqueError as err:
        raise DiscoveryError(
            f"{identity} matches more than one resource"
        ) from err
    except (ApiException, urllib3.exceptions.HTTPError) as err:
        raise DiscoveryError(f"Discovery of {identity} failed: {err}") from err

    descriptor = ResourceDescriptor(
        group=identity.group,
        version=identity.version,
        kind=identity.kind,
        plural=resource.name,
        namespaced=bool(resource.namespaced),
        verbs=frozenset(resource.verbs or ()),
    )

    missing = sorted(set(required_verbs) - descriptor.verbs)
    if missing:
        raise DiscoveryError(
            f"{descriptor} does not support {', '.join(missing)}"
        )
    if namespaced is not None and descriptor.namespaced != namespaced:
        scope = "namespaced" if namespaced else "cluster-scoped"
        raise DiscoveryError(f"{descriptor} is not {scope}")
    return descriptor


def list_namespaced_objects(
    *,
    resource: ResourceDescriptor,
    namespace: str,
    k8s_client: Any,
    field_selector: str | None = None,
    request_timeout: float | None = None,
) -> dict[str, Any]:
    """List custom objects of a resource in a namespace.

    Parameters
    ----------
    resource : `ResourceDescriptor`
        The resource to list.
    namespace : `str`
        The namespace to list objects in.
    k8s_client
        A Kubernetes client (see `create_k8sclient`).
    field_selector : `str`, optional
        A field selector such as ``metadata.name=example``.
    request_timeout : `float`, optional
        Timeout of the request, in seconds.

    Returns
    -------
    object_list : `dict`
        The raw list response, with its ``items``.

    Raises
    ------
    autoclusteroperator.exceptions.QueryError
        Raised if the request fails or times out.
    """
    api = k8s_client.CustomObjectsApi()
    kwargs: dict[str, Any] = {}
    if field_selector is not None:
        kwargs["field_selector"] = field_selector
    if request_timeout is not None:
        kwargs["_request_timeout"] = request_timeout
    try:
        return api.list_namespaced_custom_object(
            resource.group,
            resource.version,
            namespace,
            resource.plural,
            **kwargs,
        )
    except ApiException as err:
        raise QueryError(
            f"Listing {resource} in {namespace} failed: "
            f"{err.status} {err.reason}"
        ) from err
    except urllib3.exceptions.HTTPError as err:
        raise QueryError(
            f"Listing {resource} in {namespace} failed: {err}"
        ) from err


def create_namespaced_object(
    *,
    resource: ResourceDescriptor,
    namespace: str,
    body: dict[str, Any],
    k8s_client: Any,
    request_timeout: float | None = None,
) -> dict[str, Any]:
    """Create a custom object in a namespace.

    Parameters
    ----------
    resource : `ResourceDescriptor`
        The resource to create an object of.
    namespace : `str`
        The namespace to create the object in.
    body : `dict`
        The full object manifest; ``metadata.name`` names the object.
    k8s_client
        A Kubernetes client (see `create_k8sclient`).
    request_timeout : `float`, optional
        Timeout of the request, in seconds.

    Returns
    -------
    created : `dict`
        The object as stored by the API server.

    Raises
    ------
    autoclusteroperator.exceptions.CreateConflictError
        Raised if an object with the same name already exists.
    autoclusteroperator.exceptions.CreateError
        Raised if the creation fails for any other reason.
    """
    api = k8s_client.CustomObjectsApi()
    name = body["metadata"]["name"]
    kwargs: dict[str, Any] = {}
    if request_timeout is not None:
        kwargs["_request_timeout"] = request_timeout
    try:
        return api.create_namespaced_custom_object(
            resource.group,
            resource.version,
            namespace,
            resource.plural,
            body,
            **kwargs,
        )
    except ApiException as err:
        if err.status == 409:
            raise CreateConflictError(
                f"{resource} {namespace}/{name} already exists"
            ) from err
        raise CreateError(
            f"Creating {resource} {namespace}/{name} failed: "
            f"{err.status} {err.reason}"
        ) from err
    except urllib3.exceptions.HTTPError as err:
        raise CreateError(
            f"Creating {resource} {namespace}/{name} failed: {err}"
        ) from err
