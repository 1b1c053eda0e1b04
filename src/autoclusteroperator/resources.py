"""Utilities for creating the dependent selector and cluster resources."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, TypeAlias, Union

from autoclusteroperator.config import (
    LABEL_KEY,
    Configuration,
    ResourceIdentity,
)
from autoclusteroperator.exceptions import InvalidKeyError

__all__ = (
    "DependentObjectSpec",
    "JSONValue",
    "build_cluster",
    "build_selector",
    "validate_key",
)

JSONValue: TypeAlias = Union[
    None, bool, int, float, str, list["JSONValue"], dict[str, "JSONValue"]
]
"""A JSON-compatible tree, as sent to the Kubernetes API."""

_NAME_PATTERN = re.compile(
    r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$"
)


@dataclass(frozen=True)
class DependentObjectSpec:
    """An object that the operator creates for a reconciliation key."""

    target: ResourceIdentity
    namespace: str
    name: str
    payload: dict[str, JSONValue]

    def to_manifest(self) -> dict[str, Any]:
        """Render the full body for a create call."""
        return {
            "apiVersion": self.target.api_version,
            "kind": self.target.kind,
            "metadata": {"name": self.name, "namespace": self.namespace},
            **self.payload,
        }


def validate_key(key: str) -> str:
    """Check that a reconciliation key can name the dependent objects.

    Parameters
    ----------
    key : `str`
        The value of the ``autoClusterName`` label.

    Returns
    -------
    key : `str`
        The same key.

    Raises
    ------
    autoclusteroperator.exceptions.InvalidKeyError
        Raised if the key is empty or is not a valid Kubernetes object name
        (a lowercase RFC 1123 subdomain of at most 253 characters).
    """
    if not key:
        raise InvalidKeyError(f"The {LABEL_KEY} label is empty")
    if len(key) > 253 or not _NAME_PATTERN.match(key):
        raise InvalidKeyError(
            f"{LABEL_KEY}={key!r} is not a valid Kubernetes object name"
        )
    return key


def build_selector(
    key: str, configuration: Configuration
) -> DependentObjectSpec:
    """Create the MachineInventorySelectorTemplate for a cluster.

    The selector matches the machine inventories that carry the same
    ``autoClusterName`` label value.

    Parameters
    ----------
    key : `str`
        The cluster name, from the ``autoClusterName`` label.
    configuration : `autoclusteroperator.config.Configuration`
        The operator configuration.

    Returns
    -------
    selector : `DependentObjectSpec`
        The selector object, named after ``key``.
    """
    validate_key(key)
    return DependentObjectSpec(
        target=configuration.selector,
        namespace=configuration.target_namespace,
        name=key,
        payload={
            "spec": {
                "template": {
                    "spec": {
                        "selector": {
                            "matchLabels": {LABEL_KEY: key},
                        }
                    }
                }
            }
        },
    )


def build_cluster(
    key: str, configuration: Configuration
) -> DependentObjectSpec:
    """Create the provisioning Cluster for a cluster name.

    The cluster has a single machine pool holding both the control plane and
    worker roles, with machines drawn through the selector object of the
    same name (see `build_selector`).

    Parameters
    ----------
    key : `str`
        The cluster name, from the ``autoClusterName`` label.
    configuration : `autoclusteroperator.config.Configuration`
        The operator configuration.

    Returns
    -------
    cluster : `DependentObjectSpec`
        The cluster object, named after ``key``.
    """
    validate_key(key)
    selector = configuration.selector
    machine_pool: dict[str, JSONValue] = {
        "controlPlaneRole": True,
        "name": "pool1",
        "quantity": 5,
        "workerRole": True,
        "machineConfigRef": {
            "apiVersion": selector.api_version,
            "kind": selector.kind,
            "name": key,
        },
    }
    return DependentObjectSpec(
        target=configuration.cluster,
        namespace=configuration.target_namespace,
        name=key,
        payload={
            "spec": {
                "rkeConfig": {"machinePools": [machine_pool]},
                "kubernetesVersion": configuration.kubernetes_version,
            }
        },
    )
