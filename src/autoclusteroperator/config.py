"""Operator configuration, read once from the process environment."""

from __future__ import annotations

__all__ = ("LABEL_KEY", "Configuration", "ResourceIdentity")

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TypeVar

from autoclusteroperator.exceptions import ConfigurationError

LABEL_KEY = "autoClusterName"
"""Label on watched objects that names the cluster to provision."""

_Number = TypeVar("_Number", int, float)


@dataclass(frozen=True)
class ResourceIdentity:
    """The group, version and kind of a Kubernetes resource type."""

    group: str
    version: str
    kind: str

    @property
    def api_version(self) -> str:
        """The ``apiVersion`` field value for objects of this type."""
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    def __str__(self) -> str:
        return f"{self.kind}.{self.api_version}"


@dataclass(frozen=True)
class Configuration:
    """Settings shared by the handlers and the reconciliation components."""

    watched: ResourceIdentity = ResourceIdentity(
        "elemental.cattle.io", "v1beta1", "MachineInventory"
    )
    """The resource type watched for ``autoClusterName`` labels."""

    cluster: ResourceIdentity = ResourceIdentity(
        "provisioning.cattle.io", "v1", "Cluster"
    )
    """The resource type of the provisioned cluster objects."""

    selector: ResourceIdentity = ResourceIdentity(
        "elemental.cattle.io", "v1beta1", "MachineInventorySelectorTemplate"
    )
    """The resource type of the machine inventory selector objects."""

    target_namespace: str = "fleet_default"
    """Namespace where the selector and cluster objects are created."""

    kubernetes_version: str = "v1.24.8+k3s1"
    """Kubernetes version requested for provisioned clusters."""

    request_timeout: float = 30.0
    """Timeout, in seconds, for each list or create call."""

    watch_timeout: float = 600.0
    """Server-side timeout, in seconds, of each watch request."""

    max_workers: int | None = None
    """Size of the handler thread pool; `None` keeps the kopf default."""

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None
    ) -> Configuration:
        """Create the configuration from environment variables.

        Parameters
        ----------
        environ : `Mapping`, optional
            The environment to read. Defaults to `os.environ`.

        Returns
        -------
        configuration : `Configuration`
            The configuration, with defaults for unset variables.

        Raises
        ------
        autoclusteroperator.exceptions.ConfigurationError
            Raised if a numeric setting cannot be parsed or is not positive.
        """
        if environ is None:
            environ = os.environ
        defaults = cls()

        return cls(
            watched=_identity_from_env(environ, "", defaults.watched),
            cluster=_identity_from_env(environ, "CLUSTER_", defaults.cluster),
            selector=_identity_from_env(
                environ, "SELECTOR_", defaults.selector
            ),
            target_namespace=environ.get(
                "TARGET_NAMESPACE", defaults.target_namespace
            ),
            kubernetes_version=environ.get(
                "KUBERNETES_VERSION", defaults.kubernetes_version
            ),
            request_timeout=_positive_number(
                environ, "REQUEST_TIMEOUT", float, defaults.request_timeout
            ),
            watch_timeout=_positive_number(
                environ, "WATCH_TIMEOUT", float, defaults.watch_timeout
            ),
            max_workers=_positive_number(
                environ, "MAX_WORKERS", int, defaults.max_workers
            ),
        )


def _identity_from_env(
    environ: Mapping[str, str], prefix: str, default: ResourceIdentity
) -> ResourceIdentity:
    return ResourceIdentity(
        group=environ.get(f"{prefix}GROUP", default.group),
        version=environ.get(f"{prefix}VERSION", default.version),
        kind=environ.get(f"{prefix}KIND", default.kind),
    )


def _positive_number(
    environ: Mapping[str, str],
    name: str,
    convert: Callable[[str], _Number],
    default: _Number | None,
) -> _Number | None:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = convert(raw)
    except ValueError as err:
        raise ConfigurationError(
            f"{name} must be a number, got {raw!r}"
        ) from err
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value
