"""Custom exceptions for auto-cluster-operator.

The start-up errors (`ConfigurationError`, `DiscoveryError`) stop the
operator. Every other error is scoped to a single reconciliation key and is
contained by the dispatcher.
"""

__all__ = (
    "AutoClusterError",
    "ConfigurationError",
    "CreateConflictError",
    "CreateError",
    "DiscoveryError",
    "InvalidKeyError",
    "QueryError",
    "StreamError",
)


class AutoClusterError(Exception):
    """Base exception for all auto-cluster-operator errors."""


class ConfigurationError(AutoClusterError):
    """Raised when the process environment holds an unusable setting."""


class DiscoveryError(AutoClusterError):
    """Raised when a group/version/kind cannot be resolved to a resource.

    This can occur when:
    - The kind is not served by the cluster (CRD not installed)
    - The kind matches more than one resource
    - The resource does not support a verb the operator needs
    - The API server cannot be reached
    """


class StreamError(AutoClusterError):
    """Raised when the change stream of watched objects cannot continue.

    kopf owns the watch: it reconnects and re-lists by itself and stops the
    operator when a watch cannot be resumed, so nothing in this package
    raises this error.
    """


class QueryError(AutoClusterError):
    """Raised when listing objects fails or gives an undecidable answer."""


class CreateError(AutoClusterError):
    """Raised when a dependent object cannot be created."""


class CreateConflictError(CreateError):
    """Raised when a dependent object already exists under the same name.

    Conflicts are expected whenever two events for the same key race each
    other, so callers treat this as "already being provisioned".
    """


class InvalidKeyError(AutoClusterError):
    """Raised when a label value cannot be used as a dependent object name."""
