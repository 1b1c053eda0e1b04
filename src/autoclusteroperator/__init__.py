"""A Kubernetes operator that provisions Rancher clusters for labelled
Elemental machine inventories.
"""

__all__ = ("__version__",)

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("auto-cluster-operator")
except PackageNotFoundError:
    __version__ = "unknown"
