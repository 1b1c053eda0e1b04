"""Command-line entry point that runs the operator cluster-wide."""

__all__ = ("main",)

import kopf
import structlog

from autoclusteroperator import __version__


def main() -> None:
    """Run the operator until it is signalled to stop."""
    # Importing the handlers reads the configuration and registers them.
    import autoclusteroperator.handlers  # noqa: F401

    kopf.configure(verbose=False)
    structlog.getLogger(__name__).info(
        f"Starting auto-cluster-operator {__version__}"
    )
    kopf.run(clusterwide=True, standalone=True)


if __name__ == "__main__":
    main()
