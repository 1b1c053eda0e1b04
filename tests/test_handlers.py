"""Tests for the kopf handlers of the autoclusteroperator.handlers
package.
"""

from __future__ import annotations

import logging
from unittest.mock import MagicMock, patch

import kopf
import pytest
from kubernetes.config import ConfigException

from autoclusteroperator.config import Configuration
from autoclusteroperator.exceptions import DiscoveryError
from autoclusteroperator.handlers import (
    configure_operator,
    handle_watched_event,
    register_handlers,
)
from autoclusteroperator.reconciler import ReconcileOutcome, Reconciler

logger = logging.getLogger(__name__)


def test_register_handlers() -> None:
    registry = kopf.OperatorRegistry()
    register_handlers(Configuration(), registry=registry)

    activities = registry._activities.get_all_handlers()
    assert {handler.activity.value for handler in activities} == {
        "startup",
        "cleanup",
    }
    startup = next(
        handler
        for handler in activities
        if handler.activity.value == "startup"
    )
    assert startup.param == Configuration()

    (watching,) = registry._watching.get_all_handlers()
    assert watching.fn is handle_watched_event
    watched = Configuration().watched
    assert watching.selector.group == watched.group
    assert watching.selector.version == watched.version
    assert watching.selector.kind == watched.kind


def test_register_handlers_watches_configured_kind() -> None:
    registry = kopf.OperatorRegistry()
    configuration = Configuration.from_env(
        {"GROUP": "example.com", "VERSION": "v1alpha1", "KIND": "Machine"}
    )
    register_handlers(configuration, registry=registry)

    (watching,) = registry._watching.get_all_handlers()
    assert watching.fn is handle_watched_event
    assert watching.selector.group == "example.com"
    assert watching.selector.version == "v1alpha1"
    assert watching.selector.kind == "Machine"


def test_configure_operator() -> None:
    settings = kopf.OperatorSettings()
    memo = kopf.Memo()
    reconciler = MagicMock(spec=Reconciler)
    configuration = Configuration(
        request_timeout=10.0, watch_timeout=300.0, max_workers=3
    )

    with patch(
        "autoclusteroperator.handlers.operatorsetup.start_operator",
        return_value=reconciler,
    ) as start:
        configure_operator(
            param=configuration, settings=settings, memo=memo, logger=logger
        )

    start.assert_called_once_with(configuration, logger=logger)
    assert memo.reconciler is reconciler
    assert settings.watching.server_timeout == 300.0
    assert settings.watching.client_timeout == 310.0
    assert settings.watching.connect_timeout == 10.0
    assert settings.execution.max_workers == 3
    assert settings.posting.enabled is False


def test_configure_operator_discovery_failure() -> None:
    with patch(
        "autoclusteroperator.handlers.operatorsetup.start_operator",
        side_effect=DiscoveryError("Cluster.provisioning.cattle.io/v1"),
    ):
        with pytest.raises(kopf.PermanentError):
            configure_operator(
                param=Configuration(),
                settings=kopf.OperatorSettings(),
                memo=kopf.Memo(),
                logger=logger,
            )


def test_handle_watched_event() -> None:
    reconciler = MagicMock(spec=Reconciler)
    reconciler.reconcile.return_value = ReconcileOutcome.PROVISIONED
    body = {
        "metadata": {
            "name": "m1",
            "labels": {"autoClusterName": "test-cluster"},
        }
    }

    handle_watched_event(
        event={"type": "ADDED", "object": body},
        body=body,
        memo=kopf.Memo(reconciler=reconciler),
        logger=logger,
    )
    handle_watched_event(
        event={"type": "DELETED", "object": body},
        body=body,
        memo=kopf.Memo(reconciler=reconciler),
        logger=logger,
    )

    reconciler.reconcile.assert_called_once_with("test-cluster", logger=logger)


def test_configure_operator_without_credentials() -> None:
    """Missing cluster credentials stop the operator instead of retrying."""
    no_config = ConfigException("no kubeconfig")
    with patch(
        "kubernetes.config.load_incluster_config", side_effect=no_config
    ), patch("kubernetes.config.load_kube_config", side_effect=no_config):
        with pytest.raises(kopf.PermanentError, match="credentials"):
            configure_operator(
                param=Configuration(),
                settings=kopf.OperatorSettings(),
                memo=kopf.Memo(),
                logger=logger,
            )
