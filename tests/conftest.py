"""Shared fixtures: a fake CustomObjectsApi and a resolved reconciler."""

from __future__ import annotations

from typing import Any

import pytest
from kubernetes.client.exceptions import ApiException

from autoclusteroperator.config import Configuration
from autoclusteroperator.k8s import ResourceDescriptor
from autoclusteroperator.reconciler import Reconciler


class FakeCustomObjectsApi:
    """Records list/create calls and replays scripted responses.

    ``list_responses`` and ``create_responses`` hold, in call order, either a
    response or an exception to raise. An exhausted script answers with an
    empty list, or echoes the created body.
    """

    def __init__(self) -> None:
        self.list_calls: list[dict[str, Any]] = []
        self.create_calls: list[dict[str, Any]] = []
        self.list_responses: list[Any] = []
        self.create_responses: dict[str, list[Any]] = {}

    def list_namespaced_custom_object(
        self, group, version, namespace, plural, **kwargs
    ):
        self.list_calls.append(
            {
                "group": group,
                "version": version,
                "namespace": namespace,
                "plural": plural,
                **kwargs,
            }
        )
        response = (
            self.list_responses.pop(0)
            if self.list_responses
            else {"items": []}
        )
        if isinstance(response, BaseException):
            raise response
        return response

    def create_namespaced_custom_object(
        self, group, version, namespace, plural, body, **kwargs
    ):
        self.create_calls.append(
            {
                "group": group,
                "version": version,
                "namespace": namespace,
                "plural": plural,
                "body": body,
                **kwargs,
            }
        )
        responses = self.create_responses.get(plural, [])
        response = responses.pop(0) if responses else body
        if isinstance(response, BaseException):
            raise response
        return response


class FakeK8sClient:
    """Stands in for the `kubernetes.client` module."""

    def __init__(self, api: FakeCustomObjectsApi) -> None:
        self.api = api

    def CustomObjectsApi(self) -> FakeCustomObjectsApi:  # noqa: N802
        return self.api


def conflict() -> ApiException:
    return ApiException(status=409, reason="Conflict")


@pytest.fixture
def configuration() -> Configuration:
    return Configuration()


@pytest.fixture
def cluster_resource() -> ResourceDescriptor:
    return ResourceDescriptor(
        group="provisioning.cattle.io",
        version="v1",
        kind="Cluster",
        plural="clusters",
        namespaced=True,
        verbs=frozenset({"create", "get", "list", "watch"}),
    )


@pytest.fixture
def selector_resource() -> ResourceDescriptor:
    return ResourceDescriptor(
        group="elemental.cattle.io",
        version="v1beta1",
        kind="MachineInventorySelectorTemplate",
        plural="machineinventoryselectortemplates",
        namespaced=True,
        verbs=frozenset({"create", "get", "list", "watch"}),
    )


@pytest.fixture
def custom_objects_api() -> FakeCustomObjectsApi:
    return FakeCustomObjectsApi()


@pytest.fixture
def k8s_client(custom_objects_api: FakeCustomObjectsApi) -> FakeK8sClient:
    return FakeK8sClient(custom_objects_api)


@pytest.fixture
def reconciler(
    configuration: Configuration,
    cluster_resource: ResourceDescriptor,
    selector_resource: ResourceDescriptor,
    k8s_client: FakeK8sClient,
) -> Reconciler:
    return Reconciler(
        configuration=configuration,
        cluster_resource=cluster_resource,
        selector_resource=selector_resource,
        k8s_client=k8s_client,
    )
