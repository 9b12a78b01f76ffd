"""Shared fixtures for k3singress tests."""

from typing import List, Optional, Sequence

import pytest


class FakeConverter:
    """In-process converter that records calls and returns canned manifests."""

    def __init__(self, output: Optional[List[dict]] = None, error: Optional[Exception] = None):
        self.output = output or []
        self.error = error
        self.calls = []

    def convert(self, documents: Sequence[dict], args: Sequence[str]) -> List[dict]:
        self.calls.append((list(documents), list(args)))
        if self.error:
            raise self.error
        return list(self.output)


@pytest.fixture
def http_route():
    return {
        "apiVersion": "gateway.networking.k8s.io/v1",
        "kind": "HTTPRoute",
        "metadata": {"name": "web", "namespace": "apps"},
        "spec": {
            "parentRefs": [{"name": "nginx"}],
            "rules": [{"backendRefs": [{"name": "web", "port": 80}]}],
        },
    }


@pytest.fixture
def fake_converter(http_route):
    return FakeConverter(output=[http_route])


@pytest.fixture
def configmap():
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": "web-config", "namespace": "apps"},
        "data": {"LOG_LEVEL": "debug"},
    }


@pytest.fixture
def ingress():
    return {
        "apiVersion": "networking.k8s.io/v1",
        "kind": "Ingress",
        "metadata": {
            "name": "web",
            "namespace": "apps",
            "annotations": {"nginx.ingress.kubernetes.io/rewrite-target": "/"},
        },
        "spec": {
            "ingressClassName": "nginx",
            "rules": [
                {
                    "host": "web.example.com",
                    "http": {
                        "paths": [
                            {
                                "path": "/",
                                "pathType": "Prefix",
                                "backend": {
                                    "service": {"name": "web", "port": {"number": 80}},
                                },
                            }
                        ],
                    },
                }
            ],
        },
    }


@pytest.fixture
def service():
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {"name": "web", "namespace": "apps"},
        "spec": {"selector": {"app": "web"}, "ports": [{"port": 80, "targetPort": 8080}]},
    }
