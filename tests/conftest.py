from __future__ import annotations

import json
from pathlib import Path

import pytest

from nodedns.adapters.kubernetes import NodeListResponse
from tests.support.dns import FakeDnsProvider, FakeNodeWatcher

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(scope="session")
def node_list_payload() -> dict[str, object]:
    path = DATA_DIR / "kubernetes" / "node_list.json"
    with path.open() as handle:
        return json.load(handle)


@pytest.fixture
def node_list(node_list_payload: dict[str, object]) -> NodeListResponse:
    return NodeListResponse.model_validate(node_list_payload)


@pytest.fixture
def fake_provider() -> FakeDnsProvider:
    return FakeDnsProvider()


@pytest.fixture
def fake_watcher() -> FakeNodeWatcher:
    return FakeNodeWatcher()
