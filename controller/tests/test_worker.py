"""Tests for handling queued build requests."""

import asyncio

from controller.src import worker
from controller.src.errors import BuildValidationError
from controller.src.models.status import ConditionStatus

def test_valid_request_is_executed(monkeypatch):
    executed = []

    async def fake_execute(build):
        executed.append(build)

    monkeypatch.setattr(worker, "execute_build", fake_execute)
    asyncio.run(worker.handle_build_request({
        "name": "hello",
        "namespace": "builds",
        "spec": {"steps": [{"image": "alpine"}]},
    }))

    assert [b.name for b in executed] == ["hello"]

def test_invalid_build_is_reported(monkeypatch):
    reports = []

    async def fake_execute(build):
        raise BuildValidationError("MissingUrl", "git sources are expected to specify a Url")

    monkeypatch.setattr(worker, "execute_build", fake_execute)
    monkeypatch.setattr(worker, "report_build_status", lambda key, s: reports.append((key, s)))
    asyncio.run(worker.handle_build_request({"name": "hello", "namespace": "builds"}))

    assert len(reports) == 1
    key, status = reports[0]
    assert key == "builds/hello"
    condition = status.get_condition()
    assert condition.status == ConditionStatus.FALSE
    assert condition.reason == "MissingUrl"

def test_malformed_request_is_dropped(monkeypatch):
    executed = []

    async def fake_execute(build):
        executed.append(build)

    monkeypatch.setattr(worker, "execute_build", fake_execute)
    asyncio.run(worker.handle_build_request({"spec": {}}))

    assert executed == []

def test_namespace_defaults_to_controller_namespace(monkeypatch):
    executed = []

    async def fake_execute(build):
        executed.append(build)

    monkeypatch.setattr(worker, "execute_build", fake_execute)
    asyncio.run(worker.handle_build_request({"name": "hello"}))

    assert executed[0].namespace == worker.settings.k8s_namespace
