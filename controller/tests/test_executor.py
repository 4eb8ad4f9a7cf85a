"""Tests for running a build through a sequence runner."""

import asyncio

import pytest
from kubernetes import client

from controller.src.config import Settings
from controller.src.errors import BuildValidationError
from controller.src.models.build import Build, BuildSpec, GitSource, SourceSpec, Step
from controller.src.models.status import ConditionStatus
from controller.src.services.executor import execute_build

SETTINGS = Settings(poll_interval=0, build_timeout=60)

class FakeSecrets:
    def get_service_account(self, namespace, name):
        return client.V1ServiceAccount(metadata=client.V1ObjectMeta(name=name))

    def get_secret(self, namespace, name):
        raise AssertionError("no secrets expected")

class FakeRunner:
    """Replays pod snapshots; the last one repeats."""

    def __init__(self, snapshots):
        self.snapshots = list(snapshots)
        self.started = []
        self.log_requests = []

    def start(self, pod):
        self.started.append(pod)

    def observe(self, name, namespace):
        if len(self.snapshots) > 1:
            return self.snapshots.pop(0)
        return self.snapshots[0]

    def logs(self, name, namespace, container):
        self.log_requests.append((name, namespace, container))
        return "boom"

def make_build():
    return Build(
        name="hello",
        namespace="builds",
        spec=BuildSpec(steps=[Step(name="compile", image="golang")]),
    )

def snapshot(phase, exit_code=None):
    statuses = []
    if exit_code is not None:
        statuses.append(client.V1ContainerStatus(
            name="build-step-compile",
            image="golang",
            image_id="golang@sha",
            ready=False,
            restart_count=0,
            state=client.V1ContainerState(
                terminated=client.V1ContainerStateTerminated(exit_code=exit_code),
            ),
        ))
    return client.V1Pod(
        metadata=client.V1ObjectMeta(name="pod-for-hello", namespace="builds"),
        status=client.V1PodStatus(phase=phase, init_container_statuses=statuses),
    )

def run(build, runner, settings=SETTINGS):
    reports = []
    status = asyncio.run(execute_build(
        build,
        runner=runner,
        secrets=FakeSecrets(),
        settings=settings,
        report=lambda key, s: reports.append((key, s)),
    ))
    return status, reports

def test_successful_build():
    runner = FakeRunner([
        snapshot("Pending"),
        snapshot("Pending"),
        snapshot("Running"),
        snapshot("Succeeded", exit_code=0),
    ])
    status, reports = run(make_build(), runner)

    assert len(runner.started) == 1
    pod = runner.started[0]
    assert pod.metadata.name == "pod-for-hello"
    assert [c.name for c in pod.spec.init_containers] == [
        "build-step-credential-initializer",
        "build-step-compile",
    ]

    assert status.get_condition().status == ConditionStatus.TRUE
    assert status.steps_completed == ["build-step-compile"]
    # Unchanged observations are reported once
    assert [s.get_condition().status for _, s in reports] == [
        ConditionStatus.UNKNOWN,
        ConditionStatus.UNKNOWN,
        ConditionStatus.TRUE,
    ]
    assert all(key == "builds/hello" for key, _ in reports)
    assert runner.log_requests == []

def test_failed_build_fetches_step_logs():
    runner = FakeRunner([snapshot("Running"), snapshot("Failed", exit_code=2)])
    status, reports = run(make_build(), runner)

    condition = status.get_condition()
    assert condition.status == ConditionStatus.FALSE
    assert "exited with code 2" in condition.message
    assert runner.log_requests == [("pod-for-hello", "builds", "build-step-compile")]
    assert reports[-1][1] == status

def test_invalid_build_never_starts():
    build = make_build()
    build.spec.source = SourceSpec(git=GitSource(url="https://github.com/a/b"))
    runner = FakeRunner([snapshot("Pending")])

    with pytest.raises(BuildValidationError) as exc:
        run(build, runner)

    assert exc.value.reason == "MissingRevision"
    assert runner.started == []

def test_watch_gives_up_after_timeout():
    runner = FakeRunner([snapshot("Running")])
    status, reports = run(make_build(), runner, Settings(poll_interval=0, build_timeout=-1))

    assert status.get_condition().status == ConditionStatus.UNKNOWN
    assert len(reports) == 1
