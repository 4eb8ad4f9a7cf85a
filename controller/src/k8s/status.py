"""
Derive a BuildStatus from the status Kubernetes reports for a build's pod.
"""

from kubernetes import client
from typing import Optional

from controller.src.k8s.pod_builder import IMPLICIT_STEP_NAMES
from controller.src.models.status import (
    BUILD_SUCCEEDED,
    BuildStatus,
    ClusterSpec,
    Condition,
    ConditionStatus,
    StateRunning,
    StateTerminated,
    StateWaiting,
    StepState,
)

def step_state_from_container(state: Optional[client.V1ContainerState]) -> StepState:
    if state is None:
        return StepState()
    step_state = StepState()
    if state.waiting is not None:
        step_state.waiting = StateWaiting(
            reason=state.waiting.reason or "",
            message=state.waiting.message or "",
        )
    if state.running is not None:
        step_state.running = StateRunning(started_at=state.running.started_at)
    if state.terminated is not None:
        term = state.terminated
        step_state.terminated = StateTerminated(
            exit_code=term.exit_code,
            signal=term.signal,
            reason=term.reason or "",
            message=term.message or "",
            started_at=term.started_at,
            finished_at=term.finished_at,
            container_id=term.container_id or "",
        )
    return step_state

def status_from_pod(pod: client.V1Pod) -> BuildStatus:
    """
    Build a BuildStatus from a point-in-time view of the pod.

    Nothing is carried between calls; the same pod always yields the same
    status.
    """
    pod_status = pod.status or client.V1PodStatus()
    status = BuildStatus(
        cluster=ClusterSpec(
            namespace=pod.metadata.namespace or "",
            pod_name=pod.metadata.name or "",
        ),
        start_time=pod_status.start_time,
    )

    for ics in pod_status.init_container_statuses or []:
        # Ignore statuses for implicit steps (creds init, source fetching)
        if ics.name in IMPLICIT_STEP_NAMES:
            continue

        if ics.state is not None and ics.state.terminated is not None:
            status.steps_completed.append(ics.name)
        status.step_states.append(step_state_from_container(ics.state))

    phase = pod_status.phase
    if phase == "Failed":
        condition = Condition(
            type=BUILD_SUCCEEDED,
            status=ConditionStatus.FALSE,
            message=get_failure_message(pod),
        )
    elif phase == "Pending":
        condition = Condition(
            type=BUILD_SUCCEEDED,
            status=ConditionStatus.UNKNOWN,
            message="Pending",
            reason=get_waiting_message(pod),
        )
    elif phase == "Succeeded":
        condition = Condition(type=BUILD_SUCCEEDED, status=ConditionStatus.TRUE)
    else:
        condition = Condition(type=BUILD_SUCCEEDED, status=ConditionStatus.UNKNOWN)
    status.set_condition(condition)

    return status

def get_waiting_message(pod: client.V1Pod) -> str:
    pod_status = pod.status or client.V1PodStatus()

    # First, try to surface the reason a build step is still waiting
    for ics in pod_status.init_container_statuses or []:
        wait = ics.state.waiting if ics.state is not None else None
        if wait is not None and wait.message:
            return f'build step "{ics.name}" is pending with reason "{wait.message}"'

    # Then the first pod condition that is not true
    for condition in pod_status.conditions or []:
        if condition.status != "True":
            return (
                f'pod status "{condition.type}":"{condition.status}"; '
                f'message: "{condition.message or ""}"'
            )

    if pod_status.message:
        return pod_status.message

    return "Pending"

def get_failure_message(pod: client.V1Pod) -> str:
    pod_status = pod.status or client.V1PodStatus()

    # First, try to surface the build step that failed
    for ics in pod_status.init_container_statuses or []:
        term = ics.state.terminated if ics.state is not None else None
        if term is not None and term.exit_code != 0:
            return (
                f'build step "{ics.name}" exited with code {term.exit_code} '
                f'(image: "{ics.image_id or ""}"); for logs run: '
                f"kubectl -n {pod.metadata.namespace} logs {pod.metadata.name} -c {ics.name}"
            )

    if pod_status.message:
        return pod_status.message

    return "build failed for unspecified reasons."
