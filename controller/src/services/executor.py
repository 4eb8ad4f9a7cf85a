"""
Build executor - runs a build as a pod on Kubernetes and watches it finish.
"""

import asyncio
import logging
import time
from typing import Callable, Optional, Protocol
from kubernetes import client
from kubernetes.client.rest import ApiException

from controller.src.config import Settings, get_settings
from controller.src.k8s import (
    KubernetesSecretLookup,
    SecretLookup,
    build_pod,
    delete_pod,
    get_core_api,
    get_pod_logs,
    status_from_pod,
)
from controller.src.models.build import Build
from controller.src.models.status import BuildStatus, ConditionStatus
from controller.src.services.status_reporter import report_build_status

logger = logging.getLogger(__name__)

class SequenceRunner(Protocol):
    """
    Runs a pod's init containers one at a time in declared order and stops at
    the first non-zero exit. Kubernetes provides this natively.
    """

    def start(self, pod: client.V1Pod) -> None:
        ...

    def observe(self, name: str, namespace: str) -> client.V1Pod:
        ...

    def logs(self, name: str, namespace: str, container: str) -> str:
        ...

class KubernetesSequenceRunner:
    """SequenceRunner backed by the CoreV1 API."""

    def __init__(self, deletion_timeout: int = 60):
        self.deletion_timeout = deletion_timeout

    def start(self, pod: client.V1Pod) -> None:
        core_v1 = get_core_api()
        name = pod.metadata.name
        namespace = pod.metadata.namespace

        try:
            core_v1.create_namespaced_pod(namespace=namespace, body=pod)
        except ApiException as e:
            if e.status != 409:
                raise
            # Pod already exists, delete and recreate
            logger.warning(f"Pod {name} already exists, deleting...")
            delete_pod(name, namespace=namespace)
            self._wait_for_deletion(name, namespace)
            core_v1.create_namespaced_pod(namespace=namespace, body=pod)

        logger.info(f"Created pod {namespace}/{name}")

    def _wait_for_deletion(self, name: str, namespace: str):
        core_v1 = get_core_api()
        deadline = time.time() + self.deletion_timeout

        while time.time() < deadline:
            try:
                core_v1.read_namespaced_pod(name=name, namespace=namespace)
            except ApiException as e:
                if e.status == 404:
                    return
                raise
            time.sleep(1)

        logger.warning(f"Pod {namespace}/{name} still present after {self.deletion_timeout}s")

    def observe(self, name: str, namespace: str) -> client.V1Pod:
        return get_core_api().read_namespaced_pod(name=name, namespace=namespace)

    def logs(self, name: str, namespace: str, container: str) -> str:
        return get_pod_logs(name, container=container, namespace=namespace)

def build_key(namespace: str, name: str) -> str:
    return f"{namespace}/{name}"

async def execute_build(
    build: Build,
    runner: Optional[SequenceRunner] = None,
    secrets: Optional[SecretLookup] = None,
    settings: Optional[Settings] = None,
    report: Callable[[str, BuildStatus], None] = report_build_status,
) -> BuildStatus:
    """
    Run a build and return its final status.

    Raises BuildValidationError if the build spec is malformed; nothing is
    started in that case.
    """
    settings = settings or get_settings()
    runner = runner or KubernetesSequenceRunner()
    secrets = secrets or KubernetesSecretLookup()
    key = build_key(build.namespace, build.name)

    pod = build_pod(build, secrets, settings)
    pod_name = pod.metadata.name
    logger.info(
        f"Starting build {key} as pod {pod_name} "
        f"with {len(pod.spec.init_containers)} init containers"
    )
    runner.start(pod)

    status = await wait_for_build(key, pod_name, build.namespace, runner, settings, report)

    condition = status.get_condition()
    if condition is not None and condition.status == ConditionStatus.FALSE:
        logger.error(f"Build {key} failed: {condition.message}")
        failed_step = _first_failed_step(runner.observe(pod_name, build.namespace))
        if failed_step:
            logs = runner.logs(pod_name, build.namespace, failed_step)
            logger.error(f"Logs of {failed_step}:\n{logs}")
    else:
        logger.info(f"Build {key} finished with status: {condition.status.value if condition else 'Unknown'}")

    return status

async def wait_for_build(
    key: str,
    pod_name: str,
    namespace: str,
    runner: SequenceRunner,
    settings: Settings,
    report: Callable[[str, BuildStatus], None],
) -> BuildStatus:
    """
    Poll the pod until the build is done or the watch times out.
    Every change in the derived status is reported.
    """
    start_time = time.time()
    status = None

    while True:
        try:
            pod = runner.observe(pod_name, namespace)
        except ApiException as e:
            logger.error(f"Error checking pod status: {e}")
        else:
            observed = status_from_pod(pod)
            if observed != status:
                status = observed
                report(key, status)
            if status.is_done:
                return status

        if time.time() - start_time > settings.build_timeout:
            logger.error(f"Build {key} still running after {settings.build_timeout}s, giving up")
            return status or BuildStatus()

        await asyncio.sleep(settings.poll_interval)

def _first_failed_step(pod: client.V1Pod) -> Optional[str]:
    for ics in (pod.status and pod.status.init_container_statuses) or []:
        term = ics.state.terminated if ics.state is not None else None
        if term is not None and term.exit_code != 0:
            return ics.name
    return None
