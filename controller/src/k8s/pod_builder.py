"""
Kubernetes Pod builder for builds.

Every step becomes an init container. Kubernetes runs init containers one at
a time, in declared order, and stops at the first non-zero exit, so the pod
executes the build serially and halts on the first failed step.
"""

from kubernetes import client
from typing import List, Tuple
import logging
import posixpath

from controller.src.config import Settings
from controller.src.errors import BuildValidationError
from controller.src.k8s.credentials import SecretLookup, matching_flags, volume_path
from controller.src.models.build import Build, GCSSource, GitSource, Step, Volume

logger = logging.getLogger(__name__)

WORKSPACE_DIR = "/workspace"
HOME_DIR = "/builder/home"

# Prefixes for init container names.
# Log collection matches on these, keep them stable.
INIT_CONTAINER_PREFIX = "build-step-"
UNNAMED_INIT_CONTAINER_PREFIX = "build-step-unnamed-"

# Label added to the pod to identify the build it belongs to
BUILD_NAME_LABEL = "podline.dev/build-name"

# Names of the synthesized containers
CREDS_INIT = "credential-initializer"
GIT_SOURCE = "git-source"
GCS_SOURCE = "gcs-source"
CUSTOM_SOURCE = "custom-source"

# User steps may not take these names
RESERVED_STEP_NAMES = frozenset((CREDS_INIT, GIT_SOURCE, GCS_SOURCE, CUSTOM_SOURCE))

# Statuses of these steps are left out of the BuildStatus
IMPLICIT_STEP_NAMES = frozenset(INIT_CONTAINER_PREFIX + name for name in RESERVED_STEP_NAMES)

SECRET_VOLUME_PREFIX = "secret-volume-"

def implicit_env_vars() -> List[client.V1EnvVar]:
    """Env vars injected into every source and step container."""
    return [client.V1EnvVar(name="HOME", value=HOME_DIR)]

def implicit_volume_mounts() -> List[client.V1VolumeMount]:
    return [
        client.V1VolumeMount(name="workspace", mount_path=WORKSPACE_DIR),
        client.V1VolumeMount(name="home", mount_path=HOME_DIR),
    ]

def implicit_volumes() -> List[client.V1Volume]:
    return [
        client.V1Volume(name="workspace", empty_dir=client.V1EmptyDirVolumeSource()),
        client.V1Volume(name="home", empty_dir=client.V1EmptyDirVolumeSource()),
    ]

def step_to_container(step: Step, name: str) -> client.V1Container:
    """Convert a Step model into a container named `name`."""
    return client.V1Container(
        name=name,
        image=step.image,
        command=list(step.command) or None,
        args=list(step.args) or None,
        working_dir=step.working_dir or None,
        env=[client.V1EnvVar(name=e.name, value=e.value) for e in step.env],
        volume_mounts=[
            client.V1VolumeMount(
                name=vm.name,
                mount_path=vm.mount_path,
                sub_path=vm.sub_path or None,
                read_only=vm.read_only or None,
            )
            for vm in step.volume_mounts
        ],
    )

def volume_to_k8s(volume: Volume) -> client.V1Volume:
    if volume.host_path is not None:
        return client.V1Volume(
            name=volume.name,
            host_path=client.V1HostPathVolumeSource(path=volume.host_path),
        )
    if volume.secret_name is not None:
        return client.V1Volume(
            name=volume.name,
            secret=client.V1SecretVolumeSource(secret_name=volume.secret_name),
        )
    if volume.config_map_name is not None:
        return client.V1Volume(
            name=volume.name,
            config_map=client.V1ConfigMapVolumeSource(name=volume.config_map_name),
        )
    if volume.persistent_volume_claim is not None:
        return client.V1Volume(
            name=volume.name,
            persistent_volume_claim=client.V1PersistentVolumeClaimVolumeSource(
                claim_name=volume.persistent_volume_claim,
            ),
        )
    return client.V1Volume(name=volume.name, empty_dir=client.V1EmptyDirVolumeSource())

def git_to_container(git: GitSource, settings: Settings) -> client.V1Container:
    if not git.url:
        raise BuildValidationError(
            "MissingUrl", f"git sources are expected to specify a Url, got: {git}"
        )
    if not git.revision:
        raise BuildValidationError(
            "MissingRevision", f"git sources are expected to specify a Revision, got: {git}"
        )
    return client.V1Container(
        name=INIT_CONTAINER_PREFIX + GIT_SOURCE,
        image=settings.git_image,
        args=["-url", git.url, "-revision", git.revision],
        volume_mounts=implicit_volume_mounts(),
        working_dir=WORKSPACE_DIR,
        env=implicit_env_vars(),
    )

def gcs_to_container(gcs: GCSSource, settings: Settings) -> client.V1Container:
    if not gcs.location:
        raise BuildValidationError(
            "MissingLocation", f"gcs sources are expected to specify a Location, got: {gcs}"
        )
    return client.V1Container(
        name=INIT_CONTAINER_PREFIX + GCS_SOURCE,
        image=settings.gcs_fetcher_image,
        args=["--type", gcs.type.value, "--location", gcs.location],
        volume_mounts=implicit_volume_mounts(),
        working_dir=WORKSPACE_DIR,
        env=implicit_env_vars(),
    )

def custom_to_step(source: Step) -> Step:
    """Name a custom source container so it can run as the first step."""
    if source.name:
        raise BuildValidationError(
            "OmitName",
            f"custom source containers are expected to omit Name, got: {source.name}",
        )
    return source.model_copy(update={"name": CUSTOM_SOURCE}, deep=True)

def make_credential_initializer(
    build: Build,
    secrets: SecretLookup,
    settings: Settings,
) -> Tuple[client.V1Container, List[client.V1Volume]]:
    """
    Build the credential initializer container.

    Every secret of the build's service account whose annotations match a
    credential type is mounted into the container and turned into a flag.
    Returns the container and the secret volumes it needs.
    """
    service_account_name = build.spec.service_account_name or "default"
    sa = secrets.get_service_account(build.namespace, service_account_name)

    volumes = []
    volume_mounts = implicit_volume_mounts()
    args = []
    for secret_ref in sa.secrets or []:
        secret = secrets.get_secret(build.namespace, secret_ref.name)

        flags = matching_flags(secret)
        if not flags:
            continue
        args.extend(flags)

        name = f"{SECRET_VOLUME_PREFIX}{secret.metadata.name}"
        volume_mounts.append(
            client.V1VolumeMount(name=name, mount_path=volume_path(secret.metadata.name))
        )
        volumes.append(
            client.V1Volume(
                name=name,
                secret=client.V1SecretVolumeSource(secret_name=secret.metadata.name),
            )
        )

    container = client.V1Container(
        name=INIT_CONTAINER_PREFIX + CREDS_INIT,
        image=settings.creds_image,
        args=args,
        volume_mounts=volume_mounts,
        env=implicit_env_vars(),
        working_dir=WORKSPACE_DIR,
    )
    return container, volumes

def augment_step(step: Step, index: int, workspace_sub_path: str = "") -> client.V1Container:
    """
    Turn a user step into an init container: implicit env and mounts,
    default working dir and a generated name.
    """
    if step.name:
        name = f"{INIT_CONTAINER_PREFIX}{step.name}"
    else:
        name = f"{UNNAMED_INIT_CONTAINER_PREFIX}{index}"
    container = step_to_container(step, name)

    # Implicit values go first and are not deduplicated.
    container.env = implicit_env_vars() + container.env

    # Add implicit volume mounts, unless the user has requested their own
    # volume mount at that path.
    requested = {posixpath.normpath(vm.mount_path) for vm in container.volume_mounts}
    for imp in implicit_volume_mounts():
        if posixpath.normpath(imp.mount_path) in requested:
            continue
        if workspace_sub_path and imp.name == "workspace":
            imp.sub_path = workspace_sub_path
        container.volume_mounts.append(imp)

    if not container.working_dir:
        container.working_dir = WORKSPACE_DIR

    return container

def validate_volumes(volumes: List[client.V1Volume]):
    """A pod must not declare two volumes with the same name."""
    seen = set()
    for volume in volumes:
        if volume.name in seen:
            raise BuildValidationError(
                "DuplicateVolume", f"saw Volume {volume.name!r} defined multiple times"
            )
        seen.add(volume.name)

def build_pod_name(build_name: str) -> str:
    return f"pod-for-{build_name}"

def build_pod(build: Build, secrets: SecretLookup, settings: Settings) -> client.V1Pod:
    """
    Build the Pod that runs `build`.

    Init containers are ordered: credential initializer, git/gcs source
    fetch (if any), then the build's steps in declared order with a custom
    source container spliced in as the first step.
    """
    build = build.model_copy(deep=True)

    for step in build.spec.steps:
        if step.name in RESERVED_STEP_NAMES:
            raise BuildValidationError(
                "ReservedName", f"step name {step.name!r} is reserved for a generated step"
            )

    source_containers = []
    steps = list(build.spec.steps)
    workspace_sub_path = ""
    source = build.spec.source
    if source is not None:
        kinds = [kind for kind in ("git", "gcs", "custom") if getattr(source, kind) is not None]
        if len(kinds) > 1:
            raise BuildValidationError(
                "MultipleSources",
                f"builds are expected to specify at most one source, got: {', '.join(kinds)}",
            )
        if source.git is not None:
            source_containers.append(git_to_container(source.git, settings))
        elif source.gcs is not None:
            source_containers.append(gcs_to_container(source.gcs, settings))
        elif source.custom is not None:
            steps.insert(0, custom_to_step(source.custom))
        workspace_sub_path = source.sub_path

    cred, secret_volumes = make_credential_initializer(build, secrets, settings)

    init_containers = [cred] + source_containers
    for i, step in enumerate(steps):
        init_containers.append(augment_step(step, i, workspace_sub_path))

    # User volumes, then our implicit volumes and any needed for secrets.
    volumes = [volume_to_k8s(v) for v in build.spec.volumes]
    volumes += implicit_volumes()
    volumes += secret_volumes
    validate_volumes(volumes)

    logger.debug(
        f"Built pod for {build.namespace}/{build.name} with {len(init_containers)} init containers"
    )

    pod_spec = client.V1PodSpec(
        # If the build fails, don't restart it.
        restart_policy="Never",
        init_containers=init_containers,
        containers=[client.V1Container(name="nop", image=settings.nop_image)],
        service_account_name=build.spec.service_account_name or None,
        volumes=volumes,
        node_selector=build.spec.node_selector or None,
        active_deadline_seconds=build.spec.timeout,
    )

    return client.V1Pod(
        api_version="v1",
        kind="Pod",
        metadata=client.V1ObjectMeta(
            name=build_pod_name(build.name),
            namespace=build.namespace,
            annotations={"sidecar.istio.io/inject": "false"},
            labels={BUILD_NAME_LABEL: build.name},
        ),
        spec=pod_spec,
    )
