from controller.src.k8s.client import (
    init_k8s_client,
    get_core_api,
    ensure_namespace,
    get_pod_logs,
    delete_pod,
)
from controller.src.k8s.credentials import (
    SecretLookup,
    KubernetesSecretLookup,
    matching_flags,
)
from controller.src.k8s.pod_builder import (
    IMPLICIT_STEP_NAMES,
    build_pod,
    build_pod_name,
)
from controller.src.k8s.status import status_from_pod

__all__ = [
    "init_k8s_client",
    "get_core_api",
    "ensure_namespace",
    "get_pod_logs",
    "delete_pod",
    "SecretLookup",
    "KubernetesSecretLookup",
    "matching_flags",
    "IMPLICIT_STEP_NAMES",
    "build_pod",
    "build_pod_name",
    "status_from_pod",
]
