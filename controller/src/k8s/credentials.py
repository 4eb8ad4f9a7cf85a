"""
Match service account secrets to credential-initializer flags.
"""

from kubernetes import client
from typing import List, Protocol
import logging

from controller.src.k8s.client import get_core_api

logger = logging.getLogger(__name__)

DOCKER_ANNOTATION_PREFIX = "podline.dev/docker-"
GIT_ANNOTATION_PREFIX = "podline.dev/git-"

BASIC_AUTH_SECRET = "kubernetes.io/basic-auth"
SSH_AUTH_SECRET = "kubernetes.io/ssh-auth"

SECRETS_MOUNT_DIR = "/var/build-secrets"

class SecretLookup(Protocol):
    """Read access to a namespace's service accounts and secrets."""

    def get_service_account(self, namespace: str, name: str) -> client.V1ServiceAccount:
        ...

    def get_secret(self, namespace: str, name: str) -> client.V1Secret:
        ...

class KubernetesSecretLookup:
    """SecretLookup backed by the CoreV1 API."""

    def get_service_account(self, namespace: str, name: str) -> client.V1ServiceAccount:
        return get_core_api().read_namespaced_service_account(name=name, namespace=namespace)

    def get_secret(self, namespace: str, name: str) -> client.V1Secret:
        return get_core_api().read_namespaced_secret(name=name, namespace=namespace)

def volume_path(secret_name: str) -> str:
    """Where a matched secret is mounted in the credential initializer."""
    return f"{SECRETS_MOUNT_DIR}/{secret_name}"

def _annotated_urls(secret: client.V1Secret, prefix: str) -> List[str]:
    annotations = (secret.metadata and secret.metadata.annotations) or {}
    return [annotations[key] for key in sorted(annotations) if key.startswith(prefix)]

def docker_flags(secret: client.V1Secret) -> List[str]:
    if secret.type != BASIC_AUTH_SECRET:
        return []
    name = secret.metadata.name
    return [f"-basic-docker={name}={url}" for url in _annotated_urls(secret, DOCKER_ANNOTATION_PREFIX)]

def git_flags(secret: client.V1Secret) -> List[str]:
    if secret.type == BASIC_AUTH_SECRET:
        flag = "-basic-git"
    elif secret.type == SSH_AUTH_SECRET:
        flag = "-ssh-git"
    else:
        return []
    name = secret.metadata.name
    return [f"{flag}={name}={url}" for url in _annotated_urls(secret, GIT_ANNOTATION_PREFIX)]

def matching_flags(secret: client.V1Secret) -> List[str]:
    """
    Flags for the credential initializer derived from a secret's annotations.
    An empty list means the secret is not used by the build.
    """
    flags = docker_flags(secret) + git_flags(secret)
    if flags:
        logger.debug(f"Secret {secret.metadata.name} matched {len(flags)} credential(s)")
    return flags
