"""
Kubernetes client initialization and utilities.
"""

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from typing import Optional
import logging

from controller.src.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

_api_client = None
_core_v1 = None

def init_k8s_client():
    """Initialize Kubernetes client."""
    global _api_client, _core_v1
    
    try:
        if settings.k8s_in_cluster:
            # Running inside Kubernetes
            config.load_incluster_config()
            logger.info("Loaded in-cluster Kubernetes config")
        else:
            # Running locally (Docker Desktop, minikube, etc.)
            config.load_kube_config()
            logger.info("Loaded local Kubernetes config")
        
        _api_client = client.ApiClient()
        _core_v1 = client.CoreV1Api(_api_client)
        
        # Test connection
        _core_v1.list_namespace(limit=1)
        logger.info("Kubernetes client initialized successfully")
        
        return True
    except Exception as e:
        logger.error(f"Failed to initialize Kubernetes client: {e}")
        return False

def get_core_api() -> client.CoreV1Api:
    """Get CoreV1 API client for Pod, Secret and ServiceAccount operations."""
    global _core_v1
    if _core_v1 is None:
        init_k8s_client()
    return _core_v1

def ensure_namespace(namespace: Optional[str] = None):
    """Ensure the build namespace exists."""
    namespace = namespace or settings.k8s_namespace
    core_v1 = get_core_api()
    
    try:
        core_v1.read_namespace(name=namespace)
        logger.info(f"Namespace '{namespace}' exists")
    except ApiException as e:
        if e.status == 404:
            # Create namespace
            body = client.V1Namespace(
                metadata=client.V1ObjectMeta(name=namespace)
            )
            core_v1.create_namespace(body=body)
            logger.info(f"Created namespace '{namespace}'")
        else:
            raise

def get_pod_logs(pod_name: str, container: Optional[str] = None, namespace: Optional[str] = None) -> str:
    """Get logs from a pod, or from one of its (init) containers."""
    namespace = namespace or settings.k8s_namespace
    core_v1 = get_core_api()
    
    try:
        return core_v1.read_namespaced_pod_log(
            name=pod_name,
            namespace=namespace,
            container=container,
            tail_lines=1000,  # Limit log lines
        )
    except ApiException as e:
        logger.error(f"Failed to get logs for pod {pod_name}: {e}")
        return f"Error fetching logs: {e.reason}"

def delete_pod(pod_name: str, namespace: Optional[str] = None):
    """Delete a build pod."""
    namespace = namespace or settings.k8s_namespace
    core_v1 = get_core_api()
    
    try:
        core_v1.delete_namespaced_pod(
            name=pod_name,
            namespace=namespace,
            body=client.V1DeleteOptions(
                propagation_policy="Foreground"
            )
        )
        logger.info(f"Deleted pod {pod_name}")
    except ApiException as e:
        if e.status != 404:
            logger.error(f"Failed to delete pod {pod_name}: {e}")
