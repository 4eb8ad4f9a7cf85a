"""
PodLine Controller - Main entry point.

Builds are turned into pods whose init containers run the credential
initializer, the source fetcher and the build steps. Those images come from
settings and must be set before any build can run.
"""

import logging
import sys

from controller.src.config import Settings, get_settings
from controller.src.k8s.client import init_k8s_client, ensure_namespace
from controller.src.worker import BUILD_QUEUE, run_worker

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)

logger = logging.getLogger(__name__)

def check_images(settings: Settings) -> bool:
    """Log the step images; False if any is still a placeholder."""
    for name, image in settings.images().items():
        logger.info(f"{name}: {image}")

    missing = settings.placeholder_images()
    if missing:
        logger.error(
            f"Image settings not configured: {', '.join(sorted(missing))} "
            f"(set {', '.join(n.upper() for n in sorted(missing))})"
        )
        return False
    return True

def main():
    """Main entry point."""
    settings = get_settings()
    
    logger.info(f"Starting PodLine Controller on queue {BUILD_QUEUE} at {settings.redis_url}")
    if not check_images(settings):
        sys.exit(1)
    
    if not init_k8s_client():
        logger.error("Failed to initialize Kubernetes client")
        sys.exit(1)
    
    # Builds without a namespace of their own run here
    try:
        ensure_namespace(settings.k8s_namespace)
    except Exception as e:
        logger.error(f"Failed to ensure default build namespace: {e}")
        sys.exit(1)
    
    run_worker()

if __name__ == "__main__":
    main()
