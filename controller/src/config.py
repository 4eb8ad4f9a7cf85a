from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List

# Image defaults that only mark where a real image must be configured
PLACEHOLDER_IMAGE_PREFIX = "override-with-"

class Settings(BaseSettings):
    redis_url: str = "redis://localhost:6379/0"
    
    # Kubernetes settings
    k8s_namespace: str = "podline"  # For build requests without a namespace
    k8s_in_cluster: bool = False  # Set True when running inside K8s
    
    # Images for the synthesized steps
    creds_image: str = "override-with-creds:latest"
    git_image: str = "override-with-git:latest"
    nop_image: str = "override-with-nop:latest"
    gcs_fetcher_image: str = "gcr.io/cloud-builders/gcs-fetcher:latest"
    
    # Executor settings
    poll_interval: float = 2.0
    build_timeout: int = 3600  # Stop watching after 1 hour
    
    model_config = SettingsConfigDict(env_file=".env")

    def images(self) -> dict:
        return {
            "creds_image": self.creds_image,
            "git_image": self.git_image,
            "nop_image": self.nop_image,
            "gcs_fetcher_image": self.gcs_fetcher_image,
        }

    def placeholder_images(self) -> List[str]:
        """Names of image settings still left at their placeholder default."""
        return [
            name for name, image in self.images().items()
            if image.startswith(PLACEHOLDER_IMAGE_PREFIX)
        ]

@lru_cache()
def get_settings() -> Settings:
    return Settings()
