"""
Build spec models.

Field names are snake_case in Python and camelCase in YAML/JSON documents,
matching how Kubernetes manifests are written.
"""

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Any, List, Optional, Dict
from enum import Enum

class SpecModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class EnvVar(SpecModel):
    name: str
    value: str = ""

class VolumeMount(SpecModel):
    name: str
    mount_path: str
    sub_path: str = ""
    read_only: bool = False

class Step(SpecModel):
    """A single build step. An empty name is filled in when the pod is built."""
    name: str = ""
    image: str
    command: List[str] = []
    args: List[str] = []
    working_dir: str = ""
    env: List[EnvVar] = []
    volume_mounts: List[VolumeMount] = []

    @field_validator("env", mode="before")
    @classmethod
    def env_from_mapping(cls, value: Any) -> Any:
        # Allow the shorthand `env: {KEY: value}`
        if isinstance(value, dict):
            return [{"name": k, "value": str(v)} for k, v in value.items()]
        return value

class Volume(SpecModel):
    """A pod volume. With no source set it is an emptyDir."""
    name: str
    host_path: Optional[str] = None
    secret_name: Optional[str] = None
    config_map_name: Optional[str] = None
    persistent_volume_claim: Optional[str] = None

    @model_validator(mode="after")
    def check_single_source(self) -> "Volume":
        sources = [
            self.host_path,
            self.secret_name,
            self.config_map_name,
            self.persistent_volume_claim,
        ]
        if sum(s is not None for s in sources) > 1:
            raise ValueError(f"volume {self.name!r} must declare at most one source")
        return self

class GitSource(SpecModel):
    url: str = ""
    revision: str = ""

class GCSSourceType(str, Enum):
    ARCHIVE = "Archive"
    MANIFEST = "Manifest"

class GCSSource(SpecModel):
    type: GCSSourceType = GCSSourceType.ARCHIVE
    location: str = ""

class SourceSpec(SpecModel):
    git: Optional[GitSource] = None
    gcs: Optional[GCSSource] = None
    custom: Optional[Step] = None
    sub_path: str = ""

class BuildSpec(SpecModel):
    service_account_name: str = ""
    source: Optional[SourceSpec] = None
    steps: List[Step] = []
    volumes: List[Volume] = []
    node_selector: Dict[str, str] = {}
    timeout: Optional[int] = None  # Seconds, enforced by Kubernetes

class Build(SpecModel):
    name: str
    namespace: str = "default"
    spec: BuildSpec = BuildSpec()
