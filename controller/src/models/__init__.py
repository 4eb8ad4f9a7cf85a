from controller.src.models.build import (
    EnvVar,
    VolumeMount,
    Step,
    Volume,
    GitSource,
    GCSSourceType,
    GCSSource,
    SourceSpec,
    BuildSpec,
    Build,
)
from controller.src.models.status import (
    BUILD_SUCCEEDED,
    ConditionStatus,
    Condition,
    StepState,
    ClusterSpec,
    BuildStatus,
)

__all__ = [
    "EnvVar",
    "VolumeMount",
    "Step",
    "Volume",
    "GitSource",
    "GCSSourceType",
    "GCSSource",
    "SourceSpec",
    "BuildSpec",
    "Build",
    "BUILD_SUCCEEDED",
    "ConditionStatus",
    "Condition",
    "StepState",
    "ClusterSpec",
    "BuildStatus",
]
