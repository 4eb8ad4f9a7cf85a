"""
Build outcome models.
"""

from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from enum import Enum

BUILD_SUCCEEDED = "Succeeded"

class ConditionStatus(str, Enum):
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"

class Condition(BaseModel):
    type: str = BUILD_SUCCEEDED
    status: ConditionStatus = ConditionStatus.UNKNOWN
    reason: str = ""
    message: str = ""

class StateWaiting(BaseModel):
    reason: str = ""
    message: str = ""

class StateRunning(BaseModel):
    started_at: Optional[datetime] = None

class StateTerminated(BaseModel):
    exit_code: int
    signal: Optional[int] = None
    reason: str = ""
    message: str = ""
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    container_id: str = ""

class StepState(BaseModel):
    """Raw state of one step container, as Kubernetes reported it."""
    waiting: Optional[StateWaiting] = None
    running: Optional[StateRunning] = None
    terminated: Optional[StateTerminated] = None

class ClusterSpec(BaseModel):
    namespace: str
    pod_name: str

class BuildStatus(BaseModel):
    builder: str = "Cluster"
    cluster: Optional[ClusterSpec] = None
    start_time: Optional[datetime] = None
    steps_completed: List[str] = []
    step_states: List[StepState] = []
    conditions: List[Condition] = []

    def get_condition(self, type: str = BUILD_SUCCEEDED) -> Optional[Condition]:
        for condition in self.conditions:
            if condition.type == type:
                return condition
        return None

    def set_condition(self, condition: Condition):
        """Replace any condition of the same type."""
        self.conditions = [c for c in self.conditions if c.type != condition.type]
        self.conditions.append(condition)

    @property
    def is_done(self) -> bool:
        condition = self.get_condition()
        return condition is not None and condition.status != ConditionStatus.UNKNOWN
