"""
Report build status to Redis.
"""

import logging
import redis
from typing import Optional

from controller.src.config import get_settings
from controller.src.errors import BuildValidationError
from controller.src.models.status import BuildStatus, Condition, ConditionStatus

logger = logging.getLogger(__name__)
settings = get_settings()

BUILD_STATUS = "podline:status"

def report_build_status(build_key: str, status: BuildStatus):
    """Store the latest status of a build."""
    client = redis.from_url(settings.redis_url, decode_responses=True)

    try:
        client.hset(BUILD_STATUS, build_key, status.model_dump_json())
    finally:
        client.close()

    condition = status.get_condition()
    if condition is not None:
        logger.info(f"Build {build_key} is {condition.status.value}: {condition.message}")

def get_build_status(build_key: str) -> Optional[BuildStatus]:
    """Read back the latest status of a build."""
    client = redis.from_url(settings.redis_url, decode_responses=True)

    try:
        data = client.hget(BUILD_STATUS, build_key)
    finally:
        client.close()

    if data is None:
        return None
    return BuildStatus.model_validate_json(data)

def invalid_build_status(error: BuildValidationError) -> BuildStatus:
    """Status for a build whose spec was rejected before any pod existed."""
    return BuildStatus(
        conditions=[
            Condition(
                status=ConditionStatus.FALSE,
                reason=error.reason,
                message=error.message,
            )
        ]
    )
