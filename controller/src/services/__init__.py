from controller.src.services.build_parser import (
    parse_build_config,
    parse_build_dict,
)
from controller.src.services.executor import (
    SequenceRunner,
    KubernetesSequenceRunner,
    execute_build,
    wait_for_build,
)
from controller.src.services.status_reporter import (
    report_build_status,
    get_build_status,
    invalid_build_status,
)

__all__ = [
    "parse_build_config",
    "parse_build_dict",
    "SequenceRunner",
    "KubernetesSequenceRunner",
    "execute_build",
    "wait_for_build",
    "report_build_status",
    "get_build_status",
    "invalid_build_status",
]
