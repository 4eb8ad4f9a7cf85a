"""
Build YAML parser and validator.
"""

import yaml
from pydantic import ValidationError
from typing import Dict, Any, Optional

from controller.src.errors import BuildConfigError
from controller.src.models.build import Build

def parse_build_config(yaml_content: str) -> Build:
    """Parse a build configuration from a YAML string."""
    try:
        config = yaml.safe_load(yaml_content)
    except yaml.YAMLError as e:
        raise BuildConfigError(f"Invalid YAML: {e}")

    return parse_build_dict(config)

def parse_build_dict(config: Optional[Dict[str, Any]]) -> Build:
    """Validate a build configuration from a dict."""
    if not config:
        raise BuildConfigError("Empty build configuration")

    if not isinstance(config, dict):
        raise BuildConfigError("Build configuration must be a dictionary")

    if "name" not in config:
        raise BuildConfigError("Build must have a 'name'")

    try:
        return Build.model_validate(config)
    except ValidationError as e:
        raise BuildConfigError(f"Invalid build '{config['name']}': {e}")
