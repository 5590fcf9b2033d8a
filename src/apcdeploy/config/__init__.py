"""Configuration loading and data file handling for apcdeploy.

Main components:
- ConfigLoader: Load and validate apcdeploy.yml files
- Data file helpers: size checks, content types, syntax validation
- Default values for polling, limits, and content types
"""

from apcdeploy.config.data import (
    determine_content_type,
    load_data_file,
    normalize_content,
    validate_data,
)
from apcdeploy.config.loader import ConfigLoader

__all__ = [
    "ConfigLoader",
    "determine_content_type",
    "load_data_file",
    "normalize_content",
    "validate_data",
]
