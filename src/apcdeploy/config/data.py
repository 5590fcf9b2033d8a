"""Configuration data helpers: loading, content types, validation, normalization."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from apcdeploy.config.defaults import (
    CONTENT_TYPE_JSON,
    CONTENT_TYPE_TEXT,
    CONTENT_TYPE_YAML,
    MAX_CONFIG_SIZE,
)
from apcdeploy.lib.errors import ConfigError, ValidationError
from apcdeploy.models.appconfig import ProfileKind

_EXTENSION_CONTENT_TYPES: dict[str, str] = {
    ".json": CONTENT_TYPE_JSON,
    ".yaml": CONTENT_TYPE_YAML,
    ".yml": CONTENT_TYPE_YAML,
    ".txt": CONTENT_TYPE_TEXT,
}

# Fields AppConfig adds to feature flag documents on its own
_FEATURE_FLAG_TIMESTAMP_FIELDS = ("_createdAt", "_updatedAt")


def load_data_file(path: Path, max_size: int = MAX_CONFIG_SIZE) -> bytes:
    """Read a configuration data file after checking its size.

    Raises:
        ConfigError: If the file is missing, unreadable, or too large
    """
    try:
        size = path.stat().st_size
    except OSError as exc:
        raise ConfigError(field="data_file", message=f"cannot read {path}: {exc}") from exc

    if size > max_size:
        raise ConfigError(
            field="data_file",
            message=(
                f"file size ({size} bytes) exceeds maximum allowed size "
                f"({max_size} bytes)"
            ),
        )

    try:
        return path.read_bytes()
    except OSError as exc:
        raise ConfigError(field="data_file", message=f"cannot read {path}: {exc}") from exc


def determine_content_type(profile_kind: str, data_path: str | Path) -> str:
    """Pick the content type for a data file.

    Feature flag profiles always use JSON. Freeform profiles go by file
    extension and default to text/plain.
    """
    if profile_kind == ProfileKind.FEATURE_FLAGS.value:
        return CONTENT_TYPE_JSON
    ext = Path(data_path).suffix.lower()
    return _EXTENSION_CONTENT_TYPES.get(ext, CONTENT_TYPE_TEXT)


def validate_data(data: bytes, content_type: str, max_size: int = MAX_CONFIG_SIZE) -> None:
    """Check data size and syntax for its content type.

    Raises:
        ValidationError: If the data is too large or does not parse
    """
    if len(data) > max_size:
        raise ValidationError(
            content_type,
            f"size {len(data)} bytes exceeds maximum allowed size of {max_size} bytes",
        )

    if content_type == CONTENT_TYPE_JSON:
        try:
            json.loads(data)
        except ValueError as exc:
            raise ValidationError(content_type, f"invalid JSON syntax: {exc}") from exc
    elif content_type == CONTENT_TYPE_YAML:
        try:
            yaml.safe_load(data)
        except yaml.YAMLError as exc:
            raise ValidationError(content_type, f"invalid YAML syntax: {exc}") from exc
    elif content_type != CONTENT_TYPE_TEXT:
        raise ValidationError(content_type, "unsupported content type")


def _strip_timestamps(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {
            key: _strip_timestamps(value)
            for key, value in obj.items()
            if key not in _FEATURE_FLAG_TIMESTAMP_FIELDS
        }
    if isinstance(obj, list):
        return [_strip_timestamps(value) for value in obj]
    return obj


def decode_content(content: bytes | str, content_type: str) -> str:
    """Decode configuration bytes for comparison.

    Raises:
        ValidationError: If JSON or YAML content is not valid UTF-8
    """
    if isinstance(content, str):
        return content
    if content_type in (CONTENT_TYPE_JSON, CONTENT_TYPE_YAML):
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValidationError(content_type, f"content is not valid UTF-8: {exc}") from exc
    return content.decode("utf-8", errors="surrogateescape")


def normalize_content(content: bytes | str, content_type: str, profile_kind: str = "") -> str:
    """Normalize content so formatting-only differences compare equal.

    JSON is re-serialized with sorted keys (feature flag timestamps removed),
    YAML is re-dumped, and text gets LF line endings with a single trailing
    newline.

    Text content may be in any encoding; undecodable bytes are kept through
    ``surrogateescape`` so identical bytes always compare equal.

    Raises:
        ValidationError: If JSON or YAML content is not UTF-8 or does not parse
    """
    text = decode_content(content, content_type)

    if content_type == CONTENT_TYPE_JSON:
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise ValidationError(content_type, f"invalid JSON: {exc}") from exc
        if profile_kind == ProfileKind.FEATURE_FLAGS.value:
            data = _strip_timestamps(data)
        return json.dumps(data, indent=2, sort_keys=True)

    if content_type == CONTENT_TYPE_YAML:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValidationError(content_type, f"invalid YAML: {exc}") from exc
        return yaml.safe_dump(data, sort_keys=True)

    return text.replace("\r\n", "\n").rstrip("\n") + "\n"


def canonical_content_type(content_type: str) -> str:
    """Map a content type reported by AppConfig onto the ones apcdeploy handles.

    Parameters such as ``charset`` are dropped, ``application/yaml`` counts as
    YAML, and a missing content type means JSON.
    """
    base = content_type.split(";", 1)[0].strip().lower()
    if not base:
        return CONTENT_TYPE_JSON
    if base == "application/yaml":
        return CONTENT_TYPE_YAML
    return base


def data_file_name(content_type: str) -> str:
    """Pick a default data file name for a content type."""
    canonical = canonical_content_type(content_type)
    if canonical == CONTENT_TYPE_YAML:
        return "data.yaml"
    if canonical == CONTENT_TYPE_TEXT:
        return "data.txt"
    return "data.json"


def format_for_file(content: bytes, content_type: str, profile_kind: str = "") -> bytes:
    """Prepare remote configuration content for writing to a data file.

    JSON is re-indented with sorted keys, minus the feature flag timestamps
    AppConfig adds. YAML and text are written as they are.

    Raises:
        ValidationError: If JSON content does not parse
    """
    content_type = canonical_content_type(content_type)
    if content_type != CONTENT_TYPE_JSON:
        return content

    try:
        data = json.loads(decode_content(content, content_type))
    except ValueError as exc:
        raise ValidationError(content_type, f"invalid JSON: {exc}") from exc
    if profile_kind == ProfileKind.FEATURE_FLAGS.value:
        data = _strip_timestamps(data)
    return (json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n").encode(
        "utf-8"
    )


def write_data_file(
    path: Path, content: bytes, content_type: str, profile_kind: str = ""
) -> None:
    """Write remote configuration content to a local data file.

    Raises:
        ConfigError: If the file cannot be written
        ValidationError: If JSON content does not parse
    """
    data = format_for_file(content, content_type, profile_kind)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as exc:
        raise ConfigError(field="data_file", message=f"cannot write {path}: {exc}") from exc
