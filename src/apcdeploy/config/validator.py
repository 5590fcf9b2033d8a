"""Turn apcdeploy.yml validation failures into readable messages."""

from pydantic import ValidationError as PydanticValidationError

# pydantic error types that get a fixed wording in apcdeploy.yml messages
_CONFIG_ERROR_WORDING = {
    "missing": "is required",
    "extra_forbidden": "is not a recognized apcdeploy.yml key",
    "string_type": "must be a string",
}


def describe_config_errors(exc: PydanticValidationError) -> list[str]:
    """Return one ``<key>: <problem>`` line per invalid apcdeploy.yml key.

    Example:
        >>> from apcdeploy.models.config import DeployConfig
        >>> try:
        ...     DeployConfig.model_validate({"application": "demo", "color": "red"})
        ... except PydanticValidationError as e:
        ...     describe_config_errors(e)[-1]
        'color: is not a recognized apcdeploy.yml key'
    """
    lines: list[str] = []
    for error in exc.errors():
        key = ".".join(str(part) for part in error.get("loc", ())) or "apcdeploy.yml"
        problem = _CONFIG_ERROR_WORDING.get(error.get("type", ""))
        if problem is None:
            # Custom validators raise ValueError; pydantic prefixes the text
            problem = error.get("msg", "is invalid").removeprefix("Value error, ")
        lines.append(f"{key}: {problem}")
    return lines
