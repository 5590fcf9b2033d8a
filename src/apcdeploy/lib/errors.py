"""Custom exception hierarchy for apcdeploy resolution and deployment."""

from __future__ import annotations

from enum import Enum

from botocore.exceptions import ClientError

IAM_DOCS_URL = (
    "https://docs.aws.amazon.com/appconfig/latest/userguide/security-iam.html"
)


class ApcDeployError(Exception):
    """Base exception for all apcdeploy errors.

    All apcdeploy-specific exceptions inherit from this class, enabling
    centralized exception handling in the CLI layer.
    """

    pass


class ConfigError(ApcDeployError):
    """Exception raised for configuration errors.

    Raised when the deployment config file or the configuration data file
    cannot be loaded or is invalid.

    Attributes:
        field: The configuration field that caused the error
        message: Human-readable error message describing the issue
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize ConfigError with field and message.

        Args:
            field: Configuration field name where error occurred
            message: Descriptive error message
        """
        self.field = field
        self.message = message
        super().__init__(f"Configuration error in '{field}': {message}")


class ValidationError(ApcDeployError):
    """Exception raised when configuration data fails local validation.

    Attributes:
        content_type: Content type the data was validated as
        message: Description of the validation failure
    """

    def __init__(self, content_type: str, message: str) -> None:
        """Initialize ValidationError with content type and message."""
        self.content_type = content_type
        self.message = message
        super().__init__(f"Invalid {content_type} data: {message}")


class ErrorKind(str, Enum):
    """Closed classification of remote call failures."""

    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    THROTTLING = "throttling"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNKNOWN = "unknown"


_ERROR_CODE_KINDS: dict[str, ErrorKind] = {
    "AccessDeniedException": ErrorKind.ACCESS_DENIED,
    "UnauthorizedException": ErrorKind.ACCESS_DENIED,
    "ForbiddenException": ErrorKind.ACCESS_DENIED,
    "ResourceNotFoundException": ErrorKind.NOT_FOUND,
    "ThrottlingException": ErrorKind.THROTTLING,
    "ThrottledException": ErrorKind.THROTTLING,
    "TooManyRequestsException": ErrorKind.THROTTLING,
    "RequestLimitExceeded": ErrorKind.THROTTLING,
    "BadRequestException": ErrorKind.VALIDATION,
    "ValidationException": ErrorKind.VALIDATION,
    "PayloadTooLargeException": ErrorKind.VALIDATION,
    "ConflictException": ErrorKind.CONFLICT,
}


def classify(exc: BaseException | None) -> ErrorKind:
    """Classify an exception into a closed ErrorKind.

    botocore ClientError codes are read directly. A RemoteCallError keeps the
    kind computed when it wrapped the original failure.

    Args:
        exc: Exception raised by a remote call (or None)

    Returns:
        The matching ErrorKind, UNKNOWN when nothing matches
    """
    if exc is None:
        return ErrorKind.UNKNOWN
    if isinstance(exc, RemoteCallError):
        return exc.kind
    if isinstance(exc, ClientError):
        code = exc.response.get("Error", {}).get("Code", "")
        return _ERROR_CODE_KINDS.get(code, ErrorKind.UNKNOWN)
    return ErrorKind.UNKNOWN


class RemoteCallError(ApcDeployError):
    """Exception raised when an AppConfig API call fails.

    Attributes:
        operation: Name of the AppConfig operation that failed
        cause: The underlying exception
        kind: Classification of the failure
    """

    def __init__(self, operation: str, cause: BaseException) -> None:
        """Wrap a failed remote call with its operation name."""
        self.operation = operation
        self.cause = cause
        self.kind = classify(cause)
        super().__init__(f"{operation} failed: {cause}")


class PaginationLimitError(ApcDeployError):
    """Exception raised when a paginated listing never stops returning tokens."""

    def __init__(self, operation: str, max_pages: int) -> None:
        """Create a pagination limit error for an operation."""
        self.operation = operation
        self.max_pages = max_pages
        super().__init__(
            f"{operation} returned more than {max_pages} pages; "
            "aborting to avoid runaway pagination"
        )


class ResourceNotFoundError(ApcDeployError):
    """Exception raised when a name matches no resource of a given kind.

    Attributes:
        kind: Human label for the resource kind (e.g. "application")
        name: The name that was looked up
    """

    def __init__(self, kind: str, name: str) -> None:
        """Create a not-found error for a resource name."""
        self.kind = kind
        self.name = name
        super().__init__(
            f"{kind} not found: {name}. "
            f"Check the {kind} name and the region you are deploying to."
        )


class AmbiguousResourceError(ApcDeployError):
    """Exception raised when a name matches more than one resource.

    Attributes:
        kind: Human label for the resource kind
        name: The ambiguous name
        count: Number of resources sharing the name
    """

    def __init__(self, kind: str, name: str, count: int = 2) -> None:
        """Create an ambiguity error for a duplicated resource name."""
        self.kind = kind
        self.name = name
        self.count = count
        super().__init__(
            f"found {count} {kind}s named {name!r}; "
            f"rename the duplicates so the {kind} name is unique"
        )


class InvalidVersionNumberError(ApcDeployError):
    """Exception raised when a configuration version string is not an integer."""

    def __init__(self, value: str) -> None:
        """Create an invalid version number error."""
        self.value = value
        super().__init__(f"invalid version number: {value}")


class DeploymentError(ApcDeployError):
    """Exception raised when a deployment operation fails.

    Attributes:
        operation: Deployment step that failed (e.g. "deploy", "wait")
        message: Human-readable error message
    """

    def __init__(self, operation: str, message: str) -> None:
        """Initialize DeploymentError with operation and message."""
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}")


class DeploymentInProgressError(DeploymentError):
    """Exception raised when another deployment is already running."""

    def __init__(self, deployment_number: int) -> None:
        """Create an in-progress error naming the running deployment."""
        self.deployment_number = deployment_number
        super().__init__(
            operation="deploy",
            message=(
                f"deployment #{deployment_number} is already in progress; "
                "wait for it to finish or roll it back first"
            ),
        )


class DeploymentRolledBackError(DeploymentError):
    """Exception raised when a deployment ends in ROLLED_BACK.

    Attributes:
        deployment_number: The rolled back deployment
        reason: Description of the most recent rollback event, if any
    """

    def __init__(self, deployment_number: int, reason: str | None = None) -> None:
        """Create a rollback error with an optional reason."""
        self.deployment_number = deployment_number
        self.reason = reason
        message = f"deployment #{deployment_number} was rolled back"
        if reason:
            message += f": {reason}"
        super().__init__(operation="wait", message=message)


class DeploymentTimeoutError(DeploymentError):
    """Exception raised when waiting for a deployment exceeds its timeout."""

    def __init__(self, deployment_number: int, timeout: float) -> None:
        """Create a timeout error naming the configured timeout."""
        self.deployment_number = deployment_number
        self.timeout = timeout
        super().__init__(
            operation="wait",
            message=f"deployment #{deployment_number} timed out after {timeout:g}s",
        )


class DeploymentCancelledError(DeploymentError):
    """Exception raised when a wait is cancelled by the caller."""

    def __init__(self, deployment_number: int) -> None:
        """Create a cancellation error."""
        self.deployment_number = deployment_number
        super().__init__(
            operation="wait",
            message=f"waiting for deployment #{deployment_number} was cancelled",
        )


class UnexpectedDeploymentStateError(DeploymentError):
    """Exception raised when AppConfig reports a state the waiter cannot handle."""

    def __init__(self, deployment_number: int, state: str) -> None:
        """Create an unexpected state error."""
        self.deployment_number = deployment_number
        self.state = state
        super().__init__(
            operation="wait",
            message=f"unexpected state for deployment #{deployment_number}: {state}",
        )


def format_access_denied_error(operation: str) -> str:
    """Format an access denied error with the IAM permission to grant."""
    return (
        f"Access denied for operation: {operation}\n\n"
        "Required IAM permissions:\n"
        f"  - appconfig:{operation}\n\n"
        "Please ensure your IAM user/role has the necessary AppConfig "
        "permissions.\n"
        f"For more information, see: {IAM_DOCS_URL}"
    )


def _service_message(exc: BaseException) -> str:
    """Return the message AppConfig attached to a failed call."""
    cause = exc.cause if isinstance(exc, RemoteCallError) else exc
    if isinstance(cause, ClientError):
        return cause.response.get("Error", {}).get("Message") or str(cause)
    return str(cause)


def format_validation_error(exc: BaseException, operation: str) -> str:
    """Format a request AppConfig rejected as invalid.

    Usually the content does not match its content type or a validator
    attached to the profile rejected it.
    """
    return (
        f"Validation failed for operation: {operation}\n\n"
        f"  {_service_message(exc)}\n\n"
        "Check the configuration data against the profile's validators."
    )


def format_user_friendly_error(exc: BaseException, operation: str) -> str:
    """Convert a remote failure into a user-facing message.

    Args:
        exc: The exception raised by a remote call
        operation: AppConfig operation name, used in the IAM hint

    Returns:
        Message suitable for printing to the terminal
    """
    kind = classify(exc)
    if kind == ErrorKind.ACCESS_DENIED:
        return format_access_denied_error(operation)
    if kind == ErrorKind.NOT_FOUND:
        return (
            f"Resource not found during {operation} operation. "
            "Please verify the resource exists and you have access to it."
        )
    if kind == ErrorKind.THROTTLING:
        return "Rate limit exceeded. Please wait a moment and try again."
    if kind == ErrorKind.VALIDATION:
        return format_validation_error(exc, operation)
    return str(exc)
