from enum import Enum


class ResourceKind(str, Enum):
    """SageMaker resource kinds covered by the inventory."""

    ENDPOINT = "endpoint"
    NOTEBOOK = "notebook"
    STUDIO_APP = "studio_app"


# Status a resource must report to be listed (the same value for every kind)
ACTIVE_STATUS = {
    ResourceKind.ENDPOINT: "InService",
    ResourceKind.NOTEBOOK: "InService",
    ResourceKind.STUDIO_APP: "InService",
}

UNKNOWN_INSTANCE_TYPE = "unknown"
# ListEndpoints exposes no variant data; one instance is assumed
DEFAULT_ENDPOINT_INSTANCE_COUNT = 1

# Studio app flavours
APP_TYPE_JUPYTER_SERVER = "JupyterServer"
APP_TYPE_JUPYTER_LAB = "JupyterLab"

STUDIO_TYPE_LABELS = {
    APP_TYPE_JUPYTER_SERVER: "Old Studio (JupyterServer)",
    APP_TYPE_JUPYTER_LAB: "New Studio (JupyterLab)",
}
UNKNOWN_STUDIO_TYPE = "Unknown Studio"

# Provider error codes meaning "credentials or permissions are unusable"
AUTH_ERROR_CODES = frozenset(
    {
        "AccessDeniedException",
        "AccessDenied",
        "InvalidClientTokenId",
        "UnrecognizedClientException",
        "SignatureDoesNotMatch",
        "InvalidSignatureException",
        "ExpiredToken",
        "ExpiredTokenException",
    }
)

# Throttling and server-side faults that are expected to clear on retry
TRANSIENT_ERROR_CODES = frozenset(
    {
        "ThrottlingException",
        "Throttling",
        "TooManyRequestsException",
        "RequestLimitExceeded",
        "SlowDown",
        "InternalFailure",
        "InternalServerError",
        "InternalError",
        "ServiceUnavailable",
        "ServiceUnavailableException",
        "RequestTimeout",
        "RequestTimeoutException",
    }
)

# Lower-cased fragments of instance-metadata role resolution failures
IMDS_ROLE_ERROR_PATTERNS = (
    "no ec2 imds role found",
    "ec2 imds role",
    "failed to retrieve credentials from imds",
    "error retrieving metadata",
    "instance metadata service role",
)

AUTH_ERROR_BANNER = "AWS Authentication Error"
HINT_NO_ROLE = "No AWS role configured."
HINT_NO_CREDENTIALS = "No AWS credentials found."
HINT_INVALID_CREDENTIALS = (
    "AWS credentials are invalid, expired or lack SageMaker list permissions."
)
