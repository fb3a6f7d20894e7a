"""Helper functions for Azure DevOps operations."""
from datetime import datetime

from ..errors import InvalidArgumentError

DEFAULT_HOST = "dev.azure.com"


def base_uri(organization: str, project: str, host: str = DEFAULT_HOST) -> str:
    """Return ``https://<host>/<organization>/<project>``."""
    if not organization:
        raise InvalidArgumentError("'organization' is required")
    if not project:
        raise InvalidArgumentError("'project' is required")
    return f"https://{host}/{organization}/{project}"


def sortable_date(value: datetime) -> str:
    """Format a datetime as sortable ISO-8601 (``2024-05-01T13:45:00``)."""
    return value.strftime("%Y-%m-%dT%H:%M:%S")


def require(value, name: str) -> None:
    if value is None or value == "":
        raise InvalidArgumentError(f"'{name}' is required")
