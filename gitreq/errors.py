"""Error types raised by git-req components.

Every failure that crosses a component boundary is a ReqError subclass.
The CLI entry point is the only place that turns them into a message and
an exit code.
"""


class ReqError(Exception):
    """Base class for git-req failures."""

    kind = "error"


class InvalidRemoteError(ReqError):
    """Raised when a remote URL cannot be parsed."""

    kind = "invalid-remote"


class RemoteNotFoundError(ReqError):
    """Raised when the named remote is not configured in the repository."""

    kind = "remote-not-found"


class ApiError(ReqError):
    """Raised on transport, status, or decode failures against a provider API."""

    kind = "api-error"


class ProjectNotFoundError(ReqError):
    """Raised when the remote project cannot be resolved."""

    kind = "project-not-found"


class RequestNotFoundError(ReqError):
    """Raised when the provider has no merge/pull request with the given ID."""

    kind = "request-not-found"


class FetchFailedError(ReqError):
    """Raised when git fetch of the request branch fails."""

    kind = "fetch-failed"


class CheckoutFailedError(ReqError):
    """Raised when git checkout fails after a successful fetch."""

    kind = "checkout-failed"


class ConfigNotFoundError(ReqError):
    """Raised when a required config value or history marker is missing."""

    kind = "config-not-found"


class RepositoryNotFoundError(ReqError):
    """Raised when no git repository can be located."""

    kind = "repository-not-found"


class ConfigError(ReqError):
    """Raised when git cannot read or write git-req settings or history refs."""

    kind = "config-error"
