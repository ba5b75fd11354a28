"""Domain errors for lavalinkctl."""


class SidecarError(RuntimeError):
    """Raised when the sidecar command cannot be prepared or launched."""


class UsageError(SidecarError):
    """Raised when the requested verb is missing or not recognized."""


class ConfigSourceError(SidecarError):
    """Raised when an environment file cannot be parsed."""


class RuntimeNotFoundError(SidecarError):
    """Raised when the selected container runtime executable does not exist."""
