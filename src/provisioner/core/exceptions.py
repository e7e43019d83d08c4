"""Custom exceptions for the provisioner."""


class ProvisionError(Exception):
    """Base exception for all provisioner errors."""


class ConfigurationError(ProvisionError):
    """Configuration-related errors."""


class AWSError(ProvisionError):
    """AWS operation failed.

    Attributes:
        error_code: AWS error code when the failure came from an API response
    """

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code


class CredentialsNotReadyError(ProvisionError):
    """Freshly issued credentials are not usable yet."""


class ProvisioningAbortedError(ProvisionError):
    """A fatal step failed and the run was abandoned.

    Attributes:
        step: Name of the step that failed
    """

    def __init__(self, step: str, message: str):
        super().__init__(f"{step}: {message}")
        self.step = step
