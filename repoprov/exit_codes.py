"""
Standard exit codes and error types for repoprov commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
CONFIG_ERROR = 66        # Configuration file error
PERMISSION_ERROR = 67    # Insufficient permissions
NETWORK_ERROR = 68       # Network connection failed
DATA_ERROR = 70          # Data format or validation error
PARTIAL_SUCCESS = 71     # Some identities succeeded, some failed
INFRA_UNAVAILABLE = 72   # git or the store is not present in this environment
PROVISION_ERROR = 73     # A clone did not materialize correctly
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'ConnectionError': NETWORK_ERROR,
    'TimeoutError': NETWORK_ERROR,
    'ValueError': DATA_ERROR,
    'KeyError': DATA_ERROR,
    'JSONDecodeError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    return EXCEPTION_EXIT_CODES.get(exc.__class__.__name__, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class InfrastructureUnavailableError(CommandError):
    """
    A subsystem the workflow can live without is missing.

    Callers treat this as a skip, never as a failure.
    """
    def __init__(self, message: str):
        super().__init__(message, INFRA_UNAVAILABLE)


class FetchUnavailableError(InfrastructureUnavailableError):
    """Raised when git is not installed in the running environment."""


class StoreUnavailableError(InfrastructureUnavailableError):
    """Raised when the provenance store is disabled or not initialized."""


class ProvisioningError(CommandError):
    """Raised when a clone did not materialize correctly."""
    def __init__(self, message: str, identity: Optional[str] = None):
        super().__init__(message, PROVISION_ERROR)
        self.identity = identity


class ValidationFailedError(CommandError):
    """Raised when a structural check of a checkout failed."""
    def __init__(self, message: str, failing: Optional[list] = None):
        super().__init__(message, DATA_ERROR)
        self.failing = failing or []


class PartialSuccessError(CommandError):
    """Raised when some operations succeed and some fail."""
    def __init__(self, message: str, succeeded: int = 0, failed: int = 0):
        super().__init__(message, PARTIAL_SUCCESS)
        self.succeeded = succeeded
        self.failed = failed
