"""Standard exit codes for Dodgem.

This module defines the exit codes used across the Dodgem CLI for
consistent error reporting and scripting support.
"""


class ExitCode:
    """Standard exit codes for Dodgem.

    These codes follow common Unix conventions where possible:
    - 0: Success
    - 1: General error
    - 2: Misuse of command (reserved for usage errors from the parser)
    - 130: Terminated by Ctrl+C (SIGINT)

    Dodgem-specific codes start at 3:
    - 3: Configuration error
    - 4: Missing or unreadable credentials
    - 5: Browser could not be started
    - 6: Invalid argument
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    USAGE_ERROR = 2

    # Dodgem-specific errors
    CONFIGURATION_ERROR = 3
    CREDENTIALS_ERROR = 4
    BROWSER_ERROR = 5
    INVALID_ARGUMENT = 6

    # Signal-based exits (128 + signal number)
    CANCELLED = 130

    @classmethod
    def get_name(cls, code: int) -> str:
        """Get the name of an exit code.

        Args:
            code: The exit code value

        Returns:
            Human-readable name for the exit code
        """
        names = {
            cls.SUCCESS: "SUCCESS",
            cls.GENERAL_ERROR: "GENERAL_ERROR",
            cls.USAGE_ERROR: "USAGE_ERROR",
            cls.CONFIGURATION_ERROR: "CONFIGURATION_ERROR",
            cls.CREDENTIALS_ERROR: "CREDENTIALS_ERROR",
            cls.BROWSER_ERROR: "BROWSER_ERROR",
            cls.INVALID_ARGUMENT: "INVALID_ARGUMENT",
            cls.CANCELLED: "CANCELLED",
        }
        return names.get(code, f"UNKNOWN({code})")

    @classmethod
    def get_description(cls, code: int) -> str:
        descriptions = {
            cls.SUCCESS: "Operation completed successfully",
            cls.GENERAL_ERROR: "An unexpected error occurred",
            cls.USAGE_ERROR: "Invalid command usage",
            cls.CONFIGURATION_ERROR: "Configuration error or invalid config file",
            cls.CREDENTIALS_ERROR: "Credentials are missing or unreadable",
            cls.BROWSER_ERROR: "The automated browser could not be started",
            cls.INVALID_ARGUMENT: "Invalid command-line argument",
            cls.CANCELLED: "Operation cancelled by user",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")
