"""Application-level exceptions.

Every exception carries an `error_code` which handlers forward to clients
as `errorCode` in JSON error bodies.

Classes:
    LilError:
        Base class for all application-specific errors.

    ValidationError:
        Base class for rejected caller input.

    InvalidShortcodeError:
        Raised when a custom shortcode is empty, has the wrong length,
        contains characters outside the alphabet or is a reserved word.

    InvalidTargetURLError:
        Raised when a target URL is empty or not an absolute http(s) URL.

    InvalidLimitError:
        Raised when a search page limit is not a positive integer.

    CreateExhaustedError:
        Raised when every generated shortcode collided with an existing one.

    ConfigurationError:
        Base class for configuration errors.
"""


class LilError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:lil_error'


class ValidationError(LilError):
    """Base exception for invalid caller input."""

    error_code = 'input:validation_error'


class InvalidShortcodeError(ValidationError):
    """Raised when a custom shortcode is malformed."""

    error_code = 'input:invalid_shortcode'


class InvalidTargetURLError(ValidationError):
    """Raised when a target URL is empty or not absolute."""

    error_code = 'input:invalid_target_url'


class InvalidLimitError(ValidationError):
    """Raised when a search limit is not a positive integer."""

    error_code = 'input:invalid_limit'


class CreateExhaustedError(LilError):
    """Raised when the shortcode generation retry budget is exhausted."""

    error_code = 'app:create_exhausted'


class ConfigurationError(LilError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
