class UrlShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:urlshortener_error'


class ValidationError(UrlShortenerError):
    """Raised when client input (e.g. a long URL) is missing, malformed or unsafe."""

    error_code = 'app:validation_error'


class ShortcodeGenerationError(UrlShortenerError):
    """Raised when the secure random source fails while generating a shortcode."""

    error_code = 'app:shortcode_generation_error'


class CollisionExhaustedError(UrlShortenerError):
    """Raised when every shortcode attempt collided with an existing link."""

    error_code = 'app:collision_exhausted_error'


class ConfigurationError(UrlShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
