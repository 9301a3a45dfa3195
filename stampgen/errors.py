"""
Errors raised while turning a phrase into a timestamp.

Each error carries the HTTP status the API reports it with.
"""


class ResolutionError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingInput(ResolutionError):
    """Empty phrase or unknown time zone."""
    status_code = 400


class ParseError(ResolutionError):
    """No local rule matched and the model reply was not a date."""
    status_code = 400


class InvalidResult(ResolutionError):
    """The resolved instant is outside the representable epoch range."""
    status_code = 400


class UpstreamError(ResolutionError):
    """The fallback model could not be reached or answered with an unexpected shape."""
    status_code = 500


class ConfigError(ResolutionError):
    """The fallback model is needed but not configured."""
    status_code = 500
