"""Exception hierarchy for routespec.

All exceptions inherit from :class:`RouteSpecError`. Only
:class:`RuleExtractionError` (and its subclasses) is treated as recoverable:
the request-body composer turns it, like any other failure raised while
extracting or interpreting validation rules, into a warning on the affected
operation. Everything else propagates out of
:meth:`routespec.generator.Generator.generate` and aborts the run.

Subclass hierarchy::

    RouteSpecError
    +-- ConfigError
    +-- ManifestError
    +-- InvalidRouteError
    +-- UnknownClassError
    +-- RuleExtractionError
        +-- RuleTokenError
"""


class RouteSpecError(Exception):
    """Base exception for all routespec errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(RouteSpecError):
    """Raised for configuration problems (missing file, invalid JSON/YAML, bad values)."""


class ManifestError(RouteSpecError):
    """Raised when a route manifest cannot be read or fails validation."""


class InvalidRouteError(RouteSpecError):
    """Raised when a route descriptor is malformed (e.g. it declares no HTTP method)."""


class UnknownClassError(RouteSpecError):
    """Raised when an identifier is resolved against a class that was never registered."""


class RuleExtractionError(RouteSpecError):
    """Raised by rule extractors when the validation rules of a handler cannot be read."""


class RuleTokenError(RuleExtractionError):
    """Raised when a rule token carries an argument that cannot be interpreted.

    Example: ``min:abc`` on a numeric field.
    """
