"""Route-to-operation resolution engine.

Sub-modules, leaves first:

* :mod:`~routespec.resolver.rules` -- validation-rule token interpreter.
* :mod:`~routespec.resolver.path_params` -- path parameters and alias map.
* :mod:`~routespec.resolver.request_body` -- query parameters vs. JSON body,
  with the recoverable failure boundary.
* :mod:`~routespec.resolver.operation` -- per-route orchestration.
"""

from routespec.resolver.operation import OperationResolver
from routespec.resolver.path_params import PathParameters, resolve_path_parameters
from routespec.resolver.request_body import RulesResult, compose_request
from routespec.resolver.rules import interpret_field, interpret_rules

__all__ = [
    "OperationResolver",
    "PathParameters",
    "RulesResult",
    "compose_request",
    "interpret_field",
    "interpret_rules",
    "resolve_path_parameters",
]
