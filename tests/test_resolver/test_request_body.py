"""Tests for routespec.resolver.request_body -- query parameters vs. JSON body."""

from __future__ import annotations

import json

import pytest

from routespec.exceptions import RuleExtractionError
from routespec.models import (
    FormRequestInfo,
    Operation,
    ParameterLocation,
    RouteDescriptor,
    ValidateCallInfo,
)
from routespec.resolver.request_body import (
    JSON_CONTENT_TYPE,
    WARNING_MARKER,
    RulesResult,
    body_schema,
    collect_body_parameters,
    compose_request,
    default_request_body,
)
from routespec.resolver.rules import interpret_rules
from routespec.types import IntegerType, ObjectType


def _raise_extraction_error(route: RouteDescriptor) -> dict:
    raise RuleExtractionError("Unresolvable rules expression")


def _raise_unexpected(route: RouteDescriptor) -> dict:
    raise KeyError("rules")


# ------------------------------------------------------------------ #
# collect_body_parameters
# ------------------------------------------------------------------ #


class TestCollectBodyParameters:
    def test_no_extractor_applies(self, make_route) -> None:
        result = collect_body_parameters(make_route("POST", "api/widgets"))
        assert result.ok
        assert result.parameters == []
        assert result.warning is None

    def test_form_request_rules(self, make_route) -> None:
        route = make_route(
            "POST",
            "api/users",
            form_request=FormRequestInfo(
                class_name="App.Http.Requests.StoreUserRequest",
                rules={"name": "required|string", "age": "integer"},
            ),
        )
        result = collect_body_parameters(route)
        assert [p.name for p in result.parameters] == ["name", "age"]

    def test_failure_captured(self, make_route) -> None:
        route = make_route(
            "POST",
            "api/widgets",
            validate_call=ValidateCallInfo(rules=_raise_extraction_error),
        )
        result = collect_body_parameters(route)
        assert not result.ok
        assert isinstance(result.error, RuleExtractionError)
        assert result.parameters == []

    def test_any_exception_captured(self, make_route) -> None:
        route = make_route(
            "POST",
            "api/widgets",
            validate_call=ValidateCallInfo(rules=_raise_unexpected),
        )
        result = collect_body_parameters(route)
        assert isinstance(result.error, KeyError)

    def test_interpretation_failure_captured(self, make_route) -> None:
        route = make_route(
            "POST",
            "api/widgets",
            validate_call=ValidateCallInfo(rules={"count": "numeric|max:lots"}),
        )
        result = collect_body_parameters(route)
        assert not result.ok
        assert "max:lots" in result.warning


class TestRulesResult:
    def test_warning_format(self) -> None:
        result = RulesResult(error=RuleExtractionError("boom"))
        assert result.warning == f"{WARNING_MARKER} Cannot generate request documentation: boom"
        assert result.warning.startswith("⚠️")


# ------------------------------------------------------------------ #
# Schemas
# ------------------------------------------------------------------ #


class TestBodySchema:
    def test_properties_and_required(self) -> None:
        schema = body_schema(interpret_rules({"age": "required|integer|min:18", "bio": "nullable"}))
        assert isinstance(schema, ObjectType)
        assert schema.to_dict() == {
            "type": "object",
            "properties": {
                "age": {"type": "integer", "minimum": 18.0},
                "bio": {"type": "string", "nullable": True},
            },
            "required": ["age"],
        }

    def test_default_body_is_empty_object(self) -> None:
        body = default_request_body()
        assert body.to_dict() == {
            "content": {JSON_CONTENT_TYPE: {"schema": {"type": "object"}}}
        }


# ------------------------------------------------------------------ #
# compose_request
# ------------------------------------------------------------------ #


class TestComposeRequest:
    def test_get_with_rules_adds_query_parameters(self, make_route) -> None:
        route = make_route(
            "GET",
            "api/users",
            validate_call=ValidateCallInfo(rules={"role": 'in:"admin","editor"', "page": "integer"}),
        )
        operation = Operation(method="get")
        warning = compose_request(operation, route)

        assert warning is None
        assert operation.request_body is None
        assert [p.name for p in operation.parameters] == ["role", "page"]
        assert all(p.location == ParameterLocation.QUERY for p in operation.parameters)
        assert operation.parameters[0].schema_.enum == ["admin", "editor"]

    def test_head_is_query_method(self, make_route) -> None:
        route = make_route(
            "HEAD", "api/users", validate_call=ValidateCallInfo(rules={"q": "string"})
        )
        operation = Operation(method="head")
        compose_request(operation, route)
        assert operation.request_body is None
        assert [p.name for p in operation.parameters] == ["q"]

    def test_non_get_with_rules_builds_json_body(self, make_route) -> None:
        route = make_route(
            "PUT",
            "api/users/{user}",
            form_request=FormRequestInfo(
                class_name="UpdateUserRequest", rules={"age": "required|integer|min:18"}
            ),
        )
        operation = Operation(method="put")
        assert compose_request(operation, route) is None

        assert operation.parameters == []
        schema = operation.request_body.content[JSON_CONTENT_TYPE]
        assert isinstance(schema, ObjectType)
        age = schema.properties["age"]
        assert isinstance(age, IntegerType)
        assert age.minimum == 18.0
        assert schema.required == ["age"]

    def test_non_get_without_rules_gets_default_body(self, make_route) -> None:
        operation = Operation(method="post")
        compose_request(operation, make_route("POST", "api/widgets"))
        assert operation.request_body.to_dict() == default_request_body().to_dict()

    def test_get_without_rules_has_no_body(self, make_route) -> None:
        operation = Operation(method="get")
        compose_request(operation, make_route("GET", "api/widgets"))
        assert operation.request_body is None
        assert operation.parameters == []

    def test_empty_rules_treated_as_no_rules(self, make_route) -> None:
        route = make_route("DELETE", "api/widgets", validate_call=ValidateCallInfo(rules={}))
        operation = Operation(method="delete")
        compose_request(operation, route)
        assert operation.request_body.content[JSON_CONTENT_TYPE].to_dict() == {"type": "object"}

    def test_failure_on_post_gives_default_body_and_warning(self, make_route) -> None:
        route = make_route(
            "POST",
            "api/widgets",
            validate_call=ValidateCallInfo(rules=_raise_extraction_error),
        )
        operation = Operation(method="post")
        warning = compose_request(operation, route)

        assert warning is not None
        assert warning.startswith(WARNING_MARKER)
        assert "Unresolvable rules expression" in warning
        assert operation.request_body.to_dict() == default_request_body().to_dict()

    def test_non_finite_bounds_become_warning(self, make_route) -> None:
        route = make_route(
            "POST",
            "api/payments",
            validate_call=ValidateCallInfo(rules={"amount": "numeric|min:nan|max:inf"}),
        )
        operation = Operation(method="post")
        warning = compose_request(operation, route)

        assert "min:nan" in warning
        assert operation.request_body.to_dict() == default_request_body().to_dict()
        json.dumps(operation.to_dict(), allow_nan=False)

    def test_failure_on_get_gives_warning_only(self, make_route) -> None:
        route = make_route(
            "GET",
            "api/widgets",
            validate_call=ValidateCallInfo(rules=_raise_extraction_error),
        )
        operation = Operation(method="get")
        assert compose_request(operation, route) is not None
        assert operation.request_body is None
        assert operation.parameters == []

    @pytest.mark.parametrize("method", ["get", "post"])
    def test_custom_query_methods(self, make_route, method: str) -> None:
        route = make_route(
            method.upper(), "api/search", validate_call=ValidateCallInfo(rules={"q": "string"})
        )
        operation = Operation(method=method)
        compose_request(operation, route, query_methods=["GET", "POST"])
        assert operation.request_body is None
        assert [p.name for p in operation.parameters] == ["q"]
