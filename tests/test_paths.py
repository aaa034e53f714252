from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone

import pytest
from pydantic import BaseModel, Field

from typedhttp.paths import QueryParameter, QueryParameters, rest_path, rest_path_query


class ArgumentsQuery(BaseModel):
    Arguments: list[str] | None = None


class PagingQuery(BaseModel):
    page_size: int = Field(alias="pageSize")
    Cursor: str | None = None


@dataclass
class SearchQuery:
    Term: str
    max_results: int | None = field(default=None, metadata={"name": "limit"})


class ExplicitQuery:
    def query_items(self):
        yield "b", 2
        yield "a", 1


def test_no_parameters_render_empty_string() -> None:
    assert str(QueryParameters()) == ""


def test_array_parameter_renders_braces() -> None:
    parameters = QueryParameters.of("test", [1, 2, 3, 4, 5])
    assert str(parameters) == "?test={1,2,3,4,5}"


def test_from_value_without_array_expansion() -> None:
    parameters = QueryParameters.from_value(ArgumentsQuery(Arguments=["a", "b", "c"]), False)
    assert str(parameters) == "?arguments={a,b,c}"


def test_from_value_expands_arrays_by_default() -> None:
    parameters = QueryParameters.from_value(ArgumentsQuery(Arguments=["a", "b", "c"]))
    assert len(parameters) == 3
    assert str(parameters) == "?arguments=a&arguments=b&arguments=c"


def test_from_value_skips_none_fields() -> None:
    assert str(QueryParameters.from_value(ArgumentsQuery())) == ""
    assert len(QueryParameters.from_value(None)) == 0


def test_from_value_uses_model_alias() -> None:
    parameters = QueryParameters.from_value(PagingQuery(pageSize=25, Cursor="abc"))
    assert str(parameters) == "?pageSize=25&cursor=abc"


def test_from_value_uses_dataclass_metadata_name() -> None:
    parameters = QueryParameters.from_value(SearchQuery(Term="red fox", max_results=5))
    assert str(parameters) == "?term=red+fox&limit=5"


def test_from_value_uses_query_items() -> None:
    assert str(QueryParameters.from_value(ExplicitQuery())) == "?b=2&a=1"


def test_from_value_accepts_mappings() -> None:
    parameters = QueryParameters.from_value({"State": "open", "ids": (1, 2), "skip": None})
    assert str(parameters) == "?State=open&ids=1&ids=2"


def test_from_value_rejects_unsupported_sources() -> None:
    with pytest.raises(TypeError):
        QueryParameters.from_value(42)


def test_add_ignores_none_and_empty_string() -> None:
    parameters = QueryParameters()
    parameters.add("a", None)
    parameters.add("b", "")
    assert len(parameters) == 0
    assert str(parameters) == ""

    parameters.add("c", 0)
    assert len(parameters) == 1
    assert str(parameters) == "?c=0"


def test_prebuilt_parameter_with_none_value_is_not_rendered() -> None:
    parameters = QueryParameters()
    parameters.add(QueryParameter("a", None))
    assert len(parameters) == 1
    assert str(parameters) == ""


def test_remove_and_contains() -> None:
    parameters = QueryParameters([("tag", "x"), ("tag", "y"), ("page", 1)])
    assert parameters.contains("tag")
    assert parameters.contains("tag", "y")
    assert not parameters.contains("tag", "z")
    assert "page" in parameters
    assert parameters["tag"] == "x"

    parameters.remove("tag")
    assert not parameters.contains("tag")
    assert str(parameters) == "?page=1"


def test_item_assignment_appends() -> None:
    parameters = QueryParameters()
    parameters["tag"] = "x"
    parameters["tag"] = "y"
    assert str(parameters) == "?tag=x&tag=y"


def test_rendering_encodes_names_and_values() -> None:
    parameters = QueryParameters([("sort by", "a b&c"), ("flag", True), ("list", ["x y", "z,w"])])
    assert str(parameters) == "?sort+by=a+b%26c&flag=true&list={x+y,z%2Cw}"


def test_rendering_bytes_as_text() -> None:
    parameters = QueryParameters([("token", b"a b"), ("tags", [b"x", "y"])])
    assert str(parameters) == "?token=a+b&tags={x,y}"


def test_rendering_dates() -> None:
    parameters = QueryParameters(
        [
            ("at", datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)),
            ("on", date(2024, 1, 2)),
        ]
    )
    assert str(parameters) == "?at=2024-01-02T03:04:05.000000%2B00:00&on=2024-01-02"


def test_rendering_does_not_mutate_parameters() -> None:
    parameters = QueryParameters([("a", 1), ("b", [1, 2])])
    first = str(parameters)
    assert str(parameters) == first
    assert parameters.parameters == (QueryParameter("a", 1), QueryParameter("b", [1, 2]))


def test_non_empty_query_has_no_trailing_separator() -> None:
    rendered = str(QueryParameters([("a", 1), ("b", 2)]))
    assert rendered.startswith("?")
    assert not rendered.endswith("&")


def test_rest_path_helpers() -> None:
    assert rest_path("api", "users", 42) == "api/users/42"
    assert rest_path_query(QueryParameters.of("page", 2), "api", "users") == "api/users?page=2"
    assert rest_path_query("page=2", "api", "users") == "api/users?page=2"
    assert rest_path_query("?page=2", "api", "users") == "api/users?page=2"
    assert rest_path_query(QueryParameters(), "api", "users") == "api/users"
    assert rest_path_query(None, "api") == "api"
