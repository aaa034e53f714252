"""Query strings and REST paths."""

from __future__ import annotations

import dataclasses
from datetime import date, datetime
from typing import Any, Iterable, Iterator, NamedTuple
from urllib.parse import quote_plus

from pydantic import BaseModel


_ANY = object()


class QueryParameter(NamedTuple):
    """Single ``name=value`` pair of a query string."""

    name: str
    value: Any


def _encode(value: str, safe: str = "") -> str:
    return quote_plus(value, safe=safe)


def _render_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return _encode(value.isoformat(timespec="microseconds"), safe=":")
    if isinstance(value, date):
        return _encode(value.isoformat())
    if isinstance(value, (bytes, bytearray)):
        return _encode(bytes(value).decode("utf-8"))
    return _encode(str(value))


def _render_value(value: Any) -> str:
    if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Iterable):
        return _render_scalar(value)
    return "{" + ",".join(_render_scalar(item) for item in value) + "}"


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _model_items(model: BaseModel) -> Iterator[tuple[str, Any]]:
    for field_name, field in type(model).model_fields.items():
        key = field.serialization_alias or field.alias or field_name.lower()
        yield key, getattr(model, field_name)


def _dataclass_items(instance: Any) -> Iterator[tuple[str, Any]]:
    for field in dataclasses.fields(instance):
        key = field.metadata.get("name") or field.name.lower()
        yield key, getattr(instance, field.name)


def _source_items(source: Any) -> Iterable[tuple[str, Any]]:
    query_items = getattr(source, "query_items", None)
    if callable(query_items):
        return query_items()
    if isinstance(source, BaseModel):
        return _model_items(source)
    if dataclasses.is_dataclass(source) and not isinstance(source, type):
        return _dataclass_items(source)
    if hasattr(source, "items"):
        return ((str(key), value) for key, value in source.items())
    raise TypeError(f"Cannot build query parameters from {type(source).__name__}")


class QueryParameters:
    """Ordered collection of query parameters.

    Names may repeat. ``str()`` renders the collection as a query string
    including the leading ``?``, or an empty string when there is nothing to
    render.
    """

    def __init__(self, parameters: Iterable[QueryParameter | tuple[str, Any]] = ()) -> None:
        self._parameters: list[QueryParameter] = [QueryParameter(*parameter) for parameter in parameters]

    @classmethod
    def of(cls, name: str, value: Any) -> "QueryParameters":
        """Create parameters holding a single pair."""
        return cls([QueryParameter(name, value)])

    @classmethod
    def from_value(cls, source: Any, expand_arrays: bool = True) -> "QueryParameters":
        """Flatten a structured value into query parameters.

        ``source`` may provide ``query_items()`` yielding ``(name, value)``
        pairs, or be a pydantic model, a dataclass or a mapping. Model fields
        are named by their alias, dataclass fields by ``metadata["name"]``,
        falling back to the lower-cased attribute name. ``None`` values are
        skipped. With ``expand_arrays`` every element of a list or tuple is
        added as its own pair under the same name, otherwise the sequence is
        kept as one value and rendered as ``{a,b,c}``.
        """
        parameters = cls()
        if source is None:
            return parameters

        for name, value in _source_items(source):
            if value is None:
                continue
            if expand_arrays and _is_array(value):
                for item in value:
                    parameters.add(name, item)
            else:
                parameters.add(name, value)
        return parameters

    @property
    def parameters(self) -> tuple[QueryParameter, ...]:
        return tuple(self._parameters)

    def __iter__(self) -> Iterator[QueryParameter]:
        return iter(tuple(self._parameters))

    def __len__(self) -> int:
        return len(self._parameters)

    def __getitem__(self, name: str) -> Any:
        for parameter in self._parameters:
            if parameter.name == name:
                return parameter.value
        return None

    def __setitem__(self, name: str, value: Any) -> None:
        self.add(name, value)

    def add(self, name: str | QueryParameter, value: Any = None) -> None:
        """Append a parameter. ``None`` and empty string values are ignored.

        A prebuilt ``QueryParameter`` is appended as given.
        """
        if isinstance(name, QueryParameter):
            self._parameters.append(name)
            return
        if value is None or value == "":
            return
        self._parameters.append(QueryParameter(name, value))

    def remove(self, name: str) -> None:
        self._parameters = [parameter for parameter in self._parameters if parameter.name != name]

    def contains(self, name: str, value: Any = _ANY) -> bool:
        if value is not _ANY:
            return any(p.name == name and p.value == value for p in self._parameters)
        return any(p.name == name for p in self._parameters)

    def __contains__(self, name: object) -> bool:
        return any(p.name == name for p in self._parameters)

    def __str__(self) -> str:
        pairs = [
            f"{_encode(str(parameter.name))}={_render_value(parameter.value)}"
            for parameter in self._parameters
            if parameter.value is not None
        ]
        if not pairs:
            return ""
        return "?" + "&".join(pairs)

    def __repr__(self) -> str:
        return f"QueryParameters({self._parameters!r})"


def rest_path(*elements: object) -> str:
    """Join path elements with ``/``."""
    return "/".join(str(element) for element in elements)


def rest_path_query(query: QueryParameters | str | None, *elements: object) -> str:
    """Join path elements and append a query string."""
    querystring = str(query) if query is not None else ""
    path = rest_path(*elements)
    if not querystring:
        return path
    if not querystring.startswith("?"):
        return f"{path}?{querystring}"
    return f"{path}{querystring}"
