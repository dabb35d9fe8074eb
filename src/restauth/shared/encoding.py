"""
Query string and form body encoding.

Keys follow the bracket convention understood by Rails and Rack based servers:

    {"include": ["a", "b"], "page": {"size": 10}}  ->  include[]=a&include[]=b&page[size]=10

`None` values are left out of both encodings entirely.
"""

import io
from collections.abc import Callable, Iterator, Mapping
from typing import Any

QueryParams = Mapping[str, Any]
RequestData = Mapping[str, Any]


def _is_file(value: Any) -> bool:
    return isinstance(value, bytes | bytearray | io.BufferedIOBase | io.RawIOBase)


def _is_stream_or_bytes(value: Any) -> bool:
    return _is_file(value) or isinstance(value, io.TextIOBase)


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flatten(
    key: str,
    value: Any,
    is_leaf: Callable[[Any], bool] = lambda _: False,
) -> Iterator[tuple[str, Any]]:
    if value is None:
        return
    if is_leaf(value):
        yield key, value
    elif isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            yield from _flatten(f"{key}[{sub_key}]", sub_value, is_leaf)
    elif isinstance(value, list | tuple | set | frozenset):
        for item in value:
            yield from _flatten(f"{key}[]", item, is_leaf)
    else:
        yield key, value


def encode_query_params(params: QueryParams | None) -> list[tuple[str, str]]:
    """Flatten query parameters into the (key, value) pairs httpx sends in order."""
    if not params:
        return []
    return [(key, _stringify(value)) for name, raw in params.items() for key, value in _flatten(name, raw)]


def encode_form_data(data: RequestData | None) -> list[tuple[str, Any]]:
    """
    Build the `files` argument for a multipart/form-data request.

    Plain values become form fields without a filename so that the request is always
    multipart, even when no file is attached. Bytes and binary file objects are sent
    as file parts. Text streams are rejected, since httpx can only upload bytes.
    """
    if not data:
        return []

    parts: list[tuple[str, Any]] = []
    for name, raw in data.items():
        for key, value in _flatten(name, raw, is_leaf=_is_stream_or_bytes):
            if isinstance(value, io.TextIOBase):
                raise TypeError(f"Form field {key!r} is a text stream, open the file in binary mode instead")
            if _is_file(value):
                parts.append((key, bytes(value) if isinstance(value, bytearray) else value))
            else:
                parts.append((key, (None, _stringify(value))))
    return parts
