import json
from dataclasses import field, fields
from functools import lru_cache
from typing import Any, Dict, Union, get_args, get_origin, get_type_hints

from ..exceptions import SerializationError


def to_camel(name: str) -> str:
    """snake_case attribute name -> camelCase JSON key."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def renamed(key: str, default=None):
    """Field whose JSON key does not follow the camelCase rule."""
    return field(default=default, metadata={"json": key})


def local(default=None, default_factory=None):
    """Field that lives on the Python object only and is never sent or read."""
    metadata = {"skip": True}
    if default_factory is not None:
        return field(default_factory=default_factory, repr=False, compare=False, metadata=metadata)
    return field(default=default, repr=False, compare=False, metadata=metadata)


def json_key(f) -> str:
    return f.metadata.get("json") or to_camel(f.name)


def validate_choice(value, choices, field_name: str) -> None:
    if value is not None and value not in choices:
        raise ValueError(f"Invalid {field_name}: {value}. Must be one of: {', '.join(choices)}")


@lru_cache(maxsize=None)
def _type_hints(cls) -> Dict[str, Any]:
    return get_type_hints(cls)


def _encode(value):
    if isinstance(value, Resource):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    if isinstance(value, dict):
        return {key: _encode(item) for key, item in value.items()}
    return value


def _decode(tp, value):
    if value is None:
        return None

    origin = get_origin(tp)
    if origin is Union:
        args = [arg for arg in get_args(tp) if arg is not type(None)]
        return _decode(args[0], value) if args else value
    if origin is list:
        if not isinstance(value, list):
            raise SerializationError(f"expected a JSON array, got {type(value).__name__}")
        args = get_args(tp)
        return [_decode(args[0] if args else Any, item) for item in value]
    if origin is dict:
        if not isinstance(value, dict):
            raise SerializationError(f"expected a JSON object, got {type(value).__name__}")
        args = get_args(tp)
        return {key: _decode(args[1] if args else Any, item) for key, item in value.items()}
    if isinstance(tp, type) and issubclass(tp, Resource):
        return tp.from_dict(value)
    if tp is bool and not isinstance(value, bool):
        raise SerializationError(f"expected a boolean, got {value!r}")
    if tp is int and (isinstance(value, bool) or not isinstance(value, int)):
        raise SerializationError(f"expected an integer, got {value!r}")
    if tp is str and not isinstance(value, str):
        raise SerializationError(f"expected a string, got {value!r}")
    return value


class Resource:
    """
    Mixin for dataclasses that mirror a Calendar API JSON resource.

    Attribute names are snake_case and map to camelCase keys unless the field
    was declared with `renamed`. Fields holding None are left out of the JSON
    so a resource with only a few fields set describes a partial update.
    Fields declared with `local` never appear on the wire.
    """

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        for f in fields(self):
            if f.metadata.get("skip"):
                continue
            value = getattr(self, f.name)
            if value is None:
                continue
            result[json_key(f)] = _encode(value)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        if not isinstance(data, dict):
            raise SerializationError(f"{cls.__name__} expects a JSON object, got {type(data).__name__}")

        hints = _type_hints(cls)
        kwargs = {}
        for f in fields(cls):
            if f.metadata.get("skip"):
                continue
            key = json_key(f)
            if key in data:
                kwargs[f.name] = _decode(hints[f.name], data[key])

        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Invalid {cls.__name__} payload: {e}") from e

    def to_json(self) -> bytes:
        try:
            return json.dumps(self.to_dict()).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Cannot serialize {type(self).__name__}: {e}") from e

    @classmethod
    def from_json(cls, payload: Union[bytes, str]):
        try:
            data = json.loads(payload)
        except ValueError as e:
            raise SerializationError(f"Invalid JSON for {cls.__name__}: {e}") from e
        return cls.from_dict(data)
