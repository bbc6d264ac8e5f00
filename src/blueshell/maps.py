"""Counted maps: records whose delegate tracks how many own fields they hold.

A map is built with prototypal_bind over a small meta record carrying
``count``. Go through map_set and map_remove to keep the count in step;
plain Record.set and Record.delete bypass it.
"""

from typing import Any, Optional

from .engine import DEFAULT_ENGINE, InheritanceEngine, RecordLike
from .errors import InvalidArgument
from .values import PROTO_REF, Record, own_fields_of

COUNT = "count"


def create_map(spec: Optional[RecordLike] = None, engine: Optional[InheritanceEngine] = None) -> Record:
    """Create a counted map holding ``spec``'s own fields."""
    engine = engine or DEFAULT_ENGINE
    fields = own_fields_of(spec) if spec is not None else {}
    fields.pop(PROTO_REF, None)
    meta = Record({COUNT: len(fields)})
    return engine.prototypal_bind(meta, fields)


def _meta(obj: Any, engine: InheritanceEngine) -> Record:
    meta = engine.get_delegate(obj)
    if not isinstance(meta, Record) or not isinstance(meta.get(COUNT), int):
        raise InvalidArgument(f"{obj!r} is not a counted map")
    return meta


def _check_key(key: Any) -> None:
    if not isinstance(key, str):
        raise InvalidArgument(f"field names must be strings, not {type(key).__name__}")
    if key == PROTO_REF:
        raise InvalidArgument(f"{PROTO_REF!r} is managed by the engine")


def map_set(obj: Record, key: str, value: Any, engine: Optional[InheritanceEngine] = None) -> None:
    """Add or replace a field, counting it if it is new."""
    meta = _meta(obj, engine or DEFAULT_ENGINE)
    _check_key(key)
    if not obj.has(key):
        meta.set(COUNT, meta.get(COUNT) + 1)
    obj.set(key, value)


def map_remove(obj: Record, key: str, engine: Optional[InheritanceEngine] = None) -> bool:
    """Remove a field; returns False if the map did not hold it."""
    meta = _meta(obj, engine or DEFAULT_ENGINE)
    _check_key(key)
    if not obj.delete(key):
        return False
    meta.set(COUNT, meta.get(COUNT) - 1)
    return True


def map_count(obj: Record, engine: Optional[InheritanceEngine] = None) -> int:
    """Number of fields the map holds."""
    return _meta(obj, engine or DEFAULT_ENGINE).get(COUNT)
