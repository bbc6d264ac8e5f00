"""Record values and sentinels."""

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Union

from .errors import InvalidArgument


class Undefined:
    """Result of looking up a field that no record in the chain defines (singleton)."""

    _instance: Optional["Undefined"] = None

    def __new__(cls) -> "Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


class Root:
    """The "no delegate" value at the top of every chain (singleton)."""

    _instance: Optional["Root"] = None

    def __new__(cls) -> "Root":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ROOT"

    def __bool__(self) -> bool:
        return False


# Singleton instances
UNDEFINED = Undefined()
ROOT = Root()

# Field names managed by the engine
PROTO_REF = "protoRef"
IS_CLASS_CHAIN = "isClassChain"


class RecordMethod:
    """A field value that receives the record it was invoked on as its first argument."""

    def __init__(self, fn: Callable[..., Any], name: str = ""):
        self._fn = fn
        self.name = name or getattr(fn, "__name__", "")

    def __call__(self, this: "Record", *args: Any) -> Any:
        return self._fn(this, *args)

    def __repr__(self) -> str:
        return f"[RecordMethod: {self.name}]" if self.name else "[RecordMethod]"


class Record:
    """A string-keyed field mapping with a single delegate link.

    Lookups that miss the record's own fields continue into its delegate,
    ending at ROOT.
    """

    def __init__(
        self,
        fields: Optional[Union[Mapping, "Record"]] = None,
        delegate: Union["Record", Root] = ROOT,
    ):
        self._fields: Dict[str, Any] = dict(own_fields_of(fields)) if fields is not None else {}
        self._delegate: Union["Record", Root] = ROOT
        self.delegate = delegate

    @property
    def delegate(self) -> Union["Record", Root]:
        return self._delegate

    @delegate.setter
    def delegate(self, value: Union["Record", Root]) -> None:
        if value is not ROOT and not isinstance(value, Record):
            raise InvalidArgument(f"delegate must be a Record or ROOT, not {type(value).__name__}")
        node = value
        while isinstance(node, Record):
            if node is self:
                raise InvalidArgument("delegate chain would contain a cycle")
            node = node._delegate
        self._delegate = value

    def get(self, key: str) -> Any:
        """Get a field value, consulting the delegate chain."""
        if key in self._fields:
            return self._fields[key]
        if self._delegate is not ROOT:
            return self._delegate.get(key)
        return UNDEFINED

    def set(self, key: str, value: Any) -> None:
        """Set an own field."""
        if not isinstance(key, str):
            raise InvalidArgument(f"field names must be strings, not {type(key).__name__}")
        self._fields[key] = value

    def has(self, key: str) -> bool:
        """Check if the record has an own field."""
        return key in self._fields

    def inherits(self, key: str) -> bool:
        """Check if a field is reachable only through the delegate chain."""
        return key not in self._fields and self.get(key) is not UNDEFINED

    def delete(self, key: str) -> bool:
        """Delete an own field."""
        if key in self._fields:
            del self._fields[key]
            return True
        return False

    def keys(self) -> List[str]:
        """Get own field names."""
        return list(self._fields.keys())

    def own_fields(self) -> Dict[str, Any]:
        """Shallow copy of the own fields."""
        return dict(self._fields)

    def invoke(self, key: str, *args: Any) -> Any:
        """Look a callable field up through the chain and call it.

        RecordMethod values are passed this record as their first argument.
        """
        fn = self.get(key)
        if isinstance(fn, RecordMethod):
            return fn(self, *args)
        if callable(fn):
            return fn(*args)
        raise InvalidArgument(f"field {key!r} is not callable")

    def __repr__(self) -> str:
        return f"Record({self._fields})"


def is_record_shaped(value: Any) -> bool:
    """True for values whose own fields can be read: records and mappings."""
    return isinstance(value, (Record, Mapping))


def own_fields_of(value: Any) -> Dict[str, Any]:
    """Own fields of a record or mapping as a new dict."""
    if isinstance(value, Record):
        return value.own_fields()
    if isinstance(value, Mapping):
        fields = dict(value)
        for key in fields:
            if not isinstance(key, str):
                raise InvalidArgument(f"field names must be strings, not {type(key).__name__}")
        return fields
    raise InvalidArgument(f"expected a Record or mapping, not {type(value).__name__}")
