"""Classical and prototypal inheritance over records.

Records produced here find their delegate again through the delegate table:
each one inherits (or owns) a ``protoRef`` field, and the table maps that
reference back to the delegate record.
"""

import dataclasses
import logging
import random
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .config import EngineConfig, RefPolicy
from .errors import IdentifierCollision, InvalidArgument
from .ids import IdentifierGenerator, wall_clock_millis
from .table import DelegateTable
from .values import (
    IS_CLASS_CHAIN,
    PROTO_REF,
    ROOT,
    UNDEFINED,
    Record,
    RecordMethod,
    Root,
    is_record_shaped,
    own_fields_of,
)

logger = logging.getLogger(__name__)

RecordLike = Union[Record, Mapping[str, Any]]


class ChainKind(Enum):
    """How classical_create links a new record to a delegate."""

    NESTED = "nested"  # reuse the parent's delegate through an intermediate link
    FRESH = "fresh"  # synthesize a new standard prototype


def is_class_chain(record: Record) -> bool:
    """True if ``record`` inherits the class-chain marker without owning it."""
    return not record.has(IS_CLASS_CHAIN) and record.get(IS_CLASS_CHAIN) is True


class InheritanceEngine:
    """Owns an identifier generator and a delegate table and builds records with them."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        *,
        table: Optional[DelegateTable] = None,
        clock: Callable[[], int] = wall_clock_millis,
        rng: Optional[random.Random] = None,
        **overrides: Any,
    ):
        """Create a new engine.

        Args:
            config: Engine configuration (defaults to EngineConfig())
            table: Delegate table to share with other engines
            clock: Millisecond clock used for identifiers
            rng: Random source for identifier suffixes
            **overrides: EngineConfig fields to replace
        """
        config = config or EngineConfig()
        known = {f.name for f in dataclasses.fields(EngineConfig)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise InvalidArgument(f"unknown EngineConfig fields: {', '.join(unknown)}")
        if overrides:
            config = dataclasses.replace(config, **overrides)
        self.config = config
        self.ids = IdentifierGenerator(config, clock=clock, rng=rng)
        self.table = table if table is not None else DelegateTable()

    def next_id(self) -> str:
        """Return a new identifier."""
        return self.ids.next_id()

    def reset(self) -> None:
        """Forget every registered delegate.

        Records built before the reset report ROOT from get_delegate afterwards.
        """
        self.table.reset()

    def get_delegate(self, record: Any) -> Union[Record, Root]:
        """The delegate registered under the record's protoRef, or ROOT.

        A standard prototype is registered under its own protoRef; looking it
        up yields the delegate attached to it instead of the prototype itself.
        """
        if not isinstance(record, Record):
            return ROOT
        ref = record.get(PROTO_REF)
        if not isinstance(ref, str):
            return ROOT
        found = self.table.lookup(ref)
        if found is record:
            return record.delegate
        return found

    def chain_kind(self, parent: RecordLike, copy_delegate: Any = True) -> ChainKind:
        """Decide whether a record cloned from ``parent`` shares its delegate.

        Only an explicit ``False`` opts out; None and other values chain.
        """
        if (
            copy_delegate is not False
            and isinstance(parent, Record)
            and self.get_delegate(parent) is not ROOT
            and is_class_chain(parent)
        ):
            return ChainKind.NESTED
        return ChainKind.FRESH

    def classical_create(
        self,
        parent: RecordLike,
        child_spec: Optional[RecordLike] = None,
        copy_delegate: Any = True,
    ) -> Record:
        """Clone ``parent``'s own fields, overlaid with ``child_spec``'s, into a new record.

        When ``parent`` came from classical_create and ``copy_delegate`` is
        not ``False``, the new record shares the parent's delegate; otherwise
        it gets a fresh standard prototype carrying ``getDelegate`` and
        ``create``. A ``protoRef`` among the copied fields is dropped, since
        the engine supplies the new record's reference.
        """
        if not is_record_shaped(parent):
            raise InvalidArgument(f"parent must be a Record or mapping, not {type(parent).__name__}")
        if child_spec is not None and not is_record_shaped(child_spec):
            raise InvalidArgument(
                f"child_spec must be a Record or mapping, not {type(child_spec).__name__}"
            )
        fields = own_fields_of(parent)
        if child_spec is not None:
            fields.update(own_fields_of(child_spec))
        fields.pop(PROTO_REF, None)

        kind = self.chain_kind(parent, copy_delegate)
        logger.debug("classical_create: %s chain", kind.value)
        return self._construct(fields, kind, parent)

    def prototypal_bind(self, delegate: Record, child_spec: RecordLike) -> Record:
        """Create a record from ``child_spec``'s own fields whose delegate is ``delegate``.

        A delegate that came from classical_create is reached through an
        intermediate link record; any other delegate is attached directly.
        A ``protoRef`` in ``child_spec`` is not copied (under RefPolicy.CALLER
        it picks the table key instead); a directly attached result owns the
        reference its delegate was registered under.
        """
        if not isinstance(delegate, Record):
            raise InvalidArgument(f"delegate must be a Record, not {type(delegate).__name__}")
        if not is_record_shaped(child_spec):
            raise InvalidArgument(
                f"child_spec must be a Record or mapping, not {type(child_spec).__name__}"
            )

        fields = own_fields_of(child_spec)
        supplied = fields.pop(PROTO_REF, UNDEFINED)

        if is_class_chain(delegate):
            logger.debug("prototypal_bind: nesting under class-chain delegate")
            return Record(fields, delegate=self._link(delegate))

        fields[PROTO_REF] = self._bind_plain(delegate, supplied)
        return Record(fields, delegate=delegate)

    def _construct(self, fields: Dict[str, Any], kind: ChainKind, parent: RecordLike) -> Record:
        if kind is ChainKind.NESTED:
            return Record(fields, delegate=self._link(self.get_delegate(parent)))
        return Record(fields, delegate=self._standard_prototype())

    def _standard_prototype(self) -> Record:
        proto = Record(
            {
                IS_CLASS_CHAIN: True,
                "getDelegate": RecordMethod(self.get_delegate, "getDelegate"),
                "create": RecordMethod(self.classical_create, "create"),
            }
        )
        proto.set(PROTO_REF, self._register_fresh(proto))
        return proto

    def _link(self, delegate: Record) -> Record:
        """Intermediate record whose protoRef resolves to ``delegate``."""
        return Record({PROTO_REF: self._register_fresh(delegate)}, delegate=delegate)

    def _bind_plain(self, delegate: Record, supplied: Any) -> str:
        if self.config.ref_policy is RefPolicy.CALLER and supplied is not UNDEFINED:
            if not isinstance(supplied, str):
                raise InvalidArgument(f"protoRef must be a string, not {type(supplied).__name__}")
            self.table.register(supplied, delegate, replace_same=True)
            return supplied
        if supplied is not UNDEFINED:
            logger.debug("discarding caller-supplied protoRef %r", supplied)
        return self._register_fresh(delegate)

    def _register_fresh(self, delegate: Record) -> str:
        attempts = self.config.max_id_retries + 1
        for attempt in range(1, attempts + 1):
            ref = self.ids.next_id()
            try:
                self.table.register(ref, delegate)
            except IdentifierCollision:
                logger.warning("identifier %s already bound (attempt %d of %d)", ref, attempt, attempts)
                continue
            return ref
        raise IdentifierCollision(f"no free identifier after {attempts} attempts", ref)


# Process-wide engine behind the module-level functions
DEFAULT_ENGINE = InheritanceEngine()


def next_id() -> str:
    """Return a new identifier from the default engine."""
    return DEFAULT_ENGINE.next_id()


def classical_create(
    parent: RecordLike,
    child_spec: Optional[RecordLike] = None,
    copy_delegate: Any = True,
) -> Record:
    """classical_create on the default engine."""
    return DEFAULT_ENGINE.classical_create(parent, child_spec, copy_delegate)


def prototypal_bind(delegate: Record, child_spec: RecordLike) -> Record:
    """prototypal_bind on the default engine."""
    return DEFAULT_ENGINE.prototypal_bind(delegate, child_spec)


def get_delegate(record: Any) -> Union[Record, Root]:
    """get_delegate on the default engine."""
    return DEFAULT_ENGINE.get_delegate(record)


def reset() -> None:
    """Clear the default engine's delegate table."""
    DEFAULT_ENGINE.reset()
