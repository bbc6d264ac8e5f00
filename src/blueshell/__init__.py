"""
blueshell - classical and prototypal inheritance for records

Clone one record's fields onto another, or bind one record as the delegate
of another, with delegates kept retrievable through an identifier-keyed
side table.
"""

__version__ = "2.1.0"

from .config import EngineConfig, RefPolicy
from .engine import (
    DEFAULT_ENGINE,
    ChainKind,
    InheritanceEngine,
    classical_create,
    get_delegate,
    next_id,
    prototypal_bind,
    reset,
)
from .errors import BlueshellError, IdentifierCollision, InvalidArgument
from .ids import IdentifierGenerator
from .maps import create_map, map_count, map_remove, map_set
from .table import DelegateTable
from .values import ROOT, UNDEFINED, Record, RecordMethod

__all__ = [
    "BlueshellError",
    "ChainKind",
    "DEFAULT_ENGINE",
    "DelegateTable",
    "EngineConfig",
    "IdentifierCollision",
    "IdentifierGenerator",
    "InheritanceEngine",
    "InvalidArgument",
    "RefPolicy",
    "Record",
    "RecordMethod",
    "ROOT",
    "UNDEFINED",
    "classical_create",
    "create_map",
    "get_delegate",
    "map_count",
    "map_remove",
    "map_set",
    "next_id",
    "prototypal_bind",
    "reset",
]
