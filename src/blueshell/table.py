"""The delegate table: identifier -> delegate record."""

import logging
import threading
from typing import Dict, Iterator, Union

from .errors import IdentifierCollision
from .values import ROOT, Record, Root

logger = logging.getLogger(__name__)


class DelegateTable:
    """Insert-only map from identifiers to delegate records.

    Entries are never evicted on their own; long-running hosts call reset().
    """

    def __init__(self):
        self._refs: Dict[str, Record] = {}
        self._lock = threading.Lock()

    def register(self, ref: str, delegate: Record, replace_same: bool = False) -> None:
        """Bind ``ref`` to ``delegate``.

        Raises IdentifierCollision if ``ref`` is already bound. With
        ``replace_same`` a repeat registration of the same delegate is
        accepted.
        """
        with self._lock:
            existing = self._refs.get(ref)
            if existing is not None:
                if replace_same and existing is delegate:
                    return
                raise IdentifierCollision(f"reference {ref!r} is already bound", ref)
            self._refs[ref] = delegate
        logger.debug("registered delegate %r under %s", delegate, ref)

    def lookup(self, ref: str) -> Union[Record, Root]:
        """The delegate bound to ``ref``, or ROOT."""
        return self._refs.get(ref, ROOT)

    def reset(self) -> None:
        """Drop every entry."""
        with self._lock:
            dropped = len(self._refs)
            self._refs.clear()
        logger.debug("delegate table reset, %d entries dropped", dropped)

    def __contains__(self, ref: object) -> bool:
        return ref in self._refs

    def __len__(self) -> int:
        return len(self._refs)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._refs))
