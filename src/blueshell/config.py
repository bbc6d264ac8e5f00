"""Engine configuration."""

import string
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import InvalidArgument


class RefPolicy(Enum):
    """How prototypal_bind picks the table key for a plain delegate."""

    FRESH = "fresh"  # always mint an identifier
    CALLER = "caller"  # honour a protoRef supplied in the child spec


ALPHANUMERIC = string.digits + string.ascii_uppercase + string.ascii_lowercase


@dataclass(frozen=True)
class EngineConfig:
    """Tunables for an InheritanceEngine and its identifier generator.

    Args:
        counter_floor: First counter value, and the value it wraps back to
        counter_ceiling: Last counter value before wrapping
        suffix_length: Length of the random suffix
        alphabet: Characters the suffix is drawn from
        max_id_retries: Regenerations attempted when a fresh id is taken
        ref_policy: Key selection for prototypal_bind on plain delegates
        seed: Seed for the suffix random source (None for OS entropy)
    """

    counter_floor: int = 1_000_000
    counter_ceiling: int = 9_999_999
    suffix_length: int = 25
    alphabet: str = ALPHANUMERIC
    max_id_retries: int = 3
    ref_policy: RefPolicy = RefPolicy.FRESH
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.counter_floor < 0 or self.counter_ceiling < self.counter_floor:
            raise InvalidArgument(
                f"counter range [{self.counter_floor}, {self.counter_ceiling}] is empty"
            )
        if self.suffix_length < 0:
            raise InvalidArgument("suffix_length must not be negative")
        if not self.alphabet:
            raise InvalidArgument("alphabet must not be empty")
        if self.max_id_retries < 0:
            raise InvalidArgument("max_id_retries must not be negative")
        if not isinstance(self.ref_policy, RefPolicy):
            raise InvalidArgument(f"unknown ref_policy {self.ref_policy!r}")
