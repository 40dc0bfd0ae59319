"""Store delta models.

A store delta records one change to a store key: the operation, its ordinal
within the block, and the raw old and new values as persisted (ASCII decimal
text, empty meaning zero). Typed deltas decode those values into scalars so
handlers can work with amounts directly:

    deltas = Deltas.from_store_deltas(DeltaBigDecimal, raw_deltas)
    for delta in deltas.key_filter("pool:"):
        change = delta.new_value - delta.old_value

Store contents are trusted, so corrupt value bytes are fatal (InvalidStoreBytes)
rather than a validation error.
"""

import inspect
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Sequence
from enum import IntEnum
from typing import Generic, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field

from substreams.models.types import BigDecimalValue, BigIntValue
from substreams.scalar import BigDecimal, BigInt

logger = structlog.get_logger()


class Operation(IntEnum):
    """Kind of change applied to a store key."""

    UNSET = 0
    CREATE = 1
    UPDATE = 2
    DELETE = 3


class StoreDelta(BaseModel):
    """Raw change to a single store key."""

    model_config = ConfigDict(frozen=True)

    operation: Operation = Operation.UNSET
    ordinal: int = Field(default=0, ge=0)
    key: str
    old_value: bytes = b""
    new_value: bytes = b""


class Delta(BaseModel, ABC):
    """Fields shared by every typed delta.

    Subclasses choose the scalar type of old_value/new_value and decode the
    raw store bytes into it.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    operation: Operation
    ordinal: int = Field(ge=0)
    key: str

    @classmethod
    @abstractmethod
    def from_store_delta(cls, delta: StoreDelta) -> "Delta":
        """Decode a raw store delta into this delta type."""


class DeltaBigInt(Delta):
    """Store delta with BigInt values."""

    old_value: BigIntValue
    new_value: BigIntValue

    @classmethod
    def from_store_delta(cls, delta: StoreDelta) -> "DeltaBigInt":
        return cls(
            operation=delta.operation,
            ordinal=delta.ordinal,
            key=delta.key,
            old_value=BigInt.from_store_bytes(delta.old_value),
            new_value=BigInt.from_store_bytes(delta.new_value),
        )


class DeltaBigDecimal(Delta):
    """Store delta with BigDecimal values."""

    old_value: BigDecimalValue
    new_value: BigDecimalValue

    @classmethod
    def from_store_delta(cls, delta: StoreDelta) -> "DeltaBigDecimal":
        return cls(
            operation=delta.operation,
            ordinal=delta.ordinal,
            key=delta.key,
            old_value=BigDecimal.from_store_bytes(delta.old_value),
            new_value=BigDecimal.from_store_bytes(delta.new_value),
        )


DeltaT = TypeVar("DeltaT", bound=Delta)


class Deltas(Generic[DeltaT]):
    """Ordered, typed deltas of one store."""

    def __init__(self, deltas: Sequence[DeltaT]) -> None:
        self.deltas = list(deltas)

    @classmethod
    def from_store_deltas(cls, delta_type: type[DeltaT], store_deltas: Iterable[StoreDelta]) -> "Deltas[DeltaT]":
        """Decode raw store deltas, preserving their order.

        Raises:
            TypeError: If delta_type is abstract
            InvalidStoreBytes: If any old/new value is corrupt (fatal)
        """
        if inspect.isabstract(delta_type):
            raise TypeError(f"Cannot decode store deltas into abstract type {delta_type.__name__}")
        deltas = [delta_type.from_store_delta(delta) for delta in store_deltas]
        logger.debug("store_deltas_decoded", delta_type=delta_type.__name__, count=len(deltas))
        return cls(deltas)  # type: ignore[arg-type]

    def key_filter(self, prefix: str) -> "Deltas[DeltaT]":
        """Deltas whose key starts with prefix."""
        return Deltas([delta for delta in self.deltas if delta.key.startswith(prefix)])

    def __iter__(self) -> Iterator[DeltaT]:
        return iter(self.deltas)

    def __len__(self) -> int:
        return len(self.deltas)

    def __getitem__(self, index: int) -> DeltaT:
        return self.deltas[index]
