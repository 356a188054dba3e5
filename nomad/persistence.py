"""
Persistence indirection for nomad records.

A record does not know how to store itself. Its owner registers a save
strategy and, optionally, a destroy strategy: plain callables that receive
the record. ``save()`` runs the save path inside the class-level
``transaction`` wrapper, which subclasses may replace (to batch several
saves, for instance). Raising TransactionAborted inside the wrapper abandons
the transaction without surfacing an error.

Usage:
    saved = []
    person = Person(first_name="Joe")
    person.to_save(saved.append)
    person.save()       # -> True, saved == [person]
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Optional, Protocol, TypeVar, runtime_checkable

from nomad.errors import NoStrategyError, TransactionAborted
from nomad.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")


class RecordState(str, Enum):
    """Where a record is in its save/destroy lifecycle."""

    UNSAVED = "unsaved"
    SAVING = "saving"
    SAVED = "saved"
    FAILED = "failed"
    DESTROYED = "destroyed"


@runtime_checkable
class PersistenceStrategy(Protocol):
    """
    Callable a record hands itself to when it is saved or destroyed.

    The return value is ignored; raise to signal failure.
    """

    def __call__(self, record: Any) -> Any:
        ...


class Persistable:
    """
    Mixin holding one save strategy, one destroy strategy and the lifecycle state.
    """

    _save_strategy: Optional[PersistenceStrategy] = None
    _destroy_strategy: Optional[PersistenceStrategy] = None
    _state: RecordState = RecordState.UNSAVED

    def to_save(self, strategy: PersistenceStrategy) -> PersistenceStrategy:
        """
        Tell this record how to save itself.

        Returns the strategy, so it can be used as a decorator:

            @person.to_save
            def store(record): ...
        """
        object.__setattr__(self, "_save_strategy", strategy)
        return strategy

    def to_destroy(self, strategy: PersistenceStrategy) -> PersistenceStrategy:
        """Tell this record how to destroy itself."""
        object.__setattr__(self, "_destroy_strategy", strategy)
        return strategy

    @property
    def state(self) -> RecordState:
        return self._state

    def _set_state(self, state: RecordState) -> None:
        object.__setattr__(self, "_state", state)

    @classmethod
    def transaction(cls, block: Callable[[], T]) -> Optional[T]:
        """
        Run ``block`` and return its result.

        A TransactionAborted raised by the block is swallowed and None is
        returned. Override to provide custom transaction semantics; overrides
        must swallow TransactionAborted the same way.
        """
        try:
            return block()
        except TransactionAborted as exc:
            log.info(
                "Transaction rolled back",
                extra={"record_type": cls.__name__, "reason": str(exc) or None},
            )
            return None

    def persist(self) -> Any:
        """
        Persist the record.

        The default calls the strategy registered with ``to_save``. Override
        if you don't want to use ``to_save``.
        """
        if self._save_strategy is None:
            raise NoStrategyError("no persistence strategy - use to_save() to define one")
        return self._save_strategy(self)

    def save(self) -> bool:
        """
        Persist the record inside ``transaction``.

        Returns True when the save path ran to completion, False when the
        transaction was rolled back or the wrapper never ran it. Errors from
        the strategy propagate and leave the record FAILED.
        """
        completed = False

        def save_block() -> Any:
            nonlocal completed
            self._set_state(RecordState.SAVING)
            result = self.persist()
            completed = True
            return result

        log.debug("Saving record", extra={"record_type": type(self).__name__})
        try:
            type(self).transaction(save_block)
        except Exception:
            self._set_state(RecordState.FAILED)
            log.debug("Save failed", extra={"record_type": type(self).__name__})
            raise

        if completed:
            self._set_state(RecordState.SAVED)
        elif self._state is RecordState.SAVING:
            self._set_state(RecordState.FAILED)
        return completed

    def destroy(self) -> "Persistable":
        """
        Call the destroy strategy, if one is registered, and return the record.
        """
        if self._destroy_strategy is not None:
            self._destroy_strategy(self)
        self._set_state(RecordState.DESTROYED)
        log.debug("Record destroyed", extra={"record_type": type(self).__name__})
        return self


__all__ = ["Persistable", "PersistenceStrategy", "RecordState"]
