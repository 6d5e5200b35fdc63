"""
Pet Store

The single authoritative copy of the application state: pets,
expenses, limits and the month currently being viewed.

DESIGN DECISION: Every write to one of those four fields
1. notifies observers synchronously, then
2. serializes the WHOLE state and saves it under one key.

There is no batching. An operation that writes three fields
(delete_pet) notifies and saves three times. Nothing runs in the
background, so a mutation is on disk before the call returns.

Failures never surface to the caller:
- A blob that cannot be decoded on startup is logged and ignored;
  the constructor defaults stay in place.
- A save that fails is logged and dropped.
"""

from collections.abc import Callable, Iterable
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Union
from uuid import UUID

import structlog
from pydantic import BaseModel, Field, ValidationError

from petspend.models.events import StoreEvent, StoreEventType, StoreField
from petspend.models.pet import (
    ExpenseCategory,
    LimitUsage,
    MonthPeriod,
    Pet,
    PetExpense,
    PetKind,
    SpendingLimit,
)
from petspend.queries.aggregation import (
    expenses_for_pet,
    expenses_for_pet_in_month,
    total_amount,
    usages_for,
)
from petspend.services.storage import (
    InMemoryKeyValueStorage,
    KeyValueStorageInterface,
    StorageError,
)
from petspend.validation import AmountValidator, parse_amount


STATE_KEY = "PetStore.state"

Observer = Callable[[StoreEvent], None]
AmountInput = Union[Decimal, int, str]

logger = structlog.get_logger(__name__)


class _Unset:
    """Marker for 'leave this field alone' where None means 'clear it'."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


class PetStoreState(BaseModel):
    """Everything that is persisted, as one record."""

    pets: list[Pet] = Field(default_factory=list)
    expenses: list[PetExpense] = Field(default_factory=list)
    limits: list[SpendingLimit] = Field(default_factory=list)
    selected_month: MonthPeriod


def encode_state(state: PetStoreState) -> bytes:
    """Serialize state to JSON bytes. Absent optionals are omitted."""
    return state.model_dump_json(exclude_none=True).encode("utf-8")


def decode_state(data: bytes) -> PetStoreState:
    """
    Parse a blob written by encode_state().

    Raises:
        ValidationError: If the blob is not a valid state
    """
    return PetStoreState.model_validate_json(data)


class PetStore:
    """
    In-memory application state kept in sync with key-value storage.

    Construct it once and hand the same instance to every consumer.
    Consumers that need to react to changes call subscribe().
    """

    def __init__(
        self,
        pets: Optional[Iterable[Pet]] = None,
        expenses: Optional[Iterable[PetExpense]] = None,
        limits: Optional[Iterable[SpendingLimit]] = None,
        selected_month: Optional[MonthPeriod] = None,
        storage: Optional[KeyValueStorageInterface] = None,
        state_key: str = STATE_KEY,
        reject_non_positive_amounts: bool = False,
    ):
        """
        Initialize the store and load any previously saved state.

        Args:
            pets, expenses, limits, selected_month: Defaults used when
                nothing usable is stored
            storage: Backend to load from and save to.
                    If None, an in-memory backend is used.
            state_key: Key the state blob lives under
            reject_non_positive_amounts: Validate amounts here instead
                of trusting callers
        """
        self._storage = storage if storage is not None else InMemoryKeyValueStorage()
        self._state_key = state_key
        self._reject_non_positive_amounts = reject_non_positive_amounts
        self._amount_validator = AmountValidator()
        self._observers: list[Observer] = []

        self._pets: list[Pet] = list(pets or [])
        self._expenses: list[PetExpense] = list(expenses or [])
        self._limits: list[SpendingLimit] = list(limits or [])
        self._selected_month: MonthPeriod = selected_month or MonthPeriod.current()

        self._load_state()

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register a callback for every field write.

        Returns a callable that removes the callback again.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Fields
    # -------------------------------------------------------------------------

    @property
    def pets(self) -> list[Pet]:
        return list(self._pets)

    @pets.setter
    def pets(self, value: Iterable[Pet]) -> None:
        self._write(
            StoreField.PETS,
            list(value),
            StoreEvent(event_type=StoreEventType.FIELD_REPLACED, field=StoreField.PETS),
        )

    @property
    def expenses(self) -> list[PetExpense]:
        return list(self._expenses)

    @expenses.setter
    def expenses(self, value: Iterable[PetExpense]) -> None:
        self._write(
            StoreField.EXPENSES,
            list(value),
            StoreEvent(event_type=StoreEventType.FIELD_REPLACED, field=StoreField.EXPENSES),
        )

    @property
    def limits(self) -> list[SpendingLimit]:
        return list(self._limits)

    @limits.setter
    def limits(self, value: Iterable[SpendingLimit]) -> None:
        self._write(
            StoreField.LIMITS,
            list(value),
            StoreEvent(event_type=StoreEventType.FIELD_REPLACED, field=StoreField.LIMITS),
        )

    @property
    def selected_month(self) -> MonthPeriod:
        return self._selected_month

    @selected_month.setter
    def selected_month(self, value: MonthPeriod) -> None:
        self._write(
            StoreField.SELECTED_MONTH,
            value,
            StoreEvent(
                event_type=StoreEventType.SELECTED_MONTH_CHANGED,
                field=StoreField.SELECTED_MONTH,
                details={
                    "from": self._selected_month.formatted(),
                    "to": value.formatted(),
                },
            ),
        )

    def shift_selected_month(self, offset: int) -> MonthPeriod:
        """Move the selected month back or forward by `offset` months."""
        self.selected_month = self._selected_month.adding_months(offset)
        return self._selected_month

    # -------------------------------------------------------------------------
    # Pets
    # -------------------------------------------------------------------------

    def get_pet(self, pet_id: UUID) -> Optional[Pet]:
        return next((pet for pet in self._pets if pet.id == pet_id), None)

    def add_pet(
        self,
        name: str,
        kind: PetKind,
        birth_date: Optional[date] = None,
        photo_data: Optional[bytes] = None,
    ) -> Pet:
        """Register a new pet with a fresh ID."""
        pet = Pet(
            name=name,
            kind=kind,
            birth_date=birth_date,
            photo_data=photo_data,
        )
        self._write(
            StoreField.PETS,
            self._pets + [pet],
            StoreEvent(
                event_type=StoreEventType.PET_ADDED,
                field=StoreField.PETS,
                entity_id=pet.id,
            ),
        )
        return pet

    def update_pet(
        self,
        pet_id: UUID,
        *,
        name: Optional[str] = None,
        kind: Optional[PetKind] = None,
        birth_date: Optional[date] = UNSET,
        photo_data: Optional[bytes] = UNSET,
    ) -> Optional[Pet]:
        """
        Change only the given fields of a pet.

        name and kind are left alone when None. birth_date and
        photo_data are left alone when not passed; passing None
        clears them.

        Returns:
            The updated pet, or None if no pet has that ID
        """
        index = self._index_of(self._pets, pet_id)
        if index is None:
            return None

        updates: dict[str, Any] = {}
        if name is not None:
            updates["name"] = name
        if kind is not None:
            updates["kind"] = kind
        if birth_date is not UNSET:
            updates["birth_date"] = birth_date
        if photo_data is not UNSET:
            updates["photo_data"] = photo_data

        updated = Pet.model_validate({**self._pets[index].model_dump(), **updates})
        pets = list(self._pets)
        pets[index] = updated
        self._write(
            StoreField.PETS,
            pets,
            StoreEvent(
                event_type=StoreEventType.PET_UPDATED,
                field=StoreField.PETS,
                entity_id=pet_id,
                details={"fields": sorted(updates)},
            ),
        )
        return updated

    def delete_pet(self, pet_id: UUID) -> None:
        """
        Remove a pet together with its expenses and limits.

        An unknown ID is a no-op. Otherwise all three collections are
        written, and saved, even when the pet had no expenses or limits.
        """
        pets = [pet for pet in self._pets if pet.id != pet_id]
        if len(pets) == len(self._pets):
            return

        self._write(
            StoreField.PETS,
            pets,
            StoreEvent(
                event_type=StoreEventType.PET_DELETED,
                field=StoreField.PETS,
                entity_id=pet_id,
            ),
        )

        expenses = [expense for expense in self._expenses if expense.pet_id != pet_id]
        self._write(
            StoreField.EXPENSES,
            expenses,
            StoreEvent(
                event_type=StoreEventType.EXPENSES_REMOVED,
                field=StoreField.EXPENSES,
                entity_id=pet_id,
                details={"count": len(self._expenses) - len(expenses)},
            ),
        )

        limits = [limit for limit in self._limits if limit.pet_id != pet_id]
        self._write(
            StoreField.LIMITS,
            limits,
            StoreEvent(
                event_type=StoreEventType.LIMITS_REMOVED,
                field=StoreField.LIMITS,
                entity_id=pet_id,
                details={"count": len(self._limits) - len(limits)},
            ),
        )

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def add_expense(
        self,
        pet_id: UUID,
        category: ExpenseCategory,
        amount: AmountInput,
        date: Optional[datetime] = None,
        note: Optional[str] = None,
    ) -> PetExpense:
        """
        Log an expense for a pet.

        The date defaults to now. The amount is not checked unless
        the store was built with reject_non_positive_amounts.

        Raises:
            InvalidAmountError: Only in rejecting mode
        """
        expense = PetExpense(
            pet_id=pet_id,
            category=category,
            amount=self._checked_amount(amount),
            date=date or datetime.now(),
            note=note,
        )
        self._write(
            StoreField.EXPENSES,
            self._expenses + [expense],
            StoreEvent(
                event_type=StoreEventType.EXPENSE_ADDED,
                field=StoreField.EXPENSES,
                entity_id=expense.id,
                details={
                    "pet_id": str(pet_id),
                    "category": expense.category.value,
                    "amount": str(expense.amount),
                },
            ),
        )
        return expense

    def expenses_for(self, pet_id: UUID) -> list[PetExpense]:
        return expenses_for_pet(self._expenses, pet_id)

    def expenses_for_selected_month(self, pet_id: UUID) -> list[PetExpense]:
        return expenses_for_pet_in_month(self._expenses, pet_id, self._selected_month)

    def total_for_selected_month(self, pet_id: UUID) -> Decimal:
        return total_amount(self._expenses, pet_id, self._selected_month)

    # -------------------------------------------------------------------------
    # Limits
    # -------------------------------------------------------------------------

    def add_limit(
        self,
        pet_id: UUID,
        category: Optional[ExpenseCategory],
        month: MonthPeriod,
        amount: AmountInput,
        is_active: bool = True,
    ) -> SpendingLimit:
        """
        Set a monthly limit for a pet; category None limits total spend.

        Raises:
            InvalidAmountError: Only in rejecting mode
        """
        limit = SpendingLimit(
            pet_id=pet_id,
            category=category,
            month=month,
            amount=self._checked_amount(amount),
            is_active=is_active,
        )
        self._write(
            StoreField.LIMITS,
            self._limits + [limit],
            StoreEvent(
                event_type=StoreEventType.LIMIT_ADDED,
                field=StoreField.LIMITS,
                entity_id=limit.id,
                details={"pet_id": str(pet_id), "month": month.formatted()},
            ),
        )
        return limit

    def update_limit(
        self,
        limit_id: UUID,
        category: Optional[ExpenseCategory],
        month: MonthPeriod,
        amount: AmountInput,
        pet_id: Optional[UUID] = None,
    ) -> Optional[SpendingLimit]:
        """
        Replace a limit's category, month and amount.

        The ID and the active flag are kept. pet_id moves the limit
        to another pet; None keeps the current one.

        Returns:
            The updated limit, or None if no limit has that ID

        Raises:
            InvalidAmountError: Only in rejecting mode
        """
        index = self._index_of(self._limits, limit_id)
        if index is None:
            return None

        current = self._limits[index]
        updated = SpendingLimit(
            id=current.id,
            pet_id=pet_id or current.pet_id,
            category=category,
            month=month,
            amount=self._checked_amount(amount),
            is_active=current.is_active,
        )
        limits = list(self._limits)
        limits[index] = updated
        self._write(
            StoreField.LIMITS,
            limits,
            StoreEvent(
                event_type=StoreEventType.LIMIT_UPDATED,
                field=StoreField.LIMITS,
                entity_id=limit_id,
            ),
        )
        return updated

    def limits_for(self, pet_id: UUID) -> list[SpendingLimit]:
        """Active limits of a pet for the selected month."""
        return [
            limit
            for limit in self._limits
            if limit.pet_id == pet_id
            and limit.is_active
            and limit.month == self._selected_month
        ]

    def limit_usages(self, pet_id: UUID) -> list[LimitUsage]:
        return usages_for(self._expenses, self.limits_for(pet_id))

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def snapshot(self) -> PetStoreState:
        """The current state as the record that gets persisted."""
        return PetStoreState(
            pets=self._pets,
            expenses=self._expenses,
            limits=self._limits,
            selected_month=self._selected_month,
        )

    def _write(self, field: StoreField, value: Any, event: StoreEvent) -> None:
        setattr(self, f"_{field.value}", value)
        try:
            for observer in list(self._observers):
                observer(event)
        finally:
            self._persist_state()

    def _persist_state(self) -> None:
        try:
            data = encode_state(self.snapshot())
        except ValueError as e:
            logger.error("state_encode_failed", error=str(e))
            return

        try:
            self._storage.set(self._state_key, data)
        except StorageError as e:
            logger.error("state_save_failed", key=self._state_key, error=str(e))

    def _load_state(self) -> None:
        try:
            data = self._storage.get(self._state_key)
        except StorageError as e:
            logger.warning("state_read_failed", key=self._state_key, error=str(e))
            return
        if data is None:
            return

        try:
            state = decode_state(data)
        except ValidationError as e:
            # Corrupt or foreign blob: keep the constructor defaults
            logger.warning(
                "state_decode_failed",
                key=self._state_key,
                error_count=e.error_count(),
                error=str(e),
            )
            return

        self._pets = list(state.pets)
        self._expenses = list(state.expenses)
        self._limits = list(state.limits)
        self._selected_month = state.selected_month
        logger.debug(
            "state_loaded",
            key=self._state_key,
            pets=len(self._pets),
            expenses=len(self._expenses),
            limits=len(self._limits),
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _checked_amount(self, amount: AmountInput) -> AmountInput:
        if self._reject_non_positive_amounts:
            return self._amount_validator.ensure_valid(amount)
        if isinstance(amount, str):
            # Same text parsing as rejecting mode, minus the sign check;
            # unparseable text is left for the model to reject
            parsed = parse_amount(amount)
            if parsed is not None:
                return parsed
        return amount

    @staticmethod
    def _index_of(records: list, record_id: UUID) -> Optional[int]:
        for index, record in enumerate(records):
            if record.id == record_id:
                return index
        return None
