"""
Application Wiring

Builds the one PetStore instance a process uses, from settings:
storage backend, state key, amount policy and event logging.

Also builds the sample store used for previews and demos.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from petspend.audit import StoreEventLogger, configure_logging
from petspend.config import Settings, StorageSettings, get_settings
from petspend.models.pet import (
    ExpenseCategory,
    MonthPeriod,
    Pet,
    PetExpense,
    PetKind,
    SpendingLimit,
)
from petspend.services.storage import (
    FileKeyValueStorage,
    InMemoryKeyValueStorage,
    KeyValueStorageInterface,
)
from petspend.store import PetStore


def create_storage(settings: StorageSettings) -> KeyValueStorageInterface:
    """Instantiate the configured key-value backend."""
    if settings.backend == "memory":
        return InMemoryKeyValueStorage()
    return FileKeyValueStorage(settings.data_dir)


def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorageInterface] = None,
    log_events: bool = True,
) -> tuple[PetStore, Optional[StoreEventLogger]]:
    """
    Create the store and its event logger.

    Args:
        settings: Settings to use; defaults to get_settings()
        storage: Backend override (tests); defaults to the configured one
        log_events: Attach a StoreEventLogger to the store

    Returns:
        (store, event_logger); event_logger is None when not attached
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage

    configure_logging(app_settings.log_level, json_logs=app_settings.log_json)

    store = PetStore(
        storage=storage if storage is not None else create_storage(storage_settings),
        state_key=storage_settings.state_key,
        reject_non_positive_amounts=app_settings.reject_non_positive_amounts,
    )

    event_logger = None
    if log_events:
        event_logger = StoreEventLogger()
        event_logger.attach(store)

    return store, event_logger


def build_preview_store(
    month: Optional[MonthPeriod] = None,
    storage: Optional[KeyValueStorageInterface] = None,
) -> PetStore:
    """
    A store filled with sample data: Felix the cat with food and
    vet expenses and two limits, and Rex the dog with a toy.
    """
    month = month or MonthPeriod.current()
    spent_at = datetime(month.year, month.month, 1, 12, 0)

    felix = Pet(name="Felix", kind=PetKind.CAT)
    rex = Pet(name="Rex", kind=PetKind.DOG)

    expenses = [
        PetExpense(
            pet_id=felix.id,
            category=ExpenseCategory.FOOD,
            amount=Decimal("84"),
            date=spent_at,
            note="Premium food",
        ),
        PetExpense(
            pet_id=felix.id,
            category=ExpenseCategory.VETERINARY_CARE,
            amount=Decimal("90"),
            date=spent_at,
            note="Vaccination",
        ),
        PetExpense(
            pet_id=rex.id,
            category=ExpenseCategory.TOYS,
            amount=Decimal("30"),
            date=spent_at,
            note="New ball",
        ),
    ]

    limits = [
        SpendingLimit(
            pet_id=felix.id,
            category=ExpenseCategory.FOOD,
            month=month,
            amount=Decimal("120"),
        ),
        SpendingLimit(
            pet_id=felix.id,
            category=ExpenseCategory.VETERINARY_CARE,
            month=month,
            amount=Decimal("80"),
        ),
    ]

    return PetStore(
        pets=[felix, rex],
        expenses=expenses,
        limits=limits,
        selected_month=month,
        storage=storage,
    )
