"""Domain layer for storeledger.

Services are exported lazily: ``storeledger.database`` imports the entity
module of this package, and the services import ``storeledger.database``.
"""

_SERVICES = {
    "AccountService": "storeledger.domain.account",
    "PeriodService": "storeledger.domain.period",
    "JournalService": "storeledger.domain.journal",
    "JournalEventService": "storeledger.domain.events",
    "BalanceService": "storeledger.domain.balance",
    "PeriodClosingService": "storeledger.domain.closing",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module
        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
