from __future__ import annotations

from typing import Callable, List, Optional


class DashboardError(Exception):
    """Base error for user-facing failures."""


class StoreError(DashboardError):
    """A write against the document store failed."""

    def __init__(self, message: str, *, collection: str, operation: str):
        super().__init__(message)
        self.collection = collection
        self.operation = operation


class ValidationError(DashboardError):
    """Form input rejected before any store call."""

    def __init__(self, message: str, *, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.fields = list(fields or [])


ErrorObserver = Callable[[str, Optional[BaseException]], None]

_observers: List[ErrorObserver] = []


def add_error_observer(observer: ErrorObserver) -> None:
    if observer not in _observers:
        _observers.append(observer)


def remove_error_observer(observer: ErrorObserver) -> None:
    if observer in _observers:
        _observers.remove(observer)


def clear_error_observers() -> None:
    _observers.clear()


def report_error(message: str, exc: Optional[BaseException] = None) -> None:
    """Fan a failure out to every registered observer (toast, test spy...)."""
    for observer in list(_observers):
        try:
            observer(message, exc)
        except Exception:
            # A broken observer must not turn a reported failure into a crash
            continue
