"""Public package surface for ``lib_fault_boundary``.

Callers import the taxonomy, the special-case constants, and the bundled
boundaries from here; everything else is an implementation detail of the
layer that owns it.
"""

from __future__ import annotations

from .adapters.device.boundary import DEVICE_FAILURES, DeviceBoundary, DeviceSession
from .adapters.file_store.boundary import STORE_FAILURES, FileSectionStore
from .application.boundary import TranslationBoundary, translated
from .application.retry import call_with_retry
from .application.translate import DEFAULT_FAILURES, FailureTable, translate
from .domain.errors import ErrorKind, TranslatedError
from .domain.section import Section
from .domain.special_case import EMPTY_EVENTS, EMPTY_SECTIONS, or_special_case
from .observability import bind_trace_id, get_logger, log_translated_error
from .settings import Settings, load_settings

__all__ = [
    "DEFAULT_FAILURES",
    "DEVICE_FAILURES",
    "DeviceBoundary",
    "DeviceSession",
    "EMPTY_EVENTS",
    "EMPTY_SECTIONS",
    "ErrorKind",
    "FailureTable",
    "FileSectionStore",
    "STORE_FAILURES",
    "Section",
    "Settings",
    "TranslatedError",
    "TranslationBoundary",
    "bind_trace_id",
    "call_with_retry",
    "get_logger",
    "load_settings",
    "log_translated_error",
    "or_special_case",
    "translate",
    "translated",
]
