"""Shared module.

Cross-cutting concerns: configuration, logging, result pattern.
"""
from ifc_specialty.shared.config import Settings, get_settings, settings
from ifc_specialty.shared.result import Failure, Result, Success, err, ok

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "Success",
    "Failure",
    "Result",
    "ok",
    "err",
]
