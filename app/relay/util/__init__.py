"""Shared utilities."""

from .async_helpers import bounded, run_sync
from .env_file import EnvFile
from .result import Result
from .singletons import register_singleton, reset_all_singletons

__all__ = [
    "EnvFile",
    "Result",
    "bounded",
    "register_singleton",
    "reset_all_singletons",
    "run_sync",
]
