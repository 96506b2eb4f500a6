"""Adapters — bindings to pip, conda, venv, nvidia-smi and the interpreter.

Public re-exports for convenient access.
"""

from bertenv.adapters.base import Adapter, ExecutionContext
from bertenv.adapters.mock import MockAdapter
from bertenv.adapters.registry import AdapterRegistry, build_default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
    "build_default_registry",
]
