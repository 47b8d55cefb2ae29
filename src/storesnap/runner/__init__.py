"""Hosted CI runner binding: environment side effects and job-scoped state."""

from .environment import ActionsEnvironment, Environment
from .state import ActionsStateProvider, FileStateProvider, StateProvider

__all__ = [
    "ActionsEnvironment",
    "ActionsStateProvider",
    "Environment",
    "FileStateProvider",
    "StateProvider",
]
