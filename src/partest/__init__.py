"""partest: parallel test execution with merged coverage and JUnit logs."""
from __future__ import annotations

import importlib
import os
from typing import List, Tuple

from .version import __version__

__all__ = [
    "PLUGINS_ENV",
    "__version__",
    "bootstrap",
    "loaded_plugins",
]

PLUGINS_ENV = "PARTEST_PLUGINS"

_BOOTSTRAPPED = False
_LOADED: List[str] = []


def bootstrap() -> None:
    """Import the plugins named in ``PARTEST_PLUGINS`` once per process.

    Entries are comma separated, either ``module`` (its ``register()`` is
    called when present) or ``module:callable``.
    """

    global _BOOTSTRAPPED
    if _BOOTSTRAPPED:
        return
    for module_name, hook_name in _plugin_entries(os.environ.get(PLUGINS_ENV, "")):
        module = importlib.import_module(module_name)
        hook = getattr(module, hook_name, None)
        if hook is None and hook_name != "register":
            raise AttributeError(f"Plugin '{module_name}' has no attribute '{hook_name}'")
        if callable(hook):
            hook()
        _LOADED.append(module_name)
    _BOOTSTRAPPED = True


def loaded_plugins() -> Tuple[str, ...]:
    return tuple(_LOADED)


def _plugin_entries(value: str) -> List[Tuple[str, str]]:
    entries = []
    for raw in value.split(","):
        entry = raw.strip()
        if entry:
            module_name, _, hook_name = entry.partition(":")
            entries.append((module_name.strip(), hook_name.strip() or "register"))
    return entries
