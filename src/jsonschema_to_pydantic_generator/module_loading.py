"""Helpers for importing generated model modules."""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType


def load_module_from_path(*, module_name: str, module_path: Path) -> ModuleType:
    """Import a generated module file and register it in ``sys.modules``.

    Generated models resolve their annotations through ``sys.modules``, so the
    module is registered before its body runs and removed again if it fails.

    Args:
        module_name (str): Import name for the module.
        module_path (Path): Generated ``.py`` file.

    Returns:
        ModuleType: The imported module.
    """
    spec = importlib.util.spec_from_file_location(module_name, module_path)
    if spec is None or spec.loader is None:
        raise RuntimeError(f"Unable to import generated module from: {module_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        raise
    return module
