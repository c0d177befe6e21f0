from __future__ import annotations
import os
from pathlib import Path
from typing import Iterable, List, Optional


def _sep() -> str:
    return ';' if os.name == 'nt' else ':'


# Resolve installation dir (elc package directory)
_ELC_DIR = Path(__file__).resolve().parent

# Defaults
_DEFAULT_IMPORT_DIRS = [_ELC_DIR / 'lib']


def paths_from_env(var: str, defaults: Iterable[Path]) -> List[Path]:
    raw = os.environ.get(var)
    if not raw:
        return [Path(p) for p in defaults]
    sep = _sep()
    return [Path(p.strip()) for p in raw.split(sep) if p.strip()]


def get_import_roots() -> List[Path]:
    return paths_from_env('ELC_IMPORT_PATH', _DEFAULT_IMPORT_DIRS)


def get_max_steps() -> Optional[int]:
    """Reduction budget from ELC_MAX_STEPS; unset or empty means unbounded."""
    raw = os.environ.get('ELC_MAX_STEPS', '').strip()
    if not raw:
        return None
    steps = int(raw)
    if steps <= 0:
        raise ValueError(f"ELC_MAX_STEPS must be positive, got {raw!r}")
    return steps
