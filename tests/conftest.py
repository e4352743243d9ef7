import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]

# Sanitize sys.path to avoid importing from a different clone of this repo
resolved_root = ROOT.resolve()
cleaned_sys_path = []
for p in sys.path:
    try:
        rp = Path(p).resolve()
    except (OSError, RuntimeError):
        cleaned_sys_path.append(p)
        continue
    # Drop paths that point to a different rangekit checkout
    if rp != resolved_root and (rp / "rangekit" / "__init__.py").exists():
        continue
    cleaned_sys_path.append(p)

sys.path[:] = cleaned_sys_path

# Prepend current workspace for deterministic imports
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)


# Settings read from the environment; keep a developer's shell from leaking in
SETTINGS_ENV_VARS = (
    "APP_NAME",
    "ENVIRONMENT",
    "DEBUG",
    "LOG_LEVEL",
    "JSON_LOGS",
    "HOST",
    "PORT",
    "ALLOWED_ORIGINS",
    "DEFAULT_TIMEZONE",
    "FISCAL_YEAR_START_MONTH",
    "WEEK_START",
    "DEFAULT_RESOLUTION",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Clear env-driven settings and the caches built from them"""
    from rangekit.config.settings import clear_settings_cache
    from rangekit.datemath import clear_date_math_cache

    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    clear_date_math_cache()

    yield

    clear_settings_cache()
    clear_date_math_cache()
