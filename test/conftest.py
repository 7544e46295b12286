"""Pytest config."""

import importlib
import json
import sys
from pathlib import Path
from typing import Any
from typing import Callable
from typing import Iterator

import pytest

from typedsettings.logging.logging_provider import LOGGING_PROVIDER
from typedsettings.settings import REGISTRY
from typedsettings.settings import SettingsRegistry

SETTINGS_MODULE = "cli_test_settings"

SETTINGS_MODULE_SOURCE = '''"""Settings declared by a fake application."""

from typedsettings import UNSIGNED
from typedsettings import setting

ENABLED = setting("Enabled", bool, console_ok=True)
COUNT = setting("Count", int, default=5, console_ok=True)
MAX_ITEMS = setting("MaxItems", UNSIGNED, default=10)
NAMES = setting("Names", list[str])
'''


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Detach handlers some tests attach through init_logging()."""
    yield
    LOGGING_PROVIDER.shutdown()


@pytest.fixture
def registry() -> SettingsRegistry:
    """A fresh registry, independent of the process-wide one."""
    return SettingsRegistry()


@pytest.fixture
def write_doc(tmp_path: Path) -> Callable[..., Path]:
    """Write a settings document (a JSON-serializable value or raw text) and return its path."""

    def write(content: Any, name: str = "settings.json") -> Path:
        path = tmp_path / name
        path.write_text(content if isinstance(content, str) else json.dumps(content), encoding="utf-8")
        return path

    return write


@pytest.fixture
def settings_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """An importable module declaring settings in the process-wide registry."""
    module_dir = tmp_path / "modules"
    module_dir.mkdir()
    (module_dir / f"{SETTINGS_MODULE}.py").write_text(SETTINGS_MODULE_SOURCE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(module_dir))
    importlib.invalidate_caches()
    yield SETTINGS_MODULE
    sys.modules.pop(SETTINGS_MODULE, None)
    REGISTRY.clear()
