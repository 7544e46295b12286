"""Human-readable dumps of all registered settings."""

import logging

from typedsettings.settings import REGISTRY
from typedsettings.settings import SettingsRegistry

DUMP_BEGIN = "=== SETTINGS DUMP BEGIN ==="
DUMP_END = "=== SETTINGS DUMP END ==="


def dump_settings(registry: SettingsRegistry | None = None) -> str:
    """
    Render every setting as "key: value", one per line, in registration order.

    Arrays span several lines ("key:" followed by tab-indented elements). Meant for logs, not for parsing.
    """
    if registry is None:
        registry = REGISTRY
    return "\n".join(s.dump() for s in registry)


def log_settings(log: logging.Logger, registry: SettingsRegistry | None = None) -> None:
    """
    Write the settings dump to the given logger, framed by begin/end banners.

    Values are logged unaltered: the lines between the banners are exactly dump_settings().
    """
    dump = dump_settings(registry)
    log.info("\n".join([DUMP_BEGIN, *([dump] if dump else []), DUMP_END]))
