"""Logger for the settings framework."""

from typedsettings.logging.logging_provider import LOGGING_PROVIDER

SETTINGS_LOGGER = LOGGING_PROVIDER.new_logger("typedsettings")
