"""Exceptions for the settings framework."""


class SettingsError(Exception):
    """Base class of all errors raised by typedsettings."""


class SettingsLoadError(SettingsError):
    """A whole load pass failed; no setting was touched."""


class OpenError(SettingsLoadError):
    """The document source could not be opened."""


class ParseError(SettingsLoadError):
    """The document source is not a well-formed settings document."""


class CoercionError(SettingsError):
    """A document node could not be converted to a setting's kind."""


class TypeMismatchError(CoercionError):
    """The node's type has no conversion to the destination kind at all."""

    def __init__(self, source: str, destination: str) -> None:
        super().__init__(f"cannot assign {source} to {destination} setting")
        self.source = source
        self.destination = destination
