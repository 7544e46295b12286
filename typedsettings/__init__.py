"""
Typed settings bound to the top-level keys of a JSON (or YAML) document.

Settings are declared using setting() (or the *Setting classes), which registers them with a registry (by default the
process-wide REGISTRY). load_settings() then reads a document, assigns every registered setting the value stored
under its key, and returns a LoadReport collecting everything that went wrong along the way. dump_settings() renders
all settings for logging.

Document values are converted to each setting's kind (see typedsettings.coercion): numbers convert between each other
and to booleans, strings only from strings, arrays element by element and objects through pydantic models or classes
with a from_document() classmethod. A setting that cannot be converted keeps its previous value; only an unreadable
or malformed document fails the load as a whole.

Consumers are expected to declare their settings in some reasonably central location, e.g. a settings.py file in
their package, before the first load_settings() call.
"""

from typedsettings.coercion import BOOLEAN
from typedsettings.coercion import FLOAT
from typedsettings.coercion import INTEGER
from typedsettings.coercion import STRING
from typedsettings.coercion import UNSIGNED
from typedsettings.coercion import Kind
from typedsettings.coercion import SelfPopulating
from typedsettings.coercion import array_of
from typedsettings.coercion import object_of
from typedsettings.dumper import dump_settings
from typedsettings.dumper import log_settings
from typedsettings.exceptions import CoercionError
from typedsettings.exceptions import OpenError
from typedsettings.exceptions import ParseError
from typedsettings.exceptions import SettingsError
from typedsettings.exceptions import SettingsLoadError
from typedsettings.exceptions import TypeMismatchError
from typedsettings.loader import LoadReport
from typedsettings.loader import load_settings
from typedsettings.settings import REGISTRY
from typedsettings.settings import ArraySetting
from typedsettings.settings import BoolSetting
from typedsettings.settings import FloatSetting
from typedsettings.settings import IntSetting
from typedsettings.settings import ObjectSetting
from typedsettings.settings import Setting
from typedsettings.settings import SettingsRegistry
from typedsettings.settings import StringSetting
from typedsettings.settings import UnsignedSetting
from typedsettings.settings import setting

__all__ = [
    "ArraySetting",
    "BOOLEAN",
    "BoolSetting",
    "CoercionError",
    "FLOAT",
    "FloatSetting",
    "INTEGER",
    "IntSetting",
    "Kind",
    "LoadReport",
    "ObjectSetting",
    "OpenError",
    "ParseError",
    "REGISTRY",
    "STRING",
    "SelfPopulating",
    "Setting",
    "SettingsError",
    "SettingsLoadError",
    "SettingsRegistry",
    "StringSetting",
    "TypeMismatchError",
    "UNSIGNED",
    "UnsignedSetting",
    "array_of",
    "dump_settings",
    "load_settings",
    "log_settings",
    "object_of",
    "setting",
]
