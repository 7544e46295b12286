"""
Loading settings from a document.

A load pass opens and parses the document, then walks the registry in registration order and assigns each setting
the value stored under its key. Problems with single settings (missing key, wrong type, failed conversion) are
collected in the LoadReport and never stop the pass; only failing to open or parse the document does.
"""

from pathlib import Path
from typing import Any
from typing import Iterator

from typedsettings.document import DocType
from typedsettings.document import doc_type
from typedsettings.document import dump_document
from typedsettings.document import read_document
from typedsettings.document import type_name
from typedsettings.exceptions import CoercionError
from typedsettings.exceptions import OpenError
from typedsettings.exceptions import ParseError
from typedsettings.exceptions import SettingsLoadError
from typedsettings.exceptions import TypeMismatchError
from typedsettings.logger import SETTINGS_LOGGER
from typedsettings.settings import REGISTRY
from typedsettings.settings import SettingsRegistry

log = SETTINGS_LOGGER.getChild(__name__)

# Node types the settings' kinds are asked to handle; everything else is rejected by the loader itself.
ASSIGNABLE_TYPES = frozenset(
    {
        DocType.BOOLEAN,
        DocType.INTEGER,
        DocType.UNSIGNED,
        DocType.FLOAT,
        DocType.STRING,
        DocType.ARRAY,
        DocType.OBJECT,
    }
)


class LoadReport:
    """
    Outcome of a load pass.

    lines: Diagnostics in the order they occurred. Non-empty reports are normal even for successful loads.
    success: False only if the document could not be opened or parsed.
    error: The OpenError or ParseError that ended the pass, if any.

    A report unpacks as (text, success).
    """

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.success = False
        self.error: SettingsLoadError | None = None

    def add(self, line: str) -> None:
        "Append a non-fatal diagnostic."
        log.warning(line)
        self.lines.append(line)

    def fail(self, line: str, error: SettingsLoadError) -> "LoadReport":
        "Record a fatal error; returns the report for convenience."
        log.error(f"{line}\n{error}")
        self.lines.append(line)
        self.lines.append(str(error))
        self.success = False
        self.error = error
        return self

    @property
    def text(self) -> str:
        "All diagnostics, one per line."
        return "\n".join(self.lines)

    def raise_for_status(self) -> None:
        "Raise the fatal error of the pass, if there was one."
        if self.error is not None:
            raise self.error

    def __iter__(self) -> Iterator[Any]:
        return iter((self.text, self.success))

    def __bool__(self) -> bool:
        return self.success

    def __repr__(self) -> str:
        return f"LoadReport(success={self.success}, lines={len(self.lines)})"


def _assign(report: LoadReport, registry: SettingsRegistry, document: dict[str, Any], suppress_warnings: bool) -> None:
    "Internal: Assign every registered setting from the parsed document."
    for s in registry:
        try:
            node = document[s.key]
        except KeyError:
            if not suppress_warnings:
                report.add(f"Failed to find ({s.key}) within document!")
            continue

        if doc_type(node) not in ASSIGNABLE_TYPES:
            report.add(f"Parsed value of ({s.key}) is of invalid type ({type_name(node)})!")
            continue

        try:
            s.assign(node)
        except TypeMismatchError as exc:
            report.add(f"Value of ({s.key}) has mismatched type: {exc}")
        except CoercionError as exc:
            report.add(f"Failed to assign ({s.key}): {exc}")
        else:
            log.debug(f"Loaded {s.key} = {s.to_string()!r}")


def load_settings(
    path: str | Path | None = None,
    *,
    suppress_warnings: bool = False,
    dump_parse: bool = False,
    registry: SettingsRegistry | None = None,
) -> LoadReport:
    """
    Load values for all registered settings from a JSON (or YAML) document.

    path: The document. Default: the registry's file_name.
    suppress_warnings: Do not report keys that are missing from the document.
    dump_parse: Add the pretty-printed document to the report (for debugging).
    registry: The registry whose settings are loaded. Default: the process-wide REGISTRY.

    Never raises for problems with the document; check the returned report's success (or call raise_for_status()).
    """
    if registry is None:
        registry = REGISTRY
    if path is None:
        if registry.file_name is None:
            raise ValueError("No settings file given and no default file name set on the registry")
        path = registry.file_name
    path = Path(path)
    report = LoadReport()

    try:
        document = read_document(path)
    except OpenError as exc:
        return report.fail(f"Failed to open settings file ({path})!", exc)
    except ParseError as exc:
        return report.fail(f"Failed to parse settings file ({path})!", exc)

    if doc_type(document) is not DocType.OBJECT:
        error = ParseError(f"Expected an object at the top level, got {type_name(document)}")
        return report.fail(f"Failed to parse settings file ({path})!", error)

    if dump_parse:
        text = dump_document(document)
        log.debug(f"Parse dump of {path}:\n{text}")
        report.lines.append(text)

    _assign(report, registry, document, suppress_warnings)
    report.success = True
    log.info(f"Scanned {len(registry)} settings against {path} ({len(report.lines)} diagnostics)")
    return report
