"""
Reading settings documents and classifying their nodes.

A document is the plain Python value tree produced by json (or yaml.safe_load): dicts, lists, strings, numbers,
booleans and None. Nodes are never modified by this package.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from typedsettings.exceptions import OpenError
from typedsettings.exceptions import ParseError

YAML_SUFFIXES = (".yaml", ".yml")


class DocType(Enum):
    """Dynamic type tag of a document node."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    UNSIGNED = "unsigned"
    FLOAT = "float"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    NULL = "null"
    OTHER = "other"

    @property
    def is_number(self) -> bool:
        "Whether this tag denotes one of the numeric node types."
        return self in (DocType.INTEGER, DocType.UNSIGNED, DocType.FLOAT)


def doc_type(node: Any) -> DocType:
    """
    Classify a document node.

    bool is checked before int since it is a subclass. Non-negative integers are UNSIGNED, negative ones INTEGER.
    """
    if isinstance(node, bool):
        return DocType.BOOLEAN
    if isinstance(node, int):
        return DocType.UNSIGNED if node >= 0 else DocType.INTEGER
    if isinstance(node, float):
        return DocType.FLOAT
    if isinstance(node, str):
        return DocType.STRING
    if isinstance(node, (list, tuple)):
        return DocType.ARRAY
    if isinstance(node, dict):
        return DocType.OBJECT
    if node is None:
        return DocType.NULL
    return DocType.OTHER


def type_name(node: Any) -> str:
    "Human-readable type of a node, as used in diagnostics."
    tp = doc_type(node)
    if tp.is_number:
        return "number"
    return tp.value


def parse_document(text: str, yaml_syntax: bool = False) -> Any:
    """
    Parse document text into a value tree.

    Raises ParseError with the parser's message if the text is malformed or nested too deeply to parse.
    """
    try:
        if yaml_syntax:
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ParseError(str(exc)) from exc
    except RecursionError as exc:
        raise ParseError(f"document nested too deeply: {exc}") from exc


def read_document(path: Path) -> Any:
    """
    Open and parse the document at the given path.

    Files ending in .yaml or .yml are parsed as YAML, everything else as JSON.
    Raises OpenError if the file cannot be read and ParseError if it cannot be parsed.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise OpenError(str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise ParseError(str(exc)) from exc
    return parse_document(text, yaml_syntax=path.suffix.lower() in YAML_SUFFIXES)


def _text_keys(node: Any) -> Any:
    "Internal: Copy a tree with all mapping keys turned into strings (YAML allows dates, numbers etc. as keys)."
    if isinstance(node, dict):
        return {str(k): _text_keys(v) for k, v in node.items()}
    if isinstance(node, (list, tuple)):
        return [_text_keys(v) for v in node]
    return node


def dump_document(node: Any) -> str:
    "Pretty-print a document tree."
    return json.dumps(_text_keys(node), indent=4, default=str)
