"""
File loading for PropFlow.

Reads property declaration documents and event streams from YAML or JSON so
a node's property set can be described as data. A declarations document has
the form::

    properties:
      mode: {value: auto}
      target: {scope: flow}
    config:
      target: 21

and an events document is a list of event mappings (``.jsonl`` files hold
one JSON event per line).
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from propflow.common.exceptions import DeclarationLoadError
from propflow.config import PropertiesConfig
from propflow.models import PropertyTemplate

YAML_EXTENSIONS = (".yaml", ".yml")
JSON_EXTENSIONS = (".json",)
JSON_LINES_EXTENSIONS = (".jsonl",)
SUPPORTED_EXTENSIONS = YAML_EXTENSIONS + JSON_EXTENSIONS + JSON_LINES_EXTENSIONS


class DeclarationFile(BaseModel):
    """Validated shape of a declarations document."""

    properties: dict[str, PropertyTemplate | None]
    config: dict[str, Any] = {}
    settings: dict[str, Any] = {}


@dataclass
class Declarations:
    """Property templates plus construction-time node config."""

    properties: dict[str, PropertyTemplate | None]
    config: dict[str, Any] = field(default_factory=dict)
    settings: PropertiesConfig | None = None


def _read_document(file_path: str | Path) -> Any:
    path = Path(file_path)
    if not path.exists():
        raise DeclarationLoadError(f"File not found: {file_path}", file_path=str(file_path))

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise DeclarationLoadError(
            f"Unsupported file format: {suffix or '(none)'}",
            file_path=str(file_path),
            context={"supported": list(SUPPORTED_EXTENSIONS)},
        )

    try:
        with open(path, encoding="utf-8") as f:
            if suffix in YAML_EXTENSIONS:
                return YAML(typ="safe").load(f)
            if suffix in JSON_EXTENSIONS:
                return json.load(f)
            return [json.loads(line) for line in f if line.strip()]
    except (YAMLError, json.JSONDecodeError) as e:
        raise DeclarationLoadError(f"Failed to parse {file_path}: {e}", file_path=str(file_path)) from e
    except (UnicodeDecodeError, OSError) as e:
        raise DeclarationLoadError(f"Failed to read {file_path}: {e}", file_path=str(file_path)) from e


def load_declarations(file_path: str | Path) -> Declarations:
    """
    Load a declarations document.

    Args:
        file_path: YAML or JSON file

    Returns:
        Declarations with templates, node config and optional settings

    Raises:
        DeclarationLoadError: If the file is missing, unparseable or malformed
    """
    data = _read_document(file_path)
    if not isinstance(data, dict):
        raise DeclarationLoadError("Declarations must be a mapping at root level", file_path=str(file_path))

    try:
        document = DeclarationFile.model_validate(data)
    except ValidationError as e:
        raise DeclarationLoadError(
            f"Invalid declarations in {file_path}",
            file_path=str(file_path),
            context={"errors": e.errors(include_url=False)},
        ) from e

    settings = PropertiesConfig.from_dict(document.settings) if document.settings else None
    return Declarations(properties=document.properties, config=document.config, settings=settings)


def load_events(file_path: str | Path) -> list[dict[str, Any]]:
    """
    Load an ordered list of events.

    Raises:
        DeclarationLoadError: If the file is not a list of mappings
    """
    data = _read_document(file_path)
    if not isinstance(data, list):
        raise DeclarationLoadError("Events must be a list", file_path=str(file_path))

    for index, event in enumerate(data):
        if not isinstance(event, dict):
            raise DeclarationLoadError(
                f"Event {index} is not a mapping", file_path=str(file_path), context={"index": index}
            )
    return data


def load_settings(file_path: str | Path) -> PropertiesConfig:
    """
    Load dispatch settings from a YAML or JSON mapping.

    Raises:
        DeclarationLoadError: If the file is missing, unparseable or not a mapping
        ConfigValidationError: If a setting has an invalid value
    """
    data = _read_document(file_path)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DeclarationLoadError("Settings must be a mapping at root level", file_path=str(file_path))
    return PropertiesConfig.from_dict(data)
