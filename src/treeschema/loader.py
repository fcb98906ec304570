"""Loading of schemas and data documents for the command line."""

import importlib
import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def load_schema(reference: str) -> Any:
    """Load a raw schema from a JSON file or a ``module:attribute`` reference.

    Schemas that carry validators or transformers can only live in Python
    code, so they are imported; callable-free schemas may be stored as JSON.

    Args:
        reference: Path to a ``.json`` file, or ``package.module:attribute``

    Returns:
        Raw schema value (not yet self-validated)

    Raises:
        FileNotFoundError: If a JSON schema file does not exist
        ValueError: If the reference cannot be resolved or parsed
    """
    if reference.endswith(".json") or Path(reference).is_file():
        return load_json(Path(reference))

    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Schema reference must be a .json file or 'module:attribute', got: {reference}")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import schema module '{module_name}': {e}")

    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise ValueError(f"Module '{module_name}' has no attribute '{attribute}'")

    if callable(target):
        target = target()

    logger.debug(f"Loaded schema from {reference}")
    return target


def load_json(path: Path) -> Any:
    """Load a JSON document.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}")


def save_json(path: Path, data: Any) -> None:
    """Write a JSON document, used to persist transformed data."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
    logger.debug(f"Saved {path}")
