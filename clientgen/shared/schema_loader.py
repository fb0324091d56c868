"""Schema document loading for local files and remote URLs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import requests
import yaml
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import SchemaError
from .log import get_logger

logger = get_logger("loader")

# Some servers wrap generic type names in guillemets
_STRIPPED_CHARACTERS = ("«", "»")


def _clean(raw: str) -> str:
    for char in _STRIPPED_CHARACTERS:
        raw = raw.replace(char, "")
    return raw


def parse_document(raw: str, source: str, *, prefer_yaml: bool = False) -> dict[str, Any]:
    """Parse raw JSON or YAML text into a schema document.

    JSON is tried first unless ``prefer_yaml`` is set; YAML is a superset of
    JSON, so it is the fallback either way.

    Raises:
        SchemaError: If the text cannot be parsed or its root is not a mapping.
    """
    raw = _clean(raw)
    data: Any
    try:
        if prefer_yaml:
            data = yaml.safe_load(raw)
        else:
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise SchemaError(f"Invalid document: {e}", source) from e

    if not isinstance(data, dict):
        raise SchemaError("Schema root must be a mapping", source)
    return data


def load_schema(schema_path: Path) -> dict[str, Any]:
    """Load a schema document from a JSON or YAML file.

    Args:
        schema_path: Path to the schema file.

    Returns:
        The parsed schema dictionary.

    Raises:
        SchemaError: If the file cannot be read or parsed.
    """
    try:
        content = schema_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaError(f"Failed to read schema file: {e}", str(schema_path)) from e

    prefer_yaml = schema_path.suffix.lower() in {".yml", ".yaml"}
    return parse_document(content, str(schema_path), prefer_yaml=prefer_yaml)


def _session(retries: int) -> requests.Session:
    session = requests.Session()
    policy = Retry(total=retries, backoff_factor=0.5, status_forcelist=(500, 502, 503, 504))
    adapter = HTTPAdapter(max_retries=policy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def fetch_schema(url: str, *, timeout: float = 10.0, retries: int = 3) -> dict[str, Any]:
    """Fetch a schema document over HTTP(S).

    Uses urllib3 Retry via requests.adapters.HTTPAdapter.

    Raises:
        SchemaError: If the request fails or the body is not a schema document.
    """
    logger.debug("Fetching schema document from %s", url)
    try:
        resp = _session(retries).get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise SchemaError(f"Failed to fetch schema document: {e}", url) from e

    return parse_document(resp.text, url)


def load_document(source: str | Path) -> dict[str, Any]:
    """Load a schema document from a path or an http(s) URL."""
    text = str(source)
    if text.startswith(("http://", "https://")):
        return fetch_schema(text)
    return load_schema(Path(source))
