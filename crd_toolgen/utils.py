"""Utility functions for loading CRD documents and documentation.

This module provides functions for loading CustomResourceDefinitions from
YAML/JSON files and directories, and documentation text from files and
URLs, with proper error handling.
"""

import json
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests
import yaml

from .codegen.core.crd import is_crd_document
from .codegen.core.errors import ToolgenError
from .logging_config import get_logger

logger = get_logger(__name__)

CRD_FILE_SUFFIXES = (".yaml", ".yml", ".json")


class LoaderError(ToolgenError):
    """Custom exception for CRD and documentation loading errors."""

    pass


def _parse_documents(file_path: Path, text: str) -> list[Any]:
    if file_path.suffix.lower() == ".json":
        return [json.loads(text)]
    return [doc for doc in yaml.safe_load_all(text) if doc is not None]


def _expand_lists(documents: list[Any]) -> list[Any]:
    """Flatten ``kind: List`` wrappers as produced by ``kubectl get -o yaml``."""
    expanded = []
    for document in documents:
        if isinstance(document, dict) and document.get("kind") == "List":
            expanded.extend(document.get("items") or [])
        else:
            expanded.append(document)
    return expanded


def load_crd_file(file_path: str | Path) -> list[dict[str, Any]]:
    """Load every CustomResourceDefinition from a YAML or JSON file.

    Multi-document YAML is supported; documents that are not CRDs are skipped.

    Args:
        file_path: Path to the file.

    Returns:
        CRD documents in file order.

    Raises:
        LoaderError: If the file is missing, unreadable or not valid YAML/JSON.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to load CRDs from file: {file_path}")

    if not file_path.is_file():
        logger.error(f"File not found: {file_path}")
        raise LoaderError(f"File not found: {file_path}")

    try:
        text = file_path.read_text(encoding="utf-8")
        documents = _expand_lists(_parse_documents(file_path, text))
    except json.JSONDecodeError as e:
        raise LoaderError(f"Invalid JSON in file {file_path}: {e}") from e
    except yaml.YAMLError as e:
        raise LoaderError(f"Invalid YAML in file {file_path}: {e}") from e
    except OSError as e:
        raise LoaderError(f"Error reading file {file_path}: {e}") from e

    crds = []
    for index, document in enumerate(documents):
        if is_crd_document(document):
            crds.append(document)
        else:
            kind = document.get("kind") if isinstance(document, dict) else None
            logger.debug(f"Skipping document {index} in {file_path}: kind {kind!r}")

    logger.info(f"Loaded {len(crds)} CRD(s) from {file_path}")
    return crds


def find_crd_files(directory: str | Path) -> list[Path]:
    """Find YAML and JSON files below a directory, sorted by path.

    Raises:
        LoaderError: If the directory does not exist.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise LoaderError(f"Directory not found: {directory}")

    return sorted(
        path
        for path in directory.rglob("*")
        if path.is_file() and path.suffix.lower() in CRD_FILE_SUFFIXES
    )


def load_crd_documents(path: str | Path) -> list[tuple[str, dict[str, Any]]]:
    """Load CRDs from a file or every matching file below a directory.

    Returns:
        List of (source description, CRD document) pairs in path order.

    Raises:
        LoaderError: If the path does not exist or a file cannot be parsed.
    """
    path = Path(path)
    files = find_crd_files(path) if path.is_dir() else [path]

    loaded = []
    for file_path in files:
        for document in load_crd_file(file_path):
            loaded.append((str(file_path), document))
    return loaded


def is_url(source: str) -> bool:
    """Whether a source string is an HTTP(S) URL."""
    parsed = urlparse(source)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def load_documentation_from_url(url: str, timeout: int = 30) -> str:
    """Fetch documentation text from a URL.

    Raises:
        LoaderError: If the request fails.
    """
    logger.debug(f"Attempting to load documentation from URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        logger.error(f"Request timeout for URL: {url}")
        raise LoaderError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error for URL {url}: {e}")
        raise LoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "unknown"
        logger.error(f"HTTP error {status} for URL: {url}")
        raise LoaderError(f"HTTP error {status} for URL: {url}") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}")
        raise LoaderError(f"Request error for URL {url}: {e}") from e

    logger.info(f"Successfully loaded documentation from {url}")
    return response.text


def load_documentation(source: str | Path, timeout: int = 30) -> str:
    """Load documentation text from a local file or an HTTP(S) URL.

    Args:
        source: File path or URL.
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Documentation text.

    Raises:
        LoaderError: If the source cannot be read.
    """
    if isinstance(source, str) and is_url(source):
        return load_documentation_from_url(source, timeout)

    file_path = Path(source)
    if not file_path.is_file():
        logger.error(f"Documentation file not found: {file_path}")
        raise LoaderError(f"Documentation file not found: {file_path}")

    try:
        return file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise LoaderError(f"Error reading documentation file {file_path}: {e}") from e
