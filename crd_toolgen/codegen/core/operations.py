"""
CRUD operation selection.

Expands the compact ``--crud`` token string (``c``, ``r``, ``u``, ``d``)
into the ordered list of operations to generate.
"""

from typing import Dict, Iterable, Optional, Tuple

from ...logging_config import get_logger
from .errors import ValidationError

logger = get_logger(__name__)

ALL_OPERATIONS: Tuple[str, ...] = ("create", "get", "list", "update", "delete")

OPERATION_TOKENS: Dict[str, Tuple[str, ...]] = {
    "c": ("create",),
    "r": ("get", "list"),
    "u": ("update",),
    "d": ("delete",),
}


def expand_operations(tokens: str) -> Tuple[str, ...]:
    """
    Expand a token string into operation names.

    Args:
        tokens: Characters from ``c``, ``r``, ``u``, ``d``, each at most once

    Returns:
        Operations in token order, ``r`` contributing ``get`` then ``list``

    Raises:
        ValidationError: Empty string, unknown or repeated character
    """
    if tokens == "":
        raise ValidationError("CRUD operations cannot be empty")

    valid = ", ".join(OPERATION_TOKENS)
    seen = set()
    for char in tokens:
        if char not in OPERATION_TOKENS:
            raise ValidationError(
                f"invalid character '{char}', valid characters are: {valid}"
            )
        if char in seen:
            raise ValidationError(f"duplicate character '{char}' in CRUD operations")
        seen.add(char)

    operations = []
    for char in tokens:
        for operation in OPERATION_TOKENS[char]:
            if operation not in operations:
                operations.append(operation)
    return tuple(operations)


def resolve_operations(tokens: Optional[str]) -> Tuple[str, ...]:
    """Expand ``tokens``; an omitted selection means every operation."""
    if tokens is None:
        return ALL_OPERATIONS
    operations = expand_operations(tokens)
    logger.debug("Selected operations %s from '%s'", ", ".join(operations), tokens)
    return operations


def validate_operation_names(names: Iterable[str]) -> Tuple[str, ...]:
    """
    Check explicit operation names and drop repeats, keeping first-seen order.

    Raises:
        ValidationError: Unknown operation name
    """
    operations = []
    for name in names:
        if name not in ALL_OPERATIONS:
            raise ValidationError(
                f"unknown operation '{name}', valid operations are: "
                f"{', '.join(ALL_OPERATIONS)}"
            )
        if name not in operations:
            operations.append(name)
    return tuple(operations)
