"""
Naming utilities for code generation.

Handles word splitting, case conversion and approximate English
pluralization for resource and type names. All functions are pure.
"""

import re
from enum import Enum
from typing import Dict, List, Tuple


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_name
    CAMEL_CASE = "camel"  # userName
    PASCAL_CASE = "pascal"  # UserName
    KEBAB_CASE = "kebab"  # user-name
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


# Anything that is not a letter or digit separates words
_SEPARATOR_RE = re.compile(r"[^A-Za-z0-9]+")

# Acronym run before a capitalized word, capitalized/lowercase word, bare acronym
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z0-9]+|[A-Z]+[0-9]*")

# Every capital letter starts a word
_CAPITAL_RE = re.compile(r"[A-Z][a-z0-9]*|[a-z0-9]+")


def split_words(name: str) -> List[str]:
    """
    Split a name on separators and internal capitalization boundaries.

    Acronyms stay together ("HTTPServer" gives "HTTP", "Server"), and a
    chunk without lowercase letters is a single word ("V1BETA1").
    """
    words = []
    for chunk in _SEPARATOR_RE.split(name):
        if not chunk:
            continue
        if chunk == chunk.upper():
            words.append(chunk)
        else:
            words.extend(_WORD_RE.findall(chunk))
    return words


def _split_capitals(name: str) -> List[str]:
    # PascalCase output of single-letter words ("ABC") must split back the same way
    words = []
    for chunk in _SEPARATOR_RE.split(name):
        words.extend(_CAPITAL_RE.findall(chunk))
    return words


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def to_snake(name: str) -> str:
    """Convert to snake_case."""
    return "_".join(word.lower() for word in split_words(name))


def to_kebab(name: str) -> str:
    """Convert to kebab-case."""
    return "-".join(word.lower() for word in split_words(name))


def to_pascal(name: str) -> str:
    """Convert to PascalCase. Capital runs are kept ("HTTPServer")."""
    return "".join(_capitalize(word) for word in _split_capitals(name))


def to_camel(name: str) -> str:
    """Convert to camelCase. A leading capital run is lowered ("httpServer")."""
    words = _split_capitals(name)
    if not words:
        return ""

    # Lower the leading single letters together with the word that follows them
    head = 0
    while head < len(words) - 1 and len(words[head]) == 1:
        head += 1
    return "".join(words[: head + 1]).lower() + "".join(
        _capitalize(word) for word in words[head + 1 :]
    )


def to_screaming_snake(name: str) -> str:
    """Convert to SCREAMING_SNAKE_CASE."""
    return "_".join(word.upper() for word in split_words(name))


_CASE_CONVERTERS = {
    NamingCase.SNAKE_CASE: to_snake,
    NamingCase.CAMEL_CASE: to_camel,
    NamingCase.PASCAL_CASE: to_pascal,
    NamingCase.KEBAB_CASE: to_kebab,
    NamingCase.SCREAMING_SNAKE: to_screaming_snake,
}


def to_case(case: NamingCase, name: str) -> str:
    """
    Convert a name to the requested case style.

    Args:
        case: Target case style
        name: Name in any case style, may contain separators

    Returns:
        Converted name; empty input yields empty output
    """
    return _CASE_CONVERTERS[case](name)


# Resource collection nouns that pluralize to themselves
PLURAL_EXCEPTIONS: Dict[str, str] = {
    "functions": "functions",
    "services": "services",
    "resources": "resources",
    "policies": "policies",
    "deployments": "deployments",
    "configmaps": "configmaps",
    "secrets": "secrets",
    "endpoints": "endpoints",
    "namespaces": "namespaces",
    "nodes": "nodes",
    "pods": "pods",
    "volumes": "volumes",
    "events": "events",
    "jobs": "jobs",
    "cronjobs": "cronjobs",
    "ingresses": "ingresses",
    "classes": "classes",
    "databases": "databases",
    "caches": "caches",
    "queues": "queues",
    "processes": "processes",
    "addresses": "addresses",
    "responses": "responses",
    "requests": "requests",
    "statuses": "statuses",
    "data": "data",
    "metadata": "metadata",
    "widgets": "widgets",
}

# Nouns singularize() leaves alone
INVARIANT_NOUNS = frozenset({"data", "metadata"})

VOWELS = "aeiouAEIOU"

# (suffix, characters to drop, replacement), first match wins
PLURAL_RULES: Tuple[Tuple[str, int, str], ...] = (
    ("s", 0, "es"),
    ("x", 0, "es"),
    ("z", 0, "es"),
    ("ch", 0, "es"),
    ("sh", 0, "es"),
    ("y", 1, "ies"),
    ("f", 1, "ves"),
    ("fe", 2, "ves"),
)

SINGULAR_RULES: Tuple[Tuple[str, int, str], ...] = (
    ("ies", 3, "y"),
    ("ives", 3, "fe"),
    ("ves", 3, "f"),
    ("ses", 2, ""),
    ("xes", 2, ""),
    ("zes", 2, ""),
    ("ches", 2, ""),
    ("shes", 2, ""),
    ("ss", 0, ""),
    ("us", 0, ""),
    ("s", 1, ""),
)


def is_vowel(char: str) -> bool:
    """Check whether a single character is a vowel."""
    return len(char) == 1 and char in VOWELS


def _match_case(template: str, word: str) -> str:
    """Give ``word`` the case style of ``template``."""
    if template.isupper():
        return word.upper()
    if template[:1].isupper():
        return word[:1].upper() + word[1:]
    return word


def pluralize(word: str) -> str:
    """
    Return an approximate plural of a noun.

    Exception-table entries are fixed points. Everything else goes through
    PLURAL_RULES, falling back to appending "s".
    """
    if not word:
        return word

    exception = PLURAL_EXCEPTIONS.get(word.lower())
    if exception is not None:
        return _match_case(word, exception)

    lower = word.lower()
    for suffix, drop, replacement in PLURAL_RULES:
        if not lower.endswith(suffix):
            continue
        if suffix == "y" and len(word) > 1 and is_vowel(word[-2]):
            return word + "s"
        return word[: len(word) - drop] + replacement

    return word + "s"


def singularize(word: str) -> str:
    """
    Return an approximate singular of a noun.

    Only inverts PLURAL_RULES for regular nouns; exception-table plurals
    are not guaranteed to come back to their singular form.
    """
    if not word or word.lower() in INVARIANT_NOUNS:
        return word

    lower = word.lower()
    for suffix, drop, replacement in SINGULAR_RULES:
        if lower.endswith(suffix):
            return word[: len(word) - drop] + replacement

    return word


def wrap_comment(text: str, max_width: int = 80) -> str:
    """Wrap text into ``//`` comment lines no wider than ``max_width``."""
    if max_width <= 0:
        max_width = 80

    words = text.split()
    if not words:
        return ""

    lines = []
    current = "//"
    for word in words:
        if len(current) > 2 and len(current) + len(word) + 1 > max_width:
            lines.append(current)
            current = "//"
        current += " " + word
    lines.append(current)
    return "\n".join(lines)


def escape_go_string(value: str) -> str:
    """Flatten text into the body of a double-quoted Go string literal."""
    value = value.replace("\\", "\\\\").replace('"', '\\"')
    value = value.replace("\r", "").replace("\n", " ").replace("\t", " ")
    return " ".join(value.split())


_GO_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def quote_go_string(value: str) -> str:
    """Double-quoted Go string literal holding exactly ``value``."""
    parts = []
    for char in value:
        if char in _GO_ESCAPES:
            parts.append(_GO_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            parts.append(f"\\u{ord(char):04x}")
        else:
            parts.append(char)
    return '"' + "".join(parts) + '"'
