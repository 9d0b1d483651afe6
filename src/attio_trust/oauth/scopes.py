#!/usr/bin/env python3
"""
Attio Trust - Scope Algebra Module

Validation, hierarchy expansion/minimization and sufficiency checks over
``"resource:operation"`` scope strings. The registry and hierarchy are
module-level constants and cannot be changed at runtime.
"""

from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Optional, Union

from ..core.errors import InvalidScopeError


class Scope(str, Enum):
    """Every scope the authorization server knows about."""

    RECORD_READ = "record:read"
    RECORD_WRITE = "record:write"
    OBJECT_READ = "object:read"
    OBJECT_WRITE = "object:write"
    LIST_READ = "list:read"
    LIST_WRITE = "list:write"
    WEBHOOK_READ = "webhook:read"
    WEBHOOK_WRITE = "webhook:write"
    USER_READ = "user:read"
    NOTE_READ = "note:read"
    NOTE_WRITE = "note:write"
    ATTRIBUTE_READ = "attribute:read"
    ATTRIBUTE_WRITE = "attribute:write"
    COMMENT_READ = "comment:read"
    COMMENT_WRITE = "comment:write"
    TASK_READ = "task:read"
    TASK_WRITE = "task:write"


# Scope registry with descriptions
SCOPE_DEFINITIONS = MappingProxyType({
    # Records
    "record:read": "Read access to records",
    "record:write": "Write access to records (includes read)",

    # Objects
    "object:read": "Read access to objects and their configuration",
    "object:write": "Write access to objects (includes read)",

    # Lists
    "list:read": "Read access to lists and list entries",
    "list:write": "Write access to lists (includes read)",

    # Webhooks
    "webhook:read": "Read access to webhooks",
    "webhook:write": "Write access to webhooks (includes read)",

    # Workspace members (read only)
    "user:read": "Read access to workspace members",

    # Notes
    "note:read": "Read access to notes",
    "note:write": "Write access to notes (includes read)",

    # Attributes
    "attribute:read": "Read access to attributes",
    "attribute:write": "Write access to attributes (includes read)",

    # Comments
    "comment:read": "Read access to comments",
    "comment:write": "Write access to comments (includes read)",

    # Tasks
    "task:read": "Read access to tasks",
    "task:write": "Write access to tasks (includes read)"
})

VALID_SCOPES = frozenset(SCOPE_DEFINITIONS)

# Write scopes imply the matching read scope
SCOPE_HIERARCHY = MappingProxyType({
    "record:write": ("record:read",),
    "object:write": ("object:read",),
    "list:write": ("list:read",),
    "webhook:write": ("webhook:read",),
    "note:write": ("note:read",),
    "attribute:write": ("attribute:read",),
    "comment:write": ("comment:read",),
    "task:write": ("task:read",)
})

# Requested when an authorization URL is built without explicit scopes
DEFAULT_SCOPES = (
    "record:read",
    "record:write",
    "object:read",
    "object:write",
    "list:read",
    "list:write",
    "webhook:read",
    "webhook:write",
    "user:read",
)

ScopeLike = Union[str, Scope]


def _to_str(scope: ScopeLike) -> str:
    if isinstance(scope, Enum):
        return str(scope.value)
    return str(scope)


def normalize(scopes: Union[None, ScopeLike, Iterable[ScopeLike]]) -> List[str]:
    """Coerce None, a single scope, or an iterable of scopes into a list of strings.

    A single string is treated as one scope, not split.
    """
    if scopes is None:
        return []
    if isinstance(scopes, (str, Enum)):
        return [_to_str(scopes)]
    return [_to_str(scope) for scope in scopes]


def validate(scopes) -> List[str]:
    """Return the scopes as strings in input order.

    Raises:
        InvalidScopeError: listing every scope missing from the registry, in input order.
    """
    normalized = normalize(scopes)
    invalid = [scope for scope in normalized if scope not in VALID_SCOPES]
    if invalid:
        raise InvalidScopeError(invalid)
    return normalized


def is_valid(scope: ScopeLike) -> bool:
    return _to_str(scope) in VALID_SCOPES


def description(scope: ScopeLike) -> Optional[str]:
    return SCOPE_DEFINITIONS.get(_to_str(scope))


def expand(scopes) -> List[str]:
    """Add every scope implied by the hierarchy. Sorted and de-duplicated."""
    normalized = normalize(scopes)
    expanded = set(normalized)
    for scope in normalized:
        expanded.update(SCOPE_HIERARCHY.get(scope, ()))
    return sorted(expanded)


def minimize(scopes) -> List[str]:
    """Drop scopes already implied by another scope in the set. Sorted and de-duplicated."""
    minimized = set(normalize(scopes))
    for write_scope, implied in SCOPE_HIERARCHY.items():
        if write_scope in minimized:
            minimized.difference_update(implied)
    return sorted(minimized)


def includes(scopes, required_scope: ScopeLike) -> bool:
    """Check whether a scope set grants ``required_scope``, directly or via the hierarchy."""
    normalized = normalize(scopes)
    required = _to_str(required_scope)

    if required in normalized:
        return True

    return any(required in SCOPE_HIERARCHY.get(scope, ()) for scope in normalized)


def group_by_resource(scopes) -> Dict[str, List[str]]:
    """Group scopes by the resource before ``:``, keeping input order within each group."""
    grouped: Dict[str, List[str]] = {}
    for scope in normalize(scopes):
        resource = scope.split(":", 1)[0]
        grouped.setdefault(resource, []).append(scope)
    return grouped


def sufficient_for(scopes, resource: str, operation: str) -> bool:
    """Check if scopes allow ``operation`` on ``resource``."""
    return f"{resource}:{operation}" in expand(scopes)


def missing(scopes, required) -> List[str]:
    """Required scopes not granted by ``scopes``, in required order."""
    granted = expand(scopes)
    return [scope for scope in normalize(required) if scope not in granted]
