#!/usr/bin/env python3
"""
Attio Trust - Scope Guard Module

Decorator that refuses to run a callable unless the Token it receives grants
the required scope (write scopes satisfy read requirements).
"""

import functools
from typing import Callable, Optional

from ..core.errors import ArgumentError, InsufficientScopeError
from ..core.logging_utils import get_logger
from .token import Token


def _find_token(args, kwargs) -> Optional[Token]:
    token = kwargs.get("token")
    if isinstance(token, Token):
        return token
    for arg in args:
        if isinstance(arg, Token):
            return arg
    return None


def requires_scope(resource: str, operation: str):
    """Decorator to enforce a ``resource:operation`` scope on the Token argument.

    The Token is taken from the ``token`` keyword argument, or else the first
    positional argument that is a Token.

    Raises:
        InsufficientScopeError: if the token does not grant the scope.
        ArgumentError: if the call carries no Token.
    """
    required = f"{resource}:{operation}"

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(f"scope.{func.__name__}")
            token = _find_token(args, kwargs)

            if token is None:
                raise ArgumentError(f"'{func.__name__}' requires a Token argument for scope '{required}'")

            if not token.sufficient_for(resource, operation):
                logger.warning(f"Scope '{required}' not granted for '{func.__name__}' (granted: {' '.join(token.scope) or 'none'})")
                raise InsufficientScopeError(required, token.scope)

            return func(*args, **kwargs)

        wrapper.required_scope = required
        return wrapper
    return decorator
