"""
Diagnostic taxonomy for the LogicFlow engine.

Every user-input failure is a ``LogicError``. They are recoverable by fixing
the formula text or the declared variables; none of them indicate a fault in
the engine itself.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple


class LogicError(ValueError):
    """Base class for formula diagnostics."""

    code = "LogicError"

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (position {self.position + 1})"


class EmptyExpression(LogicError):
    """Raised when the formula contains no tokens at all."""

    code = "EmptyExpression"

    def __init__(self, message: str = "Please enter an expression.", position: Optional[int] = None) -> None:
        super().__init__(message, position)


class UnknownSymbol(LogicError):
    code = "UnknownSymbol"


class AdjacentOperators(LogicError):
    code = "AdjacentOperators"


class MissingOperator(LogicError):
    code = "MissingOperator"


class EmptyGroup(LogicError):
    code = "EmptyGroup"


class BracketMismatch(LogicError):
    code = "BracketMismatch"


class UnclosedBracket(LogicError):
    code = "UnclosedBracket"


class IncompleteExpression(LogicError):
    code = "IncompleteExpression"


class UndeclaredVariable(LogicError):
    """Raised when the formula references variables outside the declared set."""

    code = "UndeclaredVariable"

    def __init__(self, names: Iterable[str]) -> None:
        self.names: Tuple[str, ...] = tuple(names)
        super().__init__(f"Undeclared: {', '.join(self.names)}")


class ParseFailure(LogicError):
    """Catch-all for token sequences the validator let through."""

    code = "ParseFailure"


class NestingTooDeep(LogicError):
    """Raised when brackets or negations nest deeper than the interpreter stack allows."""

    code = "NestingTooDeep"

    def __init__(self, message: str = "Formula nests too deeply to analyze.", position: Optional[int] = None) -> None:
        super().__init__(message, position)


class ProofSearchError(RuntimeError):
    """
    Raised when the tableau search cannot finish.

    This happens only for pathological formulas whose branch nesting
    exceeds the interpreter recursion limit.
    """
    pass


class ConfigError(Exception):
    """Raised when a settings file is missing required structure."""
    pass


__all__ = [
    "LogicError",
    "EmptyExpression",
    "UnknownSymbol",
    "AdjacentOperators",
    "MissingOperator",
    "EmptyGroup",
    "BracketMismatch",
    "UnclosedBracket",
    "IncompleteExpression",
    "UndeclaredVariable",
    "ParseFailure",
    "NestingTooDeep",
    "ProofSearchError",
    "ConfigError",
]
