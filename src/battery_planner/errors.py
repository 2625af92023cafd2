"""
Exception hierarchy for battery-planner.

Every stage wraps the error it cannot handle in one of these classes with
``raise ... from exc``, so the operator sees the whole chain of context.
"""

from typing import List


class PlannerError(Exception):
    """Base class for all battery-planner errors."""


class InvalidInput(PlannerError, ValueError):
    """A battery operation was called with an invalid argument."""


class ValidationError(PlannerError, ValueError):
    """An input record or configuration value is out of range."""


class ReadError(PlannerError, OSError):
    """An input file could not be read."""


class ConfigNotFoundError(ReadError):
    """No configuration file could be located."""


class ParseError(PlannerError, ValueError):
    """An input file could be read but not parsed."""


class WriteError(PlannerError, OSError):
    """The plan could not be persisted."""


class PlanningError(PlannerError):
    """The dispatch pass was aborted."""


class RunError(PlannerError):
    """A stage of the command-line run failed."""


def error_chain(exc: BaseException) -> List[BaseException]:
    """Return ``exc`` followed by each exception it was raised from."""
    chain = []
    seen = set()
    current = exc
    while current is not None and id(current) not in seen:
        chain.append(current)
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return chain


def format_error_chain(exc: BaseException) -> str:
    """
    Render an exception chain for the operator.

    The outermost message comes first, followed by a numbered
    ``Caused by:`` list of the underlying errors.
    """
    chain = error_chain(exc)
    lines = [f"Error: {chain[0]}"]
    if len(chain) > 1:
        lines.append("")
        lines.append("Caused by:")
        for i, cause in enumerate(chain[1:]):
            message = str(cause) or type(cause).__name__
            lines.append(f"    {i}: {message}")
    return "\n".join(lines)
