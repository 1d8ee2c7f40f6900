"""Exceptions raised by the selection pipeline."""

from __future__ import annotations

from typing import Any


class SelectionError(RuntimeError):
    """Base class for fatal motor selection failures."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}

    def __str__(self) -> str:
        base = super().__str__()
        if not self.context:
            return base
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{base} ({details})"


class InfeasibleSelectionError(SelectionError):
    """The oracle found no usable assignment where one is required.

    Raised for the primary solve and for the refinement at the frontier. The
    context carries the solve stage, termination status, objective value (if
    any) and the slot states.
    """


class DecodeError(SelectionError):
    """A selected feature column matches no motor in the catalog.

    This means the catalog and the feature matrix are out of sync, or the
    decode tolerance is too tight for the ratios in use.
    """
