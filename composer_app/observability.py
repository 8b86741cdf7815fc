"""Observability helpers for instrumenting engine entry points."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, Mapping, ParamSpec, TypeVar

from pydantic import BaseModel, ValidationError

from composer_app.logging_config import (
    ensure_correlation_id,
    get_logger,
    log_event,
    operation_context,
    redact_for_log,
)

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")

_PREVIEW_KEYS = 6
_PREVIEW_LIST = 5


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def _preview_kwargs(kwargs: Mapping[str, Any]) -> Dict[str, Any]:
    """Summarise call arguments; whole inventories collapse to their size."""

    preview: Dict[str, Any] = {}
    for key, value in list(kwargs.items())[:_PREVIEW_KEYS]:
        if isinstance(value, (list, tuple)) and len(value) > _PREVIEW_LIST:
            preview[key] = f"<{len(value)} entries>"
        elif isinstance(value, BaseModel):
            preview[key] = type(value).__name__
        else:
            preview[key] = value
    if len(kwargs) > _PREVIEW_KEYS:
        preview["truncated"] = True
    return redact_for_log(preview)


def _summarise_result(result: Any) -> Dict[str, Any]:
    if not isinstance(result, Mapping):
        return {}
    summary: Dict[str, Any] = {"status": result.get("status")}
    if isinstance(result.get("outfits"), list):
        summary["outfit_count"] = len(result["outfits"])
    return summary


def instrument_operation(
    operation: str,
    input_model: type[BaseModel] | None = None,
    on_validation_error: Callable[[ValidationError], R] | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Wrap an engine entry point with request validation and structured events.

    With ``input_model`` the keyword arguments are validated first and the
    wrapped function receives the model as ``request``. A failed validation is
    handed to ``on_validation_error`` when given, and re-raised otherwise.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            start = time.perf_counter()
            log_event(
                LOGGER,
                logging.INFO,
                "operation_started",
                operation=operation,
                correlation_id=correlation_id,
                kwargs=_preview_kwargs(kwargs),
            )

            if input_model is not None:
                try:
                    kwargs = {"request": input_model.model_validate(kwargs)}
                except ValidationError as exc:
                    log_event(
                        LOGGER,
                        logging.WARNING,
                        "operation_validation_failed",
                        operation=operation,
                        correlation_id=correlation_id,
                        error_count=exc.error_count(),
                        errors=exc.errors(include_url=False, include_input=False),
                    )
                    if on_validation_error is None:
                        raise
                    return on_validation_error(exc)

            with operation_context(operation, correlation_id=correlation_id):
                try:
                    result = func(*args, **kwargs)
                except Exception:
                    log_event(
                        LOGGER,
                        logging.ERROR,
                        "operation_failed",
                        operation=operation,
                        correlation_id=correlation_id,
                        duration_ms=_elapsed_ms(start),
                        exc_info=True,
                    )
                    raise
            log_event(
                LOGGER,
                logging.INFO,
                "operation_completed",
                operation=operation,
                correlation_id=correlation_id,
                duration_ms=_elapsed_ms(start),
                **_summarise_result(result),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_operation"]
