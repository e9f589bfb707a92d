"""Observability helpers for instrumenting matching pipeline stages."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from pydantic import BaseModel, ValidationError

from match_app.logging_config import ensure_correlation_id, get_logger, log_event, redact_for_log

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def instrument_stage(
    stage_name: str,
    input_model: type[BaseModel] | None = None,
    on_validation_error: Callable[[ValidationError], R] | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Wrap a pipeline stage with structured start/complete/fail logs.

    When ``input_model`` is given, keyword arguments are validated against it
    and the stage receives the validated, dumped values. Failures inside the
    stage are logged and re-raised.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            start = time.perf_counter()

            if input_model:
                try:
                    kwargs = input_model.model_validate(kwargs).model_dump()
                except ValidationError as exc:
                    log_event(
                        LOGGER,
                        logging.WARNING,
                        "stage_validation_failed",
                        stage=stage_name,
                        correlation_id=correlation_id,
                        error_count=exc.error_count(),
                        locations=redact_for_log([list(error["loc"]) for error in exc.errors()]),
                    )
                    if on_validation_error:
                        return on_validation_error(exc)
                    raise

            log_event(LOGGER, logging.DEBUG, "stage_started", stage=stage_name, correlation_id=correlation_id)
            try:
                result = func(*args, **kwargs)
            except Exception:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "stage_failed",
                    stage=stage_name,
                    correlation_id=correlation_id,
                    duration_ms=_elapsed_ms(start),
                    exc_info=True,
                )
                raise
            log_event(
                LOGGER,
                logging.INFO,
                "stage_completed",
                stage=stage_name,
                correlation_id=correlation_id,
                duration_ms=_elapsed_ms(start),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_stage"]
