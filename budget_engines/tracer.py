"""
budget_engines.tracer -- BUDGET_ENGINE_TRACE records for engine runs.

``@traced_engine`` wraps an engine entry point and, once it returns, logs
one record naming the engine and its version, how long the run took and
a fingerprint of the configuration it ran with. Two runs with the same
fingerprint were given the same targets and rates, which is what to look
for when two allocation runs disagree.

The fingerprint covers only the keyword arguments named in
``fingerprint_fields``. Each is rendered as canonical JSON (dataclasses
through ``asdict``, keys sorted) and the SHA-256 of the result is cut to
16 hex characters. The transaction sequence is never fingerprinted; it
is mutated by the run and can be large.
"""

from __future__ import annotations

import functools
import hashlib
import json
import time
from collections.abc import Callable
from dataclasses import asdict, is_dataclass
from typing import Any

from budget_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")


def _canonical_json(value: Any) -> str:
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    kwargs: dict[str, Any],
) -> str:
    """16-hex SHA-256 prefix over the selected kwargs; absent ones count as null."""
    canonical = "|".join(
        f"{name}={_canonical_json(kwargs.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Log a BUDGET_ENGINE_TRACE record after each successful call."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = compute_input_fingerprint(fingerprint_fields, kwargs)
            t0 = time.monotonic()
            result = func(*args, **kwargs)

            _logger.info("BUDGET_ENGINE_TRACE", extra={
                "trace_type": "BUDGET_ENGINE_TRACE",
                "engine_name": engine_name,
                "engine_version": engine_version,
                "input_fingerprint": fingerprint,
                "duration_ms": round((time.monotonic() - t0) * 1000, 2),
                "function": func.__qualname__,
            })
            return result

        return wrapper

    return decorator
