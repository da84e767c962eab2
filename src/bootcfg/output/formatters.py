"""Human/JSON output helpers for startup results.

The CLI reports the failed ServiceResult of the startup sequence. Humans
get a one-line ``ERROR: <stage> — <cause>``; ``--log-json`` callers get the
result serialized as JSON.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bootcfg.services.result import ServiceResult


def format_result(result: ServiceResult, *, json_output: bool = False) -> str:
    """Format a failed ServiceResult for display.

    Args:
        result: The stage result to format.
        json_output: If True, return JSON; otherwise return human-readable text.
    """
    if json_output:
        return _json.dumps(result.model_dump(mode="json"), indent=2, default=str)
    error_msg = result.error.message if result.error else "Unknown error"
    return f"ERROR: {result.op} — {error_msg}"
