"""Synthetic IDs for phases, tasks and placeholder team members."""

from __future__ import annotations

import hashlib
import os
import time


def generate_call_token() -> str:
    """
    Generate a short random token scoping IDs to one parse call.

    Format: 6 hex chars hashed from a high-precision timestamp and random bytes.
    """
    data = f"{time.time_ns()}{os.urandom(8).hex()}"
    return hashlib.sha256(data.encode()).hexdigest()[:6]


class IdGenerator:
    """
    Monotonic counter combined with a call-scoped random suffix.

    IDs are unique within one generator; two generators (two parse calls)
    will almost always differ but uniqueness across calls is not required.

    Example:
        ids = IdGenerator()
        ids.next("phase")  # "phase-3fa91c-1"
        ids.next("task")   # "task-3fa91c-2"
    """

    def __init__(self, token: str | None = None) -> None:
        self.token = token or generate_call_token()
        self._counter = 0

    def next(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}-{self.token}-{self._counter}"
