"""Dialogue engine SLI metrics for Prometheus.

4 SLI metrics:
1. dialogue_turn_duration_seconds  -- Full process_input latency
2. dialogue_turns_total            -- Conversation-path turns (label: intent)
3. dialogue_commands_total         -- Intercepted slash commands (label: command)
4. dialogue_pattern_hits_total     -- Winning pattern rule (label: rule)
"""

from __future__ import annotations

import time
from collections.abc import Generator  # noqa: TC003 -- used at runtime by contextmanager
from contextlib import contextmanager

from prometheus_client import CollectorRegistry, Counter, Histogram

# Rule-based turns are sub-millisecond; buckets from 0.1ms to 100ms.
_LATENCY_BUCKETS = (0.0001, 0.00025, 0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1)


def _histogram(
    name: str,
    documentation: str,
    registry: CollectorRegistry | None,
) -> Histogram:
    """Create a Histogram with optional registry."""
    if registry is not None:
        return Histogram(name, documentation, buckets=_LATENCY_BUCKETS, registry=registry)
    return Histogram(name, documentation, buckets=_LATENCY_BUCKETS)


def _counter(
    name: str,
    documentation: str,
    labelnames: list[str],
    registry: CollectorRegistry | None,
) -> Counter:
    """Create a Counter with optional registry."""
    if registry is not None:
        return Counter(name, documentation, labelnames, registry=registry)
    return Counter(name, documentation, labelnames)


class DialogueSLI:
    """Central registry for dialogue SLI metrics.

    Pass a custom CollectorRegistry for testing isolation.
    In production, use the default global registry (registry=None) and build
    exactly one instance per process: every engine shares it.
    """

    def __init__(self, *, registry: CollectorRegistry | None = None) -> None:
        self.turn_duration = _histogram(
            "dialogue_turn_duration_seconds",
            "Time spent processing one user utterance",
            registry,
        )

        self.turns = _counter(
            "dialogue_turns_total",
            "Conversation-path turns by classified intent",
            ["intent"],
            registry,
        )

        self.commands = _counter(
            "dialogue_commands_total",
            "Slash commands intercepted",
            ["command"],
            registry,
        )

        self.pattern_hits = _counter(
            "dialogue_pattern_hits_total",
            "Winning pattern rule per turn",
            ["rule"],
            registry,
        )

    @contextmanager
    def timer(self, histogram: Histogram) -> Generator[None, None, None]:
        """Context manager that observes elapsed time on a histogram.

        Duration is always recorded, even if the block raises an exception.
        """
        start = time.monotonic()
        try:
            yield
        finally:
            histogram.observe(time.monotonic() - start)
