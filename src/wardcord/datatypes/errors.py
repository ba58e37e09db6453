"""
Exceptions raised by the moderation core.

Expected outcomes (a refused interaction, a missing target, a bad setting
value) are returned as values and never show up here. These classes cover
backend faults and misuse only.
"""

from __future__ import annotations


class GatewayError(Exception):
    """An external capability (lookup, mutation, dispatch) failed.

    The platform exception, when there is one, is chained as ``__cause__``.
    """


class MissingDataError(GatewayError):
    """Already-fetched data cannot resolve an identifier."""


class PipelineError(Exception):
    """A moderation action aborted on a hard error.

    Attributes:
        stage: Name of the pipeline stage that failed.
    """

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"{stage}: {message}")
        self.stage = stage


class AuditRenderError(Exception):
    """An audit record could not be rendered into a message."""


class ProfilerProtocolError(RuntimeError):
    """Profiler push/pop calls are mismatched."""
