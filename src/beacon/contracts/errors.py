"""Exception taxonomy for collection and computed-fact resolution.

None of these are retried internally. They propagate to the immediate
caller, which decides whether the whole run should be retried.

Transport failures (command rejected, connection lost) are NOT wrapped:
whatever the ProtocolSession raises reaches the caller unchanged.
"""

from typing import Any


class LifecycleError(Exception):
    """Raised when collection methods are invoked out of order.

    Always a caller/orchestrator bug. Never retried.

    Attributes:
        owner: Name of the collector (or buffer owner) that rejected the call
        operation: The method that was called
        phase: Lifecycle phase the owner was in when the call arrived
    """

    def __init__(self, owner: str, operation: str, phase: str, *, detail: str | None = None) -> None:
        self.owner = owner
        self.operation = operation
        self.phase = phase
        message = f"{owner}: cannot call {operation}() while {phase}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class FactResolutionError(Exception):
    """Base class for computed facts that cannot be resolved from their inputs."""


class MainResourceNotFound(FactResolutionError):
    """Raised in navigation mode when no document request matches the target URL.

    In timespan mode the same condition is NOT an error: the MainResource fact
    resolves to NotApplicable instead.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Unable to identify the main resource for {url}")


class ComputedFactCycleError(Exception):
    """Raised when a computed fact (transitively) requests itself.

    Awaiting our own pending entry would never complete, so the request
    fails fast instead of deadlocking the run.
    """

    def __init__(self, kind: str, chain: tuple[str, ...]) -> None:
        self.kind = kind
        self.chain = chain
        super().__init__(f"Computed fact {kind} requested itself: {' -> '.join((*chain, kind))}")


class DependencyGraphError(Exception):
    """Raised when collector dependencies cannot be ordered.

    Causes: a collector depends on an artifact no enabled collector produces,
    or the dependencies form a cycle.
    """


class ArtifactAlreadyRecordedError(Exception):
    """Raised when a second artifact is stored under an existing name."""

    def __init__(self, name: str, existing: Any) -> None:
        self.name = name
        self.existing = existing
        super().__init__(f"Artifact '{name}' was already recorded for this run")


class PageEvaluationError(Exception):
    """Raised when an in-page expression throws instead of returning a value.

    The command itself succeeded at the transport level; the page reported an
    exception (``exceptionDetails`` in the reply).
    """

    def __init__(self, expression_name: str, details: Any) -> None:
        self.expression_name = expression_name
        self.details = details
        super().__init__(f"Page expression '{expression_name}' threw: {details}")
