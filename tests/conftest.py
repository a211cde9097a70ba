# tests/conftest.py
"""Shared test fixtures and helpers.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/

Collectors are instantiated directly in tests. The production path goes
through CollectorManager and GatherOrchestrator, which are tested separately.
"""

from __future__ import annotations

import os
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

from beacon.contracts.enums import GatherMode, IssueCategory
from beacon.engine.context import CollectionContext, RunContext
from beacon.gather.collectors.inspector_issues import ISSUE_ADDED
from beacon.gather.manager import CollectorManager
from beacon.testing import FakeSession, make_issue_params, make_request_events

TARGET_URL = "https://example.com/"


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def make_run(session: FakeSession) -> Callable[..., RunContext]:
    """Factory for a fresh RunContext bound to the test's FakeSession."""

    def factory(gather_mode: GatherMode = GatherMode.NAVIGATION, url: str = TARGET_URL) -> RunContext:
        return RunContext(run_id="run-test", session=session, gather_mode=gather_mode, url=url)

    return factory


@pytest.fixture
def run(make_run: Callable[..., RunContext]) -> RunContext:
    return make_run()


@pytest.fixture
def ctx(run: RunContext) -> CollectionContext:
    return CollectionContext(run=run)


@pytest.fixture
def collector_manager() -> CollectorManager:
    manager = CollectorManager()
    manager.register_builtin_collectors()
    return manager


META_SNAPSHOT = [
    {"name": "viewport", "content": "width=device-width, initial-scale=1", "property": None, "httpEquiv": None, "charset": None},
]

LINK_SNAPSHOT = [
    {
        "rel": "canonical",
        "href": "https://example.com/",
        "hrefRaw": "/",
        "hreflang": "",
        "as": "",
        "crossOrigin": None,
        "source": "head",
    },
]


def _evaluate_reply(params: Mapping[str, Any] | None) -> Mapping[str, Any]:
    expression = (params or {}).get("expression", "")
    value = META_SNAPSHOT if "meta" in expression else LINK_SNAPSHOT
    return {"result": {"type": "object", "value": value}}


@pytest.fixture
def scripted_page(session: FakeSession) -> Callable[[RunContext], Awaitable[None]]:
    """Activity that loads a small page and reports a few inspector issues.

    Observed requests: "1" (the document, with a Link header) and "2" (a
    script). Issues: mixed content on "2" (kept), mixed content on "9" (never
    observed, dropped), and an unanchored heavy ad (kept). Page snapshots are
    answered from META_SNAPSHOT and LINK_SNAPSHOT.
    """
    session.mock_response("Runtime.evaluate", _evaluate_reply)

    async def activity(run: RunContext) -> None:
        document = make_request_events(
            "1",
            run.url,
            resource_type="Document",
            headers={"Link": "<https://cdn.example.com/app.css>; rel=preload; as=style"},
        )
        script = make_request_events("2", "http://cdn.example.com/app.js", resource_type="Script", mime_type="text/javascript")
        for method, params in document[:1] + script[:1]:
            session.emit(method, params)
        session.emit(ISSUE_ADDED, make_issue_params(IssueCategory.MIXED_CONTENT, "2", resolutionStatus="MixedContentBlocked"))
        session.emit(ISSUE_ADDED, make_issue_params(IssueCategory.MIXED_CONTENT, "9", resolutionStatus="MixedContentBlocked"))
        session.emit(ISSUE_ADDED, make_issue_params(IssueCategory.HEAVY_ADS, None, reason="NetworkTotalLimit"))
        for method, params in document[1:] + script[1:]:
            session.emit(method, params)

    return activity


# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
