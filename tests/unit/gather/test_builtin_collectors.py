# tests/unit/gather/test_builtin_collectors.py
"""Artifact production for the built-in collectors."""

import pytest

from beacon.contracts.artifacts import DEVTOOLS_LOG, InspectorIssues, LinkElement, MetaElement
from beacon.contracts.enums import GatherMode, IssueCategory
from beacon.contracts.errors import MainResourceNotFound, PageEvaluationError
from beacon.contracts.events import ProtocolEvent
from beacon.contracts.network import NetworkRecord, ResponseHeader
from beacon.engine.context import CollectionContext, RunContext
from beacon.gather.base import BaseCollector
from beacon.gather.collectors.inspector_issues import ISSUE_ADDED, InspectorIssuesCollector
from beacon.gather.collectors.link_elements import LinkElementsCollector, links_from_headers
from beacon.gather.collectors.meta_elements import MetaElementsCollector
from beacon.network.records import REQUEST_WILL_BE_SENT, RESPONSE_RECEIVED
from beacon.testing import FakeSession, make_event_log, make_issue_params, make_request_events


async def drive(collector: BaseCollector, ctx: CollectionContext, dependencies: dict | None = None) -> object:
    await collector.start_instrumentation(ctx)
    await collector.stop_instrumentation(ctx)
    return await collector.produce_artifact(ctx.with_dependencies(dependencies or {}))


def evaluate_returns(session: FakeSession, value: object) -> None:
    session.mock_response("Runtime.evaluate", {"result": {"type": "object", "value": value}})


class TestInspectorIssuesCollector:
    def test_to_event_maps_code_to_category(self) -> None:
        collector = InspectorIssuesCollector()

        event = collector.to_event(ISSUE_ADDED, make_issue_params(IssueCategory.MIXED_CONTENT, "42", insecureURL="http://x/"))

        assert event is not None
        assert event.category == "mixedContent"
        assert event.request_ref == "42"
        assert event.payload["insecureURL"] == "http://x/"

    def test_to_event_skips_untracked_issue_codes(self) -> None:
        collector = InspectorIssuesCollector()

        assert collector.to_event(ISSUE_ADDED, {"issue": {"code": "DeprecationIssue", "details": {}}}) is None

    def test_to_event_skips_issue_without_details(self) -> None:
        collector = InspectorIssuesCollector()

        assert collector.to_event(ISSUE_ADDED, {"issue": {"code": "HeavyAdIssue", "details": {}}}) is None

    @pytest.mark.asyncio
    async def test_artifact_filters_against_devtools_log(self, session: FakeSession, ctx: CollectionContext) -> None:
        log = make_event_log(make_request_events("1", "https://example.com/", resource_type="Document"))
        collector = InspectorIssuesCollector()

        await collector.start_instrumentation(ctx)
        session.emit(ISSUE_ADDED, make_issue_params(IssueCategory.MIXED_CONTENT, "1"))
        session.emit(ISSUE_ADDED, make_issue_params(IssueCategory.MIXED_CONTENT, "2"))
        session.emit(ISSUE_ADDED, make_issue_params(IssueCategory.HEAVY_ADS, None, reason="CpuPeakLimit"))
        await collector.stop_instrumentation(ctx)
        issues = await collector.produce_artifact(ctx.with_dependencies({DEVTOOLS_LOG: log}))

        assert isinstance(issues, InspectorIssues)
        assert [item["request"]["requestId"] for item in issues.mixed_content] == ["1"]
        assert len(issues.heavy_ads) == 1
        assert issues.same_site_cookies == ()


class TestMetaElementsCollector:
    @pytest.mark.asyncio
    async def test_snapshot_lowercases_names(self, session: FakeSession, ctx: CollectionContext) -> None:
        evaluate_returns(
            session,
            [
                {"name": "Viewport", "content": "width=device-width", "property": None, "httpEquiv": None, "charset": None},
                {"name": None, "content": None, "property": None, "httpEquiv": None, "charset": "utf-8"},
            ],
        )

        metas = await drive(MetaElementsCollector(), ctx)

        assert metas == (
            MetaElement(name="viewport", content="width=device-width"),
            MetaElement(name="", charset="utf-8"),
        )
        assert session.commands[0].params["returnByValue"] is True

    @pytest.mark.asyncio
    async def test_page_exception_raises(self, session: FakeSession, ctx: CollectionContext) -> None:
        session.mock_response("Runtime.evaluate", {"exceptionDetails": {"text": "Uncaught ReferenceError"}})

        with pytest.raises(PageEvaluationError, match="MetaElements"):
            await drive(MetaElementsCollector(), ctx)


def make_document(headers: dict[str, str]) -> NetworkRecord:
    return NetworkRecord(
        request_id="1",
        url="https://example.com/page",
        resource_type="Document",
        response_headers=tuple(ResponseHeader(name, value) for name, value in headers.items()),
    )


class TestLinksFromHeaders:
    def test_single_link(self) -> None:
        links = list(links_from_headers(make_document({"Link": "<https://cdn.example.com/app.css>; rel=preload; as=style"})))

        assert links == [
            LinkElement(
                rel="preload",
                href="https://cdn.example.com/app.css",
                href_raw="https://cdn.example.com/app.css",
                source="headers",
                as_="style",
            )
        ]

    def test_relative_href_resolved_against_document(self) -> None:
        (link,) = links_from_headers(make_document({"link": "</fonts/a.woff2>; rel=preload; as=font; crossorigin=anonymous"}))

        assert link.href == "https://example.com/fonts/a.woff2"
        assert link.href_raw == "/fonts/a.woff2"
        assert link.cross_origin == "anonymous"

    def test_multiple_links_in_one_header(self) -> None:
        header = '<https://example.com/a>; rel="canonical", <https://example.com/fr>; rel=alternate; hreflang=fr'

        links = list(links_from_headers(make_document({"Link": header})))

        assert [(link.rel, link.href, link.hreflang) for link in links] == [
            ("canonical", "https://example.com/a", ""),
            ("alternate", "https://example.com/fr", "fr"),
        ]

    def test_newline_joined_headers_and_case_insensitive_keys(self) -> None:
        header = "<https://example.com/a>; REL=Preconnect\n<https://example.com/b>; rel=dns-prefetch"

        links = list(links_from_headers(make_document({"LINK": header})))

        assert [link.rel for link in links] == ["preconnect", "dns-prefetch"]

    def test_no_link_header(self) -> None:
        assert list(links_from_headers(make_document({"Content-Type": "text/html"}))) == []


class TestLinkElementsCollector:
    DOM_LINK = {
        "rel": "Stylesheet",
        "href": "https://example.com/main.css",
        "hrefRaw": "/main.css",
        "hreflang": "",
        "as": "",
        "crossOrigin": None,
        "source": "head",
    }

    @pytest.mark.asyncio
    async def test_dom_links_then_header_links(self, session: FakeSession, ctx: CollectionContext) -> None:
        evaluate_returns(session, [self.DOM_LINK])
        log = make_event_log(
            make_request_events(
                "1",
                "https://example.com/",
                resource_type="Document",
                headers={"Link": "<https://example.com/next>; rel=next"},
            )
        )

        links = await drive(LinkElementsCollector(), ctx, {DEVTOOLS_LOG: log})

        assert [(link.rel, link.source) for link in links] == [("stylesheet", "head"), ("next", "headers")]

    @pytest.mark.asyncio
    async def test_navigation_without_main_resource_raises(self, session: FakeSession, ctx: CollectionContext) -> None:
        evaluate_returns(session, [])

        with pytest.raises(MainResourceNotFound):
            await drive(LinkElementsCollector(), ctx, {DEVTOOLS_LOG: ()})

    @pytest.mark.asyncio
    async def test_timespan_without_main_resource_keeps_dom_links(self, session: FakeSession, make_run) -> None:
        evaluate_returns(session, [self.DOM_LINK])
        run: RunContext = make_run(GatherMode.TIMESPAN)

        links = await drive(LinkElementsCollector(), CollectionContext(run=run), {DEVTOOLS_LOG: ()})

        assert [link.source for link in links] == ["head"]

    @pytest.mark.asyncio
    async def test_header_links_read_from_redirect_target(self, session: FakeSession, make_run) -> None:
        evaluate_returns(session, [])
        run: RunContext = make_run(url="http://example.com/")
        log = (
            ProtocolEvent.from_protocol(
                REQUEST_WILL_BE_SENT, {"requestId": "1", "type": "Document", "request": {"url": "http://example.com/"}}
            ),
            ProtocolEvent.from_protocol(
                REQUEST_WILL_BE_SENT,
                {
                    "requestId": "1",
                    "type": "Document",
                    "request": {"url": "https://example.com/"},
                    "redirectResponse": {"status": 301, "headers": {"Link": "</moved.css>; rel=preload"}},
                },
            ),
            ProtocolEvent.from_protocol(
                RESPONSE_RECEIVED,
                {"requestId": "1", "type": "Document", "response": {"status": 200, "headers": {"Link": "</app.css>; rel=preload"}}},
            ),
        )

        links = await drive(LinkElementsCollector(), CollectionContext(run=run), {DEVTOOLS_LOG: log})

        assert [link.href for link in links] == ["https://example.com/app.css"]
