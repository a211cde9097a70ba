"""Raw artifact and computed-fact result contracts.

Raw artifacts are produced once per run by a collector and never mutate.
Computed-fact results are produced once per run by the computed-fact cache.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from beacon.contracts.enums import IssueCategory
from beacon.contracts.events import ProtocolEvent
from beacon.contracts.freeze import deep_freeze, thaw

IssueDetails = Mapping[str, Any]


class InspectorIssues(Mapping[IssueCategory, tuple[IssueDetails, ...]]):
    """Finalized inspector issues, bucketed by category.

    Every IssueCategory is always present as a key (empty tuple if no issue
    survived reconciliation). Iteration follows IssueCategory declaration
    order. Issue details are deep-frozen.

    Example:
        issues = InspectorIssues({IssueCategory.HEAVY_ADS: [details]})
        issues[IssueCategory.MIXED_CONTENT]  # ()
        issues.to_dict()["heavyAds"]  # [details as plain dict]
    """

    __slots__ = ("_buckets",)

    def __init__(self, buckets: Mapping[IssueCategory, Iterable[IssueDetails]] | None = None) -> None:
        supplied = buckets or {}
        unknown = set(supplied) - set(IssueCategory)
        if unknown:
            raise ValueError(f"Unknown issue categories: {sorted(map(str, unknown))}")
        frozen = {category: tuple(deep_freeze(item) for item in supplied.get(category, ())) for category in IssueCategory}
        self._buckets: Mapping[IssueCategory, tuple[IssueDetails, ...]] = MappingProxyType(frozen)

    def __getitem__(self, category: IssueCategory) -> tuple[IssueDetails, ...]:
        return self._buckets[category]

    def __iter__(self) -> Iterator[IssueCategory]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self) -> str:
        counts = ", ".join(f"{category.value}={len(items)}" for category, items in self._buckets.items())
        return f"InspectorIssues({counts})"

    @property
    def mixed_content(self) -> tuple[IssueDetails, ...]:
        return self._buckets[IssueCategory.MIXED_CONTENT]

    @property
    def same_site_cookies(self) -> tuple[IssueDetails, ...]:
        return self._buckets[IssueCategory.SAME_SITE_COOKIES]

    @property
    def blocked_by_response(self) -> tuple[IssueDetails, ...]:
        return self._buckets[IssueCategory.BLOCKED_BY_RESPONSE]

    @property
    def heavy_ads(self) -> tuple[IssueDetails, ...]:
        return self._buckets[IssueCategory.HEAVY_ADS]

    @property
    def content_security_policy(self) -> tuple[IssueDetails, ...]:
        return self._buckets[IssueCategory.CONTENT_SECURITY_POLICY]

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """Plain JSON-shaped form keyed by category value."""
        return {category.value: thaw(items) for category, items in self._buckets.items()}


@dataclass(frozen=True, slots=True)
class MetaElement:
    """A ``<meta>`` element from the inspected document. ``name`` is lower-cased."""

    name: str
    content: str | None = None
    property: str | None = None
    http_equiv: str | None = None
    charset: str | None = None


@dataclass(frozen=True, slots=True)
class LinkElement:
    """A ``<link>`` element or an HTTP ``Link`` header entry.

    Attributes:
        rel: Lower-cased relation
        href: Absolute URL, or None if href_raw could not be resolved
        href_raw: The href exactly as written
        hreflang: ``hreflang`` attribute/param
        as_: ``as`` attribute/param (``as`` is a keyword)
        cross_origin: ``crossorigin`` attribute/param
        source: ``head``, ``body``, or ``headers``
    """

    rel: str
    href: str | None
    href_raw: str
    source: str
    hreflang: str = ""
    as_: str = ""
    cross_origin: str | None = None


@dataclass(frozen=True, slots=True)
class NotApplicable:
    """Computed-fact result meaning "this fact does not apply to this run".

    Score-bearing consumers translate this into a neutral, non-scored outcome
    rather than a failure.
    """

    reason: str


@dataclass(frozen=True, slots=True)
class ViewportMetaResult:
    """Parsed ``<meta name="viewport">`` outcome."""

    has_viewport_tag: bool
    has_mobile_viewport: bool
    parser_warnings: tuple[str, ...] = ()


# Artifact names produced by the built-in collectors.
DEVTOOLS_LOG = "DevtoolsLog"
INSPECTOR_ISSUES = "InspectorIssues"
META_ELEMENTS = "MetaElements"
LINK_ELEMENTS = "LinkElements"

DevtoolsLog = tuple[ProtocolEvent, ...]
