"""All modes, phases, and kinds used across subsystem boundaries.

Every value here is a StrEnum so it serializes to the same string the
instrumentation protocol and report consumers use.
"""

from enum import StrEnum


class GatherMode(StrEnum):
    """How the run observes the page.

    Values:
        NAVIGATION: Collection spans a full page load to a target URL
        TIMESPAN: Collection spans an arbitrary user-driven interval
    """

    NAVIGATION = "navigation"
    TIMESPAN = "timespan"


class CollectionProtocol(StrEnum):
    """Which collector lifecycle the orchestrator drives.

    Values:
        LEGACY: before_window -> during_window -> after_window(load_data)
        INSTRUMENTATION: start_instrumentation -> stop_instrumentation -> produce_artifact
    """

    LEGACY = "legacy"
    INSTRUMENTATION = "instrumentation"


class CollectorPhase(StrEnum):
    """Lifecycle state of a single collector instance."""

    IDLE = "idle"
    INSTRUMENTING = "instrumenting"
    STOPPED = "stopped"
    COMPLETE = "complete"


class IssueCategory(StrEnum):
    """Inspector issue categories kept in the InspectorIssues artifact.

    The value is the artifact key. Each category also knows the protocol
    issue code it is reported under and the key its details live at.
    """

    MIXED_CONTENT = "mixedContent"
    SAME_SITE_COOKIES = "sameSiteCookies"
    BLOCKED_BY_RESPONSE = "blockedByResponse"
    HEAVY_ADS = "heavyAds"
    CONTENT_SECURITY_POLICY = "contentSecurityPolicy"

    @property
    def issue_code(self) -> str:
        """Protocol issue code (``Audits.issueAdded`` ``issue.code``)."""
        return _ISSUE_CODES[self]

    @property
    def details_key(self) -> str:
        """Key of this category's payload inside ``issue.details``."""
        return _DETAILS_KEYS[self]

    @classmethod
    def from_issue_code(cls, code: str) -> "IssueCategory | None":
        """Map a protocol issue code to its category, or None if not tracked."""
        return _CATEGORIES_BY_CODE.get(code)


_ISSUE_CODES: dict[IssueCategory, str] = {
    IssueCategory.MIXED_CONTENT: "MixedContentIssue",
    IssueCategory.SAME_SITE_COOKIES: "SameSiteCookieIssue",
    IssueCategory.BLOCKED_BY_RESPONSE: "BlockedByResponseIssue",
    IssueCategory.HEAVY_ADS: "HeavyAdIssue",
    IssueCategory.CONTENT_SECURITY_POLICY: "ContentSecurityPolicyIssue",
}

_DETAILS_KEYS: dict[IssueCategory, str] = {
    IssueCategory.MIXED_CONTENT: "mixedContentIssueDetails",
    IssueCategory.SAME_SITE_COOKIES: "sameSiteCookieIssueDetails",
    IssueCategory.BLOCKED_BY_RESPONSE: "blockedByResponseIssueDetails",
    IssueCategory.HEAVY_ADS: "heavyAdIssueDetails",
    IssueCategory.CONTENT_SECURITY_POLICY: "contentSecurityPolicyIssueDetails",
}

_CATEGORIES_BY_CODE: dict[str, IssueCategory] = {code: category for category, code in _ISSUE_CODES.items()}


class FactKind(StrEnum):
    """Identity of a computed fact. The computed-fact cache is keyed by this."""

    NETWORK_RECORDS = "NetworkRecords"
    MAIN_RESOURCE = "MainResource"
    VIEWPORT_META = "ViewportMeta"


class EntryState(StrEnum):
    """State of a computed-fact cache entry."""

    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"
