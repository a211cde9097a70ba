"""Built-in collectors."""

from beacon.gather.base import BaseCollector
from beacon.gather.collectors.devtools_log import DevtoolsLogCollector
from beacon.gather.collectors.inspector_issues import InspectorIssuesCollector
from beacon.gather.collectors.link_elements import LinkElementsCollector
from beacon.gather.collectors.meta_elements import MetaElementsCollector
from beacon.gather.hookspecs import hookimpl

BUILTIN_COLLECTORS: tuple[type[BaseCollector], ...] = (
    DevtoolsLogCollector,
    InspectorIssuesCollector,
    MetaElementsCollector,
    LinkElementsCollector,
)


class BuiltinCollectors:
    """Hook implementation registering the built-in collectors."""

    @hookimpl
    def beacon_get_collectors(self) -> list[type[BaseCollector]]:
        return list(BUILTIN_COLLECTORS)


__all__ = [
    "BUILTIN_COLLECTORS",
    "BuiltinCollectors",
    "DevtoolsLogCollector",
    "InspectorIssuesCollector",
    "LinkElementsCollector",
    "MetaElementsCollector",
]
