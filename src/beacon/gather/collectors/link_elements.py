# src/beacon/gather/collectors/link_elements.py
"""LinkElements: ``<link>`` elements plus ``Link`` headers of the main document.

DOM links come first, in document order, then header links in header order.
Relations are lower-cased. Header hrefs are resolved against the main
resource URL while the raw value is kept in href_raw.

In timespan runs the main document may not have been observed; header links
are then simply absent. In navigation runs a missing main document is fatal
(MainResourceNotFound propagates).
"""

from collections.abc import Iterator, Mapping
from typing import Any
from urllib.parse import urljoin

from requests.utils import parse_header_links

from beacon.computed.main_resource import MainResource, MainResourceInput
from beacon.contracts.artifacts import DEVTOOLS_LOG, LINK_ELEMENTS, LinkElement, NotApplicable
from beacon.contracts.network import NetworkRecord
from beacon.engine.context import CollectionContext
from beacon.gather.base import BaseCollector
from beacon.gather.page import evaluate_in_page

_COLLECT_LINK_ELEMENTS = """
Array.from(document.querySelectorAll('link')).map(link => ({
  rel: link.rel,
  href: link.href || null,
  hrefRaw: link.getAttribute('href') || '',
  hreflang: link.hreflang || '',
  as: link.as || '',
  crossOrigin: link.crossOrigin,
  source: link.closest('head') ? 'head' : 'body',
}))
"""


def _resolve(base_url: str, raw: str) -> str | None:
    try:
        return urljoin(base_url, raw)
    except ValueError:
        return None


def links_from_headers(main_resource: NetworkRecord) -> Iterator[LinkElement]:
    """Yield a LinkElement per entry in the record's ``Link`` response headers.

    Repeated headers arrive newline-joined from the protocol; each line may hold
    several comma-separated links.
    """
    for header_value in main_resource.headers_named("link"):
        for line in header_value.split("\n"):
            for entry in parse_header_links(line):
                params = {key.lower(): value for key, value in entry.items()}
                raw = params.get("url", "")
                yield LinkElement(
                    rel=params.get("rel", "").lower(),
                    href=_resolve(main_resource.url, raw),
                    href_raw=raw,
                    source="headers",
                    hreflang=params.get("hreflang", ""),
                    as_=params.get("as", ""),
                    cross_origin=params.get("crossorigin"),
                )


def _link_from_dom(item: Mapping[str, Any]) -> LinkElement:
    return LinkElement(
        rel=(item.get("rel") or "").lower(),
        href=item.get("href"),
        href_raw=item.get("hrefRaw") or "",
        source=item.get("source") or "head",
        hreflang=item.get("hreflang") or "",
        as_=item.get("as") or "",
        cross_origin=item.get("crossOrigin"),
    )


class LinkElementsCollector(BaseCollector):
    name = LINK_ELEMENTS
    plugin_version = "1.0.0"
    dependencies = (DEVTOOLS_LOG,)

    async def build_artifact(
        self,
        ctx: CollectionContext,
        network_records: tuple[NetworkRecord, ...] | None,
    ) -> tuple[LinkElement, ...]:
        raw = await evaluate_in_page(ctx.session, self.name, _COLLECT_LINK_ELEMENTS) or []
        links = [_link_from_dom(item) for item in raw]

        main_resource = await MainResource.request(MainResourceInput(ctx.dependencies[DEVTOOLS_LOG], ctx.url), ctx.run)
        if not isinstance(main_resource, NotApplicable):
            links.extend(links_from_headers(main_resource))
        return tuple(links)
