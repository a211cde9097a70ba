# src/beacon/gather/collectors/meta_elements.py
"""MetaElements: snapshot of the document's ``<meta>`` elements."""

from beacon.contracts.artifacts import META_ELEMENTS, MetaElement
from beacon.contracts.network import NetworkRecord
from beacon.engine.context import CollectionContext
from beacon.gather.base import BaseCollector
from beacon.gather.page import evaluate_in_page

_COLLECT_META_ELEMENTS = """
Array.from(document.querySelectorAll('head meta')).map(meta => ({
  name: meta.name || null,
  content: meta.content || null,
  property: meta.getAttribute('property'),
  httpEquiv: meta.httpEquiv || null,
  charset: meta.getAttribute('charset'),
}))
"""


class MetaElementsCollector(BaseCollector):
    name = META_ELEMENTS
    plugin_version = "1.0.0"

    async def build_artifact(
        self,
        ctx: CollectionContext,
        network_records: tuple[NetworkRecord, ...] | None,
    ) -> tuple[MetaElement, ...]:
        raw = await evaluate_in_page(ctx.session, self.name, _COLLECT_META_ELEMENTS) or []
        return tuple(
            MetaElement(
                name=(item.get("name") or "").lower(),
                content=item.get("content"),
                property=item.get("property"),
                http_equiv=item.get("httpEquiv"),
                charset=item.get("charset"),
            )
            for item in raw
        )
