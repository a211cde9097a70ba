# src/beacon/computed/viewport_meta.py
"""ViewportMeta: parse the document's ``<meta name="viewport">`` content.

Content is a comma/semicolon separated list of ``key=value`` pairs, with
optional whitespace around ``=``. Keys are case-insensitive. A property is
either valid, unknown (key not recognized), or invalid (recognized key with
an unacceptable value). A viewport is mobile-friendly when it carries a
valid ``width`` or a valid ``initial-scale``.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from beacon.computed.base import ComputedFact
from beacon.contracts.artifacts import MetaElement, ViewportMetaResult
from beacon.contracts.enums import FactKind

if TYPE_CHECKING:
    from beacon.engine.context import RunContext

_EQUALS_WHITESPACE = re.compile(r"\s*=\s*")
_SEPARATORS = re.compile(r"[,;\s]+")


def _number_in(low: float, high: float) -> Callable[[str], bool]:
    def check(value: str) -> bool:
        try:
            number = float(value)
        except ValueError:
            return False
        return low <= number <= high

    return check


def _dimension(value: str) -> bool:
    return value in ("device-width", "device-height") or _number_in(1, 10000)(value)


def _one_of(*choices: str) -> Callable[[str], bool]:
    return lambda value: value in choices


_SCALE = _number_in(0.1, 10)

_VALIDATORS: dict[str, Callable[[str], bool]] = {
    "width": _dimension,
    "height": _dimension,
    "initial-scale": _SCALE,
    "minimum-scale": _SCALE,
    "maximum-scale": _SCALE,
    "user-scalable": lambda value: value in ("yes", "no") or _number_in(0, 10)(value),
    # iOS Safari extensions
    "shrink-to-fit": _one_of("yes", "no"),
    "viewport-fit": _one_of("auto", "contain", "cover"),
}


def parse_viewport_content(content: str) -> tuple[dict[str, str], dict[str, str], dict[str, str]]:
    """Split viewport content into (valid, unknown, invalid) property maps."""
    valid: dict[str, str] = {}
    unknown: dict[str, str] = {}
    invalid: dict[str, str] = {}

    normalized = _EQUALS_WHITESPACE.sub("=", content.strip())
    for token in _SEPARATORS.split(normalized):
        if not token:
            continue
        key, _, value = token.partition("=")
        key = key.lower()
        validator = _VALIDATORS.get(key)
        if validator is None:
            unknown[key] = value
        elif validator(value.lower()):
            valid[key] = value
        else:
            invalid[key] = value
    return valid, unknown, invalid


def _compact(properties: dict[str, str]) -> str:
    return json.dumps(properties, separators=(",", ":"))


class ViewportMeta(ComputedFact[Sequence[MetaElement], ViewportMetaResult]):
    kind = FactKind.VIEWPORT_META

    @classmethod
    async def compute(cls, data: Sequence[MetaElement], context: RunContext) -> ViewportMetaResult:
        viewport = next((meta for meta in data if meta.name == "viewport"), None)
        if viewport is None:
            return ViewportMetaResult(has_viewport_tag=False, has_mobile_viewport=False)

        valid, unknown, invalid = parse_viewport_content(viewport.content or "")

        warnings: list[str] = []
        if unknown:
            warnings.append(f"Invalid properties found: {_compact(unknown)}")
        if invalid:
            warnings.append(f"Invalid values found: {_compact(invalid)}")

        return ViewportMetaResult(
            has_viewport_tag=True,
            has_mobile_viewport="width" in valid or "initial-scale" in valid,
            parser_warnings=tuple(warnings),
        )
