# tests/unit/core/test_canonical.py
"""Tests for canonical JSON and artifact fingerprints."""

import math

import pytest


class TestCanonicalJson:
    def test_keys_sorted_no_whitespace(self) -> None:
        from beacon.core.canonical import canonical_json

        assert canonical_json({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'

    def test_frozen_payloads_unwrapped(self) -> None:
        from beacon.contracts.freeze import deep_freeze
        from beacon.core.canonical import canonical_json

        assert canonical_json(deep_freeze({"x": [{"y": 1}]})) == canonical_json({"x": [{"y": 1}]})

    def test_enum_uses_value(self) -> None:
        from beacon.contracts.enums import GatherMode
        from beacon.core.canonical import canonical_json

        assert canonical_json({"mode": GatherMode.TIMESPAN}) == '{"mode":"timespan"}'

    def test_dataclass_fields(self) -> None:
        from beacon.contracts.artifacts import MetaElement
        from beacon.core.canonical import canonical_json

        assert canonical_json(MetaElement(name="viewport", content="width=1")) == (
            '{"charset":null,"content":"width=1","http_equiv":null,"name":"viewport","property":null}'
        )

    def test_to_dict_preferred(self) -> None:
        from beacon.contracts.events import ProtocolEvent
        from beacon.core.canonical import canonical_json

        event = ProtocolEvent(category="heavyAds", payload={"k": "v"})

        assert canonical_json(event) == '{"category":"heavyAds","payload":{"k":"v"},"requestRef":null}'

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, value: float) -> None:
        from beacon.core.canonical import canonical_json

        with pytest.raises(ValueError, match="non-finite"):
            canonical_json({"timing": value})


class TestArtifactFingerprint:
    def test_equal_artifacts_equal_fingerprints(self) -> None:
        from beacon.contracts.artifacts import InspectorIssues
        from beacon.contracts.enums import IssueCategory
        from beacon.core.canonical import artifact_fingerprint

        a = InspectorIssues({IssueCategory.HEAVY_ADS: [{"reason": "CpuTotalLimit", "frame": {"frameId": "1"}}]})
        b = InspectorIssues({IssueCategory.HEAVY_ADS: [{"frame": {"frameId": "1"}, "reason": "CpuTotalLimit"}]})

        assert artifact_fingerprint(a) == artifact_fingerprint(b)

    def test_order_within_category_matters(self) -> None:
        from beacon.contracts.artifacts import InspectorIssues
        from beacon.contracts.enums import IssueCategory
        from beacon.core.canonical import artifact_fingerprint

        a = InspectorIssues({IssueCategory.HEAVY_ADS: [{"n": 1}, {"n": 2}]})
        b = InspectorIssues({IssueCategory.HEAVY_ADS: [{"n": 2}, {"n": 1}]})

        assert artifact_fingerprint(a) != artifact_fingerprint(b)

    def test_stable_hash_is_sha256_hex(self) -> None:
        from beacon.core.canonical import stable_hash

        digest = stable_hash({"a": 1})

        assert len(digest) == 64
        assert digest == stable_hash({"a": 1})
