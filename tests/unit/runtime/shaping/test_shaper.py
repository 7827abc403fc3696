"""Unit tests for response shaping."""

from __future__ import annotations

import copy

import pytest

from spendkit.brex.runtime.shaping import (
    ResponseShaper,
    estimate_payload,
    estimate_size,
    project,
    project_many,
)

DEFAULT_FIELDS = ("id", "amount.amount")


def _big_items(count: int = 40) -> list[dict]:
    return [
        {
            "id": f"item_{i}",
            "amount": {"amount": i, "currency": "USD"},
            "memo": "x" * 3000,
        }
        for i in range(count)
    ]


class TestEstimator:
    """Test size estimation."""

    def test_four_bytes_per_unit_rounded_up(self):
        assert estimate_size("") == 0
        assert estimate_size("abcd") == 1
        assert estimate_size("abcde") == 2

    def test_counts_utf8_bytes(self):
        # "é" is 2 bytes in utf-8
        assert estimate_size("éé") == 1
        assert estimate_size("ééé") == 2

    def test_estimate_payload_is_compact(self):
        assert estimate_payload({"a": 1}) == estimate_size('{"a":1}')


class TestProjection:
    """Test dot-path projection."""

    def test_nested_projection(self):
        source = {
            "id": "x",
            "amount": {"amount": 5, "currency": "USD"},
            "merchant": {"raw_descriptor": "ACME"},
        }

        assert project(source, ["id", "amount.amount"]) == {"id": "x", "amount": {"amount": 5}}

    def test_missing_paths_skipped(self):
        source = {"id": "x", "amount": None, "merchant": "flat"}

        assert project(source, ["id", "amount.amount", "merchant.name", "nope"]) == {"id": "x"}

    def test_null_leaves_kept(self):
        source = {"id": "x", "budget_id": None, "amount": {"amount": 5, "currency": None}}

        assert project(source, ["id", "budget_id", "amount.currency"]) == {
            "id": "x",
            "budget_id": None,
            "amount": {"currency": None},
        }

    def test_null_intermediate_aborts_path(self):
        source = {"id": "x", "merchant": None}

        assert project(source, ["id", "merchant.raw_descriptor"]) == {"id": "x"}

    def test_source_not_mutated(self):
        source = {"id": "x", "amount": {"amount": 5, "currency": "USD"}}
        before = copy.deepcopy(source)

        result = project(source, ["amount"])
        result["amount"]["amount"] = 99

        assert source == before

    def test_projection_is_idempotent(self):
        source = {"id": "x", "amount": {"amount": 5, "currency": "USD"}, "tags": ["a"]}
        paths = ["id", "amount.amount", "tags"]

        once = project(source, paths)
        assert project(once, paths) == once

    def test_sibling_paths_merge(self):
        source = {"amount": {"amount": 5, "currency": "USD", "extra": 1}}

        assert project(source, ["amount.amount", "amount.currency"]) == {
            "amount": {"amount": 5, "currency": "USD"}
        }

    def test_project_many(self):
        items = [{"id": "a", "x": 1}, {"id": "b", "x": 2}]

        assert project_many(items, ["id"]) == [{"id": "a"}, {"id": "b"}]


class TestResponseShaper:
    """Test the summary policy."""

    def test_small_payload_returned_unchanged(self):
        items = [{"id": "a", "amount": {"amount": 1, "currency": "USD"}, "memo": "m"}]
        shaped = ResponseShaper(DEFAULT_FIELDS).shape(items)

        assert shaped.items == items
        assert shaped.summary_applied is False
        assert shaped.decision.estimated_size is not None

    def test_oversized_payload_forces_summary(self):
        items = _big_items()
        shaper = ResponseShaper(DEFAULT_FIELDS, hard_limit=24000)
        assert estimate_payload(items) > 24000

        shaped = shaper.shape(items)

        assert shaped.summary_applied is True
        assert shaped.items[0] == {"id": "item_0", "amount": {"amount": 0}}
        assert shaped.decision.fields_used == DEFAULT_FIELDS

    def test_summary_only_projects_small_payload(self):
        items = [{"id": "a", "amount": {"amount": 1, "currency": "USD"}}]
        shaped = ResponseShaper(DEFAULT_FIELDS).shape(items, summary_only=True)

        assert shaped.items == [{"id": "a", "amount": {"amount": 1}}]
        assert shaped.summary_applied is True

    def test_summary_keeps_null_fields(self):
        items = [{"id": "x", "budget_id": None, "status": "APPROVED"}]
        shaped = ResponseShaper(("id", "budget_id", "status")).shape(items, summary_only=True)

        assert shaped.items == [{"id": "x", "budget_id": None, "status": "APPROVED"}]

    def test_caller_fields_override_defaults(self):
        items = [{"id": "a", "amount": {"amount": 1, "currency": "USD"}, "memo": "m"}]
        shaped = ResponseShaper(DEFAULT_FIELDS).shape(items, summary_only=True, fields=["memo"])

        assert shaped.items == [{"memo": "m"}]

    def test_forced_summary_uses_caller_fields(self):
        shaped = ResponseShaper(DEFAULT_FIELDS, hard_limit=10).shape(
            _big_items(2), fields=["id"]
        )

        assert shaped.items == [{"id": "item_0"}, {"id": "item_1"}]

    def test_blank_fields_fall_back_to_defaults(self):
        shaper = ResponseShaper(DEFAULT_FIELDS)

        assert shaper.resolve_fields(["", "  "]) == DEFAULT_FIELDS
        assert shaper.resolve_fields([]) == DEFAULT_FIELDS
        assert shaper.resolve_fields([" id "]) == ("id",)

    def test_shape_one_uses_same_policy(self):
        item = _big_items(1)[0]
        shaped, decision = ResponseShaper(DEFAULT_FIELDS, hard_limit=100).shape_one(item)

        assert decision.summary_applied is True
        assert shaped == {"id": "item_0", "amount": {"amount": 0}}

    def test_empty_list(self):
        shaped = ResponseShaper(DEFAULT_FIELDS).shape([])

        assert shaped.items == []
        assert shaped.summary_applied is False

    def test_hard_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            ResponseShaper(DEFAULT_FIELDS, hard_limit=0)
