"""Unit tests for string and tag similarity helpers."""

from __future__ import annotations

import math

import pytest
from loguru import logger

from rca_taxonomy.utils import normalize_string, string_similarity, tag_overlap


def test_normalize_string_lowercases_and_collapses() -> None:
    assert normalize_string("  Hello,   World!! ") == "hello world"


def test_normalize_string_treats_punctuation_as_separator() -> None:
    assert normalize_string("Wrong/Incomplete Info") == "wrong incomplete info"


def test_string_similarity_identical_texts() -> None:
    assert string_similarity("Bank Offer", "Bank Offer") == 1.0


def test_string_similarity_ignores_case_and_punctuation() -> None:
    assert string_similarity("VAT Calculation", "vat-calculation!!") == 1.0


@pytest.mark.parametrize(
    ("left", "right"),
    [("", "abc"), ("abc", ""), (None, "abc"), ("abc", None), ("", ""), (None, None)],
)
def test_string_similarity_absent_inputs_score_zero(left, right) -> None:
    assert string_similarity(left, right) == 0.0


def test_string_similarity_punctuation_only_inputs_normalize_equal() -> None:
    assert string_similarity("!!!", "???") == 1.0


def test_string_similarity_uses_levenshtein_ratio() -> None:
    assert math.isclose(string_similarity("kitten", "sitting"), 1 - 3 / 7)
    assert math.isclose(string_similarity("Bank Offers", "Bank Offer"), 1 - 1 / 11)


@pytest.mark.parametrize(
    ("left", "right"),
    [
        ("Policies", "Policy"),
        ("Booking Failure", "Payment Gateway"),
        ("Service Level", "service levels"),
        ("a", "completely different label"),
    ],
)
def test_string_similarity_is_symmetric_and_bounded(left: str, right: str) -> None:
    forward = string_similarity(left, right)
    backward = string_similarity(right, left)
    assert forward == backward
    assert 0.0 <= forward <= 1.0


def test_tag_overlap_is_case_insensitive_jaccard() -> None:
    score = tag_overlap(["Payment", "Refund"], ["payment", "REFUND", "Bank"])
    assert math.isclose(score, 2 / 3)


@pytest.mark.parametrize(
    ("left", "right"),
    [([], ["Payment"]), (["Payment"], []), ([], []), (None, ["Payment"])],
)
def test_tag_overlap_empty_side_scores_zero(left, right) -> None:
    assert tag_overlap(left, right) == 0.0


def test_tag_overlap_deduplicates_case_variants() -> None:
    assert tag_overlap(["VAT", "vat"], ["Vat"]) == 1.0


def test_tag_overlap_disjoint_sets() -> None:
    assert tag_overlap(["Agent"], ["Customer", "SLA"]) == 0.0


def test_verbose_text_logging_reports_every_comparison(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RCA_TAXONOMY_VERBOSE_TEXT_LOGS", "1")
    records: list[dict] = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    try:
        for _ in range(2):
            string_similarity("Bank Offer", "bank-offer!!")
    finally:
        logger.remove(sink_id)

    normalized = [record for record in records if record["message"] == "Normalized comparison texts"]
    assert len(normalized) == 2
    assert normalized[-1]["extra"]["left"] == "bank offer"
    assert normalized[-1]["extra"]["right"] == "bank offer"


def test_text_is_not_logged_without_verbose_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("RCA_TAXONOMY_VERBOSE_TEXT_LOGS", raising=False)
    records: list[dict] = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    try:
        string_similarity("Bank Offer", "Bank Offers")
    finally:
        logger.remove(sink_id)

    assert all(record["message"] != "Normalized comparison texts" for record in records)
