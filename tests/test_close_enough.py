import pytest

from vlrutil.close_enough import (
    CandidateEval,
    CloseEnough,
    TransformStep,
    levenshtein_distance,
)


def test_classic_example():
    assert levenshtein_distance("kitten", "sitting") == 3


def test_identical_strings_cost_nothing():
    assert levenshtein_distance("same", "same", 0.8, 0.8) == 0


def test_empty_source_costs_inserts():
    assert levenshtein_distance("", "abcd", insert_cost=0.5) == pytest.approx(4 * 0.5)


def test_empty_target_costs_deletes():
    assert levenshtein_distance("abc", "", delete_cost=2.0) == pytest.approx(3 * 2.0)


def test_symmetric_with_equal_costs():
    assert levenshtein_distance("flaw", "lawn") == levenshtein_distance("lawn", "flaw")


def test_custom_substitution_used():
    always_free = lambda a, b: 0.0  # noqa: E731
    assert levenshtein_distance("abc", "xyz", substitute_cost=always_free) == 0


def test_candidate_without_steps():
    candidate = CandidateEval("start", "end")
    assert candidate.most_recent_state() == "start"
    assert candidate.total_cost() == 0
    assert not candidate.is_complete()


def test_candidate_total_cost_sums_steps():
    candidate = CandidateEval("a", "c", [TransformStep("a", "b", 1.5), TransformStep("b", "c", 2.0)])
    assert candidate.total_cost() == pytest.approx(3.5)
    assert candidate.most_recent_state() == "c"
    assert candidate.is_complete()


def test_evaluate_candidate_ignores_case():
    candidate = CloseEnough().evaluate_candidate(CandidateEval("Hello", "hELLO"))
    assert candidate.total_cost() == 0
    assert candidate.is_complete()


def test_evaluate_orders_by_cost():
    targets = ["world", "help", "HELLO", "hello"]
    results = CloseEnough().evaluate("hello", targets)
    assert sorted(r.ending_value for r in results) == sorted(targets)
    costs = [r.total_cost() for r in results]
    assert costs == sorted(costs)
    assert {results[0].ending_value, results[1].ending_value} == {"HELLO", "hello"}
    assert results[-1].ending_value == "world"
    assert all(r.is_complete() for r in results)


def test_evaluate_empty_targets():
    assert CloseEnough().evaluate("x", []) == []