"""Ranking of candidate strings by how closely they match a starting value."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

WEIGHT_CHARACTER_ADD = 0.8
WEIGHT_CHARACTER_REMOVE = 0.8
WEIGHT_CHARACTER_CHANGE = 1.0


def levenshtein_distance(
    source: str,
    target: str,
    insert_cost: float = 1.0,
    delete_cost: float = 1.0,
    substitute_cost: Callable[[str, str], float] | None = None,
) -> float:
    """Return the edit distance from ``source`` to ``target``.

    Inserting a character costs ``insert_cost``, deleting one ``delete_cost``, and
    replacing a character ``a`` with ``b`` costs ``substitute_cost(a, b)`` (by
    default 0 for equal characters and 1 otherwise).
    """
    previous = [column * insert_cost for column in range(len(target) + 1)]
    for row, source_char in enumerate(source, start=1):
        current = [row * delete_cost]
        for column, target_char in enumerate(target, start=1):
            if substitute_cost is None:
                change = 0.0 if source_char == target_char else 1.0
            else:
                change = substitute_cost(source_char, target_char)
            current.append(
                min(
                    previous[column] + delete_cost,
                    current[column - 1] + insert_cost,
                    previous[column - 1] + change,
                )
            )
        previous = current
    return previous[-1]


def _case_insensitive_change(source: str, target: str) -> float:
    if source.upper() == target.upper():
        return 0.0
    return WEIGHT_CHARACTER_CHANGE


@dataclass
class TransformStep:
    """One step transforming a string, with the cost of taking it."""

    before: str
    after: str
    cost: float = 0.0


@dataclass
class CandidateEval:
    """The evaluation of transforming a starting value into one candidate."""

    starting_value: str
    ending_value: str
    steps: list[TransformStep] = field(default_factory=list)

    def most_recent_state(self) -> str:
        """Return the string as it stands after the last step taken."""
        if not self.steps:
            return self.starting_value
        return self.steps[-1].after

    def is_complete(self) -> bool:
        """Return True once the steps have reached the ending value exactly."""
        return self.most_recent_state() == self.ending_value

    def total_cost(self) -> float:
        """Return the summed cost of every step."""
        return sum((step.cost for step in self.steps), 0.0)


class CloseEnough:
    """Scores candidates against a starting value; lower cost is a closer match."""

    def __init__(
        self,
        add_weight: float = WEIGHT_CHARACTER_ADD,
        remove_weight: float = WEIGHT_CHARACTER_REMOVE,
    ) -> None:
        self.add_weight = add_weight
        self.remove_weight = remove_weight

    def evaluate_candidate(self, candidate: CandidateEval) -> CandidateEval:
        """Add a single step covering the whole transform, costed by edit distance.

        Letter case is ignored when comparing characters.
        """
        distance = levenshtein_distance(
            candidate.starting_value,
            candidate.ending_value,
            self.add_weight,
            self.remove_weight,
            _case_insensitive_change,
        )
        candidate.steps.append(
            TransformStep(candidate.starting_value, candidate.ending_value, distance)
        )
        return candidate

    def evaluate(self, starting_value: str, targets: Iterable[str]) -> list[CandidateEval]:
        """Evaluate every target and return the evaluations, closest first."""
        candidates = [CandidateEval(starting_value, target) for target in targets]
        if candidates:
            with ThreadPoolExecutor() as pool:
                list(pool.map(self.evaluate_candidate, candidates))
        return sorted(candidates, key=CandidateEval.total_cost)