"""Weighted multi-signal scoring of drafts against stored RCA codes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from rca_taxonomy.config.policies import SimilarityPolicy
from rca_taxonomy.entities.core import SimilarityResult, TaxonomyEntry
from rca_taxonomy.utils.logging import get_logger
from rca_taxonomy.utils.similarity import string_similarity, tag_overlap

_LOGGER = get_logger(module=__name__)


@dataclass
class CandidateScore:
    """Accumulated signals for one draft/candidate pair."""

    total: float = 0.0
    reasons: List[str] = field(default_factory=list)
    contributions: Dict[str, float] = field(default_factory=dict)

    def add(self, signal: str, amount: float, reason: str) -> None:
        self.total += amount
        self.contributions[signal] = amount
        self.reasons.append(reason)

    @property
    def reason(self) -> str:
        return "; ".join(self.reasons)


class SimilarityMatcher:
    """Flag stored codes that look like duplicates of a draft.

    Signals are independent and additive: main category, each of the five
    hierarchy levels, definition and tags. The reported score is capped by
    ``policy.score_cap`` but never renormalized.
    """

    def __init__(self, policy: SimilarityPolicy | None = None) -> None:
        self.policy = policy or SimilarityPolicy()

    def score(self, draft: TaxonomyEntry, candidate: TaxonomyEntry) -> CandidateScore:
        weights = self.policy.weights
        gates = self.policy.gates
        result = CandidateScore()

        if draft.main_category == candidate.main_category:
            result.add("main_category", weights.main_category, "Same main category")

        for index, (draft_level, candidate_level) in enumerate(
            zip(draft.levels, candidate.levels), start=1
        ):
            if not draft_level or not candidate_level:
                continue
            if string_similarity(draft_level, candidate_level) > gates.level:
                result.add(
                    f"level{index}",
                    weights.level,
                    f'Similar RCA{index}: "{candidate_level}"',
                )

        if draft.definition and candidate.definition:
            definition_similarity = string_similarity(draft.definition, candidate.definition)
            if definition_similarity > gates.definition:
                result.add(
                    "definition",
                    definition_similarity * weights.definition,
                    "Similar definition",
                )

        if draft.tags:
            overlap = tag_overlap(draft.tags, candidate.tags)
            if overlap > gates.tags:
                result.add("tags", overlap * weights.tags, "Overlapping tags")

        return result

    def find_similar(
        self,
        draft: TaxonomyEntry,
        candidates: Iterable[TaxonomyEntry],
        threshold: float | None = None,
    ) -> List[SimilarityResult]:
        """Return up to ``policy.max_results`` candidates scoring at least ``threshold``.

        Results are ordered by descending score; equal scores keep the order in
        which candidates were supplied.
        """

        effective_threshold = self.policy.default_threshold if threshold is None else threshold
        matches: List[SimilarityResult] = []
        evaluated = 0
        for candidate in candidates:
            evaluated += 1
            scored = self.score(draft, candidate)
            _LOGGER.debug(
                "Scored candidate",
                candidate=candidate.id,
                total=scored.total,
                threshold=effective_threshold,
                signals=sorted(scored.contributions),
            )
            reported = min(scored.total, self.policy.score_cap)
            if reported < effective_threshold:
                continue
            matches.append(
                SimilarityResult(
                    entry=candidate,
                    score=reported,
                    reason=scored.reason,
                    contributions=dict(scored.contributions),
                )
            )

        ranked = sorted(matches, key=lambda match: match.score, reverse=True)
        limited = ranked[: self.policy.max_results]
        _LOGGER.debug(
            "Similarity search finished",
            evaluated=evaluated,
            matched=len(matches),
            returned=len(limited),
        )
        return limited


def find_similar_codes(
    draft: TaxonomyEntry,
    candidates: Sequence[TaxonomyEntry],
    threshold: float | None = None,
    *,
    policy: SimilarityPolicy | None = None,
) -> List[SimilarityResult]:
    """Functional entry point around :class:`SimilarityMatcher`."""

    return SimilarityMatcher(policy).find_similar(draft, candidates, threshold)


__all__ = ["CandidateScore", "SimilarityMatcher", "find_similar_codes"]
