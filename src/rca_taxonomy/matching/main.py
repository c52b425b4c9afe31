"""Entry points wiring authorization, candidate lookup and scoring together."""

from __future__ import annotations

from typing import List

from rca_taxonomy.config.policies import Policies
from rca_taxonomy.entities.core import SimilarityResult, TaxonomyEntry
from rca_taxonomy.governance.permissions import (
    AuthorizationError,
    Principal,
    can_create_proposal,
    can_view_code,
    require_active,
)
from rca_taxonomy.utils.logging import get_logger, log_timing, logging_context

from .io import CodeRepository
from .matcher import SimilarityMatcher

_LOGGER = get_logger(module=__name__)


def lookup_similar_codes(
    draft: TaxonomyEntry,
    *,
    repository: CodeRepository,
    principal: Principal,
    policies: Policies | None = None,
    threshold: float | None = None,
) -> List[SimilarityResult]:
    """Return stored codes that may duplicate ``draft``.

    The check is advisory: it never blocks a proposal. Candidates are restricted
    to the draft's main category and to the statuses configured in
    ``policies.lookup``.

    Raises:
        AuthorizationError: If ``principal`` is inactive or may not propose codes.
    """

    active = policies or Policies()
    require_active(principal)
    if not can_create_proposal(principal.role):
        raise AuthorizationError(f"Role {principal.role.value} may not draft proposals")

    with logging_context(step="similar-codes"):
        candidates = repository.find_candidates(
            draft.main_category, active.lookup.eligible_statuses
        )
        if active.lookup.respect_site_visibility:
            visible = [
                entry
                for entry in candidates
                if entry.scope is None
                or can_view_code(principal.role, principal.site, entry.scope, entry.site)
            ]
            if len(visible) != len(candidates):
                _LOGGER.debug(
                    "Hid codes outside principal visibility",
                    hidden=len(candidates) - len(visible),
                    site=principal.site.value,
                )
            candidates = visible

        matcher = SimilarityMatcher(active.similarity)
        with log_timing("similar-codes.score", logger_=_LOGGER):
            results = matcher.find_similar(draft, candidates, threshold)
        _LOGGER.info(
            "Similar code lookup complete",
            principal=principal.id,
            main_category=draft.main_category.value,
            candidates=len(candidates),
            matches=len(results),
        )
    return results


__all__ = ["lookup_similar_codes"]
