"""Pick the single candidate worth spending remote calls on."""

from __future__ import annotations

import logging
from typing import Sequence

from .models import CandidateEntity

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 0.9


def select_candidate(
    candidates: Sequence[CandidateEntity], threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
) -> CandidateEntity | None:
    """Return the most confident candidate at or above ``threshold``.

    Ties go to the candidate that was extracted first. ``None`` means nothing
    qualified and no enrichment should happen.
    """

    selected: CandidateEntity | None = None
    for candidate in candidates:
        if candidate.confidence < threshold:
            continue
        if selected is None or candidate.confidence > selected.confidence:
            selected = candidate

    if selected is None:
        LOGGER.info("No candidate reached confidence %.2f (%s extracted)", threshold, len(candidates))
    else:
        LOGGER.info("Selected %s %s (confidence %.2f)", selected.kind.value, selected.identity_key, selected.confidence)
    return selected


__all__ = ["DEFAULT_CONFIDENCE_THRESHOLD", "select_candidate"]
