"""
Risk scorer.

Scores risks as probability x impact, buckets the score into a severity level
and summarizes a set of risks by level and status.
"""

import logging
from typing import Any, Optional, Sequence

from delivery_analytics.models import (
    AssessedRisk, RiskAssessment, RiskFactor, RiskLevel,
    RiskReport, RiskStatus, RiskSummary, RiskThresholds,
)
from delivery_analytics.utils.errors import ValidationError
from delivery_analytics.utils.numeric import mean, round_half_up

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def validate_thresholds(thresholds: RiskThresholds) -> None:
    max_score = MAX_RATING * MAX_RATING
    if not MIN_RATING <= thresholds.medium < thresholds.high < thresholds.critical <= max_score:
        raise ValidationError(
            f"risk thresholds must satisfy 1 <= medium < high < critical <= {max_score}",
            field="risk_thresholds",
            details=thresholds.model_dump(),
        )


def _validate_rating(value: Any, field: str) -> int:
    # bool is an int subclass but True/False are not ratings
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer between 1 and 5, got {value!r}", field=field)
    if not MIN_RATING <= value <= MAX_RATING:
        raise ValidationError(f"{field} must be between 1 and 5, got {value}", field=field)
    return value


def classify_risk(score: int, thresholds: Optional[RiskThresholds] = None) -> RiskLevel:
    """Map a score to a level, checking the highest level first"""
    thresholds = thresholds or RiskThresholds()
    if score >= thresholds.critical:
        return RiskLevel.CRITICAL
    elif score >= thresholds.high:
        return RiskLevel.HIGH
    elif score >= thresholds.medium:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


class RiskScorer:
    """Scores individual risks and summarizes risk registers"""

    @staticmethod
    def score(probability: int, impact: int, thresholds: Optional[RiskThresholds] = None) -> RiskAssessment:
        """
        Score a risk.

        Raises:
            ValidationError: probability or impact is not an integer in [1, 5]
        """
        probability = _validate_rating(probability, "probability")
        impact = _validate_rating(impact, "impact")
        risk_score = probability * impact
        return RiskAssessment(
            probability=probability,
            impact=impact,
            risk_score=risk_score,
            risk_level=classify_risk(risk_score, thresholds),
        )

    @staticmethod
    def assess(risk: RiskFactor, thresholds: Optional[RiskThresholds] = None) -> AssessedRisk:
        try:
            assessment = RiskScorer.score(risk.probability, risk.impact, thresholds)
        except ValidationError as e:
            e.details.setdefault("risk_id", risk.id)
            raise
        return AssessedRisk(
            risk_id=risk.id,
            name=risk.name,
            risk_type=risk.risk_type,
            status=risk.status,
            assessment=assessment,
        )

    @staticmethod
    def reassess(
        risk: RiskFactor,
        probability: Optional[int] = None,
        impact: Optional[int] = None,
        thresholds: Optional[RiskThresholds] = None,
    ) -> RiskAssessment:
        """Score a risk with updated probability and/or impact, leaving the record as is"""
        return RiskScorer.score(
            risk.probability if probability is None else probability,
            risk.impact if impact is None else impact,
            thresholds,
        )

    @staticmethod
    def summarize(risks: Sequence[RiskFactor], thresholds: Optional[RiskThresholds] = None) -> RiskReport:
        """
        Assess every risk and aggregate counts by level and status.

        All risks are validated before anything is aggregated.
        """
        thresholds = thresholds or RiskThresholds()
        validate_thresholds(thresholds)

        assessed = [RiskScorer.assess(r, thresholds) for r in risks]

        by_level = {level.value: 0 for level in RiskLevel}
        by_status = {status.value: 0 for status in RiskStatus}
        for item in assessed:
            by_level[item.assessment.risk_level.value] += 1
            by_status[item.status.value] += 1

        summary = RiskSummary(
            total=len(assessed),
            by_level=by_level,
            by_status=by_status,
            avg_score=round_half_up(mean([a.assessment.risk_score for a in assessed]), 1),
        )

        logger.debug("Scored %d risks, avg score %s", summary.total, summary.avg_score)

        return RiskReport(risks=assessed, summary=summary)
