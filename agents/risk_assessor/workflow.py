"""
Risk Assessor.
Maps a final confidence score to a risk tier. Purely instrument-level,
no portfolio data.
"""
from libs.domain_models.recommendation import RiskLevel


LOW_RISK_ABOVE = 80
HIGH_RISK_BELOW = 60


def assess_risk(confidence: float) -> RiskLevel:
    """Confidence above 80 is low risk, below 60 is high risk, otherwise medium."""
    if confidence > LOW_RISK_ABOVE:
        return RiskLevel.LOW
    if confidence < HIGH_RISK_BELOW:
        return RiskLevel.HIGH
    return RiskLevel.MEDIUM
