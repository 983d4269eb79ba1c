from .models import (
    CRITERION_KEYS,
    FA_CRITERIA,
    MOM_CRITERIA,
    TA_CRITERIA,
    AnalysisPayload,
    Criterion,
    PricePoint,
    Rating,
    RatingBand,
    SavedAnalysis,
    ScoreResult,
)
from .policies import derive_rating, missing_criteria, score_analysis

__all__ = [
    "CRITERION_KEYS",
    "FA_CRITERIA",
    "MOM_CRITERIA",
    "TA_CRITERIA",
    "AnalysisPayload",
    "Criterion",
    "PricePoint",
    "Rating",
    "RatingBand",
    "SavedAnalysis",
    "ScoreResult",
    "derive_rating",
    "missing_criteria",
    "score_analysis",
]
