from .contracts import (
    AnalysisPayloadModel,
    CriteriaModel,
    CriterionModel,
    PricePointModel,
    SavedAnalysisModel,
    ScoreResultModel,
)
from .parsers import parse_analysis_payload, parse_saved_analyses
from .serializers import (
    build_saved_summary,
    build_share_text,
    serialize_saved_analyses,
)

__all__ = [
    "AnalysisPayloadModel",
    "CriteriaModel",
    "CriterionModel",
    "PricePointModel",
    "SavedAnalysisModel",
    "ScoreResultModel",
    "build_saved_summary",
    "build_share_text",
    "parse_analysis_payload",
    "parse_saved_analyses",
    "serialize_saved_analyses",
]
