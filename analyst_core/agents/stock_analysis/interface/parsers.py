from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from analyst_core.agents.stock_analysis.domain.models import (
    AnalysisPayload,
    SavedAnalysis,
)
from analyst_core.agents.stock_analysis.domain.policies import missing_criteria
from analyst_core.shared.kernel.errors import PersistenceError, SchemaError

from .contracts import AnalysisPayloadModel, SavedAnalysisModel
from .mappers import to_analysis_payload, to_saved_analysis

_SAVED_ANALYSES_ADAPTER = TypeAdapter(list[SavedAnalysisModel])


def parse_analysis_payload(value: object) -> AnalysisPayload:
    """
    Validate a raw provider response against the analysis contract.
    Missing criteria are reported by name; nothing is defaulted.
    """
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    if not isinstance(value, Mapping):
        raise SchemaError("Analysis payload must be a JSON object.")

    criteria = value.get("criteria")
    missing = missing_criteria(criteria) if isinstance(criteria, Mapping) else ()
    if not isinstance(criteria, Mapping) or missing:
        missing = missing or ("criteria",)
        raise SchemaError(
            f"Analysis payload is missing required criteria: {', '.join(missing)}",
            missing_keys=missing,
        )

    try:
        model = AnalysisPayloadModel.model_validate(value)
    except PydanticValidationError as exc:
        raise SchemaError(f"Analysis payload is invalid: {exc}") from exc
    return to_analysis_payload(model)


def parse_saved_analyses(raw: str) -> list[SavedAnalysis]:
    try:
        models = _SAVED_ANALYSES_ADAPTER.validate_json(raw)
    except PydanticValidationError as exc:
        raise PersistenceError(f"Saved analyses are unreadable: {exc}") from exc
    return [to_saved_analysis(model) for model in models]
