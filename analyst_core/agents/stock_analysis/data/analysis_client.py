from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from analyst_core.agents.stock_analysis.domain.models import AnalysisPayload
from analyst_core.agents.stock_analysis.domain.prompt_builder import (
    build_analysis_system_prompt,
    build_analysis_user_instructions,
)
from analyst_core.agents.stock_analysis.interface.contracts import (
    AnalysisPayloadModel,
)
from analyst_core.agents.stock_analysis.interface.parsers import (
    parse_analysis_payload,
)
from analyst_core.agents.stock_analysis.interface.prompt_renderers import (
    build_analysis_chat_prompt,
)
from analyst_core.config.llm_config import HISTORY_MONTHS
from analyst_core.infrastructure.llm.provider import get_llm, has_llm_credentials
from analyst_core.shared.kernel.errors import ProviderError, SchemaError
from analyst_core.shared.kernel.tools.logger import get_logger, log_event

logger = get_logger(__name__)

MISSING_CREDENTIALS_MESSAGE = "API key is missing in environment variables."
EMPTY_RESPONSE_MESSAGE = "No structured response from the analysis model."


class AnalysisProvider(Protocol):
    async def fetch_analysis(self, symbol: str) -> AnalysisPayload: ...


@dataclass
class LlmAnalysisProvider:
    """Asks the chat model for the ten-criterion assessment of one symbol."""

    llm_factory: Callable[..., Any] = get_llm
    credentials_check: Callable[[], bool] = has_llm_credentials
    history_months: int = HISTORY_MONTHS

    async def fetch_analysis(self, symbol: str) -> AnalysisPayload:
        if not self.credentials_check():
            log_event(
                logger,
                event="analysis_provider_missing_credentials",
                message="analysis provider has no api key configured",
                level=logging.ERROR,
                error_code=ProviderError.error_code,
            )
            raise ProviderError(MISSING_CREDENTIALS_MESSAGE)

        log_event(
            logger,
            event="analysis_provider_started",
            message="analysis provider request started",
            fields={"symbol": symbol},
        )

        prompt = build_analysis_chat_prompt(
            system_prompt=build_analysis_system_prompt(),
            user_instructions=build_analysis_user_instructions(self.history_months),
        )
        try:
            llm = self.llm_factory()
            chain = prompt | llm.with_structured_output(AnalysisPayloadModel)
            response = await chain.ainvoke({"symbol": symbol})
        except Exception as exc:
            log_event(
                logger,
                event="analysis_provider_failed",
                message="analysis provider request failed",
                level=logging.ERROR,
                error_code=ProviderError.error_code,
                fields={"symbol": symbol, "exception": str(exc)},
            )
            raise ProviderError(str(exc) or EMPTY_RESPONSE_MESSAGE) from exc

        if response is None:
            log_event(
                logger,
                event="analysis_provider_empty_response",
                message="analysis provider returned no structured response",
                level=logging.ERROR,
                error_code=ProviderError.error_code,
                fields={"symbol": symbol},
            )
            raise ProviderError(EMPTY_RESPONSE_MESSAGE)

        try:
            payload = parse_analysis_payload(response)
        except SchemaError as exc:
            log_event(
                logger,
                event="analysis_provider_schema_invalid",
                message="analysis provider returned an invalid payload",
                level=logging.ERROR,
                error_code=exc.error_code,
                fields={"symbol": symbol, "missing_keys": list(exc.missing_keys)},
            )
            raise

        log_event(
            logger,
            event="analysis_provider_completed",
            message="analysis provider request completed",
            fields={
                "symbol": payload.symbol,
                "history_points": len(payload.historical_data),
            },
        )
        return payload
