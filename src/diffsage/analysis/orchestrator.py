"""Primary/fallback analysis of a filtered diff.

The orchestrator makes at most two requests:

1. Primary: the diff, truncated to the primary model's content budget if
   needed, is sent to the primary model.
2. Fallback: only if the provider rejected the primary request as too large.
   The content is re-truncated to a small fixed budget and sent once to the
   fallback model with a smaller response cap.

Any other failure, and any failure of the fallback, ends the run. There is
no third attempt.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from diffsage.analysis.prompts import AnalysisIdentity, get_analysis_prompt
from diffsage.budget.truncator import BudgetTruncator
from diffsage.config import LLMConfig, ModelProfile
from diffsage.exceptions import AnalysisError, LLMError, SizeRejectionError
from diffsage.llm.base import CompletionRequest, LLMProvider, LLMResponse, Message

logger = logging.getLogger("diffsage.analysis")


class AnalysisState(str, Enum):
    PRIMARY = "primary"
    FALLBACK = "fallback"


@dataclass
class AnalysisResult:
    """Final result of a successful analysis."""

    text: str
    model: str
    state: AnalysisState
    requests: int
    content_tokens: int
    truncated: bool = False
    usage: dict[str, int] = field(default_factory=dict)

    @property
    def fell_back(self) -> bool:
        return self.state is AnalysisState.FALLBACK


class AnalysisOrchestrator:
    """Runs the primary request and, on a size rejection, the single fallback."""

    def __init__(
        self,
        client: LLMProvider,
        config: LLMConfig,
        truncator: BudgetTruncator | None = None,
        on_request: Callable[[AnalysisState, CompletionRequest, int], None] | None = None,
    ) -> None:
        self.client = client
        self.config = config
        self.truncator = truncator or BudgetTruncator()
        self.estimator = self.truncator.estimator
        self.on_request = on_request
        # Fail before any request if either model is unknown.
        self.primary_profile = config.profile_for(config.model)
        self.fallback_profile = config.profile_for(config.fallback_model)

    def _build_request(
        self, model: str, profile: ModelProfile, identity: AnalysisIdentity, content: str
    ) -> CompletionRequest:
        return CompletionRequest(
            model=model,
            messages=[Message(role="user", content=get_analysis_prompt(identity, content))],
            max_tokens=profile.max_response_tokens,
            temperature=self.config.temperature,
        )

    async def _send(
        self, state: AnalysisState, request: CompletionRequest, content_tokens: int
    ) -> LLMResponse:
        if self.on_request:
            self.on_request(state, request, content_tokens)
        return await self.client.complete(request)

    async def analyze(self, filtered_diff: str, identity: AnalysisIdentity) -> AnalysisResult:
        """Analyze a filtered diff.

        Raises:
            AnalysisError: The primary request failed for a reason other than
                size, or the fallback request failed.
        """
        estimate = self.estimator.estimate

        budget = self.primary_profile.content_budget
        content = filtered_diff
        truncated = False
        if estimate(content) > budget:
            logger.info(f"Diff exceeds {budget} tokens, truncating for {self.config.model}")
            content = self.truncator.truncate(content, budget)
            truncated = True

        content_tokens = estimate(content)
        logger.info(
            f"Estimated usage: {content_tokens + self.primary_profile.prompt_overhead:,}"
            f" / {self.primary_profile.context_window:,} tokens"
        )

        request = self._build_request(
            self.config.model, self.primary_profile, identity, content
        )
        try:
            response = await self._send(AnalysisState.PRIMARY, request, content_tokens)
        except SizeRejectionError as e:
            logger.warning(
                f"{self.config.model} rejected the request as too large, "
                f"retrying with {self.config.fallback_model}"
            )
            logger.debug(f"Size rejection body: {e.body}")
        except LLMError as e:
            raise AnalysisError(
                f"{self.config.model} request failed: {e}", model=self.config.model, cause=e
            ) from e
        else:
            return AnalysisResult(
                text=response.content,
                model=request.model,
                state=AnalysisState.PRIMARY,
                requests=1,
                content_tokens=content_tokens,
                truncated=truncated,
                usage=response.usage,
            )

        if content_tokens > self.config.fallback_trigger_tokens:
            # Re-truncate the untruncated diff so the stats header describes all of it.
            content = self.truncator.truncate(
                filtered_diff, self.config.fallback_content_tokens
            )
            truncated = True
            content_tokens = estimate(content)

        request = self._build_request(
            self.config.fallback_model, self.fallback_profile, identity, content
        )
        try:
            response = await self._send(AnalysisState.FALLBACK, request, content_tokens)
        except LLMError as e:
            raise AnalysisError(
                f"{self.config.fallback_model} fallback request failed: {e}",
                model=self.config.fallback_model,
                cause=e,
            ) from e

        logger.info(f"Analysis completed with {self.config.fallback_model}")
        return AnalysisResult(
            text=response.content,
            model=request.model,
            state=AnalysisState.FALLBACK,
            requests=2,
            content_tokens=content_tokens,
            truncated=truncated,
            usage=response.usage,
        )
