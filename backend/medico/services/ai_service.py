"""
AI Service - the single place that talks to the generative-AI provider.

Chat replies degrade to fixed fallback text on any failure. Structured tasks
(report analysis, risk profile) raise and let the caller decide what to
substitute; metric extraction returns an empty list.
"""

import json
import logging
import re
from datetime import date
from typing import Optional, List, Dict, Any

from pydantic import ValidationError

from ..config import settings
from ..core.exceptions import AIServiceError, ReportAnalysisError
from ..llm import LLMProvider, LLMMessage, InlineImage, create_llm_provider
from ..models import (
    Message, MessageRole, Attachment, ViewState,
    HealthStats, HealthMetric, HealthRiskProfile, HealthRiskAnalysis,
)
from . import prompts

logger = logging.getLogger(__name__)

EMPTY_REPLY_FALLBACK = "I'm sorry, I couldn't process that."
ERROR_FALLBACK = "I encountered an error while processing your request. Please try again."
NOT_CONFIGURED_NOTICE = (
    "[AI service not configured. Set LLM_API_KEY and LLM_PROVIDER in the environment "
    "to enable AI responses.]"
)

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def parse_json_reply(text: str) -> Any:
    """Parse a structured reply, tolerating a surrounding Markdown code fence."""
    cleaned = text.strip()
    match = _FENCE_RE.match(cleaned)
    if match:
        cleaned = match.group(1)
    return json.loads(cleaned)


def to_inline_images(attachments: Optional[List[Attachment]]) -> List[InlineImage]:
    return [InlineImage(mime_type=a.mime_type, data=a.data) for a in attachments or []]


def history_to_llm_messages(history: List[Message]) -> List[LLMMessage]:
    """
    Convert stored chat history to provider messages.

    Only text is resent; images stay with the turn they were sent in.
    System notices are UI-only and never reach the model.
    """
    converted = []
    for m in history:
        if m.role == MessageRole.SYSTEM:
            continue
        converted.append(LLMMessage(role=m.role.value, text=m.text))
    return converted


def default_risk_profile() -> HealthRiskProfile:
    """Profile shown before (or instead of) an AI-generated one."""
    return HealthRiskProfile(
        overall_score=15,
        cardiovascular=10,
        metabolic=10,
        respiratory=10,
        lifestyle=20,
        summary="Not enough information yet. Chat with Medico Assistant to build your risk profile.",
    )


class AIService:
    """Builds prompts for each task and maps replies to view models."""

    def __init__(self, provider: Optional[LLMProvider], temperature: float = 0.7):
        self.provider = provider
        self.temperature = temperature

    @property
    def configured(self) -> bool:
        return self.provider is not None

    async def send_message(
        self,
        history: List[Message],
        new_message: str,
        attachments: Optional[List[Attachment]] = None,
        health_context: Optional[HealthStats] = None,
        mode: ViewState = ViewState.CHAT,
    ) -> str:
        """
        Get the model's reply to ``new_message`` given the prior conversation.

        Never raises: failures are logged and answered with fallback text.
        """
        if self.provider is None:
            return NOT_CONFIGURED_NOTICE

        images = to_inline_images(attachments)
        text = new_message
        if not text.strip() and images:
            text = prompts.IMAGE_ONLY_PROMPT

        system_instruction = prompts.system_instruction_for(mode)
        if health_context is not None:
            system_instruction += prompts.health_context_block(health_context)

        messages = history_to_llm_messages(history)
        messages.append(LLMMessage.multimodal("user", text, images))

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Chat request: mode={mode.value}, history={len(history)}, "
                f"images={len(images)}, health_context={health_context is not None}"
            )

        try:
            response = await self.provider.chat_completion(
                messages,
                system_instruction=system_instruction,
                temperature=self.temperature,
            )
        except Exception as e:
            logger.error(
                f"Chat request failed: {e}",
                exc_info=True,
                extra={"extra_fields": {"mode": mode.value, "error": str(e)}}
            )
            return ERROR_FALLBACK

        return response.content or EMPTY_REPLY_FALLBACK

    async def _generate_json(
        self,
        task: str,
        prompt: str,
        schema: Dict[str, Any],
        images: Optional[List[InlineImage]] = None,
    ) -> Any:
        if self.provider is None:
            raise AIServiceError("AI service not configured", task=task)

        try:
            response = await self.provider.chat_completion(
                [LLMMessage.multimodal("user", prompt, images)],
                response_schema=schema,
                temperature=0.2,
            )
        except Exception as e:
            raise AIServiceError(f"AI request failed: {e}", task=task) from e

        if not response.content:
            raise AIServiceError("Empty response", task=task)

        try:
            return parse_json_reply(response.content)
        except json.JSONDecodeError as e:
            raise AIServiceError("Response was not valid JSON", task=task,
                                 details={"reply": response.content[:200]}) from e

    async def analyze_medical_report(self, image: Attachment) -> HealthRiskAnalysis:
        """
        Analyze a medical report image.

        Raises:
            ReportAnalysisError: On any failure, including an empty reply
        """
        try:
            data = await self._generate_json(
                "report_analysis",
                prompts.REPORT_ANALYSIS_PROMPT,
                prompts.REPORT_ANALYSIS_SCHEMA,
                images=to_inline_images([image]),
            )
            analysis = HealthRiskAnalysis.model_validate(data)
        except (AIServiceError, ValidationError) as e:
            logger.error(f"Report analysis error: {e}", exc_info=True)
            raise ReportAnalysisError(str(e)) from e

        logger.info(
            "Report analyzed",
            extra={"extra_fields": {
                "risk_score": analysis.risk_score,
                "vital_signs": len(analysis.vital_signs),
            }}
        )
        return analysis

    async def generate_risk_profile(self, messages: List[Message]) -> HealthRiskProfile:
        """
        Infer a risk profile from what the user has said.

        Raises:
            AIServiceError: If there is nothing to analyze or the AI call fails;
                callers substitute default_risk_profile()
        """
        lines = [f"User: {m.text}" for m in messages if m.role == MessageRole.USER and m.text.strip()]
        if not lines:
            raise AIServiceError("No conversation to analyze", task="risk_profile")

        data = await self._generate_json(
            "risk_profile",
            prompts.RISK_PROFILE_PROMPT.format(conversation="\n".join(lines)),
            prompts.RISK_PROFILE_SCHEMA,
        )
        try:
            return HealthRiskProfile.model_validate(data)
        except ValidationError as e:
            raise AIServiceError("Risk profile did not match schema", task="risk_profile") from e

    async def extract_health_metrics(
        self,
        text: str,
        attachment: Optional[Attachment] = None,
    ) -> List[HealthMetric]:
        """Pull dated metric values out of a message. Returns [] on any failure."""
        prompt = prompts.METRIC_EXTRACTION_PROMPT.format(
            today=date.today().isoformat(),
            text=text or "(no text, see image)",
        )
        images = to_inline_images([attachment] if attachment else None)
        try:
            data = await self._generate_json("metric_extraction", prompt, prompts.METRIC_EXTRACTION_SCHEMA, images)
        except AIServiceError as e:
            logger.warning(f"Metric extraction failed: {e}")
            return []

        items = data.get("metrics", []) if isinstance(data, dict) else data
        metrics = []
        for item in items if isinstance(items, list) else []:
            try:
                metrics.append(HealthMetric.model_validate(item))
            except ValidationError:
                logger.debug(f"Skipping malformed metric: {item!r}")
        return metrics


def get_ai_service() -> AIService:
    """Build the AIService from settings (FastAPI dependency)."""
    provider = create_llm_provider(
        provider=settings.llm_provider,
        api_key=settings.resolved_llm_api_key,
        model=settings.llm_model,
        base_url=settings.llm_base_url,
        timeout=settings.llm_timeout,
    )
    return AIService(provider, temperature=settings.llm_temperature)
