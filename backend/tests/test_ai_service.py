"""
Unit tests for AIService: chat replies, report analysis, risk profile and metric extraction.
"""

import json
import pytest

from medico.core.exceptions import AIServiceError, ReportAnalysisError
from medico.llm.base import LLMResponse
from medico.models import Message, MessageRole, Attachment, HealthStats, ViewState, VitalStatus
from medico.services import prompts
from medico.services.ai_service import (
    AIService, EMPTY_REPLY_FALLBACK, ERROR_FALLBACK, NOT_CONFIGURED_NOTICE,
    parse_json_reply, history_to_llm_messages, default_risk_profile,
)

IMAGE = Attachment(mime_type="image/png", data="iVBORw0KGgo=", name="report.png")


def _reply(content):
    return LLMResponse(content=content, model="test")


class TestHelpers:

    def test_parse_plain_json(self):
        assert parse_json_reply('{"a": 1}') == {"a": 1}

    def test_parse_fenced_json(self):
        assert parse_json_reply('```json\n{"a": 1}\n```') == {"a": 1}

    def test_parse_invalid_json(self):
        with pytest.raises(json.JSONDecodeError):
            parse_json_reply("not json")

    def test_history_skips_system_and_images(self):
        history = [
            Message.create(MessageRole.SYSTEM, "Synced"),
            Message.create(MessageRole.USER, "see scan", [IMAGE]),
            Message.create(MessageRole.MODEL, "Looks fine"),
        ]
        converted = history_to_llm_messages(history)
        assert [(m.role, m.text) for m in converted] == [("user", "see scan"), ("model", "Looks fine")]
        assert not converted[0].has_images

    def test_default_risk_profile(self):
        profile = default_risk_profile()
        assert profile.overall_score == 15
        assert profile.lifestyle == 20


class TestSendMessage:
    """Tests for conversational replies."""

    @pytest.mark.asyncio
    async def test_not_configured(self):
        reply = await AIService(None).send_message([], "Hello")
        assert reply == NOT_CONFIGURED_NOTICE

    @pytest.mark.asyncio
    async def test_reply_with_history_and_mode_instruction(self, ai_service, mock_provider):
        history = [
            Message.create(MessageRole.USER, "I have a headache"),
            Message.create(MessageRole.MODEL, "How long has it lasted?"),
        ]
        reply = await ai_service.send_message(history, "Two days", mode=ViewState.REMEDY)

        assert reply == "Test reply"
        args, kwargs = mock_provider.chat_completion.call_args
        messages = args[0]
        assert [m.text for m in messages] == ["I have a headache", "How long has it lasted?", "Two days"]
        assert kwargs["system_instruction"] == prompts.REMEDY_SYSTEM_INSTRUCTION

    @pytest.mark.asyncio
    async def test_image_only_message_gets_default_prompt(self, ai_service, mock_provider):
        await ai_service.send_message([], "", attachments=[IMAGE])
        last = mock_provider.chat_completion.call_args[0][0][-1]
        assert last.text == prompts.IMAGE_ONLY_PROMPT
        assert last.images[0].mime_type == "image/png"
        assert last.images[0].data == IMAGE.data

    @pytest.mark.asyncio
    async def test_health_context_appended(self, ai_service, mock_provider):
        stats = HealthStats(heart_rate=88, steps=1200, sleep_hours=5.5, spo2=97,
                            temperature=99.1, source="Google Fit")
        await ai_service.send_message([], "Am I okay?", health_context=stats)
        instruction = mock_provider.chat_completion.call_args.kwargs["system_instruction"]
        assert instruction.startswith(prompts.CHAT_SYSTEM_INSTRUCTION)
        assert "[CONTEXT]" in instruction
        assert "Google Fit" in instruction
        assert "Heart Rate: 88 bpm" in instruction

    @pytest.mark.asyncio
    async def test_empty_reply_fallback(self, ai_service, mock_provider):
        mock_provider.chat_completion.return_value = _reply("")
        assert await ai_service.send_message([], "Hello") == EMPTY_REPLY_FALLBACK

    @pytest.mark.asyncio
    async def test_provider_error_fallback(self, ai_service, mock_provider):
        mock_provider.chat_completion.side_effect = RuntimeError("quota exceeded")
        assert await ai_service.send_message([], "Hello") == ERROR_FALLBACK


class TestAnalyzeMedicalReport:
    """Tests for structured report analysis."""

    @pytest.mark.asyncio
    async def test_success(self, ai_service, mock_provider):
        mock_provider.chat_completion.return_value = _reply(json.dumps({
            "risk_score": 62,
            "summary": "Elevated LDL cholesterol.",
            "key_findings": ["LDL 165 mg/dL"],
            "recommendations": ["Repeat lipid panel in 3 months"],
            "vital_signs": [{"name": "LDL", "value": "165 mg/dL", "status": "Warning"}],
        }))

        analysis = await ai_service.analyze_medical_report(IMAGE)

        assert analysis.risk_score == 62
        assert analysis.vital_signs[0].status == VitalStatus.WARNING
        kwargs = mock_provider.chat_completion.call_args.kwargs
        assert kwargs["response_schema"] == prompts.REPORT_ANALYSIS_SCHEMA
        assert kwargs["temperature"] == 0.2
        assert mock_provider.chat_completion.call_args[0][0][0].has_images

    @pytest.mark.asyncio
    async def test_empty_reply_raises(self, ai_service, mock_provider):
        mock_provider.chat_completion.return_value = _reply("")
        with pytest.raises(ReportAnalysisError):
            await ai_service.analyze_medical_report(IMAGE)

    @pytest.mark.asyncio
    async def test_schema_mismatch_raises(self, ai_service, mock_provider):
        mock_provider.chat_completion.return_value = _reply('{"summary": "no score"}')
        with pytest.raises(ReportAnalysisError):
            await ai_service.analyze_medical_report(IMAGE)

    @pytest.mark.asyncio
    async def test_provider_error_raises(self, ai_service, mock_provider):
        mock_provider.chat_completion.side_effect = RuntimeError("timeout")
        with pytest.raises(ReportAnalysisError) as exc_info:
            await ai_service.analyze_medical_report(IMAGE)
        assert exc_info.value.code == "REPORT_ANALYSIS_ERROR"


class TestGenerateRiskProfile:
    """Tests for risk profile inference."""

    @pytest.mark.asyncio
    async def test_uses_only_user_text(self, ai_service, mock_provider):
        mock_provider.chat_completion.return_value = _reply(json.dumps({
            "overall_score": 45, "cardiovascular": 60, "metabolic": 40,
            "respiratory": 10, "lifestyle": 55, "summary": "Watch blood pressure.",
        }))
        messages = [
            Message.create(MessageRole.USER, "My blood pressure is often 150/95"),
            Message.create(MessageRole.MODEL, "That is elevated."),
            Message.create(MessageRole.USER, "I smoke a pack a day"),
        ]

        profile = await ai_service.generate_risk_profile(messages)

        assert profile.overall_score == 45
        assert profile.cardiovascular == 60
        prompt = mock_provider.chat_completion.call_args[0][0][0].text
        assert "User: My blood pressure is often 150/95" in prompt
        assert "User: I smoke a pack a day" in prompt
        assert "That is elevated." not in prompt

    @pytest.mark.asyncio
    async def test_no_user_text_raises(self, ai_service, mock_provider):
        with pytest.raises(AIServiceError):
            await ai_service.generate_risk_profile([Message.create(MessageRole.MODEL, "Hello!")])
        mock_provider.chat_completion.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_reply_raises(self, ai_service, mock_provider):
        mock_provider.chat_completion.return_value = _reply("I cannot help with that")
        with pytest.raises(AIServiceError):
            await ai_service.generate_risk_profile([Message.create(MessageRole.USER, "hi")])

    @pytest.mark.asyncio
    async def test_not_configured_raises(self):
        with pytest.raises(AIServiceError):
            await AIService(None).generate_risk_profile([Message.create(MessageRole.USER, "hi")])


class TestExtractHealthMetrics:
    """Tests for metric extraction from chat input."""

    @pytest.mark.asyncio
    async def test_extracts_valid_metrics(self, ai_service, mock_provider):
        mock_provider.chat_completion.return_value = _reply(json.dumps({"metrics": [
            {"date": "2026-02-01", "value": 210, "unit": "mg/dL", "type": "Total Cholesterol"},
            {"date": "2026-02-01", "value": "high", "unit": "mg/dL", "type": "Glucose"},
        ]}))

        metrics = await ai_service.extract_health_metrics("cholesterol was 210 on Feb 1")

        assert len(metrics) == 1
        assert metrics[0].type == "Total Cholesterol"
        assert metrics[0].value == 210

    @pytest.mark.asyncio
    async def test_passes_attachment(self, ai_service, mock_provider):
        mock_provider.chat_completion.return_value = _reply('{"metrics": []}')
        await ai_service.extract_health_metrics("", IMAGE)
        assert mock_provider.chat_completion.call_args[0][0][0].has_images

    @pytest.mark.asyncio
    async def test_failure_returns_empty_list(self, ai_service, mock_provider):
        mock_provider.chat_completion.side_effect = RuntimeError("boom")
        assert await ai_service.extract_health_metrics("glucose 100") == []

    @pytest.mark.asyncio
    async def test_not_configured_returns_empty_list(self):
        assert await AIService(None).extract_health_metrics("glucose 100") == []
