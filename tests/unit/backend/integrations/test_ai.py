"""
Unit Tests for the AI Integration.

Agents run against PydanticAI's TestModel; nothing reaches OpenAI.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from pydantic_ai.models.test import TestModel

from fairpass.backend.core.exceptions import ExternalServiceError
from fairpass.backend.integrations.ai import (
    Enrichment,
    _log_usage,
    enrich_registrant,
    generate_city_content,
    generate_university_content,
    get_city_agent,
    get_enrichment_agent,
    get_university_agent,
)

SETTINGS = "fairpass.backend.integrations.ai.get_settings"
WITH_KEY = MagicMock(openai_api_key="sk-test")


class TestEnrichRegistrant:
    @pytest.mark.asyncio
    async def test_without_key_returns_empty(self):
        """Should skip the model entirely when no key is configured."""
        assert await enrich_registrant("Ada Lovelace", "comp sci") == Enrichment()

    @pytest.mark.asyncio
    async def test_structured_output(self):
        model = TestModel(
            custom_output_args={
                "standardized_major": "Computer Science",
                "major_category": "Engineering",
                "gender": "Female",
            }
        )

        with patch(SETTINGS, return_value=WITH_KEY):
            with get_enrichment_agent().override(model=model):
                enrichment = await enrich_registrant("Ada Lovelace", "comp sci")

        assert enrichment.standardized_major == "Computer Science"
        assert enrichment.major_category == "Engineering"
        assert enrichment.gender == "Female"

    @pytest.mark.asyncio
    async def test_model_failure_returns_empty(self):
        with patch(SETTINGS, return_value=WITH_KEY):
            with patch.object(get_enrichment_agent(), "run", side_effect=RuntimeError("rate limited")):
                assert await enrich_registrant("Ada", None) == Enrichment()


class TestContentGeneration:
    @pytest.mark.asyncio
    async def test_university_requires_key(self):
        with pytest.raises(ExternalServiceError, match="OPENAI_API_KEY"):
            await generate_university_content("Bosphorus University")

    @pytest.mark.asyncio
    async def test_university_content(self):
        model = TestModel(
            custom_output_args={
                "description": "A leading public research university.",
                "website": "https://boun.edu.tr",
                "programs": ["Computer Engineering", "Economics"],
            }
        )

        with patch(SETTINGS, return_value=WITH_KEY):
            with get_university_agent().override(model=model):
                content = await generate_university_content("Bosphorus University")

        assert content.website == "https://boun.edu.tr"
        assert content.programs == ["Computer Engineering", "Economics"]

    @pytest.mark.asyncio
    async def test_city_content(self):
        model = TestModel(
            custom_output_args={
                "description": "Where two continents meet.",
                "attractions": [{"name": "Hagia Sophia"}],
            }
        )

        with patch(SETTINGS, return_value=WITH_KEY):
            with get_city_agent().override(model=model):
                content = await generate_city_content("Istanbul", "Turkey")

        assert content.attractions[0].name == "Hagia Sophia"
        assert content.cafes_and_food == []

    @pytest.mark.asyncio
    async def test_city_failure_raises(self):
        with patch(SETTINGS, return_value=WITH_KEY):
            with patch.object(get_city_agent(), "run", side_effect=RuntimeError("timeout")):
                with pytest.raises(ExternalServiceError, match="Failed to generate city content"):
                    await generate_city_content("Istanbul", "Turkey")


class TestLogUsage:
    def test_usage_attribute(self):
        usage = SimpleNamespace(requests=1, input_tokens=40, output_tokens=12)

        _log_usage("Enrichment completed", SimpleNamespace(usage=usage))

    def test_usage_method(self):
        usage = SimpleNamespace(requests=1, input_tokens=40, output_tokens=12)

        _log_usage("Enrichment completed", SimpleNamespace(usage=lambda: usage))

    @pytest.mark.asyncio
    async def test_usage_failure_keeps_enrichment_contract(self):
        """Should treat a broken usage read like any other model failure."""
        model = TestModel(custom_output_args={"standardized_major": "Law"})

        with patch(SETTINGS, return_value=WITH_KEY):
            with patch("fairpass.backend.integrations.ai._log_usage", side_effect=TypeError("not callable")):
                with get_enrichment_agent().override(model=model):
                    assert await enrich_registrant("Ada", "law") == Enrichment()
