"""
AI Integration (PydanticAI on OpenAI).

Three structured-output agents:
    enrichment   - standardized major, major category and gender for a registrant
    university   - profile content for a university record
    city         - visitor guide content for a city record

Agents are created lazily without a model. The OpenAI model is supplied per
run from OPENAI_API_KEY, so tests can swap it with Agent.override().

Usage:
    from fairpass.backend.integrations.ai import enrich_registrant
    enrichment = await enrich_registrant("Ada Lovelace", "comp sci")
"""

from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic_ai import Agent
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider

from fairpass.backend.core.config import get_app_config, get_settings
from fairpass.backend.core.exceptions import ExternalServiceError
from fairpass.backend.core.logging import get_logger

logger = get_logger(__name__)

ENRICHMENT_INSTRUCTIONS = (
    "You are a data normalization assistant for student registrations. "
    "Given a student's name and the major they typed, return:\n"
    "- standardized_major: the specific standardized major (e.g. 'Dentistry', "
    "'Computer Science'), or null if ambiguous or nonsensical\n"
    "- major_category: the broad field (e.g. 'Health', 'Engineering', 'Business', "
    "'Arts', 'Science'), or null\n"
    "- gender: 'Male' or 'Female' inferred from the first name, or null if unisex or unclear"
)

UNIVERSITY_INSTRUCTIONS = (
    "You write accurate profile content for universities exhibiting at education fairs. "
    "Return a professional description of about 100 words, the official website, a logo "
    "URL if one is well known (otherwise null), country, city, a general admissions email "
    "and phone, and 5 to 10 popular programs."
)

CITY_INSTRUCTIONS = (
    "You write travel guide content for students visiting a city for an education fair. "
    "Return an engaging description, practical local tips (safety, transport), emergency "
    "information with police and ambulance numbers, 3 to 5 attractions and 3 student "
    "friendly places to eat."
)


# =============================================================================
# Output Schemas
# =============================================================================


class Enrichment(BaseModel):
    """Normalized registrant attributes. Every field may be unknown."""

    standardized_major: str | None = None
    major_category: str | None = None
    gender: Literal["Male", "Female"] | None = None


class UniversityContent(BaseModel):
    description: str | None = None
    website: str | None = None
    logo_url: str | None = None
    country: str | None = None
    city: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    programs: list[str] = Field(default_factory=list)


class Attraction(BaseModel):
    name: str
    description: str | None = None


class Eatery(BaseModel):
    name: str
    cuisine: str | None = None
    price_range: str | None = None


class CityContent(BaseModel):
    description: str | None = None
    local_tips: str | None = None
    emergency_info: str | None = None
    attractions: list[Attraction] = Field(default_factory=list)
    cafes_and_food: list[Eatery] = Field(default_factory=list)


# =============================================================================
# Agent Definitions
# =============================================================================


_enrichment_agent: Agent[None, Enrichment] | None = None
_university_agent: Agent[None, UniversityContent] | None = None
_city_agent: Agent[None, CityContent] | None = None


def get_enrichment_agent() -> Agent[None, Enrichment]:
    global _enrichment_agent
    if _enrichment_agent is None:
        _enrichment_agent = Agent(
            None,
            output_type=Enrichment,
            instructions=ENRICHMENT_INSTRUCTIONS,
        )
    return _enrichment_agent


def get_university_agent() -> Agent[None, UniversityContent]:
    global _university_agent
    if _university_agent is None:
        _university_agent = Agent(
            None,
            output_type=UniversityContent,
            instructions=UNIVERSITY_INSTRUCTIONS,
        )
    return _university_agent


def get_city_agent() -> Agent[None, CityContent]:
    global _city_agent
    if _city_agent is None:
        _city_agent = Agent(
            None,
            output_type=CityContent,
            instructions=CITY_INSTRUCTIONS,
        )
    return _city_agent


def ai_configured() -> bool:
    return bool(get_settings().openai_api_key)


def _build_model() -> OpenAIChatModel:
    return OpenAIChatModel(
        get_app_config().integrations.openai.model,
        provider=OpenAIProvider(api_key=get_settings().openai_api_key),
    )


def _log_usage(message: str, result: Any) -> None:
    # RunUsage is an attribute on current releases, a method on older ones
    usage = result.usage() if callable(result.usage) else result.usage
    logger.debug(
        message,
        extra={
            "requests": usage.requests,
            "input_tokens": usage.input_tokens,
            "output_tokens": usage.output_tokens,
        },
    )


# =============================================================================
# Operations
# =============================================================================


async def enrich_registrant(name: str, interested_major: str | None) -> Enrichment:
    """
    Normalize a registrant's major and infer gender.

    Returns an all-empty Enrichment when no API key is configured or the
    model call fails, so enrichment never blocks the caller.
    """
    if not ai_configured():
        logger.warning("OPENAI_API_KEY is not set, skipping enrichment")
        return Enrichment()

    prompt = f"Name: {name}\nInterested Major: {interested_major or 'Not specified'}"
    try:
        result = await get_enrichment_agent().run(prompt, model=_build_model())
        _log_usage("Enrichment completed", result)
    except Exception as e:
        logger.error("AI enrichment failed", extra={"error": str(e)})
        return Enrichment()

    return result.output


async def generate_university_content(name: str) -> UniversityContent:
    """
    Draft profile content for a university.

    Raises:
        ExternalServiceError: If no API key is configured or the model call fails
    """
    if not ai_configured():
        raise ExternalServiceError(
            "Failed to generate university content. Ensure OPENAI_API_KEY is set."
        )

    try:
        result = await get_university_agent().run(
            f'Generate profile information for the university named "{name}".',
            model=_build_model(),
        )
        _log_usage("University content generated", result)
    except Exception as e:
        logger.error("University content generation failed", extra={"error": str(e)})
        raise ExternalServiceError("Failed to generate university content.") from e

    return result.output


async def generate_city_content(city: str, country: str) -> CityContent:
    """
    Draft visitor guide content for a city.

    Raises:
        ExternalServiceError: If no API key is configured or the model call fails
    """
    if not ai_configured():
        raise ExternalServiceError("Failed to generate city content. Ensure OPENAI_API_KEY is set.")

    try:
        result = await get_city_agent().run(
            f'Generate guide information for the city "{city}" in "{country}".',
            model=_build_model(),
        )
        _log_usage("City content generated", result)
    except Exception as e:
        logger.error("City content generation failed", extra={"error": str(e)})
        raise ExternalServiceError("Failed to generate city content.") from e

    return result.output
