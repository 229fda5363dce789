import json
import logging
from typing import Any, Dict
from langchain_core.prompts import PromptTemplate
from soil_advisor.engine.llm import CompletionProvider
from soil_advisor.engine.parsing import expect_json_object
from soil_advisor.schema import CROP_RECOMMENDATION_FIELDS, WEATHER_RECOMMENDATION_FIELDS

logger = logging.getLogger(__name__)

_crop_prompt = PromptTemplate.from_template(
    """Based on the following soil analysis data, provide smart crop recommendations and a detailed farming plan:

Soil Data: {soil_data}

Please provide a comprehensive analysis including:
1. Soil health assessment
2. Recommended crops based on soil conditions
3. Pathogenicity alerts (if pathogen count is high)
4. Soil improvement recommendations
5. Detailed farming plan with timelines
6. Nutrient management suggestions

Respond with a single JSON object (no commentary, no markdown) containing:
{fields}"""
)

_weather_prompt = PromptTemplate.from_template(
    """Based on the current weather conditions and soil analysis, provide weather-based crop recommendations:

Weather Data: {weather_data}
Soil Data: {soil_data}

Provide:
1. Weather-based crop suitability
2. Seasonal planting recommendations
3. Weather risk alerts
4. Irrigation recommendations
5. Weather-appropriate farming activities

Respond with a single JSON object (no commentary, no markdown) containing:
{fields}"""
)

def _field_list(fields: Dict[str, str]) -> str:
    return "\n".join(f"- {name}: {desc}" for name, desc in fields.items())

def crop_prompt(soil_data: Dict[str, Any]) -> str:
    return _crop_prompt.format(
        soil_data=json.dumps(soil_data),
        fields=_field_list(CROP_RECOMMENDATION_FIELDS),
    )

def weather_prompt(weather_data: Dict[str, Any], soil_data: Dict[str, Any]) -> str:
    return _weather_prompt.format(
        weather_data=json.dumps(weather_data),
        soil_data=json.dumps(soil_data),
        fields=_field_list(WEATHER_RECOMMENDATION_FIELDS),
    )

async def crop_recommendations(llm: CompletionProvider, soil_data: Dict[str, Any]) -> Dict[str, Any]:
    logger.info("Requesting crop recommendations")
    reply = await llm.complete(crop_prompt(soil_data))
    return expect_json_object(reply, "crop recommendations")

async def weather_recommendations(
    llm: CompletionProvider,
    weather_data: Dict[str, Any],
    soil_data: Dict[str, Any],
) -> Dict[str, Any]:
    logger.info("Requesting weather-based recommendations")
    reply = await llm.complete(weather_prompt(weather_data, soil_data))
    return expect_json_object(reply, "weather recommendations")
