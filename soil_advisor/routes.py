import logging
from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Body, Depends, File, Form, Request, UploadFile
from soil_advisor.config import Settings
from soil_advisor.engine.llm import CompletionProvider
from soil_advisor.engine.pdf_text import extract_pdf_text
from soil_advisor.engine.recommender import crop_recommendations, weather_recommendations
from soil_advisor.engine.soil_fields import extract_soil_metrics
from soil_advisor.engine.weather import WeatherClient
from soil_advisor.errors import AdvisorError, InvalidRequest, StageFailed, WeatherUnavailable
from soil_advisor.schema import (
    AnalyzeResponse,
    CropRecommendationRequest,
    CropRecommendationResponse,
    HealthResponse,
    WeatherRecommendationRequest,
    WeatherRecommendationResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# ---------- dependencies (built once by create_app) ----------
def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_llm(request: Request) -> CompletionProvider:
    return request.app.state.llm

def get_weather(request: Request) -> WeatherClient:
    return request.app.state.weather

def utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"

# ---------- main analysis ----------
@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    soilReport: Optional[UploadFile] = File(None),
    location: Optional[str] = Form(None),
    settings: Settings = Depends(get_settings),
    llm: CompletionProvider = Depends(get_llm),
    weather: WeatherClient = Depends(get_weather),
):
    if soilReport is None or not soilReport.filename:
        raise InvalidRequest("No PDF file uploaded.")

    try:
        logger.info("File received (%s). Extracting text from PDF...", soilReport.filename)
        text = extract_pdf_text(await soilReport.read())
        soil = await extract_soil_metrics(llm, text)
        crops = await crop_recommendations(llm, soil)
    except AdvisorError as exc:
        logger.error("Error during the analysis process: %s", exc)
        raise StageFailed("Failed to process the PDF with the AI model.", exc) from exc

    location = (location or "").strip() or settings.default_location

    # Weather is best-effort here: any failure leaves the weather fields null.
    weather_data = None
    weather_recs = None
    try:
        weather_data = (await weather.current(location)).model_dump()
        weather_recs = await weather_recommendations(llm, weather_data, soil)
    except AdvisorError as exc:
        logger.warning("Weather data not available: %s", exc)

    return {
        "message": "Comprehensive soil analysis completed successfully!",
        "timestamp": utc_timestamp(),
        "data": {
            "soilAnalysis": soil,
            "cropRecommendations": crops,
            "weatherData": weather_data,
            "weatherRecommendations": weather_recs,
            "location": location,
        },
    }

# ---------- recommendations for existing soil data ----------
@router.post("/crop-recommendations", response_model=CropRecommendationResponse)
async def crop_recommendations_endpoint(
    body: Optional[CropRecommendationRequest] = Body(None),
    llm: CompletionProvider = Depends(get_llm),
):
    if body is None or body.soilData is None:
        raise InvalidRequest("Soil data is required.")
    try:
        crops = await crop_recommendations(llm, body.soilData)
    except AdvisorError as exc:
        logger.error("Error generating crop recommendations: %s", exc)
        raise StageFailed("Failed to generate crop recommendations.", exc) from exc
    return {"message": "Crop recommendations generated successfully!", "data": crops}

@router.post("/weather-recommendations", response_model=WeatherRecommendationResponse)
async def weather_recommendations_endpoint(
    body: Optional[WeatherRecommendationRequest] = Body(None),
    llm: CompletionProvider = Depends(get_llm),
    weather: WeatherClient = Depends(get_weather),
):
    body = body or WeatherRecommendationRequest()
    location = (body.location or "").strip()
    if body.soilData is None or not location:
        raise InvalidRequest("Both soilData and location are required.")

    # Weather is the point of this endpoint, so a failed fetch is fatal.
    try:
        weather_data = (await weather.current(location)).model_dump()
    except WeatherUnavailable as exc:
        logger.error("Unable to fetch weather data for %s: %s", location, exc)
        raise StageFailed("Unable to fetch weather data.", exc) from exc

    try:
        recs = await weather_recommendations(llm, weather_data, body.soilData)
    except AdvisorError as exc:
        logger.error("Error generating weather recommendations: %s", exc)
        raise StageFailed("Failed to generate weather recommendations.", exc) from exc

    return {
        "message": "Weather-based recommendations generated successfully!",
        "data": {"weatherData": weather_data, "recommendations": recs, "location": location},
    }

@router.get("/health", response_model=HealthResponse)
def health(weather: WeatherClient = Depends(get_weather)):
    return {
        "status": "healthy",
        "timestamp": utc_timestamp(),
        "services": {
            "gemini": "available",
            "weather": "available" if weather.configured else "not configured",
        },
    }
