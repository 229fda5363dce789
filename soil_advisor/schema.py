from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, Literal, Optional, Tuple

class SoilMetrics(BaseModel):
    """Keys the extraction prompt asks for. Model output is not validated against this."""
    model_config = ConfigDict(extra="allow")

    moisture: Optional[float] = None
    phLevel: Optional[float] = None
    conductivity: Optional[float] = None
    organicMatter: Optional[float] = None
    nitrogen: Optional[float] = None
    phosphorus: Optional[float] = None
    potassium: Optional[float] = None
    calcium: Optional[float] = None
    magnesium: Optional[float] = None
    sulfur: Optional[float] = None
    pathogenCount: Optional[float] = None

SOIL_METRIC_KEYS: Tuple[str, ...] = tuple(SoilMetrics.model_fields)

# Requested shapes for the two recommendation prompts
CROP_RECOMMENDATION_FIELDS: Dict[str, str] = {
    "soilHealth": '"excellent" | "good" | "fair" | "poor"',
    "recommendedCrops": "array of crop names",
    "pathogenAlert": 'object with "alert" (boolean) and "message" (string)',
    "soilImprovements": "array of improvement suggestions",
    "farmingPlan": "detailed plan object with timelines",
    "nutrientRecommendations": "array of nutrient suggestions",
    "riskFactors": "array of identified risks",
}

WEATHER_RECOMMENDATION_FIELDS: Dict[str, str] = {
    "weatherSuitability": "assessment of current weather for farming",
    "seasonalRecommendations": "array of seasonal advice",
    "weatherAlerts": "array of weather-related warnings",
    "irrigationAdvice": "irrigation recommendations",
    "farmingActivities": "recommended activities for current weather",
}

class WeatherSnapshot(BaseModel):
    temperature: float
    humidity: float
    description: str
    windSpeed: float
    pressure: float

# ---------- request bodies ----------
# Fields are optional so a missing value is a 400 with a short message, not a 422.
class CropRecommendationRequest(BaseModel):
    soilData: Optional[Dict[str, Any]] = None

class WeatherRecommendationRequest(BaseModel):
    soilData: Optional[Dict[str, Any]] = None
    location: Optional[str] = None

# ---------- response envelopes ----------
class AnalysisData(BaseModel):
    soilAnalysis: Dict[str, Any]
    cropRecommendations: Dict[str, Any]
    weatherData: Optional[WeatherSnapshot] = None
    weatherRecommendations: Optional[Dict[str, Any]] = None
    location: str

class AnalyzeResponse(BaseModel):
    message: str
    timestamp: str
    data: AnalysisData

class CropRecommendationResponse(BaseModel):
    message: str
    data: Dict[str, Any]

class WeatherRecommendationData(BaseModel):
    weatherData: WeatherSnapshot
    recommendations: Dict[str, Any]
    location: str

class WeatherRecommendationResponse(BaseModel):
    message: str
    data: WeatherRecommendationData

class HealthServices(BaseModel):
    gemini: Literal["available"]
    weather: Literal["available", "not configured"]

class HealthResponse(BaseModel):
    status: str
    timestamp: str
    services: HealthServices
