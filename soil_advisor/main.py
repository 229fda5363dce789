import logging
from typing import Optional
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from soil_advisor.config import Settings, load_settings
from soil_advisor.engine.llm import CompletionProvider, GeminiCompletion
from soil_advisor.engine.weather import WeatherClient
from soil_advisor.errors import AdvisorError
from soil_advisor.routes import router

logger = logging.getLogger("soil_advisor")

async def advisor_error_handler(request: Request, exc: AdvisorError) -> JSONResponse:
    content = {"error": exc.message}
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)

async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": "Invalid request body.", "details": details})

def create_app(
    settings: Optional[Settings] = None,
    llm: Optional[CompletionProvider] = None,
    weather: Optional[WeatherClient] = None,
) -> FastAPI:
    """Build the service from explicit settings; clients may be injected."""
    if settings is None:
        settings = load_settings()
    if llm is None:
        if not settings.gemini_api_key:
            raise RuntimeError("GEMINI_API_KEY is not set. Add it to .env")
        llm = GeminiCompletion(settings)
        logger.info("Gemini model %s initialized", settings.gemini_model)
    if weather is None:
        weather = WeatherClient.from_settings(settings)
    if not weather.configured:
        logger.warning("OPENWEATHER_API_KEY not set; weather features are unavailable")

    app = FastAPI(title="Soil Advisor - AI soil report analysis", version="1.0.0")
    app.state.settings = settings
    app.state.llm = llm
    app.state.weather = weather

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins, allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"]
    )
    app.add_exception_handler(AdvisorError, advisor_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(router, prefix="/api", tags=["Soil"])
    return app

def run():
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(settings)
    logger.info("Listening for uploads at http://%s:%d/api/analyze", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())

if __name__ == "__main__":
    run()
