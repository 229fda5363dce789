import json
from typing import List

import httpx
import pytest
from fastapi.testclient import TestClient

from soil_advisor.config import Settings
from soil_advisor.engine.weather import WeatherClient
from soil_advisor.main import create_app

SOIL = {
    "moisture": 27,
    "phLevel": 6.3,
    "conductivity": 0.45,
    "organicMatter": 2.1,
    "nitrogen": 280,
    "phosphorus": 22,
    "potassium": 190,
    "calcium": None,
    "magnesium": 120,
    "sulfur": 12,
    "pathogenCount": 350,
}

CROP_REC = {
    "soilHealth": "good",
    "recommendedCrops": ["wheat", "chickpea", "mustard"],
    "pathogenAlert": {"alert": True, "message": "Pathogen count is elevated"},
    "soilImprovements": ["Add compost"],
    "farmingPlan": {"weeks1to2": "Deep ploughing", "weeks3to4": "Sowing"},
    "nutrientRecommendations": ["Split nitrogen doses"],
    "riskFactors": ["Root rot"],
}

WEATHER_REC = {
    "weatherSuitability": "Warm and dry, suitable for sowing",
    "seasonalRecommendations": ["Sow wheat after first irrigation"],
    "weatherAlerts": [],
    "irrigationAdvice": "Irrigate every 7 days",
    "farmingActivities": ["Land preparation"],
}

OWM_PAYLOAD = {
    "main": {"temp": 31.5, "humidity": 48, "pressure": 1008},
    "weather": [{"description": "haze"}],
    "wind": {"speed": 3.6},
    "name": "Pune",
}


class FakeCompletion:
    """Scripted completion provider; replies are handed out in order."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts: List[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            raise AssertionError("unexpected completion call")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def fenced(obj) -> str:
    return "```json\n" + json.dumps(obj) + "\n```"


def weather_transport(calls: list, status: int = 200, payload=None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(status, json=OWM_PAYLOAD if payload is None else payload)
    return httpx.MockTransport(handler)


def _escape(s: str) -> str:
    return s.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def make_pdf(lines: List[str]) -> bytes:
    """Single-page PDF with one line of Helvetica text per entry."""
    ops = ["BT", "/F1 12 Tf", "14 TL", "72 720 Td"]
    for line in lines:
        ops.append(f"({_escape(line)}) Tj T*")
    ops.append("ET")
    content = "\n".join(ops).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for num, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % num + body + b"\nendobj\n"
    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for off in offsets:
        out += b"%010d 00000 n \n" % off
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


@pytest.fixture
def report_pdf() -> bytes:
    return make_pdf([
        "Soil Test Report - Plot 14",
        "Moisture: 27",
        "pH Level: 6.3",
        "Electrical Conductivity: 0.45 dS/m",
        "Nitrogen (N): 280 kg/ha",
        "Pathogen count: 350 CFU/g",
    ])


@pytest.fixture
def settings() -> Settings:
    return Settings(gemini_api_key="test-gemini-key", openweather_api_key="test-weather-key")


@pytest.fixture
def weather_calls() -> list:
    return []


@pytest.fixture
def make_client(settings, weather_calls):
    def _make(llm, weather_status: int = 200, weather_payload=None, weather_key: str = "test-weather-key"):
        weather = WeatherClient(
            api_key=weather_key,
            transport=weather_transport(weather_calls, weather_status, weather_payload),
        )
        app = create_app(settings, llm=llm, weather=weather)
        return TestClient(app)
    return _make
