import logging
from numbers import Number
from typing import Any, Dict, List
from langchain_core.prompts import PromptTemplate
from soil_advisor.engine.llm import CompletionProvider
from soil_advisor.engine.parsing import expect_json_object
from soil_advisor.schema import SOIL_METRIC_KEYS

logger = logging.getLogger(__name__)

_prompt = PromptTemplate.from_template(
    """Analyze the following text from a soil report. Your task is to extract the specific values for the metrics listed below.
The required metrics are: Moisture, pH Level, Conductivity, Organic Matter, Nitrogen (N), Phosphorus (P), Potassium (K), Calcium (Ca), Magnesium (Mg), Sulfur (S), and Pathogen count.

Your response MUST be a single, minified JSON object.
- The keys must be exactly: {keys}
- The values must be numbers, not strings.
- If a specific metric's value cannot be found in the text, its value in the JSON should be null.
- Do not include any explanatory text, markdown formatting, or anything other than the single JSON object.

Here is the text to analyze:
---
{report_text}
---"""
)

def build_prompt(report_text: str) -> str:
    return _prompt.format(keys=", ".join(SOIL_METRIC_KEYS), report_text=report_text)

def non_numeric_fields(metrics: Dict[str, Any]) -> List[str]:
    return [
        k for k, v in metrics.items()
        if v is not None and (isinstance(v, bool) or not isinstance(v, Number))
    ]

async def extract_soil_metrics(llm: CompletionProvider, report_text: str) -> Dict[str, Any]:
    logger.info("Sending soil report text (%d chars) for field extraction", len(report_text))
    reply = await llm.complete(build_prompt(report_text))
    metrics = expect_json_object(reply, "soil metrics")

    odd = non_numeric_fields(metrics)
    if odd:
        logger.warning("Soil metrics with non-numeric values passed through: %s", ", ".join(odd))
    missing = [k for k in SOIL_METRIC_KEYS if k not in metrics]
    if missing:
        logger.warning("Soil metrics missing keys: %s", ", ".join(missing))
    return metrics
