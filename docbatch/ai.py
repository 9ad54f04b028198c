# docbatch/ai.py
import json
import re
from typing import Dict, List, Sequence

from google import genai
from google.genai import types

from docbatch.config import get_logger, settings
from docbatch.errors import AIConfigurationError, AIResponseError
from docbatch.models import Template
from docbatch.session import Detection

logger = get_logger(__name__)

DETECTION_PROMPT = (
    "Analyze this document template. Identify all fields where a user would input data "
    "(e.g., dotted lines, empty spaces next to labels). Respond ONLY with a valid JSON array "
    "of objects. Each object must have this structure: "
    '{ "name": "snake_case_name", "x": 0.15, "y": 0.22, "width": 0.50, "height": 0.05 }. '
    "Coordinates must be fractions of the image dimensions."
)

DATA_PROMPT = """
You are a data extraction expert. Your task is to analyze the KNOWLEDGE BASE and extract information based on the USER REQUEST.

You MUST follow the exact format and style of the provided JSON EXAMPLE.

---
JSON EXAMPLE (This is the format you must replicate):
{example}
---
KNOWLEDGE BASE (Source text to extract from):
{knowledge_base}
---
USER REQUEST:
{instructions}
---

Now, generate a valid JSON array containing objects for all matching entries found in the KNOWLEDGE BASE. Respond ONLY with the JSON array and nothing else.
"""


def strip_code_fences(text: str) -> str:
    stripped = text.strip()
    match = re.match(r"^```[a-zA-Z0-9]*\s*(.*?)\s*```$", stripped, re.S)
    if match:
        return match.group(1).strip()
    return stripped


def parse_json_array(text: str) -> list:
    try:
        data = json.loads(strip_code_fences(text or ""))
    except json.JSONDecodeError as e:
        raise AIResponseError(f"AI response is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise AIResponseError("AI did not return a JSON array.")
    return data


def _client(api_key: str) -> genai.Client:
    if not api_key:
        raise AIConfigurationError("API Key is required.")
    return genai.Client(api_key=api_key)


def _generate(client: genai.Client, model: str, contents) -> str:
    try:
        response = client.models.generate_content(
            model=model,
            contents=contents,
            config=types.GenerateContentConfig(temperature=0.0),
        )
    except Exception as e:
        logger.error(f"Gemini request to {model} failed: {e}")
        raise AIResponseError(f"AI request failed: {e}") from e
    return response.text or ""


def detect_placeholders(api_key: str, template: Template) -> List[Detection]:
    client = _client(api_key)
    if template.kind == "image":
        image_part = types.Part.from_bytes(data=template.data, mime_type=template.mime_type)
    else:
        image_part = types.Part.from_bytes(data=template.preview_png, mime_type="image/png")

    logger.info(f"Detecting placeholders with {settings.DETECTION_MODEL}")
    items = parse_json_array(_generate(client, settings.DETECTION_MODEL, [DETECTION_PROMPT, image_part]))

    detections = []
    for item in items:
        try:
            detections.append(Detection(
                name=str(item["name"]),
                x=float(item["x"]), y=float(item["y"]),
                width=float(item["width"]), height=float(item["height"]),
            ))
        except (KeyError, TypeError, ValueError) as e:
            raise AIResponseError(f"Malformed placeholder in AI response: {item!r}") from e
    logger.info(f"AI detected {len(detections)} placeholder(s).")
    return detections


def json_example(expected_keys: Sequence[str]) -> str:
    return json.dumps([{key: f"<{key}>" for key in expected_keys}], indent=2)


def generate_rows(api_key: str, knowledge_base: str, instructions: str,
                  expected_keys: Sequence[str]) -> List[Dict[str, str]]:
    if not instructions or not instructions.strip():
        raise AIConfigurationError("Instructions for the AI are required.")
    client = _client(api_key)
    prompt = DATA_PROMPT.format(
        example=json_example(expected_keys),
        knowledge_base=knowledge_base,
        instructions=instructions.strip(),
    )

    logger.info(f"Generating data rows with {settings.DATA_MODEL}")
    items = parse_json_array(_generate(client, settings.DATA_MODEL, prompt))

    records = []
    for item in items:
        if not isinstance(item, dict):
            raise AIResponseError(f"Expected an object per row, got {item!r}")
        records.append({str(k): "" if v is None else str(v) for k, v in item.items()})
    return records
