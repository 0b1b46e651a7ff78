from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any

from toolflow_ai.core.logging_config import get_logger

from ..abstraction.base import user_message
from ..planning.json_extract import extract_json_object
from ..schemas.domain import CapabilityConfig
from .base import CapabilityContext, CapabilityResult

logger = get_logger(__name__)

TEXT_MIMETYPES = ("application/json", "application/xml", "application/x-yaml")


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


@dataclass(frozen=True)
class SimpleAskCapability:
    """
    Capability answering a plain question with a single completion.

    This is the planner's fallback tool: instructions that need neither a file
    nor multi-step processing are routed here.
    """

    config: CapabilityConfig = field(
        default_factory=lambda: CapabilityConfig(
            name="simple-ask",
            description="Answer a simple question or hold a conversation without any file",
            input_types=["text"],
            output_type="text",
            estimated_duration_ms=5000,
        )
    )

    async def execute(self, ctx: CapabilityContext) -> CapabilityResult:
        """
        Send the instruction as one user message.

        Returns:
            CapabilityResult:
                - Success: output is the completion text
                - Failure: error carries the client failure message
        """
        start = time.perf_counter()
        try:
            response = await ctx.llm_client.generate_completion(user_message(ctx.instruction))
        except Exception as e:
            logger.warning(f"[simple-ask] completion failed: {e}")
            return CapabilityResult(success=False, error=str(e) or "Unknown error occurred")

        duration = _elapsed_ms(start)
        tokens = response.usage.total_tokens if response.usage else None
        logger.debug(f"[simple-ask] answered in {duration}ms ({tokens or 0} tokens)")
        return CapabilityResult(
            success=True,
            output=response.content,
            metadata={"processing_time_ms": duration, "tokens_used": tokens, "model": response.model},
        )


@dataclass(frozen=True)
class TextExtractionCapability:
    """Decode an uploaded text-like file so later steps can work on its content."""

    config: CapabilityConfig = field(
        default_factory=lambda: CapabilityConfig(
            name="text-extraction",
            description="Extract the text content of an uploaded plain-text, CSV, markdown or JSON file",
            input_types=["text/*", *TEXT_MIMETYPES],
            output_type="text",
            estimated_duration_ms=500,
        )
    )

    @staticmethod
    def is_text_mimetype(mimetype: str) -> bool:
        base = mimetype.split(";", 1)[0].strip().lower()
        return base.startswith("text/") or base in TEXT_MIMETYPES

    async def execute(self, ctx: CapabilityContext) -> CapabilityResult:
        file = ctx.file
        if file is None:
            return CapabilityResult(success=False, error="No file provided for text extraction")
        if not self.is_text_mimetype(file.mimetype):
            return CapabilityResult(success=False, error=f"Unsupported file type for text extraction: {file.mimetype}")

        try:
            text = file.content.decode("utf-8")
        except UnicodeDecodeError:
            text = file.content.decode("latin-1")

        return CapabilityResult(
            success=True,
            output={"text": text, "filename": file.filename, "characters": len(text)},
            metadata={"mimetype": file.mimetype, "size": file.size},
        )


EXTRACTION_PROMPT = """Analyze the following text and extract structured data as JSON.

<text>
{text}
</text>

<instruction>
{instruction}
</instruction>

<rules>
- Return ONLY valid JSON without any markdown formatting
- Detect the type of data automatically and put it in a "type" field
- For medical lab results use: {{"type": "medical_lab_results", "test_date": "YYYY-MM-DD or null", "parameters": [{{"name": "...", "value": ..., "unit": "... or null", "reference_range": "min-max or null", "status": "normal|low|high or null"}}]}}
- For invoices or receipts use: {{"type": "invoice", "date": "YYYY-MM-DD", "total": number, "items": [...], "vendor": "..."}}
- For contacts use: {{"type": "contact", "name": "...", "email": "...", "phone": "..."}}
- For anything else use: {{"type": "generic", "data": {{...}}}}
- Extract ALL available information, use null for missing values
- Preserve original units and values and do not invent data
</rules>

Return ONLY the JSON object, no explanations."""


def source_text(ctx: CapabilityContext) -> str:
    """Pick the text to extract from: the previous step's output, else the instruction."""
    prev = ctx.previous_result
    if prev is None:
        return ctx.instruction or ""
    if isinstance(prev, dict):
        if isinstance(prev.get("text"), str):
            return prev["text"]
        if isinstance(prev.get("output"), str):
            return prev["output"]
    if isinstance(prev, str):
        return prev
    return json.dumps(prev, default=str)


def detect_data_type(data: Any) -> str:
    """Classify extracted data by its explicit ``type`` key or by its shape."""
    if not isinstance(data, dict):
        return "unknown"
    if isinstance(data.get("type"), str):
        return data["type"]
    if isinstance(data.get("parameters"), list):
        return "medical_lab_results"
    if "items" in data and "total" in data:
        return "invoice"
    if "name" in data and ("email" in data or "phone" in data):
        return "contact"
    return "generic"


@dataclass(frozen=True)
class DataExtractionCapability:
    """
    Capability turning unstructured text into a JSON object.

    Usually planned after a text-producing step; without a previous result the
    instruction itself is the source text.
    """

    config: CapabilityConfig = field(
        default_factory=lambda: CapabilityConfig(
            name="data-extraction",
            description="Extract structured JSON data (lab results, invoices, contacts) from text of a previous step",
            input_types=["text"],
            output_type="json",
            estimated_duration_ms=10000,
        )
    )

    async def execute(self, ctx: CapabilityContext) -> CapabilityResult:
        start = time.perf_counter()
        text = source_text(ctx)
        if not text.strip():
            return CapabilityResult(success=False, error="No text provided for extraction")

        prompt = EXTRACTION_PROMPT.format(text=text, instruction=ctx.instruction)
        try:
            response = await ctx.llm_client.generate_completion(user_message(prompt))
        except Exception as e:
            logger.warning(f"[data-extraction] completion failed: {e}")
            return CapabilityResult(success=False, error=str(e) or "Unknown error occurred during data extraction")

        try:
            data = extract_json_object(response.content)
        except ValueError as e:
            return CapabilityResult(success=False, error=f"Failed to parse JSON response: {e}")

        data_type = detect_data_type(data)
        duration = _elapsed_ms(start)
        logger.debug(f"[data-extraction] extracted {data_type} data in {duration}ms")
        return CapabilityResult(
            success=True,
            output=data,
            metadata={
                "processing_time_ms": duration,
                "tokens_used": response.usage.total_tokens if response.usage else None,
                "model": response.model,
                "data_type": data_type,
            },
        )


BUILTIN_CAPABILITIES = (
    SimpleAskCapability(),
    TextExtractionCapability(),
    DataExtractionCapability(),
)
