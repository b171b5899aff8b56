"""
Narrative Analyst - AI-generated investment memo for a feasibility case.

The analyst sends a summary of the project metrics to a chat-completion
model and parses the structured JSON reply into a NarrativeReport. The
completion client is injected, so tests can substitute a fake and never
touch the network.

Failures are returned as NarrativeFailure values, never raised to the page.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from openai import OpenAI, APIConnectionError, APITimeoutError, RateLimitError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from core.config import Settings, get_settings
from core.models import FinancialResults, ProjectData

log = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "AI Service Unavailable: Missing API configuration."
MARKET_YIELD_BENCHMARK = 10.5
MARKET_PRICE_FACTOR = 0.9


# ═══════════════════════════════════════════════════════════════════════════
# REQUEST
# ═══════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class NarrativeRequest:
    """Summary view of a project handed to the analyst."""
    address: str
    development_type: str
    total_project_cost: float
    total_profit: float
    roi: float
    sale_price_per_m2: float
    currency: str = "AED"

    @classmethod
    def from_project(cls, project: ProjectData, results: FinancialResults,
                     currency: str = "AED") -> "NarrativeRequest":
        return cls(
            address=project.address,
            development_type=project.development_type.value,
            total_project_cost=results.total_project_cost,
            total_profit=results.total_profit,
            roi=results.roi,
            sale_price_per_m2=project.expected_selling_price_per_m2,
            currency=currency,
        )


def build_prompt(request: NarrativeRequest) -> str:
    """Build the analyst prompt for a request."""
    c = request.currency
    market_price = round(request.sale_price_per_m2 * MARKET_PRICE_FACTOR)
    return f"""
You are a high-end Real Estate Investment Analyst for Dubai.
Analyze this project:
- Address: {request.address}
- Type: {request.development_type}
- Total Cost: {c} {request.total_project_cost:,.0f}
- Total Profit: {c} {request.total_profit:,.0f}
- ROI: {request.roi:.2f}%
- Sale Price Target: {c} {request.sale_price_per_m2:,.0f}/m2

Return a JSON object strictly with this structure:
{{
  "executive_summary": "Short paragraph (max 40 words). Highlight key numbers using **bold** syntax.",
  "project_score": 85,
  "projection_data": [
    {{"year": "Y1", "value": 100}},
    {{"year": "Y2", "value": 110}},
    {{"year": "Y3", "value": 130}},
    {{"year": "Y4", "value": 145}},
    {{"year": "Y5", "value": 160}}
  ],
  "market_sentiment": [
    {{"name": "Demand", "value": 70}},
    {{"name": "Supply", "value": 30}}
  ],
  "competitor_comparison": [
    {{"metric": "Yield (%)", "project": {request.roi:.1f}, "market": {MARKET_YIELD_BENCHMARK}}},
    {{"metric": "Price ({c}/m²)", "project": {request.sale_price_per_m2:.0f}, "market": {market_price}}}
  ],
  "verdict": "One distinct strategic advice sentence."
}}
"project_score" is an integer 0-100 representing feasibility strength.
"projection_data" is a 5-year capital appreciation index with base 100.
""".strip()


# ═══════════════════════════════════════════════════════════════════════════
# REPORT
# ═══════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class ProjectionPoint:
    year: str
    value: float


@dataclass(frozen=True)
class SentimentSlice:
    name: str
    value: float


@dataclass(frozen=True)
class BenchmarkRow:
    """Project metric next to the market average."""
    metric: str
    project: float
    market: float

    def relative_widths(self) -> Tuple[float, float]:
        """Bar widths in percent, scaled per row so mixed units stay readable."""
        max_val = max(self.project, self.market) * 1.1
        if max_val <= 0:
            return 0.0, 0.0
        return self.project / max_val * 100, self.market / max_val * 100


@dataclass(frozen=True)
class NarrativeReport:
    """Parsed analyst reply."""
    executive_summary: str
    project_score: int
    projection_data: List[ProjectionPoint] = field(default_factory=list)
    market_sentiment: List[SentimentSlice] = field(default_factory=list)
    competitor_comparison: List[BenchmarkRow] = field(default_factory=list)
    verdict: str = ""


class NarrativeParseError(ValueError):
    """The analyst reply is not valid JSON of the expected shape."""


_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def _require(data: Dict[str, Any], key: str, context: str = "response") -> Any:
    if not isinstance(data, dict) or key not in data:
        raise NarrativeParseError(f"Missing '{key}' in {context}")
    return data[key]


def _text(data: Dict[str, Any], key: str, context: str = "response") -> str:
    value = _require(data, key, context)
    if isinstance(value, (dict, list)) or value is None:
        raise NarrativeParseError(f"'{key}' in {context} must be text")
    return str(value)


def _number(data: Dict[str, Any], key: str, context: str = "response") -> float:
    value = _require(data, key, context)
    if isinstance(value, bool):
        raise NarrativeParseError(f"'{key}' in {context} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise NarrativeParseError(f"'{key}' in {context} must be a number") from None


def _rows(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    value = _require(data, key)
    if not isinstance(value, list):
        raise NarrativeParseError(f"'{key}' must be a list")
    return value


def parse_narrative(text: str) -> NarrativeReport:
    """
    Parse a raw analyst reply.

    Tolerates Markdown code fences around the JSON. The score is rounded and
    clamped into 0-100.

    Raises:
        NarrativeParseError: if the reply cannot be decoded or is missing
            required keys.
    """
    cleaned = _FENCE.sub("", text or "").strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise NarrativeParseError(f"Failed to parse AI financial models: {e}") from e
    if not isinstance(data, dict):
        raise NarrativeParseError("Expected a JSON object")

    score = int(round(_number(data, "project_score")))
    return NarrativeReport(
        executive_summary=_text(data, "executive_summary"),
        project_score=min(100, max(0, score)),
        projection_data=[
            ProjectionPoint(_text(row, "year", "projection_data"), _number(row, "value", "projection_data"))
            for row in _rows(data, "projection_data")
        ],
        market_sentiment=[
            SentimentSlice(_text(row, "name", "market_sentiment"), _number(row, "value", "market_sentiment"))
            for row in _rows(data, "market_sentiment")
        ],
        competitor_comparison=[
            BenchmarkRow(
                metric=_text(row, "metric", "competitor_comparison"),
                project=_number(row, "project", "competitor_comparison"),
                market=_number(row, "market", "competitor_comparison"),
            )
            for row in _rows(data, "competitor_comparison")
        ],
        verdict=_text(data, "verdict"),
    )


# ═══════════════════════════════════════════════════════════════════════════
# RESULT
# ═══════════════════════════════════════════════════════════════════════════
class FailureReason(Enum):
    UNAVAILABLE = "unavailable"
    SERVICE_ERROR = "service_error"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class NarrativeFailure:
    reason: FailureReason
    message: str


@dataclass(frozen=True)
class NarrativeResult:
    """Either a parsed report or a typed failure."""
    report: Optional[NarrativeReport] = None
    failure: Optional[NarrativeFailure] = None

    @property
    def ok(self) -> bool:
        return self.report is not None

    @classmethod
    def success(cls, report: NarrativeReport) -> "NarrativeResult":
        return cls(report=report)

    @classmethod
    def failed(cls, reason: FailureReason, message: str) -> "NarrativeResult":
        return cls(failure=NarrativeFailure(reason=reason, message=message))


class NarrativeCache:
    """
    Holds the narrative for the most recent project only.

    Storing a result for a new project evicts the previous one, so a long
    editing session keeps at most one report in memory.
    """

    def __init__(self):
        self._project: Optional[ProjectData] = None
        self._result: Optional[NarrativeResult] = None

    def get(self, project: ProjectData) -> Optional[NarrativeResult]:
        if self._project is None or self._project != project:
            return None
        return self._result

    def put(self, project: ProjectData, result: NarrativeResult) -> None:
        self._project = project
        self._result = result

    def clear(self) -> None:
        self._project = None
        self._result = None

    def __len__(self) -> int:
        return 0 if self._project is None else 1


# ═══════════════════════════════════════════════════════════════════════════
# CLIENTS
# ═══════════════════════════════════════════════════════════════════════════
class OpenAICompletionClient:
    """Chat-completion client in JSON mode."""

    SYSTEM_PROMPT = "You are a real estate investment analyst. Reply with a single JSON object only."

    def __init__(self, api_key: str, model: str = "gpt-4o",
                 temperature: float = 0.7, timeout: float = 60.0,
                 client: Optional[OpenAI] = None):
        self.model = model
        self.temperature = temperature
        self.client = client or OpenAI(api_key=api_key, timeout=timeout)

    @retry(
        retry=retry_if_exception_type((APIConnectionError, APITimeoutError, RateLimitError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=2, min=2, max=10),
        reraise=True,
    )
    def complete(self, prompt: str) -> str:
        """Send the prompt and return the raw reply text."""
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": self.SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
            temperature=self.temperature,
        )
        return response.choices[0].message.content or ""


class NarrativeAnalyst:
    """
    Produces narrative reports through an injected completion client.

    The client only needs a complete(prompt) -> str method. With no client
    every analysis fails as UNAVAILABLE.
    """

    def __init__(self, client=None):
        self.client = client

    @property
    def available(self) -> bool:
        return self.client is not None

    def analyze(self, request: NarrativeRequest) -> NarrativeResult:
        if self.client is None:
            return NarrativeResult.failed(FailureReason.UNAVAILABLE, UNAVAILABLE_MESSAGE)

        try:
            text = self.client.complete(build_prompt(request))
        except Exception as e:
            log.error(f"Narrative request failed for '{request.address}': {e}")
            return NarrativeResult.failed(FailureReason.SERVICE_ERROR, str(e) or "Analysis failed.")

        if not text or not text.strip():
            log.error(f"Empty narrative response for '{request.address}'")
            return NarrativeResult.failed(FailureReason.EMPTY_RESPONSE, "Empty response from AI")

        try:
            report = parse_narrative(text)
        except NarrativeParseError as e:
            log.error(f"Malformed narrative response for '{request.address}': {e}")
            return NarrativeResult.failed(FailureReason.MALFORMED, str(e))

        log.info(f"Narrative generated for '{request.address}' (score {report.project_score})")
        return NarrativeResult.success(report)


def get_narrative_analyst(settings: Optional[Settings] = None) -> NarrativeAnalyst:
    """Factory function: an analyst wired to OpenAI when a key is configured."""
    settings = settings or get_settings()
    if not settings.narrative_enabled:
        log.warning("OPENAI_API_KEY not set - narrative analysis disabled")
        return NarrativeAnalyst(client=None)
    client = OpenAICompletionClient(
        api_key=settings.openai_api_key,
        model=settings.narrative_model,
        temperature=settings.narrative_temperature,
        timeout=settings.narrative_timeout,
    )
    return NarrativeAnalyst(client=client)
