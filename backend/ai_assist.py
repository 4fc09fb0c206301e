# ai_assist.py - LLM ticket triage assist
# - Provider resolved from environment (Gemini default, OpenAI-compatible fallbacks)
# - One request/response round trip with a fixed JSON schema
# - Every failure mode collapses to "no analysis" (None), logged only
# - In-flight guard: at most one outstanding analysis per ticket

import os
import json
import asyncio
import logging
from dataclasses import replace
from typing import Any, Dict, Optional, Tuple

import httpx

from models import AnalysisResult, Sentiment, TicketPriority, TicketRecord
from record_store import RecordStore
from telemetry import start_span

logger = logging.getLogger("workbench.ai")

AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "60"))

LLM_PROVIDERS = {
    "gemini": {
        "base_url": "https://generativelanguage.googleapis.com/v1beta",
        "env_keys": ("GEMINI_API_KEY", "API_KEY"),
        "default_model": "gemini-2.5-flash",
    },
    "openai": {
        "base_url": "https://api.openai.com/v1",
        "env_keys": ("OPENAI_API_KEY",),
        "default_model": "gpt-4o-mini",
    },
    "groq": {
        "base_url": "https://api.groq.com/openai/v1",
        "env_keys": ("GROQ_API_KEY",),
        "default_model": "llama-3.3-70b-versatile",
    },
}

REQUIRED_FIELDS = (
    "suggestedPriority", "suggestedType", "summary",
    "rootCauseHypothesis", "sentiment", "draftResponse",
)

ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "suggestedPriority": {"type": "STRING", "enum": [p.value for p in TicketPriority]},
        "suggestedType": {"type": "STRING"},
        "summary": {"type": "STRING"},
        "rootCauseHypothesis": {"type": "STRING"},
        "suggestedRootCauseCategory": {"type": "STRING"},
        "sentiment": {"type": "STRING", "enum": [s.value for s in Sentiment]},
        "draftResponse": {"type": "STRING"},
    },
    "required": list(REQUIRED_FIELDS),
}


def _provider_key(config: Dict[str, Any]) -> Optional[str]:
    for env_key in config["env_keys"]:
        value = os.getenv(env_key)
        if value:
            return value
    return None


def resolve_provider(preferred: Optional[str] = None) -> Tuple[Optional[str], Optional[str]]:
    """(provider, api_key) for LLM_PROVIDER if it has a key, else the first provider that does."""
    preferred = (preferred or os.getenv("LLM_PROVIDER", "")).lower()
    order = list(LLM_PROVIDERS)
    if preferred in LLM_PROVIDERS:
        order.remove(preferred)
        order.insert(0, preferred)
    for name in order:
        api_key = _provider_key(LLM_PROVIDERS[name])
        if api_key:
            return name, api_key
    return None, None


def build_prompt(ticket: TicketRecord) -> str:
    return f"""
You are an expert IT Service Management (ITSM) AI Assistant.
Analyze the following ticket details and provide a structured assessment.

Ticket Title: {ticket.title}
Ticket Description: {ticket.description}
Current Type: {ticket.type}
Product ID: {ticket.product_id}

Please determine:
1. The recommended Priority level (LOW, MEDIUM, HIGH, CRITICAL).
2. A refined Fault Type (category) if applicable.
3. A concise one-sentence summary.
4. A hypothesis for the root cause based on common IT patterns.
5. A category for the root cause (e.g., Code Error, Configuration, Hardware, User Error, Network).
6. Sentiment of the reporter (POSITIVE, NEUTRAL, NEGATIVE).
7. A polite, professional draft response to the user acknowledging the issue and suggesting next steps.

Respond with a single JSON object using the keys: {", ".join(REQUIRED_FIELDS)}, suggestedRootCauseCategory.
"""


def parse_analysis(payload: Any) -> Optional[AnalysisResult]:
    """Validate a provider's JSON answer; None when it is not usable.

    Unknown priorities fall back to MEDIUM and unknown sentiments to NEUTRAL.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError:
            return None
    if not isinstance(payload, dict):
        return None
    if any(not isinstance(payload.get(key), str) for key in REQUIRED_FIELDS):
        return None

    try:
        priority = TicketPriority(payload["suggestedPriority"].strip().upper())
    except ValueError:
        priority = TicketPriority.MEDIUM
    try:
        sentiment = Sentiment(payload["sentiment"].strip().upper())
    except ValueError:
        sentiment = Sentiment.NEUTRAL

    category = payload.get("suggestedRootCauseCategory")
    return AnalysisResult(
        suggested_priority=priority,
        suggested_type=payload["suggestedType"],
        summary=payload["summary"],
        root_cause_hypothesis=payload["rootCauseHypothesis"],
        suggested_root_cause_category=category if isinstance(category, str) and category else None,
        sentiment=sentiment,
        draft_response=payload["draftResponse"],
    )


class TicketAnalyzer:
    """Calls the configured LLM provider for a ticket triage suggestion"""

    def __init__(
        self,
        provider: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = AI_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if provider is None:
            provider, resolved_key = resolve_provider()
            api_key = api_key or resolved_key
        elif api_key is None and provider in LLM_PROVIDERS:
            api_key = _provider_key(LLM_PROVIDERS[provider])
        self.provider = provider
        self.api_key = api_key
        config = LLM_PROVIDERS.get(provider or "", {})
        self.base_url = config.get("base_url", "")
        self.model = model or os.getenv("AI_MODEL") or config.get("default_model", "")
        self.timeout = timeout
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.provider in LLM_PROVIDERS and self.api_key)

    async def analyze(self, ticket: TicketRecord) -> Optional[AnalysisResult]:
        if not self.configured:
            logger.warning("AI assist skipped: no LLM API key configured")
            return None

        prompt = build_prompt(ticket)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                if self.provider == "gemini":
                    text = await self._call_gemini(client, prompt)
                else:
                    text = await self._call_openai_compatible(client, prompt)
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
            logger.warning(f"Ticket analysis failed ({self.provider}/{self.model}) for {ticket.id}: {e}")
            return None

        if not text:
            logger.warning(f"Ticket analysis for {ticket.id} returned an empty answer")
            return None
        result = parse_analysis(text)
        if result is None:
            logger.warning(f"Ticket analysis for {ticket.id} returned malformed JSON")
        return result

    async def _call_gemini(self, client: httpx.AsyncClient, prompt: str) -> str:
        resp = await client.post(
            f"{self.base_url}/models/{self.model}:generateContent",
            headers={"x-goog-api-key": self.api_key, "Content-Type": "application/json"},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {
                    "responseMimeType": "application/json",
                    "responseSchema": ANALYSIS_SCHEMA,
                },
            },
        )
        resp.raise_for_status()
        data = resp.json()
        parts = data["candidates"][0]["content"]["parts"]
        return "".join(part.get("text", "") for part in parts)

    async def _call_openai_compatible(self, client: httpx.AsyncClient, prompt: str) -> str:
        resp = await client.post(
            f"{self.base_url}/chat/completions",
            headers={"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"},
            json={
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "response_format": {"type": "json_object"},
                "temperature": 0.2,
            },
        )
        resp.raise_for_status()
        data = resp.json()
        return data["choices"][0]["message"]["content"] or ""


class AnalysisCoordinator:
    """Runs analyses in the background and merges results into the ticket store"""

    def __init__(self, tickets: RecordStore, analyzer: Any):
        self.tickets = tickets
        self.analyzer = analyzer
        self._in_flight: Dict[str, asyncio.Task] = {}

    def is_running(self, ticket_id: str) -> bool:
        return ticket_id in self._in_flight

    def request(self, ticket_id: str) -> bool:
        """Start an analysis; False (and nothing started) when one is already outstanding."""
        if ticket_id in self._in_flight:
            logger.info(f"Analysis for {ticket_id} already in progress, ignoring request")
            return False
        self._in_flight[ticket_id] = asyncio.create_task(self._run_guarded(ticket_id))
        return True

    async def _run_guarded(self, ticket_id: str) -> Optional[TicketRecord]:
        try:
            return await self.run(ticket_id)
        finally:
            self._in_flight.pop(ticket_id, None)

    async def run(self, ticket_id: str) -> Optional[TicketRecord]:
        """Analyze one ticket now; the updated ticket, or None when nothing was produced."""
        ticket = self.tickets.get(ticket_id)
        if ticket is None:
            return None

        try:
            with start_span("ticket.analyze", ticket_id=ticket_id):
                analysis = await self.analyzer.analyze(ticket)
        except Exception as e:
            logger.warning(f"Ticket analysis for {ticket_id} raised: {e}", exc_info=True)
            return None
        if analysis is None:
            return None

        # Merge into the latest copy; a ticket deleted meanwhile stays deleted
        current = self.tickets.get(ticket_id)
        if current is None:
            return None
        updated = replace(
            current,
            ai_analysis=analysis,
            root_cause_category=current.root_cause_category or analysis.suggested_root_cause_category,
        )
        return self.tickets.upsert(updated)

    async def wait(self, ticket_id: str) -> None:
        task = self._in_flight.get(ticket_id)
        if task is not None:
            await task

    async def drain(self) -> None:
        tasks = list(self._in_flight.values())
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
