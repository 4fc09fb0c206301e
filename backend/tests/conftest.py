# tests/conftest.py - Shared test fixtures
import os
import asyncio
from datetime import date, datetime, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

os.environ["ENVIRONMENT"] = "test"
for _key in ("GEMINI_API_KEY", "API_KEY", "OPENAI_API_KEY", "GROQ_API_KEY", "LLM_PROVIDER", "OTEL_EXPORTER_OTLP_ENDPOINT"):
    os.environ.pop(_key, None)

from models import AnalysisResult, Sentiment, TicketPriority
from sample_data import sample_user
from workbench import Workbench, get_workbench
from main import app

# Frozen clock so rolling roadmap windows and decision stamps are deterministic
TODAY = date(2024, 11, 15)
NOW = datetime(2024, 11, 15, 9, 30, 5, tzinfo=timezone.utc)


class FakeAnalyzer:
    """Stands in for TicketAnalyzer; optionally blocks until ``gate`` is set."""

    configured = True

    def __init__(self, result=None, gate=None):
        self.result = result
        self.gate = gate
        self.calls = []

    async def analyze(self, ticket):
        self.calls.append(ticket.id)
        if self.gate is not None:
            await self.gate.wait()
        return self.result


def make_analysis(**overrides):
    data = {
        "suggested_priority": TicketPriority.HIGH,
        "suggested_type": "Payment",
        "summary": "Payment gateway times out for a subset of users.",
        "root_cause_hypothesis": "Connection pool exhaustion towards the gateway.",
        "sentiment": Sentiment.NEGATIVE,
        "draft_response": "Thanks for reporting, we are investigating.",
        "suggested_root_cause_category": "Network",
    }
    data.update(overrides)
    return AnalysisResult(**data)


@pytest.fixture
def analysis_result():
    return make_analysis()


@pytest.fixture
def fake_analyzer(analysis_result):
    return FakeAnalyzer(result=analysis_result)


@pytest.fixture
def gated_analyzer(analysis_result):
    return FakeAnalyzer(result=analysis_result, gate=asyncio.Event())


@pytest.fixture
def workbench(fake_analyzer):
    """Freshly seeded workbench per test"""
    return Workbench.seeded(analyzer=fake_analyzer, user=sample_user(), today=lambda: TODAY, now=lambda: NOW)


@pytest_asyncio.fixture(scope="function")
async def client(workbench):
    """HTTP test client bound to the per-test workbench"""
    app.dependency_overrides[get_workbench] = lambda: workbench
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await workbench.analysis.drain()
    app.dependency_overrides.clear()
