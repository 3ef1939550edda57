from datetime import date

import pytest

from streak_mentor.core import tracing
from streak_mentor.features.submissions.service import SubmissionOrchestrator
from streak_mentor.tests.mocks import FakeOracle, FakeReviewer


@pytest.fixture
def memory_spans():
    tracing.setup_tracing(enabled=True, exporter_name="memory")
    yield
    tracing.reset_exported_spans()
    tracing.setup_tracing(enabled=False)


def test_spans_disabled_by_default():
    tracing.setup_tracing(enabled=False)
    with tracing.start_span("noop") as span:
        assert span is None


@pytest.mark.asyncio
async def test_submission_emits_span(memory_spans, memory_store):
    orchestrator = SubmissionOrchestrator(FakeOracle(date(2024, 5, 2)), FakeReviewer(), memory_store)

    await orchestrator.submit("int x;")

    names = [span.name for span in tracing.get_exported_spans()]
    assert "submission.submit" in names
