"""Shared fixtures and test doubles."""

from __future__ import annotations

import asyncio
import json

import pytest

from insight_engine.domain.entities import AnalysisMetadata, Provider
from insight_engine.services.heuristic_analyzer import HeuristicAnalyzer

SAMPLE_README = """\
# fastgrid

A distributed, scalable job scheduler written in Go with a React dashboard.

## Features

- Cron-style **recurring** jobs
- Distributed locking backed by [Redis](https://redis.io)
- Web dashboard built with React

## Use Cases

- Running nightly ETL pipelines
- Fan-out batch processing

## Installation

```bash
go install example.com/fastgrid@latest
```

## Architecture

Workers coordinate through Redis and expose metrics to Prometheus.
Ideal for platform teams that run thousands of scheduled tasks.
"""

VALID_ANSWER = json.dumps(
    {
        "summary": "fastgrid schedules distributed jobs.",
        "keyFeatures": ["Recurring jobs", "Redis locking"],
        "technologies": ["Go", "Redis", "React"],
        "useCases": ["Nightly ETL"],
        "mainSections": ["Features", "Installation"],
        "complexity": "High",
        "recommendation": "Adopt fastgrid for Go-based scheduling.",
    }
)


class StubAdapter:
    """Backend adapter double: returns a canned answer or raises."""

    def __init__(
        self,
        provider: Provider = Provider.OPENAI,
        answer: str = VALID_ANSWER,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.provider = provider
        self.answer = answer
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, str, str]] = []

    async def send(self, prompt: str, model: str, api_key: str) -> str:
        self.calls.append((prompt, model, api_key))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def analyzer() -> HeuristicAnalyzer:
    return HeuristicAnalyzer()


@pytest.fixture
def repo_metadata() -> AnalysisMetadata:
    return AnalysisMetadata(
        name="fastgrid",
        language="Go",
        stars=240,
        description="Distributed job scheduler",
        size=1200,
        forks=31,
        topics=("scheduler", "cron"),
    )
