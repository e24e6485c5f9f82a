import pytest
from pydantic import ValidationError

from app.config.settings import Settings
from app.models.schemas import CoverageStrategy


def test_coverage_strategy_from_environment(monkeypatch):
    monkeypatch.setenv("COVERAGE_STRATEGY", "word_count")
    assert Settings(_env_file=None).coverage_strategy == CoverageStrategy.WORD_COUNT


def test_unknown_coverage_strategy_is_rejected(monkeypatch):
    monkeypatch.setenv("COVERAGE_STRATEGY", "sentiment")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
