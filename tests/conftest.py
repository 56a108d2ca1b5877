"""
Pytest configuration and fixtures for campaign-insights tests

This module provides shared fixtures for unit and integration tests.
"""
from pathlib import Path

import pytest

from campaign_insights.batch.readers import CSVRecordParser
from campaign_insights.core.config import EngineConfig, EngineConfigBuilder
from campaign_insights.core.schema import SchemaResolver

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests without file system or process side effects"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that run the whole pipeline or the CLI"
    )


# =======================
# CONFIGURATION FIXTURES
# =======================

@pytest.fixture
def default_config() -> EngineConfig:
    """Engine configuration with built-in defaults"""
    return EngineConfig()


@pytest.fixture
def testuser_config() -> EngineConfig:
    """Configuration whose only test identity is TESTUSER"""
    return EngineConfigBuilder().with_test_user_ids("TESTUSER").build()


# =======================
# EXPORT FIXTURES
# =======================

@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def sample_export_path() -> Path:
    """Realistic export with test users, a missing id and interaction columns"""
    return FIXTURES_DIR / "CCI - 2025 Q1 13_05_2025 - 20_05_2025.csv"


@pytest.fixture
def minimal_export_text() -> str:
    """Three-row export: one real user seen twice plus one test user"""
    return (
        "UserID,completions,event_count_click\n"
        "U1,1,1\n"
        "U1,0,0\n"
        "TESTUSER,1,1\n"
    )


@pytest.fixture
def parse_and_resolve():
    """
    Parse export text and resolve its schema in one step

    Returns:
        Callable (text, config=None) -> (ParsedTable, ColumnSchema)
    """
    def _parse_and_resolve(text: str, config: EngineConfig | None = None):
        table = CSVRecordParser().parse(text)
        schema = SchemaResolver(config).resolve(table.header)
        return table, schema

    return _parse_and_resolve
