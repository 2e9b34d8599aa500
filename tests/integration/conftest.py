"""
Configuration for integration tests.
These tests expect the service to be running on localhost:8000.
"""

import pytest
import pytest_asyncio
import httpx


@pytest.fixture
def base_url():
    """Base URL for the air quality service."""
    return "http://localhost:8000"


@pytest.fixture
def api_base():
    """API path prefix."""
    return "/api/v1/air-quality"


@pytest_asyncio.fixture
async def http_client(base_url):
    """HTTP client for testing."""
    async with httpx.AsyncClient(base_url=base_url, timeout=30.0) as client:
        yield client


@pytest.fixture
def sample_reading():
    """Reading in the device wire format."""
    return {
        "deviceName": "integration-sensor",
        "time": "2024-05-01 12:00:00",
        "tempValue": 21.0,
        "humValue": 45.0,
        "co2Value": 450,
        "tvocValue": 120,
        "pressureValue": 1013.0,
        "altitudeValue": 50.0
    }
