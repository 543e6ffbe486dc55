"""Shared test fixtures."""

import pytest


class MockRedis:
    """Mock Redis client for testing."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    async def get(self, key: str):
        return self.data.get(key)

    async def set(self, key: str, value: str, ex: int = None) -> bool:
        self.data[key] = value
        self.ttls[key] = ex
        return True

    async def delete(self, key: str) -> int:
        if key in self.data:
            del self.data[key]
            return 1
        return 0

    async def exists(self, key: str) -> int:
        return 1 if key in self.data else 0

    async def close(self) -> None:
        pass


@pytest.fixture
def mock_redis():
    """Create a mock Redis instance."""
    return MockRedis()
