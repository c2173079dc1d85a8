"""
Pytest configuration and fixtures for draft bot tests.

This file provides test isolation and shared fixtures.
"""
import asyncio
import os
import pytest

# Ensure environment is set up before any imports happen
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("API_TOKEN", "test-token")


@pytest.fixture(autouse=True)
def reset_singleton_state():
    """
    Reset any singleton/global state between tests.

    This prevents test pollution from global state in services.
    """
    yield  # Run test

    import config as cfg
    import services
    from utils.logging import clear_context

    services._draft_tracker = None
    cfg._config = None
    # logging context left behind by decorated commands
    clear_context()


@pytest.fixture(scope="session")
def event_loop_policy():
    """Use default event loop policy."""
    return asyncio.DefaultEventLoopPolicy()
