"""Test configuration and fixtures for the users API."""

from tests.fixtures import *  # noqa: F401,F403
