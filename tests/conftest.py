"""Test configuration and fixtures for the Bookstore API."""

from tests.fixtures import *  # noqa: F401,F403
