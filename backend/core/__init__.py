"""Core backend infrastructure for the league API.

This package contains configuration, logging, database, security and
dependency helpers used by the FastAPI application entrypoint.
"""
