"""FastAPI service layer for RecEngine.

This module contains the FastAPI application and route handlers that hand
catalog items and interaction events to the engine and return its ranked
recommendations as JSON. No ranking logic lives here.
"""
