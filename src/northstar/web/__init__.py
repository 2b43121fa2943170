"""Northstar web application (FastAPI)."""
