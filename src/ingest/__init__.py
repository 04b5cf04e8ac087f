"""Forecast document ingestion.

This package fetches raw forecast documents, decodes them into
typed periods, and derives the reading series for the store layer.
"""
