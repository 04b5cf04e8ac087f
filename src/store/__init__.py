"""Series storage layer.

This package persists forecast readings into the predictions table
and reads them back for downstream tools.
"""
