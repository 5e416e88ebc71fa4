"""Pydantic Schemas — response contracts for the HTTP surface.

Invariants:
    - Schemas describe the API boundary; analysis records stay in core/findings.py
"""
