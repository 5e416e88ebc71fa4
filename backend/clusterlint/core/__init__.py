"""Core Layer — pure analysis logic over a snapshot, no IO, no async.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or config
    - All functions are pure and deterministic: same snapshot, same findings

Design Decisions:
    - Functional core separated from imperative shell: loading, printing and
      file writes live in services/
"""
