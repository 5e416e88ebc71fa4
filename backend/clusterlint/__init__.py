"""clusterlint — consistency analysis for sharded cluster agency snapshots.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Only the version lives here: explicit imports elsewhere, no star exports
"""

__version__ = "1.0.0"
