"""Services Layer — snapshot loading, report printing, artifact export, run orchestration.

Invariants:
    - Every filesystem or stream side effect of a run happens here, never in core/
    - One artifact write failing never stops the others
"""
