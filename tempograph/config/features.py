"""Feature flags for tempograph.

All flags start DISABLED: reads are lenient and duplicate vertices are
rejected.
"""

# =============================================================================
# Store
# =============================================================================

# Re-adding an existing vertex id replaces it and clears its out-edges
# instead of raising DuplicateVertex. Needed only for replaying old batches.
FEATURE_VERTEX_OVERWRITE_ENABLED = False

# =============================================================================
# Reader
# =============================================================================

# An unreadable shard aborts the run instead of being dropped with an
# anomaly receipt.
FEATURE_STRICT_SHARD_READ_ENABLED = False
