"""
Gateway Core - shared orchestration and normalization for payment adapters

Every processor integration leans on the same small core:
1. MultiResponse for chains of dependent calls (token -> charge, authorize -> void)
2. ResponseNormalizer for turning any payload into one canonical Result
3. Composite authorization tokens carrying several ids to a later call

Per-processor field mapping lives in Gateway subclasses, not here.
"""

__version__ = "0.1.0"
