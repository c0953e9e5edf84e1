"""
Core modules for the LLM price catalog.

This package contains the catalog model, feed reconciliation, the sync
update gate and cost projection.
"""
