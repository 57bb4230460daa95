"""Search index layer.

This module owns the destination index: schema, client construction,
and idempotent bulk upserts keyed by object id.
"""
