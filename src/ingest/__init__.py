"""Feed ingestion pipeline.

This module fetches the upstream feed and orchestrates one run
from fetch through flatten to the index upsert.
"""
