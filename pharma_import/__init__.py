"""Pharmacy product CSV import pipeline.

CSV text -> tokenized rows -> validated product candidates -> preview ->
per-row upsert into the product store.
"""

__version__ = "0.1.0"
