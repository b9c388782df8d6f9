"""Domain models for the pharmacy product CSV importer.

This package contains the dataclasses passed between the tokenizer, the row
mappers and the import orchestrator.
"""

from .candidate import ProductCandidate
from .category import ExternalCategory
from .channel import CHANNELS, ChannelCandidate
from .import_state import ImportState
from .outcome import ImportOutcome, OutcomeAccumulator
from .raw_row import ParsedTable, RawRow

__all__ = [
    # Parsing models
    "ParsedTable",
    "RawRow",
    # Mapping models
    "ProductCandidate",
    "ChannelCandidate",
    "CHANNELS",
    "ExternalCategory",
    # Processing models
    "ImportState",
    "ImportOutcome",
    "OutcomeAccumulator",
]
