from __future__ import annotations

from enum import Enum

"""ImportState enum for the interactive import session.

State transitions: idle -> parsing -> previewing -> importing -> done -> idle
"""


class ImportState(Enum):
    """Lifecycle of one import session.

    - IDLE: Nothing loaded (initial state, and after reset or a failed load)
    - PARSING: Reading and tokenizing the supplied text
    - PREVIEWING: Candidates held in memory, nothing written yet
    - IMPORTING: Commit loop running
    - DONE: Outcome available
    """
    IDLE = "idle"
    PARSING = "parsing"
    PREVIEWING = "previewing"
    IMPORTING = "importing"
    DONE = "done"
