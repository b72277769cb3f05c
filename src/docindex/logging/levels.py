"""
HUMAN logging level -- Readable progress for the person running docindex.

Custom level between INFO (20) and WARNING (30).
Does not indicate severity -- it marks the events a user wants to see
(what got indexed, what got renamed) without technical noise.

Hierarchy:
    debug  (10) -> per-entry decisions, depth cutoffs
    info   (20) -> config loaded, mover selected
    human  (25) -> * Index written, file renamed, heading rewritten, entry skipped
    warn   (30) -> Non-fatal problems
    error  (40) -> Errors
"""

import logging

import structlog

# Custom level: between INFO (20) and WARNING (30)
HUMAN = 25
logging.addLevelName(HUMAN, "HUMAN")


# structlog's stdlib BoundLogger.log() proxies to a method named after the
# level, so Logger needs a .human()
def _human_method(self, message, *args, **kwargs):
    if self.isEnabledFor(HUMAN):
        self._log(HUMAN, message, args, **kwargs)


logging.Logger.human = _human_method

# Register the level in structlog to avoid KeyError: 25
try:
    structlog.stdlib.LEVEL_TO_NAME[HUMAN] = "human"
    structlog.stdlib.NAME_TO_LEVEL["human"] = HUMAN
except (AttributeError, KeyError):
    pass
