"""Named log channels shared by the sync modules.

``background`` records attempt start/finish/failure.  ``invalid_state``
records conditions that should not happen with a well-behaved server or
caller: undecodable values, unknown keys, protocol guard violations.
"""

from __future__ import annotations

import logging

background_log = logging.getLogger("setsync.background")
invalid_state_log = logging.getLogger("setsync.invalid_state")
