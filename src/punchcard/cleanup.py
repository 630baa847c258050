# SPDX-License-Identifier: MIT

import atexit

from punchcard import state as app_state
from punchcard.repository.settings import SETTINGS_REPO


def stop_and_flush() -> None:
    try:
        app_state.get_tracker().deactivate()
    except RuntimeError:
        pass
    SETTINGS_REPO.flush()


def register_cleanup() -> None:
    atexit.register(stop_and_flush)
