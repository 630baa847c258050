# SPDX-License-Identifier: MIT

import logging
from pathlib import Path
from typing import Optional

from punchcard import configuration
from punchcard import state as app_state
from punchcard.errors import PunchcardError
from punchcard.logger import configure_logging
from punchcard.repository.settings import SETTINGS_REPO
from punchcard.repository.storage import StorageFolder
from punchcard.service.tracker import TimeTracker

logger = logging.getLogger(__name__)


def initialize(log_level: Optional[str] = None) -> TimeTracker:
    configuration.CONFIG_PATH.mkdir(parents=True, exist_ok=True)

    settings = SETTINGS_REPO.get_settings()
    configure_logging(log_level or settings["log_level"])

    storage = StorageFolder()
    tracker = TimeTracker(
        storage, poll_interval_seconds=settings["poll_interval_seconds"]
    )
    app_state.set_tracker(tracker)

    if settings["storage_folder"] is not None:
        try:
            storage.set_root(Path(settings["storage_folder"]))
        except PunchcardError as e:
            # Leave the folder unset so commands report it; `config storage`
            # can still point to a working one
            logger.warning("%s", e)
    else:
        logger.debug("no storage folder configured yet")

    return tracker


def load_tracker() -> TimeTracker:
    """The initialized tracker, with state freshly read from storage."""
    tracker = app_state.get_tracker()
    tracker.load()
    return tracker
