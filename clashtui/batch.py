"""Headless update mode: refresh every profile and print progress."""

import logging
from typing import Callable

from .api import ClashError
from .exceptions import ClashTuiError
from .util import ClashTuiUtil

logger = logging.getLogger(__name__)


def run_update_only(util: ClashTuiUtil, echo: Callable[[str], None] = print) -> bool:
    """Update all profiles, one at a time.

    A failing profile is reported and skipped; the rest still run.

    Returns:
        False if the profile list itself could not be read, else True
    """
    logger.info("Cron Mode!")
    try:
        names = util.get_profile_names()
    except (ClashTuiError, OSError) as e:
        logger.error("Listing profiles: %s", e)
        echo(f"- Error! {e}")
        return False

    for name in names:
        echo(f"\nProfile: {name}")
        try:
            results = util.update_local_profile(name, False)
        except (ClashTuiError, ClashError, OSError) as e:
            logger.error("Updating profile %s: %s", name, e)
            echo(f"- Error! {e}")
            continue
        for line in results:
            echo(f"- {line}")
    return True
