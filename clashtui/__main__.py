"""Entry point: clashtui, or python -m clashtui"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .app import App
from .batch import run_update_only
from .config import get_config_dir, get_config_path
from .flags import Flag, decode_flags
from .logs import LOG_FILE_NAME, setup_logging
from .util import ClashTuiUtil

logger = logging.getLogger("clashtui")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="clashtui", description="Terminal dashboard for a clash proxy service")
    parser.add_argument("-u", "--update-all", action="store_true",
                        help="Update every profile, print the results and exit")
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="clashtui config directory (default: $CLASHTUI_CONFIG_DIR or ~/.config/clashtui)")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def run_tui(app: App) -> None:
    # Imported here so headless runs never load textual
    from .tui.host import ClashTuiHost

    ClashTuiHost(app).run()


def main(argv=None) -> int:
    args = parse_args(argv)
    config_dir = args.config_dir or get_config_dir()
    flags = decode_flags(args.update_all, config_dir)

    try:
        setup_logging(config_dir / LOG_FILE_NAME)
    except OSError as e:
        print(f"clashtui: cannot open log file: {e}", file=sys.stderr)
        return 1

    util, errors = ClashTuiUtil.new(config_dir, Flag.FIRST_INIT not in flags)

    if Flag.UPDATE_ONLY in flags:
        for e in errors:
            logger.warning("Config: %s", e)
        return 0 if run_update_only(util) else 1

    app = App(util, flags, errors)
    try:
        run_tui(app)
    except Exception:
        logger.exception("clashtui crashed")
        raise
    finally:
        try:
            app.save(get_config_path(config_dir))
        except OSError as e:
            logger.error("Saving config: %s", e)
    logger.info("Exit")
    return 0


if __name__ == "__main__":
    sys.exit(main())
