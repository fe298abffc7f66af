"""Application entry point."""

import argparse
import shutil
import sys

from loguru import logger
from pydantic import ValidationError

from .app.app import FileBrowserApp, NotifyingDiagnostics
from .app.app_config import AppConfig, build_controller
from .common.app import app_dirs
from .prefs.store import JsonPreferenceStore


def reset_all() -> None:
    """Delete the app data directory."""
    if app_dirs.app_data_dir.exists():
        shutil.rmtree(app_dirs.app_data_dir)
        print(f"App data directory deleted: {app_dirs.app_data_dir}")
    else:
        print(f"App data directory does not exist: {app_dirs.app_data_dir}")


def configure_logging(verbose: bool = False) -> None:
    """Send logs to a rotating file; stderr belongs to the terminal UI."""
    logger.remove()
    app_dirs.app_data_dir.mkdir(parents=True, exist_ok=True)
    logger.add(
        app_dirs.log_path,
        level="DEBUG" if verbose else "INFO",
        rotation="1 MB",
        retention=3,
        encoding="utf-8",
    )


def load_config() -> AppConfig:
    """Load the app config, falling back to defaults when it is missing or invalid."""
    if not app_dirs.app_config_path.exists():
        return AppConfig()
    try:
        return AppConfig.model_validate_json(app_dirs.app_config_path.read_text())
    except (OSError, ValidationError) as e:
        logger.warning(f"Ignoring invalid config {app_dirs.app_config_path}: {e}")
        return AppConfig()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="File Browser - browse, filter and open files")
    parser.add_argument("--temp", action="store_true", help="Run in temporary mode")
    parser.add_argument("--reset", action="store_true", help="Delete all app data")
    parser.add_argument("--directory", metavar="PATH", help="Directory to browse")
    parser.add_argument("--verbose", action="store_true", help="Write debug messages to the log")

    args = parser.parse_args()

    if args.reset:
        reset_all()
        return

    if args.temp:
        app_dirs.use_temp_app_data_dir()

    configure_logging(args.verbose)
    config = load_config()

    diagnostics = NotifyingDiagnostics()
    controller = build_controller(JsonPreferenceStore(app_dirs.preferences_path), diagnostics)
    if args.directory and not controller.save_directory_path(args.directory):
        print(f"Not a valid directory: {args.directory}", file=sys.stderr)
        sys.exit(2)

    app = FileBrowserApp(config, controller)
    diagnostics.app = app
    try:
        app.run()
    finally:
        app_dirs.app_config_path.parent.mkdir(parents=True, exist_ok=True)
        app_dirs.app_config_path.write_text(app.dump_config().model_dump_json(indent=2))


if __name__ == "__main__":
    main()
