import argparse
import json
import sys

from config import DEFAULT_CONFIG, load_config, save_config, validate_config
from utils.logger import setup_logging, log_info, log_warning, log_error
from menus.main_menu import main_menu, show_profile_and_top_tracks, sign_out, spotify_setup_help
from menus.config_menu import config_menu
from spotify_api.session import SessionState


def _load_or_create_config() -> dict:
    try:
        return load_config()
    except FileNotFoundError:
        log_warning("config.json not found. Writing defaults; set spotify_client_id before signing in.")
        config = DEFAULT_CONFIG.copy()
        save_config(config)
        return config


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Show your Spotify profile and top tracks.")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run the sign-in + fetch flow once and exit instead of showing the menu.",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(level=DEFAULT_CONFIG["log_level"], log_file=None)

    try:
        config = _load_or_create_config()
    except json.JSONDecodeError as e:
        log_error(f"Config file contains invalid JSON: {e}")
        return 1
    except OSError as e:
        log_error(f"Error loading config: {e}")
        return 1

    setup_logging(level=config.get("log_level", "INFO"), log_file=config.get("log_file"))

    is_valid, errors = validate_config(config)
    if not is_valid:
        for error in errors:
            log_error(error)
        return 1

    if args.once:
        state = show_profile_and_top_tracks(config)
        return 0 if state is SessionState.AUTHENTICATED else 1

    while True:
        choice = main_menu()

        if choice == "Show my profile & top tracks":
            show_profile_and_top_tracks(config)

        elif choice == "Sign out (forget stored token)":
            sign_out(config)

        elif choice == "Spotify setup help":
            spotify_setup_help(config)

        elif choice == "Config Menu":
            config = config_menu(config)

        elif choice == "Exit":
            log_info("Exiting program...")
            break

        else:
            log_error("Invalid choice.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
