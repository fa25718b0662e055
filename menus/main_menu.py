import webbrowser

import questionary

from spotify_api.auth import check_spotify_credentials, spotify_app_setup_instructions
from spotify_api.auth_state import JsonFileAuthStateStore
from spotify_api.navigation import LoopbackNavigator, Navigator, PasteNavigator
from spotify_api.session import SessionBootstrapper, SessionState
from menus.profile_view import ProfileView, print_view
from utils.logger import log_info, log_warning, log_error, log_success


def main_menu() -> str:
    return questionary.select(
        "🎧 Spotify Top Tracks — What would you like to do?",
        choices=[
            "Show my profile & top tracks",
            "Sign out (forget stored token)",
            "Spotify setup help",
            "Config Menu",
            "Exit",
        ],
    ).ask() or "Exit"


def _paste_prompt(message: str):
    return questionary.text(message).ask()


def build_navigator(config: dict) -> Navigator:
    redirect_uri = str(config.get("spotify_redirect_uri", "")).strip()
    if config.get("open_browser", True) and redirect_uri.startswith("http://"):
        return LoopbackNavigator(redirect_uri)
    return PasteNavigator(_paste_prompt, open_browser=webbrowser.open)


def build_session(config: dict, view: ProfileView) -> SessionBootstrapper:
    store = JsonFileAuthStateStore(path=config.get("auth_state_file") or "data/auth_state.json")
    return SessionBootstrapper(config, store, build_navigator(config), view)


def spotify_setup_help(config: dict) -> None:
    creds = check_spotify_credentials(config)
    log_info("\n" + "=" * 72)
    log_info("SPOTIFY WEB API SETUP")
    log_info("=" * 72)
    log_info(spotify_app_setup_instructions(redirect_uri=creds.get("redirect_uri")))
    log_info("Current config status:")
    log_info(f"- spotify_client_id: {'SET' if creds.get('client_id') else 'NOT SET'}")
    log_info(f"- spotify_redirect_uri: {creds.get('redirect_uri') or ''}")
    if not creds.get("ok"):
        log_warning(creds.get("message") or "Spotify credentials are incomplete.")
    else:
        log_info(creds.get("message") or "Spotify credentials look OK.")
    log_info("=" * 72 + "\n")


def show_profile_and_top_tracks(config: dict) -> SessionState:
    creds = check_spotify_credentials(config)
    if not creds.get("ok"):
        log_warning(creds.get("message") or "Spotify credentials are incomplete.")
        spotify_setup_help(config)
        return SessionState.FAILED

    view = ProfileView()
    session = build_session(config, view)
    state = session.settle()

    # A partially filled view is still worth showing.
    if view.display_name or view.top_tracks:
        print_view(view)

    if state is SessionState.AUTHENTICATED:
        log_success(f"Showing {len(view.top_tracks)} top tracks.")
    elif state is SessionState.REDIRECTED:
        log_warning("Authorisation did not complete. Try again once you have approved access in the browser.")
    else:
        log_error("Could not load your Spotify data. See the log for details.")
    return state


def sign_out(config: dict) -> None:
    session = build_session(config, ProfileView())
    session.sign_out()
    log_success("Signed out. The next run will ask Spotify for authorisation again.")
