import questionary

from config import CONFIG_SCHEMA, load_config, reset_to_defaults, update_config, validate_config
from spotify_api.auth_state import ACCESS_TOKEN_KEY, DEFAULT_AUTH_STATE_PATH, VERIFIER_KEY, JsonFileAuthStateStore
from utils.logger import log_error, log_info, log_success, log_warning

# A stored verifier or token is only good for the app, redirect URI and
# state file it was issued under.
AUTH_BOUND_KEYS = ("spotify_client_id", "spotify_redirect_uri", "auth_state_file")

SETTING_HINTS = {
    "spotify_client_id": "32 hex characters, from your app in the Spotify developer dashboard",
    "spotify_redirect_uri": "must exactly match a Redirect URI registered for the app",
    "auth_state_file": "JSON file that keeps the PKCE verifier and access token between runs",
    "open_browser": "off: print the authorize URL and paste the redirect back in",
}


def config_menu(config: dict) -> dict:
    """
    Display the configuration menu and handle user selections.
    Returns the potentially updated config dict.
    """
    actions = {
        "View current config": view_config,
        "Update a setting": update_setting_menu,
        "Reset to defaults": reset_config_menu,
        "Validate configuration": validate_config_menu,
    }

    while True:
        choice = questionary.select(
            "⚙️ Config Menu — What would you like to do?",
            choices=list(actions) + ["Back"],
        ).ask()

        action = actions.get(choice)
        if action is None:
            break

        updated = action(config)
        if isinstance(updated, dict):
            config = updated

    return config


def _auth_store(config: dict) -> JsonFileAuthStateStore:
    return JsonFileAuthStateStore(path=config.get("auth_state_file") or DEFAULT_AUTH_STATE_PATH)


def auth_status(config: dict) -> str:
    store = _auth_store(config)
    if store.get(ACCESS_TOKEN_KEY):
        return "signed in"
    if store.get(VERIFIER_KEY):
        return "authorisation started, no token yet"
    return "signed out"


def view_config(config: dict):
    """Display the current configuration in a readable format."""
    print("\n" + "=" * 50)
    print("📋 Current Configuration")
    print("=" * 50)

    categories = {
        "Spotify": ["spotify_client_id", "spotify_redirect_uri", "open_browser"],
        "Data": ["auth_state_file", "top_tracks_time_range"],
        "Logging": ["log_file", "log_level"],
    }

    for category, keys in categories.items():
        print(f"\n{category}:")
        for key in keys:
            if key not in config:
                continue
            value = config[key]
            if isinstance(value, bool):
                value = "✓ Enabled" if value else "✗ Disabled"
            elif value == "":
                value = "(not set)"
            print(f"  {key}: {value}")

    print(f"\nAuth state: {auth_status(config)}")
    print("\n" + "=" * 50)
    input("\nPress Enter to continue...")


def _field_error(config: dict, key: str, value):
    """Return True if ``value`` is acceptable for ``key``, else the first error."""
    _, errors = validate_config({**config, key: value})
    mine = [e for e in errors if f"'{key}'" in e]
    return mine[0] if mine else True


def _ask_new_value(config: dict, key: str):
    schema = CONFIG_SCHEMA.get(key, {})
    current = config.get(key)

    print(f"\nCurrent value: {'(not set)' if current in (None, '') else current}")
    if key in SETTING_HINTS:
        print(f"  {SETTING_HINTS[key]}")

    if "choices" in schema:
        return questionary.select(
            f"Select new value for {key}:",
            choices=schema["choices"],
            default=current if current in schema["choices"] else None,
        ).ask()

    if schema.get("type") is bool:
        return questionary.confirm(
            f"Enable {key}?",
            default=current if isinstance(current, bool) else True,
        ).ask()

    answer = questionary.text(
        f"Enter new value for {key}:",
        default="" if current is None else str(current),
        validate=lambda text: _field_error(config, key, text.strip()),
    ).ask()
    return None if answer is None else answer.strip()


def offer_sign_out(previous: dict, changed: list) -> bool:
    """Offer to drop auth state that ``changed`` settings no longer match.

    ``previous`` is the config the state was written under; its
    ``auth_state_file`` is the one cleared. Returns True if state was removed.
    """
    store = _auth_store(previous)
    if not (store.get(ACCESS_TOKEN_KEY) or store.get(VERIFIER_KEY)):
        return False

    if "auth_state_file" in changed:
        log_warning(f"The stored access token and PKCE verifier stay behind in {store.path} and will no longer be used.")
    else:
        log_warning(
            f"Changing {', '.join(changed)} invalidates the stored access token and PKCE verifier in {store.path}."
        )

    if not questionary.confirm("Sign out now and remove them?", default=True).ask():
        log_info("Keeping the stored auth state. Use 'Sign out' from the main menu if Spotify rejects it.")
        return False

    store.remove(ACCESS_TOKEN_KEY)
    store.remove(VERIFIER_KEY)
    log_success("Signed out. The next run will ask Spotify for authorisation again.")
    return True


def update_setting_menu(config: dict) -> dict:
    """Menu to update individual settings."""
    key = questionary.select(
        "Select setting to update:",
        choices=list(CONFIG_SCHEMA) + ["Back"],
    ).ask()

    if key is None or key == "Back":
        return config

    new_value = _ask_new_value(config, key)
    if new_value is None:
        return config
    if new_value == config.get(key):
        log_info(f"'{key}' unchanged.")
        return config

    success, message = update_config(key, new_value)
    if not success:
        log_error(message)
        return config

    log_success(message)
    previous = dict(config)
    config[key] = new_value
    if key in AUTH_BOUND_KEYS:
        offer_sign_out(previous, [key])

    return config


def reset_config_menu(config: dict) -> dict:
    """Menu to reset configuration to defaults."""
    confirm = questionary.confirm(
        "⚠️ Reset all settings to defaults? This cannot be undone.",
        default=False,
    ).ask()

    if not confirm:
        return config

    success, message = reset_to_defaults()
    if not success:
        log_error(message)
        return config

    log_success(message)
    previous = config
    config = load_config()
    changed = [key for key in AUTH_BOUND_KEYS if previous.get(key) != config.get(key)]
    if changed:
        offer_sign_out(previous, changed)

    return config


def validate_config_menu(config: dict):
    """Validate the current configuration and show any errors."""
    is_valid, errors = validate_config(config)

    print("\n" + "=" * 50)
    print("🔍 Configuration Validation")
    print("=" * 50)

    if is_valid:
        log_success("Configuration is valid! ✓")
    else:
        log_error("Configuration has errors:")
        for error in errors:
            print(f"  ✗ {error}")

    if not config.get("spotify_client_id"):
        log_warning("spotify_client_id is not set; sign-in will fail until it is.")

    print("=" * 50)
    input("\nPress Enter to continue...")
