"""
Access token persistence and resolution.

The token is stored in a small JSON document in the per-user config
directory and is read once per run. It is saved only when the user enters a
new one at the prompt.
"""

import json
import logging
from pathlib import Path
from typing import Callable, Optional, Union
from rich.console import Console
from rich.prompt import Prompt
from .config import config

logger = logging.getLogger(__name__)

CONFIG_FILENAME = 'config.json'
TOKEN_KEY = 'ipinfoApiKey'
SIGNUP_URL = 'https://ipinfo.io/signup'


class CredentialStore:
    """Reads and writes the persisted access token."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        """
        Initialize the store.

        Args:
            path: Location of the JSON document; defaults to
                ``<user-config-dir>/config.json``
        """
        self.path = Path(path) if path else config.get_config_dir() / CONFIG_FILENAME

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read credential store {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed credential store {self.path}")
            return {}
        return data

    def load(self) -> Optional[str]:
        """Return the stored token, or None if there is none."""
        token = self._read().get(TOKEN_KEY)
        if isinstance(token, str) and token.strip():
            return token.strip()
        return None

    def save(self, token: str):
        """Persist a token, keeping any other keys already in the file."""
        data = self._read()
        data[TOKEN_KEY] = token
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2) + '\n', encoding='utf-8')
        logger.info(f"Saved access token to {self.path}")


def prompt_for_token() -> str:
    """Ask for a token interactively. An empty answer means none."""
    message = (
        "[yellow]Please set an IPinfo API key[/yellow].\n"
        f"Create a new one here: {SIGNUP_URL}\n"
        "Paste your key here ([blue]or hit 'enter' to continue without one[/blue])"
    )
    try:
        # Prompt on stderr so stdout carries only results
        return Prompt.ask(message, default='', show_default=False, console=Console(stderr=True))
    except EOFError:
        return ''


def resolve_credential(store: CredentialStore,
                       prompt: Callable[[], str] = prompt_for_token) -> Optional[str]:
    """
    Resolve the access token for this run.

    Order: environment override, then the persisted store, then the
    interactive prompt. A token entered at the prompt is saved.

    Args:
        store: Persisted token storage
        prompt: Callable returning the user's answer

    Returns:
        The token, or None to run unauthenticated
    """
    token = config.get_api_key('ipinfo')
    if token:
        return token

    token = store.load()
    if token:
        return token

    answer = (prompt() or '').strip()
    if not answer:
        logger.info("No access token provided, continuing unauthenticated")
        return None

    store.save(answer)
    return answer
