"""Token storage for the API client.

The client does not own a global token. It is handed a store object and
reads and writes the bearer token through it, so tests and long-running
processes can choose where the token lives.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"


class MemoryTokenStore:
    """Keeps the token for the lifetime of the process only."""

    def __init__(self, token: str | None = None):
        self._token = token

    def load(self) -> str | None:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class TokenStore:
    """Persists the token in a small JSON file keyed by ``token``.

    A missing or unreadable file means no token, i.e. unauthenticated.
    """

    def __init__(self, path: str | Path):
        """Initialize token store.

        Args:
            path: JSON file holding the session
        """
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> str | None:
        token = self._read().get(TOKEN_KEY)
        return token if isinstance(token, str) and token else None

    def save(self, token: str) -> None:
        data = self._read()
        data[TOKEN_KEY] = token
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")
        try:
            self.path.chmod(0o600)
        except OSError:
            logger.debug(f"Could not restrict permissions on {self.path}")

    def clear(self) -> None:
        data = self._read()
        if TOKEN_KEY not in data:
            return
        del data[TOKEN_KEY]
        if data:
            self.path.write_text(json.dumps(data), encoding="utf-8")
        else:
            self.path.unlink(missing_ok=True)
