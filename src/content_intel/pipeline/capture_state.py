"""
Persisted capture switch ("knowledge mode").

While the switch is off the pipeline never classifies or saves captured
pages. The state survives restarts as a small JSON file.
"""

import json
from datetime import datetime, timezone
from pathlib import Path

from content_intel.config import CaptureSettings
from content_intel.core.exceptions import StorageError
from content_intel.utils.logging import get_logger

logger = get_logger(__name__)


class CaptureToggle:
    """
    On/off switch for automatic capture, stored at ``state_path``.

    The initial state comes from ``default_enabled`` until the switch is
    first changed, after which the file wins.

    Example:
        >>> toggle = CaptureToggle(Path("data/capture_state.json"))
        >>> toggle.is_enabled()
        False
        >>> toggle.toggle()
        True
    """

    def __init__(self, state_path: Path, default_enabled: bool = False) -> None:
        self.state_path = Path(state_path)
        self.default_enabled = default_enabled
        self._enabled: bool | None = None

    @classmethod
    def from_settings(cls, settings: CaptureSettings) -> "CaptureToggle":
        return cls(settings.state_path, default_enabled=settings.enabled)

    def is_enabled(self) -> bool:
        if self._enabled is None:
            self._enabled = self._load()
        return self._enabled

    def enable(self) -> None:
        self._set(True)

    def disable(self) -> None:
        self._set(False)

    def toggle(self) -> bool:
        """Flip the switch and return the new state."""
        self._set(not self.is_enabled())
        return self._enabled

    def _load(self) -> bool:
        if not self.state_path.exists():
            return self.default_enabled

        try:
            data = json.loads(self.state_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(
                f"Unreadable capture state {self.state_path}, using default: {e}")
            return self.default_enabled

        if not isinstance(data, dict) or not isinstance(data.get("enabled"), bool):
            logger.warning(f"Malformed capture state in {self.state_path}, using default")
            return self.default_enabled
        return data["enabled"]

    def _set(self, enabled: bool) -> None:
        state = {
            "enabled": enabled,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            self.state_path.parent.mkdir(parents=True, exist_ok=True)
            self.state_path.write_text(json.dumps(state, indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageError(
                f"Failed to write capture state: {e}",
                details={"path": str(self.state_path)},
            ) from e

        self._enabled = enabled
        logger.info(f"Knowledge capture {'enabled' if enabled else 'disabled'}")

    def __repr__(self) -> str:
        return f"CaptureToggle(path={self.state_path!r})"
