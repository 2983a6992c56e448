"""Panel settings and the store they persist in.

The "refresh tree on action" preference resolves in this order:

1. The checkbox in the current request.
2. Unless the hidden companion field was posted (the user unticked the
   box), the value cached for ``(project, setting, mode)``.
3. The configured default: on iff ``automatic_tree_refresh > 0``.

The resolved value is written back under the same key before returning.
The key deliberately carries the project id and not a tab or session
id, so every tab showing the same project picks up the latest choice.
Concurrent writers race with last-write-wins semantics.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from reqtree.filters.request import RequestInput

REFRESH_SETTING_KEY = "setting_refresh_tree_on_action"
REFRESH_SETTING_NAME = "reqTreeRefreshOnAction"
DEFAULT_MODE = "req_edit"

CF_COLLAPSED_KEY = "cf_filter_collapsed"
CF_TOGGLE_FIELD = "btn_toggle_cf"

SESSION_ENV_KEY = "env_for_tproject"


@runtime_checkable
class SettingsStore(Protocol):
    """Session-scoped key/value store for panel preferences."""

    def get(self, project_id: int, setting: str, mode: str) -> Any: ...

    def set(self, project_id: int, setting: str, mode: str, value: Any) -> None: ...

    def get_global(self, name: str, default: Any = None) -> Any: ...

    def set_global(self, name: str, value: Any) -> None: ...


class InMemorySettingsStore:
    """Dict-backed store for tests and the command line."""

    def __init__(self) -> None:
        self.values: dict[tuple[int, str, str], Any] = {}
        self.globals: dict[str, Any] = {}

    def get(self, project_id: int, setting: str, mode: str) -> Any:
        return self.values.get((project_id, setting, mode))

    def set(self, project_id: int, setting: str, mode: str, value: Any) -> None:
        self.values[(project_id, setting, mode)] = value

    def get_global(self, name: str, default: Any = None) -> Any:
        return self.globals.get(name, default)

    def set_global(self, name: str, value: Any) -> None:
        self.globals[name] = value


class SessionSettingsStore:
    """Store backed by a session mapping (e.g. ``flask.session``).

    Project values live under ``session["env_for_tproject"][project][setting][mode]``.
    Project ids are stringified so the session survives JSON serialization.
    """

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self._session = session

    def get(self, project_id: int, setting: str, mode: str) -> Any:
        env = self._session.get(SESSION_ENV_KEY, {})
        return env.get(str(project_id), {}).get(setting, {}).get(mode)

    def set(self, project_id: int, setting: str, mode: str, value: Any) -> None:
        env = dict(self._session.get(SESSION_ENV_KEY, {}))
        project = dict(env.get(str(project_id), {}))
        modes = dict(project.get(setting, {}))
        modes[mode] = value
        project[setting] = modes
        env[str(project_id)] = project
        # reassign so the session notices the change
        self._session[SESSION_ENV_KEY] = env

    def get_global(self, name: str, default: Any = None) -> Any:
        return self._session.get(name, default)

    def set_global(self, name: str, value: Any) -> None:
        self._session[name] = value


@dataclass(frozen=True)
class ResolvedSetting:
    """A resolved checkbox setting.

    Attributes:
        key: Request field name of the checkbox.
        selected: Resolved value.
        source: Where it came from: "request", "session" or "config".
    """

    key: str
    selected: bool
    source: str

    @property
    def hidden_key(self) -> str:
        return f"hidden_{self.key}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "selected": int(self.selected),
            self.hidden_key: int(self.selected),
            "source": self.source,
        }


def resolve_refresh_on_action(
    request: RequestInput,
    store: SettingsStore,
    project_id: int,
    automatic_tree_refresh: int,
    mode: str = DEFAULT_MODE,
) -> ResolvedSetting:
    """Resolve the "refresh tree on action" checkbox and cache the result."""
    key = REFRESH_SETTING_KEY
    if request.has(key):
        selected, source = True, "request"
    elif request.has(f"hidden_{key}"):
        selected, source = False, "request"
    else:
        cached = store.get(project_id, REFRESH_SETTING_NAME, mode)
        if cached is not None:
            selected, source = bool(cached), "session"
        else:
            selected, source = (automatic_tree_refresh or 0) > 0, "config"

    store.set(project_id, REFRESH_SETTING_NAME, mode, int(selected))
    return ResolvedSetting(key=key, selected=selected, source=source)


def resolve_cf_collapsed(request: RequestInput, store: SettingsStore) -> bool:
    """Custom field panel collapse state; ``btn_toggle_cf`` flips it."""
    collapsed = bool(store.get_global(CF_COLLAPSED_KEY, False))
    if request.has(CF_TOGGLE_FIELD):
        collapsed = not collapsed
    store.set_global(CF_COLLAPSED_KEY, collapsed)
    return collapsed
