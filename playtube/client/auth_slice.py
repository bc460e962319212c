# playtube/client/auth_slice.py
"""
Client-side authentication state.

Three fields: a loading flag, the payload returned after login, and the
auth token. The token is read from local storage when the store starts
and written back whenever it changes.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from playtube.client.storage import LocalStorage

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"

SET_LOGIN_DATA = "auth/setLoginData"
SET_TOKEN = "auth/setToken"
SET_LOADING = "auth/setLoading"

# action type -> state field it replaces
_FIELDS = {
    SET_LOGIN_DATA: "login_data",
    SET_TOKEN: "token",
    SET_LOADING: "loading",
}


@dataclass(frozen=True)
class AuthState:
    loading: bool = True
    login_data: Optional[dict[str, Any]] = None
    token: Optional[str] = None


@dataclass(frozen=True)
class Action:
    type: str
    payload: Any = None


def set_login_data(payload: Optional[dict[str, Any]]) -> Action:
    return Action(SET_LOGIN_DATA, payload)


def set_token(token: Optional[str]) -> Action:
    return Action(SET_TOKEN, token)


def set_loading(loading: bool) -> Action:
    return Action(SET_LOADING, loading)


def load_token(storage: LocalStorage) -> Optional[str]:
    raw = storage.get_item(TOKEN_KEY)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Stored token is not valid JSON, ignoring it")
        return None


def initial_state(storage: LocalStorage) -> AuthState:
    return AuthState(loading=True, login_data=None, token=load_token(storage))


def auth_reducer(state: AuthState, action: Action) -> AuthState:
    field_name = _FIELDS.get(action.type)
    if field_name is None:
        return state
    return replace(state, **{field_name: action.payload})


Listener = Callable[[AuthState], None]


class AuthStore:
    """Holds the auth state and mirrors the token into local storage."""

    def __init__(self, storage: LocalStorage):
        self._storage = storage
        self._state = initial_state(storage)
        self._listeners: list[Listener] = []

    @property
    def state(self) -> AuthState:
        return self._state

    def dispatch(self, action: Action) -> AuthState:
        self._state = auth_reducer(self._state, action)
        if action.type == SET_TOKEN:
            self._mirror_token(action.payload)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _mirror_token(self, token: Optional[str]) -> None:
        if token is None:
            self._storage.remove_item(TOKEN_KEY)
        else:
            self._storage.set_item(TOKEN_KEY, json.dumps(token))
