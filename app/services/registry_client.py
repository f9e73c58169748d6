"""Read/write adapter over the registry.

Calls are addressed by their contract names (``getIdentity``,
``registerIdentity``...) so gateways and scripts talk to the registry the
same way a client talks to a deployed contract ABI.

- read(query, *args): never mutates, never waits for the writer lock
- write(call, signer, *args): returns once the change is committed, or raises
  the registry's own error unchanged
"""

from typing import Any, Callable, Dict, List

from app.core.errors import UnknownRegistryCall
from app.services.registry_state import Receipt, RegistryStateMachine


IDENTITY_REGISTRY_ABI: List[str] = [
    "registerIdentity",
    "updateIdentity",
    "getIdentity",
    "getIdentityByMatricula",
    "getAllIdentities",
]

EVENT_STORAGE_ABI: List[str] = [
    "createEvent",
    "getEvent",
    "getEventsByOwner",
    "getAllEvents",
]


class RegistryClient:
    def __init__(self, state: RegistryStateMachine):
        self.state = state
        self._queries: Dict[str, Callable[..., Any]] = {
            "getIdentity": state.get_identity,
            "getIdentityByMatricula": state.get_identity_by_matricula,
            "getAllIdentities": state.get_all_identities,
            "getEvent": state.get_event,
            "getEventsByOwner": state.get_events_by_owner,
            "getAllEvents": state.get_all_events,
            "getNotifications": state.get_notifications,
        }
        self._calls: Dict[str, Callable[..., Receipt]] = {
            "registerIdentity": state.register_identity,
            "updateIdentity": state.update_identity,
            "createEvent": state.create_event,
        }

    def read(self, query: str, *args: Any, **kwargs: Any) -> Any:
        handler = self._queries.get(query)
        if handler is None:
            raise UnknownRegistryCall(f"Unknown registry query: {query}")
        return handler(*args, **kwargs)

    def write(self, call: str, signer: str, *args: Any, **kwargs: Any) -> Receipt:
        handler = self._calls.get(call)
        if handler is None:
            raise UnknownRegistryCall(f"Unknown registry call: {call}")
        return handler(signer, *args, **kwargs)
