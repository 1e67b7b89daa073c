# portal_core/common/events.py
from collections import defaultdict
from typing import Callable, Dict, List, Any

Handler = Callable[[Dict[str, Any]], None]

_registry: Dict[str, List[Handler]] = defaultdict(list)

PASSCODE_ISSUED = "patient.passcode.issued"


def subscribe(event_name: str):
    """
    Decorator to register an event handler.
    Usage:
        @subscribe("patient.passcode.issued")
        def deliver(payload): ...
    """
    def _decorator(fn: Handler) -> Handler:
        _registry[event_name].append(fn)
        return fn
    return _decorator


def unsubscribe(event_name: str, fn: Handler) -> None:
    handlers = _registry.get(event_name, [])
    if fn in handlers:
        handlers.remove(fn)


def publish(event_name: str, payload: Dict[str, Any]) -> None:
    """
    Publish an event to in-process subscribers.
    Outbound delivery (SMS / email gateways) hooks in here; handler errors propagate.
    """
    for handler in list(_registry.get(event_name, [])):
        handler(payload)
