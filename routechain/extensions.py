from typing import Any, Dict, Iterator, Optional
import threading


class Extensions:
    """
    Extension slots carried by a Request through its handler chain.

    Middleware use it to hand data to later handlers instead of assigning
    arbitrary attributes on the request.

    Features:
        - Access by attributes: request.extensions.user
        - Access by key: request.extensions["user"], "user" in request.extensions
        - Initialization from a dict: Extensions({"user": "ada"})
        - get/set/update/setdefault helpers

    NOTE: one instance belongs to one request; the lock only guards against
    handlers that hand the request to worker threads.
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    # Access by attributes (read)
    def __getattr__(self, name: str) -> Any:
        # called only if the attribute is not in __dict__
        with self._lock:
            if name in self._data:
                return self._data[name]
        raise AttributeError(f"Extensions has no slot '{name}'")

    # Access by attributes (write)
    def __setattr__(self, name: str, value: Any) -> None:
        # protect internal attributes
        if name in ("_data", "_lock"):
            object.__setattr__(self, name, value)
            return
        with self._lock:
            self._data[name] = value

    def __delattr__(self, name: str) -> None:
        with self._lock:
            if name in self._data:
                del self._data[name]
                return
        raise AttributeError(f"Extensions has no slot '{name}'")

    # Mapping access
    def __getitem__(self, key: str) -> Any:
        with self._lock:
            return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_dict())

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def setdefault(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.setdefault(key, default)

    def update(self, mapping: Dict[str, Any]) -> None:
        with self._lock:
            self._data.update(mapping)

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._data)

    def __repr__(self) -> str:
        return f"Extensions({self.to_dict()!r})"
