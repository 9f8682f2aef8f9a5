class InMemoryLocalStore:
    def __init__(self) -> None:
        self._data: dict[str, dict[str, str]] = {}

    def get(self, namespace: str, key: str) -> str | None:
        return self._data.get(namespace, {}).get(key)

    def put(self, namespace: str, key: str, value: str) -> None:
        self._data.setdefault(namespace, {})[key] = value

    def delete(self, namespace: str, key: str) -> None:
        self._data.get(namespace, {}).pop(key, None)

    def items(self, namespace: str) -> list[tuple[str, str]]:
        return sorted(self._data.get(namespace, {}).items())

    def clear(self, namespace: str) -> None:
        self._data.pop(namespace, None)
