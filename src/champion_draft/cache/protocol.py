from typing import Protocol


class LocalStore(Protocol):
    def get(self, namespace: str, key: str) -> str | None: ...

    def put(self, namespace: str, key: str, value: str) -> None: ...

    def delete(self, namespace: str, key: str) -> None: ...

    def items(self, namespace: str) -> list[tuple[str, str]]: ...

    def clear(self, namespace: str) -> None: ...
