from dataclasses import dataclass, field
from threading import Lock
from typing import Iterator

from lsprotocol import types as lsp


@dataclass(frozen=True)
class Component:
    selector: str
    class_name: str
    uri: str
    class_name_range: lsp.Range
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()

    @property
    def location(self) -> lsp.Location:
        return lsp.Location(uri=self.uri, range=self.class_name_range)

    def _dump(self) -> str:
        start = self.class_name_range.start
        end = self.class_name_range.end

        dump = f"{self.selector} -> {self.class_name} ({self.uri} {start.line}:{start.character} -> {end.line}:{end.character})\n"
        for name in self.inputs:
            dump += f"\t- input {name}\n"
        for name in self.outputs:
            dump += f"\t- output {name}\n"

        return dump


@dataclass
class ComponentIndex:
    """Selector keyed table of components shared by the scanner and requests.

    Every operation takes the lock for a single key operation, so callers never
    coordinate. A later insert with the same selector replaces the earlier one.
    """

    _components: dict[str, Component] = field(default_factory=dict)
    _lock: Lock = field(default_factory=Lock)

    def insert(self, component: Component):
        with self._lock:
            self._components[component.selector] = component

    def get(self, selector: str) -> Component | None:
        with self._lock:
            return self._components.get(selector)

    def clear(self):
        with self._lock:
            self._components.clear()

    def components(self) -> list[Component]:
        with self._lock:
            return list(self._components.values())

    def __contains__(self, selector: str):
        return self.get(selector) is not None

    def __len__(self):
        with self._lock:
            return len(self._components)

    def __iter__(self) -> Iterator[Component]:
        return iter(self.components())

    def dump(self) -> str:
        dump = f"components: {len(self)}\n"
        for component in sorted(self.components(), key=lambda c: c.selector):
            dump += component._dump()

        return dump
