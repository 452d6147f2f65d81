from __future__ import annotations

from typing import Callable, Dict, Generic, Iterable, List, Optional, TypeVar


T = TypeVar("T")
U = TypeVar("U")


class OffsetIndex(Generic[T]):
    def __init__(self) -> None:
        self._elements: Dict[int, List[T]] = {}

    def register(self, offset: Optional[int], element: T) -> None:
        if offset is None:
            return
        self._elements.setdefault(offset, []).append(element)

    def register_all(self, pairs: Iterable[tuple[Optional[int], T]]) -> None:
        for offset, element in pairs:
            self.register(offset, element)

    def elements_for(self, offset: Optional[int]) -> List[T]:
        if offset is None:
            return []
        return list(self._elements.get(offset, []))

    def map(self, convert: Callable[[T], U]) -> "OffsetIndex[U]":
        mapped: OffsetIndex[U] = OffsetIndex()
        for offset, elements in self._elements.items():
            for element in elements:
                mapped.register(offset, convert(element))
        return mapped

    def offsets(self) -> List[int]:
        return list(self._elements)

    def __len__(self) -> int:
        return sum(len(elements) for elements in self._elements.values())


class CrossViewLinker(Generic[T]):
    def __init__(
        self,
        index: OffsetIndex[T],
        set_highlighted: Callable[[T, bool], None],
        reveal: Callable[[T], None],
    ) -> None:
        self.index = index
        self._set_highlighted = set_highlighted
        self._reveal = reveal

    def _each(self, offset: Optional[int], action: Callable[[T], None]) -> List[T]:
        elements = self.index.elements_for(offset)
        for element in elements:
            action(element)
        return elements

    def click(self, offset: Optional[int]) -> List[T]:
        return self._each(offset, self._reveal)

    def enter(self, offset: Optional[int]) -> List[T]:
        return self._each(offset, lambda element: self._set_highlighted(element, True))

    def leave(self, offset: Optional[int]) -> List[T]:
        return self._each(offset, lambda element: self._set_highlighted(element, False))
