from __future__ import annotations

from typing import Dict, Iterable, Optional


class SymbolTrie:
    """Prefix tree over operator and punctuation spellings.

    A node's `value` is set exactly when some inserted spelling ends there;
    the lexer walks it one character at a time for maximal munch.
    """
    def __init__(self, symbols: Iterable[str] = ()):
        self.children: Dict[str, SymbolTrie] = {}
        self.value: Optional[str] = None
        for symbol in symbols:
            self.add(symbol)

    def child(self, char: str) -> Optional['SymbolTrie']:
        return self.children.get(char)

    def add(self, key: str, value: Optional[str] = None) -> None:
        node = self
        for char in key:
            node = node.children.setdefault(char, SymbolTrie())
        node.value = key if value is None else value

    def remove(self, key: str) -> None:
        if not key:
            return
        path = []
        node = self
        for char in key:
            child = node.children.get(char)
            if child is None:
                return
            path.append((node, char))
            node = child
        node.value = None
        # collapse branches left with neither a value nor children
        while path and not node.children and node.value is None:
            parent, char = path.pop()
            del parent.children[char]
            node = parent

    def find(self, key: str) -> Optional[str]:
        node = self
        for char in key:
            node = node.children.get(char)
            if node is None:
                return None
        return node.value

    def __contains__(self, key: str) -> bool:
        return self.find(key) is not None
