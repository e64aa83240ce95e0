"""Wordlist and shared-history membership services.

The engine only needs a membership test and a status flag from these
collaborators. StaticWordlist is an in-memory implementation that can be
loaded from a newline separated file.
"""

from collections.abc import Iterable
from enum import Enum
from pathlib import Path
from typing import Protocol

from passpolicy.core.logging import get_logger

logger = get_logger(__name__)


class ServiceStatus(Enum):
    OPEN = "open"
    CLOSED = "closed"


class WordlistService(Protocol):
    """Boolean membership test over a word collection."""

    def status(self) -> ServiceStatus: ...

    def contains_word(self, word: str) -> bool: ...


class StaticWordlist:
    """Case-insensitive in-memory wordlist."""

    def __init__(self, words: Iterable[str] = (), status: ServiceStatus = ServiceStatus.OPEN) -> None:
        self._words = frozenset(w.strip().lower() for w in words if w and w.strip())
        self._status = status

    @classmethod
    def from_file(cls, path: str | Path, encoding: str = "utf-8") -> "StaticWordlist":
        """Load one word per line; blank lines and lines starting with '#' are skipped.

        Args:
            path: Path to the word file.
            encoding: File encoding.

        Returns:
            An open wordlist holding the file's words.
        """
        with open(path, encoding=encoding) as f:
            words = [line for line in f if not line.lstrip().startswith("#")]
        wordlist = cls(words)
        logger.info("Loaded wordlist", path=str(path), size=len(wordlist))
        return wordlist

    def __len__(self) -> int:
        return len(self._words)

    def status(self) -> ServiceStatus:
        return self._status

    def contains_word(self, word: str) -> bool:
        if not word:
            return False
        return word.lower() in self._words
