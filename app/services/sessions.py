from collections import OrderedDict
from typing import Callable

from app.services.assembler import ResultAssembler


class SessionStore:
    """
    One ResultAssembler per browser session, least recently used evicted.

    Requests from the same session share an assembler, so a rapid second
    request supersedes the first one.
    """

    def __init__(self, factory: Callable[[], ResultAssembler], max_sessions: int = 1000):
        self._factory = factory
        self._max_sessions = max_sessions
        self._assemblers: "OrderedDict[str, ResultAssembler]" = OrderedDict()

    def get(self, session_id: str) -> ResultAssembler:
        assembler = self._assemblers.get(session_id)
        if assembler is None:
            assembler = self._factory()
            self._assemblers[session_id] = assembler
            while len(self._assemblers) > self._max_sessions:
                self._assemblers.popitem(last=False)
        else:
            self._assemblers.move_to_end(session_id)
        return assembler

    def __len__(self) -> int:
        return len(self._assemblers)
