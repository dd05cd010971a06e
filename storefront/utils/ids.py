# storefront/utils/ids.py
import itertools
import uuid
from typing import Callable

IdGenerator = Callable[[], str]


def uuid_ids() -> str:
    """Default generator: random uuid4 as a 32-char hex string."""
    return uuid.uuid4().hex


class SequentialIds:
    """
    Deterministic generator, ``prefix-1``, ``prefix-2``, ...

    Used by tests so ids are predictable.
    """

    def __init__(self, prefix: str = "id"):
        self.prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"
