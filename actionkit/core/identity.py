"""Opaque per-object identity tokens used for event namespacing."""

from __future__ import annotations

import itertools
import uuid
from dataclasses import dataclass

_sequence = itertools.count(1)


@dataclass(frozen=True)
class Identity:
    """Correlation token unique to one object for the process lifetime.

    Unlike ``id()``, a token is never handed out twice, even after the
    object it was minted for has been collected. Two identities are equal
    only if they are the same token; they say nothing about behaviour.

    Attributes
    ----------
    token : str
        Random hex token
    sequence : int
        Monotonic mint order, handy when reading debug logs
    """

    token: str
    sequence: int

    @classmethod
    def new(cls) -> Identity:
        """Mint a fresh identity."""
        return cls(token=uuid.uuid4().hex, sequence=next(_sequence))

    def __str__(self) -> str:
        return f"{self.sequence}:{self.token[:12]}"


class HasIdentity:
    """Mixin giving instances a lazily minted, stable ``identity``."""

    @property
    def identity(self) -> Identity:
        identity = self.__dict__.get("_identity")
        if identity is None:
            identity = self.__dict__["_identity"] = Identity.new()
        return identity
