"""
editorial_services.identity -- IdentityProvider implementations.

Session and token resolution live outside this package; callers adapt
their authenticated principal into an ``Actor`` through one of these.
"""

from __future__ import annotations

from uuid import UUID

from editorial_kernel.domain.article import Actor, Role


class StaticIdentityProvider:
    """Always answers with the same actor.

    Used by request handlers that have already authenticated the caller,
    and by tests.
    """

    def __init__(self, actor: Actor):
        self._actor = actor

    @classmethod
    def of(cls, actor_id: UUID, role: Role | str) -> StaticIdentityProvider:
        return cls(Actor(id=actor_id, role=Role(role)))

    def current_actor(self) -> Actor:
        return self._actor


class SwitchableIdentityProvider:
    """Identity provider whose actor can be changed between commands."""

    def __init__(self, actor: Actor | None = None):
        self._actor = actor

    def act_as(self, actor: Actor) -> None:
        self._actor = actor

    def current_actor(self) -> Actor:
        if self._actor is None:
            raise LookupError("No actor is signed in")
        return self._actor
