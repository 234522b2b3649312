"""Failures of injected collaborators. The memory core itself never raises these."""

from __future__ import annotations


class CapabilityError(Exception):
    """A collaborator broke its contract while serving an NPC."""

    def __init__(self, npc: str, message: str) -> None:
        self.npc = npc
        super().__init__(f"{npc}: {message}")


class BehaviorError(CapabilityError):
    """The behavior strategy raised or returned something that is not an Intent."""


class StorageError(CapabilityError):
    """Saving or loading a snapshot failed, or the snapshot was malformed."""


class PerceptionError(CapabilityError):
    pass


class InteractionError(CapabilityError):
    pass
