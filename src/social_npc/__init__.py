"""social-npc: per-character social memory and intent synthesis for game NPCs."""

from loguru import logger

from social_npc.behaviors import BehaviorChain, GratitudeBehavior
from social_npc.capabilities import Behavior, Perception, SocialInteraction, Storage, WorldContext
from social_npc.config import MemoryConfig
from social_npc.errors import (
    BehaviorError, CapabilityError, InteractionError, PerceptionError, StorageError,
)
from social_npc.mind import NpcMind
from social_npc.models import (
    FadeDecision, Intent, InteractionResult, Memory, Npc, NpcAction, NpcBuilder,
    Observation, PerceptionResult, Reflection,
)
from social_npc.relationship import RelationshipMemory
from social_npc.system import MemorySystem, MemoryUpdate, RelationshipUpdate

# Library: silent until the host calls logger.enable("social_npc")
logger.disable("social_npc")

__version__ = "0.1.0"
__all__ = [
    "Memory", "RelationshipMemory", "MemorySystem", "MemoryUpdate", "RelationshipUpdate",
    "MemoryConfig", "Npc", "NpcBuilder", "Intent", "NpcAction", "Observation",
    "PerceptionResult", "InteractionResult", "FadeDecision", "Reflection",
    "Behavior", "Storage", "Perception", "SocialInteraction", "WorldContext",
    "GratitudeBehavior", "BehaviorChain", "NpcMind",
    "CapabilityError", "BehaviorError", "StorageError", "PerceptionError", "InteractionError",
]
