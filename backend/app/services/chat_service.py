"""Chat Service - wires the pure classifier and config grammar to the store.

Invariants:
    - classify() never raises: any failure in the classifier path becomes the
      generic apology reply (logged with traceback)
    - word_count uses the same count_words rule as guest truncation
    - apply_config_command() writes only when the grammar produced an update
"""

import logging
import random
from dataclasses import dataclass

from app.core.classify_response import ChoiceSource, classify_detailed
from app.core.config_commands import parse_config_command
from app.core.language_strings import get_apology
from app.core.records import SystemConfig
from app.core.repository_protocols import CoreStore
from app.core.word_count import count_words

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatReply:
    response: str
    word_count: int
    word_limit_reached: bool = False


@dataclass(frozen=True)
class ConfigCommandOutcome:
    message: str
    config: SystemConfig


class ChatService:
    def __init__(self, store: CoreStore, rng: ChoiceSource | None = None):
        self._store = store
        self._rng = rng or random.Random()

    async def classify(self, message: str, is_authenticated: bool) -> ChatReply:
        try:
            config = await self._store.load_config()
            live = await self._store.get_live_prime_core()
            reply = classify_detailed(
                message,
                is_authenticated,
                config,
                live.capabilities if live else None,
                live.version if live else None,
                self._rng,
            )
        except Exception as e:
            logger.error(f"Classifier failed: {e}", exc_info=True)
            apology = get_apology()
            return ChatReply(response=apology, word_count=count_words(apology))

        return ChatReply(
            response=reply.text,
            word_count=count_words(reply.text),
            word_limit_reached=reply.truncated,
        )

    async def apply_config_command(self, command: str) -> ConfigCommandOutcome:
        result = parse_config_command(command)
        if result.updates:
            config = await self._store.save_config(result.updates)
            logger.info(f"Config updated via command: {sorted(result.updates)}")
        else:
            config = await self._store.load_config()
        return ConfigCommandOutcome(message=result.reply, config=config)

    async def get_config(self) -> SystemConfig:
        return await self._store.load_config()

    async def update_config(self, updates: dict) -> SystemConfig:
        return await self._store.save_config(updates)
