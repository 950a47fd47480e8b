"""Per-session cache of generated variants.

A variant is one rendering of the current point set at a simplification level
and tone. Entries are keyed by ``VariantKey`` (level x tone x epoch):

- at most one generation runs per key; concurrent requests await the same task;
- advancing the epoch drops every entry in one synchronous step, and results of
  generations started under an older epoch are returned to their caller but
  never stored or persisted;
- a failed entry is replaced by a fresh generation on the next request;
- every fresh, current-epoch success is persisted to the analysis log in the
  background; persistence errors are logged and never reach the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from critique_engine.errors import GenerationFailure
from critique_engine.models import SimplificationLevel, Tone, Variant, VariantKey, VariantStatus
from critique_engine.storage import AnalysisLogStore
from critique_engine.synthesis.splitter import split_points

logger = logging.getLogger(__name__)

Generator = Callable[[], Awaitable[str]]


class VariantCache:
    """Keyed store of variants with single-flight generation.

    Args:
        log_store: Optional analysis log that receives every fresh variant.
        epoch: Initial grouping epoch.
    """

    def __init__(self, log_store: AnalysisLogStore | None = None, epoch: int = 0) -> None:
        self.log_store = log_store
        self._epoch = epoch
        self._entries: dict[VariantKey, Variant] = {}
        self._inflight: dict[VariantKey, asyncio.Task[Variant]] = {}
        self._background: set[asyncio.Task] = set()
        self.generation_count = 0

    @property
    def epoch(self) -> int:
        return self._epoch

    def key(self, level: SimplificationLevel, tone: Tone) -> VariantKey:
        """Key for ``(level, tone)`` at the current epoch."""
        return VariantKey(level=SimplificationLevel(level), tone=Tone(tone), epoch=self._epoch)

    def is_current(self, key: VariantKey) -> bool:
        return key.epoch == self._epoch

    def advance_epoch(self) -> int:
        """Invalidate every entry. Generations still running finish but are not stored."""
        self._epoch += 1
        self._entries.clear()
        self._inflight.clear()
        logger.debug(f"Variant cache advanced to epoch {self._epoch}")
        return self._epoch

    def get(self, key: VariantKey) -> Variant | None:
        """Snapshot of the entry for ``key``, if any (pending, ready or failed)."""
        if not self.is_current(key):
            return None
        return self._entries.get(key)

    def variants(self) -> tuple[Variant, ...]:
        """Snapshots of all current-epoch entries."""
        return tuple(self._entries.values())

    def is_pending(self, key: VariantKey) -> bool:
        task = self._inflight.get(key)
        return task is not None and not task.done()

    async def get_or_create(
        self,
        key: VariantKey,
        generator: Generator,
        persist: bool = True,
    ) -> Variant:
        """Return the ready variant for ``key``, generating it if needed.

        Args:
            key: Variant identity.
            generator: Coroutine function producing the raw text. Only called
                when no ready entry or in-flight generation exists.
            persist: Whether a fresh success goes to the analysis log.

        Returns:
            Ready variant.

        Raises:
            GenerationFailure: If the generation failed or produced no points.
            ValueError: If ``key`` belongs to a future epoch.
        """
        if key.epoch > self._epoch:
            raise ValueError(f"Key epoch {key.epoch} is ahead of cache epoch {self._epoch}")

        if self.is_current(key):
            entry = self._entries.get(key)
            task = self._inflight.get(key)
            if entry is not None and entry.is_ready:
                logger.debug(f"Variant cache hit: {key}")
                return entry
            if task is None or task.done():
                task = asyncio.create_task(self._generate(key, generator, persist))
                self._inflight[key] = task
                self._entries[key] = Variant(key=key)
            else:
                logger.debug(f"Joining in-flight generation: {key}")
        else:
            logger.debug(f"Stale key {key} (epoch {self._epoch}); regenerating without caching")
            task = asyncio.create_task(self._generate(key, generator, persist))

        variant = await asyncio.shield(task)
        if variant.status is VariantStatus.FAILED:
            raise GenerationFailure(variant.error or "Generation failed", key=key)
        return variant

    async def _generate(self, key: VariantKey, generator: Generator, persist: bool) -> Variant:
        self.generation_count += 1
        logger.info(f"Generating variant {key.level.value}/{key.tone.value} (epoch {key.epoch})")
        try:
            text = await generator()
        except GenerationFailure as e:
            return self._settle(key, Variant(key=key, status=VariantStatus.FAILED, error=str(e)))
        except Exception as e:
            logger.exception(f"Unexpected generator error for {key}")
            return self._settle(
                key,
                Variant(key=key, status=VariantStatus.FAILED, error=f"{type(e).__name__}: {e}"),
            )

        points = split_points(text)
        if not points:
            return self._settle(
                key,
                Variant(
                    key=key,
                    text=text or "",
                    status=VariantStatus.FAILED,
                    error="Generation returned no critique points",
                ),
            )

        variant = self._settle(
            key, Variant(key=key, text=text, points=points, status=VariantStatus.READY)
        )
        if persist and self._owns(key, variant):
            self._persist_in_background(variant)
        return variant

    def _owns(self, key: VariantKey, variant: Variant) -> bool:
        return self.is_current(key) and self._entries.get(key) is variant

    def _settle(self, key: VariantKey, variant: Variant) -> Variant:
        """Store the outcome if this task is still the current generation for ``key``."""
        if variant.status is VariantStatus.FAILED:
            logger.error(f"Variant {key.level.value}/{key.tone.value} failed: {variant.error}")

        if self.is_current(key) and self._inflight.get(key) is asyncio.current_task():
            del self._inflight[key]
            self._entries[key] = variant
        else:
            logger.debug(f"Discarding stale result for {key} (current epoch {self._epoch})")
        return variant

    def _persist_in_background(self, variant: Variant) -> None:
        if self.log_store is None:
            return
        task = asyncio.create_task(self._persist(variant))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _persist(self, variant: Variant) -> None:
        try:
            await self.log_store.persist(variant.points, variant.key.tone, variant.key.level)
        except Exception as e:
            logger.warning(f"Failed to persist variant {variant.key}: {e}")

    async def drain(self) -> None:
        """Wait for pending background persistence."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
