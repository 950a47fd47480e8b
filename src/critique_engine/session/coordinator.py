"""Session orchestration: one coordinator per analysis session.

States::

    idle --notes--> generating --ok--> ready
                               --failure--> error
    ready --notes changed / refresh--> regenerating --ok--> ready
                                                    --failure--> error
    error/idle --refresh--> generating

Tone, simplification and theme display changes keep the session ``ready``.
Only one base generation runs at a time; overlapping triggers wait for it and
collapse into it. A result whose variant key no longer matches what the
session currently wants (different epoch, tone or level) is discarded.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence

from critique_engine.board import BoardReader, BoardWriter
from critique_engine.config import EngineSettings
from critique_engine.errors import GenerationFailure
from critique_engine.llm.backend import GenerationBackend
from critique_engine.models import (
    PointSet,
    SessionSnapshot,
    SessionState,
    SimplificationLevel,
    Theme,
    ThemedGrouping,
    Tone,
    Variant,
    VariantKey,
    VariantStatus,
)
from critique_engine.prompts import build_analysis_prompt, build_simplify_prompt, build_tone_prompt
from critique_engine.session.variant_cache import Generator, VariantCache
from critique_engine.storage import AnalysisLogStore
from critique_engine.synthesis.history import load_synthesized_points
from critique_engine.synthesis.splitter import join_points
from critique_engine.themes import (
    assign_points,
    carry_selection,
    reconcile_grouping,
    select_theme,
    set_theme_selected,
)

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[SessionSnapshot], None]


def _clean_notes(notes: Sequence[str]) -> PointSet:
    return tuple(note.strip() for note in notes if note and note.strip())


def _is_analysis_key(key: VariantKey) -> bool:
    return key.level is SimplificationLevel.FULL and key.tone is Tone.NORMAL


class SynthesisCoordinator:
    """Owns the point set of one session and publishes the active variant.

    Args:
        backend: Generation backend.
        board: Board reader; read once when the first analysis starts and again
            on explicit refresh.
        board_writer: Target of ``publish_to_board``. Defaults to ``board`` when
            it is also a writer.
        log_store: Analysis log; receives every fresh variant and backs the
            synthesized point set.
        settings: Engine settings.
        cache: Variant cache for this session. A new one is created if omitted.
    """

    def __init__(
        self,
        backend: GenerationBackend,
        board: BoardReader | None = None,
        board_writer: BoardWriter | None = None,
        log_store: AnalysisLogStore | None = None,
        settings: EngineSettings | None = None,
        cache: VariantCache | None = None,
    ) -> None:
        self.backend = backend
        self.board = board
        if board_writer is None and isinstance(board, BoardWriter):
            board_writer = board
        self.board_writer = board_writer
        self.log_store = log_store
        self.settings = settings or EngineSettings()
        self.cache = cache if cache is not None else VariantCache(log_store)

        self._state = SessionState.IDLE
        self._requested_notes: PointSet = ()
        self._notes: PointSet = ()
        self._base_text: str | None = None
        self._active: Variant | None = None
        self._tone = Tone.NORMAL
        self._simplification = SimplificationLevel.FULL
        self._changing_tone = False
        self._error: str | None = None

        self._themed_display = False
        self._themes: tuple[Theme, ...] = ()
        self._theme_labels: dict[str, str] = {}
        self._grouping: ThemedGrouping | None = None

        self._design_challenge = ""
        self._consensus_points: PointSet = ()
        self._board_loaded = False

        self._generation_task: asyncio.Task | None = None
        self._generation_notes: PointSet | None = None
        self._generation_id = 0
        self._listeners: list[SnapshotListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def notes(self) -> PointSet:
        """Notes behind the current point set (empty until the first success)."""
        return self._notes

    @property
    def themes(self) -> tuple[Theme, ...]:
        return self._themes

    # ------------------------------------------------------------------
    # Snapshots and listeners
    # ------------------------------------------------------------------

    def snapshot(self) -> SessionSnapshot:
        """Immutable view of the session for a UI consumer."""
        active = self._active
        if self._changing_tone:
            status = VariantStatus.PENDING
        else:
            status = active.status if active else None

        grouping = None
        if self._themed_display and self._themes:
            grouping = self._grouping

        return SessionSnapshot(
            state=self._state,
            active_points=active.points if active else (),
            active_variant_status=status,
            tone=self._tone,
            simplification=self._simplification,
            themed_grouping=grouping,
            changing_tone=self._changing_tone,
            error=self._error,
            epoch=self.cache.epoch,
            themes=self._themes,
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call ``listener`` with a fresh snapshot on every state change.

        Returns:
            Function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.warning(f"Snapshot listener {listener!r} failed: {e}")

    # ------------------------------------------------------------------
    # Base generation
    # ------------------------------------------------------------------

    def _is_generating(self) -> bool:
        return self._generation_task is not None and not self._generation_task.done()

    async def submit_notes(self, notes: Sequence[str]) -> SessionSnapshot:
        """Analyze a new set of design decisions.

        A session already ``ready`` for the same notes is left as is. While a
        generation is outstanding, callers with the same notes share it; callers
        with different notes wait for it and then run one more generation for
        the most recent notes.
        """
        notes = _clean_notes(notes)
        if not notes:
            logger.info("No design decisions to analyze")
            return self.snapshot()

        self._requested_notes = notes
        while self._is_generating():
            joined = self._generation_notes == notes
            await asyncio.shield(self._generation_task)
            if joined or self._requested_notes != notes:
                return self.snapshot()

        if self._state is SessionState.READY and self._notes == notes:
            logger.debug("Notes unchanged; session already ready")
            return self.snapshot()

        await self._run_generation(notes, explicit=False)
        return self.snapshot()

    async def refresh(self) -> SessionSnapshot:
        """Regenerate from scratch, discarding every cached variant.

        A refresh during an outstanding generation collapses into it.
        """
        if self._is_generating():
            logger.debug("Refresh collapsed into the outstanding generation")
            await asyncio.shield(self._generation_task)
            return self.snapshot()

        if not self._requested_notes:
            logger.warning("Refresh requested before any notes arrived; nothing to analyze")
            return self.snapshot()

        await self._run_generation(self._requested_notes, explicit=True)
        return self.snapshot()

    async def _run_generation(self, notes: PointSet, explicit: bool) -> None:
        self._generation_notes = notes
        self._generation_task = asyncio.create_task(self._generate_base(notes, explicit))
        await asyncio.shield(self._generation_task)

    async def _generate_base(self, notes: PointSet, explicit: bool) -> None:
        self._generation_id += 1
        if self._state is SessionState.READY:
            self._state = SessionState.REGENERATING
        else:
            self._state = SessionState.GENERATING
        self._tone = Tone.NORMAL
        self._changing_tone = False
        self._error = None
        self.cache.advance_epoch()
        logger.info(f"Session {self._state.value}: analyzing {len(notes)} design decisions")
        self._notify()

        try:
            await self._load_board_context(force=explicit)
            existing = await self._existing_points()
            user_prompt, system_prompt = build_analysis_prompt(
                notes, self._design_challenge, self._consensus_points, existing
            )
            text = await self._call_backend(user_prompt, system_prompt)

            analysis_key = self.cache.key(SimplificationLevel.FULL, Tone.NORMAL)
            analysis = await self.cache.get_or_create(
                analysis_key, self._generator_for(analysis_key, text), persist=True
            )
            self._base_text = text
            active = await self._resolve_or_fall_back(analysis)
        except GenerationFailure as e:
            self._fail(e)
            return
        except Exception as e:
            logger.exception("Unexpected error during analysis")
            self._fail(GenerationFailure(f"Analysis failed unexpectedly: {e}"))
            return

        self._notes = notes
        self._set_active(active)
        self._state = SessionState.READY
        logger.info(f"Session ready: {len(active.points)} points (epoch {self.cache.epoch})")
        self._notify()

    async def _resolve_or_fall_back(self, analysis: Variant) -> Variant:
        """Resolve the requested variant, or show the analysis if deriving it fails.

        The analysis has already been persisted, so a failed simplification or
        tone rewrite keeps it on display with the error set.
        """
        try:
            return await self._resolve_requested(follow=True)
        except GenerationFailure as e:
            if _is_analysis_key(self._requested_key()):
                raise
            logger.error(f"Variant derivation failed, showing the analysis instead: {e}")
            self._error = str(e)
            self._simplification = SimplificationLevel.FULL
            self._tone = Tone.NORMAL
            return analysis

    def _fail(self, error: GenerationFailure) -> None:
        logger.error(f"Analysis failed: {error}")
        self._state = SessionState.ERROR
        self._error = str(error)
        self._notes = ()
        self._base_text = None
        self._active = None
        self._grouping = None
        self._changing_tone = False
        self.cache.advance_epoch()
        self._notify()

    async def _call_backend(self, user_prompt: str, system_prompt: str) -> str:
        timeout = self.settings.generation_timeout_s
        try:
            if timeout is None:
                return await self.backend.generate(user_prompt, system_prompt)
            return await asyncio.wait_for(
                self.backend.generate(user_prompt, system_prompt), timeout
            )
        except asyncio.TimeoutError as e:
            raise GenerationFailure(f"Generation timed out after {timeout}s") from e
        except GenerationFailure:
            raise
        except Exception as e:
            raise GenerationFailure(f"Generation backend error: {e}") from e

    async def _load_board_context(self, force: bool = False) -> None:
        if self.board is None or (self._board_loaded and not force):
            return
        try:
            challenge = await self.board.get_design_challenge()
            consensus = await self.board.get_consensus_points()
            themes = await self.board.get_current_themes()
        except Exception as e:
            raise GenerationFailure(f"Could not read the board: {e}") from e

        self._design_challenge = challenge or ""
        self._consensus_points = tuple(consensus)
        self._board_loaded = True
        if themes:
            self._apply_themes(themes)

    async def _existing_points(self) -> PointSet:
        if not self.settings.include_existing_points:
            return ()
        return await self.synthesized_points()

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------

    def _requested_key(self) -> VariantKey:
        return self.cache.key(self._simplification, self._tone)

    def _generator_for(self, key: VariantKey, base_text: str) -> Generator:
        """Generator for ``key`` derived from one analysis text.

        The full/normal variant is the analysis itself. Simplified/normal is
        derived from full/normal, and every other tone from the normal variant
        of the same level.
        """
        if _is_analysis_key(key):

            async def analysis() -> str:
                return base_text

            return analysis

        if key.tone is Tone.NORMAL:
            source_key = key.with_level(SimplificationLevel.FULL)
        else:
            source_key = key.with_tone(Tone.NORMAL)

        async def derive() -> str:
            source = await self.cache.get_or_create(
                source_key,
                self._generator_for(source_key, base_text),
                persist=not _is_analysis_key(source_key),
            )
            text = join_points(source.points)
            if key.tone is Tone.NORMAL:
                user_prompt, system_prompt = build_simplify_prompt(text)
            else:
                user_prompt, system_prompt = build_tone_prompt(text, key.tone)
            return await self._call_backend(user_prompt, system_prompt)

        return derive

    async def _resolve_requested(self, follow: bool) -> Variant | None:
        """Get the variant the session currently asks for.

        Args:
            follow: Keep re-requesting until the result matches the current
                request. Otherwise return None once the request is superseded
                by another tone/level change or a new analysis.
        """
        generation_id = self._generation_id
        while True:
            key = self._requested_key()
            variant = await self.cache.get_or_create(
                key,
                self._generator_for(key, self._base_text or ""),
                persist=not _is_analysis_key(key),
            )
            if variant.key == self._requested_key():
                return variant
            if not follow and self._superseded(key, generation_id):
                logger.debug(f"Discarding superseded variant {variant.key}")
                return None
            logger.debug(f"Epoch advanced while resolving {key}; requesting again")

    def _superseded(self, key: VariantKey, generation_id: int) -> bool:
        return (
            generation_id != self._generation_id
            or self._is_generating()
            or self._state is not SessionState.READY
            or (key.level, key.tone) != (self._simplification, self._tone)
        )

    def _set_active(self, variant: Variant) -> None:
        self._active = variant
        if self._themes:
            self._grouping = assign_points(variant.points, self._themes, self._theme_labels)
        else:
            self._grouping = None

    async def _change_variant(self) -> SessionSnapshot:
        if self._state is not SessionState.READY:
            # Picked up when the running analysis resolves its variant
            self._notify()
            return self.snapshot()

        key = self._requested_key()
        cached = self.cache.get(key)
        if cached is not None and cached.is_ready:
            self._set_active(cached)
            self._changing_tone = False
            self._error = None
            self._notify()
            return self.snapshot()

        generation_id = self._generation_id
        self._changing_tone = True
        self._error = None
        self._notify()

        try:
            variant = await self._resolve_requested(follow=False)
        except GenerationFailure as e:
            if self._superseded(key, generation_id):
                logger.debug(f"Ignoring failure of superseded variant {key}: {e}")
                return self.snapshot()
            logger.error(f"Variant {key.level.value}/{key.tone.value} failed: {e}")
            self._error = str(e)
            self._changing_tone = False
            if self._active is not None:
                self._tone = self._active.key.tone
                self._simplification = self._active.key.level
            self._notify()
            return self.snapshot()

        if variant is None:
            return self.snapshot()

        self._set_active(variant)
        self._changing_tone = False
        self._notify()
        return self.snapshot()

    async def set_tone(self, tone: Tone | str | None) -> SessionSnapshot:
        """Switch tone; ``None`` clears the selection back to normal."""
        tone = Tone.NORMAL if tone is None else Tone(tone)
        if tone is self._tone and not self._changing_tone:
            return self.snapshot()
        logger.info(f"Tone -> {tone.value}")
        self._tone = tone
        return await self._change_variant()

    async def set_simplification(self, level: SimplificationLevel | str) -> SessionSnapshot:
        level = SimplificationLevel(level)
        if level is self._simplification and not self._changing_tone:
            return self.snapshot()
        logger.info(f"Simplification -> {level.value}")
        self._simplification = level
        return await self._change_variant()

    async def toggle_simplification(self) -> SessionSnapshot:
        if self._simplification is SimplificationLevel.FULL:
            return await self.set_simplification(SimplificationLevel.SIMPLIFIED)
        return await self.set_simplification(SimplificationLevel.FULL)

    # ------------------------------------------------------------------
    # Themes
    # ------------------------------------------------------------------

    def set_themed_display(self, enabled: bool) -> SessionSnapshot:
        """Show points grouped by theme. Never triggers a generation.

        Without any loaded themes the display stays ungrouped.
        """
        self._themed_display = bool(enabled)
        if self._themed_display and not self._themes:
            logger.info("No themes loaded; showing ungrouped points")
        self._notify()
        return self.snapshot()

    def toggle_themed_display(self) -> SessionSnapshot:
        return self.set_themed_display(not self._themed_display)

    def _apply_themes(
        self,
        themes: Sequence[Theme],
        labels: Mapping[str, str] | None = None,
    ) -> None:
        refreshed = tuple(themes)
        if labels is not None:
            self._theme_labels = dict(labels)

        if self._grouping is not None:
            self._grouping = reconcile_grouping(self._grouping, refreshed)
            self._themes = self._grouping.themes
        else:
            self._themes = carry_selection(self._themes, refreshed)
            if self._active is not None and self._themes:
                self._grouping = assign_points(
                    self._active.points, self._themes, self._theme_labels
                )

    def update_themes(
        self,
        themes: Sequence[Theme],
        labels: Mapping[str, str] | None = None,
    ) -> SessionSnapshot:
        """Install a refreshed theme list.

        Existing groups are re-bound to the refreshed themes by id or name and
        keep their selection. The epoch advances, invalidating cached variants.

        Args:
            themes: Refreshed themes in display order.
            labels: Optional point -> theme name assignments from the theme source.
        """
        self._apply_themes(themes, labels)
        self.cache.advance_epoch()
        logger.info(f"Loaded {len(self._themes)} themes (epoch {self.cache.epoch})")
        self._notify()
        return self.snapshot()

    async def load_themes(self) -> SessionSnapshot:
        """Re-read the theme list from the board."""
        if self.board is None:
            logger.warning("No board configured; cannot load themes")
            return self.snapshot()
        themes = await self.board.get_current_themes()
        return self.update_themes(themes)

    def set_theme_selected(self, name: str, selected: bool) -> SessionSnapshot:
        """Select or deselect a theme. Its points stay in the grouping.

        Raises:
            KeyError: If no loaded theme has that name.
        """
        names = {theme.name.lower() for theme in self._themes}
        if name.lower() not in names:
            raise KeyError(f"Unknown theme: {name}")

        self._themes = select_theme(self._themes, name, selected)
        if self._grouping is not None:
            self._grouping = set_theme_selected(self._grouping, name, selected)
        self._notify()
        return self.snapshot()

    def toggle_theme(self, name: str) -> SessionSnapshot:
        current = next((t for t in self._themes if t.name.lower() == name.lower()), None)
        if current is None:
            raise KeyError(f"Unknown theme: {name}")
        return self.set_theme_selected(name, not current.selected)

    # ------------------------------------------------------------------
    # History and board output
    # ------------------------------------------------------------------

    async def synthesized_points(self) -> PointSet:
        """Deduplicated, capped union of every analysis run in the log."""
        if self.log_store is None:
            return ()
        return await load_synthesized_points(
            self.log_store,
            cap=self.settings.synthesis_cap,
            threshold=self.settings.merge_threshold,
            topic_word_count=self.settings.topic_word_count,
        )

    async def publish_to_board(self) -> int:
        """Send the points on display to the board, one artifact per point.

        With themed display on, only points of selected themes are sent.
        Failures are logged per point.

        Returns:
            Number of artifacts the board acknowledged.
        """
        if self.board_writer is None:
            logger.warning("No board writer configured; nothing sent")
            return 0

        snapshot = self.snapshot()
        if snapshot.themed_grouping is not None:
            points = snapshot.themed_grouping.selected_points
        else:
            points = snapshot.active_points

        sent = 0
        for point in points:
            try:
                if await self.board_writer.create_response_artifact(point):
                    sent += 1
            except Exception as e:
                logger.warning(f"Failed to send point to board: {e}")
        logger.info(f"Sent {sent}/{len(points)} points to the board")
        return sent

    async def drain(self) -> None:
        """Wait for background persistence to finish."""
        await self.cache.drain()
