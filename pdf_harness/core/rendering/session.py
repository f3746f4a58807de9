"""
Renderer Session Manager
========================

Owns at most one live browser per engine and hands out single-use
rendering contexts from a bounded pool.

Lifecycle: UNINITIALIZED -> LIVE on the first successful acquire,
LIVE -> SHUTTING_DOWN -> UNINITIALIZED on shutdown. A LIVE session whose
browser has died is demoted and relaunched on the next acquire.
"""

from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncGenerator, Optional
import asyncio

from pdf_harness.config.logging import get_logger
from pdf_harness.config.settings import Settings
from pdf_harness.core.errors import (
    ContextCreationFailure,
    EngineStartFailure,
    LoadTimeout,
    RendererBusy,
)
from pdf_harness.core.rendering.engines import BrowserEngine
from pdf_harness.models.schemas import SessionHealth

logger = get_logger(__name__)

HEALTH_PROBE_HTML = "<!DOCTYPE html><html><body><p>health check</p></body></html>"


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LIVE = "live"
    SHUTTING_DOWN = "shutting_down"


class RendererSession:
    """One live connection to an engine process."""

    def __init__(self, engine: BrowserEngine, handle: Any, generation: int):
        self.engine = engine
        self.handle = handle
        self.generation = generation

    @property
    def is_live(self) -> bool:
        return self.engine.is_connected(self.handle)


class RenderingContext:
    """Single-use page borrowed from a live session for one request."""

    def __init__(self, manager: "RendererSessionManager", session: RendererSession, surface: Any):
        self.manager = manager
        self.session = session
        self.surface = surface
        self.closed = False

    async def load_html(self, html: str) -> None:
        await self.manager.engine.load_html(self.surface, html, self.manager.load_timeout_ms)

    async def goto(self, url: str) -> None:
        await self.manager.engine.goto(
            self.surface, url, self.manager.load_timeout_ms, self.manager.settle_delay_ms
        )

    async def print_pdf(self) -> bytes:
        try:
            return await asyncio.wait_for(
                self.manager.engine.print_pdf(self.surface), timeout=self.manager.render_timeout
            )
        except asyncio.TimeoutError:
            raise LoadTimeout(
                f"PDF extraction did not finish within {self.manager.render_timeout}s"
            )


class RendererSessionManager:
    """Lazily launched, shared browser session for one engine."""

    def __init__(
        self,
        engine: BrowserEngine,
        max_concurrent_contexts: int = 4,
        context_acquire_timeout: float = 10.0,
        launch_timeout: float = 60.0,
        load_timeout_ms: int = 30000,
        render_timeout: float = 60.0,
        settle_delay_ms: int = 1000,
    ):
        self.engine = engine
        self.max_concurrent_contexts = max_concurrent_contexts
        self.context_acquire_timeout = context_acquire_timeout
        self.launch_timeout = launch_timeout
        self.load_timeout_ms = load_timeout_ms
        self.render_timeout = render_timeout
        self.settle_delay_ms = settle_delay_ms

        self.state = SessionState.UNINITIALIZED
        self.launch_count = 0
        self.contexts_opened = 0
        self.contexts_closed = 0

        self._session: Optional[RendererSession] = None
        self._lock = asyncio.Lock()
        self._slots = asyncio.Semaphore(max_concurrent_contexts)
        self.logger: Any = logger.bind(component="session_manager", engine=engine.kind.value)

    @classmethod
    def from_settings(cls, engine: BrowserEngine, settings: Settings) -> "RendererSessionManager":
        return cls(
            engine,
            max_concurrent_contexts=settings.max_concurrent_contexts,
            context_acquire_timeout=settings.context_acquire_timeout,
            launch_timeout=settings.engine_launch_timeout,
            load_timeout_ms=settings.load_timeout_ms,
            render_timeout=settings.render_timeout,
            settle_delay_ms=settings.settle_delay_ms,
        )

    @property
    def active_contexts(self) -> int:
        return self.contexts_opened - self.contexts_closed

    async def acquire_session(self) -> RendererSession:
        """
        Return the live session, launching the engine if needed.

        Raises:
            EngineStartFailure: If the engine cannot be launched
        """
        async with self._lock:
            if self._session is not None:
                if self._session.is_live:
                    return self._session
                dead, self._session = self._session, None
                self.state = SessionState.UNINITIALIZED
                self.logger.warning(
                    "Browser connection lost, relaunching", generation=dead.generation
                )
                try:
                    await asyncio.wait_for(
                        self.engine.close(dead.handle), timeout=self.launch_timeout
                    )
                except Exception as e:
                    self.logger.warning("Dead browser cleanup failed", error=str(e))

            self.logger.info("Launching browser")
            try:
                handle = await asyncio.wait_for(self.engine.launch(), timeout=self.launch_timeout)
            except asyncio.TimeoutError:
                self.logger.error("Browser launch timed out", timeout=self.launch_timeout)
                raise EngineStartFailure(
                    f"{self.engine.kind.value} did not start within {self.launch_timeout}s"
                )
            except Exception as e:
                self.logger.error("Browser launch failed", error=str(e))
                raise EngineStartFailure(f"Failed to launch {self.engine.kind.value}: {e}") from e

            self.launch_count += 1
            self._session = RendererSession(self.engine, handle, self.launch_count)
            self.state = SessionState.LIVE
            self.logger.info("Browser launched", generation=self.launch_count)
            return self._session

    async def open_context(self, session: RendererSession) -> RenderingContext:
        """
        Open a fresh rendering context on a live session.

        Raises:
            ContextCreationFailure: If the session is not live or refuses a page
        """
        if self.state is not SessionState.LIVE or session is not self._session:
            raise ContextCreationFailure(
                f"{self.engine.kind.value} session is {self.state.value}, not live"
            )
        if not session.is_live:
            raise ContextCreationFailure(f"{self.engine.kind.value} browser is disconnected")

        try:
            surface = await self.engine.new_surface(session.handle)
        except Exception as e:
            raise ContextCreationFailure(f"Failed to open rendering context: {e}") from e

        self.contexts_opened += 1
        self.logger.debug("Context opened", active_contexts=self.active_contexts)
        return RenderingContext(self, session, surface)

    async def close_context(self, context: Optional[RenderingContext]) -> None:
        """Release a rendering context. Safe to call more than once."""
        if context is None or context.closed:
            return

        context.closed = True
        self.contexts_closed += 1
        try:
            await asyncio.wait_for(
                self.engine.close_surface(context.surface), timeout=self.render_timeout
            )
        except asyncio.TimeoutError:
            self.logger.warning("Context close timed out", timeout=self.render_timeout)
        except Exception as e:
            # The browser may already be gone; the surface is released either way
            self.logger.warning("Context close failed", error=str(e))
        self.logger.debug("Context closed", active_contexts=self.active_contexts)

    @asynccontextmanager
    async def rendering_context(self) -> AsyncGenerator[RenderingContext, None]:
        """
        Borrow a context for the duration of the block.

        Raises:
            RendererBusy: If no slot frees up within the acquire timeout
        """
        try:
            await asyncio.wait_for(self._slots.acquire(), timeout=self.context_acquire_timeout)
        except asyncio.TimeoutError:
            self.logger.warning(
                "Rendering context pool exhausted",
                max_concurrent_contexts=self.max_concurrent_contexts,
            )
            raise RendererBusy(
                f"All {self.max_concurrent_contexts} {self.engine.kind.value} contexts stayed busy "
                f"for {self.context_acquire_timeout}s"
            )

        context: Optional[RenderingContext] = None
        try:
            session = await self.acquire_session()
            context = await self.open_context(session)
            yield context
        finally:
            await self.close_context(context)
            self._slots.release()

    async def shutdown(self) -> None:
        """Tear down the live session. No-op when nothing is running."""
        async with self._lock:
            if self._session is None:
                return

            self.state = SessionState.SHUTTING_DOWN
            self.logger.info("Shutting down browser", generation=self._session.generation)
            try:
                await self.engine.close(self._session.handle)
            except Exception as e:
                self.logger.warning("Browser close failed", error=str(e))
            finally:
                self._session = None
                self.state = SessionState.UNINITIALIZED

    async def health_check(self) -> SessionHealth:
        """Render a trivial document end to end. Never shuts the session down."""
        healthy = False
        try:
            async with self.rendering_context() as context:
                await context.load_html(HEALTH_PROBE_HTML)
                pdf_bytes = await context.print_pdf()
            healthy = pdf_bytes.startswith(b"%PDF")
            detail = (
                f"Rendered {len(pdf_bytes)} byte probe document"
                if healthy
                else "Probe output is not a PDF"
            )
        except Exception as e:
            detail = f"{type(e).__name__}: {e}"

        if not healthy:
            self.logger.warning("Health check failed", detail=detail)

        return SessionHealth(
            engine=self.engine.kind.value,
            healthy=healthy,
            detail=detail,
            state=self.state.value,
            launch_count=self.launch_count,
            active_contexts=self.active_contexts,
        )
