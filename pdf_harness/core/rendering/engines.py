"""
Browser Engines
===============

Thin drivers over the two Chromium automation libraries.
Each driver launches a browser, opens and closes single-use surfaces,
loads markup and prints A4 PDFs. Library timeouts surface as LoadTimeout.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional
import asyncio

from playwright.async_api import async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
import pyppeteer
from pyppeteer.errors import TimeoutError as PyppeteerTimeoutError

from pdf_harness.config.logging import get_logger
from pdf_harness.core.errors import LoadTimeout
from pdf_harness.models.schemas import EngineKind

logger = get_logger(__name__)


BROWSER_ARGS: List[str] = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-software-rasterizer",
]

PAGE_FORMAT = "A4"
PAGE_MARGINS: Dict[str, str] = {"top": "20px", "right": "20px", "bottom": "20px", "left": "20px"}

# Resolves once every <img> on the page has finished loading or failed
IMAGES_SETTLED_JS = "() => Array.from(document.images).every(img => img.complete)"

PLAYWRIGHT_CACHE = Path.home() / ".cache" / "ms-playwright"


def find_chromium_executable(override: Optional[str] = None) -> Optional[str]:
    """
    Locate a Chromium binary.

    Args:
        override: Explicit executable path from configuration

    Returns:
        The override, else the newest Chromium in the Playwright browser
        cache, else None to let the engine use its own default
    """
    if override:
        return override

    candidates: List[Path] = []
    for pattern in ("chromium-*/chrome-linux/chrome", "chromium-*/chrome-linux64/chrome"):
        candidates.extend(PLAYWRIGHT_CACHE.glob(pattern))

    for candidate in sorted(candidates, reverse=True):
        if candidate.is_file():
            logger.debug("Found cached Chromium", path=str(candidate))
            return str(candidate)

    return None


class BrowserEngine(ABC):
    """Abstract driver for one browser automation library."""

    kind: EngineKind

    @abstractmethod
    async def launch(self) -> Any:
        """Start a browser process and return its handle."""
        pass

    @abstractmethod
    async def close(self, browser: Any) -> None:
        """Terminate the browser process."""
        pass

    @abstractmethod
    def is_connected(self, browser: Any) -> bool:
        """Whether the browser process is still reachable."""
        pass

    @abstractmethod
    async def new_surface(self, browser: Any) -> Any:
        """Open a fresh isolated page."""
        pass

    @abstractmethod
    async def close_surface(self, surface: Any) -> None:
        """Close a surface returned by new_surface."""
        pass

    @abstractmethod
    async def load_html(self, surface: Any, html: str, timeout_ms: int) -> None:
        """Load markup and wait for network quiescence."""
        pass

    @abstractmethod
    async def goto(self, surface: Any, url: str, timeout_ms: int, settle_ms: int) -> None:
        """Navigate to a URL, wait for network quiescence, then settle."""
        pass

    @abstractmethod
    async def print_pdf(self, surface: Any) -> bytes:
        """Print the loaded document as an A4 PDF."""
        pass


class PlaywrightEngine(BrowserEngine):
    """Playwright Chromium driver. Surfaces are browser contexts with one page."""

    kind = EngineKind.PLAYWRIGHT

    def __init__(self, headless: bool = True, executable_path: Optional[str] = None):
        self.headless = headless
        self.executable_path = executable_path
        self._playwright: Any = None

    async def launch(self) -> Any:
        await self._stop_driver()
        self._playwright = await async_playwright().start()
        launched = False
        try:
            browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=BROWSER_ARGS,
                executable_path=self.executable_path,
            )
            launched = True
            return browser
        finally:
            # Also reached on cancellation by a launch timeout
            if not launched:
                await self._stop_driver()

    async def _stop_driver(self) -> None:
        playwright, self._playwright = self._playwright, None
        if playwright is not None:
            await playwright.stop()

    async def close(self, browser: Any) -> None:
        try:
            await browser.close()
        finally:
            await self._stop_driver()

    def is_connected(self, browser: Any) -> bool:
        return bool(browser.is_connected())

    async def new_surface(self, browser: Any) -> Any:
        context = await browser.new_context()
        try:
            await context.new_page()
        except Exception:
            await context.close()
            raise
        return context

    async def close_surface(self, surface: Any) -> None:
        await surface.close()

    async def load_html(self, surface: Any, html: str, timeout_ms: int) -> None:
        page = surface.pages[0]
        try:
            await page.set_content(html, wait_until="networkidle", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise LoadTimeout(f"Document did not settle within {timeout_ms}ms: {e}")

    async def goto(self, surface: Any, url: str, timeout_ms: int, settle_ms: int) -> None:
        page = surface.pages[0]
        try:
            await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise LoadTimeout(f"Navigation did not settle within {timeout_ms}ms: {e}")
        if settle_ms:
            await page.wait_for_timeout(settle_ms)

    async def print_pdf(self, surface: Any) -> bytes:
        page = surface.pages[0]
        return await page.pdf(format=PAGE_FORMAT, print_background=True, margin=PAGE_MARGINS)


class PyppeteerEngine(BrowserEngine):
    """pyppeteer Chromium driver. Surfaces are pages."""

    kind = EngineKind.PYPPETEER

    def __init__(self, headless: bool = True, executable_path: Optional[str] = None):
        self.headless = headless
        self.executable_path = executable_path

    async def launch(self) -> Any:
        options: Dict[str, Any] = {
            "headless": self.headless,
            "args": BROWSER_ARGS,
            # uvicorn owns signal handling
            "handleSIGINT": False,
            "handleSIGTERM": False,
            "handleSIGHUP": False,
        }
        if self.executable_path:
            options["executablePath"] = self.executable_path
        return await pyppeteer.launch(options)

    async def close(self, browser: Any) -> None:
        await browser.close()

    def is_connected(self, browser: Any) -> bool:
        process = getattr(browser, "process", None)
        return process is None or process.poll() is None

    async def new_surface(self, browser: Any) -> Any:
        return await browser.newPage()

    async def close_surface(self, surface: Any) -> None:
        await surface.close()

    async def load_html(self, surface: Any, html: str, timeout_ms: int) -> None:
        try:
            await surface.setContent(html)
            await surface.waitForFunction(IMAGES_SETTLED_JS, {"timeout": timeout_ms})
        except (PyppeteerTimeoutError, asyncio.TimeoutError) as e:
            raise LoadTimeout(f"Document did not settle within {timeout_ms}ms: {e}")

    async def goto(self, surface: Any, url: str, timeout_ms: int, settle_ms: int) -> None:
        try:
            await surface.goto(url, {"waitUntil": "networkidle0", "timeout": timeout_ms})
        except (PyppeteerTimeoutError, asyncio.TimeoutError) as e:
            raise LoadTimeout(f"Navigation did not settle within {timeout_ms}ms: {e}")
        if settle_ms:
            await asyncio.sleep(settle_ms / 1000)

    async def print_pdf(self, surface: Any) -> bytes:
        return await surface.pdf(
            {"format": PAGE_FORMAT, "printBackground": True, "margin": PAGE_MARGINS}
        )


def create_engine(
    kind: EngineKind, headless: bool = True, executable_path: Optional[str] = None
) -> BrowserEngine:
    """Create the driver for an engine kind."""
    engines = {
        EngineKind.PLAYWRIGHT: PlaywrightEngine,
        EngineKind.PYPPETEER: PyppeteerEngine,
    }
    return engines[kind](headless=headless, executable_path=executable_path)
