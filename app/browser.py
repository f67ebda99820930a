import logging
from typing import Sequence

from playwright.async_api import TimeoutError as PWTimeoutError
from playwright.async_api import async_playwright

from app import config

log = logging.getLogger(__name__)

LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]
# Detail containers on listing pages; missing ones are tolerated
READY_SELECTORS = (".imovel-detalhes", ".box-detalhes-imovel, .detalhes-imovel, .informacoes-imovel")
READY_TIMEOUT_MS = 5000


async def render_page(
    url: str,
    *,
    timeout_ms: int | None = None,
    settle_ms: int | None = None,
    user_agent: str | None = None,
    ready_selectors: Sequence[str] = READY_SELECTORS,
) -> str:
    """Load ``url`` in headless Chromium and return the rendered HTML.

    Navigation errors (timeouts, crashes) propagate. The browser is always
    closed before returning.
    """
    timeout_ms = config.NAV_TIMEOUT_MS if timeout_ms is None else timeout_ms
    settle_ms = config.SETTLE_DELAY_MS if settle_ms is None else settle_ms

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True, args=LAUNCH_ARGS)
        try:
            context = await browser.new_context(user_agent=user_agent or config.USER_AGENT)
            page = await context.new_page()
            log.info("Loading %s", url)
            await page.goto(url, wait_until="networkidle", timeout=timeout_ms)

            for sel in ready_selectors:
                try:
                    await page.wait_for_selector(sel, timeout=READY_TIMEOUT_MS)
                    break
                except PWTimeoutError:
                    log.debug("Selector %r not found, continuing", sel)

            # let late scripts finish mutating the DOM
            await page.wait_for_timeout(settle_ms)
            return await page.content()
        finally:
            await browser.close()
