"""Image export of the rendered timetable using headless Chromium.

The grid HTML is loaded with page.set_content(), the viewport is forced to a
fixed width so the columns do not wrap, and after a short settling delay the
grid element is captured. Capture is not synchronised with layout beyond
that delay.
"""

from pathlib import Path

from playwright.async_api import Page, Route, async_playwright

from src.timetable.config import TimetableConfig, get_config
from src.timetable.logging import get_logger
from src.timetable.models import TimetableGrid
from src.timetable.render import GRID_SELECTOR, render_html

log = get_logger(__name__)

# CLI format -> Playwright screenshot type
IMAGE_TYPES: dict[str, str] = {
    "png": "png",
    "jpg": "jpeg",
    "jpeg": "jpeg",
}


def export_filename(fmt: str) -> str:
    """File name for an export, e.g. "timetable.png".

    Raises:
        ValueError: If the format is not png, jpg or jpeg.
    """
    fmt = fmt.lower()
    if fmt not in IMAGE_TYPES:
        raise ValueError(f"Unknown image format {fmt!r}. Valid: {list(IMAGE_TYPES)}")
    return f"timetable.{fmt}"


async def block_network(page: Page) -> None:
    """Abort every request leaving the page; the document is self-contained."""

    async def _block(route: Route) -> None:
        url = route.request.url
        if url.startswith(("data:", "about:")):
            await route.continue_()
            return
        log.debug("export_request_blocked", url=url)
        await route.abort("blockedbyclient")

    await page.route("**/*", _block)


async def export_image(
    grid: TimetableGrid,
    fmt: str = "png",
    output_dir: str | None = None,
    config: TimetableConfig | None = None,
) -> Path:
    """Rasterise the grid to output_dir/timetable.<fmt>.

    Args:
        grid: Laid-out timetable to render.
        fmt: "png", "jpg" or "jpeg".
        output_dir: Target directory (default: config.export_dir).
        config: Configuration (default: the singleton).

    Returns:
        Path of the written image.

    Raises:
        ValueError: If the format is unknown.
    """
    config = config or get_config()
    filename = export_filename(fmt)
    image_type = IMAGE_TYPES[fmt.lower()]

    target_dir = Path(output_dir or config.export_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / filename

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True)
        try:
            context = await browser.new_context(
                viewport={"width": config.export_width, "height": 800},
                device_scale_factor=config.export_scale,
            )
            page = await context.new_page()
            await block_network(page)
            await page.set_content(render_html(grid), wait_until="load")
            await page.wait_for_timeout(config.export_settle_ms)

            await page.locator(GRID_SELECTOR).screenshot(
                path=str(path), type=image_type
            )
        finally:
            await browser.close()

    log.info("timetable_exported", path=str(path), format=image_type)
    return path
