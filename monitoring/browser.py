"""
Browser Handle

Chrome driver setup and a single-owner wrapper that serializes access to
the shared page. The monitor reads the page source while a keep-alive
task reloads it; both go through the same lock so they never overlap.
"""

import asyncio
import logging

from selenium import webdriver
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.chrome.options import Options
from webdriver_manager.chrome import ChromeDriverManager

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36"
)
PAGE_LOAD_TIMEOUT = 60


def get_driver(headless=False):
    """
    Get a configured Chrome driver.
    """
    chrome_options = Options()

    if headless:
        chrome_options.add_argument("--headless=new")

    # Critical flags for Docker environment
    chrome_options.add_argument("--no-sandbox")
    chrome_options.add_argument("--disable-setuid-sandbox")
    chrome_options.add_argument("--disable-dev-shm-usage")
    chrome_options.add_argument("--window-size=1920,1080")

    chrome_options.add_argument(f"--user-agent={USER_AGENT}")
    chrome_options.add_argument("--disable-blink-features=AutomationControlled")
    chrome_options.add_experimental_option("excludeSwitches", ["enable-automation"])
    chrome_options.add_experimental_option("useAutomationExtension", False)

    driver = webdriver.Chrome(
        service=Service(ChromeDriverManager().install()), options=chrome_options
    )
    driver.set_page_load_timeout(PAGE_LOAD_TIMEOUT)

    # Hide webdriver property
    driver.execute_script(
        "Object.defineProperty(navigator, 'webdriver', {get: () => undefined})"
    )

    return driver


def quit_driver(driver):
    """Quit a driver, logging (not raising) if the browser is already gone."""
    if driver is None:
        return
    try:
        driver.quit()
    except Exception as e:
        logger.warning(f"Error while closing browser: {e}")


class BrowserHandle:
    """Serialized async access to one Selenium driver."""

    def __init__(self, driver):
        self._driver = driver
        self._lock = asyncio.Lock()
        self._closed = False

    @property
    def closed(self):
        return self._closed

    async def snapshot(self):
        """Return the current page source."""
        async with self._lock:
            return await asyncio.to_thread(lambda: self._driver.page_source)

    async def refresh(self):
        """Reload the current page."""
        async with self._lock:
            await asyncio.to_thread(self._driver.refresh)

    async def close(self):
        async with self._lock:
            if self._closed:
                return
            self._closed = True
            await asyncio.to_thread(quit_driver, self._driver)
            logger.info("Browser closed")
