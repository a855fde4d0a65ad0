"""
Session Manager

Logs in to the carrier dashboard with a real browser and hands back an
authenticated Session: the browser (parked on the live calls page) plus
the cookies needed for out-of-band recording downloads.

Login walks through INIT -> LAUNCHING -> FORM_DETECTION -> AUTHENTICATING
-> VERIFYING -> AUTHENTICATED. Any failure tears the browser down before
the next attempt.
"""

import asyncio
import time
import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from urllib.parse import urlparse

from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import WebDriverWait
from selenium.common.exceptions import TimeoutException

from monitoring.browser import BrowserHandle, get_driver, quit_driver
from monitoring.errors import FormDetectionError, SubmitError, VerificationError

logger = logging.getLogger(__name__)

SUBMIT_SELECTOR = "button[type=submit], input[type=submit]"
SIGN_IN_XPATH = "//button[contains(., 'Sign In')]"


class LoginState(Enum):
    INIT = "init"
    LAUNCHING = "launching"
    FORM_DETECTION = "form_detection"
    AUTHENTICATING = "authenticating"
    VERIFYING = "verifying"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


@dataclass
class Session:
    browser: BrowserHandle
    cookies: list = field(default_factory=list)

    def cookie_header(self):
        """Render the captured cookies as a Cookie header value."""
        return "; ".join(f"{c['name']}={c['value']}" for c in self.cookies)


def _is_email_field(attrs):
    if attrs["type"] == "email":
        return True
    return any(
        attrs[key] and "email" in attrs[key].lower()
        for key in ("placeholder", "name", "id")
    )


def find_login_fields(driver):
    """
    Find the email and password inputs on the login page.

    Returns:
        tuple: (email_field, password_field)

    Raises:
        FormDetectionError: If either field is missing
    """
    email_field = None
    password_field = None

    for element in driver.find_elements(By.TAG_NAME, "input"):
        attrs = {
            key: element.get_attribute(key)
            for key in ("type", "placeholder", "name", "id")
        }
        if email_field is None and _is_email_field(attrs):
            email_field = element
        if password_field is None and attrs["type"] == "password":
            password_field = element

    if email_field is None or password_field is None:
        raise FormDetectionError("Could not detect email or password field")
    return email_field, password_field


def find_submit_button(driver):
    """
    Find the login submit control.

    Raises:
        SubmitError: If neither a submit control nor a Sign In button exists
    """
    buttons = driver.find_elements(By.CSS_SELECTOR, SUBMIT_SELECTOR)
    if buttons:
        return buttons[0]
    buttons = driver.find_elements(By.XPATH, SIGN_IN_XPATH)
    if buttons:
        return buttons[0]
    raise SubmitError("Sign In button not found")


def host_matches(url, target_host):
    """True if url is on target_host or one of its subdomains."""
    host = (urlparse(url).hostname or "").lower()
    target = target_host.lower()
    if target.startswith("www."):
        target = target[4:]
    return host == target or host.endswith("." + target)


class SessionManager:
    """Establishes the authenticated dashboard session."""

    def __init__(
        self,
        settings,
        driver_factory=None,
        form_wait_seconds=5,
        typing_delay=0.1,
        navigation_timeout=30,
        sleep=time.sleep,
    ):
        self.settings = settings
        self.driver_factory = driver_factory or partial(get_driver, headless=settings.headless)
        self.form_wait_seconds = form_wait_seconds
        self.typing_delay = typing_delay
        self.navigation_timeout = navigation_timeout
        self._sleep = sleep
        self.last_state = LoginState.INIT
        self.attempts = 0

    def _set_state(self, state):
        self.last_state = state
        logger.debug(f"Login state -> {state.value}")

    def _type_slowly(self, element, text):
        for char in text:
            element.send_keys(char)
            if self.typing_delay:
                self._sleep(self.typing_delay)

    def _wait_for_navigation(self, driver, old_url):
        try:
            WebDriverWait(driver, self.navigation_timeout).until(
                lambda d: d.current_url != old_url
                and d.execute_script("return document.readyState") == "complete"
            )
        except TimeoutException:
            logger.info("No navigation detected after submit, checking page anyway")

    def _login(self, driver):
        """Run one login attempt on an already-launched driver."""
        logger.info("🌐 Opening login page...")
        driver.get(self.settings.login_url)

        if self.form_wait_seconds:
            logger.info(f"⏳ Waiting {self.form_wait_seconds} sec before scanning form...")
            self._sleep(self.form_wait_seconds)

        self._set_state(LoginState.FORM_DETECTION)
        email_field, password_field = find_login_fields(driver)
        logger.info("✅ Email & Password fields detected, filling in credentials")

        self._set_state(LoginState.AUTHENTICATING)
        self._type_slowly(email_field, self.settings.username)
        self._type_slowly(password_field, self.settings.password)

        submit = find_submit_button(driver)
        old_url = driver.current_url
        logger.info("👉 Clicking Sign In button...")
        submit.click()
        self._wait_for_navigation(driver, old_url)

        self._set_state(LoginState.VERIFYING)
        target_host = urlparse(self.settings.base_url).hostname or ""
        current_url = driver.current_url
        if not host_matches(current_url, target_host):
            raise VerificationError(f"Left the dashboard host after login: {current_url}")
        page_source = driver.page_source or ""
        if not any(marker in page_source for marker in self.settings.auth_markers):
            raise VerificationError("Login failed or dashboard not detected")

        logger.info("🎉 Login successful! Dashboard detected.")
        driver.get(self.settings.live_calls_url)
        return driver.get_cookies()

    def _attempt(self):
        self._set_state(LoginState.LAUNCHING)
        driver = self.driver_factory()
        try:
            cookies = self._login(driver)
        except BaseException:
            quit_driver(driver)
            raise
        return driver, cookies

    async def acquire(self, max_attempts=None):
        """
        Log in, retrying up to max_attempts times.

        Args:
            max_attempts (int, optional): Defaults to settings.max_login_attempts

        Returns:
            Session: Authenticated session, or None if every attempt failed
        """
        if max_attempts is None:
            max_attempts = self.settings.max_login_attempts

        self.attempts = 0
        for attempt in range(1, max_attempts + 1):
            self.attempts = attempt
            self._set_state(LoginState.INIT)
            try:
                driver, cookies = await asyncio.to_thread(self._attempt)
            except Exception as e:
                logger.error(f"❌ Login attempt {attempt}/{max_attempts} failed: {e}")
                if attempt < max_attempts:
                    logger.info("🔄 Retrying login...")
                continue

            self._set_state(LoginState.AUTHENTICATED)
            logger.info(f"Captured {len(cookies)} session cookies")
            return Session(browser=BrowserHandle(driver), cookies=cookies)

        self._set_state(LoginState.FAILED)
        logger.error(f"🔴 Could not login after {max_attempts} attempts")
        return None
