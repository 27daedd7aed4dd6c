"""Behave environment hooks for the offers admin page.

Starts a headless Chrome/Chromium before the features run and quits it
afterwards. The page under test is taken from, in order:
  1) env:      BASE_URL
  2) behave:   -D BASE_URL=...
  3) default:  http://localhost:8080

The service behind BASE_URL must have OFFERS_SERVICE_URL pointing at a
running Offers Service (usually itself).
"""

from __future__ import annotations

import os
import shutil
from typing import Optional

from selenium import webdriver
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service as ChromeService

WAIT_SECONDS = int(os.getenv("WAIT_SECONDS", "10"))


def _find_executable(env_var: str, candidates: tuple, names: tuple) -> Optional[str]:
    """Return the first existing path from env, known locations, or PATH."""
    env_path = os.getenv(env_var)
    if env_path and os.path.exists(env_path):
        return env_path
    for cand in candidates:
        if os.path.exists(cand):
            return cand
    for name in names:
        path = shutil.which(name)
        if path:
            return path
    return None


def before_all(context):
    """Start a headless browser and remember the base URL."""
    context.base_url = (
        os.getenv("BASE_URL")
        or context.config.userdata.get("BASE_URL")
        or "http://localhost:8080"
    ).rstrip("/")
    context.wait_seconds = WAIT_SECONDS

    options = ChromeOptions()
    options.add_argument("--headless=new")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")

    chrome_bin = _find_executable(
        "CHROME_BIN",
        ("/usr/bin/chromium", "/usr/bin/chromium-browser", "/usr/bin/google-chrome"),
        ("chromium", "chromium-browser", "google-chrome", "chrome"),
    )
    if chrome_bin:
        options.binary_location = chrome_bin

    driver_path = _find_executable(
        "CHROMEDRIVER",
        ("/usr/bin/chromedriver", "/usr/lib/chromium/chromedriver"),
        ("chromedriver",),
    )
    try:
        if driver_path:
            context.browser = webdriver.Chrome(service=ChromeService(executable_path=driver_path), options=options)
        else:
            # Selenium Manager resolves a matching driver
            context.browser = webdriver.Chrome(options=options)
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "Cannot start Chrome/Chromium in headless mode. Install chromium and "
            "chromium-driver, or set CHROME_BIN / CHROMEDRIVER. "
            f"Original error: {type(exc).__name__}: {exc}"
        ) from exc
    context.browser.set_window_size(1400, 1000)
    context.browser.implicitly_wait(context.wait_seconds)


def after_all(context):
    """Shut down the browser if it was started."""
    browser = getattr(context, "browser", None)
    if browser:
        browser.quit()
