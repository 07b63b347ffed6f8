"""
Tests for user-agent parsing into (browser, os, device).
"""
import pytest

from shortlink_app.click_processor.user_agent import parse_user_agent

CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
SAFARI_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
GOOGLEBOT = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"
GOOGLEBOT_SMARTPHONE = (
    "Mozilla/5.0 (Linux; Android 6.0.1; Nexus 5X Build/MMB29P) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/41.0.2272.96 Mobile Safari/537.36 "
    "(compatible; Googlebot/2.1; +http://www.google.com/bot.html)"
)


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_empty_is_unknown(raw):
    assert parse_user_agent(raw) == ("Unknown", "Unknown", "Unknown")


def test_desktop_browser():
    info = parse_user_agent(CHROME_WINDOWS)

    assert info.browser == "Chrome"
    assert info.os == "Windows"
    assert info.device == "Desktop"


def test_mobile_browser():
    info = parse_user_agent(SAFARI_IPHONE)

    assert info.os == "iOS"
    assert info.device == "Mobile"


def test_bot():
    assert parse_user_agent(GOOGLEBOT).device == "Bot"


def test_bot_wins_over_mobile():
    assert parse_user_agent(GOOGLEBOT_SMARTPHONE).device == "Bot"


def test_never_empty_names():
    info = parse_user_agent("curl/8.4.0")

    assert info.browser == "curl"
    assert info.os
    assert info.device == "Desktop"
