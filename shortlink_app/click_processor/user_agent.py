from typing import NamedTuple, Optional

from user_agents import parse

from shortlink_app.storage.strategies import UNKNOWN


class ClientInfo(NamedTuple):
    browser: str
    os: str
    device: str


def parse_user_agent(raw: Optional[str]) -> ClientInfo:
    """
    Derive (browser, os, device) from a raw User-Agent header.

    Empty input gives Unknown for all three. Device is "Bot" for crawlers,
    otherwise "Mobile" for phones/tablets, otherwise "Desktop".
    """
    if not raw or not raw.strip():
        return ClientInfo(UNKNOWN, UNKNOWN, UNKNOWN)

    ua = parse(raw)
    if ua.is_bot:
        device = "Bot"
    elif ua.is_mobile or ua.is_tablet:
        device = "Mobile"
    else:
        device = "Desktop"

    return ClientInfo(
        browser=ua.browser.family or UNKNOWN,
        os=ua.os.family or UNKNOWN,
        device=device,
    )
