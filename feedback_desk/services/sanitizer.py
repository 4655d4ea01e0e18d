import re

import nh3

# Scheme prefixes that turn text into script once it lands in an href.
_SCRIPT_SCHEME_RE = re.compile(r"(?i)(?:java|vb)script\s*:")


def sanitize(value) -> str:
    """
    Strip every tag (script/style content included) and scriptable URI
    schemes, keeping the visible text. Output is HTML-escaped text, so
    running it through again returns it unchanged.
    """
    if value is None:
        return ""
    text = nh3.clean(str(value), tags=set(), clean_content_tags={"script", "style"})
    # Loop to a fixed point: removing one prefix may splice another together.
    while True:
        stripped = _SCRIPT_SCHEME_RE.sub("", text)
        if stripped == text:
            break
        text = stripped
    return text.strip()
