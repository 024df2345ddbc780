"""Session title derivation from the first user prompt."""

BACKSPACE = "\b"
UNTITLED = "Untitled Chat"
MAX_TITLE_LENGTH = 50


def collapse_backspaces(text: str) -> str:
    """Apply backspace characters to the text they follow.

    Each backspace removes the character emitted just before it, left to
    right. A backspace with nothing before it is dropped.
    """
    if BACKSPACE not in text:
        return text

    result: list[str] = []
    for ch in text:
        if ch == BACKSPACE:
            if result:
                result.pop()
        else:
            result.append(ch)
    return "".join(result)


def derive_title(text: str) -> str:
    """Build a short title from a user prompt."""
    content = collapse_backspaces(text).strip()
    if not content:
        return UNTITLED

    # Command wrappers such as <command-name>/init</command-name>
    if content.startswith("<"):
        content = next(
            (
                line.strip()
                for line in _lines(content)
                if line.strip() and not line.strip().startswith("<")
            ),
            content,
        )

    first_line = _lines(content)[0]
    if len(first_line) <= MAX_TITLE_LENGTH:
        return first_line
    return first_line[: MAX_TITLE_LENGTH - 3] + "..."


def _lines(text: str) -> list[str]:
    # Only \n ends a line; U+2028 and friends stay inside it
    return [line.rstrip("\r") for line in text.split("\n")]
