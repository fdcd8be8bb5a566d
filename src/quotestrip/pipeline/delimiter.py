"""Line delimiter detection."""

import re

_DELIMITER_PATTERN = re.compile(r"\r?\n")


def find_delimiter(body: str) -> str:
    """Return the line delimiter used by a message body.

    The first line break found decides; a body without line breaks
    defaults to LF.

    Args:
        body: Message body.

    Returns:
        "\\r\\n" or "\\n".
    """
    match = _DELIMITER_PATTERN.search(body)
    return match.group() if match else "\n"
