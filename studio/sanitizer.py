"""Source cleanup for generated and edited files.

Files copied out of a live-editing preview can carry instrumentation injected
by the React Fast Refresh runtime. These helpers strip it before a project is
pushed to the build server.
"""

import re
from typing import Mapping


HOT_RELOAD_MARKER = "RefreshRuntime"

# First top-level import of React or a destructuring import
_FIRST_IMPORT = re.compile(r"import\s+(React|\{)")

# Registration calls, e.g. `$RefreshReg$(_c, "App");`
_REFRESH_REG = re.compile(r"\$RefreshReg\$\([^)]*\);?")

# Signature declarations and calls, e.g. `var _s = $RefreshSig$();`
_REFRESH_SIG_DECL = re.compile(r"(?:var|let|const)\s+_s\d*\s*=\s*\$RefreshSig\$\(\);?")
_REFRESH_SIG = re.compile(r"\$RefreshSig\$\(\);?")

# Bare `_s();` markers; `has_s()` and `$_s()` are left alone
_SIGNATURE_CALL = re.compile(r"(?<![\w$])_s\(\);?")


def _clean_once(text: str) -> str:
    if HOT_RELOAD_MARKER in text:
        match = _FIRST_IMPORT.search(text)
        if match:
            text = text[match.start():]

    text = _REFRESH_REG.sub("", text)
    text = _REFRESH_SIG_DECL.sub("", text)
    text = _REFRESH_SIG.sub("", text)
    text = _SIGNATURE_CALL.sub("", text)
    return text.strip()


def clean_source(text: str) -> str:
    """Strip hot-reload instrumentation from source text.

    Steps, in order:
    1. If the text mentions the refresh runtime, drop everything before the
       first ``import React`` / ``import {`` statement.
    2. Remove ``$RefreshReg$(...)`` and ``$RefreshSig$()`` calls, including a
       trailing semicolon.
    3. Remove bare ``_s()`` markers.
    4. Trim surrounding whitespace.

    The steps are repeated until the text stops changing, so
    ``clean_source(clean_source(x)) == clean_source(x)`` for every input.
    Each pass that changes the text makes it shorter, so the loop ends.

    Args:
        text: Source text. Empty or non-string values are returned as-is.

    Returns:
        The cleaned text.
    """
    if not text or not isinstance(text, str):
        return text

    cleaned = _clean_once(text)
    while True:
        again = _clean_once(cleaned)
        if again == cleaned:
            return cleaned
        cleaned = again


def clean_files(files: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of ``files`` with every value passed through clean_source.

    Every key is preserved. The input mapping is not modified.
    """
    return {path: clean_source(content) for path, content in files.items()}
