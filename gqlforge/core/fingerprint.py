"""Embedded-fingerprint change detection.

Every generated artifact embeds the verbatim source text it was compiled from
as a JSON string literal. If an existing artifact already contains the literal
for the current source text, regeneration can be skipped without running the
compiler. Matching is exact substring containment, never a hash.
"""

from __future__ import annotations

import json


def serialize_source(source_text: str) -> str:
    """Serialize source text the way the compiler embeds it.

    Non-ASCII characters are kept verbatim; quotes, backslashes and control
    characters are escaped.
    """
    return json.dumps(source_text, ensure_ascii=False)


def needs_regeneration(source_text: str, existing_output: str) -> bool:
    """True unless *existing_output* already embeds *source_text*."""
    if not existing_output:
        return True
    return serialize_source(source_text) not in existing_output
