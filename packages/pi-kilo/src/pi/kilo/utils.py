"""Terminal text utilities: display width measurement and row truncation.

Rows are stored as raw bytes. Truncation decodes them with
``surrogateescape`` only to find grapheme-cluster boundaries and column
widths; the bytes written to the terminal are always a prefix of the
original content.
"""

from __future__ import annotations

import unicodedata

import grapheme
import wcwidth as _wcwidth


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------

def _is_escaped_byte(cp: int) -> bool:
    # surrogateescape maps each undecodable byte to U+DC80..U+DCFF
    return 0xDC80 <= cp <= 0xDCFF


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Rules:
    1. Control characters and undecodable bytes -> 1 (raw mode still
       advances the cursor past whatever the terminal draws for them)
    2. Emoji (VS16, ZWJ sequences, skin tones, flags) -> 2
    3. Otherwise delegate to wcwidth for the first meaningful codepoint.
    """
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F) or _is_escaped_byte(cp):
            return 1
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # Skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # Regional indicators
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


def display_width(text: str) -> int:
    """Calculate the visible terminal width of *text*."""
    if not text:
        return 0
    if text.isascii():
        return len(text)
    return sum(_grapheme_width(g) for g in grapheme.graphemes(text))


# ---------------------------------------------------------------------------
# truncate_to_columns
# ---------------------------------------------------------------------------

def truncate_to_columns(content: bytes, max_cols: int) -> bytes:
    """Return the longest prefix of *content* fitting in *max_cols* columns.

    The cut falls only on grapheme-cluster boundaries, so flags and ZWJ
    sequences are kept whole or dropped whole. Bytes that do not decode are
    kept verbatim and counted as one column each. For ASCII content this is
    plain byte truncation to *max_cols* bytes.
    """
    if max_cols <= 0:
        return b""
    if content.isascii():
        return content[:max_cols]

    text = content.decode("utf-8", "surrogateescape")
    cols = 0
    end = 0
    for g in grapheme.graphemes(text):
        width = _grapheme_width(g)
        if cols + width > max_cols:
            break
        cols += width
        end += len(g.encode("utf-8", "surrogateescape"))

    return content[:end]
