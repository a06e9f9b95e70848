# topmark:header:start
#
#   project      : Formats
#   file         : strategies_formats.py
#   file_relpath : tests/strategies_formats.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Hypothesis strategies for identifiers, extensions and signatures."""

from __future__ import annotations

from hypothesis import strategies as st

_NAME_CHARS = st.characters(categories=("Ll", "Nd"), max_codepoint=127)

s_token: st.SearchStrategy[str] = st.text(_NAME_CHARS, min_size=1, max_size=8)


@st.composite
def s_identifier(draw: st.DrawFn) -> str:
    """A MIME-like identifier such as ``"image/x-abc"``."""
    return f"{draw(st.sampled_from(['image', 'text', 'structure', 'application']))}/{draw(s_token)}"


s_extension: st.SearchStrategy[str] = s_token.map(lambda t: f".{t}")

s_signature: st.SearchStrategy[bytes] = st.binary(min_size=1, max_size=16)
