"""Shared hypothesis strategies for xtemplate property-based testing.

- **Text**: template fragments without constructs, with literal ``$$``
- **Values**: strings fed through the escape encodings
- **Lines**: sources with mixed line terminators
"""

from __future__ import annotations

import keyword

from hypothesis import strategies as st

# ---------------------------------------------------------------------------
# Text strategies
# ---------------------------------------------------------------------------

# Arbitrary text with no dollar signs at all
dollar_free_text = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",), blacklist_characters="$"),
    min_size=0,
    max_size=200,
)

# Literal text interleaved with $$ escapes, never forming an element
literal_template = (
    st.lists(st.one_of(dollar_free_text, st.just("$$")), min_size=1, max_size=8)
    .map("".join)
    .filter(lambda s: "<x:" not in s and "</x:" not in s)
)

# Identifiers usable as environment names
identifier = st.from_regex(r"[a-z][a-z0-9_]{0,10}", fullmatch=True).filter(
    lambda s: not keyword.iskeyword(s)
)

# ---------------------------------------------------------------------------
# Value strategies
# ---------------------------------------------------------------------------

# Substituted values: any text, markup-ish characters over-represented
substituted_value = st.one_of(
    st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=80),
    st.text(alphabet="<>&\"'\\/?=% \t\n\r\b\f\vab", max_size=40),
)

# ---------------------------------------------------------------------------
# Line strategies
# ---------------------------------------------------------------------------

line_break = st.sampled_from(["\n", "\r\n", "\r"])

# (lines, terminators) pairs; len(terminators) == len(lines) - 1
lines_with_breaks = st.lists(
    st.text(alphabet="abc <>{}", max_size=10), min_size=1, max_size=10
).flatmap(
    lambda lines: st.tuples(
        st.just(lines),
        st.lists(line_break, min_size=len(lines) - 1, max_size=len(lines) - 1),
    )
)
