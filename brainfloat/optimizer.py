"""
Peephole optimizer for compiled Brainfloat instruction text.
"""

import re


# Each pattern is deleted wherever it occurs.
EMPTY_EQUIVALENTS = [
    re.compile(re.escape("<>")),
    re.compile(re.escape("><")),
    re.compile(re.escape("-+")),
    re.compile(re.escape("+-")),
    # A flat loop right after another loop closed can never run: the cell is zero.
    re.compile(r"(?<=\])\[[^\[\]]*\]"),
]


def optimize(source: str) -> str:
    """Delete redundant instruction pairs and dead loops until nothing changes."""
    changed = True
    while changed:
        changed = False
        for pattern in EMPTY_EQUIVALENTS:
            rewritten = pattern.sub("", source)
            if rewritten != source:
                changed = True
                source = rewritten
    return source
