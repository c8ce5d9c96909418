"""
Post-processing of OCR fragments: ordering, noise and chrome filtering, and
grouping into paragraph-like blocks.
"""

import re

from .config import MIN_TEXT_LENGTH, PROXIMITY_THRESHOLD, UI_DENYLIST, UI_PATTERNS


def sort_fragments(fragments):
    """Order fragments top to bottom. Ties keep engine order."""
    return sorted(fragments, key=lambda f: f.y)


def is_noise(text, min_length=MIN_TEXT_LENGTH):
    text = text.strip()
    return not text or len(text) < min_length


def is_chrome(text, denylist=UI_DENYLIST):
    """
    Check whether a line looks like interface chrome rather than content.

    Each pattern is a literal, matched as a prefix and as a substring.
    """
    text = text.strip()
    for pattern in denylist:
        if not pattern:
            continue
        if text.startswith(pattern) or pattern in text:
            return True
    return False


def matches_pattern(text, patterns=UI_PATTERNS):
    """Check the trimmed line against chrome regexes (re.search)."""
    text = text.strip()
    return any(re.search(pattern, text) for pattern in patterns)


def filter_fragments(
    fragments,
    denylist=UI_DENYLIST,
    min_length=MIN_TEXT_LENGTH,
    min_confidence=None,
    patterns=UI_PATTERNS,
):
    """
    Trim fragments and drop noise and chrome.

    Args:
        fragments: Fragments in reading order
        denylist: Chrome patterns; pass an empty list to keep everything
        min_length: Minimum trimmed length for a fragment to count as content
        min_confidence: Optional floor for fragments that carry a confidence
        patterns: Chrome regexes, checked after the literal denylist

    Returns:
        Surviving fragments with trimmed text, order preserved
    """
    keep = []
    for fragment in fragments:
        text = fragment.text.strip()
        if is_noise(text, min_length):
            continue
        if (
            min_confidence is not None
            and fragment.confidence is not None
            and fragment.confidence < min_confidence
        ):
            continue
        if is_chrome(text, denylist):
            continue
        if matches_pattern(text, patterns):
            continue
        keep.append(fragment._replace(text=text))
    return keep


def group_lines(fragments, threshold=PROXIMITY_THRESHOLD):
    """
    Group sorted fragments into blocks based on vertical gaps.
    """
    groups, cur, prev_y = [], [], None
    for fragment in fragments:
        if prev_y is not None and abs(fragment.y - prev_y) > threshold and cur:
            groups.append(cur)
            cur = []
        cur.append(fragment.text)
        prev_y = fragment.y
    if cur:
        groups.append(cur)
    return groups


def render_groups(groups):
    """Flatten groups into output lines, one blank line between groups."""
    lines = []
    for i, group in enumerate(groups):
        if i:
            lines.append("")
        lines.extend(group)
    return lines


def process(
    fragments,
    denylist=UI_DENYLIST,
    threshold=PROXIMITY_THRESHOLD,
    min_length=MIN_TEXT_LENGTH,
    min_confidence=None,
    filter_chrome=True,
    patterns=UI_PATTERNS,
):
    """
    Run the full post-processing pass over one recognition result.

    Args:
        fragments: Fragments as returned by a recognizer, in any order
        denylist: Chrome patterns to reject
        threshold: Max vertical gap between consecutive lines of one group
        min_length: Minimum trimmed length to keep a fragment
        min_confidence: Optional confidence floor
        filter_chrome: If False, skip the denylist and patterns (noise is still dropped)
        patterns: Chrome regexes to reject

    Returns:
        List of output lines, with "" separating groups
    """
    ordered = sort_fragments(fragments)
    kept = filter_fragments(
        ordered,
        denylist=denylist if filter_chrome else [],
        min_length=min_length,
        min_confidence=min_confidence,
        patterns=patterns if filter_chrome else [],
    )
    return render_groups(group_lines(kept, threshold))
