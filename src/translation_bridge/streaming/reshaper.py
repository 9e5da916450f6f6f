"""Delta reshaping.

Streaming clients redraw on every chunk, and a chunk holding nothing but
line breaks makes them flicker. ``reshape_delta`` regroups delta
boundaries so that every emitted chunk carries at least one character
other than ``\\n``, without dropping, adding or reordering any character
(carriage returns excepted, which are stripped).

Algorithm, per delta (``\\r`` removed first):

1. Empty delta: nothing happens.
2. Newline-only delta: appended to the pending run; nothing is emitted.
3. Otherwise the delta splits into ``leading`` newlines, ``core`` and
   ``trailing`` newlines. ``pending + leading + core`` is emitted and
   ``trailing`` becomes the new pending run.

The pending run left over when the stream completes is discarded, so a
response never ends on a dangling line break.

The function is pure: the pending run is threaded through by the caller
(``StreamingSession.pending_whitespace`` in ``encoder.py``).
"""

from __future__ import annotations


def reshape_delta(pending: str, delta: str) -> tuple[str | None, str]:
    """Fold one delta into the pending newline run.

    Args:
        pending: Newlines held back from earlier deltas.
        delta:   The incoming delta text.

    Returns:
        ``(chunk, pending)`` where ``chunk`` is the text to emit now (or
        ``None``) and ``pending`` is the updated newline run.
    """
    delta = delta.replace("\r", "")
    if not delta:
        return None, pending

    core = delta.strip("\n")
    if not core:
        return None, pending + delta

    leading = delta[: len(delta) - len(delta.lstrip("\n"))]
    trailing = delta[len(delta.rstrip("\n")) :]
    return pending + leading + core, trailing

