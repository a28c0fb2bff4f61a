"""Line-based text chunking."""

from __future__ import annotations


def chunk_text(text: str, max_chars: int = 500) -> list[str]:
    """Split *text* into chunks of at most *max_chars* characters.

    Lines are accumulated into a buffer; when adding the next line (plus
    its line break) would overflow the buffer, the buffer is emitted and
    restarted with that line.  Lines are never cut, so a single line
    longer than *max_chars* becomes its own oversized chunk.

    Parameters
    ----------
    text:
        Raw document text.
    max_chars:
        Soft upper bound on the length of a chunk.

    Returns
    -------
    list[str]
        Trimmed, non-blank chunks in the order they appear in *text*.
    """
    if max_chars < 1:
        raise ValueError(f"max_chars must be positive, got {max_chars}")

    chunks: list[str] = []
    current = ""

    for line in text.replace("\r\n", "\n").split("\n"):
        if len(current + "\n" + line) > max_chars:
            if current.strip():
                chunks.append(current.strip())
            current = line
        else:
            current += "\n" + line

    if current.strip():
        chunks.append(current.strip())
    return chunks
