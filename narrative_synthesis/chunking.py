"""Line-preserving text chunking for narrative prompts."""

from typing import List

DEFAULT_MAX_CHUNK_CHARS = 12000


def chunk_text(text: str, max_chars: int = DEFAULT_MAX_CHUNK_CHARS) -> List[str]:
    """Split text into chunks of at most ``max_chars`` characters.

    Lines are never split unless a single line is longer than ``max_chars``,
    in which case that line is cut into ``max_chars`` pieces.

    Args:
        text: Text to split.
        max_chars: Upper bound on chunk length.

    Returns:
        Chunks in order; an empty list for blank input.
    """
    if max_chars < 1:
        raise ValueError("max_chars must be positive.")
    if not text.strip():
        return []

    chunks: List[str] = []
    current: List[str] = []
    current_len = 0

    for line in text.splitlines(keepends=True):
        pieces = [line[i : i + max_chars] for i in range(0, len(line), max_chars)] or [line]
        for piece in pieces:
            if current and current_len + len(piece) > max_chars:
                chunks.append("".join(current))
                current = []
                current_len = 0
            current.append(piece)
            current_len += len(piece)

    if current:
        chunks.append("".join(current))
    return [chunk for chunk in chunks if chunk.strip()]
