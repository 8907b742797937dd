# pieces.py
# Piece definitions + rotations/flips

from __future__ import annotations

from typing import Iterable

Shape = tuple[tuple[int, int], ...]

# Base piece shapes as (row, col) offsets, keyed by piece id
PIECE_SHAPES: dict[int, Shape] = {
    1: ((0, 1), (0, 2), (1, 1), (2, 0), (2, 1)),
    2: ((0, 0), (1, 0), (1, 1), (1, 2), (0, 2)),
    3: ((0, 0), (1, 0), (2, 0), (1, 1), (2, 1)),
    4: ((0, 1), (1, 1), (2, 0), (2, 1), (3, 1)),
    5: ((0, 0), (1, 0), (2, 0), (2, 1), (2, 2)),
    6: ((0, 0), (1, 0), (2, 0), (2, 1), (3, 1)),
    7: ((0, 0), (1, 0), (2, 0), (3, 0), (3, 1)),
    8: ((0, 0), (0, 1), (1, 0), (1, 1), (2, 0), (2, 1)),
}

PIECE_NAMES: dict[int, str] = {
    1: "Purple",
    2: "Cyan U",
    3: "Blue chunky L",
    4: "Green tall",
    5: "Big L",
    6: "Peach zig L",
    7: "Light blue long L",
    8: "Pink double bar",
}

PIECE_IDS: tuple[int, ...] = tuple(sorted(PIECE_SHAPES))
NUM_PIECES = len(PIECE_IDS)
ALL_PIECES_MASK = (1 << NUM_PIECES) - 1


def normalize(shape: Iterable[tuple[int, int]]) -> Shape:
    """Translate so min row/col are 0 and sort the cells."""
    cells = list(shape)
    min_r = min(r for r, _ in cells)
    min_c = min(c for _, c in cells)
    return tuple(sorted((r - min_r, c - min_c) for r, c in cells))


def _rotate90(shape: Iterable[tuple[int, int]]) -> list[tuple[int, int]]:
    # (r, c) -> (c, -r)
    return [(c, -r) for r, c in shape]


def _flip_horizontal(shape: Iterable[tuple[int, int]]) -> list[tuple[int, int]]:
    # (r, c) -> (r, -c)
    return [(r, -c) for r, c in shape]


def generate_orientations(shape: Iterable[tuple[int, int]]) -> tuple[Shape, ...]:
    """All unique rotations and their mirror images, normalized, in generation order."""
    seen: dict[Shape, None] = {}
    current = list(shape)
    for _ in range(4):
        current = _rotate90(current)
        norm = normalize(current)
        seen.setdefault(norm, None)
        seen.setdefault(normalize(_flip_horizontal(norm)), None)
    return tuple(seen)


def piece_size(piece_id: int) -> int:
    return len(PIECE_SHAPES[piece_id])


# Built once at import and shared read-only by every search
PIECE_ORIENTATIONS: dict[int, tuple[Shape, ...]] = {
    piece_id: generate_orientations(shape) for piece_id, shape in PIECE_SHAPES.items()
}
