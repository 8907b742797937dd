from pieces import (
    ALL_PIECES_MASK,
    NUM_PIECES,
    PIECE_IDS,
    PIECE_ORIENTATIONS,
    PIECE_SHAPES,
    _flip_horizontal,
    _rotate90,
    generate_orientations,
    normalize,
    piece_size,
)

EXPECTED_ORIENTATION_COUNTS = {1: 4, 2: 4, 3: 8, 4: 8, 5: 4, 6: 8, 7: 8, 8: 2}


def test_catalog_shape():
    assert PIECE_IDS == (1, 2, 3, 4, 5, 6, 7, 8)
    assert NUM_PIECES == 8
    assert ALL_PIECES_MASK == 0xFF
    assert [piece_size(pid) for pid in PIECE_IDS] == [5, 5, 5, 5, 5, 5, 5, 6]


def test_orientation_counts():
    counts = {pid: len(PIECE_ORIENTATIONS[pid]) for pid in PIECE_IDS}
    assert counts == EXPECTED_ORIENTATION_COUNTS


def test_orientations_are_normalised_and_unique():
    for pid, orientations in PIECE_ORIENTATIONS.items():
        assert len(set(orientations)) == len(orientations)
        for orientation in orientations:
            assert normalize(orientation) == orientation
            assert len(orientation) == piece_size(pid)
            assert min(r for r, _ in orientation) == 0
            assert min(c for _, c in orientation) == 0


def test_orientations_closed_under_rotation_and_mirror():
    for orientations in PIECE_ORIENTATIONS.values():
        known = set(orientations)
        for orientation in orientations:
            assert normalize(_rotate90(orientation)) in known
            assert normalize(_flip_horizontal(orientation)) in known


def test_rectangle_generation_order():
    wide = ((0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2))
    tall = ((0, 0), (0, 1), (1, 0), (1, 1), (2, 0), (2, 1))
    assert generate_orientations(PIECE_SHAPES[8]) == (wide, tall)


def test_generation_is_deterministic():
    for shape in PIECE_SHAPES.values():
        assert generate_orientations(shape) == generate_orientations(shape)


def test_normalize_translates_and_sorts():
    assert normalize([(3, 5), (2, 4), (2, 5)]) == ((0, 0), (0, 1), (1, 1))
