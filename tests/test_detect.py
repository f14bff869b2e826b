"""
Tests for contour tree flattening and geometric filtering.
"""

import pytest

from hold_extract.detect import filter_candidates, flatten_tree, passes_profile
from hold_extract.config import FILTER_PROFILES
from hold_extract.types import Candidate, NativeRect, NormalizedRect, ShapeNode

from conftest import make_node, make_root, square_points


def cand(w, h, x=0.1, y=0.1):
    return Candidate(rect=NormalizedRect(x, y, w, h))


class TestFlattenTree:
    def test_preorder_and_nested(self):
        grandchild = make_node(0.3, 0.3, 0.05, 0.05)
        child = make_node(0.2, 0.2, 0.3, 0.3, children=[grandchild])
        other = make_node(0.7, 0.7, 0.1, 0.1)
        out = flatten_tree(make_root(child, other))

        assert len(out) == 4
        assert out[0].rect == NormalizedRect(0.0, 0.0, 1.0, 1.0)
        assert out[1].rect.x == pytest.approx(0.2)
        assert out[2].rect.x == pytest.approx(0.3)
        assert out[3].rect.x == pytest.approx(0.7)

    def test_degenerate_node_skipped_but_children_visited(self):
        inner = make_node(0.4, 0.4, 0.1, 0.1)
        flat = ShapeNode(bbox=NativeRect(0.3, 0.3, 0.0, 0.2), children=(inner,))
        out = flatten_tree(make_root(flat))
        assert len(out) == 2
        assert out[1].rect.x == pytest.approx(0.4)

    def test_outline_kept_when_polygon(self):
        node = make_node(0.2, 0.2, 0.1, 0.1, points=square_points(0.2, 0.2, 0.1, 0.1))
        out = flatten_tree(make_root(node))
        assert len(out[1].outline) == 4
        assert out[1].outline[0].y == pytest.approx(0.2)

    def test_outline_absent_for_two_points(self):
        node = make_node(0.2, 0.2, 0.1, 0.1, points=[(0.2, 0.2), (0.3, 0.3)])
        assert flatten_tree(make_root(node))[1].outline == ()

    def test_deep_tree_does_not_recurse(self):
        node = make_node(0.4, 0.4, 0.1, 0.1)
        for _ in range(5000):
            node = make_node(0.4, 0.4, 0.1, 0.1, children=[node])
        assert len(flatten_tree(node)) == 5001


class TestFilterProfiles:
    def test_detection_bounds(self):
        det = FILTER_PROFILES["detection"]
        assert passes_profile(cand(0.1, 0.1), det)
        assert not passes_profile(cand(0.015, 0.1), det)   # too narrow
        assert not passes_profile(cand(0.35, 0.1), det)    # too wide
        assert not passes_profile(cand(0.3, 0.3), det)     # area 0.09
        assert not passes_profile(cand(0.26, 0.05), det)   # aspect 5.2

    def test_resolution_is_looser(self):
        res = FILTER_PROFILES["resolution"]
        assert passes_profile(cand(0.015, 0.015), res)
        assert passes_profile(cand(0.3, 0.3), res)
        assert passes_profile(cand(0.25, 0.05), res)
        assert not passes_profile(cand(0.35, 0.05), res)   # aspect 7
        assert not passes_profile(cand(0.46, 0.1), res)
        assert not passes_profile(cand(0.4, 0.4), res)     # area 0.16

    def test_filter_candidates(self):
        cands = [cand(0.1, 0.1), cand(0.3, 0.3), cand(0.015, 0.015)]
        assert filter_candidates(cands, "detection") == [cands[0]]
        assert filter_candidates(cands, "resolution") == cands

    def test_unknown_profile(self):
        with pytest.raises(KeyError):
            filter_candidates([], "nope")
