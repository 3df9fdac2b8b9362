import logging
import sys
import unittest

from itc.core.identity import Id, LeafValue, NormalizeMethod
from itc.datastructures._tree_errors import TagError


def _deep_identity(depth: int) -> Id:
    """Build a left spine of the given depth ending in a (1, 1) pair."""
    root = node = Id()
    for _ in range(depth):
        child = Id()
        node.set_left(child)
        node.set_right(Id.zero())
        node = child
    node.set_left(Id.one())
    node.set_right(Id.one())
    return root


class TestLeafValue(unittest.TestCase):
    def test_values(self):
        self.assertEqual(int(LeafValue.ZERO), 0)
        self.assertEqual(int(LeafValue.ONE), 1)
        self.assertEqual(LeafValue(1), LeafValue.ONE)


class TestId(unittest.TestCase):
    def test_default(self):
        id_ = Id()
        self.assertTrue(id_.is_leaf())
        self.assertEqual(id_.leaf(), LeafValue.ZERO)

    def test_leaf_values(self):
        for value in LeafValue:
            with self.subTest(value=value):
                id_ = Id(value)
                self.assertTrue(id_.is_leaf())
                self.assertEqual(id_.leaf(), value)

    def test_factories(self):
        self.assertEqual(Id.zero().leaf(), LeafValue.ZERO)
        self.assertEqual(Id.one().leaf(), LeafValue.ONE)
        self.assertEqual(Id.zero(), Id())
        self.assertNotEqual(Id.zero(), Id.one())

    def test_coerce(self):
        self.assertIs(Id(1).leaf(), LeafValue.ONE)
        id_ = Id()
        id_.set_value(1)
        self.assertIs(id_.leaf(), LeafValue.ONE)
        with self.assertRaises(ValueError):
            Id(2)
        with self.assertRaises(TypeError):
            Id("1")  # type: ignore
        with self.assertRaises(TypeError):
            Id(True)  # type: ignore

    def test_child_type(self):
        with self.assertRaises(TypeError):
            Id().set_left(object())  # type: ignore

    def test_nested(self):
        id_ = Id.from_nested((1, (0, None)))
        self.assertEqual(id_.to_nested(), (1, (0, None)))
        self.assertEqual(str(id_), "(1, (0, _))")
        self.assertEqual(repr(id_), "Id.from_nested((1, (0, None)))")
        self.assertIs(id_.internal().get_left().leaf(), LeafValue.ONE)


class TestNormalize(unittest.TestCase):
    def assert_normalizes(self, structure, expected):
        for method in NormalizeMethod:
            with self.subTest(structure=structure, method=method):
                id_ = Id.from_nested(structure)
                self.assertIs(id_.normalize(method), id_)
                self.assertEqual(id_.to_nested(), expected)
                self.assertTrue(id_.is_normal())

    def test_collapse_zeros(self):
        id_ = Id()
        id_.set_left(Id())
        id_.set_right(Id())
        self.assertFalse(id_.is_leaf())
        self.assertTrue(id_.internal().has_left())
        self.assertEqual(id_.internal().get_left().leaf(), LeafValue.ZERO)
        self.assertTrue(id_.internal().has_right())
        self.assertEqual(id_.internal().get_right().leaf(), LeafValue.ZERO)
        id_.normalize()
        self.assertTrue(id_.is_leaf())
        self.assertEqual(id_.leaf(), LeafValue.ZERO)

    def test_collapse_ones(self):
        id_ = Id()
        id_.set_left(Id.one())
        id_.set_right(Id.one())
        id_.normalize()
        self.assertTrue(id_.is_leaf())
        self.assertEqual(id_.leaf(), LeafValue.ONE)

    def test_collapse_releases_children(self):
        id_ = Id()
        left, right = Id.one(), Id.one()
        id_.set_left(left)
        id_.set_right(right)
        id_.normalize()
        self.assertTrue(left.is_root())
        self.assertTrue(right.is_root())

    def test_differing_values(self):
        id_ = Id()
        id_.set_left(Id.zero())
        id_.set_right(Id.one())
        id_.normalize()
        self.assertFalse(id_.is_leaf())
        self.assertEqual(id_.to_nested(), (0, 1))

    def test_single_child(self):
        id_ = Id()
        id_.set_left(Id.one())
        id_.normalize()
        self.assertFalse(id_.is_leaf())
        self.assertFalse(id_.internal().has_right())
        self.assertEqual(id_.internal().get_left().leaf(), LeafValue.ONE)
        self.assert_normalizes((None, 0), (None, 0))

    def test_no_children(self):
        self.assert_normalizes((None, None), (None, None))

    def test_leaf(self):
        self.assert_normalizes(1, 1)

    def test_propagates(self):
        self.assert_normalizes(((0, 0), (0, 0)), 0)
        self.assert_normalizes(((1, 1), 1), 1)
        self.assert_normalizes(((1, 1), 0), (1, 0))
        self.assert_normalizes((((0, 0), 0), ((1, 1), 1)), (0, 1))

    def test_single_child_not_collapsed_after_propagation(self):
        self.assert_normalizes(((1, 1), None), (1, None))
        self.assert_normalizes(((1, (1, 1)), None), (1, None))

    def test_normalizes_under_uncollapsed_parent(self):
        self.assert_normalizes((1, ((0, 1), (0, 0))), (1, ((0, 1), 0)))

    def test_idempotent(self):
        structures = [
            0,
            (0, 1),
            ((1, 1), (0, (0, 0))),
            ((0, (1, 1)), (None, (1, 1))),
            (((0, 0), (1, (1, 1))), (None, None)),
        ]
        for structure in structures:
            for method in ("recurse", "loop"):
                with self.subTest(structure=structure, method=method):
                    once = Id.from_nested(structure).normalize(method)
                    twice = once.copy().normalize(method)
                    self.assertEqual(twice, once)

    def test_methods_agree(self):
        structure = (((0, 0), (1, (1, 1))), ((0, 1), (None, (0, 0))))
        self.assertEqual(
            Id.from_nested(structure).normalize("recurse"),
            Id.from_nested(structure).normalize("loop")
        )

    def test_collapse_count(self):
        id_ = Id.from_nested(((0, 0), (1, (1, 1))))
        self.assertEqual(id_.normalize_recurse(), 3)
        self.assertEqual(id_.normalize_recurse(), 0)
        id_ = Id.from_nested(((0, 0), (1, (1, 1))))
        self.assertEqual(id_.normalize_loop(), 3)

    def test_unknown_method(self):
        with self.assertRaises(ValueError):
            Id().normalize("breadth_first")  # type: ignore

    def test_is_normal(self):
        self.assertTrue(Id.from_nested((0, 1)).is_normal())
        self.assertFalse(Id.from_nested((0, 0)).is_normal())
        self.assertFalse(Id.from_nested((1, (1, 1))).is_normal())

    def test_deep_loop(self):
        depth = sys.getrecursionlimit() + 100
        id_ = _deep_identity(depth)
        id_.normalize("loop")
        self.assertEqual(id_.height, depth)
        self.assertTrue(id_.is_normal())
        node = id_
        while not node.internal().get_left().is_leaf():
            node = node.internal().get_left()
        self.assertEqual(node.to_nested(), (1, 0))

    def test_deep_conversions(self):
        depth = sys.getrecursionlimit() + 100
        id_ = _deep_identity(depth)
        self.assertEqual(Id.from_nested(id_.to_nested()), id_)
        self.assertTrue(repr(id_).startswith("Id.from_nested(((((("))
        self.assertTrue(str(id_).endswith(", 0)" * depth))
        self.assertEqual(id_.copy(), id_)

    def test_debug_logging(self):
        id_ = Id.from_nested((1, 1))
        with self.assertLogs("ItcId", level=logging.DEBUG) as logs:
            id_.normalize(debug=True)
        self.assertTrue(any("Collapsing" in line for line in logs.output))

    def test_leaf_after_collapse(self):
        id_ = Id.from_nested((0, 0)).normalize()
        with self.assertRaises(TagError):
            id_.internal()


if __name__ == "__main__":
    unittest.main()
