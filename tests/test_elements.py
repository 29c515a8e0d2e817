import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from algoviz.core.elements import (
    ElementState, SortingStep, StepType, make_elements, parse_values, MAX_CUSTOM_ELEMENTS,
    MAX_CUSTOM_MAGNITUDE
)


class TestElements(unittest.TestCase):
    def test_make_elements(self):
        elements = make_elements([4, 2, 9])
        self.assertEqual([e.index for e in elements], [0, 1, 2])
        self.assertEqual([e.value for e in elements], [4, 2, 9])
        self.assertTrue(all(e.state == ElementState.NORMAL for e in elements))

    def test_step_constructors(self):
        self.assertEqual(SortingStep.swap(1, 2).indices, (1, 2))
        self.assertEqual(SortingStep.compare(3, 4, 5).type, StepType.COMPARE)

        step = SortingStep.set_value(2, 7, message="Placing 7")
        self.assertEqual(step.indices, (2,))
        self.assertEqual(step.value, 7)
        self.assertEqual(step.message, "Placing 7")

        done = SortingStep.complete()
        self.assertEqual(done.indices, ())
        self.assertIsNone(done.value)


class TestParseValues(unittest.TestCase):
    def test_mixed_separators(self):
        self.assertEqual(parse_values("5, 3 8,1"), [5, 3, 8, 1])
        self.assertEqual(parse_values("  -2,,7  "), [-2, 7])

    def test_invalid_token(self):
        with self.assertRaises(ValueError) as ctx:
            parse_values("1, two, 3")
        self.assertIn("two", str(ctx.exception))

    def test_empty(self):
        with self.assertRaises(ValueError):
            parse_values(" , ")

    def test_too_many(self):
        text = ",".join(["1"] * (MAX_CUSTOM_ELEMENTS + 1))
        with self.assertRaises(ValueError):
            parse_values(text)
        self.assertEqual(len(parse_values(",".join(["1"] * MAX_CUSTOM_ELEMENTS))), MAX_CUSTOM_ELEMENTS)

    def test_magnitude_limit(self):
        limit = MAX_CUSTOM_MAGNITUDE
        self.assertEqual(parse_values(f"{limit} {-limit}"), [limit, -limit])
        for text in (f"{limit + 1} 1", f"1 {-(limit + 1)}", "9" * 401):
            with self.assertRaises(ValueError) as ctx:
                parse_values(text)
            self.assertIn("out of range", str(ctx.exception))


if __name__ == '__main__':
    unittest.main()
