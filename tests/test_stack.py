import unittest
from dfamatch.automata.stack import (
    BoundedStack, DEFAULT_CAPACITY, EMPTY, StackOverflow, StackUnderflow
)


class BoundedStackTest(unittest.TestCase):
    def test_empty(self) -> None:
        s = BoundedStack()
        self.assertTrue(s.is_empty())
        self.assertFalse(s.is_full())
        self.assertEqual(len(s), 0)
        self.assertEqual(s.capacity, DEFAULT_CAPACITY)
        self.assertEqual(list(s), [])

    def test_lifo(self) -> None:
        s = BoundedStack(5)
        for i in [3, 1, 4, 1, 5]:
            s.push(i)
        self.assertEqual(list(s), [3, 1, 4, 1, 5])
        self.assertEqual([s.pop() for _ in range(5)], [5, 1, 4, 1, 3])
        self.assertTrue(s.is_empty())

    def test_full(self) -> None:
        s = BoundedStack()
        for i in range(DEFAULT_CAPACITY - 1):
            s.push(i)
            self.assertFalse(s.is_full())
        s.push(-1)
        self.assertTrue(s.is_full())
        self.assertFalse(s.is_empty())
        self.assertEqual(len(s), DEFAULT_CAPACITY)

    def test_overflow(self) -> None:
        """Pushing on a full stack drops the value."""
        s = BoundedStack(2)
        s.push(1)
        s.push(2)
        with self.assertLogs('dfamatch.automata.stack', level='WARNING'):
            s.push(3)
        self.assertEqual(list(s), [1, 2])
        self.assertEqual(s.top, 1)
        self.assertEqual(s.dropped, 1)
        self.assertEqual(s.pop(), 2)

    def test_underflow(self) -> None:
        """Popping an empty stack returns -1."""
        s = BoundedStack(2)
        with self.assertLogs('dfamatch.automata.stack', level='WARNING'):
            self.assertEqual(s.pop(), EMPTY)
        self.assertEqual(EMPTY, -1)
        self.assertTrue(s.is_empty())
        self.assertEqual(s.top, -1)

    def test_strict_overflow(self) -> None:
        s = BoundedStack(1, strict=True)
        s.push(1)
        with self.assertRaises(StackOverflow):
            s.push(2)
        self.assertEqual(list(s), [1])
        self.assertEqual(s.dropped, 0)

    def test_strict_underflow(self) -> None:
        s = BoundedStack(1, strict=True)
        with self.assertRaises(StackUnderflow):
            s.pop()
        self.assertTrue(s.is_empty())

    def test_clear(self) -> None:
        s = BoundedStack(3)
        s.push(1)
        s.push(2)
        s.push(3)
        s.clear()
        self.assertTrue(s.is_empty())
        s.clear()
        self.assertTrue(s.is_empty())
        self.assertEqual(list(s), [])
        s.push(7)
        self.assertEqual(s.pop(), 7)

    def test_peek(self) -> None:
        s = BoundedStack(3)
        self.assertEqual(s.peek(), EMPTY)
        s.push(4)
        s.push(5)
        self.assertEqual(s.peek(), 5)
        self.assertEqual(len(s), 2)

    def test_invalid_capacity(self) -> None:
        with self.assertRaises(ValueError):
            BoundedStack(0)
