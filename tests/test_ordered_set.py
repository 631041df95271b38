"""Tests for the ordered set container."""
import pytest

from plateset.models.ordered_set import OrderedSet


@pytest.fixture
def numbers():
    return OrderedSet([5, 1, 9, 3, 7])


class TestOrderedSet:
    """Test cases for OrderedSet."""

    def test_sorted_and_unique(self, numbers):
        assert numbers.to_list() == [1, 3, 5, 7, 9]
        assert numbers.add(5) is False
        assert numbers.add(4) is True
        assert numbers.to_list() == [1, 3, 4, 5, 7, 9]

    def test_discard(self, numbers):
        assert numbers.discard(3) is True
        assert numbers.discard(3) is False
        assert 3 not in numbers

    def test_navigation(self, numbers):
        assert numbers.first() == 1
        assert numbers.last() == 9
        assert numbers.higher(5) == 7
        assert numbers.lower(5) == 3
        assert numbers.ceiling(4) == 5
        assert numbers.floor(4) == 3
        assert numbers.higher(9) is None
        assert numbers.lower(1) is None

    def test_views(self, numbers):
        assert numbers.head(5) == [1, 3]
        assert numbers.head(5, inclusive=True) == [1, 3, 5]
        assert numbers.tail(5) == [5, 7, 9]
        assert numbers.tail(5, inclusive=False) == [7, 9]
        assert numbers.between(3, 7) == [3, 5]
        assert numbers.between(3, 7, False, True) == [5, 7]

    def test_between_reversed_bounds(self, numbers):
        with pytest.raises(ValueError):
            numbers.between(7, 3)

    def test_poll(self, numbers):
        assert numbers.poll_first() == 1
        assert numbers.poll_last() == 9
        assert len(numbers) == 3

    def test_empty(self):
        empty = OrderedSet()
        with pytest.raises(KeyError):
            empty.first()
        with pytest.raises(KeyError):
            empty.last()
        assert empty.poll_first() is None
        assert empty.poll_last() is None

    def test_contains_other_type(self, numbers):
        assert "x" not in numbers
