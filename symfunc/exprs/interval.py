r"""@package symfunc.exprs.interval

Intervals describing the valid input range of expressions.

An Interval is a (possibly unbounded) connected subset of the real line with
each finite bound being either inclusive or exclusive. Infinite bounds are
always exclusive. The unrestricted interval ALL_VALUES is special in that it
accepts any value, including complex ones, whereas any restricted interval
only contains real-representable values.

Composite expressions compute their valid range as the intersection of the
ranges of their parts using narrowest().

@b Examples

```
    >>> Interval.nonnegative()
    Interval[0, +inf)
    >>> narrowest(Interval(-1, 2), Interval.open(0, 5))
    Interval(0, 2]
    >>> Interval.closed(0, 1).contains(Fraction(1, 2))
    True
```
"""

import logging

from mpmath import mp

from ..numutils import compare, coerce, NumericKind, CoercionError


__all__ = [
    "Interval",
    "ALL_VALUES",
    "narrowest",
]


logger = logging.getLogger(__name__)


def _is_inf(value):
    return mp.isinf(coerce(value, NumericKind.REAL))


class Interval(object):
    r"""Immutable interval with inclusive or exclusive bounds."""

    def __init__(self, lower=None, upper=None, lower_closed=True,
                 upper_closed=True):
        r"""Create a new interval.

        Args:
            lower: Lower bound. `None` means negative infinity.
            upper: Upper bound. `None` means positive infinity.
            lower_closed: Whether the lower bound belongs to the interval.
                Ignored for infinite bounds.
            upper_closed: Whether the upper bound belongs to the interval.
                Ignored for infinite bounds.
        """
        if lower is None:
            lower = -mp.inf
        if upper is None:
            upper = mp.inf
        coerce(lower, NumericKind.REAL)
        coerce(upper, NumericKind.REAL)
        self._lower = lower
        self._upper = upper
        self._lower_closed = bool(lower_closed) and not _is_inf(lower)
        self._upper_closed = bool(upper_closed) and not _is_inf(upper)

    @classmethod
    def all_values(cls):
        r"""The unrestricted interval."""
        return cls()

    @classmethod
    def closed(cls, lower, upper):
        r"""Interval `[lower, upper]`."""
        return cls(lower, upper, True, True)

    @classmethod
    def open(cls, lower, upper):
        r"""Interval `(lower, upper)`."""
        return cls(lower, upper, False, False)

    @classmethod
    def nonnegative(cls):
        r"""Interval `[0, inf)`."""
        return cls(0, None, True)

    @classmethod
    def positive(cls):
        r"""Interval `(0, inf)`."""
        return cls(0, None, False)

    @classmethod
    def empty(cls):
        r"""An interval containing no values."""
        return cls(0, 0, False, False)

    @property
    def lower(self):
        r"""Lower bound (`-inf` if unbounded)."""
        return self._lower

    @property
    def upper(self):
        r"""Upper bound (`+inf` if unbounded)."""
        return self._upper

    @property
    def lower_closed(self):
        return self._lower_closed

    @property
    def upper_closed(self):
        return self._upper_closed

    def is_unrestricted(self):
        r"""Whether this interval accepts all values."""
        return _is_inf(self._lower) and _is_inf(self._upper)

    def is_empty(self):
        r"""Whether no value lies inside this interval."""
        c = compare(self._lower, self._upper)
        if c > 0:
            return True
        if c == 0:
            return not (self._lower_closed and self._upper_closed)
        return False

    def contains(self, value):
        r"""Check whether a value lies in this interval."""
        if self.is_unrestricted():
            return True
        try:
            value = coerce(value, NumericKind.REAL)
        except CoercionError:
            return False
        if mp.isnan(value):
            return False
        c = compare(value, self._lower)
        if c < 0 or (c == 0 and not self._lower_closed):
            return False
        c = compare(value, self._upper)
        if c > 0 or (c == 0 and not self._upper_closed):
            return False
        return True

    def __contains__(self, value):
        return self.contains(value)

    def contains_interval(self, other):
        r"""Check whether `other` is a subset of this interval."""
        if other.is_empty():
            return True
        c = compare(other.lower, self._lower)
        if c < 0 or (c == 0 and other.lower_closed and not self._lower_closed):
            return False
        c = compare(other.upper, self._upper)
        if c > 0 or (c == 0 and other.upper_closed and not self._upper_closed):
            return False
        return True

    def overlaps(self, other):
        r"""Whether the two intervals have at least one common value."""
        return not self._intersect(other).is_empty()

    def narrowest(self, other):
        r"""Return the intersection of this and another interval.

        Disjoint intervals result in an empty interval, which is logged since
        no argument can then be valid.
        """
        result = self._intersect(other)
        if result.is_empty():
            logger.warning("Intervals %s and %s do not overlap.", self, other)
            return Interval.empty()
        return result

    def _intersect(self, other):
        c = compare(self._lower, other.lower)
        if c > 0:
            lower, lower_closed = self._lower, self._lower_closed
        elif c < 0:
            lower, lower_closed = other.lower, other.lower_closed
        else:
            lower = self._lower
            lower_closed = self._lower_closed and other.lower_closed
        c = compare(self._upper, other.upper)
        if c < 0:
            upper, upper_closed = self._upper, self._upper_closed
        elif c > 0:
            upper, upper_closed = other.upper, other.upper_closed
        else:
            upper = self._upper
            upper_closed = self._upper_closed and other.upper_closed
        return Interval(lower, upper, lower_closed, upper_closed)

    def _key(self):
        return (self._lower, self._upper, self._lower_closed, self._upper_closed)

    def __eq__(self, other):
        if not isinstance(other, Interval):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return "Interval%s" % self

    def __str__(self):
        def _fmt(v):
            if _is_inf(v):
                return "-inf" if v < 0 else "+inf"
            return str(v)
        return "%s%s, %s%s" % (
            "[" if self._lower_closed else "(",
            _fmt(self._lower), _fmt(self._upper),
            "]" if self._upper_closed else ")",
        )


## The interval accepting any value.
ALL_VALUES = Interval()


def narrowest(*intervals):
    r"""Intersection of all given intervals.

    Without arguments (or with only `None` values), ALL_VALUES is returned.
    """
    result = ALL_VALUES
    for interval in intervals:
        if interval is None:
            continue
        result = result.narrowest(interval)
    return result
