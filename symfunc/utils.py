r"""@package symfunc.utils

General utilities for simplifying certain tasks in Python.
"""

__all__ = [
    "isiterable",
    "flatten_args",
    "merge_dicts",
]


def isiterable(obj):
    """Check whether an object is iterable.

    Note that this returns `True` for strings, which you may or may not intend
    to check for.
    """
    try:
        iter(obj)
    except TypeError:
        return False
    return True


def flatten_args(args):
    r"""Allow functions to take either varargs or a single iterable.

    @b Examples

    ```
        flatten_args((1, 2, 3))      # -> [1, 2, 3]
        flatten_args(([1, 2, 3],))   # -> [1, 2, 3]
    ```
    """
    if len(args) == 1 and isiterable(args[0]) and not isinstance(args[0], str):
        return list(args[0])
    return list(args)


def merge_dicts(*dicts):
    """Merge two or more dicts, later ones replacing values of earlier ones.

    Note that only shallow copies are made of the dicts.

    @b Examples

    ```
        a = dict(a=1, b=2, c=3)
        b = dict(c=-3, d=-4)
        c = merge_dicts(a, b)
        # Result: dict(a=1, b=2, c=-3, d=-4)
    ```
    """
    result = {}
    for d in dicts:
        result.update(d)
    return result
