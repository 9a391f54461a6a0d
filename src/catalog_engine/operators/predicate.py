"""Predicate evaluator - matches catalog entries against filter predicates.

A predicate maps attribute names to conditions::

    {"kind": "tool", "age": {"$gte": 25, "$lt": 65}, "tags": {"$contains": "x"}}

A non-mapping condition is a literal compared by strict equality. A mapping
condition is an operator object; all of its recognised operators must hold.
An operator object with no recognised operator matches nothing, since
predicates often arrive from UI input.

Strict equality never equates values of different kinds: ``True`` is not
``1`` and ``"1"`` is not ``1``, while ``1`` and ``1.0`` are both numbers and
equal.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Union

from ..catalog.types import CatalogEntry, is_number

FilterPredicate = Mapping[str, Any]
EntryPredicate = Union[FilterPredicate, Callable[[CatalogEntry], bool]]


def strict_equals(a: Any, b: Any) -> bool:
    """Equality that does not coerce between value kinds."""
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if is_number(a) and is_number(b):
        return a == b
    if isinstance(a, str) or isinstance(b, str):
        return isinstance(a, str) and isinstance(b, str) and a == b
    if a is None or b is None:
        return a is b
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(strict_equals(x, y) for x, y in zip(a, b))
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        return a.keys() == b.keys() and all(strict_equals(a[k], b[k]) for k in a)
    return type(a) is type(b) and a == b


def _is_member(value: Any, candidates: Any) -> bool:
    if not isinstance(candidates, (list, tuple, set, frozenset)):
        return False
    return any(strict_equals(value, c) for c in candidates)


def _gt(value: Any, operand: Any) -> bool:
    return is_number(value) and is_number(operand) and value > operand


def _gte(value: Any, operand: Any) -> bool:
    return is_number(value) and is_number(operand) and value >= operand


def _lt(value: Any, operand: Any) -> bool:
    return is_number(value) and is_number(operand) and value < operand


def _lte(value: Any, operand: Any) -> bool:
    return is_number(value) and is_number(operand) and value <= operand


def _ne(value: Any, operand: Any) -> bool:
    return not strict_equals(value, operand)


def _in(value: Any, operand: Any) -> bool:
    return _is_member(value, operand)


def _nin(value: Any, operand: Any) -> bool:
    return not _is_member(value, operand)


def _contains(value: Any, operand: Any) -> bool:
    if not isinstance(value, (list, tuple)):
        return False
    return any(strict_equals(item, operand) for item in value)


OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "$gt": _gt,
    "$gte": _gte,
    "$lt": _lt,
    "$lte": _lte,
    "$ne": _ne,
    "$in": _in,
    "$nin": _nin,
    "$contains": _contains,
}


def condition_holds(value: Any, condition: Any) -> bool:
    """Evaluate one attribute condition against an attribute value."""
    if not isinstance(condition, Mapping):
        return strict_equals(value, condition)

    recognised = [(OPERATORS[key], operand) for key, operand in condition.items() if key in OPERATORS]
    if not recognised:
        return False
    return all(op(value, operand) for op, operand in recognised)


def matches(entry: CatalogEntry | Mapping[str, Any], predicate: FilterPredicate) -> bool:
    """True iff every attribute condition of ``predicate`` holds for ``entry``."""
    for name, condition in predicate.items():
        if not condition_holds(entry.get(name), condition):
            return False
    return True


def compile_predicate(predicate: EntryPredicate) -> Callable[[CatalogEntry], bool]:
    """Turn a predicate mapping or callable into an entry test."""
    if callable(predicate):
        return predicate
    conditions = dict(predicate)
    return lambda entry: matches(entry, conditions)


def filter_entries(entries: Iterable[CatalogEntry], predicate: EntryPredicate) -> list[CatalogEntry]:
    """Entries satisfying ``predicate``, in their original order."""
    test = compile_predicate(predicate)
    return [entry for entry in entries if test(entry)]


def validate_predicate(predicate: Any) -> list[str]:
    """
    Describe usage problems in a predicate without changing how it matches.

    Returns an empty list for a well-formed predicate.
    """
    if not isinstance(predicate, Mapping):
        return [f"predicate must be a mapping, got {type(predicate).__name__}"]

    problems = []
    for name, condition in predicate.items():
        if not isinstance(condition, Mapping):
            continue
        unknown = sorted(str(k) for k in condition if k not in OPERATORS)
        if len(unknown) == len(condition):
            problems.append(f"{name}: no recognised operator, condition matches nothing")
        elif unknown:
            problems.append(f"{name}: ignoring unknown operators {', '.join(unknown)}")
        for key in ("$in", "$nin"):
            if key in condition and not isinstance(condition[key], (list, tuple)):
                problems.append(f"{name}: {key} expects a list")
    return problems
