"""Version comparison for tags and installed versions.

Tags are compared with PEP 440 semantics when both sides parse. Tags that
do not (``2.0-final``, ``release-7``) fall back to the loose ordering the
host uses for extension versions: numbers compare numerically and the
suffixes ``dev < alpha = a < beta = b < RC = rc < (number) < pl = p``.
"""

import re

from packaging.version import Version, InvalidVersion

_SPECIAL_FORMS = (
    ("dev", 0),
    ("alpha", 1),
    ("a", 1),
    ("beta", 2),
    ("b", 2),
    ("RC", 3),
    ("rc", 3),
    ("#", 4),
    ("pl", 5),
    ("p", 5),
)
_NUMBER_ORDER = 4

_PART_RE = re.compile(r"\d+|[^\W\d_]+|#")


def _strip_prefix(version: str) -> str:
    return version.strip().lstrip("vV")


def _special_order(form: str) -> int:
    for name, order in _SPECIAL_FORMS:
        if form.startswith(name):
            return order
    return -1


def _part_order(part: str) -> int:
    return _NUMBER_ORDER if part.isdigit() else _special_order(part)


def _cmp(a: int, b: int) -> int:
    return (a > b) - (a < b)


def canonical_parts(version: str) -> list[str]:
    """Split a version into number and word parts.

    ``1.0rc1`` and ``1.0-rc-1`` both give ``['1', '0', 'rc', '1']``.
    """
    return _PART_RE.findall(version)


def loose_compare(v1: str, v2: str) -> int:
    """Compare two loose version strings; returns -1, 0 or 1."""
    p1 = canonical_parts(v1)
    p2 = canonical_parts(v2)

    for a, b in zip(p1, p2):
        if a.isdigit() and b.isdigit():
            result = _cmp(int(a), int(b))
        else:
            result = _cmp(_part_order(a), _part_order(b))
        if result:
            return result

    # One side has more parts: a trailing number wins, a trailing
    # suffix is weighed against a plain number.
    if len(p1) > len(p2):
        rest = p1[len(p2)]
        return 1 if rest.isdigit() else _cmp(_special_order(rest), _NUMBER_ORDER)
    if len(p2) > len(p1):
        rest = p2[len(p1)]
        return -1 if rest.isdigit() else _cmp(_NUMBER_ORDER, _special_order(rest))
    return 0


def compare_versions(v1: str, v2: str) -> int:
    """Compare two version strings; returns -1, 0 or 1.

    A leading ``v`` is ignored on both sides. When both sides are valid
    PEP 440 versions, trailing zero releases are equal: ``1.0`` and
    ``1.0.0`` compare as 0, so a tag that only adds a ``.0`` is not an
    update. The loose ordering, used otherwise, ranks ``1.0 < 1.0.0``.
    """
    a = _strip_prefix(v1)
    b = _strip_prefix(v2)
    try:
        return _cmp(Version(a), Version(b))
    except InvalidVersion:
        return loose_compare(a, b)


def is_newer(latest: str, installed: str) -> bool:
    """Return True if *latest* is strictly greater than *installed*."""
    if not latest or not installed:
        return False
    return compare_versions(latest, installed) > 0
