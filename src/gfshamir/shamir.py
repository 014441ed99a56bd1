"""Shamir secret sharing of byte strings over GF(2^w).

The secret is cut into field words. Each word gets its own random
polynomial of degree k-1 with the word as constant term, and a share
holds that polynomial's value at the share index for every word.
"""

import itertools

from gfshamir.combine import ReconstructionSession
from gfshamir.errors import DuplicateShareIndex, InconsistentShare
from gfshamir.gf2 import get_field
from gfshamir.shares import ShareRecord, max_index
from gfshamir.words import pack_words, read_word, unpack_words


def split(secret: bytes, n: int, k: int, width: int = 8,
          indices: list = None, rng=None) -> list:
    """Split a secret into n shares with threshold k.

    Args:
        secret: Bytes to share. For widths 16 and 32 the length must be
            a multiple of the word size.
        n: Total number of shares to generate.
        k: Minimum shares needed to reconstruct (quorum).
        width: Field width in bits: 4, 8, 16 or 32.
        indices: Share indices (x-coordinates) to use, default 1..n.
        rng: Optional random.Random instance for deterministic tests.

    Returns:
        List of n ShareRecord, one per index.
    """
    field = get_field(width)
    limit = max_index(width)
    if not secret:
        raise ValueError("Secret must not be empty")
    if not 1 <= k <= limit:
        raise ValueError(f"Threshold k must be in [1, {limit}], got {k}")
    if n < k:
        raise ValueError(f"n must be >= k, got n={n}, k={k}")
    if indices is None:
        indices = list(range(1, n + 1))
    if len(indices) != n or len(set(indices)) != n:
        raise ValueError(f"Need {n} distinct share indices, got {indices}")
    for x in indices:
        if not 1 <= x <= limit:
            raise ValueError(f"Share index must be in [1, {limit}], got {x}")
    word_size = max(width // 8, 1)
    if len(secret) % word_size:
        raise ValueError(
            f"Secret length {len(secret)} is not a multiple of {word_size} bytes")

    values = [[] for _ in indices]
    for word in unpack_words(width, secret):
        coeffs = [word] + [field.rand_element(rng) for _ in range(k - 1)]
        for column, x in zip(values, indices):
            column.append(field.poly_eval_low(coeffs, x))

    return [ShareRecord(quorum=k, width=width, index=x, value=pack_words(width, column))
            for x, column in zip(indices, values)]


def reconstruct(records: list) -> bytes:
    """Reconstruct the secret from k or more share records.

    Records past the quorum are validated but not used.
    """
    session = ReconstructionSession()
    for record in records:
        session.admit(record)
    return session.reconstruct()


def _agreeing(field, width: int, basis_records: list, records: list) -> frozenset:
    """Positions of records lying on the polynomial through basis_records."""
    xs = [r.index for r in basis_records]
    agree = set()
    for i, record in enumerate(records):
        basis = [field.lagrange_basis_at(xs, j, record.index) for j in range(len(xs))]
        for w in range(record.word_count):
            expected = 0
            for other, c in zip(basis_records, basis):
                expected ^= field.mul(read_word(width, other.value, w), c)
            if expected != read_word(width, record.value, w):
                break
        else:
            agree.add(i)
    return frozenset(agree)


def consistency_check(records: list) -> list:
    """Detect corrupt shares by checking polynomial consistency.

    Every k-subset of the records defines a polynomial; the honest shares
    are the largest set of records lying on one of them. That set must
    have more than k members and be the only set of its size, otherwise
    the corrupt shares cannot be told apart from honest ones and
    InconsistentShare is raised. Needs more than k records to say
    anything.

    Returns:
        Sorted positions in records that are off the honest polynomial.
    """
    n = len(records)
    if n == 0 or n <= records[0].quorum:
        return []
    first = records[0]
    seen = set()
    for r in records:
        if (r.quorum, r.width, len(r.value)) != (first.quorum, first.width, len(first.value)):
            raise InconsistentShare(f"share {r.index} does not match share {first.index}")
        if r.index in seen:
            raise DuplicateShareIndex(f"duplicate share index {r.index}")
        seen.add(r.index)
    k = first.quorum
    width = first.width
    field = get_field(width)

    best = frozenset()
    ambiguous = False
    for subset in itertools.combinations(records, k):
        agree = _agreeing(field, width, list(subset), records)
        if len(agree) == n:
            return []
        if len(agree) > len(best):
            best, ambiguous = agree, False
        elif len(agree) == len(best) and agree != best:
            ambiguous = True

    if len(best) <= k:
        raise InconsistentShare(
            f"shares disagree and no more than {k} of them fit one polynomial, "
            "cannot tell which are corrupt")
    if ambiguous:
        raise InconsistentShare(
            f"two sets of {len(best)} shares fit different polynomials, "
            "cannot tell which are corrupt")
    return sorted(set(range(n)) - best)
