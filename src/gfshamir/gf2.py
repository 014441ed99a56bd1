"""GF(2^w) field arithmetic — core primitive for gfshamir.

Elements are Python ints in [0, 2^w). Addition and subtraction are XOR;
multiplication is carry-less multiplication reduced modulo a fixed
irreducible polynomial of degree w. Small fields also carry log/exp
tables, which must agree bit-exactly with the polynomial arithmetic.
"""

import functools
import secrets

from gfshamir.errors import DivisionByZero, UnsupportedFieldWidth

# Field moduli by width, with the x^w term included.
FIELD_POLYNOMIALS = {
    4: 0x13,            # x^4 + x + 1
    8: 0x11b,           # x^8 + x^4 + x^3 + x + 1
    16: 0x1002b,        # x^16 + x^5 + x^3 + x + 1
    32: 0x10000008d,    # x^32 + x^7 + x^3 + x^2 + 1
}

# Widths up to this size get log/exp tables by default.
TABLE_MAX_WIDTH = 8


def _poly_mul(a: int, b: int, width: int, poly: int) -> int:
    """Shift-and-add multiply of a and b modulo poly."""
    top = 1 << width
    r = 0
    while b:
        if b & 1:
            r ^= a
        b >>= 1
        a <<= 1
        if a & top:
            a ^= poly
    return r


class GF2Field:
    """Arithmetic in GF(2^w) for one fixed modulus.

    Instances are immutable after construction and can be shared by any
    number of reconstructions.
    """

    __slots__ = ('width', 'polynomial', '_order', '_exp', '_log')

    def __init__(self, width: int, polynomial: int, tables=None):
        if width not in FIELD_POLYNOMIALS:
            raise UnsupportedFieldWidth(f"Unsupported field width {width}")
        if polynomial >> width != 1:
            raise UnsupportedFieldWidth(
                f"Polynomial {polynomial:#x} does not have degree {width}")
        self.width = width
        self.polynomial = polynomial
        self._order = 1 << width
        if tables is None:
            tables = width <= TABLE_MAX_WIDTH
        self._exp = None
        self._log = None
        if tables:
            self._build_tables()

    def _build_tables(self):
        """Fill exp/log tables from the first generator of the group."""
        n = self._order - 1
        for g in range(2, self._order):
            exp = [0] * (2 * n)
            x = 1
            for i in range(n):
                if i and x == 1:
                    break
                exp[i] = x
                x = _poly_mul(x, g, self.width, self.polynomial)
            else:
                if x != 1:
                    continue
                for i in range(n, 2 * n):
                    exp[i] = exp[i - n]
                log = [0] * self._order
                for i in range(n):
                    log[exp[i]] = i
                self._exp = exp
                self._log = log
                return
        # No generator means the modulus is reducible.
        raise UnsupportedFieldWidth(
            f"Polynomial {self.polynomial:#x} is not irreducible")

    @property
    def has_tables(self) -> bool:
        return self._exp is not None

    def order(self) -> int:
        """Number of field elements, 2^w."""
        return self._order

    def zero(self) -> int:
        return 0

    def one(self) -> int:
        return 1

    def add(self, a: int, b: int) -> int:
        """a + b, which is a XOR b in characteristic 2."""
        return a ^ b

    # Subtraction is addition in characteristic 2.
    sub = add

    def mul(self, a: int, b: int) -> int:
        """a * b modulo the field polynomial."""
        if self._exp is None:
            return _poly_mul(a, b, self.width, self.polynomial)
        if a == 0 or b == 0:
            return 0
        return self._exp[self._log[a] + self._log[b]]

    def inv(self, a: int) -> int:
        """Multiplicative inverse.

        Table path uses logarithms; otherwise a^(2^w - 2) by
        square-and-multiply, since a^(2^w - 1) = 1 for nonzero a.
        """
        if a == 0:
            raise DivisionByZero(f"Cannot invert zero in GF(2^{self.width})")
        if self._exp is not None:
            return self._exp[(self._order - 1) - self._log[a]]
        result = 1
        base = a
        e = self._order - 2
        while e:
            if e & 1:
                result = _poly_mul(result, base, self.width, self.polynomial)
            base = _poly_mul(base, base, self.width, self.polynomial)
            e >>= 1
        return result

    def div(self, a: int, b: int) -> int:
        """a / b = a * b^(-1)."""
        if b == 0:
            raise DivisionByZero(f"Division by zero in GF(2^{self.width})")
        if self._exp is None:
            return self.mul(a, self.inv(b))
        if a == 0:
            return 0
        return self._exp[self._log[a] - self._log[b] + self._order - 1]

    def poly_eval_low(self, coeffs: list, x: int) -> int:
        """Evaluate polynomial at x using Horner's method.

        coeffs = [a_0, a_1, ..., a_d] (lowest degree first)
        Returns a_0 + a_1 * x + ... + a_d * x^d.
        """
        result = 0
        for c in reversed(coeffs):
            result = self.mul(result, x) ^ c
        return result

    def lagrange_basis_at_zero(self, xs: list, j: int) -> int:
        """Compute Lagrange basis coefficient L_j(0).

        Returns prod_{l!=j} x_l / (x_j - x_l). The numerator is x_l rather
        than (0 - x_l) because negation is the identity here, and the
        denominator x_j - x_l is x_j XOR x_l.
        """
        xj = xs[j]
        result = 1
        for l, xl in enumerate(xs):
            if l == j:
                continue
            result = self.mul(result, xl)
            result = self.div(result, xj ^ xl)
        return result

    def lagrange_basis_at(self, xs: list, j: int, target: int) -> int:
        """Compute Lagrange basis coefficient L_j(target)."""
        xj = xs[j]
        num = 1
        den = 1
        for l, xl in enumerate(xs):
            if l == j:
                continue
            num = self.mul(num, target ^ xl)
            den = self.mul(den, xj ^ xl)
        return self.div(num, den)

    def rand_element(self, rng=None) -> int:
        """Sample a uniform random element of the field."""
        if rng is not None:
            return rng.getrandbits(self.width)
        return secrets.randbits(self.width)

    def __repr__(self):
        return f"GF2Field(width={self.width}, polynomial={self.polynomial:#x})"


@functools.lru_cache(maxsize=None)
def get_field(width: int) -> GF2Field:
    """Return the shared field instance for a width."""
    try:
        polynomial = FIELD_POLYNOMIALS[width]
    except KeyError:
        raise UnsupportedFieldWidth(f"Unsupported field width {width}") from None
    return GF2Field(width, polynomial)
