from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

ArrayF = NDArray[np.float64]

__all__ = [
    "find_span",
    "basis_functions",
    "one_basis_function",
    "basis_function_derivatives",
]


# ---------------------------------------------------------------------------
# Knot span search
# ---------------------------------------------------------------------------


def find_span(n: int, degree: int, u: float, knots: ArrayF) -> int:
    """
    Index of the knot span containing ``u`` on a clamped knot vector.

    Parameters
    ----------
    n : int
        Index of the last control point (number of control points - 1).
    degree : int
        Curve degree p.
    u : float
        Parameter value.
    knots : (n+p+2,) float64
        Non-decreasing knot vector.

    Returns
    -------
    span : int
        ``k`` such that ``knots[k] <= u < knots[k+1]``; ``u`` at the end of the
        domain maps to the last non-empty span ``n``.
    """
    t = knots
    p = int(degree)
    if u >= t[n + 1]:
        return n
    if u <= t[p]:
        return p

    low, high = p, n + 1
    mid = (low + high) // 2
    while u < t[mid] or u >= t[mid + 1]:
        if u < t[mid]:
            high = mid
        else:
            low = mid
        mid = (low + high) // 2
    return mid


# ---------------------------------------------------------------------------
# Cox-de Boor evaluation
# ---------------------------------------------------------------------------


def basis_functions(span: int, u: float, degree: int, knots: ArrayF) -> ArrayF:
    """
    The ``degree + 1`` nonzero basis functions ``N_{span-p..span, p}(u)``.
    """
    p = int(degree)
    t = knots
    N = np.zeros(p + 1, dtype=np.float64)
    left = np.zeros(p + 1, dtype=np.float64)
    right = np.zeros(p + 1, dtype=np.float64)
    N[0] = 1.0
    for j in range(1, p + 1):
        left[j] = u - t[span + 1 - j]
        right[j] = t[span + j] - u
        saved = 0.0
        for r in range(j):
            temp = N[r] / (right[r + 1] + left[j - r])
            N[r] = saved + right[r + 1] * temp
            saved = left[j - r] * temp
        N[j] = saved
    return N


def one_basis_function(i: int, u: float, degree: int, knots: ArrayF) -> float:
    """Single basis function ``N_{i,p}(u)``."""
    p = int(degree)
    t = knots
    m = t.shape[0] - 1

    # End-of-domain cases on a clamped vector
    if (i == 0 and u == t[0]) or (i == m - p - 1 and u == t[m]):
        return 1.0
    if u < t[i] or u >= t[i + p + 1]:
        return 0.0

    N = np.array(
        [1.0 if t[i + j] <= u < t[i + j + 1] else 0.0 for j in range(p + 1)],
        dtype=np.float64,
    )
    for k in range(1, p + 1):
        if N[0] == 0.0:
            saved = 0.0
        else:
            saved = ((u - t[i]) * N[0]) / (t[i + k] - t[i])
        for j in range(p - k + 1):
            u_left = t[i + j + 1]
            u_right = t[i + j + k + 1]
            if N[j + 1] == 0.0:
                N[j] = saved
                saved = 0.0
            else:
                temp = N[j + 1] / (u_right - u_left)
                N[j] = saved + (u_right - u) * temp
                saved = (u - u_left) * temp
    return float(N[0])


# ---------------------------------------------------------------------------
# Derivatives
# ---------------------------------------------------------------------------


def basis_function_derivatives(
    span: int, u: float, degree: int, knots: ArrayF, order: int
) -> ArrayF:
    """
    Nonzero basis functions and their derivatives up to ``order``.

    Returns
    -------
    ders : (order+1, p+1) float64
        ``ders[k, j]`` is the k-th derivative of ``N_{span-p+j, p}`` at ``u``.
        Rows with ``k > p`` are zero.
    """
    p = int(degree)
    t = knots
    order = int(order)
    n = min(order, p)

    ndu = np.zeros((p + 1, p + 1), dtype=np.float64)
    left = np.zeros(p + 1, dtype=np.float64)
    right = np.zeros(p + 1, dtype=np.float64)
    ndu[0, 0] = 1.0
    for j in range(1, p + 1):
        left[j] = u - t[span + 1 - j]
        right[j] = t[span + j] - u
        saved = 0.0
        for r in range(j):
            # lower triangle holds knot differences
            ndu[j, r] = right[r + 1] + left[j - r]
            temp = ndu[r, j - 1] / ndu[j, r]
            ndu[r, j] = saved + right[r + 1] * temp
            saved = left[j - r] * temp
        ndu[j, j] = saved

    ders = np.zeros((order + 1, p + 1), dtype=np.float64)
    ders[0, :] = ndu[:, p]

    a = np.zeros((2, p + 1), dtype=np.float64)
    for r in range(p + 1):
        s1, s2 = 0, 1
        a[0, 0] = 1.0
        for k in range(1, n + 1):
            d = 0.0
            rk = r - k
            pk = p - k
            if r >= k:
                a[s2, 0] = a[s1, 0] / ndu[pk + 1, rk]
                d = a[s2, 0] * ndu[rk, pk]
            j1 = 1 if rk >= -1 else -rk
            j2 = k - 1 if r - 1 <= pk else p - r
            for j in range(j1, j2 + 1):
                a[s2, j] = (a[s1, j] - a[s1, j - 1]) / ndu[pk + 1, rk + j]
                d += a[s2, j] * ndu[rk + j, pk]
            if r <= pk:
                a[s2, k] = -a[s1, k - 1] / ndu[pk + 1, r]
                d += a[s2, k] * ndu[r, pk]
            ders[k, r] = d
            s1, s2 = s2, s1

    factor = p
    for k in range(1, n + 1):
        ders[k, :] *= factor
        factor *= p - k
    return ders
