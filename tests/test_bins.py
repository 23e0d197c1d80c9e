import pytest

from quantsketch.bins import (
    DEFAULT_BIN_PER_LINE,
    MAX_BIN_WIDTH,
    Bin,
    append_safe,
    format_bins,
    n_sum,
)

MAXN = MAX_BIN_WIDTH
B10 = "0:1 1:1 2:1 3:1 4:1 5:1 6:1 7:1 8:1 9:1"


def parse_bins(dsl):
    bins = []
    for tok in dsl.split(" ") if dsl else []:
        k, n = tok.split(":")
        bins.append(Bin(int(k), MAXN if n == "max" else int(n)))
    return bins


@pytest.mark.parametrize(
    "n,by,want_n,want_overflow",
    [
        (0, 1, 1, 0),
        (1, 1, 2, 0),
        (MAXN, 1, MAXN, 1),
        (0, MAXN, MAXN, 0),
        (1, MAXN, MAXN, 1),
        (100, 3 * MAXN, MAXN, 2 * MAXN + 100),
    ],
)
def test_incr_safe(n, by, want_n, want_overflow):
    b = Bin(k=0, n=n)
    assert b.incr_safe(by) == want_overflow
    assert b.n == want_n


def test_append_safe_single():
    bins = []
    append_safe(bins, 3, 10)
    assert bins == [Bin(3, 10)]


def test_append_safe_overflow_puts_full_bins_last():
    bins = [Bin(1, 1)]
    append_safe(bins, 2, 2 * MAXN + 5)
    assert bins == [Bin(1, 1), Bin(2, 5), Bin(2, MAXN), Bin(2, MAXN)]
    assert n_sum(bins) == 1 + 2 * MAXN + 5


def test_append_safe_exact_multiple():
    bins = []
    append_safe(bins, 0, 2 * MAXN)
    assert bins == [Bin(0, MAXN), Bin(0, MAXN)]


@pytest.mark.parametrize(
    "w,exp",
    [
        (0, B10),
        (10, B10),
        (1, B10.replace(" ", "\n")),
        (2, "0:1 1:1\n2:1 3:1\n4:1 5:1\n6:1 7:1\n8:1 9:1"),
        (3, "0:1 1:1 2:1\n3:1 4:1 5:1\n6:1 7:1 8:1\n9:1"),
        (9, "0:1 1:1 2:1 3:1 4:1 5:1 6:1 7:1 8:1\n9:1"),
    ],
)
def test_format_bins(w, exp):
    assert format_bins(parse_bins(B10), w) == exp


def test_format_bins_demo():
    bins = [Bin(i, 1) for i in range(DEFAULT_BIN_PER_LINE * 2 + 1)]
    lines = format_bins(bins).split("\n")
    assert lines == [
        "0:1 1:1 2:1 3:1 4:1 5:1 6:1 7:1 8:1 9:1 10:1 11:1 12:1 13:1 14:1 15:1 16:1 17:1 18:1 19:1 20:1 21:1 22:1 23:1 24:1 25:1 26:1 27:1 28:1 29:1 30:1 31:1",
        "32:1 33:1 34:1 35:1 36:1 37:1 38:1 39:1 40:1 41:1 42:1 43:1 44:1 45:1 46:1 47:1 48:1 49:1 50:1 51:1 52:1 53:1 54:1 55:1 56:1 57:1 58:1 59:1 60:1 61:1 62:1 63:1",
        "64:1",
    ]


def test_format_empty():
    assert format_bins([]) == ""
    assert n_sum([]) == 0