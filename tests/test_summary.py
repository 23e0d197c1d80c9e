import random

import pytest

from quantsketch.equal import check_equal
from quantsketch.summary import Summary

CASES = [
    (-1.0, Summary(min=-1, max=-1, sum=-1, avg=-1, cnt=1)),
    (-2.0, Summary(min=-2, max=-1, sum=-3, avg=-1.5, cnt=2)),
    (0.0, Summary(min=-2, max=0, sum=-3, avg=-1, cnt=3)),
]


def _full():
    return Summary(min=1, max=2, sum=3, avg=4, cnt=5)


def test_insert_n_matches_repeated_insert():
    rng = random.Random(1234)
    s, exp = Summary(), Summary()
    for _ in range(300):
        v = float(int(rng.random() * 10000))
        n = rng.randint(1, 1000)
        s.insert_n(v, float(n))
        for _ in range(n):
            exp.insert(v)
    check_equal(s, exp)
    assert s.cnt == exp.cnt


def test_string():
    assert str(_full()) == "min=1.0000 max=2.0000 avg=4.0000 sum=3.0000 cnt=5"


def test_reset():
    s = _full()
    s.reset()
    assert s == Summary()


def test_observe():
    s = Summary()
    for v, exp in CASES:
        s.insert(v)
        assert s == exp


def test_merge():
    s = Summary()
    for v, exp in CASES:
        o = Summary()
        o.insert(v)
        s.merge(o)
        assert s == exp


def test_merge_empty():
    s = _full()
    s.merge(Summary())
    assert s == _full()


def test_merge_does_not_mutate_other():
    s = Summary()
    s.insert(3.0)
    o = Summary()
    o.insert(7.0)
    s.merge(o)
    assert o == Summary(min=7, max=7, sum=7, avg=7, cnt=1)
    assert s.cnt == 2


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_quick_observe_and_merge_agree(seed):
    rng = random.Random(seed)
    values = [rng.expovariate(1.0) for _ in range(rng.randrange(1000))]
    observed, merged = Summary(), Summary()
    lo = hi = total = 0.0
    count = 0
    for v in values:
        observed.insert(v)
        other = Summary()
        other.insert(v)
        merged.merge(other)

        if count == 0:
            lo = hi = v
        lo = min(lo, v)
        hi = max(hi, v)
        count += 1
        total += v
        expected = Summary(min=lo, max=hi, sum=total, avg=total / count, cnt=count)

        check_equal(observed, expected)
        check_equal(merged, expected)
    assert observed.cnt == len(values)