# quantsketch

Mergeable quantile sketches with a bounded relative error.

Values are mapped onto a logarithmic key space (base γ = 1 + 2ε, with
ε = 1/128 by default). Each key holds a count, so a sketch stays small no
matter how many values go in, and a quantile can be read back with about
1% relative error. Two sketches built with the same configuration can be
merged.

The package has no dependencies outside the standard library.

## Installation

```
pip install quantsketch
```

To run the test suite:

```
pip install "quantsketch[test]"
pytest
```

## Usage

### Sketches

```python
from quantsketch.config import default_config
from quantsketch.sketch import Sketch

c = default_config()

s = Sketch()
s.insert_many(c, [float(v) for v in range(1, 101)])

print(s.quantile(c, 0.5))    # about 50
print(s.quantile(c, 0.99))   # about 99
print(s.basic)               # min=1.0000 max=100.0000 avg=50.5000 sum=5050.0000 cnt=100
```

`quantile(c, q)` returns the minimum for `q <= 0`, the maximum for
`q >= 1`, and 0 for an empty sketch.

Merge one sketch into another without changing the second:

```python
a, b = Sketch(), Sketch()
a.insert(c, 1.0, 2.0, 3.0)
b.insert(c, 4.0, 5.0)
a.merge(c, b)
```

Other `Sketch` methods:

- `copy()` returns a deep copy; `copy_to(dst)` copies into an existing sketch.
- `equals(o)` compares summary, count and bins exactly;
  `approx_equals(o, e)` allows a difference of up to `e` in sum and average.
- `reset()` empties the sketch.
- `raw_bins()` returns the count and the bins as one line of `<key>:<count>` pairs.
- `mem_size()` returns an estimate of `(used, allocated)` bytes.
- `render(c)` (and `str(sketch)`) gives a readable dump of the bins,
  memory use and the 1st, 50th, 75th, 90th, 95th and 99th percentiles.

The sketch's bins live in `sketch.store`, a `quantsketch.store.SparseStore`;
`store.cols()` returns the keys and counts as two parallel lists.

### Configuration

```python
from quantsketch.config import Config

c = Config(eps=1 / 64, min_value=1e-6, bin_limit=1024)
```

Passing 0 for any argument selects its default (ε = 1/128, minimum 1e-9,
4096 bins). A negative `bin_limit`, an `eps` outside [0, 1] or a negative
`min_value` raises `ValueError`. When a store holds more than `bin_limit`
keys, the lowest bins are folded into the lowest kept one.

`c.key(v)` maps a value to its key and `c.f64(k)` maps a key back to the
lower bound of its bucket. Values smaller in magnitude than the configured
minimum share key 0; values beyond the largest key map to the infinity keys
(see `quantsketch.key.inf_key`). `c.max_count()` is the number of values the
configured bin limit can hold.

### Insert-optimised agent

`Agent` buffers inserts and flushes them in batches of 512. It also
supports sample rates and spreading a count over a value range:

```python
from quantsketch.agent import Agent

agent = Agent()
agent.insert(10.0, 1.0)
agent.insert(20.0, 0.5)                   # counts as 2 samples
agent.insert_interpolate(0.0, 100.0, 50)  # 50 samples spread over [0, 100]
sketch = agent.finish()                   # a copy, or None when empty
```

A sample rate outside (0, 1] is treated as 1.

### Summaries

`quantsketch.summary.Summary` keeps min, max, sum, average and count
incrementally, with `insert`, `insert_n`, `merge` and `reset`.
`quantsketch.equal.check_equal(a, e)` compares two summaries, allowing a
difference of up to 256 units of least precision in the float fields, and
raises `SummaryMismatchError` when they differ. `ulp_distance(a, b)` gives
that distance for two floats.

### Bins

`quantsketch.bins.Bin` is a key with a count of at most 65535;
`append_safe` splits larger counts over several bins with the same key, and
`format_bins(bins, max_per_line)` renders bins as `<key>:<count>` pairs,
32 per line by default.

## What it does not do

The package works entirely in memory. It has no serialised or wire format
for sketches, no conversion from other sketch or histogram formats, and no
command-line tool.