# fieldmat

Matrices whose entries live in a prime field, with the fixed-point encoding
used for secret-sharing based machine learning. A real number `x` is stored
as `floor(x * ie)` modulo a prime, where `ie == 2 ** decimal_places`, and
decoded back to a signed float. The package has no dependencies beyond the
standard library.

## Install

```
pip install fieldmat
```

For the test suite:

```
pip install "fieldmat[test]"
pytest
```

## Modules

### `fieldmat.field`

- `FieldConfig(modulus=2**61 - 1, decimal_places=20)` – a frozen dataclass.
  The modulus must be congruent to 3 modulo 4 and the scale `ie` must fit
  below `modulus // 2`, otherwise `ValueError` is raised. Properties: `ie`,
  `half`, `inv2`, `sqrt_inv_exponent`. Methods:
  - `residual(value)` – reduce onto `[0, modulus)`;
  - `to_signed(value)` – map onto the symmetric range around zero;
  - `inverse(value)` – field inverse, `ZeroDivisionError` for zero;
  - `sqrt(value)` – field square root, `ValueError` for a non-residue;
  - `encode(value)` / `decode(value)` – float to fixed point and back.
- `GaussianNoise(rng=random.Random())` – a Box–Muller sampler;
  `sample(mu, sigma)` returns one normal sample and keeps the second value
  of each pair for the next call.

### `fieldmat.matrix`

`Order` chooses the storage layout (`COL_MAJOR`, `ROW_MAJOR`).
`Mat(rows, cols, fill=0, config=None, order=Order.COL_MAJOR)` is a dense
matrix of field elements.

- Building and reading: `Mat.from_rows`, `to_rows`, `m[i, j]` get and set,
  `shape`, `size`, `values()` (storage order), `copy()`, `row(i)`,
  `set_row(i, values)`, `row_range(start, end)` (wraps when `start > end`),
  `resize(rows, cols)`, `to_floats()` (decoded, column by column),
  `format(signed=False)` (text dump).
- Operators: `+` and `-` with a matrix or an integer, `+=` with a matrix,
  `*` as matrix product or scalar product, `/` (truncating division,
  element-wise with a matrix or by a scalar), `<<`, `>>` (signed shift),
  `&`, and `==`. Matrices of different layouts combine by position.
- Element-wise helpers: `transpose`, `one_minus`, `one_minus_ie`, `dot`,
  `argmax`, `equal` (within one half in fixed point), `eq`, `signed`, `sqrt`,
  `inverse`, `sqrt_inv`, `divide_by_2`, `not_eqz`, `get_bit`, `opposite`,
  `to_one_hot(classes=10)`, `mod`.
- Counting: `count_sum`, `count(value=1)`, `count_ne`, `count_not_eqz`,
  `has_zero`.
- In place: `fill_from`, `fill_value`, `residual`, `reorder` (switch layout,
  keep contents), `transorder` (transpose by reinterpreting storage),
  `clear`.

Out-of-range positions raise `IndexError`; mismatched shapes raise
`ValueError`.

### `fieldmat.activations`

Functions taking and returning a `Mat` of fixed-point values: `relu`,
`d_relu`, `sigmoid` and `cross_entropy` (piecewise linear: 0 below -1/2,
`x + 1/2` in between, 1 above 1/2), `hard_tanh`, `tanh` (integer
polynomial), `chebyshev_tanh`, `raw_tanh` (exact `math.tanh`), `ltz`
(`ie` for negative elements) and `smooth_level(mat, max_level)`.

### `fieldmat.stacking`

`concat(res, a, b)` and `reconcat(res, a, b, into_a, into_b)` stack rows;
`hstack(res, a, b)` and `re_hstack(res, a, b, into_a, into_b)` join and split
storage; `fill_nonzero(a, a_src, b, b_src)` copies the non-zero values of
`a_src` with their partners from `b_src` and returns whether `a` was filled;
`merge(mats)` joins matrices with equal row counts side by side.

### `fieldmat.sharing`

`poly_eval(coefficients, x)` (lowest coefficient first);
`secret_share(mat, parties, threshold, rng=None)` returns one share matrix
per party, party `k` receiving the polynomial's value at `k + 2`;
`truncated_normal(mat, mean, stddev, noise=None)` and
`random_neg(mat, rng=None)` fill a matrix with random values.

### `fieldmat.wire`

A binary form – three little-endian 32-bit integers (rows, cols, order)
followed by each element as a signed 64-bit integer – through `to_bytes`,
`from_bytes(data, config=None)`, `add_from_bytes(mat, data)` and
`encoded_length(mat)`; and a text form through `to_text`.

## Example

```python
from fieldmat.field import FieldConfig
from fieldmat.matrix import Mat

config = FieldConfig()
a = Mat.from_rows([[config.encode(1.5), config.encode(-2.0)]], config)
b = a + a
print(b.to_floats())   # [3.0, -4.0]

shares_source = Mat.from_rows([[7, 11]], config)
```

## What it does not do

This is a library of local matrix arithmetic. It does not run a
multi-party protocol: there is no networking between parties, no share
reconstruction, and no command-line program. `secret_share` only produces
the shares; sending them anywhere and combining them again is left to the
caller.