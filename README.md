# stellarxdr

A small, dependency-free library for reading Stellar transaction envelopes
encoded in XDR and turning their fields into human-readable text.

It can:

- decode a signature base (network id hash, envelope type, transaction
  details) and walk through its operations one at a time;
- encode raw keys as StrKey strings (`G...`, `M...`, `T...`, `X...`, `P...`);
- format amounts, assets, flags, times and long identifiers the way a
  signing device shows them on its screen.

## Installation

```
pip install stellarxdr
```

## Parsing a transaction

```python
from stellarxdr.transaction import TxContext

context = TxContext()
for operation in context.iter_operations(signature_base):
    print(operation.type, operation.source_account)

print(context.network, context.envelope_type)
print(context.tx_details.fee, context.tx_details.sequence_number)
```

`TxContext.parse_next(data)` parses the next operation only, keeping the
read position between calls. Malformed input raises
`stellarxdr.xdr.XdrError`.

The lower-level pieces are available too: `stellarxdr.xdr.XdrReader` reads
XDR primitives, and functions such as `parse_asset`, `parse_memo` or
`parse_preconditions` decode individual structures;
`stellarxdr.operations.parse_operation` decodes a single operation.

## Encoding keys

```python
from stellarxdr.strkey import encode_ed25519_public_key

encode_ed25519_public_key(bytes(32))
# 'GAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAWHF'
```

Invalid input raises `stellarxdr.strkey.EncodingError`.

## Formatting values

```python
from stellarxdr.formatting import format_amount, format_summary
from stellarxdr.models import Asset, NetworkType

format_amount(10_000_000, Asset.native(), NetworkType.PUBLIC)   # '1 XLM'
format_summary("GABCDEFGHIJKLMNOP", 3, 4)                       # 'GAB..MNOP'
```

Values that cannot be formatted raise `stellarxdr.formatting.FormatError`.

## Running the tests

```
pip install -e ".[test]"
pytest
```