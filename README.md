# ethrpc_types

Typed Python models for the data exchanged with an Ethereum node over JSON-RPC:
blocks, transactions, receipts, logs and filters, fee history, proofs, sync
state, mining work, signed data, and OpenEthereum (Parity) trace, peer and
pending-transaction structures.

Most models read the JSON a node sends with a `from_json` class method and
write the JSON a node expects with `to_json`. Quantities are `0x`-prefixed hex
strings without leading zeros; hashes and addresses are fixed-width byte
values. Malformed input raises `ethrpc_types.primitives.DecodeError`, a
subclass of `ValueError`.

The package needs only the standard library.

## Installation

```
pip install ethrpc_types
```

## Modules

| Module | Contents |
| --- | --- |
| `primitives` | `H64`, `H128`, `H160`, `H256`, `H512`, `H520`, `H2048` (all `FixedHash`), `Bytes`, `BytesArray`, `encode_quantity`, `decode_quantity`, `uint_from_bytes`, `DecodeError` |
| `block` | `Block`, `BlockHeader`, `BlockTag`, `encode_block_number`, `decode_block_number`, `encode_block_id` |
| `log` | `Log`, `Filter`, `FilterBuilder`, `TopicFilter` |
| `fee_history` | `FeeHistory` |
| `proof` | `Proof`, `StorageProof` |
| `work` | `Work` |
| `transaction` | `Transaction`, `Receipt`, `RawTransaction`, `AccessListItem`, `decode_access_list`, `encode_access_list` |
| `transaction_id` | `TransactionId` |
| `transaction_request` | `CallRequest`, `CallRequestBuilder`, `TransactionRequest`, `TransactionRequestBuilder`, `TransactionCondition`, `ConditionKind` |
| `signed` | `SignedData`, `SignedTransaction`, `TransactionParameters` |
| `recovery` | `Recovery`, `RecoveryMessage`, `ParseSignatureError` |
| `sync_state` | `SyncInfo`, `parse_sync_state`, `dump_sync_state` |
| `parity_peers` | `ParityPeerType`, `ParityPeerInfo`, `PeerNetworkInfo`, `PeerProtocolsInfo`, `EthProtocolInfo`, `PipProtocolInfo` |
| `parity_pending_transaction` | `ParityPendingTransactionFilter`, its builder, `FilterCondition`, `Comparison`, `ToFilter` |
| `trace_filtering` | `Trace`, `TraceFilter`, `TraceFilterBuilder`, `Call`, `Create`, `Suicide`, `Reward`, `CallResult`, `CreateResult`, `ActionType`, `CallType`, `RewardType`, `parse_action`, `parse_result`, `dump_result` |
| `traces` | `BlockTrace`, `TransactionTrace`, `VMTrace`, `VMOperation`, `VMExecutedOperation`, `MemoryDiff`, `StorageDiff`, `StateDiff`, `AccountDiff`, `Diff`, `DiffKind`, `TraceType` |

## Primitives

```python
from ethrpc_types.primitives import H160, Bytes, encode_quantity, decode_quantity

addr = H160.from_low_u64_be(5)
addr.to_hex()                       # '0x0000000000000000000000000000000000000005'
encode_quantity(256)                # '0x100'
decode_quantity("0x100", 256)       # 256
decode_quantity("10")               # 10 (plain decimal is accepted too)
Bytes.from_hex("0x010203").to_hex() # '0x010203'
```

## Blocks and block numbers

```python
from ethrpc_types.block import Block, BlockTag, encode_block_number, decode_block_number

encode_block_number(BlockTag.LATEST)   # 'latest'
encode_block_number(100)               # '0x64'
decode_block_number("0x64")            # 100
decode_block_number("64")              # DecodeError: invalid block number: missing 0x prefix

block = Block.from_json(response, parse_transaction=lambda tx: tx)
```

Without `parse_transaction`, the block's transactions are kept as the raw JSON
values. A missing or null `miner` is read as the zero address.

## Building requests and filters

Builders are immutable: every method returns a new builder, and `build()`
returns the result.

```python
from ethrpc_types.primitives import H160
from ethrpc_types.transaction_request import CallRequest

request = (
    CallRequest.builder()
    .to(H160.from_low_u64_be(5))
    .gas(21_000)
    .value(5_000_000)
    .build()
)
request.to_json()
# {'to': '0x0000000000000000000000000000000000000005', 'gas': '0x5208', 'value': '0x4c4b40'}
```

Log filters are built with `ethrpc_types.log.FilterBuilder` (setting a block
hash clears a block range and the other way round), trace filters with
`ethrpc_types.trace_filtering.TraceFilterBuilder`, and pending transaction
filters with `ParityPendingTransactionFilter.builder()`.

## Sync state

```python
from ethrpc_types.sync_state import parse_sync_state

parse_sync_state(False)   # None: the node is not syncing
parse_sync_state({"startingBlock": "0x0", "currentBlock": "0x42", "highestBlock": "0x9001"})
# SyncInfo(starting_block=0, current_block=66, highest_block=36865)
```

Both the `eth_syncing` form and the subscription form
(`{"syncing": ..., "status": {...}}`) are accepted.

## Signatures

`Recovery.from_raw_signature(message, signature)` splits a 65-byte signature
into `r`, `s` and `v`; `recovery_id()` maps `v` to 0 or 1 (or `None` when it
is invalid), and `as_signature()` returns the 64-byte `r || s` with that id.
Signatures of the wrong length raise `ParseSignatureError`.

## What this package does not do

It only models and encodes data. It does not connect to a node or send
requests, and it does not sign messages, hash them or recover public keys
from signatures.

## Running the tests

```
pip install ethrpc_types[test]
pytest
```