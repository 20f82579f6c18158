"""
Example 01: Chaining Managed Generators

Each stage below is a @generator body that takes the handle of the stage
before it. Nothing runs until the last stage is resumed, and releasing the
last stage unwinds every stage upstream of it.

Stages: fake orders (Faker) -> chunks -> pandas DataFrames -> Parquet (pyarrow)
"""

import sys
import tempfile
from pathlib import Path
from typing import Dict, Iterator, List

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq
from faker import Faker

from managed_generators import GeneratorHandle, generator


@generator
def fake_orders(count: int, seed: int = 0) -> Iterator[Dict]:
    """Produce ``count`` orders, one per resume."""
    fake = Faker()
    fake.seed_instance(seed)
    for order_id in range(count):
        yield {
            "order_id": order_id,
            "customer": fake.name(),
            "country": fake.country_code(),
            "total": fake.random_int(min=100, max=20_000) / 100,
        }


@generator
def chunks(source: GeneratorHandle[Dict], size: int) -> Iterator[List[Dict]]:
    """Group the values of ``source`` into lists of at most ``size``."""
    with source:
        chunk: List[Dict] = []
        while source.resume():
            chunk.append(source.get_value())
            if len(chunk) == size:
                yield chunk
                chunk = []
        if chunk:
            yield chunk


@generator
def frames(source: GeneratorHandle[List[Dict]]) -> Iterator[pd.DataFrame]:
    """Turn every chunk into a DataFrame tagged with its chunk number."""
    with source:
        for number, chunk in enumerate(source):
            frame = pd.DataFrame.from_records(chunk)
            frame["total"] = frame["total"].astype("float32")
            frame["chunk"] = number
            yield frame


def save(source: GeneratorHandle[pd.DataFrame], path: Path) -> int:
    """Write every frame of ``source`` into one Parquet file; return the row count."""
    rows = 0
    writer = None
    try:
        for frame in source:
            table = pa.Table.from_pandas(frame, preserve_index=False)
            if writer is None:
                writer = pq.ParquetWriter(str(path), table.schema)
            writer.write_table(table)
            rows += table.num_rows
    finally:
        if writer is not None:
            writer.close()
    return rows


def run(count: int, size: int, path: Path) -> int:
    return save(frames(chunks(fake_orders(count), size)), path)


if __name__ == "__main__":
    count = int(sys.argv[1]) if len(sys.argv) > 1 else 1_000

    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "orders.parquet"
        rows = run(count, 100, path)
        print(f"Wrote {rows} rows to {path}")
        print(pq.read_table(path).to_pandas().groupby("chunk").size())

    print("\nOnly the first chunk is ever built when the consumer stops early:")
    upstream = fake_orders(count)
    watcher = upstream.get_weak_handle()
    stage = chunks(upstream, 100)
    del upstream
    stage.resume()
    print(f"  orders produced: {watcher.pin().statistics.values_produced}")
    stage.release()
    print(f"  upstream released: {watcher.expired()}")
