import os
import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq
from typing import List


class ParquetWriter:
    """Writes batches of log entries as numbered parquet part files.

    Each non-empty batch becomes ``part-NNNNN.parquet`` in ``folder``. The
    entry dataclass passed as ``schema`` fixes the column order, so empty
    fields never reorder the written table.
    """
    def __init__(self, folder: str, schema):
        self.folder = folder
        self.schema = schema
        self.columns = list(schema.__dataclass_fields__)
        os.makedirs(folder, exist_ok=True)
        self.counter = 0

    def write_batch(self, entries: List) -> str:
        if not entries:
            return None
        if not os.path.exists(self.folder):
            os.makedirs(self.folder)

        df = pd.DataFrame([entry.to_dict() for entry in entries], columns=self.columns)
        file_path = os.path.join(self.folder, f"part-{self.counter:05d}.parquet")
        self.counter += 1

        table = pa.Table.from_pandas(df, preserve_index=False)
        pq.write_table(table, file_path, compression='brotli')

        return file_path
