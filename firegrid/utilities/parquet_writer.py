import os
import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq
from typing import List


class ParquetWriter:
    """Writes batches of log entries to numbered parquet part files."""

    def __init__(self, folder: str):
        self.folder = folder
        os.makedirs(folder, exist_ok=True)
        self.counter = 0

    def write_batch(self, entries: List):
        if not entries:
            return
        os.makedirs(self.folder, exist_ok=True)

        df = pd.DataFrame([entry.to_dict() for entry in entries])
        file_path = os.path.join(self.folder, f"part-{self.counter:05d}.parquet")
        self.counter += 1

        table = pa.Table.from_pandas(df, preserve_index=False)
        pq.write_table(table, file_path, compression='snappy')
