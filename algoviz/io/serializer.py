import struct
import json
import zlib
from typing import Optional, Dict, Any, Tuple
from algoviz.core.grid import PathGrid

CELL_WALL = 0b001
CELL_START = 0b010
CELL_END = 0b100


class GridSerializer:
    MAGIC = b"GRID"
    VERSION = 1

    # Flags
    FLAG_COMPRESSED = 1

    @staticmethod
    def encode_cells(grid: PathGrid) -> bytes:
        data = bytearray(grid.rows * grid.cols)
        for i, node in enumerate(grid.nodes):
            if node.is_wall:
                data[i] |= CELL_WALL
            if node.is_start:
                data[i] |= CELL_START
            if node.is_end:
                data[i] |= CELL_END
        return bytes(data)

    @staticmethod
    def save(grid: PathGrid, filepath: str, meta: Dict[str, Any] = None, compress=False):
        """
        Saves the grid layout (walls, start, end) to a binary file.
        Search state is not saved.
        Format:
        - MAGIC (4 bytes)
        - VERSION (1 byte)
        - FLAGS (1 byte)
        - ROWS (4 bytes)
        - COLS (4 bytes)
        - META_LEN (2 bytes)
        - META_JSON (META_LEN bytes)
        - DATA_LEN (4 bytes)
        - DATA (one byte per cell, row-major, optionally zlib compressed)
        """
        if meta is None:
            meta = {}

        flags = 0
        if compress:
            flags |= GridSerializer.FLAG_COMPRESSED

        meta_bytes = json.dumps(meta).encode('utf-8')

        data = GridSerializer.encode_cells(grid)
        if compress:
            data = zlib.compress(data)

        with open(filepath, "wb") as f:
            f.write(GridSerializer.MAGIC)
            f.write(struct.pack("B", GridSerializer.VERSION))
            f.write(struct.pack("B", flags))
            f.write(struct.pack("II", grid.rows, grid.cols))
            f.write(struct.pack("H", len(meta_bytes)))
            f.write(meta_bytes)
            f.write(struct.pack("I", len(data)))
            f.write(data)

    @staticmethod
    def _read(f, size: int) -> bytes:
        data = f.read(size)
        if len(data) != size:
            raise ValueError(f"Truncated grid file {f.name}")
        return data

    @staticmethod
    def load(filepath: str) -> Tuple[PathGrid, Dict[str, Any]]:
        read = GridSerializer._read
        with open(filepath, "rb") as f:
            magic = f.read(4)
            if magic != GridSerializer.MAGIC:
                raise ValueError("Invalid file format")

            version = struct.unpack("B", read(f, 1))[0]
            if version != GridSerializer.VERSION:
                raise ValueError(f"Unsupported grid file version {version}")
            flags = struct.unpack("B", read(f, 1))[0]
            rows, cols = struct.unpack("II", read(f, 8))
            meta_len = struct.unpack("H", read(f, 2))[0]
            meta = json.loads(read(f, meta_len).decode('utf-8'))

            data_len = struct.unpack("I", read(f, 4))[0]
            data = read(f, data_len)
            if flags & GridSerializer.FLAG_COMPRESSED:
                try:
                    data = zlib.decompress(data)
                except zlib.error as e:
                    raise ValueError(f"Corrupt cell data in {filepath}: {e}") from None

        if len(data) != rows * cols:
            raise ValueError(f"Cell data has {len(data)} bytes, expected {rows * cols}")

        grid = PathGrid(rows, cols)
        for i, cell in enumerate(data):
            row, col = divmod(i, cols)
            if cell & CELL_START:
                grid.set_start(row, col)
            elif cell & CELL_END:
                grid.set_end(row, col)
            elif cell & CELL_WALL:
                grid.set_wall(row, col)
        return grid, meta
