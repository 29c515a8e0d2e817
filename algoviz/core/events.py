import struct
from typing import Iterator, List, Sequence

from algoviz.core.elements import MAX_CUSTOM_MAGNITUDE, Number, SortingStep, StepType

MAGIC = b"STEPLOG"

# Step Types
EVT_COMPARE = 0x01
EVT_SWAP = 0x02
EVT_SET_VALUE = 0x03
EVT_SET_SORTED = 0x04
EVT_COMPLETE = 0x05

TYPE_CODES = {
    StepType.COMPARE: EVT_COMPARE,
    StepType.SWAP: EVT_SWAP,
    StepType.SET_VALUE: EVT_SET_VALUE,
    StepType.SET_SORTED: EVT_SET_SORTED,
    StepType.COMPLETE: EVT_COMPLETE,
}
STEP_TYPES = {code: step_type for step_type, code in TYPE_CODES.items()}


def pack_value(value: Number) -> bytes:
    """Packs one value as a big-endian double, refusing values a double cannot hold exactly."""
    if isinstance(value, int) and abs(value) > MAX_CUSTOM_MAGNITUDE:
        raise ValueError(f"Value {value} is too large for a step log")
    try:
        return struct.pack(">d", value)
    except (struct.error, OverflowError):
        raise ValueError(f"Value {value!r} cannot be stored in a step log") from None


class StepLogWriter:
    """
    Records a sorting run as a binary log. log_step() has the step callback
    signature, so the writer can be chained after the board.
    Messages are not stored.
    """
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "wb")
        self.count = 0

    def write_header(self, values: Sequence[Number]):
        # Header: Magic "STEPLOG" + Length (4b) + one double per initial value
        packed = b"".join(pack_value(v) for v in values)
        self.file.write(MAGIC)
        self.file.write(struct.pack(">I", len(values)))
        self.file.write(packed)

    def log_step(self, step: SortingStep):
        # 1 byte type + 2 byte count + 2 bytes per index + 1 byte value flag (+ 8 byte value)
        # Arrays are capped well below 65535 elements, so 'H' is enough for indices.
        n = len(step.indices)
        data = struct.pack(f">BH{n}H", TYPE_CODES[step.type], n, *step.indices)
        if step.value is None:
            data += struct.pack(">B", 0)
        else:
            data += struct.pack(">B", 1) + pack_value(step.value)
        self.file.write(data)
        self.count += 1

    def close(self):
        if self.file:
            self.file.close()
            self.file = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class StepLogReader:
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "rb")
        self.values: List[float] = []

    def _read(self, size: int) -> bytes:
        data = self.file.read(size)
        if len(data) != size:
            raise ValueError(f"Truncated step log {self.filename}")
        return data

    def read_header(self) -> List[float]:
        magic = self.file.read(len(MAGIC))
        if magic != MAGIC:
            raise ValueError("Invalid step log file")
        (length,) = struct.unpack(">I", self._read(4))
        self.values = list(struct.unpack(f">{length}d", self._read(8 * length)))
        return self.values

    def stream_steps(self) -> Iterator[SortingStep]:
        while True:
            type_byte = self.file.read(1)
            if not type_byte:
                break

            type_code = ord(type_byte)
            if type_code not in STEP_TYPES:
                raise ValueError(f"Unknown step type 0x{type_code:02x} in {self.filename}")

            (n,) = struct.unpack(">H", self._read(2))
            indices = struct.unpack(f">{n}H", self._read(2 * n))
            has_value = ord(self._read(1))
            value = None
            if has_value:
                (value,) = struct.unpack(">d", self._read(8))

            yield SortingStep(STEP_TYPES[type_code], tuple(indices), value)

    def close(self):
        if self.file:
            self.file.close()
            self.file = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
