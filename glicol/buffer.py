"""Fixed-size sample buffers that the audio graph processes block by block."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Optional, Union, overload


class Buffer:
    """A block of samples whose length never changes after creation."""

    __slots__ = ("_data",)

    def __init__(self, size: int, data: Optional[Iterable[float]] = None) -> None:
        if size < 0:
            raise ValueError(f"buffer size must not be negative, got {size}")
        if data is None:
            self._data = [0.0] * size
        else:
            values = [float(value) for value in data]
            if len(values) != size:
                raise ValueError(
                    f"expected {size} samples, got {len(values)}"
                )
            self._data = values

    def silence(self) -> None:
        """Write silence to the whole buffer."""
        self._data[:] = [0.0] * len(self._data)

    def copy_from(self, data: Iterable[float]) -> None:
        """Overwrite every sample; the source must hold exactly as many samples."""
        values = [float(value) for value in data]
        if len(values) != len(self._data):
            raise ValueError(
                f"cannot copy {len(values)} samples into a buffer of {len(self._data)}"
            )
        self._data[:] = values

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[float]:
        return iter(self._data)

    @overload
    def __getitem__(self, index: int) -> float: ...

    @overload
    def __getitem__(self, index: slice) -> list[float]: ...

    def __getitem__(self, index: Union[int, slice]):
        return self._data[index]

    def __setitem__(self, index: Union[int, slice], value) -> None:
        if isinstance(index, slice):
            updated = list(self._data)
            updated[index] = [float(v) for v in value]
            if len(updated) != len(self._data):
                raise ValueError("assignment would change the buffer length")
            self._data[:] = updated
        else:
            self._data[index] = float(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Buffer):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return repr(self._data)