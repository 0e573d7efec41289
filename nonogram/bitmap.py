WORD_BITS = 64
MAX_SIZE = WORD_BITS

_WORD_MASK = (1 << WORD_BITS) - 1


class Bitmap:
    """Immutable fixed-width bit vector, one bit per cell of a line."""

    __slots__ = ("_data",)

    def __init__(self, data: int = 0):
        self._data = data & _WORD_MASK

    @classmethod
    def ones(cls, lo: int, hi: int) -> "Bitmap":
        """Run of set bits over the half-open range [lo, hi)."""
        assert 0 <= lo <= hi <= WORD_BITS
        return cls(((1 << (hi - lo)) - 1) << lo)

    @property
    def is_empty(self) -> bool:
        return self._data == 0

    def set(self, i: int, value: bool = True) -> "Bitmap":
        mask = 1 << i
        return Bitmap(self._data | mask if value else self._data & ~mask)

    def __getitem__(self, i: int) -> bool:
        return (self._data >> i) & 1 == 1

    def __and__(self, other: "Bitmap") -> "Bitmap":
        return Bitmap(self._data & other._data)

    def __or__(self, other: "Bitmap") -> "Bitmap":
        return Bitmap(self._data | other._data)

    def __xor__(self, other: "Bitmap") -> "Bitmap":
        return Bitmap(self._data ^ other._data)

    def __invert__(self) -> "Bitmap":
        return Bitmap(~self._data)

    def __bool__(self) -> bool:
        return self._data != 0

    def __int__(self) -> int:
        return self._data

    def __eq__(self, other) -> bool:
        if not isinstance(other, Bitmap):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        return hash(self._data)

    def indexes(self) -> list[int]:
        result = []
        data = self._data
        while data:
            low = data & -data
            result.append(low.bit_length() - 1)
            data ^= low
        return result

    def describe(self, count: int = 1) -> str:
        """Bits from position 0 upwards, padded with zeros to at least `count` digits."""
        if self.is_empty and count <= 1:
            return "0"
        bits = []
        data = self._data
        while data or len(bits) < count:
            bits.append(str(data & 1))
            data >>= 1
        return "".join(bits)

    def __repr__(self) -> str:
        return f"Bitmap({self.describe()})"


EMPTY_BITMAP = Bitmap()
