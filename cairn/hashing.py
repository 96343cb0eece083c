"""Hash combination helper."""

_MASK = (1 << 64) - 1


def hash_combine(lhs: int, rhs: int) -> int:
    """Mix ``rhs`` into ``lhs`` and return a 64-bit result."""
    lhs &= _MASK
    rhs &= _MASK
    mixed = (rhs + 0x9E3779B9 + ((lhs << 6) & _MASK) + (lhs >> 2)) & _MASK
    return lhs ^ mixed