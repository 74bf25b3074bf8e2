"""Short key generation for the link registry."""

import string


class KeyGenerator:
    """Derive short keys from the ledger sequence and timestamp.

    The scheme is deterministic: the same sequence, timestamp and attempt
    always produce the same key. It is not meant to be unguessable.
    """

    # Lowercase, then uppercase, then digits
    ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
    KEY_LENGTH = 7
    U64_MASK = (1 << 64) - 1

    def seed(self, sequence: int, timestamp: int, attempt: int = 0) -> int:
        """Combine the inputs with wrapping unsigned 64-bit addition.

        Args:
            sequence: Current ledger sequence number
            timestamp: Current ledger timestamp
            attempt: Collision retry number (0 for the first try)

        Returns:
            Seed in the range [0, 2**64)
        """
        return (sequence + timestamp + attempt) & self.U64_MASK

    def generate(self, sequence: int, timestamp: int, attempt: int = 0) -> str:
        """Generate a 7-character key.

        Digits are emitted least-significant first, so the key for seed 1 is
        ``"baaaaaa"``.

        Args:
            sequence: Current ledger sequence number
            timestamp: Current ledger timestamp
            attempt: Collision retry number (0 for the first try)

        Returns:
            Short key drawn from ALPHABET
        """
        return self.encode(self.seed(sequence, timestamp, attempt))

    def encode(self, num: int) -> str:
        """Encode the low base-62 digits of a seed."""
        base = len(self.ALPHABET)
        chars = []

        for _ in range(self.KEY_LENGTH):
            chars.append(self.ALPHABET[num % base])
            num = num // base

        return ''.join(chars)

    @classmethod
    def is_generated_format(cls, key: str) -> bool:
        """Check whether a key could have come from this generator."""
        return len(key) == cls.KEY_LENGTH and all(c in cls.ALPHABET for c in key)
