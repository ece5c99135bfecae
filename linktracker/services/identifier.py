"""
Link identifier generation.

Ids are short hex strings drawn from the `secrets` CSPRNG. They are short
enough that collisions are possible, so the store rejects duplicates and
the link service retries with a fresh id.
"""

import secrets

DEFAULT_ID_LENGTH = 8


class IdentifierGenerator:
    """Produces short random link identifiers."""
    
    def __init__(self, length: int = DEFAULT_ID_LENGTH):
        if length < 1:
            raise ValueError("Identifier length must be positive")
        self.length = length
    
    def generate(self) -> str:
        # token_hex(n) yields 2n characters
        return secrets.token_hex((self.length + 1) // 2)[:self.length]
