"""
Genetic code decoding - a 32-bit owl genome split into a colour and four 2-bit traits.
"""

from .codec import genetic_code_bytes
from .schema import TraitProfile

TRAIT_ORDER = ("eyes", "wings", "chest", "tail")


def decode_traits(code: int) -> TraitProfile:
    """
    Decode a genetic code.

    Bytes 0-2 of the big-endian form are the RGB colour. Byte 3 is read as
    eight binary digits split into four 2-bit groups, most significant first,
    assigned to eyes, wings, chest and tail.
    """
    raw = genetic_code_bytes(code)
    bits = format(raw[3], "08b")
    traits = {name: int(bits[i * 2:i * 2 + 2], 2) for i, name in enumerate(TRAIT_ORDER)}
    return TraitProfile(color=raw[:3], **traits)
