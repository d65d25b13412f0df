# cipherlab.py - Block ciphers and modes of operation from first principles
# Copyright 2026 The cipherlab contributors

# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:

# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.

# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Block ciphers and modes of operation, from first principles.

A CipherContext binds any fixed-block-size cipher to a key, a mode of
operation and a padding scheme.  Here is the textbook CBC example: one block of
plaintext, an all-zero key and an all-zero IV.  Because the plaintext is block
aligned, PKCS#7 adds a whole block of padding.

>>> ctx = CipherContext(Rijndael(), bytes(16), CipherMode.CBC,
...                     PaddingMode.PKCS7, iv=bytes(16))
>>> ctxt = ctx.encrypt_buffer(b"ABCDEFGHIJKLMNOP")
>>> len(ctxt)
48
>>> ctx.decrypt_buffer(ctxt)
b'ABCDEFGHIJKLMNOP'

The same result, computed one block at a time:

>>> aes = Rijndael()
>>> aes.configure_key(bytes(16))
>>> first = aes.encrypt_block(b"ABCDEFGHIJKLMNOP")
>>> ctxt == bytes(16) + first + aes.encrypt_block(xor_blocks(first, b"\\x10" * 16))
True

Every operation also has a streaming form that reads and writes binary file
objects in chunks, and produces exactly the same bytes:

>>> out = io.BytesIO()
>>> ctx.encrypt_stream(io.BytesIO(b"ABCDEFGHIJKLMNOP"), out, chunk_size=5)
48
>>> out.getvalue() == ctxt
True

The module can be used as a library or run as a program:

    python -m cipherlab rand --cipher aes
    python -m cipherlab enc KEY --mode CTR -i plain.txt -o secret.bin
    python -m cipherlab dec KEY --mode CTR -i secret.bin
    python -m cipherlab test

The ciphers here are written to be read, not to resist side channels.  Please
do not rely on this code for actual privacy!

"""

from abc import ABC, abstractmethod
from collections.abc import Container
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager, nullcontext

import argparse
import enum
import errno
import importlib
import io
import logging
import math
import operator
import os
import secrets
import sys
import threading
import typing as t
import unittest

t_wbuf = bytearray | memoryview  # Writable byte buffer
t_buf = bytes | t_wbuf  # Readable byte buffer

DEFAULT_CHUNK_SIZE = 64 * 1024  # Streaming read size, in bytes
CTR_COUNTER_BYTES = 8  # Trailing bytes of a CTR counter block holding the index

####################################################################
###                                               BITS AND BYTES ###


class FixedWordBase:
    "Operations on fixed-size unsigned integers."

    BITS = 0
    POW = 1
    MAX = 0
    BYTES = 0

    def __init_subclass__(cls, /, **kwargs):
        super().__init_subclass__(**kwargs)
        assert cls.__name__.startswith("Word")
        cls.BITS = int(cls.__name__[4:])
        cls.POW = 2**cls.BITS
        cls.MAX = cls.POW - 1
        cls.BYTES = math.ceil(cls.BITS / 8)

    @classmethod
    def assert_range(cls, num: int):
        "Ensure that NUM is in the range of this Word."
        assert 0 <= num < cls.POW, hex(num)

    @classmethod
    def add(cls, fst: int, snd: int) -> int:
        """Add fixed-sized unsigned words with appropriate wrap-around.

        >>> Word8.add(100, 200)
        44

        """
        cls.assert_range(fst)
        cls.assert_range(snd)
        return (fst + snd) & cls.MAX

    @classmethod
    def sub(cls, fst: int, snd: int) -> int:
        """Subtract fixed-sized unsigned words, wrapping below zero.

        >>> Word8.sub(44, 200)
        100

        """
        cls.assert_range(fst)
        cls.assert_range(snd)
        return (fst - snd) & cls.MAX

    @classmethod
    def left_rot(cls, num: int, shift: int) -> int:
        """Bitwise left-rotation of NUM by SHIFT.

        >>> for k in range(0, 9, 2):
        ...    z = Word8.left_rot(0x81, k)
        ...    print(f'{z:08b} {z:02X}')
        10000001 81
        00000110 06
        00011000 18
        01100000 60
        10000001 81

        """
        cls.assert_range(num)
        assert 0 <= shift <= cls.BITS
        num <<= shift
        return (num | num >> cls.BITS) & cls.MAX

    @classmethod
    def right_rot(cls, num: int, shift: int) -> int:
        """Bitwise right-rotation of NUM by SHIFT, the inverse of left_rot.

        >>> hex(Word32.right_rot(Word32.left_rot(0xdeadbeef, 13), 13))
        '0xdeadbeef'

        """
        assert 0 <= shift <= cls.BITS
        return cls.left_rot(num, (cls.BITS - shift) % cls.BITS)

    @classmethod
    def to_bytes(cls, num: int) -> bytes:
        """Pack a word into bytes, in little-endian order.

        >>> Word32.to_bytes(0xa9bfc6d3)
        b'\\xd3\\xc6\\xbf\\xa9'
        """
        cls.assert_range(num)
        return int_to_bytes(num, cls.BYTES)

    @classmethod
    def from_bytes(cls, buf: t_buf) -> int:
        "Unpack a word from bytes, in little-endian order."
        assert len(buf) == cls.BYTES
        return int_from_bytes(buf)

    @classmethod
    def hex_grid(
        cls,
        nums: t.Iterable[int],
        cols: t.Optional[int] = None,
        digits: t.Optional[int] = None,
    ):
        """Neatly display the numbers provided by NUMS, using hexadecimal.  Wrap
        the display into COLS columns.  DIGITS specifies the minimum number of
        hexadecimal digits to print for each number.  The defaults are derived
        from the Word size (aiming for 128 bits per line) but can be overridden.

        >>> Word16.hex_grid(0x9c << i & Word16.MAX for i in range(16))
         009c 0138 0270 04e0 09c0 1380 2700 4e00
         9c00 3800 7000 e000 c000 8000 0000 0000

        """
        if digits is None:
            digits = math.ceil(cls.BITS / 4)
        if cols is None:
            cols = math.ceil(32 / digits)
        i = None
        for i, word in enumerate(nums):
            cls.assert_range(word)
            print(
                f" {word:0{digits}x}", end="\n" if i % cols == cols - 1 else ""
            )
        if i is not None and i % cols != cols - 1:
            print()


class Word8(FixedWordBase):
    "Operations on 8-bit unsigned integers."


class Word16(FixedWordBase):
    "Operations on 16-bit unsigned integers."


class Word32(FixedWordBase):
    "Operations on 32-bit unsigned integers."


class Word64(FixedWordBase):
    "Operations on 64-bit unsigned integers."


def int_from_bytes(buf: t_buf) -> int:
    "Unpack an integer from bytes, in little-endian order."
    return int.from_bytes(buf, byteorder="little")


def int_to_bytes(val: int, nbytes: t.Optional[int] = None) -> bytes:
    "Pack an integer into bytes, in little-endian order."
    if nbytes is None:
        nbytes = math.ceil(val.bit_length() / 8)
    return val.to_bytes(nbytes, byteorder="little")


def xor_blocks(fst: t_buf, snd: t_buf) -> bytes:
    """Merge two equal-sized buffers using XOR.

    >>> xor_blocks(b"\\x0f\\xf0\\x55", b"\\xff\\xff\\x55").hex()
    'f00f00'

    """
    assert len(fst) == len(snd), (len(fst), len(snd))
    return int_to_bytes(int_from_bytes(fst) ^ int_from_bytes(snd), len(fst))


def fastpow(base: int, exp: int, mod=lambda x: x, mul=operator.mul) -> int:
    """Fast exponentiation, with a customizable multiplication operator.

    >>> fastpow(3, 10)
    59049
    >>> [fastpow(2, k, lambda x: x % 10) for k in range(10)]
    [1, 2, 4, 8, 6, 2, 4, 8, 6, 2]
    """
    assert exp >= 0
    result = mod(1)
    while exp > 0:
        if exp & 1:  # Odd: multiply and decrement
            result = mod(mul(result, base))
            exp -= 1
        else:  # Even: square and halve
            base = mod(mul(base, base))
            exp //= 2
    return result


def bin_mul(fst: int, snd: int, add=operator.add, mod=lambda x: x) -> int:
    """The 'peasant' binary multiplication algorithm, with customizable add and
    optional modulus operators.

    >>> bin_mul(0x57, 0x83, operator.xor, xor_mod(0x11B))
    193
    """
    assert fst >= 0
    result = 0
    while fst > 0:
        if fst & 1:
            result = mod(add(result, snd))
        fst = fst >> 1
        snd = mod(snd << 1)
    return result


def xor_mod(mod: int):
    """Reduce a carry-less product by 'subtracting' multiples of MOD using
    XOR, as in polynomial arithmetic over GF(2)."""

    def xor_mod_loop(val: int) -> int:
        mbits = mod.bit_length()
        vbits = val.bit_length()
        while vbits >= mbits:
            val ^= mod << (vbits - mbits)
            vbits = val.bit_length()
        return val

    return xor_mod_loop


####################################################################
###                                                       ERRORS ###


class CipherError(Exception):
    "Base class for every error raised by this module."


class InvalidArgument(CipherError, ValueError):
    "An argument was rejected before any cryptographic work or I/O."


class InvalidKeyLength(InvalidArgument):
    "The key size is not supported by the cipher."


class NotConfigured(CipherError, RuntimeError):
    "A block operation was requested before configure_key."


class UnsupportedMode(CipherError, NotImplementedError):
    "There is no implementation for the requested mode or padding."


class TruncatedCiphertext(CipherError, ValueError):
    "Ciphertext is too short for its IV, or is not a whole number of blocks."


class InvalidPadding(CipherError, ValueError):
    """The final block failed padding validation.  This is also what a wrong
    key or mode usually looks like, since padding is not authenticated."""


class Cancelled(CipherError):
    "A streaming operation noticed its cancel event."


class SourceNotFound(CipherError, FileNotFoundError):
    "The input file does not exist."


class SinkNotWritable(CipherError, PermissionError):
    "The output file could not be opened for writing."


def _coerce(kind: type[enum.Enum], value):
    "Convert VALUE (a member or its string value) to a member of KIND."
    try:
        return kind(value)
    except ValueError:
        raise UnsupportedMode(f"unknown {kind.__name__}: {value!r}") from None


def _check_block_size(block_size: int):
    if not isinstance(block_size, int) or block_size <= 0:
        raise InvalidArgument(f"block size must be positive, not {block_size!r}")


####################################################################
###                                   BLOCK CIPHER CAPABILITY ###


class BlockCipher(ABC):
    """A keyed permutation on fixed-size blocks.  Subclasses provide the key
    schedule and the raw block transforms; this class enforces the contract
    common to all of them: a key must be configured first, and every block
    must be exactly block_size bytes.

    Block operations never mutate the cipher, so one configured instance may
    be shared by several threads.

    >>> des = DES()
    >>> des.encrypt_block(bytes(8))
    Traceback (most recent call last):
    cipherlab.NotConfigured: DES used before configure_key
    >>> des.configure_key(bytes(7))
    Traceback (most recent call last):
    cipherlab.InvalidKeyLength: DES does not accept a 7-byte key

    """

    log = logging.getLogger("BlockCipher")
    block_size: int = 0
    key_sizes: Container[int] = ()

    def __init__(self):
        self._schedule: t.Any = None

    @property
    def name(self) -> str:
        return type(self).__name__

    def configure_key(self, key: t_buf):
        "Expand KEY into round keys, used by all later block operations."
        key = bytes(key)
        if len(key) not in self.key_sizes:
            raise InvalidKeyLength(
                f"{self.name} does not accept a {len(key)}-byte key"
            )
        self._schedule = self._expand_key(key)
        self.log.debug("configured %d-byte key", len(key))

    def encrypt_block(self, block: t_buf) -> bytes:
        "Encrypt exactly one block."
        return self._encipher(self._check_block(block), self._ready())

    def decrypt_block(self, block: t_buf) -> bytes:
        "Decrypt exactly one block."
        return self._decipher(self._check_block(block), self._ready())

    def _ready(self):
        if self._schedule is None:
            raise NotConfigured(f"{self.name} used before configure_key")
        return self._schedule

    def _check_block(self, block: t_buf) -> bytes:
        if len(block) != self.block_size:
            raise InvalidArgument(
                f"{self.name} block must be {self.block_size} bytes,"
                f" not {len(block)}"
            )
        return bytes(block)

    @abstractmethod
    def _expand_key(self, key: bytes):  # pragma: no cover
        ...

    @abstractmethod
    def _encipher(self, block: bytes, schedule) -> bytes:  # pragma: no cover
        ...

    @abstractmethod
    def _decipher(self, block: bytes, schedule) -> bytes:  # pragma: no cover
        ...


####################################################################
###                                         AES/RIJNDAEL CIPHER ###


class Rijndael(BlockCipher):
    "Pure-python Rijndael with 128-bit blocks, as standardized in AES."

    log = logging.getLogger("Rijndael")
    block_size = 16
    key_sizes = (16, 24, 32)
    forward_sbox = bytearray(256)
    inverse_sbox = bytearray(256)
    mul_tables: dict[int, bytes] = {}

    # State bytes are column-major: index = row + 4 * column.  ShiftRows moves
    # row R left by R columns.
    SHIFT_ROWS = tuple(i % 4 + 4 * ((i // 4 + i % 4) % 4) for i in range(16))
    UNSHIFT_ROWS = tuple(i % 4 + 4 * ((i // 4 - i % 4) % 4) for i in range(16))

    @staticmethod
    def mul(fst: int, snd: int) -> int:
        "Multiplication in Galois(2**8), with Rijndael polynomial modulus."
        return bin_mul(fst, snd, operator.xor, xor_mod(0x11B))

    @staticmethod
    def round_constant(num: int) -> int:
        """Used in key expansion, round constants are 2**(N-1) in GF(2**8).

        >>> Word8.hex_grid(Rijndael.round_constant(k) for k in range(1,11))
         01 02 04 08 10 20 40 80 1b 36

        """
        assert 1 <= num <= 10
        return fastpow(2, num - 1, mul=Rijndael.mul)

    @staticmethod
    def sbox_transform(val: int) -> int:
        "The affine transformation applied to inverses to create substitutions."
        return (
            val
            ^ Word8.left_rot(val, 1)
            ^ Word8.left_rot(val, 2)
            ^ Word8.left_rot(val, 3)
            ^ Word8.left_rot(val, 4)
            ^ 0x63
        )

    @classmethod
    def init_tables(cls):
        """Initialize the substitution boxes and the multiplication tables
        needed by MixColumns and its inverse.

        >>> Word8.hex_grid(Rijndael.forward_sbox[:16])
         63 7c 77 7b f2 6b 6f c5 30 01 67 2b fe d7 ab 76

        """
        cls.forward_sbox[0] = 0x63
        cls.inverse_sbox[0x63] = 0
        ppp = qqq = 1
        for _ in range(255):
            # The bytes 03 and F6 are multiplicative inverses, but also they
            # are generators for the entire field.
            ppp = cls.mul(3, ppp)
            qqq = cls.mul(0xF6, qqq)
            val = cls.sbox_transform(qqq)
            cls.forward_sbox[ppp] = val
            cls.inverse_sbox[val] = ppp
        for factor in (2, 3, 9, 11, 13, 14):
            cls.mul_tables[factor] = bytes(
                cls.mul(factor, byte) for byte in range(256)
            )

    @staticmethod
    def rot_word(word: t_wbuf, nbytes: int = 1):
        """Rotate a 4-byte buffer word in-place.

        >>> bs = bytearray(b'FARM.-!')
        >>> Rijndael.rot_word(bs); bs
        bytearray(b'ARMF.-!')
        >>> Rijndael.rot_word(bs, 2); bs
        bytearray(b'MFAR.-!')
        """
        assert 0 < nbytes < 4
        front = bytes(word[:nbytes])
        back = bytes(word[nbytes:4])
        word[: 4 - nbytes], word[4 - nbytes : 4] = back, front

    @staticmethod
    def sub_bytes(vec: t_wbuf, sbox: t_buf):
        """In-place substitution of each byte, using sbox.

        >>> bs = bytearray.fromhex("3f1a2b00")
        >>> Rijndael.sub_bytes(bs, Rijndael.forward_sbox); bs.hex()
        '75a2f163'
        >>> Rijndael.sub_bytes(bs, Rijndael.inverse_sbox); bs.hex()
        '3f1a2b00'
        """
        for idx, byte in enumerate(vec):
            vec[idx] = sbox[byte]

    @classmethod
    def mix_column(cls, vec: t_wbuf, offset: int = 0):
        """The Rijndael MixColumns multiplication, applied in-place to the four
        bytes of VEC starting at OFFSET.

        Test vectors are from https://en.wikipedia.org/wiki/Rijndael_MixColumns

        >>> vec = bytearray.fromhex("db135345")
        >>> Rijndael.mix_column(vec); vec.hex()
        '8e4da1bc'
        >>> vec = bytearray.fromhex("f20a225c")
        >>> Rijndael.mix_column(vec); vec.hex()
        '9fdc589d'

        """
        m2, m3 = cls.mul_tables[2], cls.mul_tables[3]
        a0, a1, a2, a3 = vec[offset : offset + 4]
        vec[offset] = m2[a0] ^ m3[a1] ^ a2 ^ a3
        vec[offset + 1] = a0 ^ m2[a1] ^ m3[a2] ^ a3
        vec[offset + 2] = a0 ^ a1 ^ m2[a2] ^ m3[a3]
        vec[offset + 3] = m3[a0] ^ a1 ^ a2 ^ m2[a3]

    @classmethod
    def unmix_column(cls, vec: t_wbuf, offset: int = 0):
        """Inverse Rijndael MixColumns.

        >>> vec = bytearray.fromhex("d5d5d7d6")
        >>> Rijndael.unmix_column(vec); vec.hex()
        'd4d4d4d5'
        >>> vec = bytearray.fromhex("4d7ebdf8")
        >>> Rijndael.unmix_column(vec); vec.hex()
        '2d26314c'
        """
        m9, m11 = cls.mul_tables[9], cls.mul_tables[11]
        m13, m14 = cls.mul_tables[13], cls.mul_tables[14]
        a0, a1, a2, a3 = vec[offset : offset + 4]
        vec[offset] = m14[a0] ^ m11[a1] ^ m13[a2] ^ m9[a3]
        vec[offset + 1] = m9[a0] ^ m14[a1] ^ m11[a2] ^ m13[a3]
        vec[offset + 2] = m13[a0] ^ m9[a1] ^ m14[a2] ^ m11[a3]
        vec[offset + 3] = m11[a0] ^ m13[a1] ^ m9[a2] ^ m14[a3]

    def _expand_key(self, key: bytes) -> list[bytes]:
        """Key expansion, producing one 16-byte round key per round plus one.

        Following test is the example from these lecture notes
        https://www.kavaliro.com/wp-content/uploads/2014/03/AES.pdf

        >>> keys = Rijndael()._expand_key(b"Thats my Kung Fu")
        >>> len(keys)
        11
        >>> keys[1].hex(' ', 4)
        'e232fcf1 91129188 b159e4e6 d679a293'
        >>> keys[10].hex(' ', 4)
        '28fddef8 6da4244a ccc0a4fe 3b316f26'
        """
        nwords = len(key) // 4
        num_rounds = {4: 10, 6: 12, 8: 14}[nwords]
        words = [key[i : i + 4] for i in range(0, len(key), 4)]
        for i in range(nwords, 4 * (num_rounds + 1)):
            temp = bytearray(words[i - 1])
            if i % nwords == 0:
                self.rot_word(temp)
                self.sub_bytes(temp, self.forward_sbox)
                temp[0] ^= self.round_constant(i // nwords)
            elif nwords > 6 and i % nwords == 4:
                self.sub_bytes(temp, self.forward_sbox)
            words.append(xor_blocks(words[i - nwords], temp))
        return [b"".join(words[i : i + 4]) for i in range(0, len(words), 4)]

    @staticmethod
    def show_block(block: t_buf, heading="", prn=print):
        """Print 16 bytes as a matrix, assuming column-major order.

        >>> Rijndael.show_block(b"Two One Nine Two", "Plaintext")
         [54 4f 4e 20   |TON |  # Plaintext
          77 6e 69 54   |wniT|
          6f 65 6e 77   |oenw|
          20 20 65 6f]  |  eo|
        """
        for row_idx in range(4):
            row = bytes(block[row_idx:16:4])
            line = " [" if row_idx == 0 else "  "
            line += row.hex(" ")
            line += "]  |" if row_idx == 3 else "   |"
            line += "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in row)
            line += "|"
            if row_idx == 0 and len(heading) > 0:
                line += "  # " + heading
            prn(line)

    def _trace(self, block: t_buf, heading: str):
        if self.log.isEnabledFor(logging.DEBUG):
            self.show_block(block, heading, self.log.debug)

    def _encipher(self, block: bytes, round_keys: list[bytes]) -> bytes:
        """Encrypt one 16-byte block using the key.

        Example from https://www.kavaliro.com/wp-content/uploads/2014/03/AES.pdf

        >>> aes = Rijndael()
        >>> aes.configure_key(b"Thats my Kung Fu")
        >>> aes.encrypt_block(b"Two One Nine Two").hex()
        '29c3505f571420f6402299b31a02d73a'

        Example from Aumasson book:

        >>> aes.configure_key(bytes.fromhex("2c6202f9a582668aa96d511862d8a279"))
        >>> aes.encrypt_block(bytes([0] * 16)).hex()
        '12b620bb5eddcde9a07523e59292a6d7'

        """
        num_rounds = len(round_keys) - 1
        state = bytearray(xor_blocks(block, round_keys[0]))
        self._trace(state, "AddRoundKey 0")
        for round_num in range(1, num_rounds + 1):
            # Steps: SubBytes, ShiftRows, MixColumns, AddRoundKey.
            self.sub_bytes(state, self.forward_sbox)
            state = bytearray(state[i] for i in self.SHIFT_ROWS)
            # Last round skips MixColumns.
            if round_num < num_rounds:
                for col in range(0, 16, 4):
                    self.mix_column(state, col)
            state = bytearray(xor_blocks(state, round_keys[round_num]))
            self._trace(state, f"Round {round_num}")
        return bytes(state)

    def _decipher(self, block: bytes, round_keys: list[bytes]) -> bytes:
        """Decrypt one 16-byte block using the key.

        >>> aes = Rijndael()
        >>> aes.configure_key(b"Thats my Kung Fu")
        >>> ciphertext = bytes.fromhex("29c3505f571420f6402299b31a02d73a")
        >>> aes.decrypt_block(ciphertext)
        b'Two One Nine Two'
        """
        num_rounds = len(round_keys) - 1
        state = bytearray(block)
        self._trace(state, "Initial state")
        for round_num in range(num_rounds, 0, -1):
            state = bytearray(xor_blocks(state, round_keys[round_num]))
            if round_num < num_rounds:
                for col in range(0, 16, 4):
                    self.unmix_column(state, col)
            state = bytearray(state[i] for i in self.UNSHIFT_ROWS)
            self.sub_bytes(state, self.inverse_sbox)
            self._trace(state, f"Round {round_num}")
        return xor_blocks(state, round_keys[0])


Rijndael.init_tables()


####################################################################
###                                           DES AND ITS FAMILY ###


class DES(BlockCipher):
    """The Data Encryption Standard: 16 Feistel rounds over 64-bit blocks.
    Bits are numbered from 1 at the most significant end, as in FIPS 46-3.
    Parity bits of the key are ignored.

    >>> des = DES()
    >>> des.configure_key(bytes.fromhex("133457799bbcdff1"))
    >>> des.encrypt_block(bytes.fromhex("0123456789abcdef")).hex()
    '85e813540f0ab405'
    >>> des.decrypt_block(bytes.fromhex("85e813540f0ab405")).hex()
    '0123456789abcdef'

    """

    log = logging.getLogger("DES")
    block_size = 8
    key_sizes = (8,)

    INITIAL_PERM = (
        58, 50, 42, 34, 26, 18, 10, 2, 60, 52, 44, 36, 28, 20, 12, 4,
        62, 54, 46, 38, 30, 22, 14, 6, 64, 56, 48, 40, 32, 24, 16, 8,
        57, 49, 41, 33, 25, 17, 9, 1, 59, 51, 43, 35, 27, 19, 11, 3,
        61, 53, 45, 37, 29, 21, 13, 5, 63, 55, 47, 39, 31, 23, 15, 7,
    )  # fmt: skip
    FINAL_PERM = (
        40, 8, 48, 16, 56, 24, 64, 32, 39, 7, 47, 15, 55, 23, 63, 31,
        38, 6, 46, 14, 54, 22, 62, 30, 37, 5, 45, 13, 53, 21, 61, 29,
        36, 4, 44, 12, 52, 20, 60, 28, 35, 3, 43, 11, 51, 19, 59, 27,
        34, 2, 42, 10, 50, 18, 58, 26, 33, 1, 41, 9, 49, 17, 57, 25,
    )  # fmt: skip
    EXPANSION = (
        32, 1, 2, 3, 4, 5, 4, 5, 6, 7, 8, 9, 8, 9, 10, 11, 12, 13,
        12, 13, 14, 15, 16, 17, 16, 17, 18, 19, 20, 21, 20, 21, 22, 23, 24, 25,
        24, 25, 26, 27, 28, 29, 28, 29, 30, 31, 32, 1,
    )  # fmt: skip
    PBOX = (
        16, 7, 20, 21, 29, 12, 28, 17, 1, 15, 23, 26, 5, 18, 31, 10,
        2, 8, 24, 14, 32, 27, 3, 9, 19, 13, 30, 6, 22, 11, 4, 25,
    )  # fmt: skip
    SBOXES = (
        (
            14, 4, 13, 1, 2, 15, 11, 8, 3, 10, 6, 12, 5, 9, 0, 7,
            0, 15, 7, 4, 14, 2, 13, 1, 10, 6, 12, 11, 9, 5, 3, 8,
            4, 1, 14, 8, 13, 6, 2, 11, 15, 12, 9, 7, 3, 10, 5, 0,
            15, 12, 8, 2, 4, 9, 1, 7, 5, 11, 3, 14, 10, 0, 6, 13,
        ),
        (
            15, 1, 8, 14, 6, 11, 3, 4, 9, 7, 2, 13, 12, 0, 5, 10,
            3, 13, 4, 7, 15, 2, 8, 14, 12, 0, 1, 10, 6, 9, 11, 5,
            0, 14, 7, 11, 10, 4, 13, 1, 5, 8, 12, 6, 9, 3, 2, 15,
            13, 8, 10, 1, 3, 15, 4, 2, 11, 6, 7, 12, 0, 5, 14, 9,
        ),
        (
            10, 0, 9, 14, 6, 3, 15, 5, 1, 13, 12, 7, 11, 4, 2, 8,
            13, 7, 0, 9, 3, 4, 6, 10, 2, 8, 5, 14, 12, 11, 15, 1,
            13, 6, 4, 9, 8, 15, 3, 0, 11, 1, 2, 12, 5, 10, 14, 7,
            1, 10, 13, 0, 6, 9, 8, 7, 4, 15, 14, 3, 11, 5, 2, 12,
        ),
        (
            7, 13, 14, 3, 0, 6, 9, 10, 1, 2, 8, 5, 11, 12, 4, 15,
            13, 8, 11, 5, 6, 15, 0, 3, 4, 7, 2, 12, 1, 10, 14, 9,
            10, 6, 9, 0, 12, 11, 7, 13, 15, 1, 3, 14, 5, 2, 8, 4,
            3, 15, 0, 6, 10, 1, 13, 8, 9, 4, 5, 11, 12, 7, 2, 14,
        ),
        (
            2, 12, 4, 1, 7, 10, 11, 6, 8, 5, 3, 15, 13, 0, 14, 9,
            14, 11, 2, 12, 4, 7, 13, 1, 5, 0, 15, 10, 3, 9, 8, 6,
            4, 2, 1, 11, 10, 13, 7, 8, 15, 9, 12, 5, 6, 3, 0, 14,
            11, 8, 12, 7, 1, 14, 2, 13, 6, 15, 0, 9, 10, 4, 5, 3,
        ),
        (
            12, 1, 10, 15, 9, 2, 6, 8, 0, 13, 3, 4, 14, 7, 5, 11,
            10, 15, 4, 2, 7, 12, 9, 5, 6, 1, 13, 14, 0, 11, 3, 8,
            9, 14, 15, 5, 2, 8, 12, 3, 7, 0, 4, 10, 1, 13, 11, 6,
            4, 3, 2, 12, 9, 5, 15, 10, 11, 14, 1, 7, 6, 0, 8, 13,
        ),
        (
            4, 11, 2, 14, 15, 0, 8, 13, 3, 12, 9, 7, 5, 10, 6, 1,
            13, 0, 11, 7, 4, 9, 1, 10, 14, 3, 5, 12, 2, 15, 8, 6,
            1, 4, 11, 13, 12, 3, 7, 14, 10, 15, 6, 8, 0, 5, 9, 2,
            6, 11, 13, 8, 1, 4, 10, 7, 9, 5, 0, 15, 14, 2, 3, 12,
        ),
        (
            13, 2, 8, 4, 6, 15, 11, 1, 10, 9, 3, 14, 5, 0, 12, 7,
            1, 15, 13, 8, 10, 3, 7, 4, 12, 5, 6, 11, 0, 14, 9, 2,
            7, 11, 4, 1, 9, 12, 14, 2, 0, 6, 10, 13, 15, 3, 5, 8,
            2, 1, 14, 7, 4, 10, 8, 13, 15, 12, 9, 0, 3, 5, 6, 11,
        ),
    )  # fmt: skip
    KEY_PERM = (
        57, 49, 41, 33, 25, 17, 9, 1, 58, 50, 42, 34, 26, 18,
        10, 2, 59, 51, 43, 35, 27, 19, 11, 3, 60, 52, 44, 36,
        63, 55, 47, 39, 31, 23, 15, 7, 62, 54, 46, 38, 30, 22,
        14, 6, 61, 53, 45, 37, 29, 21, 13, 5, 28, 20, 12, 4,
    )  # fmt: skip
    KEY_COMPRESSION = (
        14, 17, 11, 24, 1, 5, 3, 28, 15, 6, 21, 10,
        23, 19, 12, 4, 26, 8, 16, 7, 27, 20, 13, 2,
        41, 52, 31, 37, 47, 55, 30, 40, 51, 45, 33, 48,
        44, 49, 39, 56, 34, 53, 46, 42, 50, 36, 29, 32,
    )  # fmt: skip
    KEY_SHIFTS = (1, 1, 2, 2, 2, 2, 2, 2, 1, 2, 2, 2, 2, 2, 2, 1)

    # SBOXES followed by PBOX, one table per S-box indexed by its 6-bit input.
    sp_tables: list[tuple[int, ...]] = []

    @staticmethod
    def permute(val: int, table: t.Sequence[int], nbits: int) -> int:
        """Select bits of the NBITS-wide VAL, numbered from 1 at the most
        significant end, in the order given by TABLE.

        >>> bin(DES.permute(0b1000, (4, 1, 2, 3), 4))
        '0b100'
        """
        result = 0
        for pos in table:
            result = result << 1 | (val >> (nbits - pos)) & 1
        return result

    @classmethod
    def init_tables(cls):
        "Fuse each S-box with the P permutation that follows it."
        cls.sp_tables[:] = []
        for box_num, box in enumerate(cls.SBOXES):
            shift = 4 * (7 - box_num)
            table = []
            for six in range(64):
                row = (six & 0x20) >> 4 | six & 1
                col = (six >> 1) & 0xF
                table.append(cls.permute(box[16 * row + col] << shift, cls.PBOX, 32))
            cls.sp_tables.append(tuple(table))

    @classmethod
    def round_keys(cls, key: int) -> list[int]:
        "Derive the sixteen 48-bit round keys from a 64-bit KEY."
        mask = (1 << 28) - 1
        key56 = cls.permute(key, cls.KEY_PERM, 64)
        ccc, ddd = key56 >> 28, key56 & mask
        result = []
        for shift in cls.KEY_SHIFTS:
            ccc = (ccc << shift | ccc >> (28 - shift)) & mask
            ddd = (ddd << shift | ddd >> (28 - shift)) & mask
            result.append(cls.permute(ccc << 28 | ddd, cls.KEY_COMPRESSION, 56))
        return result

    @classmethod
    def feistel(cls, half: int, round_key: int) -> int:
        "The round function: expand, mix in the key, substitute, permute."
        mixed = cls.permute(half, cls.EXPANSION, 32) ^ round_key
        result = 0
        for box_num, table in enumerate(cls.sp_tables):
            result |= table[(mixed >> 6 * (7 - box_num)) & 0x3F]
        return result

    @classmethod
    def crypt(cls, block: bytes, round_keys: t.Sequence[int]) -> bytes:
        "Run the Feistel network; decryption passes the round keys reversed."
        val = cls.permute(int.from_bytes(block, "big"), cls.INITIAL_PERM, 64)
        left, right = val >> 32, val & Word32.MAX
        for round_key in round_keys:
            left, right = right, left ^ cls.feistel(right, round_key)
        val = cls.permute(right << 32 | left, cls.FINAL_PERM, 64)
        return val.to_bytes(8, "big")

    def _expand_key(self, key: bytes) -> list[int]:
        return self.round_keys(int.from_bytes(key, "big"))

    def _encipher(self, block: bytes, schedule: list[int]) -> bytes:
        return self.crypt(block, schedule)

    def _decipher(self, block: bytes, schedule: list[int]) -> bytes:
        return self.crypt(block, schedule[::-1])


DES.init_tables()


class TripleDES(BlockCipher):
    """DES applied three times, encrypt-decrypt-encrypt.  A 16-byte key reuses
    its first half as the third key.  With three equal keys this is just DES.

    >>> tdes = TripleDES()
    >>> tdes.configure_key(bytes.fromhex("133457799bbcdff1") * 3)
    >>> tdes.encrypt_block(bytes.fromhex("0123456789abcdef")).hex()
    '85e813540f0ab405'

    """

    log = logging.getLogger("TripleDES")
    block_size = 8
    key_sizes = (16, 24)

    def _expand_key(self, key: bytes):
        parts = [key[i : i + 8] for i in range(0, len(key), 8)]
        if len(parts) == 2:
            parts.append(parts[0])
        return tuple(DES.round_keys(int.from_bytes(p, "big")) for p in parts)

    def _encipher(self, block: bytes, schedule) -> bytes:
        keys1, keys2, keys3 = schedule
        block = DES.crypt(block, keys1)
        block = DES.crypt(block, keys2[::-1])
        return DES.crypt(block, keys3)

    def _decipher(self, block: bytes, schedule) -> bytes:
        keys1, keys2, keys3 = schedule
        block = DES.crypt(block, keys3[::-1])
        block = DES.crypt(block, keys2)
        return DES.crypt(block, keys1[::-1])


class DEAL(BlockCipher):
    """DEAL: a Feistel network on 128-bit blocks that uses DES itself as the
    round function.  Six rounds for 16- and 24-byte keys, eight for 32-byte
    keys.  Each round gets its own DES key from a rotate-and-xor schedule over
    the master key bytes.

    >>> deal = DEAL()
    >>> deal.configure_key(b"sixteen byte key")
    >>> ctxt = deal.encrypt_block(b"Two One Nine Two")
    >>> deal.decrypt_block(ctxt)
    b'Two One Nine Two'

    """

    log = logging.getLogger("DEAL")
    block_size = 16
    key_sizes = (16, 24, 32)

    @staticmethod
    def round_subkeys(key: bytes, count: int) -> list[bytes]:
        """Derive COUNT 8-byte DES keys from KEY.

        >>> DEAL.round_subkeys(bytes(16), 2)[1].hex()
        '1f30415263748596'
        """
        result = []
        for i in range(count):
            offset = i * 7 % len(key)
            sub = bytearray(8)
            for j in range(8):
                byte = Word8.left_rot(key[(offset + j) % len(key)], (i + j) & 7)
                sub[j] = byte ^ (i * 31 + j * 17) & Word8.MAX
            result.append(bytes(sub))
        return result

    def _expand_key(self, key: bytes) -> list[list[int]]:
        rounds = 8 if len(key) == 32 else 6
        return [
            DES.round_keys(int.from_bytes(sub, "big"))
            for sub in self.round_subkeys(key, rounds)
        ]

    def _encipher(self, block: bytes, schedule) -> bytes:
        left, right = block[:8], block[8:]
        for round_keys in schedule:
            left, right = right, xor_blocks(left, DES.crypt(right, round_keys))
        return right + left

    def _decipher(self, block: bytes, schedule) -> bytes:
        right, left = block[:8], block[8:]
        for round_keys in reversed(schedule):
            left, right = xor_blocks(right, DES.crypt(left, round_keys)), left
        return left + right


####################################################################
###                                                   RC5 CIPHER ###


class RC5(BlockCipher):
    """RC5-w/r/b: data-dependent rotations over two w-bit words.  Word size W
    is 16, 32 or 64 bits, giving blocks of 4, 8 or 16 bytes; R is the number
    of rounds; the key may be up to 255 bytes.

    >>> rc5 = RC5(word_bits=16, rounds=8)
    >>> rc5.block_size
    4
    >>> rc5.configure_key(b"secret")
    >>> rc5.decrypt_block(rc5.encrypt_block(b"Hey!"))
    b'Hey!'

    """

    log = logging.getLogger("RC5")
    key_sizes = range(256)
    WORDS = {16: Word16, 32: Word32, 64: Word64}
    MAGIC = {
        16: (0xB7E1, 0x9E37),
        32: (0xB7E15163, 0x9E3779B9),
        64: (0xB7E151628AED2A6B, 0x9E3779B97F4A7C15),
    }

    def __init__(self, word_bits: int = 32, rounds: int = 12):
        super().__init__()
        if word_bits not in self.WORDS:
            raise InvalidArgument(f"RC5 word size must be 16, 32 or 64, not {word_bits}")
        if not 0 < rounds < 256:
            raise InvalidArgument(f"RC5 rounds must be in 1..255, not {rounds}")
        self.word = self.WORDS[word_bits]
        self.rounds = rounds
        self.block_size = 2 * self.word.BYTES

    @property
    def name(self) -> str:
        return f"RC5-{self.word.BITS}/{self.rounds}"

    def _expand_key(self, key: bytes) -> list[int]:
        word = self.word
        nbytes = word.BYTES
        lwords = [
            int_from_bytes(key[i : i + nbytes])
            for i in range(0, len(key), nbytes)
        ] or [0]
        count = 2 * (self.rounds + 1)
        pmagic, qmagic = self.MAGIC[word.BITS]
        table = [pmagic]
        for _ in range(1, count):
            table.append(word.add(table[-1], qmagic))
        aaa = bbb = iii = jjj = 0
        for _ in range(3 * max(count, len(lwords))):
            aaa = table[iii] = word.left_rot(
                word.add(word.add(table[iii], aaa), bbb), 3
            )
            bbb = lwords[jjj] = word.left_rot(
                word.add(word.add(lwords[jjj], aaa), bbb),
                word.add(aaa, bbb) % word.BITS,
            )
            iii = (iii + 1) % count
            jjj = (jjj + 1) % len(lwords)
        return table

    def _encipher(self, block: bytes, table: list[int]) -> bytes:
        word = self.word
        aaa = word.add(word.from_bytes(block[: word.BYTES]), table[0])
        bbb = word.add(word.from_bytes(block[word.BYTES :]), table[1])
        for i in range(1, self.rounds + 1):
            aaa = word.add(word.left_rot(aaa ^ bbb, bbb % word.BITS), table[2 * i])
            bbb = word.add(
                word.left_rot(bbb ^ aaa, aaa % word.BITS), table[2 * i + 1]
            )
        return word.to_bytes(aaa) + word.to_bytes(bbb)

    def _decipher(self, block: bytes, table: list[int]) -> bytes:
        word = self.word
        aaa = word.from_bytes(block[: word.BYTES])
        bbb = word.from_bytes(block[word.BYTES :])
        for i in range(self.rounds, 0, -1):
            bbb = word.right_rot(word.sub(bbb, table[2 * i + 1]), aaa % word.BITS)
            bbb ^= aaa
            aaa = word.right_rot(word.sub(aaa, table[2 * i]), bbb % word.BITS)
            aaa ^= bbb
        bbb = word.sub(bbb, table[1])
        aaa = word.sub(aaa, table[0])
        return word.to_bytes(aaa) + word.to_bytes(bbb)


CIPHERS: dict[str, t.Callable[[], BlockCipher]] = {
    "aes": Rijndael,
    "des": DES,
    "3des": TripleDES,
    "deal": DEAL,
    "rc5": RC5,
}

DEFAULT_KEY_BYTES = {"aes": 16, "des": 8, "3des": 24, "deal": 16, "rc5": 16}


####################################################################
###                                                      PADDING ###


class PaddingMode(enum.Enum):
    "Ways to fill the final block of a message."

    ZEROS = "Zeros"
    PKCS7 = "PKCS7"
    ANSIX923 = "ANSIX923"
    ISO10126 = "ISO10126"


def apply_padding(
    data: t_buf,
    block_size: int,
    padding: PaddingMode | str,
    randbytes: t.Callable[[int], bytes] = secrets.token_bytes,
) -> bytes:
    """Extend DATA to a multiple of BLOCK_SIZE.  Except for ZEROS, the last
    byte holds the number of bytes added, so block-aligned data gets a whole
    extra block.

    >>> apply_padding(b"ABCDE", 8, PaddingMode.PKCS7).hex(" ")
    '41 42 43 44 45 03 03 03'
    >>> apply_padding(b"ABCDE", 8, "ANSIX923").hex(" ")
    '41 42 43 44 45 00 00 03'
    >>> apply_padding(b"ABCDE", 8, "Zeros").hex(" ")
    '41 42 43 44 45 00 00 00'
    >>> apply_padding(b"ABCDEFGH", 8, PaddingMode.ZEROS)
    b'ABCDEFGH'
    >>> apply_padding(b"ABCDEFGH", 8, PaddingMode.PKCS7)[8:].hex()
    '0808080808080808'
    >>> apply_padding(b"AB", 4, PaddingMode.ISO10126, lambda n: b"?" * n)
    b'AB?\\x02'

    """
    padding = _coerce(PaddingMode, padding)
    _check_block_size(block_size)
    data = bytes(data)
    if padding is PaddingMode.ZEROS:
        return data + bytes(-len(data) % block_size)
    if block_size > Word8.MAX:
        raise InvalidArgument(f"{padding.value} needs blocks of at most 255 bytes")
    count = block_size - len(data) % block_size
    if padding is PaddingMode.PKCS7:
        fill = bytes([count]) * (count - 1)
    elif padding is PaddingMode.ANSIX923:
        fill = bytes(count - 1)
    else:
        fill = randbytes(count - 1)
    return data + fill + bytes([count])


def remove_padding(
    data: t_buf, block_size: int, padding: PaddingMode | str
) -> bytes:
    """Undo apply_padding, validating as much as the scheme allows.

    >>> remove_padding(bytes.fromhex("4142434445030303"), 8, "PKCS7")
    b'ABCDE'
    >>> remove_padding(bytes.fromhex("4142434445000303"), 8, "PKCS7")
    Traceback (most recent call last):
    cipherlab.InvalidPadding: PKCS7 padding bytes do not match length 3
    >>> remove_padding(bytes.fromhex("4142434445ffee03"), 8, "ISO10126")
    b'ABCDE'
    >>> remove_padding(b"AB\\0\\0", 4, PaddingMode.ZEROS)
    b'AB'

    """
    padding = _coerce(PaddingMode, padding)
    _check_block_size(block_size)
    data = bytes(data)
    if len(data) == 0:
        return data
    if padding is PaddingMode.ZEROS:
        return data.rstrip(b"\0")
    count = data[-1]
    if not 1 <= count <= min(block_size, len(data)):
        raise InvalidPadding(f"{padding.value} padding length {count} out of range")
    fill = data[-count:-1]
    if padding is PaddingMode.PKCS7 and fill != bytes([count]) * (count - 1):
        raise InvalidPadding(f"PKCS7 padding bytes do not match length {count}")
    if padding is PaddingMode.ANSIX923 and any(fill):
        raise InvalidPadding("ANSIX923 padding has non-zero fill bytes")
    return data[:-count]


####################################################################
###                                           MODES OF OPERATION ###


class CipherMode(enum.Enum):
    "Ways to apply a block cipher to a message of arbitrary length."

    ECB = "ECB"
    CBC = "CBC"
    PCBC = "PCBC"
    CFB = "CFB"
    OFB = "OFB"
    CTR = "CTR"
    RANDOM_DELTA = "RandomDelta"


class ChainState(t.NamedTuple):
    """Registers carried from one block to the next during a single call.
    Steps return a new state rather than mutating this one."""

    prev: bytes  # previous ciphertext, or the feedback register; IV at first
    prev_plain: bytes  # previous plaintext block (PCBC)
    delta: bytes  # evolving delta register (RandomDelta)


t_step = t.Callable[[BlockCipher, ChainState, int, bytes], tuple[bytes, ChainState]]


class ModeAlgorithm(t.NamedTuple):
    """One entry of the strategy table shared by the in-memory and streaming
    engines.  Each step maps (cipher, state, block index, block) to (output
    block, next state).  Steps of PARALLEL modes never change the state, so
    their blocks may be computed in any order."""

    encrypt: t_step
    decrypt: t_step
    parallel: bool
    uses_iv: bool
    padded: bool


def counter_block(iv: t_buf, index: int, block_size: int) -> bytes:
    """Build the CTR input for block INDEX: the IV with its trailing bytes
    overwritten by the big-endian block index.  With 8-byte blocks the IV is
    overwritten entirely.  Blocks shorter than eight bytes hold a shorter
    index, and an index too big for it is rejected rather than wrapped.

    >>> counter_block(bytes(range(16)), 258, 16).hex()
    '00010203040506070000000000000102'
    >>> counter_block(bytes(range(8)), 1, 8).hex()
    '0000000000000001'
    >>> counter_block(bytes(4), 1 << 32, 4)
    Traceback (most recent call last):
    cipherlab.InvalidArgument: CTR block index 4294967296 does not fit 32 bits

    """
    tail = min(CTR_COUNTER_BYTES, block_size)
    if not 0 <= index < 1 << 8 * tail:
        raise InvalidArgument(
            f"CTR block index {index} does not fit {8 * tail} bits"
        )
    result = bytearray(block_size)
    nbytes = min(len(iv), block_size)
    result[:nbytes] = iv[:nbytes]
    result[block_size - tail :] = index.to_bytes(CTR_COUNTER_BYTES, "big")[
        CTR_COUNTER_BYTES - tail :
    ]
    return bytes(result)


def _ecb_encrypt(cipher, state, _index, block):
    return cipher.encrypt_block(block), state


def _ecb_decrypt(cipher, state, _index, block):
    return cipher.decrypt_block(block), state


def _cbc_encrypt(cipher, state, _index, block):
    out = cipher.encrypt_block(xor_blocks(block, state.prev))
    return out, state._replace(prev=out)


def _cbc_decrypt(cipher, state, _index, block):
    out = xor_blocks(cipher.decrypt_block(block), state.prev)
    return out, state._replace(prev=block)


def _pcbc_encrypt(cipher, state, _index, block):
    mixed = xor_blocks(xor_blocks(block, state.prev), state.prev_plain)
    out = cipher.encrypt_block(mixed)
    return out, state._replace(prev=out, prev_plain=block)


def _pcbc_decrypt(cipher, state, _index, block):
    out = xor_blocks(cipher.decrypt_block(block), state.prev)
    out = xor_blocks(out, state.prev_plain)
    return out, state._replace(prev=block, prev_plain=out)


def _cfb_encrypt(cipher, state, _index, block):
    out = xor_blocks(cipher.encrypt_block(state.prev), block)
    return out, state._replace(prev=out)


def _cfb_decrypt(cipher, state, _index, block):
    out = xor_blocks(cipher.encrypt_block(state.prev), block)
    return out, state._replace(prev=block)


def _ofb_step(cipher, state, _index, block):
    register = cipher.encrypt_block(state.prev)
    return xor_blocks(block, register), state._replace(prev=register)


def _ctr_step(cipher, state, index, block):
    # The final block may be short; the keystream is truncated to match.
    keystream = cipher.encrypt_block(
        counter_block(state.prev, index, cipher.block_size)
    )
    return xor_blocks(block, keystream[: len(block)]), state


def _delta_encrypt(cipher, state, _index, block):
    out = cipher.encrypt_block(xor_blocks(block, state.delta))
    delta = xor_blocks(xor_blocks(state.delta, out), state.prev)
    return out, state._replace(prev=out, delta=delta)


def _delta_decrypt(cipher, state, _index, block):
    out = xor_blocks(cipher.decrypt_block(block), state.delta)
    delta = xor_blocks(xor_blocks(state.delta, block), state.prev)
    return out, state._replace(prev=block, delta=delta)


MODES: dict[CipherMode, ModeAlgorithm] = {
    CipherMode.ECB: ModeAlgorithm(
        _ecb_encrypt, _ecb_decrypt, parallel=True, uses_iv=False, padded=True
    ),
    CipherMode.CBC: ModeAlgorithm(
        _cbc_encrypt, _cbc_decrypt, parallel=False, uses_iv=True, padded=True
    ),
    CipherMode.PCBC: ModeAlgorithm(
        _pcbc_encrypt, _pcbc_decrypt, parallel=False, uses_iv=True, padded=True
    ),
    CipherMode.CFB: ModeAlgorithm(
        _cfb_encrypt, _cfb_decrypt, parallel=False, uses_iv=True, padded=True
    ),
    CipherMode.OFB: ModeAlgorithm(
        _ofb_step, _ofb_step, parallel=False, uses_iv=True, padded=True
    ),
    CipherMode.CTR: ModeAlgorithm(
        _ctr_step, _ctr_step, parallel=True, uses_iv=True, padded=False
    ),
    CipherMode.RANDOM_DELTA: ModeAlgorithm(
        _delta_encrypt, _delta_decrypt, parallel=False, uses_iv=True, padded=True
    ),
}


class BlockEngine:
    """Applies one mode to successive runs of bytes within a single encrypt or
    decrypt call.  The engine owns the chaining state and the running block
    index, so runs must be fed in order.  Every run is a whole number of blocks,
    except that the last run of a CTR call may end with a partial block.

    Parallel modes fan out over POOL when one is given: the blocks of a run are
    split into contiguous spans, and each span writes only its own slice of a
    preallocated output buffer.

    >>> aes = Rijndael()
    >>> aes.configure_key(bytes(16))
    >>> engine = BlockEngine(aes, MODES[CipherMode.CTR],
    ...                      ChainState(bytes(16), bytes(16), b""))
    >>> first = engine.run(bytes(32))
    >>> engine.blocks_done
    2
    >>> engine.run(bytes(5)) == aes.encrypt_block(counter_block(bytes(16), 2, 16))[:5]
    True

    """

    log = logging.getLogger("BlockEngine")

    def __init__(
        self,
        cipher: BlockCipher,
        algorithm: ModeAlgorithm,
        state: ChainState,
        *,
        decrypting: bool = False,
        pool: t.Optional[ThreadPoolExecutor] = None,
        workers: int = 1,
    ):
        self._cipher = cipher
        self._step = algorithm.decrypt if decrypting else algorithm.encrypt
        self._parallel = algorithm.parallel
        self._state = state
        self._index = 0
        self._ragged = False
        self._pool = pool
        self._workers = workers

    @property
    def blocks_done(self) -> int:
        "Number of blocks (including a final partial one) processed so far."
        return self._index

    @staticmethod
    def partition(count: int, parts: int) -> list[tuple[int, int]]:
        """Split range(COUNT) into at most PARTS contiguous (start, stop) spans
        of nearly equal size.

        >>> BlockEngine.partition(10, 3)
        [(0, 4), (4, 7), (7, 10)]
        >>> BlockEngine.partition(2, 8)
        [(0, 1), (1, 2)]
        """
        parts = max(1, min(parts, count))
        size, extra = divmod(count, parts)
        spans = []
        start = 0
        for part in range(parts):
            stop = start + size + (1 if part < extra else 0)
            spans.append((start, stop))
            start = stop
        return spans

    def run(self, data: t_buf) -> bytes:
        "Transform DATA, returning output of the same length."
        assert not self._ragged, "no data may follow a partial block"
        size = self._cipher.block_size
        count = math.ceil(len(data) / size)
        if count == 0:
            return b""
        self._ragged = len(data) % size != 0
        if self._parallel and self._pool is not None and count > 1:
            result = self._fan_out(bytes(data), count)
        else:
            result = self._fold(bytes(data), count)
        self._index += count
        return result

    def _fold(self, data: bytes, count: int) -> bytes:
        size = self._cipher.block_size
        out = bytearray()
        state = self._state
        for k in range(count):
            block, state = self._step(
                self._cipher, state, self._index + k, data[k * size : (k + 1) * size]
            )
            out += block
        self._state = state
        return bytes(out)

    def _fan_out(self, data: bytes, count: int) -> bytes:
        size = self._cipher.block_size
        out = bytearray(len(data))
        spans = self.partition(count, self._workers)
        self.log.debug("%d blocks over %d spans", count, len(spans))

        def work(span: tuple[int, int]):
            start, stop = span
            for k in range(start, stop):
                lo, hi = k * size, min((k + 1) * size, len(data))
                out[lo:hi], _ = self._step(
                    self._cipher, self._state, self._index + k, data[lo:hi]
                )

        # Consuming the iterator joins the pool and re-raises any worker error.
        for _ in self._pool.map(work, spans):
            pass
        return bytes(out)


####################################################################
###                                               CIPHER CONTEXT ###


def _check_cancel(cancel: t.Optional[threading.Event]):
    if cancel is not None and cancel.is_set():
        raise Cancelled("operation cancelled")


class CipherContext:
    """Everything needed to encrypt and decrypt: a block cipher configured with
    a key, a mode, a padding scheme, and optionally a fixed IV.  Without a fixed
    IV, every encryption draws a fresh random one, so equal messages encrypt
    differently:

    >>> ctx = CipherContext(DES(), b"8 bytes!", "OFB", "ANSIX923")
    >>> ctx.encrypt_buffer(b"hello") == ctx.encrypt_buffer(b"hello")
    False
    >>> ctx.decrypt_buffer(ctx.encrypt_buffer(b"hello"))
    b'hello'

    Wire format: the IV is the first block of every ciphertext except in ECB
    mode.  CTR adds no padding, so its ciphertext is the IV plus exactly as
    many bytes as the plaintext.

    >>> ctr = CipherContext(Rijndael(), bytes(16), CipherMode.CTR)
    >>> len(ctr.encrypt_buffer(b"seven b"))
    23

    A RandomDelta context also holds a secret delta register, created with the
    context and never written to the wire.  Decrypting needs the same delta:
    this context, or another built with delta=ctx.delta.

    Each call keeps its chaining state to itself, so a context may be reused,
    including from several threads at once.
    """

    log = logging.getLogger("CipherContext")

    def __init__(
        self,
        cipher: BlockCipher,
        key: t_buf,
        mode: CipherMode | str,
        padding: PaddingMode | str = PaddingMode.PKCS7,
        block_size: t.Optional[int] = None,
        iv: t.Optional[t_buf] = None,
        *,
        delta: t.Optional[t_buf] = None,
        workers: t.Optional[int] = None,
        randbytes: t.Callable[[int], bytes] = secrets.token_bytes,
    ):
        for attr in ("block_size", "configure_key", "encrypt_block", "decrypt_block"):
            if not hasattr(cipher, attr):
                raise InvalidArgument(f"cipher lacks {attr}")
        if key is None or len(key) == 0:
            raise InvalidArgument("key must not be empty")
        self.mode = _coerce(CipherMode, mode)
        self.padding = _coerce(PaddingMode, padding)
        self.algorithm = MODES.get(self.mode)
        if self.algorithm is None:  # pragma: no cover
            raise UnsupportedMode(f"no algorithm for {self.mode}")
        if block_size is None:
            block_size = cipher.block_size
        _check_block_size(block_size)
        if block_size != cipher.block_size:
            raise InvalidArgument(
                f"block size {block_size} does not match"
                f" the cipher's {cipher.block_size}"
            )
        if (
            self.algorithm.padded
            and self.padding is not PaddingMode.ZEROS
            and block_size > Word8.MAX
        ):
            raise InvalidArgument(f"{self.padding.value} needs blocks of at most 255 bytes")
        self.block_size = block_size
        self._iv = self._check_register(iv, "IV")
        if workers is None:
            workers = min(32, (os.cpu_count() or 1) + 4)
        if workers < 1:
            raise InvalidArgument(f"need at least one worker, not {workers}")
        self.workers = workers
        self._randbytes = randbytes
        self.cipher = cipher
        cipher.configure_key(bytes(key))
        if self.mode is CipherMode.RANDOM_DELTA:
            delta = self._check_register(delta, "delta")
            self._delta = bytes(randbytes(block_size)) if delta is None else delta
        elif delta is not None:
            raise InvalidArgument(
                f"delta applies only to RandomDelta, not {self.mode.value}"
            )
        else:
            self._delta = b""
        self.log.debug(
            "%s %s/%s, %d-byte blocks, %s IV",
            type(cipher).__name__,
            self.mode.value,
            self.padding.value,
            block_size,
            "fixed" if self._iv is not None else "random",
        )

    def _check_register(self, value: t.Optional[t_buf], what: str):
        if value is None:
            return None
        if len(value) != self.block_size:
            raise InvalidArgument(
                f"{what} must be {self.block_size} bytes, not {len(value)}"
            )
        return bytes(value)

    @property
    def delta(self) -> t.Optional[bytes]:
        "The RandomDelta register as created with this context, else None."
        return self._delta or None

    def ensure_iv(self) -> bytes:
        "Return the fixed IV if there is one, else a fresh random block."
        if self._iv is not None:
            return self._iv
        iv = bytes(self._randbytes(self.block_size))
        assert len(iv) == self.block_size
        self.log.debug("generated a fresh IV")
        return iv

    @contextmanager
    def _engine(self, iv: t.Optional[bytes], decrypting: bool):
        "Set up the per-call state, and a thread pool for parallel modes."
        if iv is None:
            iv = bytes(self.block_size)
        state = ChainState(prev=iv, prev_plain=bytes(self.block_size), delta=self._delta)
        fan_out = self.algorithm.parallel and self.workers > 1
        with (
            ThreadPoolExecutor(self.workers, thread_name_prefix="cipherlab")
            if fan_out
            else nullcontext()
        ) as pool:
            yield BlockEngine(
                self.cipher,
                self.algorithm,
                state,
                decrypting=decrypting,
                pool=pool,
                workers=self.workers,
            )

    def _split_iv(self, data: bytes) -> tuple[t.Optional[bytes], bytes]:
        if not self.algorithm.uses_iv:
            return None, data
        if len(data) < self.block_size:
            raise TruncatedCiphertext(
                f"ciphertext of {len(data)} bytes is shorter than"
                f" the {self.block_size}-byte IV"
            )
        return data[: self.block_size], data[self.block_size :]

    def _check_aligned(self, nbytes: int):
        if self.algorithm.padded and nbytes % self.block_size != 0:
            raise TruncatedCiphertext(
                f"payload of {nbytes} bytes is not a whole number"
                f" of {self.block_size}-byte blocks"
            )

    def _strip(self, plain: bytes) -> bytes:
        "Remove padding from the final block of decrypted PLAIN."
        if not self.algorithm.padded or len(plain) == 0:
            return plain
        last = len(plain) - self.block_size
        return plain[:last] + remove_padding(
            plain[last:], self.block_size, self.padding
        )

    @staticmethod
    def _require_bytes(data: t.Optional[t_buf], what: str) -> bytes:
        if data is None:
            raise InvalidArgument(f"{what} must not be None")
        return bytes(data)

    def encrypt_buffer(self, plaintext: t_buf) -> bytes:
        "Encrypt a complete message held in memory."
        plaintext = self._require_bytes(plaintext, "plaintext")
        iv = self.ensure_iv() if self.algorithm.uses_iv else None
        if self.algorithm.padded:
            plaintext = apply_padding(
                plaintext, self.block_size, self.padding, self._randbytes
            )
        with self._engine(iv, decrypting=False) as engine:
            body = engine.run(plaintext)
        return (iv or b"") + body

    def decrypt_buffer(self, ciphertext: t_buf) -> bytes:
        "Decrypt a complete message held in memory."
        ciphertext = self._require_bytes(ciphertext, "ciphertext")
        iv, payload = self._split_iv(ciphertext)
        self._check_aligned(len(payload))
        with self._engine(iv, decrypting=True) as engine:
            plain = engine.run(payload)
        return self._strip(plain)

    ################################################################
    ##                                                 STREAMING ##

    @staticmethod
    def _check_chunk_size(chunk_size: int) -> int:
        if not isinstance(chunk_size, int) or chunk_size <= 0:
            raise InvalidArgument(f"chunk size must be positive, not {chunk_size!r}")
        return chunk_size

    @staticmethod
    def _read(src, view: memoryview, cancel) -> bytes:
        _check_cancel(cancel)
        if hasattr(src, "readinto"):
            count = src.readinto(view)
            if count is None:
                raise InvalidArgument("non-blocking sources are not supported")
            return bytes(view[:count])
        return bytes(src.read(len(view)))

    @staticmethod
    def _read_exactly(src, nbytes: int, cancel) -> bytes:
        "Read NBYTES from SRC, or fewer only at end of input."
        buf = bytearray()
        while len(buf) < nbytes:
            _check_cancel(cancel)
            piece = src.read(nbytes - len(buf))
            if not piece:
                break
            buf += piece
        return bytes(buf)

    @staticmethod
    def _write(dest, data: bytes, cancel) -> int:
        _check_cancel(cancel)
        if len(data) > 0:
            dest.write(data)
        return len(data)

    def _chunks(self, src, chunk_size: int, cancel) -> t.Iterator[tuple[bytes, bool]]:
        """Yield (chunk, final) pairs from SRC through one reusable buffer,
        reading one chunk ahead so that the last one is flagged.  An empty
        source yields a single empty final chunk."""
        view = memoryview(bytearray(chunk_size))
        current = self._read(src, view, cancel)
        while True:
            following = self._read(src, view, cancel) if current else b""
            yield current, not following
            if not following:
                return
            current = following

    def encrypt_stream(
        self,
        src: t.BinaryIO,
        dest: t.BinaryIO,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        cancel: t.Optional[threading.Event] = None,
    ) -> int:
        """Encrypt from SRC to DEST in chunks, returning the number of bytes
        written.  Output is identical to encrypt_buffer on the whole input."""
        self._check_chunk_size(chunk_size)
        size = self.block_size
        iv = self.ensure_iv() if self.algorithm.uses_iv else None
        written = self._write(dest, iv, cancel) if iv is not None else 0
        leftover = b""
        with self._engine(iv, decrypting=False) as engine:
            for chunk, final in self._chunks(src, chunk_size, cancel):
                data = leftover + chunk
                if final:
                    leftover = b""
                    if self.algorithm.padded:
                        data = apply_padding(
                            data, size, self.padding, self._randbytes
                        )
                else:
                    cut = len(data) - len(data) % size
                    data, leftover = data[:cut], data[cut:]
                self.log.debug("encrypting %d bytes, final=%s", len(data), final)
                written += self._write(dest, engine.run(data), cancel)
        return written

    def decrypt_stream(
        self,
        src: t.BinaryIO,
        dest: t.BinaryIO,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        cancel: t.Optional[threading.Event] = None,
    ) -> int:
        """Decrypt from SRC to DEST in chunks, returning the number of bytes
        written.  For padded modes the last full block of every chunk is held
        back until end of input shows whether it carries the padding.

        Output already written stays written when an error is raised, for
        instance InvalidPadding at the very end: discard it in that case."""
        self._check_chunk_size(chunk_size)
        size = self.block_size
        iv = None
        if self.algorithm.uses_iv:
            iv = self._read_exactly(src, size, cancel)
            self._split_iv(iv)
        written = 0
        carry = b""
        with self._engine(iv, decrypting=True) as engine:
            for chunk, final in self._chunks(src, chunk_size, cancel):
                data = carry + chunk
                if final:
                    carry = b""
                    self._check_aligned(len(data))
                    plain = self._strip(engine.run(data))
                else:
                    cut = len(data) - len(data) % size
                    if self.algorithm.padded:
                        cut = max(0, cut - size)
                    data, carry = data[:cut], data[cut:]
                    plain = engine.run(data)
                self.log.debug("decrypted %d bytes, final=%s", len(plain), final)
                written += self._write(dest, plain, cancel)
        return written

    def _copy_file(self, method, src_path, dest_path, **kwargs) -> int:
        if not os.path.isfile(src_path):
            raise SourceNotFound(errno.ENOENT, "input file not found", str(src_path))
        with open(src_path, "rb") as src:
            try:
                dest = open(dest_path, "wb")
            except OSError as exc:
                raise SinkNotWritable(
                    exc.errno, f"cannot write output: {exc.strerror}", str(dest_path)
                ) from exc
            with dest:
                try:
                    count = method(src, dest, **kwargs)
                except Exception:
                    self.log.warning("left partial output in %s", dest_path)
                    raise
        self.log.info("%s -> %s: %d bytes", src_path, dest_path, count)
        return count

    def encrypt_file(self, src_path, dest_path, **kwargs) -> int:
        "Encrypt the file at SRC_PATH into DEST_PATH, using encrypt_stream."
        return self._copy_file(self.encrypt_stream, src_path, dest_path, **kwargs)

    def decrypt_file(self, src_path, dest_path, **kwargs) -> int:
        "Decrypt the file at SRC_PATH into DEST_PATH, using decrypt_stream."
        return self._copy_file(self.decrypt_stream, src_path, dest_path, **kwargs)


####################################################################
###                                       COMMAND LINE INTERFACE ###


def hex_bytes(text: str) -> bytes:
    """Parse hexadecimal TEXT, with optional 0x prefix, into bytes.

    >>> hex_bytes("0xCAFE")
    b'\\xca\\xfe'
    """
    text = text.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    return bytes.fromhex(text)


def run_rand(args):
    "Generate a random key for a cipher."
    nbytes = getattr(args, "bytes", None)
    if nbytes is None:
        nbytes = DEFAULT_KEY_BYTES[getattr(args, "cipher", "aes")]
    print(secrets.token_bytes(nbytes).hex())


def add_rand_args(cmdp):
    "Configure argument parser for rand command."
    argp = cmdp.add_parser("rand", help=run_rand.__doc__, description=run_rand.__doc__)
    argp.set_defaults(func=run_rand)
    argp.add_argument(
        "bytes",
        metavar="BYTES",
        type=int,
        nargs="?",
        help="size of key in bytes, default depends on the cipher",
    )
    argp.add_argument(
        "--cipher", "-c", choices=sorted(CIPHERS), default="aes", help="cipher"
    )


def context_from_args(args) -> CipherContext:
    "Build a CipherContext from parsed command-line arguments."
    return CipherContext(
        CIPHERS[args.cipher](),
        args.key,
        args.mode,
        args.padding,
        iv=getattr(args, "iv", None),
        delta=getattr(args, "delta", None),
        workers=getattr(args, "workers", None),
    )


def run_enc(args):
    "Encrypt with a block cipher in the chosen mode."
    ctx = context_from_args(args)
    if getattr(args, "message", None) is not None:
        src = io.BytesIO(args.message.encode())
    elif getattr(args, "input", None) is not None:
        src = args.input
    else:
        src = sys.stdin.buffer
    dest = getattr(args, "output", None) or sys.stdout.buffer
    if ctx.delta is not None and getattr(args, "delta", None) is None:
        print(f"Delta: {ctx.delta.hex()}", file=sys.stderr)
    ctx.encrypt_stream(src, dest, chunk_size=args.chunk_size)
    dest.flush()
    return 0


def run_dec(args):
    "Decrypt with a block cipher in the chosen mode."
    ctx = context_from_args(args)
    src = getattr(args, "input", None) or sys.stdin.buffer
    dest = getattr(args, "output", None) or sys.stdout.buffer
    ctx.decrypt_stream(src, dest, chunk_size=args.chunk_size)
    dest.flush()
    return 0


def add_cipher_args(argp):
    "Configure key, cipher and mode args shared by enc and dec."
    argp.add_argument(
        "key",
        metavar="KEY",
        type=hex_bytes,
        help="key in hexadecimal (optional '0x' prefix)",
    )
    argp.add_argument(
        "--cipher", "-c", choices=sorted(CIPHERS), default="aes", help="block cipher"
    )
    argp.add_argument(
        "--mode",
        choices=[m.value for m in CipherMode],
        default=CipherMode.CBC.value,
        help="mode of operation, default CBC",
    )
    argp.add_argument(
        "--padding",
        choices=[p.value for p in PaddingMode],
        default=PaddingMode.PKCS7.value,
        help="padding scheme, default PKCS7",
    )
    argp.add_argument(
        "--iv", type=hex_bytes, metavar="HEX", help="fixed IV instead of a random one"
    )
    argp.add_argument(
        "--delta", type=hex_bytes, metavar="HEX", help="delta register for RandomDelta"
    )
    argp.add_argument(
        "--chunk-size",
        type=int,
        default=DEFAULT_CHUNK_SIZE,
        metavar="N",
        help=f"bytes per read, default {DEFAULT_CHUNK_SIZE}",
    )
    argp.add_argument(
        "--workers", type=int, metavar="N", help="threads for ECB and CTR"
    )
    argp.add_argument(
        "--output",
        "-o",
        type=argparse.FileType("wb"),
        metavar="FILE",
        help="save to FILE ('-' for stdout)",
    )


def add_enc_args(cmdp):
    "Configure argument parser for enc command."
    argp = cmdp.add_parser("enc", help=run_enc.__doc__, description=run_enc.__doc__)
    argp.set_defaults(func=run_enc)
    argp_inp = argp.add_mutually_exclusive_group()
    argp_inp.add_argument(
        "--message",
        "-m",
        metavar="TEXT",
        help="message to encrypt, or specify input file",
    )
    argp_inp.add_argument(
        "--input",
        "-i",
        metavar="FILE",
        type=argparse.FileType("rb"),
        help="file to encrypt, or use standard input",
    )
    add_cipher_args(argp)


def add_dec_args(cmdp):
    "Configure argument parser for dec command."
    argp = cmdp.add_parser("dec", help=run_dec.__doc__, description=run_dec.__doc__)
    argp.set_defaults(func=run_dec)
    argp.add_argument(
        "--input",
        "-i",
        metavar="FILE",
        type=argparse.FileType("rb"),
        help="file to decrypt, or use standard input",
    )
    add_cipher_args(argp)


def run_tests(args):
    "Run unit tests and doc tests."
    try:
        tests = importlib.import_module("test_cipherlab")
    except ImportError as exc:
        raise CipherError(
            f"cannot load the test suite ({exc}); install cipherlab[test]"
        ) from exc
    loader = unittest.defaultTestLoader
    names = getattr(args, "names", None)
    if names:
        suite = loader.loadTestsFromNames(names, tests)
    else:
        suite = loader.loadTestsFromModule(tests)
    runner = unittest.TextTestRunner(
        verbosity=getattr(args, "verbose", 0) + 1,
        failfast=getattr(args, "failfast", False),
    )
    return 0 if runner.run(suite).wasSuccessful() else 1


def parse_args(*args, **kwargs):
    "Parse arguments for command-line interface."
    argp = argparse.ArgumentParser(
        prog="cipherlab",
        description="Block ciphers and modes of operation, from first principles.",
        epilog="Please do not rely on these experiments for actual privacy!",
    )
    argp.set_defaults(func=None, prog=argp.prog, failfast=False)
    argp.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="enable informative (-v) or debugging (-vv) messages",
    )
    cmdp = argp.add_subparsers()
    add_rand_args(cmdp)
    add_enc_args(cmdp)
    add_dec_args(cmdp)

    argp_test = cmdp.add_parser(
        "test", help=run_tests.__doc__, description=run_tests.__doc__
    )
    argp_test.set_defaults(func=run_tests)
    argp_test.add_argument(
        "--failfast",
        "-f",
        action="store_true",
        help="stop the test run on the first failure",
    )
    argp_test.add_argument(
        "names",
        metavar="TEST",
        nargs="*",
        help="test case or method to run, such as TestModes.test_truncated",
    )
    return argp.parse_args(*args, **kwargs)


def setup_logging(verbose: int = 0, **_kwargs):
    "Configure log level based on verbose argument."
    logging.basicConfig()
    logging.root.name = ""
    if verbose >= 2:
        logging.root.setLevel(logging.DEBUG)
        logging.debug("Logging enabled")
    elif verbose == 1:
        logging.root.setLevel(logging.INFO)
        logging.info("Logging enabled")


def main(argv: t.Optional[list[str]] = None) -> int:
    "Entry point for the command-line interface."
    cli_args = parse_args(argv)
    setup_logging(**vars(cli_args))
    logging.debug(cli_args)
    func = cli_args.func or run_tests
    try:
        return func(cli_args) or 0
    except CipherError as exc:
        print(f"{cli_args.prog}: error: {exc}", file=sys.stderr)
        return 1


####################################################################
###                                                   MAIN BLOCK ###


if __name__ == "__main__":
    sys.exit(main())  # pragma: no cover
