"""
Mapping of well-known source function names onto Aiken builtins
"""

from typing import Dict, List, Optional

BUILTIN_MODULE = "aiken/builtin"

# Source name -> builtin name in aiken/builtin
BUILTIN_FUNCTIONS: Dict[str, str] = {
    # Cryptography
    "sha256": "sha2_256",
    "sha2_256": "sha2_256",
    "sha3_256": "sha3_256",
    "blake2b_224": "blake2b_224",
    "blake2b_256": "blake2b_256",
    "keccak256": "keccak_256",
    "ripemd160": "ripemd_160",
    "verify_ed25519_signature": "verify_ed25519_signature",
    "verify_ecdsa_secp256k1_signature": "verify_ecdsa_secp256k1_signature",
    "verify_schnorr_secp256k1_signature": "verify_schnorr_secp256k1_signature",

    # Lists and pairs
    "head": "head_list",
    "tail": "tail_list",
    "is_empty": "null_list",
    "cons": "cons_list",
    "fst": "fst_pair",
    "snd": "snd_pair",

    # Byte arrays
    "append_bytes": "append_bytearray",
    "slice_bytes": "slice_bytearray",
    "bytes_length": "length_of_bytearray",
    "index_bytes": "index_bytearray",
    "encode_utf8": "encode_utf8",
    "decode_utf8": "decode_utf8",
    "int_to_bytes": "integer_to_bytearray",
    "bytes_to_int": "bytearray_to_integer",

    # Data
    "i_data": "i_data",
    "b_data": "b_data",
    "un_i_data": "un_i_data",
    "un_b_data": "un_b_data",
    "constr_data": "constr_data",
    "un_constr_data": "un_constr_data",
    "list_data": "list_data",
    "map_data": "map_data",
    "equals_data": "equals_data",
    "serialise_data": "serialise_data",

    # Integers
    "quotient": "quotient_integer",
    "remainder": "remainder_integer",

    # Debugging
    "trace": "debug",
}


class BuiltinRegistry:
    """
    Resolves builtin calls and remembers which ones a module used.

    One registry belongs to one transpiler instance; `reset` is called at the
    start of every module so nothing leaks between transpile calls.
    """

    def __init__(self, mappings: Optional[Dict[str, str]] = None):
        self.mappings = dict(BUILTIN_FUNCTIONS if mappings is None else mappings)
        self.used: List[str] = []

    def is_builtin(self, name: str) -> bool:
        return name in self.mappings

    def resolve(self, name: str) -> str:
        """Return the builtin name for `name` and record its use"""
        target = self.mappings[name]
        if target not in self.used:
            self.used.append(target)
        return target

    def reset(self) -> None:
        self.used = []

    def import_line(self) -> Optional[str]:
        if not self.used:
            return None
        return f"use {BUILTIN_MODULE}.{{{', '.join(sorted(self.used))}}}"
