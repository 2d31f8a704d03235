from typing import Dict, Optional

from c_types import CKind, CType, SourceLocation
from diagnostics import (Diagnostics, ToolingLimitationError,
                         UnsupportedTypeError)
from names import strip_prefixes

MAX_TYPE_DEPTH = 64

# Placeholder for values whose C type is a function (pointer).
OPAQUE_POINTER = "*const u8"

SIGNED_TYPES: Dict[int, str] = {8: "i8", 16: "i16", 32: "i32", 64: "i64"}
UNSIGNED_TYPES: Dict[int, str] = {8: "u8", 16: "u16", 32: "u32", 64: "u64"}

SCALAR_TYPES: Dict[CKind, str] = {
    CKind.VOID: "void",
    CKind.BOOL: "bool",
    CKind.CHAR: "u8",
    CKind.FLOAT: "f32",
    CKind.DOUBLE: "f64",
    CKind.LONG_DOUBLE: "f128",
}

# Matched on the typedef's spelled name, never on what it aliases.
FIXED_WIDTH_TYPEDEFS: Dict[str, str] = {
    "int8_t": "i8",
    "int16_t": "i16",
    "int32_t": "i32",
    "int64_t": "i64",
    "uint8_t": "u8",
    "uint16_t": "u16",
    "uint32_t": "u32",
    "uint64_t": "u64",
}

_SUGAR_KINDS = (CKind.TYPEDEF, CKind.ELABORATED, CKind.UNEXPOSED)


class TypeClassifier:
    """
    Maps C type descriptors to type expressions of the extern block.

    Unsupported kinds raise ``UnsupportedTypeError``; function-typed values
    are replaced by an opaque pointer after a warning.
    """

    def __init__(self, diagnostics: Optional[Diagnostics] = None):
        self.diagnostics = diagnostics or Diagnostics()

    def classify(self, c_type: CType, location: Optional[SourceLocation] = None) -> str:
        return self._classify(c_type, location, 0)

    def _classify(self, c_type: CType, location: Optional[SourceLocation], depth: int) -> str:
        if depth > MAX_TYPE_DEPTH:
            raise ToolingLimitationError(
                location, f"type nesting deeper than {MAX_TYPE_DEPTH} levels: {c_type.spelling}")
        kind = c_type.kind

        if kind == CKind.UNEXPOSED:
            canonical = c_type.underlying
            if canonical is None or canonical.kind == CKind.UNEXPOSED:
                raise ToolingLimitationError(
                    location, f"cannot resolve unexposed type '{c_type.spelling}'")
            return self._classify(canonical, location, depth + 1)

        if kind == CKind.ELABORATED:
            if c_type.underlying is None:
                raise ToolingLimitationError(
                    location, f"elaborated type '{c_type.spelling}' has no named type")
            return self._classify(c_type.underlying, location, depth + 1)

        if kind in SCALAR_TYPES:
            return SCALAR_TYPES[kind]

        if kind in (CKind.SIGNED, CKind.UNSIGNED):
            table = SIGNED_TYPES if kind == CKind.SIGNED else UNSIGNED_TYPES
            if c_type.width not in table:
                raise UnsupportedTypeError(
                    location, f"TODO {c_type.width}-bit {kind.value} integer")
            return table[c_type.width]

        if kind in (CKind.POINTER, CKind.INCOMPLETE_ARRAY):
            pointee = c_type.pointee
            if pointee is None:
                raise ToolingLimitationError(location, f"'{c_type.spelling}' has no pointee type")
            if kind == CKind.POINTER and self._is_function(pointee):
                return self._function_placeholder(location)
            inner = self._classify(pointee, location, depth + 1)
            if pointee.is_const:
                return f"*const {inner}"
            return f"*mut {inner}"

        if kind == CKind.CONSTANT_ARRAY:
            if c_type.pointee is None or c_type.length is None or c_type.length < 0:
                raise ToolingLimitationError(location, f"malformed array type '{c_type.spelling}'")
            inner = self._classify(c_type.pointee, location, depth + 1)
            return f"[{inner}; {c_type.length}]"

        if kind in (CKind.RECORD, CKind.ENUM):
            return strip_prefixes(c_type.spelling)

        if kind == CKind.TYPEDEF:
            name = strip_prefixes(c_type.spelling)
            if name in FIXED_WIDTH_TYPEDEFS:
                return FIXED_WIDTH_TYPEDEFS[name]
            if c_type.underlying is None:
                raise ToolingLimitationError(location, f"typedef '{name}' has no underlying type")
            return self._classify(c_type.underlying, location, depth + 1)

        if kind == CKind.FUNCTION_PROTO:
            return self._function_placeholder(location)

        raise UnsupportedTypeError(location, f"TODO {c_type.unsupported or c_type.spelling}")

    def _is_function(self, c_type: CType) -> bool:
        depth = 0
        while c_type.kind in _SUGAR_KINDS and c_type.underlying is not None and depth <= MAX_TYPE_DEPTH:
            c_type = c_type.underlying
            depth += 1
        return c_type.kind == CKind.FUNCTION_PROTO

    def _function_placeholder(self, location: Optional[SourceLocation]) -> str:
        self.diagnostics.warn(location, "function pointer mapped to opaque pointer")
        return OPAQUE_POINTER
