"""Tests for type_classifier — C type descriptors to extern type expressions."""

import io

import pytest

from c_types import CKind, CType, SourceLocation
from diagnostics import (Diagnostics, FatalDiagnostic, ToolingLimitationError,
                         UnsupportedTypeError)
from type_classifier import MAX_TYPE_DEPTH, OPAQUE_POINTER, TypeClassifier

LOC = SourceLocation(file="api.h", line=12, column=5)


@pytest.fixture
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def classifier(stream: io.StringIO) -> TypeClassifier:
    return TypeClassifier(Diagnostics(stream=stream))


def i32(is_const: bool = False) -> CType:
    return CType.integer(32, spelling="int", is_const=is_const)


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


class TestScalars:
    @pytest.mark.parametrize(
        "c_type, expected",
        [
            (CType.scalar(CKind.VOID), "void"),
            (CType.scalar(CKind.BOOL), "bool"),
            (CType.scalar(CKind.CHAR), "u8"),
            (CType.integer(8, signed=True, spelling="signed char"), "i8"),
            (CType.integer(8, signed=False, spelling="unsigned char"), "u8"),
            (CType.integer(16, spelling="short"), "i16"),
            (CType.integer(16, signed=False, spelling="unsigned short"), "u16"),
            (CType.integer(32, spelling="int"), "i32"),
            (CType.integer(32, signed=False, spelling="unsigned int"), "u32"),
            (CType.integer(64, spelling="long"), "i64"),
            (CType.integer(64, signed=False, spelling="unsigned long long"), "u64"),
            (CType.scalar(CKind.FLOAT), "f32"),
            (CType.scalar(CKind.DOUBLE), "f64"),
            (CType.scalar(CKind.LONG_DOUBLE), "f128"),
        ],
    )
    def test_mapping(self, classifier: TypeClassifier, c_type: CType, expected: str) -> None:
        assert classifier.classify(c_type) == expected

    def test_deterministic(self, classifier: TypeClassifier) -> None:
        c_type = CType.scalar(CKind.DOUBLE)
        assert classifier.classify(c_type) == classifier.classify(c_type) == "f64"

    def test_unknown_width_is_unsupported(self, classifier: TypeClassifier) -> None:
        with pytest.raises(UnsupportedTypeError):
            classifier.classify(CType.integer(24), LOC)


# ---------------------------------------------------------------------------
# Pointers and arrays
# ---------------------------------------------------------------------------


class TestPointersAndArrays:
    def test_pointer_to_const(self, classifier: TypeClassifier) -> None:
        assert classifier.classify(CType.pointer(i32(is_const=True))) == "*const i32"

    def test_pointer_to_mutable(self, classifier: TypeClassifier) -> None:
        assert classifier.classify(CType.pointer(i32())) == "*mut i32"

    def test_const_pointer_itself_does_not_matter(self, classifier: TypeClassifier) -> None:
        assert classifier.classify(CType.pointer(i32(), is_const=True)) == "*mut i32"

    def test_pointer_to_pointer(self, classifier: TypeClassifier) -> None:
        inner = CType.pointer(CType.scalar(CKind.CHAR, is_const=True))
        assert classifier.classify(CType.pointer(inner)) == "*mut *const u8"

    def test_incomplete_array_matches_pointer(self, classifier: TypeClassifier) -> None:
        element = i32(is_const=True)
        assert classifier.classify(CType.array(element)) == classifier.classify(CType.pointer(element))

    def test_constant_array(self, classifier: TypeClassifier) -> None:
        assert classifier.classify(CType.array(i32(), 4)) == "[i32; 4]"

    def test_zero_length_array(self, classifier: TypeClassifier) -> None:
        assert classifier.classify(CType.array(CType.scalar(CKind.DOUBLE), 0)) == "[f64; 0]"

    def test_nested_arrays(self, classifier: TypeClassifier) -> None:
        matrix = CType.array(CType.array(CType.scalar(CKind.FLOAT), 4), 3)
        assert classifier.classify(matrix) == "[[f32; 4]; 3]"

    def test_negative_length_is_rejected(self, classifier: TypeClassifier) -> None:
        with pytest.raises(ToolingLimitationError):
            classifier.classify(CType(kind=CKind.CONSTANT_ARRAY, pointee=i32(), length=-1))


# ---------------------------------------------------------------------------
# Named types
# ---------------------------------------------------------------------------


class TestNamedTypes:
    def test_record_name_is_stripped(self, classifier: TypeClassifier) -> None:
        record = CType(kind=CKind.RECORD, spelling="const struct Foo")
        assert classifier.classify(record) == "Foo"

    def test_enum_name_is_stripped(self, classifier: TypeClassifier) -> None:
        assert classifier.classify(CType(kind=CKind.ENUM, spelling="enum Color")) == "Color"

    def test_pointer_to_const_record(self, classifier: TypeClassifier) -> None:
        record = CType(kind=CKind.RECORD, spelling="const struct Foo", is_const=True)
        assert classifier.classify(CType.pointer(record)) == "*const Foo"

    def test_typedef_resolves_underlying(self, classifier: TypeClassifier) -> None:
        size_t = CType.typedef("size_t", CType.integer(64, signed=False))
        assert classifier.classify(size_t) == "u64"

    def test_typedef_to_record(self, classifier: TypeClassifier) -> None:
        handle = CType.typedef("Handle", CType(kind=CKind.RECORD, spelling="struct Handle"))
        assert classifier.classify(handle) == "Handle"

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("int8_t", "i8"), ("int16_t", "i16"), ("int32_t", "i32"), ("int64_t", "i64"),
            ("uint8_t", "u8"), ("uint16_t", "u16"), ("uint32_t", "u32"), ("uint64_t", "u64"),
        ],
    )
    def test_fixed_width_typedef_by_name(self, classifier: TypeClassifier, name: str, expected: str) -> None:
        assert classifier.classify(CType.typedef(name, CType.integer(64))) == expected

    def test_fixed_width_shortcut_ignores_underlying(self, classifier: TypeClassifier) -> None:
        bogus = CType.typedef("uint32_t", CType.scalar(CKind.DOUBLE))
        assert classifier.classify(bogus) == "u32"

    def test_const_fixed_width_typedef(self, classifier: TypeClassifier) -> None:
        value = CType.typedef("uint8_t", CType.integer(8, signed=False), is_const=True)
        assert classifier.classify(CType.pointer(value)) == "*const u8"

    def test_elaborated_uses_named_type(self, classifier: TypeClassifier) -> None:
        named = CType(kind=CKind.RECORD, spelling="struct Foo")
        elaborated = CType(kind=CKind.ELABORATED, spelling="struct Foo", underlying=named)
        assert classifier.classify(elaborated) == "Foo"


# ---------------------------------------------------------------------------
# Unexposed types
# ---------------------------------------------------------------------------


class TestUnexposed:
    def test_resolves_to_canonical(self, classifier: TypeClassifier) -> None:
        unexposed = CType(kind=CKind.UNEXPOSED, spelling="weird", underlying=i32())
        assert classifier.classify(unexposed) == "i32"

    def test_unexposed_canonical_is_tooling_limitation(self, classifier: TypeClassifier) -> None:
        canonical = CType(kind=CKind.UNEXPOSED, spelling="still weird")
        unexposed = CType(kind=CKind.UNEXPOSED, spelling="weird", underlying=canonical)
        with pytest.raises(ToolingLimitationError) as exc_info:
            classifier.classify(unexposed, LOC)
        assert exc_info.value.location == LOC


# ---------------------------------------------------------------------------
# Function types
# ---------------------------------------------------------------------------


class TestFunctionTypes:
    def test_function_pointer_is_placeholder(self, classifier: TypeClassifier, stream: io.StringIO) -> None:
        callback = CType.pointer(CType(kind=CKind.FUNCTION_PROTO, spelling="void (int)"))
        assert classifier.classify(callback, LOC) == OPAQUE_POINTER
        assert classifier.diagnostics.warnings == ["function pointer mapped to opaque pointer"]
        assert stream.getvalue() == (
            "api.h line 12, column 5: warning: function pointer mapped to opaque pointer\n"
        )

    def test_pointer_to_typedef_of_function(self, classifier: TypeClassifier) -> None:
        proto = CType(kind=CKind.FUNCTION_PROTO, spelling="void (int)")
        callback = CType.pointer(CType.typedef("callback_t", proto))
        assert classifier.classify(callback) == OPAQUE_POINTER

    def test_bare_function_proto(self, classifier: TypeClassifier) -> None:
        assert classifier.classify(CType(kind=CKind.FUNCTION_PROTO)) == OPAQUE_POINTER
        assert len(classifier.diagnostics.warnings) == 1


# ---------------------------------------------------------------------------
# Unsupported kinds and limits
# ---------------------------------------------------------------------------


class TestUnsupported:
    @pytest.mark.parametrize(
        "name",
        ["wchar", "char16", "char32", "int128", "uint128", "vector", "complex",
         "block pointer", "function no proto", "variablearray", "memberpointer"],
    )
    def test_is_fatal(self, classifier: TypeClassifier, name: str) -> None:
        with pytest.raises(UnsupportedTypeError) as exc_info:
            classifier.classify(CType.unsupported_kind(name), LOC)
        assert exc_info.value.message == f"TODO {name}"
        assert str(exc_info.value) == f"api.h line 12, column 5: TODO {name}"

    def test_inside_pointer_is_fatal(self, classifier: TypeClassifier) -> None:
        with pytest.raises(FatalDiagnostic):
            classifier.classify(CType.pointer(CType.unsupported_kind("wchar")))

    def test_depth_guard(self, classifier: TypeClassifier) -> None:
        c_type = i32()
        for _ in range(MAX_TYPE_DEPTH + 2):
            c_type = CType.pointer(c_type)
        with pytest.raises(ToolingLimitationError):
            classifier.classify(c_type)

    def test_depth_within_limit(self, classifier: TypeClassifier) -> None:
        c_type = i32()
        for _ in range(10):
            c_type = CType.pointer(c_type)
        assert classifier.classify(c_type) == "*mut " * 10 + "i32"
