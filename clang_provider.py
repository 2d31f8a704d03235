"""
libclang front end: parses a header and exposes its cursors and types in the
shape the collector and the classifier consume.
"""
import os
from ctypes import c_uint
from typing import Dict, List, Optional

from clang.cindex import (Config, Cursor, CursorKind, Diagnostic, Index,
                          TranslationUnit, TranslationUnitLoadError, Type,
                          TypeKind, conf, register_function)

from c_types import (CALLING_CONV_C, CKind, CType, DeclKind,
                     FunctionSignature, SourceLocation, StorageClass)
from diagnostics import Diagnostics, ParsehError, SourceDiagnosticsError, ToolingLimitationError
from type_classifier import MAX_TYPE_DEPTH

# CXCallingConv values, see clang-c/Index.h
CALLING_CONVENTIONS: Dict[int, str] = {
    0: "default",
    1: CALLING_CONV_C,
    2: "x86_stdcall",
    3: "x86_fastcall",
    4: "x86_thiscall",
    5: "x86_pascal",
    6: "aapcs",
    7: "aapcs_vfp",
    8: "x86_regcall",
    9: "intel_ocl_bicc",
    10: "win64",
    11: "x86_64_sysv",
    12: "x86_vectorcall",
    13: "swift",
    14: "preserve_most",
    15: "preserve_all",
    16: "aarch64_vector_pcs",
    17: "swift_async",
    18: "aarch64_sve_pcs",
    19: "m68k_rtd",
    20: "preserve_none",
    21: "riscv_vector_call",
    100: "invalid",
    200: "unexposed",
}

DECL_KINDS: Dict[CursorKind, DeclKind] = {
    CursorKind.FUNCTION_DECL: DeclKind.FUNCTION,
    CursorKind.PARM_DECL: DeclKind.PARAM,
    CursorKind.UNEXPOSED_ATTR: DeclKind.ATTRIBUTE,
    CursorKind.COMPOUND_STMT: DeclKind.COMPOUND_STMT,
    CursorKind.FIELD_DECL: DeclKind.FIELD,
    CursorKind.TYPEDEF_DECL: DeclKind.TYPEDEF,
}

STORAGE_CLASSES: Dict[str, StorageClass] = {
    "INVALID": StorageClass.INVALID,
    "NONE": StorageClass.NONE,
    "EXTERN": StorageClass.EXTERN,
    "STATIC": StorageClass.STATIC,
    "PRIVATEEXTERN": StorageClass.PRIVATE_EXTERN,
    "OPENCLWORKGROUPLOCAL": StorageClass.OPENCL_WORKGROUP_LOCAL,
    "AUTO": StorageClass.AUTO,
    "REGISTER": StorageClass.REGISTER,
}

SIGNED_KINDS = (TypeKind.SCHAR, TypeKind.SHORT, TypeKind.INT, TypeKind.LONG, TypeKind.LONGLONG)
UNSIGNED_KINDS = (TypeKind.UCHAR, TypeKind.USHORT, TypeKind.UINT, TypeKind.ULONG, TypeKind.ULONGLONG)

SIMPLE_KINDS: Dict[TypeKind, CKind] = {
    TypeKind.VOID: CKind.VOID,
    TypeKind.BOOL: CKind.BOOL,
    TypeKind.CHAR_U: CKind.CHAR,
    TypeKind.CHAR_S: CKind.CHAR,
    TypeKind.FLOAT: CKind.FLOAT,
    TypeKind.DOUBLE: CKind.DOUBLE,
    TypeKind.LONGDOUBLE: CKind.LONG_DOUBLE,
    TypeKind.RECORD: CKind.RECORD,
    TypeKind.ENUM: CKind.ENUM,
    TypeKind.FUNCTIONPROTO: CKind.FUNCTION_PROTO,
}

UNSUPPORTED_NAMES: Dict[TypeKind, str] = {
    TypeKind.WCHAR: "wchar",
    TypeKind.CHAR16: "char16",
    TypeKind.CHAR32: "char32",
    TypeKind.INT128: "int128",
    TypeKind.UINT128: "uint128",
    TypeKind.FUNCTIONNOPROTO: "function no proto",
    TypeKind.BLOCKPOINTER: "block pointer",
    TypeKind.VECTOR: "vector",
    TypeKind.COMPLEX: "complex",
}


def configure_libclang(library_file: Optional[str]):
    """Points clang.cindex at a specific libclang, unless it is already loaded."""
    if library_file and not Config.loaded:
        Config.set_library_file(library_file)


def location_of(clang_location) -> SourceLocation:
    file_name = clang_location.file.name if clang_location.file else "<unknown>"
    return SourceLocation(file=file_name, line=clang_location.line, column=clang_location.column)


def _calling_convention(fn_type: Type) -> str:
    func = getattr(conf.lib, "clang_getFunctionTypeCallingConv")
    if func.restype is not c_uint:
        register_function(conf.lib, ("clang_getFunctionTypeCallingConv", [Type], c_uint), False)
    value = conf.lib.clang_getFunctionTypeCallingConv(fn_type)
    return CALLING_CONVENTIONS.get(value, f"unknown({value})")


def describe_type(clang_type: Type, depth: int = 0) -> CType:
    """Converts a libclang type into a ``CType`` descriptor."""
    if depth > MAX_TYPE_DEPTH:
        raise ToolingLimitationError(
            None, f"type nesting deeper than {MAX_TYPE_DEPTH} levels: {clang_type.spelling}")
    kind = clang_type.kind
    spelling = clang_type.spelling
    is_const = clang_type.is_const_qualified()

    if kind in SIMPLE_KINDS:
        return CType(kind=SIMPLE_KINDS[kind], spelling=spelling, is_const=is_const)

    if kind in SIGNED_KINDS or kind in UNSIGNED_KINDS:
        return CType.integer(clang_type.get_size() * 8, signed=kind in SIGNED_KINDS,
                             spelling=spelling, is_const=is_const)

    if kind == TypeKind.POINTER:
        return CType(kind=CKind.POINTER, spelling=spelling, is_const=is_const,
                     pointee=describe_type(clang_type.get_pointee(), depth + 1))

    if kind in (TypeKind.INCOMPLETEARRAY, TypeKind.CONSTANTARRAY):
        element = describe_type(clang_type.get_array_element_type(), depth + 1)
        if kind == TypeKind.INCOMPLETEARRAY:
            return CType(kind=CKind.INCOMPLETE_ARRAY, spelling=spelling, is_const=is_const,
                         pointee=element)
        return CType(kind=CKind.CONSTANT_ARRAY, spelling=spelling, is_const=is_const,
                     pointee=element, length=clang_type.get_array_size())

    if kind == TypeKind.TYPEDEF:
        underlying = clang_type.get_declaration().underlying_typedef_type
        return CType(kind=CKind.TYPEDEF, spelling=spelling, is_const=is_const,
                     underlying=describe_type(underlying, depth + 1))

    if kind == TypeKind.ELABORATED:
        return CType(kind=CKind.ELABORATED, spelling=spelling, is_const=is_const,
                     underlying=describe_type(clang_type.get_named_type(), depth + 1))

    if kind == TypeKind.UNEXPOSED:
        canonical = clang_type.get_canonical()
        if canonical.kind == TypeKind.UNEXPOSED:
            resolved = CType(kind=CKind.UNEXPOSED, spelling=canonical.spelling)
        else:
            resolved = describe_type(canonical, depth + 1)
        return CType(kind=CKind.UNEXPOSED, spelling=spelling, is_const=is_const,
                     underlying=resolved)

    name = UNSUPPORTED_NAMES.get(kind, kind.name.lower())
    return CType.unsupported_kind(name, spelling)


def describe_signature(fn_type: Type) -> FunctionSignature:
    # Unprototyped functions (``int f();``) carry no parameter types.
    params: List[CType] = []
    if fn_type.kind == TypeKind.FUNCTIONPROTO:
        params = [describe_type(t) for t in fn_type.argument_types()]
    return FunctionSignature(
        result=describe_type(fn_type.get_result()),
        params=params,
        is_variadic=fn_type.is_function_variadic(),
        calling_conv=_calling_convention(fn_type),
    )


class ClangDecl:
    """A libclang cursor seen as a ``c_types.Decl``."""

    def __init__(self, cursor: Cursor):
        self.cursor = cursor
        self.kind = DECL_KINDS.get(cursor.kind, DeclKind.OTHER)
        self.spelling = cursor.spelling

    @property
    def location(self) -> SourceLocation:
        return location_of(self.cursor.extent.start)

    @property
    def storage_class(self) -> StorageClass:
        return STORAGE_CLASSES[self.cursor.storage_class.name]

    @property
    def signature(self) -> Optional[FunctionSignature]:
        if self.kind != DeclKind.FUNCTION:
            return None
        return describe_signature(self.cursor.type)

    def get_children(self):
        for child in self.cursor.get_children():
            yield ClangDecl(child)

    def belongs_to(self, fn) -> bool:
        # Parameters of a function-pointer type are not reparented to the
        # declaration that mentions them.
        if not isinstance(fn, ClangDecl):
            return False
        parent = self.cursor.semantic_parent
        return parent is not None and parent == fn.cursor

    def __repr__(self):
        return f"ClangDecl({self.kind.name}, {self.spelling!r})"


def parse_translation_unit(header_path: str, clang_args: Optional[List[str]] = None,
                           diagnostics: Optional[Diagnostics] = None) -> TranslationUnit:
    """
    Parses ``header_path`` with libclang.

    Every diagnostic libclang reports is printed and the run is aborted with
    ``SourceDiagnosticsError`` before any traversal happens.
    """
    if not os.path.exists(header_path):
        raise FileNotFoundError(f"Header file not found: {header_path}")
    diagnostics = diagnostics or Diagnostics()

    # Use '-x', 'c-header' to force parsing as C
    args = ['-x', 'c-header'] + list(clang_args or [])
    diagnostics.debug(f"Parsing header: {header_path} {' '.join(args)}")
    index = Index.create()
    try:
        tu = index.parse(header_path, args=args)
    except TranslationUnitLoadError as e:
        raise ParsehError(f"parse translation unit failure: {e}") from e

    reported = [d for d in tu.diagnostics if d.severity > Diagnostic.Ignored]
    for diag in reported:
        diagnostics.report(location_of(diag.location), diag.spelling)
    if reported:
        raise SourceDiagnosticsError(len(reported))
    return tu
