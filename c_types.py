from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class CKind(Enum):
    VOID = "void"
    BOOL = "bool"
    CHAR = "char"  # plain char, signedness left to the target
    SIGNED = "signed"
    UNSIGNED = "unsigned"
    FLOAT = "float"
    DOUBLE = "double"
    LONG_DOUBLE = "long double"
    POINTER = "pointer"
    INCOMPLETE_ARRAY = "incomplete array"
    CONSTANT_ARRAY = "constant array"
    RECORD = "record"
    ENUM = "enum"
    TYPEDEF = "typedef"
    FUNCTION_PROTO = "function proto"
    UNEXPOSED = "unexposed"
    ELABORATED = "elaborated"
    UNSUPPORTED = "unsupported"


@dataclass
class CType:
    """
    A C type as handed over by the AST provider.

    Only the fields relevant to ``kind`` are populated:
      - ``width`` for SIGNED / UNSIGNED (in bits)
      - ``pointee`` for POINTER and both array kinds (the element type)
      - ``length`` for CONSTANT_ARRAY
      - ``underlying`` for TYPEDEF (the aliased type), UNEXPOSED (the
        canonical type) and ELABORATED (the named type)
      - ``unsupported`` names the construct for UNSUPPORTED
    """
    kind: CKind
    spelling: str = ""
    is_const: bool = False
    width: int = 0
    pointee: Optional['CType'] = None
    length: Optional[int] = None
    underlying: Optional['CType'] = None
    unsupported: str = ""

    @classmethod
    def scalar(cls, kind: CKind, spelling: str = "", is_const: bool = False) -> 'CType':
        return cls(kind=kind, spelling=spelling or kind.value, is_const=is_const)

    @classmethod
    def integer(cls, width: int, signed: bool = True, spelling: str = "", is_const: bool = False) -> 'CType':
        kind = CKind.SIGNED if signed else CKind.UNSIGNED
        if not spelling:
            spelling = f"{'' if signed else 'u'}int{width}"
        return cls(kind=kind, spelling=spelling, is_const=is_const, width=width)

    @classmethod
    def pointer(cls, pointee: 'CType', is_const: bool = False) -> 'CType':
        return cls(kind=CKind.POINTER, spelling=f"{pointee.spelling} *",
                   is_const=is_const, pointee=pointee)

    @classmethod
    def array(cls, element: 'CType', length: Optional[int] = None) -> 'CType':
        if length is None:
            return cls(kind=CKind.INCOMPLETE_ARRAY, spelling=f"{element.spelling} []",
                       pointee=element)
        return cls(kind=CKind.CONSTANT_ARRAY, spelling=f"{element.spelling} [{length}]",
                   pointee=element, length=length)

    @classmethod
    def typedef(cls, name: str, underlying: 'CType', is_const: bool = False) -> 'CType':
        spelling = f"const {name}" if is_const else name
        return cls(kind=CKind.TYPEDEF, spelling=spelling, is_const=is_const, underlying=underlying)

    @classmethod
    def unsupported_kind(cls, name: str, spelling: str = "") -> 'CType':
        return cls(kind=CKind.UNSUPPORTED, spelling=spelling or name, unsupported=name)


@dataclass(frozen=True)
class SourceLocation:
    file: str
    line: int
    column: int

    def __str__(self):
        return f"{self.file} line {self.line}, column {self.column}"


UNKNOWN_LOCATION = SourceLocation(file="<unknown>", line=0, column=0)


class DeclKind(Enum):
    FUNCTION = "function"
    PARAM = "param"
    ATTRIBUTE = "attribute"
    COMPOUND_STMT = "compound statement"
    FIELD = "field"
    TYPEDEF = "typedef"
    OTHER = "other"


class StorageClass(Enum):
    INVALID = "invalid"
    NONE = "none"
    EXTERN = "extern"
    STATIC = "static"
    PRIVATE_EXTERN = "private extern"
    OPENCL_WORKGROUP_LOCAL = "opencl workgroup local"
    AUTO = "auto"
    REGISTER = "register"

    @property
    def is_export(self) -> bool:
        return self in (StorageClass.NONE, StorageClass.EXTERN, StorageClass.AUTO)


CALLING_CONV_C = "c"


@dataclass
class FunctionSignature:
    result: CType
    params: List[CType] = field(default_factory=list)
    is_variadic: bool = False
    calling_conv: str = CALLING_CONV_C


@dataclass
class Decl:
    """A node of the declaration tree, in the shape the collector walks."""
    kind: DeclKind
    spelling: str = ""
    location: SourceLocation = UNKNOWN_LOCATION
    storage_class: StorageClass = StorageClass.NONE
    signature: Optional[FunctionSignature] = None
    children: List['Decl'] = field(default_factory=list)
    # The declaration a PARAM belongs to; None trusts the event order.
    owner: Optional['Decl'] = field(default=None, repr=False, compare=False)

    def get_children(self):
        return iter(self.children)

    def belongs_to(self, fn: Optional['Decl']) -> bool:
        return self.owner is None or self.owner is fn
