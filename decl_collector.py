from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from c_types import CALLING_CONV_C, Decl, DeclKind
from diagnostics import ContractViolation
from names import sanitize_identifier
from out_types import Function
from type_classifier import TypeClassifier


class VisitResult(Enum):
    CONTINUE = "continue"  # skip the children of this node
    RECURSE = "recurse"


# Subtrees that never contain exportable declarations.
SKIPPED_KINDS = (DeclKind.ATTRIBUTE, DeclKind.COMPOUND_STMT, DeclKind.FIELD, DeclKind.TYPEDEF)


def traverse(root, visit: Callable[[Decl], VisitResult]):
    """Depth-first, pre-order walk over the children of ``root``."""
    stack = [iter(root.get_children())]
    while stack:
        node = next(stack[-1], None)
        if node is None:
            stack.pop()
            continue
        if visit(node) == VisitResult.RECURSE:
            stack.append(iter(node.get_children()))


@dataclass
class CollectState:
    current: Optional[Function] = None
    functions: List[Function] = field(default_factory=list)
    current_decl: Optional[Decl] = None


class DeclarationCollector:
    """
    Assembles function signatures from declaration visitation events.

    Parameter types come from the function's signature when the function is
    entered; parameter names arrive afterwards, one PARAM event at a time.
    """

    def __init__(self, classifier: TypeClassifier):
        self.classifier = classifier
        self.diagnostics = classifier.diagnostics
        self.state = CollectState()

    def visit(self, decl: Decl) -> VisitResult:
        if decl.kind == DeclKind.FUNCTION:
            return self._visit_function(decl)
        if decl.kind == DeclKind.PARAM:
            self._visit_param(decl)
            return VisitResult.CONTINUE
        if decl.kind in SKIPPED_KINDS:
            return VisitResult.CONTINUE
        return VisitResult.RECURSE

    def _visit_function(self, decl: Decl) -> VisitResult:
        if not decl.storage_class.is_export:
            return VisitResult.CONTINUE

        signature = decl.signature
        if signature is None:
            raise ContractViolation(f"function '{decl.spelling}' has no type signature")
        if signature.is_variadic:
            self.diagnostics.warn(decl.location, "skipping variadic function, not yet supported")
            return VisitResult.CONTINUE
        if signature.calling_conv != CALLING_CONV_C:
            self.diagnostics.warn(
                decl.location, "skipping non c calling convention function, not yet supported")
            return VisitResult.CONTINUE

        self.finish()
        return_type = self.classifier.classify(signature.result, decl.location)
        arg_types = [self.classifier.classify(p, decl.location) for p in signature.params]
        self.state.current = Function.typed(decl.spelling, return_type, arg_types)
        self.state.current_decl = decl
        self.diagnostics.debug(f"Found Function: {decl.spelling}")
        return VisitResult.RECURSE

    def _visit_param(self, decl: Decl):
        # Parameters of function-pointer types are reported as PARAM too.
        if not decl.belongs_to(self.state.current_decl):
            self.diagnostics.debug(f"Ignoring parameter {decl.spelling!r} of a nested function type")
            return
        if self.state.current is None:
            raise ContractViolation(f"parameter '{decl.spelling}' outside of a function")
        self.state.current.name_next_arg(decl.spelling)

    def finish(self):
        """Finalizes the current function, if any."""
        fn = self.state.current
        if fn is None:
            return
        self.state.current = None
        self.state.current_decl = None
        for i, arg in enumerate(fn.args):
            arg.name = sanitize_identifier(arg.name or "", i)
        self.state.functions.append(fn)

    def collect(self, root) -> List[Function]:
        traverse(root, self.visit)
        self.finish()
        return self.state.functions


def collect(root, classifier: Optional[TypeClassifier] = None) -> List[Function]:
    """Collects the exportable function signatures below ``root``."""
    return DeclarationCollector(classifier or TypeClassifier()).collect(root)
