"""
Compilation Pipeline

Processes top-level forms against an Environment. Macro forms (the standard
definition macros and any user-defined macro) are expanded through the
hook slot's active hook and the expansion is processed again as a top-level
form; special operators are evaluated directly; any other list is recorded
as a call. ``progn`` subforms are top-level forms, so they reach the hook
too.
"""

import logging
from typing import Iterable, List, Optional

from ...exceptions import EvaluationError, ResolutionError
from ...utils.logging_config import get_diagnostics_logger
from ..forms import Form, Identifier, form_head, is_setf_name, keyword, render_form
from ..symbols import SymbolRef
from .environment import DefinitionKind, Environment
from .hook_slot import PipelineHookSlot

logger = logging.getLogger(__name__)
diagnostics = get_diagnostics_logger()

DEFINITION_MACROS = {
    "defun": DefinitionKind.FUNCTION,
    "defmacro": DefinitionKind.MACRO,
    "defgeneric": DefinitionKind.GENERIC_FUNCTION,
    "defmethod": DefinitionKind.METHOD,
    "defvar": DefinitionKind.VARIABLE,
    "defparameter": DefinitionKind.VARIABLE,
    "defconstant": DefinitionKind.VARIABLE,
    "defstruct": DefinitionKind.STRUCT,
    "defclass": DefinitionKind.CLASS,
    "deftype": DefinitionKind.TYPE,
}
NAMESPACE_MACROS = frozenset({"defpackage", "in-package"})
STANDARD_MACROS = frozenset(DEFINITION_MACROS) | NAMESPACE_MACROS

SPECIAL_OPERATORS = frozenset({
    "progn",
    "quote",
    "declare",
    "export",
    "%define",
    "%define-namespace",
    "%in-namespace",
})

# Inert expansion: an empty progn evaluates nothing.
NOOP_FORM = (Identifier("progn"),)


def _designator_name(form: Form, context: Form) -> str:
    if isinstance(form, Identifier):
        return form.name
    if isinstance(form, str) and form:
        return form
    raise EvaluationError(f"Invalid namespace designator {render_form(form)}", context)


def _quoted_identifiers(args: Iterable[Form], context: Form) -> List[Identifier]:
    identifiers = []
    for arg in args:
        head = form_head(arg)
        if head is not None and head.matches("quote") and len(arg) == 2:
            arg = arg[1]
        items = arg if isinstance(arg, tuple) else (arg,)
        for item in items:
            if not isinstance(item, Identifier):
                raise EvaluationError(f"Cannot export {render_form(item)}", context)
            identifiers.append(item)
    return identifiers


class CompilationPipeline:
    """Top-level form processor with a replaceable expansion hook."""
    
    def __init__(
        self,
        environment: Optional[Environment] = None,
        hook_slot: Optional[PipelineHookSlot] = None
    ) -> None:
        self.environment = environment or Environment()
        self.hook_slot = hook_slot or PipelineHookSlot()
    
    @property
    def symbol_table(self):
        return self.environment.symbol_table
    
    def process_all(self, forms: Iterable[Form]) -> None:
        for form in forms:
            self.process(form)
    
    def process(self, form: Form) -> None:
        """Process one top-level form.
        
        Raises:
            EvaluationError: If a form cannot be evaluated
        """
        head = form_head(form)
        if head is None:
            if isinstance(form, tuple) and form:
                self.environment.record_call(form)
            return
        
        if self.is_special(head):
            self._evaluate_special(head.name.lower(), form)
        elif self.is_macro(head):
            expansion = self.hook_slot.current(self.expand, form, self.environment)
            self.process(expansion)
        else:
            self.environment.record_call(form)
    
    def is_special(self, head: Identifier) -> bool:
        return head.is_standard and head.name.lower() in SPECIAL_OPERATORS
    
    def is_macro(self, head: Identifier) -> bool:
        if head.is_standard and head.name.lower() in STANDARD_MACROS:
            return True
        return self.environment.is_macro(head)
    
    def expand(self, form: Form, environment: Environment) -> Form:
        """Default expander for macro forms."""
        head = form_head(form)
        name = head.name.lower()
        
        if head.is_standard and name in DEFINITION_MACROS:
            if len(form) < 2:
                raise EvaluationError(f"{name} requires a name", form)
            return (Identifier("%define"), keyword(DEFINITION_MACROS[name].value)) + form[1:]
        
        if head.is_standard and name == "defpackage":
            if len(form) < 2:
                raise EvaluationError("defpackage requires a name", form)
            return (Identifier("%define-namespace"),) + form[1:]
        
        if head.is_standard and name == "in-package":
            if len(form) != 2:
                raise EvaluationError("in-package takes exactly one namespace", form)
            return (Identifier("%in-namespace"), form[1])
        
        # User-defined macros are recorded, not expanded.
        environment.record_call(form)
        return NOOP_FORM
    
    def _evaluate_special(self, name: str, form: Form) -> None:
        if name == "progn":
            for subform in form[1:]:
                self.process(subform)
        elif name == "export":
            self._export(form)
        elif name == "%define":
            self._define(form)
        elif name == "%define-namespace":
            self._define_namespace(form)
        elif name == "%in-namespace":
            self._in_namespace(form)
        # quote and declare have no effect at top level
    
    def _define(self, form: Form) -> None:
        if len(form) < 3 or not isinstance(form[1], Identifier):
            raise EvaluationError(f"Malformed definition {render_form(form)}", form)
        try:
            kind = DefinitionKind(form[1].name)
        except ValueError as e:
            raise EvaluationError(f"Unknown definition kind {form[1]}", form) from e
        name_form = form[2]
        if kind is DefinitionKind.STRUCT and isinstance(name_form, tuple) and name_form:
            name_form = name_form[0]
        
        is_setf = is_setf_name(name_form)
        identifier = name_form[1] if is_setf else name_form
        if not isinstance(identifier, Identifier):
            raise EvaluationError(f"Invalid {kind} name {render_form(name_form)}", form)
        
        try:
            ref = SymbolRef.from_identifier(identifier, self.symbol_table, is_setf=is_setf)
        except ResolutionError as e:
            raise EvaluationError(str(e), form) from e
        self.environment.define(kind, ref, form)
    
    def _export(self, form: Form) -> None:
        identifiers = _quoted_identifiers(form[1:], form)
        try:
            self.symbol_table.export(identifiers)
        except ResolutionError as e:
            raise EvaluationError(str(e), form) from e
    
    def _define_namespace(self, form: Form) -> None:
        if len(form) < 2:
            raise EvaluationError("Namespace definition requires a name", form)
        name = _designator_name(form[1], form)
        uses: List[str] = []
        exports: List[str] = []
        nicknames: List[str] = []
        
        for option in form[2:]:
            head = form_head(option)
            if head is None or not head.is_keyword:
                raise EvaluationError(f"Invalid namespace option {render_form(option)}", form)
            if head.matches("use"):
                uses.extend(_designator_name(value, form) for value in option[1:])
            elif head.matches("export"):
                exports.extend(_designator_name(value, form) for value in option[1:])
            elif head.matches("nicknames"):
                nicknames.extend(_designator_name(value, form) for value in option[1:])
            else:
                logger.debug("Ignoring namespace option %s", head)
        
        existing = self.symbol_table.find_namespace(name)
        if existing is not None:
            diagnostics.warning("Namespace %s is being redefined", existing.name)
        
        try:
            self.symbol_table.define_namespace(name, uses=uses, exports=exports, nicknames=nicknames)
        except ResolutionError as e:
            raise EvaluationError(str(e), form) from e
    
    def _in_namespace(self, form: Form) -> None:
        if len(form) != 2:
            raise EvaluationError("Namespace switch requires exactly one name", form)
        name = _designator_name(form[1], form)
        try:
            self.symbol_table.set_current(name)
        except ResolutionError as e:
            raise EvaluationError(str(e), form) from e
