"""
Tests for form handlers, the handler registry and the expansion interceptor.
"""

import pytest

from docparser.core.extraction import (
    CORE_FORM_KINDS,
    EXTENDED_FORM_KINDS,
    ExpansionInterceptor,
    FormHandlerRegistry,
    FormKind,
    extract_docstring,
    parse_class,
    parse_function,
    parse_generic_function,
    parse_macro,
    parse_method,
    parse_struct,
    parse_type,
    parse_variable,
    register_extended_handlers,
)
from docparser.core.forms import Identifier, read_forms
from docparser.core.nodes import (
    ClassNode,
    FunctionNode,
    MacroNode,
    MethodNode,
    NodeKind,
    StructNode,
    TypeNode,
    VariableNode,
)
from docparser.core.pipeline import (
    CompilationPipeline,
    DefinitionKind,
    NOOP_FORM,
    SymbolTable,
    default_expansion_hook,
)
from docparser.core.symbols import SymbolRef
from docparser.exceptions import HandlerError, HookSlotBusyError, ResolutionError


def args_of(text):
    """Arguments (everything after the head) of the single form in ``text``."""
    return read_forms(text)[0][1:]


class TestDocstringExtraction:
    """Tests for docstring detection in definition bodies."""

    def test_leading_string_is_docstring(self):
        assert extract_docstring(("Doc.", 1)) == "Doc."

    def test_string_only_body_is_docstring(self):
        assert extract_docstring(("Doc.",)) == "Doc."

    def test_non_string_first_element(self):
        assert extract_docstring((Identifier("x"), "late")) is None

    def test_empty_body(self):
        assert extract_docstring(()) is None


class TestOperatorHandlers:
    """Tests for function, macro, method and type handlers."""

    def setup_method(self):
        self.table = SymbolTable()

    def test_parse_function(self):
        node = parse_function(args_of('(defun greet (name) "Greets a person." (print name))'), self.table)
        assert isinstance(node, FunctionNode)
        assert node.name == SymbolRef("user", "greet", False)
        assert node.parameters == ("name",)
        assert node.docstring == "Greets a person."

    def test_parse_function_without_docstring(self):
        node = parse_function(args_of("(defun add (a b) (+ a b))"), self.table)
        assert node.docstring is None

    def test_parameters_keep_lambda_list_markers(self):
        node = parse_function(args_of("(defun f (a &optional (b 2) &rest more))"), self.table)
        assert node.parameters == ("a", "&optional", "(b 2)", "&rest", "more")

    def test_nil_lambda_list(self):
        node = parse_function(args_of("(defun f nil)"), self.table)
        assert node.parameters == ()

    def test_setf_function_name(self):
        node = parse_function(args_of("(defun (setf point-x) (value point))"), self.table)
        assert node.name.is_setf
        assert node.name.name == "point-x"

    def test_parse_macro(self):
        node = parse_macro(args_of('(defmacro with-point ((x y) p &body body) "Bind.")'), self.table)
        assert isinstance(node, MacroNode)
        assert node.parameters == ("(x y)", "p", "&body", "body")

    def test_parse_type(self):
        node = parse_type(args_of('(deftype small () "Small ints." (quote fixnum))'), self.table)
        assert isinstance(node, TypeNode)
        assert node.docstring == "Small ints."

    def test_parse_method_skips_qualifiers(self):
        node = parse_method(args_of('(defmethod area :around ((s square)) "Area." 1)'), self.table)
        assert isinstance(node, MethodNode)
        assert node.parameters == ("(s square)",)
        assert node.docstring == "Area."

    def test_generic_function_produces_no_node(self):
        assert parse_generic_function(args_of('(defgeneric area (shape) (:documentation "A."))'), self.table) is None

    def test_missing_lambda_list(self):
        with pytest.raises(HandlerError):
            parse_function(args_of("(defun lonely)"), self.table)

    def test_non_list_lambda_list(self):
        with pytest.raises(HandlerError):
            parse_function(args_of("(defun f x)"), self.table)

    def test_invalid_name(self):
        with pytest.raises(HandlerError):
            parse_function(args_of('(defun "named" ())'), self.table)

    def test_parse_method_nil_lambda_list(self):
        node = parse_method(args_of('(defmethod reset nil "Reset." (clear-all))'), self.table)
        assert node.parameters == ()
        assert node.docstring == "Reset."

    def test_method_without_lambda_list(self):
        with pytest.raises(HandlerError):
            parse_method(args_of("(defmethod area :before)"), self.table)

    def test_unknown_namespace_propagates(self):
        with pytest.raises(ResolutionError):
            parse_function(args_of("(defun nowhere:f ())"), self.table)


class TestExtendedHandlers:
    """Tests for variable, struct and class handlers."""

    def setup_method(self):
        self.table = SymbolTable()

    def test_parse_variable(self):
        node = parse_variable(args_of('(defvar *origin* 0 "The origin.")'), self.table)
        assert isinstance(node, VariableNode)
        assert node.name.name == "*origin*"
        assert node.docstring == "The origin."

    def test_variable_without_value(self):
        node = parse_variable(args_of("(defvar *unbound*)"), self.table)
        assert node.docstring is None

    def test_parse_struct_default_accessors(self):
        node = parse_struct(args_of('(defstruct point "A point." x (y 0))'), self.table)
        assert isinstance(node, StructNode)
        assert node.docstring == "A point."
        assert [slot.name.name for slot in node.slots] == ["x", "y"]
        assert [a.name for a in node.slots[0].accessors] == ["point-x"]

    def test_parse_struct_conc_name(self):
        node = parse_struct(args_of("(defstruct (point (:conc-name pt-)) x)"), self.table)
        assert [a.name for a in node.slots[0].accessors] == ["pt-x"]

    @pytest.mark.parametrize("option", [":conc-name", "(:conc-name)", "(:conc-name nil)"])
    def test_parse_struct_without_conc_name(self, option):
        node = parse_struct(args_of(f"(defstruct (point {option}) x)"), self.table)
        assert [a.name for a in node.slots[0].accessors] == ["x"]

    def test_parse_class(self):
        text = """
        (defclass shape ()
          ((name :initarg :name :accessor shape-name :documentation "Display name.")
           (sides :reader shape-sides :writer (setf shape-sides))
           color)
          (:documentation "A polygon."))
        """
        node = parse_class(args_of(text), self.table)
        assert isinstance(node, ClassNode)
        assert node.docstring == "A polygon."
        name_slot, sides_slot, color_slot = node.slots
        assert name_slot.docstring == "Display name."
        assert [a.name for a in name_slot.accessors] == ["shape-name"]
        assert [r.name for r in sides_slot.readers] == ["shape-sides"]
        assert sides_slot.writers[0].is_setf
        assert color_slot.accessors == ()

    def test_parse_class_odd_slot_options(self):
        with pytest.raises(HandlerError):
            parse_class(args_of("(defclass c () ((x :accessor)))"), self.table)

    def test_parse_class_requires_slot_list(self):
        with pytest.raises(HandlerError):
            parse_class(args_of("(defclass c ())"), self.table)


class TestFormHandlerRegistry:
    """Tests for handler registration and lookup."""

    def test_default_registry_covers_core_kinds(self):
        registry = FormHandlerRegistry()
        assert set(registry.kinds()) == set(CORE_FORM_KINDS)
        assert registry.lookup(FormKind.FUNCTION) is parse_function
        assert registry.lookup(FormKind.VARIABLE) is None

    def test_empty_registry(self):
        assert FormHandlerRegistry(register_defaults=False).kinds() == []

    def test_last_registration_wins(self):
        registry = FormHandlerRegistry()
        replacement = lambda args, table: None
        registry.register(FormKind.FUNCTION, replacement)
        assert registry.lookup(FormKind.FUNCTION) is replacement

    def test_register_requires_form_kind(self):
        with pytest.raises(ValueError):
            FormHandlerRegistry().register("defun", parse_function)

    def test_unregister(self):
        registry = FormHandlerRegistry()
        registry.unregister(FormKind.MACRO)
        assert not registry.has(FormKind.MACRO)

    def test_extended_handlers(self):
        registry = register_extended_handlers(FormHandlerRegistry())
        assert set(registry.kinds()) == set(CORE_FORM_KINDS) | set(EXTENDED_FORM_KINDS)

    def test_classify(self):
        assert FormKind.classify(read_forms("(DEFUN f ())")[0]) is FormKind.FUNCTION
        assert FormKind.classify(read_forms("(core:defmacro m ())")[0]) is FormKind.MACRO
        assert FormKind.classify(read_forms("(other:defun f ())")[0]) is None
        assert FormKind.classify(read_forms("(print 1)")[0]) is None
        assert FormKind.classify(Identifier("defun")) is None


class TestExpansionInterceptor:
    """Tests for the interceptor hook."""

    def setup_method(self):
        self.pipeline = CompilationPipeline()
        self.registry = FormHandlerRegistry()
        self.interceptor = ExpansionInterceptor(
            self.registry, self.pipeline.hook_slot, self.pipeline.symbol_table
        )

    def run(self, text):
        self.pipeline.process_all(read_forms(text))

    def test_install_and_uninstall(self):
        prior = self.interceptor.install()
        assert prior is default_expansion_hook
        assert self.interceptor.is_installed
        assert self.pipeline.hook_slot.current == self.interceptor.intercept
        self.interceptor.uninstall(prior)
        assert self.pipeline.hook_slot.current is default_expansion_hook
        assert not self.interceptor.is_installed

    def test_second_interceptor_is_rejected(self):
        other = ExpansionInterceptor(self.registry, self.pipeline.hook_slot, self.pipeline.symbol_table)
        with self.interceptor:
            with pytest.raises(HookSlotBusyError):
                other.install()

    def test_nodes_in_reverse_encounter_order(self):
        with self.interceptor:
            self.run("(defun f1 ()) (defmacro f2 ()) (defun f3 ())")
        assert [node.name.name for node in self.interceptor.nodes] == ["f3", "f2", "f1"]

    def test_intercepted_definitions_do_not_take_effect(self):
        with self.interceptor:
            self.run("(defun f1 ())")
        ref = SymbolRef("user", "f1", False)
        assert not self.pipeline.environment.is_defined(DefinitionKind.FUNCTION, ref)

    def test_intercept_returns_inert_form(self):
        form = read_forms("(defun f ())")[0]
        with self.interceptor:
            assert self.interceptor.intercept(self.pipeline.expand, form, self.pipeline.environment) == NOOP_FORM

    def test_unhandled_forms_are_forwarded(self):
        with self.interceptor:
            self.run("(defvar *x* 1 \"Doc.\") (defpackage :p) (in-package :p)")
        assert self.interceptor.nodes == []
        assert self.pipeline.symbol_table.current.name == "p"
        assert self.pipeline.environment.definitions_of(DefinitionKind.VARIABLE)

    def test_generic_function_is_forwarded_and_defined(self):
        with self.interceptor:
            self.run('(defgeneric area (shape)) (defmethod area ((s square)) "Area." 1)')
        assert [node.kind for node in self.interceptor.nodes] == [NodeKind.METHOD]
        ref = SymbolRef("user", "area", False)
        assert self.pipeline.environment.is_defined(DefinitionKind.GENERIC_FUNCTION, ref)

    def test_handler_error_propagates(self):
        with pytest.raises(HandlerError):
            with self.interceptor:
                self.run("(defun broken)")
        assert self.pipeline.hook_slot.current is default_expansion_hook

    def test_custom_handler_is_used(self):
        calls = []

        def handler(args, table):
            calls.append(args[0])
            return None

        self.registry.register(FormKind.FUNCTION, handler)
        with self.interceptor:
            self.run("(defun f ())")
        assert calls == [Identifier("f")]
        assert self.pipeline.environment.definitions_of(DefinitionKind.FUNCTION)
