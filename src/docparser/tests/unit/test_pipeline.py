"""
Tests for the symbol table, environment, expansion-hook slot and
compilation pipeline.
"""

import logging

import pytest

from docparser.core.forms import Identifier, read_forms
from docparser.core.pipeline import (
    CompilationPipeline,
    DefinitionKind,
    Environment,
    NOOP_FORM,
    PipelineHookSlot,
    SymbolTable,
    default_expansion_hook,
)
from docparser.core.symbols import SymbolRef
from docparser.exceptions import EvaluationError, HookSlotBusyError, ResolutionError
from docparser.utils.logging_config import DIAGNOSTICS_LOGGER_NAME


def run(pipeline, text):
    pipeline.process_all(read_forms(text))


class TestSymbolTable:
    """Tests for namespaces and identifier resolution."""

    def test_default_namespaces(self):
        table = SymbolTable()
        assert table.current.name == "user"
        assert table.find_namespace("core") is not None

    def test_unqualified_name_interns_in_current(self):
        table = SymbolTable()
        resolution = table.resolve(Identifier("greet"))
        assert resolution.namespace == "user"
        assert not resolution.exported

    def test_standard_names_resolve_to_core(self):
        resolution = SymbolTable().resolve(Identifier("defun"))
        assert resolution.namespace == "core"
        assert resolution.exported

    def test_exported_names_visible_through_use(self):
        table = SymbolTable()
        table.define_namespace("lib", exports=["helper"])
        table.define_namespace("app", uses=["lib"])
        table.set_current("app")
        resolution = table.resolve(Identifier("HELPER"))
        assert resolution.namespace == "lib"
        assert resolution.exported

    def test_qualified_unexported_reference_is_allowed(self):
        table = SymbolTable()
        table.define_namespace("lib")
        resolution = table.resolve(Identifier("internal", "lib", internal=True))
        assert resolution.namespace == "lib"
        assert not resolution.exported

    def test_unknown_namespace(self):
        with pytest.raises(ResolutionError):
            SymbolTable().resolve(Identifier("x", "missing"))

    def test_no_current_namespace(self):
        table = SymbolTable(current=None)
        with pytest.raises(ResolutionError):
            table.resolve(Identifier("x"))

    def test_nicknames(self):
        table = SymbolTable()
        table.define_namespace("geometry", nicknames=["geo"])
        assert table.get_namespace("GEO").name == "geometry"

    def test_duplicate_nickname_rejected(self):
        table = SymbolTable()
        table.define_namespace("a", nicknames=["n"])
        with pytest.raises(ResolutionError):
            table.define_namespace("b", nicknames=["n"])

    def test_find_does_not_intern(self):
        table = SymbolTable()
        assert table.find(Identifier("ghost")) is None
        assert table.find(Identifier("ghost")) is None
        table.resolve(Identifier("ghost"))
        assert table.find(Identifier("ghost")).namespace == "user"


class TestEnvironment:
    """Tests for the definition store."""

    def setup_method(self):
        self.environment = Environment()
        self.ref = SymbolRef("user", "area", False)

    def test_define_and_lookup(self):
        self.environment.define(DefinitionKind.FUNCTION, self.ref, ())
        assert self.environment.is_defined(DefinitionKind.FUNCTION, self.ref)
        assert not self.environment.is_defined(DefinitionKind.MACRO, self.ref)

    def test_lookup_ignores_name_case_and_export_status(self):
        self.environment.define(DefinitionKind.FUNCTION, self.ref, ())
        assert self.environment.is_defined(DefinitionKind.FUNCTION, SymbolRef("user", "AREA", True))

    def test_methods_accumulate(self):
        self.environment.define(DefinitionKind.METHOD, self.ref, ("first",))
        self.environment.define(DefinitionKind.METHOD, self.ref, ("second",))
        assert len(self.environment.lookup(DefinitionKind.METHOD, self.ref)) == 2

    def test_redefinition_replaces_and_warns(self, caplog):
        self.environment.define(DefinitionKind.FUNCTION, self.ref, ("first",))
        with caplog.at_level(logging.WARNING, logger=DIAGNOSTICS_LOGGER_NAME):
            self.environment.define(DefinitionKind.FUNCTION, self.ref, ("second",))
        definitions = self.environment.lookup(DefinitionKind.FUNCTION, self.ref)
        assert [d.form for d in definitions] == [("second",)]
        assert "Redefining function user:area" in caplog.text

    def test_setf_names_are_distinct(self):
        setf_ref = SymbolRef("user", "area", False, is_setf=True)
        self.environment.define(DefinitionKind.FUNCTION, setf_ref, ())
        assert not self.environment.is_defined(DefinitionKind.FUNCTION, self.ref)


class TestPipelineHookSlot:
    """Tests for scoped acquisition of the expansion hook."""

    def setup_method(self):
        self.slot = PipelineHookSlot()

    @staticmethod
    def hook(expander, form, environment):
        return NOOP_FORM

    def test_default_hook_calls_expander(self):
        assert self.slot.current is default_expansion_hook
        assert self.slot.current(lambda form, env: ("expanded", form), "f", None) == ("expanded", "f")

    def test_acquire_returns_prior_and_release_restores_it(self):
        prior = self.slot.acquire(self.hook)
        assert prior is default_expansion_hook
        assert self.slot.current is self.hook
        assert self.slot.is_acquired
        self.slot.release(prior)
        assert self.slot.current is default_expansion_hook
        assert not self.slot.is_acquired

    def test_second_acquire_is_busy(self):
        self.slot.acquire(self.hook)
        with pytest.raises(HookSlotBusyError):
            self.slot.acquire(self.hook)

    def test_release_without_acquire(self):
        with pytest.raises(HookSlotBusyError):
            self.slot.release(default_expansion_hook)

    def test_scoped_restores_on_exception(self):
        with pytest.raises(RuntimeError):
            with self.slot.scoped(self.hook):
                assert self.slot.current is self.hook
                raise RuntimeError("boom")
        assert self.slot.current is default_expansion_hook
        assert not self.slot.is_acquired


class TestCompilationPipeline:
    """Tests for top-level form processing."""

    def test_defun_defines_function(self, pipeline):
        run(pipeline, '(defun area (w h) "Area." (* w h))')
        ref = SymbolRef("user", "area", False)
        assert pipeline.environment.is_defined(DefinitionKind.FUNCTION, ref)

    def test_namespace_forms(self, pipeline):
        run(pipeline, """
            (defpackage :geo (:use :core) (:export :area) (:nicknames :g))
            (in-package :geo)
            (defun area (w h) (* w h))
        """)
        table = pipeline.symbol_table
        assert table.current.name == "geo"
        assert table.get_namespace("g").name == "geo"
        ref = SymbolRef("geo", "area", True)
        assert pipeline.environment.is_defined(DefinitionKind.FUNCTION, ref)

    def test_export_form(self, pipeline):
        run(pipeline, "(defun helper ()) (export '(helper))")
        assert pipeline.symbol_table.resolve(Identifier("helper")).exported

    def test_progn_subforms_are_top_level(self, pipeline):
        calls = []

        def hook(expander, form, environment):
            calls.append(form[0].name)
            return expander(form, environment)

        with pipeline.hook_slot.scoped(hook):
            run(pipeline, "(progn (defun a ()) (progn (defmacro b ())))")
        assert calls == ["defun", "defmacro"]

    def test_expansion_is_processed_again(self, pipeline):
        def hook(expander, form, environment):
            if form[0].matches("defmacro"):
                return read_forms("(defun replaced ())")[0]
            return expander(form, environment)

        with pipeline.hook_slot.scoped(hook):
            run(pipeline, "(defmacro original ())")
        environment = pipeline.environment
        assert environment.is_defined(DefinitionKind.FUNCTION, SymbolRef("user", "replaced", False))
        assert not environment.is_defined(DefinitionKind.MACRO, SymbolRef("user", "original", False))

    def test_user_macros_reach_the_hook_and_are_recorded(self, pipeline):
        seen = []

        def hook(expander, form, environment):
            seen.append(form)
            return expander(form, environment)

        run(pipeline, "(defmacro with-thing (x) x)")
        with pipeline.hook_slot.scoped(hook):
            run(pipeline, "(with-thing 1)")
        assert seen[-1] == (Identifier("with-thing"), 1)
        assert (Identifier("with-thing"), 1) in pipeline.environment.calls

    def test_plain_calls_do_not_reach_the_hook(self, pipeline):
        def hook(expander, form, environment):
            raise AssertionError("hook called for a plain call")

        with pipeline.hook_slot.scoped(hook):
            run(pipeline, '(print "hello") 42 "string"')
        assert pipeline.environment.calls == [(Identifier("print"), "hello")]

    def test_unknown_namespace_in_definition(self, pipeline):
        with pytest.raises(EvaluationError):
            run(pipeline, "(defun nowhere:f ())")

    def test_in_package_unknown(self, pipeline):
        with pytest.raises(EvaluationError):
            run(pipeline, "(in-package :missing)")

    def test_definition_without_name(self, pipeline):
        with pytest.raises(EvaluationError):
            run(pipeline, "(defun)")

    def test_noop_form_is_inert(self, pipeline):
        pipeline.process(NOOP_FORM)
        assert pipeline.environment.calls == []

    def test_separate_pipelines_do_not_share_state(self):
        first = CompilationPipeline()
        second = CompilationPipeline()
        run(first, "(defun only-here ())")
        assert not second.environment.is_defined(
            DefinitionKind.FUNCTION, SymbolRef("user", "only-here", False)
        )
