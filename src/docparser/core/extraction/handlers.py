"""
Form Handlers

Extraction functions that turn the arguments of a recognized definition
form into a documentation node. Handlers only destructure the form; they
never evaluate it. Shape problems raise HandlerError.
"""

from typing import List, Optional, Tuple

from ...exceptions import HandlerError
from ..forms import Form, Identifier, form_head, is_setf_name, render_form
from ..nodes import (
    ClassNode,
    FunctionNode,
    MacroNode,
    MethodNode,
    SlotNode,
    StructNode,
    TypeNode,
    VariableNode,
)
from ..symbols import SymbolRef


def extract_docstring(body: Tuple[Form, ...]) -> Optional[str]:
    """The first body element when it is a string literal, else None."""
    if body and isinstance(body[0], str):
        return body[0]
    return None


def resolve_name(name_form: Form, symbol_table, label: str) -> SymbolRef:
    """Resolve a definition name, including ``(setf NAME)`` names."""
    if is_setf_name(name_form):
        return SymbolRef.from_identifier(name_form[1], symbol_table, is_setf=True)
    if isinstance(name_form, Identifier) and not name_form.is_keyword:
        return SymbolRef.from_identifier(name_form, symbol_table)
    raise HandlerError(f"Invalid {label} name: {render_form(name_form)}", name_form)


def _parameters(lambda_list: Form, label: str) -> Tuple[str, ...]:
    if isinstance(lambda_list, Identifier) and lambda_list.matches("nil"):
        return ()
    if not isinstance(lambda_list, tuple):
        raise HandlerError(f"{label} lambda list must be a list, got {render_form(lambda_list)}", lambda_list)
    return tuple(render_form(parameter) for parameter in lambda_list)


def _operator_handler(node_type, label: str):
    def handler(args: Tuple[Form, ...], symbol_table):
        if len(args) < 2:
            raise HandlerError(f"{label} form requires a name and a lambda list", args)
        return node_type(
            name=resolve_name(args[0], symbol_table, label),
            parameters=_parameters(args[1], label),
            docstring=extract_docstring(args[2:]),
        )
    
    handler.__name__ = f"parse_{label}"
    handler.__doc__ = f"Extract a {node_type.__name__} from ``(name lambda-list . body)``."
    return handler


parse_function = _operator_handler(FunctionNode, "function")
parse_macro = _operator_handler(MacroNode, "macro")
parse_type = _operator_handler(TypeNode, "type")


def parse_method(args: Tuple[Form, ...], symbol_table):
    """Extract a MethodNode from ``(name qualifier* specialized-lambda-list . body)``."""
    if not args:
        raise HandlerError("method form requires a name", args)
    
    name = resolve_name(args[0], symbol_table, "method")
    for index in range(1, len(args)):
        lambda_list = args[index]
        if isinstance(lambda_list, tuple) or (isinstance(lambda_list, Identifier) and lambda_list.matches("nil")):
            return MethodNode(
                name=name,
                parameters=_parameters(lambda_list, "method"),
                docstring=extract_docstring(args[index + 1:]),
            )
    raise HandlerError(f"method {render_form(args[0])} has no lambda list", args)


def parse_generic_function(args: Tuple[Form, ...], symbol_table):
    """Generic-function definitions are recognized but produce no node."""
    return None


def parse_variable(args: Tuple[Form, ...], symbol_table):
    """Extract a VariableNode from ``(name [initial-value [docstring]])``."""
    if not args:
        raise HandlerError("variable form requires a name", args)
    if not isinstance(args[0], Identifier) or args[0].is_keyword:
        raise HandlerError(f"Invalid variable name: {render_form(args[0])}", args[0])
    
    return VariableNode(
        name=SymbolRef.from_identifier(args[0], symbol_table),
        docstring=extract_docstring(args[2:]),
    )


def _plist(items: Tuple[Form, ...], context: Form) -> List[Tuple[Identifier, Form]]:
    if len(items) % 2:
        raise HandlerError(f"Odd number of options in {render_form(context)}", context)
    pairs = []
    for index in range(0, len(items), 2):
        key = items[index]
        if not isinstance(key, Identifier) or not key.is_keyword:
            raise HandlerError(f"Expected a keyword option in {render_form(context)}", context)
        pairs.append((key, items[index + 1]))
    return pairs


def _struct_conc_name(name_and_options: Form, name: Identifier) -> str:
    """Accessor prefix for a structure; an empty or nil conc-name means no prefix."""
    prefix = f"{name.name}-"
    if not isinstance(name_and_options, tuple):
        return prefix
    
    for option in name_and_options[1:]:
        if isinstance(option, Identifier) and option.matches("conc-name"):
            return ""
        head = form_head(option)
        if head is not None and head.matches("conc-name"):
            if len(option) < 2:
                return ""
            value = option[1]
            if isinstance(value, Identifier):
                return "" if value.matches("nil") else value.name
            if isinstance(value, str):
                return value
    return prefix


def parse_struct(args: Tuple[Form, ...], symbol_table):
    """Extract a StructNode from ``(name-and-options [docstring] slot*)``."""
    if not args:
        raise HandlerError("structure form requires a name", args)
    
    name_and_options = args[0]
    name_form = name_and_options[0] if isinstance(name_and_options, tuple) and name_and_options else name_and_options
    if not isinstance(name_form, Identifier) or name_form.is_keyword:
        raise HandlerError(f"Invalid structure name: {render_form(name_and_options)}", args)
    conc_name = _struct_conc_name(name_and_options, name_form)
    
    rest = args[1:]
    docstring = extract_docstring(rest)
    if docstring is not None:
        rest = rest[1:]
    
    slots = []
    for slot_spec in rest:
        slot_name = slot_spec[0] if isinstance(slot_spec, tuple) and slot_spec else slot_spec
        if not isinstance(slot_name, Identifier) or slot_name.is_keyword:
            raise HandlerError(f"Invalid structure slot: {render_form(slot_spec)}", slot_spec)
        accessor = Identifier(f"{conc_name}{slot_name.name}")
        accessors = (SymbolRef.from_identifier(accessor, symbol_table),)
        slots.append(SlotNode(
            name=SymbolRef.from_identifier(slot_name, symbol_table),
            accessors=accessors,
        ))
    
    return StructNode(
        name=SymbolRef.from_identifier(name_form, symbol_table),
        docstring=docstring,
        slots=tuple(slots),
    )


def _parse_class_slot(slot_spec: Form, symbol_table) -> SlotNode:
    if isinstance(slot_spec, Identifier) and not slot_spec.is_keyword:
        return SlotNode(name=SymbolRef.from_identifier(slot_spec, symbol_table))
    if not isinstance(slot_spec, tuple) or not slot_spec or not isinstance(slot_spec[0], Identifier):
        raise HandlerError(f"Invalid class slot: {render_form(slot_spec)}", slot_spec)
    
    accessors, readers, writers = [], [], []
    docstring = None
    for key, value in _plist(slot_spec[1:], slot_spec):
        if key.matches("accessor"):
            accessors.append(resolve_name(value, symbol_table, "accessor"))
        elif key.matches("reader"):
            readers.append(resolve_name(value, symbol_table, "reader"))
        elif key.matches("writer"):
            writers.append(resolve_name(value, symbol_table, "writer"))
        elif key.matches("documentation") and isinstance(value, str):
            docstring = value
    
    return SlotNode(
        name=SymbolRef.from_identifier(slot_spec[0], symbol_table),
        docstring=docstring,
        accessors=tuple(accessors),
        readers=tuple(readers),
        writers=tuple(writers),
    )


def parse_class(args: Tuple[Form, ...], symbol_table):
    """Extract a ClassNode from ``(name (superclass*) (slot*) option*)``."""
    if len(args) < 3:
        raise HandlerError("class form requires a name, superclasses and slots", args)
    
    name_form, superclasses, slot_specs = args[0], args[1], args[2]
    if not isinstance(name_form, Identifier) or name_form.is_keyword:
        raise HandlerError(f"Invalid class name: {render_form(name_form)}", args)
    if not isinstance(superclasses, tuple) and not (isinstance(superclasses, Identifier) and superclasses.matches("nil")):
        raise HandlerError(f"Invalid superclass list: {render_form(superclasses)}", args)
    if isinstance(slot_specs, Identifier) and slot_specs.matches("nil"):
        slot_specs = ()
    if not isinstance(slot_specs, tuple):
        raise HandlerError(f"Invalid slot list: {render_form(slot_specs)}", args)
    
    docstring = None
    for option in args[3:]:
        head = form_head(option)
        if head is not None and head.matches("documentation") and len(option) > 1 and isinstance(option[1], str):
            docstring = option[1]
    
    return ClassNode(
        name=SymbolRef.from_identifier(name_form, symbol_table),
        docstring=docstring,
        slots=tuple(_parse_class_slot(slot_spec, symbol_table) for slot_spec in slot_specs),
    )
