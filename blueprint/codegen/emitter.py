"""Turn a classified function into a structured document, then into TypeScript."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Mapping, Optional, Sequence, Tuple

from ..errors import EmissionError
from ..models import AnnotatedArgument, ClassifiedFunction, FunctionAbi
from ..typetags.parser import parse_type_tag
from ..typetags.tags import address_tag
from .constants import (
    FEE_PAYER_FIELD_NAME,
    MODULE_ADDRESS_FIELD_NAME,
    PRIMARY_SENDER_FIELD_NAME,
    SECONDARY_SENDERS_FIELD_NAME,
    TYPE_TAGS_FIELD_NAME,
)
from .conversions import (
    class_name,
    entry_transform,
    input_type_string,
    to_pascal_case,
    view_return_type,
    view_transform,
)
from .renderer import CodeRenderer

ACCOUNT_INPUT_TYPE = "Account"
TYPE_TAG_INPUT_TYPE = "Array<TypeTagInput>"
FEE_PAYER_COMMENT = "optional fee payer account to sponsor the transaction"

# Names Move accepts that TypeScript reserves in parameter position.
_RESERVED_WORDS = frozenset(
    {
        "arguments", "await", "case", "catch", "class", "default", "delete", "do", "else",
        "enum", "eval", "export", "extends", "finally", "function", "implements", "import",
        "in", "instanceof", "interface", "let", "new", "package", "private", "protected",
        "public", "static", "super", "switch", "this", "throw", "try", "typeof", "var",
        "void", "with", "yield",
    }
)


@dataclass(frozen=True)
class EmitterSettings:
    function_comments: bool = True
    include_account_params: bool = True


@dataclass(frozen=True)
class Parameter:
    name: str
    type: str
    comment: str = ""
    optional: bool = False


@dataclass(frozen=True)
class ArgumentField:
    """One member of the argument record and its constructor coercion."""

    name: str
    type: str
    expression: str


@dataclass(frozen=True)
class ClassField:
    name: str
    type: str
    initializer: Optional[str] = None
    optional: bool = False
    comment: str = ""


@dataclass(frozen=True)
class Assignment:
    target: str
    expression: str


@dataclass(frozen=True)
class BuilderMethod:
    """A static entry point that instantiates the builder and assembles a request.

    Entry builders pass `transaction_fields` to `buildTransaction`; the view
    accessor passes the payload to `aptos.view` typed as `return_type`.
    """

    name: str
    parameters: List[Parameter]
    constructor_arguments: List[str]
    return_type: str
    transaction_fields: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class FunctionDocument:
    class_name: str
    module_name: str
    function_name: str
    view: bool
    arguments_type: Optional[str]
    argument_fields: List[ArgumentField]
    documentation: List[str]
    class_fields: List[ClassField]
    constructor_parameters: List[Parameter]
    assignments: List[Assignment]
    builders: List[BuilderMethod]

    @property
    def base_class(self) -> str:
        return "ViewFunctionPayloadBuilder" if self.view else "EntryFunctionPayloadBuilder"


def safe_identifier(name: str) -> str:
    return f"{name}_" if name in _RESERVED_WORDS else name


def _input_type(argument: AnnotatedArgument, *, view: bool) -> str:
    # View arguments are sent as JSON built from the serialized chain.
    if view:
        return input_type_string(argument.chain, view=True)
    return input_type_string(argument.input_chain, view=False)


def build_function_document(
    function: FunctionAbi,
    module_name: str,
    classified: ClassifiedFunction,
    names: Mapping[int, str],
    *,
    generic_clause: Optional[str] = None,
    settings: Optional[EmitterSettings] = None,
) -> FunctionDocument:
    """Describe the generated builder for `function` as data.

    `names` maps each declared parameter position to its source name.
    """
    settings = settings or EmitterSettings()
    view = function.is_view
    if view and classified.signer_arguments:
        raise EmissionError(f"View function {function.name} cannot take a signer")

    class_ = to_pascal_case(function.name)
    arguments_type = f"{class_}PayloadMoveArguments" if classified.function_arguments else None
    generics = ", ".join(classified.generic_slots) or (generic_clause or "")
    has_type_tags = bool(function.generic_type_params)

    def name_of(argument: AnnotatedArgument) -> str:
        try:
            return safe_identifier(names[argument.position])
        except KeyError:
            raise EmissionError(
                f"No name for parameter {argument.position} of {function.name}"
            ) from None

    argument_fields = [
        ArgumentField(
            name=name_of(argument),
            type=(
                _input_type(argument, view=True)
                if view
                else argument.class_name
            ),
            expression=(
                view_transform(name_of(argument), argument.chain)
                if view
                else entry_transform(name_of(argument), argument.chain)
            ),
        )
        for argument in classified.function_arguments
    ]
    argument_parameters = [
        Parameter(
            name=name_of(argument),
            type=_input_type(argument, view=view),
            comment=argument.annotation,
        )
        for argument in classified.function_arguments
    ]
    type_tag_parameters = (
        [Parameter(name=TYPE_TAGS_FIELD_NAME, type=TYPE_TAG_INPUT_TYPE, comment=generics)]
        if has_type_tags
        else []
    )

    documentation: List[str] = []
    if settings.function_comments:
        documentation = _documentation(function, classified, generics, name_of)

    if view:
        return _view_document(
            function,
            module_name,
            class_,
            arguments_type,
            argument_fields,
            argument_parameters,
            type_tag_parameters,
            documentation,
            generics,
        )

    account_type = ACCOUNT_INPUT_TYPE if settings.include_account_params else input_type_string(
        [address_tag()], view=False
    )
    signer_parameters = [
        Parameter(name=name_of(argument), type=account_type, comment=argument.annotation)
        for argument in classified.signer_arguments
    ]
    if not signer_parameters:
        signer_parameters = [
            Parameter(name=PRIMARY_SENDER_FIELD_NAME, type=account_type, comment="transaction sender")
        ]

    def to_address(expression: str) -> str:
        if settings.include_account_params:
            return f"{expression}.accountAddress"
        return f"AccountAddress.fromRelaxed({expression})"

    address_class = class_name(address_tag().kind)
    secondary = signer_parameters[1:]
    class_fields = [
        ClassField("moduleAddress", "", initializer=MODULE_ADDRESS_FIELD_NAME),
        ClassField("moduleName", "", initializer=f'"{module_name}"'),
        ClassField("functionName", "", initializer=f'"{function.name}"'),
        ClassField(PRIMARY_SENDER_FIELD_NAME, address_class),
        ClassField(
            SECONDARY_SENDERS_FIELD_NAME,
            f"[{', '.join(address_class for _ in secondary)}]",
            initializer=None if secondary else "[]",
        ),
        ClassField("args", arguments_type or "{}"),
        ClassField(TYPE_TAGS_FIELD_NAME, "Array<TypeTag>", initializer="[]", comment=generics),
        ClassField(FEE_PAYER_FIELD_NAME, address_class, optional=True),
    ]

    fee_payer = Parameter(
        name=FEE_PAYER_FIELD_NAME, type=account_type, comment=FEE_PAYER_COMMENT, optional=True
    )
    constructor_parameters = [*signer_parameters, *argument_parameters, *type_tag_parameters, fee_payer]

    assignments = [Assignment(PRIMARY_SENDER_FIELD_NAME, to_address(signer_parameters[0].name))]
    if secondary:
        assignments.append(
            Assignment(
                SECONDARY_SENDERS_FIELD_NAME,
                f"[{', '.join(to_address(parameter.name) for parameter in secondary)}]",
            )
        )
    assignments.extend(_argument_assignments(argument_fields, has_type_tags))
    assignments.append(
        Assignment(
            FEE_PAYER_FIELD_NAME,
            f"{FEE_PAYER_FIELD_NAME} !== undefined ? {to_address(FEE_PAYER_FIELD_NAME)} : undefined",
        )
    )

    inputs = [*signer_parameters, *argument_parameters, *type_tag_parameters]
    builders = [
        _entry_builder("build", inputs, secondary_senders=bool(secondary), fee_payer=None),
        _entry_builder("buildWithFeePayer", inputs, secondary_senders=bool(secondary), fee_payer=fee_payer),
    ]

    return FunctionDocument(
        class_name=class_,
        module_name=module_name,
        function_name=function.name,
        view=False,
        arguments_type=arguments_type,
        argument_fields=argument_fields,
        documentation=documentation,
        class_fields=class_fields,
        constructor_parameters=constructor_parameters,
        assignments=assignments,
        builders=builders,
    )


def _view_document(
    function: FunctionAbi,
    module_name: str,
    class_: str,
    arguments_type: Optional[str],
    argument_fields: List[ArgumentField],
    argument_parameters: List[Parameter],
    type_tag_parameters: List[Parameter],
    documentation: List[str],
    generics: str,
) -> FunctionDocument:
    return_types = [view_return_type(parse_type_tag(item)) for item in function.returns]
    return_type = f"[{', '.join(return_types)}]"
    inputs = [*argument_parameters, *type_tag_parameters]
    accessor = BuilderMethod(
        name="view",
        parameters=[
            Parameter(name="aptos", type="Aptos"),
            *inputs,
            Parameter(name="options", type="LedgerVersionArg", optional=True),
        ],
        constructor_arguments=[parameter.name for parameter in inputs],
        return_type=return_type,
    )
    class_fields = [
        ClassField("moduleAddress", "", initializer=MODULE_ADDRESS_FIELD_NAME),
        ClassField("moduleName", "", initializer=f'"{module_name}"'),
        ClassField("functionName", "", initializer=f'"{function.name}"'),
        ClassField("args", arguments_type or "{}"),
        ClassField(TYPE_TAGS_FIELD_NAME, "Array<TypeTag>", initializer="[]", comment=generics),
    ]
    return FunctionDocument(
        class_name=class_,
        module_name=module_name,
        function_name=function.name,
        view=True,
        arguments_type=arguments_type,
        argument_fields=argument_fields,
        documentation=documentation,
        class_fields=class_fields,
        constructor_parameters=inputs,
        assignments=_argument_assignments(argument_fields, bool(type_tag_parameters)),
        builders=[accessor],
    )


def _argument_assignments(fields: Sequence[ArgumentField], has_type_tags: bool) -> List[Assignment]:
    record = ", ".join(f"{item.name}: {item.expression}" for item in fields)
    assignments = [Assignment("args", f"{{ {record} }}" if record else "{}")]
    if has_type_tags:
        assignments.append(
            Assignment(
                TYPE_TAGS_FIELD_NAME,
                f'{TYPE_TAGS_FIELD_NAME}.map(typeTag => typeof typeTag === "string" ? parseTypeTag(typeTag) : typeTag)',
            )
        )
    return assignments


def _entry_builder(
    name: str,
    inputs: Sequence[Parameter],
    *,
    secondary_senders: bool,
    fee_payer: Optional[Parameter],
) -> BuilderMethod:
    parameters = [*inputs, Parameter(name="aptosConfig", type="AptosConfig")]
    constructor_arguments = [parameter.name for parameter in inputs]
    transaction_fields = [
        ("aptosConfig", "aptosConfig"),
        ("sender", f"payloadBuilder.{PRIMARY_SENDER_FIELD_NAME}"),
    ]
    if fee_payer is not None:
        parameters.append(fee_payer)
        constructor_arguments.append(fee_payer.name)
        transaction_fields.append(
            ("feePayerAddress", f"payloadBuilder.{FEE_PAYER_FIELD_NAME} ?? AccountAddress.ZERO")
        )
    if secondary_senders:
        transaction_fields.append(
            ("secondarySignerAddresses", f"payloadBuilder.{SECONDARY_SENDERS_FIELD_NAME}")
        )
    transaction_fields.append(("payload", "payloadBuilder.toPayload()"))
    transaction_fields.append(("options", "options"))
    parameters.append(Parameter(name="options", type="InputGenerateTransactionOptions", optional=True))
    return BuilderMethod(
        name=name,
        parameters=parameters,
        constructor_arguments=constructor_arguments,
        return_type="RawTransaction",
        transaction_fields=transaction_fields,
    )


def _documentation(
    function: FunctionAbi,
    classified: ClassifiedFunction,
    generics: str,
    name_of: Callable[[AnnotatedArgument], str],
) -> List[str]:
    keyword = f"{function.visibility}{' entry' if function.is_entry else ''} fun"
    clause = f"<{generics}>" if generics else ""
    lines = [f"{keyword} {function.name}{clause}("]
    arguments = sorted(
        [*classified.signer_arguments, *classified.function_arguments],
        key=lambda argument: argument.position,
    )
    lines.extend(f"   {name_of(argument)}: {argument.annotation}," for argument in arguments)
    lines.append(" )")
    return lines


def emit(
    function: FunctionAbi,
    module_name: str,
    classified: ClassifiedFunction,
    names: Mapping[int, str],
    *,
    generic_clause: Optional[str] = None,
    settings: Optional[EmitterSettings] = None,
    renderer: Optional[CodeRenderer] = None,
) -> str:
    """Render the builder for one function as TypeScript text."""
    document = build_function_document(
        function,
        module_name,
        classified,
        names,
        generic_clause=generic_clause,
        settings=settings,
    )
    return (renderer or CodeRenderer()).render_function(document)


__all__ = [
    "ArgumentField",
    "Assignment",
    "BuilderMethod",
    "ClassField",
    "EmitterSettings",
    "FunctionDocument",
    "Parameter",
    "build_function_document",
    "emit",
    "safe_identifier",
]
