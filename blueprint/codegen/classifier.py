"""Classification of function parameters into signer, regular and generic buckets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence

from ..errors import ClassificationError, EmissionError
from ..models import AnnotatedArgument, ClassifiedFunction, GenericTypeParam
from ..typetags.flatten import flatten, truncated_type_tag_string
from ..typetags.tags import (
    TypeKind,
    TypeTag,
    is_generic,
    is_object,
    is_option,
    is_signer,
    is_signer_reference,
    vector_of,
)
from .constants import DEFAULT_ARGUMENT_BASE
from .conversions import class_name, class_names_string


@dataclass(frozen=True)
class AnnotationSettings:
    """How documentation annotations render struct types."""

    named_addresses: Mapping[str, str]
    named_type_tags: Mapping[str, str]
    expanded_structs: bool = False

    def annotate(self, tag: TypeTag) -> str:
        if self.expanded_structs:
            return str(tag)
        return truncated_type_tag_string(
            tag,
            named_addresses=self.named_addresses,
            named_type_tags=self.named_type_tags,
        )


_PLAIN_ANNOTATIONS = AnnotationSettings(named_addresses={}, named_type_tags={})


def classify(
    type_tags: Sequence[TypeTag],
    generic_type_params: Sequence[GenericTypeParam] = (),
    *,
    annotations: AnnotationSettings | None = None,
    replace_option_with_vector: bool = True,
) -> ClassifiedFunction:
    """Split `type_tags` into signer arguments, regular arguments and generic slots.

    Parameter order is preserved within each bucket. A trailing generic in a
    nested chain claims the next generic slot; when that generic sits inside
    an `Object`, the object wrapper alone is the argument. An `Object` of a
    concrete type is likewise reduced to the object wrapper (an address).
    Errors name the parameter they concern through their `signature`.
    """
    settings = annotations or _PLAIN_ANNOTATIONS
    classified = ClassifiedFunction()

    for position, tag in enumerate(type_tags):
        try:
            _classify_parameter(
                classified, position, tag, generic_type_params, settings, replace_option_with_vector
            )
        except EmissionError as exc:
            if exc.signature:
                raise
            raise EmissionError(f"Parameter {position}: {exc}", signature=str(tag)) from exc

    return classified


def _classify_parameter(
    classified: ClassifiedFunction,
    position: int,
    tag: TypeTag,
    generic_type_params: Sequence[GenericTypeParam],
    settings: AnnotationSettings,
    replace_option_with_vector: bool,
) -> None:
    chain = flatten(tag)
    annotation = settings.annotate(tag)

    head = chain[0]
    if is_signer(head) or is_signer_reference(head):
        classified.signer_arguments.append(
            AnnotatedArgument(
                position=position,
                chain=[head],
                input_chain=[head],
                class_name=class_name(TypeKind.SIGNER),
                annotation=annotation,
            )
        )
        return

    if len(chain) > 1:
        second_to_last = chain[-2]
        if is_generic(chain[-1]):
            classified.generic_slots.append(
                _generic_slot(len(classified.generic_slots), generic_type_params)
            )
            if is_object(second_to_last):
                chain = chain[:-1]
        elif is_object(second_to_last):
            chain = chain[:-1]

    input_chain = list(chain)
    if replace_option_with_vector:
        # Options serialize exactly like zero-or-one element vectors.
        chain = [vector_of(item.value) if is_option(item) else item for item in chain]

    classified.function_arguments.append(
        AnnotatedArgument(
            position=position,
            chain=chain,
            input_chain=input_chain,
            class_name=class_names_string(chain),
            annotation=annotation,
        )
    )


def _generic_slot(index: int, generic_type_params: Sequence[GenericTypeParam]) -> str:
    name = f"T{index}"
    constraints: List[str] = []
    if index < len(generic_type_params):
        constraints = [item for item in generic_type_params[index].constraints if item]
    if constraints:
        return f"{name}: {' + '.join(constraints)}"
    return name


def placeholder_names(count: int) -> List[str]:
    """Positional names used when parameter names are not recovered."""
    return [f"{DEFAULT_ARGUMENT_BASE}{index}" for index in range(count)]


def assign_argument_names(names: Sequence[str], *, parameter_count: int) -> Dict[int, str]:
    """Map each parameter position to its name, validating the name count."""
    if len(names) != parameter_count:
        raise ClassificationError(
            f"Recovered {len(names)} parameter names for {parameter_count} parameters"
        )
    return {index: name for index, name in enumerate(names)}


__all__ = [
    "AnnotationSettings",
    "assign_argument_names",
    "classify",
    "placeholder_names",
]
