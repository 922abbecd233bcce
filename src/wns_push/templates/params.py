"""Template parameter descriptors.

TemplateParams carries the ordered parameters of one template send: src and
alt for each image, then each text field. It is built either from positional
values or from a mapping using the image{i}src / image{i}alt / text{i} keys.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Self

from wns_push.errors import WNSValidationError
from wns_push.templates.registry import TemplateSpec, get_template

__all__ = ["TemplateParams"]


@dataclass(slots=True, frozen=True)
class TemplateParams:
    """Ordered, unescaped parameters of a template send."""

    template: TemplateSpec
    values: tuple[str, ...]

    @classmethod
    def from_positional(cls, template: str | TemplateSpec, values: Sequence[str]) -> Self:
        """Build parameters from values already in slot order.

        Raises:
            WNSValidationError: If a value is not a string or the count is wrong
        """
        spec = get_template(template)
        if isinstance(values, str):
            msg = "The template parameters must be a sequence of strings, not a single string."
            raise WNSValidationError(msg)
        for index, value in enumerate(values, start=1):
            if not isinstance(value, str):  # pyright: ignore[reportUnnecessaryIsInstance]
                msg = f"Parameter {index} of the {spec.name} WNS notification type must be a string."
                raise WNSValidationError(msg)
        params = cls(template=spec, values=tuple(values))
        params.validate()
        return params

    @classmethod
    def from_mapping(cls, template: str | TemplateSpec, values: Mapping[str, object]) -> Self:
        """Build parameters from image{i}src, image{i}alt and text{i} keys.

        Missing keys and falsy text values such as 0 or False become empty
        strings; other text values that are not strings are converted with str().

        Raises:
            WNSValidationError: If an image src or alt value is not a string
        """
        spec = get_template(template)
        ordered: list[str] = []

        for index in range(1, spec.image_count + 1):
            for part in ("src", "alt"):
                key = f"image{index}{part}"
                value = values.get(key)
                if value is not None and not isinstance(value, str):
                    msg = f"The {key} property of the payload argument must be a string."
                    raise WNSValidationError(msg)
                ordered.append(value or "")

        for index in range(1, spec.text_count + 1):
            text = values.get(f"text{index}")
            ordered.append(str(text) if text else "")

        return cls(template=spec, values=tuple(ordered))

    @classmethod
    def coerce(cls, template: str | TemplateSpec, params: object) -> Self:
        """Accept a descriptor, a mapping, or a positional sequence.

        Raises:
            WNSValidationError: If params has none of these shapes or does not fit the template
        """
        spec = get_template(template)
        if isinstance(params, TemplateParams):
            if params.template.name != spec.name:
                msg = f"The parameters were built for the {params.template.name} template, not {spec.name}."
                raise WNSValidationError(msg)
            params.validate()
            return params  # pyright: ignore[reportReturnType]
        if isinstance(params, Mapping):
            return cls.from_mapping(spec, params)  # pyright: ignore[reportUnknownArgumentType]
        if isinstance(params, Sequence) and not isinstance(params, (str, bytes)):
            return cls.from_positional(spec, list(params))  # pyright: ignore[reportUnknownArgumentType]
        msg = "The template parameters must be a TemplateParams, a mapping, or a sequence of strings."
        raise WNSValidationError(msg)

    def validate(self) -> None:
        """Check the parameter count against the template.

        Raises:
            WNSValidationError: If the count does not match
        """
        spec = self.template
        if len(self.values) != spec.param_count:
            msg = (
                f"The {spec.name} WNS notification type requires {spec.param_count} text parameters "
                f"to be specified ({spec.image_count} image(s) that require href and alt text each, "
                f"and {spec.text_count} text field(s)), while only {len(self.values)} parameter(s) "
                "have been provided."
            )
            raise WNSValidationError(msg)
