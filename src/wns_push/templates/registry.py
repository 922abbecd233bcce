"""Static registry of WNS tile and toast templates.

Each template is known by its slot counts: the number of images (each taking
a src and an alt parameter) and the number of text fields. Counts follow the
tile and toast template catalogs published for Windows 8 applications.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final, Literal

from wns_push.errors import WNSValidationError
from wns_push.types import NotificationType

__all__ = ["TEMPLATES", "TemplateSpec", "get_template", "iter_templates"]

type TemplateKind = Literal["tile", "toast"]


@dataclass(slots=True, frozen=True)
class TemplateSpec:
    """Slot layout of one template."""

    name: str
    image_count: int
    text_count: int

    @property
    def kind(self) -> TemplateKind:
        return "tile" if self.name.startswith("Tile") else "toast"

    @property
    def notification_type(self) -> NotificationType:
        return NotificationType.TILE if self.kind == "tile" else NotificationType.TOAST

    @property
    def param_count(self) -> int:
        """Number of positional parameters: src and alt per image, then texts."""
        return self.image_count * 2 + self.text_count


# name: (images, texts)
_TEMPLATE_SLOTS: Final[dict[str, tuple[int, int]]] = {
    "TileSquareBlock": (0, 2),
    "TileSquareText01": (0, 4),
    "TileSquareText02": (0, 2),
    "TileSquareText03": (0, 4),
    "TileSquareText04": (0, 1),
    "TileWideText01": (0, 5),
    "TileWideText02": (0, 9),
    "TileWideText03": (0, 1),
    "TileWideText04": (0, 1),
    "TileWideText05": (0, 5),
    "TileWideText06": (0, 10),
    "TileWideText07": (0, 9),
    "TileWideText08": (0, 10),
    "TileWideText09": (0, 2),
    "TileWideText10": (0, 9),
    "TileWideText11": (0, 10),
    "TileSquareImage": (1, 0),
    "TileSquarePeekImageAndText01": (1, 4),
    "TileSquarePeekImageAndText02": (1, 2),
    "TileSquarePeekImageAndText03": (1, 4),
    "TileSquarePeekImageAndText04": (1, 1),
    "TileWideImage": (1, 0),
    "TileWideImageCollection": (5, 0),
    "TileWideImageAndText01": (1, 1),
    "TileWideImageAndText02": (1, 2),
    "TileWideBlockAndText01": (0, 6),
    "TileWideBlockAndText02": (0, 3),
    "TileWideSmallImageAndText01": (1, 1),
    "TileWideSmallImageAndText02": (1, 5),
    "TileWideSmallImageAndText03": (1, 1),
    "TileWideSmallImageAndText04": (1, 2),
    "TileWideSmallImageAndText05": (1, 2),
    "TileWidePeekImageCollection01": (5, 2),
    "TileWidePeekImageCollection02": (5, 5),
    "TileWidePeekImageCollection03": (5, 1),
    "TileWidePeekImageCollection04": (5, 1),
    "TileWidePeekImageCollection05": (6, 2),
    "TileWidePeekImageCollection06": (6, 1),
    "TileWidePeekImageAndText01": (1, 1),
    "TileWidePeekImageAndText02": (1, 5),
    "TileWidePeekImage01": (1, 2),
    "TileWidePeekImage02": (1, 5),
    "TileWidePeekImage03": (1, 1),
    "TileWidePeekImage04": (1, 1),
    "TileWidePeekImage05": (2, 2),
    "TileWidePeekImage06": (2, 1),
    "ToastText01": (0, 1),
    "ToastText02": (0, 2),
    "ToastText03": (0, 2),
    "ToastText04": (0, 3),
    "ToastImageAndText01": (1, 1),
    "ToastImageAndText02": (1, 2),
    "ToastImageAndText03": (1, 2),
    "ToastImageAndText04": (1, 3),
}

TEMPLATES: Final[Mapping[str, TemplateSpec]] = MappingProxyType(
    {
        name: TemplateSpec(name=name, image_count=images, text_count=texts)
        for name, (images, texts) in _TEMPLATE_SLOTS.items()
    }
)


def get_template(template: str | TemplateSpec) -> TemplateSpec:
    """Look up a template by name.

    Raises:
        WNSValidationError: If the name is not a known template
    """
    if isinstance(template, TemplateSpec):
        return template
    spec = TEMPLATES.get(template) if isinstance(template, str) else None
    if spec is None:
        msg = f"The template parameter must name a known WNS tile or toast template. The value of {template} is not recognized."
        raise WNSValidationError(msg)
    return spec


def iter_templates(kind: TemplateKind | None = None) -> Iterator[TemplateSpec]:
    """Iterate registered templates in catalog order, optionally of one kind."""
    for spec in TEMPLATES.values():
        if kind is None or spec.kind == kind:
            yield spec
