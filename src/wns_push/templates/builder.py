"""XML payload builders for tile and toast templates."""

from __future__ import annotations

from typing import Final

from wns_push.config.models import AudioOptions, SendOptions
from wns_push.templates.params import TemplateParams

__all__ = ["render_audio", "render_template", "render_toast_attributes", "xml_escape"]

_XML_ESCAPES: Final[tuple[tuple[str, str], ...]] = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
)


def xml_escape(text: str) -> str:
    """Escape text for use in XML content or a double-quoted attribute.

    Examples:
        >>> xml_escape('Tom & "Jerry" <3')
        'Tom &amp; &quot;Jerry&quot; &lt;3'
    """
    for char, entity in _XML_ESCAPES:
        text = text.replace(char, entity)
    return text


def render_audio(audio: AudioOptions | None) -> str:
    """Render the toast <audio> element, or nothing when no audio is set."""
    if audio is None:
        return ""
    parts = ["<audio"]
    if audio.src:
        parts.append(f' src="{audio.src}"')
    if audio.silent:
        parts.append(' silent="true"')
    if audio.loop:
        parts.append(' loop="true"')
    parts.append("/>")
    return "".join(parts)


def render_toast_attributes(options: SendOptions) -> str:
    """Render the optional duration and launch attributes of the <toast> element."""
    attributes = ""
    if options.duration:
        attributes += f' duration="{options.duration}"'
    if options.launch:
        attributes += f' launch="{xml_escape(options.launch)}"'
    return attributes


def render_template(params: TemplateParams, options: SendOptions | None = None) -> str:
    """Render the XML payload of a template send.

    Parameters are escaped and placed into image src/alt attributes and text
    elements in slot order. Toast options are applied to toast templates and
    ignored for tiles.

    Raises:
        WNSValidationError: If the parameter count does not match the template
    """
    params.validate()
    spec = params.template
    send_options = options or SendOptions()
    values = [xml_escape(value) for value in params.values]

    is_toast = spec.kind == "toast"
    attributes = render_toast_attributes(send_options) if is_toast else ""
    audio = render_audio(send_options.audio) if is_toast else ""

    parts = [f'<{spec.kind}{attributes}><visual><binding template="{spec.name}">']
    for index in range(spec.image_count):
        src, alt = values[index * 2], values[index * 2 + 1]
        parts.append(f'<image id="{index + 1}" src="{src}" alt="{alt}"/>')
    texts = values[spec.image_count * 2 :]
    for index, text in enumerate(texts, start=1):
        parts.append(f'<text id="{index}">{text}</text>')
    parts.append(f"</binding></visual>{audio}</{spec.kind}>")
    return "".join(parts)
