"""Turn a form theme into a style descriptor.

Nothing here touches shared page state: callers receive the descriptor (or
the ``<style>`` markup built from it) and decide where to apply it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Optional

from formwizard.schema_defaults import DEFAULT_THEME

LAYOUT_MAX_WIDTHS = {"compact": "36rem", "default": "42rem", "spacious": "48rem"}
LOGO_JUSTIFY = {"left": "flex-start", "center": "center", "right": "flex-end"}


def resolve_theme(theme: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return ``theme`` merged over the default values."""

    merged = dict(DEFAULT_THEME)
    if isinstance(theme, Mapping):
        merged.update({key: value for key, value in theme.items() if value is not None})
    return merged


def _button_style(theme: Mapping[str, Any]) -> Dict[str, str]:
    primary = str(theme["primaryColor"])
    if theme.get("buttonStyle") == "outline":
        return {
            "border": f"2px solid {primary}",
            "color": primary,
            "background": "transparent",
            "border-radius": str(theme["borderRadius"]),
        }
    return {
        "background-color": primary,
        "color": "white",
        "border-radius": str(theme["borderRadius"]),
    }


def style_descriptor(theme: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Describe how a form using ``theme`` should look.

    The descriptor holds CSS custom properties under ``variables``, rule
    blocks keyed by class name under ``rules``, the maximum container width
    for the chosen layout, the logo settings when present and any custom CSS
    supplied by the author.
    """

    resolved = resolve_theme(theme)
    alignment = "center" if resolved.get("alignment") == "center" else "left"
    layout = resolved.get("layout") if resolved.get("layout") in LAYOUT_MAX_WIDTHS else "default"

    variables = {
        "--primary-color": str(resolved["primaryColor"]),
        "--background-color": str(resolved["backgroundColor"]),
        "--text-color": str(resolved["textColor"]),
        "--border-radius": str(resolved["borderRadius"]),
        "--spacing": str(resolved["spacing"]),
        "--question-spacing": str(resolved["questionSpacing"]),
    }
    rules = {
        "form-container": {
            "background-color": "var(--background-color)",
            "color": "var(--text-color)",
            "border-radius": "var(--border-radius)",
            "padding": "var(--spacing)",
            "max-width": LAYOUT_MAX_WIDTHS[layout],
            "text-align": alignment,
        },
        "form-title": {"color": "var(--text-color)", "text-align": alignment},
        "question-container": {"margin-bottom": "var(--question-spacing)"},
        "form-button": _button_style(resolved),
    }

    descriptor: Dict[str, Any] = {
        "variables": variables,
        "rules": rules,
        "layout": layout,
        "alignment": alignment,
        "custom_css": str(resolved.get("customCSS") or ""),
    }

    logo = resolved.get("logo")
    if isinstance(logo, Mapping) and logo.get("src"):
        position = logo.get("position") if logo.get("position") in LOGO_JUSTIFY else "left"
        descriptor["logo"] = {
            "src": str(logo["src"]),
            "width": logo.get("width") or 200,
            "height": logo.get("height") or 60,
            "justify": LOGO_JUSTIFY[position],
        }
    return descriptor


def style_markup(descriptor: Mapping[str, Any], *, scope: str = ".form-container") -> str:
    """Render ``descriptor`` as a ``<style>`` block.

    Author supplied custom CSS replaces the generated rules entirely.
    """

    custom_css = descriptor.get("custom_css") or ""
    if custom_css:
        return f"<style>\n{custom_css}\n</style>"

    variables = "".join(
        f"    {name}: {value};\n" for name, value in descriptor.get("variables", {}).items()
    )
    blocks = [f"{scope} {{\n{variables}}}"]
    for class_name, declarations in descriptor.get("rules", {}).items():
        body = "".join(f"    {prop}: {value};\n" for prop, value in declarations.items())
        blocks.append(f".{class_name} {{\n{body}}}")
    return "<style>\n" + "\n".join(blocks) + "\n</style>"
