from typing import Optional
from school_portal.theme.palette import generate_theme_colors

FONT_FAMILY = "var(--font-primary), Arial, Helvetica, sans-serif"
DISABLED_OPACITY = 0.38


def component_colors(colors: dict[str, str], is_dark: bool = False) -> dict[str, dict[str, str]]:
    """Per-component colours derived from the palette."""
    on_primary = colors["pure_black"] if is_dark else colors["pure_white"]
    return {
        "navbar": {
            "background": colors["color_card"],
            "border": "transparent",
            "text": colors["color_text_dark"],
            "hover_background": colors["color_medium"],
            "hover_text": colors["primary"],
            "active_background": colors["primary_dark"] if is_dark else colors["primary_lightest"],
            "active_text": colors["pure_white"] if is_dark else colors["primary"],
        },
        "header": {
            "background": colors["color_card"],
            "border": "transparent",
            "text": colors["color_text_dark"],
        },
        "page": {"background": colors["color_light"]},
        "card": {"background": colors["color_card"], "border": colors["border_light"]},
        "button": {
            "background": colors["primary"],
            "text": on_primary,
            "hover_background": colors["primary_dark"],
            "hover_text": on_primary,
        },
        "table": {
            "background": colors["color_card"],
            "header_background": colors["color_light"],
            "border": colors["border_light"],
            "text": colors["color_text_dark"],
            "hover_background": colors["color_light"],
        },
        "input": {
            "background": colors["color_card"],
            "border": colors["border"],
            "text": colors["color_text_dark"],
        },
        "tabs": {
            "border": colors["border_light"],
            "text": colors["color_text_medium"],
            "selected_text": colors["primary"],
            "hover_text": colors["color_text_dark"],
            "hover_background": colors["color_light"],
        },
        "badge": {
            "background_base": colors["primary_dark"] if is_dark else colors["primary_light"],
            "text_base": colors["primary_light"] if is_dark else colors["primary_dark"],
        },
        "avatar": {"background": colors["primary"], "text": on_primary},
    }


def css_variables(colors: dict[str, str], components: Optional[dict[str, dict[str, str]]] = None) -> dict[str, str]:
    variables = {
        "--theme-primary": colors["primary"],
        "--theme-primary-light": colors["primary_light"],
        "--theme-primary-dark": colors["primary_dark"],
        "--theme-background": colors["background"],
        "--theme-surface": colors["surface"],
        "--theme-surface-variant": colors["surface_variant"],
        "--theme-text": colors["text"],
        "--theme-text-secondary": colors["text_secondary"],
        "--theme-text-muted": colors["text_muted"],
        "--theme-border": colors["border"],
        "--theme-border-light": colors["border_light"],
        "--theme-success": colors["success"],
        "--theme-error": colors["error"],
        "--theme-warning": colors["warning"],
        "--theme-info": colors["info"],
    }
    if components:
        variables.update({
            "--theme-navbar-bg": components["navbar"]["background"],
            "--theme-header-bg": components["header"]["background"],
            "--theme-card-bg": components["card"]["background"],
            "--theme-table-bg": components["table"]["background"],
            "--theme-table-header-bg": components["table"]["header_background"],
            "--theme-badge-bg-base": components["badge"]["background_base"],
            "--theme-badge-text-base": components["badge"]["text_base"],
            "--theme-avatar-bg": components["avatar"]["background"],
            "--theme-avatar-text": components["avatar"]["text"],
        })
    return variables


def _rule(selector: str, declarations: dict[str, str], important: bool = True) -> str:
    suffix = " !important" if important else ""
    body = "\n".join(f"  {prop}: {value}{suffix};" for prop, value in declarations.items())
    return f"{selector} {{\n{body}\n}}"


def render_root_block(variables: dict[str, str]) -> str:
    return _rule(":root", variables, important=False)


def render_stylesheet(primary: str, is_dark: bool = False) -> str:
    """Full stylesheet: custom properties plus overrides for component-library classes."""
    colors = generate_theme_colors(primary, is_dark)
    components = component_colors(colors, is_dark)
    navbar = components["navbar"]
    header = components["header"]
    button = components["button"]
    table = components["table"]
    tabs = components["tabs"]

    rules = [
        render_root_block(css_variables(colors, components)),
        _rule("body", {
            "background-color": components["page"]["background"],
            "color": colors["text"],
            "font-family": FONT_FAMILY,
        }, important=False),
        _rule(".mantine-AppShell-navbar", {
            "background-color": navbar["background"],
            "border-right-color": navbar["border"],
            "border-left-color": navbar["border"],
            "color": navbar["text"],
            "font-family": FONT_FAMILY,
        }),
        _rule(".mantine-AppShell-navbar .mantine-NavLink-root:hover", {
            "background-color": navbar["hover_background"],
            "color": navbar["hover_text"],
        }),
        _rule(".mantine-AppShell-navbar .mantine-NavLink-root[data-active]", {
            "background-color": navbar["active_background"],
            "color": navbar["active_text"],
        }),
        _rule(".mantine-AppShell-header", {
            "background-color": header["background"],
            "border-bottom-color": header["border"],
            "color": header["text"],
        }),
        _rule(".mantine-Card-root, .mantine-Paper-root", {
            "background-color": components["card"]["background"],
            "border-color": components["card"]["border"],
        }),
        _rule(".mantine-Button-root:not([data-variant])", {
            "background-color": button["background"],
            "color": button["text"],
        }),
        _rule(".mantine-Button-root:not([data-variant]):hover", {
            "background-color": button["hover_background"],
            "color": button["hover_text"],
        }),
        _rule(".mantine-Button-root:disabled", {"opacity": str(DISABLED_OPACITY)}),
        _rule(".mantine-Table-table", {
            "background-color": table["background"],
            "border-color": table["border"],
            "color": table["text"],
        }),
        _rule(".mantine-Table-thead", {"background-color": table["header_background"]}),
        _rule(".mantine-Table-tr:hover", {"background-color": table["hover_background"]}),
        _rule(".mantine-Input-input", {
            "background-color": components["input"]["background"],
            "border-color": components["input"]["border"],
            "color": components["input"]["text"],
        }),
        _rule(".mantine-Tabs-list", {"border-color": tabs["border"]}),
        _rule(".mantine-Tabs-tab", {"color": tabs["text"]}),
        _rule(".mantine-Tabs-tab:hover", {
            "color": tabs["hover_text"],
            "background-color": tabs["hover_background"],
        }),
        _rule(".mantine-Tabs-tab[data-active]", {"color": tabs["selected_text"]}),
        _rule(".mantine-Avatar-placeholder", {
            "background-color": components["avatar"]["background"],
            "color": components["avatar"]["text"],
        }),
    ]
    return "\n\n".join(rules) + "\n"
