"""
Rendering of synthesized configs as webpack.config.js modules.

Plain values are written as JSON literals. PluginSpec values become plugin
instantiations and TransformRule values become module rules with RegExp tests.
Node modules are resolved from the working directory webpack runs in, so the
rendered file can live in a temporary directory.
"""

import json
import re
from pathlib import PurePath
from typing import Any, Mapping

from .config_synthesizer import BuildConfig, PluginSpec, TransformRule


class ConfigRenderError(TypeError):
    """Raised when a config value has no JavaScript representation."""
    pass


class JsExpression(str):
    """Raw JavaScript expression, rendered verbatim."""
    pass


def render_config(config: BuildConfig) -> str:
    """
    Render a webpack configuration as a CommonJS module.

    Args:
        config: Synthesized webpack configuration

    Returns:
        JavaScript source of webpack.config.js

    Raises:
        ConfigRenderError: If a value cannot be represented
    """
    lines = [
        "const resolveModule = (name) => require.resolve(name, { paths: [process.cwd(), __dirname] });",
        "",
        "module.exports = " + render_value(config, 0) + ";",
        "",
    ]
    return "\n".join(lines)


def render_value(value: Any, indent: int = 0) -> str:
    """Render a single config value as a JavaScript expression."""
    pad = "  " * (indent + 1)
    end = "  " * indent

    if isinstance(value, PluginSpec):
        constructor = f"require(resolveModule({json.dumps(value.module)}))"
        if value.export:
            constructor += f"[{json.dumps(value.export)}]"
        return f"new ({constructor})({render_value(dict(value.options), indent)})"

    if isinstance(value, TransformRule):
        rule = {
            "test": re.compile(value.test),
            "use": {
                "loader": JsExpression(f"resolveModule({json.dumps(value.loader)})"),
                "options": dict(value.options),
            },
        }
        if value.exclude:
            rule["exclude"] = re.compile(value.exclude)
        return render_value(rule, indent)

    if isinstance(value, JsExpression):
        return str(value)

    if isinstance(value, re.Pattern):
        return f"new RegExp({json.dumps(value.pattern)})"

    if isinstance(value, PurePath):
        return json.dumps(str(value))

    if value is None or isinstance(value, (bool, int, float, str)):
        return json.dumps(value)

    if isinstance(value, Mapping):
        if not value:
            return "{}"
        items = [f"{pad}{json.dumps(str(key))}: {render_value(item, indent + 1)}" for key, item in value.items()]
        return "{\n" + ",\n".join(items) + "\n" + end + "}"

    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        items = [pad + render_value(item, indent + 1) for item in value]
        return "[\n" + ",\n".join(items) + "\n" + end + "]"

    raise ConfigRenderError(f"Cannot render config value of type {type(value).__name__}")
