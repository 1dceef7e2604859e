"""
Method registry for gnuplot session operations.

Describes every session capability as structured data. The interactive CLI
uses this registry to validate arguments before dispatching to
GnuplotSession and to print its help text.

Adding a new capability:
    1. Add an entry to METHODS below
    2. Implement the session method in commands.py
    3. Add dispatch logic in main.py dispatch()
"""

from data_ops.histogram import OverflowPolicy

from .styles import STYLE_NAMES

METHODS = [
    {
        "name": "style",
        "description": "Select the plot style used by the following plots. Unknown names fall back to 'points'.",
        "parameters": [
            {"name": "style", "type": "string", "required": True,
             "description": "Style name (e.g., 'lines')"},
        ],
    },
    {
        "name": "title",
        "description": "Set the title displayed above the plot.",
        "parameters": [
            {"name": "text", "type": "string", "required": True,
             "description": "The title text"},
        ],
    },
    {
        "name": "xlabel",
        "description": "Set the x axis label.",
        "parameters": [
            {"name": "text", "type": "string", "required": True,
             "description": "The label text"},
        ],
    },
    {
        "name": "ylabel",
        "description": "Set the y axis label.",
        "parameters": [
            {"name": "text", "type": "string", "required": True,
             "description": "The label text"},
        ],
    },
    {
        "name": "plot",
        "description": "Plot numbers against their index, or 'x,y' pairs as points.",
        "parameters": [
            {"name": "values", "type": "number_list", "required": True,
             "description": "Space-separated numbers (e.g., '1 4 9') or pairs (e.g., '0,1 1,2')"},
            {"name": "title", "type": "string", "required": False, "default": None,
             "description": "Legend title"},
        ],
    },
    {
        "name": "equation",
        "description": "Plot a curve y=f(x); give only the f(x) side.",
        "parameters": [
            {"name": "equation", "type": "string", "required": True,
             "description": "gnuplot expression in x (e.g., 'sin(x)*cos(2*x)')"},
            {"name": "title", "type": "string", "required": False, "default": "no title",
             "description": "Legend title"},
        ],
    },
    {
        "name": "slope",
        "description": "Plot the straight line y = a*x + b.",
        "parameters": [
            {"name": "a", "type": "number", "required": True,
             "description": "Slope"},
            {"name": "b", "type": "number", "required": True,
             "description": "Intercept"},
            {"name": "title", "type": "string", "required": False, "default": "no title",
             "description": "Legend title"},
        ],
    },
    {
        "name": "histogram",
        "description": "Bin samples against ascending bin edges and plot the counts as boxes.",
        "parameters": [
            {"name": "edges", "type": "number_list", "required": True,
             "description": "Ascending bin edges (e.g., '0 1 2 3')"},
            {"name": "samples", "type": "number_list", "required": True,
             "description": "Raw sample values"},
            {"name": "overflow", "type": "string", "required": False, "default": "clamp",
             "enum": [p.value for p in OverflowPolicy],
             "description": "'clamp' folds out-of-range samples into the edge bins, 'strict' drops them"},
            {"name": "title", "type": "string", "required": False, "default": None,
             "description": "Legend title"},
        ],
    },
    {
        "name": "reset",
        "description": "Delete staged data files; the next plot starts a new canvas.",
        "parameters": [],
    },
    {
        "name": "raw",
        "description": "Send a command line to gnuplot verbatim.",
        "parameters": [
            {"name": "command", "type": "string", "required": True,
             "description": "gnuplot command text"},
        ],
    },
    {
        "name": "state",
        "description": "Show the session state: style, plot count and staged files.",
        "parameters": [],
    },
]

# Build lookup dict for fast access
_METHOD_MAP = {m["name"]: m for m in METHODS}


def get_method(name: str) -> dict | None:
    """Look up a method by name.

    Args:
        name: Method name (e.g., 'slope')

    Returns:
        Method definition dict, or None if not found.
    """
    return _METHOD_MAP.get(name)


def validate_args(name: str, args: dict) -> list[str]:
    """Validate arguments against a method's parameter definitions.

    Args:
        name: Method name
        args: Arguments dict to validate

    Returns:
        List of error messages. Empty list means valid.
    """
    method = get_method(name)
    if method is None:
        return [f"Unknown method: {name}"]

    errors = []
    known = {p["name"] for p in method["parameters"]}
    for extra in sorted(set(args) - known):
        errors.append(f"Unexpected parameter: {extra}")
    for param in method["parameters"]:
        if param["required"] and param["name"] not in args:
            errors.append(f"Missing required parameter: {param['name']}")
        if param["name"] in args and "enum" in param:
            if args[param["name"]] not in param["enum"]:
                errors.append(
                    f"Invalid value for {param['name']}: '{args[param['name']]}'. "
                    f"Must be one of: {', '.join(str(v) for v in param['enum'])}"
                )
    return errors


def render_method_catalog() -> str:
    """Render the method registry as the CLI help text.

    Returns:
        Text listing all methods with parameters and descriptions.
    """
    lines = ["Available commands:", ""]
    for method in METHODS:
        param_parts = []
        for p in method["parameters"]:
            if p["required"]:
                param_parts.append(p["name"])
            else:
                default = p.get("default", "")
                param_parts.append(f"[{p['name']}={default}]")
        sig = " ".join(param_parts)
        lines.append(f"  {method['name']} {sig}".rstrip() + f" -- {method['description']}")

        for p in method["parameters"]:
            if "enum" in p:
                vals = ", ".join(str(v) for v in p["enum"])
                lines.append(f"      {p['name']}: {vals}")
    lines.append(f"  styles: {', '.join(STYLE_NAMES)}")

    lines.append("")
    return "\n".join(lines)
