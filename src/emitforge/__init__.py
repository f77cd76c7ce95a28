"""
emitforge - Customizable Code Emission and Template Scaffolding
===============================================================

emitforge lets a code generator produce default Python source while letting
users override that output with their own Jinja2 templates.

Features
--------
- **Overridable output**: drop ``Templates/<group>/<name>.py.j2`` into a
  project and it replaces the built-in output for that template
- **Two-stage validation**: templates must render, and what they render
  must compile as Python
- **Scaffolding**: derive a starter template from the default output, with
  model values already replaced by ``{{ placeholders }}``
- **Stable diagnostics**: failures point at the template file the user edits

Quick Start
-----------
```bash
emitforge init
emitforge scaffold order-id
emitforge generate
```

Example
-------
>>> from emitforge import Emission, TemplateMap, with_user_template, generate_scaffold
>>> tmap = TemplateMap()
>>> code = f"class {tmap.bind('OrderId', 'type_name')}:\\n    pass\\n"
>>> emission = with_user_template(Emission.from_code(code), "Ids/Plain", {"type_name": "OrderId"}, tmap)
>>> generate_scaffold(emission)
'class {{ type_name }}:\\n    pass\\n'

Architecture
------------
- ``template_map``: records model values bound into default output
- ``registry``: indexes user templates by logical name
- ``renderer``: renders templates with Jinja2
- ``frontend``: validates rendered text as Python
- ``emission``: resolves default vs. user template
- ``scaffold``: derives starter templates, provenance headers
- ``emitters``: built-in default emitters
- ``generator``: end-to-end pipeline over ``emitforge.toml``
- ``cli``: Typer-based command line interface
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from emitforge.diagnostics import Diagnostic, DiagnosticId, Location, Severity
from emitforge.emission import (
    CustomizableEmission,
    DefaultEmission,
    Emission,
    ResolvedEmission,
    with_user_template,
)
from emitforge.frontend import FrontendError, FrontendResult, PythonFrontend
from emitforge.registry import TemplateCandidate, UserTemplateRegistry
from emitforge.renderer import RenderFailure, RenderResult, RenderSuccess, TemplateRenderer
from emitforge.scaffold import ScaffoldFileHeader, ScaffoldGenerator
from emitforge.scaffold import generate as generate_scaffold
from emitforge.template_map import TemplateBinding, TemplateMap


__all__ = [
    "CustomizableEmission",
    "DefaultEmission",
    "Diagnostic",
    "DiagnosticId",
    "Emission",
    "FrontendError",
    "FrontendResult",
    "Location",
    "PythonFrontend",
    "RenderFailure",
    "RenderResult",
    "RenderSuccess",
    "ResolvedEmission",
    "ScaffoldFileHeader",
    "ScaffoldGenerator",
    "Severity",
    "TemplateBinding",
    "TemplateCandidate",
    "TemplateMap",
    "TemplateRenderer",
    "UserTemplateRegistry",
    "__version__",
    "generate_scaffold",
    "with_user_template",
]
