"""
emitforge test suite
====================

Test Modules
------------
- test_template_map.py: Binding recording
- test_registry.py: Template discovery and naming convention
- test_renderer.py: Jinja2 rendering and template diagnostics
- test_frontend.py: Python validation of rendered output
- test_emission.py: Resolution of default vs. user templates
- test_scaffold.py: Scaffold generation, headers, template status
- test_emitters.py: Built-in default emitters
- test_models.py: Configuration models
- test_generator.py: Generation pipeline
- test_cli.py: Command-line interface

Running Tests
-------------
    pytest
    pytest tests/test_scaffold.py::TestGenerate
"""
