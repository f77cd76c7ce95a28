"""
Tests for emitforge.emitters
============================

- TestStrongId: strong-id output and bindings
- TestError: error output and bindings
- TestBuildEmission: Validation and wrapping
"""

import sys
import types

import pytest
from pydantic import ValidationError

from emitforge.diagnostics import DiagnosticId
from emitforge.emission import CustomizableEmission
from emitforge.emitters import EMITTERS, build_emission, build_error, build_strong_id
from emitforge.frontend import PythonFrontend
from emitforge.models import ErrorModel, StrongIdModel
from emitforge.template_map import TemplateMap


# =============================================================================
# strong-id
# =============================================================================

class TestStrongId:
    """Tests for build_strong_id."""

    def test_output_is_valid_python(self, order_id_model: StrongIdModel) -> None:
        code = build_strong_id(order_id_model, TemplateMap())

        assert PythonFrontend().validate(code).valid
        assert "class OrderId:" in code
        assert "value: int" in code
        assert "return cls(0)" in code
        assert '"""OrderId identifier for shop.ids."""' in code

    def test_generated_class_works(
        self, order_id_model: StrongIdModel, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        module = types.ModuleType("generated")
        monkeypatch.setitem(sys.modules, "generated", module)
        namespace: dict = module.__dict__
        exec(compile(build_strong_id(order_id_model, TemplateMap()), "<test>", "exec"), namespace)

        order_id = namespace["OrderId"](42)
        assert order_id.value == 42
        assert repr(order_id) == "OrderId(42)"
        assert namespace["OrderId"].empty().value == 0

    def test_records_bindings(self, order_id_model: StrongIdModel) -> None:
        tmap = TemplateMap()
        build_strong_id(order_id_model, tmap)

        paths = {binding.property_path: binding.value for binding in tmap}
        assert paths == {
            "type_name": "OrderId",
            "backing_type.code_name": "int",
            "backing_type.default": "0",
            "module": "shop.ids",
        }

    def test_without_module(self) -> None:
        tmap = TemplateMap()
        code = build_strong_id(StrongIdModel(type_name="UserId"), tmap)

        assert '"""UserId identifier."""' in code
        assert "module" not in {binding.property_path for binding in tmap}


# =============================================================================
# error
# =============================================================================

class TestError:
    """Tests for build_error."""

    @pytest.fixture
    def model(self) -> ErrorModel:
        return ErrorModel(
            class_name="OrderNotFound",
            base_class="LookupError",
            message="Order could not be found.",
        )

    def test_generated_exception_works(self, model: ErrorModel) -> None:
        namespace: dict = {"__name__": "generated"}
        exec(compile(build_error(model, TemplateMap()), "<test>", "exec"), namespace)

        error = namespace["OrderNotFound"]()
        assert isinstance(error, LookupError)
        assert str(error) == "Order could not be found."
        assert str(namespace["OrderNotFound"]("custom")) == "custom"

    def test_records_bindings(self, model: ErrorModel) -> None:
        tmap = TemplateMap()
        build_error(model, tmap)

        assert [binding.property_path for binding in tmap] == ["class_name", "base_class", "message"]


# =============================================================================
# Building Emissions
# =============================================================================

class TestBuildEmission:
    """Tests for build_emission."""

    def test_wraps_valid_default(self, order_id_emission: CustomizableEmission) -> None:
        assert order_id_emission.default_emission.success is True
        assert order_id_emission.template_name == EMITTERS["strong-id"].template_name
        assert len(order_id_emission.bindings) == 4

    def test_accepts_raw_model_fields(self) -> None:
        emission = build_emission("error", {"class_name": "Boom", "message": "Boom happened."})

        assert emission.default_emission.success is True
        assert isinstance(emission.model, ErrorModel)
        assert emission.template_name == "Errors/Error"

    def test_template_name_override(self) -> None:
        emission = build_emission("strong-id", {"type_name": "OrderId"}, "Shop/OrderId")
        assert emission.template_name == "Shop/OrderId"

    def test_keyword_type_name_is_invalid_default(self) -> None:
        """The model accepts the identifier; the frontend rejects the output."""
        emission = build_emission("strong-id", {"type_name": "class"})

        default = emission.default_emission
        assert default.success is False
        assert len(default.diagnostics) == 1
        assert default.diagnostics[0].id == DiagnosticId.DEFAULT_OUTPUT_INVALID
        assert "class class" in default.code

    def test_invalid_model_raises(self) -> None:
        with pytest.raises(ValidationError):
            build_emission("strong-id", {"type_name": "not an identifier"})

    def test_unknown_generator(self) -> None:
        with pytest.raises(KeyError):
            build_emission("nope", {})
