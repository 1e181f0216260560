# tests/test_symbol_table.py
"""
Tests for the symbol table and naming collision reporting.
"""

from __future__ import annotations

from shapeforge.diagnostics.reporter import DiagnosticReporter
from shapeforge.model.shapes import ShapeId
from shapeforge.model.transform import OperationNormalizer
from shapeforge.symbols.provider import SymbolVisitorConfig, build_symbol_provider
from shapeforge.symbols.stages import stages_for
from shapeforge.symbols.table import NAMING_COLLISION, SymbolTable, generates_type

WEATHER = ShapeId.parse("example.weather#Weather")
COLLIDE = ShapeId.parse("example.collide#Collide")


def build_table(model, service_id):
    model = OperationNormalizer(service_id).transform(model)
    service = model.expect_shape(service_id)
    provider = build_symbol_provider(model, service, SymbolVisitorConfig(), stages_for(False))
    reporter = DiagnosticReporter()
    return SymbolTable.build(model, service, provider, reporter), reporter


class TestSymbolTable:
    def test_covers_the_service_closure(self, weather_model):
        table, reporter = build_table(weather_model, WEATHER)

        assert WEATHER in table
        assert ShapeId.parse("example.weather#CitySummary") in table
        assert ShapeId.parse("example.weather.synthetic#GetCityInput$cityId") in table
        assert not reporter.has_errors

    def test_prelude_shapes_are_skipped(self, weather_model):
        table, _ = build_table(weather_model, WEATHER)

        assert ShapeId.parse("smithy.api#String") not in table
        assert table.get(ShapeId.parse("smithy.api#Float")) is None

    def test_original_structures_are_not_reachable(self, weather_model):
        table, _ = build_table(weather_model, WEATHER)

        assert ShapeId.parse("example.weather#GetCityInput") not in table

    def test_items_are_sorted(self, weather_model):
        table, _ = build_table(weather_model, WEATHER)

        ids = [shape_id for shape_id, _ in table.items()]

        assert ids == sorted(ids)
        assert list(table) == ids

    def test_generated_names_record_their_origin(self, weather_model):
        table, _ = build_table(weather_model, WEATHER)

        assert table.owner_of("crate::model::Units") == "example.weather#Units"
        assert table.owner_of("crate::input::GetCityInput") == "example.weather.synthetic#GetCityInput"
        assert table.owner_of("crate::model::CityId") is None
        assert ("crate::operation_shape::GetCity", "example.weather#GetCity") in table.generated_names()

    def test_generates_type(self, weather_model):
        def shape(text):
            return weather_model.expect_shape(ShapeId.parse(text))

        assert generates_type(shape("example.weather#CityCoordinates"))
        assert generates_type(shape("example.weather#Units"))
        assert not generates_type(shape("example.weather#CityId"))
        assert not generates_type(shape("example.weather#CitySummaries"))


class TestNamingCollisions:
    def test_claim_is_idempotent_for_the_same_origin(self):
        table = SymbolTable(DiagnosticReporter())

        assert table.claim("crate::model::City", "a#City")
        assert table.claim("crate::model::City", "a#City")
        assert not table.reporter.has_errors

    def test_second_origin_is_reported(self):
        reporter = DiagnosticReporter()
        table = SymbolTable(reporter)
        table.claim("crate::model::City", "b#City")

        assert not table.claim("crate::model::City", "a#City")

        (diagnostic,) = reporter.errors
        assert diagnostic.code == NAMING_COLLISION
        assert diagnostic.message == "'crate::model::City' is produced by both a#City and b#City"
        assert diagnostic.shape_id == "b#City"
        assert table.owner_of("crate::model::City") == "b#City"

    def test_operations_with_equal_names_collide(self, collision_model):
        _, reporter = build_table(collision_model, COLLIDE)

        messages = [d.message for d in reporter.errors]

        assert any(
            "crate::operation_shape::GetThing" in m
            and "example.collide#GetThing" in m
            and "example.other#GetThing" in m
            for m in messages
        )
        assert all(d.code == NAMING_COLLISION for d in reporter.errors)

    def test_all_collisions_are_reported_at_once(self, collision_model):
        _, reporter = build_table(collision_model, COLLIDE)

        names = {d.message.split("'")[1] for d in reporter.errors}

        assert {"crate::operation_shape::GetThing", "crate::input::GetThingInput"} <= names
