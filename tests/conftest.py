# tests/conftest.py
"""
Shared fixtures: small model documents and run helpers.

Models:
    weather      - restJson1 service, three operations, an error, a @pattern string
    object_store - restXml service shaped like S3 (namespace/name configurable)
    streaming    - streaming blob, event stream union, recursive structure
    queue        - awsJson1_0 service with an idempotency token member
    collision    - two operations resolving to the same generated names
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict, List, Optional

import pytest

from shapeforge.config.schema import CodegenSettings
from shapeforge.core.context import CodegenContext
from shapeforge.model.graph import ShapeGraph
from shapeforge.model.loader import load_model_from_dict
from shapeforge.pipeline import CodegenPipeline, GenerationResult


def pytest_collection_modifyitems(items):
    """Add the tier1 marker to pure-logic tests (no filesystem, no CLI)."""
    TIER1_PATTERNS = [
        "test_model",
        "test_symbols",
        "test_symbol_table",
        "test_sections",
        "test_runtime",
        "test_protocols",
        "test_diagnostics",
    ]

    for item in items:
        fspath = str(item.fspath)
        if any(pattern in fspath for pattern in TIER1_PATTERNS):
            item.add_marker(pytest.mark.tier1)


# =============================================================================
# Model Documents
# =============================================================================


WEATHER_DOCUMENT: Dict[str, Any] = {
    "smithy": "2.0",
    "shapes": {
        "example.weather#Weather": {
            "type": "service",
            "version": "2006-03-01",
            "operations": [
                {"target": "example.weather#ListCities"},
                {"target": "example.weather#GetCity"},
                {"target": "example.weather#GetForecast"},
            ],
            "traits": {
                "aws.protocols#restJson1": {},
                "smithy.api#documentation": "Provides weather forecasts.",
            },
        },
        "example.weather#GetCity": {
            "type": "operation",
            "input": {"target": "example.weather#GetCityInput"},
            "output": {"target": "example.weather#GetCityOutput"},
            "errors": [{"target": "example.weather#NoSuchResource"}],
            "traits": {
                "smithy.api#http": {"method": "GET", "uri": "/cities/{cityId}"},
                "smithy.api#documentation": "Gets a city by id.",
            },
        },
        "example.weather#GetCityInput": {
            "type": "structure",
            "members": {
                "cityId": {"target": "example.weather#CityId", "traits": {"smithy.api#required": {}}},
            },
        },
        "example.weather#GetCityOutput": {
            "type": "structure",
            "members": {
                "name": {"target": "smithy.api#String", "traits": {"smithy.api#required": {}}},
                "coordinates": {"target": "example.weather#CityCoordinates"},
                "units": {"target": "example.weather#Units"},
            },
        },
        "example.weather#CityCoordinates": {
            "type": "structure",
            "members": {
                "latitude": {"target": "smithy.api#Float", "traits": {"smithy.api#required": {}}},
                "longitude": {"target": "smithy.api#Float", "traits": {"smithy.api#required": {}}},
            },
        },
        "example.weather#CityId": {
            "type": "string",
            "traits": {"smithy.api#pattern": "^[A-Za-z0-9 ]+$"},
        },
        "example.weather#Units": {
            "type": "enum",
            "members": {"METRIC": {"target": "smithy.api#Unit"}, "IMPERIAL": {"target": "smithy.api#Unit"}},
            "traits": {"smithy.api#pattern": "^[A-Z]+$"},
        },
        "example.weather#NoSuchResource": {
            "type": "structure",
            "members": {
                "resourceType": {"target": "smithy.api#String", "traits": {"smithy.api#required": {}}},
            },
            "traits": {"smithy.api#error": "client"},
        },
        "example.weather#ListCities": {
            "type": "operation",
            "input": {"target": "example.weather#ListCitiesInput"},
            "output": {"target": "example.weather#ListCitiesOutput"},
            "traits": {"smithy.api#http": {"method": "GET", "uri": "/cities"}},
        },
        "example.weather#ListCitiesInput": {
            "type": "structure",
            "members": {
                "nextToken": {"target": "smithy.api#String"},
                "pageSize": {"target": "smithy.api#Integer"},
            },
        },
        "example.weather#ListCitiesOutput": {
            "type": "structure",
            "members": {
                "items": {"target": "example.weather#CitySummaries", "traits": {"smithy.api#required": {}}},
                "counts": {"target": "example.weather#CityCounts"},
            },
        },
        "example.weather#CitySummaries": {
            "type": "list",
            "member": {"target": "example.weather#CitySummary"},
        },
        "example.weather#CityCounts": {
            "type": "map",
            "key": {"target": "smithy.api#String"},
            "value": {"target": "smithy.api#Integer"},
        },
        "example.weather#CitySummary": {
            "type": "structure",
            "members": {
                "cityId": {"target": "example.weather#CityId", "traits": {"smithy.api#required": {}}},
                "name": {"target": "smithy.api#String", "traits": {"smithy.api#required": {}}},
            },
        },
        "example.weather#GetForecast": {
            "type": "operation",
            "input": {"target": "example.weather#GetForecastInput"},
            "output": {"target": "example.weather#GetForecastOutput"},
            "traits": {"smithy.api#http": {"method": "GET", "uri": "/cities/{cityId}/forecast"}},
        },
        "example.weather#GetForecastInput": {
            "type": "structure",
            "members": {
                "cityId": {"target": "example.weather#CityId", "traits": {"smithy.api#required": {}}},
            },
        },
        "example.weather#GetForecastOutput": {
            "type": "structure",
            "members": {"chanceOfRain": {"target": "smithy.api#Float"}},
        },
    },
}


def object_store_document(namespace: str, service_name: str, no_error_wrapping: bool = True) -> Dict[str, Any]:
    """An S3-shaped restXml service under ``namespace#service_name``."""
    ns = namespace

    def ref(name: str) -> Dict[str, str]:
        return {"target": f"{ns}#{name}"}

    required = {"smithy.api#required": {}}
    object_key_members = {
        "Bucket": {"target": "smithy.api#String", "traits": required},
        "Key": {"target": "smithy.api#String", "traits": required},
    }
    return {
        "smithy": "2.0",
        "shapes": {
            f"{ns}#{service_name}": {
                "type": "service",
                "version": "2006-03-01",
                "operations": [ref("GetObject"), ref("HeadObject"), ref("GetObjectAttributes")],
                "traits": {"aws.protocols#restXml": {"noErrorWrapping": no_error_wrapping}},
            },
            f"{ns}#GetObject": {
                "type": "operation",
                "input": ref("GetObjectRequest"),
                "output": ref("GetObjectOutput"),
                "errors": [ref("NoSuchKey")],
                "traits": {"smithy.api#http": {"method": "GET", "uri": "/{Bucket}/{Key+}"}},
            },
            f"{ns}#GetObjectRequest": {"type": "structure", "members": dict(object_key_members)},
            f"{ns}#GetObjectOutput": {
                "type": "structure",
                "members": {"Body": ref("StreamingBlob")},
            },
            f"{ns}#StreamingBlob": {"type": "blob", "traits": {"smithy.api#streaming": {}}},
            f"{ns}#NoSuchKey": {"type": "structure", "traits": {"smithy.api#error": "client"}},
            f"{ns}#HeadObject": {
                "type": "operation",
                "input": ref("HeadObjectRequest"),
                "output": ref("HeadObjectOutput"),
                "traits": {"smithy.api#http": {"method": "HEAD", "uri": "/{Bucket}/{Key+}"}},
            },
            f"{ns}#HeadObjectRequest": {"type": "structure", "members": dict(object_key_members)},
            f"{ns}#HeadObjectOutput": {
                "type": "structure",
                "members": {"ContentLength": {"target": "smithy.api#Long"}},
            },
            f"{ns}#GetObjectAttributes": {
                "type": "operation",
                "input": ref("GetObjectAttributesRequest"),
                "output": ref("GetObjectAttributesOutput"),
                "traits": {"smithy.api#http": {"method": "GET", "uri": "/{Bucket}/{Key+}?attributes"}},
            },
            f"{ns}#GetObjectAttributesRequest": {"type": "structure", "members": dict(object_key_members)},
            f"{ns}#GetObjectAttributesOutput": {
                "type": "structure",
                "members": {"ETag": {"target": "smithy.api#String"}},
            },
        },
    }


STREAMING_DOCUMENT: Dict[str, Any] = {
    "smithy": "2.0",
    "shapes": {
        "example.stream#Streaming": {
            "type": "service",
            "version": "2024-01-01",
            "operations": [{"target": "example.stream#Upload"}, {"target": "example.stream#Subscribe"}],
            "traits": {"aws.protocols#restJson1": {}},
        },
        "example.stream#Upload": {
            "type": "operation",
            "input": {"target": "example.stream#UploadInput"},
            "output": {"target": "example.stream#UploadOutput"},
            "traits": {"smithy.api#http": {"method": "POST", "uri": "/upload"}},
        },
        "example.stream#UploadInput": {
            "type": "structure",
            "members": {
                "body": {"target": "example.stream#StreamingBlob"},
                "label": {"target": "smithy.api#String"},
            },
        },
        "example.stream#UploadOutput": {
            "type": "structure",
            "members": {
                "etag": {"target": "smithy.api#String"},
                "archive": {"target": "example.stream#Archive"},
                "tree": {"target": "example.stream#Tree"},
                "createdAt": {"target": "smithy.api#Timestamp"},
                "checksum": {"target": "smithy.api#Blob"},
            },
        },
        "example.stream#Archive": {
            "type": "structure",
            "members": {"payload": {"target": "example.stream#StreamingBlob"}},
        },
        "example.stream#StreamingBlob": {"type": "blob", "traits": {"smithy.api#streaming": {}}},
        "example.stream#Tree": {
            "type": "structure",
            "members": {
                "parent": {"target": "example.stream#Tree"},
                "children": {"target": "example.stream#TreeList"},
                "name": {"target": "smithy.api#String", "traits": {"smithy.api#required": {}}},
            },
        },
        "example.stream#TreeList": {"type": "list", "member": {"target": "example.stream#Tree"}},
        "example.stream#Subscribe": {
            "type": "operation",
            "input": {"target": "example.stream#SubscribeInput"},
            "output": {"target": "example.stream#SubscribeOutput"},
            "traits": {"smithy.api#http": {"method": "GET", "uri": "/events"}},
        },
        "example.stream#SubscribeInput": {
            "type": "structure",
            "members": {"topic": {"target": "smithy.api#String"}},
        },
        "example.stream#SubscribeOutput": {
            "type": "structure",
            "members": {"events": {"target": "example.stream#EventStream"}},
        },
        "example.stream#EventStream": {
            "type": "union",
            "members": {"message": {"target": "example.stream#Message"}},
            "traits": {"smithy.api#streaming": {}},
        },
        "example.stream#Message": {
            "type": "structure",
            "members": {"text": {"target": "smithy.api#String"}},
        },
    },
}


QUEUE_DOCUMENT: Dict[str, Any] = {
    "smithy": "2.0",
    "shapes": {
        "example.queue#Queue": {
            "type": "service",
            "version": "2012-11-05",
            "operations": [{"target": "example.queue#SendMessage"}, {"target": "example.queue#ReceiveMessage"}],
            "traits": {"aws.protocols#awsJson1_0": {}},
        },
        "example.queue#SendMessage": {
            "type": "operation",
            "input": {"target": "example.queue#SendMessageInput"},
            "output": {"target": "example.queue#SendMessageOutput"},
        },
        "example.queue#SendMessageInput": {
            "type": "structure",
            "members": {
                "body": {"target": "smithy.api#String", "traits": {"smithy.api#required": {}}},
                "clientToken": {
                    "target": "smithy.api#String",
                    "traits": {"smithy.api#idempotencyToken": {}},
                },
            },
        },
        "example.queue#SendMessageOutput": {
            "type": "structure",
            "members": {"messageId": {"target": "smithy.api#String"}},
        },
        "example.queue#ReceiveMessage": {
            "type": "operation",
            "output": {"target": "example.queue#ReceiveMessageOutput"},
        },
        "example.queue#ReceiveMessageOutput": {
            "type": "structure",
            "members": {"body": {"target": "smithy.api#String"}},
        },
    },
}


COLLISION_DOCUMENT: Dict[str, Any] = {
    "smithy": "2.0",
    "shapes": {
        "example.collide#Collide": {
            "type": "service",
            "version": "1",
            "operations": [{"target": "example.collide#GetThing"}, {"target": "example.other#GetThing"}],
            "traits": {"aws.protocols#restJson1": {}},
        },
        "example.collide#GetThing": {
            "type": "operation",
            "traits": {"smithy.api#http": {"method": "GET", "uri": "/things"}},
        },
        "example.other#GetThing": {
            "type": "operation",
            "traits": {"smithy.api#http": {"method": "GET", "uri": "/other-things"}},
        },
    },
}


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def weather_document() -> Dict[str, Any]:
    return copy.deepcopy(WEATHER_DOCUMENT)


@pytest.fixture
def weather_model(weather_document) -> ShapeGraph:
    return load_model_from_dict(weather_document)


@pytest.fixture
def weather_settings() -> CodegenSettings:
    return CodegenSettings(service="example.weather#Weather", module_name="weather")


@pytest.fixture
def s3_model() -> ShapeGraph:
    return load_model_from_dict(object_store_document("com.amazonaws.s3", "AmazonS3"))


@pytest.fixture
def s3_settings() -> CodegenSettings:
    return CodegenSettings(service="com.amazonaws.s3#AmazonS3", module_name="s3")


@pytest.fixture
def storage_model() -> ShapeGraph:
    return load_model_from_dict(object_store_document("example.storage", "Storage", no_error_wrapping=False))


@pytest.fixture
def storage_settings() -> CodegenSettings:
    return CodegenSettings(service="example.storage#Storage", module_name="storage")


@pytest.fixture
def streaming_model() -> ShapeGraph:
    return load_model_from_dict(copy.deepcopy(STREAMING_DOCUMENT))


@pytest.fixture
def streaming_settings() -> CodegenSettings:
    return CodegenSettings(service="example.stream#Streaming", module_name="streaming")


@pytest.fixture
def queue_model() -> ShapeGraph:
    return load_model_from_dict(copy.deepcopy(QUEUE_DOCUMENT))


@pytest.fixture
def queue_settings() -> CodegenSettings:
    return CodegenSettings(service="example.queue#Queue", module_name="queue")


@pytest.fixture
def collision_document() -> Dict[str, Any]:
    return copy.deepcopy(COLLISION_DOCUMENT)


@pytest.fixture
def collision_model(collision_document) -> ShapeGraph:
    return load_model_from_dict(collision_document)


@pytest.fixture
def collision_settings() -> CodegenSettings:
    return CodegenSettings(service="example.collide#Collide", module_name="collide")


@pytest.fixture
def prepare_context() -> Callable[..., CodegenContext]:
    """Factory running the pipeline up to (not including) section registration."""

    def _prepare(
        model: ShapeGraph,
        settings: CodegenSettings,
        decorators: Optional[List[Any]] = None,
    ) -> CodegenContext:
        return CodegenPipeline(settings, decorators=decorators).prepare(model)

    return _prepare


@pytest.fixture
def generate() -> Callable[..., GenerationResult]:
    """Factory running the full pipeline."""

    def _generate(
        model: ShapeGraph,
        settings: CodegenSettings,
        decorators: Optional[List[Any]] = None,
    ) -> GenerationResult:
        return CodegenPipeline(settings, decorators=decorators).run(model)

    return _generate
