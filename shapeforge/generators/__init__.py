# shapeforge/generators/__init__.py
"""
Generators - turn a CodegenContext into the files of a Rust server crate.

Public API:
    - ServicePlan, OperationPlan: ordered description of the builder
    - ServerServiceGenerator: builder, router and service struct
    - OperationGenerator: operation shapes, errors and error parsers
    - EnvelopeGenerator: operation input and output structures
    - ServiceConfigGenerator, LibRsGenerator: config module and crate root
    - RustCrate: the output artifact
"""

from .config import CONFIG_MODULE, ServiceConfigGenerator
from .crate import LIB_RS, RustCrate, module_path
from .envelopes import INPUT_MODULE, OUTPUT_MODULE, EnvelopeGenerator
from .lib import SERVICE_MODULE, LibRsGenerator
from .operations import OperationGenerator
from .service import (
    REQUEST_SPECS_MODULE,
    OperationPlan,
    ServerServiceGenerator,
    ServicePlan,
    doc_handler,
    handler_imports,
)

__all__ = [
    "ServicePlan",
    "OperationPlan",
    "ServerServiceGenerator",
    "OperationGenerator",
    "EnvelopeGenerator",
    "ServiceConfigGenerator",
    "LibRsGenerator",
    "RustCrate",
    "module_path",
    "handler_imports",
    "doc_handler",
    "LIB_RS",
    "CONFIG_MODULE",
    "SERVICE_MODULE",
    "INPUT_MODULE",
    "OUTPUT_MODULE",
    "REQUEST_SPECS_MODULE",
]
