"""Client variants sharing one function builder."""

from .angular import AngularEmitter
from .axios import AxiosEmitter
from .base import UNTAGGED, ClientEmitter, ServiceGroup
from .csharp import CSharpEmitter
from .function_builder import (
    CSharpSyntax,
    FunctionBuildResult,
    TargetSyntax,
    TypeScriptSyntax,
    build_function_common,
)
from .imports import referenced_types

# Variant tag -> emitter
EMITTERS: dict[str, type[ClientEmitter]] = {
    AngularEmitter.variant: AngularEmitter,
    AxiosEmitter.variant: AxiosEmitter,
    CSharpEmitter.variant: CSharpEmitter,
}

__all__ = [
    "EMITTERS",
    "UNTAGGED",
    "AngularEmitter",
    "AxiosEmitter",
    "CSharpEmitter",
    "ClientEmitter",
    "ServiceGroup",
    "CSharpSyntax",
    "FunctionBuildResult",
    "TargetSyntax",
    "TypeScriptSyntax",
    "build_function_common",
    "referenced_types",
]
