"""
AikScript FastAPI Server
Provides a REST API for transpiling annotated Python to Aiken
"""
import logging
from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from aikscript import __version__
from aikscript.core.errors import TranspileError
from aikscript.core.models import TranspilerAST
from aikscript.core.transpiler import Transpiler

logger = logging.getLogger(__name__)


# ============================================================================
# Request/Response Models
# ============================================================================

class TranspileRequest(BaseModel):
    source: str
    module_name: Optional[str] = None
    emit_docs: bool = True


class TranspileResponse(BaseModel):
    success: bool
    aiken: Optional[str] = None
    error: Optional[str] = None


class ValidatorSummary(BaseModel):
    contract: str
    purpose: str
    parameters: List[str] = []


class ModuleSummary(BaseModel):
    module_name: str
    imports: List[str] = []
    types: List[str] = []
    constants: List[str] = []
    functions: List[str] = []
    validators: List[ValidatorSummary] = []
    tests: List[str] = []


class ParseRequest(BaseModel):
    source: str
    module_name: Optional[str] = None


class ParseResponse(BaseModel):
    success: bool
    module: Optional[ModuleSummary] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    version: str


def summarize(module: TranspilerAST) -> ModuleSummary:
    """Names of everything declared in a (transformed) module"""
    return ModuleSummary(
        module_name=module.module_name,
        imports=[declaration.module for declaration in module.imports],
        types=[type_def.name for type_def in module.types],
        constants=[constant.name for constant in module.constants],
        functions=[f.name for f in module.functions if not f.is_validator],
        validators=[
            ValidatorSummary(
                contract=f.contract or f.name,
                purpose=f.purpose_name or f.purpose.value,
                parameters=[p.name for p in f.parameters]
            )
            for f in module.validators
        ],
        tests=[test.name for test in module.tests]
    )


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="AikScript API",
    description="Transpile annotated Python contracts to Aiken",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/", response_model=HealthResponse)
async def health():
    """Health check endpoint"""
    return {
        "status": "ok",
        "version": __version__
    }


@app.post("/api/transpile", response_model=TranspileResponse)
async def transpile_source(request: TranspileRequest):
    """
    Transpile one Python module to Aiken.

    Example:
        POST /api/transpile
        {
            "source": "MAX_SIZE = 10\\n",
            "module_name": "limits"
        }
    """
    transpiler = Transpiler()
    transpiler.options.emit_docs = request.emit_docs
    try:
        aiken = transpiler.transpile(request.source, module_name=request.module_name)
    except TranspileError as e:
        logger.info("Transpile request failed: %s", e)
        return {
            "success": False,
            "error": str(e)
        }

    return {
        "success": True,
        "aiken": aiken
    }


@app.post("/api/parse", response_model=ParseResponse)
async def parse_source(request: ParseRequest):
    """Parse and canonicalize a module, returning the declarations found"""
    transpiler = Transpiler()
    try:
        parsed = transpiler.parse(request.source, module_name=request.module_name)
    except TranspileError as e:
        return {
            "success": False,
            "error": str(e)
        }

    return {
        "success": True,
        "module": summarize(transpiler.transform(parsed))
    }


# ============================================================================
# Run Server
# ============================================================================

def run(host: str = "127.0.0.1", port: int = 8000) -> None:
    import uvicorn

    print("=" * 60)
    print("AikScript API Server")
    print("=" * 60)
    print(f"Starting server on http://{host}:{port}")
    print(f"API docs: http://{host}:{port}/docs")
    print("=" * 60)

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run(host="0.0.0.0")
