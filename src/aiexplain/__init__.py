"""aiexplain - AI-assisted MySQL query plan analysis."""

__version__ = "0.2.0"
__license__ = "MIT"

# Exception hierarchy (import first so other modules can use it)
from aiexplain.exceptions import (
    AiExplainError,
    CompletionError,
    ConfigurationError,
    DatabaseConnectionError,
    NoTablesFoundError,
    PlanInspectionError,
    TableInspectionError,
)

from aiexplain.config import Config, Provider, load_config
from aiexplain.engine import AnalysisService, PreparedAnalysis, assemble_request
from aiexplain.explainer import (
    SKIP_MESSAGE,
    ClaudeExplainer,
    CompletionState,
    Explainer,
    ExplanationResult,
    OpenAIExplainer,
    get_explainer,
)
from aiexplain.models import (
    AnalysisRequest,
    ColumnDescriptor,
    IndexDescriptor,
    IndexGroup,
    PlanRow,
    TableDescriptor,
)
from aiexplain.prompts import build_prompt
from aiexplain.sql import extract_tables, strip_explain_prefix

__all__ = [
    # Exception hierarchy
    "AiExplainError",
    "CompletionError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "NoTablesFoundError",
    "PlanInspectionError",
    "TableInspectionError",
    # Pipeline
    "AnalysisService",
    "PreparedAnalysis",
    "assemble_request",
    "build_prompt",
    "extract_tables",
    "strip_explain_prefix",
    # Models
    "AnalysisRequest",
    "ColumnDescriptor",
    "IndexDescriptor",
    "IndexGroup",
    "PlanRow",
    "TableDescriptor",
    # Explainers
    "SKIP_MESSAGE",
    "ClaudeExplainer",
    "CompletionState",
    "Explainer",
    "ExplanationResult",
    "OpenAIExplainer",
    "get_explainer",
    # Configuration
    "Config",
    "Provider",
    "load_config",
    # Metadata
    "__version__",
    "__license__",
]
