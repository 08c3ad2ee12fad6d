"""
Scanner 模块 - 从代码库中提取环境变量定义与使用

- models.py: 数据类定义
- patterns.py: 各语言的正则表达式模式
- extractor.py: 使用点提取与重叠去重
- dotenv.py: .env 文件解析
- walker.py: 文件发现
- core.py: 并行扫描
"""

from env_audit.core.scanner.models import (
    Severity,
    IssueKind,
    NamingKind,
    Language,
    Location,
    DefinitionSite,
    UsageSite,
    Issue,
    FileDiagnostic,
    ScanSummary,
    ScanReport,
)
from env_audit.core.scanner.patterns import (
    ExtractionPattern,
    ENV_VAR_PATTERNS,
    EXTENSION_TO_LANGUAGE,
    language_for_suffix,
    parse_language,
)
from env_audit.core.scanner.extractor import (
    extract_usages,
    dedupe_overlapping,
    is_ignored,
)
from env_audit.core.scanner.dotenv import (
    DEFAULT_ENV_FILES,
    parse_dotenv_line,
    parse_dotenv_content,
    parse_dotenv_file,
)
from env_audit.core.scanner.walker import (
    DiscoveredFile,
    FileWalker,
)
from env_audit.core.scanner.core import (
    CodeScanResult,
    scan_code_files,
    load_definitions,
    read_text_file,
)

__all__ = [
    # Models
    "Severity",
    "IssueKind",
    "NamingKind",
    "Language",
    "Location",
    "DefinitionSite",
    "UsageSite",
    "Issue",
    "FileDiagnostic",
    "ScanSummary",
    "ScanReport",
    # Patterns
    "ExtractionPattern",
    "ENV_VAR_PATTERNS",
    "EXTENSION_TO_LANGUAGE",
    "language_for_suffix",
    "parse_language",
    # Extractor
    "extract_usages",
    "dedupe_overlapping",
    "is_ignored",
    # DotEnv
    "DEFAULT_ENV_FILES",
    "parse_dotenv_line",
    "parse_dotenv_content",
    "parse_dotenv_file",
    # Discovery
    "DiscoveredFile",
    "FileWalker",
    # Core
    "CodeScanResult",
    "scan_code_files",
    "load_definitions",
    "read_text_file",
]
