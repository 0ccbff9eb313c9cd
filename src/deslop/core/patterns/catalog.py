"""Built-in pattern catalogue.

Each entry is a ``PatternDefinition``: either a compiled line regex run by
the Phase 1 scanner, or a multi-pass marker whose ``thresholds`` configure a
structural analyzer. The catalogue is plain data so it can be listed,
filtered, and overridden from configuration without touching the scanner.

Order matters: the registry preserves it, and the scanner emits findings
for a line in catalogue order.
"""

from __future__ import annotations

import re

from deslop.core.patterns.models import AutoFix, Certainty, PatternDefinition, Severity

_TEST_GLOBS: tuple[str, ...] = ("*.test.*", "*.spec.*")
_PY_TEST_GLOBS: tuple[str, ...] = ("test_*.py", "*_test.py", "conftest.py")
_RUST_TEST_GLOBS: tuple[str, ...] = ("*_test.rs", "*_tests.rs", "**/tests/**")


def _secret(
    pattern_id: str,
    regex: str,
    description: str,
    extra_exclude: tuple[str, ...] = (),
    flags: int = 0,
) -> PatternDefinition:
    """Build a credential detector with the shared secret metadata."""
    return PatternDefinition(
        id=pattern_id,
        category="secrets",
        description=description,
        severity=Severity.CRITICAL,
        auto_fix=AutoFix.FLAG,
        regex=re.compile(regex, flags),
        exclude=("*.test.*", "*.spec.*", "*.example.*", *extra_exclude),
    )


# ---------------------------------------------------------------------------
# Debugging leftovers
# ---------------------------------------------------------------------------

_DEBUGGING: list[PatternDefinition] = [
    PatternDefinition(
        id="console_debugging",
        category="debugging",
        description="Console.log statements left in production code",
        severity=Severity.MEDIUM,
        auto_fix=AutoFix.REMOVE,
        regex=re.compile(r"console\.(log|debug|info|warn)\("),
        language="javascript",
        exclude=("*.test.*", "*.spec.*", "*.config.*"),
    ),
    PatternDefinition(
        id="python_debugging",
        category="debugging",
        description="Debug print/breakpoint statements in production",
        severity=Severity.MEDIUM,
        auto_fix=AutoFix.REMOVE,
        regex=re.compile(r"(print\(|import pdb|breakpoint\(\)|import ipdb)"),
        language="python",
        exclude=_PY_TEST_GLOBS,
    ),
    PatternDefinition(
        id="rust_debugging",
        category="debugging",
        description="Debug print macros in production code",
        severity=Severity.MEDIUM,
        auto_fix=AutoFix.REMOVE,
        regex=re.compile(r"(println!|dbg!|eprintln!)\("),
        language="rust",
        exclude=("*_test.rs", "*_tests.rs"),
    ),
]

# ---------------------------------------------------------------------------
# Leftover markers, commented-out code, placeholder text
# ---------------------------------------------------------------------------

_MARKERS: list[PatternDefinition] = [
    PatternDefinition(
        id="old_todos",
        category="maintenance",
        description="TODO/FIXME/HACK/XXX markers left in code",
        severity=Severity.LOW,
        regex=re.compile(r"(TODO|FIXME|HACK|XXX):"),
    ),
    PatternDefinition(
        id="commented_code",
        category="maintenance",
        description="Large blocks of commented-out code",
        severity=Severity.MEDIUM,
        auto_fix=AutoFix.REMOVE,
        regex=re.compile(r"^\s*(//|#)\s*\w{5,}"),
        min_consecutive_lines=5,
    ),
    PatternDefinition(
        id="placeholder_text",
        category="placeholder",
        description="Placeholder text that should be replaced",
        severity=Severity.HIGH,
        regex=re.compile(
            r"(lorem ipsum|test test test|asdf|foo bar baz|placeholder|replace this|todo: implement)",
            re.IGNORECASE,
        ),
        exclude=("*.test.*", "*.spec.*", "README.*", "*.md"),
    ),
]

# ---------------------------------------------------------------------------
# Placeholder implementations, per language
# ---------------------------------------------------------------------------

_PLACEHOLDERS: list[PatternDefinition] = [
    PatternDefinition(
        id="placeholder_stub_returns_js",
        category="placeholder",
        description="Stub return value (0, true, false, null, undefined, [], {})",
        severity=Severity.HIGH,
        regex=re.compile(r"return\s+(?:0|true|false|null|undefined|\[\]|\{\})\s*;?\s*$"),
        language="javascript",
        exclude=("*.test.*", "*.spec.*", "*.config.*"),
    ),
    PatternDefinition(
        id="placeholder_not_implemented_js",
        category="placeholder",
        description='throw new Error("TODO: implement...") placeholder',
        severity=Severity.HIGH,
        regex=re.compile(
            r"throw\s+new\s+Error\s*\(\s*['\"`].*(?:TODO|implement|not\s+impl)", re.IGNORECASE
        ),
        language="javascript",
        exclude=_TEST_GLOBS,
    ),
    PatternDefinition(
        id="placeholder_empty_function_js",
        category="placeholder",
        description="Empty function body (placeholder)",
        severity=Severity.HIGH,
        regex=re.compile(r"(?:function\s+\w+\s*\([^)]*\)|=>\s*)\s*\{\s*\}"),
        language="javascript",
        exclude=("*.test.*", "*.spec.*", "*.d.ts"),
    ),
    PatternDefinition(
        id="placeholder_todo_rust",
        category="placeholder",
        description="Rust todo!() or unimplemented!() macro",
        severity=Severity.HIGH,
        regex=re.compile(r"\b(?:todo|unimplemented)!\s*\("),
        language="rust",
        exclude=_RUST_TEST_GLOBS,
    ),
    PatternDefinition(
        id="placeholder_panic_todo_rust",
        category="placeholder",
        description='Rust panic!("TODO: ...") placeholder',
        severity=Severity.HIGH,
        regex=re.compile(r"\bpanic!\s*\(\s*[\"'].*(?:TODO|implement)", re.IGNORECASE),
        language="rust",
        exclude=_RUST_TEST_GLOBS,
    ),
    PatternDefinition(
        id="placeholder_not_implemented_py",
        category="placeholder",
        description="Python raise NotImplementedError placeholder",
        severity=Severity.HIGH,
        regex=re.compile(r"raise\s+NotImplementedError"),
        language="python",
        exclude=(*_PY_TEST_GLOBS, "**/tests/**"),
    ),
    PatternDefinition(
        id="placeholder_pass_only_py",
        category="placeholder",
        description="Python function with only pass statement",
        severity=Severity.HIGH,
        regex=re.compile(r"def\s+\w+\s*\([^)]*\)\s*:\s*pass\s*$"),
        language="python",
        exclude=_PY_TEST_GLOBS,
    ),
    PatternDefinition(
        id="placeholder_ellipsis_py",
        category="placeholder",
        description="Python function with only ellipsis (...)",
        severity=Severity.HIGH,
        regex=re.compile(r"def\s+\w+\s*\([^)]*\)\s*:\s*\.\.\.\s*$"),
        language="python",
        exclude=("*.pyi", "test_*.py", "*_test.py"),
    ),
    PatternDefinition(
        id="placeholder_panic_go",
        category="placeholder",
        description='Go panic("TODO: ...") placeholder',
        severity=Severity.HIGH,
        regex=re.compile(
            r"panic\s*\(\s*[\"'].*(?:TODO|implement|not\s+impl)", re.IGNORECASE
        ),
        language="go",
        exclude=("*_test.go", "**/testdata/**"),
    ),
    PatternDefinition(
        id="placeholder_unsupported_java",
        category="placeholder",
        description="Java throw new UnsupportedOperationException() placeholder",
        severity=Severity.HIGH,
        regex=re.compile(r"throw\s+new\s+UnsupportedOperationException\s*\("),
        language="java",
        exclude=("*Test.java", "**/test/**"),
    ),
]

# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

_ERROR_HANDLING: list[PatternDefinition] = [
    PatternDefinition(
        id="empty_catch_js",
        category="error-handling",
        description="Empty catch blocks without error handling",
        severity=Severity.HIGH,
        auto_fix=AutoFix.ADD_LOGGING,
        regex=re.compile(r"catch\s*\([^)]*\)\s*\{\s*\}"),
        language="javascript",
    ),
    PatternDefinition(
        id="empty_except_py",
        category="error-handling",
        description="Empty except blocks with just pass",
        severity=Severity.HIGH,
        auto_fix=AutoFix.ADD_LOGGING,
        regex=re.compile(r"except\s*[^:]*:\s*pass\s*$"),
        language="python",
    ),
]

# ---------------------------------------------------------------------------
# Code hygiene
# ---------------------------------------------------------------------------

_HYGIENE: list[PatternDefinition] = [
    PatternDefinition(
        id="magic_numbers",
        category="hygiene",
        description="Magic numbers that should be constants",
        severity=Severity.LOW,
        regex=re.compile(r"(?<![a-zA-Z_\d])[0-9]{4,}(?![a-zA-Z_\d])"),
        exclude=("*.test.*", "*.spec.*", "*.config.*", "package.json", "package-lock.json"),
    ),
    PatternDefinition(
        id="disabled_linter",
        category="hygiene",
        description="Disabled linter rules that may hide issues",
        severity=Severity.MEDIUM,
        regex=re.compile(r"(eslint-disable|pylint: disable|#\s*noqa|@SuppressWarnings|#\[allow\()"),
    ),
    PatternDefinition(
        id="unused_imports_hint",
        category="hygiene",
        description="Imports marked as unused",
        severity=Severity.LOW,
        auto_fix=AutoFix.REMOVE,
        regex=re.compile(r"^import .* from .* // unused$"),
    ),
    PatternDefinition(
        id="mixed_indentation",
        category="formatting",
        description="Mixed tabs and spaces",
        severity=Severity.LOW,
        auto_fix=AutoFix.REPLACE,
        regex=re.compile(r"^\t+ +|^ +\t+"),
        exclude=("Makefile", "*.mk"),
    ),
    PatternDefinition(
        id="trailing_whitespace",
        category="formatting",
        description="Trailing whitespace at end of lines",
        severity=Severity.LOW,
        auto_fix=AutoFix.REMOVE,
        regex=re.compile(r"\s+$"),
        # Markdown uses trailing spaces for hard line breaks
        exclude=("*.md",),
    ),
    PatternDefinition(
        id="multiple_blank_lines",
        category="formatting",
        description="More than 2 consecutive blank lines",
        severity=Severity.LOW,
        auto_fix=AutoFix.REPLACE,
        regex=re.compile(r"^\s*$"),
        min_consecutive_lines=3,
    ),
]

# ---------------------------------------------------------------------------
# Secrets and credentials
# ---------------------------------------------------------------------------

_SECRETS: list[PatternDefinition] = [
    PatternDefinition(
        id="hardcoded_secrets",
        category="secrets",
        description="Potential hardcoded credentials",
        severity=Severity.CRITICAL,
        regex=re.compile(
            r"(password|secret|api[_-]?key|token|credential|auth)[_-]?(key|token|secret|pass)?"
            r"\s*[:=]\s*[\"'`](?!\$\{)(?!\{\{)(?!<[A-Z_])(?![x*#]{8,})(?![X*#]{8,})[^\"'`\s]{8,}[\"'`]",
            re.IGNORECASE,
        ),
        exclude=("*.test.*", "*.spec.*", "*.example.*", "*.sample.*", "README.*", "*.md"),
    ),
    _secret(
        "jwt_tokens",
        r"eyJ[A-Za-z0-9_-]{10,}\.eyJ[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}",
        "Hardcoded JWT token",
    ),
    _secret("openai_api_key", r"sk-[a-zA-Z0-9]{32,}", "Hardcoded OpenAI API key"),
    _secret(
        "github_token",
        r"(ghp_[a-zA-Z0-9]{36}|gho_[a-zA-Z0-9]{36}|ghu_[a-zA-Z0-9]{36}|ghs_[a-zA-Z0-9]{36}"
        r"|ghr_[a-zA-Z0-9]{36}|github_pat_[a-zA-Z0-9]{22}_[a-zA-Z0-9]{59})",
        "Hardcoded GitHub token",
    ),
    _secret(
        "aws_credentials",
        r"(AKIA[0-9A-Z]{16}|aws_secret_access_key\s*[:=]\s*[\"'`][A-Za-z0-9/+=]{40}[\"'`])",
        "Hardcoded AWS credentials",
        flags=re.IGNORECASE,
    ),
    _secret(
        "google_api_key",
        r"(AIza[0-9A-Za-z_-]{35}|[0-9]+-[a-z0-9_]{32}\.apps\.googleusercontent\.com)",
        "Hardcoded Google/Firebase API key",
    ),
    _secret(
        "stripe_api_key",
        r"(sk_live_[a-zA-Z0-9]{24,}|sk_test_[a-zA-Z0-9]{24,}|rk_live_[a-zA-Z0-9]{24,}|rk_test_[a-zA-Z0-9]{24,})",
        "Hardcoded Stripe API key",
    ),
    _secret(
        "slack_token",
        r"(xoxb-[0-9]{10,}-[0-9]{10,}-[a-zA-Z0-9]{24}|xoxp-[0-9]{10,}-[0-9]{10,}-[a-zA-Z0-9]{24}"
        r"|xoxa-[0-9]{10,}-[a-zA-Z0-9]{24}"
        r"|https://hooks\.slack\.com/services/T[A-Z0-9]{8}/B[A-Z0-9]{8,}/[a-zA-Z0-9]{24})",
        "Hardcoded Slack token or webhook URL",
    ),
    _secret(
        "discord_token",
        r"(discord.*[\"'`][A-Za-z0-9_-]{24}\.[A-Za-z0-9_-]{6}\.[A-Za-z0-9_-]{27}[\"'`]"
        r"|https://discord(?:app)?\.com/api/webhooks/[0-9]+/[A-Za-z0-9_-]+)",
        "Hardcoded Discord token or webhook",
        flags=re.IGNORECASE,
    ),
    _secret(
        "sendgrid_api_key",
        r"SG\.[a-zA-Z0-9_-]{22}\.[a-zA-Z0-9_-]{43}",
        "Hardcoded SendGrid API key",
    ),
    _secret("twilio_credentials", r"(AC[a-f0-9]{32}|SK[a-f0-9]{32})", "Hardcoded Twilio credentials"),
    _secret("npm_token", r"npm_[a-zA-Z0-9]{36}", "Hardcoded NPM token"),
    _secret(
        "private_key",
        r"-----BEGIN\s+(RSA\s+)?PRIVATE\s+KEY-----",
        "Private key in source code",
        extra_exclude=("*.pem.example",),
    ),
    PatternDefinition(
        id="high_entropy_string",
        category="secrets",
        description="High-entropy string that may be a secret",
        severity=Severity.MEDIUM,
        regex=re.compile(r"[\"'`]([A-Za-z0-9+/=_-]{40,})[\"'`]"),
        exclude=(
            "*.test.*", "*.spec.*", "*.example.*", "*.lock",
            "package-lock.json", "yarn.lock", "pnpm-lock.yaml",
        ),
        thresholds={"entropy_threshold": 4.5},
    ),
]

# ---------------------------------------------------------------------------
# Library hygiene, phantom references, naming
# ---------------------------------------------------------------------------

_GENERIC_NAMES = "data|result|item|temp|value|output|response|obj|ret|res|val"

_REFERENCES: list[PatternDefinition] = [
    PatternDefinition(
        id="process_exit",
        category="hygiene",
        description="process.exit() should not be in library code",
        severity=Severity.HIGH,
        regex=re.compile(r"process\.exit\("),
        language="javascript",
        exclude=("*.test.*", "cli.js", "index.js", "bin/*"),
    ),
    PatternDefinition(
        id="bare_urls",
        category="hygiene",
        description="Hardcoded URLs that should be configuration",
        severity=Severity.LOW,
        regex=re.compile(r"https?://[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"),
        exclude=("*.test.*", "*.md", "package.json", "README.*"),
    ),
    PatternDefinition(
        id="issue_pr_references",
        category="phantom-reference",
        description="Issue/PR/iteration references in comments",
        severity=Severity.MEDIUM,
        auto_fix=AutoFix.REMOVE,
        regex=re.compile(
            r"//.*(?:#\d+|issue\s+#?\d+|PR\s+#?\d+|pull\s+request\s+#?\d+|fixed\s+in\s+#?\d+"
            r"|closes?\s+#?\d+|resolves?\s+#?\d+|iteration\s+\d+)",
            re.IGNORECASE,
        ),
        exclude=("*.md", "README.*", "CHANGELOG.*", "CONTRIBUTING.*"),
    ),
    PatternDefinition(
        id="file_path_references",
        category="phantom-reference",
        description="File path references in comments that may be outdated",
        severity=Severity.LOW,
        regex=re.compile(
            r"//.*(?:see|refer\s+to|in|per|documented\s+in)\s+"
            r"([a-zA-Z0-9_\-./]+\.(?:md|js|ts|json|yaml|yml|toml|txt))",
            re.IGNORECASE,
        ),
        exclude=("*.md", "README.*", "*.test.*", "*.spec.*"),
    ),
    PatternDefinition(
        id="generic_naming_js",
        category="naming",
        description='Generic variable name that could be more descriptive (e.g., "data" -> "userData")',
        severity=Severity.LOW,
        regex=re.compile(
            rf"\b(?:const|let|var)\s+({_GENERIC_NAMES}|arr|str|num|buf|ctx|cfg|opts|args|params)\s*[=:]",
            re.IGNORECASE,
        ),
        language="javascript",
        exclude=("*.test.*", "*.spec.*", "**/test/**", "**/tests/**"),
    ),
    PatternDefinition(
        id="generic_naming_py",
        category="naming",
        description="Generic variable name that could be more descriptive",
        severity=Severity.LOW,
        regex=re.compile(
            rf"^(\s*)(?!.*\bfor\s+\w+\s+in\b)({_GENERIC_NAMES}|arr|ctx|cfg|opts|args|params)\s*[:=]",
            re.IGNORECASE,
        ),
        language="python",
        exclude=("*test*.py", "**/test_*.py", "**/tests/**", "conftest.py"),
    ),
    PatternDefinition(
        id="generic_naming_rust",
        category="naming",
        description="Generic variable name that could be more descriptive",
        severity=Severity.LOW,
        regex=re.compile(
            rf"\blet\s+(?:mut\s+)?({_GENERIC_NAMES}|buf|ctx|cfg|opts|args)\s*[=:]", re.IGNORECASE
        ),
        language="rust",
        exclude=_RUST_TEST_GLOBS,
    ),
    PatternDefinition(
        id="generic_naming_go",
        category="naming",
        description="Generic variable name that could be more descriptive",
        severity=Severity.LOW,
        regex=re.compile(rf"\b({_GENERIC_NAMES}|buf|ctx|cfg|opts|args)\s*:=", re.IGNORECASE),
        language="go",
        exclude=("*_test.go", "**/tests/**", "**/testdata/**"),
    ),
]

# ---------------------------------------------------------------------------
# Verbosity in prose and comments
# ---------------------------------------------------------------------------

_VERBOSITY: list[PatternDefinition] = [
    PatternDefinition(
        id="verbosity_preambles",
        category="verbosity",
        description="AI preamble phrases in comments - remove filler language",
        severity=Severity.LOW,
        regex=re.compile(
            r"//\s*(?:certainly|i'd\s+be\s+happy|great\s+question|absolutely|of\s+course"
            r"|happy\s+to\s+help|let\s+me\s+help|i\s+can\s+help)",
            re.IGNORECASE,
        ),
        exclude=("*.test.*", "*.spec.*", "*.md"),
    ),
    PatternDefinition(
        id="verbosity_buzzwords",
        category="verbosity",
        description="Marketing buzzwords that obscure technical meaning",
        severity=Severity.LOW,
        regex=re.compile(
            r"\b(?:synergize|operationalize|paradigm\s+shift|best-in-class|world-class|cutting-edge"
            r"|game-changing|holistic|revolutionary|transformative|seamless|next-generation"
            r"|bleeding-edge|industry-leading)\b",
            re.IGNORECASE,
        ),
        exclude=("*.test.*", "*.spec.*", "*.md", "CHANGELOG.*", "README.*"),
    ),
    PatternDefinition(
        id="verbosity_hedging",
        category="verbosity",
        description="Hedging language in comments - be direct",
        severity=Severity.LOW,
        regex=re.compile(
            r"//.*\b(?:it'?s?\s+worth\s+noting|generally\s+speaking|more\s+or\s+less|arguably"
            r"|perhaps|possibly|might\s+be|should\s+work|i\s+think|i\s+believe|probably|maybe)\b",
            re.IGNORECASE,
        ),
        exclude=_TEST_GLOBS,
    ),
]

# ---------------------------------------------------------------------------
# Multi-pass detectors (structural analyzers)
# ---------------------------------------------------------------------------

_MULTI_PASS: list[PatternDefinition] = [
    PatternDefinition(
        id="doc_code_ratio",
        category="verbosity",
        description="Documentation longer than code (doc comment > 3x function body)",
        severity=Severity.MEDIUM,
        certainty=Certainty.MEDIUM,
        requires_multi_pass=True,
        exclude=("*.test.*", "*.spec.*", "*.d.ts"),
        thresholds={"min_function_lines": 3, "max_ratio": 3.0},
    ),
    PatternDefinition(
        id="verbosity_ratio",
        category="verbosity",
        description="Excessive inline comments (>2:1 comment-to-code ratio within function)",
        severity=Severity.MEDIUM,
        certainty=Certainty.MEDIUM,
        requires_multi_pass=True,
        exclude=("*.test.*", "*.spec.*", "*.md", "*.d.ts"),
        thresholds={"min_code_lines": 3, "max_comment_ratio": 2.0},
    ),
    PatternDefinition(
        id="over_engineering_metrics",
        category="architecture",
        description="Excessive files/lines relative to public API (over-engineering indicator)",
        severity=Severity.HIGH,
        certainty=Certainty.MEDIUM,
        requires_multi_pass=True,
        thresholds={
            "file_ratio_threshold": 20,
            "lines_per_export_threshold": 500,
            "depth_threshold": 4,
        },
    ),
    PatternDefinition(
        id="buzzword_inflation",
        category="architecture",
        description="Quality claims (production-ready, secure, scalable) without supporting code evidence",
        severity=Severity.HIGH,
        certainty=Certainty.MEDIUM,
        requires_multi_pass=True,
        thresholds={"min_evidence_matches": 2},
    ),
    PatternDefinition(
        id="infrastructure_without_implementation",
        category="architecture",
        description="Infrastructure component created but never used",
        severity=Severity.HIGH,
        certainty=Certainty.MEDIUM,
        requires_multi_pass=True,
        thresholds={"max_matches_per_file": 100},
    ),
    PatternDefinition(
        id="dead_code",
        category="maintenance",
        description="Unreachable code after control-flow terminator",
        severity=Severity.HIGH,
        certainty=Certainty.MEDIUM,
        auto_fix=AutoFix.REMOVE,
        requires_multi_pass=True,
    ),
    PatternDefinition(
        id="placeholder_stub_functions",
        category="placeholder",
        description="Stub function returning a placeholder value",
        severity=Severity.MEDIUM,
        certainty=Certainty.MEDIUM,
        requires_multi_pass=True,
        exclude=("*.test.*", "*.spec.*", "*.config.*"),
    ),
    PatternDefinition(
        id="shotgun_surgery",
        category="architecture",
        description="Files that frequently change together (shotgun surgery indicator)",
        severity=Severity.MEDIUM,
        certainty=Certainty.MEDIUM,
        requires_multi_pass=True,
        thresholds={"commit_limit": 100, "cluster_threshold": 5, "min_co_changes": 3},
    ),
]


BUILTIN_PATTERNS: tuple[PatternDefinition, ...] = (
    *_DEBUGGING,
    *_MARKERS,
    *_PLACEHOLDERS,
    *_ERROR_HANDLING,
    *_HYGIENE,
    *_SECRETS,
    *_REFERENCES,
    *_VERBOSITY,
    *_MULTI_PASS,
)
