"""Pattern library — the static recognizers behind heuristic analysis.

Everything here is data: keyword families, header shapes, phrase templates and
per-document-type fallbacks.  The classifier and the heuristic analyzer take a
:class:`PatternLibrary` as a parameter, so an alternative library can be
swapped in (and tested) without touching the scoring logic.

All regex patterns are pre-compiled at import time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping

from insight_engine.domain.entities import DocumentType

_I = re.IGNORECASE


@dataclass(frozen=True, slots=True)
class TechnologyFamily:
    """A named group of ``(label, pattern)`` technology recognizers."""

    name: str
    recognizers: tuple[tuple[str, re.Pattern[str]], ...]


@dataclass(frozen=True, slots=True)
class PatternLibrary:
    """Versioned bundle of every recognizer the heuristics rely on."""

    version: str
    technology_families: tuple[TechnologyFamily, ...]
    # Order matters: earlier families win ties in document-type detection.
    document_keywords: tuple[tuple[DocumentType, tuple[re.Pattern[str], ...]], ...]
    markdown_header: re.Pattern[str]
    document_headers: tuple[re.Pattern[str], ...]
    bullet_item: re.Pattern[str]
    feature_header: re.Pattern[str]
    use_case_header: re.Pattern[str]
    use_case_phrases: tuple[re.Pattern[str], ...]
    complexity_terms: tuple[re.Pattern[str], ...]
    year: re.Pattern[str]
    percentage: re.Pattern[str]
    fallback_technologies: Mapping[DocumentType, tuple[str, ...]]
    fallback_features: Mapping[DocumentType, tuple[str, ...]]
    fallback_use_cases: Mapping[DocumentType, tuple[str, ...]]
    section_skeletons: Mapping[DocumentType, tuple[str, ...]]

    def keywords_for(self, doc_type: DocumentType) -> tuple[re.Pattern[str], ...]:
        for family_type, patterns in self.document_keywords:
            if family_type is doc_type:
                return patterns
        return ()


def _tech(label: str, pattern: str) -> tuple[str, re.Pattern[str]]:
    return label, re.compile(pattern, _I)


def _terms(*words: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(rf"\b{re.escape(word)}\b", _I) for word in words)


# ── Technology families ─────────────────────────────────────────────────────

_LANGUAGES = TechnologyFamily(
    "languages",
    (
        _tech("Python", r"\bpython\b|\bpip install\b|\.py\b"),
        _tech("JavaScript", r"\bjavascript\b|\bes6\b|\becmascript\b"),
        _tech("TypeScript", r"\btypescript\b|\.tsx?\b"),
        _tech("Java", r"\bjava\b(?!\s*script)"),
        _tech("Go", r"\bgolang\b|\bgo\.mod\b|\bgo (?:get|install|build|run)\b"),
        _tech("Rust", r"\brust\b|\bcargo\.toml\b"),
        _tech("C++", r"\bc\+\+|\bcpp\b"),
        _tech("C#", r"\bc#|\bcsharp\b"),
        _tech("Ruby", r"\bruby\b|\bgemfile\b"),
        _tech("PHP", r"\bphp\b"),
        _tech("Swift", r"\bswift(?:ui)?\b"),
        _tech("Kotlin", r"\bkotlin\b"),
        _tech("Scala", r"\bscala\b"),
        _tech("Elixir", r"\belixir\b"),
        _tech("Haskell", r"\bhaskell\b"),
        _tech("Dart", r"\bdart\b|\bflutter\b"),
        _tech("SQL", r"\bsql\b"),
        _tech("Shell", r"\bbash\b|\bshell script"),
    ),
)

_FRONTEND = TechnologyFamily(
    "frontend",
    (
        _tech("React", r"\breact(?:\.?js| native)?\b(?!\s+to\b)"),
        _tech("Vue.js", r"\bvue(?:\.?js)?\b"),
        _tech("Angular", r"\bangular(?:js)?\b"),
        _tech("Svelte", r"\bsvelte(?:kit)?\b"),
        _tech("Next.js", r"\bnext\.?js\b"),
        _tech("Nuxt", r"\bnuxt(?:\.?js)?\b"),
        _tech("Tailwind CSS", r"\btailwind(?:css)?\b"),
        _tech("Bootstrap", r"\bbootstrap\b"),
        _tech("jQuery", r"\bjquery\b"),
        _tech("Vite", r"\bvite\b"),
    ),
)

_BACKEND = TechnologyFamily(
    "backend",
    (
        _tech("Node.js", r"\bnode(?:\.?js)?\b"),
        _tech("Express", r"\bexpress(?:\.?js)\b"),
        _tech("Django", r"\bdjango\b"),
        _tech("Flask", r"\bflask\b"),
        _tech("FastAPI", r"\bfastapi\b"),
        _tech("Spring Boot", r"\bspring(?: boot| framework)\b"),
        _tech("Ruby on Rails", r"\brails\b"),
        _tech("Laravel", r"\blaravel\b"),
        _tech("ASP.NET", r"\basp\.net\b|\.net core\b"),
        _tech("GraphQL", r"\bgraphql\b"),
        _tech("gRPC", r"\bgrpc\b"),
    ),
)

_DATASTORES = TechnologyFamily(
    "datastores",
    (
        _tech("PostgreSQL", r"\bpostgres(?:ql)?\b"),
        _tech("MySQL", r"\bmysql\b|\bmariadb\b"),
        _tech("SQLite", r"\bsqlite\d?\b"),
        _tech("MongoDB", r"\bmongo(?:db)?\b"),
        _tech("Redis", r"\bredis\b"),
        _tech("Elasticsearch", r"\belasticsearch\b"),
        _tech("Cassandra", r"\bcassandra\b"),
        _tech("DynamoDB", r"\bdynamodb\b"),
        _tech("Kafka", r"\bkafka\b"),
    ),
)

_CLOUD_DEVOPS = TechnologyFamily(
    "cloud_devops",
    (
        _tech("Docker", r"\bdocker(?:file|-compose)?\b"),
        _tech("Kubernetes", r"\bkubernetes\b|\bk8s\b|\bhelm\b"),
        _tech("AWS", r"\baws\b|\bamazon web services\b|\bs3 bucket\b|\blambda function"),
        _tech("Google Cloud", r"\bgoogle cloud\b|\bgcp\b"),
        _tech("Azure", r"\bazure\b"),
        _tech("Terraform", r"\bterraform\b"),
        _tech("GitHub Actions", r"\bgithub actions\b|\.github/workflows\b"),
        _tech("Jenkins", r"\bjenkins\b"),
        _tech("Ansible", r"\bansible\b"),
        _tech("Nginx", r"\bnginx\b"),
    ),
)

_BUILD_TOOLS = TechnologyFamily(
    "build_tools",
    (
        _tech("Webpack", r"\bwebpack\b"),
        _tech("npm", r"\bnpm\b"),
        _tech("Yarn", r"\byarn\b"),
        _tech("pnpm", r"\bpnpm\b"),
        _tech("Maven", r"\bmaven\b|\bpom\.xml\b"),
        _tech("Gradle", r"\bgradle\b"),
        _tech("Poetry", r"\bpoetry\b"),
        _tech("CMake", r"\bcmake\b"),
        _tech("Bazel", r"\bbazel\b"),
        _tech("Make", r"\bmakefile\b"),
    ),
)

_ML_DATA = TechnologyFamily(
    "ml_data",
    (
        _tech("TensorFlow", r"\btensorflow\b|\bkeras\b"),
        _tech("PyTorch", r"\bpytorch\b|\btorch\b"),
        _tech("scikit-learn", r"\bscikit-learn\b|\bsklearn\b"),
        _tech("Pandas", r"\bpandas\b"),
        _tech("NumPy", r"\bnumpy\b"),
        _tech("Jupyter", r"\bjupyter\b|\.ipynb\b"),
        _tech("Hugging Face", r"\bhugging ?face\b|\btransformers library\b"),
        _tech("OpenAI API", r"\bopenai\b"),
    ),
)

# ── Document-type keyword families ──────────────────────────────────────────

_RESUME_TERMS = _terms(
    "resume", "curriculum vitae", "cv", "work experience",
    "professional experience", "employment history", "education",
    "skills", "certifications", "references", "career objective",
)

_REPORT_TERMS = _terms(
    "report", "findings", "methodology", "results", "conclusion",
    "conclusions", "abstract", "research", "executive summary",
    "survey", "analysis",
)

_PROPOSAL_TERMS = _terms(
    "proposal", "proposed", "budget", "timeline", "deliverables",
    "milestones", "scope", "stakeholders", "roadmap", "funding",
)

_TECHNICAL_TERMS = _terms(
    "api", "installation", "configuration", "endpoint", "deployment",
    "specification", "implementation", "sdk", "command line",
    "requirements",
)

# ── Complexity vocabulary ───────────────────────────────────────────────────

_COMPLEXITY_TERMS = tuple(
    re.compile(pattern, _I)
    for pattern in (
        r"\barchitecture\b",
        r"\bdistributed\b",
        r"\bscalab(?:le|ility)\b",
        r"\bmicroservices?\b",
        r"\bconcurren(?:t|cy)\b",
        r"\basynchronous\b|\basync\b",
        r"\balgorithms?\b",
        r"\boptimi[sz]ation\b",
        r"\bmachine learning\b|\bdeep learning\b",
        r"\bneural networks?\b",
        r"\bkubernetes\b",
        r"\bclusters?\b",
        r"\bpipelines?\b",
        r"\breal-time\b",
        r"\binfrastructure\b",
        r"\benterprise\b",
        r"\bhigh[- ]performance\b",
        r"\bencryption\b|\bcryptograph",
        r"\bcompilers?\b",
        r"\borchestration\b",
        r"\bfault[- ]tolerant\b|\bfault tolerance\b",
    )
)

# ── Fallbacks per document type ─────────────────────────────────────────────

_FALLBACK_TECHNOLOGIES: dict[DocumentType, tuple[str, ...]] = {
    DocumentType.REPOSITORY: ("Git version control", "GitHub hosting", "Open source tooling"),
    DocumentType.RESUME: ("Professional documentation", "Career profile formatting"),
    DocumentType.REPORT: ("Data analysis", "Research documentation"),
    DocumentType.PROPOSAL: ("Project planning", "Business documentation"),
    DocumentType.TECHNICAL: ("Technical documentation", "Software configuration"),
    DocumentType.GENERAL: ("Document processing", "Text content"),
}

_FALLBACK_FEATURES: dict[DocumentType, tuple[str, ...]] = {
    DocumentType.REPOSITORY: (
        "Open source codebase",
        "README-documented project",
        "Community contributions via GitHub",
    ),
    DocumentType.RESUME: (
        "Professional experience overview",
        "Skills and competencies summary",
        "Education and credentials",
        "Career progression details",
    ),
    DocumentType.REPORT: (
        "Structured findings and results",
        "Data-driven analysis",
        "Methodology description",
        "Conclusions and recommendations",
    ),
    DocumentType.PROPOSAL: (
        "Project objectives and scope",
        "Timeline and milestones",
        "Budget and resource planning",
        "Deliverables definition",
    ),
    DocumentType.TECHNICAL: (
        "Setup and installation guidance",
        "Configuration reference",
        "Implementation details",
        "Usage instructions",
    ),
    DocumentType.GENERAL: (
        "Structured written content",
        "Key topics and themes",
        "Reference material",
    ),
}

_FALLBACK_USE_CASES: dict[DocumentType, tuple[str, ...]] = {
    DocumentType.REPOSITORY: (
        "Software development and learning",
        "Integration into larger projects",
        "Reference implementation for similar tools",
        "Community collaboration and contribution",
    ),
    DocumentType.RESUME: (
        "Candidate screening and evaluation",
        "Job application submission",
        "Skills gap assessment",
        "Professional networking",
    ),
    DocumentType.REPORT: (
        "Decision support for stakeholders",
        "Research reference",
        "Performance tracking",
        "Knowledge sharing",
    ),
    DocumentType.PROPOSAL: (
        "Funding or approval requests",
        "Project kickoff alignment",
        "Stakeholder communication",
        "Resource planning",
    ),
    DocumentType.TECHNICAL: (
        "Developer onboarding",
        "System setup and deployment",
        "Troubleshooting reference",
        "Integration planning",
    ),
    DocumentType.GENERAL: (
        "Information reference",
        "Knowledge sharing",
        "Content review and summarisation",
    ),
}

_SECTION_SKELETONS: dict[DocumentType, tuple[str, ...]] = {
    DocumentType.REPOSITORY: ("Overview", "Installation", "Usage", "Configuration", "Contributing"),
    DocumentType.RESUME: (
        "Contact Information",
        "Professional Summary",
        "Work Experience",
        "Education",
        "Skills",
    ),
    DocumentType.REPORT: (
        "Executive Summary",
        "Introduction",
        "Methodology",
        "Findings",
        "Conclusions",
    ),
    DocumentType.PROPOSAL: ("Objectives", "Scope", "Timeline", "Budget", "Deliverables"),
    DocumentType.TECHNICAL: ("Introduction", "Installation", "Configuration", "Usage", "Reference"),
    DocumentType.GENERAL: ("Introduction", "Main Content", "Conclusion"),
}


def build_default_patterns() -> PatternLibrary:
    """Assemble the shipped pattern library."""
    return PatternLibrary(
        version="1.0",
        technology_families=(
            _LANGUAGES,
            _FRONTEND,
            _BACKEND,
            _DATASTORES,
            _CLOUD_DEVOPS,
            _BUILD_TOOLS,
            _ML_DATA,
        ),
        document_keywords=(
            (DocumentType.RESUME, _RESUME_TERMS),
            (DocumentType.REPORT, _REPORT_TERMS),
            (DocumentType.PROPOSAL, _PROPOSAL_TERMS),
            (DocumentType.TECHNICAL, _TECHNICAL_TERMS),
        ),
        markdown_header=re.compile(
            r"^[ \t]{0,3}#{1,6}[ \t]+(?P<title>.+?)[ \t]*#*[ \t]*$", re.MULTILINE
        ),
        document_headers=(
            # "1. Introduction", "2.3 Results", "IV. Budget"
            re.compile(
                r"^[ \t]*(?:\d+(?:\.\d+)*\.?|[IVX]+\.)[ \t]+"
                r"(?P<title>[A-Z][A-Za-z &/\-]{2,60})[ \t]*$",
                re.MULTILINE,
            ),
            # "WORK EXPERIENCE", "EDUCATION:"
            re.compile(
                r"^[ \t]*(?P<title>[A-Z][A-Z &/\-]{2,40}[A-Z])[ \t]*:?[ \t]*$", re.MULTILINE
            ),
        ),
        bullet_item=re.compile(r"^\s*(?:[-*+•]|\d+[.)])\s+(?P<item>\S.*?)\s*$"),
        feature_header=re.compile(
            r"^(?:key |main |core |notable )?(?:features?|highlights?|capabilities|what it does)\b",
            _I,
        ),
        use_case_header=re.compile(
            r"^(?:use[- ]?cases?|usage scenarios|applications|when to use(?: it)?"
            r"|who (?:is )?(?:this|it) (?:is )?for)\b",
            _I,
        ),
        use_case_phrases=(
            re.compile(
                r"\b(?:ideal|perfect|great|useful|designed|built|intended|suitable)\s+for\s+"
                r"(?P<phrase>[^.\n;:!?]{6,80})",
                _I,
            ),
            re.compile(
                r"\b(?:use (?:it|this(?: \w+)?) to|helps? (?:you )?|allows? (?:you|users|teams) to"
                r"|enables? (?:you|users|teams|developers) to|lets? you)\s+"
                r"(?P<phrase>[^.\n;:!?]{6,80})",
                _I,
            ),
        ),
        complexity_terms=_COMPLEXITY_TERMS,
        year=re.compile(r"\b(?:19|20)\d{2}\b"),
        percentage=re.compile(r"\b\d+(?:\.\d+)?\s?%"),
        fallback_technologies=_FALLBACK_TECHNOLOGIES,
        fallback_features=_FALLBACK_FEATURES,
        fallback_use_cases=_FALLBACK_USE_CASES,
        section_skeletons=_SECTION_SKELETONS,
    )


DEFAULT_PATTERNS = build_default_patterns()
