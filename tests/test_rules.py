from convention_checker.javasyntax import parse_java
from convention_checker.models import Severity
from convention_checker.rules import default_rules
from convention_checker.rules.base import SourceParseRule, simple_type_name
from convention_checker.rules.formatting import LineLengthRule, NoTabIndentRule
from convention_checker.rules.immutability import (
    FinalFieldRule,
    NoLombokDataRule,
    StaticMutableFieldRule,
    ThreadUnsafeStaticRule,
)
from convention_checker.rules.imports import NoWildcardImportRule
from convention_checker.rules.logging_usage import LoggerDeclarationRule, NoConsoleOutputRule
from convention_checker.rules.naming import ConstantNamingRule, MethodNamingRule, TypeNamingRule
from convention_checker.rules.nullability import PreferOptionalRule
from convention_checker.rules.spring import NoFieldInjectionRule


def run_rule(rule, source, path="Sample.java"):
    return list(rule.evaluate(parse_java(source, path)))


FIELDS_SOURCE = (
    "class Account {\n"
    "    private int counter;\n"
    "    private final String name = \"x\";\n"
    "    private static int shared;\n"
    "    interface Limits { int MAX = 1; }\n"
    "}\n"
    "@Entity\n"
    "class Order {\n"
    "    private Long id;\n"
    "}\n"
    "@Value\n"
    "class Point {\n"
    "    int x;\n"
    "}\n"
)


def test_default_rule_ids_are_unique():
    ids = [rule.id for rule in default_rules()]
    assert len(ids) == len(set(ids))
    assert ids[0] == "parse-error"


def test_no_wildcard_import():
    findings = run_rule(
        NoWildcardImportRule(),
        "import java.util.*;\n"
        "import static org.junit.Assert.*;\n"
        "import java.util.List;\n"
        "class A {}\n",
    )

    assert [(item.location.line, item.location.column) for item in findings] == [(1, 1), (2, 1)]
    assert {item.rule_id for item in findings} == {"no-wildcard-import"}
    assert {item.severity for item in findings} == {Severity.WARN}
    assert "import static org.junit.Assert.*" in findings[1].message


def test_final_field_flags_mutable_instance_fields_only():
    findings = run_rule(FinalFieldRule(), FIELDS_SOURCE)

    assert len(findings) == 1
    assert findings[0].location.line == 2
    assert "counter" in findings[0].message


def test_static_mutable_field_is_an_error():
    findings = run_rule(StaticMutableFieldRule(), FIELDS_SOURCE)

    assert len(findings) == 1
    assert findings[0].location.line == 4
    assert findings[0].severity is Severity.ERROR


def test_thread_unsafe_static():
    findings = run_rule(
        ThreadUnsafeStaticRule(),
        "class Dates {\n"
        "    private static final SimpleDateFormat FORMAT = new SimpleDateFormat(\"yyyy\");\n"
        "    private static final Map<String, String> CACHE = new HashMap<>();\n"
        "    private static final Map<String, String> SAFE = new ConcurrentHashMap<>();\n"
        "    private static final List<String> NAMES = Collections.unmodifiableList(new ArrayList<>());\n"
        "    private final SimpleDateFormat local = new SimpleDateFormat(\"yyyy\");\n"
        "}\n",
    )

    assert [item.location.line for item in findings] == [2, 3]
    assert "SimpleDateFormat" in findings[0].message
    assert "HashMap" in findings[1].message
    assert all(item.severity is Severity.ERROR for item in findings)


def test_prefer_optional():
    findings = run_rule(
        PreferOptionalRule(),
        "class Repo {\n"
        "    @Nullable\n"
        "    public User find(String id) { return cache.get(id); }\n"
        "    public User load(String id) {\n"
        "        if (id.isEmpty()) {\n"
        "            return null;\n"
        "        }\n"
        "        return db.load(id);\n"
        "    }\n"
        "    public int count() { return 0; }\n"
        "    public void reset() { return; }\n"
        "    public Optional<User> findOptional(String id) { return Optional.empty(); }\n"
        "}\n",
    )

    assert [(item.location.line, item.location.column) for item in findings] == [(3, 17), (6, 13)]
    assert "@Nullable" in findings[0].message
    assert "Optional.empty()" in findings[1].message


def test_prefer_optional_ignores_nested_functions():
    findings = run_rule(
        PreferOptionalRule(),
        "class Repo {\n"
        "    String name(Mode mode) {\n"
        "        Supplier<String> s = () -> { return null; };\n"
        "        Callable<String> c = new Callable<String>() {\n"
        "            public String call() { return null; }\n"
        "        };\n"
        "        switch (mode) {\n"
        "            case EMPTY -> { return null; }\n"
        "            default -> { return s.get(); }\n"
        "        }\n"
        "    }\n"
        "}\n",
    )

    assert [(item.location.line, item.location.column) for item in findings] == [(8, 29)]
    assert findings[0].message == "Method 'name' returns null; return Optional.empty() instead"


def test_naming_rules():
    source = (
        "class bad_name {\n"
        "    private static final int maxSize = 10;\n"
        "    private static final long serialVersionUID = 1L;\n"
        "    private static final Logger log = LoggerFactory.getLogger(bad_name.class);\n"
        "    private static final int MAX_SIZE = 10;\n"
        "    public void Do_Thing() {}\n"
        "    public bad_name() {}\n"
        "    void fine() {}\n"
        "}\n"
    )

    types = run_rule(TypeNamingRule(), source)
    constants = run_rule(ConstantNamingRule(), source)
    methods = run_rule(MethodNamingRule(), source)

    assert [item.location.line for item in types] == [1]
    assert [item.location.line for item in constants] == [2]
    assert "maxSize" in constants[0].message
    assert [item.location.line for item in methods] == [6]
    assert "Do_Thing" in methods[0].message


def test_no_field_injection():
    findings = run_rule(
        NoFieldInjectionRule(),
        "@Service\n"
        "class Svc {\n"
        "    @Autowired\n"
        "    private Repo repo;\n"
        "    @Value(\"${app.name}\")\n"
        "    private String appName;\n"
        "    private final Other other;\n"
        "    @Autowired\n"
        "    Svc(Other other) { this.other = other; }\n"
        "}\n",
    )

    assert [item.location.line for item in findings] == [4, 6]
    assert "@Autowired" in findings[0].message
    assert "@Value" in findings[1].message


def test_no_lombok_data():
    findings = run_rule(
        NoLombokDataRule(),
        "@Data\n"
        "class Dto { @Setter private String name; }\n"
        "@Value\n"
        "class Immutable { String name; }\n",
    )

    assert len(findings) == 2
    assert "@Data on Dto" in findings[0].message
    assert "@Setter on field 'name'" in findings[1].message


def test_no_console_output_ignores_comments_and_strings():
    findings = run_rule(
        NoConsoleOutputRule(),
        "class Cli {\n"
        "    void run() {\n"
        "        System.out.println(\"System.out in a string\");\n"
        "        // System.err.println(\"commented\");\n"
        "        try { work(); } catch (Exception e) { e.printStackTrace(); }\n"
        "    }\n"
        "}\n",
    )

    assert [(item.location.line, item.location.column) for item in findings] == [(3, 9), (5, 48)]
    assert findings[0].message.startswith("System.out")


def test_logger_declaration():
    findings = run_rule(
        LoggerDeclarationRule(),
        "class A {\n"
        "    private static final Logger LOG = LoggerFactory.getLogger(A.class);\n"
        "    Logger other = LoggerFactory.getLogger(\"x\");\n"
        "}\n",
    )

    assert len(findings) == 1
    assert findings[0].location.line == 3
    assert "missing: final private static" in findings[0].message


def test_line_length_skips_imports():
    findings = run_rule(
        LineLengthRule(max_length=20),
        "import com.example.very.long.pkg.Name;\n"
        "class A {\n"
        "    int reallyLongFieldName = 12345;\n"
        "}\n",
    )

    assert [(item.location.line, item.location.column) for item in findings] == [(3, 21)]
    assert "36 characters" in findings[0].message


def test_no_tab_indent():
    findings = run_rule(NoTabIndentRule(), "class A {\n\tint x;\n    int y;\n}\n")

    assert [(item.location.line, item.location.column) for item in findings] == [(2, 1)]


def test_parse_rule_reports_nothing_for_parsed_units():
    assert run_rule(SourceParseRule(), "class A {}\n") == []


def test_simple_type_name():
    assert simple_type_name("java.util.Map<String, List<X>>[]") == "Map"
    assert simple_type_name("Logger") == "Logger"
    assert simple_type_name("String...") == "String"
