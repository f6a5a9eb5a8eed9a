import pytest

from convention_checker.javasyntax import ParseError, parse_java


ORDER_SERVICE = """package com.example.orders;

import java.util.List;
import java.util.*;
import static java.util.Objects.requireNonNull;

/**
 * Orders { with braces in a comment }
 */
@Service
public class OrderService {
    private static final Logger log = LoggerFactory.getLogger(OrderService.class);
    private final String name = "a { weird ; string";
    private int count, total = 0;
    @Autowired
    private OrderRepository repository;
    private final Map<String, List<Integer>> index = new HashMap<>();

    public OrderService(String name) {
        this.name = name;
    }

    @Nullable
    public Order find(String id) {
        if (id == null) {
            return null;
        }
        return repository.find(id);
    }

    public interface Listener {
        int LIMIT = 10;
        void onOrder(Order order);
    }

    enum Status {
        OPEN("o"), CLOSED("c") {
            @Override
            public String toString() { return "closed"; }
        };

        private final String code;

        Status(String code) {
            this.code = code;
        }
    }
}
"""


def test_parse_declarations():
    unit = parse_java(ORDER_SERVICE, "com/example/orders/OrderService.java")

    assert unit.path == "com/example/orders/OrderService.java"
    assert unit.package == "com.example.orders"

    assert [item.name for item in unit.imports] == [
        "java.util.List",
        "java.util.*",
        "java.util.Objects.requireNonNull",
    ]
    assert [item.is_wildcard for item in unit.imports] == [False, True, False]
    assert [item.is_static for item in unit.imports] == [False, False, True]
    assert unit.imports[1].line == 4

    assert [(item.qualified_name, item.kind) for item in unit.classes] == [
        ("OrderService", "class"),
        ("OrderService.Listener", "interface"),
        ("OrderService.Status", "enum"),
    ]
    service = unit.classes[0]
    assert service.annotations == ("Service",)
    assert "public" in service.modifiers
    assert (service.line, service.column) == (11, 14)
    assert unit.classes[1].outer == "OrderService"

    assert [item.name for item in unit.fields] == [
        "log",
        "name",
        "count",
        "total",
        "repository",
        "index",
        "LIMIT",
        "code",
    ]
    fields = {item.name: item for item in unit.fields}
    assert fields["log"].modifiers == frozenset({"private", "static", "final"})
    assert fields["log"].type_name == "Logger"
    assert fields["count"].type_name == "int"
    assert fields["count"].initializer is None
    assert fields["total"].type_name == "int"
    assert fields["total"].initializer == "0"
    assert fields["repository"].annotations == ("Autowired",)
    assert fields["repository"].line == 16
    assert fields["index"].type_name == "Map<String, List<Integer>>"
    assert fields["index"].initializer == "new HashMap<>()"
    assert fields["LIMIT"].owner == "OrderService.Listener"
    assert {"public", "static", "final"} <= fields["LIMIT"].modifiers
    assert fields["code"].owner_kind == "enum"

    assert [item.name for item in unit.methods] == ["OrderService", "find", "onOrder", "Status"]
    methods = {item.name: item for item in unit.methods}
    assert methods["OrderService"].is_constructor
    assert methods["OrderService"].parameters == ("String name",)
    assert methods["find"].return_type == "Order"
    assert methods["find"].annotations == ("Nullable",)
    assert methods["find"].body == (24, 29)
    assert methods["onOrder"].body is None
    assert methods["onOrder"].owner_kind == "interface"
    assert methods["Status"].owner == "OrderService.Status"


def test_comments_and_literals_are_blanked_in_code_lines():
    unit = parse_java(ORDER_SERVICE, "OrderService.java")

    assert len(unit.lines) == len(unit.code_lines) == 48
    assert "weird" in unit.lines[12]
    assert "weird" not in unit.code_lines[12]
    assert len(unit.lines[12]) == len(unit.code_lines[12])
    assert "braces" not in unit.code_lines[7]


def test_records_generics_and_annotation_types():
    source = (
        "public record Point(int x, int y) implements Comparable<Point> {\n"
        "    public static <T extends Comparable<T>> T max(List<T> items, Map<String, T> byName) {\n"
        "        return null;\n"
        "    }\n"
        "}\n"
        "@interface Marker {\n"
        "    String value() default \"\";\n"
        "}\n"
    )
    unit = parse_java(source, "Point.java")

    assert [(item.name, item.kind) for item in unit.classes] == [("Point", "record"), ("Marker", "annotation")]
    max_method, value_method = unit.methods
    assert max_method.return_type == "T"
    assert max_method.parameters == ("List<T> items", "Map<String, T> byName")
    assert max_method.body == (2, 4)
    assert value_method.name == "value"
    assert value_method.body is None
    assert unit.fields == ()


def test_brace_initializers_do_not_swallow_following_fields():
    source = (
        "class Holder {\n"
        "    private final int[] values = {1, 2};\n"
        "    private final Runnable task = new Runnable() {\n"
        "        public void run() { }\n"
        "    };\n"
        "    private final char open = '{';\n"
        "    private final String block = \"\"\"\n"
        "        { ; }\n"
        "        \"\"\";\n"
        "    private String after;\n"
        "}\n"
    )
    unit = parse_java(source, "Holder.java")

    assert [item.name for item in unit.fields] == ["values", "task", "open", "block", "after"]
    assert unit.fields[0].initializer == ""
    assert unit.fields[1].initializer == "new Runnable()"
    assert unit.methods == ()


def test_unclosed_brace_is_a_parse_error():
    with pytest.raises(ParseError) as exc_info:
        parse_java("class A {\n    void f() {\n}\n", "A.java")

    assert exc_info.value.file_path == "A.java"
    assert exc_info.value.line == 1
    assert "unclosed" in exc_info.value.message


def test_unbalanced_closing_brace_is_a_parse_error():
    with pytest.raises(ParseError) as exc_info:
        parse_java("class A {}\n}\n", "A.java")

    assert exc_info.value.line == 2


def test_unterminated_comment_is_a_parse_error():
    with pytest.raises(ParseError) as exc_info:
        parse_java("/* never closed\nclass A {}\n", "A.java")

    assert (exc_info.value.line, exc_info.value.column) == (1, 1)
    assert "block comment" in exc_info.value.message


def test_unterminated_string_is_a_parse_error():
    with pytest.raises(ParseError):
        parse_java('class A {\n    String s = "open;\n}\n', "A.java")


def test_statement_outside_type_is_a_parse_error():
    with pytest.raises(ParseError) as exc_info:
        parse_java("this is not java;\n", "Notes.java")

    assert "outside of a type declaration" in exc_info.value.message


def test_module_info_parses():
    unit = parse_java("module com.example.app {\n    requires java.sql;\n}\n", "module-info.java")

    assert unit.classes == ()
    assert unit.imports == ()
