import math
import unittest

from lox.interpreter import divide, is_equal, is_truthy, stringify
from lox.lang.error import ErrorHandler, LoxRuntimeError
from lox.lang.session import Session


def run(source):
    """Runs source in a fresh session and returns the printed lines."""
    sess = Session(ErrorHandler(fatal=False), cmd_line=True, echo=False)
    sess.add(source)
    sess.run()
    return sess.results


class ValueTestCase(unittest.TestCase):

    def test_truthiness(self):
        should_fail = [None, False]
        for case in should_fail:
            self.assertFalse(is_truthy(case), case)

        should_pass = [True, 0.0, "", "false", 1.0]
        for case in should_pass:
            self.assertTrue(is_truthy(case), case)

    def test_equality(self):
        should_fail = [(None, False), (1.0, True), (0.0, False), ("1", 1.0), (None, 0.0)]
        for left, right in should_fail:
            self.assertFalse(is_equal(left, right), (left, right))

        should_pass = [(None, None), (True, True), (2.0, 2.0), ("a", "a"), (math.nan, math.nan)]
        for left, right in should_pass:
            self.assertTrue(is_equal(left, right), (left, right))

    def test_stringify(self):
        cases = {
            None: "nil", True: "true", False: "false", 3.0: "3", -0.5: "-0.5", 2.5: "2.5", "text": "text",
            math.inf: "Infinity", -math.inf: "-Infinity", math.nan: "NaN",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, stringify(case), case)

    def test_divide(self):
        self.assertEqual(2.5, divide(5.0, 2.0))
        self.assertEqual(math.inf, divide(10.0, 0.0))
        self.assertEqual(-math.inf, divide(-10.0, 0.0))
        self.assertEqual(-math.inf, divide(10.0, -0.0))
        self.assertTrue(math.isnan(divide(0.0, 0.0)))


class ExpressionTestCase(unittest.TestCase):

    def test_arithmetic_and_comparison(self):
        cases = {
            "print 1 + 2 * 3;": ["7"],
            "print (1 + 2) * 3;": ["9"],
            "print 10 / 4;": ["2.5"],
            "print -(3 - 5);": ["2"],
            "print 1 < 2; print 2 <= 2; print 3 > 4; print 4 >= 5;": ["true", "true", "false", "false"],
            "print \"foo\" + \"bar\";": ["foobar"],
            "print !nil; print !0; print !!\"\";": ["true", "false", "true"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_equality_never_errors(self):
        cases = {
            "print nil == nil;": ["true"],
            "print nil == false;": ["false"],
            "print 1 == \"1\";": ["false"],
            "print \"a\" != \"a\";": ["false"],
            "print 0 == false;": ["false"],
            "fun f() {} print f == f;": ["true"],
            "var n = 0 / 0; print n == n; print n != n; print n == 1;": ["true", "false", "false"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_logical_operators_return_operands(self):
        cases = {
            "print nil or \"yes\";": ["yes"],
            "print 1 or 2;": ["1"],
            "print nil and 1;": ["nil"],
            "print 1 and 2;": ["2"],
            "print false or nil;": ["nil"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_short_circuit(self):
        source = "var calls = 0; fun hit() { calls = calls + 1; return true; } true or hit(); false and hit(); " \
                 "print calls;"
        self.assertEqual(["0"], run(source))

    def test_division_by_zero_is_not_an_error(self):
        self.assertEqual(["Infinity", "-Infinity", "NaN"], run("print 10 / 0; print -10 / 0; print 0 / 0;"))

    def test_type_errors(self):
        cases = {
            "print 1 / \"a\";": "Operands must be numbers.",
            "print -\"a\";": "Operand must be a number.",
            "print 1 + \"a\";": "Operands must be two numbers or two strings.",
            "print nil < 1;": "Operands must be numbers.",
            "print true * 2;": "Operands must be numbers.",
        }
        for case, expected in cases.items():
            with self.assertRaises(LoxRuntimeError) as context:
                run(case)
            self.assertEqual(expected, context.exception.message, case)


class StatementTestCase(unittest.TestCase):

    def test_block_shadowing(self):
        self.assertEqual(["2", "1"], run("var x = 1; { var x = 2; print x; } print x;"))

    def test_uninitialized_variable_is_nil(self):
        self.assertEqual(["nil"], run("var a; print a;"))

    def test_global_redefinition(self):
        self.assertEqual(["2"], run("var a = 1; var a = 2; print a;"))

    def test_control_flow(self):
        source = """
        var total = 0;
        for (var i = 0; i < 5; i = i + 1) {
            if (i == 2) total = total + 100;
            else total = total + i;
        }
        var n = 3;
        while (n > 0) n = n - 1;
        print total;
        print n;
        """
        self.assertEqual(["108", "0"], run(source))

    def test_assignment_is_an_expression(self):
        self.assertEqual(["2", "2"], run("var a; var b; a = b = 2; print a; print b;"))

    def test_undefined_variables(self):
        cases = {"print missing;": "Undefined variable 'missing'.", "missing = 1;": "Undefined variable 'missing'."}
        for case, expected in cases.items():
            with self.assertRaises(LoxRuntimeError) as context:
                run(case)
            self.assertEqual(expected, context.exception.message, case)

    def test_runtime_error_line(self):
        with self.assertRaises(LoxRuntimeError) as context:
            run("var a = 1;\n\nprint a + nil;")
        self.assertEqual(3, context.exception.token.line)


class FunctionTestCase(unittest.TestCase):

    def test_recursion(self):
        source = "fun fib(n) { if (n < 2) return n; return fib(n - 1) + fib(n - 2); } print fib(15);"
        self.assertEqual(["610"], run(source))

    def test_function_without_return_gives_nil(self):
        self.assertEqual(["nil"], run("fun f() {} print f();"))

    def test_closure_counter(self):
        source = "fun make(){ var n=0; fun inc(){ n=n+1; return n; } return inc; } var c=make(); print c(); print c();"
        self.assertEqual(["1", "2"], run(source))

    def test_closures_share_environment(self):
        source = """
        var get; var set;
        fun pair() {
            var value = "before";
            fun g() { return value; }
            fun s(v) { value = v; }
            get = g; set = s;
        }
        pair();
        print get();
        set("after");
        print get();
        """
        self.assertEqual(["before", "after"], run(source))

    def test_closure_binds_lexically(self):
        source = """
        var a = "global";
        {
            fun show() { print a; }
            show();
            var a = "block";
            show();
        }
        """
        self.assertEqual(["global", "global"], run(source))

    def test_functions_are_values(self):
        source = "fun twice(f, x) { return f(f(x)); } fun inc(x) { return x + 1; } print twice(inc, 1); print inc;"
        self.assertEqual(["3", "<fn inc>"], run(source))

    def test_clock(self):
        results = run("print clock() > 0; print clock;")
        self.assertEqual(["true", "<native fn>"], results)

    def test_not_callable(self):
        cases = ["\"string\"();", "nil();", "var x = 1; x();", "class A {} A()();"]
        for case in cases:
            with self.assertRaises(LoxRuntimeError) as context:
                run(case)
            self.assertIn("not callable", context.exception.message, case)

    def test_arity(self):
        with self.assertRaises(LoxRuntimeError) as context:
            run("fun f(a, b) {} f(1);")
        self.assertEqual("Expected 2 arguments but got 1.", context.exception.message)

    def test_stack_overflow(self):
        with self.assertRaises(LoxRuntimeError) as context:
            run("fun forever(n) { return forever(n + 1); } forever(0);")
        self.assertEqual("Stack overflow.", context.exception.message)


class ClassTestCase(unittest.TestCase):

    def test_instances_and_fields(self):
        source = """
        class Box {}
        var box = Box();
        box.content = "cake";
        print box.content;
        print box;
        print Box;
        """
        self.assertEqual(["cake", "Box instance", "Box"], run(source))

    def test_initializer(self):
        source = """
        class Point {
            init(x, y) { this.x = x; this.y = y; }
            sum() { return this.x + this.y; }
        }
        var p = Point(1, 2);
        print p.sum();
        print p.init(5, 5) == p;
        print p.sum();
        """
        self.assertEqual(["3", "true", "10"], run(source))

    def test_early_return_in_initializer_gives_instance(self):
        source = "class A { init() { this.v = 1; return; this.v = 2; } } print A().v;"
        self.assertEqual(["1"], run(source))

    def test_bound_methods_keep_receiver(self):
        source = """
        class Person {
            init(name) { this.name = name; }
            greet() { print "hi " + this.name; }
        }
        var greet = Person("ann").greet;
        greet();
        """
        self.assertEqual(["hi ann"], run(source))

    def test_set_creates_field_even_over_method(self):
        source = "class A { m() { return 1; } } var a = A(); a.m = 2; print a.m;"
        self.assertEqual(["2"], run(source))

    def test_inheritance_and_super(self):
        source = """
        class Greeter {
            init(name) { this.name = name; }
            greet() { return "hello " + this.name; }
        }
        class Quiet < Greeter {}
        class Loud < Greeter {
            greet() { return super.greet() + "!"; }
        }
        print Quiet("q").greet();
        print Loud("l").greet();
        """
        self.assertEqual(["hello q", "hello l!"], run(source))

    def test_super_keeps_calling_receiver(self):
        source = """
        class A { name() { return "A"; } describe() { return "I am " + this.name(); } }
        class B < A { name() { return "B"; } }
        class C < B { describe() { return super.describe() + " via C"; } name() { return "C"; } }
        print C().describe();
        """
        self.assertEqual(["I am C via C"], run(source))

    def test_runtime_class_errors(self):
        cases = {
            "var NotClass = 1; class A < NotClass {}": "Superclass must be a class.",
            "class A {} A().missing;": "Undefined property 'missing'.",
            "class A {} class B < A { m() { return super.missing(); } } B().m();": "Undefined property 'missing'.",
            "var x = 1; print x.field;": "Only instances have properties.",
            "var x = \"s\"; x.field = 1;": "Only instances have fields.",
            "class A { init(a) {} } A();": "Expected 1 arguments but got 0.",
        }
        for case, expected in cases.items():
            with self.assertRaises(LoxRuntimeError) as context:
                run(case)
            self.assertEqual(expected, context.exception.message, case)


if __name__ == '__main__':
    unittest.main()
