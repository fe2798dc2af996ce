"""
Tree-walking interpreter for PLC.

Executes an analyzed program directly from its AST. Statements report how
control leaves them: ``None`` when execution falls through, or a Returning
outcome carrying the value of a RETURN. Statement lists stop at the first
Returning and hand it to their caller, so a RETURN nested in loops and
branches unwinds straight to the function invocation that owns it.
"""

import logging
import operator
import sys
from contextlib import contextmanager
from decimal import Decimal, Context, MAX_PREC, MAX_EMAX, MIN_EMIN
from fractions import Fraction
from typing import Any, List, Optional, Sequence, TextIO

from ..environment import values
from ..environment.errors import ScopeError
from ..environment.scope import Scope
from ..environment.types import ANY
from ..environment.values import PlcObject
from ..errors import recursion_limit
from ..parser.ast_nodes import (
    ASTNode, Source, Field, Method, Statement, ExpressionStatement, Declaration, Assignment,
    IfStatement, ForLoop, WhileLoop, ReturnStatement, Expression, Literal, Group,
    BinaryOp, Access, FunctionCall
)
from .errors import (
    InterpreterError, create_scope_error, create_type_error,
    create_invalid_operands_error, create_division_by_zero_error
)

logger = logging.getLogger(__name__)

# Exact decimal arithmetic: no rounding for add, subtract or multiply
EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)

ORDERING_OPERATORS = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


class Returning:
    """Outcome of a statement that executed RETURN."""

    __slots__ = ("value",)

    def __init__(self, value: PlcObject):
        self.value = value

    def __repr__(self) -> str:
        return f"Returning({self.value!r})"


def render(value: Any) -> str:
    """Render a host value the way ``print`` and string concatenation show it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def divide_integers(left: int, right: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient


def divide_decimals(left: Decimal, right: Decimal) -> Decimal:
    """Divide keeping the left operand's scale, rounding half to even."""
    exponent = left.as_tuple().exponent
    quotient = Fraction(left) / Fraction(right)
    coefficient = round(quotient / Fraction(10) ** exponent)
    return Decimal(f"{coefficient}E{exponent}")


@contextmanager
def _resolving(node: Optional[ASTNode]):
    """Turn name resolution failures inside the block into runtime errors."""
    try:
        yield
    except ScopeError as error:
        raise create_scope_error(error, node) from error


class Interpreter:
    """
    PLC interpreter.

    ``scope`` is the global run-time scope. It starts out holding the native
    ``print`` function, which writes to ``output`` (standard output when not
    given).
    """

    def __init__(self, parent: Optional[Scope] = None, output: Optional[TextIO] = None):
        self.output = output
        self.scope = Scope(parent)
        self.scope.define_function("print", "System.out.println", [ANY], ANY, self._print)

    def _print(self, arguments: List[PlcObject]) -> PlcObject:
        stream = self.output if self.output is not None else sys.stdout
        stream.write(render(arguments[0].value) + "\n")
        return values.NIL

    def run(self, source: Source) -> PlcObject:
        """
        Run a program: bind fields, define methods, then call ``main()``.

        Returns:
            The value returned by ``main``

        Raises:
            InterpreterError: If the program faults
        """
        with recursion_limit():
            try:
                return self._run(source)
            except RecursionError as error:
                raise InterpreterError(
                    "Call depth exceeded",
                    node=source,
                    code="R042",
                    help_text="Check for recursion without a reachable base case."
                ) from error

    def _run(self, source: Source) -> PlcObject:
        for field in source.fields:
            self._bind_field(field, self.scope)

        for method in source.methods:
            self._define_method(method, self.scope)

        try:
            main = self.scope.lookup_function("main", 0)
        except ScopeError as error:
            raise InterpreterError("Main function not found", node=source, code="R040") from error

        result = main.invoke([])
        logger.debug("main() returned %r", result.value)
        return result

    def _bind_field(self, field: Field, scope: Scope):
        value = self._evaluate(field.value, scope) if field.value is not None else values.NIL
        with _resolving(field):
            scope.define_variable(field.name, field.name, ANY, field.is_constant, value)

    def _define_method(self, method: Method, scope: Scope):
        """Define ``method`` as a closure over its defining scope."""
        parameters = method.parameters

        def invoke(arguments: Sequence[PlcObject]) -> PlcObject:
            if len(arguments) != len(parameters):
                raise InterpreterError(
                    f"'{method.name}' expects {len(parameters)} arguments, received {len(arguments)}",
                    node=method,
                    code="R041"
                )
            call_scope = Scope(scope)
            for name, argument in zip(parameters, arguments):
                with _resolving(method):
                    call_scope.define_variable(name, name, ANY, False, argument)

            outcome = self._execute_block(method.statements, call_scope)
            return outcome.value if outcome is not None else values.NIL

        with _resolving(method):
            scope.define_function(method.name, method.name, [ANY] * len(parameters), ANY, invoke)

    # ========================================================================
    # Statements
    # ========================================================================

    def _execute_block(self, statements: Sequence[Statement], scope: Scope) -> Optional[Returning]:
        for statement in statements:
            outcome = self._execute(statement, scope)
            if outcome is not None:
                return outcome
        return None

    def _execute(self, statement: Statement, scope: Scope) -> Optional[Returning]:
        """Execute a statement in ``scope``."""
        if isinstance(statement, ExpressionStatement):
            self._evaluate(statement.expression, scope)
        elif isinstance(statement, Declaration):
            value = self._evaluate(statement.value, scope) if statement.value is not None else values.NIL
            with _resolving(statement):
                scope.define_variable(statement.name, statement.name, ANY, False, value)
        elif isinstance(statement, Assignment):
            self._execute_assignment(statement, scope)
        elif isinstance(statement, IfStatement):
            condition = self._require_boolean(statement.condition, scope)
            branch = statement.then_statements if condition else statement.else_statements
            return self._execute_block(branch, Scope(scope))
        elif isinstance(statement, ForLoop):
            return self._execute_for_loop(statement, scope)
        elif isinstance(statement, WhileLoop):
            loop_scope = Scope(scope)
            while self._require_boolean(statement.condition, loop_scope):
                outcome = self._execute_block(statement.statements, Scope(loop_scope))
                if outcome is not None:
                    return outcome
        elif isinstance(statement, ReturnStatement):
            return Returning(self._evaluate(statement.value, scope))
        else:
            raise InterpreterError(f"Unsupported statement: {type(statement).__name__}", node=statement)
        return None

    def _execute_assignment(self, assignment: Assignment, scope: Scope):
        receiver = assignment.receiver
        if not isinstance(receiver, Access):
            raise InterpreterError("Only variables and fields can be assigned to",
                                   node=assignment, code="R031")

        value = self._evaluate(assignment.value, scope)
        with _resolving(receiver):
            if receiver.receiver is not None:
                variable = self._evaluate(receiver.receiver, scope).get_field(receiver.name)
            else:
                variable = scope.lookup_variable(receiver.name)

        if variable.constant and variable.value is not values.NIL:
            raise InterpreterError(f"Cannot assign to constant '{variable.name}'",
                                   node=assignment, code="R030")
        variable.value = value

    def _execute_for_loop(self, loop: ForLoop, scope: Scope) -> Optional[Returning]:
        loop_scope = Scope(scope)
        if loop.initialization is not None:
            self._execute(loop.initialization, loop_scope)

        if loop.condition is None:
            raise InterpreterError("A FOR loop requires a condition", node=loop)

        while self._require_boolean(loop.condition, loop_scope):
            outcome = self._execute_block(loop.statements, Scope(loop_scope))
            if outcome is not None:
                return outcome
            if loop.increment is not None:
                self._execute(loop.increment, loop_scope)
        return None

    # ========================================================================
    # Expressions
    # ========================================================================

    def _evaluate(self, expression: Expression, scope: Scope) -> PlcObject:
        """Evaluate an expression to a runtime value."""
        if isinstance(expression, Literal):
            return values.create(expression.value)
        elif isinstance(expression, Group):
            return self._evaluate(expression.expression, scope)
        elif isinstance(expression, BinaryOp):
            return self._evaluate_binary_op(expression, scope)
        elif isinstance(expression, Access):
            if expression.receiver is not None:
                receiver = self._evaluate(expression.receiver, scope)
                with _resolving(expression):
                    return receiver.get_field(expression.name).value
            with _resolving(expression):
                return scope.lookup_variable(expression.name).value
        elif isinstance(expression, FunctionCall):
            return self._evaluate_function_call(expression, scope)

        raise InterpreterError(f"Unsupported expression: {type(expression).__name__}", node=expression)

    def _evaluate_function_call(self, call: FunctionCall, scope: Scope) -> PlcObject:
        arguments = [self._evaluate(argument, scope) for argument in call.arguments]

        if call.receiver is not None:
            receiver = self._evaluate(call.receiver, scope)
            with _resolving(call):
                return receiver.call_method(call.name, arguments)

        with _resolving(call):
            function = scope.lookup_function(call.name, len(arguments))
        return function.invoke(arguments)

    def _evaluate_binary_op(self, binary_op: BinaryOp, scope: Scope) -> PlcObject:
        op = binary_op.operator

        # Short-circuit: the right operand only runs when it decides the result
        if op == "&&":
            if not self._require_boolean(binary_op.left, scope):
                return values.create(False)
            return values.create(self._require_boolean(binary_op.right, scope))
        if op == "||":
            if self._require_boolean(binary_op.left, scope):
                return values.create(True)
            return values.create(self._require_boolean(binary_op.right, scope))

        left = self._evaluate(binary_op.left, scope)
        right = self._evaluate(binary_op.right, scope)

        if op in ("==", "!="):
            equal = left == right
            return values.create(equal if op == "==" else not equal)

        l, r = left.value, right.value

        if op in ORDERING_OPERATORS:
            if l is None or type(l) is not type(r):
                raise create_invalid_operands_error(op, l, r, binary_op)
            return values.create(ORDERING_OPERATORS[op](l, r))

        if op == "+" and (isinstance(l, str) or isinstance(r, str)):
            return values.create(render(l) + render(r))

        if op not in ("+", "-", "*", "/"):
            raise InterpreterError(f"Unknown binary operator '{op}'", node=binary_op, code="R011")

        if type(l) is not type(r) or type(l) not in (int, Decimal):
            raise create_invalid_operands_error(op, l, r, binary_op)

        if op == "+":
            result = l + r if type(l) is int else EXACT.add(l, r)
        elif op == "-":
            result = l - r if type(l) is int else EXACT.subtract(l, r)
        elif op == "*":
            result = l * r if type(l) is int else EXACT.multiply(l, r)
        else:
            if r == 0:
                raise create_division_by_zero_error(binary_op)
            result = divide_integers(l, r) if type(l) is int else divide_decimals(l, r)

        return values.create(result)

    def _require_boolean(self, expression: Expression, scope: Scope) -> bool:
        value = self._evaluate(expression, scope).value
        if type(value) is not bool:
            raise create_type_error("Boolean", value, expression)
        return value
