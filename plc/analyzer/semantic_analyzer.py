"""
Semantic analyzer for PLC.

A single top-down pass over the AST that resolves every name, checks every
type rule and decorates the tree (variables, functions and expression types)
as it goes. The current scope and the enclosing method's return type are
passed down explicitly, so nothing is saved and restored between calls.
"""

import logging
from typing import Optional

from ..environment import values
from ..environment.errors import ScopeError
from ..environment.scope import Scope
from ..environment.types import (
    Type, ANY, NIL, BOOLEAN, INTEGER, DECIMAL, CHARACTER, STRING,
    COMPARABLE, NUMERIC_TYPES, get_type, is_assignable
)
from ..errors import recursion_limit
from ..parser.ast_nodes import (
    ASTNode, Source, Field, Method, Statement, ExpressionStatement, Declaration, Assignment,
    IfStatement, ForLoop, WhileLoop, ReturnStatement, Expression, Literal, Group,
    BinaryOp, Access, FunctionCall
)
from .errors import (
    SemanticError, create_type_mismatch_error, create_invalid_operands_error,
    create_scope_error, create_constant_assignment_error, create_empty_block_error
)

logger = logging.getLogger(__name__)

LITERAL_TYPES = {
    "nil": NIL,
    "boolean": BOOLEAN,
    "character": CHARACTER,
    "string": STRING,
    "integer": INTEGER,
    "decimal": DECIMAL,
}


def require_assignable(target: Type, source: Type, node: Optional[ASTNode] = None):
    """
    Raise a SemanticError unless ``source`` may be stored in a ``target`` slot.

    This is the only assignability check: initializers, assignments, return
    values, receivers and call arguments all go through it.
    """
    if not is_assignable(target, source):
        raise create_type_mismatch_error(target, source, node)


class SemanticAnalyzer:
    """
    Main semantic analyzer for PLC.

    ``scope`` is the global compile-time scope; it starts out holding the
    built-in ``print`` function and ends up holding every field and method.
    """

    def __init__(self, parent: Optional[Scope] = None):
        self.scope = Scope(parent)
        self.scope.define_function("print", "System.out.println", [ANY], NIL,
                                   lambda arguments: values.NIL)

    def analyze(self, source: Source) -> Source:
        """
        Validate and decorate a program.

        Returns:
            The same Source, now fully decorated

        Raises:
            SemanticError: On the first rule violation
        """
        with recursion_limit():
            try:
                self._analyze_source(source)
            except RecursionError as error:
                raise SemanticError(
                    "Expression nesting too deep",
                    node=source,
                    code="S005",
                    help_text="Split the expression across several declarations."
                ) from error

        logger.debug("Analyzed %d fields and %d methods", len(source.fields), len(source.methods))
        return source

    def _analyze_source(self, source: Source):
        for field in source.fields:
            self._analyze_field(field, self.scope)

        for method in source.methods:
            self._analyze_method(method, self.scope)

        self._check_main(source)

    def _check_main(self, source: Source):
        """The program must define main() returning Integer."""
        try:
            main = self.scope.lookup_function("main", 0)
        except ScopeError as error:
            raise SemanticError(
                "A main function with zero parameters is required",
                node=source,
                code="S040",
                help_text="Add 'DEF main(): Integer DO ... END'."
            ) from error

        if main.return_type is not INTEGER:
            raise SemanticError(
                f"The main function must return Integer, not {main.return_type}",
                node=source,
                code="S041"
            )

    # ========================================================================
    # Fields and methods
    # ========================================================================

    def _analyze_field(self, field: Field, scope: Scope):
        if field.value is not None:
            self._analyze_expression(field.value, scope)

        if field.is_constant and field.value is None:
            raise SemanticError(
                f"Constant field '{field.name}' must have an initial value",
                node=field,
                code="S022"
            )

        field_type = self._declared_type(field.name, field.type_name, field.value, field)
        field.variable = self._define_variable(scope, field.name, field_type, field.is_constant, field)

    def _analyze_method(self, method: Method, scope: Scope):
        parameter_types = [self._resolve_type(name, method) for name in method.parameter_type_names]
        if method.return_type_name is not None:
            return_type = self._resolve_type(method.return_type_name, method)
        else:
            return_type = NIL

        # Defined before the body so that the method can call itself
        try:
            function = scope.define_function(method.name, method.name, parameter_types, return_type,
                                             lambda arguments: values.NIL)
        except ScopeError as error:
            raise create_scope_error(error, method) from error
        method.function = function

        method_scope = Scope(scope)
        for name, parameter_type in zip(method.parameters, parameter_types):
            self._define_variable(method_scope, name, parameter_type, False, method)

        for statement in method.statements:
            self._analyze_statement(statement, method_scope, return_type)

    # ========================================================================
    # Statements
    # ========================================================================

    def _analyze_statement(self, statement: Statement, scope: Scope, return_type: Type):
        """Analyze a statement in ``scope``; ``return_type`` is the enclosing method's."""
        if isinstance(statement, ExpressionStatement):
            self._analyze_expression_statement(statement, scope)
        elif isinstance(statement, Declaration):
            self._analyze_declaration(statement, scope)
        elif isinstance(statement, Assignment):
            self._analyze_assignment(statement, scope)
        elif isinstance(statement, IfStatement):
            self._analyze_if_statement(statement, scope, return_type)
        elif isinstance(statement, ForLoop):
            self._analyze_for_loop(statement, scope, return_type)
        elif isinstance(statement, WhileLoop):
            self._analyze_while_loop(statement, scope, return_type)
        elif isinstance(statement, ReturnStatement):
            self._analyze_expression(statement.value, scope)
            require_assignable(return_type, statement.value.type, statement)
        else:
            raise SemanticError(f"Unsupported statement: {type(statement).__name__}", node=statement)

    def _analyze_expression_statement(self, statement: ExpressionStatement, scope: Scope):
        self._analyze_expression(statement.expression, scope)
        if not isinstance(statement.expression, FunctionCall):
            raise SemanticError(
                "Expression statements must be function calls",
                node=statement,
                code="S032",
                help_text="A value computed without a call would be discarded."
            )

    def _analyze_declaration(self, declaration: Declaration, scope: Scope):
        if declaration.value is not None:
            self._analyze_expression(declaration.value, scope)

        variable_type = self._declared_type(declaration.name, declaration.type_name,
                                            declaration.value, declaration)
        declaration.variable = self._define_variable(scope, declaration.name, variable_type,
                                                     False, declaration)

    def _analyze_assignment(self, assignment: Assignment, scope: Scope):
        self._analyze_expression(assignment.receiver, scope)
        self._analyze_expression(assignment.value, scope)

        if not isinstance(assignment.receiver, Access):
            raise SemanticError(
                "Only variables and fields can be assigned to",
                node=assignment,
                code="S021"
            )

        variable = assignment.receiver.variable
        if variable.constant:
            raise create_constant_assignment_error(variable.name, assignment)

        require_assignable(variable.type, assignment.value.type, assignment)

    def _analyze_if_statement(self, statement: IfStatement, scope: Scope, return_type: Type):
        self._require_condition(statement.condition, scope)
        if not statement.then_statements:
            raise create_empty_block_error("IF", statement)

        self._analyze_block(statement.then_statements, Scope(scope), return_type)
        if statement.else_statements:
            self._analyze_block(statement.else_statements, Scope(scope), return_type)

    def _analyze_for_loop(self, loop: ForLoop, scope: Scope, return_type: Type):
        loop_scope = Scope(scope)
        if loop.initialization is not None:
            self._analyze_statement(loop.initialization, loop_scope, return_type)

        if loop.condition is None:
            raise SemanticError(
                "A FOR loop requires a condition",
                node=loop,
                code="S031"
            )
        self._require_condition(loop.condition, loop_scope)

        if loop.increment is not None:
            self._analyze_statement(loop.increment, loop_scope, return_type)

        if not loop.statements:
            raise create_empty_block_error("FOR", loop)
        self._analyze_block(loop.statements, Scope(loop_scope), return_type)

    def _analyze_while_loop(self, loop: WhileLoop, scope: Scope, return_type: Type):
        self._require_condition(loop.condition, scope)
        if not loop.statements:
            raise create_empty_block_error("WHILE", loop)
        self._analyze_block(loop.statements, Scope(scope), return_type)

    def _analyze_block(self, statements, scope: Scope, return_type: Type):
        for statement in statements:
            self._analyze_statement(statement, scope, return_type)

    def _require_condition(self, condition: Expression, scope: Scope):
        self._analyze_expression(condition, scope)
        if condition.type is not BOOLEAN:
            raise create_type_mismatch_error(BOOLEAN, condition.type, condition)

    # ========================================================================
    # Expressions
    # ========================================================================

    def _analyze_expression(self, expression: Expression, scope: Scope):
        """Analyze an expression, decorating it with its type or binding."""
        if isinstance(expression, Literal):
            self._analyze_literal(expression)
        elif isinstance(expression, Group):
            self._analyze_expression(expression.expression, scope)
            expression.type = expression.expression.type
        elif isinstance(expression, BinaryOp):
            self._analyze_binary_op(expression, scope)
        elif isinstance(expression, Access):
            self._analyze_access(expression, scope)
        elif isinstance(expression, FunctionCall):
            self._analyze_function_call(expression, scope)
        else:
            raise SemanticError(f"Unsupported expression: {type(expression).__name__}", node=expression)

    def _analyze_literal(self, literal: Literal):
        if literal.literal_type not in LITERAL_TYPES:
            raise SemanticError(f"Unknown literal type '{literal.literal_type}'", node=literal)
        literal.type = LITERAL_TYPES[literal.literal_type]

    def _analyze_binary_op(self, binary_op: BinaryOp, scope: Scope):
        self._analyze_expression(binary_op.left, scope)
        self._analyze_expression(binary_op.right, scope)

        operator = binary_op.operator
        left = binary_op.left.type
        right = binary_op.right.type

        if operator in ("&&", "||"):
            if left is not BOOLEAN or right is not BOOLEAN:
                raise create_invalid_operands_error(operator, left, right, binary_op)
            binary_op.type = BOOLEAN
        elif operator in ("<", "<=", ">", ">=", "==", "!="):
            if left is not right or not is_assignable(COMPARABLE, left):
                raise create_invalid_operands_error(operator, left, right, binary_op)
            binary_op.type = BOOLEAN
        elif operator == "+":
            if left is STRING or right is STRING:
                binary_op.type = STRING
            elif left is right and left in NUMERIC_TYPES:
                binary_op.type = left
            else:
                raise create_invalid_operands_error(operator, left, right, binary_op)
        elif operator in ("-", "*", "/"):
            if left is not right or left not in NUMERIC_TYPES:
                raise create_invalid_operands_error(operator, left, right, binary_op)
            binary_op.type = left
        else:
            raise SemanticError(f"Unknown binary operator '{operator}'", node=binary_op, code="S004")

    def _analyze_access(self, access: Access, scope: Scope):
        try:
            if access.receiver is not None:
                self._analyze_expression(access.receiver, scope)
                variable = access.receiver.type.get_field(access.name)
            else:
                variable = scope.lookup_variable(access.name)
        except ScopeError as error:
            raise create_scope_error(error, access) from error
        access.variable = variable

    def _analyze_function_call(self, call: FunctionCall, scope: Scope):
        for argument in call.arguments:
            self._analyze_expression(argument, scope)

        if call.receiver is not None:
            self._analyze_expression(call.receiver, scope)
            receiver_type = call.receiver.type
            try:
                function = receiver_type.get_function(call.name, len(call.arguments) + 1)
            except ScopeError as error:
                raise create_scope_error(error, call) from error
            call.function = function
            require_assignable(function.parameter_types[0], receiver_type, call.receiver)
            parameter_types = function.parameter_types[1:]
        else:
            try:
                function = scope.lookup_function(call.name, len(call.arguments))
            except ScopeError as error:
                raise create_scope_error(error, call) from error
            call.function = function
            parameter_types = function.parameter_types

        for parameter_type, argument in zip(parameter_types, call.arguments):
            require_assignable(parameter_type, argument.type, argument)

    # ========================================================================
    # Helpers
    # ========================================================================

    def _declared_type(self, name: str, type_name: Optional[str], value: Optional[Expression],
                       node: ASTNode) -> Type:
        """Resolve a declared type, or infer it from the initializer."""
        if type_name is not None:
            declared = self._resolve_type(type_name, node)
        elif value is not None:
            declared = value.type
        else:
            raise SemanticError(
                f"Cannot determine the type of '{name}'",
                node=node,
                code="S003",
                help_text="Give the variable a type name or an initial value."
            )

        if value is not None:
            require_assignable(declared, value.type, value)
        return declared

    @staticmethod
    def _resolve_type(name: str, node: ASTNode) -> Type:
        try:
            return get_type(name)
        except ScopeError as error:
            raise create_scope_error(error, node) from error

    @staticmethod
    def _define_variable(scope: Scope, name: str, variable_type: Type, constant: bool, node: ASTNode):
        try:
            return scope.define_variable(name, name, variable_type, constant, values.NIL)
        except ScopeError as error:
            raise create_scope_error(error, node) from error
