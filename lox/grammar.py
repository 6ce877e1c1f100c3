"""The Lox grammar, registered into the generic Pratt engine."""

from __future__ import annotations

from typing import List, Tuple

from .ast import (
    Assignment, Call, ClassDecl, Computed, Conditional, For, FunctionDecl,
    If, Member, Node, SetComputed, SetMember, VarDecl, While,
)
from .errors import LoxSyntaxError
from .pratt import Parser, TokenStream

RESERVED_NAMES = frozenset([
    "fun", "class", "var", "return", "print",
    "if", "else", "while", "for",
    "and", "or", "true", "false", "this", "nil", "super",
])

# Statement keywords that cannot begin the step clause of a for loop.
STATEMENT_KEYWORDS = frozenset(["fun", "class", "var", "return", "print", "if", "while", "for"])

DECLARATIONS = frozenset(["function", "class", "variable"])

# Binding power of a call argument: just above the comma operator.
ARGUMENT_PRECEDENCE = 2


class LoxParser(Parser):
    def __init__(self):
        super().__init__()
        self.add_statement("identifier:fun", self.parse_function_statement)
        self.add_statement("identifier:class", self.parse_class_statement)
        self.add_statement("identifier:var", self.parse_var_statement)
        self.add_statement("identifier:return", self.parse_return_statement)
        self.add_statement("identifier:print", self.parse_print_statement)
        self.add_statement("identifier:if", self.parse_if_statement)
        self.add_statement("identifier:while", self.parse_while_statement)
        self.add_statement("identifier:for", self.parse_for_statement)
        self.add_statement("symbol:{", self.parse_block_statement)
        self.add_statement("symbol:;", self.parse_blank_statement)

        self.add_infix("symbol:,", 1, self.binary(","))
        self.add_infix("symbol:=", 2, self.parse_assignment)
        self.add_infix("symbol:?", 3, self.parse_conditional)
        self.add_infix("identifier:or", 4, self.binary("or"))
        self.add_infix("identifier:and", 5, self.binary("and"))
        for op in ("==", "!="):
            self.add_infix(f"symbol:{op}", 6, self.binary(op))
        for op in ("<", ">", "<=", ">="):
            self.add_infix(f"symbol:{op}", 7, self.binary(op))
        for op in ("+", "-"):
            self.add_infix(f"symbol:{op}", 8, self.binary(op))
        for op in ("/", "*"):
            self.add_infix(f"symbol:{op}", 9, self.binary(op))

        self.add_prefix("symbol:!", 10, self.unary("!"))
        self.add_prefix("symbol:-", 10, self.unary("minus"))

        self.add_infix("symbol:(", 11, self.parse_call)
        self.add_infix("symbol:[", 11, self.parse_subscript)
        self.add_infix("symbol:.", 11, self.parse_member)

        self.add_prefix("symbol:(", 12, self.parse_grouping)

        self.add_prefix("number:", 13, self.literal("number"))
        self.add_prefix("string:", 13, self.literal("string"))
        self.add_prefix("identifier:", 13, self.parse_identifier)
        self.add_prefix("identifier:true", 13, self.literal("boolean"))
        self.add_prefix("identifier:false", 13, self.literal("boolean"))
        self.add_prefix("identifier:nil", 13, self.literal("nil"))
        self.add_prefix("identifier:super", 13, self.parse_super)

    # Statements

    def parse_not_declaration(self, tokens: TokenStream) -> Node:
        """Parse the body of a control statement, which may not declare a name."""
        statement = self.parse_statement(tokens)
        if statement.type in DECLARATIONS:
            raise self.error_at(statement, "Expect expression.")
        return statement

    def parse_function_statement(self, tokens: TokenStream) -> Node:
        start = tokens.previous().start
        name = self.ensure(tokens, "identifier:")
        if name in RESERVED_NAMES:
            raise self.error_at_previous(tokens, "Expect function name.")
        declaration = self.parse_function(tokens, name)
        return self.create_node("function", start, tokens.previous().end, declaration)

    def parse_function(self, tokens: TokenStream, name: str) -> FunctionDecl:
        parameters = self.parse_parameters(tokens)
        if not self.match(tokens, "symbol:{"):
            raise self.error(tokens, "Expect '{' before function body.")
        block = self.parse_block(tokens)
        return FunctionDecl(name, parameters, block)

    def parse_parameters(self, tokens: TokenStream) -> Tuple[str, ...]:
        self.ensure(tokens, "symbol:(")
        parameters: List[str] = []
        while not self.match(tokens, "symbol:)"):
            parameters.append(self.ensure(tokens, "identifier:"))
            if self.match(tokens, "symbol:,"):
                tokens.consume()
            elif not self.match(tokens, "symbol:)"):
                raise self.error(tokens, "Expect ')' after parameters.")
        self.ensure(tokens, "symbol:)")
        return tuple(parameters)

    def parse_class_statement(self, tokens: TokenStream) -> Node:
        start = tokens.previous().start
        name = self.ensure(tokens, "identifier:")
        if name in RESERVED_NAMES:
            raise self.error_at_previous(tokens, "Expect class name.")

        superclass = None
        if self.match(tokens, "symbol:<"):
            tokens.consume()
            if not self.match(tokens, "identifier:"):
                raise self.error(tokens, "Expect superclass name.")
            token = tokens.consume()
            superclass = self.create_node("identifier", token.start, token.end, token.value)

        self.ensure(tokens, "symbol:{")
        methods: List[FunctionDecl] = []
        while not self.match(tokens, "symbol:}"):
            method_name = self.ensure(tokens, "identifier:")
            methods.append(self.parse_function(tokens, method_name))
        self.ensure(tokens, "symbol:}")

        end = tokens.previous().end
        return self.create_node("class", start, end, ClassDecl(name, superclass, tuple(methods)))

    def parse_var_statement(self, tokens: TokenStream) -> Node:
        start = tokens.previous().start
        name = self.ensure(tokens, "identifier:")
        if name in RESERVED_NAMES:
            raise self.error_at_previous(tokens, "Expect variable name.")

        if self.match(tokens, "symbol:="):
            tokens.consume()
            initialiser = self.parse_expression(tokens)
        else:
            initialiser = self.blank(tokens)

        end = self.end_statement(tokens)
        return self.create_node("variable", start, end, VarDecl(name, initialiser))

    def parse_return_statement(self, tokens: TokenStream) -> Node:
        start = tokens.previous().start
        if self.should_end_statement(tokens):
            expression = self.blank(tokens)
        else:
            expression = self.parse_expression(tokens)
        end = self.end_statement(tokens)
        return self.create_node("return", start, end, expression)

    def parse_print_statement(self, tokens: TokenStream) -> Node:
        start = tokens.previous().start
        if self.should_end_statement(tokens):
            raise self.error(tokens, "Expect expression.")
        expression = self.parse_expression(tokens)
        end = self.end_statement(tokens)
        return self.create_node("print", start, end, expression)

    def parse_if_statement(self, tokens: TokenStream) -> Node:
        start = tokens.previous().start
        condition = self.parse_condition(tokens)
        then_statement = self.parse_not_declaration(tokens)
        if self.match(tokens, "identifier:else"):
            tokens.consume()
            else_statement = self.parse_not_declaration(tokens)
        else:
            else_statement = self.blank(tokens)
        end = tokens.previous().end
        return self.create_node("if", start, end, If(condition, then_statement, else_statement))

    def parse_while_statement(self, tokens: TokenStream) -> Node:
        start = tokens.previous().start
        condition = self.parse_condition(tokens)
        body = self.parse_not_declaration(tokens)
        end = tokens.previous().end
        return self.create_node("while", start, end, While(condition, body))

    def parse_condition(self, tokens: TokenStream) -> Node:
        self.ensure(tokens, "symbol:(")
        condition = self.parse_expression(tokens)
        self.ensure(tokens, "symbol:)")
        return condition

    def parse_for_statement(self, tokens: TokenStream) -> Node:
        start = tokens.previous().start
        self.ensure(tokens, "symbol:(")

        setup = self.parse_statement(tokens)
        if setup.type not in ("variable", "blank", "expression"):
            raise self.error_at(setup, "Expect expression.")

        if self.match(tokens, "symbol:;"):
            semicolon = tokens.consume()
            condition = self.create_node("boolean", semicolon.end, semicolon.end, "true")
        else:
            statement = self.parse_statement(tokens)
            if statement.type != "expression":
                raise self.error_at(statement, "Expect expression.")
            condition = statement.data

        if self.match(tokens, "symbol:)"):
            step = self.blank(tokens)
        else:
            following = tokens.peek()
            if following is not None and (
                (following.kind == "identifier" and following.value in STATEMENT_KEYWORDS)
                or following.match("symbol", "{")
                or following.match("symbol", ";")
            ):
                raise self.error(tokens, "Expect expression.")
            step = self.parse_expression(tokens)
        self.ensure(tokens, "symbol:)")

        body = self.parse_not_declaration(tokens)
        end = tokens.previous().end
        return self.create_node("for", start, end, For(setup, condition, step, body))

    def parse_block_statement(self, tokens: TokenStream) -> Node:
        # the statement table consumed the "{"
        tokens.back()
        return self.parse_block(tokens)

    def parse_blank_statement(self, tokens: TokenStream) -> Node:
        return self.blank(tokens)

    def parse_block(self, tokens: TokenStream) -> Node:
        self.ensure(tokens, "symbol:{")
        start = tokens.previous().start
        statements = []
        while not self.match(tokens, "symbol:}"):
            statements.append(self.parse_statement(tokens))
        self.ensure(tokens, "symbol:}")
        return self.create_node("block", start, tokens.previous().end, tuple(statements))

    def blank(self, tokens: TokenStream) -> Node:
        position = self.last_position(tokens)
        return self.create_node("blank", position, position)

    # Expressions

    def parse_assignment(self, tokens: TokenStream, left: Node, precedence: int) -> Node:
        right = self.parse_expression(tokens, precedence - 1)
        end = tokens.previous().end
        if left.type == "identifier":
            return self.create_node("assignment", left.start, end, Assignment(left.data, right))
        if left.type == "member":
            payload = SetMember(left.data.left, left.data.name, right)
            return self.create_node("set", left.start, end, payload)
        if left.type == "computed":
            payload = SetComputed(left.data.left, left.data.expression, right)
            return self.create_node("computed-set", left.start, end, payload)
        raise self.error_at(left, "Invalid assignment target.")

    def parse_conditional(self, tokens: TokenStream, condition: Node, precedence: int) -> Node:
        then_expr = self.parse_expression(tokens, precedence)
        self.ensure(tokens, "symbol::")
        else_expr = self.parse_expression(tokens, precedence)
        payload = Conditional(condition, then_expr, else_expr)
        return self.create_node("?", condition.start, else_expr.end, payload)

    def parse_call(self, tokens: TokenStream, left: Node, precedence: int) -> Node:
        args: List[Node] = []
        while not self.match(tokens, "symbol:)"):
            args.append(self.parse_expression(tokens, ARGUMENT_PRECEDENCE))
            if self.match(tokens, "symbol:,"):
                tokens.consume()
            elif not self.match(tokens, "symbol:)"):
                raise self.error(tokens, "Expect ')' after arguments.")
        self.ensure(tokens, "symbol:)")
        return self.create_node("call", left.start, tokens.previous().end, Call(left, tuple(args)))

    def parse_subscript(self, tokens: TokenStream, left: Node, precedence: int) -> Node:
        expression = self.parse_expression(tokens)
        self.ensure(tokens, "symbol:]")
        return self.create_node("computed", left.start, tokens.previous().end, Computed(left, expression))

    def parse_member(self, tokens: TokenStream, left: Node, precedence: int) -> Node:
        if not self.match(tokens, "identifier:"):
            raise self.error(tokens, "Expect property name after '.'.")
        name = tokens.consume().value
        return self.create_node("member", left.start, tokens.previous().end, Member(left, name))

    def parse_grouping(self, tokens: TokenStream, precedence: int) -> Node:
        start = tokens.previous().start
        if self.match(tokens, "symbol:)"):
            expression = self.blank(tokens)
        else:
            expression = self.parse_expression(tokens)
        self.ensure(tokens, "symbol:)")
        return self.create_node("grouping", start, tokens.previous().end, expression)

    def parse_identifier(self, tokens: TokenStream, precedence: int) -> Node:
        token = tokens.previous()
        if token.value == "this":
            return self.create_node("context", token.start, token.end, token.value)
        if token.value in RESERVED_NAMES:
            raise self.error_at_previous(tokens, "Expect expression.")
        return self.create_node("identifier", token.start, token.end, token.value)

    def parse_super(self, tokens: TokenStream, precedence: int) -> Node:
        start = tokens.previous().start
        if not self.match(tokens, "symbol:."):
            raise self.error(tokens, "Expect '.' after 'super'.")
        tokens.consume()
        if not self.match(tokens, "identifier:"):
            raise self.error(tokens, "Expect superclass method name.")
        name = tokens.consume().value
        return self.create_node("super", start, tokens.previous().end, name)

    # Positioned errors

    def error_at(self, node: Node, message: str):
        line, column = node.start
        return LoxSyntaxError(line, column, message, self.label)

    def error_at_previous(self, tokens: TokenStream, message: str):
        line, column = tokens.previous().start
        return LoxSyntaxError(line, column, message, self.label)


def parse(source: str, label: str = '') -> Node:
    return LoxParser().parse_program(source, label)
