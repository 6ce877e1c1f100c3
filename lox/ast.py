"""Abstract Syntax Tree (AST) definitions for Lox.

Every node is a `Node` carrying its `type` string, source positions and a
`data` payload whose shape depends on the type:

==========================================  ===============================
type                                        data
==========================================  ===============================
module, block                               tuple of statement nodes
function                                    FunctionDecl
class                                       ClassDecl
variable                                    VarDecl
expression, return, print                   expression node (``blank`` when
                                            a return has no value)
if / while / for                            If / While / For
blank                                       None
``,`` or and == != < > <= >= + - * /        Binary
``!``, minus, grouping                      expression node
``?``                                       Conditional
number, string, boolean, nil                token text
identifier, context                         the referenced name
super                                       the method name
member / computed                           Member / Computed
set / computed-set / assignment             SetMember / SetComputed / Assignment
call                                        Call
==========================================  ===============================

Nodes compare and hash by identity: the resolver uses them as keys. Use
`ast_json.ast_to_obj` to compare trees structurally.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .source import Position


@dataclass(frozen=True, eq=False)
class Node:
    type: str
    start: Position
    end: Position
    data: Any = None

    def __str__(self) -> str:
        return f"({self.type} {self.data})"


@dataclass(frozen=True)
class FunctionDecl:
    name: str
    parameters: Tuple[str, ...]
    block: Node


@dataclass(frozen=True)
class ClassDecl:
    name: str
    superclass: Optional[Node]  # identifier node, resolved like any reference
    methods: Tuple[FunctionDecl, ...]


@dataclass(frozen=True)
class VarDecl:
    name: str
    initialiser: Node


@dataclass(frozen=True)
class If:
    condition: Node
    then_statement: Node
    else_statement: Node


@dataclass(frozen=True)
class While:
    condition: Node
    body: Node


@dataclass(frozen=True)
class For:
    setup: Node
    condition: Node
    step: Node
    body: Node


@dataclass(frozen=True)
class Binary:
    left: Node
    right: Node


@dataclass(frozen=True)
class Conditional:
    condition: Node
    then_expr: Node
    else_expr: Node


@dataclass(frozen=True)
class Member:
    left: Node
    name: str


@dataclass(frozen=True)
class Computed:
    left: Node
    expression: Node


@dataclass(frozen=True)
class SetMember:
    left: Node
    name: str
    right: Node


@dataclass(frozen=True)
class SetComputed:
    left: Node
    expression: Node
    right: Node


@dataclass(frozen=True)
class Assignment:
    name: str
    right: Node


@dataclass(frozen=True)
class Call:
    left: Node
    args: Tuple[Node, ...]


PAYLOADS = (
    FunctionDecl, ClassDecl, VarDecl, If, While, For, Binary, Conditional,
    Member, Computed, SetMember, SetComputed, Assignment, Call,
)
