"""Tryzub AST — parse-time node definitions."""

from __future__ import annotations

from dataclasses import dataclass


# ============================================================
# POSITION
# ============================================================


@dataclass(frozen=True)
class Pos:
    """Source position, 1-indexed."""

    line: int
    col: int


# ============================================================
# TYPES
# ============================================================


@dataclass
class Type:
    """Base for all type nodes."""

    pos: Pos


@dataclass
class PrimitiveType(Type):
    """цл8..цл64, чс8..чс64, дрб32, дрб64, лог, сим, тхт."""

    kind: str


@dataclass
class NamedType(Type):
    """User-defined struct/interface/alias name."""

    name: str


@dataclass
class ArrayType(Type):
    """T[N] — size is None for a slice T[]."""

    element: Type
    size: int | None


# ============================================================
# DECLARATIONS
# ============================================================

PUBLIC = "public"
PRIVATE = "private"


@dataclass
class Decl:
    """Base for all declarations."""

    pos: Pos


@dataclass
class Param:
    """Function parameter. typ is None for untyped lambda parameters."""

    pos: Pos
    name: str
    typ: Type | None
    default: Expr | None


@dataclass
class VarDecl(Decl):
    """змінна/стала name: Type = expr."""

    name: str
    typ: Type | None
    value: Expr | None
    mutable: bool
    visibility: str


@dataclass
class FnDecl(Decl):
    """функція name(params) -> Type { body }."""

    name: str
    params: list[Param]
    ret: Type | None
    body: list[Stmt]
    is_async: bool
    visibility: str


@dataclass
class FieldDecl:
    """Struct field: name: Type."""

    pos: Pos
    name: str
    typ: Type
    visibility: str


@dataclass
class StructDecl(Decl):
    """структура Name { fields }."""

    name: str
    fields: list[FieldDecl]
    visibility: str


@dataclass
class ModuleDecl(Decl):
    """модуль Name { declarations }."""

    name: str
    decls: list[Decl]
    visibility: str


@dataclass
class ImportDecl(Decl):
    """імпорт a.b.c як alias."""

    path: list[str]
    alias: str | None


@dataclass
class TypeAliasDecl(Decl):
    """тип Name = Type."""

    name: str
    typ: Type
    visibility: str


@dataclass
class MethodSig:
    """Interface method signature, no body."""

    pos: Pos
    name: str
    params: list[Param]
    ret: Type | None


@dataclass
class InterfaceDecl(Decl):
    """інтерфейс Name { method signatures }."""

    name: str
    methods: list[MethodSig]
    visibility: str


@dataclass
class Program:
    """Top-level program — ordered list of declarations."""

    decls: list[Decl]


# ============================================================
# STATEMENTS
# ============================================================


@dataclass
class Stmt:
    """Base for all statements."""

    pos: Pos


@dataclass
class ExprStmt(Stmt):
    """Bare expression as statement."""

    expr: Expr


@dataclass
class BlockStmt(Stmt):
    """{ statements }."""

    body: list[Stmt]


@dataclass
class ReturnStmt(Stmt):
    """повернути expr?."""

    value: Expr | None


@dataclass
class IfStmt(Stmt):
    """якщо (cond) stmt інакше stmt."""

    cond: Expr
    then_branch: Stmt
    else_branch: Stmt | None


@dataclass
class WhileStmt(Stmt):
    """поки (cond) stmt."""

    cond: Expr
    body: Stmt


@dataclass
class ForStmt(Stmt):
    """для (var від start до stop через step) stmt — stop is exclusive."""

    var: str
    start: Expr
    stop: Expr
    step: Expr | None
    body: Stmt


@dataclass
class BreakStmt(Stmt):
    """переривати."""


@dataclass
class ContinueStmt(Stmt):
    """продовжити."""


ASSIGN_OPS: tuple[str, ...] = ("=", "+=", "-=", "*=", "/=")


@dataclass
class AssignStmt(Stmt):
    """target op value, op in ASSIGN_OPS."""

    target: Expr
    op: str
    value: Expr


@dataclass
class DeclStmt(Stmt):
    """A declaration nested in a statement list."""

    decl: Decl


@dataclass
class TryStmt(Stmt):
    """спробувати { } зловити (name) { } нарешті { }."""

    body: list[Stmt]
    catch_name: str | None
    catch_body: list[Stmt] | None
    finally_body: list[Stmt] | None


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass
class Expr:
    """Base for all expressions."""

    pos: Pos


@dataclass
class IntLit(Expr):
    """Integer literal."""

    value: int


@dataclass
class FloatLit(Expr):
    """Float literal."""

    value: float


@dataclass
class StringLit(Expr):
    """String literal with escapes resolved."""

    value: str


@dataclass
class CharLit(Expr):
    """Char literal with escapes resolved."""

    value: str


@dataclass
class BoolLit(Expr):
    """істина or хиба."""

    value: bool


@dataclass
class NullLit(Expr):
    """нуль."""


@dataclass
class Ident(Expr):
    """Variable or function reference."""

    name: str


@dataclass
class BinaryOp(Expr):
    """left op right."""

    op: str
    left: Expr
    right: Expr


@dataclass
class UnaryOp(Expr):
    """op operand."""

    op: str
    operand: Expr


@dataclass
class Call(Expr):
    """callee(args)."""

    callee: Expr
    args: list[Expr]


@dataclass
class Index(Expr):
    """obj[index]."""

    obj: Expr
    index: Expr


@dataclass
class MemberAccess(Expr):
    """obj.field."""

    obj: Expr
    field: str


@dataclass
class ArrayLit(Expr):
    """[elements]."""

    elements: list[Expr]


@dataclass
class StructLit(Expr):
    """Name { field: value, ... }."""

    name: str
    fields: list[tuple[str, Expr]]


@dataclass
class Lambda(Expr):
    """(params) -> Type => expr."""

    params: list[Param]
    ret: Type | None
    body: Expr


@dataclass
class Conditional(Expr):
    """якщо (cond) then_expr інакше else_expr."""

    cond: Expr
    then_expr: Expr
    else_expr: Expr


@dataclass
class Cast(Expr):
    """expr як Type."""

    expr: Expr
    typ: Type


@dataclass
class Await(Expr):
    """чекати expr."""

    operand: Expr
