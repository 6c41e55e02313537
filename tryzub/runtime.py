"""Tryzub runtime — tree-walking evaluation of a parsed program.

Values are immutable snapshots, so aggregates can be shared between scopes
without copying. Control flow is threaded through statement execution as
explicit outcomes (Normal / Returned / Broke / Continued) rather than
exceptions or flags.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
import math
import struct
import sys
from typing import Callable, TextIO, cast

from .ast import (
    PUBLIC,
    ArrayLit,
    ArrayType,
    AssignStmt,
    Await,
    BinaryOp,
    BlockStmt,
    BoolLit,
    BreakStmt,
    Call,
    Cast,
    CharLit,
    Conditional,
    ContinueStmt,
    Decl,
    DeclStmt,
    Expr,
    ExprStmt,
    FloatLit,
    FnDecl,
    ForStmt,
    Ident,
    IfStmt,
    ImportDecl,
    Index,
    IntLit,
    InterfaceDecl,
    Lambda,
    MemberAccess,
    ModuleDecl,
    NamedType,
    NullLit,
    Param,
    Pos,
    PrimitiveType,
    Program,
    ReturnStmt,
    Stmt,
    StringLit,
    StructDecl,
    StructLit,
    TryStmt,
    Type,
    TypeAliasDecl,
    UnaryOp,
    VarDecl,
    WhileStmt,
)
from .tokens import INT64_MAX

INT64_MIN = -INT64_MAX - 1

ENTRY_POINT = "головна"

OPAQUE_TEXT = "<значення>"

# Python frames per interpreted call are many; raise the host limit while running.
RECURSION_LIMIT = 10000


# ============================================================
# Errors
# ============================================================


class TryzubError(Exception):
    """Base error for Tryzub evaluation."""

    def __init__(self, msg: str, pos: Pos | None = None):
        if pos is None:
            super().__init__(msg)
        else:
            super().__init__(f"{msg} at line {pos.line} col {pos.col}")
        self.msg = msg
        self.pos = pos


class TryzubRuntimeError(TryzubError):
    """Runtime fault (unknown name, bad operands, arity mismatch, etc.)."""


# ============================================================
# Values
# ============================================================


class Value:
    """Base runtime value."""

    def to_string(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class VNull(Value):
    def to_string(self) -> str:
        return "нуль"


@dataclass(frozen=True)
class VBool(Value):
    value: bool

    def to_string(self) -> str:
        return "істина" if self.value else "хиба"


@dataclass(frozen=True)
class VInt(Value):
    value: int

    def to_string(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class VFloat(Value):
    value: float

    def to_string(self) -> str:
        return format_float(self.value)


@dataclass(frozen=True)
class VString(Value):
    value: str

    def to_string(self) -> str:
        return self.value


@dataclass(frozen=True)
class VChar(Value):
    value: str

    def to_string(self) -> str:
        return self.value


@dataclass(frozen=True)
class VArray(Value):
    elements: tuple[Value, ...]

    def to_string(self) -> str:
        return "[" + ", ".join(e.to_string() for e in self.elements) + "]"


@dataclass(frozen=True)
class VStruct(Value):
    name: str
    fields: dict[str, Value] = field(hash=False)

    def to_string(self) -> str:
        return OPAQUE_TEXT


@dataclass(frozen=True, eq=False)
class VFunc(Value):
    """User function or lambda. Lambdas carry a single return statement as body."""

    name: str
    params: list[Param]
    body: list[Stmt]
    closure: Scope

    def to_string(self) -> str:
        return OPAQUE_TEXT


NULL = VNull()


def format_float(x: float) -> str:
    """Plain decimal rendering: no exponent, integral values without a fraction."""
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    text = format(Decimal(repr(x)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def truthy(v: Value) -> bool:
    if isinstance(v, VBool):
        return v.value
    if isinstance(v, VInt):
        return v.value != 0
    if isinstance(v, VFloat):
        return v.value != 0.0
    if isinstance(v, VString):
        return v.value != ""
    if isinstance(v, VNull):
        return False
    return True


def _value_eq(a: Value, b: Value) -> bool:
    # Different variants are never equal.
    if type(a) is not type(b):
        return False
    if isinstance(a, VNull):
        return True
    if isinstance(a, (VBool, VInt, VFloat, VString, VChar)):
        return a.value == b.value  # type: ignore[attr-defined]
    if isinstance(a, VArray):
        other = cast(VArray, b)
        if len(a.elements) != len(other.elements):
            return False
        return all(_value_eq(x, y) for x, y in zip(a.elements, other.elements))
    if isinstance(a, VStruct):
        other_s = cast(VStruct, b)
        if a.name != other_s.name:
            return False
        if a.fields.keys() != other_s.fields.keys():
            return False
        return all(_value_eq(a.fields[k], other_s.fields[k]) for k in a.fields)
    if isinstance(a, VFunc):
        return a is b
    raise TryzubRuntimeError("unsupported equality")


def _variant_name(v: Value) -> str:
    if isinstance(v, VNull):
        return "null"
    if isinstance(v, VBool):
        return "bool"
    if isinstance(v, VInt):
        return "integer"
    if isinstance(v, VFloat):
        return "float"
    if isinstance(v, VString):
        return "string"
    if isinstance(v, VChar):
        return "char"
    if isinstance(v, VArray):
        return "array"
    if isinstance(v, VStruct):
        return "struct"
    if isinstance(v, VFunc):
        return "function"
    return type(v).__name__


# ============================================================
# Control-flow outcomes
# ============================================================


class Outcome:
    """Result of executing one statement."""


@dataclass(frozen=True)
class Normal(Outcome):
    pass


@dataclass(frozen=True)
class Returned(Outcome):
    value: Value


@dataclass(frozen=True)
class Broke(Outcome):
    pass


@dataclass(frozen=True)
class Continued(Outcome):
    pass


NORMAL = Normal()
BROKE = Broke()
CONTINUED = Continued()


# ============================================================
# Scopes
# ============================================================


@dataclass
class _Binding:
    value: Value
    mutable: bool


class Scope:
    """One lexical block or call frame, chained to its enclosing scope."""

    def __init__(self, parent: Scope | None = None):
        self.bindings: dict[str, _Binding] = {}
        self.structs: dict[str, list[str]] = {}
        self.parent = parent

    def declare(self, name: str, value: Value, *, mutable: bool = True) -> None:
        self.bindings[name] = _Binding(value, mutable)

    def lookup(self, name: str) -> _Binding | None:
        scope: Scope | None = self
        while scope is not None:
            binding = scope.bindings.get(name)
            if binding is not None:
                return binding
            scope = scope.parent
        return None

    def lookup_struct(self, name: str) -> list[str] | None:
        """Field names of the nearest enclosing struct declaration called name."""
        scope: Scope | None = self
        while scope is not None:
            fields = scope.structs.get(name)
            if fields is not None:
                return fields
            scope = scope.parent
        return None

    def get(self, name: str, pos: Pos | None = None) -> Value:
        binding = self.lookup(name)
        if binding is None:
            raise TryzubRuntimeError(f"unknown name '{name}'", pos)
        return binding.value

    def assign(self, name: str, value: Value, pos: Pos | None = None) -> None:
        binding = self.lookup(name)
        if binding is None:
            raise TryzubRuntimeError(f"unknown name '{name}'", pos)
        if not binding.mutable:
            raise TryzubRuntimeError(f"cannot assign to constant '{name}'", pos)
        binding.value = value


# ============================================================
# Arithmetic helpers
# ============================================================


def _check_int(v: int, pos: Pos) -> VInt:
    if v < INT64_MIN or v > INT64_MAX:
        raise TryzubRuntimeError("integer overflow", pos)
    return VInt(v)


def _int_divmod_trunc(a: int, b: int) -> tuple[int, int]:
    if b == 0:
        raise ZeroDivisionError
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    r = a - q * b
    return (q, r)


def _int_pow(base: int, exp: int, pos: Pos) -> VInt:
    result = 1
    while exp > 0:
        if exp & 1:
            result = _check_int(result * base, pos).value
        exp >>= 1
        if exp:
            base = _check_int(base * base, pos).value
    return VInt(result)


def _float_pow(base: float, exp: float, pos: Pos) -> VFloat:
    try:
        return VFloat(math.pow(base, exp))
    except OverflowError:
        return VFloat(math.inf)
    except ValueError:
        raise TryzubRuntimeError("invalid operands for '**'", pos) from None


def _cmp(op: str, a: object, b: object) -> bool:
    if op == "<":
        return a < b  # type: ignore[operator]
    if op == "<=":
        return a <= b  # type: ignore[operator]
    if op == ">":
        return a > b  # type: ignore[operator]
    if op == ">=":
        return a >= b  # type: ignore[operator]
    raise AssertionError(op)


# ============================================================
# Casts
# ============================================================

# name -> (bits, signed)
_INT_TYPES: dict[str, tuple[int, bool]] = {
    "цл8": (8, True),
    "цл16": (16, True),
    "цл32": (32, True),
    "цл64": (64, True),
    "чс8": (8, False),
    "чс16": (16, False),
    "чс32": (32, False),
    # Integer values are 64-bit signed; чс64 keeps the bit pattern.
    "чс64": (64, True),
}

_FLOAT_TYPES: set[str] = {"дрб32", "дрб64"}


def _wrap_int(v: int, bits: int, signed: bool) -> int:
    mask = (1 << bits) - 1
    v &= mask
    if signed and v >= 1 << (bits - 1):
        v -= 1 << bits
    return v


def _to_f32(x: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", x))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


def _type_name(t: Type) -> str:
    if isinstance(t, PrimitiveType):
        return t.kind
    if isinstance(t, NamedType):
        return t.name
    if isinstance(t, ArrayType):
        inner = _type_name(t.element)
        return inner + "[" + ("" if t.size is None else str(t.size)) + "]"
    return type(t).__name__


def cast_value(v: Value, typ: Type, pos: Pos) -> Value:
    """Convert v to the primitive type typ."""
    if isinstance(typ, PrimitiveType):
        kind = typ.kind
        if kind in _INT_TYPES:
            bits, signed = _INT_TYPES[kind]
            if isinstance(v, VInt):
                return VInt(_wrap_int(v.value, bits, signed))
            if isinstance(v, VFloat):
                if math.isnan(v.value) or math.isinf(v.value):
                    raise TryzubRuntimeError(
                        f"cannot cast {format_float(v.value)} to {kind}", pos
                    )
                return VInt(_wrap_int(int(v.value), bits, signed))
            if isinstance(v, VChar):
                return VInt(_wrap_int(ord(v.value), bits, signed))
            if isinstance(v, VBool):
                return VInt(1 if v.value else 0)
        elif kind in _FLOAT_TYPES:
            if isinstance(v, (VInt, VFloat)):
                x = float(v.value)
                return VFloat(_to_f32(x) if kind == "дрб32" else x)
        elif kind == "тхт":
            return VString(v.to_string())
        elif kind == "лог":
            return VBool(truthy(v))
        elif kind == "сим":
            if isinstance(v, VChar):
                return v
            if isinstance(v, VInt):
                if 0 <= v.value <= 0x10FFFF:
                    return VChar(chr(v.value))
                raise TryzubRuntimeError(f"invalid char code {v.value}", pos)
    raise TryzubRuntimeError(
        f"cannot cast {_variant_name(v)} to {_type_name(typ)}", pos
    )


# ============================================================
# Interpreter
# ============================================================


class Interpreter:
    """Executes a Program, writing друк output to `out`."""

    def __init__(self, out: TextIO):
        self.out = out
        self.globals = Scope()

    def run(self, program: Program) -> None:
        for decl in program.decls:
            self._exec_decl(decl, self.globals)
        binding = self.globals.lookup(ENTRY_POINT)
        if binding is None or not isinstance(binding.value, VFunc):
            raise TryzubRuntimeError(f"no entry point: function '{ENTRY_POINT}' is not defined")
        main = binding.value
        if main.params:
            raise TryzubRuntimeError(
                f"entry point '{ENTRY_POINT}' must not take parameters",
                main.params[0].pos,
            )
        self._call(main, [], None)

    # ---- Declarations ------------------------------------------------------

    def _exec_decl(self, decl: Decl, scope: Scope) -> None:
        if isinstance(decl, VarDecl):
            value = NULL if decl.value is None else self._eval_expr(decl.value, scope)
            scope.declare(decl.name, value, mutable=decl.mutable)
            return
        if isinstance(decl, FnDecl):
            scope.declare(decl.name, VFunc(decl.name, decl.params, decl.body, scope))
            return
        if isinstance(decl, StructDecl):
            scope.structs[decl.name] = [f.name for f in decl.fields]
            return
        if isinstance(decl, ModuleDecl):
            inner = Scope(scope)
            members: dict[str, Value] = {}
            for d in decl.decls:
                self._exec_decl(d, inner)
            for d in decl.decls:
                if isinstance(d, (VarDecl, FnDecl, ModuleDecl)) and d.visibility == PUBLIC:
                    members[d.name] = inner.bindings[d.name].value
            scope.declare(decl.name, VStruct(decl.name, members), mutable=False)
            return
        if isinstance(decl, (ImportDecl, TypeAliasDecl, InterfaceDecl)):
            return
        raise TryzubRuntimeError(f"unsupported declaration {type(decl).__name__}", decl.pos)

    # ---- Functions ---------------------------------------------------------

    def _call(self, fn: Value, args: list[Value], pos: Pos | None) -> Value:
        if not isinstance(fn, VFunc):
            raise TryzubRuntimeError(f"cannot call {_variant_name(fn)} value", pos)
        if len(args) != len(fn.params):
            raise TryzubRuntimeError(
                f"function '{fn.name}' expects {len(fn.params)} argument(s), got {len(args)}",
                pos,
            )
        frame = Scope(fn.closure)
        for param, arg in zip(fn.params, args):
            frame.declare(param.name, arg)
        outcome = self._exec_block(fn.body, frame)
        if isinstance(outcome, Returned):
            return outcome.value
        if isinstance(outcome, Broke):
            raise TryzubRuntimeError("'переривати' outside of a loop", pos)
        if isinstance(outcome, Continued):
            raise TryzubRuntimeError("'продовжити' outside of a loop", pos)
        return NULL

    # ---- Statements --------------------------------------------------------

    def _exec_block(self, stmts: list[Stmt], scope: Scope) -> Outcome:
        for st in stmts:
            outcome = self._exec_stmt(st, scope)
            if not isinstance(outcome, Normal):
                return outcome
        return NORMAL

    def _exec_stmt(self, st: Stmt, scope: Scope) -> Outcome:
        if isinstance(st, ExprStmt):
            self._eval_expr(st.expr, scope)
            return NORMAL

        if isinstance(st, DeclStmt):
            self._exec_decl(st.decl, scope)
            return NORMAL

        if isinstance(st, AssignStmt):
            self._exec_assign(st, scope)
            return NORMAL

        if isinstance(st, BlockStmt):
            return self._exec_block(st.body, Scope(scope))

        if isinstance(st, ReturnStmt):
            if st.value is None:
                return Returned(NULL)
            return Returned(self._eval_expr(st.value, scope))

        if isinstance(st, BreakStmt):
            return BROKE
        if isinstance(st, ContinueStmt):
            return CONTINUED

        if isinstance(st, IfStmt):
            if truthy(self._eval_expr(st.cond, scope)):
                return self._exec_stmt(st.then_branch, Scope(scope))
            if st.else_branch is not None:
                return self._exec_stmt(st.else_branch, Scope(scope))
            return NORMAL

        if isinstance(st, WhileStmt):
            while truthy(self._eval_expr(st.cond, scope)):
                outcome = self._exec_stmt(st.body, Scope(scope))
                if isinstance(outcome, Broke):
                    break
                if isinstance(outcome, Returned):
                    return outcome
            return NORMAL

        if isinstance(st, ForStmt):
            return self._exec_for(st, scope)

        if isinstance(st, TryStmt):
            raise TryzubRuntimeError("try/catch is not supported", st.pos)

        raise TryzubRuntimeError(f"unsupported statement {type(st).__name__}", st.pos)

    def _exec_for(self, st: ForStmt, scope: Scope) -> Outcome:
        start = self._eval_expr(st.start, scope)
        stop = self._eval_expr(st.stop, scope)
        step = VInt(1) if st.step is None else self._eval_expr(st.step, scope)
        if not (isinstance(start, VInt) and isinstance(stop, VInt) and isinstance(step, VInt)):
            raise TryzubRuntimeError("for-loop bounds must be integers", st.pos)
        loop_scope = Scope(scope)
        i = start.value
        while (step.value > 0 and i < stop.value) or (step.value < 0 and i > stop.value):
            loop_scope.declare(st.var, VInt(i))
            outcome = self._exec_stmt(st.body, Scope(loop_scope))
            if isinstance(outcome, Broke):
                break
            if isinstance(outcome, Returned):
                return outcome
            i += step.value
        return NORMAL

    def _exec_assign(self, st: AssignStmt, scope: Scope) -> None:
        target = st.target
        if not isinstance(target, Ident):
            raise TryzubRuntimeError("only variables can be assigned to", st.pos)
        value = self._eval_expr(st.value, scope)
        if st.op != "=":
            current = scope.get(target.name, target.pos)
            value = self._eval_binary(st.op[:-1], current, value, st.pos)
        scope.assign(target.name, value, target.pos)

    # ---- Expressions -------------------------------------------------------

    def _eval_expr(self, expr: Expr, scope: Scope) -> Value:
        if isinstance(expr, IntLit):
            return VInt(expr.value)
        if isinstance(expr, FloatLit):
            return VFloat(expr.value)
        if isinstance(expr, StringLit):
            return VString(expr.value)
        if isinstance(expr, CharLit):
            return VChar(expr.value)
        if isinstance(expr, BoolLit):
            return VBool(expr.value)
        if isinstance(expr, NullLit):
            return NULL

        if isinstance(expr, Ident):
            return scope.get(expr.name, expr.pos)

        if isinstance(expr, BinaryOp):
            left = self._eval_expr(expr.left, scope)
            right = self._eval_expr(expr.right, scope)
            if expr.op == "&&":
                return VBool(truthy(left) and truthy(right))
            if expr.op == "||":
                return VBool(truthy(left) or truthy(right))
            return self._eval_binary(expr.op, left, right, expr.pos)

        if isinstance(expr, UnaryOp):
            operand = self._eval_expr(expr.operand, scope)
            if expr.op == "!":
                return VBool(not truthy(operand))
            if isinstance(operand, VInt):
                return _check_int(-operand.value, expr.pos)
            if isinstance(operand, VFloat):
                return VFloat(-operand.value)
            raise TryzubRuntimeError(f"cannot negate {_variant_name(operand)}", expr.pos)

        if isinstance(expr, Call):
            if isinstance(expr.callee, Ident) and expr.callee.name in _BUILTIN_RUNTIME:
                args = [self._eval_expr(a, scope) for a in expr.args]
                return _BUILTIN_RUNTIME[expr.callee.name](self, args, expr.pos)
            fn = self._eval_expr(expr.callee, scope)
            args = [self._eval_expr(a, scope) for a in expr.args]
            return self._call(fn, args, expr.pos)

        if isinstance(expr, Index):
            obj = self._eval_expr(expr.obj, scope)
            idx = self._eval_expr(expr.index, scope)
            if not isinstance(obj, VArray):
                raise TryzubRuntimeError(f"cannot index {_variant_name(obj)}", expr.pos)
            if not isinstance(idx, VInt):
                raise TryzubRuntimeError("array index must be an integer", expr.pos)
            if idx.value < 0 or idx.value >= len(obj.elements):
                raise TryzubRuntimeError(
                    f"index out of range: {idx.value} (length {len(obj.elements)})",
                    expr.pos,
                )
            return obj.elements[idx.value]

        if isinstance(expr, MemberAccess):
            obj = self._eval_expr(expr.obj, scope)
            if not isinstance(obj, VStruct):
                raise TryzubRuntimeError(
                    f"cannot access field '{expr.field}' of {_variant_name(obj)}", expr.pos
                )
            if expr.field not in obj.fields:
                raise TryzubRuntimeError(
                    f"'{obj.name}' has no field '{expr.field}'", expr.pos
                )
            return obj.fields[expr.field]

        if isinstance(expr, ArrayLit):
            return VArray(tuple(self._eval_expr(e, scope) for e in expr.elements))

        if isinstance(expr, StructLit):
            return self._eval_struct_lit(expr, scope)

        if isinstance(expr, Lambda):
            body: list[Stmt] = [ReturnStmt(expr.body.pos, expr.body)]
            return VFunc("<лямбда>", expr.params, body, scope)

        if isinstance(expr, Conditional):
            if truthy(self._eval_expr(expr.cond, scope)):
                return self._eval_expr(expr.then_expr, scope)
            return self._eval_expr(expr.else_expr, scope)

        if isinstance(expr, Cast):
            return cast_value(self._eval_expr(expr.expr, scope), expr.typ, expr.pos)

        if isinstance(expr, Await):
            raise TryzubRuntimeError("await is not supported", expr.pos)

        raise TryzubRuntimeError(f"unsupported expression {type(expr).__name__}", expr.pos)

    def _eval_struct_lit(self, expr: StructLit, scope: Scope) -> VStruct:
        fields: dict[str, Value] = {}
        for name, value_expr in expr.fields:
            if name in fields:
                raise TryzubRuntimeError(f"duplicate field '{name}' in '{expr.name}'", expr.pos)
            fields[name] = self._eval_expr(value_expr, scope)
        declared = scope.lookup_struct(expr.name)
        if declared is not None:
            for name in declared:
                if name not in fields:
                    raise TryzubRuntimeError(f"missing field '{name}' in '{expr.name}'", expr.pos)
            for name in fields:
                if name not in declared:
                    raise TryzubRuntimeError(f"'{expr.name}' has no field '{name}'", expr.pos)
        return VStruct(expr.name, fields)

    def _eval_binary(self, op: str, left: Value, right: Value, pos: Pos) -> Value:
        if op == "==":
            return VBool(_value_eq(left, right))
        if op == "!=":
            return VBool(not _value_eq(left, right))

        if op in ("<", "<=", ">", ">="):
            if isinstance(left, VInt) and isinstance(right, VInt):
                return VBool(_cmp(op, left.value, right.value))
            if isinstance(left, VFloat) and isinstance(right, VFloat):
                return VBool(_cmp(op, left.value, right.value))
            if isinstance(left, VString) and isinstance(right, VString):
                return VBool(_cmp(op, left.value, right.value))
            if isinstance(left, VChar) and isinstance(right, VChar):
                return VBool(_cmp(op, left.value, right.value))
            raise TryzubRuntimeError(
                f"cannot compare {_variant_name(left)} and {_variant_name(right)}", pos
            )

        if op == "+" and isinstance(left, VString) and isinstance(right, VString):
            return VString(left.value + right.value)

        if op in ("+", "-", "*", "/", "%", "**"):
            if isinstance(left, VInt) and isinstance(right, VInt):
                a = left.value
                b = right.value
                if op == "+":
                    return _check_int(a + b, pos)
                if op == "-":
                    return _check_int(a - b, pos)
                if op == "*":
                    return _check_int(a * b, pos)
                if op == "**":
                    if b < 0:
                        return _float_pow(float(a), float(b), pos)
                    return _int_pow(a, b, pos)
                try:
                    q, r = _int_divmod_trunc(a, b)
                except ZeroDivisionError:
                    raise TryzubRuntimeError("division by zero", pos) from None
                if op == "/":
                    return _check_int(q, pos)
                return VInt(r)
            if isinstance(left, VFloat) and isinstance(right, VFloat):
                x = left.value
                y = right.value
                if op == "+":
                    return VFloat(x + y)
                if op == "-":
                    return VFloat(x - y)
                if op == "*":
                    return VFloat(x * y)
                if op == "**":
                    return _float_pow(x, y, pos)
                if y == 0.0:
                    raise TryzubRuntimeError("division by zero", pos)
                if op == "/":
                    return VFloat(x / y)
                return VFloat(math.fmod(x, y))
            raise TryzubRuntimeError(
                f"invalid operands for '{op}': {_variant_name(left)} and {_variant_name(right)}",
                pos,
            )

        raise TryzubRuntimeError(f"unknown operator '{op}'", pos)


# ============================================================
# Builtins
# ============================================================


def _bi_print(rt: Interpreter, args: list[Value], pos: Pos) -> Value:
    rt.out.write(" ".join(a.to_string() for a in args) + "\n")
    return NULL


def _bi_int_to_string(rt: Interpreter, args: list[Value], pos: Pos) -> Value:
    if len(args) != 1:
        raise TryzubRuntimeError(
            f"function 'цілеврядок' expects 1 argument(s), got {len(args)}", pos
        )
    if not isinstance(args[0], VInt):
        raise TryzubRuntimeError(
            f"'цілеврядок' expects an integer, got {_variant_name(args[0])}", pos
        )
    return VString(str(args[0].value))


_BUILTIN_RUNTIME: dict[str, Callable[[Interpreter, list[Value], Pos], Value]] = {
    "друк": _bi_print,
    "цілеврядок": _bi_int_to_string,
}


# ============================================================
# Entry
# ============================================================


def run(program: Program, *, out: TextIO | None = None) -> None:
    """Run a parsed program: execute its declarations, then call головна."""
    rt = Interpreter(out if out is not None else sys.stdout)
    old_limit = sys.getrecursionlimit()
    sys.setrecursionlimit(max(old_limit, RECURSION_LIMIT))
    try:
        rt.run(program)
    except RecursionError:
        raise TryzubRuntimeError("maximum recursion depth exceeded") from None
    finally:
        sys.setrecursionlimit(old_limit)
