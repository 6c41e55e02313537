"""Tryzub parser — recursive descent, one method per grammar production."""

from __future__ import annotations

from .ast import (
    ASSIGN_OPS,
    PRIVATE,
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
    FieldDecl,
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
    MethodSig,
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
from .tokens import (
    BOOL_WORDS,
    PRIMITIVE_TYPES,
    TK_BOOL,
    TK_CHAR,
    TK_EOF,
    TK_FLOAT,
    TK_IDENT,
    TK_INT,
    TK_OP,
    TK_STRING,
    Token,
)

EQUALITY_OPS: set[str] = {"==", "!="}

RELATIONAL_OPS: set[str] = {"<", "<=", ">", ">="}

DECL_KEYWORDS: set[str] = {
    "змінна",
    "стала",
    "функція",
    "асинхронний",
    "структура",
    "модуль",
    "імпорт",
    "тип",
    "інтерфейс",
    "публічний",
    "приватний",
}


class ParseError(Exception):
    """Parse error with location info."""

    def __init__(self, msg: str, line: int, col: int):
        self.msg: str = msg
        self.line: int = line
        self.col: int = col
        super().__init__(msg + " at line " + str(line) + " col " + str(col))


class UnexpectedToken(ParseError):
    """A specific construct was expected but another token was found."""

    def __init__(self, expected: str, found: str, line: int, col: int):
        self.expected: str = expected
        self.found: str = found
        super().__init__("expected " + expected + ", got " + found, line, col)


class UnexpectedEnd(ParseError):
    """Input ended while a construct was still open."""

    def __init__(self, expected: str, line: int, col: int):
        self.expected: str = expected
        super().__init__("unexpected end of input, expected " + expected, line, col)


def _describe(tok: Token) -> str:
    if tok.kind == TK_EOF:
        return "end of input"
    if tok.kind == TK_STRING:
        return "string " + repr(tok.lexeme)
    if tok.kind == TK_CHAR:
        return "char " + repr(tok.lexeme)
    return "'" + tok.lexeme + "'"


class Parser:
    """Recursive descent parser for Tryzub."""

    def __init__(self, tokens: list[Token]):
        self.tokens: list[Token] = tokens
        self.pos: int = 0

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.kind != TK_EOF:
            self.pos += 1
        return tok

    def at(self, value: str) -> bool:
        """True if the current token is the keyword or operator `value`."""
        tok = self.current()
        return tok.kind == value or (tok.kind == TK_OP and tok.lexeme == value)

    def at_kind(self, kind: str) -> bool:
        return self.current().kind == kind

    def at_ident(self) -> bool:
        return self.current().kind == TK_IDENT

    def match(self, value: str) -> bool:
        if self.at(value):
            self.advance()
            return True
        return False

    def expect(self, value: str, what: str | None = None) -> Token:
        if not self.at(value):
            raise self.unexpected(what if what is not None else "'" + value + "'")
        return self.advance()

    def expect_ident(self, what: str) -> Token:
        if not self.at_ident():
            raise self.unexpected(what)
        return self.advance()

    def unexpected(self, expected: str) -> ParseError:
        tok = self.current()
        if tok.kind == TK_EOF:
            return UnexpectedEnd(expected, tok.line, tok.col)
        return UnexpectedToken(expected, _describe(tok), tok.line, tok.col)

    def _pos(self) -> Pos:
        tok = self.current()
        return Pos(tok.line, tok.col)

    def _skip_separators(self) -> None:
        while self.at(";"):
            self.advance()

    # ── Top Level ────────────────────────────────────────────

    def parse_program(self) -> Program:
        decls: list[Decl] = []
        try:
            self._skip_separators()
            while not self.at_kind(TK_EOF):
                decls.append(self.parse_decl())
                self._skip_separators()
        except RecursionError:
            tok = self.current()
            raise ParseError("expression nested too deeply", tok.line, tok.col) from None
        return Program(decls)

    def parse_decl(self) -> Decl:
        pos = self._pos()
        visibility = PRIVATE
        if self.match("публічний"):
            visibility = PUBLIC
        elif self.match("приватний"):
            visibility = PRIVATE
        if self.at("змінна") or self.at("стала"):
            return self.parse_var_decl(pos, visibility)
        if self.at("функція"):
            return self.parse_fn_decl(pos, visibility, is_async=False)
        if self.at("асинхронний"):
            self.advance()
            if not self.at("функція"):
                raise self.unexpected("'функція' after 'асинхронний'")
            return self.parse_fn_decl(pos, visibility, is_async=True)
        if self.at("структура"):
            return self.parse_struct_decl(pos, visibility)
        if self.at("модуль"):
            return self.parse_module_decl(pos, visibility)
        if self.at("імпорт"):
            return self.parse_import_decl(pos)
        if self.at("тип"):
            return self.parse_type_alias_decl(pos, visibility)
        if self.at("інтерфейс"):
            return self.parse_interface_decl(pos, visibility)
        raise self.unexpected("declaration")

    def parse_var_decl(self, pos: Pos, visibility: str) -> VarDecl:
        mutable = self.advance().kind == "змінна"
        name_tok = self.expect_ident("variable name")
        typ: Type | None = None
        if self.match(":"):
            typ = self.parse_type()
        value: Expr | None = None
        if self.match("="):
            value = self.parse_expr()
        return VarDecl(pos, name_tok.lexeme, typ, value, mutable, visibility)

    def parse_fn_decl(self, pos: Pos, visibility: str, *, is_async: bool) -> FnDecl:
        self.expect("функція")
        name_tok = self.expect_ident("function name")
        self.expect("(", "'(' after function name")
        params = self.parse_param_list(typed=True)
        self.expect(")", "')' after parameters")
        ret: Type | None = None
        if self.match("->"):
            ret = self.parse_type()
        self.expect("{", "'{' before function body")
        body = self.parse_stmt_list()
        return FnDecl(pos, name_tok.lexeme, params, ret, body, is_async, visibility)

    def parse_param_list(self, *, typed: bool) -> list[Param]:
        params: list[Param] = []
        if self.at(")"):
            return params
        params.append(self.parse_param(typed=typed))
        while self.match(","):
            params.append(self.parse_param(typed=typed))
        return params

    def parse_param(self, *, typed: bool) -> Param:
        pos = self._pos()
        name_tok = self.expect_ident("parameter name")
        typ: Type | None = None
        if typed:
            self.expect(":", "':' after parameter name")
            typ = self.parse_type()
        elif self.match(":"):
            typ = self.parse_type()
        default: Expr | None = None
        if typed and self.match("="):
            default = self.parse_expr()
        return Param(pos, name_tok.lexeme, typ, default)

    def parse_stmt_list(self) -> list[Stmt]:
        """Statements up to and including the closing '}'."""
        stmts: list[Stmt] = []
        self._skip_separators()
        while not self.at("}"):
            if self.at_kind(TK_EOF):
                raise self.unexpected("'}'")
            stmts.append(self.parse_stmt())
            self._skip_separators()
        self.expect("}")
        return stmts

    def parse_struct_decl(self, pos: Pos, visibility: str) -> StructDecl:
        self.expect("структура")
        name_tok = self.expect_ident("struct name")
        self.expect("{", "'{' after struct name")
        fields: list[FieldDecl] = []
        while not self.at("}"):
            field_pos = self._pos()
            field_vis = PRIVATE
            if self.match("публічний"):
                field_vis = PUBLIC
            elif self.match("приватний"):
                field_vis = PRIVATE
            field_tok = self.expect_ident("field name")
            self.expect(":", "':' after field name")
            typ = self.parse_type()
            fields.append(FieldDecl(field_pos, field_tok.lexeme, typ, field_vis))
            self.match(",")
        self.expect("}")
        return StructDecl(pos, name_tok.lexeme, fields, visibility)

    def parse_module_decl(self, pos: Pos, visibility: str) -> ModuleDecl:
        self.expect("модуль")
        name_tok = self.expect_ident("module name")
        self.expect("{", "'{' after module name")
        decls: list[Decl] = []
        self._skip_separators()
        while not self.at("}"):
            if self.at_kind(TK_EOF):
                raise self.unexpected("'}'")
            decls.append(self.parse_decl())
            self._skip_separators()
        self.expect("}")
        return ModuleDecl(pos, name_tok.lexeme, decls, visibility)

    def parse_import_decl(self, pos: Pos) -> ImportDecl:
        self.expect("імпорт")
        path: list[str] = [self.expect_ident("import path").lexeme]
        while self.match("."):
            path.append(self.expect_ident("name after '.'").lexeme)
        alias: str | None = None
        if self.match("як"):
            alias = self.expect_ident("import alias").lexeme
        return ImportDecl(pos, path, alias)

    def parse_type_alias_decl(self, pos: Pos, visibility: str) -> TypeAliasDecl:
        self.expect("тип")
        name_tok = self.expect_ident("type name")
        self.expect("=", "'=' after type name")
        typ = self.parse_type()
        return TypeAliasDecl(pos, name_tok.lexeme, typ, visibility)

    def parse_interface_decl(self, pos: Pos, visibility: str) -> InterfaceDecl:
        self.expect("інтерфейс")
        name_tok = self.expect_ident("interface name")
        self.expect("{", "'{' after interface name")
        methods: list[MethodSig] = []
        while not self.at("}"):
            sig_pos = self._pos()
            self.expect("функція", "'функція' in interface")
            method_tok = self.expect_ident("method name")
            self.expect("(", "'(' after method name")
            params = self.parse_param_list(typed=True)
            self.expect(")", "')' after parameters")
            ret: Type | None = None
            if self.match("->"):
                ret = self.parse_type()
            methods.append(MethodSig(sig_pos, method_tok.lexeme, params, ret))
            self.match(",")
        self.expect("}")
        return InterfaceDecl(pos, name_tok.lexeme, methods, visibility)

    # ── Types ────────────────────────────────────────────────

    def parse_type(self) -> Type:
        """Type = ( Primitive | IDENT ) ( '[' INT? ']' )?"""
        pos = self._pos()
        tok = self.current()
        base: Type
        if tok.kind in PRIMITIVE_TYPES:
            self.advance()
            base = PrimitiveType(pos, tok.kind)
        elif tok.kind == TK_IDENT:
            self.advance()
            base = NamedType(pos, tok.lexeme)
        else:
            raise self.unexpected("type")
        if self.match("["):
            size: int | None = None
            if self.at_kind(TK_INT):
                size = int(self.advance().lexeme)
            self.expect("]", "']' in array type")
            return ArrayType(pos, base, size)
        return base

    # ── Statements ───────────────────────────────────────────

    def parse_stmt(self) -> Stmt:
        tok = self.current()
        pos = self._pos()
        if tok.kind == "повернути":
            return self.parse_return_stmt()
        if tok.kind == "якщо":
            return self.parse_if_stmt()
        if tok.kind == "поки":
            return self.parse_while_stmt()
        if tok.kind == "для":
            return self.parse_for_stmt()
        if tok.kind == "переривати":
            self.advance()
            return BreakStmt(pos)
        if tok.kind == "продовжити":
            self.advance()
            return ContinueStmt(pos)
        if tok.kind == "спробувати":
            return self.parse_try_stmt()
        if self.at("{"):
            self.advance()
            return BlockStmt(pos, self.parse_stmt_list())
        if tok.kind in DECL_KEYWORDS:
            return DeclStmt(pos, self.parse_decl())
        return self.parse_expr_stmt()

    def parse_return_stmt(self) -> ReturnStmt:
        pos = self._pos()
        ret_tok = self.expect("повернути")
        value: Expr | None = None
        if self._at_expr_start() and self.current().line == ret_tok.line:
            value = self.parse_expr()
        return ReturnStmt(pos, value)

    def parse_if_stmt(self) -> IfStmt:
        pos = self._pos()
        self.expect("якщо")
        self.expect("(", "'(' after 'якщо'")
        cond = self.parse_expr()
        self.expect(")", "')' after condition")
        then_branch = self.parse_stmt()
        else_branch: Stmt | None = None
        if self.match("інакше"):
            else_branch = self.parse_stmt()
        return IfStmt(pos, cond, then_branch, else_branch)

    def parse_while_stmt(self) -> WhileStmt:
        pos = self._pos()
        self.expect("поки")
        self.expect("(", "'(' after 'поки'")
        cond = self.parse_expr()
        self.expect(")", "')' after condition")
        body = self.parse_stmt()
        return WhileStmt(pos, cond, body)

    def parse_for_stmt(self) -> ForStmt:
        pos = self._pos()
        self.expect("для")
        self.expect("(", "'(' after 'для'")
        var_tok = self.expect_ident("loop variable")
        self.expect("від", "'від'")
        start = self.parse_expr()
        self.expect("до", "'до'")
        stop = self.parse_expr()
        step: Expr | None = None
        if self.match("через"):
            step = self.parse_expr()
        self.expect(")", "')' after loop header")
        body = self.parse_stmt()
        return ForStmt(pos, var_tok.lexeme, start, stop, step, body)

    def parse_try_stmt(self) -> TryStmt:
        pos = self._pos()
        self.expect("спробувати")
        self.expect("{", "'{' after 'спробувати'")
        body = self.parse_stmt_list()
        catch_name: str | None = None
        catch_body: list[Stmt] | None = None
        finally_body: list[Stmt] | None = None
        if self.match("зловити"):
            if self.match("("):
                catch_name = self.expect_ident("error name").lexeme
                self.expect(")", "')' after error name")
            self.expect("{", "'{' after 'зловити'")
            catch_body = self.parse_stmt_list()
        if self.match("нарешті"):
            self.expect("{", "'{' after 'нарешті'")
            finally_body = self.parse_stmt_list()
        if catch_body is None and finally_body is None:
            raise self.unexpected("'зловити' or 'нарешті'")
        return TryStmt(pos, body, catch_name, catch_body, finally_body)

    def parse_expr_stmt(self) -> Stmt:
        """ExprStmt = Expr ( AssignOp Expr )?"""
        pos = self._pos()
        expr = self.parse_expr()
        tok = self.current()
        if tok.kind == TK_OP and tok.lexeme in ASSIGN_OPS:
            self.advance()
            value = self.parse_expr()
            return AssignStmt(pos, expr, tok.lexeme, value)
        return ExprStmt(pos, expr)

    def _at_expr_start(self) -> bool:
        """Check if current token can start an expression."""
        tok = self.current()
        if tok.kind in (TK_INT, TK_FLOAT, TK_STRING, TK_CHAR, TK_BOOL, TK_IDENT):
            return True
        if tok.kind in ("нуль", "чекати", "якщо"):
            return True
        if tok.kind == TK_OP and tok.lexeme in ("(", "[", "-", "!"):
            return True
        return False

    # ── Expressions ──────────────────────────────────────────

    def parse_expr(self) -> Expr:
        return self.parse_or()

    def parse_or(self) -> Expr:
        """Or = And ( '||' And )*"""
        left = self.parse_and()
        while self.at("||"):
            self.advance()
            right = self.parse_and()
            left = BinaryOp(left.pos, "||", left, right)
        return left

    def parse_and(self) -> Expr:
        """And = Equality ( '&&' Equality )*"""
        left = self.parse_equality()
        while self.at("&&"):
            self.advance()
            right = self.parse_equality()
            left = BinaryOp(left.pos, "&&", left, right)
        return left

    def parse_equality(self) -> Expr:
        """Equality = Relational ( ( '==' | '!=' ) Relational )*"""
        left = self.parse_relational()
        while self.at_kind(TK_OP) and self.current().lexeme in EQUALITY_OPS:
            op = self.advance().lexeme
            right = self.parse_relational()
            left = BinaryOp(left.pos, op, left, right)
        return left

    def parse_relational(self) -> Expr:
        """Relational = Sum ( ( '<' | '<=' | '>' | '>=' ) Sum )*"""
        left = self.parse_sum()
        while self.at_kind(TK_OP) and self.current().lexeme in RELATIONAL_OPS:
            op = self.advance().lexeme
            right = self.parse_sum()
            left = BinaryOp(left.pos, op, left, right)
        return left

    def parse_sum(self) -> Expr:
        """Sum = Product ( ( '+' | '-' ) Product )*"""
        left = self.parse_product()
        while self.at("+") or self.at("-"):
            op = self.advance().lexeme
            right = self.parse_product()
            left = BinaryOp(left.pos, op, left, right)
        return left

    def parse_product(self) -> Expr:
        """Product = Power ( ( '*' | '/' | '%' ) Power )*"""
        left = self.parse_power()
        while self.at("*") or self.at("/") or self.at("%"):
            op = self.advance().lexeme
            right = self.parse_power()
            left = BinaryOp(left.pos, op, left, right)
        return left

    def parse_power(self) -> Expr:
        """Power = Unary ( '**' Power )?  — right-associative"""
        left = self.parse_unary()
        if self.at("**"):
            self.advance()
            right = self.parse_power()
            return BinaryOp(left.pos, "**", left, right)
        return left

    def parse_unary(self) -> Expr:
        """Unary = ( '-' | '!' ) Unary | Cast"""
        if self.at("-") or self.at("!"):
            pos = self._pos()
            op = self.advance().lexeme
            operand = self.parse_unary()
            return UnaryOp(pos, op, operand)
        return self.parse_cast()

    def parse_cast(self) -> Expr:
        """Cast = Postfix ( 'як' Type )*"""
        expr = self.parse_postfix()
        while self.at("як"):
            self.advance()
            typ = self.parse_type()
            expr = Cast(expr.pos, expr, typ)
        return expr

    def parse_postfix(self) -> Expr:
        """Postfix = Primary ( '(' Args ')' | '[' Expr ']' | '.' IDENT )*"""
        expr = self.parse_primary()
        while True:
            if self.at("("):
                self.advance()
                args = self.parse_arg_list()
                self.expect(")", "')' after arguments")
                expr = Call(expr.pos, expr, args)
            elif self.at("["):
                self.advance()
                index = self.parse_expr()
                self.expect("]", "']' after index")
                expr = Index(expr.pos, expr, index)
            elif self.at("."):
                self.advance()
                field_tok = self.expect_ident("member name")
                expr = MemberAccess(expr.pos, expr, field_tok.lexeme)
            else:
                break
        return expr

    def parse_arg_list(self) -> list[Expr]:
        """ArgList = ( Expr ( ',' Expr )* )?"""
        args: list[Expr] = []
        if self.at(")"):
            return args
        args.append(self.parse_expr())
        while self.match(","):
            args.append(self.parse_expr())
        return args

    def parse_primary(self) -> Expr:
        """Parse a primary expression."""
        tok = self.current()
        pos = self._pos()

        # Literals
        if tok.kind == TK_INT:
            self.advance()
            return IntLit(pos, int(tok.lexeme))
        if tok.kind == TK_FLOAT:
            self.advance()
            return FloatLit(pos, float(tok.lexeme))
        if tok.kind == TK_STRING:
            self.advance()
            return StringLit(pos, tok.lexeme)
        if tok.kind == TK_CHAR:
            self.advance()
            return CharLit(pos, tok.lexeme)
        if tok.kind == TK_BOOL:
            self.advance()
            return BoolLit(pos, BOOL_WORDS[tok.lexeme])
        if tok.kind == "нуль":
            self.advance()
            return NullLit(pos)

        # Identifier, or struct literal when directly followed by '{'
        if tok.kind == TK_IDENT:
            self.advance()
            if self.at("{"):
                return self.parse_struct_literal(pos, tok.lexeme)
            return Ident(pos, tok.lexeme)

        # ( — lambda or parenthesized expression
        if self.at("("):
            if self._is_lambda():
                return self.parse_lambda()
            self.advance()
            inner = self.parse_expr()
            self.expect(")", "')' after expression")
            return inner

        # [ — array literal
        if self.at("["):
            self.advance()
            elements: list[Expr] = []
            if not self.at("]"):
                elements.append(self.parse_expr())
                while self.match(","):
                    elements.append(self.parse_expr())
            self.expect("]", "']' after array elements")
            return ArrayLit(pos, elements)

        if tok.kind == "чекати":
            self.advance()
            return Await(pos, self.parse_unary())

        if tok.kind == "якщо":
            return self.parse_conditional()

        raise self.unexpected("expression")

    def parse_struct_literal(self, pos: Pos, name: str) -> StructLit:
        """StructLit = IDENT '{' ( IDENT ':' Expr ','? )* '}'"""
        self.expect("{")
        fields: list[tuple[str, Expr]] = []
        while not self.at("}"):
            field_tok = self.expect_ident("field name")
            self.expect(":", "':' after field name")
            fields.append((field_tok.lexeme, self.parse_expr()))
            self.match(",")
        self.expect("}", "'}' after struct fields")
        return StructLit(pos, name, fields)

    def parse_conditional(self) -> Conditional:
        """Conditional = 'якщо' '(' Expr ')' Expr 'інакше' Expr"""
        pos = self._pos()
        self.expect("якщо")
        self.expect("(", "'(' after 'якщо'")
        cond = self.parse_expr()
        self.expect(")", "')' after condition")
        then_expr = self.parse_expr()
        self.expect("інакше", "'інакше' in conditional expression")
        else_expr = self.parse_expr()
        return Conditional(pos, cond, then_expr, else_expr)

    def _is_lambda(self) -> bool:
        """Lookahead scan: check if '(' begins a lambda by finding matching ')' then '=>' or '->'."""
        depth = 1
        i = self.pos + 1
        num_tokens = len(self.tokens)
        while i < num_tokens:
            tok = self.tokens[i]
            if tok.kind == TK_OP and (tok.lexeme == "(" or tok.lexeme == "["):
                depth += 1
            elif tok.kind == TK_OP and (tok.lexeme == ")" or tok.lexeme == "]"):
                depth -= 1
                if depth == 0:
                    if i + 1 >= num_tokens:
                        return False
                    after = self.tokens[i + 1]
                    return after.kind == TK_OP and after.lexeme in ("=>", "->")
            i += 1
        return False

    def parse_lambda(self) -> Lambda:
        """Lambda = '(' Params ')' ( '->' Type )? '=>' Expr"""
        pos = self._pos()
        self.expect("(")
        params = self.parse_param_list(typed=False)
        self.expect(")", "')' after lambda parameters")
        ret: Type | None = None
        if self.match("->"):
            ret = self.parse_type()
        self.expect("=>", "'=>' before lambda body")
        body = self.parse_expr()
        return Lambda(pos, params, ret, body)
