"""
SQL Parser - Converts tokens into statement trees

Uses recursive descent parsing to build one statement node per
command. The grammar is deliberately narrow: predicates are single
``column = value`` comparisons, INSERT binds values by position and
the JOIN form keeps its ON clause as text.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from ..core.errors import StatementSyntaxError
from .lexer import Lexer, Token, TokenType


# ============================================================================
# AST Node Types
# ============================================================================

@dataclass
class Literal:
    """A value exactly as written in the statement, quotes removed"""
    text: str
    quoted: bool = False


@dataclass
class Predicate:
    """WHERE <column> = <value>"""
    column: str
    value: Literal


@dataclass
class ColumnDef:
    """Column definition for CREATE TABLE"""
    name: str
    data_type: str


@dataclass
class CreateTableStatement:
    table: str
    columns: List[ColumnDef] = field(default_factory=list)


@dataclass
class DropTableStatement:
    table: str


@dataclass
class InsertStatement:
    """INSERT statement; values bind to schema columns by position"""
    table: str
    values: List[Literal] = field(default_factory=list)


@dataclass
class SelectStatement:
    table: str
    columns: List[str] = field(default_factory=lambda: ['*'])
    where: Optional[Predicate] = None


@dataclass
class JoinStatement:
    """SELECT ... FROM <left> JOIN <right> ON <text>"""
    left: str
    right: str
    columns: List[str] = field(default_factory=lambda: ['*'])
    on: Optional[str] = None


@dataclass
class UpdateStatement:
    table: str
    assignments: List[Tuple[str, Literal]] = field(default_factory=list)
    where: Optional[Predicate] = None


@dataclass
class DeleteStatement:
    table: str
    where: Optional[Predicate] = None


Statement = Union[CreateTableStatement, DropTableStatement, InsertStatement,
                  SelectStatement, JoinStatement, UpdateStatement, DeleteStatement]


# ============================================================================
# Parser
# ============================================================================

USAGE = {
    TokenType.CREATE: "CREATE TABLE [name] (col type, ...)",
    TokenType.DROP: "DROP TABLE [name]",
    TokenType.INSERT: "INSERT INTO [table] VALUES (v1, v2, ...)",
    TokenType.SELECT: "SELECT * FROM [table] [WHERE id=<id>]",
    TokenType.UPDATE: "UPDATE <table> SET col=val WHERE id=<id>",
    TokenType.DELETE: "DELETE FROM <table> WHERE id=<id>",
}

NAME_TOKENS = {TokenType.IDENTIFIER, *Lexer.KEYWORDS.values()}


class ParseError(StatementSyntaxError):
    """Parser error with position information"""
    def __init__(self, message: str, token: Token, usage: Optional[str] = None):
        self.token = token
        self.usage = usage
        text = f"Syntax error: {message} at line {token.line}, column {token.column}."
        if usage:
            text += f" Usage: {usage}"
        super().__init__(text)


class Parser:
    """
    Recursive descent statement parser.

    Needs the source text alongside the tokens so that bare values
    keep their original spelling and spacing.
    """

    def __init__(self, tokens: List[Token], text: str = ''):
        self.tokens = tokens
        self.text = text
        self.pos = 0
        self._usage: Optional[str] = None

    def _current(self) -> Token:
        """Get current token"""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        """Advance and return current token"""
        token = self._current()
        self.pos += 1
        return token

    def _match(self, *types: TokenType) -> bool:
        """Check if current token matches any of the types"""
        return self._current().type in types

    def _error(self, message: str) -> ParseError:
        """Build a ParseError at the current token"""
        return ParseError(message, self._current(), self._usage)

    def _expect(self, token_type: TokenType, message: str = None) -> Token:
        """Expect a specific token type"""
        if not self._match(token_type):
            raise self._error(message or f"Expected {token_type.name}")
        return self._advance()

    def _consume_if(self, token_type: TokenType) -> bool:
        """Consume token if it matches"""
        if self._match(token_type):
            self._advance()
            return True
        return False

    def _source(self, first: Token, last: Token) -> str:
        """Source text spanning two tokens"""
        return self.text[first.pos:last.end]

    def _name_of(self, token: Token) -> str:
        """Name as written; keywords keep their source spelling"""
        if token.type == TokenType.IDENTIFIER:
            return token.value
        return self._source(token, token) or token.value

    def _expect_name(self, message: str) -> str:
        """Expect a table or column name; keywords are allowed as names"""
        if not self._match(*NAME_TOKENS):
            raise self._error(message)
        return self._name_of(self._advance())

    def _expect_end(self) -> None:
        """Expect an optional semicolon and the end of input"""
        self._consume_if(TokenType.SEMICOLON)
        if not self._match(TokenType.EOF):
            raise self._error(f"Unexpected '{self._current().value}'")

    def parse(self) -> Statement:
        """Parse a single statement"""
        token = self._current()
        self._usage = USAGE.get(token.type)

        if self._match(TokenType.SELECT):
            return self._parse_select()
        elif self._match(TokenType.INSERT):
            return self._parse_insert()
        elif self._match(TokenType.UPDATE):
            return self._parse_update()
        elif self._match(TokenType.DELETE):
            return self._parse_delete()
        elif self._match(TokenType.CREATE):
            return self._parse_create()
        elif self._match(TokenType.DROP):
            return self._parse_drop()
        else:
            raise self._error(f"Unexpected token: {token.value}")

    def _parse_select(self) -> Union[SelectStatement, JoinStatement]:
        """Parse SELECT statement, routing to the join form on JOIN"""
        self._expect(TokenType.SELECT)
        columns = self._parse_select_columns()

        self._expect(TokenType.FROM)
        table = self._expect_name("Expected table name")

        if self._consume_if(TokenType.JOIN):
            right = self._expect_name("Expected table name after JOIN")
            on = None
            if self._consume_if(TokenType.ON):
                on = self._parse_raw_clause()
            self._expect_end()
            return JoinStatement(left=table, right=right, columns=columns, on=on)

        where = None
        if self._consume_if(TokenType.WHERE):
            where = self._parse_predicate()

        self._expect_end()
        return SelectStatement(table=table, columns=columns, where=where)

    def _parse_select_columns(self) -> List[str]:
        """Parse SELECT column list"""
        if self._consume_if(TokenType.STAR):
            return ['*']

        columns = []
        while True:
            name = self._expect_name("Expected column name")
            if self._consume_if(TokenType.DOT):
                name = self._expect_name("Expected column name")
            columns.append(name)
            if not self._consume_if(TokenType.COMMA):
                break
        return columns

    def _parse_raw_clause(self) -> str:
        """Collect the rest of the statement as text"""
        first = last = None
        while not self._match(TokenType.EOF, TokenType.SEMICOLON):
            last = self._advance()
            first = first or last
        if first is None:
            raise self._error("Expected join condition after ON")
        return self._source(first, last)

    def _parse_insert(self) -> InsertStatement:
        """Parse INSERT statement"""
        self._expect(TokenType.INSERT)
        self._expect(TokenType.INTO)
        table = self._expect_name("Expected table name")

        self._expect(TokenType.VALUES)
        self._expect(TokenType.LPAREN)

        values = []
        if not self._match(TokenType.RPAREN):
            while True:
                values.append(self._parse_value(TokenType.COMMA, TokenType.RPAREN))
                if not self._consume_if(TokenType.COMMA):
                    break
        self._expect(TokenType.RPAREN)
        self._expect_end()

        return InsertStatement(table=table, values=values)

    def _parse_value(self, *terminators: TokenType) -> Literal:
        """Parse a value: a quoted string, a signed integer or bare words.

        Bare words run up to the next terminator and are kept exactly
        as written in the source.
        """
        stop = set(terminators) | {TokenType.EOF, TokenType.SEMICOLON}

        if self._match(TokenType.STRING):
            token = self._advance()
            if self._match(*stop):
                return Literal(token.value, quoted=True)
            self.pos -= 1

        first = last = None
        while not self._match(*stop):
            last = self._advance()
            first = first or last
        if first is None:
            raise self._error("Expected value")
        return Literal(self._source(first, last))

    def _parse_predicate(self) -> Predicate:
        """Parse a single column = value predicate"""
        column = self._expect_name("Expected column name after WHERE")
        self._expect(TokenType.EQUALS, "Expected '=' in WHERE clause")
        return Predicate(column=column, value=self._parse_value())

    def _parse_update(self) -> UpdateStatement:
        """Parse UPDATE statement"""
        self._expect(TokenType.UPDATE)
        table = self._expect_name("Expected table name")

        self._expect(TokenType.SET)

        assignments = []
        while True:
            col = self._expect_name("Expected column name")
            self._expect(TokenType.EQUALS)
            value = self._parse_value(TokenType.COMMA, TokenType.WHERE)
            assignments.append((col, value))

            if not self._consume_if(TokenType.COMMA):
                break

        self._expect(TokenType.WHERE)
        where = self._parse_predicate()
        self._expect_end()

        return UpdateStatement(table=table, assignments=assignments, where=where)

    def _parse_delete(self) -> DeleteStatement:
        """Parse DELETE statement"""
        self._expect(TokenType.DELETE)
        self._expect(TokenType.FROM)
        table = self._expect_name("Expected table name")

        self._expect(TokenType.WHERE)
        where = self._parse_predicate()
        self._expect_end()

        return DeleteStatement(table=table, where=where)

    def _parse_create(self) -> CreateTableStatement:
        """Parse CREATE TABLE statement"""
        self._expect(TokenType.CREATE)
        self._expect(TokenType.TABLE)
        table = self._expect_name("Expected table name")

        self._expect(TokenType.LPAREN)

        columns = []
        while True:
            spec = self._parse_column_spec()
            # Specs without a type are skipped
            if len(spec) >= 2:
                name, type_token = spec[0], spec[1]
                if name.type not in NAME_TOKENS:
                    raise ParseError(f"Invalid column name '{name.value}'", name, self._usage)
                columns.append(ColumnDef(name=self._name_of(name),
                                         data_type=str(type_token.value)))
            if not self._consume_if(TokenType.COMMA):
                break

        self._expect(TokenType.RPAREN)
        self._expect_end()

        return CreateTableStatement(table=table, columns=columns)

    def _parse_column_spec(self) -> List[Token]:
        """Collect one column spec, skipping constraint tokens and (n) sizes"""
        tokens = []
        depth = 0
        while not self._match(TokenType.EOF):
            if depth == 0 and self._match(TokenType.COMMA, TokenType.RPAREN):
                break
            token = self._advance()
            if token.type == TokenType.LPAREN:
                depth += 1
            elif token.type == TokenType.RPAREN:
                depth -= 1
            tokens.append(token)
        return tokens

    def _parse_drop(self) -> DropTableStatement:
        """Parse DROP TABLE statement"""
        self._expect(TokenType.DROP)
        if len(self.tokens) < 4:  # DROP TABLE <name> EOF
            raise StatementSyntaxError(f"Syntax error. Usage: {self._usage}")
        self._expect(TokenType.TABLE)
        table = self._expect_name("Expected table name")
        self._expect_end()
        return DropTableStatement(table=table)


def parse_sql(sql: str) -> Statement:
    """Parse a statement string into its statement tree"""
    lexer = Lexer(sql)
    tokens = lexer.tokenize()
    parser = Parser(tokens, sql)
    return parser.parse()
