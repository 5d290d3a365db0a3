#!/usr/bin/env python3
"""
Tests for the statement lexer and parser

Run: python -m pytest pocketdb/tests/test_parser.py -v
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from pocketdb.core.errors import ErrorKind, StatementSyntaxError
from pocketdb.parser import Lexer, TokenType, ParseError, parse_sql
from pocketdb.parser.parser import (
    ColumnDef, CreateTableStatement, DeleteStatement, DropTableStatement,
    InsertStatement, JoinStatement, Literal, Predicate, SelectStatement,
    UpdateStatement,
)


class TestLexer(unittest.TestCase):

    def test_tokens(self):
        tokens = Lexer("select * FROM pets WHERE id=1;").tokenize()
        self.assertEqual([t.type for t in tokens], [
            TokenType.SELECT, TokenType.STAR, TokenType.FROM, TokenType.IDENTIFIER,
            TokenType.WHERE, TokenType.IDENTIFIER, TokenType.EQUALS, TokenType.INTEGER,
            TokenType.SEMICOLON, TokenType.EOF,
        ])
        self.assertEqual(tokens[0].value, 'SELECT')
        self.assertEqual(tokens[3].value, 'pets')
        self.assertEqual(tokens[7].value, 1)

    def test_strings_and_spans(self):
        text = "VALUES ('it''s', \"Rex\")"
        tokens = Lexer(text).tokenize()
        strings = [t for t in tokens if t.type == TokenType.STRING]
        self.assertEqual([t.value for t in strings], ['it', 'Rex'])
        self.assertEqual(text[strings[-1].pos:strings[-1].end], '"Rex"')

    def test_quote_inside_word(self):
        tokens = Lexer("(O'Brien, 'x')").tokenize()
        self.assertEqual([t.type for t in tokens], [
            TokenType.LPAREN, TokenType.IDENTIFIER, TokenType.SYMBOL, TokenType.IDENTIFIER,
            TokenType.COMMA, TokenType.STRING, TokenType.RPAREN, TokenType.EOF,
        ])

    def test_other_characters_kept(self):
        tokens = Lexer("a@b").tokenize()
        self.assertEqual([t.type for t in tokens],
                         [TokenType.IDENTIFIER, TokenType.SYMBOL, TokenType.IDENTIFIER,
                          TokenType.EOF])

    def test_line_and_column(self):
        tokens = Lexer("SELECT *\n  FROM pets").tokenize()
        self.assertEqual((tokens[2].line, tokens[2].column), (2, 3))


class TestParser(unittest.TestCase):

    def test_create(self):
        stmt = parse_sql("CREATE TABLE pets (id int primary key, name varchar(100), x)")
        self.assertEqual(stmt, CreateTableStatement(
            table='pets',
            columns=[ColumnDef('id', 'int'), ColumnDef('name', 'varchar')],
        ))

    def test_keywords_as_names(self):
        stmt = parse_sql("CREATE TABLE Values (id int, Set text)")
        self.assertEqual(stmt, CreateTableStatement(
            table='Values', columns=[ColumnDef('id', 'int'), ColumnDef('Set', 'text')]))
        stmt = parse_sql("UPDATE t SET on=1 WHERE id=2")
        self.assertEqual(stmt.assignments, [('on', Literal('1'))])

    def test_drop(self):
        self.assertEqual(parse_sql("DROP TABLE pets;"), DropTableStatement('pets'))

    def test_insert_values(self):
        stmt = parse_sql("INSERT INTO pets VALUES (001, \"a, b\", Fido  Smith, -3)")
        self.assertIsInstance(stmt, InsertStatement)
        self.assertEqual(stmt.values, [
            Literal('001'),
            Literal('a, b', quoted=True),
            Literal('Fido  Smith'),
            Literal('-3'),
        ])

    def test_insert_bare_apostrophe(self):
        stmt = parse_sql("INSERT INTO pets VALUES (2, Fido's toy)")
        self.assertEqual(stmt.values, [Literal('2'), Literal("Fido's toy")])

    def test_insert_empty_values(self):
        self.assertEqual(parse_sql("INSERT INTO pets VALUES ()").values, [])

    def test_select(self):
        self.assertEqual(parse_sql("SELECT * FROM pets"), SelectStatement('pets'))
        stmt = parse_sql("SELECT name, pets.age FROM pets WHERE id = 7")
        self.assertEqual(stmt.columns, ['name', 'age'])
        self.assertEqual(stmt.where, Predicate('id', Literal('7')))

    def test_join(self):
        stmt = parse_sql("SELECT * FROM users JOIN orders ON users.id = orders.user_id")
        self.assertEqual(stmt, JoinStatement(
            left='users', right='orders', on='users.id = orders.user_id'))

    def test_join_without_on(self):
        stmt = parse_sql("SELECT * FROM users JOIN orders")
        self.assertIsNone(stmt.on)

    def test_update(self):
        stmt = parse_sql("UPDATE pets SET name='Max', age=4 WHERE id=1")
        self.assertEqual(stmt, UpdateStatement(
            table='pets',
            assignments=[('name', Literal('Max', quoted=True)), ('age', Literal('4'))],
            where=Predicate('id', Literal('1')),
        ))

    def test_delete(self):
        stmt = parse_sql("DELETE FROM pets WHERE ID=2")
        self.assertEqual(stmt, DeleteStatement('pets', Predicate('ID', Literal('2'))))

    def test_errors(self):
        bad = [
            "SELECT * pets",
            "SELECT * FROM pets WHERE id",
            "INSERT INTO pets VALUES (1,,2)",
            "UPDATE pets SET name=Max",
            "CREATE TABLE pets id int",
            "DELETE FROM pets WHERE id=1 extra ; more",
            "DROP TABLE",
        ]
        for sql in bad:
            with self.assertRaises(StatementSyntaxError, msg=sql) as ctx:
                parse_sql(sql)
            self.assertEqual(ctx.exception.kind, ErrorKind.SYNTAX)

    def test_error_position_and_usage(self):
        with self.assertRaises(ParseError) as ctx:
            parse_sql("UPDATE pets name=Max WHERE id=1")
        self.assertEqual(ctx.exception.token.column, 13)
        self.assertIn("Usage: UPDATE <table> SET col=val WHERE id=<id>", str(ctx.exception))


if __name__ == '__main__':
    unittest.main(verbosity=2)
