#
# test_config.py
#
# This source file is part of the ast-railroad open source project
#
# Copyright 2025 the ast-railroad project authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#

# You can run the tests by doing the following, from the repository root:
# python3 -m unittest ast_railroad.test_config
import dataclasses
import unittest
from dataclasses import dataclass

from ast_railroad import config, nodes
from ast_railroad.config import Delimited, FieldConfig, FieldKind, railroad_arg, railroad_field
from ast_railroad.errors import Location, MalformedAttributeError, UnknownAttributeError

LOCATION = Location('Node', 'grammar.py', 10)


class TestFieldOptions(unittest.TestCase):

    def test_defaults(self) -> None:
        self.assertEqual(FieldConfig(), config.parse_field(None, LOCATION))
        self.assertEqual(FieldConfig(), config.parse_field({}, LOCATION))

    def test_parse(self) -> None:
        parsed = config.parse_field({'kind': FieldKind.NONTERMINAL, 'comment': 'body', 'optional': True}, LOCATION)
        self.assertEqual(FieldConfig(FieldKind.NONTERMINAL, 'body', True, False), parsed)

    def test_kind_by_name(self) -> None:
        self.assertIs(FieldKind.NONTERMINAL, config.parse_field({'kind': 'nonterminal'}, LOCATION).kind)
        self.assertEqual(Delimited('parens'), config.parse_field({'kind': Delimited('parens')}, LOCATION).kind)

    def test_delimited_by_position(self) -> None:
        self.assertEqual('1', Delimited(1).field)
        self.assertEqual(Delimited('1'), Delimited(1))

    def test_comment_text(self) -> None:
        self.assertIsNone(FieldConfig().comment_text())
        self.assertEqual('body', FieldConfig(comment='body').comment_text())
        self.assertEqual('computed', FieldConfig(comment=lambda: 'computed').comment_text())

    def test_unknown(self) -> None:
        with self.assertRaises(UnknownAttributeError) as context:
            config.parse_field({'kind': FieldKind.TERMINAL, 'bogus': 1}, LOCATION)
        self.assertEqual('bogus', context.exception.key)
        self.assertIs(LOCATION, context.exception.location)
        self.assertIn('grammar.py:10', str(context.exception))

    def test_malformed(self) -> None:
        for (options, key) in [
                ({'kind': 42}, 'kind'),
                ({'kind': 'sometimes'}, 'kind'),
                ({'comment': 3}, 'comment'),
                ({'optional': 'yes'}, 'optional'),
                ({'repeated': 1}, 'repeated'),
                ]:
            with self.subTest(options=options):
                with self.assertRaises(MalformedAttributeError) as context:
                    config.parse_field(options, LOCATION)
                self.assertEqual(key, context.exception.key)

    def test_options_must_be_a_mapping(self) -> None:
        with self.assertRaises(MalformedAttributeError):
            config.parse_field(['optional'], LOCATION)

    def test_delimiters(self) -> None:
        delimited = FieldConfig(Delimited('parens'))
        config.check_delimiters({'args': delimited, 'parens': FieldConfig()}, LOCATION)
        for configs in [{'args': delimited}, {'parens': delimited}]:
            with self.subTest(configs=configs):
                with self.assertRaises(MalformedAttributeError):
                    config.check_delimiters(configs, LOCATION)


class TestFieldHelpers(unittest.TestCase):

    def test_railroad_field(self) -> None:
        @dataclass
        class Node:
            name: str = railroad_field(default='x', comment='name', metadata={'other': 1})
            items: list = railroad_field(default_factory=list, repeated=True)

        (name, items) = dataclasses.fields(Node)
        self.assertEqual({'comment': 'name'}, name.metadata[config.METADATA_KEY])
        self.assertEqual(1, name.metadata['other'])
        self.assertEqual({'repeated': True}, items.metadata[config.METADATA_KEY])
        self.assertEqual('x', Node().name)
        self.assertEqual([], Node().items)

    def test_railroad_arg(self) -> None:
        arg = railroad_arg(int, kind=FieldKind.NONTERMINAL)
        self.assertIs(int, arg.annotation)
        self.assertEqual({'kind': FieldKind.NONTERMINAL}, dict(arg.options))


class TestToplevelOptions(unittest.TestCase):

    def test_default_prefix(self) -> None:
        toplevel = config.parse_toplevel({}, LOCATION)
        self.assertEqual(config.DEFAULT_PREFIX, toplevel.prefix)
        self.assertIs(nodes, toplevel.primitives)

    def test_explicit_prefix(self) -> None:
        self.assertIs(nodes, config.parse_toplevel({'prefix': 'ast_railroad.nodes'}, LOCATION).primitives)

    def test_unknown(self) -> None:
        with self.assertRaises(UnknownAttributeError) as context:
            config.parse_toplevel({'bogus': 1}, LOCATION)
        self.assertEqual('bogus', context.exception.key)

    def test_malformed_prefix(self) -> None:
        for prefix in [3, '', 'ast_railroad.no_such_module', 'ast_railroad.errors']:
            with self.subTest(prefix=prefix):
                with self.assertRaises(MalformedAttributeError) as context:
                    config.parse_toplevel({'prefix': prefix}, LOCATION)
                self.assertEqual('prefix', context.exception.key)


if __name__ == '__main__':
    unittest.main()
