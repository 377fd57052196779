#
# test_diagram.py
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
# python3 -m unittest ast_railroad.test_diagram
import os
import tempfile
import unittest

import railroad

from ast_railroad import nodes
from ast_railroad.diagram import Diagram, DiagramSvg
from ast_railroad.errors import ConsumedDiagramError, FileWriteError

TRACK = 'class="track"'


def track(name: str) -> nodes.Node:
    return nodes.Sequence([nodes.Terminal(name), nodes.Optional(nodes.NonTerminal(f'{name}-rest'))])


class TestDiagram(unittest.TestCase):

    def test_empty(self) -> None:
        for diagram in [Diagram(), Diagram.empty(), Diagram.empty_with_capacity(10)]:
            with self.subTest(diagram=diagram):
                self.assertIsNone(diagram.toplevel)
                self.assertEqual((), diagram.nonterminals)
                text = diagram.render_to_text()
                self.assertTrue(text.startswith('<svg'))
                self.assertIn('<style>', text)
                self.assertIn(railroad.DEFAULT_STYLE, text)
                self.assertEqual(0, text.count(TRACK))

    def test_set_toplevel(self) -> None:
        diagram = Diagram.empty()
        self.assertIsNone(diagram.set_toplevel(track('first-track')))
        self.assertEqual(track('first-track'), diagram.set_toplevel(track('second-track')))
        self.assertEqual(track('second-track'), diagram.toplevel)

        text = diagram.render_to_text()
        self.assertIn('>second-track<', text)
        self.assertNotIn('>first-track<', text)
        self.assertEqual(1, text.count(TRACK))

    def test_add_nonterminal_keeps_order(self) -> None:
        diagram = Diagram.with_capacity(track('top'), 3)
        for name in ['gamma', 'alpha', 'beta']:
            diagram.add_nonterminal(name, track(name))
        self.assertEqual(['gamma', 'alpha', 'beta'], [label for (label, _) in diagram.nonterminals])

        text = diagram.render_to_text()
        self.assertEqual(4, text.count(TRACK))
        positions = [text.index(f'>{name}<') for name in ['top', 'gamma', 'alpha', 'beta']]
        self.assertEqual(sorted(positions), positions)

    def test_nonterminal_track_is_labeled(self) -> None:
        diagram = Diagram.empty()
        diagram.add_nonterminal(42, track('answer'))
        self.assertEqual(
            [('42', nodes.Sequence([nodes.Comment('42'), nodes.Start(), track('answer'), nodes.End()]))],
            list(diagram.nonterminals))
        self.assertEqual([('42', track('answer'))], list(diagram.nonterminal_nodes))

    def test_with_nonterminals(self) -> None:
        pairs = [('one', track('one')), ('two', track('two'))]
        for source in [pairs, iter(pairs), (pair for pair in pairs)]:
            with self.subTest(source=type(source).__name__):
                diagram = Diagram.with_nonterminals(track('top'), source)
                self.assertEqual(track('top'), diagram.toplevel)
                self.assertEqual(['one', 'two'], [label for (label, _) in diagram.nonterminals])

    def test_nonterminals_without_toplevel(self) -> None:
        diagram = Diagram.empty()
        diagram.add_nonterminal('only', track('only'))
        self.assertEqual(1, diagram.render_to_text().count(TRACK))

    def test_consumed(self) -> None:
        diagram = Diagram(track('top'))
        diagram.into_svg()
        for (name, call) in [
                ('into_svg', diagram.into_svg),
                ('render_to_text', diagram.render_to_text),
                ('set_toplevel', lambda: diagram.set_toplevel(track('other'))),
                ('add_nonterminal', lambda: diagram.add_nonterminal('other', track('other'))),
                ]:
            with self.subTest(name=name):
                with self.assertRaises(ConsumedDiagramError):
                    call()

    def test_custom_css(self) -> None:
        css = 'path { stroke: red; }'
        text = Diagram(track('top')).render_to_text(css)
        self.assertIn(css, text)
        self.assertNotIn(railroad.DEFAULT_STYLE, text)


class TestDiagramSvg(unittest.TestCase):

    def test_written_text_is_stable(self) -> None:
        svg = Diagram(track('top')).into_svg()
        self.assertIsInstance(svg, DiagramSvg)
        self.assertEqual(1, svg.track_count)
        chunks = []
        svg.write(chunks.append)
        svg.write(chunks.append)
        self.assertEqual([str(svg), str(svg)], chunks)

    def test_document_attributes(self) -> None:
        text = str(Diagram(track('top')).into_svg())
        for attr in ['class="railroad-diagram"', 'xmlns="http://www.w3.org/2000/svg"', 'viewBox="0 0 ']:
            with self.subTest(attr=attr):
                self.assertIn(attr, text)
        self.assertTrue(text.endswith('</svg>'))

    def test_render_to_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, 'top.svg')
            expected = Diagram(track('top')).render_to_text()
            Diagram(track('top')).render_to_file(path)
            with open(path, 'r') as fin:
                self.assertEqual(expected, fin.read())

    def test_render_to_file_failure(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, 'missing', 'top.svg')
            with self.assertRaises(FileWriteError) as context:
                Diagram(track('top')).render_to_file(path)
        err = context.exception
        self.assertEqual(path, err.path)
        self.assertIsInstance(err.cause, OSError)
        self.assertIs(err.cause, err.__cause__)
        self.assertIn('Failed to write to file', str(err))


if __name__ == '__main__':
    unittest.main()
