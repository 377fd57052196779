#
# diagram.py
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

import logging
import operator
from typing import Any, Callable, Iterable, Optional

import railroad

from ast_railroad import nodes
from ast_railroad.errors import ConsumedDiagramError, FileWriteError

logger = logging.getLogger(__name__)

# Space around the tracks of a document
PADDING = 20

# Vertical space between two tracks
TRACK_SEPARATION = 20


def _nonterminal_track(label: str, node: nodes.Node) -> nodes.Node:
    return nodes.Sequence((nodes.Comment(label), nodes.Start(), node, nodes.End()))


class DiagramSvg:
    '''
    A diagram converted to a standalone SVG document. The layout is computed
    once, when the document is built, so it is cheap to write it out several
    times. Tracks are stacked top to bottom and are not connected to each other.
    '''

    def __init__(self, tracks: list[railroad.DiagramItem], css: Optional[str] = None):
        root = railroad.DiagramItem('svg', {'class': railroad.DIAGRAM_CLASS})
        group = railroad.DiagramItem('g')
        if railroad.STROKE_ODD_PIXEL_LENGTH:
            group.attrs['transform'] = 'translate(.5 .5)'

        width = 0
        y = PADDING
        for i, track in enumerate(tracks):
            if i > 0:
                y += TRACK_SEPARATION
            row = railroad.DiagramItem('g', {'class': 'track'})
            y += track.up
            track.format(PADDING, y, track.width).addTo(row)
            row.addTo(group)
            y += track.height + track.down
            width = max(width, track.width)
        group.addTo(root)

        root.attrs['width'] = str(width + 2 * PADDING)
        root.attrs['height'] = str(y + PADDING)
        root.attrs['viewBox'] = f"0 0 {root.attrs['width']} {root.attrs['height']}"
        root.attrs['xmlns'] = 'http://www.w3.org/2000/svg'
        root.attrs['xmlns:xlink'] = 'http://www.w3.org/1999/xlink'
        railroad.Style(railroad.DEFAULT_STYLE if css is None else css).addTo(root)

        chunks: list[str] = []
        root.writeSvg(chunks.append)
        self.text = ''.join(chunks)
        self.track_count = len(tracks)

    def __str__(self) -> str:
        return self.text

    def write(self, write: Callable[[str], Any]):
        write(self.text)

    def write_file(self, path: str):
        ''' Write the document to the given path, raising FileWriteError on failure. '''
        logger.debug('writing diagram with %d track(s) to %s', self.track_count, path)
        try:
            with open(path, 'w') as fout:
                self.write(fout.write)
        except OSError as err:
            raise FileWriteError(path, err) from err
        logger.info('diagram written to %s', path)


class Diagram:
    '''
    Collects the tracks of one railroad diagram: an optional toplevel track plus
    any number of named nonterminal tracks, rendered in insertion order below it.

    Usually you get one from railroad_diagram() on the toplevel node of a
    grammar rather than building it by hand.
    '''

    def __init__(self, track: Optional[nodes.Node] = None):
        self._toplevel = track
        self._nonterminals: list[tuple[str, nodes.Node]] = []
        self._consumed = False

    @classmethod
    def empty(cls) -> 'Diagram':
        return cls()

    @classmethod
    def empty_with_capacity(cls, capacity: int) -> 'Diagram':
        ''' Like empty(). The capacity is only a hint, the track list grows on demand. '''
        logger.debug('creating diagram for about %d nonterminal(s)', capacity)
        return cls()

    @classmethod
    def with_capacity(cls, track: nodes.Node, capacity: int) -> 'Diagram':
        logger.debug('creating diagram for about %d nonterminal(s)', capacity)
        return cls(track)

    @classmethod
    def with_nonterminals(cls, track: nodes.Node, nonterminals: Iterable[tuple[Any, nodes.Node]]) -> 'Diagram':
        ''' Build a diagram from a toplevel track and (name, node) pairs for the nonterminals. '''
        res = cls.with_capacity(track, operator.length_hint(nonterminals))
        for name, node in nonterminals:
            res.add_nonterminal(name, node)
        return res

    @property
    def toplevel(self) -> Optional[nodes.Node]:
        return self._toplevel

    @property
    def nonterminals(self) -> tuple[tuple[str, nodes.Node], ...]:
        ''' The stored (label, track) pairs, in insertion order. '''
        return tuple((label, _nonterminal_track(label, node)) for (label, node) in self._nonterminals)

    @property
    def nonterminal_nodes(self) -> tuple[tuple[str, nodes.Node], ...]:
        ''' The (label, node) pairs as given to add_nonterminal(). '''
        return tuple(self._nonterminals)

    def _check_live(self):
        if self._consumed:
            raise ConsumedDiagramError('Diagram has already been converted to SVG')

    def set_toplevel(self, track: nodes.Node) -> Optional[nodes.Node]:
        ''' Replace the toplevel track, returning the previous one or None. '''
        self._check_live()
        previous = self._toplevel
        self._toplevel = track
        return previous

    def add_nonterminal(self, name: Any, node: nodes.Node):
        ''' Append a track for a nonterminal, labeled and with its own start and end markers. '''
        self._check_live()
        label = str(name)
        logger.debug('adding nonterminal track %s', label)
        self._nonterminals.append((label, node))

    def into_svg(self, css: Optional[str] = None) -> DiagramSvg:
        '''
        Convert the diagram into a standalone SVG document. This consumes the
        diagram; the returned document can be written as often as needed.
        css replaces the default railroad stylesheet when given.
        '''
        self._check_live()
        self._consumed = True
        tracks = []
        if self._toplevel is not None:
            tracks.append(nodes.Sequence((nodes.Start(), self._toplevel, nodes.End())).to_railroad())
        for label, node in self._nonterminals:
            tracks.append(_nonterminal_track(label, node).to_railroad())
        self._toplevel = None
        self._nonterminals = []
        logger.debug('rendering %d track(s)', len(tracks))
        return DiagramSvg(tracks, css)

    def render_to_text(self, css: Optional[str] = None) -> str:
        return str(self.into_svg(css))

    def render_to_file(self, path: str, css: Optional[str] = None):
        self.into_svg(css).write_file(path)
