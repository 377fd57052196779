#
# nodes.py
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

#
# Diagram primitives.
#
# Items of the railroad library compute their layout when constructed and
# attach SVG paths to themselves when formatted, so one item can only be
# placed in one diagram, once. The nodes here are immutable descriptions of
# those items instead: they can be compared, shared and kept around, and each
# call to to_railroad() builds a fresh railroad item tree from them.
#

from dataclasses import dataclass, field

import railroad


class Node:
    ''' Base class of all diagram nodes. '''

    def to_railroad(self) -> railroad.DiagramItem:
        raise NotImplementedError


@dataclass(frozen=True)
class Terminal(Node):
    text: str

    def to_railroad(self) -> railroad.DiagramItem:
        return railroad.Terminal(self.text)


@dataclass(frozen=True)
class NonTerminal(Node):
    text: str

    def to_railroad(self) -> railroad.DiagramItem:
        return railroad.NonTerminal(self.text)


@dataclass(frozen=True)
class Comment(Node):
    text: str

    def to_railroad(self) -> railroad.DiagramItem:
        return railroad.Comment(self.text)


@dataclass(frozen=True)
class Skip(Node):

    def to_railroad(self) -> railroad.DiagramItem:
        return railroad.Skip()


@dataclass(frozen=True)
class Start(Node):

    def to_railroad(self) -> railroad.DiagramItem:
        return railroad.Start()


@dataclass(frozen=True)
class End(Node):

    def to_railroad(self) -> railroad.DiagramItem:
        return railroad.End()


@dataclass(frozen=True)
class Sequence(Node):
    items: tuple[Node, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'items', tuple(self.items))

    def to_railroad(self) -> railroad.DiagramItem:
        # railroad.Sequence needs at least one item to measure itself
        if not self.items:
            return railroad.Skip()
        return railroad.Sequence(*[item.to_railroad() for item in self.items])


@dataclass(frozen=True)
class Choice(Node):
    ''' One of the alternatives; the first one is drawn on the main line. '''
    items: tuple[Node, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'items', tuple(self.items))

    def to_railroad(self) -> railroad.DiagramItem:
        if not self.items:
            return railroad.Skip()
        return railroad.Choice(0, *[item.to_railroad() for item in self.items])


@dataclass(frozen=True)
class Optional(Node):
    item: Node

    def to_railroad(self) -> railroad.DiagramItem:
        return railroad.Optional(self.item.to_railroad())


@dataclass(frozen=True)
class Repeat(Node):
    ''' Zero or more repetitions of item, with separator drawn on the way back. '''
    item: Node
    separator: Node = field(default_factory=Skip)

    def to_railroad(self) -> railroad.DiagramItem:
        return railroad.ZeroOrMore(self.item.to_railroad(), self.separator.to_railroad())


@dataclass(frozen=True)
class LabeledBox(Node):
    item: Node
    label: Node

    def to_railroad(self) -> railroad.DiagramItem:
        return railroad.Group(self.item.to_railroad(), self.label.to_railroad())
