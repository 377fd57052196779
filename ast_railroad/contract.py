#
# contract.py
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
# The capabilities a node type needs to draw itself.
#
# Everything here works on the class, never on instances: a diagram describes
# the grammar a node type accepts, not one parsed value.
#

import abc

from ast_railroad import nodes
from ast_railroad.diagram import Diagram


def default_label(cls: type) -> str:
    ''' The fully-qualified name of a type, used to label references to it. '''
    return f'{cls.__module__}.{cls.__qualname__}'


class Railroad(abc.ABC):
    ''' Marks an AST node type as convertible into a railroad diagram node.

    Implement railroad_node() by hand for tokens and other leaves, or let
    ast_railroad.derive generate it from the fields of a dataclass or the
    members of an enum.
    '''

    @classmethod
    @abc.abstractmethod
    def railroad_node(cls) -> nodes.Node:
        ''' Build the full form of this type's track. '''
        raise NotImplementedError

    @classmethod
    def railroad_node_inline(cls) -> nodes.Node:
        ''' Build the compact form used when this type is embedded in a parent.
        Defaults to the full form.
        '''
        return cls.railroad_node()

    @classmethod
    def railroad_label(cls) -> str:
        return default_label(cls)

    @classmethod
    def railroad_reference(cls) -> nodes.Node:
        ''' Build a box that refers to this type's track by its label instead of
        inlining it. Useful for nodes that are large or occur often.
        '''
        return nodes.NonTerminal(cls.railroad_label())

    @classmethod
    def railroad_diagram(cls) -> Diagram:
        ''' Build a diagram that only shows this node.
        Usually only the toplevel node of a grammar needs to override this, to
        add the nonterminals in its tree as separate tracks.
        '''
        return Diagram(cls.railroad_node())


class RailroadDelim(Railroad):
    ''' A type whose tokens can be drawn around another node, like brackets. '''

    @classmethod
    @abc.abstractmethod
    def railroad_delim_node(cls, inner: nodes.Node) -> nodes.Node:
        raise NotImplementedError


class Delimiter(RailroadDelim):
    ''' A delimiter pair with static token text.

        class Brackets(Delimiter):
            open = '['
            close = ']'
    '''
    open: str = ''
    close: str = ''

    @classmethod
    def railroad_node(cls) -> nodes.Node:
        return nodes.Sequence((nodes.Terminal(cls.open), nodes.Terminal(cls.close)))

    @classmethod
    def railroad_delim_node(cls, inner: nodes.Node) -> nodes.Node:
        return nodes.Sequence((nodes.Terminal(cls.open), inner, nodes.Terminal(cls.close)))
