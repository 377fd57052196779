#
# compose.py
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
# Propagates descriptions through the generic shapes a field type can have.
#
# Wrappers that only carry ownership or access semantics (Annotated, Final,
# weak references, registered box or guard types) are transparent. Optional
# values get a skip path and collections a zero-or-more loop. A Union becomes
# a choice, a fixed-length tuple a sequence and a Literal its token(s).
#

import collections
import collections.abc
import enum
import types
import typing
import weakref
from typing import Callable, Iterator, Optional

from ast_railroad import nodes
from ast_railroad.contract import Railroad, RailroadDelim
from ast_railroad.diagram import Diagram
from ast_railroad.errors import Location, NotDescribableError


class Shape(enum.Enum):
    LEAF = 'leaf'
    NONE = 'none'
    TRANSPARENT = 'transparent'
    OPTIONAL = 'optional'
    REPEATED = 'repeated'
    CHOICE = 'choice'
    SEQUENCE = 'sequence'
    LITERAL = 'literal'


_TRANSPARENT = {typing.Annotated, typing.Final, weakref.ReferenceType}

_COLLECTIONS = {
    list, set, frozenset, collections.deque,
    collections.abc.Sequence, collections.abc.MutableSequence,
    collections.abc.Set, collections.abc.MutableSet,
    collections.abc.Collection, collections.abc.Iterable,
}


def register_transparent(origin: type) -> type:
    ''' Treat origin[T] like T. Usable as a class decorator on generic wrappers. '''
    _TRANSPARENT.add(origin)
    return origin


def register_collection(origin: type) -> type:
    ''' Treat origin[T] as zero or more T. Usable as a class decorator. '''
    _COLLECTIONS.add(origin)
    return origin


def classify(tp) -> tuple[Shape, tuple]:
    ''' Split a type expression into its outer shape and the type arguments it applies to. '''
    if tp is None or tp is type(None):
        return Shape.NONE, ()
    if isinstance(tp, (str, typing.ForwardRef)):
        raise NotDescribableError(f'Unresolved forward reference {tp!r}')
    origin = typing.get_origin(tp)
    args = typing.get_args(tp)
    if origin is None:
        return Shape.LEAF, (tp,)
    if origin in _TRANSPARENT:
        return Shape.TRANSPARENT, args[:1]
    if origin is typing.Union or origin is types.UnionType:
        present = tuple(arg for arg in args if arg is not type(None))
        if len(present) < len(args):
            return Shape.OPTIONAL, (present[0] if len(present) == 1 else typing.Union[present],)
        return Shape.CHOICE, args
    if origin is typing.Literal:
        return Shape.LITERAL, args
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return Shape.REPEATED, args[:1]
        return Shape.SEQUENCE, args
    if origin in _COLLECTIONS:
        return Shape.REPEATED, args[:1]
    return Shape.LEAF, (tp,)


def _leaf_class(tp, contract: type, location: Optional[Location]) -> type:
    # Parametrized generics describe themselves through their class
    if not isinstance(tp, type) and isinstance(typing.get_origin(tp), type):
        tp = typing.get_origin(tp)
    if not (isinstance(tp, type) and issubclass(tp, contract)):
        raise NotDescribableError(f'{tp!r} does not implement {contract.__name__}', location)
    return tp


def _literal(values: tuple, prims=nodes) -> nodes.Node:
    terminals = [prims.Terminal(str(value)) for value in values]
    if len(terminals) == 1:
        return terminals[0]
    return prims.Choice(terminals)


def compose(tp, leaf: Callable[[typing.Any], nodes.Node], prims=nodes) -> nodes.Node:
    '''
    Build the node for a type expression, calling leaf() for every plain class
    in it. prims is the module the structural nodes are taken from.
    '''
    shape, args = classify(tp)
    if shape is Shape.LEAF:
        return leaf(args[0])
    if shape is Shape.NONE:
        return prims.Skip()
    if shape is Shape.TRANSPARENT:
        return compose(args[0], leaf, prims)
    if shape is Shape.OPTIONAL:
        return prims.Optional(compose(args[0], leaf, prims))
    if shape is Shape.REPEATED:
        return prims.Repeat(compose(args[0], leaf, prims), prims.Skip())
    if shape is Shape.CHOICE:
        return prims.Choice([compose(arg, leaf, prims) for arg in args])
    if shape is Shape.SEQUENCE:
        return prims.Sequence([compose(arg, leaf, prims) for arg in args])
    return _literal(args, prims)


def describe(tp, location: Optional[Location] = None, prims=nodes) -> nodes.Node:
    ''' The full form of a type expression. '''
    return compose(tp, lambda leaf: _leaf_class(leaf, Railroad, location).railroad_node(), prims)


def describe_inline(tp, location: Optional[Location] = None, prims=nodes) -> nodes.Node:
    return compose(tp, lambda leaf: _leaf_class(leaf, Railroad, location).railroad_node_inline(), prims)


def reference(tp, location: Optional[Location] = None, prims=nodes) -> nodes.Node:
    ''' Like describe(), but every class in the expression is drawn as a box with its label. '''
    return compose(tp, lambda leaf: prims.NonTerminal(_leaf_class(leaf, Railroad, location).railroad_label()), prims)


def describe_delim(tp, inner: nodes.Node, location: Optional[Location] = None, prims=nodes) -> nodes.Node:
    ''' Wrap inner in the delimiters of the type expression tp. '''
    shape, args = classify(tp)
    if shape is Shape.LITERAL or shape is Shape.NONE or shape is Shape.SEQUENCE:
        raise NotDescribableError(f'{tp!r} cannot delimit another node', location)
    return compose(tp, lambda leaf: _leaf_class(leaf, RailroadDelim, location).railroad_delim_node(inner), prims)


def to_diagram(tp, location: Optional[Location] = None) -> Diagram:
    ''' A diagram for a type expression. Transparent wrappers keep the diagram of the wrapped type. '''
    shape, args = classify(tp)
    if shape is Shape.TRANSPARENT:
        return to_diagram(args[0], location)
    if shape is Shape.LEAF:
        return _leaf_class(args[0], Railroad, location).railroad_diagram()
    return Diagram(describe(tp, location))


def element_type(tp):
    '''
    Peel the outermost container off a type expression, going through
    transparent wrappers. Any other single-argument generic is peeled as well,
    so that custom containers like NonEmpty[T] yield T.
    '''
    shape, args = classify(tp)
    if shape is Shape.TRANSPARENT:
        return element_type(args[0])
    if shape is Shape.OPTIONAL or shape is Shape.REPEATED:
        return args[0]
    if shape is Shape.LEAF and len(typing.get_args(tp)) == 1:
        origin = typing.get_origin(tp)
        if not (isinstance(origin, type) and issubclass(origin, Railroad)):
            return typing.get_args(tp)[0]
    return tp


def leaf_types(tp) -> Iterator[type]:
    ''' Yield every plain class that occurs in a type expression. '''
    shape, args = classify(tp)
    if shape is Shape.LEAF:
        leaf = args[0] if isinstance(args[0], type) else typing.get_origin(args[0])
        if isinstance(leaf, type):
            yield leaf
    elif shape is not Shape.LITERAL and shape is not Shape.NONE:
        for arg in args:
            yield from leaf_types(arg)
