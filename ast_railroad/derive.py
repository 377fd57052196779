#
# derive.py
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
# Derives the Railroad capability of a node type from its structure.
#
# Structs (dataclasses) are drawn as a sequence of their fields, enums as a
# choice between their variants, where every variant is again a sequence of
# its fields. Options given with railroad_field()/railroad_arg() change how a
# single field is drawn; see ast_railroad.config.
#
# Options and shapes are checked when @derive runs. Field types are only
# resolved when a node is first built, so that a grammar can refer to types
# declared further down its module, or to itself.
#

import abc
import dataclasses
import logging
import typing
from typing import Any, Callable, Iterator, Optional

from ast_railroad import compose, nodes
from ast_railroad.config import Delimited, FieldKind, ToplevelConfig, parse_toplevel
from ast_railroad.contract import Railroad, default_label
from ast_railroad.diagram import Diagram
from ast_railroad.errors import Location, NotDescribableError, UnsupportedShapeError
from ast_railroad.shapes import FieldShape, Shape, StructShape, UnionShape, module_namespace, shape_of

logger = logging.getLogger(__name__)


class Description:
    ''' The derived drawing of one struct or enum shape. '''

    def __init__(self, shape: Shape, toplevel: Optional[ToplevelConfig] = None):
        if isinstance(shape, UnionShape):
            raise UnsupportedShapeError(f'Cannot derive Railroad on union {shape.name}', shape.location)
        self.shape = shape
        self.toplevel = toplevel or ToplevelConfig()
        self.prims = self.toplevel.primitives or nodes
        self._hints: dict[type, dict[str, Any]] = {}
        self._building = False

    def field_groups(self) -> Iterator[tuple[FieldShape, ...]]:
        if isinstance(self.shape, StructShape):
            yield self.shape.fields
        else:
            for variant in self.shape.variants:
                yield variant.fields

    def _type_hints(self, owner: type, location: Optional[Location]) -> dict[str, Any]:
        if owner not in self._hints:
            try:
                self._hints[owner] = typing.get_type_hints(owner, include_extras=True)
            except NameError as err:
                raise NotDescribableError(f'Cannot resolve the field types of {owner.__qualname__}: {err}',
                                          location) from err
        return self._hints[owner]

    def resolve(self, field: FieldShape) -> Any:
        ''' The declared type of a field, with forward references resolved. '''
        owner = field.owner
        if owner is not None and dataclasses.is_dataclass(owner):
            return self._type_hints(owner, field.location).get(field.name, field.annotation)
        annotation = field.annotation
        if isinstance(annotation, typing.ForwardRef):
            annotation = annotation.__forward_arg__
        if not isinstance(annotation, str):
            return annotation
        if owner is None:
            raise NotDescribableError(f'Cannot resolve {annotation!r} without an owning type', field.location)
        try:
            return eval(annotation, module_namespace(owner))
        except NameError as err:
            raise NotDescribableError(f'Cannot resolve {annotation!r}: {err}', field.location) from err

    def field_type(self, field: FieldShape) -> Any:
        # A manual optional/repeated replaces the container the field is declared with
        tp = self.resolve(field)
        if field.config.optional or field.config.repeated:
            tp = compose.element_type(tp)
        return tp

    def field_node(self, field: FieldShape, siblings: dict[str, FieldShape], delimiters: set[str]) -> nodes.Node:
        prims = self.prims
        config = field.config
        if field.name in delimiters:
            # Drawn around the field that names it instead
            return prims.Skip()

        tp = self.field_type(field)
        if config.kind is FieldKind.NONTERMINAL:
            node = compose.reference(tp, field.location, prims)
        else:
            node = compose.describe_inline(tp, field.location, prims)
            if isinstance(config.kind, Delimited):
                delimiter = siblings[config.kind.field]
                node = compose.describe_delim(self.resolve(delimiter), node, field.location, prims)

        if config.repeated:
            node = prims.Repeat(node, prims.Skip())
        if config.optional:
            node = prims.Optional(node)
        text = config.comment_text()
        if text is not None:
            node = prims.LabeledBox(node, prims.Comment(text))
        return node

    def sequence(self, fields: tuple[FieldShape, ...]) -> nodes.Node:
        siblings = {field.name: field for field in fields}
        delimiters = {field.config.kind.field for field in fields if isinstance(field.config.kind, Delimited)}
        return self.prims.Sequence([self.field_node(field, siblings, delimiters) for field in fields])

    def node(self) -> nodes.Node:
        if self._building:
            raise UnsupportedShapeError(f'{self.shape.name} contains itself inline; draw the recursive field '
                                        'with kind=FieldKind.NONTERMINAL', self.shape.location)
        self._building = True
        try:
            if isinstance(self.shape, StructShape):
                return self.sequence(self.shape.fields)
            return self.prims.Choice([self.sequence(variant.fields) if variant.fields else self.prims.Skip()
                                      for variant in self.shape.variants])
        finally:
            self._building = False

    def referenced(self) -> Iterator[tuple[bool, type]]:
        ''' Yield (is_nonterminal, type) for every describable type the fields mention. '''
        for fields in self.field_groups():
            for field in fields:
                nonterminal = field.config.kind is FieldKind.NONTERMINAL
                for leaf in compose.leaf_types(self.field_type(field)):
                    if issubclass(leaf, Railroad):
                        yield nonterminal, leaf


def description_of(cls: type) -> Optional[Description]:
    for klass in cls.__mro__:
        description = klass.__dict__.get('__railroad__')
        if isinstance(description, Description):
            return description
    return None


def _walk(root: type) -> tuple[dict[str, nodes.Node], bool]:
    found: dict[str, nodes.Node] = {}
    visited = {root}
    root_label = root.railroad_label()
    self_referenced = False

    def add(label: str, node: Callable[[], nodes.Node]):
        if label != root_label and label not in found:
            logger.debug('found nonterminal %s', label)
            found[label] = node()

    def visit(tp: type):
        nonlocal self_referenced
        description = description_of(tp)
        if description is None:
            # Hand-written types can bring tracks of their own
            for label, node in tp.railroad_diagram().nonterminal_nodes:
                add(label, lambda: node)
            return
        for nonterminal, leaf in description.referenced():
            if nonterminal:
                if leaf is root:
                    self_referenced = True
                else:
                    add(leaf.railroad_label(), leaf.railroad_node)
            if leaf not in visited:
                visited.add(leaf)
                visit(leaf)

    visit(root)
    return found, self_referenced


def collect_nonterminals(root: type) -> dict[str, nodes.Node]:
    '''
    Find the nonterminal tracks needed below root, as full-form nodes keyed by
    label, in depth-first order of their first reference. Types without a
    derived description contribute the nonterminals of their own
    railroad_diagram(). Every label occurs once, and root itself is never
    included since it is drawn as the toplevel track.
    '''
    return _walk(root)[0]


def _railroad_node(cls) -> nodes.Node:
    return description_of(cls).node()


def _railroad_node_inline(cls) -> nodes.Node:
    return cls.railroad_node()


def _railroad_label(cls) -> str:
    return default_label(cls)


def _railroad_reference(cls) -> nodes.Node:
    return description_of(cls).prims.NonTerminal(cls.railroad_label())


def _railroad_diagram(cls) -> Diagram:
    nonterminals, self_referenced = _walk(cls)
    track = cls.railroad_node()
    if self_referenced:
        # Names the toplevel track for the boxes that refer back to it
        prims = description_of(cls).prims
        track = prims.Sequence([prims.Comment(cls.railroad_label()), track])
    diagram = Diagram.with_capacity(track, len(nonterminals))
    for label, node in nonterminals.items():
        diagram.add_nonterminal(label, node)
    return diagram


def _process(cls: type, options: dict) -> type:
    location = Location.of(cls)
    toplevel = parse_toplevel(options, location)
    shape = shape_of(cls)
    description = Description(shape, toplevel)

    cls.__railroad__ = description
    cls.railroad_node = classmethod(_railroad_node)
    cls.railroad_diagram = classmethod(_railroad_diagram)
    for name, func in (('railroad_node_inline', _railroad_node_inline), ('railroad_label', _railroad_label),
                       ('railroad_reference', _railroad_reference)):
        if not hasattr(cls, name):
            setattr(cls, name, classmethod(func))
    Railroad.register(cls)
    abc.update_abstractmethods(cls)
    logger.debug('derived Railroad for %s (%s)', cls.__qualname__, type(shape).__name__)
    return cls


def derive(cls=None, /, **options):
    '''
    Class decorator that implements Railroad for a dataclass or an Enum.

        @derive
        @dataclass
        class Call:
            name: Ident
            args: list[Expr] = railroad_field(kind=Delimited('parens'))
            parens: Parens

    Accepts prefix='some.module' to draw with the primitive constructors of
    another module than ast_railroad.nodes. Raises a DerivationError for
    unknown or malformed options and for shapes that cannot be drawn.
    '''

    def wrap(cls):
        return _process(cls, options)

    if cls is None:
        return wrap
    return wrap(cls)
