#
# config.py
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
# Options that control how a node type is derived.
#
# Toplevel options are given to the decorator, @derive(prefix='...'). Field
# options are given with railroad_field(...) on dataclass fields, or with
# railroad_arg(...) in the members of an enum:
#
#   kind      FieldKind.TERMINAL (default) draws the field type inline,
#             FieldKind.NONTERMINAL draws a reference to its own track,
#             Delimited('other') wraps the field in the delimiters of the
#             sibling field 'other'.
#   comment   text (or a function returning text) to label the field with.
#   optional  draw the field as optional, whatever its type says.
#   repeated  draw the field as repeated, whatever its type says.
#

import dataclasses
import enum
import importlib
import inspect
import types
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from ast_railroad.errors import Location, MalformedAttributeError, UnknownAttributeError

METADATA_KEY = 'railroad'

DEFAULT_PREFIX = 'ast_railroad.nodes'

# Constructors a prefix module has to provide
PRIMITIVES = ('Sequence', 'Choice', 'Optional', 'Repeat', 'Terminal', 'NonTerminal', 'Comment', 'LabeledBox', 'Skip')

TOPLEVEL_KEYS = ('prefix',)
FIELD_KEYS = ('kind', 'comment', 'optional', 'repeated')

_DATACLASS_FIELD_PARAMS = frozenset(inspect.signature(dataclasses.field).parameters)


class FieldKind(enum.Enum):
    TERMINAL = 'terminal'
    NONTERMINAL = 'nonterminal'


@dataclass(frozen=True)
class Delimited:
    ''' Names the sibling field whose delimiters surround this field. '''
    field: Union[str, int]

    def __post_init__(self):
        # Members of tuple variants are named by their position
        object.__setattr__(self, 'field', str(self.field))


@dataclass(frozen=True)
class FieldConfig:
    kind: Union[FieldKind, Delimited] = FieldKind.TERMINAL
    comment: Union[str, Callable[[], str], None] = None
    optional: bool = False
    repeated: bool = False

    def comment_text(self) -> Optional[str]:
        if callable(self.comment):
            return str(self.comment())
        return self.comment


@dataclass(frozen=True)
class ToplevelConfig:
    prefix: str = DEFAULT_PREFIX
    primitives: Optional[types.ModuleType] = None


def railroad_field(**kwargs) -> Any:
    '''
    A dataclasses.field() that also carries railroad options. Arguments that
    dataclasses.field() accepts are passed on to it; everything else is kept as
    a railroad option and checked when the class is derived.
    '''
    options = {key: value for key, value in kwargs.items() if key not in _DATACLASS_FIELD_PARAMS}
    field_kwargs = {key: value for key, value in kwargs.items() if key in _DATACLASS_FIELD_PARAMS}
    metadata = dict(field_kwargs.pop('metadata', None) or {})
    metadata[METADATA_KEY] = options
    return dataclasses.field(metadata=metadata, **field_kwargs)


@dataclass(frozen=True)
class VariantArg:
    ''' One member of a tuple variant, with railroad options. '''
    annotation: Any
    options: Mapping[str, Any]


def railroad_arg(annotation: Any, **options) -> VariantArg:
    return VariantArg(annotation, options)


def _parse_kind(value: Any, location: Location) -> Union[FieldKind, Delimited]:
    if isinstance(value, (FieldKind, Delimited)):
        return value
    if isinstance(value, str):
        try:
            return FieldKind(value)
        except ValueError:
            pass
    raise MalformedAttributeError('kind', f'expected FieldKind or Delimited, got {value!r}', location)


def parse_field(options: Any, location: Location) -> FieldConfig:
    ''' Check the railroad options of one field and resolve them into a FieldConfig. '''
    if options is None:
        return FieldConfig()
    if not isinstance(options, Mapping):
        raise MalformedAttributeError(METADATA_KEY, f'expected a mapping of options, got {options!r}', location)
    for key in options:
        if key not in FIELD_KEYS:
            raise UnknownAttributeError(key, location)

    kind = _parse_kind(options.get('kind', FieldKind.TERMINAL), location)
    comment = options.get('comment')
    if comment is not None and not isinstance(comment, str) and not callable(comment):
        raise MalformedAttributeError('comment', f'expected text or a function returning text, got {comment!r}', location)
    flags = {}
    for key in ('optional', 'repeated'):
        value = options.get(key, False)
        if not isinstance(value, bool):
            raise MalformedAttributeError(key, f'expected True or False, got {value!r}', location)
        flags[key] = value
    return FieldConfig(kind, comment, flags['optional'], flags['repeated'])


def check_delimiters(configs: Mapping[str, FieldConfig], location: Location):
    ''' Delimited fields have to name a different field of the same struct or variant. '''
    for name, config in configs.items():
        if not isinstance(config.kind, Delimited):
            continue
        target = config.kind.field
        if target == name:
            raise MalformedAttributeError('kind', 'a field cannot delimit itself', location.at_field(name))
        if target not in configs:
            raise MalformedAttributeError('kind', f'no sibling field {target!r} to take delimiters from',
                                          location.at_field(name))


def parse_toplevel(options: Mapping[str, Any], location: Location) -> ToplevelConfig:
    ''' Check the decorator options and import the primitives module named by prefix. '''
    for key in options:
        if key not in TOPLEVEL_KEYS:
            raise UnknownAttributeError(key, location)
    prefix = options.get('prefix', DEFAULT_PREFIX)
    if not isinstance(prefix, str) or not prefix:
        raise MalformedAttributeError('prefix', f'expected a module path, got {prefix!r}', location)
    try:
        primitives = importlib.import_module(prefix)
    except ImportError as err:
        raise MalformedAttributeError('prefix', f'cannot import {prefix!r}', location) from err
    missing = [name for name in PRIMITIVES if not hasattr(primitives, name)]
    if missing:
        raise MalformedAttributeError('prefix', f'{prefix!r} does not provide {", ".join(missing)}', location)
    return ToplevelConfig(prefix, primitives)
