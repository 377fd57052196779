#
# shapes.py
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
# The structural shape of a node type, as plain data.
#
# Derivation only ever looks at these shapes, so it can be tested without
# declaring host classes. shape_of() builds them from dataclasses (structs),
# enums (sums of variants) and ctypes unions (which cannot be derived).
#

import ctypes
import dataclasses
import enum
import sys
from dataclasses import dataclass
from typing import Any, Optional, Union

from ast_railroad.config import FieldConfig, METADATA_KEY, VariantArg, check_delimiters, parse_field
from ast_railroad.contract import Railroad
from ast_railroad.errors import Location, UnsupportedShapeError


@dataclass(frozen=True)
class FieldShape:
    '''
    One field of a struct or variant. annotation is the declared type, or a
    string that still needs resolving in the namespace of owner.
    '''
    name: str
    annotation: Any
    config: FieldConfig = FieldConfig()
    location: Optional[Location] = None
    owner: Optional[type] = None


@dataclass(frozen=True)
class StructShape:
    name: str
    fields: tuple[FieldShape, ...] = ()
    location: Optional[Location] = None


@dataclass(frozen=True)
class VariantShape:
    name: str
    fields: tuple[FieldShape, ...] = ()
    location: Optional[Location] = None


@dataclass(frozen=True)
class EnumShape:
    name: str
    variants: tuple[VariantShape, ...] = ()
    location: Optional[Location] = None


@dataclass(frozen=True)
class UnionShape:
    name: str
    location: Optional[Location] = None


Shape = Union[StructShape, EnumShape, UnionShape]


def _checked(fields: list[FieldShape], location: Location) -> tuple[FieldShape, ...]:
    check_delimiters({field.name: field.config for field in fields}, location)
    return tuple(fields)


def struct_fields(cls: type, location: Location) -> tuple[FieldShape, ...]:
    ''' The fields of a dataclass, in declaration order. '''
    fields = []
    for field in dataclasses.fields(cls):
        field_location = location.at_field(field.name)
        config = parse_field(field.metadata.get(METADATA_KEY), field_location)
        fields.append(FieldShape(field.name, field.type, config, field_location, cls))
    return _checked(fields, location)


def _draws_itself(cls: type) -> bool:
    # Railroad implemented by hand rather than derived from the fields
    return issubclass(cls, Railroad) and not any('__railroad__' in vars(klass) for klass in cls.__mro__)


def variant_shape(owner: type, name: str, value: Any, location: Location) -> VariantShape:
    '''
    The shape of one enum member. None or () is an empty variant, a dataclass a
    struct variant, a tuple a tuple variant with members named by position, and
    any other value a tuple variant with one member. A dataclass that
    implements Railroad by hand is a member like any other value.
    '''
    variant_location = location.at_field(name)
    if value is None or value == ():
        return VariantShape(name, (), variant_location)
    if isinstance(value, type) and dataclasses.is_dataclass(value) and not _draws_itself(value):
        return VariantShape(name, struct_fields(value, Location.of(value)), variant_location)
    if not isinstance(value, tuple):
        value = (value,)
    fields = []
    for i, member in enumerate(value):
        field_location = location.at_field(f'{name}.{i}')
        if isinstance(member, VariantArg):
            fields.append(FieldShape(str(i), member.annotation, parse_field(member.options, field_location),
                                     field_location, owner))
        else:
            fields.append(FieldShape(str(i), member, FieldConfig(), field_location, owner))
    return VariantShape(name, _checked(fields, variant_location), variant_location)


def shape_of(cls: type) -> Shape:
    ''' Reflect on a class and describe its structure. Field options are checked here. '''
    if not isinstance(cls, type):
        raise UnsupportedShapeError(f'Cannot derive Railroad on {cls!r}: not a class')
    location = Location.of(cls)
    if issubclass(cls, ctypes.Union):
        return UnionShape(cls.__qualname__, location)
    if issubclass(cls, enum.Enum):
        # __members__ keeps aliases, which are distinct variants that happen to look alike
        variants = tuple(variant_shape(cls, name, member.value, location)
                         for name, member in cls.__members__.items())
        return EnumShape(cls.__qualname__, variants, location)
    if dataclasses.is_dataclass(cls):
        return StructShape(cls.__qualname__, struct_fields(cls, location), location)
    raise UnsupportedShapeError(f'Cannot derive Railroad on {cls.__qualname__}: expected a dataclass or an Enum '
                                '(apply @derive above @dataclass)', location)


def module_namespace(owner: type) -> dict:
    module = sys.modules.get(owner.__module__)
    namespace = dict(vars(module)) if module is not None else {}
    namespace.setdefault(owner.__name__, owner)
    return namespace
