#
# __init__.py
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
# Railroad diagrams for the grammar of AST node types, derived from their
# structure and rendered with the railroad-diagrams library.
#

from ast_railroad.compose import register_collection, register_transparent
from ast_railroad.config import Delimited, FieldKind, railroad_arg, railroad_field
from ast_railroad.contract import Delimiter, Railroad, RailroadDelim
from ast_railroad.derive import derive
from ast_railroad.diagram import Diagram, DiagramSvg
from ast_railroad.errors import (ConsumedDiagramError, DerivationError, FileWriteError, MalformedAttributeError,
                                 NotDescribableError, RailroadError, UnknownAttributeError, UnsupportedShapeError)

__all__ = [
    'ConsumedDiagramError', 'DerivationError', 'Delimited', 'Delimiter', 'Diagram', 'DiagramSvg', 'FieldKind',
    'FileWriteError', 'MalformedAttributeError', 'NotDescribableError', 'Railroad', 'RailroadDelim',
    'RailroadError', 'UnknownAttributeError', 'UnsupportedShapeError', 'derive', 'railroad_arg',
    'railroad_field', 'register_collection', 'register_transparent',
]
