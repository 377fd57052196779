#
# errors.py
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

import inspect
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Location:
    ''' Points at the declaration that a derivation error is about.
    filename and lineno are None when the source of the class is unavailable
    (for example for classes created in an interactive session).
    '''
    qualname: str
    filename: Optional[str] = None
    lineno: Optional[int] = None
    field: Optional[str] = None

    @classmethod
    def of(cls, obj: type) -> 'Location':
        filename = None
        lineno = None
        try:
            filename = inspect.getsourcefile(obj)
            lineno = inspect.getsourcelines(obj)[1]
        except (OSError, TypeError):
            pass
        return cls(obj.__qualname__, filename, lineno)

    def at_field(self, field: str) -> 'Location':
        return Location(self.qualname, self.filename, self.lineno, field)

    def __str__(self) -> str:
        name = self.qualname if self.field is None else f'{self.qualname}.{self.field}'
        if self.filename is None:
            return name
        return f'{self.filename}:{self.lineno} ({name})'


class RailroadError(Exception):
    pass


class DerivationError(RailroadError):
    ''' Raised while deriving the description of a node type. '''

    def __init__(self, message: str, location: Optional[Location] = None):
        super().__init__(message if location is None else f'{location}: {message}')
        self.location = location


class UnknownAttributeError(DerivationError):
    def __init__(self, key: str, location: Location):
        super().__init__(f'Unknown attribute {key!r}', location)
        self.key = key


class MalformedAttributeError(DerivationError):
    def __init__(self, key: str, reason: str, location: Location):
        super().__init__(f'Malformed attribute {key!r}: {reason}', location)
        self.key = key


class UnsupportedShapeError(DerivationError):
    pass


class NotDescribableError(DerivationError, TypeError):
    pass


class ConsumedDiagramError(RailroadError):
    pass


class FileWriteError(RailroadError):
    ''' Failed to write a rendered diagram. The original OSError is kept as cause. '''

    def __init__(self, path: str, cause: OSError):
        super().__init__(f'Failed to write to file {str(path)!r}')
        self.path = path
        self.cause = cause
