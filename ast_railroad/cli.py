#
# cli.py
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
# Write the railroad diagram of one or more node types as SVG files.
#
# Usage:
#   python3 -m ast_railroad my_parser.ast:Program -o docs/diagrams
#
# Every target is a module path and a type name separated by a colon. The
# diagram of my_parser.ast.Program is written to docs/diagrams/Program.svg.
#

import argparse
import importlib
import logging
import os
import sys
from typing import Optional

import railroad

from ast_railroad import compose
from ast_railroad.errors import RailroadError

LOG_FORMAT = '%(asctime)s (%(created)f) - [%(levelname)s] %(message)s'

# Vertical space
DEFAULT_VERTICAL_SPACE = 15

# Arc radius
DEFAULT_ARC_RADIUS = 12


class TargetError(Exception):
    pass


def load_target(target: str) -> type:
    ''' Import the type named by a "module:TypeName" target. '''
    module_name, sep, type_name = target.partition(':')
    if not sep or not module_name or not type_name:
        raise TargetError(f'Target {target!r} is not of the form module:TypeName')
    try:
        module = importlib.import_module(module_name)
    except ImportError as err:
        raise TargetError(f'Cannot import module {module_name!r}: {err}') from err
    obj = module
    for part in type_name.split('.'):
        if not hasattr(obj, part):
            raise TargetError(f'Module {module_name!r} has no attribute {type_name!r}')
        obj = getattr(obj, part)
    return obj


def output_path(target: str, output_dir: str) -> str:
    type_name = target.partition(':')[2]
    return os.path.join(output_dir, type_name.rsplit('.', 1)[-1] + '.svg')


def read_css(path: Optional[str]) -> Optional[str]:
    if path is None:
        return None
    with open(path, 'r') as fin:
        return fin.read()


def generate(target: str, output_dir: str, css: Optional[str] = None) -> str:
    ''' Render the diagram of one target into output_dir and return the path written. '''
    tp = load_target(target)
    path = output_path(target, output_dir)
    logging.info('generating diagram for %s', target)
    diagram = compose.to_diagram(tp)
    logging.debug('%s has %d nonterminal track(s)', target, len(diagram.nonterminals))
    diagram.render_to_file(path, css)
    return path


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog='ast_railroad',
                                     description='Render the railroad diagrams of AST node types as SVG')
    parser.add_argument('targets', nargs='+', metavar='TARGET', help='Node type to render, as module:TypeName')
    parser.add_argument('-o', '--output-dir', default='.', help='Directory to write the SVG files to')
    parser.add_argument('--vertical-space', type=int, default=DEFAULT_VERTICAL_SPACE,
                        help='Minimum vertical separation between diagram items')
    parser.add_argument('--arc-radius', type=int, default=DEFAULT_ARC_RADIUS, help='Radius of the arcs')
    parser.add_argument('--css', help='Stylesheet to embed instead of the default one')
    parser.add_argument('-v', '--verbose', action='store_true', default=False, help='Log debug output')
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, stream=sys.stdout, format=LOG_FORMAT)

    railroad.VS = args.vertical_space
    railroad.AR = args.arc_radius

    if not os.path.isdir(args.output_dir):
        os.makedirs(args.output_dir)
    try:
        css = read_css(args.css)
    except OSError as err:
        logging.error('Unable to read stylesheet %s: %s', args.css, err)
        return 2

    for target in args.targets:
        try:
            path = generate(target, args.output_dir, css)
        except TargetError as err:
            logging.error('%s', err)
            return 2
        except RailroadError as err:
            logging.error('Unable to generate diagram for %s: %s', target, err)
            return 1
        logging.info('wrote %s', path)
    return 0


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
